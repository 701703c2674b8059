'''Contract for providers of the yearly QCEW source files.'''

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Protocol


class YearSource(Protocol):
    async def list_available_years(self) -> list[str]:
        '''Return the 4-digit years with a source file, ascending.'''
        ...

    async def year_stream_size(self, year: str) -> int | None:
        '''Return the size in bytes of a year's file, if known (progress logging only).'''
        ...

    def open_year_stream(self, year: str) -> AsyncIterator[bytes]:
        '''Return an async iterator over the raw bytes of a year's file.'''
        ...
