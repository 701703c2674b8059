'''Serve yearly QCEW CSVs from a local directory.

Files must be named ``{year}.annual.singlefile.csv`` (the naming used by the
BLS annual single-file downloads once unzipped).
'''

from __future__ import annotations

import asyncio
import re
from collections.abc import AsyncIterator
from pathlib import Path

from ..config import SOURCE_DIR, SOURCE_FILE_SUFFIX

CHUNK_SIZE = 64 * 1024
YEAR_RE = re.compile(r'^\d{4}$')


class LocalYearSource:
    '''Read yearly source files from *directory*.

    Args:
        directory: Folder holding ``{year}.annual.singlefile.csv`` files.
        chunk_size: Bytes per read.
    '''

    def __init__(self, directory: Path | str = SOURCE_DIR, chunk_size: int = CHUNK_SIZE) -> None:
        self.directory = Path(directory)
        self.chunk_size = chunk_size

    def path_for(self, year: str) -> Path:
        return self.directory / f'{year}{SOURCE_FILE_SUFFIX}'

    async def list_available_years(self) -> list[str]:
        if not self.directory.exists():
            return []
        years = []
        for path in self.directory.glob(f'*{SOURCE_FILE_SUFFIX}'):
            year = path.name[: -len(SOURCE_FILE_SUFFIX)]
            if YEAR_RE.match(year):
                years.append(year)
        return sorted(years)

    async def year_stream_size(self, year: str) -> int | None:
        path = self.path_for(year)
        if not path.exists():
            return None
        return path.stat().st_size

    async def open_year_stream(self, year: str) -> AsyncIterator[bytes]:
        '''Yield the file in chunks, reading off the event loop.

        Raises:
            FileNotFoundError: If the year has no source file.
        '''
        with self.path_for(year).open('rb') as f:
            while True:
                chunk = await asyncio.to_thread(f.read, self.chunk_size)
                if not chunk:
                    break
                yield chunk
