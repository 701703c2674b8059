'''Storage contracts the pipeline depends on, one per persisted entity.'''

from __future__ import annotations

from typing import Protocol

from ..models import ProcessedYear, SignalRecord, StateYearRecord


class ProcessedYearLedger(Protocol):
    async def is_year_processed(self, year: str) -> bool:
        ...

    async def mark_year_processed(self, marker: ProcessedYear) -> None:
        '''Record *marker*; marking an already-marked year is a silent no-op.'''
        ...


class StateYearStore(Protocol):
    async def save_state_year_batch(self, records: list[StateYearRecord]) -> None:
        '''Persist all *records*; existing ``(state, year)`` keys are kept as-is.'''
        ...

    async def get_all_state_year_records(self, state: str) -> list[StateYearRecord]:
        ...

    async def list_states_with_any_data(self) -> list[str]:
        ...


class SignalStore(Protocol):
    async def save_signal(self, record: SignalRecord) -> None:
        '''Persist *record*; an existing ``(state, timestamp)`` key is a silent no-op.'''
        ...

    async def get_all_signals(self) -> list[SignalRecord]:
        ...
