'''In-process implementations of the storage contracts.

Used by tests and for one-off runs where nothing needs to outlive the
process. Writes follow the same create-if-absent rules as the Parquet stores.
'''

from __future__ import annotations

import logging

from ..models import ProcessedYear, SignalRecord, StateYearRecord

log = logging.getLogger(__name__)


class MemoryProcessedYearLedger:
    def __init__(self) -> None:
        self.markers: dict[str, ProcessedYear] = {}

    async def is_year_processed(self, year: str) -> bool:
        return year in self.markers

    async def mark_year_processed(self, marker: ProcessedYear) -> None:
        if marker.year in self.markers:
            log.info('Year %s already marked processed, skipping duplicate', marker.year)
            return
        self.markers[marker.year] = marker


class MemoryStateYearStore:
    def __init__(self) -> None:
        self.records: dict[tuple[str, int], StateYearRecord] = {}

    async def save_state_year_batch(self, records: list[StateYearRecord]) -> None:
        for record in records:
            key = (record.state, record.year)
            if key in self.records:
                log.info('State data for %s %d already exists, skipping', *key)
                continue
            self.records[key] = record

    async def get_all_state_year_records(self, state: str) -> list[StateYearRecord]:
        return [r for (s, _), r in self.records.items() if s == state]

    async def list_states_with_any_data(self) -> list[str]:
        return sorted({state for state, _ in self.records})


class MemorySignalStore:
    def __init__(self) -> None:
        self.records: dict[tuple[str, int], SignalRecord] = {}

    async def save_signal(self, record: SignalRecord) -> None:
        key = (record.state, record.timestamp)
        if key in self.records:
            log.info('Signal for %s at %d already exists, skipping', *key)
            return
        self.records[key] = record

    async def get_all_signals(self) -> list[SignalRecord]:
        return list(self.records.values())
