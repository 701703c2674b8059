'''Parquet-backed implementations of the storage contracts.

Each store owns one Parquet file, read with polars on every call and
rewritten on every write. File I/O runs in a worker thread via
:func:`asyncio.to_thread`, and writes to one file are serialized. The
datasets are small (one row per state and year, or per state and run), so
whole-file rewrites stay cheap.

Writes are create-if-absent on the store's key columns: rows whose key is
already present are dropped, never overwritten.
'''

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

import polars as pl

from ..config import PROCESSED_YEARS_PATH, SIGNALS_PATH, STATE_DATA_PATH
from ..models import ProcessedYear, SignalRecord, StateYearRecord

log = logging.getLogger(__name__)

CODE_LQ = pl.List(pl.Struct({'industry_code': pl.Utf8, 'lq': pl.Float64}))

PROCESSED_YEARS_SCHEMA = {
    'year': pl.Utf8,
    'processed_at': pl.Int64,
    'source_size': pl.Int64,
    'record_count': pl.Int64,
}

STATE_DATA_SCHEMA = {
    'state': pl.Utf8,
    'year': pl.Int64,
    'timestamp': pl.Int64,
    'brick_and_mortar_codes': CODE_LQ,
    'ecommerce_codes': CODE_LQ,
}

SIGNALS_SCHEMA = {
    'state': pl.Utf8,
    'timestamp': pl.Int64,
    'calculated_at': pl.Utf8,
    'physical_slope': pl.Float64,
    'physical_trend': pl.Utf8,
    'ecommerce_slope': pl.Float64,
    'ecommerce_trend': pl.Utf8,
    'physical_score': pl.Float64,
    'ecommerce_score': pl.Float64,
    'data_points': pl.Int64,
    'years_analyzed': pl.List(pl.Int64),
}


class _ParquetTable:
    '''One Parquet file with a fixed schema and a key for create-if-absent writes.'''

    def __init__(self, path: Path | str, schema: dict[str, pl.DataType], key: list[str]) -> None:
        self.path = Path(path)
        self.schema = schema
        self.key = key
        self._write_lock = asyncio.Lock()

    async def read(self) -> pl.DataFrame:
        return await asyncio.to_thread(self._read)

    async def append(self, rows: list[dict[str, Any]]) -> int:
        '''Append rows whose key is not yet stored; return how many were written.'''
        async with self._write_lock:
            return await asyncio.to_thread(self._append, rows)

    def _read(self) -> pl.DataFrame:
        if not self.path.exists():
            return pl.DataFrame(schema=self.schema)
        return pl.read_parquet(self.path)

    def _append(self, rows: list[dict[str, Any]]) -> int:
        existing = self._read()
        seen = set(existing.select(self.key).iter_rows())
        fresh = []
        for row in rows:
            key = tuple(row[k] for k in self.key)
            if key in seen:
                continue
            seen.add(key)
            fresh.append(row)
        if not fresh:
            return 0

        combined = pl.concat([existing, pl.DataFrame(fresh, schema=self.schema)])
        self.path.parent.mkdir(parents=True, exist_ok=True)
        combined.write_parquet(self.path)
        return len(fresh)


def _codes_to_rows(codes: dict[str, float]) -> list[dict[str, Any]]:
    return [{'industry_code': code, 'lq': lq} for code, lq in codes.items()]


def _rows_to_codes(rows: list[dict[str, Any]] | None) -> dict[str, float]:
    return {r['industry_code']: r['lq'] for r in rows or []}


class ParquetProcessedYearLedger:
    def __init__(self, path: Path | str = PROCESSED_YEARS_PATH) -> None:
        self.table = _ParquetTable(path, PROCESSED_YEARS_SCHEMA, ['year'])

    async def is_year_processed(self, year: str) -> bool:
        return (await self.table.read()).filter(pl.col('year') == year).height > 0

    async def mark_year_processed(self, marker: ProcessedYear) -> None:
        written = await self.table.append([{
            'year': marker.year,
            'processed_at': marker.processed_at,
            'source_size': marker.source_size,
            'record_count': marker.record_count,
        }])
        if not written:
            log.info('Year %s already marked processed, skipping duplicate', marker.year)


class ParquetStateYearStore:
    def __init__(self, path: Path | str = STATE_DATA_PATH) -> None:
        self.table = _ParquetTable(path, STATE_DATA_SCHEMA, ['state', 'year'])

    async def save_state_year_batch(self, records: list[StateYearRecord]) -> None:
        rows = [
            {
                'state': r.state,
                'year': r.year,
                'timestamp': r.timestamp,
                'brick_and_mortar_codes': _codes_to_rows(r.brick_and_mortar_codes),
                'ecommerce_codes': _codes_to_rows(r.ecommerce_codes),
            }
            for r in records
        ]
        written = await self.table.append(rows)
        log.info('Saved %d of %d state data records to %s', written, len(records), self.table.path)

    async def get_all_state_year_records(self, state: str) -> list[StateYearRecord]:
        df = (await self.table.read()).filter(pl.col('state') == state).sort('year')
        return [
            StateYearRecord(
                state=row['state'],
                year=row['year'],
                timestamp=row['timestamp'],
                brick_and_mortar_codes=_rows_to_codes(row['brick_and_mortar_codes']),
                ecommerce_codes=_rows_to_codes(row['ecommerce_codes']),
            )
            for row in df.iter_rows(named=True)
        ]

    async def list_states_with_any_data(self) -> list[str]:
        return (await self.table.read()).get_column('state').unique().sort().to_list()


class ParquetSignalStore:
    def __init__(self, path: Path | str = SIGNALS_PATH) -> None:
        self.table = _ParquetTable(path, SIGNALS_SCHEMA, ['state', 'timestamp'])

    async def save_signal(self, record: SignalRecord) -> None:
        written = await self.table.append([{
            'state': record.state,
            'timestamp': record.timestamp,
            'calculated_at': record.calculated_at,
            'physical_slope': record.physical_slope,
            'physical_trend': record.physical_trend,
            'ecommerce_slope': record.ecommerce_slope,
            'ecommerce_trend': record.ecommerce_trend,
            'physical_score': record.physical_score,
            'ecommerce_score': record.ecommerce_score,
            'data_points': record.data_points,
            'years_analyzed': list(record.years_analyzed),
        }])
        if not written:
            log.info('Signal for %s at %d already exists, skipping', record.state, record.timestamp)

    async def get_all_signals(self) -> list[SignalRecord]:
        df = await self.table.read()
        return [SignalRecord(**row) for row in df.iter_rows(named=True)]
