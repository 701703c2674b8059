"""
Tests for the memory and Parquet store implementations.
"""
import asyncio
import math
import threading

import polars as pl
import pytest

from bls_signals.models import ProcessedYear, SignalRecord
from bls_signals.stores import (
    MemoryProcessedYearLedger,
    MemorySignalStore,
    MemoryStateYearStore,
    ParquetProcessedYearLedger,
    ParquetSignalStore,
    ParquetStateYearStore,
)
from conftest import state_year


def signal(state, timestamp, physical=55.0):
    return SignalRecord(
        state=state,
        timestamp=timestamp,
        calculated_at="2024-05-01T12:00:00+00:00",
        physical_slope=-0.02,
        physical_trend="declining",
        ecommerce_slope=0.01,
        ecommerce_trend="growing",
        physical_score=physical,
        ecommerce_score=61.5,
        data_points=12,
        years_analyzed=[2019, 2020, 2021],
    )


@pytest.fixture(params=["memory", "parquet"])
def ledger_impl(request, tmp_path):
    if request.param == "memory":
        return MemoryProcessedYearLedger()
    return ParquetProcessedYearLedger(tmp_path / "years.parquet")


@pytest.fixture(params=["memory", "parquet"])
def state_store_impl(request, tmp_path):
    if request.param == "memory":
        return MemoryStateYearStore()
    return ParquetStateYearStore(tmp_path / "state.parquet")


@pytest.fixture(params=["memory", "parquet"])
def signal_store_impl(request, tmp_path):
    if request.param == "memory":
        return MemorySignalStore()
    return ParquetSignalStore(tmp_path / "signals.parquet")


class TestProcessedYearLedger:

    @pytest.mark.asyncio
    async def test_mark_and_check(self, ledger_impl):
        assert not await ledger_impl.is_year_processed("2020")

        await ledger_impl.mark_year_processed(ProcessedYear("2020", 1_700_000_000, 1024, 51))

        assert await ledger_impl.is_year_processed("2020")
        assert not await ledger_impl.is_year_processed("2021")

    @pytest.mark.asyncio
    async def test_duplicate_mark_ignored(self, ledger_impl):
        await ledger_impl.mark_year_processed(ProcessedYear("2020", 1, 1024, 51))
        await ledger_impl.mark_year_processed(ProcessedYear("2020", 2, 2048, 10))

        assert await ledger_impl.is_year_processed("2020")


class TestStateYearStore:
    """Tests shared by both state-year store implementations."""

    @pytest.mark.asyncio
    async def test_round_trip(self, state_store_impl):
        await state_store_impl.save_state_year_batch([
            state_year("CA", 2021, brick={"441": 1.5, "445": 0.9}, ecommerce={"4541": 2.1}),
            state_year("CA", 2020, brick={"441": 1.6}),
            state_year("AL", 2020, ecommerce={"4931": 1.2}),
        ])

        records = sorted(await state_store_impl.get_all_state_year_records("CA"), key=lambda r: r.year)

        assert [r.year for r in records] == [2020, 2021]
        assert records[1].brick_and_mortar_codes == {"441": 1.5, "445": 0.9}
        assert records[1].ecommerce_codes == {"4541": 2.1}
        assert records[0].ecommerce_codes == {}

    @pytest.mark.asyncio
    async def test_states_listed_once(self, state_store_impl):
        await state_store_impl.save_state_year_batch([
            state_year("TX", 2020, brick={"441": 1.0}),
            state_year("AL", 2020, brick={"441": 1.0}),
            state_year("AL", 2021, brick={"441": 1.0}),
        ])

        assert await state_store_impl.list_states_with_any_data() == ["AL", "TX"]

    @pytest.mark.asyncio
    async def test_existing_key_not_overwritten(self, state_store_impl):
        await state_store_impl.save_state_year_batch([state_year("AL", 2020, brick={"441": 1.0})])
        await state_store_impl.save_state_year_batch([state_year("AL", 2020, brick={"441": 9.0})])

        records = await state_store_impl.get_all_state_year_records("AL")

        assert len(records) == 1
        assert records[0].brick_and_mortar_codes == {"441": 1.0}

    @pytest.mark.asyncio
    async def test_empty_store(self, state_store_impl):
        assert await state_store_impl.list_states_with_any_data() == []
        assert await state_store_impl.get_all_state_year_records("AL") == []


class TestSignalStore:

    @pytest.mark.asyncio
    async def test_round_trip(self, signal_store_impl):
        record = signal("CA", 1_700_000_000)

        await signal_store_impl.save_signal(record)

        assert await signal_store_impl.get_all_signals() == [record]

    @pytest.mark.asyncio
    async def test_keyed_by_state_and_timestamp(self, signal_store_impl):
        await signal_store_impl.save_signal(signal("CA", 1, physical=10.0))
        await signal_store_impl.save_signal(signal("CA", 1, physical=20.0))
        await signal_store_impl.save_signal(signal("CA", 2, physical=30.0))

        records = await signal_store_impl.get_all_signals()

        assert sorted(r.physical_score for r in records) == [10.0, 30.0]

    @pytest.mark.asyncio
    async def test_nan_scores_survive(self, signal_store_impl):
        await signal_store_impl.save_signal(signal("CA", 1, physical=math.nan))

        records = await signal_store_impl.get_all_signals()

        assert math.isnan(records[0].physical_score)


class TestParquetFiles:

    @pytest.mark.asyncio
    async def test_io_runs_off_event_loop_thread(self, tmp_path, monkeypatch):
        path = tmp_path / "signals.parquet"
        await ParquetSignalStore(path).save_signal(signal("NY", 5))
        threads = []
        read_parquet = pl.read_parquet

        def spy(*args, **kwargs):
            threads.append(threading.current_thread())
            return read_parquet(*args, **kwargs)

        monkeypatch.setattr(pl, "read_parquet", spy)

        await ParquetSignalStore(path).get_all_signals()

        assert threads
        assert threading.main_thread() not in threads

    @pytest.mark.asyncio
    async def test_concurrent_saves_keep_every_row(self, tmp_path):
        store = ParquetSignalStore(tmp_path / "signals.parquet")

        await asyncio.gather(*(store.save_signal(signal(f"S{i}", i)) for i in range(10)))

        records = await store.get_all_signals()
        assert sorted(r.timestamp for r in records) == list(range(10))

    @pytest.mark.asyncio
    async def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "nested" / "signals.parquet"
        await ParquetSignalStore(path).save_signal(signal("NY", 5))

        assert path.exists()
        records = await ParquetSignalStore(path).get_all_signals()
        assert [r.state for r in records] == ["NY"]
