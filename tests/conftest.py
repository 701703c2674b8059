"""
Pytest configuration and shared fixtures.

Everything here is offline: sources serve in-memory CSV bytes and stores
keep records in dicts.
"""
import pytest

from bls_signals.models import StateYearRecord
from bls_signals.stores import MemoryProcessedYearLedger, MemorySignalStore, MemoryStateYearStore

HEADER = [
    "area_fips", "own_code", "industry_code", "agglvl_code", "size_code",
    "year", "annual_avg_emplvl", "lq_annual_avg_emplvl",
]


def csv_line(values):
    return ",".join(f'"{v}"' for v in values)


def make_csv(rows, header=HEADER):
    """
    Build a QCEW-style CSV from (area_fips, industry_code, year, lq) tuples.
    """
    lines = [csv_line(header)]
    for area_fips, industry_code, year, lq in rows:
        lines.append(csv_line([area_fips, "5", industry_code, "58", "0", year, "1000", lq]))
    return "\n".join(lines) + "\n"


async def chunked(data, size=64):
    """Yield *data* (bytes or str) in fixed-size pieces."""
    for i in range(0, len(data), size):
        yield data[i:i + size]


class FakeYearSource:
    """YearSource serving in-memory CSV text per year."""

    def __init__(self, files, chunk_size=64):
        self.files = {year: text.encode("utf-8") for year, text in files.items()}
        self.chunk_size = chunk_size
        self.opened = []

    async def list_available_years(self):
        return sorted(self.files)

    async def year_stream_size(self, year):
        return len(self.files[year])

    async def open_year_stream(self, year):
        self.opened.append(year)
        async for chunk in chunked(self.files[year], self.chunk_size):
            yield chunk


def state_year(state, year, brick=None, ecommerce=None):
    return StateYearRecord(
        state=state,
        year=year,
        timestamp=1_700_000_000,
        brick_and_mortar_codes=brick or {},
        ecommerce_codes=ecommerce or {},
    )


@pytest.fixture
def ledger():
    return MemoryProcessedYearLedger()


@pytest.fixture
def state_store():
    return MemoryStateYearStore()


@pytest.fixture
def signal_store():
    return MemorySignalStore()
