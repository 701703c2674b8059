'''Record types shared by the ingestion, trend and scoring stages.

Transient types (:class:`RawRow`, :class:`CategoryTag`,
:class:`StateAggregate`, :class:`TrendPoint`, :class:`StateSignal`) live only
for the duration of a run. Persisted types (:class:`StateYearRecord`,
:class:`SignalRecord`, :class:`ProcessedYear`) are handed to the store
collaborators and only ever read back, never mutated in place.
'''

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

TrendCategory = Literal['declining', 'stable', 'growing']
Category = Literal['brick_and_mortar', 'ecommerce']

# QCEW single-file column names used by the pipeline
AREA_FIPS = 'area_fips'
INDUSTRY_CODE = 'industry_code'
YEAR = 'year'
LQ_ANNUAL_AVG_EMPLVL = 'lq_annual_avg_emplvl'


@dataclass(frozen=True)
class RawRow:
    '''One QCEW CSV record, reduced to the fields the pipeline reads.

    All values are the raw (trimmed) strings from the file.
    '''

    area_fips: str
    industry_code: str
    year: str
    lq_annual_avg_emplvl: str

    @classmethod
    def from_record(cls, record: dict[str, str]) -> RawRow:
        '''Build a row from a header-keyed record; missing columns read as ``''``.'''
        return cls(
            area_fips=record.get(AREA_FIPS, ''),
            industry_code=record.get(INDUSTRY_CODE, ''),
            year=record.get(YEAR, ''),
            lq_annual_avg_emplvl=record.get(LQ_ANNUAL_AVG_EMPLVL, ''),
        )


@dataclass(frozen=True)
class StateRecordValidation:
    is_valid: bool
    state_abbr: str | None = None
    retail_lq: float | None = None


@dataclass(frozen=True)
class CategoryTag:
    '''Non-exclusive retail classification of an industry code.'''

    is_brick_and_mortar: bool
    is_ecommerce: bool


@dataclass
class StateAggregate:
    '''Summed LQ per industry code for one state over one year's stream.'''

    brick_and_mortar_codes: dict[str, float] = field(default_factory=dict)
    ecommerce_codes: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class StateYearRecord:
    '''Persisted per-state, per-year LQ sums by industry code.

    Attributes:
        state: Two-letter state abbreviation.
        year: Reference year of the source file.
        timestamp: Unix seconds when the record was built.
        brick_and_mortar_codes: ``industry_code -> summed LQ`` for physical retail.
        ecommerce_codes: ``industry_code -> summed LQ`` for e-commerce.
    '''

    state: str
    year: int
    timestamp: int
    brick_and_mortar_codes: dict[str, float]
    ecommerce_codes: dict[str, float]

    def codes_for(self, category: Category) -> dict[str, float]:
        if category == 'brick_and_mortar':
            return self.brick_and_mortar_codes
        return self.ecommerce_codes


@dataclass(frozen=True)
class TrendPoint:
    year: int
    retail_lq: float


@dataclass(frozen=True)
class WeightedSlope:
    '''Data-point weighted slope across the industry codes of one category.

    Attributes:
        slope: ``sum(code_slope * code_points) / sum(code_points)``, or 0.
        data_points: Total points over all eligible codes.
        codes: Number of codes with at least two points.
    '''

    slope: float
    data_points: int
    codes: int


@dataclass(frozen=True)
class StateSignal:
    state: str
    physical_slope: float
    ecommerce_slope: float
    physical_trend: TrendCategory
    ecommerce_trend: TrendCategory
    data_points: int
    years_analyzed: list[int]


@dataclass(frozen=True)
class SignalRecord:
    '''Persisted signal for one state from one signal-calculation run.

    Scores lie in ``[0, 100]``; they are NaN when every state shares the same
    slope (zero cross-state standard deviation).
    '''

    state: str
    timestamp: int
    calculated_at: str
    physical_slope: float
    physical_trend: TrendCategory
    ecommerce_slope: float
    ecommerce_trend: TrendCategory
    physical_score: float
    ecommerce_score: float
    data_points: int
    years_analyzed: list[int]


@dataclass(frozen=True)
class ProcessedYear:
    '''Ledger marker written once a source year has been ingested.'''

    year: str
    processed_at: int
    source_size: int
    record_count: int


@dataclass(frozen=True)
class YearResult:
    '''Outcome of one :meth:`YearProcessor.process` call.'''

    year: str
    skipped: bool
    total_rows: int = 0
    valid_rows: int = 0
    records_saved: int = 0


@dataclass(frozen=True)
class BlsMetrics:
    physical_slope: float
    physical_trend: TrendCategory
    ecommerce_slope: float
    ecommerce_trend: TrendCategory
    physical_score: float
    ecommerce_score: float
    data_points: int
    years_analyzed: list[int]
