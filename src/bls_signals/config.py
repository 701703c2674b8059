'''Path constants and pipeline tuning knobs.

All paths are relative to the current working directory (the repository
root at runtime) unless overridden through :class:`PipelineSettings`.

Attributes:
    DATA_DIR: Root data directory.
    SOURCE_DIR: Directory holding the yearly QCEW single-file CSVs.
    STATE_DATA_PATH: Parquet file of per-state, per-year LQ records.
    SIGNALS_PATH: Parquet file of computed signal records.
    PROCESSED_YEARS_PATH: Parquet ledger of years already ingested.
    SOURCE_FILE_SUFFIX: Filename suffix of a yearly source CSV.
    CSV_BATCH_SIZE: Rows per ingestion batch (10,000).
    MAX_PENDING_CHARS: Cap on the partial-line buffer while streaming (1 MiB).
    LARGE_SOURCE_BYTES: Sources above this size log progress per batch.
    SIGNAL_BATCH_SIZE: States whose signals are computed concurrently (5).
    SIGNAL_BATCH_PAUSE: Seconds to wait between signal batches.
    SLOPE_THRESHOLD: Symmetric slope threshold separating stable trends.
    SCORE_CENTER: Score assigned to a z-score of zero.
    SCORE_SCALE: Score points per standard deviation.
    OUTLIER_THRESHOLD: Standard deviations from the median that mark an outlier.
'''

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DATA_DIR = Path('data')
SOURCE_DIR = DATA_DIR / 'qcew'
STATE_DATA_PATH = DATA_DIR / 'bls_state_data.parquet'
SIGNALS_PATH = DATA_DIR / 'bls_signals.parquet'
PROCESSED_YEARS_PATH = DATA_DIR / 'bls_processed_years.parquet'
SOURCE_FILE_SUFFIX = '.annual.singlefile.csv'

CSV_BATCH_SIZE = 10_000
MAX_PENDING_CHARS = 1024 * 1024
LARGE_SOURCE_BYTES = 100 * 1024 * 1024

SIGNAL_BATCH_SIZE = 5
SIGNAL_BATCH_PAUSE = 0.1

SLOPE_THRESHOLD = 0.001
SCORE_CENTER = 50.0
SCORE_SCALE = 15.0
OUTLIER_THRESHOLD = 2.0


@dataclass(frozen=True)
class PipelineSettings:
    '''Runtime settings for one pipeline run.

    Attributes:
        data_dir: Root directory for Parquet stores and score exports.
        source_dir: Directory of local yearly CSVs (used when no URL is set).
        source_url: Base URL serving the yearly CSVs; overrides ``source_dir``.
        csv_batch_size: Rows per ingestion batch.
        signal_batch_size: States per concurrent signal batch.
        signal_batch_pause: Seconds between signal batches.
        slope_threshold: Trend categorisation threshold.
        outlier_threshold: Outlier cut-off in standard deviations.
    '''

    data_dir: Path = DATA_DIR
    source_dir: Path = SOURCE_DIR
    source_url: str | None = None
    csv_batch_size: int = CSV_BATCH_SIZE
    signal_batch_size: int = SIGNAL_BATCH_SIZE
    signal_batch_pause: float = SIGNAL_BATCH_PAUSE
    slope_threshold: float = SLOPE_THRESHOLD
    outlier_threshold: float = OUTLIER_THRESHOLD

    @property
    def state_data_path(self) -> Path:
        return self.data_dir / STATE_DATA_PATH.name

    @property
    def signals_path(self) -> Path:
        return self.data_dir / SIGNALS_PATH.name

    @property
    def processed_years_path(self) -> Path:
        return self.data_dir / PROCESSED_YEARS_PATH.name

    @classmethod
    def from_env(cls) -> PipelineSettings:
        '''Build settings from ``BLS_*`` environment variables.

        Recognised variables: ``BLS_DATA_DIR``, ``BLS_SOURCE_DIR``,
        ``BLS_SOURCE_URL``, ``BLS_CSV_BATCH_SIZE`` and
        ``BLS_SIGNAL_BATCH_SIZE``. Unset variables keep their defaults.

        Raises:
            ValueError: If a batch size variable is not an integer.
        '''
        data_dir = Path(os.environ.get('BLS_DATA_DIR', str(DATA_DIR)))
        source_dir = Path(
            os.environ.get('BLS_SOURCE_DIR', str(data_dir / SOURCE_DIR.name))
        )
        return cls(
            data_dir=data_dir,
            source_dir=source_dir,
            source_url=os.environ.get('BLS_SOURCE_URL') or None,
            csv_batch_size=int(os.environ.get('BLS_CSV_BATCH_SIZE', CSV_BATCH_SIZE)),
            signal_batch_size=int(
                os.environ.get('BLS_SIGNAL_BATCH_SIZE', SIGNAL_BATCH_SIZE)
            ),
        )
