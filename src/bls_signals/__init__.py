'''BLS signals: state retail displacement scores from QCEW location quotients.

This package turns the BLS Quarterly Census of Employment and Wages annual
"single file" CSVs into two 0-100 scores per state:

- **physical** -- how fast store-based (brick-and-mortar) retail employment
  concentration is *declining* relative to other states.
- **e-commerce** -- how fast online retail and fulfilment employment
  concentration is *growing* relative to other states.

The pipeline has two stages, each runnable independently:

1. **Ingestion** -- stream each year's CSV, keep state-level rows with a
   positive location quotient, classify their industry codes and persist
   per-state sums (:mod:`bls_signals.processing`).
2. **Signals** -- fit weighted least-squares trends per state and category,
   normalize across states, and persist one signal record per state
   (:mod:`bls_signals.signals`).

Typical usage::

    from bls_signals import (
        BlsSignalService,
        LocalYearSource,
        ParquetProcessedYearLedger,
        ParquetSignalStore,
        ParquetStateYearStore,
    )
'''

from bls_signals.config import PipelineSettings
from bls_signals.download import HttpYearSource, LocalYearSource, StreamingCsvIngester
from bls_signals.errors import BlsSignalsError, MalformedSourceError, YearProcessingError
from bls_signals.processing.year import YearProcessor, process_years
from bls_signals.service import BlsSignalService
from bls_signals.signals import SignalCalculator
from bls_signals.stores import (
    MemoryProcessedYearLedger,
    MemorySignalStore,
    MemoryStateYearStore,
    ParquetProcessedYearLedger,
    ParquetSignalStore,
    ParquetStateYearStore,
)

__all__ = [
    'PipelineSettings',
    'HttpYearSource',
    'LocalYearSource',
    'StreamingCsvIngester',
    'BlsSignalsError',
    'MalformedSourceError',
    'YearProcessingError',
    'YearProcessor',
    'process_years',
    'BlsSignalService',
    'SignalCalculator',
    'MemoryProcessedYearLedger',
    'MemorySignalStore',
    'MemoryStateYearStore',
    'ParquetProcessedYearLedger',
    'ParquetSignalStore',
    'ParquetStateYearStore',
]
