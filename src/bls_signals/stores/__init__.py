'''Storage contracts and their in-memory and Parquet implementations.

- :mod:`~bls_signals.stores.base` -- the :class:`ProcessedYearLedger`,
  :class:`StateYearStore` and :class:`SignalStore` protocols.
- :mod:`~bls_signals.stores.memory` -- dict-backed stores.
- :mod:`~bls_signals.stores.parquet` -- polars/Parquet-backed stores.
'''

from .base import ProcessedYearLedger, SignalStore, StateYearStore
from .memory import MemoryProcessedYearLedger, MemorySignalStore, MemoryStateYearStore
from .parquet import ParquetProcessedYearLedger, ParquetSignalStore, ParquetStateYearStore

__all__ = [
    'ProcessedYearLedger',
    'SignalStore',
    'StateYearStore',
    'MemoryProcessedYearLedger',
    'MemorySignalStore',
    'MemoryStateYearStore',
    'ParquetProcessedYearLedger',
    'ParquetSignalStore',
    'ParquetStateYearStore',
]
