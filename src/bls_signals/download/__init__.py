'''Yearly QCEW source files: providers and the streaming CSV reader.

- :class:`LocalYearSource` reads ``{year}.annual.singlefile.csv`` files from
  a directory.
- :class:`HttpYearSource` lists and streams the same files from a URL.
- :class:`StreamingCsvIngester` turns either byte stream into batches of
  :class:`~bls_signals.models.RawRow` in bounded memory.
'''

from .base import YearSource
from .csv_stream import StreamingCsvIngester, iter_csv_batches, split_csv_line
from .http import HttpYearSource
from .local import LocalYearSource

__all__ = [
    'YearSource',
    'StreamingCsvIngester',
    'iter_csv_batches',
    'split_csv_line',
    'HttpYearSource',
    'LocalYearSource',
]
