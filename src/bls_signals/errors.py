'''Exceptions raised by the ingestion and signal pipeline.'''

from __future__ import annotations


class BlsSignalsError(Exception):
    '''Base class for pipeline errors.'''


class MalformedSourceError(BlsSignalsError):
    '''The source CSV cannot be parsed at all (e.g. it has no header columns).'''


class YearProcessingError(BlsSignalsError):
    '''Processing of one source year failed; the cause is chained.

    Attributes:
        year: The source year that failed (e.g. ``'2019'``).
    '''

    def __init__(self, year: str, message: str | None = None) -> None:
        self.year = year
        super().__init__(message or f'Failed to process BLS data for year {year}')
