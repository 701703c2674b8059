'''Ingest one year's QCEW file into per-state records.

A year moves through five steps: ledger check, streaming aggregation,
materialization, batch save, and ledger mark. The ledger check makes a
re-run of an already-ingested year a no-op; any failure after it aborts the
year before the mark is written.
'''

from __future__ import annotations

import logging
import time
from contextlib import aclosing

from ..config import CSV_BATCH_SIZE, LARGE_SOURCE_BYTES
from ..download.base import YearSource
from ..download.csv_stream import StreamingCsvIngester
from ..errors import YearProcessingError
from ..models import ProcessedYear, YearResult
from ..stores.base import ProcessedYearLedger, StateYearStore
from .aggregate import YearAccumulator, aggregate_record
from .classify import classify_industry
from .validate import validate_state_record, validate_state_year_record

log = logging.getLogger(__name__)


class YearProcessor:
    '''Run the ingest-aggregate-persist cycle for single years.

    Args:
        source: Provider of the yearly CSV streams.
        ledger: Record of years already ingested.
        store: Destination for the per-state records.
        batch_size: Rows per ingestion batch.
    '''

    def __init__(
        self,
        source: YearSource,
        ledger: ProcessedYearLedger,
        store: StateYearStore,
        *,
        batch_size: int = CSV_BATCH_SIZE,
    ) -> None:
        self.source = source
        self.ledger = ledger
        self.store = store
        self.batch_size = batch_size

    async def process(self, year: str) -> YearResult:
        '''Ingest *year* unless the ledger says it is already done.

        Returns:
            A :class:`YearResult`; ``skipped`` is True for processed years.

        Raises:
            YearProcessingError: If any step fails; the original exception
                is chained as ``__cause__``.
        '''
        try:
            return await self._process(year)
        except YearProcessingError:
            raise
        except Exception as exc:
            log.error('Failed to process year %s: %s', year, exc)
            raise YearProcessingError(year) from exc

    async def _process(self, year: str) -> YearResult:
        if await self.ledger.is_year_processed(year):
            log.info('Year %s already processed, skipping', year)
            return YearResult(year=year, skipped=True)

        log.info('Processing BLS data for year %s', year)
        source_size = await self.source.year_stream_size(year) or 0
        progress = log.info if source_size > LARGE_SOURCE_BYTES else log.debug

        accumulator = YearAccumulator()
        ingester = StreamingCsvIngester(self.batch_size)
        total_rows = 0
        valid_rows = 0

        async with aclosing(self.source.open_year_stream(year)) as stream:
            async for batch in ingester.batches(stream):
                total_rows += len(batch)
                for row in batch:
                    validation = validate_state_record(row)
                    if not validation.is_valid:
                        continue
                    tag = classify_industry(row.industry_code)
                    if aggregate_record(
                        accumulator, validation.state_abbr, row, validation.retail_lq, tag
                    ):
                        valid_rows += 1
                progress(
                    'Processed %d records for year %s (%d states so far)',
                    total_rows, year, len(accumulator),
                )

        if ingester.rows_skipped:
            log.warning('Skipped %d malformed lines for year %s', ingester.rows_skipped, year)

        now = int(time.time())
        records = [
            r for r in accumulator.materialize(int(year), now)
            if validate_state_year_record(r)
        ]

        if records:
            await self.store.save_state_year_batch(records)
            log.info('Saved %d state records for year %s', len(records), year)

        await self.ledger.mark_year_processed(ProcessedYear(
            year=year,
            processed_at=int(time.time()),
            source_size=source_size,
            record_count=len(records),
        ))

        log.info(
            'Successfully processed year %s: %d valid state records from %d rows',
            year, len(records), total_rows,
        )
        return YearResult(
            year=year,
            skipped=False,
            total_rows=total_rows,
            valid_rows=valid_rows,
            records_saved=len(records),
        )


async def process_years(
    processor: YearProcessor,
    years: list[str],
    *,
    stop_on_error: bool = True,
) -> list[YearResult]:
    '''Process *years* strictly one after another.

    Args:
        processor: The configured year processor.
        years: Years to process, in order.
        stop_on_error: Re-raise the first :class:`YearProcessingError`
            (default). When False, failed years are logged and left out of
            the results.

    Returns:
        One result per year that completed or was skipped.
    '''
    results = []
    for year in years:
        try:
            results.append(await processor.process(year))
        except YearProcessingError:
            if stop_on_error:
                raise
            log.exception('Continuing after failure of year %s', year)
    return results
