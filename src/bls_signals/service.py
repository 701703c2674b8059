'''Full BLS run: ingest every available year, then recompute signals.'''

from __future__ import annotations

import logging

from .config import PipelineSettings
from .download.base import YearSource
from .models import SignalRecord
from .processing.year import YearProcessor, process_years
from .signals.calculator import SignalCalculator
from .stores.base import ProcessedYearLedger, SignalStore, StateYearStore

log = logging.getLogger(__name__)


class BlsSignalService:
    '''Wire a source and the three stores into the two pipeline stages.

    Args:
        source: Provider of yearly CSV streams.
        ledger: Record of ingested years.
        state_store: Per-state yearly records.
        signal_store: Computed signal records.
        settings: Batch sizes and thresholds; defaults apply when omitted.
    '''

    def __init__(
        self,
        source: YearSource,
        ledger: ProcessedYearLedger,
        state_store: StateYearStore,
        signal_store: SignalStore,
        settings: PipelineSettings | None = None,
    ) -> None:
        settings = settings or PipelineSettings()
        self.source = source
        self.year_processor = YearProcessor(
            source, ledger, state_store, batch_size=settings.csv_batch_size
        )
        self.calculator = SignalCalculator(
            state_store,
            signal_store,
            batch_size=settings.signal_batch_size,
            batch_pause=settings.signal_batch_pause,
            slope_threshold=settings.slope_threshold,
            outlier_threshold=settings.outlier_threshold,
        )

    async def process_bls_data(self) -> list[SignalRecord]:
        '''Ingest all unprocessed years, then calculate signals for every state.

        Raises:
            YearProcessingError: If any year fails; signals are not
                recalculated in that case.
        '''
        log.info('Starting BLS data processing...')
        years = await self.source.list_available_years()
        log.info('Found %d years of BLS data available', len(years))

        await process_years(self.year_processor, years)
        records = await self.calculator.calculate_all_signals()

        log.info('BLS data processing completed')
        return records

    async def get_all_physical_scores(self) -> dict[str, float]:
        return await self.calculator.get_all_physical_scores()

    async def get_all_ecommerce_scores(self) -> dict[str, float]:
        return await self.calculator.get_all_ecommerce_scores()

    async def get_all_scores(self) -> dict[str, float]:
        return await self.calculator.get_all_scores()
