'''Turn stored per-state LQ history into normalized retail signals.

One run reads every state's yearly records, fits weighted trends for the
physical and e-commerce categories, normalizes the slopes across states and
saves one :class:`SignalRecord` per state. Records from earlier runs stay in
the store but are superseded: readers only look at each state's latest one.
'''

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone

from ..config import OUTLIER_THRESHOLD, SIGNAL_BATCH_PAUSE, SIGNAL_BATCH_SIZE, SLOPE_THRESHOLD
from ..models import BlsMetrics, SignalRecord, StateSignal, TrendPoint
from ..stores.base import SignalStore, StateYearStore
from .normalize import normalize_slopes
from .outliers import (
    CorrectionPolicy,
    detect_and_correct_outliers,
    log_outlier_analysis,
    replace_with_median,
)
from .quality import analyze_data_quality
from .trend import determine_trend_category, weighted_category_slope

log = logging.getLogger(__name__)


def latest_signals(records: list[SignalRecord]) -> dict[str, SignalRecord]:
    '''Keep the record with the greatest timestamp for each state.'''
    latest: dict[str, SignalRecord] = {}
    for record in records:
        current = latest.get(record.state)
        if current is None or record.timestamp >= current.timestamp:
            latest[record.state] = record
    return latest


class SignalCalculator:
    '''Compute, persist and read back BLS retail signals.

    Args:
        state_store: Source of per-state yearly records.
        signal_store: Destination of signal records.
        batch_size: States computed concurrently per batch.
        batch_pause: Seconds to sleep between batches.
        slope_threshold: Threshold for trend categories.
        outlier_threshold: Outlier cut-off for physical scores.
        outlier_correction: Replacement policy for outlying physical scores.
    '''

    def __init__(
        self,
        state_store: StateYearStore,
        signal_store: SignalStore,
        *,
        batch_size: int = SIGNAL_BATCH_SIZE,
        batch_pause: float = SIGNAL_BATCH_PAUSE,
        slope_threshold: float = SLOPE_THRESHOLD,
        outlier_threshold: float = OUTLIER_THRESHOLD,
        outlier_correction: CorrectionPolicy = replace_with_median,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f'batch_size must be positive, got {batch_size}')
        self.state_store = state_store
        self.signal_store = signal_store
        self.batch_size = batch_size
        self.batch_pause = batch_pause
        self.slope_threshold = slope_threshold
        self.outlier_threshold = outlier_threshold
        self.outlier_correction = outlier_correction

    async def calculate_state_signal(self, state: str) -> StateSignal | None:
        '''Fit both category trends for *state*; None if it has no stored years.'''
        records = await self.state_store.get_all_state_year_records(state)
        if not records:
            log.warning('No state data found for %s', state)
            return None

        records = sorted(records, key=lambda r: r.year)
        physical = weighted_category_slope(records, 'brick_and_mortar')
        ecommerce = weighted_category_slope(records, 'ecommerce')

        if log.isEnabledFor(logging.DEBUG):
            series = [
                TrendPoint(r.year, sum(r.brick_and_mortar_codes.values())) for r in records
            ]
            quality = analyze_data_quality(series)
            log.debug(
                '%s physical series quality %d/100 (%d gaps, %d issues)',
                state, quality.data_quality_score, len(quality.large_gaps), len(quality.outliers),
            )

        return StateSignal(
            state=state,
            physical_slope=physical.slope,
            ecommerce_slope=ecommerce.slope,
            physical_trend=determine_trend_category(physical.slope, self.slope_threshold),
            ecommerce_trend=determine_trend_category(ecommerce.slope, self.slope_threshold),
            data_points=physical.data_points,
            years_analyzed=[r.year for r in records],
        )

    async def _safe_state_signal(self, state: str) -> StateSignal | None:
        try:
            return await self.calculate_state_signal(state)
        except Exception:
            log.exception('Error calculating signal for state %s', state)
            return None

    async def collect_state_signals(self, states: list[str]) -> list[StateSignal]:
        '''Compute state signals in concurrent batches, skipping failures.'''
        signals: list[StateSignal] = []
        batches = [states[i:i + self.batch_size] for i in range(0, len(states), self.batch_size)]
        for i, batch in enumerate(batches, 1):
            log.info('Processing batch %d/%d (%d states)', i, len(batches), len(batch))
            results = await asyncio.gather(*(self._safe_state_signal(s) for s in batch))
            signals.extend(r for r in results if r is not None)
            if i < len(batches) and self.batch_pause > 0:
                await asyncio.sleep(self.batch_pause)
        return signals

    async def calculate_all_signals(self) -> list[SignalRecord]:
        '''Run a full signal calculation and persist one record per state.

        Returns:
            The records that were saved successfully.
        '''
        log.info('Calculating BLS signals for all states...')
        states = await self.state_store.list_states_with_any_data()
        log.info('Found %d states to process', len(states))
        if not states:
            log.warning('No states found for signal calculation')
            return []

        signals = await self.collect_state_signals(states)
        if not signals:
            log.warning('No state produced a signal')
            return []

        physical = normalize_slopes({s.state: s.physical_slope for s in signals}, invert=True)
        ecommerce = normalize_slopes({s.state: s.ecommerce_slope for s in signals}, invert=False)
        log.info('Normalization stats: physical mean=%.4f, std=%.4f', physical.mean, physical.std)
        log.info('Normalization stats: e-commerce mean=%.4f, std=%.4f', ecommerce.mean, ecommerce.std)

        timestamp = int(time.time())
        calculated_at = datetime.now(timezone.utc).isoformat()
        saved = []
        for signal in signals:
            record = SignalRecord(
                state=signal.state,
                timestamp=timestamp,
                calculated_at=calculated_at,
                physical_slope=signal.physical_slope,
                physical_trend=signal.physical_trend,
                ecommerce_slope=signal.ecommerce_slope,
                ecommerce_trend=signal.ecommerce_trend,
                physical_score=physical.scores[signal.state],
                ecommerce_score=ecommerce.scores[signal.state],
                data_points=signal.data_points,
                years_analyzed=signal.years_analyzed,
            )
            try:
                await self.signal_store.save_signal(record)
            except Exception:
                log.exception('Error saving signal for %s', signal.state)
                continue
            saved.append(record)
            log.info(
                'Calculated signal for %s: physicalScore=%.2f (%d points, %d years), ecommerceScore=%.2f',
                record.state, record.physical_score, record.data_points,
                len(record.years_analyzed), record.ecommerce_score,
            )

        log.info('Calculated signals for %d states', len(saved))
        return saved

    async def _latest(self) -> dict[str, SignalRecord]:
        return latest_signals(await self.signal_store.get_all_signals())

    async def get_all_physical_scores(self) -> dict[str, float]:
        '''Latest physical score per state after outlier correction.'''
        scores = {state: r.physical_score for state, r in (await self._latest()).items()}
        analysis = detect_and_correct_outliers(scores, self.outlier_threshold, self.outlier_correction)
        log_outlier_analysis(analysis, 'physical')
        log.info('Retrieved physical scores for %d states', len(analysis.corrected_scores))
        return analysis.corrected_scores

    async def get_all_ecommerce_scores(self) -> dict[str, float]:
        '''Latest e-commerce score per state, as stored.'''
        scores = {state: r.ecommerce_score for state, r in (await self._latest()).items()}
        log.info('Retrieved e-commerce scores for %d states', len(scores))
        return scores

    async def get_all_scores(self) -> dict[str, float]:
        '''Equal-weight combination of the latest stored scores per state.'''
        return {
            state: (r.physical_score + r.ecommerce_score) / 2
            for state, r in (await self._latest()).items()
        }

    async def get_all_individual_scores(self) -> dict[str, dict[str, float]]:
        return {
            state: {'physical_score': r.physical_score, 'ecommerce_score': r.ecommerce_score}
            for state, r in (await self._latest()).items()
        }

    async def calculate_state_metrics(self, state: str) -> BlsMetrics | None:
        record = (await self._latest()).get(state)
        if record is None:
            return None
        return BlsMetrics(
            physical_slope=record.physical_slope,
            physical_trend=record.physical_trend,
            ecommerce_slope=record.ecommerce_slope,
            ecommerce_trend=record.ecommerce_trend,
            physical_score=record.physical_score,
            ecommerce_score=record.ecommerce_score,
            data_points=record.data_points,
            years_analyzed=record.years_analyzed,
        )
