'''Detect and correct outlying state scores.

A state is an outlier when its score lies more than ``threshold`` population
standard deviations from the median of all scores. The replacement value is
chosen by a correction policy so callers can swap the rule without touching
detection.
'''

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

import polars as pl

from ..config import OUTLIER_THRESHOLD

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreStats:
    median: float
    mean: float
    standard_deviation: float
    threshold: float


CorrectionPolicy = Callable[[float, ScoreStats], float]


def replace_with_median(score: float, stats: ScoreStats) -> float:
    return stats.median


def clamp_to_band(score: float, stats: ScoreStats) -> float:
    '''Pull *score* back to the nearest edge of ``median ± threshold * std``.'''
    reach = stats.threshold * stats.standard_deviation
    return min(max(score, stats.median - reach), stats.median + reach)


@dataclass(frozen=True)
class OutlierAnalysis:
    outliers: list[str]
    corrected_scores: dict[str, float]
    median: float
    mean: float
    standard_deviation: float
    replacements: dict[str, float] = field(default_factory=dict)


def score_stats(scores: dict[str, float], threshold: float) -> ScoreStats:
    values = pl.Series('score', list(scores.values()), dtype=pl.Float64)
    return ScoreStats(
        median=values.median(),
        mean=values.mean(),
        standard_deviation=values.std(ddof=0),
        threshold=threshold,
    )


def detect_and_correct_outliers(
    scores: dict[str, float],
    threshold: float = OUTLIER_THRESHOLD,
    correction: CorrectionPolicy = replace_with_median,
) -> OutlierAnalysis:
    '''Flag scores far from the median and replace them via *correction*.

    Args:
        scores: ``state -> score`` for one category.
        threshold: Allowed distance from the median, in standard deviations.
        correction: Policy returning the replacement for an outlying score.

    Returns:
        The outlier states (in input order), the corrected score map (a
        copy; non-outliers unchanged), the replacements made, and the
        distribution statistics. Empty input yields zeroed statistics.
    '''
    if not scores:
        return OutlierAnalysis(
            outliers=[], corrected_scores={}, median=0.0, mean=0.0, standard_deviation=0.0
        )

    stats = score_stats(scores, threshold)
    reach = threshold * stats.standard_deviation
    corrected = dict(scores)
    outliers = []
    replacements = {}
    for state, score in scores.items():
        if abs(score - stats.median) > reach:
            outliers.append(state)
            replacements[state] = corrected[state] = correction(score, stats)

    return OutlierAnalysis(
        outliers=outliers,
        corrected_scores=corrected,
        median=stats.median,
        mean=stats.mean,
        standard_deviation=stats.standard_deviation,
        replacements=replacements,
    )


def log_outlier_analysis(analysis: OutlierAnalysis, score_type: str) -> None:
    log.info(
        '%s score outliers: mean=%.2f median=%.2f std=%.2f outliers=%d',
        score_type, analysis.mean, analysis.median, analysis.standard_deviation, len(analysis.outliers),
    )
    if analysis.outliers:
        log.info(
            'Outlier %s scores replaced: %s',
            score_type,
            ', '.join(f'{s}={analysis.replacements[s]:.2f}' for s in analysis.outliers),
        )
