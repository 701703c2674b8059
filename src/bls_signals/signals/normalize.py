'''Cross-state z-score normalization of trend slopes into 0-100 scores.

For one category, every state's slope is standardised against the
population mean and standard deviation of all states, optionally inverted,
and mapped to ``clip(50 + component * 15, 0, 100)``.

Physical retail is inverted: a state whose store-based retail is declining
faster than its peers scores higher. E-commerce is not inverted.

Zero spread across states is not special-cased; the division follows IEEE
float rules and the scores come out NaN.
'''

from __future__ import annotations

from dataclasses import dataclass

import polars as pl

from ..config import SCORE_CENTER, SCORE_SCALE


@dataclass(frozen=True)
class NormalizedScores:
    '''Scores for one category plus the statistics they were built from.'''

    scores: dict[str, float]
    mean: float
    std: float


def normalize_slopes(
    slopes: dict[str, float],
    *,
    invert: bool,
    center: float = SCORE_CENTER,
    scale: float = SCORE_SCALE,
) -> NormalizedScores:
    '''Convert per-state slopes into bounded, comparable scores.

    Args:
        slopes: ``state -> slope`` for every state in the run.
        invert: Negate z-scores so declines score above 50.
        center: Score for a slope equal to the mean.
        scale: Score points per standard deviation.

    Returns:
        The per-state scores with the population mean and standard deviation.
    '''
    if not slopes:
        return NormalizedScores(scores={}, mean=0.0, std=0.0)

    df = pl.DataFrame(
        {'state': list(slopes), 'slope': list(slopes.values())},
        schema={'state': pl.Utf8, 'slope': pl.Float64},
    )
    stats = df.select(
        mean=pl.col('slope').mean(),
        std=pl.col('slope').std(ddof=0),
    ).row(0, named=True)

    sign = -1.0 if invert else 1.0
    z = (pl.col('slope') - stats['mean']) / stats['std']
    scored = df.select(
        'state',
        score=(pl.lit(center) + z * sign * scale).clip(0.0, 100.0),
    )
    return NormalizedScores(
        scores=dict(scored.iter_rows()),
        mean=stats['mean'],
        std=stats['std'],
    )
