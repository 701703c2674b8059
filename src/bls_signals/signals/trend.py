'''Linear trends of location quotients over years.'''

from __future__ import annotations

import logging
import math
from collections.abc import Iterable

from ..config import SLOPE_THRESHOLD
from ..models import Category, StateYearRecord, TrendCategory, TrendPoint, WeightedSlope

log = logging.getLogger(__name__)

MIN_DATA_POINTS = 2


def calculate_trend_slope(points: Iterable[TrendPoint]) -> float:
    '''Ordinary least-squares slope of ``retail_lq`` against year.

    Points with a non-positive LQ are dropped first, and years are shifted
    so the earliest remaining year is zero.

    Args:
        points: Observations in any order.

    Returns:
        The slope in LQ per year; 0 when fewer than two usable points
        remain, NaN when every usable point falls in the same year.
    '''
    ordered = sorted(points, key=lambda p: p.year)
    if len(ordered) < MIN_DATA_POINTS:
        return 0.0

    valid = [p for p in ordered if p.retail_lq > 0]
    if len(valid) < MIN_DATA_POINTS:
        log.warning('Insufficient valid data points for slope calculation')
        return 0.0
    if len(valid) < len(ordered):
        log.debug('Filtered %d invalid data points for slope calculation', len(ordered) - len(valid))

    min_year = valid[0].year
    n = len(valid)
    sum_x = sum_y = sum_xy = sum_xx = 0.0
    for p in valid:
        x = p.year - min_year
        sum_x += x
        sum_y += p.retail_lq
        sum_xy += x * p.retail_lq
        sum_xx += x * x

    denominator = n * sum_xx - sum_x * sum_x
    if denominator == 0:
        return math.nan
    return (n * sum_xy - sum_x * sum_y) / denominator


def determine_trend_category(slope: float, threshold: float = SLOPE_THRESHOLD) -> TrendCategory:
    '''Bucket *slope*; values exactly on ``±threshold`` (and NaN) are stable.'''
    if slope < -threshold:
        return 'declining'
    if slope > threshold:
        return 'growing'
    return 'stable'


def code_trend_points(records: list[StateYearRecord], category: Category) -> dict[str, list[TrendPoint]]:
    '''Group the positive per-year LQ of every code in *category* into trend points.'''
    by_code: dict[str, list[TrendPoint]] = {}
    for record in records:
        for code, lq in record.codes_for(category).items():
            if lq > 0:
                by_code.setdefault(code, []).append(TrendPoint(year=record.year, retail_lq=lq))
    return by_code


def weighted_category_slope(records: list[StateYearRecord], category: Category) -> WeightedSlope:
    '''Combine per-code slopes into one slope weighted by each code's point count.

    Codes with fewer than two data points are ignored. With no eligible code
    the slope is 0.

    Args:
        records: All stored years for one state.
        category: ``'brick_and_mortar'`` or ``'ecommerce'``.
    '''
    weighted_sum = 0.0
    total_points = 0
    codes = 0
    for points in code_trend_points(records, category).values():
        if len(points) < MIN_DATA_POINTS:
            continue
        weighted_sum += calculate_trend_slope(points) * len(points)
        total_points += len(points)
        codes += 1

    if total_points == 0:
        return WeightedSlope(slope=0.0, data_points=0, codes=0)
    return WeightedSlope(slope=weighted_sum / total_points, data_points=total_points, codes=codes)
