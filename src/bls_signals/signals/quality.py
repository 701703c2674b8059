'''Data-quality diagnostics for a yearly LQ series.

Looks for technical problems only (zero or negative values, missing years,
statistical spikes); it never judges whether a trend is plausible.
'''

from __future__ import annotations

from dataclasses import dataclass, field

import polars as pl

from ..models import TrendPoint


@dataclass(frozen=True)
class YearGap:
    from_year: int
    to_year: int
    gap_size: int


@dataclass(frozen=True)
class QualityIssue:
    year: int
    value: float
    reason: str


@dataclass(frozen=True)
class DataQualityMetrics:
    '''Summary of one series.

    Attributes:
        data_quality_score: 0-100, higher is better; the mean of the valid
            ratio, the share of year steps without a large gap and the share
            of points without an issue.
    '''

    total_data_points: int
    valid_data_points: int
    zero_value_count: int
    negative_value_count: int
    large_gaps: list[YearGap] = field(default_factory=list)
    outliers: list[QualityIssue] = field(default_factory=list)
    data_quality_score: int = 0


def analyze_data_quality(
    points: list[TrendPoint],
    *,
    max_gap_years: int = 3,
    outlier_threshold: float = 2.5,
    min_valid_points: int = 5,
) -> DataQualityMetrics:
    '''Assess *points* for zeros, negatives, gaps and statistical outliers.

    Args:
        points: Observations in any order.
        max_gap_years: Year steps larger than this count as gaps.
        outlier_threshold: Z-score beyond which a positive value is flagged.
        min_valid_points: Positive values needed before z-scores are computed.
    '''
    ordered = sorted(points, key=lambda p: p.year)
    total = len(ordered)
    if total == 0:
        return DataQualityMetrics(0, 0, 0, 0)

    zeros = negatives = 0
    issues: list[QualityIssue] = []
    gaps: list[YearGap] = []
    for i, point in enumerate(ordered):
        if point.retail_lq == 0:
            zeros += 1
            issues.append(QualityIssue(point.year, point.retail_lq, 'zero_value'))
        elif point.retail_lq < 0:
            negatives += 1
            issues.append(QualityIssue(point.year, point.retail_lq, 'negative_value'))
        if i > 0:
            gap = point.year - ordered[i - 1].year
            if gap > max_gap_years:
                gaps.append(YearGap(ordered[i - 1].year, point.year, gap))

    positive = [p for p in ordered if p.retail_lq > 0]
    if len(positive) >= min_valid_points:
        values = pl.Series('retail_lq', [p.retail_lq for p in positive], dtype=pl.Float64)
        mean = values.mean()
        std = values.std(ddof=0)
        if std > 0:
            for p in positive:
                z = abs(p.retail_lq - mean) / std
                if z > outlier_threshold:
                    issues.append(QualityIssue(p.year, p.retail_lq, f'statistical_outlier_z{z:.1f}'))

    factors = (
        len(positive) / total,
        1 - len(gaps) / max(1, total - 1),
        1 - len(issues) / total,
    )
    return DataQualityMetrics(
        total_data_points=total,
        valid_data_points=len(positive),
        zero_value_count=zeros,
        negative_value_count=negatives,
        large_gaps=gaps,
        outliers=issues,
        data_quality_score=round(sum(factors) / len(factors) * 100),
    )
