'''Trend fitting, cross-state normalization and scoring.

- :mod:`~bls_signals.signals.trend` -- least-squares slopes and trend labels.
- :mod:`~bls_signals.signals.normalize` -- z-score slopes into 0-100 scores.
- :mod:`~bls_signals.signals.outliers` -- median-based outlier correction.
- :mod:`~bls_signals.signals.quality` -- diagnostics for a yearly series.
- :mod:`~bls_signals.signals.calculator` -- the per-run orchestration.
'''

from .calculator import SignalCalculator, latest_signals
from .normalize import NormalizedScores, normalize_slopes
from .outliers import OutlierAnalysis, clamp_to_band, detect_and_correct_outliers, replace_with_median
from .quality import DataQualityMetrics, analyze_data_quality
from .trend import calculate_trend_slope, determine_trend_category, weighted_category_slope

__all__ = [
    'SignalCalculator',
    'latest_signals',
    'NormalizedScores',
    'normalize_slopes',
    'OutlierAnalysis',
    'clamp_to_band',
    'detect_and_correct_outliers',
    'replace_with_median',
    'DataQualityMetrics',
    'analyze_data_quality',
    'calculate_trend_slope',
    'determine_trend_category',
    'weighted_category_slope',
]
