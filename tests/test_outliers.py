"""
Tests for outlier detection and correction of state scores.
"""
import pytest

from bls_signals.signals.outliers import (
    clamp_to_band,
    detect_and_correct_outliers,
    log_outlier_analysis,
    score_stats,
)


def spread_scores():
    scores = {f"S{i:02d}": 50.0 + (i % 3) for i in range(20)}
    scores["HI"] = 100.0
    return scores


class TestDetectAndCorrectOutliers:
    """Tests for the median-distance outlier rule."""

    def test_replaces_outlier_with_median(self):
        scores = spread_scores()

        analysis = detect_and_correct_outliers(scores, threshold=2.0)

        assert analysis.outliers == ["HI"]
        assert analysis.corrected_scores["HI"] == analysis.median
        assert analysis.replacements == {"HI": analysis.median}

    def test_non_outliers_unchanged(self):
        scores = spread_scores()

        analysis = detect_and_correct_outliers(scores, threshold=2.0)

        for state, score in scores.items():
            if state != "HI":
                assert analysis.corrected_scores[state] == score

    def test_input_not_mutated(self):
        scores = spread_scores()

        detect_and_correct_outliers(scores, threshold=2.0)

        assert scores["HI"] == 100.0

    def test_no_outliers_in_tight_distribution(self):
        scores = {"A": 49.0, "B": 50.0, "C": 51.0}

        analysis = detect_and_correct_outliers(scores, threshold=2.0)

        assert analysis.outliers == []
        assert analysis.corrected_scores == scores

    def test_statistics(self):
        analysis = detect_and_correct_outliers({"A": 10.0, "B": 20.0, "C": 60.0})

        assert analysis.median == pytest.approx(20.0)
        assert analysis.mean == pytest.approx(30.0)
        assert analysis.standard_deviation == pytest.approx((1400 / 3) ** 0.5)

    def test_clamp_policy(self):
        scores = spread_scores()

        analysis = detect_and_correct_outliers(scores, threshold=2.0, correction=clamp_to_band)
        stats = score_stats(scores, 2.0)

        expected = stats.median + 2.0 * stats.standard_deviation
        assert analysis.corrected_scores["HI"] == pytest.approx(expected)

    def test_empty(self):
        analysis = detect_and_correct_outliers({})

        assert analysis.outliers == []
        assert analysis.corrected_scores == {}
        assert analysis.standard_deviation == 0.0

    def test_log_lists_replacements(self, caplog):
        caplog.set_level("INFO", logger="bls_signals")
        analysis = detect_and_correct_outliers(spread_scores(), threshold=2.0)

        log_outlier_analysis(analysis, "physical")

        assert any("HI=" in r.getMessage() for r in caplog.records)
