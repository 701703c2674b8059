"""
Tests for cross-state normalization of slopes.
"""
import math

import pytest

from bls_signals.signals.normalize import normalize_slopes


class TestNormalizeSlopes:

    def test_inverted_ranks_decline_higher(self):
        result = normalize_slopes({"A": 1.0, "B": -1.0}, invert=True)

        assert result.scores["A"] < result.scores["B"]
        assert result.scores["A"] == pytest.approx(35.0)
        assert result.scores["B"] == pytest.approx(65.0)

    def test_not_inverted_ranks_growth_higher(self):
        result = normalize_slopes({"A": 1.0, "B": -1.0}, invert=False)

        assert result.scores["A"] > result.scores["B"]

    def test_population_statistics(self):
        result = normalize_slopes({"A": 1.0, "B": 2.0, "C": 3.0}, invert=False)

        assert result.mean == pytest.approx(2.0)
        assert result.std == pytest.approx(math.sqrt(2 / 3))
        assert result.scores["B"] == pytest.approx(50.0)

    def test_scores_clipped_to_range(self):
        slopes = {str(i): 0.0 for i in range(50)}
        slopes["outlier"] = 100.0

        result = normalize_slopes(slopes, invert=False)

        assert all(0.0 <= s <= 100.0 for s in result.scores.values())
        assert result.scores["outlier"] == 100.0

    def test_custom_center_and_scale(self):
        result = normalize_slopes({"A": 1.0, "B": -1.0}, invert=False, center=0.0, scale=10.0)

        assert result.scores["A"] == pytest.approx(10.0)
        assert result.scores["B"] == pytest.approx(0.0)

    def test_identical_slopes_give_nan(self):
        result = normalize_slopes({"A": 0.2, "B": 0.2}, invert=True)

        assert result.std == 0.0
        assert all(math.isnan(s) for s in result.scores.values())

    def test_empty(self):
        result = normalize_slopes({}, invert=False)

        assert result.scores == {}
        assert result.mean == 0.0
        assert result.std == 0.0
