"""
Tests for the correlation math helpers.

Covers: Pearson closed form and its degenerate cases, confidence tiers,
direction labels and half-up presentation rounding.
"""
import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from analytics.correlation_math import (
    confidence_label,
    direction_label,
    pearson_correlation,
    round2,
)


# ─── pearson_correlation ─────────────────────────────────────


class TestPearsonCorrelation:

    def test_identical_vectors_are_perfectly_correlated(self):
        x = [1, 2, 3, 4, 5, 6, 7, 8, 9, 10]
        assert pearson_correlation(x, x) == 1.0

    def test_reversed_vector_is_perfectly_anticorrelated(self):
        x = [1, 2, 3, 4, 5]
        assert pearson_correlation(x, list(reversed(x))) == pytest.approx(-1.0)

    def test_scale_invariance(self):
        x = [1, 3, 2, 5, 4, 4, 0]
        y = [2, 4, 1, 5, 5, 3, 1]
        r = pearson_correlation(x, y)
        scaled = [2.5 * v + 7 for v in x]
        assert pearson_correlation(scaled, y) == pytest.approx(r)

    def test_known_value(self):
        # hand-computed: Sxy num = -80, sqrt(64 * 124)
        x = [0, 2, 0, 2, 0, 2, 0, 2]
        y = [3, 2, 5, 2, 5, 2, 5, 2]
        assert pearson_correlation(x, y) == pytest.approx(-80 / (64 * 124) ** 0.5)

    def test_constant_series_returns_zero(self):
        assert pearson_correlation([3, 3, 3, 3], [1, 2, 3, 4]) == 0
        assert pearson_correlation([1, 2, 3, 4], [0, 0, 0, 0]) == 0

    def test_mismatched_lengths_return_zero(self):
        assert pearson_correlation([1, 2, 3], [1, 2]) == 0

    def test_too_short_returns_zero(self):
        assert pearson_correlation([1], [1]) == 0
        assert pearson_correlation([], []) == 0

    def test_result_is_plain_float(self):
        assert isinstance(pearson_correlation([1, 2, 3], [2, 4, 7]), float)


# ─── Confidence + direction ──────────────────────────────────


class TestConfidenceLabel:

    @pytest.mark.parametrize("r, n, expected", [
        (0.6, 20, "high"),
        (-0.75, 25, "high"),
        (0.59, 20, "medium"),
        (0.6, 19, "medium"),
        (0.4, 10, "medium"),
        (1.0, 9, "low"),
        (0.39, 100, "low"),
        (0.3, 5, "low"),
    ])
    def test_tiers(self, r, n, expected):
        assert confidence_label(r, n) == expected

    def test_custom_tiers(self):
        assert confidence_label(0.5, 6, high_samples=5, high_r=0.5) == "high"


class TestDirectionLabel:

    def test_positive_at_threshold(self):
        assert direction_label(0.3) == "positive"

    def test_negative_at_threshold(self):
        assert direction_label(-0.3) == "negative"

    def test_neutral_inside_band(self):
        assert direction_label(0.29) == "neutral"
        assert direction_label(0.0) == "neutral"

    def test_custom_threshold(self):
        assert direction_label(0.3, threshold=0.5) == "neutral"


# ─── Rounding ────────────────────────────────────────────────


class TestRound2:

    def test_repeating_decimal(self):
        assert round2(1 / 3) == 0.33

    def test_half_rounds_up(self):
        assert round2(0.125) == 0.13
        assert round2(2.5) == 2.5

    def test_negative_half_rounds_towards_positive(self):
        assert round2(-0.125) == -0.12

    def test_whole_number_unchanged(self):
        assert round2(1.0) == 1.0
