# Project: rainfall-insights
# Owner: GreenUnicorn
"""Tests for correlation.py — pearson, correlate, correlation_matrix."""

import math
from datetime import date

import pytest

from rainfall_insights.correlation import (
    correlate,
    correlation_matrix,
    correlation_strength,
    paired_values,
    pearson,
)
from rainfall_insights.models import DailyRecord, Variable


def rec(day: int, prcp, tavg, humidity) -> DailyRecord:
    return DailyRecord(
        date=date(2020, 1, day),
        precipitation=prcp,
        temperature=tavg,
        humidity=humidity,
    )


# Rainfall rises with humidity and falls with temperature
SAMPLE_ROWS = [
    rec(1, 0.0,  18.0, 60.0),
    rec(2, 2.0,  16.0, 66.0),
    rec(3, 5.0,  15.0, 71.0),
    rec(4, 9.0,  12.0, 78.0),
    rec(5, 14.0, 10.0, 85.0),
]


# ---------------------------------------------------------------------------
# pearson
# ---------------------------------------------------------------------------

class TestPearson:

    def test_perfect_positive(self):
        assert pearson([1, 2, 3, 4], [2, 4, 6, 8]) == pytest.approx(1.0)

    def test_perfect_negative(self):
        assert pearson([1, 2, 3, 4], [8, 6, 4, 2]) == pytest.approx(-1.0)

    def test_uncorrelated(self):
        assert pearson([1, 2, 3, 4], [1, -1, -1, 1]) == pytest.approx(0.0)

    def test_zero_variance_is_nan(self):
        """A constant series has no defined correlation."""
        assert math.isnan(pearson([5, 5, 5], [1, 2, 3]))
        assert math.isnan(pearson([1, 2, 3], [7, 7, 7]))

    def test_fewer_than_two_pairs_is_nan(self):
        assert math.isnan(pearson([], []))
        assert math.isnan(pearson([1.0], [2.0]))

    def test_length_mismatch_raises(self):
        with pytest.raises(ValueError, match="lengths differ"):
            pearson([1, 2, 3], [1, 2])

    def test_result_within_bounds(self):
        r = pearson([0.1, 0.2, 0.3], [0.30000000000000004, 0.6, 0.9])
        assert -1.0 <= r <= 1.0


# ---------------------------------------------------------------------------
# paired_values / correlate
# ---------------------------------------------------------------------------

class TestCorrelate:

    def test_symmetric(self):
        """correlate(a, b) == correlate(b, a) for every pair."""
        for a in Variable:
            for b in Variable:
                assert correlate(SAMPLE_ROWS, a, b) == correlate(SAMPLE_ROWS, b, a)

    def test_self_correlation_is_one(self):
        assert correlate(SAMPLE_ROWS, Variable.RAINFALL, Variable.RAINFALL) == 1.0

    def test_direction_of_relationships(self):
        assert correlate(SAMPLE_ROWS, Variable.RAINFALL, Variable.HUMIDITY) > 0.9
        assert correlate(SAMPLE_ROWS, Variable.RAINFALL, Variable.TEMPERATURE) < -0.9

    def test_rounded_to_two_decimals(self):
        r = correlate(SAMPLE_ROWS, "rainfall", "temperature")
        assert r == round(r, 2)

    def test_rows_missing_a_value_are_skipped(self):
        rows = SAMPLE_ROWS + [rec(6, None, 30.0, 50.0), rec(7, 3.0, None, 70.0)]
        xs, ys = paired_values(rows, Variable.RAINFALL, Variable.TEMPERATURE)
        assert len(xs) == len(ys) == 5

    def test_nan_values_are_skipped(self):
        rows = SAMPLE_ROWS + [rec(6, math.nan, 30.0, 50.0)]
        xs, _ = paired_values(rows, Variable.RAINFALL, Variable.TEMPERATURE)
        assert len(xs) == 5

    def test_constant_variable_is_nan(self):
        rows = [rec(d, 0.0, 10.0 + d, 70.0) for d in range(1, 6)]
        assert math.isnan(correlate(rows, Variable.RAINFALL, Variable.TEMPERATURE))


# ---------------------------------------------------------------------------
# correlation_matrix / correlation_strength
# ---------------------------------------------------------------------------

class TestCorrelationMatrix:

    def test_three_unordered_pairs(self):
        pairs = [(r.variable_a, r.variable_b) for r in correlation_matrix(SAMPLE_ROWS)]
        assert pairs == [
            (Variable.RAINFALL, Variable.TEMPERATURE),
            (Variable.RAINFALL, Variable.HUMIDITY),
            (Variable.TEMPERATURE, Variable.HUMIDITY),
        ]

    def test_matches_correlate(self):
        for result in correlation_matrix(iter(SAMPLE_ROWS)):
            assert result.r == correlate(SAMPLE_ROWS, result.variable_a, result.variable_b)


class TestCorrelationStrength:

    @pytest.mark.parametrize("r,label", [
        (0.9, "strong"), (-0.7, "strong"),
        (0.5, "moderate"), (-0.4, "moderate"),
        (0.39, "weak"), (0.0, "weak"),
    ])
    def test_labels(self, r, label):
        assert correlation_strength(r) == label

    def test_nan_is_undefined(self):
        assert correlation_strength(math.nan) == "undefined"
