# Project: rainfall-insights
# Owner: GreenUnicorn
"""Tests for anomaly.py — categorize, classify_years, category_counts,
wettest_and_driest."""

import math

import pytest

from rainfall_insights.anomaly import (
    categorize,
    category_counts,
    classify_years,
    wettest_and_driest,
)
from rainfall_insights.models import BucketSummary, Category, Granularity


def annual(totals: dict[int, float]) -> list[BucketSummary]:
    return [
        BucketSummary(
            key=(year,),
            granularity=Granularity.YEAR,
            total_precipitation=total,
            mean_temperature=math.nan,
            mean_humidity=math.nan,
            sample_count=365,
        )
        for year, total in totals.items()
    ]


# ---------------------------------------------------------------------------
# categorize
# ---------------------------------------------------------------------------

class TestCategorize:

    @pytest.mark.parametrize("deviation,expected", [
        (2.0,   Category.EXTREME_HIGH),
        (1.51,  Category.EXTREME_HIGH),
        (1.5,   Category.HIGH),
        (0.76,  Category.HIGH),
        (0.75,  Category.NORMAL),
        (0.0,   Category.NORMAL),
        (-0.75, Category.NORMAL),
        (-0.76, Category.LOW),
        (-1.5,  Category.LOW),
        (-1.51, Category.EXTREME_LOW),
    ])
    def test_thresholds_are_strict(self, deviation, expected):
        """Boundaries (±0.75, ±1.5) fall into the milder category."""
        assert categorize(deviation) is expected


# ---------------------------------------------------------------------------
# classify_years
# ---------------------------------------------------------------------------

class TestClassifyYears:

    def setup_method(self):
        # μ = 180, σ (population) = 160
        self.events = classify_years(annual({2001: 100, 2002: 100, 2003: 100, 2004: 100, 2005: 500}))
        self.by_year = {e.year: e for e in self.events}

    def test_one_event_per_year_in_order(self):
        assert [e.year for e in self.events] == [2001, 2002, 2003, 2004, 2005]

    def test_outlier_is_extreme_high(self):
        assert self.by_year[2005].deviation == 2.0
        assert self.by_year[2005].category is Category.EXTREME_HIGH

    def test_other_years_are_normal(self):
        for year in (2001, 2002, 2003, 2004):
            assert self.by_year[year].deviation == -0.5
            assert self.by_year[year].category is Category.NORMAL

    def test_total_carried_through(self):
        assert self.by_year[2005].total_rainfall == 500

    def test_identical_totals_are_all_normal(self):
        """σ = 0: every year is NORMAL with deviation 0.0, no division error."""
        events = classify_years(annual({2001: 100, 2002: 100, 2003: 100}))
        assert all(e.category is Category.NORMAL for e in events)
        assert all(e.deviation == 0.0 for e in events)

    def test_single_year_is_normal(self):
        events = classify_years(annual({2001: 321.0}))
        assert events[0].category is Category.NORMAL
        assert events[0].deviation == 0.0

    def test_empty_series(self):
        assert classify_years([]) == []

    def test_deviation_rounded_to_two_decimals(self):
        """μ = 20, σ = √(200/3): (30 - 20) / 8.165 = 1.2247 → 1.22."""
        events = classify_years(annual({2001: 10, 2002: 20, 2003: 30}))
        assert events[2].deviation == 1.22
        assert events[2].category is Category.HIGH
        assert events[0].deviation == -1.22
        assert events[0].category is Category.LOW

    def test_year_without_rainfall_is_excluded_from_stats(self):
        """A NaN total gets deviation NaN and does not shift μ or σ."""
        events = classify_years(annual({
            2001: 100, 2002: 100, 2003: 100, 2004: 100, 2005: 500, 2006: math.nan,
        }))
        by_year = {e.year: e for e in events}
        assert math.isnan(by_year[2006].deviation)
        assert by_year[2006].category is Category.NORMAL
        assert by_year[2005].deviation == 2.0

    def test_result_depends_on_selected_years(self):
        """Re-classifying a subset recomputes μ and σ for that subset."""
        full = classify_years(annual({2001: 100, 2002: 100, 2003: 100, 2004: 100, 2005: 500}))
        subset = classify_years(annual({2004: 100, 2005: 500}))
        assert full[-1].category is Category.EXTREME_HIGH
        assert subset[-1].deviation == 1.0
        assert subset[-1].category is Category.HIGH


# ---------------------------------------------------------------------------
# category_counts / wettest_and_driest
# ---------------------------------------------------------------------------

class TestSummaries:

    def setup_method(self):
        self.events = classify_years(annual({2001: 100, 2002: 100, 2003: 100, 2004: 100, 2005: 500}))

    def test_counts_include_every_category(self):
        counts = category_counts(self.events)
        assert set(counts) == set(Category)
        assert counts[Category.EXTREME_HIGH] == 1
        assert counts[Category.NORMAL] == 4
        assert counts[Category.EXTREME_LOW] == 0

    def test_wettest_and_driest(self):
        wettest, driest = wettest_and_driest(self.events)
        assert wettest.year == 2005
        assert driest.total_rainfall == 100

    def test_wettest_and_driest_empty(self):
        assert wettest_and_driest([]) == (None, None)
