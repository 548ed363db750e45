# Project: rainfall-insights
# Owner: GreenUnicorn
"""
anomaly.py — Label each year by how far its rainfall sits from the
long-run mean, in population standard deviations.
"""

from __future__ import annotations

import math
import statistics
from collections.abc import Sequence

from rainfall_insights.models import BucketSummary, Category, ExtremeEvent
from rainfall_insights.utils import round_half_away

EXTREME_THRESHOLD = 1.5
NOTABLE_THRESHOLD = 0.75

CATEGORY_LABELS = {
    Category.EXTREME_HIGH: "Extreme High",
    Category.HIGH:         "Above Average",
    Category.NORMAL:       "Normal",
    Category.LOW:          "Below Average",
    Category.EXTREME_LOW:  "Extreme Low",
}


def categorize(deviation: float) -> Category:
    """Map a deviation (in σ units) to a category; first matching rule wins."""
    if deviation > EXTREME_THRESHOLD:
        return Category.EXTREME_HIGH
    if deviation > NOTABLE_THRESHOLD:
        return Category.HIGH
    if deviation < -EXTREME_THRESHOLD:
        return Category.EXTREME_LOW
    if deviation < -NOTABLE_THRESHOLD:
        return Category.LOW
    return Category.NORMAL


def classify_years(annual: Sequence[BucketSummary]) -> list[ExtremeEvent]:
    """Classify every year of an annual rainfall series.

    μ and σ are population statistics (divide by N) over the years passed
    in, so the result depends on the whole series: classifying a filtered
    subset of years can move every year's category, not only the ones
    removed.

    If σ is 0 (all totals equal, or a single year) every year is NORMAL with
    deviation 0.0. A year with no rainfall readings (NaN total) is NORMAL
    with deviation NaN and does not count towards μ and σ.

    Args:
        annual: Year-granularity BucketSummary list, one per year.

    Returns:
        One ExtremeEvent per input year, in input order.
    """
    totals = [b.total_precipitation for b in annual if not math.isnan(b.total_precipitation)]
    if not totals:
        mu, sigma = math.nan, 0.0
    else:
        mu = statistics.fmean(totals)
        sigma = statistics.pstdev(totals)

    events = []
    for bucket in annual:
        total = bucket.total_precipitation
        if math.isnan(total):
            deviation, category = math.nan, Category.NORMAL
        elif sigma == 0:
            deviation, category = 0.0, Category.NORMAL
        else:
            raw = (total - mu) / sigma
            deviation, category = round_half_away(raw, 2), categorize(raw)
        events.append(ExtremeEvent(
            year=bucket.year,
            total_rainfall=total,
            deviation=deviation,
            category=category,
        ))
    return events


def category_counts(events: Sequence[ExtremeEvent]) -> dict[Category, int]:
    """Number of years in each category (every category present, possibly 0)."""
    counts = {category: 0 for category in Category}
    for event in events:
        counts[event.category] += 1
    return counts


def wettest_and_driest(events: Sequence[ExtremeEvent]) -> tuple[ExtremeEvent | None, ExtremeEvent | None]:
    """Return the (wettest, driest) years, ignoring years with no total."""
    defined = [e for e in events if not math.isnan(e.total_rainfall)]
    if not defined:
        return None, None
    wettest = max(defined, key=lambda e: e.total_rainfall)
    driest = min(defined, key=lambda e: e.total_rainfall)
    return wettest, driest
