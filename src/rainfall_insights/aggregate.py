# Project: rainfall-insights
# Owner: GreenUnicorn
"""
aggregate.py — Group daily records into month/season/year buckets and
summarise them.

All calculations use the Python standard library only (no numpy/scipy).
Values are kept at full precision; rounding happens at display time.

Two rainfall averages are reported and are not interchangeable:
  - "average monthly rainfall" is the mean of per-month totals
    (monthly_climatology, overview_stats["avg_monthly"]);
  - "average daily rainfall" is the mean of daily readings
    (overview_stats["avg_daily"]).
"""

from __future__ import annotations

import math
from collections import defaultdict
from collections.abc import Iterable, Sequence

from rainfall_insights.models import (
    SEASON_ORDER,
    BucketSummary,
    DailyRecord,
    Granularity,
    Season,
    season_for_month,
)

# A day counts as a rain day above this many mm
RAIN_DAY_THRESHOLD_MM = 1.0

YearRange = tuple[int, int]


def _mean(values: list[float]) -> float:
    """Arithmetic mean, or NaN for an empty list."""
    return math.fsum(values) / len(values) if values else math.nan


def _bucket_key(record: DailyRecord, granularity: Granularity) -> tuple:
    if granularity is Granularity.YEAR:
        return (record.year,)
    if granularity is Granularity.MONTH:
        return (record.year, record.month)
    return (record.year, season_for_month(record.month))


def _sort_key(key: tuple) -> tuple:
    # Seasons sort in calendar order, not alphabetically
    if len(key) == 2 and isinstance(key[1], Season):
        return (key[0], SEASON_ORDER.index(key[1]))
    return key


def filter_years(
    records: Iterable[DailyRecord],
    year_range: YearRange | None = None,
) -> list[DailyRecord]:
    """Keep records whose year lies in the inclusive (start, end) range."""
    if year_range is None:
        return list(records)
    start, end = year_range
    return [r for r in records if start <= r.year <= end]


def year_bounds(records: Sequence[DailyRecord]) -> YearRange | None:
    """Return (first_year, last_year) of the record set, or None if empty."""
    if not records:
        return None
    years = [r.year for r in records]
    return min(years), max(years)


def summarize_bucket(
    key: tuple,
    granularity: Granularity,
    days: Sequence[DailyRecord],
) -> BucketSummary:
    """Compute descriptive statistics for the records of one bucket.

    Null readings are skipped by count: a bucket whose days have no
    temperature gets a NaN mean, not 0.
    """
    rain = [d.precipitation for d in days if d.precipitation is not None]
    temps = [d.temperature for d in days if d.temperature is not None]
    humid = [d.humidity for d in days if d.humidity is not None]

    return BucketSummary(
        key=key,
        granularity=granularity,
        total_precipitation=math.fsum(rain) if rain else math.nan,
        mean_temperature=_mean(temps),
        mean_humidity=_mean(humid),
        sample_count=len(days),
        humidity_estimated=any(d.humidity_estimated for d in days),
        rain_days=sum(1 for v in rain if v > RAIN_DAY_THRESHOLD_MM),
        max_daily_precipitation=max(rain) if rain else math.nan,
    )


def aggregate(
    records: Iterable[DailyRecord],
    granularity: Granularity | str,
    year_range: YearRange | None = None,
) -> list[BucketSummary]:
    """Summarise records per (year), (year, month) or (year, season) bucket.

    Season buckets use the record's calendar year, so January and December
    of the same year share the (year, Winter) bucket.

    Args:
        records: Daily records in any order.
        granularity: Granularity.MONTH, SEASON or YEAR (or its string value).
        year_range: Optional inclusive (start_year, end_year) filter.

    Returns:
        One BucketSummary per non-empty bucket, sorted chronologically.
    """
    granularity = Granularity(granularity)
    buckets: dict[tuple, list[DailyRecord]] = defaultdict(list)
    for r in filter_years(records, year_range):
        buckets[_bucket_key(r, granularity)].append(r)

    return [
        summarize_bucket(key, granularity, buckets[key])
        for key in sorted(buckets, key=_sort_key)
    ]


def _spread(values: list[float]) -> dict:
    """avg/min/max of a list of totals, NaN for an empty list."""
    if not values:
        return {"avg": math.nan, "min": math.nan, "max": math.nan, "count": 0}
    return {
        "avg":   _mean(values),
        "min":   min(values),
        "max":   max(values),
        "count": len(values),
    }


def monthly_climatology(
    records: Iterable[DailyRecord],
    year_range: YearRange | None = None,
) -> list[dict]:
    """Average, minimum and maximum monthly rainfall per calendar month.

    Each statistic is taken over the per-(year, month) totals, so "avg" for
    January is the mean of all January totals. Months with no data are left
    out.

    Returns:
        List of dicts sorted by month with keys:
            month (int 1-12), avg_rainfall, min_rainfall, max_rainfall,
            avg_temperature, years (number of monthly totals)
    """
    by_month: dict[int, list[BucketSummary]] = defaultdict(list)
    for bucket in aggregate(records, Granularity.MONTH, year_range):
        by_month[bucket.month].append(bucket)

    result = []
    for month in sorted(by_month):
        buckets = by_month[month]
        totals = [b.total_precipitation for b in buckets if not math.isnan(b.total_precipitation)]
        temps = [b.mean_temperature for b in buckets if not math.isnan(b.mean_temperature)]
        spread = _spread(totals)
        result.append({
            "month":           month,
            "avg_rainfall":    spread["avg"],
            "min_rainfall":    spread["min"],
            "max_rainfall":    spread["max"],
            "avg_temperature": _mean(temps),
            "years":           spread["count"],
        })
    return result


def seasonal_climatology(
    records: Iterable[DailyRecord],
    year_range: YearRange | None = None,
) -> list[dict]:
    """Average, minimum and maximum seasonal rainfall across years.

    Returns:
        Four dicts in SEASON_ORDER with keys season (Season), avg_rainfall,
        min_rainfall, max_rainfall, years. Seasons with no data carry NaN.
    """
    by_season: dict[Season, list[float]] = defaultdict(list)
    for bucket in aggregate(records, Granularity.SEASON, year_range):
        if not math.isnan(bucket.total_precipitation):
            by_season[bucket.season].append(bucket.total_precipitation)

    result = []
    for season in SEASON_ORDER:
        spread = _spread(by_season.get(season, []))
        result.append({
            "season":       season,
            "avg_rainfall": spread["avg"],
            "min_rainfall": spread["min"],
            "max_rainfall": spread["max"],
            "years":        spread["count"],
        })
    return result


def seasonal_grid(
    records: Iterable[DailyRecord],
    year_range: YearRange | None = None,
) -> list[dict]:
    """Year x season rainfall totals for the heatmap.

    Returns:
        One dict per year: {"year": int, Season.WINTER: float | None, ...}.
        A season with no records that year is None, not 0.
    """
    totals: dict[int, dict[Season, float | None]] = {}
    for bucket in aggregate(records, Granularity.SEASON, year_range):
        row = totals.setdefault(bucket.year, {s: None for s in SEASON_ORDER})
        if not math.isnan(bucket.total_precipitation):
            row[bucket.season] = bucket.total_precipitation
    return [{"year": year, **totals[year]} for year in sorted(totals)]


def overview_stats(
    records: Iterable[DailyRecord],
    year_range: YearRange | None = None,
) -> dict:
    """Headline rainfall figures for the overview tab.

    Returns:
        Dict with keys:
            total (sum of all daily rainfall),
            avg_monthly, max_monthly, min_monthly (over per-month totals),
            avg_daily (mean of daily readings),
            months, days (counts behind those figures)
        Figures are NaN when there is no rainfall data in range.
    """
    selected = filter_years(records, year_range)
    daily = [r.precipitation for r in selected if r.precipitation is not None]
    monthly = [
        b.total_precipitation
        for b in aggregate(selected, Granularity.MONTH)
        if not math.isnan(b.total_precipitation)
    ]
    spread = _spread(monthly)
    return {
        "total":       math.fsum(daily) if daily else math.nan,
        "avg_monthly": spread["avg"],
        "max_monthly": spread["max"],
        "min_monthly": spread["min"],
        "avg_daily":   _mean(daily),
        "months":      len(monthly),
        "days":        len(daily),
    }


def period_means(
    records: Iterable[DailyRecord],
    year_range: YearRange | None = None,
) -> dict | None:
    """City-wide means over the monthly buckets in range.

    Returns:
        Dict with rainfall (mean monthly total, mm), temperature (°C) and
        humidity (%), or None if no records fall in range.
    """
    monthly = aggregate(records, Granularity.MONTH, year_range)
    if not monthly:
        return None

    def column(attr: str) -> list[float]:
        values = (getattr(b, attr) for b in monthly)
        return [v for v in values if not math.isnan(v)]

    return {
        "rainfall":    _mean(column("total_precipitation")),
        "temperature": _mean(column("mean_temperature")),
        "humidity":    _mean(column("mean_humidity")),
        "humidity_estimated": any(b.humidity_estimated for b in monthly),
    }
