# Project: rainfall-insights
# Owner: GreenUnicorn
"""
models.py — Typed records shared by the parser, aggregator, classifier and
correlation engine.

All records are frozen: derived summaries are rebuilt from the parsed daily
records on every query, never patched in place.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from enum import Enum

from rainfall_insights.utils import round_half_away


class Season(str, Enum):
    WINTER = "Winter"
    SPRING = "Spring"
    SUMMER = "Summer"
    AUTUMN = "Autumn"


# Display order used by the seasonal charts (Winter first, like the calendar year)
SEASON_ORDER = [Season.WINTER, Season.SPRING, Season.SUMMER, Season.AUTUMN]

_SEASON_BY_MONTH = {
    12: Season.WINTER, 1: Season.WINTER, 2: Season.WINTER,
    3: Season.SPRING, 4: Season.SPRING, 5: Season.SPRING,
    6: Season.SUMMER, 7: Season.SUMMER, 8: Season.SUMMER,
    9: Season.AUTUMN, 10: Season.AUTUMN, 11: Season.AUTUMN,
}


def season_for_month(month: int) -> Season:
    """Map a month number (1-12) to its meteorological season.

    Raises:
        ValueError: If month is outside 1-12.
    """
    try:
        return _SEASON_BY_MONTH[month]
    except KeyError:
        raise ValueError(f"Month must be 1-12, got {month!r}") from None


class Granularity(str, Enum):
    MONTH = "month"
    SEASON = "season"
    YEAR = "year"


class Category(str, Enum):
    EXTREME_HIGH = "extreme_high"
    HIGH = "high"
    NORMAL = "normal"
    LOW = "low"
    EXTREME_LOW = "extreme_low"


class Variable(str, Enum):
    RAINFALL = "rainfall"
    TEMPERATURE = "temperature"
    HUMIDITY = "humidity"


@dataclass(frozen=True)
class DailyRecord:
    """One parsed row of the daily weather feed.

    Missing measurements are None, never 0. ``humidity_estimated`` marks a
    humidity value derived from the seasonal model rather than measured, and
    ``date_synthesized`` marks a date inferred from the row position.
    """

    date: date
    precipitation: float | None
    temperature: float | None
    humidity: float | None = None
    humidity_estimated: bool = False
    date_synthesized: bool = False
    temp_min: float | None = None
    temp_max: float | None = None
    snow: float | None = None
    wind_direction: float | None = None
    wind_speed: float | None = None
    wind_gust: float | None = None
    pressure: float | None = None
    sunshine: float | None = None

    @property
    def year(self) -> int:
        return self.date.year

    @property
    def month(self) -> int:
        return self.date.month

    @property
    def season(self) -> Season:
        return season_for_month(self.date.month)

    @property
    def rainfall(self) -> float | None:
        return self.precipitation


@dataclass(frozen=True)
class BucketSummary:
    """Descriptive statistics for one (year), (year, month) or (year, season) bucket.

    Means are NaN when the bucket has no non-null values for that field, and
    ``total_precipitation`` is NaN when no day in the bucket has a rainfall
    reading. Values are kept at full precision; call rounded() for display.
    """

    key: tuple
    granularity: Granularity
    total_precipitation: float
    mean_temperature: float
    mean_humidity: float
    sample_count: int
    humidity_estimated: bool = False
    rain_days: int = 0
    max_daily_precipitation: float = math.nan

    @property
    def year(self) -> int:
        return self.key[0]

    @property
    def month(self) -> int | None:
        return self.key[1] if self.granularity is Granularity.MONTH else None

    @property
    def season(self) -> Season | None:
        return self.key[1] if self.granularity is Granularity.SEASON else None

    # Aliases used by the correlation engine
    @property
    def rainfall(self) -> float:
        return self.total_precipitation

    @property
    def temperature(self) -> float:
        return self.mean_temperature

    @property
    def humidity(self) -> float:
        return self.mean_humidity

    def rounded(self) -> dict:
        """Return a display dict with values rounded to one decimal place."""
        row = {"year": self.year}
        if self.granularity is Granularity.MONTH:
            row["month"] = self.month
        elif self.granularity is Granularity.SEASON:
            row["season"] = self.season.value
        row.update({
            "total_precipitation":     round_half_away(self.total_precipitation, 1),
            "mean_temperature":        round_half_away(self.mean_temperature, 1),
            "mean_humidity":           round_half_away(self.mean_humidity, 1),
            "max_daily_precipitation": round_half_away(self.max_daily_precipitation, 1),
            "rain_days":               self.rain_days,
            "sample_count":            self.sample_count,
            "humidity_estimated":      self.humidity_estimated,
        })
        return row


@dataclass(frozen=True)
class ExtremeEvent:
    """Rainfall anomaly classification for one year."""

    year: int
    total_rainfall: float
    deviation: float
    category: Category


@dataclass(frozen=True)
class CorrelationResult:
    variable_a: Variable
    variable_b: Variable
    r: float
