# Project: rainfall-insights
# Owner: GreenUnicorn
"""
correlation.py — Pearson correlation between rainfall, temperature and humidity.

Rows can be DailyRecords or BucketSummaries; anything exposing numeric
``rainfall``, ``temperature`` and ``humidity`` attributes works.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from itertools import combinations

from rainfall_insights.models import CorrelationResult, Variable
from rainfall_insights.utils import round_half_away

VARIABLE_LABELS = {
    Variable.RAINFALL:    "Rainfall (mm)",
    Variable.TEMPERATURE: "Temperature (°C)",
    Variable.HUMIDITY:    "Humidity (%)",
}


def _defined(value) -> bool:
    return value is not None and not math.isnan(value)


def paired_values(
    rows: Iterable,
    a: Variable | str,
    b: Variable | str,
) -> tuple[list[float], list[float]]:
    """Extract (xs, ys) for two variables, skipping rows missing either value."""
    attr_a, attr_b = Variable(a).value, Variable(b).value
    xs, ys = [], []
    for row in rows:
        x, y = getattr(row, attr_a), getattr(row, attr_b)
        if _defined(x) and _defined(y):
            xs.append(float(x))
            ys.append(float(y))
    return xs, ys


def pearson(xs: Sequence[float], ys: Sequence[float]) -> float:
    """Pearson product-moment correlation of two equal-length series.

    r = Σ(x-x̄)(y-ȳ) / sqrt(Σ(x-x̄)² · Σ(y-ȳ)²)

    Returns:
        r in [-1, 1], or NaN if there are fewer than two pairs or either
        series has zero variance.
    """
    if len(xs) != len(ys):
        raise ValueError(f"Series lengths differ: {len(xs)} != {len(ys)}")
    n = len(xs)
    if n < 2:
        return math.nan

    x_mean = math.fsum(xs) / n
    y_mean = math.fsum(ys) / n
    numerator = math.fsum((x - x_mean) * (y - y_mean) for x, y in zip(xs, ys))
    x_ss = math.fsum((x - x_mean) ** 2 for x in xs)
    y_ss = math.fsum((y - y_mean) ** 2 for y in ys)

    if x_ss == 0 or y_ss == 0:
        return math.nan

    r = numerator / (math.sqrt(x_ss) * math.sqrt(y_ss))
    return max(-1.0, min(1.0, r))


def correlate(rows: Iterable, a: Variable | str, b: Variable | str) -> float:
    """Correlation between two variables over *rows*, rounded to two decimals.

    Symmetric: correlate(rows, a, b) == correlate(rows, b, a).
    Returns NaN when the coefficient is undefined (see pearson).
    """
    xs, ys = paired_values(rows, a, b)
    return round_half_away(pearson(xs, ys), 2)


def correlation_matrix(rows: Iterable) -> list[CorrelationResult]:
    """All unordered variable pairs: (rainfall, temperature),
    (rainfall, humidity), (temperature, humidity)."""
    rows = list(rows)
    return [
        CorrelationResult(variable_a=a, variable_b=b, r=correlate(rows, a, b))
        for a, b in combinations(Variable, 2)
    ]


def correlation_strength(r: float) -> str:
    """Describe |r| as 'strong' (>= 0.7), 'moderate' (>= 0.4) or 'weak'."""
    if math.isnan(r):
        return "undefined"
    magnitude = abs(r)
    if magnitude >= 0.7:
        return "strong"
    if magnitude >= 0.4:
        return "moderate"
    return "weak"
