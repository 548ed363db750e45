# Project: rainfall-insights
# Owner: GreenUnicorn
"""
report.py — Plain-text summaries of the rainfall statistics for the CLI.
"""

from __future__ import annotations

import math
import shutil

from rainfall_insights.anomaly import CATEGORY_LABELS, category_counts, wettest_and_driest
from rainfall_insights.correlation import VARIABLE_LABELS, correlation_strength
from rainfall_insights.models import Category, CorrelationResult, ExtremeEvent
from rainfall_insights.utils import fmt_value

SEPARATOR = "─" * 62

# Columns left over for the label, frame and value beside each bar
BAR_MARGIN = 30


def terminal_summary(
    city: str,
    year_range: tuple[int, int] | None,
    overview: dict,
    events: list[ExtremeEvent],
) -> str:
    """Return a formatted multi-line summary string.

    Example:
        📍 San Francisco — 31-year rainfall analysis (1993–2023)
        ──────────────────────────────────────────────────────────────
        🌧  Total rainfall:        15872.4 mm
        ...
    """
    if year_range is None:
        return f"📍 {city} — No weather records available."

    start_yr, end_yr = year_range
    n_years = len(events) or end_yr - start_yr + 1
    wettest, driest = wettest_and_driest(events)
    counts = category_counts(events)

    def year_line(event: ExtremeEvent | None) -> str:
        if event is None:
            return "—"
        return f"{event.year} ({fmt_value(event.total_rainfall, ' mm')})"

    lines = [
        f"📍 {city} — {n_years}-year rainfall analysis ({start_yr}–{end_yr})",
        SEPARATOR,
        f"🌧  Total rainfall:        {fmt_value(overview['total'], ' mm')}",
        f"📊  Avg monthly rainfall:  {fmt_value(overview['avg_monthly'], ' mm')}"
        f"  (range: {fmt_value(overview['min_monthly'], ' mm')} to {fmt_value(overview['max_monthly'], ' mm')})",
        f"💧  Avg daily rainfall:    {fmt_value(overview['avg_daily'], ' mm', digits=2)}",
        "",
        f"🌊  Wettest year:          {year_line(wettest)}",
        f"☀️  Driest year:           {year_line(driest)}",
        f"⚠️  Extreme wet years:     {counts[Category.EXTREME_HIGH]}",
        f"🏜  Extreme dry years:     {counts[Category.EXTREME_LOW]}",
        SEPARATOR,
    ]
    return "\n".join(lines)


def extremes_table(events: list[ExtremeEvent]) -> str:
    """Fixed-width table of every year's rainfall, deviation and category."""
    lines = [f"{'Year':<6} {'Rainfall':>10} {'Dev (σ)':>8}  Category", SEPARATOR]
    for e in events:
        deviation = "—" if math.isnan(e.deviation) else f"{e.deviation:+.2f}"
        lines.append(
            f"{e.year:<6} {fmt_value(e.total_rainfall):>10} {deviation:>8}  "
            f"{CATEGORY_LABELS[e.category]}"
        )
    return "\n".join(lines)


def correlation_lines(results: list[CorrelationResult], humidity_estimated: bool = False) -> str:
    """One line per variable pair: labels, r and its strength."""
    lines = []
    for result in results:
        label_a = VARIABLE_LABELS[result.variable_a]
        label_b = VARIABLE_LABELS[result.variable_b]
        r = "—" if math.isnan(result.r) else f"{result.r:+.2f}"
        lines.append(f"  {label_a} × {label_b}: r = {r} ({correlation_strength(result.r)})")
    if humidity_estimated:
        lines.append("  Humidity is estimated from month and temperature, not measured.")
    return "\n".join(lines)


def bar_chart(
    labels: list[str],
    values: list[float],
    title: str,
    unit: str = "",
    width: int | None = None,
) -> str:
    """Horizontal ASCII bars scaled to the largest defined value.

    A NaN value gets an empty bar and '—' in place of the number.
    """
    if width is None:
        width = max(10, shutil.get_terminal_size().columns - BAR_MARGIN)

    peak = max((v for v in values if not math.isnan(v)), default=0.0)
    scale = width / peak if peak > 0 else 0.0
    label_w = max(map(len, labels), default=3)

    lines = [title]
    for label, value in zip(labels, values):
        if math.isnan(value):
            filled, shown = 0, "—"
        else:
            filled, shown = min(width, max(0, round(value * scale))), f"{value:.0f}{unit}"
        bar = "█" * filled + "░" * (width - filled)
        lines.append(f"  {label:<{label_w}} │{bar}│ {shown:>6}")
    return "\n".join(lines)
