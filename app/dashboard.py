# Project: rainfall-insights
# Owner: GreenUnicorn
"""
dashboard.py — Streamlit rainfall dashboard with a dark UI.

Run with:
    streamlit run app/dashboard.py
    streamlit run app/dashboard.py -- --config path/to/config.toml

Requires: pip install -e ".[ui]"
"""

import sys
from pathlib import Path

# Ensure the src/ package is importable when running from the project root
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import argparse
import math

import pandas as pd
import plotly.graph_objects as go
import streamlit as st
from plotly.subplots import make_subplots

from rainfall_insights.aggregate import (
    aggregate,
    monthly_climatology,
    overview_stats,
    period_means,
    seasonal_climatology,
    seasonal_grid,
    year_bounds,
)
from rainfall_insights.anomaly import CATEGORY_LABELS, category_counts, classify_years, wettest_and_driest
from rainfall_insights.cache import RecordCache
from rainfall_insights.config import load_config
from rainfall_insights.correlation import (
    VARIABLE_LABELS,
    correlate,
    correlation_matrix,
    correlation_strength,
    paired_values,
)
from rainfall_insights.export import export_csv
from rainfall_insights.geo import enrich_boundaries, fetch_boundaries, region_indices
from rainfall_insights.models import SEASON_ORDER, Category, Granularity, Variable
from rainfall_insights.source import SourceUnavailableError, load_records_from_config
from rainfall_insights.utils import fmt_month, fmt_value


# ─────────────────────────────────────────────────────────────
# Page config: the first Streamlit call
# ─────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="Rainfall Insights",
    page_icon="🌧",
    layout="wide",
    initial_sidebar_state="collapsed",
)


# ─────────────────────────────────────────────────────────────
# CSS injection
# ─────────────────────────────────────────────────────────────

DARK_CSS = """
<style>
  #MainMenu, footer, header { visibility: hidden; }
  .block-container { padding-top: 2rem; padding-bottom: 4rem; max-width: 1100px; }

  html, body, [class*="css"] {
    font-family: -apple-system, BlinkMacSystemFont, "SF Pro Display",
                 "SF Pro Text", "Segoe UI", Roboto, sans-serif;
    background-color: #0a0a0a;
    color: #f5f5f7;
  }

  .stat-pill {
    background: #2c2c2e;
    border-radius: 12px;
    padding: 14px 18px;
    display: inline-block;
    width: 100%;
  }
  .stat-label {
    font-size: 0.68rem;
    text-transform: uppercase;
    letter-spacing: 0.08em;
    color: #8e8e93;
    font-weight: 500;
  }
  .stat-value {
    font-size: 1.6rem;
    font-weight: 700;
    letter-spacing: -0.03em;
    color: #f5f5f7;
    line-height: 1.2;
  }
  .stat-unit { font-size: 0.9rem; color: #8e8e93; font-weight: 400; }

  .error-card {
    background: rgba(255, 69, 58, 0.1);
    border: 1px solid rgba(255, 69, 58, 0.3);
    border-radius: 12px;
    color: #ff453a;
    font-size: 1rem;
    padding: 20px 24px;
    text-align: center;
    margin: 1rem 0;
  }

  .condition-line {
    color: #8e8e93;
    font-size: 0.95rem;
    letter-spacing: -0.01em;
    margin-top: 1rem;
    text-align: center;
  }

  .section-label {
    font-size: 0.72rem;
    text-transform: uppercase;
    letter-spacing: 0.1em;
    color: #636366;
    font-weight: 600;
    margin-bottom: 0.75rem;
  }

  .derived-note { color: #ff9f0a; font-size: 0.8rem; margin-top: 0.25rem; }

  .wa-footer {
    text-align: center;
    color: #48484a;
    font-size: 0.8rem;
    padding: 3rem 0 1rem;
    letter-spacing: -0.005em;
  }
</style>
"""

st.markdown(DARK_CSS, unsafe_allow_html=True)


# ─────────────────────────────────────────────────────────────
# Plotly base layout (dark, no background)
# ─────────────────────────────────────────────────────────────

PLOTLY_LAYOUT = dict(
    paper_bgcolor="rgba(0,0,0,0)",
    plot_bgcolor="rgba(0,0,0,0)",
    font=dict(
        family="-apple-system, BlinkMacSystemFont, 'SF Pro Display', sans-serif",
        color="#8e8e93",
        size=12,
    ),
    margin=dict(l=8, r=8, t=32, b=8),
    legend=dict(bgcolor="rgba(0,0,0,0)", font=dict(color="#8e8e93")),
    xaxis=dict(showgrid=False, zeroline=False, tickfont=dict(color="#636366")),
    yaxis=dict(gridcolor="#2c2c2e", zeroline=False, tickfont=dict(color="#636366")),
)

CHART_CONFIG = {"displayModeBar": False}

CATEGORY_COLORS = {
    Category.EXTREME_HIGH: "#ff453a",
    Category.HIGH:         "#ff9f0a",
    Category.NORMAL:       "#0a84ff",
    Category.LOW:          "#64d2ff",
    Category.EXTREME_LOW:  "#bf5af2",
}

DERIVED_NOTE = (
    '<div class="derived-note">Humidity is estimated from month and temperature '
    "(no humidity column in the source), not measured.</div>"
)


# ─────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────


def stat_html(label: str, value: str, unit: str = "") -> str:
    """Render a stat pill as HTML."""
    return f"""
    <div class="stat-pill">
      <div class="stat-label">{label}</div>
      <div class="stat-value">{value}<span class="stat-unit"> {unit}</span></div>
    </div>
    """


def section(label: str) -> None:
    st.markdown(f'<div class="section-label">{label}</div>', unsafe_allow_html=True)


def error_card(message: str) -> None:
    st.markdown(f'<div class="error-card">⚠️ {message}</div>', unsafe_allow_html=True)


def _nan_to_none(value: float | None) -> float | None:
    """Plotly draws gaps for None; NaN is not JSON-safe everywhere."""
    if value is None or math.isnan(value):
        return None
    return value


# ─────────────────────────────────────────────────────────────
# CLI arg parsing (supports: streamlit run app/dashboard.py -- --config X)
# ─────────────────────────────────────────────────────────────


def _parse_cli_args() -> str:
    """Parse --config from sys.argv after the '--' separator."""
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument("--config", type=str, default="config.toml")

    # Streamlit forwards argv after '--'; gracefully ignore unknown flags
    try:
        sep = sys.argv.index("--")
        script_args = sys.argv[sep + 1:]
    except ValueError:
        script_args = sys.argv[1:]

    args, _ = parser.parse_known_args(script_args)
    return args.config


CONFIG_PATH = _parse_cli_args()


# ─────────────────────────────────────────────────────────────
# Composition root: one record cache per server process
# ─────────────────────────────────────────────────────────────


@st.cache_resource
def get_record_cache() -> RecordCache:
    return RecordCache()


@st.cache_data(ttl=86400, show_spinner=False)
def load_boundaries(url: str, timeout: float) -> dict:
    return fetch_boundaries(url, timeout=timeout)


def load_data() -> dict:
    """Load config and the cached record set.

    Returns a dict with keys config (dict) and records (list[DailyRecord]),
    or {"error": str} on any failure.
    """
    try:
        config = load_config(Path(CONFIG_PATH))
    except (FileNotFoundError, ValueError) as exc:
        return {"error": str(exc)}

    try:
        records = get_record_cache().get_or_load(lambda: load_records_from_config(config))
    except SourceUnavailableError as exc:
        return {"error": f"Weather data could not be loaded: {exc}"}

    return {"config": config, "records": records}


# ─────────────────────────────────────────────────────────────
# Tabs
# ─────────────────────────────────────────────────────────────


def render_overview(records: list, year_range: tuple[int, int]) -> None:
    stats = overview_stats(records, year_range)
    monthly = aggregate(records, Granularity.MONTH, year_range)

    c1, c2, c3, c4 = st.columns(4)
    with c1:
        st.markdown(stat_html("Total Rainfall", fmt_value(stats["total"], digits=0), "mm"), unsafe_allow_html=True)
    with c2:
        st.markdown(stat_html("Avg Monthly", fmt_value(stats["avg_monthly"]), "mm"), unsafe_allow_html=True)
    with c3:
        st.markdown(stat_html("Wettest Month", fmt_value(stats["max_monthly"]), "mm"), unsafe_allow_html=True)
    with c4:
        st.markdown(stat_html("Avg Daily", fmt_value(stats["avg_daily"], digits=2), "mm"), unsafe_allow_html=True)

    st.markdown("<div style='height:1.5rem'></div>", unsafe_allow_html=True)
    section("Monthly Rainfall Totals")

    labels = [f"{b.year}-{b.month:02d}" for b in monthly]
    fig = go.Figure(
        go.Scatter(
            x=labels,
            y=[_nan_to_none(b.total_precipitation) for b in monthly],
            name="Monthly total",
            mode="lines",
            line=dict(color="#0a84ff", width=1.5),
            fill="tozeroy",
            fillcolor="rgba(10,132,255,0.08)",
        )
    )
    fig.update_layout(**{
        **PLOTLY_LAYOUT,
        "yaxis": dict(**PLOTLY_LAYOUT["yaxis"], ticksuffix=" mm"),
        "height": 320,
        "hovermode": "x unified",
    })
    st.plotly_chart(fig, use_container_width=True, config=CHART_CONFIG)


def render_seasonal(records: list, year_range: tuple[int, int]) -> None:
    section("Average Monthly Rainfall (mean of monthly totals)")
    monthly = monthly_climatology(records, year_range)
    months = [fmt_month(m["month"]) for m in monthly]

    fig_months = make_subplots(specs=[[{"secondary_y": True}]])
    fig_months.add_trace(
        go.Bar(
            x=months,
            y=[_nan_to_none(m["avg_rainfall"]) for m in monthly],
            name="Avg (mm)",
            marker_color="rgba(10,132,255,0.7)",
            marker_line_width=0,
            error_y=dict(
                type="data",
                symmetric=False,
                array=[m["max_rainfall"] - m["avg_rainfall"] for m in monthly],
                arrayminus=[m["avg_rainfall"] - m["min_rainfall"] for m in monthly],
                color="#636366",
            ),
        ),
        secondary_y=False,
    )
    fig_months.add_trace(
        go.Scatter(
            x=months,
            y=[_nan_to_none(m["avg_temperature"]) for m in monthly],
            name="Avg Temp (°C)",
            mode="lines+markers",
            line=dict(color="#ff9f0a", width=2),
            marker=dict(color="#ff9f0a", size=5),
        ),
        secondary_y=True,
    )
    fig_months.update_layout(**PLOTLY_LAYOUT, height=300)
    fig_months.update_yaxes(ticksuffix=" mm", gridcolor="#2c2c2e", zeroline=False, secondary_y=False)
    fig_months.update_yaxes(ticksuffix="°C", showgrid=False, zeroline=False, secondary_y=True)
    st.plotly_chart(fig_months, use_container_width=True, config=CHART_CONFIG)

    bar_col, heat_col = st.columns(2)

    with bar_col:
        section("Seasonal Rainfall")
        seasons = seasonal_climatology(records, year_range)
        fig_seasons = go.Figure(
            go.Bar(
                x=[s["season"].value for s in seasons],
                y=[_nan_to_none(s["avg_rainfall"]) for s in seasons],
                marker_color="rgba(100,210,255,0.7)",
                marker_line_width=0,
            )
        )
        fig_seasons.update_layout(**{
            **PLOTLY_LAYOUT,
            "yaxis": dict(**PLOTLY_LAYOUT["yaxis"], ticksuffix=" mm"),
            "height": 320,
        })
        st.plotly_chart(fig_seasons, use_container_width=True, config=CHART_CONFIG)

    with heat_col:
        section("Rainfall by Year and Season")
        grid = seasonal_grid(records, year_range)
        fig_heat = go.Figure(
            go.Heatmap(
                x=[s.value for s in SEASON_ORDER],
                y=[str(row["year"]) for row in grid],
                z=[[row[s] for s in SEASON_ORDER] for row in grid],
                colorscale="Blues",
                hoverongaps=False,
                colorbar=dict(ticksuffix=" mm"),
            )
        )
        fig_heat.update_layout(**{**PLOTLY_LAYOUT, "height": 320})
        st.plotly_chart(fig_heat, use_container_width=True, config=CHART_CONFIG)


def render_extremes(records: list, year_range: tuple[int, int]) -> None:
    annual = aggregate(records, Granularity.YEAR, year_range)
    events = classify_years(annual)
    counts = category_counts(events)
    wettest, driest = wettest_and_driest(events)

    c1, c2, c3, c4 = st.columns(4)
    with c1:
        st.markdown(stat_html("Extreme Wet Years", str(counts[Category.EXTREME_HIGH])), unsafe_allow_html=True)
    with c2:
        st.markdown(stat_html("Extreme Dry Years", str(counts[Category.EXTREME_LOW])), unsafe_allow_html=True)
    with c3:
        value = f"{wettest.year}" if wettest else "—"
        st.markdown(stat_html("Wettest Year", value), unsafe_allow_html=True)
    with c4:
        value = f"{driest.year}" if driest else "—"
        st.markdown(stat_html("Driest Year", value), unsafe_allow_html=True)

    st.markdown(
        '<div class="condition-line">Deviation is measured against the years selected above; '
        "changing the range re-ranks every year.</div>",
        unsafe_allow_html=True,
    )

    section("Annual Rainfall by Category")
    fig = go.Figure(
        go.Bar(
            x=[str(e.year) for e in events],
            y=[_nan_to_none(e.total_rainfall) for e in events],
            marker_color=[CATEGORY_COLORS[e.category] for e in events],
            marker_line_width=0,
            customdata=[[CATEGORY_LABELS[e.category], e.deviation] for e in events],
            hovertemplate="%{x}: %{y:.1f} mm<br>%{customdata[0]} (%{customdata[1]}σ)<extra></extra>",
        )
    )
    fig.update_layout(**{
        **PLOTLY_LAYOUT,
        "yaxis": dict(**PLOTLY_LAYOUT["yaxis"], ticksuffix=" mm"),
        "height": 320,
    })
    st.plotly_chart(fig, use_container_width=True, config=CHART_CONFIG)

    df = pd.DataFrame([
        {
            "Year": e.year,
            "Rainfall (mm)": fmt_value(e.total_rainfall),
            "Deviation (σ)": e.deviation,
            "Category": CATEGORY_LABELS[e.category],
        }
        for e in events
    ])
    st.dataframe(df, use_container_width=True, hide_index=True)


def render_correlation(records: list, year_range: tuple[int, int]) -> None:
    monthly = aggregate(records, Granularity.MONTH, year_range)
    variables = list(Variable)

    col_x, col_y = st.columns(2)
    with col_x:
        x_var = st.selectbox("X axis", variables, index=1, format_func=VARIABLE_LABELS.get, key="corr_x")
    with col_y:
        y_var = st.selectbox("Y axis", variables, index=0, format_func=VARIABLE_LABELS.get, key="corr_y")

    r = correlate(monthly, x_var, y_var)
    st.markdown(
        stat_html("Pearson r", fmt_value(r, digits=2), correlation_strength(r)),
        unsafe_allow_html=True,
    )
    if any(b.humidity_estimated for b in monthly) and Variable.HUMIDITY in (x_var, y_var):
        st.markdown(DERIVED_NOTE, unsafe_allow_html=True)

    xs, ys = paired_values(monthly, x_var, y_var)
    fig = go.Figure(
        go.Scatter(
            x=xs,
            y=ys,
            mode="markers",
            marker=dict(color="#0a84ff", size=6, opacity=0.6),
        )
    )
    fig.update_layout(**{
        **PLOTLY_LAYOUT,
        "xaxis": dict(**PLOTLY_LAYOUT["xaxis"], title=VARIABLE_LABELS[x_var]),
        "yaxis": dict(**PLOTLY_LAYOUT["yaxis"], title=VARIABLE_LABELS[y_var]),
        "height": 360,
    })
    st.plotly_chart(fig, use_container_width=True, config=CHART_CONFIG)

    section("Correlation Matrix (monthly)")
    cols = st.columns(3)
    for col, result in zip(cols, correlation_matrix(monthly)):
        with col:
            label = f"{result.variable_a.value} × {result.variable_b.value}"
            st.markdown(
                stat_html(label, fmt_value(result.r, digits=2), correlation_strength(result.r)),
                unsafe_allow_html=True,
            )


def render_map(records: list, year_range: tuple[int, int], config: dict) -> None:
    means = period_means(records, year_range)
    if means is None:
        error_card("No records in the selected years.")
        return

    c1, c2, c3 = st.columns(3)
    with c1:
        st.markdown(stat_html("Mean Monthly Rainfall", fmt_value(means["rainfall"]), "mm"), unsafe_allow_html=True)
    with c2:
        st.markdown(stat_html("Mean Temperature", fmt_value(means["temperature"]), "°C"), unsafe_allow_html=True)
    with c3:
        st.markdown(stat_html("Mean Humidity", fmt_value(means["humidity"]), "%"), unsafe_allow_html=True)
    if means["humidity_estimated"]:
        st.markdown(DERIVED_NOTE, unsafe_allow_html=True)

    map_config = config["map"]
    try:
        boundaries = load_boundaries(map_config["boundaries_url"], config["fetch"]["timeout_seconds"])
    except SourceUnavailableError as exc:
        error_card(str(exc))
        return

    name_property = map_config["name_property"]
    enriched = enrich_boundaries(boundaries, means["rainfall"], name_property=name_property)
    rows = region_indices(boundaries, means["rainfall"], name_property=name_property)

    fig = go.Figure(
        go.Choroplethmap(
            geojson=enriched,
            featureidkey=f"properties.{name_property}",
            locations=[row["name"] for row in rows],
            z=[row["rain_index"] for row in rows],
            colorscale=[
                [0.0, "#38bdf8"], [0.3, "#22c55e"], [0.6, "#fbbf24"],
                [0.85, "#f97316"], [1.0, "#dc2626"],
            ],
            marker_opacity=0.8,
            marker_line_color="#ffffff",
            marker_line_width=1,
            colorbar=dict(ticksuffix=" mm"),
            hovertemplate="%{location}<br>Rain index %{z:.1f} mm<extra></extra>",
        )
    )
    fig.update_layout(
        **{k: v for k, v in PLOTLY_LAYOUT.items() if k not in ("xaxis", "yaxis")},
        map=dict(style="carto-darkmatter", center=dict(lat=37.7577, lon=-122.4376), zoom=11),
        height=520,
    )
    st.plotly_chart(fig, use_container_width=True, config=CHART_CONFIG)
    st.markdown(
        '<div class="condition-line">Rain index = city-wide mean monthly rainfall × neighbourhood '
        "factor (west is wetter, south-east drier; unlisted areas use 1.0).</div>",
        unsafe_allow_html=True,
    )


def render_export(records: list) -> None:
    section("Export Dataset")
    csv_text = export_csv(records)
    st.download_button(
        "Download CSV",
        data=csv_text.encode("utf-8"),
        file_name="san_francisco_weather_export.csv",
        mime="text/csv",
    )
    preview = pd.DataFrame([
        {
            "date": r.date,
            "prcp": r.precipitation,
            "tavg": r.temperature,
            "humidity": None if r.humidity_estimated else r.humidity,
        }
        for r in records[:50]
    ])
    st.dataframe(preview, use_container_width=True, hide_index=True)
    st.markdown(
        f'<div class="condition-line">{len(records)} rows · missing values exported as "NA"</div>',
        unsafe_allow_html=True,
    )


# ─────────────────────────────────────────────────────────────
# Main dashboard
# ─────────────────────────────────────────────────────────────


def main() -> None:
    """Render the full rainfall dashboard."""

    with st.spinner("Loading weather data…"):
        data = load_data()

    if "error" in data:
        error_card(data["error"])
        return

    config: dict = data["config"]
    records: list = data["records"]
    bounds = year_bounds(records)

    st.markdown(
        f'<h2 style="font-size:1.6rem;font-weight:700;letter-spacing:-0.03em;'
        f'margin-bottom:0.25rem;">🌧 {config["data"]["city"]} Rainfall</h2>'
        f'<div class="condition-line" style="margin-top:0;margin-bottom:1.5rem;">'
        f"{len(records)} daily records &nbsp;·&nbsp; {bounds[0]}–{bounds[1]}"
        f"</div>",
        unsafe_allow_html=True,
    )
    if any(r.date_synthesized for r in records):
        st.markdown(
            '<div class="derived-note">The source has no date column; dates are inferred from '
            f"row order starting {config['data']['start_date']:%d %b %Y} and assume no missing days.</div>",
            unsafe_allow_html=True,
        )

    if bounds[0] == bounds[1]:
        year_range = bounds
    else:
        year_range = st.slider(
            "Years",
            min_value=bounds[0],
            max_value=bounds[1],
            value=bounds,
            key="year_range",
        )

    tabs = st.tabs(["Overview", "Seasonal", "Extremes", "Correlation", "Map", "Export"])
    with tabs[0]:
        render_overview(records, year_range)
    with tabs[1]:
        render_seasonal(records, year_range)
    with tabs[2]:
        render_extremes(records, year_range)
    with tabs[3]:
        render_correlation(records, year_range)
    with tabs[4]:
        render_map(records, year_range, config)
    with tabs[5]:
        render_export(records)

    st.markdown(
        '<div class="wa-footer">'
        "Daily observations: Meteostat &nbsp;·&nbsp; Neighbourhoods: DataSF"
        f" &nbsp;·&nbsp; {bounds[1] - bounds[0] + 1} years of data ({bounds[0]}–{bounds[1]})"
        "</div>",
        unsafe_allow_html=True,
    )


main()
