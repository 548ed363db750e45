# Project: rainfall-insights
# Owner: GreenUnicorn
"""
cli.py — Command-line interface for rainfall-insights.

Commands:
  rainfall-insights summary         — headline figures + monthly climatology chart
  rainfall-insights extremes        — per-year anomaly classification
  rainfall-insights correlations    — Pearson r for every variable pair
  rainfall-insights export -o FILE  — write the parsed records back to CSV
  rainfall-insights dashboard       — start the Streamlit dashboard locally
"""

import argparse
import subprocess
import sys
from pathlib import Path

from rainfall_insights.aggregate import aggregate, monthly_climatology, overview_stats
from rainfall_insights.anomaly import classify_years
from rainfall_insights.config import DEFAULT_CONFIG_PATH, load_config
from rainfall_insights.correlation import correlation_matrix
from rainfall_insights.export import write_export
from rainfall_insights.models import Granularity
from rainfall_insights.report import bar_chart, correlation_lines, extremes_table, terminal_summary
from rainfall_insights.source import SourceUnavailableError, load_records_from_config
from rainfall_insights.utils import fmt_month

DASHBOARD_SCRIPT = Path(__file__).resolve().parents[2] / "app" / "dashboard.py"


def _year_range(args) -> tuple[int, int] | None:
    if args.start_year is None and args.end_year is None:
        return None
    return (args.start_year or 0, args.end_year or 9999)


def _load(args) -> tuple[dict, list]:
    """Load config + records, exiting with status 1 on any failure."""
    try:
        config = load_config(Path(args.config))
    except (FileNotFoundError, ValueError) as e:
        print(f"[error] {e}")
        raise SystemExit(1)
    try:
        records = load_records_from_config(config)
    except SourceUnavailableError as e:
        print(f"[error] {e}")
        raise SystemExit(1)
    return config, records


def cmd_summary(args) -> None:
    """Print headline rainfall figures and a monthly climatology bar chart."""
    config, records = _load(args)
    year_range = _year_range(args)

    annual = aggregate(records, Granularity.YEAR, year_range)
    events = classify_years(annual)
    overview = overview_stats(records, year_range)
    bounds = (annual[0].year, annual[-1].year) if annual else None

    print(terminal_summary(config["data"]["city"], bounds, overview, events))

    monthly = monthly_climatology(records, year_range)
    if monthly:
        print()
        print(bar_chart(
            [fmt_month(m["month"]) for m in monthly],
            [m["avg_rainfall"] for m in monthly],
            "Average monthly rainfall (mean of monthly totals)",
            unit=" mm",
        ))


def cmd_extremes(args) -> None:
    """Print the anomaly category of every year."""
    _, records = _load(args)
    annual = aggregate(records, Granularity.YEAR, _year_range(args))
    if _year_range(args) is not None:
        print("[note] Categories are relative to the selected years only.")
    print(extremes_table(classify_years(annual)))


def cmd_correlations(args) -> None:
    """Print Pearson r for rainfall/temperature/humidity over monthly buckets."""
    _, records = _load(args)
    monthly = aggregate(records, Granularity.MONTH, _year_range(args))
    print("Pearson correlation (monthly totals/means)")
    print(correlation_lines(
        correlation_matrix(monthly),
        humidity_estimated=any(b.humidity_estimated for b in monthly),
    ))


def cmd_export(args) -> None:
    """Write the full parsed record set to a CSV file."""
    _, records = _load(args)
    output = Path(args.output)
    try:
        count = write_export(records, output)
    except OSError as e:
        print(f"[error] Failed to write export: {e}")
        raise SystemExit(1)
    print(f"[export] Wrote {count} records to {output}")


def cmd_dashboard(args) -> None:
    """Run the Streamlit dashboard (local dev server)."""
    command = [sys.executable, "-m", "streamlit", "run", str(DASHBOARD_SCRIPT), "--", "--config", args.config]
    try:
        result = subprocess.run(command)
    except KeyboardInterrupt:
        return
    if result.returncode != 0:
        print("[error] Dashboard exited with an error. Is the [ui] extra installed?")
        raise SystemExit(result.returncode)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rainfall-insights",
        description="Rainfall and climate statistics for a daily weather CSV",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        default=str(DEFAULT_CONFIG_PATH),
        help="Path to config.toml (default: ./config.toml)",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="command")
    subparsers.required = True

    for name, help_text in (
        ("summary", "Headline figures and monthly climatology"),
        ("extremes", "Classify every year by rainfall anomaly"),
        ("correlations", "Pearson correlation between climate variables"),
    ):
        p = subparsers.add_parser(name, help=help_text)
        p.add_argument("--start-year", type=int, default=None, help="First year to include")
        p.add_argument("--end-year", type=int, default=None, help="Last year to include")

    p_export = subparsers.add_parser("export", help="Export the parsed records to CSV")
    p_export.add_argument(
        "-o", "--output",
        metavar="FILE",
        default="san_francisco_weather_export.csv",
        help="Destination CSV path",
    )
    subparsers.add_parser("dashboard", help="Start the Streamlit dashboard")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    commands = {
        "summary": cmd_summary,
        "extremes": cmd_extremes,
        "correlations": cmd_correlations,
        "export": cmd_export,
        "dashboard": cmd_dashboard,
    }
    commands[args.command](args)


if __name__ == "__main__":
    main()
