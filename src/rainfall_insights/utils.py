# Project: rainfall-insights
# Owner: GreenUnicorn
"""
utils.py — Shared utilities: presentation rounding, labels and log-file helpers.
"""

import math
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, localcontext
from pathlib import Path

DEFAULT_LOG_PATH = Path("logs/rainfall_insights.log")

MONTH_ABBR = [
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
]


def round_half_away(value: float | None, digits: int = 1) -> float | None:
    """Round *value* to *digits* decimals, halves away from zero.

    Python's built-in round() uses banker's rounding (round(0.25, 1) == 0.2),
    which is not what a dashboard reader expects to see.

    Args:
        value: Number to round. None and NaN are returned unchanged.
        digits: Number of decimal places.

    Returns:
        The rounded float, or the input if it is None or NaN.
    """
    if value is None or math.isnan(value) or math.isinf(value):
        return value
    exact = Decimal(repr(value))
    quantum = Decimal(1).scaleb(-digits)
    # quantize needs room for every integer digit plus the decimals
    with localcontext() as ctx:
        ctx.prec = max(28, exact.adjusted() + digits + 2)
        rounded = float(exact.quantize(quantum, rounding=ROUND_HALF_UP))
    # Decimal keeps the sign of negative zero
    return rounded + 0.0


def fmt_month(month: int) -> str:
    """Return the three-letter abbreviation for a month number (1-12)."""
    return MONTH_ABBR[month - 1]


def fmt_value(value: float | None, unit: str = "", digits: int = 1) -> str:
    """Format a statistic for display, using '—' for missing values."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return "—"
    return f"{round_half_away(value, digits)}{unit}"


def log_event(level: str, message: str, log_path: Path = DEFAULT_LOG_PATH) -> None:
    """Append a timestamped line to the log file.

    Format: ``2026-02-23 20:00:01 [WARNING] Skipping row 12: ...``

    Args:
        level: Severity label, e.g. 'WARNING' or 'ERROR'.
        message: Text to log.
        log_path: Destination log file path.
    """
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        with open(log_path, "a") as f:
            f.write(f"{timestamp} [{level}] {message}\n")
    except OSError:
        pass  # Never crash on logging failure


def log_warning(message: str, log_path: Path = DEFAULT_LOG_PATH) -> None:
    log_event("WARNING", message, log_path=log_path)


def log_error(message: str, log_path: Path = DEFAULT_LOG_PATH) -> None:
    log_event("ERROR", message, log_path=log_path)
