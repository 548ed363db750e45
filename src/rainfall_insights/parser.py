# Project: rainfall-insights
# Owner: GreenUnicorn
"""
parser.py — Turn the raw daily weather CSV into typed DailyRecord objects.

The feed is the Meteostat-style export used by the dashboard
(date, tavg, tmin, tmax, prcp, snow, wdir, wspd, wpgt, pres, tsun).
Some copies of the file ship without the date column; in that case dates
are synthesized from the row position (see parse_records).
"""

from __future__ import annotations

import csv
import io
import math
from datetime import date, datetime, timedelta
from pathlib import Path

from rainfall_insights.models import DailyRecord
from rainfall_insights.utils import DEFAULT_LOG_PATH, log_warning

# First day of the San Francisco dataset; anchor for index-based dates
DEFAULT_START_DATE = date(1993, 1, 1)

# Placeholder the upstream feed writes for a missing temperature (0°F)
DEFAULT_TEMPERATURE_SENTINEL = -17.8
SENTINEL_TOLERANCE = 0.05

MISSING_TOKENS = {"", "na", "nan", "null", "none"}

# Canonical field name -> accepted header spellings (already normalized)
COLUMN_ALIASES = {
    "date":           ("date", "time", "day"),
    "temperature":    ("tavg", "temperature", "temp"),
    "temp_min":       ("tmin",),
    "temp_max":       ("tmax",),
    "precipitation":  ("prcp", "precipitation", "rain"),
    "snow":           ("snow",),
    "wind_direction": ("wdir",),
    "wind_speed":     ("wspd",),
    "wind_gust":      ("wpgt",),
    "pressure":       ("pres", "pressure"),
    "sunshine":       ("tsun", "sunshine"),
    "humidity":       ("humidity", "rhum"),
}

REQUIRED_FIELDS = ("precipitation", "temperature")

# Seasonal humidity model
HUMIDITY_BASE = 65.0
HUMIDITY_SEASONAL_AMPLITUDE = 15.0
HUMIDITY_TEMP_COEFF = -0.5      # % per °C above the reference temperature
HUMIDITY_REFERENCE_TEMP = 14.0
HUMIDITY_MIN = 40.0
HUMIDITY_MAX = 90.0


class RowMalformedError(ValueError):
    """A single CSV row could not be turned into a DailyRecord."""


def normalize_header(name: str) -> str:
    """Strip whitespace (including a UTF-8 BOM) and lower-case a header name."""
    return name.strip().lstrip("\ufeff").strip().lower()


def resolve_columns(headers: list[str]) -> dict[str, str]:
    """Map canonical field names to the actual header present in the file.

    Args:
        headers: Header names exactly as read from the CSV.

    Returns:
        Dict of canonical name -> original header, for recognised columns only.
    """
    normalized = {normalize_header(h): h for h in headers if h is not None}
    columns = {}
    for field, aliases in COLUMN_ALIASES.items():
        for alias in aliases:
            if alias in normalized:
                columns[field] = normalized[alias]
                break
    return columns


def parse_float(raw: str | None) -> float | None:
    """Coerce a cell to float, returning None for blanks, 'NA' and junk."""
    if raw is None:
        return None
    text = raw.strip()
    if text.lower() in MISSING_TOKENS:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def parse_date(raw: str | None) -> date:
    """Parse an ISO-like date cell ('2001-03-04' or '2001-03-04T00:00').

    Raises:
        RowMalformedError: If the cell is empty or not a recognisable date.
    """
    text = (raw or "").strip()
    if not text:
        raise RowMalformedError("missing date")
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass
    for fmt in ("%Y/%m/%d", "%m/%d/%Y"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise RowMalformedError(f"unrecognised date {text!r}")


def estimate_humidity(month: int, temperature: float | None = None) -> float:
    """Estimate relative humidity (%) from the calendar month and temperature.

    A smooth annual cycle around 65% plus a temperature-linked offset
    (warmer than 14°C is drier), clamped to 40-90%. This is a model value,
    not a measurement: records carrying it have ``humidity_estimated=True``.
    """
    humidity = HUMIDITY_BASE + math.sin((month - 1) * math.pi / 6) * HUMIDITY_SEASONAL_AMPLITUDE
    if temperature is not None:
        humidity += HUMIDITY_TEMP_COEFF * (temperature - HUMIDITY_REFERENCE_TEMP)
    return max(HUMIDITY_MIN, min(HUMIDITY_MAX, humidity))


def _is_sentinel(value: float, sentinel: float | None) -> bool:
    return sentinel is not None and abs(value - sentinel) <= SENTINEL_TOLERANCE


def _parse_row(
    row: dict,
    index: int,
    columns: dict[str, str],
    start_date: date,
    temperature_sentinel: float | None,
) -> DailyRecord:
    """Build one DailyRecord from a csv.DictReader row.

    Raises:
        RowMalformedError: If the row's date cannot be established.
    """
    def cell(field: str) -> str | None:
        header = columns.get(field)
        return row.get(header) if header is not None else None

    if "date" in columns:
        day = parse_date(cell("date"))
        synthesized = False
    else:
        day = start_date + timedelta(days=index)
        synthesized = True

    temps = {}
    for field in ("temperature", "temp_min", "temp_max"):
        value = parse_float(cell(field))
        if value is not None and _is_sentinel(value, temperature_sentinel):
            value = None
        temps[field] = value

    precipitation = parse_float(cell("precipitation"))
    if precipitation is not None and precipitation < 0:
        precipitation = None

    humidity = parse_float(cell("humidity"))
    if humidity is not None and not 0 <= humidity <= 100:
        humidity = None
    estimated = humidity is None
    if estimated:
        humidity = estimate_humidity(day.month, temps["temperature"])

    return DailyRecord(
        date=day,
        precipitation=precipitation,
        temperature=temps["temperature"],
        humidity=humidity,
        humidity_estimated=estimated,
        date_synthesized=synthesized,
        temp_min=temps["temp_min"],
        temp_max=temps["temp_max"],
        snow=parse_float(cell("snow")),
        wind_direction=parse_float(cell("wind_direction")),
        wind_speed=parse_float(cell("wind_speed")),
        wind_gust=parse_float(cell("wind_gust")),
        pressure=parse_float(cell("pressure")),
        sunshine=parse_float(cell("sunshine")),
    )


def parse_records(
    text: str,
    start_date: date = DEFAULT_START_DATE,
    temperature_sentinel: float | None = DEFAULT_TEMPERATURE_SENTINEL,
    log_path: Path = DEFAULT_LOG_PATH,
) -> list[DailyRecord]:
    """Parse CSV text (header + rows) into DailyRecords sorted by date.

    Missing or non-numeric values become None; rows whose date cannot be
    established are skipped and logged, never raised.

    If the header has no date column, row i is dated ``start_date + i days``.
    That fallback assumes the file has one row per day with no gaps: a
    missing day shifts every later date by one.

    Args:
        text: Raw CSV text.
        start_date: Anchor for index-based dates.
        temperature_sentinel: Placeholder temperature treated as missing
            (None disables the check).
        log_path: Log file for skipped-row warnings.

    Returns:
        List of DailyRecord ordered by date ascending. Empty if the input is
        empty or lacks the precipitation/temperature columns.
    """
    if not text or not text.strip():
        return []

    reader = csv.DictReader(io.StringIO(text))
    columns = resolve_columns(reader.fieldnames or [])
    missing = [f for f in REQUIRED_FIELDS if f not in columns]
    if missing:
        log_warning(
            f"Unparseable weather CSV: missing column(s) {', '.join(missing)}",
            log_path=log_path,
        )
        return []

    records = []
    skipped = 0
    for index, row in enumerate(reader):
        try:
            records.append(_parse_row(row, index, columns, start_date, temperature_sentinel))
        except RowMalformedError as e:
            skipped += 1
            # +2: one for the header, one for 1-based line numbers
            log_warning(f"Skipping CSV line {index + 2}: {e}", log_path=log_path)

    if skipped:
        print(f"[parser] Skipped {skipped} malformed row(s); see {log_path}")

    records.sort(key=lambda r: r.date)
    return records
