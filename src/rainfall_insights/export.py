# Project: rainfall-insights
# Owner: GreenUnicorn
"""
export.py — Serialize the parsed record set back to the weather CSV format.

Every field is quoted and missing values are written as "NA", so the file
opens cleanly in Excel/R and parses back into the same records.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable
from pathlib import Path

from rainfall_insights.models import DailyRecord

NA_TOKEN = "NA"

# CSV column -> DailyRecord attribute, in the upstream feed's column order
EXPORT_COLUMNS = [
    ("date",     "date"),
    ("tavg",     "temperature"),
    ("tmin",     "temp_min"),
    ("tmax",     "temp_max"),
    ("prcp",     "precipitation"),
    ("snow",     "snow"),
    ("wdir",     "wind_direction"),
    ("wspd",     "wind_speed"),
    ("wpgt",     "wind_gust"),
    ("pres",     "pressure"),
    ("tsun",     "sunshine"),
    ("humidity", "humidity"),
]


def _format_cell(record: DailyRecord, attr: str) -> str:
    # Estimated humidity is a model output, not data; it is re-derived on import
    if attr == "humidity" and record.humidity_estimated:
        return NA_TOKEN
    value = getattr(record, attr)
    if value is None:
        return NA_TOKEN
    if attr == "date":
        return value.isoformat()
    return repr(float(value))


def export_csv(records: Iterable[DailyRecord]) -> str:
    """Render records as CSV text (all fields quoted, CRLF line endings)."""
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\r\n")
    writer.writerow([column for column, _ in EXPORT_COLUMNS])
    for record in records:
        writer.writerow([_format_cell(record, attr) for _, attr in EXPORT_COLUMNS])
    return buf.getvalue()


def write_export(records: Iterable[DailyRecord], path: Path) -> int:
    """Write export_csv() output to *path*, creating parent directories.

    Returns:
        Number of data rows written.
    """
    records = list(records)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        f.write(export_csv(records))
    return len(records)
