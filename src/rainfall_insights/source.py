# Project: rainfall-insights
# Owner: GreenUnicorn
"""
source.py — Fetch the daily weather CSV and parse it into records.

The source is either a local file path or an http(s) URL serving the
static CSV. There are no retries: a failed fetch surfaces as a single
SourceUnavailableError and the caller decides whether to try again.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path

import requests

from rainfall_insights.models import DailyRecord
from rainfall_insights.parser import (
    DEFAULT_START_DATE,
    DEFAULT_TEMPERATURE_SENTINEL,
    parse_records,
)
from rainfall_insights.utils import DEFAULT_LOG_PATH, log_error

DEFAULT_TIMEOUT_SECONDS = 30


class SourceUnavailableError(RuntimeError):
    """The weather CSV could not be read or downloaded."""


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def fetch_text(
    source: str,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    log_path: Path = DEFAULT_LOG_PATH,
) -> str:
    """Return the raw text of a local file or URL.

    Raises:
        SourceUnavailableError: If the file cannot be read or the request fails.
    """
    try:
        if is_url(source):
            r = requests.get(source, timeout=timeout)
            r.raise_for_status()
            return r.text
        return Path(source).read_text(encoding="utf-8-sig")
    except (requests.RequestException, OSError, UnicodeDecodeError) as e:
        msg = f"Could not load weather data from {source}: {e}"
        log_error(msg, log_path=log_path)
        raise SourceUnavailableError(msg) from e


def load_records(
    source: str,
    start_date: date = DEFAULT_START_DATE,
    temperature_sentinel: float | None = DEFAULT_TEMPERATURE_SENTINEL,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    log_path: Path = DEFAULT_LOG_PATH,
) -> list[DailyRecord]:
    """Fetch *source* and parse it into DailyRecords sorted by date.

    Raises:
        SourceUnavailableError: If the source cannot be fetched, or if it
            yields no usable records (empty or unrecognised file).
    """
    text = fetch_text(source, timeout=timeout, log_path=log_path)
    records = parse_records(
        text,
        start_date=start_date,
        temperature_sentinel=temperature_sentinel,
        log_path=log_path,
    )
    if not records:
        msg = f"No usable weather records in {source}"
        log_error(msg, log_path=log_path)
        raise SourceUnavailableError(msg)
    print(f"[source] Loaded {len(records)} daily records from {source}")
    return records


def load_records_from_config(config: dict) -> list[DailyRecord]:
    """load_records() with every setting taken from a loaded config dict."""
    return load_records(
        config["data"]["source"],
        start_date=config["data"]["start_date"],
        temperature_sentinel=config["data"]["temperature_sentinel"],
        timeout=config["fetch"]["timeout_seconds"],
        log_path=Path(config["log"]["path"]),
    )
