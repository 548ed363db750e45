# Project: rainfall-insights
# Owner: GreenUnicorn
"""
config.py — Load and validate the TOML configuration file.

We use tomllib (Python 3.11+ stdlib) so no extra install is needed.
The config path defaults to "config.toml" in the current working directory,
but can be overridden for testing.
"""

import tomllib
from datetime import date
from pathlib import Path

DEFAULT_CONFIG_PATH = Path("config.toml")

SF_NEIGHBORHOODS_URL = "https://data.sfgov.org/resource/ajp5-b2md.geojson?$limit=1000"

# Optional keys and the values used when they are absent
DEFAULTS = {
    "data": {
        "city": "San Francisco",
        "start_date": "1993-01-01",
        "temperature_sentinel": -17.8,
    },
    "fetch": {
        "timeout_seconds": 30,
    },
    "map": {
        "boundaries_url": SF_NEIGHBORHOODS_URL,
        "name_property": "nhood",
    },
}


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> dict:
    """Load and validate a TOML configuration file.

    Args:
        path: Path to the TOML config file.

    Returns:
        Nested dict of configuration values, with defaults filled in for
        optional keys and [data].start_date converted to a datetime.date.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ValueError: If required keys or sections are missing or invalid.
    """
    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found: {path}\n"
            "Copy config.toml.example to config.toml and point [data].source at your CSV."
        )

    with open(path, "rb") as f:
        config = tomllib.load(f)

    _validate(config)
    return _apply_defaults(config)


def _apply_defaults(config: dict) -> dict:
    for section, values in DEFAULTS.items():
        merged = {**values, **config.get(section, {})}
        config[section] = merged

    raw_start = config["data"]["start_date"]
    if isinstance(raw_start, date):
        # TOML date literals come back as datetime.date already
        config["data"]["start_date"] = raw_start
    else:
        try:
            config["data"]["start_date"] = date.fromisoformat(str(raw_start))
        except ValueError:
            raise ValueError(
                f"Invalid [data].start_date: {raw_start!r} (expected YYYY-MM-DD)"
            ) from None

    sentinel = config["data"]["temperature_sentinel"]
    if isinstance(sentinel, bool) or not isinstance(sentinel, (int, float)):
        raise ValueError(f"[data].temperature_sentinel must be a number, got {sentinel!r}")

    timeout = config["fetch"]["timeout_seconds"]
    if not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ValueError(f"[fetch].timeout_seconds must be a positive number, got {timeout!r}")
    return config


def _validate(config: dict) -> None:
    """Validate that all required config sections and keys are present.

    Expected config schema::

        [data]
        source               = <str>    # local CSV path or http(s) URL
        city                 = <str>    # optional, display name
        start_date           = <str>    # optional, anchor for files without dates
        temperature_sentinel = <float>  # optional, placeholder temp treated as missing

        [fetch]
        timeout_seconds = <float>       # optional, HTTP timeout

        [map]
        boundaries_url = <str>          # optional, neighbourhood GeoJSON
        name_property  = <str>          # optional, feature property holding the name

        [log]
        path = <str>     # relative or absolute path to the log file

    Args:
        config: Parsed TOML config dict.

    Raises:
        ValueError: If any required section or key is absent.
    """
    required_sections = ["data", "log"]
    for section in required_sections:
        if section not in config:
            raise ValueError(f"Missing required config section: [{section}]")

    if "source" not in config["data"]:
        raise ValueError("Missing required config key: [data].source")
    if "path" not in config["log"]:
        raise ValueError("Missing required config key: [log].path")
