# Project: rainfall-insights
# Owner: GreenUnicorn
"""
geo.py — Neighbourhood boundaries and the rainfall index shown on the map.

Boundaries come from the DataSF "Analysis Neighborhoods" GeoJSON
(free, no API key). Each neighbourhood's rain index is the city-wide mean
monthly rainfall scaled by a fixed factor: the fog belt in the west is
wetter than the bay side in the south-east.
"""

from __future__ import annotations

import copy
from pathlib import Path

import requests

from rainfall_insights.source import DEFAULT_TIMEOUT_SECONDS, SourceUnavailableError
from rainfall_insights.utils import DEFAULT_LOG_PATH, log_error

DEFAULT_NAME_PROPERTY = "nhood"
DEFAULT_RAIN_FACTOR = 1.0

# Neighbourhood name (DataSF `nhood`) -> rainfall multiplier
RAIN_FACTOR_BY_NEIGHBORHOOD = {
    "Outer Richmond":        1.25,
    "Inner Richmond":        1.2,
    "Seacliff":              1.25,
    "Presidio":              1.25,
    "Outer Sunset":          1.2,
    "Inner Sunset":          1.15,
    "Parkside":              1.15,
    "Golden Gate Park":      1.2,

    "Twin Peaks":            1.05,
    "Noe Valley":            1.0,
    "West of Twin Peaks":    1.05,

    "Marina":                1.05,
    "Pacific Heights":       1.0,
    "Western Addition":      1.0,
    "Haight Ashbury":        1.05,

    "Downtown/Civic Center": 0.95,
    "South of Market":       0.9,

    "Mission":               0.9,
    "Potrero Hill":          0.9,
    "Bernal Heights":        0.9,

    "Bayview Hunters Point": 0.8,
    "Visitacion Valley":     0.85,
}


class BoundaryUnavailableError(SourceUnavailableError):
    """The neighbourhood GeoJSON could not be downloaded or decoded."""


def rain_factor(name: str | None) -> float:
    """Rainfall multiplier for a neighbourhood; unknown names get 1.0."""
    if not name:
        return DEFAULT_RAIN_FACTOR
    return RAIN_FACTOR_BY_NEIGHBORHOOD.get(name, DEFAULT_RAIN_FACTOR)


def fetch_boundaries(
    url: str,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    log_path: Path = DEFAULT_LOG_PATH,
) -> dict:
    """Download a GeoJSON FeatureCollection.

    Raises:
        BoundaryUnavailableError: On network/HTTP errors or a payload that is
            not a FeatureCollection.
    """
    try:
        r = requests.get(url, timeout=timeout)
        r.raise_for_status()
        data = r.json()
    except (requests.RequestException, ValueError) as e:
        msg = f"Could not load neighbourhood boundaries from {url}: {e}"
        log_error(msg, log_path=log_path)
        raise BoundaryUnavailableError(msg) from e

    if not isinstance(data, dict) or not isinstance(data.get("features"), list):
        msg = f"Boundary file at {url} is not a GeoJSON FeatureCollection"
        log_error(msg, log_path=log_path)
        raise BoundaryUnavailableError(msg)
    return data


def region_name(feature: dict, name_property: str = DEFAULT_NAME_PROPERTY) -> str | None:
    return (feature.get("properties") or {}).get(name_property)


def enrich_boundaries(
    collection: dict,
    base_rainfall: float,
    name_property: str = DEFAULT_NAME_PROPERTY,
) -> dict:
    """Return a copy of *collection* with a ``rainIndex`` property on each feature.

    rainIndex = base_rainfall * rain_factor(name). The input is not modified.
    """
    enriched = copy.deepcopy(collection)
    for feature in enriched.get("features", []):
        properties = feature.get("properties") or {}
        properties["rainIndex"] = base_rainfall * rain_factor(properties.get(name_property))
        feature["properties"] = properties
    return enriched


def region_indices(
    collection: dict,
    base_rainfall: float,
    name_property: str = DEFAULT_NAME_PROPERTY,
) -> list[dict]:
    """Flat (name, factor, rain_index) rows, one per named feature, sorted by name."""
    rows = []
    for feature in collection.get("features", []):
        name = region_name(feature, name_property)
        if not name:
            continue
        factor = rain_factor(name)
        rows.append({"name": name, "factor": factor, "rain_index": base_rainfall * factor})
    return sorted(rows, key=lambda row: row["name"])
