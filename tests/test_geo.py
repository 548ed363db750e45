# Project: rainfall-insights
# Owner: GreenUnicorn
"""Tests for geo.py — rain_factor, fetch_boundaries, enrich_boundaries,
region_indices."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from rainfall_insights.geo import (
    BoundaryUnavailableError,
    enrich_boundaries,
    fetch_boundaries,
    rain_factor,
    region_indices,
)
from rainfall_insights.source import SourceUnavailableError


def feature(name: str | None) -> dict:
    properties = {"nhood": name} if name is not None else {}
    return {
        "type": "Feature",
        "properties": properties,
        "geometry": {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 0]]]},
    }


COLLECTION = {
    "type": "FeatureCollection",
    "features": [
        feature("Outer Sunset"),
        feature("Bayview Hunters Point"),
        feature("Treasure Island"),
        feature(None),
    ],
}


# ---------------------------------------------------------------------------
# rain_factor
# ---------------------------------------------------------------------------

class TestRainFactor:

    def test_known_neighbourhoods(self):
        assert rain_factor("Outer Richmond") == 1.25
        assert rain_factor("Bayview Hunters Point") == 0.8

    def test_unknown_name_defaults_to_one(self):
        assert rain_factor("Treasure Island") == 1.0

    def test_missing_name_defaults_to_one(self):
        assert rain_factor(None) == 1.0
        assert rain_factor("") == 1.0


# ---------------------------------------------------------------------------
# enrich_boundaries / region_indices
# ---------------------------------------------------------------------------

class TestEnrichBoundaries:

    def setup_method(self):
        self.enriched = enrich_boundaries(COLLECTION, 50.0)

    def test_rain_index_is_base_times_factor(self):
        indices = [f["properties"]["rainIndex"] for f in self.enriched["features"]]
        assert indices == pytest.approx([60.0, 40.0, 50.0, 50.0])

    def test_input_not_modified(self):
        for f in COLLECTION["features"]:
            assert "rainIndex" not in f["properties"]

    def test_geometry_preserved(self):
        assert self.enriched["features"][0]["geometry"] == COLLECTION["features"][0]["geometry"]

    def test_custom_name_property(self):
        collection = {"features": [{"properties": {"name": "Outer Sunset"}}]}
        enriched = enrich_boundaries(collection, 10.0, name_property="name")
        assert enriched["features"][0]["properties"]["rainIndex"] == pytest.approx(12.0)


class TestRegionIndices:

    def test_unnamed_features_skipped_and_sorted(self):
        rows = region_indices(COLLECTION, 100.0)
        assert [row["name"] for row in rows] == [
            "Bayview Hunters Point", "Outer Sunset", "Treasure Island",
        ]
        assert rows[0]["factor"] == 0.8
        assert rows[0]["rain_index"] == pytest.approx(80.0)


# ---------------------------------------------------------------------------
# fetch_boundaries
# ---------------------------------------------------------------------------

class TestFetchBoundaries:

    def test_returns_feature_collection(self, tmp_path):
        response = MagicMock()
        response.json.return_value = COLLECTION
        with patch("rainfall_insights.geo.requests.get", return_value=response) as mock_get:
            data = fetch_boundaries("https://example.org/n.geojson", timeout=3, log_path=tmp_path / "test.log")
        assert data is COLLECTION
        mock_get.assert_called_once_with("https://example.org/n.geojson", timeout=3)

    def test_network_error_raises(self, tmp_path):
        log = tmp_path / "test.log"
        with patch("rainfall_insights.geo.requests.get", side_effect=requests.Timeout("slow")):
            with pytest.raises(BoundaryUnavailableError, match="neighbourhood boundaries"):
                fetch_boundaries("https://example.org/n.geojson", log_path=log)
        assert "[ERROR]" in log.read_text()

    def test_invalid_json_raises(self, tmp_path):
        response = MagicMock()
        response.json.side_effect = ValueError("Expecting value")
        with patch("rainfall_insights.geo.requests.get", return_value=response):
            with pytest.raises(BoundaryUnavailableError):
                fetch_boundaries("https://example.org/n.geojson", log_path=tmp_path / "test.log")

    def test_not_a_feature_collection_raises(self, tmp_path):
        response = MagicMock()
        response.json.return_value = {"type": "Feature"}
        with patch("rainfall_insights.geo.requests.get", return_value=response):
            with pytest.raises(BoundaryUnavailableError, match="FeatureCollection"):
                fetch_boundaries("https://example.org/n.geojson", log_path=tmp_path / "test.log")

    def test_is_a_source_error(self):
        """Callers handling SourceUnavailableError also catch boundary failures."""
        assert issubclass(BoundaryUnavailableError, SourceUnavailableError)
