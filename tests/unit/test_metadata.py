"""Unit tests for clinic_search.metadata module."""

import argparse
from datetime import datetime, timezone

from clinic_search.config import APP_VERSION
from clinic_search.metadata import (
    create_base_metadata,
    create_metadata_dict,
    determine_query_status,
    extract_query_parameters,
)


def _search_args(**overrides):
    values = {
        "action": "search", "debug": False, "general_search": "Lake", "name": None, "email": "",
        "phone_number": None, "address": None, "description": None, "website": None,
        "max_distance": 3, "input_json": None, "output": None, "format": None,
    }
    values.update(overrides)
    return argparse.Namespace(**values)


class TestCreateBaseMetadata:
    """Test base metadata fields."""

    def test_fields(self):
        start = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        metadata = create_base_metadata(start, 42, _search_args(), "Clinic Search", 2)
        assert metadata == {
            "query_timestamp_utc": "2024-05-01T12:00:00+00:00",
            "command": "search",
            "query_display_name": "Clinic Search",
            "tool_version": APP_VERSION,
            "execution_duration_ms": 42,
            "result_count": 2,
            "data_source": "database",
        }

    def test_json_data_source(self):
        start = datetime(2024, 5, 1, tzinfo=timezone.utc)
        metadata = create_base_metadata(start, 0, _search_args(input_json="clinics.json"), "Clinic Search", 0)
        assert metadata["data_source"] == "json"


class TestExtractQueryParameters:
    """Test parameter extraction."""

    def test_only_supplied_parameters(self):
        """Unset and empty values are left out; output options are not parameters."""
        assert extract_query_parameters(_search_args()) == {"general_search": "Lake", "max_distance": "3"}

    def test_nearby_parameters(self):
        args = argparse.Namespace(action="nearby", latitude=10.5, longitude=20.0, radius=None, input_json=None)
        assert extract_query_parameters(args) == {"latitude": "10.5", "longitude": "20.0"}


class TestQueryStatus:
    def test_status(self):
        assert determine_query_status([1]) == "success"
        assert determine_query_status([]) == "success_no_data"


class TestCreateMetadataDict:
    def test_complete_metadata(self):
        start = datetime(2024, 5, 1, tzinfo=timezone.utc)
        metadata = create_metadata_dict(start, 5, _search_args(), "Clinic Search", ["a", "b"])
        assert metadata["result_count"] == 2
        assert metadata["status"] == "success"
        assert metadata["parameters"]["general_search"] == "Lake"

    def test_no_results(self):
        start = datetime(2024, 5, 1, tzinfo=timezone.utc)
        metadata = create_metadata_dict(start, 5, _search_args(), "Clinic Search", [])
        assert metadata["result_count"] == 0
        assert metadata["status"] == "success_no_data"
