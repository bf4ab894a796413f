"""Shared pytest configuration and fixtures for clinic-search tests."""

import json
import tempfile
from pathlib import Path
from typing import Dict, List
from unittest.mock import MagicMock, Mock

import pytest

from clinic_search.matching import ClinicSearchStrategy, FuzzyMatcher
from clinic_search.matching.models import SearchableClinic, SearchableDentist
from clinic_search.sql_interface import SQLInterface
from clinic_search.sql_interface.query_manager import QueryManager


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def sample_clinics() -> List[SearchableClinic]:
    """Three clinics; the last one has no e-mail and no coordinates."""
    return [
        SearchableClinic(
            id=1,
            name="Lakeside Dental",
            address="12 Shore Road",
            email="info@lakeside.example",
            phone_number="555-0100",
            description="Family dentistry",
            website="lakeside.example",
            latitude=10.0,
            longitude=20.0,
            dentists=(
                SearchableDentist(id=11, name="Dr. Maria Lopez", email="maria@lakeside.example", phone_number="555-0111"),
                SearchableDentist(id=12, name="Dr. Tom Baker", email="tom@lakeside.example", phone_number="555-0112"),
            ),
        ),
        SearchableClinic(
            id=2,
            name="Hilltop Smiles",
            address="8 Ridge Avenue",
            email="hello@hilltop.example",
            phone_number="555-0200",
            description="Orthodontics and implants",
            website="hilltop.example",
            latitude=11.0,
            longitude=21.0,
            dentists=(
                SearchableDentist(id=21, name="Dr. Kenji Sato", email="kenji@hilltop.example", phone_number="555-0211"),
            ),
        ),
        SearchableClinic(
            id=3,
            name="Riverside Clinic",
            address="3 Mill Lane",
            phone_number="555-0300",
        ),
    ]


@pytest.fixture
def sample_clinic_rows() -> List[Dict]:
    """Flat clinic/dentist join rows as returned by the clinic templates."""
    clinic_one = {
        "ClinicId": 1, "ClinicName": "Lakeside Dental", "Address": "12 Shore Road",
        "ClinicEmail": "info@lakeside.example", "ClinicPhoneNumber": "555-0100",
        "Description": "Family dentistry", "Website": "lakeside.example",
        "Latitude": 10.0, "Longitude": 20.0, "ImagePath": None,
    }
    clinic_two = {
        "ClinicId": 2, "ClinicName": "Hilltop Smiles", "Address": "8 Ridge Avenue",
        "ClinicEmail": None, "ClinicPhoneNumber": None,
        "Description": None, "Website": None,
        "Latitude": None, "Longitude": None, "ImagePath": "img/hilltop.png",
    }
    no_dentist = {"DentistId": None, "DentistName": None, "DentistEmail": None, "DentistPhoneNumber": None}
    return [
        {**clinic_one, "DentistId": 11, "DentistName": "Dr. Maria Lopez",
         "DentistEmail": "maria@lakeside.example", "DentistPhoneNumber": "555-0111"},
        {**clinic_one, "DentistId": 12, "DentistName": "Dr. Tom Baker",
         "DentistEmail": None, "DentistPhoneNumber": None},
        {**clinic_two, **no_dentist},
    ]


@pytest.fixture
def clinics_json_file(temp_dir, sample_clinics):
    """Write the sample clinics to a JSON export file."""
    path = temp_dir / "clinics.json"
    with open(path, "w", encoding="utf-8") as f:
        json.dump([clinic.to_dict() for clinic in sample_clinics], f)
    return path


@pytest.fixture
def fuzzy_matcher():
    """Create a FuzzyMatcher instance for testing."""
    return FuzzyMatcher(max_distance=3)


@pytest.fixture
def search_strategy(fuzzy_matcher):
    """Create a ClinicSearchStrategy with default weights."""
    return ClinicSearchStrategy(fuzzy_matcher=fuzzy_matcher)


@pytest.fixture
def templates_dir():
    """Path to the packaged SQL templates."""
    return Path(__file__).resolve().parent.parent / "clinic_search" / "sql_templates"


@pytest.fixture
def mock_sql_interface():
    """Mock SQLInterface for testing without database connection."""
    mock = Mock(spec=SQLInterface)
    mock.connect.return_value = True
    mock.connection = MagicMock()
    mock.cursor = MagicMock()
    mock.execute_query.return_value = True
    mock.fetch_results.return_value = []
    mock.close_connection.return_value = None
    return mock


@pytest.fixture
def mock_query_manager():
    """Mock QueryManager for testing without SQL templates."""
    mock = Mock(spec=QueryManager)
    mock.load_query_template.return_value = "SELECT * FROM test"
    mock.get_clinics_with_dentists_query.return_value = ("SELECT * FROM clinics", ())
    mock.get_clinic_by_id_query.return_value = ("SELECT * FROM clinics WHERE id = ?", (1,))
    mock.fetch_rows.return_value = []
    return mock


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """Set up test environment variables."""
    # Mock environment variables to avoid requiring .env file
    test_env = {
        "SQL_SERVER": "test_server",
        "DATABASE": "test_db",
        "USERNAME_SQL": "test_user",
        "PASSWORD": "test_pass",
        "SQL_DRIVER": "{ODBC Driver 18 for SQL Server}",
    }

    for key, value in test_env.items():
        monkeypatch.setenv(key, value)
    monkeypatch.delenv("CLINIC_SEARCH_LOGFILE", raising=False)

    yield


# Test markers for different test categories
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "database: mark test as requiring database")
