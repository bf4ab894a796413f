"""Configuration constants and settings for clinic_search."""
import os

# Application constants
APP_VERSION = "0.1.0"

# Fuzzy search defaults
DEFAULT_MAX_DISTANCE = 3
NAME_WEIGHT = 0.5
FIELD_WEIGHT = 1.5

# Clinic text fields taking part in matching and scoring, in scoring order
CLINIC_TEXT_FIELDS = ['name', 'email', 'phone_number', 'address', 'description', 'website']
# Fields a per-field term may also match on a clinic's dentists
DENTIST_TEXT_FIELDS = ['name', 'email', 'phone_number']

# Logging configuration
LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
LOGGER_NAME = "clinic_search.main"
LOG_FILE_ENV = "CLINIC_SEARCH_LOGFILE"

# File handling
DEFAULT_FILE_ENCODING = 'utf-8'
VALID_OUTPUT_FORMATS = ['json', 'csv', 'tsv', 'txt', 'stdout']
FILE_EXTENSION_MAP = {
    '.json': 'json',
    '.csv': 'csv',
    '.tsv': 'tsv',
    '.txt': 'txt'
}

# Database configuration defaults
DEFAULT_SQL_DRIVER = "{ODBC Driver 18 for SQL Server}"

# Metadata parameter keys (for consistency)
METADATA_PARAM_KEYS = [
    'general_search', 'name', 'email', 'phone_number', 'address', 'description',
    'website', 'max_distance', 'latitude', 'longitude', 'radius', 'clinic_id', 'input_json'
]

# Status constants
STATUS_SUCCESS = "success"
STATUS_SUCCESS_NO_DATA = "success_no_data"


def get_env_or_default(key: str, default: str = "") -> str:
    """Get environment variable with optional default."""
    return os.getenv(key, default)
