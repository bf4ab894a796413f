"""clinic_search package"""
import logging

# Configure a null handler by default
logging.getLogger(__name__).addHandler(logging.NullHandler())

# Expose public interface
from . import matching, sql_interface
from .matching import (
    ClinicSearchStrategy,
    FuzzyMatcher,
    ProximityMatch,
    SearchableClinic,
    SearchableDentist,
    SearchQuery,
    find_clinic_by_id,
    find_nearby_clinics,
    ranked_search,
)
from .sql_interface import (
    ClinicDataError,
    DatabaseConnectionError,
    InvalidQueryParametersError,
    OutputFormatter,
    QueryExecutionError,
    QueryManager,
    QueryTemplateNotFoundError,
    SQLInterface,
)
from .main import main

__version__ = "0.1.0"

__all__ = [
    'matching',
    'sql_interface',
    'SearchableClinic',
    'SearchableDentist',
    'SearchQuery',
    'ProximityMatch',
    'FuzzyMatcher',
    'ClinicSearchStrategy',
    'ranked_search',
    'find_nearby_clinics',
    'find_clinic_by_id',
    'SQLInterface',
    'QueryManager',
    'OutputFormatter',
    'QueryTemplateNotFoundError',
    'DatabaseConnectionError',
    'QueryExecutionError',
    'InvalidQueryParametersError',
    'ClinicDataError',
    'main',
]
