"""SQL interface package for clinic_search."""

import logging

from .db_interface import SQLInterface
from .exceptions import (
    ClinicDataError,
    DatabaseConnectionError,
    InvalidQueryParametersError,
    QueryExecutionError,
    QueryTemplateNotFoundError,
)
from .output_formatter import OutputFormatter
from .query_manager import QueryManager

# Initialize package logger
logger = logging.getLogger(__name__)

__all__ = [
    "SQLInterface",
    "QueryManager",
    "QueryTemplateNotFoundError",
    "DatabaseConnectionError",
    "QueryExecutionError",
    "InvalidQueryParametersError",
    "ClinicDataError",
    "OutputFormatter",
]
