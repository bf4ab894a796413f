"""SQL Server access for the clinic directory."""

import html
import os
import re
import time
from typing import Any, Dict, List, Optional, Tuple

from bs4 import BeautifulSoup

try:
    import pyodbc
except ImportError:
    # pyodbc needs the system ODBC libraries; allow import for JSON-only use and tests
    pyodbc = None

from ..config import DEFAULT_SQL_DRIVER
from ..secure_logging import get_secure_logger

logger = get_secure_logger(__name__)

# Attribute name -> environment variable
CONNECTION_ENV_VARS = {
    "server": "SQL_SERVER",
    "database": "DATABASE",
    "username_sql": "USERNAME_SQL",
    "password": "PASSWORD",
}

_BR_TAG = re.compile(r"<br\s*/?>", re.IGNORECASE)
_BLANK_LINES = re.compile(r"\n\s*\n+")


def _sqlstate(ex: Exception) -> str:
    # pyodbc errors carry (sqlstate, message); never log the message, it may echo the connection string
    if len(ex.args) >= 2:
        return str(ex.args[0])
    return type(ex).__name__


def _elapsed_ms(start_time: float) -> float:
    return (time.time() - start_time) * 1000


class SQLInterface:
    """Read-only connection to the clinic database: connect, run a query, fetch rows as dicts."""

    def __init__(self, debug: bool = False):
        for attr, env_var in CONNECTION_ENV_VARS.items():
            setattr(self, attr, os.getenv(env_var))
        self.driver: str = os.getenv("SQL_DRIVER", DEFAULT_SQL_DRIVER)
        self.connection = None
        self.cursor = None
        self.debug = debug

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close_connection()
        return False

    @staticmethod
    def clean_text_value(value: Any) -> Any:
        """
        Turn rich-text markup from the clinic admin forms into plain text.

        Entities are decoded, ``<br>`` and block tags become line breaks, blank
        lines collapse, and the result is stripped. Non-strings pass through.
        """
        if not isinstance(value, str):
            return value

        text = _BR_TAG.sub("\n", html.unescape(value))
        text = BeautifulSoup(text, "html.parser").get_text(separator="\n")
        return _BLANK_LINES.sub("\n", text).strip()

    def missing_settings(self) -> List[str]:
        """Environment variables that are unset or empty."""
        missing = [env_var for attr, env_var in CONNECTION_ENV_VARS.items() if not getattr(self, attr)]
        if not self.driver:
            missing.append("SQL_DRIVER")
        return missing

    def _connection_string(self) -> str:
        return (
            f"DRIVER={self.driver};SERVER={self.server};DATABASE={self.database};"
            f"UID={self.username_sql};PWD={self.password};"
        )

    def connect(self) -> bool:
        """
        Open the connection unless one is already open.

        Returns:
            bool: True when a connection is available afterwards.
        """
        if pyodbc is None:
            logger.error("pyodbc is not installed; the clinic database is unavailable. Use --input-json instead.")
            return False

        if self.connection is not None:
            logger.warning("Already connected; reusing the open connection.")
            return True

        missing = self.missing_settings()
        if missing:
            logger.error(f"Database settings missing from the environment or .env file: {', '.join(missing)}")
            return False

        start_time = time.time()
        logger.debug(f"Connecting to {self.database} on {self.server}")
        try:
            # Read-only workload; autocommit avoids holding a transaction open
            self.connection = pyodbc.connect(self._connection_string(), autocommit=True)
            self.cursor = self.connection.cursor()
        except Exception as ex:
            sqlstate = _sqlstate(ex)
            self.connection = None
            self.cursor = None
            logger.log_authentication_event("DB_CONNECT", self.username_sql, success=False,
                                            details=f"SQLSTATE {sqlstate}")
            logger.log_database_operation("CONNECT", success=False, duration_ms=_elapsed_ms(start_time))
            logger.error(f"Could not connect to the clinic database: SQLSTATE {sqlstate}")
            return False

        logger.log_authentication_event("DB_CONNECT", self.username_sql, success=True)
        logger.log_database_operation("CONNECT", success=True, duration_ms=_elapsed_ms(start_time))
        return True

    def execute_query(self, query: str, params: Tuple = ()) -> bool:
        """
        Run a parameterized statement.

        Args:
            query (str): SQL with '?' placeholders.
            params (Tuple): Values for the placeholders, in order.

        Returns:
            bool: False when not connected or the driver raised.
        """
        if not self.connection or not self.cursor:
            logger.error("No open database connection; cannot run the clinic query.")
            return False

        start_time = time.time()
        try:
            self.cursor.execute(query, params)
        except Exception as ex:
            logger.log_sql_execution(query, params, success=False, duration_ms=_elapsed_ms(start_time))
            logger.error(f"Clinic query failed: SQLSTATE {_sqlstate(ex)}")
            return False

        logger.log_sql_execution(query, params, success=True, duration_ms=_elapsed_ms(start_time))
        return True

    def fetch_results(self) -> Optional[List[Dict[str, Any]]]:
        """
        Rows of the last statement keyed by column alias, text values cleaned.

        Returns an empty list when the statement produced no result set and
        None when fetching failed.
        """
        if not self.cursor:
            logger.error("No cursor to fetch clinic rows from.")
            return None

        try:
            if self.cursor.description is None:
                return []
            columns = [description[0] for description in self.cursor.description]
            start_time = time.time()
            raw_rows = self.cursor.fetchall()
        except Exception as ex:
            logger.error(f"Fetching clinic rows failed: SQLSTATE {_sqlstate(ex)}")
            return None

        logger.log_database_operation("FETCH", success=True, duration_ms=_elapsed_ms(start_time),
                                      row_count=len(raw_rows))
        return [
            {column: self.clean_text_value(value) for column, value in zip(columns, raw_row)}
            for raw_row in raw_rows
        ]

    def close_connection(self) -> None:
        """Close cursor and connection; errors while closing are logged, not raised."""
        if self.debug:
            logger.debug("Closing clinic database connection")

        for attr in ("cursor", "connection"):
            handle = getattr(self, attr)
            if handle is None:
                continue
            try:
                handle.close()
            except Exception as ex:
                logger.warning(f"Error closing {attr}: {_sqlstate(ex)}")
            finally:
                setattr(self, attr, None)
