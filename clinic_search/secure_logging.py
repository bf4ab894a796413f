"""
Secure logging utilities for the clinic directory.

Database credentials never reach the log. In production mode clinic and
dentist contact details (e-mail addresses, phone numbers) are masked too,
and SQL text and parameter values are reduced to summaries.
"""

import logging
import re
from typing import Any, Optional

# Credential keys as they appear in ODBC connection strings and config dumps
CREDENTIAL_KEYS = ("password", "pwd", "secret", "token", "uid")

CONTACT_DATA_PATTERNS = [
    (re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+"), "***EMAIL***"),
    (re.compile(r"(?<![\w.])\+?\d[\d\s()-]{6,}\d(?![\w.])"), "***PHONE***"),
]


def _credential_pattern(key: str) -> "re.Pattern[str]":
    return re.compile(rf"(?i)({key})['\"]?\s*[:=]\s*['\"]?[^\s'\";]+")


def _format_duration(duration_ms: Optional[float], template: str) -> str:
    return template.format(duration_ms) if duration_ms is not None else ""


class SecureLogger:
    """
    Wraps a standard logger and sanitizes every message before emitting it.

    Credentials are always masked. With ``production_mode`` on, contact data
    is masked as well.
    """

    CREDENTIAL_PATTERNS = [_credential_pattern(key) for key in CREDENTIAL_KEYS]

    def __init__(self, logger: logging.Logger, production_mode: bool = True):
        self.logger = logger
        self.production_mode = production_mode

    def _sanitize_message(self, message: str) -> str:
        for pattern in self.CREDENTIAL_PATTERNS:
            message = pattern.sub(r"\1=***REDACTED***", message)

        if self.production_mode:
            for pattern, replacement in CONTACT_DATA_PATTERNS:
                message = pattern.sub(replacement, message)

        return message

    def _sanitize_params(self, params: Any) -> str:
        """
        Describe query parameters without leaking their values.

        Production mode shows only each parameter's type. Otherwise long
        strings are shortened to their first and last three characters.
        """
        if params is None:
            return "None"
        if isinstance(params, dict):
            return f"<dict with {len(params)} keys>"
        if not isinstance(params, (tuple, list)):
            return f"<{type(params).__name__}>"
        if not params:
            return "[]"

        if self.production_mode:
            described = [f"param_{i}=<{type(p).__name__}>" for i, p in enumerate(params)]
        else:
            described = [
                f"{p[:3]}...{p[-3:]}" if isinstance(p, str) and len(p) > 10 else str(p)
                for p in params
            ]
        return "[" + ", ".join(described) + "]"

    def _get_sql_summary(self, sql: str) -> str:
        tokens = sql.split() if sql else []
        if not tokens:
            return "<empty query>"

        verb = tokens[0].upper()
        if self.production_mode:
            return f"<{verb} query, {len(tokens)} tokens>"

        sql_clean = " ".join(tokens)
        if len(sql_clean) > 100:
            sql_clean = f"{sql_clean[:50]}...{sql_clean[-20:]}"
        return f"{verb}: {sql_clean}"

    def _emit(self, level: int, message: str, **kwargs: Any) -> None:
        if self.logger.isEnabledFor(level):
            self.logger.log(level, self._sanitize_message(message), **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._emit(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._emit(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._emit(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._emit(logging.ERROR, message, **kwargs)

    def log_database_operation(
        self,
        operation: str,
        success: bool = True,
        duration_ms: Optional[float] = None,
        row_count: Optional[int] = None,
    ) -> None:
        """
        Audit line for a connection or fetch.

        Args:
            operation: CONNECT, FETCH, ...
            success: Whether the operation succeeded
            duration_ms: Duration in milliseconds
            row_count: Rows returned, when known
        """
        status = "SUCCESS" if success else "FAILED"
        rows = f", {row_count} rows" if row_count is not None else ""
        self.info(f"DB_AUDIT: {operation} {status}{_format_duration(duration_ms, ', {:.2f}ms')}{rows}")

    def log_sql_execution(
        self,
        sql: str,
        params: Any = None,
        success: bool = True,
        duration_ms: Optional[float] = None,
    ) -> None:
        status = "SUCCESS" if success else "FAILED"
        self.debug(
            f"SQL_EXEC: {self._get_sql_summary(sql)} | PARAMS: {self._sanitize_params(params)} | "
            f"{status}{_format_duration(duration_ms, ' ({:.2f}ms)')}"
        )

    def log_clinic_search(
        self,
        search_type: str,
        criteria_count: int,
        candidates_count: int,
        results_count: int,
        duration_ms: Optional[float] = None,
    ) -> None:
        """
        Log a clinic search without the search terms themselves.

        Args:
            search_type: "ranked" when a general term ordered the results, "filtered" otherwise
            criteria_count: Number of search terms supplied
            candidates_count: Number of clinics searched
            results_count: Number of clinics returned
            duration_ms: Search duration in milliseconds
        """
        self.info(
            f"CLINIC_SEARCH: {search_type} search with {criteria_count} criteria over "
            f"{candidates_count} clinics returned {results_count} results"
            f"{_format_duration(duration_ms, ' ({:.2f}ms)')}",
        )

    def log_authentication_event(
        self,
        event_type: str,
        username: Optional[str] = None,
        success: bool = True,
        details: Optional[str] = None,
    ) -> None:
        status = "SUCCESS" if success else "FAILED"
        parts = [f"AUTH: {event_type} {status}"]
        if username:
            # Keep two leading characters and the last one
            masked = f"{username[:2]}***{username[-1:]}" if len(username) > 4 else "***"
            parts[0] += f" user={masked}"
        if details:
            parts.append(details)
        self.info(" | ".join(parts))


def get_secure_logger(name: str, production_mode: bool = True) -> SecureLogger:
    """
    Get a secure logger instance.

    Args:
        name: Logger name (typically __name__)
        production_mode: Mask contact data as well as credentials

    Returns:
        SecureLogger instance
    """
    return SecureLogger(logging.getLogger(name), production_mode=production_mode)
