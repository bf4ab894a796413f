"""Clinic SQL templates and the queries built from them."""

from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from ..secure_logging import get_secure_logger
from .db_interface import SQLInterface
from .exceptions import InvalidQueryParametersError, QueryExecutionError, QueryTemplateNotFoundError

TEMPLATE_SUFFIX = ".sql"


class QueryManager:
    """Loads the clinic SQL templates and pairs them with their parameters."""

    def __init__(self, templates_dir: Union[str, Path], debug: bool = False):
        """
        Args:
            templates_dir (Union[str, Path]): Directory holding the .sql templates.
            debug (bool): Log template inventory and SQL with less masking.

        Raises:
            ValueError: If templates_dir is None, missing, or not a directory.
        """
        if templates_dir is None:
            raise ValueError("templates_dir cannot be None")

        path = Path(templates_dir)
        if not path.exists():
            raise ValueError(f"templates_dir path does not exist: {path}")
        if not path.is_dir():
            raise ValueError(f"templates_dir is not a directory: {path}")

        self.templates_dir = str(path)
        self.debug = debug
        self.logger = get_secure_logger(__name__, production_mode=not debug)

        if self.debug:
            names = sorted(p.stem for p in path.glob(f"*{TEMPLATE_SUFFIX}"))
            self.logger.debug(f"Clinic SQL templates: {', '.join(names) or 'none'}")

    def load_query_template(self, template_name: str) -> str:
        """
        Read one template; the .sql suffix is optional.

        Raises:
            QueryTemplateNotFoundError: If the file is missing or unreadable
        """
        if not template_name.endswith(TEMPLATE_SUFFIX):
            template_name += TEMPLATE_SUFFIX

        template_path = Path(self.templates_dir) / template_name
        if not template_path.is_file():
            raise QueryTemplateNotFoundError(f"SQL template file not found: {template_path}")

        try:
            return template_path.read_text(encoding="utf-8")
        except OSError as e:
            raise QueryTemplateNotFoundError(f"Could not read SQL template '{template_path}': {e}") from e

    def fetch_rows(self, db: SQLInterface, query: str, params: Tuple = ()) -> List[Dict[str, Any]]:
        """
        Execute a query and fetch all of its rows.

        Args:
            db (SQLInterface): Connected database wrapper
            query (str): SQL text with '?' placeholders
            params (Tuple): Parameter values in placeholder order

        Returns:
            List[Dict[str, Any]]: Rows keyed by column name

        Raises:
            QueryExecutionError: If execution or fetching fails
        """
        self.logger.debug(f"Executing query with {len(params)} parameters")
        if not db.execute_query(query, params):
            raise QueryExecutionError("Query execution failed.")
        rows = db.fetch_results()
        if rows is None:
            raise QueryExecutionError("Error occurred while fetching results.")
        return rows

    def get_clinics_with_dentists_query(self) -> Tuple[str, Tuple[()]]:
        """Get every clinic joined with its dentists, one row per clinic/dentist pair."""
        return self.load_query_template("get_clinics_with_dentists"), ()

    def get_clinic_by_id_query(self, clinic_id: int) -> Tuple[str, Tuple[int]]:
        """Get one clinic joined with its dentists."""
        if isinstance(clinic_id, bool) or not isinstance(clinic_id, int) or clinic_id < 1:
            raise InvalidQueryParametersError(f"clinic_id must be a positive integer, got {clinic_id!r}")
        return self.load_query_template("get_clinic_by_id"), (clinic_id,)
