"""Utility functions for clinic_search"""
import json
import logging
import os
from importlib.resources import files
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .matching.models import SearchableClinic, SearchableDentist
from .sql_interface.db_interface import SQLInterface
from .sql_interface.exceptions import ClinicDataError
from .sql_interface.query_manager import QueryManager

logger = logging.getLogger(__name__)

# Column aliases produced by the clinic SQL templates
CLINIC_COLUMNS = {
    "id": "ClinicId",
    "name": "ClinicName",
    "address": "Address",
    "email": "ClinicEmail",
    "phone_number": "ClinicPhoneNumber",
    "description": "Description",
    "website": "Website",
    "latitude": "Latitude",
    "longitude": "Longitude",
    "image_path": "ImagePath",
}
DENTIST_COLUMNS = {
    "id": "DentistId",
    "name": "DentistName",
    "email": "DentistEmail",
    "phone_number": "DentistPhoneNumber",
}


def resolve_templates_dir() -> str:
    """
    Resolves the path to the SQL templates directory.

    Tries the installed package resources first, then the directory next to this file.

    Returns:
        str: Absolute path to the sql_templates directory

    Raises:
        RuntimeError: If the sql_templates directory cannot be found
    """
    try:
        templates = files('clinic_search.sql_templates')
        templates_str = str(templates)
        if os.path.isdir(templates_str):
            logger.debug(f"Found templates via package resources: {templates_str}")
            return templates_str
    except ModuleNotFoundError as e:
        logger.debug(f"Package resources lookup failed: {e}")

    dev_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "sql_templates")
    if os.path.isdir(dev_path):
        logger.debug(f"Found templates dir: {dev_path}")
        return dev_path

    raise RuntimeError(
        "Could not locate sql_templates directory in the installed package or next to utils.py. "
        "Please ensure sql_templates directory exists and is readable."
    )


def group_clinic_rows(rows: Sequence[Mapping[str, Any]]) -> List[SearchableClinic]:
    """
    Fold flat clinic/dentist join rows into clinics with their dentists attached.

    Clinics keep the order in which they first appear; dentists keep row order.
    A clinic whose dentist columns are NULL (no dentists) gets an empty dentist tuple.

    Args:
        rows: Rows as returned by the get_clinics_with_dentists / get_clinic_by_id templates

    Returns:
        List[SearchableClinic]: One clinic per distinct ClinicId

    Raises:
        ClinicDataError: If a row has no ClinicId, or a clinic has no name or address
    """
    clinic_fields: Dict[Any, Dict[str, Any]] = {}
    dentists: Dict[Any, List[SearchableDentist]] = {}

    for row_num, row in enumerate(rows, 1):
        clinic_id = row.get(CLINIC_COLUMNS["id"])
        if clinic_id is None:
            raise ClinicDataError(f"Row {row_num} has no {CLINIC_COLUMNS['id']} value.")

        if clinic_id not in clinic_fields:
            fields = {attr: row.get(column) for attr, column in CLINIC_COLUMNS.items()}
            if not fields["name"] or not fields["address"]:
                raise ClinicDataError(f"Clinic {clinic_id} is missing its name or address.")
            clinic_fields[clinic_id] = fields
            dentists[clinic_id] = []

        if row.get(DENTIST_COLUMNS["id"]) is not None:
            dentists[clinic_id].append(SearchableDentist(
                **{attr: row.get(column) for attr, column in DENTIST_COLUMNS.items()}
            ))

    return [
        SearchableClinic(**fields, dentists=tuple(dentists[clinic_id]))
        for clinic_id, fields in clinic_fields.items()
    ]


def _check_json_record(record: Mapping[str, Any], where: str) -> None:
    # Only "dentists" may nest; every other value must be a scalar
    for key, value in record.items():
        if key.lower() != "dentists" and isinstance(value, (dict, list)):
            raise ClinicDataError(f"{where} has a non-scalar value for '{key}'.")


def read_clinics_from_json(json_file_path: str) -> List[SearchableClinic]:
    """
    Read clinics from a JSON export.

    The file holds either a list of clinic objects or an object with a "data"
    list (the shape written by the JSON output format). Keys may be camelCase or
    snake_case; dentists are nested under "dentists". Numeric text values such
    as phone numbers are read as strings.

    Args:
        json_file_path (str): Path to the JSON file

    Returns:
        List[SearchableClinic]: Clinics in file order

    Raises:
        ClinicDataError: If the file is missing or not valid JSON, an entry is malformed,
            or a clinic lacks a name or address
    """
    if not os.path.exists(json_file_path):
        raise ClinicDataError(f"Clinic file not found: {json_file_path}")

    try:
        with open(json_file_path, encoding='utf-8-sig') as f:
            payload = json.load(f)
    except json.JSONDecodeError as e:
        raise ClinicDataError(f"Clinic file '{json_file_path}' is not valid JSON: {e}") from e
    except OSError as e:
        raise ClinicDataError(f"Error reading clinic file '{json_file_path}': {e}") from e

    records = payload.get("data") if isinstance(payload, dict) else payload
    if not isinstance(records, list):
        raise ClinicDataError(f"Clinic file '{json_file_path}' must contain a list of clinics.")

    clinics = []
    for index, record in enumerate(records, 1):
        where = f"Clinic entry {index} in '{json_file_path}'"
        if not isinstance(record, dict):
            raise ClinicDataError(f"{where} is not an object.")
        _check_json_record(record, where)

        dentists = record.get("dentists", record.get("Dentists")) or []
        if not isinstance(dentists, list):
            raise ClinicDataError(f"{where} has a 'dentists' value that is not a list.")
        for dentist_index, dentist in enumerate(dentists, 1):
            dentist_where = f"{where}, dentist {dentist_index}"
            if not isinstance(dentist, dict):
                raise ClinicDataError(f"{dentist_where} is not an object.")
            _check_json_record(dentist, dentist_where)

        clinic = SearchableClinic.from_dict(record)
        if not clinic.name or not clinic.address:
            raise ClinicDataError(f"Clinic entry {index} in '{json_file_path}' is missing its name or address.")
        clinics.append(clinic)

    logger.info(f"Loaded {len(clinics)} clinics from '{json_file_path}'.")
    return clinics


def load_clinics_from_database(
    db: SQLInterface,
    query_manager: QueryManager,
    clinic_id: Optional[int] = None
) -> List[SearchableClinic]:
    """
    Fetch clinics with their dentists from the database, fully materialized.

    Args:
        db: Connected database wrapper
        query_manager: Template manager
        clinic_id: Restrict to one clinic when given

    Returns:
        List[SearchableClinic]: Clinics in query order
    """
    if clinic_id is None:
        sql, params = query_manager.get_clinics_with_dentists_query()
    else:
        sql, params = query_manager.get_clinic_by_id_query(clinic_id)

    rows = query_manager.fetch_rows(db, sql, params)
    clinics = group_clinic_rows(rows)
    logger.info(f"Fetched {len(clinics)} clinics ({len(rows)} rows) from the database.")
    return clinics
