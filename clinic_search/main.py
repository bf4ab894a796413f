"""Main module for the clinic_search package."""
import argparse
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, List, Optional, Tuple

from dotenv import load_dotenv

from .config import DEFAULT_MAX_DISTANCE, LOG_FILE_ENV, LOG_FORMAT, LOGGER_NAME, VALID_OUTPUT_FORMATS, get_env_or_default
from .matching import ClinicSearchStrategy, FuzzyMatcher, SearchQuery, find_clinic_by_id, find_nearby_clinics
from .matching.models import SearchableClinic
from .metadata import create_metadata_dict
from .output_handler import determine_output_format, handle_output
from .sql_interface.db_interface import SQLInterface
from .sql_interface.exceptions import (
    ClinicDataError,
    DatabaseConnectionError,
    InvalidQueryParametersError,
    QueryExecutionError,
    QueryTemplateNotFoundError,
)
from .sql_interface.query_manager import QueryManager
from .utils import load_clinics_from_database, read_clinics_from_json, resolve_templates_dir


def _add_common_arguments(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        '--input-json', '-ij', type=str, metavar='JSON_FILE_PATH',
        help='Read clinics from a JSON export instead of the database.'
    )
    subparser.add_argument(
        '--output', '-o', type=str, metavar='FILE_PATH',
        help='Optional path to save results as a JSON, CSV, TSV, or TXT file.'
    )
    subparser.add_argument(
        '--format', '-f',
        type=str,
        choices=VALID_OUTPUT_FORMATS,
        default=None,
        help='Output format: json, csv, tsv, txt, or stdout (table on the console). Inferred from -o extension if not set.'
    )


def setup_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Searches the clinic directory with prefix and fuzzy matching over clinics and their dentists.",
        formatter_class=argparse.RawTextHelpFormatter
    )
    parser.add_argument(
        '--debug', '-v',
        action='store_true',
        help='Enable verbose debug output for troubleshooting.'
    )
    subparsers = parser.add_subparsers(
        dest='action', help='The main action to perform. Use one of the subcommands below.', required=True, metavar='ACTION'
    )

    # --- Sub-command: search ---
    parser_search = subparsers.add_parser('search', help='Fuzzy search clinics and dentists.')
    parser_search.add_argument(
        '--general-search', '-g', type=str, metavar='TERM',
        help='Free text matched against every clinic and dentist field. Also orders results by relevance.'
    )
    parser_search.add_argument('--name', '-n', type=str, metavar='TERM',
        help='Clinic or dentist name.')
    parser_search.add_argument('--email', '-e', type=str, metavar='TERM',
        help='Clinic or dentist e-mail.')
    parser_search.add_argument('--phone-number', '-p', type=str, metavar='TERM',
        help='Clinic or dentist phone number.')
    parser_search.add_argument('--address', '-a', type=str, metavar='TERM',
        help='Clinic address.')
    parser_search.add_argument('--description', '-d', type=str, metavar='TERM',
        help='Clinic description.')
    parser_search.add_argument('--website', '-w', type=str, metavar='TERM',
        help='Clinic website.')
    parser_search.add_argument(
        '--max-distance', type=int, default=DEFAULT_MAX_DISTANCE, metavar='EDITS',
        help=f'Maximum edit distance for a fuzzy match (default: {DEFAULT_MAX_DISTANCE}).'
    )
    _add_common_arguments(parser_search)

    # --- Sub-command: nearby ---
    parser_nearby = subparsers.add_parser('nearby', help='List clinics ordered by distance from a location.')
    parser_nearby.add_argument('--latitude', '-lat', type=float, required=True,
        help='REQUIRED. Latitude of the location.')
    parser_nearby.add_argument('--longitude', '-lon', type=float, required=True,
        help='REQUIRED. Longitude of the location.')
    parser_nearby.add_argument('--radius', '-r', type=float, default=None,
        help='Drop clinics farther than this (coordinate degrees). No cut-off by default.')
    _add_common_arguments(parser_nearby)

    # --- Sub-command: get-clinic ---
    parser_get = subparsers.add_parser('get-clinic', help='Show one clinic with its dentists.')
    parser_get.add_argument('--clinic-id', '-i', type=int, required=True, metavar='ID',
        help='REQUIRED. Clinic ID.')
    _add_common_arguments(parser_get)

    return parser


def setup_logging(debug: bool = False, log_file: Optional[str] = None):
    log_level = logging.DEBUG if debug else logging.INFO
    # Results may go to stdout, keep log lines on stderr
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))
    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True
    )


def load_clinics(args: argparse.Namespace, logger: logging.Logger, clinic_id: Optional[int] = None) -> List[SearchableClinic]:
    """Load the candidate clinics from the JSON export or the database."""
    if args.input_json:
        logger.info(f"Reading clinics from {os.path.basename(args.input_json)}")
        return read_clinics_from_json(args.input_json)

    query_manager = QueryManager(resolve_templates_dir(), debug=args.debug)
    with SQLInterface(debug=args.debug) as db:
        if not db.connection:
            raise DatabaseConnectionError("Database connection failed.")
        return load_clinics_from_database(db, query_manager, clinic_id=clinic_id)


def handle_search(args: argparse.Namespace, logger: logging.Logger, parser: argparse.ArgumentParser) -> Tuple[List[Any], str]:
    """Handle the search action."""
    query_display_name = "Clinic Search"
    if args.max_distance < 0:
        parser.error("--max-distance must be zero or greater.")

    query = SearchQuery.from_params(vars(args))
    if not query.has_terms():
        logger.warning("No search terms supplied. Returning all clinics.")

    clinics = load_clinics(args, logger)
    strategy = ClinicSearchStrategy(fuzzy_matcher=FuzzyMatcher(max_distance=args.max_distance))
    return strategy.ranked_search(clinics, query), query_display_name


def handle_nearby(args: argparse.Namespace, logger: logging.Logger, parser: argparse.ArgumentParser) -> Tuple[List[Any], str]:
    """Handle the nearby action."""
    query_display_name = "Nearby Clinics"
    if args.radius is not None and args.radius < 0:
        parser.error("--radius must be zero or greater.")

    clinics = load_clinics(args, logger)
    return find_nearby_clinics(clinics, args.latitude, args.longitude, radius=args.radius), query_display_name


def handle_get_clinic(args: argparse.Namespace, logger: logging.Logger, parser: argparse.ArgumentParser) -> Tuple[List[Any], str]:
    """Handle the get-clinic action."""
    query_display_name = f"Clinic {args.clinic_id}"
    if args.clinic_id < 1:
        parser.error("--clinic-id must be a positive integer.")

    clinics = load_clinics(args, logger, clinic_id=args.clinic_id)
    clinic = find_clinic_by_id(clinics, args.clinic_id)
    if clinic is None:
        logger.info(f"No clinic found with ID {args.clinic_id}.")
        return [], query_display_name
    return [clinic], query_display_name


ACTION_HANDLERS = {
    'search': handle_search,
    'nearby': handle_nearby,
    'get-clinic': handle_get_clinic,
}


def main(argv: Optional[List[str]] = None):
    load_dotenv()

    parser = setup_arg_parser()
    args = parser.parse_args(argv)

    debug = args.debug
    setup_logging(debug, get_env_or_default(LOG_FILE_ENV) or None)
    logger = logging.getLogger(LOGGER_NAME)

    handler = ACTION_HANDLERS[args.action]
    query_start_time = datetime.now(timezone.utc)

    try:
        results, query_display_name = handler(args, logger, parser)
    except (ClinicDataError, QueryTemplateNotFoundError, InvalidQueryParametersError) as e:
        logger.error(f"{type(e).__name__}: {e}", exc_info=debug)
        sys.exit(1)
    except (DatabaseConnectionError, QueryExecutionError) as e:
        logger.error(f"Database error: {e}", exc_info=debug)
        sys.exit(1)
    except RuntimeError as e:
        logger.error(f"Runtime error during execution: {e}", exc_info=debug)
        sys.exit(1)

    execution_duration_ms = int((datetime.now(timezone.utc) - query_start_time).total_seconds() * 1000)

    output_file_path = args.output
    effective_format = determine_output_format(args.format, output_file_path)
    metadata_dict = create_metadata_dict(
        query_start_time, execution_duration_ms, args,
        query_display_name, results
    )

    try:
        handle_output(results, output_file_path, query_display_name, effective_format, metadata_dict)
    except OSError as e:
        logger.error(f"Error writing output: {e}")
        sys.exit(1)

    logger.info(f"--- {query_display_name} finished ---")


if __name__ == "__main__":
    main()
