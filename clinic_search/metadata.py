"""Metadata generation utilities for clinic_search."""
from datetime import datetime
from typing import Any, Dict

from .config import APP_VERSION, METADATA_PARAM_KEYS, STATUS_SUCCESS, STATUS_SUCCESS_NO_DATA


def create_base_metadata(
    query_start_time: datetime,
    execution_duration_ms: int,
    args: Any,
    query_display_name: str,
    results_count: int
) -> Dict[str, Any]:
    """Create base metadata dictionary for all commands."""
    return {
        'query_timestamp_utc': query_start_time.isoformat(),
        'command': args.action,
        'query_display_name': query_display_name,
        'tool_version': APP_VERSION,
        'execution_duration_ms': execution_duration_ms,
        'result_count': results_count,
        'data_source': 'json' if getattr(args, 'input_json', None) else 'database',
    }


def extract_query_parameters(args: Any) -> Dict[str, str]:
    """Extract the search parameters that were actually supplied."""
    return {
        k: str(v) for k, v in vars(args).items()
        if k in METADATA_PARAM_KEYS and v is not None and v != ''
    }


def determine_query_status(results: Any) -> str:
    return STATUS_SUCCESS if results else STATUS_SUCCESS_NO_DATA


def create_metadata_dict(
    query_start_time: datetime,
    execution_duration_ms: int,
    args: Any,
    query_display_name: str,
    results: Any
) -> Dict[str, Any]:
    """Create complete metadata dictionary for command results."""
    results_count = len(results) if results else 0

    metadata_dict = create_base_metadata(
        query_start_time, execution_duration_ms, args,
        query_display_name, results_count
    )
    metadata_dict['parameters'] = extract_query_parameters(args)
    metadata_dict['status'] = determine_query_status(results)
    return metadata_dict
