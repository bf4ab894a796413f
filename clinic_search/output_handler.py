"""Output handling utilities for formatting and writing results."""
import logging
import os
import sys
from typing import Any, Dict, List, Optional, TextIO

from .config import DEFAULT_FILE_ENCODING, FILE_EXTENSION_MAP
from .sql_interface.output_formatter import OutputFormatter

logger = logging.getLogger(__name__)


def determine_output_format(user_format: Optional[str], output_file_path: Optional[str]) -> str:
    """Determines the effective output format based on user input and file extension."""
    if user_format:
        return user_format

    if output_file_path:
        _, ext = os.path.splitext(output_file_path)
        ext = ext.lower()

        if ext in FILE_EXTENSION_MAP:
            return FILE_EXTENSION_MAP[ext]
        if ext:
            logger.warning(
                f"Output file extension '{ext}' for '{output_file_path}' is not recognized. "
                f"Defaulting to 'json' format."
            )
        else:
            logger.warning(f"No file extension for '{output_file_path}'. Defaulting to 'json' format.")
        return 'json'

    return 'stdout'


def format_metadata_summary(metadata_dict: Optional[Dict[str, Any]]) -> str:
    """Format metadata dictionary as comment lines."""
    if not metadata_dict:
        return ''
    return '\n'.join(f"# {k}: {v}" for k, v in metadata_dict.items())


def write_results(
    stream: TextIO,
    results: List[Any],
    effective_format: str,
    metadata_dict: Optional[Dict[str, Any]],
    output_formatter: OutputFormatter
) -> None:
    """Write formatted results to an open text stream."""
    metadata_summary = format_metadata_summary(metadata_dict)

    if effective_format == 'json':
        stream.write(output_formatter.format_as_json(results, metadata_dict) + '\n')
    elif effective_format in ('csv', 'tsv'):
        if metadata_summary:
            stream.write(metadata_summary + '\n')
        if effective_format == 'csv':
            stream.write(output_formatter.format_as_csv(results))
        else:
            stream.write(output_formatter.format_as_tsv(results))
    elif effective_format == 'txt':
        # No metadata or headers in plain text
        stream.write(output_formatter.format_as_txt(results) + '\n')
    elif effective_format == 'stdout':
        if metadata_summary:
            stream.write(metadata_summary + '\n')
        output_formatter.format_as_console_table(results, stream=stream)
    else:
        raise ValueError(f"Unknown output format: {effective_format}")


def handle_output(
    results: List[Any],
    output_file_path: Optional[str],
    query_display_name: str,
    effective_format: str,
    metadata_dict: Optional[Dict[str, Any]] = None
) -> None:
    """
    Format and output results based on the specified format and destination.

    Args:
        results: Clinics or proximity matches to format
        output_file_path: Path to save results to (None for stdout)
        query_display_name: Display name of the command for logging
        effective_format: Output format ('json', 'csv', 'tsv', 'txt', 'stdout')
        metadata_dict: Optional metadata dictionary to include

    Raises:
        ValueError: For an unknown output format
        OSError: If the output file cannot be written
    """
    output_formatter = OutputFormatter()

    if output_file_path:
        with open(output_file_path, 'w', encoding=DEFAULT_FILE_ENCODING, newline='') as f:
            write_results(f, results, effective_format, metadata_dict, output_formatter)
        logger.info(f"Saved results for '{query_display_name}' to {output_file_path}")
    else:
        write_results(sys.stdout, results, effective_format, metadata_dict, output_formatter)
