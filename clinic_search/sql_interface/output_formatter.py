import csv
import io
import json
import logging
import sys
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from tabulate import tabulate

from ..matching.models import ProximityMatch, SearchableClinic

logger = logging.getLogger(__name__)

DENTIST_SEPARATOR = "; "


class OutputFormatter:
    """Formats clinic results for display or saving."""

    @staticmethod
    def _result_to_dict(result: Any) -> Dict[str, Any]:
        """Convert a clinic, proximity match or plain row to a dictionary."""
        if isinstance(result, (SearchableClinic, ProximityMatch)):
            return result.to_dict()
        return dict(result)

    @staticmethod
    def to_records(results: List[Any]) -> List[Dict[str, Any]]:
        return [OutputFormatter._result_to_dict(result) for result in results]

    @staticmethod
    def flatten_record(record: Dict[str, Any]) -> Dict[str, Any]:
        """Collapse the nested dentist list into tabular columns."""
        flat = {key: value for key, value in record.items() if key != "dentists"}
        if "dentists" in record:
            dentists = record["dentists"] or []
            flat["dentists"] = DENTIST_SEPARATOR.join(d.get("name") or "" for d in dentists)
            flat["dentistCount"] = len(dentists)
        return flat

    @staticmethod
    def _datetime_serializer(obj: Any) -> str:
        """
        Custom serializer for converting datetime.datetime and datetime.date
        objects into ISO 8601 string format for JSON compatibility.
        """
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")

    @staticmethod
    def format_as_json(data_payload: List[Any], metadata: Optional[Dict[str, Any]] = None, indent: Optional[int] = 4) -> str:
        """
        Formats the results and metadata into a structured JSON string.

        The output JSON has two top-level keys, "metadata" and "data". Clinics keep
        their nested dentist lists.

        Raises:
            TypeError: If the data contains non-serializable types not handled
                       by the _datetime_serializer.
        """
        structured_output = {
            "metadata": metadata or {},
            "data": OutputFormatter.to_records(data_payload),
        }
        try:
            return json.dumps(structured_output, default=OutputFormatter._datetime_serializer,
                              indent=indent, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.error(f"Error during JSON serialization: {e}")
            raise

    @staticmethod
    def _format_delimited(data: List[Any], delimiter: str) -> str:
        if not data:
            return ""
        rows = [OutputFormatter.flatten_record(record) for record in OutputFormatter.to_records(data)]
        output = io.StringIO()
        writer = csv.DictWriter(output, fieldnames=list(rows[0].keys()), delimiter=delimiter)
        writer.writeheader()
        writer.writerows(rows)
        return output.getvalue()

    @staticmethod
    def format_as_csv(data: List[Any]) -> str:
        """Formats the results into a CSV string, one row per clinic."""
        return OutputFormatter._format_delimited(data, ",")

    @staticmethod
    def format_as_tsv(data: List[Any]) -> str:
        """Formats the results into a TSV string, one row per clinic."""
        return OutputFormatter._format_delimited(data, "\t")

    @staticmethod
    def format_as_txt(data: List[Any]) -> str:
        """
        Formats the results as plain text, one block per clinic separated by '---'.

        Each block lists the clinic's non-empty values one per line, followed by
        one line per dentist.
        """
        blocks = []
        for record in OutputFormatter.to_records(data):
            lines = []
            for key, value in record.items():
                if key == "dentists" or value is None:
                    continue
                text = str(value).strip()
                if text:
                    lines.append(text)
            for dentist in record.get("dentists") or []:
                parts = [dentist.get(k) for k in ("name", "email", "phoneNumber")]
                lines.append(" | ".join(str(p) for p in parts if p))
            blocks.append("\n".join(lines))
        return "\n---\n".join(blocks)

    @staticmethod
    def format_as_console_table(data: List[Any], stream=sys.stdout) -> None:
        """Formats results as a console table and writes to the given stream."""
        if not data:
            logger.info("No data to display.")
            print("No data to display.", file=stream)
            return

        headers = ["Name", "Address", "Email", "Phone", "Dentists"]
        show_distance = isinstance(data[0], ProximityMatch)
        if show_distance:
            headers.append("Distance")

        rows = []
        for record in OutputFormatter.to_records(data):
            flat = OutputFormatter.flatten_record(record)
            row = [flat.get("name"), flat.get("address"), flat.get("email"),
                   flat.get("phoneNumber"), flat.get("dentists")]
            if show_distance:
                row.append(round(flat["distance"], 4))
            rows.append(row)

        print(tabulate(rows, headers=headers, tablefmt="grid"), file=stream)
