"""JSON exporter for scan reports (machine-friendly format)."""

import json
from typing import Any, Dict

from graph.report import Report


def to_json(
    report: Report,
    indent: int = 2,
    include_unresolved: bool = True,
) -> str:
    """
    Convert a report to JSON format.

    Args:
        report: The scan report to export.
        indent: JSON indentation level.
        include_unresolved: If True, include unresolved local specifiers.

    Returns:
        JSON string representation of the report.
    """
    data: Dict[str, Any] = report.to_dict()
    if not include_unresolved:
        data.pop("unresolved", None)

    return json.dumps(data, indent=indent)
