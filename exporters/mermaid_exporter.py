"""Mermaid flowchart exporter for scan reports."""

import re
from typing import Dict, List, Set

from graph.report import Report


def to_mermaid(
    report: Report,
    orientation: str = "LR",
    group_by_directory: bool = False,
    show_all: bool = False,
    highlight_critical: bool = True,
) -> str:
    """
    Convert a report's import graph to Mermaid flowchart syntax.

    Args:
        report: The scan report to export.
        orientation: Flowchart orientation (LR, TD, TB, RL, BT).
        group_by_directory: If True, group nodes by top-level directory.
        show_all: If True, include files with no edges.
        highlight_critical: If True, style critical files and the main file.

    Returns:
        Mermaid flowchart string.
    """
    lines = [f"flowchart {orientation}"]

    if show_all:
        paths = sorted(node.id for node in report.graph_nodes)
    else:
        connected: Set[str] = set()
        for edge in report.graph_edges:
            connected.add(edge.source)
            connected.add(edge.target)
        if report.main_file is not None:
            connected.add(report.main_file)
        paths = sorted(connected)

    taken: Set[str] = set()
    node_ids: Dict[str, str] = {path: _unique_id(path, taken) for path in paths}

    if group_by_directory:
        lines.extend(_generate_grouped_nodes(paths, node_ids, taken))
    else:
        for path in paths:
            lines.append(f'    {node_ids[path]}["{path}"]')

    # Add edges
    lines.append("")
    for edge in report.graph_edges:
        if edge.source in node_ids and edge.target in node_ids:
            lines.append(f"    {node_ids[edge.source]} --> {node_ids[edge.target]}")

    if highlight_critical:
        styled: List[str] = []
        for path in report.critical_files:
            if path in node_ids and path != report.main_file:
                styled.append(f"    style {node_ids[path]} stroke:#cc6600,stroke-width:2px")
        if report.main_file in node_ids:
            styled.append(f"    style {node_ids[report.main_file]} stroke:#0066cc,stroke-width:3px")
        if styled:
            lines.append("")
            lines.extend(styled)

    return "\n".join(lines)


def _generate_grouped_nodes(
    paths: List[str], node_ids: Dict[str, str], taken: Set[str]
) -> List[str]:
    """Generate node definitions inside subgraphs per top-level directory."""
    lines = []

    groups: Dict[str, List[str]] = {}
    for path in paths:
        parts = path.split("/")
        top_dir = parts[0] if len(parts) > 1 else "root"
        groups.setdefault(top_dir, []).append(path)

    for group_name in sorted(groups):
        subgraph_id = _unique_id("dir_" + group_name, taken)
        lines.append(f"    subgraph {subgraph_id}[{group_name}]")
        for path in groups[group_name]:
            lines.append(f'        {node_ids[path]}["{path}"]')
        lines.append("    end")

    return lines


def _unique_id(value: str, taken: Set[str]) -> str:
    """Sanitize value and append _2, _3, ... until the ID is unused."""
    base = _sanitize_id(value)
    candidate = base
    counter = 1
    while candidate in taken:
        counter += 1
        candidate = f"{base}_{counter}"
    taken.add(candidate)
    return candidate


def _sanitize_id(value: str) -> str:
    """
    Convert a path to a valid Mermaid node ID.

    Mermaid IDs can only contain letters, digits, and underscores.
    """
    # Replace path separators and dots with underscores
    sanitized = re.sub(r"[/\\.\-]", "_", value)
    # Remove any remaining invalid characters
    sanitized = re.sub(r"[^a-zA-Z0-9_]", "", sanitized)
    # Ensure it starts with a letter
    if sanitized and not sanitized[0].isalpha():
        sanitized = "n_" + sanitized
    return sanitized or "unknown"
