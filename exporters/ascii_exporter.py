"""ASCII tree-style exporter for scan reports."""

from typing import List, Set, Tuple

from graph.model import DependencyGraph
from graph.report import Report
from graph.tree import FolderNode


# Unicode tree characters
UNICODE_BRANCH = "├── "
UNICODE_LAST = "└── "
UNICODE_VERTICAL = "│   "
UNICODE_SPACE = "    "

# Pure ASCII characters for --ascii-style ascii
ASCII_BRANCH = "|-- "
ASCII_LAST = "\\-- "
ASCII_VERTICAL = "|   "
ASCII_SPACE = "    "

Chars = Tuple[str, str, str, str]


def to_ascii(
    report: Report,
    style: str = "tree",
    show_tree: bool = True,
    show_dependencies: bool = True,
    include_unresolved: bool = True,
) -> str:
    """
    Convert a report to a plain-text summary.

    Sections: summary header, critical files, folder tree and dependency
    trees (one per file that nothing imports).

    Args:
        report: The scan report to export.
        style: Output style - "tree" (Unicode) or "ascii" (pure ASCII).
        show_tree: If True, render the folder tree.
        show_dependencies: If True, render dependency trees.
        include_unresolved: If True, list unresolved specifiers under their importer.

    Returns:
        Text summary.
    """
    if style == "ascii":
        chars = (ASCII_BRANCH, ASCII_LAST, ASCII_VERTICAL, ASCII_SPACE)
    else:
        chars = (UNICODE_BRANCH, UNICODE_LAST, UNICODE_VERTICAL, UNICODE_SPACE)

    lines: List[str] = []
    lines.extend(_render_summary(report))

    lines.append("")
    lines.append("Critical files:")
    if report.critical_entries:
        for position, entry in enumerate(report.critical_entries, start=1):
            if entry.score is None:
                detail = f"{entry.size_bytes} bytes"
            else:
                detail = (
                    f"score {entry.score:.2f}, in {entry.inbound_count}, "
                    f"out {entry.outbound_count}"
                )
            lines.append(f"  {position:>2}. {entry.path} ({detail})")
    else:
        lines.append("  None")

    if show_tree:
        lines.append("")
        lines.append("Folder tree:")
        lines.append(report.folder_tree.name)
        _render_folder(report.folder_tree, "", chars, lines)

    if show_dependencies and report.graph_edges:
        lines.append("")
        lines.append("Dependencies:")
        lines.extend(_render_dependencies(report, chars, include_unresolved))

    return "\n".join(lines)


def _render_summary(report: Report) -> List[str]:
    main_file = report.main_file or "-"
    main_size = report.main_file_size_mb if report.main_file_size_mb is not None else 0
    lines = [
        f"Workspace: {report.workspace_name}",
        f"Root: {report.root_path}",
        f"Generated: {report.generated_at}",
        f"Total files: {report.total_files} ({report.total_size_mb} MB)",
        f"Analyzed: {report.analyzed_files} files ({report.analyzed_size_mb} MB)",
        f"Main file: {main_file} ({main_size} MB)",
        f"Graph: {len(report.graph_nodes)} nodes, {len(report.graph_edges)} edges",
    ]
    if report.cancelled:
        lines.append("Scan cancelled: results are partial")
    return lines


def _render_folder(node: FolderNode, prefix: str, chars: Chars, lines: List[str]) -> None:
    """Recursively render folders first, then files, of one node."""
    branch, last, vertical, space = chars
    children = [(folder.name + "/", folder) for folder in node.folders]
    children += [(file_name, None) for file_name in node.files]

    for position, (label, folder) in enumerate(children):
        is_last = position == len(children) - 1
        lines.append(f"{prefix}{last if is_last else branch}{label}")
        if folder is not None:
            _render_folder(folder, prefix + (space if is_last else vertical), chars, lines)


def _render_dependencies(report: Report, chars: Chars, include_unresolved: bool) -> List[str]:
    graph = report.dependency_graph()
    connected = graph.get_connected_nodes()

    # Files nothing imports start a tree; cycle members no root reaches follow
    root_nodes = sorted(graph.get_roots() & connected)
    expanded: Set[str] = set()

    lines: List[str] = []
    for root_node in root_nodes:
        _render_tree(graph, root_node, chars, expanded, lines, include_unresolved)

    for node in sorted(connected):
        if node not in expanded and graph.get_targets(node):
            _render_tree(graph, node, chars, expanded, lines, include_unresolved)

    return lines


def _render_tree(
    graph: DependencyGraph,
    root_node: str,
    chars: Chars,
    expanded: Set[str],
    lines: List[str],
    include_unresolved: bool,
) -> None:
    if lines:
        lines.append("")
    _render_node(
        node=root_node,
        graph=graph,
        prefix="",
        is_last=True,
        chars=chars,
        visited=set(),
        expanded=expanded,
        lines=lines,
        include_unresolved=include_unresolved,
        is_root=True,
    )


def _render_node(
    node: str,
    graph: DependencyGraph,
    prefix: str,
    is_last: bool,
    chars: Chars,
    visited: Set[str],
    expanded: Set[str],
    lines: List[str],
    include_unresolved: bool = True,
    is_root: bool = False,
) -> None:
    """
    Recursively render a node and its imports.

    Each node's imports are listed once per render; later occurrences are
    printed with a [^] marker instead of being expanded again.

    Args:
        node: Current node to render.
        graph: Import graph rebuilt from the report.
        prefix: Current line prefix for indentation.
        is_last: Whether this is the last child of its parent.
        chars: Character set (branch, last, vertical, space).
        visited: Nodes on the current path (to detect cycles).
        expanded: Nodes whose imports were already listed.
        lines: Output lines list (modified in place).
        include_unresolved: If True, list unresolved specifiers.
        is_root: Whether this is a root-level node.
    """
    branch, last, vertical, space = chars

    children = graph.imports_of(node)
    missing_refs = sorted(graph.get_unresolved(node)) if include_unresolved else []

    if node in visited:
        marker = " [*]"
    elif node in expanded and (children or missing_refs):
        marker = " [^]"
    else:
        marker = ""

    if is_root:
        lines.append(f"{node}{marker}")
    else:
        connector = last if is_last else branch
        lines.append(f"{prefix}{connector}{node}{marker}")

    if marker:
        return

    visited.add(node)
    expanded.add(node)

    total_items = len(children) + len(missing_refs)
    new_prefix = "" if is_root else prefix + (space if is_last else vertical)

    for item_index, child in enumerate(children, start=1):
        _render_node(
            node=child,
            graph=graph,
            prefix=new_prefix,
            is_last=item_index == total_items,
            chars=chars,
            visited=visited,
            expanded=expanded,
            lines=lines,
            include_unresolved=include_unresolved,
        )

    for item_index, specifier in enumerate(missing_refs, start=len(children) + 1):
        connector = last if item_index == total_items else branch
        lines.append(f"{new_prefix}{connector}{specifier} [UNRESOLVED]")

    visited.discard(node)
