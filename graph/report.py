"""The snapshot produced by a scan."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .model import DependencyGraph, GraphEdge, GraphNode, TrackedFile
from .scoring import CriticalityEntry
from .tree import FolderNode


def freeze_unresolved(unresolved: Mapping[str, Any]) -> Mapping[str, Tuple[str, ...]]:
    """Read-only view of unresolved specifiers, each list sorted."""
    return MappingProxyType({
        source: tuple(sorted(specifiers))
        for source, specifiers in sorted(unresolved.items())
    })


@dataclass(frozen=True)
class Report:
    """
    Immutable result of one scan.

    Totals cover every regular file found under the root; the analyzed
    figures cover only files that passed the folder and extension filters.
    Adjacency is expressed as path tuples, so the report has no reference
    cycles and serializes directly.
    """

    workspace_name: str
    root_path: str
    generated_at: str
    total_files: int
    total_size_mb: float
    analyzed_files: int
    analyzed_size_mb: float
    main_file: Optional[str]
    main_file_size_mb: Optional[float]
    folder_tree: FolderNode
    files: Tuple[TrackedFile, ...]
    graph_nodes: Tuple[GraphNode, ...]
    graph_edges: Tuple[GraphEdge, ...]
    critical_entries: Tuple[CriticalityEntry, ...]
    unresolved: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: MappingProxyType({}))
    cancelled: bool = False

    @property
    def critical_files(self) -> List[str]:
        return [entry.path for entry in self.critical_entries]

    def get_file(self, path: str) -> Optional[TrackedFile]:
        for file in self.files:
            if file.path == path:
                return file
        return None

    def dependency_graph(self) -> DependencyGraph:
        """Rebuild a DependencyGraph over the analyzed files for traversal."""
        graph = DependencyGraph()
        for node in self.graph_nodes:
            graph.add_node(node.id)
        for edge in self.graph_edges:
            graph.add_edge(edge.source, edge.target)
        for source, specifiers in self.unresolved.items():
            for specifier in specifiers:
                graph.add_unresolved(source, specifier)
        return graph

    def to_dict(self) -> Dict[str, Any]:
        """Plain, JSON-ready representation using the dashboard field names."""
        return {
            "workspaceName": self.workspace_name,
            "rootPath": self.root_path,
            "generatedAt": self.generated_at,
            "totalFiles": self.total_files,
            "analyzedFiles": self.analyzed_files,
            "totalSizeMb": self.total_size_mb,
            "analyzedSizeMb": self.analyzed_size_mb,
            "mainFile": self.main_file,
            "mainFileSizeMb": self.main_file_size_mb,
            "folderTree": self.folder_tree.to_dict(),
            "files": [file.to_dict() for file in self.files],
            "graphNodes": [node.to_dict() for node in self.graph_nodes],
            "graphLinks": [{"source": edge.source, "target": edge.target} for edge in self.graph_edges],
            "criticalFiles": self.critical_files,
            "criticalEntries": [entry.to_dict() for entry in self.critical_entries],
            "unresolved": {path: list(specs) for path, specs in sorted(self.unresolved.items())},
            "cancelled": self.cancelled,
        }
