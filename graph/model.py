"""Graph data model for file import relationships."""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, NamedTuple, Set, Tuple


def bytes_to_mb(size_bytes: int) -> float:
    """Convert a byte count to megabytes rounded to three decimals."""
    return round(size_bytes / (1024 * 1024), 3)


@dataclass(frozen=True)
class TrackedFile:
    """
    A file included in the analysis.

    Attributes:
        path: Root-relative path with forward slashes, original casing.
        extension: Lowercased, dot-prefixed extension.
        size_bytes: File size in bytes.
        imports: Paths this file imports, sorted and deduplicated.
        imported_by: Paths importing this file, sorted and deduplicated.
    """

    path: str
    extension: str
    size_bytes: int
    imports: Tuple[str, ...] = field(default=())
    imported_by: Tuple[str, ...] = field(default=())

    @property
    def size_mb(self) -> float:
        return bytes_to_mb(self.size_bytes)

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "extension": self.extension,
            "sizeBytes": self.size_bytes,
            "sizeMb": self.size_mb,
            "imports": list(self.imports),
            "importedBy": list(self.imported_by),
        }


class GraphEdge(NamedTuple):
    """A directed import relationship between two tracked files."""

    source: str
    target: str


@dataclass(frozen=True)
class GraphNode:
    """A graph vertex as handed to renderers."""

    id: str
    label: str
    size_mb: float

    def to_dict(self) -> dict:
        return {"id": self.id, "label": self.label, "sizeMb": self.size_mb}


class DependencyGraph:
    """
    A directed graph of resolved imports.

    Nodes are root-relative paths, and edges represent 'importer -> imported'
    relationships. Unresolved specifiers are tracked separately and never
    become edges.
    """

    def __init__(self):
        self._nodes: Set[str] = set()
        self._edges: Dict[str, Set[str]] = {}
        self._unresolved: Dict[str, Set[str]] = {}  # source -> unresolved specifiers

    @property
    def unresolved(self) -> Dict[str, Set[str]]:
        """Return unresolved specifiers (source -> set of specifier strings)."""
        return {k: v.copy() for k, v in self._unresolved.items()}

    def add_node(self, node: str) -> None:
        """Add a node to the graph."""
        self._nodes.add(node)

    def add_edge(self, source: str, target: str) -> bool:
        """
        Add a directed edge from source to target.

        Self-loops are dropped. Both nodes are added to the graph.

        Returns:
            True if the edge was added, False for a self-loop.
        """
        if source == target:
            return False

        self._nodes.add(source)
        self._nodes.add(target)

        if source not in self._edges:
            self._edges[source] = set()
        self._edges[source].add(target)
        return True

    def add_unresolved(self, source: str, specifier: str) -> None:
        """Record a specifier from source that did not map to a tracked file."""
        self._nodes.add(source)
        if source not in self._unresolved:
            self._unresolved[source] = set()
        self._unresolved[source].add(specifier)

    def get_unresolved(self, source: str) -> Set[str]:
        return self._unresolved.get(source, set()).copy()

    def get_targets(self, source: str) -> Set[str]:
        """Get all files that the source file imports."""
        return self._edges.get(source, set()).copy()

    def imports_of(self, source: str) -> List[str]:
        """Sorted, deduplicated outbound neighbours."""
        return sorted(self._edges.get(source, ()))

    def inbound_index(self) -> Dict[str, List[str]]:
        """
        Build the imported-by lists for every node in one pass.

        Only meaningful once every node's outbound edges are known.
        """
        inbound: Dict[str, Set[str]] = {node: set() for node in self._nodes}
        for source, targets in self._edges.items():
            for target in targets:
                inbound[target].add(source)
        return {node: sorted(sources) for node, sources in inbound.items()}

    def get_roots(self) -> Set[str]:
        """
        Get nodes that are never imported by other nodes.

        These are 'root' files that import others but are not
        themselves imported.
        """
        all_targets: Set[str] = set()
        for targets in self._edges.values():
            all_targets.update(targets)

        return self._nodes - all_targets

    def iter_edges(self) -> Iterator[GraphEdge]:
        """Iterate over all edges in sorted order."""
        for source in sorted(self._edges):
            for target in sorted(self._edges[source]):
                yield GraphEdge(source, target)

    def get_connected_nodes(self) -> Set[str]:
        """
        Get nodes that take part in at least one edge.

        Returns:
            Set of nodes with an outbound or inbound edge.
        """
        connected: Set[str] = set()

        for source, targets in self._edges.items():
            if targets:
                connected.add(source)
                connected.update(targets)

        return connected

    def edge_count(self) -> int:
        return sum(len(t) for t in self._edges.values())

    def __len__(self) -> int:
        """Return the number of nodes in the graph."""
        return len(self._nodes)

    def __contains__(self, node: str) -> bool:
        """Check if a node is in the graph."""
        return node in self._nodes

    def __repr__(self) -> str:
        unresolved_count = sum(len(u) for u in self._unresolved.values())
        return f"DependencyGraph(nodes={len(self._nodes)}, edges={self.edge_count()}, unresolved={unresolved_count})"
