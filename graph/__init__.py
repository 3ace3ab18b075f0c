"""Graph model, scoring and report types."""

from .model import DependencyGraph, GraphEdge, GraphNode, TrackedFile, bytes_to_mb
from .report import Report
from .scoring import CriticalityEntry, rank_critical_files, select_main_file
from .tree import FolderNode, build_folder_tree

__all__ = [
    "DependencyGraph",
    "GraphEdge",
    "GraphNode",
    "TrackedFile",
    "bytes_to_mb",
    "Report",
    "CriticalityEntry",
    "rank_critical_files",
    "select_main_file",
    "FolderNode",
    "build_folder_tree",
]
