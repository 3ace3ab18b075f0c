"""Directory tree reconstruction over the scanned file list."""

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional, Tuple


@dataclass(frozen=True)
class FolderNode:
    """A directory with its files and subdirectories, both kept sorted."""

    name: str
    files: Tuple[str, ...] = ()
    folders: Tuple["FolderNode", ...] = ()

    def get_folder(self, name: str) -> Optional["FolderNode"]:
        for folder in self.folders:
            if folder.name == name:
                return folder
        return None

    def iter_paths(self, prefix: str = "") -> Iterator[str]:
        """Flatten the tree back to root-relative file paths."""
        for file_name in self.files:
            yield prefix + file_name
        for folder in self.folders:
            yield from folder.iter_paths(prefix + folder.name + "/")

    def count_files(self) -> int:
        return len(self.files) + sum(folder.count_files() for folder in self.folders)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "files": list(self.files),
            "folders": [folder.to_dict() for folder in self.folders],
        }


class _Draft:
    """Mutable folder used while paths are being inserted."""

    def __init__(self):
        self.files = []
        self.folders: Dict[str, "_Draft"] = {}

    def freeze(self, name: str) -> FolderNode:
        return FolderNode(
            name=name,
            files=tuple(sorted(self.files)),
            folders=tuple(self.folders[child].freeze(child) for child in sorted(self.folders)),
        )


def build_folder_tree(paths: Iterable[str], root_name: str = "/") -> FolderNode:
    """
    Build a folder tree from root-relative, forward-slash paths.

    Args:
        paths: File paths surviving folder exclusion.
        root_name: Name given to the root node.

    Returns:
        Root FolderNode with every level sorted.
    """
    root = _Draft()

    for file_path in paths:
        parts = [part for part in file_path.split("/") if part]
        if not parts:
            continue

        current = root
        for part in parts[:-1]:
            current = current.folders.setdefault(part, _Draft())

        current.files.append(parts[-1])

    return root.freeze(root_name)
