"""Main-file selection and criticality ranking."""

import math
import posixpath
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .model import TrackedFile


DEFAULT_LIMIT = 12

INBOUND_WEIGHT = 3.0
OUTBOUND_WEIGHT = 1.5
ENTRY_BONUS = 5.0

_EXTENSION_PRIORITY = {
    ".exe": 50,
    ".vsix": 48,
    ".pyw": 25,
    ".html": 20,
    ".htm": 20,
    ".sql": 18,
    ".db": 18,
    ".sqlite": 18,
    ".json": 14,
    ".jsonc": 14,
}

_ENTRY_BASENAMES = {
    "package.json",
    "package-lock.json",
    "extension.ts",
    "extension.js",
    "manifest.json",
    "theme.json",
    "launch.json",
    "index.html",
    "main.html",
    "app.html",
    "main.sql",
    "schema.sql",
}

_SOURCE_DIRS = ("/src/", "/core/", "/app/", "/extension/", "/database/")
_ENTRY_TOKENS = ("main", "app", "dashboard", "start")


@dataclass(frozen=True)
class CriticalityEntry:
    """A ranked file. score is None when ranked by size alone."""

    path: str
    inbound_count: int
    outbound_count: int
    size_bytes: int
    score: Optional[float]

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "inboundCount": self.inbound_count,
            "outboundCount": self.outbound_count,
            "sizeBytes": self.size_bytes,
            "score": None if self.score is None else round(self.score, 4),
        }


def main_file_priority(path: str, extension: str) -> int:
    """Heuristic likelihood that a file is the project's entry point."""
    lower = path.lower()
    base_name = posixpath.basename(lower)
    score = _EXTENSION_PRIORITY.get(extension.lower(), 0)

    if base_name in _ENTRY_BASENAMES:
        score += 35
    if any(directory in lower for directory in _SOURCE_DIRS):
        score += 10
    if any(token in lower for token in _ENTRY_TOKENS):
        score += 15
    if "core/" in lower:
        score += 12

    return score


def select_main_file(
    files: Sequence[TrackedFile],
    configured: Optional[str] = None,
) -> Optional[str]:
    """
    Pick the entry point of the analyzed project.

    A configured path wins when it names a tracked file exactly. Otherwise the
    file with the highest priority is chosen, larger files first on ties.
    """
    if configured:
        wanted = configured.strip().replace("\\", "/")
        while wanted.startswith("./"):
            wanted = wanted[2:]
        for file in files:
            if file.path == wanted:
                return file.path

    if not files:
        return None

    ranked = sorted(
        files,
        key=lambda f: (-main_file_priority(f.path, f.extension), -f.size_bytes, f.path),
    )
    return ranked[0].path


def criticality_score(inbound: int, outbound: int, size_bytes: int, is_main: bool) -> float:
    score = INBOUND_WEIGHT * inbound + OUTBOUND_WEIGHT * outbound + math.log10(size_bytes + 1)
    if is_main:
        score += ENTRY_BONUS
    return score


def rank_critical_files(
    files: Sequence[TrackedFile],
    main_file: Optional[str] = None,
    limit: int = DEFAULT_LIMIT,
) -> List[CriticalityEntry]:
    """
    Rank files by how load-bearing they are in the import graph.

    Files with no edges are skipped unless they are the main file. When no
    file qualifies, the largest files are returned without a score.
    """
    candidates: List[CriticalityEntry] = []
    for file in files:
        inbound = len(file.imported_by)
        outbound = len(file.imports)
        is_main = file.path == main_file
        if not (inbound or outbound or is_main):
            continue
        candidates.append(CriticalityEntry(
            path=file.path,
            inbound_count=inbound,
            outbound_count=outbound,
            size_bytes=file.size_bytes,
            score=criticality_score(inbound, outbound, file.size_bytes, is_main),
        ))

    if candidates:
        candidates.sort(key=lambda e: (-e.score, -e.inbound_count, -e.size_bytes, e.path))
        return candidates[:limit]

    by_size = sorted(files, key=lambda f: (-f.size_bytes, f.path))
    return [
        CriticalityEntry(
            path=file.path,
            inbound_count=0,
            outbound_count=0,
            size_bytes=file.size_bytes,
            score=None,
        )
        for file in by_size[:limit]
    ]
