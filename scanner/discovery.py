"""File discovery utilities for scanning repositories."""

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Set, Tuple

from graph.model import TrackedFile


logger = logging.getLogger(__name__)


@dataclass
class WalkResult:
    """
    Outcome of walking a root directory.

    Attributes:
        tracked: Files passing both the folder and the extension filter.
        folder_paths: Relative paths of every file outside excluded folders.
        total_files: Count of every regular file found, excluded or not.
        total_size_bytes: Combined size of every regular file found.
        skipped: Entries skipped because they could not be listed or stat'd.
        cancelled: The walk stopped early on a cancellation signal.
    """

    tracked: List[TrackedFile] = field(default_factory=list)
    folder_paths: List[str] = field(default_factory=list)
    total_files: int = 0
    total_size_bytes: int = 0
    skipped: int = 0
    cancelled: bool = False

    @property
    def analyzed_size_bytes(self) -> int:
        return sum(file.size_bytes for file in self.tracked)


def is_excluded_path(relative_path: str, excluded_folders: Iterable[str]) -> bool:
    """Check whether any segment of a relative path names an excluded folder."""
    excluded = {name.lower() for name in excluded_folders}
    if not excluded:
        return False
    segments = (segment.lower() for segment in relative_path.split("/") if segment)
    return any(segment in excluded for segment in segments)


def iter_regular_files(
    root: Path,
    cancel_event: Optional[threading.Event] = None,
) -> Iterator[Tuple[Path, str, Optional[int]]]:
    """
    Iterate over regular files under root in sorted order.

    Symbolic links and special files are never yielded and symlinked
    directories are not descended. Entries that cannot be listed or stat'd
    are yielded with a size of None so callers can count them as skipped.

    Yields:
        (absolute path, root-relative posix path, size in bytes or None)
    """

    def _walk(current: Path, prefix: str) -> Iterator[Tuple[Path, str, Optional[int]]]:
        try:
            entries = sorted(current.iterdir())
        except OSError as e:
            logger.debug("Cannot list %s: %s", current, e)
            yield current, prefix.rstrip("/"), None
            return

        for entry in entries:
            if cancel_event is not None and cancel_event.is_set():
                return
            relative = prefix + entry.name
            try:
                if entry.is_symlink():
                    continue
                if entry.is_dir():
                    yield from _walk(entry, relative + "/")
                    continue
                if not entry.is_file():
                    continue
                size = entry.stat().st_size
            except OSError as e:
                logger.debug("Cannot stat %s: %s", entry, e)
                yield entry, relative, None
                continue
            yield entry, relative, size

    yield from _walk(root, "")


def walk_files(
    root: Path,
    exclude_folders: Iterable[str],
    extensions: Iterable[str],
    cancel_event: Optional[threading.Event] = None,
) -> WalkResult:
    """
    Walk a directory tree and classify every regular file.

    Args:
        root: Root directory to scan.
        exclude_folders: Folder names skipped wherever they appear in a path.
        extensions: Dot-prefixed, lowercased extensions to analyze.
        cancel_event: Optional signal that stops the walk early.

    Returns:
        WalkResult with raw totals and the tracked file set.
    """
    excluded: Set[str] = {name.lower() for name in exclude_folders}
    active: Set[str] = {ext.lower() for ext in extensions}
    result = WalkResult()

    for _, relative, size in iter_regular_files(root, cancel_event):
        if size is None:
            result.skipped += 1
            continue

        result.total_files += 1
        result.total_size_bytes += size

        if is_excluded_path(relative, excluded):
            continue

        result.folder_paths.append(relative)

        extension = Path(relative).suffix.lower()
        if extension not in active:
            continue

        result.tracked.append(TrackedFile(path=relative, extension=extension, size_bytes=size))

    if cancel_event is not None and cancel_event.is_set():
        result.cancelled = True

    logger.debug(
        "Walked %s: %d files, %d tracked, %d skipped",
        root, result.total_files, len(result.tracked), result.skipped,
    )
    return result
