"""Scan pipeline: walk, extract, resolve, build the graph and assemble a report."""

import logging
import posixpath
import threading
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple, Union

from graph.model import DependencyGraph, GraphNode, TrackedFile, bytes_to_mb
from graph.report import Report, freeze_unresolved
from graph.scoring import rank_critical_files, select_main_file
from graph.tree import build_folder_tree
from .discovery import WalkResult, walk_files
from .errors import NoRootError, ScanCancelledError
from .options import ScanOptions
from .parser import LanguageClass, extract_imports, language_for_extension
from .resolver import is_local_specifier, path_key, resolve_target


logger = logging.getLogger(__name__)

_POLL_INTERVAL = 0.05


def _is_cancelled(cancel_event: Optional[threading.Event]) -> bool:
    return cancel_event is not None and cancel_event.is_set()


def validate_root(root: Union[str, Path, None]) -> Path:
    """Return the absolute scan root, or raise NoRootError."""
    if root is None or str(root).strip() == "":
        raise NoRootError(root)
    path = Path(root).expanduser()
    if not path.is_dir():
        raise NoRootError(root)
    return path.resolve()


def read_file_imports(
    file_path: Path,
    language: LanguageClass,
    cancel_event: Optional[threading.Event] = None,
) -> Optional[FrozenSet[str]]:
    """
    Read one file and extract its specifiers.

    Returns:
        The specifier set (empty if the file cannot be read), or None if the
        scan was cancelled before the read started.
    """
    if _is_cancelled(cancel_event):
        return None
    try:
        content = file_path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug("Cannot read %s: %s", file_path, e)
        return frozenset()
    return frozenset(extract_imports(content, language))


def _timed_read(
    started: Dict[str, float],
    path: str,
    file_path: Path,
    language: LanguageClass,
    cancel_event: Optional[threading.Event],
) -> Optional[FrozenSet[str]]:
    started[path] = time.monotonic()
    return read_file_imports(file_path, language, cancel_event)


def extract_all(
    root: Path,
    files: Sequence[TrackedFile],
    max_workers: int,
    read_timeout: Optional[float] = None,
    cancel_event: Optional[threading.Event] = None,
) -> Dict[str, FrozenSet[str]]:
    """
    Read and extract every file that has an import grammar, concurrently.

    Each worker returns its own result; results are merged here only after
    every future has settled or been abandoned. A file's timeout runs from
    the moment its own read starts, so queued files are never charged for a
    slow read ahead of them. An abandoned read counts as a file with no
    imports, and reads still queued behind it move to a fresh pool.

    Returns:
        Specifier sets keyed by relative path. Files skipped by cancellation
        are absent.
    """
    jobs: List[Tuple[str, LanguageClass]] = []
    for file in files:
        language = language_for_extension(file.extension)
        if language is not LanguageClass.NONE:
            jobs.append((file.path, language))

    results: Dict[str, FrozenSet[str]] = {}
    if not jobs:
        return results

    timeout = read_timeout if read_timeout and read_timeout > 0 else None
    started: Dict[str, float] = {}
    executors: List[ThreadPoolExecutor] = []

    def submit_all(pending_jobs: Sequence[Tuple[str, LanguageClass]]) -> Dict[Future, Tuple[str, LanguageClass]]:
        executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="project-graph-read")
        executors.append(executor)
        return {
            executor.submit(_timed_read, started, path, root / path, language, cancel_event): (path, language)
            for path, language in pending_jobs
        }

    try:
        pending = submit_all(jobs)
        while pending:
            if _is_cancelled(cancel_event):
                break

            done, _ = wait(pending, timeout=_POLL_INTERVAL, return_when=FIRST_COMPLETED)
            for future in done:
                path, _ = pending.pop(future)
                specifiers = future.result()
                if specifiers is not None:
                    results[path] = specifiers

            if timeout is None:
                continue

            now = time.monotonic()
            stalled = [
                future for future, (path, _) in pending.items()
                if not future.done() and path in started and now - started[path] > timeout
            ]
            if not stalled:
                continue

            for future in stalled:
                path, _ = pending.pop(future)
                logger.warning("Timed out reading %s after %ss", path, timeout)
                results[path] = frozenset()

            # Abandoned reads keep their worker threads
            requeue = [job for future, job in list(pending.items()) if future.cancel()]
            if requeue:
                pending = {future: job for future, job in pending.items() if not future.cancelled()}
                pending.update(submit_all(requeue))
    finally:
        for executor in executors:
            executor.shutdown(wait=False, cancel_futures=True)

    return results


def build_dependency_graph(
    root: Path,
    files: Sequence[TrackedFile],
    specifiers: Dict[str, FrozenSet[str]],
) -> DependencyGraph:
    """
    Resolve every file's specifiers against the complete file index.

    Requires the full set of tracked files up front: a file's edges cannot be
    resolved until every other file is indexed.
    """
    root_str = root.as_posix()
    index = {path_key(posixpath.join(root_str, file.path)): file.path for file in files}

    graph = DependencyGraph()
    for file in files:
        graph.add_node(file.path)

    for file in files:
        language = language_for_extension(file.extension)
        importer = posixpath.join(root_str, file.path)
        for specifier in sorted(specifiers.get(file.path, ())):
            target = resolve_target(importer, specifier, root_str, index, language)
            if target is None:
                if is_local_specifier(specifier, language):
                    graph.add_unresolved(file.path, specifier)
                continue
            graph.add_edge(file.path, target)

    return graph


def finalize_files(files: Sequence[TrackedFile], graph: DependencyGraph) -> List[TrackedFile]:
    """Attach sorted import and imported-by lists once all edges are known."""
    inbound = graph.inbound_index()
    return [
        replace(
            file,
            imports=tuple(graph.imports_of(file.path)),
            imported_by=tuple(inbound.get(file.path, ())),
        )
        for file in files
    ]


def assemble_report(
    root: Path,
    walk: WalkResult,
    files: Sequence[TrackedFile],
    graph: DependencyGraph,
    options: ScanOptions,
    cancelled: bool = False,
) -> Report:
    """Combine walk totals, graph, scoring and folder tree into a Report."""
    main_file = select_main_file(files, options.main_file)
    by_path = {file.path: file for file in files}
    main_file_size_mb = by_path[main_file].size_mb if main_file is not None else None

    critical = rank_critical_files(files, main_file, options.critical_limit)

    return Report(
        workspace_name=root.name or str(root),
        root_path=str(root),
        generated_at=datetime.now(timezone.utc).isoformat(),
        total_files=walk.total_files,
        total_size_mb=bytes_to_mb(walk.total_size_bytes),
        analyzed_files=len(files),
        analyzed_size_mb=bytes_to_mb(walk.analyzed_size_bytes),
        main_file=main_file,
        main_file_size_mb=main_file_size_mb,
        folder_tree=build_folder_tree(walk.folder_paths),
        files=tuple(sorted(files, key=lambda f: (-f.size_bytes, f.path))),
        graph_nodes=tuple(
            GraphNode(id=file.path, label=file.name, size_mb=file.size_mb)
            for file in sorted(files, key=lambda f: f.path)
        ),
        graph_edges=tuple(graph.iter_edges()),
        critical_entries=tuple(critical),
        unresolved=freeze_unresolved(graph.unresolved),
        cancelled=cancelled,
    )


def build_report(
    root: Union[str, Path],
    options: Optional[ScanOptions] = None,
    cancel_event: Optional[threading.Event] = None,
) -> Report:
    """
    Scan a directory tree and build a dependency report.

    Args:
        root: Directory to scan.
        options: Scan options (defaults apply when omitted).
        cancel_event: Optional signal; once set no new file reads start.

    Returns:
        The assembled Report. On cancellation the report is partial and
        marked cancelled, unless options.partial_on_cancel is False.

    Raises:
        NoRootError: If root is missing or not a directory.
        ScanCancelledError: If cancelled and partial reports are disabled.
    """
    if options is None:
        options = ScanOptions()
    root_path = validate_root(root)

    walk = walk_files(
        root=root_path,
        exclude_folders=options.exclude_folders,
        extensions=options.active_extensions,
        cancel_event=cancel_event,
    )

    specifiers: Dict[str, FrozenSet[str]] = {}
    if not _is_cancelled(cancel_event):
        specifiers = extract_all(
            root_path,
            walk.tracked,
            max_workers=options.max_workers,
            read_timeout=options.read_timeout,
            cancel_event=cancel_event,
        )

    cancelled = walk.cancelled or _is_cancelled(cancel_event)
    if cancelled and not options.partial_on_cancel:
        raise ScanCancelledError(f"Scan of {root_path} was cancelled")

    # Barrier: resolution starts only after every read has settled
    graph = build_dependency_graph(root_path, walk.tracked, specifiers)
    files = finalize_files(walk.tracked, graph)
    report = assemble_report(root_path, walk, files, graph, options, cancelled=cancelled)

    logger.info(
        "Scanned %s: %d files total, %d analyzed, %d edges%s",
        root_path, report.total_files, report.analyzed_files, len(report.graph_edges),
        " (cancelled)" if cancelled else "",
    )
    return report
