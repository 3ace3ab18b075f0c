"""Scan options and settings-file loading."""

import json
import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Set, Union

import yaml


logger = logging.getLogger(__name__)


DEFAULT_EXTENSIONS = (
    ".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs",
    ".py", ".pyw",
    ".json", ".jsonc",
    ".html", ".htm", ".css", ".scss",
    ".sql", ".db", ".sqlite",
    ".yaml", ".yml", ".xml",
    ".vsix", ".exe",
    ".java", ".cs", ".go", ".rs", ".php", ".rb",
)

# Entry-point detection relies on these even under a narrow filter
ALWAYS_INCLUDED_EXTENSIONS = frozenset({".exe"})

DEFAULT_EXCLUDE_FOLDERS = frozenset({
    ".git", ".hg", ".svn",
    "node_modules", "__pycache__", ".tox", ".nox",
    "venv", ".venv",
    ".idea", ".vscode",
    "dist", "build", "out", ".eggs",
})

DEFAULT_CRITICAL_LIMIT = 12
DEFAULT_READ_TIMEOUT = 10.0

CONFIG_FILENAMES = (
    ".project-graph.yaml",
    ".project-graph.yml",
    ".project-graph.toml",
    ".project-graph.json",
)

# Settings may be nested under the namespace the editor extension used
_NAMESPACES = ("projectGraph", "project_graph", "project-graph")


def default_workers() -> int:
    return min(os.cpu_count() or 4, 8)


def _iter_raw_values(raw: Any, setting: str) -> Iterable[str]:
    if raw is None:
        return []
    if isinstance(raw, str):
        return raw.split(",")
    if isinstance(raw, (list, tuple, set, frozenset)):
        values = []
        for item in raw:
            if isinstance(item, str):
                values.append(item)
            else:
                logger.warning("Ignoring non-string %s entry: %r", setting, item)
        return values
    logger.warning("Ignoring malformed %s setting: %r", setting, raw)
    return []


def normalize_extensions(raw: Any) -> Set[str]:
    """
    Normalize an extension filter.

    Entries are trimmed, lowercased and dot-prefixed; blanks are dropped.
    A comma-separated string is accepted in place of a list.
    """
    extensions: Set[str] = set()
    for value in _iter_raw_values(raw, "includeExtensions"):
        ext = value.strip().lower()
        if not ext or ext == ".":
            continue
        if not ext.startswith("."):
            ext = "." + ext
        extensions.add(ext)
    return extensions


def normalize_folders(raw: Any) -> Set[str]:
    """Normalize excluded folder names (trimmed, lowercased, no separators)."""
    folders: Set[str] = set()
    for value in _iter_raw_values(raw, "excludeFolders"):
        name = value.strip().strip("/\\").lower()
        if name:
            folders.add(name)
    return folders


def normalize_main_file(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    if not isinstance(raw, str):
        logger.warning("Ignoring malformed mainFile setting: %r", raw)
        return None
    value = raw.strip().replace("\\", "/")
    while value.startswith("./"):
        value = value[2:]
    return value or None


@dataclass
class ScanOptions:
    """
    Options accepted by the scanner.

    Attributes:
        include_extensions: Extensions to analyze. Empty means DEFAULT_EXTENSIONS.
        exclude_folders: Folder names skipped wherever they appear in a path.
        main_file: Optional explicit entry point (root-relative path).
        max_workers: Size of the read/extract thread pool.
        read_timeout: Seconds to wait for a single file read.
        critical_limit: Number of critical files reported.
        partial_on_cancel: Return a partial report on cancellation instead of raising.
    """

    include_extensions: Set[str] = field(default_factory=set)
    exclude_folders: Set[str] = field(default_factory=lambda: set(DEFAULT_EXCLUDE_FOLDERS))
    main_file: Optional[str] = None
    max_workers: int = field(default_factory=default_workers)
    read_timeout: float = DEFAULT_READ_TIMEOUT
    critical_limit: int = DEFAULT_CRITICAL_LIMIT
    partial_on_cancel: bool = True

    def __post_init__(self):
        self.include_extensions = normalize_extensions(self.include_extensions)
        self.exclude_folders = normalize_folders(self.exclude_folders)
        self.main_file = normalize_main_file(self.main_file)
        if self.max_workers < 1:
            self.max_workers = 1
        if self.critical_limit < 0:
            self.critical_limit = 0

    @property
    def active_extensions(self) -> Set[str]:
        """Extensions actually analyzed, including the force-included ones."""
        active = set(self.include_extensions or DEFAULT_EXTENSIONS)
        active.update(ALWAYS_INCLUDED_EXTENSIONS)
        return active

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ScanOptions":
        """
        Build options from a settings mapping.

        Keys may be camelCase (includeExtensions) or snake_case
        (include_extensions), optionally nested under a projectGraph key.
        Unknown keys are ignored.
        """
        for namespace in _NAMESPACES:
            nested = data.get(namespace)
            if isinstance(nested, Mapping):
                data = nested
                break

        def pick(*names: str) -> Any:
            for name in names:
                if name in data:
                    return data[name]
            return None

        kwargs: dict = {}
        include = pick("includeExtensions", "include_extensions")
        if include is not None:
            kwargs["include_extensions"] = include
        exclude = pick("excludeFolders", "exclude_folders")
        if exclude is not None:
            kwargs["exclude_folders"] = exclude
        main_file = pick("mainFile", "main_file")
        if main_file is not None:
            kwargs["main_file"] = main_file

        for key, names, cast in (
            ("max_workers", ("maxWorkers", "max_workers"), int),
            ("read_timeout", ("readTimeout", "read_timeout"), float),
            ("critical_limit", ("criticalLimit", "critical_limit"), int),
        ):
            value = pick(*names)
            if value is None:
                continue
            try:
                kwargs[key] = cast(value)
            except (TypeError, ValueError):
                logger.warning("Ignoring malformed %s setting: %r", names[0], value)

        return cls(**kwargs)


def _read_settings(path: Path) -> Any:
    suffix = path.suffix.lower()
    content = path.read_text(encoding="utf-8")

    if suffix in {".yaml", ".yml"}:
        return yaml.safe_load(content)
    elif suffix == ".toml":
        return tomllib.loads(content)
    elif suffix == ".json":
        return json.loads(content)
    else:
        # Unknown suffix: JSON is a subset of YAML
        return yaml.safe_load(content)


def load_options(path: Union[str, Path]) -> ScanOptions:
    """
    Load scan options from a YAML, TOML or JSON settings file.

    An unreadable or malformed file is logged and yields default options;
    configuration problems never abort a scan.
    """
    path = Path(path)
    try:
        data = _read_settings(path)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read settings file %s: %s", path, e)
        return ScanOptions()
    except (yaml.YAMLError, tomllib.TOMLDecodeError, json.JSONDecodeError) as e:
        logger.warning("Malformed settings file %s: %s", path, e)
        return ScanOptions()

    if data is None:
        return ScanOptions()
    if not isinstance(data, Mapping):
        logger.warning("Settings file %s does not contain a mapping", path)
        return ScanOptions()

    logger.debug("Loaded settings from %s", path)
    return ScanOptions.from_mapping(data)


def find_config_file(root: Union[str, Path]) -> Optional[Path]:
    """Return the first settings file found directly under root, if any."""
    root = Path(root)
    for name in CONFIG_FILENAMES:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


def merge_exclude_folders(extra: Optional[List[str]]) -> Set[str]:
    """Combine user-supplied folder names with the default exclude set."""
    return normalize_folders(list(extra or [])) | set(DEFAULT_EXCLUDE_FOLDERS)
