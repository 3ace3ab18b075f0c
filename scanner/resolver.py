"""Resolution of import specifiers to tracked files."""

import os
import posixpath
from pathlib import Path, PurePath
from typing import Iterable, Iterator, Mapping, Optional, Union

from .parser import ECMASCRIPT_EXTENSIONS, PYTHON_EXTENSIONS, LanguageClass


PathLike = Union[str, PurePath]


def path_key(path: PathLike) -> str:
    """
    Identity key for a path: separator-normalized, lexically collapsed and
    lowercased. Symlinks are not followed.
    """
    normalized = str(path).replace("\\", "/")
    normalized = posixpath.normpath(normalized)
    return normalized.lower()


def _join(base: PathLike, *parts: str) -> str:
    return posixpath.normpath(posixpath.join(str(base).replace("\\", "/"), *parts))


def _first_match(candidates: Iterable[str], index: Mapping[str, str]) -> Optional[str]:
    for candidate in candidates:
        tracked = index.get(path_key(candidate))
        if tracked is not None:
            return tracked
    return None


def _ecmascript_candidates(base: str) -> Iterator[str]:
    yield base
    for ext in ECMASCRIPT_EXTENSIONS:
        yield base + ext
    for ext in ECMASCRIPT_EXTENSIONS:
        yield posixpath.join(base, "index" + ext)


def _python_candidates(base: str) -> Iterator[str]:
    for ext in PYTHON_EXTENSIONS:
        yield base + ext
    yield posixpath.join(base, "__init__.py")


def resolve_ecmascript_import(
    importer: PathLike,
    specifier: str,
    root: PathLike,
    index: Mapping[str, str],
) -> Optional[str]:
    """
    Resolve an ECMAScript import specifier.

    Only relative (./, ../) and root-absolute (/) specifiers are resolved;
    anything else is an external package.

    Args:
        importer: Absolute path of the importing file.
        specifier: Raw specifier string.
        root: Scan root.
        index: Tracked files keyed by path_key of their absolute path.

    Returns:
        Root-relative path of the matched tracked file, or None.
    """
    if specifier.startswith("."):
        base = _join(posixpath.dirname(str(importer).replace("\\", "/")), specifier)
    elif specifier.startswith("/"):
        base = _join(root, "." + specifier)
    else:
        return None

    return _first_match(_ecmascript_candidates(base), index)


def resolve_python_import(
    importer: PathLike,
    specifier: str,
    root: PathLike,
    index: Mapping[str, str],
) -> Optional[str]:
    """
    Resolve a Python module specifier.

    A specifier with N leading dots is relative to the importer's package,
    walking N-1 directories up. Absolute names are tried from the root
    first, then from the importer's directory.

    Args:
        importer: Absolute path of the importing file.
        specifier: Dotted module name, possibly with leading dots.
        root: Scan root.
        index: Tracked files keyed by path_key of their absolute path.

    Returns:
        Root-relative path of the matched tracked file, or None.
    """
    importer_dir = posixpath.dirname(str(importer).replace("\\", "/"))

    if specifier.startswith("."):
        module_name = specifier.lstrip(".")
        dot_count = len(specifier) - len(module_name)
        base_dir = importer_dir
        for _ in range(dot_count - 1):
            base_dir = posixpath.dirname(base_dir)
        module_path = module_name.replace(".", "/")
        base = _join(base_dir, module_path) if module_path else posixpath.normpath(base_dir)
        return _first_match(_python_candidates(base), index)

    if not specifier:
        return None

    module_path = specifier.replace(".", "/")
    for base_dir in (root, importer_dir):
        resolved = _first_match(_python_candidates(_join(base_dir, module_path)), index)
        if resolved is not None:
            return resolved
    return None


def resolve_target(
    importer: PathLike,
    specifier: str,
    root: PathLike,
    index: Mapping[str, str],
    language: LanguageClass,
) -> Optional[str]:
    """Resolve a specifier with the grammar of the importer's language."""
    if language is LanguageClass.ECMASCRIPT:
        return resolve_ecmascript_import(importer, specifier, root, index)
    if language is LanguageClass.PYTHON:
        return resolve_python_import(importer, specifier, root, index)
    return None


def resolve_import(
    importer: PathLike,
    specifier: str,
    root: PathLike,
    index: Mapping[str, str],
    language: LanguageClass,
    importer_path: Optional[str] = None,
) -> Optional[str]:
    """
    Resolve a specifier to a tracked path other than the importer itself.

    A resolution that lands on the importer is discarded.
    """
    resolved = resolve_target(importer, specifier, root, index, language)
    if resolved is None:
        return None
    if importer_path is None:
        importer_path = index.get(path_key(importer))
    if importer_path is not None and path_key(resolved) == path_key(importer_path):
        return None
    return resolved


def is_local_specifier(specifier: str, language: LanguageClass) -> bool:
    """
    Whether an unresolved specifier points inside the tree.

    Bare ECMAScript names are packages, and bare Python names are usually
    the standard library or third-party modules.
    """
    if language is LanguageClass.ECMASCRIPT:
        return specifier.startswith((".", "/"))
    if language is LanguageClass.PYTHON:
        return specifier.startswith(".")
    return False


def get_relative_path(file_path: PathLike, root: PathLike) -> str:
    """
    Get the root-relative path with forward slashes.

    Falls back to the original path if it is not under root.
    """
    try:
        rel_path = os.path.relpath(str(file_path), str(root))
    except ValueError:
        return str(file_path).replace("\\", "/")
    if rel_path.split(os.sep)[0] == os.pardir:
        return str(file_path).replace("\\", "/")
    return Path(rel_path).as_posix()
