"""Scanner module for file discovery, import extraction and resolution."""

from .discovery import iter_regular_files, walk_files
from .parser import LanguageClass, extract_imports, language_for_extension
from .resolver import resolve_import, resolve_target
from .builder import build_report
from .errors import NoRootError, ScanCancelledError, ScanError
from .options import ScanOptions, load_options
from .session import ScanSession

__all__ = [
    "iter_regular_files",
    "walk_files",
    "LanguageClass",
    "extract_imports",
    "language_for_extension",
    "resolve_import",
    "resolve_target",
    "build_report",
    "NoRootError",
    "ScanCancelledError",
    "ScanError",
    "ScanOptions",
    "load_options",
    "ScanSession",
]
