"""Lexical import extraction for source files.

Extraction is pattern based, not a parser: templated or computed import
expressions are missed, and that is accepted.
"""

import re
from enum import Enum
from typing import Set


class LanguageClass(Enum):
    """Which extraction grammar applies to a file."""

    ECMASCRIPT = "ecmascript"
    PYTHON = "python"
    NONE = "none"


ECMASCRIPT_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs")
PYTHON_EXTENSIONS = (".py", ".pyw")

_QUOTE = r"""["'`]"""
_SPEC = r"""([^"'`]+)"""

# import x from "mod" / import { a, b } from "mod" / import * as ns from "mod"
_IMPORT_FROM_RE = re.compile(r"import\s+[^\"'`]*?from\s+" + _QUOTE + _SPEC + _QUOTE)

# import "mod"
_IMPORT_SIDE_EFFECT_RE = re.compile(r"import\s+" + _QUOTE + _SPEC + _QUOTE)

# require("mod")
_REQUIRE_RE = re.compile(r"require\(\s*" + _QUOTE + _SPEC + _QUOTE + r"\s*\)")

# import("mod")
_DYNAMIC_IMPORT_RE = re.compile(r"import\(\s*" + _QUOTE + _SPEC + _QUOTE + r"\s*\)")

_ECMASCRIPT_PATTERNS = (
    _IMPORT_FROM_RE,
    _IMPORT_SIDE_EFFECT_RE,
    _REQUIRE_RE,
    _DYNAMIC_IMPORT_RE,
)

# from pkg.mod import name / from .. import name
_PY_FROM_RE = re.compile(r"^[ \t]*from[ \t]+([.\w]+)[ \t]+import\b", re.MULTILINE)

# import a, b.c as d  (one physical line, optional trailing comment)
_PY_IMPORT_RE = re.compile(
    r"^[ \t]*import[ \t]+([\w.][\w. \t,]*?)[ \t]*(?:#.*)?$",
    re.MULTILINE,
)

_PY_ALIAS_RE = re.compile(r"\s+as\s+", re.IGNORECASE)


def language_for_extension(extension: str) -> LanguageClass:
    """Map a file extension (with or without the dot) to its language class."""
    ext = extension.lower()
    if ext and not ext.startswith("."):
        ext = "." + ext
    if ext in ECMASCRIPT_EXTENSIONS:
        return LanguageClass.ECMASCRIPT
    if ext in PYTHON_EXTENSIONS:
        return LanguageClass.PYTHON
    return LanguageClass.NONE


def extract_imports(content: str, language: LanguageClass) -> Set[str]:
    """
    Extract raw import specifiers from file content.

    Args:
        content: Text content of the file.
        language: Language class deciding which patterns apply.

    Returns:
        Set of specifier strings, unvalidated and unresolved.
    """
    if language is LanguageClass.ECMASCRIPT:
        return extract_ecmascript_imports(content)
    if language is LanguageClass.PYTHON:
        return extract_python_imports(content)
    return set()


def extract_ecmascript_imports(content: str) -> Set[str]:
    """Collect specifiers from import/require statements and dynamic imports."""
    specifiers: Set[str] = set()
    for pattern in _ECMASCRIPT_PATTERNS:
        for match in pattern.finditer(content):
            specifiers.add(match.group(1))
    return specifiers


def extract_python_imports(content: str) -> Set[str]:
    """
    Collect dotted module names from Python import statements.

    `from x import y` yields `x`; `import a, b as c` yields `a` and `b`.
    Relative forms keep their leading dots.
    """
    specifiers: Set[str] = set()

    for match in _PY_FROM_RE.finditer(content):
        specifiers.add(match.group(1).strip())

    for match in _PY_IMPORT_RE.finditer(content):
        for raw_item in match.group(1).split(","):
            item = raw_item.strip()
            if not item:
                continue
            module_name = _PY_ALIAS_RE.split(item)[0].strip()
            if module_name:
                specifiers.add(module_name)

    return specifiers
