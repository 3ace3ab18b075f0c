"""Shared fixtures for building throwaway source trees."""

from pathlib import Path
from typing import Dict

import pytest

from scanner.builder import build_report
from scanner.options import ScanOptions


def write_files(root: Path, files: Dict[str, str]) -> Path:
    """Create files (and parent folders) under root from a path -> content map."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


SAMPLE_PROJECT = {
    "src/main.ts": (
        'import { helper } from "./util";\n'
        'import "./styles.css";\n'
        'const cfg = require("../config.json");\n'
    ),
    "src/util.ts": (
        "export const helper = 1;\n"
        'import { other } from "./missing";\n'
    ),
    "src/styles.css": "body { margin: 0; }\n",
    "config.json": '{"name": "demo"}\n',
    "README.md": "# demo\n",
}


@pytest.fixture
def make_tree(tmp_path):
    """Return a function that writes a file map into tmp_path."""
    def _make(files: Dict[str, str]) -> Path:
        return write_files(tmp_path, files)
    return _make


@pytest.fixture
def sample_report(tmp_path):
    """A report over a small TypeScript project."""
    write_files(tmp_path, SAMPLE_PROJECT)
    return build_report(tmp_path, ScanOptions(max_workers=2))
