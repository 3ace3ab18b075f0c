"""Exceptions raised by the scanning pipeline."""

from pathlib import Path
from typing import Optional, Union


class ScanError(Exception):
    """Base class for scan failures."""


class NoRootError(ScanError):
    """Raised when the scan root is missing or is not a directory."""

    def __init__(self, root: Optional[Union[str, Path]]):
        self.root = root
        if root is None or str(root).strip() == "":
            message = "No root directory supplied"
        else:
            message = f"'{root}' is not a directory"
        super().__init__(message)


class ScanCancelledError(ScanError):
    """Raised when a scan is cancelled and the caller asked for no partial report."""
