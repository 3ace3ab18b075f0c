"""Caller-owned scan session.

The scan itself is stateless; a session only remembers what its owner asked
for last and offers a way to cancel an in-flight scan from another thread.
"""

import logging
import threading
from pathlib import Path
from typing import Optional, Union

from graph.report import Report
from .builder import build_report
from .options import ScanOptions


logger = logging.getLogger(__name__)


class ScanSession:
    """
    Holds the root, options and most recent report for one consumer.

    Example:
        >>> session = ScanSession("/path/to/project")
        >>> report = session.run()
        >>> report = session.refresh()  # rescan with the same settings
    """

    def __init__(self, root: Union[str, Path], options: Optional[ScanOptions] = None):
        self.root = root
        self.options = options or ScanOptions()
        self._report: Optional[Report] = None
        self._cancel_event = threading.Event()
        self._lock = threading.Lock()

    @property
    def report(self) -> Optional[Report]:
        """The last completed report, if any."""
        return self._report

    @property
    def cancel_requested(self) -> bool:
        return self._cancel_event.is_set()

    def run(self) -> Report:
        """Run a scan and remember its report."""
        with self._lock:
            self._cancel_event.clear()
            report = build_report(self.root, self.options, cancel_event=self._cancel_event)
            self._report = report
            return report

    def refresh(self) -> Report:
        """Rescan with the current root and options."""
        logger.debug("Refreshing scan of %s", self.root)
        return self.run()

    def cancel(self) -> None:
        """Ask an in-flight scan to stop issuing file reads."""
        self._cancel_event.set()

    def __repr__(self) -> str:
        return f"ScanSession(root={str(self.root)!r}, has_report={self._report is not None})"
