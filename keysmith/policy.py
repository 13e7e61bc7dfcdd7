"""Error handling policy for per-file failures."""

from __future__ import annotations

import sys
from typing import List, Optional, TextIO

from .errors import ErrorCategory, ErrorRecord


class ErrorPolicy:
    """Records per-file failures and warnings so a run can degrade gracefully.

    Failures never stop the run on their own; the caller decides the exit
    code from ``has_failures`` once every file has been visited.
    """

    def __init__(self, *, stream: Optional[TextIO] = None) -> None:
        self.stream = stream
        self.records: List[ErrorRecord] = []
        self.warnings: List[str] = []

    def handle_error(
        self,
        category: ErrorCategory,
        message: str,
        details: Optional[str] = None,
    ) -> None:
        """Record a failure and report it on the diagnostic stream."""

        self.records.append(ErrorRecord(category=category, message=message, details=details))
        self._emit(f"error: {message}")

    def warn(self, message: str) -> None:
        self.warnings.append(message)
        self._emit(f"warning: {message}")

    @property
    def has_failures(self) -> bool:
        return bool(self.records)

    def count(self, category: ErrorCategory) -> int:
        return sum(1 for record in self.records if record.category == category)

    def _emit(self, line: str) -> None:
        print(line, file=self.stream or sys.stderr)
