"""
Diagnostic definitions and collection for NC program analysis.
"""
from enum import Enum
from dataclasses import dataclass
from typing import List


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class Diagnostic:
    """A single finding attached to a 1-based program line."""
    severity: Severity
    line_number: int
    message: str

    def __str__(self):
        return f"Line {self.line_number}: {self.message}"


class DiagnosticCollector:
    """Collects diagnostics in detection order, one list per severity."""

    def __init__(self):
        self.errors: List[Diagnostic] = []
        self.warnings: List[Diagnostic] = []
        self.info: List[Diagnostic] = []

    def add(self, severity: Severity, line_number: int, message: str) -> Diagnostic:
        """Append a diagnostic to the list matching its severity."""
        diagnostic = Diagnostic(severity, line_number, message)
        self._list_for(severity).append(diagnostic)
        return diagnostic

    def add_error(self, line_number: int, message: str) -> Diagnostic:
        return self.add(Severity.ERROR, line_number, message)

    def add_warning(self, line_number: int, message: str) -> Diagnostic:
        return self.add(Severity.WARNING, line_number, message)

    def add_info(self, line_number: int, message: str) -> Diagnostic:
        return self.add(Severity.INFO, line_number, message)

    def _list_for(self, severity: Severity) -> List[Diagnostic]:
        if severity is Severity.ERROR:
            return self.errors
        if severity is Severity.WARNING:
            return self.warnings
        return self.info

