"""Diagnostic messages reported to the host during a generation pass."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol

from .logging import get_logger


class Severity(enum.Enum):
    WARNING = "warning"
    NOTE = "note"


@dataclass(frozen=True)
class Diagnostic:
    """A single message with the declarations it is attributed to."""

    severity: Severity
    message: str
    element: Optional[str] = None
    origin: Optional[str] = None
    entry: Optional[str] = None

    def format(self) -> str:
        location = [part for part in (self.element, self.origin) if part]
        if not location:
            return self.message
        return f"{self.message} [{' <- '.join(location)}]"


class DiagnosticSink(Protocol):
    """Receives diagnostics from the generation core."""

    def report(self, diagnostic: Diagnostic) -> None:
        ...


class CollectingDiagnosticSink:
    """Keeps every reported diagnostic in order."""

    def __init__(self) -> None:
        self.diagnostics: List[Diagnostic] = []

    def report(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    def of(self, severity: Severity) -> List[Diagnostic]:
        return [diagnostic for diagnostic in self.diagnostics if diagnostic.severity is severity]


class LoggingDiagnosticSink(CollectingDiagnosticSink):
    """Collects diagnostics and forwards them to the matchergen logger."""

    _LEVELS = {
        Severity.WARNING: logging.WARNING,
        Severity.NOTE: logging.INFO,
    }

    def __init__(self, logger: logging.Logger | None = None) -> None:
        super().__init__()
        self.logger = logger or get_logger("diagnostics")

    def report(self, diagnostic: Diagnostic) -> None:
        super().report(diagnostic)
        self.logger.log(self._LEVELS[diagnostic.severity], "%s", diagnostic.format())


__all__ = [
    "CollectingDiagnosticSink",
    "Diagnostic",
    "DiagnosticSink",
    "LoggingDiagnosticSink",
    "Severity",
]
