"""Per-pass state shared by the generation components."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Set

from ..diagnostics import Diagnostic, DiagnosticSink, Severity
from ..models import ConfigurationSource, TypeDescriptor

CandidateSet = Dict[str, TypeDescriptor]


def candidate_set(*groups: CandidateSet) -> CandidateSet:
    """Union of candidate sets, keyed by qualified name, first insertion wins."""
    merged: CandidateSet = {}
    for group in groups:
        for name, descriptor in group.items():
            merged.setdefault(name, descriptor)
    return merged


@dataclass
class GenerationContext:
    """Diagnostic sink, current configuration and the global candidate set."""

    sink: DiagnosticSink
    configuration: Optional[ConfigurationSource] = None
    candidates: CandidateSet = field(default_factory=dict)
    _reported: Set[Diagnostic] = field(default_factory=set, repr=False)

    def for_configuration(self, configuration: ConfigurationSource) -> "GenerationContext":
        return replace(self, configuration=configuration)

    @property
    def origin(self) -> Optional[str]:
        return self.configuration.origin if self.configuration else None

    def warn(self, message: str, *, element: str | None = None, entry: str | None = None) -> None:
        self.report(Diagnostic(Severity.WARNING, message, element=element, origin=self.origin, entry=entry))

    def note(self, message: str, *, element: str | None = None) -> None:
        self.report(Diagnostic(Severity.NOTE, message, element=element, origin=self.origin))

    def report(self, diagnostic: Diagnostic) -> None:
        if diagnostic in self._reported:
            return
        self._reported.add(diagnostic)
        self.sink.report(diagnostic)


__all__ = ["CandidateSet", "GenerationContext", "candidate_set"]
