"""Skips types that this generator produced in an earlier pass."""

from __future__ import annotations

from ..models import TypeDescriptor
from .context import CandidateSet, GenerationContext


class SelfGenerationGuard:
    def __init__(self, generator_id: str) -> None:
        self.generator_id = generator_id

    def is_self_generated(self, descriptor: TypeDescriptor) -> bool:
        # Timestamp and schema version are informational only.
        marker = descriptor.marker
        return marker is not None and marker.generator_id == self.generator_id

    def filter(self, candidates: CandidateSet, context: GenerationContext) -> CandidateSet:
        kept: CandidateSet = {}
        for name, descriptor in candidates.items():
            if self.is_self_generated(descriptor):
                context.note(
                    f"Generation skipped for: '{name}' because it is already generated by this processor",
                    element=name,
                )
                continue
            kept[name] = descriptor
        return kept


__all__ = ["SelfGenerationGuard"]
