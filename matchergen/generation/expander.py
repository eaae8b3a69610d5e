"""Expansion of root types to every public nested type."""

from __future__ import annotations

from collections import deque
from typing import Deque

from ..declarations.base import DeclarationModel
from ..models import TypeDescriptor
from .context import CandidateSet, GenerationContext


class TypeGraphExpander:
    """Collects roots and their transitively nested public types.

    Non-public nested types are reported once and their subtree is not
    visited: nested matchers mirror nested type accessibility.
    """

    def __init__(self, model: DeclarationModel) -> None:
        self.model = model

    def expand(self, roots: CandidateSet, context: GenerationContext) -> CandidateSet:
        expanded: CandidateSet = {}
        worklist: Deque[TypeDescriptor] = deque(roots.values())
        while worklist:
            current = worklist.popleft()
            if current.qualified_name in expanded:
                continue
            expanded[current.qualified_name] = current
            for nested in self.model.enclosed_types(current):
                if not nested.is_public:
                    context.note(
                        f"Matcher generation skipped for non public type: {nested.qualified_name}",
                        element=nested.qualified_name,
                    )
                    continue
                worklist.append(nested)
        return expanded


__all__ = ["TypeGraphExpander"]
