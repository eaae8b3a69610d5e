"""Turns configured type and package names into type descriptors."""

from __future__ import annotations

from typing import Iterable, List, Optional

from ..declarations.base import DeclarationModel
from ..logging import get_logger
from ..models import TypeDescriptor
from .context import CandidateSet, GenerationContext

logger = get_logger("resolver")


class ConfigurationResolver:
    """Resolves names from a configuration marker against the declaration model."""

    def __init__(self, model: DeclarationModel) -> None:
        self.model = model

    def resolve(self, names: Iterable[str], context: GenerationContext) -> CandidateSet:
        resolved: CandidateSet = {}
        for name in dict.fromkeys(names):
            types = self.resolve_name(name)
            if not types:
                context.warn(
                    f"Neither a type nor a package exists for '{name}'",
                    entry=name,
                )
                continue
            for descriptor in types:
                resolved.setdefault(descriptor.qualified_name, descriptor)
        logger.debug("Resolved %d types for %s", len(resolved), context.origin or "<unknown>")
        return resolved

    def resolve_name(self, name: str) -> List[TypeDescriptor]:
        """Types for ``name``: package members plus the outermost type named by it."""
        types = list(self.model.package_members(name) or ())
        outermost = self.outermost(self.model.type_named(name))
        if outermost is not None and outermost not in types:
            types.append(outermost)
        return types

    def outermost(self, descriptor: Optional[TypeDescriptor]) -> Optional[TypeDescriptor]:
        """Walk up to the top-level type; nested types are generated through it."""
        current = descriptor
        while current is not None:
            enclosing = self.model.enclosing_type(current)
            if enclosing is None:
                return current
            current = enclosing
        return None


__all__ = ["ConfigurationResolver"]
