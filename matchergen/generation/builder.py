"""Assembly of matcher specs, recursively over nested candidate types."""

from __future__ import annotations

from typing import Sequence

from ..declarations.base import DeclarationModel
from ..models import GenerationMarker, MatcherSpec, PropertyDescriptor, TypeDescriptor
from .context import GenerationContext
from .properties import PropertyExtractor


class MatcherSpecBuilder:
    """Builds the :class:`MatcherSpec` tree for a top-level target type.

    Only nested types present in the context's global candidate set get a
    nested matcher; everything else was excluded (and reported) earlier.
    """

    def __init__(self, model: DeclarationModel, extractor: PropertyExtractor | None = None) -> None:
        self.model = model
        self.extractor = extractor or PropertyExtractor(model)

    def build(
        self,
        type_: TypeDescriptor,
        properties: Sequence[PropertyDescriptor],
        marker: GenerationMarker,
        originating_elements: Sequence[str],
        context: GenerationContext,
    ) -> MatcherSpec:
        nested_origins = [type_.qualified_name, *originating_elements]
        siblings = self.model.package_members(type_.package) or ()
        nested = [
            self.build(child, self.extractor.extract(child), marker, nested_origins, context)
            for child in self.model.enclosed_types(type_)
            if child.qualified_name in context.candidates
        ]
        return MatcherSpec(
            target=type_,
            properties=list(properties),
            marker=marker,
            nested=nested,
            originating_elements=list(dict.fromkeys(nested_origins)),
            package_members=[member.simple_name for member in siblings],
        )


__all__ = ["MatcherSpecBuilder"]
