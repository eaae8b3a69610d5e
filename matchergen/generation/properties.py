"""Extraction of bean-style properties from a type and its supertypes."""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Set

from ..declarations.base import DeclarationModel
from ..models import (
    MemberDescriptor,
    PrimitiveKind,
    PrimitiveType,
    PropertyDescriptor,
    TypeDescriptor,
    TypeKind,
    Visibility,
    VoidType,
    boxed,
)

_BOOLEAN = PrimitiveType(PrimitiveKind.BOOLEAN)


class PropertyExtractor:
    """Collects zero-argument accessors across the full inheritance chain.

    Members are visited own-first, then the superclass subtree, then each
    interface subtree in declaration order. The first accessor seen for a
    property name wins, which makes the most-derived declaration win.
    """

    def __init__(self, model: DeclarationModel) -> None:
        self.model = model

    def extract(self, type_: TypeDescriptor) -> List[PropertyDescriptor]:
        properties: Dict[str, PropertyDescriptor] = {}
        for member in self.transitive_members(type_):
            prop = self.property_of(member)
            if prop is not None:
                properties.setdefault(prop.name, prop)
        return list(properties.values())

    def transitive_members(self, type_: TypeDescriptor) -> Iterator[MemberDescriptor]:
        visited: Set[str] = set()
        stack: List[TypeDescriptor] = [type_]
        while stack:
            current = stack.pop()
            if current.qualified_name in visited:
                continue
            visited.add(current.qualified_name)
            yield from self.model.members_of(current)
            stack.extend(reversed(self._supertypes(current)))

    def property_of(self, member: MemberDescriptor) -> Optional[PropertyDescriptor]:
        shape = self.model.accessor_shape_of(member)
        if shape is None:
            return None
        if shape.visibility is not Visibility.PUBLIC or shape.static or shape.parameters:
            return None
        if isinstance(shape.return_type, VoidType):
            return None
        name = property_name(member.name, returns_boolean=shape.return_type == _BOOLEAN)
        if name is None:
            return None
        return PropertyDescriptor(
            name=name,
            type=shape.return_type,
            boxed_type=boxed(shape.return_type),
            accessor=shape.signature,
        )

    def _supertypes(self, type_: TypeDescriptor) -> List[TypeDescriptor]:
        supertypes: List[TypeDescriptor] = []
        if type_.kind is not TypeKind.ENUM:
            superclass = self.model.superclass_of(type_)
            if superclass is not None:
                supertypes.append(superclass)
        supertypes.extend(self.model.interfaces_of(type_))
        return supertypes


def property_name(accessor: str, *, returns_boolean: bool) -> Optional[str]:
    """Derive a property name from an accessor name, or ``None`` if it is not one.

    ``get`` prefixes only count for non-boolean results and ``is`` prefixes only
    for primitive boolean results.
    """
    if accessor.startswith("get") and not returns_boolean:
        remainder = accessor[3:]
    elif accessor.startswith("is") and returns_boolean:
        remainder = accessor[2:]
    else:
        return None
    if not remainder:
        return None
    return remainder[0].lower() + remainder[1:]


__all__ = ["PropertyExtractor", "property_name"]
