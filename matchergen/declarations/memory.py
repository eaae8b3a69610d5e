"""In-memory declaration graph used by the CLI and by tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from ..logging import get_logger
from ..models import (
    AccessorShape,
    GeneratedUnit,
    GenerationMarker,
    MemberDescriptor,
    MemberKind,
    TypeDescriptor,
)
from .typerefs import split_qualified_name

logger = get_logger("declarations")


@dataclass
class _TypeEntry:
    descriptor: TypeDescriptor
    superclass: Optional[str] = None
    interfaces: List[str] = field(default_factory=list)
    members: List[MemberDescriptor] = field(default_factory=list)
    enclosed: List[str] = field(default_factory=list)


class InMemoryDeclarationModel:
    """Dictionary-backed implementation of :class:`DeclarationModel`.

    Supertypes are stored by qualified name and resolved lazily, so a type may
    reference a supertype declared later (or never, in which case it is
    treated as absent).
    """

    def __init__(self) -> None:
        self._types: Dict[str, _TypeEntry] = {}
        self._packages: Dict[str, List[str]] = {}

    # ------------------------------------------------------------------
    # Population

    def declare_package(self, name: str) -> None:
        self._packages.setdefault(name, [])

    def declare_type(
        self,
        descriptor: TypeDescriptor,
        *,
        superclass: str | None = None,
        interfaces: Iterable[str] = (),
        members: Iterable[MemberDescriptor] = (),
    ) -> TypeDescriptor:
        name = descriptor.qualified_name
        if name in self._types:
            raise ValueError(f"Type '{name}' is declared twice")
        enclosing = descriptor.enclosing_name
        if enclosing is None:
            self._packages.setdefault(descriptor.package, []).append(name)
        else:
            parent = self._types.get(enclosing)
            if parent is None:
                raise ValueError(f"Enclosing type '{enclosing}' of '{name}' is not declared")
            parent.enclosed.append(name)
        self._types[name] = _TypeEntry(
            descriptor=descriptor,
            superclass=superclass,
            interfaces=list(interfaces),
            members=list(members),
        )
        return descriptor

    def set_supertypes(
        self, type_: TypeDescriptor, *, superclass: str | None, interfaces: Iterable[str]
    ) -> None:
        entry = self._entry(type_)
        entry.superclass = superclass
        entry.interfaces = list(interfaces)

    def add_members(self, type_: TypeDescriptor, members: Iterable[MemberDescriptor]) -> None:
        self._entry(type_).members.extend(members)

    def declare_generated(self, unit: GeneratedUnit) -> None:
        """Declare the types of a previously generated unit, carrying its marker."""
        self._declare_generated_name(unit.qualified_name, unit.marker)
        for nested_name in unit.nested_names:
            self._declare_generated_name(nested_name, unit.marker)

    def _declare_generated_name(self, qualified_name: str, marker: GenerationMarker) -> None:
        if qualified_name in self._types:
            logger.debug("Generated type %s already declared", qualified_name)
            return
        package, simple_names = split_qualified_name(qualified_name, self.type_named)
        self.declare_type(TypeDescriptor(package=package, simple_names=simple_names, marker=marker))

    # ------------------------------------------------------------------
    # DeclarationModel

    def type_named(self, qualified_name: str) -> Optional[TypeDescriptor]:
        entry = self._types.get(qualified_name)
        return entry.descriptor if entry else None

    def package_members(self, name: str) -> Optional[Sequence[TypeDescriptor]]:
        names = self._packages.get(name)
        if names is None:
            return None
        return [self._types[member].descriptor for member in names]

    def enclosing_type(self, type_: TypeDescriptor) -> Optional[TypeDescriptor]:
        enclosing = type_.enclosing_name
        return self.type_named(enclosing) if enclosing else None

    def enclosed_types(self, type_: TypeDescriptor) -> Sequence[TypeDescriptor]:
        return [self._types[name].descriptor for name in self._entry(type_).enclosed]

    def members_of(self, type_: TypeDescriptor) -> Sequence[MemberDescriptor]:
        return list(self._entry(type_).members)

    def superclass_of(self, type_: TypeDescriptor) -> Optional[TypeDescriptor]:
        name = self._entry(type_).superclass
        if name is None:
            return None
        resolved = self.type_named(name)
        if resolved is None:
            logger.debug("Superclass %s of %s is not declared", name, type_.qualified_name)
        return resolved

    def interfaces_of(self, type_: TypeDescriptor) -> Sequence[TypeDescriptor]:
        resolved: List[TypeDescriptor] = []
        for name in self._entry(type_).interfaces:
            interface = self.type_named(name)
            if interface is None:
                logger.debug("Interface %s of %s is not declared", name, type_.qualified_name)
                continue
            resolved.append(interface)
        return resolved

    def accessor_shape_of(self, member: MemberDescriptor) -> Optional[AccessorShape]:
        if member.kind is not MemberKind.METHOD:
            return None
        return AccessorShape(
            visibility=member.visibility,
            static=member.static,
            parameters=member.parameters,
            return_type=member.type,
            signature=member.signature,
        )

    # ------------------------------------------------------------------

    def __contains__(self, qualified_name: object) -> bool:
        return qualified_name in self._types

    def _entry(self, type_: TypeDescriptor) -> _TypeEntry:
        try:
            return self._types[type_.qualified_name]
        except KeyError as exc:
            raise KeyError(f"Type '{type_.qualified_name}' is not declared") from exc


__all__ = ["InMemoryDeclarationModel"]
