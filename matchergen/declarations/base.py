"""Query surface over the host's declaration graph."""

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..models import AccessorShape, MemberDescriptor, TypeDescriptor


class DeclarationModel(Protocol):
    """Capabilities the generation core needs from a declaration graph.

    Implementations own the graph; the core only queries it. ``None`` always
    means "not declared", never an error.
    """

    def type_named(self, qualified_name: str) -> Optional[TypeDescriptor]:
        """Resolve a qualified (possibly nested) type name."""

    def package_members(self, name: str) -> Optional[Sequence[TypeDescriptor]]:
        """Return the top-level types declared directly in package ``name``."""

    def enclosing_type(self, type_: TypeDescriptor) -> Optional[TypeDescriptor]:
        """Return the type that directly encloses ``type_``."""

    def enclosed_types(self, type_: TypeDescriptor) -> Sequence[TypeDescriptor]:
        """Return the types declared directly inside ``type_`` in declaration order."""

    def members_of(self, type_: TypeDescriptor) -> Sequence[MemberDescriptor]:
        """Return the non-type members declared directly on ``type_``."""

    def superclass_of(self, type_: TypeDescriptor) -> Optional[TypeDescriptor]:
        """Return the declared superclass, or ``None`` when there is no real one."""

    def interfaces_of(self, type_: TypeDescriptor) -> Sequence[TypeDescriptor]:
        """Return directly implemented or extended interfaces in declaration order."""

    def accessor_shape_of(self, member: MemberDescriptor) -> Optional[AccessorShape]:
        """Return the call shape of a method member, ``None`` for anything else."""
