"""Helper utilities for constructing declaration graphs in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Iterable, Mapping, Optional

from matchergen.declarations import InMemoryDeclarationModel, parse_type_ref
from matchergen.declarations.typerefs import split_qualified_name
from matchergen.models import (
    GenerationMarker,
    MemberDescriptor,
    MemberKind,
    TypeDescriptor,
    TypeKind,
    Visibility,
)


class GraphBuilder:
    """Declares types and accessors into a throwaway in-memory model."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "project"
        self.root.mkdir()
        self.model = InMemoryDeclarationModel()

    def type(
        self,
        qualified_name: str,
        *,
        kind: TypeKind = TypeKind.CLASS,
        visibility: Visibility = Visibility.PUBLIC,
        type_parameters: Iterable[str] = (),
        superclass: Optional[str] = None,
        interfaces: Iterable[str] = (),
        getters: Optional[Mapping[str, str]] = None,
        marker: Optional[GenerationMarker] = None,
    ) -> TypeDescriptor:
        """Declare a type; ``getters`` maps accessor names to return type text."""
        package, simple_names = split_qualified_name(qualified_name, self.model.type_named)
        descriptor = self.model.declare_type(
            TypeDescriptor(
                package=package,
                simple_names=simple_names,
                kind=kind,
                visibility=visibility,
                type_parameters=tuple(type_parameters),
                marker=marker,
            ),
            superclass=superclass,
            interfaces=interfaces,
        )
        for name, returns in (getters or {}).items():
            self.method(descriptor, name, returns)
        return descriptor

    def method(
        self,
        type_: TypeDescriptor,
        name: str,
        returns: str,
        *,
        parameters: Iterable[str] = (),
        visibility: Visibility = Visibility.PUBLIC,
        static: bool = False,
    ) -> MemberDescriptor:
        member = MemberDescriptor(
            name=name,
            kind=MemberKind.METHOD,
            visibility=visibility,
            static=static,
            parameters=tuple(self._ref(type_, parameter) for parameter in parameters),
            type=self._ref(type_, returns),
        )
        self.model.add_members(type_, [member])
        return member

    def field(self, type_: TypeDescriptor, name: str, type_text: str) -> MemberDescriptor:
        member = MemberDescriptor(
            name=name,
            kind=MemberKind.FIELD,
            visibility=Visibility.PUBLIC,
            type=self._ref(type_, type_text),
        )
        self.model.add_members(type_, [member])
        return member

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the project directory."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def path(self) -> Path:
        """Return the project root path."""
        return self.root

    def _ref(self, type_: TypeDescriptor, text: str):
        scope = self._type_parameter_scope(type_)
        return parse_type_ref(text, type_parameters=scope, lookup=self.model.type_named)

    def _type_parameter_scope(self, type_: TypeDescriptor) -> tuple:
        scope: tuple = ()
        current: Optional[TypeDescriptor] = type_
        while current is not None:
            scope = current.type_parameters + scope
            current = self.model.enclosing_type(current)
        return scope


__all__ = ["GraphBuilder"]
