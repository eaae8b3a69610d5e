"""Declaration documents: the on-disk form of a declaration graph.

A host build exports its type graph as YAML or JSON::

    packages:
      - name: com.example.model
        types:
          - name: Person
            superclass: com.example.model.Base
            interfaces: [com.example.model.Named]
            methods:
              - {name: getName, returns: java.lang.String}
              - {name: isAdult, returns: boolean}
            types:
              - {name: Id, visibility: public}
    configurations:
      - origin: com.example.config.MatcherConfig
        value: [com.example.model]
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..models import (
    ConfigurationSource,
    GenerationMarker,
    MemberDescriptor,
    MemberKind,
    TypeDescriptor,
    TypeKind,
    Visibility,
)
from .memory import InMemoryDeclarationModel
from .typerefs import TypeRefSyntaxError, parse_type_ref


class DeclarationError(RuntimeError):
    """Raised when a declaration document cannot be read or validated."""


class MarkerDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    value: str
    date: str = ""
    schema_version: int = 1


class MethodDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    returns: str = "void"
    parameters: List[str] = Field(default_factory=list)
    type_parameters: List[str] = Field(default_factory=list)
    visibility: Visibility = Visibility.PUBLIC
    static: bool = False


class FieldDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    type: str
    visibility: Visibility = Visibility.PRIVATE
    static: bool = False


class TypeDocument(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str
    kind: TypeKind = TypeKind.CLASS
    visibility: Visibility = Visibility.PUBLIC
    type_parameters: List[str] = Field(default_factory=list)
    superclass: Optional[str] = None
    interfaces: List[str] = Field(default_factory=list)
    methods: List[MethodDocument] = Field(default_factory=list)
    attributes: List[FieldDocument] = Field(default_factory=list, alias="fields")
    types: List["TypeDocument"] = Field(default_factory=list)
    generated: Optional[MarkerDocument] = None


TypeDocument.model_rebuild()


class PackageDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    types: List[TypeDocument] = Field(default_factory=list)


class ConfigurationDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    origin: str
    value: List[str] = Field(default_factory=list)

    @field_validator("value", mode="before")
    @classmethod
    def keep_malformed_entries(cls, v: Any) -> Any:
        """Stringify non-string entries; resolving them reports a warning."""
        if v is None:
            return []
        if isinstance(v, list):
            return [str(entry) for entry in v]
        return [str(v)]


class DeclarationDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    packages: List[PackageDocument] = Field(default_factory=list)
    configurations: List[ConfigurationDocument] = Field(default_factory=list)


def read_document(path: Path) -> DeclarationDocument:
    """Read and validate a YAML or JSON declaration document."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DeclarationError(f"Cannot read declaration document {path}: {exc}") from exc
    try:
        raw = json.loads(text) if path.suffix == ".json" else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise DeclarationError(f"Failed to parse {path.name}: {exc}") from exc
    return parse_document(raw or {}, source=path.name)


def parse_document(raw: Any, *, source: str = "<memory>") -> DeclarationDocument:
    try:
        return DeclarationDocument.model_validate(raw)
    except ValidationError as exc:
        raise DeclarationError(f"Invalid declaration document {source}: {exc}") from exc


def load_declarations(
    paths: Sequence[Path],
    model: InMemoryDeclarationModel | None = None,
) -> Tuple[InMemoryDeclarationModel, List[ConfigurationSource]]:
    """Populate a declaration model from documents, returning their configurations."""
    documents = [read_document(path) for path in paths]
    model = model if model is not None else InMemoryDeclarationModel()
    populate(model, documents)
    configurations = [
        ConfigurationSource(origin=config.origin, value=tuple(config.value))
        for document in documents
        for config in document.configurations
    ]
    return model, configurations


def populate(model: InMemoryDeclarationModel, documents: Iterable[DeclarationDocument]) -> None:
    """Declare every type first, then attach supertypes and members.

    Two passes let type references point at types declared further down or in
    a later document.
    """
    declared: List[Tuple[TypeDescriptor, TypeDocument, Tuple[str, ...]]] = []
    for document in documents:
        for package in document.packages:
            model.declare_package(package.name)
            for type_doc in package.types:
                _declare(model, package.name, (), (), type_doc, declared)

    for descriptor, type_doc, scope in declared:
        try:
            model.set_supertypes(
                descriptor,
                superclass=type_doc.superclass,
                interfaces=type_doc.interfaces,
            )
            model.add_members(descriptor, _members(model, type_doc, scope))
        except TypeRefSyntaxError as exc:
            raise DeclarationError(f"In {descriptor.qualified_name}: {exc}") from exc


def _declare(
    model: InMemoryDeclarationModel,
    package: str,
    outer_names: Tuple[str, ...],
    outer_scope: Tuple[str, ...],
    type_doc: TypeDocument,
    declared: List[Tuple[TypeDescriptor, TypeDocument, Tuple[str, ...]]],
) -> None:
    marker = None
    if type_doc.generated is not None:
        marker = GenerationMarker(
            generator_id=type_doc.generated.value,
            timestamp=type_doc.generated.date,
            schema_version=type_doc.generated.schema_version,
        )
    descriptor = TypeDescriptor(
        package=package,
        simple_names=outer_names + (type_doc.name,),
        kind=type_doc.kind,
        visibility=type_doc.visibility,
        type_parameters=tuple(type_doc.type_parameters),
        marker=marker,
    )
    try:
        model.declare_type(descriptor)
    except ValueError as exc:
        raise DeclarationError(str(exc)) from exc
    scope = outer_scope + tuple(type_doc.type_parameters)
    declared.append((descriptor, type_doc, scope))
    for nested in type_doc.types:
        _declare(model, package, descriptor.simple_names, scope, nested, declared)


def _members(
    model: InMemoryDeclarationModel, type_doc: TypeDocument, scope: Tuple[str, ...]
) -> List[MemberDescriptor]:
    members: List[MemberDescriptor] = []
    for attribute in type_doc.attributes:
        members.append(
            MemberDescriptor(
                name=attribute.name,
                kind=MemberKind.FIELD,
                visibility=attribute.visibility,
                static=attribute.static,
                type=parse_type_ref(attribute.type, type_parameters=scope, lookup=model.type_named),
            )
        )
    for method in type_doc.methods:
        method_scope = scope + tuple(method.type_parameters)
        members.append(
            MemberDescriptor(
                name=method.name,
                kind=MemberKind.METHOD,
                visibility=method.visibility,
                static=method.static,
                parameters=tuple(
                    parse_type_ref(parameter, type_parameters=method_scope, lookup=model.type_named)
                    for parameter in method.parameters
                ),
                type=parse_type_ref(method.returns, type_parameters=method_scope, lookup=model.type_named),
            )
        )
    return members


__all__ = [
    "DeclarationDocument",
    "DeclarationError",
    "load_declarations",
    "parse_document",
    "populate",
    "read_document",
]
