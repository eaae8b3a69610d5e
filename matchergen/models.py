"""Core data models shared across matchergen components."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Dict, List, Mapping, Optional, Tuple, Union


class TypeKind(enum.Enum):
    """Kinds of type declarations found in the declaration graph."""

    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"
    RECORD = "record"
    ANNOTATION = "annotation"


class Visibility(enum.Enum):
    """Declared visibility of a type or member."""

    PUBLIC = "public"
    PROTECTED = "protected"
    PACKAGE = "package"
    PRIVATE = "private"


class MemberKind(enum.Enum):
    METHOD = "method"
    FIELD = "field"
    CONSTRUCTOR = "constructor"


class PrimitiveKind(enum.Enum):
    """Primitive types of the target language."""

    BOOLEAN = "boolean"
    BYTE = "byte"
    SHORT = "short"
    INT = "int"
    LONG = "long"
    CHAR = "char"
    FLOAT = "float"
    DOUBLE = "double"


BOXED_CLASS_NAMES: Mapping[PrimitiveKind, str] = {
    PrimitiveKind.BOOLEAN: "Boolean",
    PrimitiveKind.BYTE: "Byte",
    PrimitiveKind.SHORT: "Short",
    PrimitiveKind.INT: "Integer",
    PrimitiveKind.LONG: "Long",
    PrimitiveKind.CHAR: "Character",
    PrimitiveKind.FLOAT: "Float",
    PrimitiveKind.DOUBLE: "Double",
}
assert all(kind in BOXED_CLASS_NAMES for kind in PrimitiveKind)

STR_TO_PRIMITIVE_KIND: Mapping[str, PrimitiveKind] = {kind.value: kind for kind in PrimitiveKind}

JAVA_LANG = "java.lang"


@dataclass(frozen=True)
class PrimitiveType:
    kind: PrimitiveKind

    def __str__(self) -> str:
        return self.kind.value


@dataclass(frozen=True)
class VoidType:
    def __str__(self) -> str:
        return "void"


@dataclass(frozen=True)
class TypeVariable:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class DeclaredType:
    """Reference to a class or interface, optionally parameterized."""

    package: str
    simple_names: Tuple[str, ...]
    arguments: Tuple["TypeRef", ...] = ()

    @property
    def qualified_name(self) -> str:
        return _qualify(self.package, self.simple_names)

    def __str__(self) -> str:
        if not self.arguments:
            return self.qualified_name
        inner = ", ".join(str(argument) for argument in self.arguments)
        return f"{self.qualified_name}<{inner}>"


@dataclass(frozen=True)
class ArrayType:
    component: "TypeRef"

    def __str__(self) -> str:
        return f"{self.component}[]"


@dataclass(frozen=True)
class WildcardType:
    upper_bound: Optional["TypeRef"] = None
    lower_bound: Optional["TypeRef"] = None

    def __str__(self) -> str:
        if self.upper_bound is not None:
            return f"? extends {self.upper_bound}"
        if self.lower_bound is not None:
            return f"? super {self.lower_bound}"
        return "?"


TypeRef = Union[PrimitiveType, VoidType, TypeVariable, DeclaredType, ArrayType, WildcardType]

OBJECT_TYPE = DeclaredType(JAVA_LANG, ("Object",))


def boxed(ref: TypeRef) -> TypeRef:
    """Return the type usable in a generic position for ``ref``."""
    if isinstance(ref, PrimitiveType):
        return DeclaredType(JAVA_LANG, (BOXED_CLASS_NAMES[ref.kind],))
    if isinstance(ref, TypeVariable):
        return OBJECT_TYPE
    return ref


@dataclass(frozen=True)
class GenerationMarker:
    """Stamp identifying which generator produced a type, and when."""

    generator_id: str
    timestamp: str
    schema_version: int = 1

    def to_dict(self) -> Dict[str, object]:
        return {
            "value": self.generator_id,
            "date": self.timestamp,
            "schema_version": self.schema_version,
        }


@dataclass(frozen=True, eq=False)
class TypeDescriptor:
    """A resolved type declaration. Identity is the qualified name."""

    package: str
    simple_names: Tuple[str, ...]
    kind: TypeKind = TypeKind.CLASS
    visibility: Visibility = Visibility.PUBLIC
    type_parameters: Tuple[str, ...] = ()
    marker: Optional[GenerationMarker] = None

    @property
    def qualified_name(self) -> str:
        return _qualify(self.package, self.simple_names)

    @property
    def simple_name(self) -> str:
        return self.simple_names[-1]

    @property
    def enclosing_name(self) -> Optional[str]:
        if len(self.simple_names) < 2:
            return None
        return _qualify(self.package, self.simple_names[:-1])

    @property
    def is_public(self) -> bool:
        return self.visibility is Visibility.PUBLIC

    def as_type_ref(self) -> DeclaredType:
        return DeclaredType(self.package, self.simple_names)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypeDescriptor):
            return NotImplemented
        return self.qualified_name == other.qualified_name

    def __hash__(self) -> int:
        return hash(self.qualified_name)

    def __repr__(self) -> str:
        return f"TypeDescriptor({self.qualified_name!r})"


@dataclass(frozen=True)
class AccessorShape:
    """Call shape of a method member."""

    visibility: Visibility
    static: bool
    parameters: Tuple[TypeRef, ...]
    return_type: TypeRef
    signature: str


@dataclass(frozen=True)
class MemberDescriptor:
    name: str
    kind: MemberKind
    visibility: Visibility = Visibility.PUBLIC
    static: bool = False
    parameters: Tuple[TypeRef, ...] = ()
    type: TypeRef = field(default_factory=VoidType)

    @property
    def signature(self) -> str:
        params = ",".join(str(parameter) for parameter in self.parameters)
        return f"{self.name}({params})"


@dataclass(frozen=True)
class PropertyDescriptor:
    """A getter-shaped member reduced to a property name and types."""

    name: str
    type: TypeRef
    boxed_type: TypeRef
    accessor: str


@dataclass(frozen=True)
class ConfigurationSource:
    """A configuration marker: the declaration carrying it and its names."""

    origin: str
    value: Tuple[str, ...]


@dataclass
class MatcherSpec:
    """Everything needed to synthesize one matcher type."""

    target: TypeDescriptor
    properties: List[PropertyDescriptor]
    marker: GenerationMarker
    nested: List["MatcherSpec"] = field(default_factory=list)
    originating_elements: List[str] = field(default_factory=list)
    package_members: List[str] = field(default_factory=list)

    @property
    def matcher_name(self) -> str:
        return f"{self.target.simple_name}Matcher"

    @property
    def matcher_qualified_name(self) -> str:
        matcher_names = tuple(f"{name}Matcher" for name in self.target.simple_names)
        return _qualify(self.target.package, matcher_names)


@dataclass
class GeneratedUnit:
    """A rendered source file ready to be handed to an emission sink."""

    package: str
    type_name: str
    source: str
    marker: GenerationMarker
    originating_elements: List[str] = field(default_factory=list)
    nested_names: List[str] = field(default_factory=list)

    @property
    def qualified_name(self) -> str:
        return _qualify(self.package, (self.type_name,))

    @property
    def relative_path(self) -> str:
        parts = self.package.split(".") if self.package else []
        return str(PurePosixPath(*parts, f"{self.type_name}.java"))


def _qualify(package: str, simple_names: Tuple[str, ...]) -> str:
    nested = ".".join(simple_names)
    return f"{package}.{nested}" if package else nested
