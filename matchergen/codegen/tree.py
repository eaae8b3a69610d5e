"""Typed syntax tree for generated Java sources.

Nodes validate identifiers on construction, so a tree that exists can always
be printed as well-formed source.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import FrozenSet, Iterator, Optional, Tuple, Union

JAVA_KEYWORDS = frozenset(
    """
    abstract assert boolean break byte case catch char class const continue default do
    double else enum extends final finally float for goto if implements import instanceof
    int interface long native new package private protected public return short static
    strictfp super switch synchronized this throw throws transient try void volatile while
    true false null _
    """.split()
)


def check_identifier(name: str) -> str:
    # Unicode letters and digits as in Python identifiers, plus '$'.
    if not name.replace("$", "_").isidentifier() or name in JAVA_KEYWORDS:
        raise ValueError(f"'{name}' is not a valid Java identifier")
    return name


class Modifier(enum.Enum):
    """Modifiers in canonical source order."""

    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"
    ABSTRACT = "abstract"
    STATIC = "static"
    FINAL = "final"


def ordered(modifiers: Tuple[Modifier, ...]) -> Tuple[Modifier, ...]:
    order = list(Modifier)
    return tuple(sorted(set(modifiers), key=order.index))


# ----------------------------------------------------------------------
# Type names


@dataclass(frozen=True)
class ClassName:
    package: str
    simple_names: Tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.simple_names:
            raise ValueError("A class name needs at least one simple name")
        for name in self.simple_names:
            check_identifier(name)

    @classmethod
    def of(cls, package: str, *simple_names: str) -> "ClassName":
        return cls(package, tuple(simple_names))

    @property
    def simple_name(self) -> str:
        return self.simple_names[-1]

    @property
    def qualified_name(self) -> str:
        nested = ".".join(self.simple_names)
        return f"{self.package}.{nested}" if self.package else nested

    @property
    def top_level(self) -> "ClassName":
        return ClassName(self.package, self.simple_names[:1])

    def nested(self, name: str) -> "ClassName":
        return ClassName(self.package, self.simple_names + (name,))


@dataclass(frozen=True)
class ParameterizedTypeName:
    raw: ClassName
    arguments: Tuple["TypeName", ...]


@dataclass(frozen=True)
class WildcardTypeName:
    upper_bound: Optional["TypeName"] = None
    lower_bound: Optional["TypeName"] = None

    @classmethod
    def supertype_of(cls, bound: "TypeName") -> "WildcardTypeName":
        return cls(lower_bound=bound)


@dataclass(frozen=True)
class PrimitiveTypeName:
    keyword: str


@dataclass(frozen=True)
class ArrayTypeName:
    component: "TypeName"


TypeName = Union[ClassName, ParameterizedTypeName, WildcardTypeName, PrimitiveTypeName, ArrayTypeName]

OBJECT = ClassName.of("java.lang", "Object")
BOOLEAN = PrimitiveTypeName("boolean")


def raw_type(type_name: TypeName) -> Optional[ClassName]:
    if isinstance(type_name, ClassName):
        return type_name
    if isinstance(type_name, ParameterizedTypeName):
        return type_name.raw
    return None


def referenced_classes(type_name: Optional[TypeName]) -> Iterator[ClassName]:
    if type_name is None:
        return
    if isinstance(type_name, ClassName):
        yield type_name
    elif isinstance(type_name, ParameterizedTypeName):
        yield type_name.raw
        for argument in type_name.arguments:
            yield from referenced_classes(argument)
    elif isinstance(type_name, WildcardTypeName):
        yield from referenced_classes(type_name.upper_bound)
        yield from referenced_classes(type_name.lower_bound)
    elif isinstance(type_name, ArrayTypeName):
        yield from referenced_classes(type_name.component)


# ----------------------------------------------------------------------
# Expressions and statements


@dataclass(frozen=True)
class Name:
    identifier: str

    def __post_init__(self) -> None:
        check_identifier(self.identifier)


@dataclass(frozen=True)
class StringLiteral:
    value: str


@dataclass(frozen=True)
class ClassLiteral:
    type: ClassName


@dataclass(frozen=True)
class This:
    pass


@dataclass(frozen=True)
class MethodCall:
    target: "Expression"
    method: str
    arguments: Tuple["Expression", ...] = ()

    def __post_init__(self) -> None:
        check_identifier(self.method)


@dataclass(frozen=True)
class StaticCall:
    type: ClassName
    method: str
    arguments: Tuple["Expression", ...] = ()

    def __post_init__(self) -> None:
        check_identifier(self.method)


@dataclass(frozen=True)
class NewInstance:
    type: TypeName
    arguments: Tuple["Expression", ...] = ()


Expression = Union[Name, StringLiteral, ClassLiteral, This, MethodCall, StaticCall, NewInstance]


@dataclass(frozen=True)
class ExpressionStatement:
    expression: Expression


@dataclass(frozen=True)
class Assignment:
    target: Name
    value: Expression


@dataclass(frozen=True)
class Return:
    value: Expression


Statement = Union[ExpressionStatement, Assignment, Return]


def expression_classes(expression: Expression) -> Iterator[ClassName]:
    if isinstance(expression, ClassLiteral):
        yield expression.type
    elif isinstance(expression, StaticCall):
        yield expression.type
        for argument in expression.arguments:
            yield from expression_classes(argument)
    elif isinstance(expression, NewInstance):
        yield from referenced_classes(expression.type)
        for argument in expression.arguments:
            yield from expression_classes(argument)
    elif isinstance(expression, MethodCall):
        yield from expression_classes(expression.target)
        for argument in expression.arguments:
            yield from expression_classes(argument)


def statement_expressions(statement: Statement) -> Iterator[Expression]:
    if isinstance(statement, ExpressionStatement):
        yield statement.expression
    else:
        yield statement.value


# ----------------------------------------------------------------------
# Declarations


@dataclass(frozen=True)
class AnnotationDef:
    type: ClassName
    members: Tuple[Tuple[str, Expression], ...] = ()

    def __post_init__(self) -> None:
        for name, _ in self.members:
            check_identifier(name)


@dataclass(frozen=True)
class Parameter:
    type: TypeName
    name: str
    final: bool = True

    def __post_init__(self) -> None:
        check_identifier(self.name)


@dataclass(frozen=True)
class FieldDef:
    type: TypeName
    name: str
    modifiers: Tuple[Modifier, ...] = ()

    def __post_init__(self) -> None:
        check_identifier(self.name)


@dataclass(frozen=True)
class MethodDef:
    """A method, or a constructor when ``constructor`` is set.

    ``returns`` of ``None`` means ``void`` (ignored for constructors).
    """

    name: str
    modifiers: Tuple[Modifier, ...] = ()
    parameters: Tuple[Parameter, ...] = ()
    body: Tuple[Statement, ...] = ()
    returns: Optional[TypeName] = None
    annotations: Tuple[AnnotationDef, ...] = ()
    constructor: bool = False

    def __post_init__(self) -> None:
        check_identifier(self.name)
        names = [parameter.name for parameter in self.parameters]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate parameter names in method '{self.name}'")

    @property
    def erased_signature(self) -> Tuple[str, Tuple[str, ...]]:
        return self.name, tuple(_erasure(parameter.type) for parameter in self.parameters)


@dataclass(frozen=True)
class TypeDef:
    """A class declaration with its members and nested classes."""

    name: str
    modifiers: Tuple[Modifier, ...] = ()
    annotations: Tuple[AnnotationDef, ...] = ()
    superclass: Optional[TypeName] = None
    fields: Tuple[FieldDef, ...] = ()
    methods: Tuple[MethodDef, ...] = ()
    types: Tuple["TypeDef", ...] = ()
    originating_elements: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        check_identifier(self.name)
        signatures = [method.erased_signature for method in self.methods if not method.constructor]
        if len(signatures) != len(set(signatures)):
            raise ValueError(f"Type '{self.name}' declares methods with clashing erased signatures")
        nested = [type_def.name for type_def in self.types]
        if len(nested) != len(set(nested)) or self.name in nested:
            raise ValueError(f"Type '{self.name}' declares clashing nested type names")

    def walk(self) -> Iterator["TypeDef"]:
        yield self
        for nested in self.types:
            yield from nested.walk()


@dataclass(frozen=True)
class CompilationUnit:
    package: str
    type: TypeDef
    header: Optional[str] = None
    # Simple names of the top-level types declared in ``package``.
    package_members: FrozenSet[str] = frozenset()

    @property
    def class_name(self) -> ClassName:
        return ClassName.of(self.package, self.type.name)

    @property
    def originating_elements(self) -> Tuple[str, ...]:
        collected = {}
        for type_def in self.type.walk():
            for element in type_def.originating_elements:
                collected.setdefault(element, None)
        return tuple(collected)


def _erasure(type_name: TypeName) -> str:
    if isinstance(type_name, ClassName):
        return type_name.qualified_name
    if isinstance(type_name, ParameterizedTypeName):
        return type_name.raw.qualified_name
    if isinstance(type_name, PrimitiveTypeName):
        return type_name.keyword
    if isinstance(type_name, ArrayTypeName):
        return f"{_erasure(type_name.component)}[]"
    return OBJECT.qualified_name
