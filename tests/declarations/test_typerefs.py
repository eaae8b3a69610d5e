"""Tests for type reference parsing."""

from __future__ import annotations

import pytest

from matchergen.declarations import TypeRefSyntaxError, parse_type_ref
from matchergen.declarations.typerefs import split_qualified_name
from matchergen.models import (
    ArrayType,
    DeclaredType,
    PrimitiveKind,
    PrimitiveType,
    TypeDescriptor,
    TypeVariable,
    VoidType,
    WildcardType,
)


def test_parses_primitives_void_and_type_variables() -> None:
    assert parse_type_ref("boolean") == PrimitiveType(PrimitiveKind.BOOLEAN)
    assert parse_type_ref("void") == VoidType()
    assert parse_type_ref("T", type_parameters=["T"]) == TypeVariable("T")


def test_parses_generic_arguments_and_arrays() -> None:
    ref = parse_type_ref("java.util.Map<java.lang.String, int[]>")

    assert ref == DeclaredType(
        "java.util",
        ("Map",),
        (
            DeclaredType("java.lang", ("String",)),
            ArrayType(PrimitiveType(PrimitiveKind.INT)),
        ),
    )
    assert str(ref) == "java.util.Map<java.lang.String, int[]>"


def test_parses_wildcards_with_bounds() -> None:
    ref = parse_type_ref("java.util.List<? extends java.lang.Number>")
    assert isinstance(ref, DeclaredType)
    assert ref.arguments == (WildcardType(upper_bound=DeclaredType("java.lang", ("Number",))),)

    lower = parse_type_ref("java.util.List<? super T>", type_parameters=["T"])
    assert isinstance(lower, DeclaredType)
    assert lower.arguments == (WildcardType(lower_bound=TypeVariable("T")),)

    unbounded = parse_type_ref("java.util.List<?>")
    assert isinstance(unbounded, DeclaredType)
    assert unbounded.arguments == (WildcardType(),)


def test_nested_names_split_at_first_capitalised_segment() -> None:
    assert split_qualified_name("com.example.Outer.Inner") == ("com.example", ("Outer", "Inner"))
    assert split_qualified_name("Plain") == ("", ("Plain",))


def test_lookup_overrides_the_naming_heuristic() -> None:
    known = TypeDescriptor(package="com.Example", simple_names=("thing",))

    def lookup(name: str):
        return known if name == "com.Example.thing" else None

    assert split_qualified_name("com.Example.thing", lookup) == ("com.Example", ("thing",))


def test_parses_non_ascii_and_dollar_names() -> None:
    ref = parse_type_ref("com.exämple.Größe<com.exämple.Ärger$Inner>")

    assert ref == DeclaredType(
        "com.exämple",
        ("Größe",),
        (DeclaredType("com.exämple", ("Ärger$Inner",)),),
    )


@pytest.mark.parametrize(
    "text",
    ["", "java.util.List<", "java.util.List<>", "java.util.List<String>>", "int %", "<T>"],
)
def test_rejects_malformed_references(text: str) -> None:
    with pytest.raises(TypeRefSyntaxError):
        parse_type_ref(text)
