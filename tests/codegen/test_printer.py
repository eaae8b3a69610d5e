"""Tests for the Java printer and import resolution."""

from __future__ import annotations

import pytest

from matchergen.codegen import ClassName, CompilationUnit, ImportResolver, JavaPrinter, TypeDef, java_string
from matchergen.codegen.tree import (
    AnnotationDef,
    BOOLEAN,
    FieldDef,
    MethodDef,
    Modifier,
    Name,
    Parameter,
    ParameterizedTypeName,
    PrimitiveTypeName,
    Return,
    StringLiteral,
    check_identifier,
)

LIST = ClassName.of("java.util", "List")
OTHER_LIST = ClassName.of("java.awt", "List")
STRING = ClassName.of("java.lang", "String")
SIBLING = ClassName.of("com.example", "Sibling")


def _unit(*fields: FieldDef, header=None, methods=(), package_members=()) -> CompilationUnit:
    return CompilationUnit(
        package="com.example",
        type=TypeDef(name="Sample", modifiers=(Modifier.PUBLIC,), fields=fields, methods=tuple(methods)),
        header=header,
        package_members=frozenset(package_members),
    )


def test_imports_are_sorted_and_skip_java_lang_and_same_package() -> None:
    unit = _unit(
        FieldDef(ParameterizedTypeName(LIST, (STRING,)), "names"),
        FieldDef(SIBLING, "sibling"),
        FieldDef(ClassName.of("org.hamcrest", "Matcher"), "matcher"),
    )

    resolver = ImportResolver(unit)

    assert resolver.imports == ["java.util.List", "org.hamcrest.Matcher"]


def test_conflicting_simple_names_are_written_fully_qualified() -> None:
    unit = _unit(FieldDef(LIST, "first"), FieldDef(OTHER_LIST, "second"))

    source = JavaPrinter().render(unit)

    # Sorted first: java.awt.List takes the import.
    assert "import java.awt.List;" in source
    assert "import java.util.List;" not in source
    assert "  List first;" not in source
    assert "  java.util.List first;" in source
    assert "  List second;" in source


def test_render_layout() -> None:
    unit = _unit(
        FieldDef(STRING, "name", (Modifier.FINAL, Modifier.PRIVATE)),
        header="Generated code\ndo not edit",
        methods=[
            MethodDef(
                name="name",
                modifiers=(Modifier.PUBLIC,),
                annotations=(AnnotationDef(ClassName.of("java.lang", "Override")),),
                parameters=(Parameter(PrimitiveTypeName("int"), "index"),),
                body=(Return(Name("name")),),
                returns=STRING,
            )
        ],
    )

    source = JavaPrinter(indent="    ").render(unit)

    assert source == (
        "// Generated code\n"
        "// do not edit\n"
        "\n"
        "package com.example;\n"
        "\n"
        "public class Sample {\n"
        "    private final String name;\n"
        "\n"
        "    @Override\n"
        "    public String name(final int index) {\n"
        "        return name;\n"
        "    }\n"
        "}\n"
    )


def test_annotation_with_several_members_spans_lines() -> None:
    generated = AnnotationDef(
        ClassName.of("javax.annotation.processing", "Generated"),
        (("value", StringLiteral("gen")), ("date", StringLiteral("now"))),
    )
    unit = CompilationUnit(
        package="",
        type=TypeDef(name="Sample", annotations=(generated,)),
    )

    source = JavaPrinter().render(unit)

    assert source == (
        "import javax.annotation.processing.Generated;\n"
        "\n"
        "@Generated(\n"
        '    value = "gen",\n'
        '    date = "now"\n'
        ")\n"
        "class Sample {\n"
        "}\n"
    )


def test_java_string_escapes() -> None:
    assert java_string('a"b\\c\n') == '"a\\"b\\\\c\\n"'
    assert java_string("\x01") == '"\\u0001"'


def test_clashing_erased_signatures_are_rejected() -> None:
    list_of_strings = ParameterizedTypeName(LIST, (STRING,))
    with pytest.raises(ValueError, match="clashing erased signatures"):
        TypeDef(
            name="Sample",
            methods=(
                MethodDef(name="with", parameters=(Parameter(LIST, "a"),)),
                MethodDef(name="with", parameters=(Parameter(list_of_strings, "b"),)),
            ),
        )


def test_indent_must_be_whitespace() -> None:
    with pytest.raises(ValueError):
        JavaPrinter(indent="--")


def test_java_lang_names_shadowed_by_the_package_are_written_fully_qualified() -> None:
    unit = _unit(
        FieldDef(STRING, "name"),
        FieldDef(ClassName.of("java.lang", "Integer"), "count"),
        methods=[
            MethodDef(
                name="matches",
                modifiers=(Modifier.PUBLIC,),
                annotations=(AnnotationDef(ClassName.of("java.lang", "Override")),),
                body=(Return(Name("count")),),
                returns=BOOLEAN,
            )
        ],
        package_members=["Sample", "String", "Override"],
    )

    source = JavaPrinter().render(unit)

    assert "  java.lang.String name;" in source
    assert "  Integer count;" in source
    assert "  @java.lang.Override\n" in source
    assert "import java.lang" not in source


def test_shadowed_java_lang_name_leaves_room_for_the_package_type() -> None:
    local_string = ClassName.of("com.example", "String")
    unit = _unit(FieldDef(STRING, "name"), FieldDef(local_string, "local"), package_members=["String"])

    source = JavaPrinter().render(unit)

    assert "  java.lang.String name;" in source
    assert "  String local;" in source


@pytest.mark.parametrize("name", ["withGröße", "café", "$value", "_count", "été2"])
def test_unicode_identifiers_are_accepted(name: str) -> None:
    assert check_identifier(name) == name


@pytest.mark.parametrize("name", ["", "2fast", "with-dash", "class", "a b", "_"])
def test_invalid_identifiers_are_rejected(name: str) -> None:
    with pytest.raises(ValueError, match="not a valid Java identifier"):
        check_identifier(name)
