"""Pretty-printer turning syntax trees into Java source text."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Tuple

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..logging import get_logger
from .tree import (
    AnnotationDef,
    ArrayTypeName,
    Assignment,
    ClassLiteral,
    ClassName,
    CompilationUnit,
    Expression,
    ExpressionStatement,
    FieldDef,
    MethodCall,
    MethodDef,
    Name,
    NewInstance,
    ParameterizedTypeName,
    PrimitiveTypeName,
    Return,
    Statement,
    StaticCall,
    StringLiteral,
    This,
    TypeDef,
    TypeName,
    WildcardTypeName,
    expression_classes,
    ordered,
    referenced_classes,
    statement_expressions,
)

logger = get_logger("printer")

_TEMPLATE_NAME = "compilation_unit.java.j2"
_JAVA_LANG = "java.lang"

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
}


def java_string(value: str) -> str:
    escaped: List[str] = []
    for char in value:
        if char in _ESCAPES:
            escaped.append(_ESCAPES[char])
        elif ord(char) < 0x20 or 0x7F <= ord(char) < 0xA0:
            escaped.append(f"\\u{ord(char):04x}")
        else:
            escaped.append(char)
    return '"' + "".join(escaped) + '"'


class ImportResolver:
    """Decides which classes are imported and how each one is spelled.

    Same-package classes and names declared in the unit take precedence,
    ``java.lang`` is implicit unless a type of the same package shadows it,
    and a simple name is imported at most once; anything else is written
    fully qualified.
    """

    def __init__(self, unit: CompilationUnit) -> None:
        self.package = unit.package
        self.package_members = unit.package_members
        self.declared: Dict[str, ClassName] = {}
        self._collect_declared(unit.class_name, unit.type)
        self.imports: List[str] = []
        self._visible: Set[str] = set()
        self._resolve(self._referenced(unit.type))

    def _collect_declared(self, class_name: ClassName, type_def: TypeDef) -> None:
        self.declared[class_name.qualified_name] = class_name
        for nested in type_def.types:
            self._collect_declared(class_name.nested(nested.name), nested)

    def _resolve(self, referenced: Iterable[ClassName]) -> None:
        top_levels = sorted(
            {name.top_level.qualified_name: name.top_level for name in referenced}.values(),
            key=lambda name: name.qualified_name,
        )
        taken: Dict[str, str] = {
            name.simple_name: qualified for qualified, name in self.declared.items()
        }
        # Same-package classes first: they never need an import.
        for name in top_levels:
            if name.package == self.package:
                if taken.setdefault(name.simple_name, name.qualified_name) == name.qualified_name:
                    self._visible.add(name.qualified_name)
        for name in top_levels:
            if name.package == self.package or name.qualified_name in self._visible:
                continue
            if name.package == _JAVA_LANG and name.simple_name in self.package_members:
                continue
            if taken.setdefault(name.simple_name, name.qualified_name) != name.qualified_name:
                continue
            self._visible.add(name.qualified_name)
            if name.package != _JAVA_LANG:
                self.imports.append(name.qualified_name)
        self.imports.sort()

    def _referenced(self, type_def: TypeDef) -> List[ClassName]:
        names: List[ClassName] = []
        for current in type_def.walk():
            names.extend(referenced_classes(current.superclass))
            for annotation in current.annotations:
                names.append(annotation.type)
            for field_def in current.fields:
                names.extend(referenced_classes(field_def.type))
            for method in current.methods:
                names.extend(referenced_classes(method.returns))
                for annotation in method.annotations:
                    names.append(annotation.type)
                for parameter in method.parameters:
                    names.extend(referenced_classes(parameter.type))
                for statement in method.body:
                    for expression in statement_expressions(statement):
                        names.extend(expression_classes(expression))
        return [name for name in names if name.qualified_name not in self.declared]

    def spell(self, name: ClassName, scope: Tuple[ClassName, ...]) -> str:
        if name.qualified_name in self.declared:
            # Types enclosing the current one are lexically visible by simple name.
            if any(name.qualified_name == visible.qualified_name for visible in scope):
                return name.simple_name
            return ".".join(name.simple_names)
        if name.top_level.qualified_name in self._visible:
            return ".".join(name.simple_names)
        return name.qualified_name


class JavaPrinter:
    """Renders :class:`CompilationUnit` trees with a fixed, deterministic layout."""

    def __init__(self, *, indent: str = "  ", templates_dir: Path | None = None) -> None:
        if not indent or indent.strip():
            raise ValueError("Indent must be non-empty whitespace")
        self.indent = indent
        self.templates_dir = templates_dir or Path(__file__).with_name("templates")
        self._env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            undefined=StrictUndefined,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def render(self, unit: CompilationUnit) -> str:
        resolver = ImportResolver(unit)
        lines: List[str] = []
        self._emit_type(lines, unit.type, (unit.class_name,), resolver, depth=0)
        template = self._env.get_template(_TEMPLATE_NAME)
        header = unit.header.splitlines() if unit.header else []
        source = template.render(
            header=header,
            package=unit.package,
            imports=resolver.imports,
            body="\n".join(lines),
        )
        logger.debug("Rendered %s with %d imports", unit.class_name.qualified_name, len(resolver.imports))
        return source.rstrip("\n") + "\n"

    # ------------------------------------------------------------------
    # Declarations

    def _emit_type(
        self,
        lines: List[str],
        type_def: TypeDef,
        scope: Tuple[ClassName, ...],
        resolver: ImportResolver,
        depth: int,
    ) -> None:
        pad = self.indent * depth
        for annotation in type_def.annotations:
            self._emit_annotation(lines, annotation, scope, resolver, pad)
        header = f"{self._modifiers(type_def.modifiers)}class {type_def.name}"
        if type_def.superclass is not None:
            header += f" extends {self._type(type_def.superclass, scope, resolver)}"
        lines.append(f"{pad}{header} {{")

        members: List[List[str]] = []
        for field_def in type_def.fields:
            members.append([self._field(field_def, scope, resolver, depth + 1)])
        constructors = [method for method in type_def.methods if method.constructor]
        others = [method for method in type_def.methods if not method.constructor]
        for method in constructors + others:
            block: List[str] = []
            self._emit_method(block, method, type_def.name, scope, resolver, depth + 1)
            members.append(block)
        for nested in type_def.types:
            block = []
            nested_scope = scope + (scope[-1].nested(nested.name),)
            self._emit_type(block, nested, nested_scope, resolver, depth + 1)
            members.append(block)

        for index, block in enumerate(members):
            if index:
                lines.append("")
            lines.extend(block)
        lines.append(f"{pad}}}")

    def _emit_annotation(
        self,
        lines: List[str],
        annotation: AnnotationDef,
        scope: Tuple[ClassName, ...],
        resolver: ImportResolver,
        pad: str,
    ) -> None:
        name = f"@{resolver.spell(annotation.type, scope)}"
        if not annotation.members:
            lines.append(f"{pad}{name}")
            return
        if len(annotation.members) == 1 and annotation.members[0][0] == "value":
            value = self._expression(annotation.members[0][1], scope, resolver)
            lines.append(f"{pad}{name}({value})")
            return
        lines.append(f"{pad}{name}(")
        rendered = [
            f"{pad}{self.indent * 2}{key} = {self._expression(value, scope, resolver)}"
            for key, value in annotation.members
        ]
        lines.append(",\n".join(rendered))
        lines.append(f"{pad})")

    def _field(
        self, field_def: FieldDef, scope: Tuple[ClassName, ...], resolver: ImportResolver, depth: int
    ) -> str:
        type_text = self._type(field_def.type, scope, resolver)
        return f"{self.indent * depth}{self._modifiers(field_def.modifiers)}{type_text} {field_def.name};"

    def _emit_method(
        self,
        lines: List[str],
        method: MethodDef,
        owner: str,
        scope: Tuple[ClassName, ...],
        resolver: ImportResolver,
        depth: int,
    ) -> None:
        pad = self.indent * depth
        for annotation in method.annotations:
            self._emit_annotation(lines, annotation, scope, resolver, pad)
        parameters = ", ".join(
            f"{'final ' if parameter.final else ''}{self._type(parameter.type, scope, resolver)} {parameter.name}"
            for parameter in method.parameters
        )
        if method.constructor:
            signature = f"{owner}({parameters})"
        else:
            returns = "void" if method.returns is None else self._type(method.returns, scope, resolver)
            signature = f"{returns} {method.name}({parameters})"
        lines.append(f"{pad}{self._modifiers(method.modifiers)}{signature} {{")
        for statement in method.body:
            lines.append(f"{pad}{self.indent}{self._statement(statement, scope, resolver)}")
        lines.append(f"{pad}}}")

    # ------------------------------------------------------------------
    # Statements, expressions, types

    def _statement(
        self, statement: Statement, scope: Tuple[ClassName, ...], resolver: ImportResolver
    ) -> str:
        if isinstance(statement, ExpressionStatement):
            return f"{self._expression(statement.expression, scope, resolver)};"
        if isinstance(statement, Assignment):
            value = self._expression(statement.value, scope, resolver)
            return f"{statement.target.identifier} = {value};"
        if isinstance(statement, Return):
            return f"return {self._expression(statement.value, scope, resolver)};"
        raise TypeError(f"Unsupported statement: {statement!r}")

    def _expression(
        self, expression: Expression, scope: Tuple[ClassName, ...], resolver: ImportResolver
    ) -> str:
        if isinstance(expression, Name):
            return expression.identifier
        if isinstance(expression, StringLiteral):
            return java_string(expression.value)
        if isinstance(expression, ClassLiteral):
            return f"{resolver.spell(expression.type, scope)}.class"
        if isinstance(expression, This):
            return "this"
        if isinstance(expression, MethodCall):
            target = self._expression(expression.target, scope, resolver)
            return f"{target}.{expression.method}({self._arguments(expression.arguments, scope, resolver)})"
        if isinstance(expression, StaticCall):
            owner = resolver.spell(expression.type, scope)
            return f"{owner}.{expression.method}({self._arguments(expression.arguments, scope, resolver)})"
        if isinstance(expression, NewInstance):
            type_text = self._type(expression.type, scope, resolver)
            return f"new {type_text}({self._arguments(expression.arguments, scope, resolver)})"
        raise TypeError(f"Unsupported expression: {expression!r}")

    def _arguments(
        self,
        arguments: Tuple[Expression, ...],
        scope: Tuple[ClassName, ...],
        resolver: ImportResolver,
    ) -> str:
        return ", ".join(self._expression(argument, scope, resolver) for argument in arguments)

    def _type(self, type_name: TypeName, scope: Tuple[ClassName, ...], resolver: ImportResolver) -> str:
        if isinstance(type_name, ClassName):
            return resolver.spell(type_name, scope)
        if isinstance(type_name, ParameterizedTypeName):
            arguments = ", ".join(self._type(argument, scope, resolver) for argument in type_name.arguments)
            return f"{resolver.spell(type_name.raw, scope)}<{arguments}>"
        if isinstance(type_name, WildcardTypeName):
            if type_name.upper_bound is not None:
                return f"? extends {self._type(type_name.upper_bound, scope, resolver)}"
            if type_name.lower_bound is not None:
                return f"? super {self._type(type_name.lower_bound, scope, resolver)}"
            return "?"
        if isinstance(type_name, PrimitiveTypeName):
            return type_name.keyword
        if isinstance(type_name, ArrayTypeName):
            return f"{self._type(type_name.component, scope, resolver)}[]"
        raise TypeError(f"Unsupported type name: {type_name!r}")

    @staticmethod
    def _modifiers(modifiers: Tuple) -> str:
        return "".join(f"{modifier.value} " for modifier in ordered(modifiers))


__all__ = ["ImportResolver", "JavaPrinter", "java_string"]
