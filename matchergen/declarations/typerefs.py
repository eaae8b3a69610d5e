"""Parsing of type reference strings used in declaration documents."""

from __future__ import annotations

import re
from typing import Callable, Collection, List, Optional, Tuple

from ..models import (
    STR_TO_PRIMITIVE_KIND,
    ArrayType,
    DeclaredType,
    PrimitiveType,
    TypeDescriptor,
    TypeRef,
    TypeVariable,
    VoidType,
    WildcardType,
)

_TOKEN_PATTERN = re.compile(r"\s*(\[\]|(?:[^\W\d]|\$)[\w$]*(?:\.(?:[^\W\d]|\$)[\w$]*)*|[<>,?])")

TypeLookup = Callable[[str], Optional[TypeDescriptor]]


class TypeRefSyntaxError(ValueError):
    """Raised when a type reference string cannot be parsed."""


def parse_type_ref(
    text: str,
    *,
    type_parameters: Collection[str] = (),
    lookup: TypeLookup | None = None,
) -> TypeRef:
    """Parse ``text`` such as ``java.util.Map<java.lang.String, int[]>``.

    Names listed in ``type_parameters`` become type variables. Qualified names
    known to ``lookup`` keep their declared package/nesting split; unknown ones
    are split at the first capitalised segment.
    """
    tokens = _tokenize(text)
    parser = _Parser(tokens, set(type_parameters), lookup, text)
    ref = parser.parse_type()
    if parser.position != len(tokens):
        raise TypeRefSyntaxError(f"Unexpected trailing input in type reference '{text}'")
    return ref


def split_qualified_name(
    qualified_name: str, lookup: TypeLookup | None = None
) -> Tuple[str, Tuple[str, ...]]:
    """Split a qualified name into package and nested simple names."""
    if lookup is not None:
        known = lookup(qualified_name)
        if known is not None:
            return known.package, known.simple_names
    segments = qualified_name.split(".")
    for index, segment in enumerate(segments):
        if segment[:1].isupper():
            return ".".join(segments[:index]), tuple(segments[index:])
    return ".".join(segments[:-1]), (segments[-1],)


def _tokenize(text: str) -> List[str]:
    tokens: List[str] = []
    position = 0
    stripped = text.rstrip()
    while position < len(stripped):
        match = _TOKEN_PATTERN.match(stripped, position)
        if match is None:
            raise TypeRefSyntaxError(f"Invalid character in type reference '{text}' at {position}")
        tokens.append(match.group(1))
        position = match.end()
    if not tokens:
        raise TypeRefSyntaxError("Empty type reference")
    return tokens


class _Parser:
    def __init__(
        self,
        tokens: List[str],
        type_parameters: Collection[str],
        lookup: TypeLookup | None,
        text: str,
    ) -> None:
        self.tokens = tokens
        self.position = 0
        self.type_parameters = type_parameters
        self.lookup = lookup
        self.text = text

    def parse_type(self) -> TypeRef:
        name = self._next()
        if name in {"<", ">", ",", "[]"}:
            raise TypeRefSyntaxError(f"Expected a type name in '{self.text}'")
        if name == "?":
            return self._parse_wildcard()

        ref: TypeRef
        if name == "void":
            ref = VoidType()
        elif name in STR_TO_PRIMITIVE_KIND:
            ref = PrimitiveType(STR_TO_PRIMITIVE_KIND[name])
        elif name in self.type_parameters:
            ref = TypeVariable(name)
        else:
            arguments: Tuple[TypeRef, ...] = ()
            if self._peek() == "<":
                arguments = self._parse_arguments()
            package, simple_names = split_qualified_name(name, self.lookup)
            ref = DeclaredType(package, simple_names, arguments)

        while self._peek() == "[]":
            self._next()
            ref = ArrayType(ref)
        return ref

    def _parse_wildcard(self) -> WildcardType:
        if self._peek() == "extends":
            self._next()
            return WildcardType(upper_bound=self.parse_type())
        if self._peek() == "super":
            self._next()
            return WildcardType(lower_bound=self.parse_type())
        return WildcardType()

    def _parse_arguments(self) -> Tuple[TypeRef, ...]:
        self._expect("<")
        arguments = [self.parse_type()]
        while self._peek() == ",":
            self._next()
            arguments.append(self.parse_type())
        self._expect(">")
        return tuple(arguments)

    def _peek(self) -> Optional[str]:
        if self.position < len(self.tokens):
            return self.tokens[self.position]
        return None

    def _next(self) -> str:
        token = self._peek()
        if token is None:
            raise TypeRefSyntaxError(f"Unexpected end of type reference '{self.text}'")
        self.position += 1
        return token

    def _expect(self, token: str) -> None:
        actual = self._next()
        if actual != token:
            raise TypeRefSyntaxError(f"Expected '{token}' but found '{actual}' in '{self.text}'")


__all__ = ["TypeRefSyntaxError", "parse_type_ref", "split_qualified_name"]
