"""Java source synthesis: syntax tree, matcher factory and printer."""

from .matchers import MatcherCodeEmitter, MatcherTypeFactory, type_name_of
from .printer import ImportResolver, JavaPrinter, java_string
from .tree import ClassName, CompilationUnit, TypeDef

__all__ = [
    "ClassName",
    "CompilationUnit",
    "ImportResolver",
    "JavaPrinter",
    "MatcherCodeEmitter",
    "MatcherTypeFactory",
    "TypeDef",
    "java_string",
    "type_name_of",
]
