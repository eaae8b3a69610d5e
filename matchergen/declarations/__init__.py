"""Declaration graph adapters consumed by the generation core."""

from .base import DeclarationModel
from .memory import InMemoryDeclarationModel
from .schema import DeclarationError, load_declarations, parse_document, populate, read_document
from .typerefs import TypeRefSyntaxError, parse_type_ref

__all__ = [
    "DeclarationError",
    "DeclarationModel",
    "InMemoryDeclarationModel",
    "TypeRefSyntaxError",
    "load_declarations",
    "parse_document",
    "parse_type_ref",
    "populate",
    "read_document",
]
