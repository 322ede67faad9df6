"""
Structural C++ header parser.

Recursive-descent recognizers for declarations (types, classes, methods,
members, namespaces) with a pluggable annotation hook for reflection
macro dialects.
"""

from headerparse.models import (
    AccessLevel,
    Annotation,
    ClassDecl,
    EnumDecl,
    Header,
    Member,
    Method,
    NamespaceDecl,
    Parameter,
)
from headerparse.results import Failure, ParseContext, Success
from headerparse.dialects import PLAIN, REFLECTION, Dialect, get_dialect, load_dialect
from headerparse.parser import (
    HeaderParser,
    HeaderSyntaxError,
    create_parser,
    parse_bytes,
    parse_file,
    parse_text,
)

__all__ = [
    # Data models
    "AccessLevel",
    "Annotation",
    "ClassDecl",
    "EnumDecl",
    "Header",
    "Member",
    "Method",
    "NamespaceDecl",
    "Parameter",
    # Result values
    "Failure",
    "ParseContext",
    "Success",
    # Dialects
    "Dialect",
    "PLAIN",
    "REFLECTION",
    "get_dialect",
    "load_dialect",
    # Entry points
    "HeaderParser",
    "HeaderSyntaxError",
    "create_parser",
    "parse_bytes",
    "parse_file",
    "parse_text",
]
