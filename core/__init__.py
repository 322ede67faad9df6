"""Core shared contracts and utilities."""

from core.naming import (
    SCOPE_SEPARATOR,
    normalize_cpp_entity_name,
    qualify,
    split_qualified_name,
    strip_template_arguments,
)
from core.structured_logging import (
    configure_structured_logging,
    get_parse_dialect,
    get_parse_source,
    parse_scope,
)
from core.dialect_config import (
    DialectSpec,
    load_dialect_spec,
    parse_dialect_spec,
)

__all__ = [
    "SCOPE_SEPARATOR",
    "normalize_cpp_entity_name",
    "qualify",
    "split_qualified_name",
    "strip_template_arguments",
    "configure_structured_logging",
    "get_parse_dialect",
    "get_parse_source",
    "parse_scope",
    "DialectSpec",
    "load_dialect_spec",
    "parse_dialect_spec",
]
