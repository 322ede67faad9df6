"""Qualified C++ name helpers shared by the parser outline and the cross-check."""

from __future__ import annotations

import re
from typing import Iterable

SCOPE_SEPARATOR = "::"

_WHITESPACE_RE = re.compile(r"\s+")
_SCOPE_SEPARATOR_RE = re.compile(r"\s*::\s*")
_DESTRUCTOR_SPACING_RE = re.compile(r"::\s*~")
_TEMPLATE_ARGS_RE = re.compile(r"<[^<>]*>")


def normalize_cpp_entity_name(entity_name: str) -> str:
    """Normalize C++ entity names into a canonical form.

    Trivial whitespace variations (``a :: b``, ``Foo:: ~Foo``) collapse so
    names from different parsers compare equal.

    Args:
        entity_name: Raw entity name.

    Returns:
        Canonicalized entity name.
    """
    normalized = entity_name.strip()
    normalized = _SCOPE_SEPARATOR_RE.sub(SCOPE_SEPARATOR, normalized)
    normalized = _DESTRUCTOR_SPACING_RE.sub("::~", normalized)
    normalized = _WHITESPACE_RE.sub(" ", normalized)
    return normalized.strip()


def strip_template_arguments(entity_name: str) -> str:
    """Drop ``<...>`` groups, innermost first: ``Foo<Bar<int>>`` -> ``Foo``."""
    previous = None
    while previous != entity_name:
        previous = entity_name
        entity_name = _TEMPLATE_ARGS_RE.sub("", entity_name)
    return entity_name


def qualify(scope: Iterable[str], name: str) -> str:
    """Join a scope stack and a name; empty (anonymous) segments are skipped."""
    parts = [part for part in scope if part]
    if name:
        parts.append(name)
    return normalize_cpp_entity_name(SCOPE_SEPARATOR.join(parts))


def split_qualified_name(qualified_name: str) -> list[str]:
    normalized = normalize_cpp_entity_name(qualified_name)
    if not normalized:
        return []
    return normalized.split(SCOPE_SEPARATOR)
