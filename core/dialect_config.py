"""Dialect definition files for the header parser."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

_MACRO_LIST_KEYS = (
    "class_macros",
    "function_macros",
    "property_macros",
    "enum_macros",
    "enumerator_macros",
    "parameter_macros",
    "ignore_macros",
    "ignore_macro_prefixes",
    "skip_words",
    "skip_word_suffixes",
)


@dataclass(frozen=True)
class DialectSpec:
    """Declarative description of a reflection-macro dialect."""

    name: str
    base: str | None = None
    class_macros: tuple[str, ...] = ()
    function_macros: tuple[str, ...] = ()
    property_macros: tuple[str, ...] = ()
    enum_macros: tuple[str, ...] = ()
    enumerator_macros: tuple[str, ...] = ()
    parameter_macros: tuple[str, ...] = ()
    ignore_macros: tuple[str, ...] = ()
    ignore_macro_prefixes: tuple[str, ...] = ()
    skip_words: tuple[str, ...] = ()
    skip_word_suffixes: tuple[str, ...] = ()


def _expect_dict(payload: Any, ctx: str) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValueError(f"{ctx} must be an object")
    return payload


def _load_dialect_payload(path: str) -> dict[str, Any]:
    spec_path = Path(path)
    if not spec_path.is_file():
        raise FileNotFoundError(f"Dialect file not found: {spec_path}")

    text = spec_path.read_text(encoding="utf-8")
    suffix = spec_path.suffix.lower()
    if suffix == ".json":
        payload = json.loads(text)
    else:
        payload = yaml.safe_load(text)
    return _expect_dict(payload, "dialect")


def _parse_name_list(payload: dict[str, Any], key: str, dialect_name: str) -> tuple[str, ...]:
    raw = payload.get(key, [])
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise ValueError(f"dialect '{dialect_name}': {key} must be a list")
    names: list[str] = []
    for item in raw:
        name = str(item).strip()
        if not name:
            raise ValueError(f"dialect '{dialect_name}': {key} contains empty entry")
        if not (name[0].isalpha() or name[0] == "_") or not all(
            ch.isalnum() or ch == "_" for ch in name
        ):
            raise ValueError(f"dialect '{dialect_name}': {key} entry '{name}' is not an identifier")
        if name not in names:
            names.append(name)
    return tuple(names)


def parse_dialect_spec(payload: dict[str, Any]) -> DialectSpec:
    """Validate an already-decoded dialect definition."""
    payload = _expect_dict(payload, "dialect")
    name = str(payload.get("name", "")).strip()
    if not name:
        raise ValueError("dialect name is required")
    base_raw = payload.get("base")
    base = str(base_raw).strip() if base_raw is not None else None
    if base == name:
        raise ValueError(f"dialect '{name}' cannot extend itself")

    lists = {key: _parse_name_list(payload, key, name) for key in _MACRO_LIST_KEYS}

    annotation_keys = _MACRO_LIST_KEYS[:6]
    seen: dict[str, str] = {}
    for key in annotation_keys:
        for macro in lists[key]:
            if macro in seen and seen[macro] != key:
                raise ValueError(
                    f"dialect '{name}': macro '{macro}' listed in both {seen[macro]} and {key}"
                )
            seen[macro] = key

    return DialectSpec(name=name, base=base or None, **lists)


def load_dialect_spec(path: str) -> DialectSpec:
    """Load and validate a dialect definition from a YAML/JSON file."""
    return parse_dialect_spec(_load_dialect_payload(path))
