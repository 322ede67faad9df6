"""
Dialect bindings.

A ``Dialect`` bundles the annotation strategies, ignorable macro lines and
noise words that adapt the grammar to one code base. Two dialects are
built in: plain C++ and Unreal-style reflection macros. Further dialects
can be loaded from a YAML/JSON definition.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple

from core.dialect_config import DialectSpec, load_dialect_spec
from headerparse.annotation import NO_ANNOTATION, MacroAnnotation
from headerparse.results import Success, fail
from headerparse.scanner import identifier, skip_balanced, skip_space, skip_ws, symbol

logger = logging.getLogger(__name__)


class MacroLine:
    """Ignore a macro invocation such as ``GENERATED_BODY()`` or ``DECLARE_*(...)``.

    Matches an exact name or a name prefix, an optional balanced argument
    list and an optional ``;``. The success value is the macro name.
    """

    def __init__(self, names: Iterable[str] = (), prefixes: Iterable[str] = ()):
        self.names: FrozenSet[str] = frozenset(names)
        self.prefixes: Tuple[str, ...] = tuple(prefixes)

    def matches(self, word: str) -> bool:
        return word in self.names or any(word.startswith(p) for p in self.prefixes)

    def __call__(self, text: str, pos: int):
        start = skip_ws(text, pos)
        matched = identifier(text, start)
        if matched is None or not self.matches(matched[1]):
            return fail(start, "ignored macro")
        end, name = matched
        args_start = skip_space(text, end)
        if text.startswith("(", args_start):
            args_end = skip_balanced(text, args_start)
            if args_end is None:
                return fail(args_start, f"closing ')' for {name}")
            end = args_end
        semicolon = symbol(text, end, ";")
        if semicolon is not None:
            end = semicolon
        return Success(end, name)


@dataclass(frozen=True)
class Dialect:
    """Annotation strategies and noise handling for one flavour of C++.

    Attributes:
        name: Dialect identifier (``cpp``, ``unreal``...).
        class_annotation: Strategy tried before ``class``/``struct``.
        method_annotation: Strategy tried before a function signature.
        member_annotation: Strategy tried before a data member.
        enum_annotation: Strategy tried before ``enum``.
        enumerator_annotation: Strategy tried after an enumerator name.
        parameter_annotation: Strategy tried before each parameter.
        ignore: Recognizers for whole macro lines that produce no declaration.
        skip_words: Words dropped wherever a storage qualifier may appear.
        skip_word_suffixes: Suffixes marking export macros (``ENGINE_API``).
    """

    name: str
    class_annotation: Any = NO_ANNOTATION
    method_annotation: Any = NO_ANNOTATION
    member_annotation: Any = NO_ANNOTATION
    enum_annotation: Any = NO_ANNOTATION
    enumerator_annotation: Any = NO_ANNOTATION
    parameter_annotation: Any = NO_ANNOTATION
    ignore: Tuple[MacroLine, ...] = ()
    skip_words: FrozenSet[str] = field(default_factory=frozenset)
    skip_word_suffixes: Tuple[str, ...] = ()

    @property
    def reserved_macros(self) -> FrozenSet[str]:
        """Every annotation macro name known to this dialect."""
        names = set()
        for strategy in (
            self.class_annotation,
            self.method_annotation,
            self.member_annotation,
            self.enum_annotation,
            self.enumerator_annotation,
            self.parameter_annotation,
        ):
            names.update(strategy.macros)
        return frozenset(names)

    def ignore_line(self, text: str, pos: int):
        """Try every ignore recognizer; first success wins."""
        start = skip_ws(text, pos)
        for recognizer in self.ignore:
            found = recognizer(text, start)
            if found:
                return found
        return fail(start, "ignored macro")

    def skip_word(self, text: str, pos: int) -> Optional[int]:
        """Consume one noise word (plus a balanced argument list), if present."""
        start = skip_space(text, pos)
        matched = identifier(text, start)
        if matched is None:
            return None
        end, word = matched
        if word not in self.skip_words and not any(
            word.endswith(suffix) for suffix in self.skip_word_suffixes
        ):
            return None
        args_start = skip_space(text, end)
        if text.startswith("(", args_start):
            args_end = skip_balanced(text, args_start)
            if args_end is not None:
                end = args_end
        return end


PLAIN = Dialect(name="cpp")

REFLECTION = Dialect(
    name="unreal",
    class_annotation=MacroAnnotation(("UCLASS", "USTRUCT", "UINTERFACE")),
    method_annotation=MacroAnnotation(("UFUNCTION",)),
    member_annotation=MacroAnnotation(("UPROPERTY",)),
    enum_annotation=MacroAnnotation(("UENUM",)),
    enumerator_annotation=MacroAnnotation(("UMETA",)),
    parameter_annotation=MacroAnnotation(("UPARAM",)),
    ignore=(
        MacroLine(
            names=(
                "GENERATED_BODY",
                "GENERATED_UCLASS_BODY",
                "GENERATED_USTRUCT_BODY",
                "GENERATED_IINTERFACE_BODY",
                "GENERATED_BODY_LEGACY",
            ),
            prefixes=("DECLARE_",),
        ),
    ),
    skip_words=frozenset(
        {
            "FORCEINLINE",
            "FORCENOINLINE",
            "FORCEINLINE_DEBUGGABLE",
            "UE_NODISCARD",
            "UE_DEPRECATED",
            "PURE_VIRTUAL",
        }
    ),
    skip_word_suffixes=("_API",),
)

_BUILTIN: Dict[str, Dialect] = {
    PLAIN.name: PLAIN,
    REFLECTION.name: REFLECTION,
}


def available_dialects() -> Tuple[str, ...]:
    return tuple(sorted(_BUILTIN))


def get_dialect(name: str) -> Dialect:
    """Look up a built-in dialect by name.

    Raises:
        ValueError: If no dialect with that name exists.
    """
    try:
        return _BUILTIN[name]
    except KeyError:
        raise ValueError(
            f"Unknown dialect '{name}' (available: {', '.join(available_dialects())})"
        ) from None


def _merge(base, extra: Tuple[str, ...]) -> Any:
    names = set(base.macros) | set(extra)
    if not names:
        return NO_ANNOTATION
    return MacroAnnotation(sorted(names))


def dialect_from_spec(spec: DialectSpec) -> Dialect:
    """Build a dialect from a loaded definition, extending ``spec.base``."""
    base = get_dialect(spec.base) if spec.base else PLAIN
    ignore = base.ignore
    if spec.ignore_macros or spec.ignore_macro_prefixes:
        ignore = ignore + (MacroLine(spec.ignore_macros, spec.ignore_macro_prefixes),)
    dialect = Dialect(
        name=spec.name,
        class_annotation=_merge(base.class_annotation, spec.class_macros),
        method_annotation=_merge(base.method_annotation, spec.function_macros),
        member_annotation=_merge(base.member_annotation, spec.property_macros),
        enum_annotation=_merge(base.enum_annotation, spec.enum_macros),
        enumerator_annotation=_merge(base.enumerator_annotation, spec.enumerator_macros),
        parameter_annotation=_merge(base.parameter_annotation, spec.parameter_macros),
        ignore=ignore,
        skip_words=base.skip_words | frozenset(spec.skip_words),
        skip_word_suffixes=base.skip_word_suffixes + tuple(
            s for s in spec.skip_word_suffixes if s not in base.skip_word_suffixes
        ),
    )
    logger.debug(
        "Built dialect '%s' on base '%s' (%d annotation macros)",
        dialect.name,
        base.name,
        len(dialect.reserved_macros),
    )
    return dialect


def load_dialect(path: str) -> Dialect:
    """Load a YAML/JSON dialect definition and build the dialect."""
    return dialect_from_spec(load_dialect_spec(path))


def resolve_dialect(dialect: "Dialect | str | None") -> Dialect:
    if dialect is None:
        return PLAIN
    if isinstance(dialect, Dialect):
        return dialect
    return get_dialect(dialect)
