"""
Annotation extension point.

An annotation strategy is any callable ``(text, pos) -> Success | Failure``
whose success value is an ``Annotation`` or ``None``. Parsers receive the
strategy from the active dialect, so one grammar serves plain C++ and
macro-annotated reflection code alike.
"""

from typing import FrozenSet, Iterable, Optional

from headerparse.models import Annotation
from headerparse.results import Success, fail
from headerparse.scanner import identifier, skip_balanced, skip_space


class NoAnnotation:
    """Plain C++: always succeeds, consumes nothing, yields ``None``."""

    macros: FrozenSet[str] = frozenset()

    def __call__(self, text: str, pos: int):
        return Success(pos, None)

    def __repr__(self) -> str:
        return "NoAnnotation()"


class MacroAnnotation:
    """Recognize ``NAME`` or ``NAME(...)`` for one of the given macro names.

    The argument list may span several lines; it is captured verbatim and
    not interpreted.
    """

    def __init__(self, names: Iterable[str]):
        self.macros: FrozenSet[str] = frozenset(names)

    def __call__(self, text: str, pos: int):
        start = skip_space(text, pos)
        matched = identifier(text, start)
        if matched is None or matched[1] not in self.macros:
            return fail(start, "annotation macro")
        end, name = matched
        args_start = skip_space(text, end)
        if text.startswith("(", args_start):
            args_end = skip_balanced(text, args_start)
            if args_end is None:
                return fail(args_start, f"closing ')' for {name}")
            end = args_end
        return Success(end, Annotation(name, text[start:end]))

    def __repr__(self) -> str:
        return f"MacroAnnotation({sorted(self.macros)!r})"


NO_ANNOTATION = NoAnnotation()


def collect_annotations(text: str, pos: int, strategy) -> Success:
    """Apply ``strategy`` repeatedly; keep the first annotation found.

    Later annotations in the same prefix are consumed and discarded. Always
    succeeds; the value is ``None`` when nothing matched.
    """
    first: Optional[Annotation] = None
    while True:
        found = strategy(text, pos)
        if not found or found.value is None or found.pos == pos:
            return Success(pos, first)
        if first is None:
            first = found.value
        pos = found.pos


def starts_with_macro(text: str, pos: int, macros: FrozenSet[str]) -> bool:
    """Whether one of ``macros`` is the next identifier at ``pos``."""
    if not macros:
        return False
    matched = identifier(text, skip_space(text, pos))
    return matched is not None and matched[1] in macros
