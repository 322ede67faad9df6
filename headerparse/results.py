"""
Result values shared by every recognizer.

A recognizer is a plain function ``(text, pos[, ctx]) -> Success | Failure``.
Failures are returned, never raised, so ordered alternatives can be tried
cheaply and the furthest failure reported when all of them miss.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Optional

from headerparse.config import MAX_NESTING_DEPTH


@dataclass(frozen=True)
class Success:
    """A recognized value and the offset just past it."""

    pos: int
    value: Any = None

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """A rejected position.

    Attributes:
        pos: Offset of the first unrecognizable character.
        expected: Names of the rules that were attempted at ``pos``.
        context: Enclosing class/namespace path when the failure occurred.
    """

    pos: int
    expected: tuple = ()
    context: tuple = ()

    def __bool__(self) -> bool:
        return False

    def location(self, text: str) -> tuple:
        """Return the 1-indexed (line, column) of the failure in ``text``."""
        clamped = min(self.pos, len(text))
        line = text.count("\n", 0, clamped) + 1
        column = clamped - (text.rfind("\n", 0, clamped) + 1) + 1
        return line, column

    def describe(self, text: Optional[str] = None) -> str:
        """Human-readable summary used in error messages."""
        expected = " or ".join(self.expected) if self.expected else "input"
        where = f"offset {self.pos}"
        if text is not None:
            line, column = self.location(text)
            where = f"line {line}, column {column}"
        scope = "::".join(name or "<anonymous>" for name in self.context)
        suffix = f" in {scope}" if scope else ""
        return f"expected {expected} at {where}{suffix}"

    def within(self, context: tuple) -> Failure:
        """Attach an enclosing scope path if none was recorded yet."""
        if self.context or not context:
            return self
        return replace(self, context=tuple(context))


def fail(pos: int, expected: str, ctx: Optional["ParseContext"] = None) -> Failure:
    return Failure(pos, (expected,), ctx.scope if ctx is not None else ())


def furthest(*failures: Failure) -> Failure:
    """Pick the failure that got furthest, merging expectations on ties."""
    best: Optional[Failure] = None
    for failure in failures:
        if best is None or failure.pos > best.pos:
            best = failure
        elif failure.pos == best.pos:
            merged = best.expected + tuple(
                name for name in failure.expected if name not in best.expected
            )
            best = replace(best, expected=merged, context=best.context or failure.context)
    if best is None:
        return Failure(0, ("input",))
    return best


@dataclass(frozen=True)
class ParseContext:
    """Per-call state threaded through the recursive recognizers.

    Attributes:
        dialect: Active dialect bundle (annotation strategies, ignore lines).
        scope: Names of the enclosing namespaces and classes.
        depth: Current nesting depth.
    """

    dialect: Any
    scope: tuple = field(default_factory=tuple)
    depth: int = 0

    @property
    def too_deep(self) -> bool:
        return self.depth > MAX_NESTING_DEPTH

    def enter(self, name: str) -> ParseContext:
        """Context for the body of a nested class or namespace."""
        return replace(self, scope=self.scope + (name,), depth=self.depth + 1)

    def deeper(self) -> ParseContext:
        """Context for a nested type argument list."""
        return replace(self, depth=self.depth + 1)
