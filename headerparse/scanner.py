"""
Lexical helpers for the scannerless recognizers.

Every helper takes the full source text and an offset and returns either a
new offset or ``None`` when nothing matched; none of them raise on bad input.
"""

import re
from typing import Optional, Tuple

_IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_NUMBER_RE = re.compile(r"[0-9](?:[0-9A-Za-z_.']|(?<=[eEpP])[+-])*")
_WHITESPACE_RE = re.compile(r"\s*")

_CLOSERS = {"(": ")", "[": "]", "{": "}", "<": ">"}


def is_identifier_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def skip_ws(text: str, pos: int) -> int:
    """Skip whitespace only. Comments stay visible to the caller."""
    return _WHITESPACE_RE.match(text, pos).end()


def skip_space(text: str, pos: int) -> int:
    """Skip whitespace and comments inside a declaration."""
    while True:
        pos = skip_ws(text, pos)
        if text.startswith("//", pos):
            end = text.find("\n", pos)
            pos = len(text) if end == -1 else end
        elif text.startswith("/*", pos):
            end = text.find("*/", pos + 2)
            if end == -1:
                return pos
            pos = end + 2
        else:
            return pos


def identifier(text: str, pos: int) -> Optional[Tuple[int, str]]:
    """Match an identifier at ``pos`` (no leading whitespace skipped)."""
    match = _IDENTIFIER_RE.match(text, pos)
    if match is None:
        return None
    return match.end(), match.group(0)


def number(text: str, pos: int) -> Optional[Tuple[int, str]]:
    """Match a numeric literal such as ``0``, ``0x1F``, ``1.5e-3f`` or ``1'000``."""
    match = _NUMBER_RE.match(text, pos)
    if match is None:
        return None
    return match.end(), match.group(0)


def keyword(text: str, pos: int, word: str) -> Optional[int]:
    """Match ``word`` as a whole word after optional whitespace/comments."""
    start = skip_space(text, pos)
    end = start + len(word)
    if not text.startswith(word, start):
        return None
    if end < len(text) and is_identifier_char(text[end]):
        return None
    return end


def any_keyword(text: str, pos: int, words) -> Optional[Tuple[int, str]]:
    for word in words:
        end = keyword(text, pos, word)
        if end is not None:
            return end, word
    return None


def symbol(text: str, pos: int, token: str) -> Optional[int]:
    """Match a punctuation token after optional whitespace/comments."""
    start = skip_space(text, pos)
    if text.startswith(token, start):
        return start + len(token)
    return None


def skip_literal(text: str, pos: int) -> int:
    """Skip a string or character literal starting at ``pos``.

    Raw strings (``R"delim(...)delim"``) are not recognized. An unterminated
    literal runs to the end of the text.
    """
    quote = text[pos]
    i = pos + 1
    while i < len(text):
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1
        if ch == "\n" and quote == "'":
            return i
        i += 1
    return len(text)


def skip_balanced(text: str, pos: int) -> Optional[int]:
    """Skip a bracketed group starting at ``text[pos]``.

    Handles ``()``, ``[]`` and ``{}`` groups with nesting of all three kinds,
    plus ``<>`` when the group itself opens with ``<``. Comments and
    string/char literals are skipped so braces inside them do not count.

    Returns:
        Offset just past the matching closer, or ``None`` if unbalanced.
    """
    if pos >= len(text) or text[pos] not in _CLOSERS:
        return None
    angle = text[pos] == "<"
    stack = [_CLOSERS[text[pos]]]
    i = pos + 1
    while i < len(text):
        ch = text[i]
        if ch in "\"'":
            if ch == "'" and i > 0 and text[i - 1].isdigit():
                # digit separator such as 1'000
                i += 1
                continue
            i = skip_literal(text, i)
            continue
        if text.startswith("//", i):
            end = text.find("\n", i)
            i = len(text) if end == -1 else end
            continue
        if text.startswith("/*", i):
            end = text.find("*/", i + 2)
            if end == -1:
                return None
            i = end + 2
            continue
        if ch in "([{" or (angle and ch == "<"):
            stack.append(_CLOSERS[ch])
        elif ch in ")]}" or (angle and ch == ">"):
            if ch != stack[-1]:
                return None
            stack.pop()
            if not stack:
                return i + 1
        i += 1
    return None


def rest_of_line(text: str, pos: int) -> int:
    """Offset of the end of the logical line, following ``\\`` continuations."""
    while True:
        end = text.find("\n", pos)
        if end == -1:
            return len(text)
        if text[pos:end].rstrip("\r").endswith("\\"):
            pos = end + 1
            continue
        return end


def capture_expression(text: str, pos: int, terminators: str) -> int:
    """Scan an opaque expression up to a depth-0 terminator character.

    Parentheses, brackets and braces nest; ``<`` nests only when it directly
    follows an identifier character (a template argument list), so
    ``Map<int, int>()`` stays in one piece while ``a < b`` does not.

    Returns:
        Offset of the terminator, or ``len(text)`` if none was found.
    """
    depth = 0
    angle = 0
    i = pos
    while i < len(text):
        ch = text[i]
        if ch in "\"'":
            i = skip_literal(text, i)
            continue
        if depth == 0 and angle == 0 and ch in terminators:
            return i
        if ch in "([{":
            depth += 1
        elif ch in ")]}":
            if depth == 0:
                return i
            depth -= 1
        elif ch == "<" and i > pos and is_identifier_char(text[i - 1]):
            angle += 1
        elif ch == ">" and angle:
            angle -= 1
        i += 1
    return len(text)


def at_comment(text: str, pos: int) -> bool:
    """Whether a comment starts at ``pos`` once whitespace is skipped."""
    return text.startswith(("//", "/*"), skip_ws(text, pos))
