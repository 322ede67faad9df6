"""
Comment recognizer.

Turns a run of ``//`` lines or one ``/* ... */`` block into normalized text.
Declaration parsers call this first so a comment directly above a
declaration is attached to it.
"""

from typing import List, Optional

from headerparse.results import ParseContext, Success, fail
from headerparse.scanner import skip_ws

_LINE_MARKER_CHARS = " \t/*!"
_BLOCK_MARKER_CHARS = "*!"


def _clean_line_comment(line: str) -> str:
    return line.lstrip(_LINE_MARKER_CHARS).rstrip()


def _line_comment_run(text: str, pos: int):
    lines: List[str] = []
    while text.startswith("//", pos):
        end = text.find("\n", pos)
        if end == -1:
            end = len(text)
        lines.append(_clean_line_comment(text[pos:end]))
        if end >= len(text):
            pos = end
            break
        following = end + 1
        while following < len(text) and text[following] in " \t\r":
            following += 1
        if not text.startswith("//", following):
            pos = end
            break
        pos = following
    return Success(pos, "\n".join(lines))


def _block_comment(text: str, pos: int, ctx: Optional[ParseContext]):
    end = text.find("*/", pos + 2)
    if end == -1:
        return fail(pos, "'*/'", ctx)
    body = text[pos + 2 : end]
    if body.startswith("*") or body.startswith("!"):
        body = body[1:]
    lines = []
    for raw in body.splitlines():
        line = raw.strip().lstrip(_BLOCK_MARKER_CHARS).strip()
        if line:
            lines.append(line)
    return Success(end + 2, "\n".join(lines))


def parse_comment(text: str, pos: int, ctx: Optional[ParseContext] = None):
    """Recognize one comment at ``pos`` (leading whitespace skipped).

    Consecutive ``//``/``///``/``//!`` lines form a single comment; a blank
    line ends the run. A block comment is split into lines, each stripped of
    whitespace and leading ``*``, with blank lines dropped.

    Returns:
        ``Success`` with the normalized text, or ``Failure`` if no comment
        marker is present or a block comment is unterminated.
    """
    start = skip_ws(text, pos)
    if text.startswith("//", start):
        return _line_comment_run(text, start)
    if text.startswith("/*", start):
        return _block_comment(text, start, ctx)
    return fail(start, "comment", ctx)


def optional_comment(text: str, pos: int, ctx: Optional[ParseContext] = None):
    """Comment if one starts at ``pos``; ``Success(pos, None)`` otherwise."""
    found = parse_comment(text, pos, ctx)
    if found:
        return found
    return Success(pos, None)
