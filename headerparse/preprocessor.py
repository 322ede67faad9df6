"""
Preprocessor lines: captured as raw text, never expanded.
"""

import re

from headerparse.models import Directive, Include
from headerparse.results import ParseContext, Success, fail
from headerparse.scanner import rest_of_line, skip_ws

_INCLUDE_RE = re.compile(r'#[ \t]*include[ \t]*(?:"([^"\n]*)"|<([^>\n]*)>)')
_DIRECTIVE_RE = re.compile(r"#[ \t]*([A-Za-z_]\w*)?")


def parse_include(text: str, pos: int, ctx: ParseContext = None):
    """``#include "path"`` or ``#include <path>``."""
    start = skip_ws(text, pos)
    match = _INCLUDE_RE.match(text, start)
    if match is None:
        return fail(start, "#include", ctx)
    quoted, system = match.group(1), match.group(2)
    include = Include(path=system if quoted is None else quoted, system=quoted is None)
    return Success(match.end(), include)


def parse_directive(text: str, pos: int, ctx: ParseContext = None):
    """Any ``#...`` line, with ``\\`` continuations, as a ``Directive``.

    The text keeps everything after ``#`` with continuation markers joined,
    e.g. ``Directive("pragma", "pragma once")``.
    """
    start = skip_ws(text, pos)
    match = _DIRECTIVE_RE.match(text, start)
    if match is None:
        return fail(start, "preprocessor directive", ctx)
    end = rest_of_line(text, start)
    raw = text[start + 1 : end]
    body = " ".join(part.strip() for part in raw.replace("\\\r\n", "\\\n").split("\\\n"))
    return Success(end, Directive(keyword=match.group(1) or "", text=body.strip()))


def parse_define(text: str, pos: int, ctx: ParseContext = None):
    directive = parse_directive(text, pos, ctx)
    if not directive or directive.value.keyword != "define":
        return fail(skip_ws(text, pos), "#define", ctx)
    return directive
