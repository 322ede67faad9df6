"""
Enum parser: ``enum [class|struct] [Name] [: type] { A, B = 5, }``.
"""

from typing import List

from headerparse.annotation import collect_annotations
from headerparse.comment import optional_comment
from headerparse.ctype import parse_name, parse_type
from headerparse.models import EnumDecl, Enumerator
from headerparse.results import ParseContext, Success, fail
from headerparse.scanner import (
    any_keyword,
    capture_expression,
    identifier,
    keyword,
    skip_space,
    symbol,
)


def _enumerator_value(text: str, start: int, ctx: ParseContext):
    """Raw value text; a trailing enumerator macro (``= 1 UMETA(...)``) is split off."""
    end = capture_expression(text, start, ",}")
    strategy = ctx.dialect.enumerator_annotation
    if strategy.macros:
        i = start
        while i < end:
            matched = identifier(text, i)
            if matched is None:
                i += 1
                continue
            if matched[1] in strategy.macros and (i == start or not text[i - 1].isalnum()):
                return i, text[start:i].strip()
            i = matched[0]
    return end, text[start:end].strip()


def _parse_enumerator(text: str, pos: int, ctx: ParseContext):
    found = optional_comment(text, pos, ctx)
    pos, comment = found.pos, found.value
    named = parse_name(text, pos)
    if named is None:
        return fail(skip_space(text, pos), "enumerator", ctx)
    pos, name = named
    found = collect_annotations(text, pos, ctx.dialect.enumerator_annotation)
    pos, annotation = found.pos, found.value
    value = None
    equals = symbol(text, pos, "=")
    if equals is not None:
        pos, value = _enumerator_value(text, skip_space(text, equals), ctx)
        if not value:
            return fail(skip_space(text, equals), "enumerator value", ctx)
        found = collect_annotations(text, pos, ctx.dialect.enumerator_annotation)
        pos = found.pos
        if annotation is None:
            annotation = found.value
    return Success(pos, Enumerator(name, value, comment, annotation))


def parse_enum(text: str, pos: int, ctx: ParseContext):
    """Parse an enum definition or opaque declaration, including its ``;``."""
    found = optional_comment(text, pos, ctx)
    pos, comment = found.pos, found.value
    found = collect_annotations(text, pos, ctx.dialect.enum_annotation)
    pos, annotation = found.pos, found.value

    after_enum = keyword(text, pos, "enum")
    if after_enum is None:
        return fail(skip_space(text, pos), "enum", ctx)
    pos = after_enum
    scoped = False
    hit = any_keyword(text, pos, ("class", "struct"))
    if hit is not None:
        pos, scoped = hit[0], True

    name = None
    named = parse_name(text, pos)
    if named is not None:
        pos, name = named
    elif scoped:
        return fail(skip_space(text, pos), "enum name", ctx)

    underlying = None
    colon = symbol(text, pos, ":")
    if colon is not None:
        typed = parse_type(text, colon, ctx)
        if not typed:
            return fail(skip_space(text, colon), "underlying type", ctx)
        pos, underlying = typed.pos, typed.value

    semicolon = symbol(text, pos, ";")
    if semicolon is not None and name is not None:
        return Success(
            semicolon,
            EnumDecl(name, scoped, underlying, (), True, comment, annotation),
        )

    brace = symbol(text, pos, "{")
    if brace is None:
        return fail(skip_space(text, pos), "'{'", ctx)
    pos = brace
    enumerators: List[Enumerator] = []
    while True:
        # symbol() skips a trailing comment before the brace
        close = symbol(text, pos, "}")
        if close is not None:
            pos = close
            break
        item = _parse_enumerator(text, pos, ctx)
        if not item:
            return item
        enumerators.append(item.value)
        pos = item.pos
        comma = symbol(text, pos, ",")
        if comma is not None:
            pos = comma
            continue
        close = symbol(text, pos, "}")
        if close is None:
            return fail(skip_space(text, pos), "',' or '}'", ctx)
        pos = close
        break

    semicolon = symbol(text, pos, ";")
    if semicolon is not None:
        pos = semicolon
    return Success(
        pos,
        EnumDecl(name, scoped, underlying, tuple(enumerators), False, comment, annotation),
    )
