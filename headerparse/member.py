"""
Data-member parser, plus the declarator helpers shared with parameters.
"""

from typing import List

from headerparse.annotation import collect_annotations, starts_with_macro
from headerparse.comment import optional_comment
from headerparse.config import MEMBER_MODIFIERS
from headerparse.ctype import parse_name, parse_type, parse_type_list, parse_value
from headerparse.models import Array, Function, Member, MemberModifier, Path
from headerparse.results import ParseContext, Success, fail
from headerparse.scanner import any_keyword, number, skip_balanced, skip_space, symbol


def _function_pointer_declarator(text: str, pos: int, ctx: ParseContext, base):
    """``(*name)(Args)``; the name may be omitted in parameter lists."""
    open_paren = symbol(text, pos, "(")
    if open_paren is None:
        return None
    star = symbol(text, open_paren, "*")
    if star is None:
        return None
    name = None
    named = parse_name(text, star)
    if named is not None:
        star, name = named
    close = symbol(text, star, ")")
    if close is None:
        return None
    params = parse_type_list(text, close, ctx, "(", ")")
    if not params:
        return None
    return Success(params.pos, (name, Function(base, tuple(params.value))))


def parse_array_suffixes(text: str, pos: int, base):
    result = base
    while True:
        start = skip_space(text, pos)
        if not text.startswith("[", start):
            return Success(pos, result)
        end = skip_balanced(text, start)
        if end is None:
            return fail(start, "']'")
        result = Array(result, text[start + 1 : end - 1].strip())
        pos = end


def parse_declarator(
    text: str, pos: int, ctx: ParseContext, base, require_name: bool = True
):
    """Parse the name part of a declaration after its type.

    Returns:
        ``Success`` with a ``(name, type)`` pair; ``name`` is ``None`` only
        when ``require_name`` is false and no name is present.
    """
    pointer = _function_pointer_declarator(text, pos, ctx, base)
    if pointer is not None:
        if pointer.value[0] is None and require_name:
            return fail(skip_space(text, pos), "declarator name", ctx)
        return pointer
    name = None
    named = parse_name(text, pos)
    if named is not None:
        pos, name = named
    elif require_name:
        return fail(skip_space(text, pos), "declarator name", ctx)
    arrays = parse_array_suffixes(text, pos, base)
    if not arrays:
        return arrays
    return Success(arrays.pos, (name, arrays.value))


def _parse_modifiers(text: str, pos: int, ctx: ParseContext, modifiers: List[MemberModifier]):
    while True:
        hit = any_keyword(text, pos, MEMBER_MODIFIERS)
        if hit is not None:
            pos = hit[0]
            modifier = MemberModifier(hit[1])
            if modifier not in modifiers:
                modifiers.append(modifier)
            continue
        skipped = ctx.dialect.skip_word(text, pos)
        if skipped is not None:
            pos = skipped
            continue
        return pos


def _parse_initializer(text: str, pos: int, ctx: ParseContext):
    equals = symbol(text, pos, "=")
    if equals is not None:
        return parse_value(text, equals, ctx, ";,")
    brace = symbol(text, pos, "{")
    if brace is None:
        return Success(pos, None)
    close = symbol(text, brace, "}")
    if close is not None:
        return Success(close, Path(()))
    value = parse_value(text, brace, ctx, "}")
    if not value:
        return value
    close = symbol(text, value.pos, "}")
    if close is None:
        return fail(skip_space(text, value.pos), "'}'", ctx)
    return Success(close, value.value)


def parse_member(text: str, pos: int, ctx: ParseContext):
    """Parse one data-member declaration, without its terminating ``;``.

    Order: optional comment, dialect annotations, modifiers, type, name
    (or ``(*name)(Args)``), array bounds, bit-field width, and an optional
    ``= value`` or ``{value}`` initializer.
    """
    found = optional_comment(text, pos, ctx)
    pos, comment = found.pos, found.value
    found = collect_annotations(text, pos, ctx.dialect.member_annotation)
    pos, annotation = found.pos, found.value
    if starts_with_macro(text, pos, ctx.dialect.reserved_macros):
        return fail(skip_space(text, pos), "member", ctx)

    modifiers: List[MemberModifier] = []
    pos = _parse_modifiers(text, pos, ctx, modifiers)

    typed = parse_type(text, pos, ctx)
    if not typed:
        return fail(skip_space(text, pos), "member type", ctx)
    declarator = parse_declarator(text, typed.pos, ctx, typed.value)
    if not declarator:
        return declarator
    pos = declarator.pos
    name, member_type = declarator.value

    bits = None
    colon = symbol(text, pos, ":")
    if colon is not None and not text.startswith("::", skip_space(text, pos)):
        width = number(text, skip_space(text, colon))
        if width is None:
            return fail(skip_space(text, colon), "bit-field width", ctx)
        pos, bits = width

    initializer = _parse_initializer(text, pos, ctx)
    if not initializer:
        return initializer

    return Success(
        initializer.pos,
        Member(
            name=name,
            type=member_type,
            default=initializer.value,
            modifiers=tuple(modifiers),
            comment=comment,
            annotation=annotation,
            bits=bits,
        ),
    )


def parse_member_statement(text: str, pos: int, ctx: ParseContext):
    """A member followed by its ``;``."""
    member = parse_member(text, pos, ctx)
    if not member:
        return member
    end = symbol(text, member.pos, ";")
    if end is None:
        return fail(skip_space(text, member.pos), "';'", ctx)
    return Success(end, member.value)
