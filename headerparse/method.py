"""
Method and free-function signature parser.

Return type, name and qualifiers interleave differently in the two
declarator styles (``int f()`` vs ``Foo()`` / ``~Foo()`` / ``operator==``),
so the name is found by lookahead before the parameter list is read.
"""

import logging
from typing import List, Optional

from headerparse.annotation import collect_annotations, starts_with_macro
from headerparse.comment import optional_comment
from headerparse.config import OPERATOR_TOKENS, POST_QUALIFIERS, STORAGE_QUALIFIERS
from headerparse.ctype import (
    is_void,
    optional_template_header,
    parse_name,
    parse_type,
    parse_value,
)
from headerparse.member import parse_declarator
from headerparse.models import Method, Parameter, Path, PostQualifier, SpecialMember, StorageQualifier
from headerparse.results import ParseContext, Success, fail, furthest
from headerparse.scanner import (
    any_keyword,
    capture_expression,
    is_identifier_char,
    keyword,
    number,
    skip_balanced,
    skip_space,
    symbol,
)

logger = logging.getLogger(__name__)


def _skip_attribute(text: str, pos: int) -> Optional[int]:
    """``[[nodiscard]]``-style attribute."""
    start = skip_space(text, pos)
    if not text.startswith("[[", start):
        return None
    return skip_balanced(text, start)


def _parse_storage(text: str, pos: int, ctx: ParseContext, storage: List[StorageQualifier]) -> int:
    while True:
        hit = any_keyword(text, pos, STORAGE_QUALIFIERS)
        if hit is not None:
            pos = hit[0]
            qualifier = StorageQualifier(hit[1])
            if qualifier not in storage:
                storage.append(qualifier)
            continue
        skipped = ctx.dialect.skip_word(text, pos)
        if skipped is None:
            skipped = _skip_attribute(text, pos)
        if skipped is not None:
            pos = skipped
            continue
        return pos


def _operator_name(text: str, pos: int, ctx: ParseContext):
    """Name after the ``operator`` keyword: a catalogue token or a conversion type."""
    start = skip_space(text, pos)
    for token in OPERATOR_TOKENS:
        if not text.startswith(token, start):
            continue
        end = start + len(token)
        if token[0].isalpha():
            if end < len(text) and is_identifier_char(text[end]):
                continue
            bracket = symbol(text, end, "[]")
            if bracket is not None and not token.endswith("]"):
                return Success(bracket, f"operator {token}[]")
            return Success(end, f"operator {token}")
        return Success(end, f"operator{token}")
    conversion = parse_type(text, start, ctx, allow_function=False)
    if not conversion:
        return fail(start, "operator token", ctx)
    return Success(conversion.pos, f"operator {conversion.value.render()}")


def _unqualified_name(text: str, pos: int, ctx: ParseContext):
    start = skip_space(text, pos)
    after_operator = keyword(text, start, "operator")
    if after_operator is not None:
        return _operator_name(text, after_operator, ctx)
    if text.startswith("~", start):
        named = parse_name(text, start + 1)
        if named is None:
            return fail(start + 1, "destructor name", ctx)
        return Success(named[0], "~" + named[1])
    named = parse_name(text, start)
    if named is None:
        return fail(start, "function name", ctx)
    return Success(named[0], named[1])


def parse_method_name(text: str, pos: int, ctx: ParseContext):
    """Identifier, ``~Identifier``, ``operator<tok>`` or a conversion, optionally qualified."""
    parts: List[str] = []
    while True:
        name = _unqualified_name(text, pos, ctx)
        if not name:
            return name if not parts else fail(name.pos, "qualified name", ctx)
        parts.append(name.value)
        pos = name.pos
        if name.value.startswith(("~", "operator")):
            break
        sep = symbol(text, pos, "::")
        if sep is None:
            break
        pos = sep
    return Success(pos, "::".join(parts))


def _parse_declarator_style(text: str, pos: int, ctx: ParseContext):
    """Return ``(classic_return_type | None, name)``.

    A type followed by a valid name and ``(`` is the classic style; anything
    else is tried as a bare name (constructor, destructor, operator).
    """
    classic = parse_type(text, pos, ctx)
    failures = []
    if classic:
        name = parse_method_name(text, classic.pos, ctx)
        if name and symbol(text, name.pos, "(") is not None:
            return Success(name.pos, (classic.value, name.value))
        if not name:
            failures.append(name)
        else:
            failures.append(fail(skip_space(text, name.pos), "'('", ctx))
    else:
        failures.append(classic)
    bare = parse_method_name(text, pos, ctx)
    if bare and symbol(text, bare.pos, "(") is not None:
        return Success(bare.pos, (None, bare.value))
    if bare:
        failures.append(fail(skip_space(text, bare.pos), "'('", ctx))
    else:
        failures.append(bare)
    return furthest(*failures)


def _parse_parameter(text: str, pos: int, ctx: ParseContext):
    found = collect_annotations(text, pos, ctx.dialect.parameter_annotation)
    pos, annotation = found.pos, found.value
    ellipsis = symbol(text, pos, "...")
    if ellipsis is not None:
        return Success(ellipsis, Parameter(type=Path(()), annotation=annotation, variadic=True))
    typed = parse_type(text, pos, ctx)
    if not typed:
        return fail(skip_space(text, pos), "parameter type", ctx)
    pos = typed.pos
    variadic = False
    pack = symbol(text, pos, "...")
    if pack is not None:
        pos, variadic = pack, True
    declarator = parse_declarator(text, pos, ctx, typed.value, require_name=False)
    if not declarator:
        return declarator
    pos = declarator.pos
    name, param_type = declarator.value
    default = None
    equals = symbol(text, pos, "=")
    if equals is not None:
        value = parse_value(text, equals, ctx, ",)")
        if not value:
            return value
        pos, default = value.pos, value.value
    return Success(
        pos,
        Parameter(
            type=param_type,
            name=name,
            default=default,
            annotation=annotation,
            variadic=variadic,
        ),
    )


def parse_parameters(text: str, pos: int, ctx: ParseContext):
    """Parenthesized parameter list; a lone unnamed ``void`` means none."""
    start = symbol(text, pos, "(")
    if start is None:
        return fail(skip_space(text, pos), "'('", ctx)
    params: List[Parameter] = []
    end = symbol(text, start, ")")
    if end is not None:
        return Success(end, params)
    pos = start
    while True:
        param = _parse_parameter(text, pos, ctx)
        if not param:
            return param
        params.append(param.value)
        pos = param.pos
        comma = symbol(text, pos, ",")
        if comma is not None:
            pos = comma
            continue
        end = symbol(text, pos, ")")
        if end is None:
            return fail(skip_space(text, pos), "',' or ')'", ctx)
        if (
            len(params) == 1
            and params[0].name is None
            and params[0].default is None
            and is_void(params[0].type)
        ):
            params = []
        return Success(end, params)


def _skip_initializer_list(text: str, pos: int, ctx: ParseContext):
    """Consume ``: a(x), Base<T>{y}`` up to the constructor body."""
    while True:
        start = skip_space(text, pos)
        group = capture_expression(text, start, "({")
        if group >= len(text) or group == start:
            return fail(start, "member initializer", ctx)
        end = skip_balanced(text, group)
        if end is None:
            return fail(group, "balanced initializer", ctx)
        pos = skip_space(text, end)
        if text.startswith("...", pos):
            pos = skip_space(text, pos + 3)
        if text.startswith(",", pos):
            pos += 1
            continue
        return Success(pos)


def _parse_post_qualifiers(text: str, pos: int, ctx: ParseContext, qualifiers: List[PostQualifier]) -> int:
    while True:
        hit = any_keyword(text, pos, POST_QUALIFIERS)
        if hit is not None:
            pos = hit[0]
            qualifier = PostQualifier(hit[1])
            if qualifier not in qualifiers:
                qualifiers.append(qualifier)
            if qualifier is PostQualifier.NOEXCEPT:
                args = skip_space(text, pos)
                if text.startswith("(", args):
                    end = skip_balanced(text, args)
                    if end is not None:
                        pos = end
            continue
        throw = keyword(text, pos, "throw")
        if throw is not None:
            args = skip_space(text, throw)
            end = skip_balanced(text, args) if text.startswith("(", args) else None
            if end is not None:
                pos = end
                continue
        after_volatile = keyword(text, pos, "volatile")
        if after_volatile is not None:
            pos = after_volatile
            continue
        # ref-qualifiers are recognized but not modeled
        ref = symbol(text, pos, "&&")
        if ref is None:
            ref = symbol(text, pos, "&")
        if ref is not None:
            pos = ref
            continue
        skipped = ctx.dialect.skip_word(text, pos)
        if skipped is not None:
            pos = skipped
            continue
        return pos


def _parse_special(text: str, pos: int, ctx: ParseContext):
    equals = symbol(text, pos, "=")
    if equals is None:
        return Success(pos, None)
    start = skip_space(text, equals)
    zero = number(text, start)
    if zero is not None and zero[1] == "0":
        return Success(zero[0], SpecialMember.PURE_VIRTUAL)
    hit = any_keyword(text, start, ("default", "delete"))
    if hit is None:
        return fail(start, "'0', 'default' or 'delete'", ctx)
    marker = SpecialMember.DEFAULTED if hit[1] == "default" else SpecialMember.DELETED
    return Success(hit[0], marker)


def parse_method(text: str, pos: int, ctx: ParseContext):
    """Parse one function or method declaration/definition.

    Steps: comment, annotations, storage qualifiers, template header,
    declarator lookahead, parameters, member-initializer list, trailing
    return type, post-parameter qualifiers, special-member marker, and an
    inline body or ``;``. The body is brace-matched and discarded.

    Args:
        text: Full source text.
        pos: Offset of the declaration.
        ctx: Parse context supplying the dialect.

    Returns:
        ``Success`` carrying a ``Method``, or ``Failure`` at the first token
        that does not fit.
    """
    found = optional_comment(text, pos, ctx)
    pos, comment = found.pos, found.value
    found = collect_annotations(text, pos, ctx.dialect.method_annotation)
    pos, annotation = found.pos, found.value
    if starts_with_macro(text, pos, ctx.dialect.reserved_macros):
        return fail(skip_space(text, pos), "function", ctx)

    storage: List[StorageQualifier] = []
    pos = _parse_storage(text, pos, ctx, storage)
    template = optional_template_header(text, pos, ctx)
    if not template:
        return template
    pos = _parse_storage(text, template.pos, ctx, storage)

    style = _parse_declarator_style(text, pos, ctx)
    if not style:
        return style
    pos = style.pos
    classic_type, name = style.value

    params = parse_parameters(text, pos, ctx)
    if not params:
        return params
    pos = params.pos

    if symbol(text, pos, ":") is not None and symbol(text, pos, "::") is None:
        initializers = _skip_initializer_list(text, symbol(text, pos, ":"), ctx)
        if not initializers:
            return initializers
        pos = initializers.pos

    qualifiers: List[PostQualifier] = []
    pos = _parse_post_qualifiers(text, pos, ctx, qualifiers)

    trailing_type = None
    arrow = symbol(text, pos, "->")
    if arrow is not None:
        trailing = parse_type(text, arrow, ctx)
        if not trailing:
            return fail(skip_space(text, arrow), "trailing return type", ctx)
        pos, trailing_type = trailing.pos, trailing.value
        pos = _parse_post_qualifiers(text, pos, ctx, qualifiers)

    special = _parse_special(text, pos, ctx)
    if not special:
        return special
    pos = special.pos

    has_body = False
    body_start = skip_space(text, pos)
    if special.value is None and text.startswith("{", body_start):
        body_end = skip_balanced(text, body_start)
        if body_end is None:
            return fail(body_start, "balanced function body", ctx)
        pos, has_body = body_end, True
        semicolon = symbol(text, pos, ";")
        if semicolon is not None:
            pos = semicolon
    else:
        semicolon = symbol(text, pos, ";")
        if semicolon is None:
            return fail(skip_space(text, pos), "';' or function body", ctx)
        pos = semicolon

    return_type = trailing_type if trailing_type is not None else classic_type
    if is_void(return_type):
        return_type = None

    method = Method(
        name=name,
        return_type=return_type,
        template_parameters=template.value,
        parameters=tuple(params.value),
        storage=tuple(storage),
        qualifiers=tuple(qualifiers),
        special=special.value,
        has_body=has_body,
        comment=comment,
        annotation=annotation,
    )
    logger.debug("Parsed function %s", name)
    return Success(pos, method)
