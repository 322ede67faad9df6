"""
Type-expression engine.

Recognizes the longest valid C++ type at a position and returns it as a
``TypeExpr`` value. Also hosts the two grammar pieces built directly on
types: ``template<...>`` headers and initializer values.
"""

from typing import List, Optional

from headerparse.config import (
    AUTO_TYPE,
    ELABORATED_KEYWORDS,
    FUNDAMENTAL_PREFIXES,
    FUNDAMENTAL_TAILS,
    RESERVED_WORDS,
    VOID_TYPE,
)
from headerparse.models import (
    Const,
    Function,
    Generic,
    Literal,
    MemberAccess,
    Path,
    Placeholder,
    Pointer,
    Reference,
    TemplateParameter,
    TypeExpr,
)
from headerparse.results import Failure, ParseContext, Success, fail
from headerparse.scanner import (
    any_keyword,
    capture_expression,
    identifier,
    keyword,
    number,
    skip_space,
    symbol,
)


def parse_name(text: str, pos: int):
    """Identifier that is not a reserved word, after whitespace/comments."""
    start = skip_space(text, pos)
    matched = identifier(text, start)
    if matched is None or matched[1] in RESERVED_WORDS:
        return None
    return matched


def _fundamental(text: str, pos: int, first: str):
    """Extend ``unsigned``/``long``... into one multi-word segment."""
    words = [first]
    while True:
        matched = parse_name(text, pos)
        if matched is None:
            break
        end, word = matched
        if word in FUNDAMENTAL_PREFIXES or word in FUNDAMENTAL_TAILS:
            words.append(word)
            pos = end
            if word not in FUNDAMENTAL_PREFIXES:
                break
            continue
        break
    return pos, " ".join(words)


def _parse_segment(text: str, pos: int):
    hit = any_keyword(text, pos, ELABORATED_KEYWORDS)
    if hit is not None:
        pos = hit[0]
    start = skip_space(text, pos)
    literal = number(text, start)
    if literal is not None:
        return literal
    matched = parse_name(text, start)
    if matched is None:
        return None
    end, word = matched
    if word in FUNDAMENTAL_PREFIXES:
        return _fundamental(text, end, word)
    return end, word


def _parse_path(text: str, pos: int, ctx: ParseContext):
    segments: List[str] = []
    after_global = symbol(text, pos, "::")
    if after_global is not None:
        pos = after_global
    segment = _parse_segment(text, pos)
    if segment is None:
        return fail(skip_space(text, pos), "type", ctx)
    pos, name = segment
    segments.append(name)
    while True:
        sep = symbol(text, pos, "::")
        if sep is None:
            break
        # ``A::B<...>`` binds the generic to the whole path; a separator
        # after a generic is a member access, handled by the caller.
        segment = _parse_segment(text, sep)
        if segment is None:
            break
        pos, name = segment
        segments.append(name)
    return Success(pos, tuple(segments))


def parse_type_list(
    text: str, pos: int, ctx: ParseContext, opener: str, closer: str
):
    """Parse ``opener type, type ... closer`` into a list of types.

    Pack expansions (``Ts...``) are accepted and dropped. A single ``void``
    inside parentheses means an empty list. Inside parentheses each type may
    carry an ignored parameter name.
    """
    start = symbol(text, pos, opener)
    if start is None:
        return fail(pos, opener, ctx)
    items: List[TypeExpr] = []
    end = symbol(text, start, closer)
    if end is not None:
        return Success(end, items)
    pos = start
    inner = ctx.deeper()
    while True:
        item = parse_type(text, pos, inner)
        if not item:
            return item
        pos = item.pos
        items.append(item.value)
        ellipsis = symbol(text, pos, "...")
        if ellipsis is not None:
            pos = ellipsis
        if opener == "(":
            named = parse_name(text, pos)
            if named is not None:
                pos = named[0]
        comma = symbol(text, pos, ",")
        if comma is not None:
            pos = comma
            continue
        end = symbol(text, pos, closer)
        if end is None:
            return fail(skip_space(text, pos), f"',' or '{closer}'", ctx)
        if opener == "(" and items == [Path((VOID_TYPE,))]:
            items = []
        return Success(end, items)


def _function_pointer_suffix(text: str, pos: int, ctx: ParseContext, base: TypeExpr):
    """``(*)(Args)`` after a return type; the pointer is implied by ``Function``."""
    """``(*)(Args)`` after a return type."""
    open_paren = symbol(text, pos, "(")
    if open_paren is None:
        return None
    star = symbol(text, open_paren, "*")
    if star is None:
        return None
    close = symbol(text, star, ")")
    if close is None:
        return None
    params = parse_type_list(text, close, ctx, "(", ")")
    if not params:
        return None
    return Success(params.pos, Function(base, tuple(params.value)))


def wrap_declarator(text: str, pos: int, base: TypeExpr):
    """Apply ``*``/``&``/``&&`` (and ``* const``) left to right."""
    result = base
    while True:
        star = symbol(text, pos, "*")
        if star is not None:
            result = Pointer(result)
            pos = star
            after_const = keyword(text, pos, "const")
            if after_const is not None:
                result = Const(result)
                pos = after_const
            continue
        amp = symbol(text, pos, "&")
        if amp is not None:
            result = Reference(result)
            pos = amp
            continue
        return Success(pos, result)


def parse_type(
    text: str,
    pos: int,
    ctx: ParseContext,
    allow_function: bool = True,
) -> "Success | Failure":
    """Recognize the longest type expression starting at ``pos``.

    Args:
        text: Full source text.
        pos: Offset to start at; leading whitespace/comments are skipped.
        ctx: Parse context (used for the nesting limit and failure scope).
        allow_function: Whether a parenthesized list after the base forms a
            function type. Conversion operators turn this off so that
            ``operator bool()`` keeps ``bool`` as the type.

    Returns:
        ``Success`` carrying a ``TypeExpr``, or ``Failure`` when no type
        starts at ``pos``.
    """
    if ctx.too_deep:
        return fail(pos, "type within nesting limit", ctx)

    is_const = False
    while True:
        hit = any_keyword(text, pos, ("const", "volatile"))
        if hit is None:
            break
        pos = hit[0]
        is_const = is_const or hit[1] == "const"

    path = _parse_path(text, pos, ctx)
    if not path:
        return path
    pos = path.pos
    segments = path.value
    if segments == (AUTO_TYPE,):
        result: TypeExpr = Placeholder()
    else:
        result = Path(segments)

    while True:
        if text.startswith("<", skip_space(text, pos)) and not text.startswith(
            "<<", skip_space(text, pos)
        ):
            args = parse_type_list(text, pos, ctx.deeper(), "<", ">")
            if args:
                result = Generic(result, tuple(args.value))
                pos = args.pos
        access = symbol(text, pos, "::")
        if access is None:
            break
        member = parse_name(text, access)
        if member is None:
            break
        pos, name = member
        result = MemberAccess(result, name)

    if allow_function and text.startswith("(", skip_space(text, pos)):
        pointer = _function_pointer_suffix(text, pos, ctx, result)
        if pointer is not None:
            pos = pointer.pos
            result = pointer.value
        else:
            params = parse_type_list(text, pos, ctx.deeper(), "(", ")")
            if params:
                result = Function(result, tuple(params.value))
                pos = params.pos

    trailing = keyword(text, pos, "const")
    if trailing is not None:
        is_const = True
        pos = trailing
    if is_const:
        result = Const(result)

    return wrap_declarator(text, pos, result)


def parse_value(
    text: str, pos: int, ctx: ParseContext, terminators: str
) -> "Success | Failure":
    """Parse an initializer or default argument up to a terminator.

    Values shaped like a type (``0``, ``nullptr``, ``EFoo::Bar``,
    ``std::string()``) come back as that type expression; anything else is
    kept verbatim as ``Literal``.
    """
    start = skip_space(text, pos)
    end = capture_expression(text, start, terminators)
    raw = text[start:end].strip()
    if not raw:
        return fail(start, "value", ctx)
    typed = parse_type(text, start, ctx)
    if typed and skip_space(text, typed.pos) == end:
        return Success(end, typed.value)
    return Success(end, Literal(raw))


def _parse_template_parameter(text: str, pos: int, ctx: ParseContext):
    nested = keyword(text, pos, "template")
    if nested is not None:
        inner = parse_template_header(text, pos, ctx.deeper())
        if not inner:
            return inner
        pos = inner.pos
    hit = any_keyword(text, pos, ("typename", "class"))
    if hit is not None:
        pos, kind = hit
        variadic = False
        ellipsis = symbol(text, pos, "...")
        if ellipsis is not None:
            variadic = True
            pos = ellipsis
        name = None
        named = parse_name(text, pos)
        if named is not None:
            pos, name = named
        default = None
        equals = symbol(text, pos, "=")
        if equals is not None:
            value = parse_type(text, equals, ctx)
            if not value:
                return value
            pos, default = value.pos, value.value
        return Success(pos, TemplateParameter(kind, name, default, variadic))

    typed = parse_type(text, pos, ctx)
    if not typed:
        return fail(skip_space(text, pos), "template parameter", ctx)
    pos = typed.pos
    variadic = False
    ellipsis = symbol(text, pos, "...")
    if ellipsis is not None:
        variadic = True
        pos = ellipsis
    name = None
    named = parse_name(text, pos)
    if named is not None:
        pos, name = named
    default = None
    equals = symbol(text, pos, "=")
    if equals is not None:
        value = parse_value(text, equals, ctx, ",>")
        if not value:
            return value
        pos, default = value.pos, value.value
    return Success(pos, TemplateParameter(typed.value.render(), name, default, variadic))


def parse_template_header(text: str, pos: int, ctx: ParseContext):
    """Parse ``template<...>`` into a tuple of ``TemplateParameter``.

    ``template<>`` (explicit specialization) yields an empty tuple.
    """
    if ctx.too_deep:
        return fail(skip_space(text, pos), "template header within nesting limit", ctx)
    start = keyword(text, pos, "template")
    if start is None:
        return fail(skip_space(text, pos), "template", ctx)
    pos = symbol(text, start, "<")
    if pos is None:
        return fail(skip_space(text, start), "'<'", ctx)
    params: List[TemplateParameter] = []
    end = symbol(text, pos, ">")
    if end is not None:
        return Success(end, tuple(params))
    while True:
        param = _parse_template_parameter(text, pos, ctx)
        if not param:
            return param
        params.append(param.value)
        pos = param.pos
        comma = symbol(text, pos, ",")
        if comma is not None:
            pos = comma
            continue
        end = symbol(text, pos, ">")
        if end is None:
            return fail(skip_space(text, pos), "',' or '>'", ctx)
        return Success(end, tuple(params))


def optional_template_header(text: str, pos: int, ctx: ParseContext):
    """Template header if present; ``Success(pos, ())`` otherwise."""
    if keyword(text, pos, "template") is None:
        return Success(pos, ())
    return parse_template_header(text, pos, ctx)


def is_void(type_expr: Optional[TypeExpr]) -> bool:
    return type_expr == Path((VOID_TYPE,))
