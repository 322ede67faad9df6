"""
Type aliases (``using``/``typedef``) and using-declarations.
"""

from headerparse.comment import optional_comment
from headerparse.ctype import optional_template_header, parse_name, parse_type
from headerparse.member import parse_declarator
from headerparse.models import TypeAlias, UsingDeclaration
from headerparse.results import ParseContext, Success, fail, furthest
from headerparse.scanner import capture_expression, keyword, skip_space, symbol


def _expect_semicolon(text: str, pos: int, ctx: ParseContext):
    end = symbol(text, pos, ";")
    if end is None:
        return fail(skip_space(text, pos), "';'", ctx)
    return Success(end)


def parse_using_alias(text: str, pos: int, ctx: ParseContext):
    """``[template<...>] using Name = Type;``"""
    found = optional_comment(text, pos, ctx)
    pos, comment = found.pos, found.value
    template = optional_template_header(text, pos, ctx)
    if not template:
        return template
    after_using = keyword(text, template.pos, "using")
    if after_using is None:
        return fail(skip_space(text, template.pos), "using", ctx)
    named = parse_name(text, after_using)
    if named is None:
        return fail(skip_space(text, after_using), "alias name", ctx)
    pos, name = named
    equals = symbol(text, pos, "=")
    if equals is None:
        return fail(skip_space(text, pos), "'='", ctx)
    typed = parse_type(text, equals, ctx)
    if not typed:
        return typed
    end = _expect_semicolon(text, typed.pos, ctx)
    if not end:
        return end
    return Success(end.pos, TypeAlias(name, typed.value, template.value, comment))


def parse_typedef(text: str, pos: int, ctx: ParseContext):
    """``typedef Type Name;`` including ``typedef R (*Name)(Args);``."""
    found = optional_comment(text, pos, ctx)
    pos, comment = found.pos, found.value
    after_typedef = keyword(text, pos, "typedef")
    if after_typedef is None:
        return fail(skip_space(text, pos), "typedef", ctx)
    typed = parse_type(text, after_typedef, ctx)
    if not typed:
        return typed
    declarator = parse_declarator(text, typed.pos, ctx, typed.value)
    if not declarator:
        return declarator
    name, alias_type = declarator.value
    end = _expect_semicolon(text, declarator.pos, ctx)
    if not end:
        return end
    return Success(end.pos, TypeAlias(name, alias_type, (), comment))


def parse_using_declaration(text: str, pos: int, ctx: ParseContext):
    """``using namespace a::b;`` or ``using Base::Member;``."""
    after_using = keyword(text, pos, "using")
    if after_using is None:
        return fail(skip_space(text, pos), "using", ctx)
    is_namespace = False
    after_namespace = keyword(text, after_using, "namespace")
    if after_namespace is not None:
        after_using, is_namespace = after_namespace, True
    start = skip_space(text, after_using)
    end = capture_expression(text, start, ";=")
    target = text[start:end].strip()
    if not target or not text.startswith(";", end):
        return fail(end, "';'", ctx)
    return Success(end + 1, UsingDeclaration(target=target, is_namespace=is_namespace))


def parse_alias(text: str, pos: int, ctx: ParseContext):
    """Any alias form; the value is a ``TypeAlias`` or ``UsingDeclaration``."""
    attempts = (parse_using_alias, parse_typedef, parse_using_declaration)
    failures = []
    for attempt in attempts:
        result = attempt(text, pos, ctx)
        if result:
            return result
        failures.append(result)
    return furthest(*failures)
