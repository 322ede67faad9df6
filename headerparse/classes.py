"""
Class/struct/union parser.

The body is a loop over ordered alternatives; the first that succeeds wins
and its item is filed under the running access level. Nothing is skipped:
a line no alternative accepts fails the whole class with the enclosing
scope path attached.
"""

import logging
from typing import List, Optional

from headerparse.aliases import parse_alias
from headerparse.annotation import collect_annotations
from headerparse.comment import optional_comment, parse_comment
from headerparse.config import ACCESS_KEYWORDS, CLASS_KEYWORDS, MAX_NESTING_DEPTH
from headerparse.ctype import optional_template_header, parse_name, parse_type
from headerparse.enums import parse_enum
from headerparse.member import parse_member_statement
from headerparse.method import parse_method
from headerparse.models import (
    AccessLevel,
    ClassDecl,
    ParentClass,
    UsingDeclaration,
)
from headerparse.preprocessor import parse_directive
from headerparse.results import ParseContext, Success, fail, furthest
from headerparse.scanner import (
    any_keyword,
    at_comment,
    keyword,
    skip_balanced,
    skip_space,
    skip_ws,
    symbol,
)

logger = logging.getLogger(__name__)

_ACCESS_BY_KEYWORD = {
    "public": AccessLevel.PUBLIC,
    "protected": AccessLevel.PROTECTED,
    "private": AccessLevel.PRIVATE,
}


def parse_access_specifier(text: str, pos: int, ctx: ParseContext):
    if at_comment(text, pos):
        return fail(skip_ws(text, pos), "access specifier", ctx)
    hit = any_keyword(text, pos, ACCESS_KEYWORDS)
    if hit is None:
        return fail(skip_space(text, pos), "access specifier", ctx)
    end, word = hit
    colon = symbol(text, end, ":")
    if colon is None or symbol(text, end, "::") is not None:
        return fail(skip_space(text, end), "':'", ctx)
    return Success(colon, _ACCESS_BY_KEYWORD[word])


def _parse_friend(text: str, pos: int, ctx: ParseContext):
    """``friend class X;`` / ``friend X;``. Friend functions go to the method parser."""
    if at_comment(text, pos):
        return fail(skip_ws(text, pos), "friend", ctx)
    after_friend = keyword(text, pos, "friend")
    if after_friend is None:
        return fail(skip_space(text, pos), "friend", ctx)
    typed = parse_type(text, after_friend, ctx)
    if not typed:
        return typed
    end = symbol(text, typed.pos, ";")
    if end is None:
        return fail(skip_space(text, typed.pos), "';'", ctx)
    return Success(end, typed.value)


def _parse_parents(text: str, pos: int, ctx: ParseContext):
    parents: List[ParentClass] = []
    while True:
        access: Optional[AccessLevel] = None
        is_virtual = False
        while True:
            hit = any_keyword(text, pos, ACCESS_KEYWORDS + ("virtual",))
            if hit is None:
                break
            pos = hit[0]
            if hit[1] == "virtual":
                is_virtual = True
            else:
                access = _ACCESS_BY_KEYWORD[hit[1]]
        if access is None:
            access = AccessLevel.VIRTUAL if is_virtual else AccessLevel.UNSPECIFIED
        typed = parse_type(text, pos, ctx)
        if not typed:
            return fail(skip_space(text, pos), "base class", ctx)
        pos = typed.pos
        ellipsis = symbol(text, pos, "...")
        if ellipsis is not None:
            pos = ellipsis
        parents.append(ParentClass(typed.value, access, is_virtual))
        comma = symbol(text, pos, ",")
        if comma is None:
            return Success(pos, parents)
        pos = comma


def _skip_class_attributes(text: str, pos: int) -> int:
    """``alignas(...)`` and ``[[...]]`` between the keyword and the name."""
    while True:
        start = skip_space(text, pos)
        if text.startswith("[[", start):
            end = skip_balanced(text, start)
        elif keyword(text, start, "alignas") is not None:
            args = skip_space(text, keyword(text, start, "alignas"))
            end = skip_balanced(text, args)
        else:
            return pos
        if end is None:
            return pos
        pos = end


def _parse_body(text: str, pos: int, ctx: ParseContext, decl: ClassDecl):
    """Fill ``decl`` from its body; ``pos`` is just past ``{``."""
    level = AccessLevel.PRIVATE
    dialect = ctx.dialect
    while True:
        pos = skip_ws(text, pos)
        if pos >= len(text):
            return fail(pos, "'}'", ctx)

        ignored = dialect.ignore_line(text, pos)
        if ignored:
            pos = ignored.pos
            continue
        failures = [ignored] if dialect.ignore else []

        if text.startswith(";", pos):
            pos += 1
            continue

        if text.startswith("#", pos):
            directive = parse_directive(text, pos, ctx)
            if directive:
                decl.directives.append(directive.value)
                pos = directive.pos
                continue
            failures.append(directive)

        access = parse_access_specifier(text, pos, ctx)
        if access:
            level = access.value
            pos = access.pos
            continue
        failures.append(access)

        nested = parse_class(text, pos, ctx)
        if nested:
            decl.add_nested(level, nested.value)
            pos = nested.pos
            continue
        failures.append(nested)

        enum = parse_enum(text, pos, ctx)
        if enum:
            decl.add_enum(level, enum.value)
            pos = enum.pos
            continue
        failures.append(enum)

        alias = parse_alias(text, pos, ctx)
        if alias:
            if isinstance(alias.value, UsingDeclaration):
                decl.usings.append(alias.value)
            else:
                decl.add_alias(level, alias.value)
            pos = alias.pos
            continue
        failures.append(alias)

        friend = _parse_friend(text, pos, ctx)
        if friend:
            decl.friends.append(friend.value)
            pos = friend.pos
            continue
        failures.append(friend)

        method = parse_method(text, pos, ctx)
        if method:
            decl.add_method(level, method.value)
            pos = method.pos
            continue
        failures.append(method)

        member = parse_member_statement(text, pos, ctx)
        if member:
            decl.add_member(level, member.value)
            pos = member.pos
            continue
        failures.append(member)

        comment = parse_comment(text, pos, ctx)
        if comment:
            decl.comments.append(comment.value)
            pos = comment.pos
            continue
        failures.append(comment)

        if text.startswith("}", pos):
            end = pos + 1
            semicolon = symbol(text, end, ";")
            return Success(end if semicolon is None else semicolon)
        failures.append(fail(pos, "'}'", ctx))

        return furthest(*failures).within(ctx.scope)


def parse_class(text: str, pos: int, ctx: ParseContext):
    """Parse one class, struct or union, recursing into nested classes.

    Header: optional comment, dialect annotations, template header, the
    class keyword, an optional export token before the name, ``final``, an
    ignored specialization ``<...>``, then ``;`` (forward declaration) or
    an optional base list and the body.

    Returns:
        ``Success`` with a ``ClassDecl`` or ``Failure`` with offset, the
        expected rule and the enclosing scope path.
    """
    found = optional_comment(text, pos, ctx)
    pos, comment = found.pos, found.value
    found = collect_annotations(text, pos, ctx.dialect.class_annotation)
    pos, annotation = found.pos, found.value
    template = optional_template_header(text, pos, ctx)
    if not template:
        return template
    pos = template.pos

    hit = any_keyword(text, pos, CLASS_KEYWORDS)
    if hit is None:
        return fail(skip_space(text, pos), "class", ctx)
    pos, kind = hit
    pos = _skip_class_attributes(text, pos)

    named = parse_name(text, pos)
    if named is None:
        return fail(skip_space(text, pos), "class name", ctx)
    pos, name = named
    api = None
    second = parse_name(text, pos)
    if second is not None:
        api = name
        pos, name = second

    decl = ClassDecl(
        name=name,
        kind=kind,
        api=api,
        template_parameters=template.value,
        annotation=annotation,
        comment=comment,
    )

    after_final = keyword(text, pos, "final")
    if after_final is not None:
        decl.is_final = True
        pos = after_final

    start = skip_space(text, pos)
    if text.startswith("<", start):
        end = skip_balanced(text, start)
        if end is None:
            return fail(start, "'>'", ctx)
        pos = end
        after_final = keyword(text, pos, "final")
        if after_final is not None:
            decl.is_final = True
            pos = after_final

    semicolon = symbol(text, pos, ";")
    if semicolon is not None:
        decl.is_forward_declaration = True
        return Success(semicolon, decl)

    colon = symbol(text, pos, ":")
    if colon is not None:
        parents = _parse_parents(text, colon, ctx)
        if not parents:
            return parents
        decl.parents = parents.value
        pos = parents.pos

    brace = symbol(text, pos, "{")
    if brace is None:
        return fail(skip_space(text, pos), "'{'", ctx)

    body_ctx = ctx.enter(name)
    if body_ctx.too_deep:
        return fail(brace, f"class nesting within {MAX_NESTING_DEPTH} levels", body_ctx)
    body = _parse_body(text, brace, body_ctx, decl)
    if not body:
        return body
    logger.debug(
        "Parsed %s %s (%d methods, %d members)",
        kind,
        "::".join(body_ctx.scope),
        len(decl.all_methods()),
        len(decl.all_members()),
    )
    return Success(body.pos, decl)
