"""
Namespace parser.

Namespaces collect declarations into ordered lists without access levels.
``extern "C" { ... }`` blocks are transparent: their declarations land in
the enclosing namespace.
"""

import logging
import re

from headerparse.aliases import parse_alias
from headerparse.classes import parse_class
from headerparse.comment import parse_comment
from headerparse.config import MAX_NESTING_DEPTH
from headerparse.ctype import parse_name
from headerparse.enums import parse_enum
from headerparse.member import parse_member_statement
from headerparse.method import parse_method
from headerparse.models import NamespaceDecl, UsingDeclaration
from headerparse.preprocessor import parse_directive
from headerparse.results import ParseContext, Success, fail, furthest
from headerparse.scanner import at_comment, keyword, skip_space, skip_ws, symbol

logger = logging.getLogger(__name__)

_LINKAGE_RE = re.compile(r'extern\s*"[^"\n]*"\s*\{')


def parse_linkage_block(text: str, pos: int, ctx: ParseContext, scope):
    """``extern "C" {`` ... ``}``; items are added to ``scope`` directly."""
    start = skip_ws(text, pos)
    match = _LINKAGE_RE.match(text, start)
    if match is None:
        return fail(start, 'extern "C" block', ctx)
    return parse_scope_items(text, match.end(), ctx, scope)


def parse_scope_items(text: str, pos: int, ctx: ParseContext, scope):
    """Fold namespace-level items into ``scope`` until the closing ``}``.

    ``scope`` is a ``NamespaceDecl`` or a ``Header``; both expose the same
    list attributes.
    """
    dialect = ctx.dialect
    while True:
        pos = skip_ws(text, pos)
        if pos >= len(text):
            return fail(pos, "'}'", ctx)
        failures = []

        if text.startswith(";", pos):
            pos += 1
            continue

        if text.startswith("#", pos):
            directive = parse_directive(text, pos, ctx)
            if directive:
                scope.directives.append(directive.value)
                pos = directive.pos
                continue
            failures.append(directive)

        namespace = parse_namespace(text, pos, ctx)
        if namespace:
            scope.namespaces.append(namespace.value)
            pos = namespace.pos
            continue
        failures.append(namespace)

        linkage = parse_linkage_block(text, pos, ctx, scope)
        if linkage:
            pos = linkage.pos
            continue
        failures.append(linkage)

        declared = parse_class(text, pos, ctx)
        if declared:
            scope.classes.append(declared.value)
            pos = declared.pos
            continue
        failures.append(declared)

        enum = parse_enum(text, pos, ctx)
        if enum:
            scope.enums.append(enum.value)
            pos = enum.pos
            continue
        failures.append(enum)

        alias = parse_alias(text, pos, ctx)
        if alias:
            if isinstance(alias.value, UsingDeclaration):
                scope.usings.append(alias.value)
            else:
                scope.aliases.append(alias.value)
            pos = alias.pos
            continue
        failures.append(alias)

        ignored = dialect.ignore_line(text, pos)
        if ignored:
            pos = ignored.pos
            continue
        if dialect.ignore:
            failures.append(ignored)

        method = parse_method(text, pos, ctx)
        if method:
            scope.functions.append(method.value)
            pos = method.pos
            continue
        failures.append(method)

        member = parse_member_statement(text, pos, ctx)
        if member:
            scope.variables.append(member.value)
            pos = member.pos
            continue
        failures.append(member)

        comment = parse_comment(text, pos, ctx)
        if comment:
            scope.comments.append(comment.value)
            pos = comment.pos
            continue
        failures.append(comment)

        if text.startswith("}", pos):
            return Success(pos + 1)
        failures.append(fail(pos, "'}'", ctx))

        return furthest(*failures).within(ctx.scope)


def parse_namespace(text: str, pos: int, ctx: ParseContext):
    """Parse ``[inline] namespace [a[::b]] { ... }``.

    ``namespace a::b {}`` yields ``a`` containing ``b``. An anonymous
    namespace is named ``""``.
    """
    if at_comment(text, pos):
        return fail(skip_ws(text, pos), "namespace", ctx)
    is_inline = False
    after_inline = keyword(text, pos, "inline")
    if after_inline is not None:
        is_inline, pos = True, after_inline
    after_namespace = keyword(text, pos, "namespace")
    if after_namespace is None:
        return fail(skip_space(text, pos), "namespace", ctx)
    pos = after_namespace

    names = []
    named = parse_name(text, pos)
    if named is not None:
        pos, name = named
        names.append(name)
        while True:
            sep = symbol(text, pos, "::")
            if sep is None:
                break
            inline_segment = keyword(text, sep, "inline")
            named = parse_name(text, inline_segment if inline_segment is not None else sep)
            if named is None:
                return fail(skip_space(text, sep), "namespace name", ctx)
            pos, name = named
            names.append(name)
    else:
        names.append("")

    brace = symbol(text, pos, "{")
    if brace is None:
        return fail(skip_space(text, pos), "'{'", ctx)

    body_ctx = ctx
    for name in names:
        body_ctx = body_ctx.enter(name)
    if body_ctx.too_deep:
        return fail(brace, f"namespace nesting within {MAX_NESTING_DEPTH} levels", body_ctx)

    innermost = NamespaceDecl(name=names[-1], is_inline=is_inline)
    body = parse_scope_items(text, brace, body_ctx, innermost)
    if not body:
        return body

    outer = innermost
    for name in reversed(names[:-1]):
        outer = NamespaceDecl(name=name, namespaces=[outer])
    logger.debug(
        "Parsed namespace %s (%d classes, %d functions)",
        "::".join(body_ctx.scope) or "<anonymous>",
        len(innermost.classes),
        len(innermost.functions),
    )
    return Success(body.pos, outer)
