"""
Header aggregator: one fold over top-level items until input is exhausted.
"""

import logging

from headerparse.aliases import parse_alias
from headerparse.classes import parse_class
from headerparse.comment import parse_comment
from headerparse.config import BYTE_ORDER_MARK
from headerparse.enums import parse_enum
from headerparse.member import parse_member_statement
from headerparse.method import parse_method
from headerparse.models import Header, UsingDeclaration
from headerparse.namespace import parse_linkage_block, parse_namespace
from headerparse.preprocessor import parse_define, parse_directive, parse_include
from headerparse.results import ParseContext, Success, furthest
from headerparse.scanner import skip_ws

logger = logging.getLogger(__name__)


def parse_header(text: str, ctx: ParseContext):
    """Parse a complete header.

    Alternatives per position, first success wins: byte-order mark,
    comment, ``#include``, ``#define``, other directive, alias/using, enum,
    dialect ignore line, class, terminated variable, namespace,
    ``extern "C"`` block, function. Any position none of them accepts ends
    the parse with a ``Failure``.

    Returns:
        ``Success`` with a ``Header`` (``pos == len(text)``) or ``Failure``.
    """
    header = Header()
    pos = 0
    if text.startswith(BYTE_ORDER_MARK):
        pos = len(BYTE_ORDER_MARK)
    dialect = ctx.dialect

    while True:
        pos = skip_ws(text, pos)
        if pos >= len(text):
            break
        if text.startswith(BYTE_ORDER_MARK, pos):
            pos += len(BYTE_ORDER_MARK)
            continue
        failures = []

        comment = parse_comment(text, pos, ctx)
        if comment:
            header.comments.append(comment.value)
            pos = comment.pos
            continue
        failures.append(comment)

        if text.startswith("#", pos):
            include = parse_include(text, pos, ctx)
            if include:
                header.includes.append(include.value)
                pos = include.pos
                continue
            define = parse_define(text, pos, ctx)
            if define:
                header.defines.append(define.value)
                pos = define.pos
                continue
            directive = parse_directive(text, pos, ctx)
            if directive:
                header.directives.append(directive.value)
                pos = directive.pos
                continue
            failures.append(directive)

        alias = parse_alias(text, pos, ctx)
        if alias:
            if isinstance(alias.value, UsingDeclaration):
                header.usings.append(alias.value)
            else:
                header.aliases.append(alias.value)
            pos = alias.pos
            continue
        failures.append(alias)

        enum = parse_enum(text, pos, ctx)
        if enum:
            header.enums.append(enum.value)
            pos = enum.pos
            continue
        failures.append(enum)

        ignored = dialect.ignore_line(text, pos)
        if ignored:
            pos = ignored.pos
            continue
        if dialect.ignore:
            failures.append(ignored)

        declared = parse_class(text, pos, ctx)
        if declared:
            header.classes.append(declared.value)
            pos = declared.pos
            continue
        failures.append(declared)

        variable = parse_member_statement(text, pos, ctx)
        if variable:
            header.variables.append(variable.value)
            pos = variable.pos
            continue
        failures.append(variable)

        namespace = parse_namespace(text, pos, ctx)
        if namespace:
            header.namespaces.append(namespace.value)
            pos = namespace.pos
            continue
        failures.append(namespace)

        linkage = parse_linkage_block(text, pos, ctx, header)
        if linkage:
            pos = linkage.pos
            continue
        failures.append(linkage)

        function = parse_method(text, pos, ctx)
        if function:
            header.functions.append(function.value)
            pos = function.pos
            continue
        failures.append(function)

        return furthest(*failures)

    logger.debug(
        "Header fold finished: %d includes, %d classes, %d namespaces, %d functions",
        len(header.includes),
        len(header.classes),
        len(header.namespaces),
        len(header.functions),
    )
    return Success(pos, header)
