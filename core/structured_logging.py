"""Structured logging helpers carrying the header being parsed."""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import Iterator

_SOURCE_VAR: contextvars.ContextVar[str] = contextvars.ContextVar(
    "source", default="-"
)
_DIALECT_VAR: contextvars.ContextVar[str] = contextvars.ContextVar(
    "dialect", default="-"
)

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | source=%(source)s | dialect=%(dialect)s | "
    "%(name)s | %(message)s"
)


class _ParseContextFilter(logging.Filter):
    """Inject the current source/dialect into all log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.source = _SOURCE_VAR.get("-")
        record.dialect = _DIALECT_VAR.get("-")
        return True


def _ensure_filter_on_root_handlers() -> None:
    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        has_filter = any(isinstance(f, _ParseContextFilter) for f in handler.filters)
        if not has_filter:
            handler.addFilter(_ParseContextFilter())


def configure_structured_logging(level: int = logging.INFO) -> None:
    """Configure root logging format with source/dialect context."""
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    else:
        root_logger.setLevel(level)
        formatter = logging.Formatter(LOG_FORMAT)
        for handler in root_logger.handlers:
            handler.setFormatter(formatter)
    _ensure_filter_on_root_handlers()


def get_parse_source() -> str:
    """Name of the header currently being parsed, or ``-``."""
    return _SOURCE_VAR.get("-")


def get_parse_dialect() -> str:
    return _DIALECT_VAR.get("-")


@contextmanager
def parse_scope(source: str, dialect: str) -> Iterator[None]:
    """Temporarily set the source/dialect context for emitted logs."""
    source_token = _SOURCE_VAR.set(source)
    dialect_token = _DIALECT_VAR.set(dialect)
    try:
        yield
    finally:
        _DIALECT_VAR.reset(dialect_token)
        _SOURCE_VAR.reset(source_token)
