"""
Header parser entry points.

This module provides the public functions to parse header text, bytes and
files into a ``Header`` value.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from core.structured_logging import parse_scope
from headerparse.config import HEADER_EXTENSIONS
from headerparse.dialects import Dialect, resolve_dialect
from headerparse.header import parse_header
from headerparse.models import Header
from headerparse.results import Failure, ParseContext, Success

# Configure logging
logger = logging.getLogger(__name__)


class HeaderSyntaxError(ValueError):
    """Raised when a header contains a construct the grammar does not accept.

    Attributes:
        failure: The underlying ``Failure`` value.
        source: Name of the parsed source (file path or ``<text>``).
        line: 1-indexed line of the failure.
        column: 1-indexed column of the failure.
    """

    def __init__(self, failure: Failure, text: str, source: str = "<text>"):
        self.failure = failure
        self.source = source
        self.line, self.column = failure.location(text)
        lines = text.splitlines()
        self.line_text = lines[self.line - 1].strip() if self.line <= len(lines) else ""
        super().__init__(f"{source}: {failure.describe(text)}: {self.line_text!r}")

    @property
    def offset(self) -> int:
        return self.failure.pos

    @property
    def scope(self) -> tuple:
        return self.failure.context


class HeaderParser:
    """Parse headers with a fixed dialect.

    Example:
        >>> parser = HeaderParser("unreal")
        >>> header = parser.parse_text("UCLASS() class AFoo : public AActor { GENERATED_BODY() };")
        >>> header.classes[0].name
        'AFoo'
    """

    def __init__(self, dialect: Union[Dialect, str, None] = None):
        self.dialect = resolve_dialect(dialect)

    def try_parse(self, text: str) -> Union[Success, Failure]:
        """Parse ``text`` and return the raw result value without raising."""
        return parse_header(text, ParseContext(self.dialect))

    def parse_text(self, text: str, source: str = "<text>") -> Header:
        """Parse decoded header text.

        Args:
            text: Full header contents.
            source: Name used in log records and error messages.

        Returns:
            The parsed ``Header``.

        Raises:
            HeaderSyntaxError: If some construct is not recognized.
        """
        with parse_scope(source, self.dialect.name):
            result = self.try_parse(text)
            if not result:
                error = HeaderSyntaxError(result, text, source)
                logger.warning(f"Rejected {source}: {error}")
                raise error
            logger.debug(f"Parsed {len(text)} characters from {source}")
            return result.value

    def parse_bytes(self, source: bytes, name: str = "<bytes>") -> Header:
        """Parse UTF-8 encoded header bytes; a leading BOM is accepted.

        Raises:
            TypeError: If source is not bytes.
            HeaderSyntaxError: If source is not valid UTF-8 or some construct
                is not recognized.
        """
        if not isinstance(source, bytes):
            raise TypeError(f"Source must be bytes, got {type(source).__name__}")
        try:
            text = source.decode("utf-8")
        except UnicodeDecodeError as e:
            offset = len(source[: e.start].decode("utf-8"))
            error = HeaderSyntaxError(
                Failure(offset, ("UTF-8 text",)),
                source.decode("utf-8", errors="replace"),
                name,
            )
            logger.warning(f"Rejected {name}: {error}")
            raise error from e
        return self.parse_text(text, name)

    def parse_file(self, file_path: str) -> Header:
        """Parse a header file from disk.

        Args:
            file_path: Path to the .h, .hpp, .hxx or .inl file.

        Returns:
            The parsed ``Header``.

        Raises:
            FileNotFoundError: If the file does not exist.
            IOError: If the file cannot be read.
            HeaderSyntaxError: If some construct is not recognized.
        """
        try:
            with open(file_path, "rb") as f:
                source_bytes = f.read()
        except FileNotFoundError:
            logger.error(f"File not found: {file_path}")
            raise
        except IOError as e:
            logger.error(f"Error reading file {file_path}: {e}")
            raise

        if Path(file_path).suffix.lower() not in HEADER_EXTENSIONS:
            logger.debug(f"Parsing {file_path} although it has no header extension")

        header = self.parse_bytes(source_bytes, str(file_path))
        logger.info(
            f"Successfully parsed file: {file_path} "
            f"({len(header.classes)} classes, {len(header.namespaces)} namespaces, "
            f"{len(header.functions)} functions)"
        )
        return header


def create_parser(dialect: Union[Dialect, str, None] = None) -> HeaderParser:
    """Create a parser for the given dialect (plain C++ when omitted)."""
    parser = HeaderParser(dialect)
    logger.debug(f"Created header parser for dialect '{parser.dialect.name}'")
    return parser


def parse_text(text: str, dialect: Union[Dialect, str, None] = None) -> Header:
    return create_parser(dialect).parse_text(text)


def parse_bytes(source: bytes, dialect: Union[Dialect, str, None] = None) -> Header:
    return create_parser(dialect).parse_bytes(source)


def parse_file(file_path: str, dialect: Union[Dialect, str, None] = None) -> Header:
    return create_parser(dialect).parse_file(file_path)


def first_failure_line(text: str, dialect: Union[Dialect, str, None] = None) -> Optional[int]:
    """Line number of the first rejected construct, or ``None`` if ``text`` parses."""
    result = create_parser(dialect).try_parse(text)
    if result:
        return None
    return result.location(text)[0]
