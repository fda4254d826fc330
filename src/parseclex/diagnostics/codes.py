"""Diagnostic codes and data structures.

Defines error codes, source locations, and diagnostic messages.
Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "SourceSpan",
]


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Parse failures (input rejected by a grammar)
        2000-2999: Grammar usage errors (combinators misapplied by the caller)
        3000-3999: Configuration errors (invalid language definitions)
    """

    # Parse failures (1000-1999)
    PARSE_FAILED = 1001
    UNEXPECTED_END_OF_INPUT = 1002

    # Grammar usage errors (2000-2999)
    EMPTY_REPETITION = 2001
    UNDEFINED_PARSER = 2002
    PARSER_REDEFINED = 2003

    # Configuration errors (3000-3999)
    INVALID_LANGUAGE_DEF = 3001


@dataclass(frozen=True, slots=True)
class SourceSpan:
    """Source location for error reporting.

    Note:
        Lines and columns are counted in tokens as advanced by the parser's
        position function; for character input a tab advances to the next
        tab stop rather than a single column.

    Attributes:
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        source_name: Name of the input (file name, may be empty)
    """

    line: int
    column: int
    source_name: str = ""

    def __post_init__(self) -> None:
        """Validate SourceSpan invariants.

        Raises:
            ValueError: If line or column is less than 1 (both are 1-indexed).
        """
        if self.line < 1:
            msg = f"SourceSpan.line must be >= 1 (1-indexed), got {self.line}"
            raise ValueError(msg)
        if self.column < 1:
            msg = f"SourceSpan.column must be >= 1 (1-indexed), got {self.column}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Inspired by Rust compiler diagnostics. Provides rich error information
    for both humans and tools (editors, linters built on a grammar).

    Attributes:
        code: Unique error code
        message: Human-readable error description
        span: Source location (None for grammar usage and configuration errors)
        hint: Suggestion for fixing the error
        expected: Expected constructs reported by the parser
        unexpected: Unexpected input reported by the parser
        parser_name: Name of the parser involved in a usage error
        severity: Error severity level
    """

    code: DiagnosticCode
    message: str
    span: SourceSpan | None = None
    hint: str | None = None
    expected: tuple[str, ...] = ()
    unexpected: str | None = None
    parser_name: str | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic like Rust compiler.

        Delegates to DiagnosticFormatter for consistent output.

        Example output:
            error[PARSE_FAILED]: unexpected "x", expecting digit
              --> calc.txt, line 1, column 3
              = expected: digit
              = unexpected: "x"

        Returns:
            Formatted error message
        """
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)
