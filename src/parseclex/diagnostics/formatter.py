"""Diagnostic formatting service.

Centralizes diagnostic output formatting with configurable options.
Python 3.13+. Zero external dependencies.
"""

import json
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from parseclex.constants import TAB_WIDTH

from .codes import Diagnostic

__all__ = [
    "DiagnosticFormatter",
    "OutputFormat",
]


class OutputFormat(StrEnum):
    """Output format options for diagnostic formatting."""

    RUST = "rust"  # Rust compiler-style output (default)
    SIMPLE = "simple"  # Single-line format
    JSON = "json"  # JSON format for tooling integration


@dataclass(frozen=True, slots=True)
class DiagnosticFormatter:
    """Diagnostic formatting service.

    Centralizes formatting of Diagnostic objects into human-readable
    or machine-readable output. Supports multiple output formats and
    sanitization options.

    Attributes:
        output_format: Output style (rust, simple, json)
        sanitize: Truncate content to prevent information leakage
        color: Enable ANSI color codes (for terminal output)
        max_content_length: Maximum content length when sanitizing

    Example:
        >>> formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        >>> print(formatter.format(ErrorTemplate.undefined_parser("expr")))
        UNDEFINED_PARSER: Forward parser 'expr' was run before define() was called
    """

    output_format: OutputFormat = OutputFormat.RUST
    sanitize: bool = False
    color: bool = False
    max_content_length: int = 100

    def format(self, diagnostic: Diagnostic) -> str:
        """Format a single diagnostic.

        Args:
            diagnostic: Diagnostic to format

        Returns:
            Formatted diagnostic string
        """
        match self.output_format:
            case OutputFormat.RUST:
                return self._format_rust(diagnostic)
            case OutputFormat.SIMPLE:
                return self._format_simple(diagnostic)
            case OutputFormat.JSON:
                return self._format_json(diagnostic)

    def format_all(self, diagnostics: Iterable[Diagnostic]) -> str:
        """Format multiple diagnostics.

        Args:
            diagnostics: Iterable of diagnostics to format

        Returns:
            Formatted string with all diagnostics separated by blank lines
        """
        return "\n\n".join(self.format(d) for d in diagnostics)

    def format_with_source(self, diagnostic: Diagnostic, source: str) -> str:
        """Format a diagnostic with the offending source line underlined.

        In RUST format the excerpt follows the location line:

            error[PARSE_FAILED]: unexpected "x", expecting digit
              --> calc.txt, line 1, column 3
               |
             1 | 1+x
               |   ^
              = expected: digit

        Tabs in the excerpt are expanded to the stops columns are counted
        with, so the caret lines up. SIMPLE and JSON output, diagnostics
        without a span and spans past the last line format as format() does.

        Args:
            diagnostic: Diagnostic to format
            source: Text the diagnostic's span points into

        Returns:
            Formatted diagnostic string
        """
        span = diagnostic.span
        if self.output_format is not OutputFormat.RUST or span is None:
            return self.format(diagnostic)

        lines = source.split("\n")
        if span.line > len(lines):
            return self.format(diagnostic)

        text = self._maybe_sanitize(lines[span.line - 1].expandtabs(TAB_WIDTH))
        number = str(span.line)
        gutter = " " * (len(number) + 2)
        excerpt = [
            f"{gutter}|",
            f" {number} | {text}",
            f"{gutter}| {' ' * (span.column - 1)}^",
        ]
        return self._format_rust(diagnostic, excerpt)

    def _format_rust(self, diagnostic: Diagnostic, excerpt: list[str] | None = None) -> str:
        """Format diagnostic in Rust compiler style.

        Example output:
            error[PARSE_FAILED]: unexpected "x", expecting digit
              --> calc.txt, line 1, column 3
              = expected: digit
              = unexpected: "x"
        """
        severity = diagnostic.severity if diagnostic.severity == "warning" else "error"

        if self.color:
            if severity == "error":
                severity_str = f"\033[1;31m{severity}\033[0m"  # Bold red
            else:
                severity_str = f"\033[1;33m{severity}\033[0m"  # Bold yellow
        else:
            severity_str = severity

        message = self._maybe_sanitize(diagnostic.message)
        parts = [f"{severity_str}[{diagnostic.code.name}]: {message}"]

        if diagnostic.span:
            span = diagnostic.span
            location = f"line {span.line}, column {span.column}"
            if span.source_name:
                location = f"{span.source_name}, {location}"
            parts.append(f"  --> {location}")
            if excerpt:
                parts.extend(excerpt)

        if diagnostic.parser_name:
            parts.append(f"  = parser: {diagnostic.parser_name}")

        if diagnostic.expected:
            parts.append(f"  = expected: {', '.join(diagnostic.expected)}")

        if diagnostic.unexpected is not None:
            unexpected = self._maybe_sanitize(diagnostic.unexpected)
            parts.append(f"  = unexpected: {unexpected}")

        if diagnostic.hint:
            hint = self._maybe_sanitize(diagnostic.hint)
            parts.append(f"  = help: {hint}")

        return "\n".join(parts)

    def _format_simple(self, diagnostic: Diagnostic) -> str:
        """Format diagnostic in single-line format.

        Example output:
            PARSE_FAILED: unexpected "x", expecting digit
        """
        message = self._maybe_sanitize(diagnostic.message)
        return f"{diagnostic.code.name}: {message}"

    def _format_json(self, diagnostic: Diagnostic) -> str:
        """Format diagnostic as JSON.

        Example output:
            {"code": "PARSE_FAILED", "message": "...", "severity": "error"}
        """
        data: dict[str, str | int | list[str] | None] = {
            "code": diagnostic.code.name,
            "code_value": diagnostic.code.value,
            "message": self._maybe_sanitize(diagnostic.message),
            "severity": diagnostic.severity,
        }

        if diagnostic.span:
            data["line"] = diagnostic.span.line
            data["column"] = diagnostic.span.column
            if diagnostic.span.source_name:
                data["source_name"] = diagnostic.span.source_name

        if diagnostic.parser_name:
            data["parser_name"] = diagnostic.parser_name

        if diagnostic.expected:
            data["expected"] = list(diagnostic.expected)

        if diagnostic.unexpected is not None:
            data["unexpected"] = self._maybe_sanitize(diagnostic.unexpected)

        if diagnostic.hint:
            data["hint"] = self._maybe_sanitize(diagnostic.hint)

        return json.dumps(data, ensure_ascii=False)

    def _maybe_sanitize(self, text: str) -> str:
        """Truncate text if sanitization is enabled.

        Args:
            text: Text to possibly truncate

        Returns:
            Original or truncated text
        """
        if self.sanitize and len(text) > self.max_content_length:
            return text[: self.max_content_length] + "..."
        return text
