"""Diagnostic system for ParsecLex errors.

Provides structured error diagnostics with codes, locations, and hints.
Inspired by Rust compiler diagnostics and Elm error messages.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, SourceSpan
from .errors import (
    EmptyRepetitionError,
    GrammarUsageError,
    LanguageDefinitionError,
    ParsecLexError,
    UndefinedParserError,
)
from .formatter import DiagnosticFormatter, OutputFormat
from .templates import ErrorTemplate

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticFormatter",
    "EmptyRepetitionError",
    "ErrorTemplate",
    "GrammarUsageError",
    "LanguageDefinitionError",
    "OutputFormat",
    "ParsecLexError",
    "SourceSpan",
    "UndefinedParserError",
]
