"""ParsecLex - parser combinators with a configurable lexer.

Build recursive-descent parsers from small combinators with predictive
backtracking (alternatives are tried only when the previous one consumed
nothing, unless wrapped in attempt()) and positioned error messages.

Public API:
    Parser - Parser type (| choice, >> and << sequencing)
    run_parser / parse / parse_or_raise - Entry points
    make_token_parser - Lexeme parsers for a LanguageDef
    LanguageDef, EMPTY_DEF, HASKELL_STYLE, JAVA_STYLE - Language descriptions

Exceptions:
    ParsecLexError - Base exception class
    GrammarUsageError - Combinator misuse (e.g. EmptyRepetitionError)
    LanguageDefinitionError - Invalid LanguageDef
    ParseFailedError - Raised by parse_or_raise() only

Submodules:
    parseclex.syntax.parser - Combinators (core, primitives, rules, expr)
    parseclex.syntax - SourcePos, ParseError, State and the reply types
    parseclex.lexer - Language definitions and the token parser bundle
    parseclex.diagnostics - Diagnostic codes, templates and formatter
"""

from .diagnostics import (
    EmptyRepetitionError,
    GrammarUsageError,
    LanguageDefinitionError,
    ParsecLexError,
    UndefinedParserError,
)
from .lexer import EMPTY_DEF, HASKELL_STYLE, JAVA_STYLE, LanguageDef, TokenParser, make_token_parser
from .syntax import ParseError, ParseFailedError, Parser, SourcePos, parse, parse_or_raise, run_parser

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("parseclex")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "EMPTY_DEF",
    "HASKELL_STYLE",
    "JAVA_STYLE",
    "EmptyRepetitionError",
    "GrammarUsageError",
    "LanguageDef",
    "LanguageDefinitionError",
    "ParseError",
    "ParseFailedError",
    "ParsecLexError",
    "Parser",
    "SourcePos",
    "TokenParser",
    "UndefinedParserError",
    "__version__",
    "make_token_parser",
    "parse",
    "parse_or_raise",
    "run_parser",
]
