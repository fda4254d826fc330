"""ParsecLex exception hierarchy with structured diagnostics.

Parse failures are ordinary values (see parseclex.syntax.error.ParseError).
Exceptions are reserved for programming errors in a grammar or its
configuration, plus the opt-in raising entry point parse_or_raise().

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic


class ParsecLexError(Exception):
    """Base exception for all ParsecLex errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize ParsecLexError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class GrammarUsageError(ParsecLexError):
    """A combinator was applied in a way that can never work.

    Raised while a parser runs, never reported as a parse failure. The
    grammar has to be fixed; retrying with other input does not help.
    """


class EmptyRepetitionError(GrammarUsageError):
    """A repetition combinator was applied to a parser that accepts empty input.

    Example:
        many(optional(char("a")))  ← loops forever without this guard

    The parser succeeded without consuming input, so repeating it would
    never terminate.
    """


class UndefinedParserError(GrammarUsageError):
    """A forward-declared parser ran before define() was called."""


class LanguageDefinitionError(ParsecLexError, ValueError):
    """Invalid field combination in a LanguageDef.

    Also a ValueError so configuration code can catch it generically.
    """
