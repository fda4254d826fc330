"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, SourceSpan


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    This solves EM101/EM102 violations while providing:
        - Testable error messages
        - Consistent formatting
        - Documentation of all error cases
    """

    @staticmethod
    def parse_failed(
        message: str,
        span: SourceSpan,
        *,
        expected: tuple[str, ...] = (),
        unexpected: str | None = None,
    ) -> Diagnostic:
        """Input rejected by a grammar.

        Args:
            message: Rendered parse error (without the position prefix)
            span: Location of the error
            expected: Expected constructs, in report order
            unexpected: Unexpected input as shown in the message

        Returns:
            Diagnostic for PARSE_FAILED, or UNEXPECTED_END_OF_INPUT when the
            parser ran out of input
        """
        at_end = unexpected == "end of input"
        return Diagnostic(
            code=(
                DiagnosticCode.UNEXPECTED_END_OF_INPUT
                if at_end
                else DiagnosticCode.PARSE_FAILED
            ),
            message=message,
            span=span,
            hint="Input ended before the grammar was satisfied" if at_end else None,
            expected=expected,
            unexpected=unexpected,
        )

    @staticmethod
    def empty_repetition(combinator: str, parser_name: str) -> Diagnostic:
        """Repetition applied to a parser that succeeds on empty input.

        Args:
            combinator: Name of the repetition combinator (many, skip_many, ...)
            parser_name: Name of the repeated parser

        Returns:
            Diagnostic for EMPTY_REPETITION
        """
        msg = (
            f"Combinator '{combinator}' is applied to a parser that accepts "
            f"an empty string: {parser_name}"
        )
        return Diagnostic(
            code=DiagnosticCode.EMPTY_REPETITION,
            message=msg,
            hint="Make the repeated parser consume at least one token on success",
            parser_name=parser_name,
        )

    @staticmethod
    def undefined_parser(parser_name: str) -> Diagnostic:
        """Forward-declared parser used before definition.

        Args:
            parser_name: Name of the forward parser

        Returns:
            Diagnostic for UNDEFINED_PARSER
        """
        msg = f"Forward parser '{parser_name}' was run before define() was called"
        return Diagnostic(
            code=DiagnosticCode.UNDEFINED_PARSER,
            message=msg,
            hint="Call define() on the forward parser once the grammar is assembled",
            parser_name=parser_name,
        )

    @staticmethod
    def parser_redefined(parser_name: str) -> Diagnostic:
        """Forward-declared parser defined twice.

        Args:
            parser_name: Name of the forward parser

        Returns:
            Diagnostic for PARSER_REDEFINED
        """
        msg = f"Forward parser '{parser_name}' is already defined"
        return Diagnostic(
            code=DiagnosticCode.PARSER_REDEFINED,
            message=msg,
            hint="Create a new forward() for each recursive rule",
            parser_name=parser_name,
        )

    @staticmethod
    def invalid_language_def(field_name: str, reason: str) -> Diagnostic:
        """Invalid language definition field.

        Args:
            field_name: Offending LanguageDef field
            reason: Why the value is rejected

        Returns:
            Diagnostic for INVALID_LANGUAGE_DEF
        """
        msg = f"Invalid language definition field '{field_name}': {reason}"
        return Diagnostic(
            code=DiagnosticCode.INVALID_LANGUAGE_DEF,
            message=msg,
            hint="Start from a preset and override fields with LanguageDef.replace()",
        )
