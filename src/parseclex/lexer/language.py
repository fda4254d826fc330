"""Language definitions for the lexer.

A LanguageDef describes the lexical conventions of a language: comment
delimiters, identifier and operator character classes, reserved words and
operators, and case sensitivity. make_token_parser() turns one into a
TokenParser bundle.

Presets:
    EMPTY_DEF: No comments, C-like identifiers, case-sensitive
    HASKELL_STYLE: {- -} nested block comments, -- line comments
    JAVA_STYLE: /* */ block comments, // line comments, case-insensitive

Customise a preset with replace(); the preset itself never changes:

    >>> calc = JAVA_STYLE.replace(reserved_names=("let", "in"))
    >>> calc.reserved_names
    ('let', 'in')
    >>> JAVA_STYLE.reserved_names
    ()

Python 3.13+. Zero external dependencies.
"""

import logging
from dataclasses import dataclass, fields, replace
from typing import Any

from parseclex.constants import OPERATOR_CHARS
from parseclex.diagnostics import ErrorTemplate, LanguageDefinitionError
from parseclex.enums import CommentStyle
from parseclex.syntax.parser import Parser, alpha_num, char, letter, one_of

__all__ = ["EMPTY_DEF", "HASKELL_STYLE", "JAVA_STYLE", "LanguageDef"]

logger = logging.getLogger(__name__)

_IDENT_START: Parser[str] = letter | char("_")
_IDENT_LETTER: Parser[str] = alpha_num | one_of("_'")
_OP_CHAR: Parser[str] = one_of(OPERATOR_CHARS)


@dataclass(frozen=True, slots=True)
class LanguageDef:
    """Immutable lexical description of a language.

    Attributes:
        comment_start: Block comment opener ("" if unsupported)
        comment_end: Block comment closer ("" if unsupported)
        comment_line: Line comment opener ("" if unsupported)
        nested_comments: Whether block comments nest
        ident_start: Parser for the first character of an identifier
        ident_letter: Parser for the remaining identifier characters
        op_start: Parser for the first character of an operator
        op_letter: Parser for the remaining operator characters
        reserved_names: Words identifier refuses
        reserved_op_names: Operators operator refuses
        case_sensitive: Whether reserved words match case-sensitively
    """

    comment_start: str = ""
    comment_end: str = ""
    comment_line: str = ""
    nested_comments: bool = True
    ident_start: Parser[str] = _IDENT_START
    ident_letter: Parser[str] = _IDENT_LETTER
    op_start: Parser[str] = _OP_CHAR
    op_letter: Parser[str] = _OP_CHAR
    reserved_names: tuple[str, ...] = ()
    reserved_op_names: tuple[str, ...] = ()
    case_sensitive: bool = True

    def __post_init__(self) -> None:
        """Normalise and validate fields.

        Reserved name collections are stored as tuples, so lists and other
        iterables are accepted.

        Raises:
            LanguageDefinitionError: If only one block comment delimiter is
                set, or a reserved name is empty or not a string.
        """
        for name in ("comment_start", "comment_end", "comment_line"):
            if not isinstance(getattr(self, name), str):
                raise LanguageDefinitionError(
                    ErrorTemplate.invalid_language_def(name, "must be a string")
                )
        if bool(self.comment_start) != bool(self.comment_end):
            raise LanguageDefinitionError(
                ErrorTemplate.invalid_language_def(
                    "comment_start" if self.comment_start else "comment_end",
                    "comment_start and comment_end must be set together",
                )
            )
        for name in ("reserved_names", "reserved_op_names"):
            value = getattr(self, name)
            if isinstance(value, str):
                raise LanguageDefinitionError(
                    ErrorTemplate.invalid_language_def(name, "expected a collection of strings")
                )
            names = tuple(value)
            if not all(isinstance(n, str) and n for n in names):
                raise LanguageDefinitionError(
                    ErrorTemplate.invalid_language_def(name, "names must be non-empty strings")
                )
            object.__setattr__(self, name, names)

    @property
    def comment_style(self) -> CommentStyle:
        """Which comment kinds this language has."""
        match (bool(self.comment_line), bool(self.comment_start)):
            case (False, False):
                return CommentStyle.NONE
            case (True, False):
                return CommentStyle.LINE
            case (False, True):
                return CommentStyle.BLOCK
            case _:
                return CommentStyle.BOTH

    def replace(self, **changes: Any) -> "LanguageDef":
        """Return a copy with changes applied; self is unchanged.

        Raises:
            TypeError: If a change names an unknown field
            LanguageDefinitionError: If the result is invalid
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(changes) - known)
        if unknown:
            msg = f"Unknown LanguageDef field(s): {', '.join(unknown)}"
            raise TypeError(msg)
        logger.debug("Overriding language definition fields: %s", ", ".join(sorted(changes)))
        return replace(self, **changes)


EMPTY_DEF = LanguageDef()

HASKELL_STYLE = EMPTY_DEF.replace(
    comment_start="{-",
    comment_end="-}",
    comment_line="--",
    nested_comments=True,
    ident_start=letter,
)

JAVA_STYLE = EMPTY_DEF.replace(
    comment_start="/*",
    comment_end="*/",
    comment_line="//",
    nested_comments=True,
    ident_start=letter,
    case_sensitive=False,
)
