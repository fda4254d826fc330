"""Character parsers.

Parsers over text input (one token per character). Positions advance with
SourcePos.update_char: a newline starts a new line, a tab moves to the next
tab stop, anything else moves one column.

Digit classes are ASCII only: str.isdigit() accepts Unicode digits such as
"²", which cannot be folded into a numeric value.
"""

from collections.abc import Callable

from parseclex.constants import ASCII_DIGITS, HEX_DIGITS, OCT_DIGITS
from parseclex.syntax.error import show_token
from parseclex.syntax.position import update_pos_char, update_pos_string

from .core import Parser, label, skip_many, token_prim, tokens

__all__ = [
    "alpha_num",
    "any_char",
    "char",
    "digit",
    "hex_digit",
    "letter",
    "lower",
    "newline",
    "none_of",
    "oct_digit",
    "one_of",
    "satisfy",
    "space",
    "spaces",
    "string",
    "tab",
    "upper",
]


def satisfy(predicate: Callable[[str], bool]) -> Parser[str]:
    """Consume one character for which predicate holds."""
    return token_prim(
        show_token,
        update_pos_char,
        lambda c: c if predicate(c) else None,
    )


def char(c: str) -> Parser[str]:
    """Consume the character c.

    Example:
        >>> from parseclex.syntax.parser.core import parse
        >>> print(parse(char("("), "", "x"))
        (line 1, column 1): unexpected "x", expecting "("
    """
    return label(satisfy(lambda x: x == c), show_token(c))


def string(s: str) -> Parser[str]:
    """Consume the exact text s in one step.

    A partial match is a consumed failure; wrap in attempt() to backtrack.
    """
    return tokens(show_token, update_pos_string, s)


def one_of(chars: str) -> Parser[str]:
    """Consume one character from chars."""
    allowed = frozenset(chars)
    return satisfy(lambda c: c in allowed)


def none_of(chars: str) -> Parser[str]:
    """Consume one character not in chars."""
    excluded = frozenset(chars)
    return satisfy(lambda c: c not in excluded)


any_char: Parser[str] = satisfy(lambda _: True)

space: Parser[str] = label(satisfy(str.isspace), "space")
spaces: Parser[None] = label(skip_many(space), "white space")
newline: Parser[str] = label(char("\n"), "new-line")
tab: Parser[str] = label(char("\t"), "tab")

upper: Parser[str] = label(satisfy(str.isupper), "uppercase letter")
lower: Parser[str] = label(satisfy(str.islower), "lowercase letter")
alpha_num: Parser[str] = label(satisfy(str.isalnum), "letter or digit")
letter: Parser[str] = label(satisfy(str.isalpha), "letter")

digit: Parser[str] = label(one_of(ASCII_DIGITS), "digit")
hex_digit: Parser[str] = label(one_of(HEX_DIGITS), "hexadecimal digit")
oct_digit: Parser[str] = label(one_of(OCT_DIGITS), "octal digit")
