"""Enumerations for ParsecLex type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class MessageKind(StrEnum):
    """Kind of a parse error message fragment.

    Declaration order is significant: fragments are rendered grouped by kind
    in this order.

    StrEnum provides automatic string conversion: str(MessageKind.EXPECT) == "expect"
    """

    SYS_UNEXPECT = "sys_unexpect"
    """Unexpected token reported by a token primitive: unexpected "x" """

    UNEXPECT = "unexpect"
    """Unexpected input reported by an explicit unexpected() call"""

    EXPECT = "expect"
    """Expected construct, added by labels and exhausted alternatives"""

    MESSAGE = "message"
    """Free-form message from fail()"""


class Assoc(StrEnum):
    """Associativity of an infix operator in an expression table.

    StrEnum provides automatic string conversion: str(Assoc.LEFT) == "left"
    """

    NONE = "non"
    """Non-associative: a == b == c is ambiguous"""

    LEFT = "left"
    """Left-associative: a - b - c parses as (a - b) - c"""

    RIGHT = "right"
    """Right-associative: a ^ b ^ c parses as a ^ (b ^ c)"""


class CommentStyle(StrEnum):
    """Comment syntax a language definition supports.

    The whitespace skipper is specialised on this once, when the token
    parser is built.
    """

    NONE = "none"
    LINE = "line"
    BLOCK = "block"
    BOTH = "both"


__all__ = [
    "Assoc",
    "CommentStyle",
    "MessageKind",
]
