"""Token parser bundle.

make_token_parser() derives a TokenParser from a LanguageDef once. Every
token parser in the bundle is a lexeme: it skips trailing white space and
comments, so a grammar skips leading white space exactly once, at the start:

    >>> from parseclex.lexer.language import JAVA_STYLE
    >>> from parseclex.syntax.parser import parse
    >>> lexer = make_token_parser(JAVA_STYLE)
    >>> parse(lexer.white_space >> lexer.comma_sep(lexer.integer), "", " 1, -2 /* c */, 3")
    [1, -2, 3]

Multi-character lexemes (identifier, reserved, operator, reserved_op) are
atomic: a failed match never leaves partial consumption visible to an
enclosing choice.

Python 3.13+. Zero external dependencies.
"""

import logging
from bisect import bisect_left
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from parseclex.syntax.error import show_token
from parseclex.syntax.parser import (
    Parser,
    attempt,
    between,
    char,
    label,
    many,
    not_followed_by,
    sep_by,
    sep_by1,
    sequence,
    string,
    succeed,
    unexpected,
)

from .language import LanguageDef
from .literals import (
    char_escape,
    char_letter,
    decimal,
    floating,
    hexadecimal,
    nat,
    nat_float,
    octal,
    sign,
    string_char,
)
from .whitespace import make_white_space

__all__ = ["TokenParser", "make_token_parser"]

logger = logging.getLogger(__name__)

type ParserFactory = Callable[[Parser[Any]], Parser[Any]]
type ListFactory = Callable[[Parser[Any]], Parser[list[Any]]]


@dataclass(frozen=True, slots=True)
class TokenParser:
    """Lexeme parsers for one language definition.

    Holds no mutable state; each parser is a pure function of the input
    state and can be shared between threads.

    Attributes:
        language: The definition the bundle was built from
        identifier: Identifier that is not a reserved word
        reserved: reserved(name) matches the reserved word name
        operator: Operator that is not a reserved operator
        reserved_op: reserved_op(name) matches the reserved operator name
        char_literal: Character literal, e.g. 'a' or '\\n'
        string_literal: String literal with escapes and gaps
        natural: Non-negative integer (decimal, 0x hex, 0o octal)
        integer: natural with an optional sign
        float: Floating point number (int part with fraction and/or exponent)
        natural_or_float: natural or float, reading the digits only once
        decimal / hexadecimal / octal: Raw digit parsers (not lexemes)
        symbol: symbol(text) matches text as a lexeme
        lexeme: lexeme(p) runs p and skips trailing white space
        white_space: Skips white space and comments
        parens / braces / angles / brackets: Wrap a parser in () {} <> []
        semi / comma / colon / dot: Separator lexemes
        semi_sep / semi_sep1 / comma_sep / comma_sep1: Separated lists
    """

    language: LanguageDef
    identifier: Parser[str]
    reserved: Callable[[str], Parser[None]]
    operator: Parser[str]
    reserved_op: Callable[[str], Parser[None]]
    char_literal: Parser[str]
    string_literal: Parser[str]
    natural: Parser[int]
    integer: Parser[int]
    float: Parser[float]
    natural_or_float: Parser[int | float]
    decimal: Parser[int]
    hexadecimal: Parser[int]
    octal: Parser[int]
    symbol: Callable[[str], Parser[str]]
    lexeme: ParserFactory
    white_space: Parser[None]
    parens: ParserFactory
    braces: ParserFactory
    angles: ParserFactory
    brackets: ParserFactory
    semi: Parser[str]
    comma: Parser[str]
    colon: Parser[str]
    dot: Parser[str]
    semi_sep: ListFactory
    semi_sep1: ListFactory
    comma_sep: ListFactory
    comma_sep1: ListFactory


def _sorted_table(names: Sequence[str], case_sensitive: bool) -> tuple[str, ...]:
    if case_sensitive:
        return tuple(sorted(names))
    return tuple(sorted(name.lower() for name in names))


def _is_member(table: tuple[str, ...], name: str) -> bool:
    i = bisect_left(table, name)
    return i < len(table) and table[i] == name


def _join_chars(first: str) -> Callable[[list[str]], str]:
    return lambda rest: first + "".join(rest)


def make_token_parser(language: LanguageDef) -> TokenParser:
    """Build the lexeme parsers for language.

    Args:
        language: Lexical description (see parseclex.lexer.language)

    Returns:
        TokenParser bundle
    """
    case_sensitive = language.case_sensitive
    reserved_names = _sorted_table(language.reserved_names, case_sensitive)
    reserved_ops = _sorted_table(language.reserved_op_names, case_sensitive=True)

    logger.debug(
        "Building token parser: %d reserved names, %d reserved operators, comments=%s",
        len(reserved_names),
        len(reserved_ops),
        language.comment_style,
    )

    white_space = make_white_space(language)

    def lexeme[A](p: Parser[A]) -> Parser[A]:
        return p << white_space

    def symbol(name: str) -> Parser[str]:
        return lexeme(string(name))

    # ------------------------------------------------------------------
    # Identifiers and reserved words
    # ------------------------------------------------------------------

    ident = label(
        language.ident_start.bind(lambda c: many(language.ident_letter).map(_join_chars(c))),
        "identifier",
    )

    def is_reserved_name(name: str) -> bool:
        return _is_member(reserved_names, name if case_sensitive else name.lower())

    def check_identifier(name: str) -> Parser[str]:
        if is_reserved_name(name):
            return unexpected(f"reserved word {show_token(name)}")
        return succeed(name)

    identifier = lexeme(attempt(ident.bind(check_identifier)))

    def case_char(c: str) -> Parser[str]:
        if c.isalpha():
            return char(c.lower()) | char(c.upper())
        return char(c)

    def case_string(name: str) -> Parser[str]:
        if case_sensitive:
            return string(name)
        shown = show_token(name)
        return sequence([label(case_char(c), shown) for c in name]) >> succeed(name)

    def reserved(name: str) -> Parser[None]:
        end_of_name = label(not_followed_by(language.ident_letter), f"end of {show_token(name)}")
        return lexeme(attempt(case_string(name) >> end_of_name))

    # ------------------------------------------------------------------
    # Operators and reserved operators
    # ------------------------------------------------------------------

    oper = label(
        language.op_start.bind(lambda c: many(language.op_letter).map(_join_chars(c))),
        "operator",
    )

    def check_operator(name: str) -> Parser[str]:
        if _is_member(reserved_ops, name):
            return unexpected(f"reserved operator {show_token(name)}")
        return succeed(name)

    operator = lexeme(attempt(oper.bind(check_operator)))

    def reserved_op(name: str) -> Parser[None]:
        end_of_op = label(not_followed_by(language.op_letter), f"end of {show_token(name)}")
        return lexeme(attempt(string(name) >> end_of_op))

    # ------------------------------------------------------------------
    # Literals
    # ------------------------------------------------------------------

    char_literal = label(
        lexeme(
            between(
                char("'"),
                label(char("'"), "end of character"),
                label(char_letter | char_escape, "literal character"),
            )
        ),
        "character",
    )

    string_literal = label(
        lexeme(
            between(char('"'), label(char('"'), "end of string"), many(string_char)).map(
                lambda parts: "".join(p for p in parts if p is not None)
            )
        ),
        "literal string",
    )

    natural = label(lexeme(nat), "natural")
    integer = label(lexeme(lexeme(sign).bind(lambda f: nat.map(f))), "integer")
    float_ = label(lexeme(floating), "float")
    natural_or_float = label(lexeme(nat_float), "number")

    # ------------------------------------------------------------------
    # Brackets and separators
    # ------------------------------------------------------------------

    def parens[A](p: Parser[A]) -> Parser[A]:
        return between(symbol("("), symbol(")"), p)

    def braces[A](p: Parser[A]) -> Parser[A]:
        return between(symbol("{"), symbol("}"), p)

    def angles[A](p: Parser[A]) -> Parser[A]:
        return between(symbol("<"), symbol(">"), p)

    def brackets[A](p: Parser[A]) -> Parser[A]:
        return between(symbol("["), symbol("]"), p)

    semi = symbol(";")
    comma = symbol(",")
    colon = symbol(":")
    dot = symbol(".")

    def semi_sep[A](p: Parser[A]) -> Parser[list[A]]:
        return sep_by(p, semi)

    def semi_sep1[A](p: Parser[A]) -> Parser[list[A]]:
        return sep_by1(p, semi)

    def comma_sep[A](p: Parser[A]) -> Parser[list[A]]:
        return sep_by(p, comma)

    def comma_sep1[A](p: Parser[A]) -> Parser[list[A]]:
        return sep_by1(p, comma)

    return TokenParser(
        language=language,
        identifier=identifier,
        reserved=reserved,
        operator=operator,
        reserved_op=reserved_op,
        char_literal=char_literal,
        string_literal=string_literal,
        natural=natural,
        integer=integer,
        float=float_,
        natural_or_float=natural_or_float,
        decimal=decimal,
        hexadecimal=hexadecimal,
        octal=octal,
        symbol=symbol,
        lexeme=lexeme,
        white_space=white_space,
        parens=parens,
        braces=braces,
        angles=angles,
        brackets=brackets,
        semi=semi,
        comma=comma,
        colon=colon,
        dot=dot,
        semi_sep=semi_sep,
        semi_sep1=semi_sep1,
        comma_sep=comma_sep,
        comma_sep1=comma_sep1,
    )
