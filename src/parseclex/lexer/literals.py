"""Numeric, character and string literal parsers.

These are the raw (no trailing whitespace) forms; make_token_parser()
wraps them as lexemes and labels them.

Numbers:
    decimal      ::= digit+
    hexadecimal  ::= ("x" | "X") hexdigit+
    octal        ::= ("o" | "O") octdigit+
    natural      ::= "0" (hexadecimal | octal | decimal)? | decimal
    float        ::= decimal (fraction exponent? | exponent)
    fraction     ::= "." digit+
    exponent     ::= ("e" | "E") ("+" | "-")? decimal

Escapes (tried in this order):
    \\n \\t ... single-letter mnemonics
    \\65 \\o101 \\x41 numeric codes (decimal, octal, hexadecimal)
    \\NUL \\SOH ... \\BS \\SP ASCII control names, three-letter names first
    \\^A ... caret control characters (code = letter - "A")

String literals also allow "\\&" (empty escape) and "\\ <white space> \\"
(string gap); both contribute nothing to the value.

Python 3.13+. Zero external dependencies.
"""

import math
import operator
from collections.abc import Callable, Sequence
from functools import reduce

from parseclex.constants import CONTROL_CHAR_LIMIT, FLOAT_EXPONENT_LIMIT, MAX_CODE_POINT
from parseclex.syntax.parser import (
    Parser,
    attempt,
    char,
    choice,
    digit,
    fail,
    hex_digit,
    label,
    many1,
    oct_digit,
    one_of,
    option,
    satisfy,
    space,
    string,
    succeed,
    upper,
)

__all__ = [
    "char_escape",
    "char_letter",
    "decimal",
    "escape_code",
    "exponent",
    "floating",
    "fract_exponent",
    "fraction",
    "hexadecimal",
    "nat",
    "nat_float",
    "number",
    "octal",
    "sign",
    "string_char",
]

# ============================================================================
# NUMBERS
# ============================================================================


def number(base: int, base_digit: Parser[str]) -> Parser[int]:
    """One or more digits folded most significant first: value*base + digit."""
    return many1(base_digit).map(lambda ds: reduce(lambda n, d: base * n + int(d, 16), ds, 0))


decimal: Parser[int] = number(10, digit)
hexadecimal: Parser[int] = one_of("xX") >> number(16, hex_digit)
octal: Parser[int] = one_of("oO") >> number(8, oct_digit)

_zero_number: Parser[int] = label(char("0") >> (hexadecimal | octal | decimal | succeed(0)), "")
nat: Parser[int] = _zero_number | decimal


def _identity(n: int) -> int:
    return n


sign: Parser[Callable[[int], int]] = (
    (char("-") >> succeed(operator.neg)) | (char("+") >> succeed(_identity)) | succeed(_identity)
)


def _fold_fraction(digits: Sequence[str]) -> float:
    # Right to left: ((d_n / 10 + d_n-1) / 10 + ...) / 10
    acc = 0.0
    for d in reversed(digits):
        acc = (acc + int(d)) / 10.0
    return acc


fraction: Parser[float] = label(
    char(".") >> label(many1(digit), "fraction").map(_fold_fraction),
    "fraction",
)


def _power(e: int) -> float:
    if e < 0:
        return 1.0 / _power(-e)
    if e > FLOAT_EXPONENT_LIMIT:
        return math.inf
    try:
        return float(10**e)
    except OverflowError:
        return math.inf


def _scale(n: int, expo: float, fract: float = 0.0) -> float:
    if n == 0 and fract == 0:
        return 0.0
    try:
        return (n + fract) * expo
    except OverflowError:
        return math.inf


exponent: Parser[float] = label(
    one_of("eE")
    >> sign.bind(lambda f: label(decimal, "exponent").map(lambda e: _power(f(e)))),
    "exponent",
)


def fract_exponent(n: int) -> Parser[float]:
    """Fraction and/or exponent following the integer part n."""
    with_fraction = fraction.bind(
        lambda fract: option(1.0, exponent).map(lambda expo: _scale(n, expo, fract))
    )
    only_exponent = exponent.map(lambda expo: _scale(n, expo))
    return with_fraction | only_exponent


floating: Parser[float] = decimal.bind(fract_exponent)

# natural_or_float: the digits are read once, then the tail decides int or float
_decimal_float: Parser[int | float] = decimal.bind(lambda n: option(n, fract_exponent(n)))
_zero_num_float: Parser[int | float] = (
    (hexadecimal | octal) | _decimal_float | fract_exponent(0) | succeed(0)
)
nat_float: Parser[int | float] = (char("0") >> _zero_num_float) | _decimal_float

# ============================================================================
# ESCAPES
# ============================================================================

_ESCAPE_MAP: tuple[tuple[str, str], ...] = tuple(
    zip("abfnrtv\\\"'", "\a\b\f\n\r\t\v\\\"'", strict=True)
)

_ASCII_3: tuple[tuple[str, str], ...] = (
    ("NUL", "\x00"), ("SOH", "\x01"), ("STX", "\x02"), ("ETX", "\x03"),
    ("EOT", "\x04"), ("ENQ", "\x05"), ("ACK", "\x06"), ("BEL", "\x07"),
    ("DLE", "\x10"), ("DC1", "\x11"), ("DC2", "\x12"), ("DC3", "\x13"),
    ("DC4", "\x14"), ("NAK", "\x15"), ("SYN", "\x16"), ("ETB", "\x17"),
    ("CAN", "\x18"), ("SUB", "\x1a"), ("ESC", "\x1b"), ("DEL", "\x7f"),
)  # fmt: skip

_ASCII_2: tuple[tuple[str, str], ...] = (
    ("BS", "\x08"), ("HT", "\x09"), ("LF", "\x0a"), ("VT", "\x0b"),
    ("FF", "\x0c"), ("CR", "\x0d"), ("SO", "\x0e"), ("SI", "\x0f"),
    ("EM", "\x19"), ("FS", "\x1c"), ("GS", "\x1d"), ("RS", "\x1e"),
    ("US", "\x1f"), ("SP", "\x20"),
)  # fmt: skip

_char_esc: Parser[str] = choice([char(c) >> succeed(code) for c, code in _ESCAPE_MAP])


def _to_char(code: int) -> Parser[str]:
    if code > MAX_CODE_POINT:
        return fail("invalid escape sequence")
    return succeed(chr(code))


_char_num: Parser[str] = (
    decimal | (char("o") >> number(8, oct_digit)) | (char("x") >> number(16, hex_digit))
).bind(_to_char)

# Three-letter names first so "SO" does not shadow "SOH"
_char_ascii: Parser[str] = choice(
    [attempt(string(name)) >> succeed(code) for name, code in _ASCII_3 + _ASCII_2]
)

_char_control: Parser[str] = char("^") >> upper.map(lambda c: chr(ord(c) - ord("A")))

escape_code: Parser[str] = label(_char_esc | _char_num | _char_ascii | _char_control, "escape code")

# ============================================================================
# CHARACTER AND STRING LITERAL ELEMENTS
# ============================================================================

char_letter: Parser[str] = satisfy(lambda c: c not in "'\\" and ord(c) > CONTROL_CHAR_LIMIT)
char_escape: Parser[str] = char("\\") >> escape_code

_string_letter: Parser[str] = satisfy(lambda c: c not in '"\\' and ord(c) > CONTROL_CHAR_LIMIT)
_escape_gap: Parser[None] = many1(space) >> label(char("\\"), "end of string gap") >> succeed(None)
_escape_empty: Parser[None] = char("&") >> succeed(None)
_string_escape: Parser[str | None] = char("\\") >> (_escape_gap | _escape_empty | escape_code)

string_char: Parser[str | None] = label(_string_letter | _string_escape, "string character")
"""One string element; None for gaps and empty escapes."""
