"""Parser combinator library.

Module Organization:
- core.py: Parser type, engine primitives, token consumers, running
- primitives.py: Character parsers (satisfy, char, string, letter, digit, ...)
- rules.py: Derived combinators (option, between, sep_by, chainl1, eof, ...)
- expr.py: Operator-precedence expression builder

Public API:
    Parser: Parser type with |, >> and << operators
    run_parser / parse / parse_or_raise: Entry points
"""

from .core import (
    ForwardParser,
    Parser,
    attempt,
    fail,
    forward,
    get_input,
    get_position,
    get_state,
    get_user_state,
    label,
    labels,
    many,
    parse,
    parse_or_raise,
    run_parser,
    set_input,
    set_position,
    set_state,
    set_user_state,
    skip_many,
    succeed,
    token,
    token_prim,
    token_prim_ex,
    tokens,
    unexpected,
    update_state,
    update_user_state,
    zero,
)
from .expr import Assoc, Infix, Postfix, Prefix, build_expression_parser
from .primitives import (
    alpha_num,
    any_char,
    char,
    digit,
    hex_digit,
    letter,
    lower,
    newline,
    none_of,
    oct_digit,
    one_of,
    satisfy,
    space,
    spaces,
    string,
    tab,
    upper,
)
from .rules import (
    any_token,
    between,
    chainl,
    chainl1,
    chainr,
    chainr1,
    choice,
    count,
    end_by,
    end_by1,
    eof,
    look_ahead,
    many1,
    many_till,
    not_followed_by,
    option,
    option_maybe,
    optional,
    sep_by,
    sep_by1,
    sep_end_by,
    sep_end_by1,
    sequence,
    skip_many1,
)

# ruff: noqa: RUF022 - __all__ organized by module for readability
__all__ = [
    # core
    "ForwardParser",
    "Parser",
    "attempt",
    "fail",
    "forward",
    "get_input",
    "get_position",
    "get_state",
    "get_user_state",
    "label",
    "labels",
    "many",
    "parse",
    "parse_or_raise",
    "run_parser",
    "set_input",
    "set_position",
    "set_state",
    "set_user_state",
    "skip_many",
    "succeed",
    "token",
    "token_prim",
    "token_prim_ex",
    "tokens",
    "unexpected",
    "update_state",
    "update_user_state",
    "zero",
    # primitives
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
    # rules
    "any_token",
    "between",
    "chainl",
    "chainl1",
    "chainr",
    "chainr1",
    "choice",
    "count",
    "end_by",
    "end_by1",
    "eof",
    "look_ahead",
    "many1",
    "many_till",
    "not_followed_by",
    "option",
    "option_maybe",
    "optional",
    "sep_by",
    "sep_by1",
    "sep_end_by",
    "sep_end_by1",
    "sequence",
    "skip_many1",
    # expr
    "Assoc",
    "Infix",
    "Postfix",
    "Prefix",
    "build_expression_parser",
]
