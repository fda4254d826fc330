"""Parsing engine package.

Provides source positions, parse errors, parser state and the combinator
library. Separate from the lexer so grammars over non-text token streams
can use the engine alone.

Python 3.13+.
"""

from .error import Message, ParseError, ParseFailedError, merge_error, show_token
from .parser import Parser, parse, parse_or_raise, run_parser
from .position import SourcePos, initial_pos
from .state import Consumed, Empty, Fail, Ok, State

__all__ = [
    "Consumed",
    "Empty",
    "Fail",
    "Message",
    "Ok",
    "ParseError",
    "ParseFailedError",
    "Parser",
    "SourcePos",
    "State",
    "initial_pos",
    "merge_error",
    "parse",
    "parse_or_raise",
    "run_parser",
    "show_token",
]
