"""Lexical layer built on the combinator engine.

Module Organization:
- language.py: LanguageDef and presets (EMPTY_DEF, HASKELL_STYLE, JAVA_STYLE)
- whitespace.py: White space and comment skipper
- literals.py: Numeric, character and string literal parsers
- token.py: TokenParser bundle and make_token_parser()

Python 3.13+.
"""

from .language import EMPTY_DEF, HASKELL_STYLE, JAVA_STYLE, LanguageDef
from .token import TokenParser, make_token_parser
from .whitespace import make_white_space

__all__ = [
    "EMPTY_DEF",
    "HASKELL_STYLE",
    "JAVA_STYLE",
    "LanguageDef",
    "TokenParser",
    "make_token_parser",
    "make_white_space",
]
