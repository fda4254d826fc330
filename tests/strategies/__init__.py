"""Hypothesis strategies for ParsecLex property-based testing.

Usage:
    from tests.strategies import sample_parsers, small_inputs
    from tests.strategies.parsing import parse_errors, source_positions
"""

from .parsing import (
    digit_strings,
    identifiers,
    message_texts,
    messages,
    parse_errors,
    sample_parsers,
    small_inputs,
    source_names,
    source_positions,
)

__all__ = [
    "digit_strings",
    "identifiers",
    "message_texts",
    "messages",
    "parse_errors",
    "sample_parsers",
    "small_inputs",
    "source_names",
    "source_positions",
]
