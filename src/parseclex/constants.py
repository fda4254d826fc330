"""Shared constants for ParsecLex.

Centralised configuration constants used by the syntax and lexer packages.
Placing them here avoids circular imports and provides a single source of
truth.

Constants are grouped by domain:
- Positions: column advancement rules
- Characters: code point limits and literal character classes
- Numbers: float exponent range
- Operators: default operator alphabet for language presets

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Positions
    "TAB_WIDTH",
    # Characters
    "MAX_CODE_POINT",
    "CONTROL_CHAR_LIMIT",
    "ASCII_DIGITS",
    "HEX_DIGITS",
    "OCT_DIGITS",
    # Numbers
    "FLOAT_EXPONENT_LIMIT",
    # Operators
    "OPERATOR_CHARS",
]

# ============================================================================
# POSITIONS
# ============================================================================

# Tab stops are every TAB_WIDTH columns. A tab at column c moves to
# c + TAB_WIDTH - ((c - 1) % TAB_WIDTH), so columns 1..8 all land on 9.
TAB_WIDTH: int = 8

# ============================================================================
# CHARACTERS
# ============================================================================

# Maximum valid Unicode code point. Numeric escapes above this are rejected
# with a parse failure instead of letting chr() raise.
MAX_CODE_POINT: int = 0x10FFFF

# Raw characters with a code point at or below this value cannot appear
# literally inside character or string literals and must be escaped.
CONTROL_CHAR_LIMIT: int = 26

# ASCII digits only. str.isdigit() accepts Unicode digits such as "²",
# which int() cannot fold into a numeric value.
ASCII_DIGITS: str = "0123456789"
HEX_DIGITS: str = "0123456789abcdefABCDEF"
OCT_DIGITS: str = "01234567"

# ============================================================================
# NUMBERS
# ============================================================================

# Decimal exponents above this overflow a float. 10**e is never built for
# them; the power is infinity (and its reciprocal 0.0).
FLOAT_EXPONENT_LIMIT: int = 400

# ============================================================================
# OPERATORS
# ============================================================================

# Operator alphabet shared by the bundled language presets.
OPERATOR_CHARS: str = ":!#$%&*+./<=>?@\\^|-~"
