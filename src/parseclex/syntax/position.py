"""Source positions for parse errors.

SourcePos is an immutable (name, line, column) value. Lines and columns are
1-indexed. The engine never advances positions itself: token primitives are
handed a next-position function, and the helpers here are the ones used by
the character parsers.

Line Ending Support:
    - LF (Unix, \\n): Starts a new line
    - CRLF (Windows, \\r\\n): Supported (\\r advances one column, \\n ends the line)
    - CR-only (Classic Mac, \\r): NOT treated as a line break

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Iterable
from dataclasses import dataclass, replace

from parseclex.constants import TAB_WIDTH

__all__ = ["SourcePos", "initial_pos", "update_pos_char", "update_pos_string"]


@dataclass(frozen=True, slots=True, order=True)
class SourcePos:
    """Immutable source position.

    Ordering compares (name, line, column), so a position further into the
    same source is greater. Error merging relies on this.

    Example:
        >>> pos = SourcePos("calc.txt", 1, 1)
        >>> str(pos.inc_column(4))
        '"calc.txt" (line 1, column 5)'
        >>> str(SourcePos("", 3, 2))
        '(line 3, column 2)'
    """

    name: str
    line: int
    column: int

    def __str__(self) -> str:
        location = f"(line {self.line}, column {self.column})"
        if self.name:
            return f'"{self.name}" {location}'
        return location

    def inc_line(self, n: int = 1) -> "SourcePos":
        """Advance n lines; column resets to 1."""
        return SourcePos(self.name, self.line + n, 1)

    def inc_column(self, n: int = 1) -> "SourcePos":
        """Advance n columns on the current line."""
        return SourcePos(self.name, self.line, self.column + n)

    def with_name(self, name: str) -> "SourcePos":
        return replace(self, name=name)

    def with_line(self, line: int) -> "SourcePos":
        return replace(self, line=line)

    def with_column(self, column: int) -> "SourcePos":
        return replace(self, column=column)

    def update_char(self, char: str) -> "SourcePos":
        """Return position after consuming one character.

        Args:
            char: Consumed character

        Returns:
            Next position: newline moves to column 1 of the next line, tab
            moves to the next tab stop (stops at 1, 9, 17, ...), anything
            else advances one column.

        Example:
            >>> SourcePos("", 1, 3).update_char("\\t").column
            9
            >>> SourcePos("", 1, 9).update_char("\\t").column
            17
        """
        match char:
            case "\n":
                return SourcePos(self.name, self.line + 1, 1)
            case "\t":
                column = self.column + TAB_WIDTH - ((self.column - 1) % TAB_WIDTH)
                return SourcePos(self.name, self.line, column)
            case _:
                return SourcePos(self.name, self.line, self.column + 1)

    def update_string(self, chars: Iterable[str]) -> "SourcePos":
        """Return position after consuming every character in chars."""
        pos = self
        for char in chars:
            pos = pos.update_char(char)
        return pos


def initial_pos(name: str = "") -> SourcePos:
    """Position of the first token of a source named name."""
    return SourcePos(name, 1, 1)


def update_pos_char(pos: SourcePos, char: str, _rest: object = None) -> SourcePos:
    """Next-position function for character tokens.

    Matches the (pos, token, rest) signature expected by token_prim.
    """
    return pos.update_char(char)


def update_pos_string(pos: SourcePos, chars: Iterable[str], _rest: object = None) -> SourcePos:
    """Next-position function for a literal sequence of characters."""
    return pos.update_string(chars)
