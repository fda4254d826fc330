"""Parse error values.

A ParseError is a position plus an ordered, de-duplicated tuple of message
fragments. Parsers return errors as values; only parse_or_raise() turns one
into an exception (ParseFailedError).

Rendering follows the classic predictive-parser layout:

    "calc.txt" (line 1, column 3): unexpected "x", expecting digit or ")"

Python 3.13+. Zero external dependencies.
"""

import json
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from parseclex.diagnostics import Diagnostic, ErrorTemplate, ParsecLexError, SourceSpan
from parseclex.enums import MessageKind

from .position import SourcePos

__all__ = [
    "Message",
    "ParseError",
    "ParseFailedError",
    "merge_error",
    "show_token",
]

# Rendering/sorting rank, declaration order of MessageKind
_KIND_RANK: dict[MessageKind, int] = {kind: rank for rank, kind in enumerate(MessageKind)}


def show_token(token: object) -> str:
    """Render a token (or token sequence) for an error message.

    Strings are shown double-quoted with JSON escapes, anything else via repr().

    Example:
        >>> show_token("a")
        '"a"'
        >>> show_token("\\n")
        '"\\\\n"'
        >>> show_token(42)
        '42'
    """
    if isinstance(token, str):
        return json.dumps(token, ensure_ascii=False)
    return repr(token)


@dataclass(frozen=True, slots=True)
class Message:
    """One error fragment.

    Attributes:
        kind: Fragment kind
        text: Fragment text; an empty SYS_UNEXPECT text means end of input,
            an empty EXPECT text is a hidden expectation (label "")
    """

    kind: MessageKind
    text: str

    @property
    def rank(self) -> int:
        return _KIND_RANK[self.kind]


def _clean(texts: Iterable[str]) -> list[str]:
    """Drop empty strings and duplicates, keeping first occurrence order."""
    return list(dict.fromkeys(t for t in texts if t))


def _commas_or(texts: Sequence[str]) -> str:
    match len(texts):
        case 0:
            return ""
        case 1:
            return texts[0]
        case _:
            return f"{', '.join(texts[:-1])} or {texts[-1]}"


def _show_many(prefix: str, texts: Iterable[str]) -> str:
    cleaned = _clean(texts)
    if not cleaned:
        return ""
    if not prefix:
        return _commas_or(cleaned)
    return f"{prefix} {_commas_or(cleaned)}"


@dataclass(frozen=True, slots=True)
class ParseError:
    """Immutable parse error: one position, ordered message fragments.

    An error without fragments is the "unknown" placeholder that successes
    carry; it disappears when merged with a real error.

    Example:
        >>> pos = SourcePos("", 1, 3)
        >>> err = ParseError.from_message(MessageKind.SYS_UNEXPECT, '"x"', pos)
        >>> str(err.add_message(Message(MessageKind.EXPECT, "digit")))
        '(line 1, column 3): unexpected "x", expecting digit'
    """

    pos: SourcePos
    messages: tuple[Message, ...] = ()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_message(cls, kind: MessageKind, text: str, pos: SourcePos) -> "ParseError":
        return cls(pos, (Message(kind, text),))

    @classmethod
    def unknown(cls, pos: SourcePos) -> "ParseError":
        return cls(pos)

    # ------------------------------------------------------------------
    # Modification (every method returns a new error)
    # ------------------------------------------------------------------

    def add_message(self, message: Message) -> "ParseError":
        if message in self.messages:
            return self
        return ParseError(self.pos, (*self.messages, message))

    def set_message(self, message: Message) -> "ParseError":
        """Replace every fragment of message.kind with message."""
        kept = tuple(m for m in self.messages if m.kind is not message.kind)
        return ParseError(self.pos, (*kept, message))

    def set_expected(self, texts: Sequence[str]) -> "ParseError":
        """Replace the expected fragments with texts.

        An empty texts sequence leaves one hidden EXPECT "" fragment, which
        suppresses expectations in the rendered message.
        """
        kept = tuple(m for m in self.messages if m.kind is not MessageKind.EXPECT)
        if not texts:
            return ParseError(self.pos, (*kept, Message(MessageKind.EXPECT, "")))
        expected = tuple(Message(MessageKind.EXPECT, t) for t in dict.fromkeys(texts))
        return ParseError(self.pos, kept + expected)

    def with_position(self, pos: SourcePos) -> "ParseError":
        return ParseError(pos, self.messages)

    def merge(self, other: "ParseError") -> "ParseError":
        return merge_error(self, other)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def is_unknown(self) -> bool:
        return not self.messages

    def texts(self, kind: MessageKind) -> tuple[str, ...]:
        """Texts of all fragments of kind, in insertion order."""
        return tuple(m.text for m in self.messages if m.kind is kind)

    def sorted_messages(self) -> tuple[Message, ...]:
        """Fragments grouped by kind, stable within a kind."""
        return tuple(sorted(self.messages, key=lambda m: m.rank))

    @property
    def expected(self) -> tuple[str, ...]:
        """Visible expectations (hidden "" labels removed)."""
        return tuple(_clean(self.texts(MessageKind.EXPECT)))

    @property
    def unexpected(self) -> str | None:
        """Unexpected input as rendered, or None.

        A user-unexpected fragment hides the system one. An empty
        system-unexpected text means the parser hit end of input.
        """
        user = _clean(self.texts(MessageKind.UNEXPECT))
        if user:
            return _commas_or(user)
        system = self.texts(MessageKind.SYS_UNEXPECT)
        if not system:
            return None
        return system[0] or "end of input"

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def message_text(self) -> str:
        """Render fragments without the position prefix."""
        if self.is_unknown:
            return "unknown parse error"

        user_unexpected = self.texts(MessageKind.UNEXPECT)
        system_unexpected = self.texts(MessageKind.SYS_UNEXPECT)

        sections: list[str] = []
        if system_unexpected and not _clean(user_unexpected):
            first = system_unexpected[0]
            sections.append(f"unexpected {first}" if first else "unexpected end of input")
        sections.append(_show_many("unexpected", user_unexpected))
        sections.append(_show_many("expecting", self.texts(MessageKind.EXPECT)))
        sections.append(_show_many("", self.texts(MessageKind.MESSAGE)))

        text = ", ".join(s for s in sections if s)
        return text or "unknown parse error"

    def __str__(self) -> str:
        return f"{self.pos}: {self.message_text()}"

    def format_with_context(self, source: object, context_lines: int = 2) -> str:
        """Format error with source context and pointer.

        Shows the lines around the error and a caret under the error column.
        Only text sources get context; other token sequences render as str().

        Args:
            source: The input that was parsed
            context_lines: Number of lines to show before/after error

        Returns:
            Multi-line formatted error with context

        Example:
            >>> err = ParseError.from_message(
            ...     MessageKind.MESSAGE, "bad", SourcePos("", 2, 3))
            >>> print(err.format_with_context("ab\\ncd\\nef"))
            (line 2, column 3): bad
            <BLANKLINE>
               1 | ab
               2 | cd
                 |   ^
               3 | ef
        """
        if not isinstance(source, str):
            return str(self)

        line, col = self.pos.line, self.pos.column
        lines = source.split("\n")

        result_lines = [str(self), ""]

        start_line = max(1, line - context_lines)
        end_line = min(len(lines), line + context_lines)

        for i in range(start_line, end_line + 1):
            line_num_str = f"{i:4} | "
            result_lines.append(line_num_str + lines[i - 1])

            if i == line:
                gutter = " " * (len(line_num_str) - 2) + "| "
                result_lines.append(gutter + " " * (col - 1) + "^")

        return "\n".join(result_lines)

    def to_diagnostic(self) -> Diagnostic:
        """Convert to a structured Diagnostic (PARSE_FAILED family)."""
        span = SourceSpan(
            line=max(1, self.pos.line),
            column=max(1, self.pos.column),
            source_name=self.pos.name,
        )
        return ErrorTemplate.parse_failed(
            self.message_text(),
            span,
            expected=self.expected,
            unexpected=self.unexpected,
        )


def merge_error(e1: ParseError, e2: ParseError) -> ParseError:
    """Combine the errors of two no-progress outcomes.

    Rule:
        - e1 has no fragments: e2 verbatim
        - e2 has no fragments: e1 verbatim
        - different positions: the error further along wins outright
        - same position: fragments are unioned (e1 first, duplicates dropped)

    Example:
        >>> pos = SourcePos("", 1, 1)
        >>> digit = ParseError.from_message(MessageKind.EXPECT, "digit", pos)
        >>> letter = ParseError.from_message(MessageKind.EXPECT, "letter", pos)
        >>> merge_error(digit, letter).expected
        ('digit', 'letter')
    """
    if not e1.messages:
        return e2
    if not e2.messages:
        return e1
    if e1.pos > e2.pos:
        return e1
    if e2.pos > e1.pos:
        return e2
    merged = tuple(dict.fromkeys((*e1.messages, *e2.messages)))
    return ParseError(e1.pos, merged)


class ParseFailedError(ParsecLexError):
    """Input rejected by a grammar, raised by parse_or_raise().

    Attributes:
        error: The ParseError value the parser returned
    """

    def __init__(self, error: ParseError) -> None:
        super().__init__(error.to_diagnostic())
        self.error = error
