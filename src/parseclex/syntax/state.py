"""Immutable parser state and the reply algebra.

Every parser step maps a State to exactly one of four outcomes:

    Consumed(Ok(...))   progressed the input and succeeded
    Consumed(Fail(...)) progressed the input and failed (not recoverable by choice)
    Empty(Ok(...))      succeeded without consuming
    Empty(Fail(...))    failed without consuming (choice tries the next branch)

The two levels are explicit classes so combinators can `match` on them and
exhaustiveness stays visible in the code.

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Any, overload

from .error import ParseError
from .position import SourcePos

__all__ = ["Consumed", "Empty", "Fail", "Ok", "Outcome", "Reply", "RestView", "State"]


@dataclass(frozen=True, slots=True)
class State:
    """Immutable input state.

    The original token sequence is kept whole; `offset` counts consumed
    tokens, so advancing by one token never copies the input.

    Attributes:
        source: Complete token sequence (str, tuple, list, ...)
        offset: Number of tokens consumed so far
        pos: Source position of the next token
        user: Opaque user state threaded through the parse

    Example:
        >>> st = State("abc", 1, SourcePos("", 1, 2), None)
        >>> st.input
        'bc'
        >>> st.current
        'b'
    """

    source: Sequence[Any]
    offset: int
    pos: SourcePos
    user: Any = None

    @property
    def is_eof(self) -> bool:
        return self.offset >= len(self.source)

    @property
    def current(self) -> Any:
        """Next token.

        Raises:
            EOFError: If at end of input
        """
        if self.is_eof:
            msg = f"Unexpected EOF at offset {self.offset}"
            raise EOFError(msg)
        return self.source[self.offset]

    @property
    def input(self) -> Sequence[Any]:
        """Remaining tokens (a copy; use rest() on hot paths)."""
        return self.source[self.offset :]

    def rest(self) -> "RestView":
        """O(1) view of the tokens after the current one."""
        return RestView(self.source, self.offset + 1)

    def advance(self, count: int, pos: SourcePos, user: Any) -> "State":
        return State(self.source, self.offset + count, pos, user)


class RestView(Sequence[Any]):
    """Read-only view of source[start:] without copying.

    Handed to next-position and next-user functions as the "rest of input"
    argument so that consuming one token stays O(1).
    """

    __slots__ = ("_source", "_start")

    def __init__(self, source: Sequence[Any], start: int) -> None:
        self._source = source
        self._start = min(start, len(source))

    def __len__(self) -> int:
        return len(self._source) - self._start

    @overload
    def __getitem__(self, index: int) -> Any: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[Any]: ...

    def __getitem__(self, index: int | slice) -> Any:
        if isinstance(index, slice):
            start, stop, step = index.indices(len(self))
            return self._source[self._start + start : self._start + stop : step]
        if index < 0:
            index += len(self)
        if not 0 <= index < len(self):
            msg = "RestView index out of range"
            raise IndexError(msg)
        return self._source[self._start + index]

    def __iter__(self) -> Iterator[Any]:
        for i in range(self._start, len(self._source)):
            yield self._source[i]

    def __repr__(self) -> str:
        return f"RestView({self._source[self._start :]!r})"


@dataclass(frozen=True, slots=True)
class Ok[A]:
    """Successful reply.

    Attributes:
        value: Parsed value
        state: State after the parser ran
        error: Pending error describing what could have come next
    """

    value: A
    state: State
    error: ParseError


@dataclass(frozen=True, slots=True)
class Fail:
    """Failed reply."""

    error: ParseError


type Reply[A] = Ok[A] | Fail


@dataclass(frozen=True, slots=True)
class Consumed[A]:
    """Reply of a step that consumed at least one token."""

    reply: Reply[A]


@dataclass(frozen=True, slots=True)
class Empty[A]:
    """Reply of a step that consumed nothing."""

    reply: Reply[A]


type Outcome[A] = Consumed[A] | Empty[A]
