"""Combinator engine.

A Parser[A] wraps a function from State to Outcome[A] (see
:mod:`parseclex.syntax.state`). Everything else in the library is built
from the handful of primitives defined here:

    - succeed / fail / zero / unexpected: constant outcomes
    - Parser.map / Parser.bind / >> / <<: sequencing
    - Parser.or_else / |: predictive choice
    - attempt: turn a consumed failure into an empty one
    - label / labels: name what an empty outcome expected
    - token_prim_ex / token_prim / token / tokens: the only token consumers
    - many / skip_many: iterative repetition with an empty-success guard
    - state accessors, forward declarations, run_parser / parse_or_raise

Backtracking Policy:
    Choice only tries its second branch when the first failed without
    consuming input. Wrap a branch in attempt() to allow arbitrary look-ahead.

Python 3.13+. Zero external dependencies.
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from typing import Any, NoReturn

from parseclex.diagnostics import (
    Diagnostic,
    EmptyRepetitionError,
    ErrorTemplate,
    GrammarUsageError,
    UndefinedParserError,
)
from parseclex.enums import MessageKind
from parseclex.syntax.error import Message, ParseError, ParseFailedError, merge_error
from parseclex.syntax.position import SourcePos, initial_pos
from parseclex.syntax.state import (
    Consumed,
    Empty,
    Fail,
    Ok,
    Outcome,
    Reply,
    RestView,
    State,
)

__all__ = [
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
]

logger = logging.getLogger(__name__)

type ParseFn[A] = Callable[[State], Outcome[A]]


class Parser[A]:
    """Parser producing values of type A.

    Parsers are immutable and hold no per-run state, so one instance can be
    reused across inputs and threads.

    Operators:
        p | q   predictive choice (or_else)
        p >> q  run both, keep q's value
        p << q  run both, keep p's value

    Example:
        >>> from parseclex.syntax.parser.primitives import char, digit
        >>> pair = digit << char(",")
        >>> parse(pair, "", "7,")
        '7'
    """

    __slots__ = ("_fn", "name")

    def __init__(self, fn: ParseFn[A], name: str = "") -> None:
        self._fn = fn
        self.name = name or getattr(fn, "__name__", "parser")

    def __call__(self, state: State) -> Outcome[A]:
        return self._fn(state)

    def __repr__(self) -> str:
        return f"<Parser {self.name}>"

    def named(self, name: str) -> "Parser[A]":
        """Same parser under another debugging name (no effect on errors)."""
        return Parser(self._fn, name)

    def map[B](self, f: Callable[[A], B]) -> "Parser[B]":
        """Transform the value on success; tags and errors are unchanged."""
        run = self._fn

        def parse_map(state: State) -> Outcome[B]:
            match run(state):
                case Consumed(Ok(value, st, err)):
                    return Consumed(Ok(f(value), st, err))
                case Empty(Ok(value, st, err)):
                    return Empty(Ok(f(value), st, err))
                case failed:
                    return failed  # type: ignore[return-value]

        return Parser(parse_map, self.name)

    def bind[B](self, f: Callable[[A], "Parser[B]"]) -> "Parser[B]":
        """Run this parser, then the parser f builds from its value.

        The composite is consumed if either step consumed. When the second
        step consumes nothing, its error is merged with the first step's
        pending error so earlier expectations are still reported.
        """
        run = self._fn

        def parse_bind(state: State) -> Outcome[B]:
            match run(state):
                case Consumed(Ok(value, st, err)):
                    match f(value)(st):
                        case Empty(Ok(value2, st2, err2)):
                            return Consumed(Ok(value2, st2, merge_error(err, err2)))
                        case Empty(Fail(err2)):
                            return Consumed(Fail(merge_error(err, err2)))
                        case consumed:
                            return consumed
                case Empty(Ok(value, st, err)):
                    match f(value)(st):
                        case Empty(Ok(value2, st2, err2)):
                            return Empty(Ok(value2, st2, merge_error(err, err2)))
                        case Empty(Fail(err2)):
                            return Empty(Fail(merge_error(err, err2)))
                        case consumed:
                            return consumed
                case failed:
                    return failed  # type: ignore[return-value]

        return Parser(parse_bind, self.name)

    def then[B](self, other: "Parser[B]") -> "Parser[B]":
        return self.bind(lambda _: other)

    def skip(self, other: "Parser[Any]") -> "Parser[A]":
        return self.bind(lambda value: other.map(lambda _: value))

    def or_else[B](self, other: "Parser[B]") -> "Parser[A | B]":
        """Predictive choice: other runs only after an empty failure."""
        run = self._fn
        run_other = other._fn

        def parse_choice(state: State) -> Outcome[A | B]:
            match first := run(state):
                case Empty(Fail(err)):
                    match run_other(state):
                        case Empty(Ok(value, st, err2)):
                            return Empty(Ok(value, st, merge_error(err, err2)))
                        case Empty(Fail(err2)):
                            return Empty(Fail(merge_error(err, err2)))
                        case consumed:
                            return consumed
                case _:
                    return first

        return Parser(parse_choice, f"{self.name} | {other.name}")

    def label(self, message: str) -> "Parser[A]":
        return labels(self, (message,))

    def __or__[B](self, other: "Parser[B]") -> "Parser[A | B]":
        return self.or_else(other)

    def __rshift__[B](self, other: "Parser[B]") -> "Parser[B]":
        return self.then(other)

    def __lshift__(self, other: "Parser[Any]") -> "Parser[A]":
        return self.skip(other)


# ============================================================================
# CONSTANT PARSERS
# ============================================================================


def succeed[A](value: A) -> Parser[A]:
    """Succeed with value without consuming input."""

    def parse_succeed(state: State) -> Outcome[A]:
        return Empty(Ok(value, state, ParseError.unknown(state.pos)))

    return Parser(parse_succeed, f"succeed({value!r})")


def fail(message: str) -> Parser[Any]:
    """Fail without consuming input, reporting message."""

    def parse_fail(state: State) -> Outcome[Any]:
        return Empty(Fail(ParseError.from_message(MessageKind.MESSAGE, message, state.pos)))

    return Parser(parse_fail, f"fail({message!r})")


def _parse_zero(state: State) -> Outcome[Any]:
    return Empty(Fail(ParseError.unknown(state.pos)))


def zero() -> Parser[Any]:
    """Fail without consuming input and without any message."""
    return Parser(_parse_zero, "zero")


def unexpected(message: str) -> Parser[Any]:
    """Fail without consuming input, reporting message as unexpected input."""

    def parse_unexpected(state: State) -> Outcome[Any]:
        return Empty(Fail(ParseError.from_message(MessageKind.UNEXPECT, message, state.pos)))

    return Parser(parse_unexpected, f"unexpected({message!r})")


# ============================================================================
# BACKTRACKING AND LABELS
# ============================================================================


def attempt[A](p: Parser[A]) -> Parser[A]:
    """Run p; a consumed failure becomes an empty failure at the entry position.

    Example:
        >>> from parseclex.syntax.parser.primitives import string
        >>> keyword = attempt(string("let")) | string("lambda")
        >>> parse(keyword, "", "lambda")
        'lambda'
    """
    run = p._fn

    def parse_attempt(state: State) -> Outcome[A]:
        match outcome := run(state):
            case Consumed(Fail(err)):
                return Empty(Fail(err.with_position(state.pos)))
            case _:
                return outcome

    return Parser(parse_attempt, f"attempt({p.name})")


def labels[A](p: Parser[A], messages: Iterable[str]) -> Parser[A]:
    """Replace what an empty outcome of p expected with messages.

    Consumed outcomes are untouched. An empty success that carries only the
    unknown placeholder is untouched. An empty messages list (or the single
    label "") hides expectations from the rendered error.
    """
    run = p._fn
    texts = tuple(messages)

    def parse_label(state: State) -> Outcome[A]:
        match outcome := run(state):
            case Empty(Fail(err)):
                return Empty(Fail(err.set_expected(texts)))
            case Empty(Ok(value, st, err)) if not err.is_unknown:
                return Empty(Ok(value, st, err.set_expected(texts)))
            case _:
                return outcome

    return Parser(parse_label, " or ".join(t for t in texts if t) or p.name)


def label[A](p: Parser[A], message: str) -> Parser[A]:
    """Name what p expects; see labels()."""
    return labels(p, (message,))


# ============================================================================
# TOKEN PRIMITIVES
# ============================================================================


def token_prim_ex[T, A](
    show: Callable[[T], str],
    next_pos: Callable[[SourcePos, T, Sequence[T]], SourcePos],
    next_user: Callable[[SourcePos, T, Sequence[T], Any], Any] | None,
    test: Callable[[T], A | None],
) -> Parser[A]:
    """Consume one token accepted by test.

    Args:
        show: Renders a token for error messages
        next_pos: Computes the position after the token from
            (current position, token, remaining tokens)
        next_user: Computes the next user state from
            (current position, token, remaining tokens, user state), or None
            to leave the user state unchanged
        test: Returns the accepted value, or None to reject the token

    Returns:
        Parser that consumes exactly one token on success and nothing on
        failure. Rejection and end of input report a system-unexpected
        fragment (the shown token, or "" for end of input) at the current
        position.
    """

    def parse_token(state: State) -> Outcome[A]:
        source = state.source
        offset = state.offset
        if offset >= len(source):
            err = ParseError.from_message(MessageKind.SYS_UNEXPECT, "", state.pos)
            return Empty(Fail(err))
        tok = source[offset]
        value = test(tok)
        if value is None:
            err = ParseError.from_message(MessageKind.SYS_UNEXPECT, show(tok), state.pos)
            return Empty(Fail(err))
        rest = RestView(source, offset + 1)
        new_pos = next_pos(state.pos, tok, rest)
        user = state.user if next_user is None else next_user(state.pos, tok, rest, state.user)
        new_state = State(source, offset + 1, new_pos, user)
        return Consumed(Ok(value, new_state, ParseError.unknown(new_pos)))

    return Parser(parse_token, "token")


def token_prim[T, A](
    show: Callable[[T], str],
    next_pos: Callable[[SourcePos, T, Sequence[T]], SourcePos],
    test: Callable[[T], A | None],
) -> Parser[A]:
    """token_prim_ex() that leaves the user state unchanged."""
    return token_prim_ex(show, next_pos, None, test)


def token[T, A](
    show: Callable[[T], str],
    token_pos: Callable[[T], SourcePos],
    test: Callable[[T], A | None],
) -> Parser[A]:
    """Consume one token of a stream whose tokens carry their own positions.

    The position after a token is the position of the following token, or
    of the token itself when it is the last one.
    """

    def next_pos(_pos: SourcePos, tok: T, rest: Sequence[T]) -> SourcePos:
        if rest:
            return token_pos(rest[0])
        return token_pos(tok)

    return token_prim(show, next_pos, test)


def tokens[T](
    show_tokens: Callable[[Sequence[T]], str],
    next_pos: Callable[[SourcePos, Sequence[T]], SourcePos],
    expected: Sequence[T],
) -> Parser[Sequence[T]]:
    """Match the exact sequence expected in one step.

    On mismatch the error sits where the match started, expects
    show_tokens(expected), and reports as unexpected the input seen up to
    and including the first mismatching token ("" when input ran out). The
    failure is consumed only when at least one token matched.

    Example:
        >>> from parseclex.syntax.parser.primitives import string
        >>> print(parse(string("let"), "", "lex"))
        (line 1, column 1): unexpected "lex", expecting "let"
    """
    count = len(expected)
    shown = show_tokens(expected)

    def mismatch(state: State, matched: int, seen: str) -> Outcome[Sequence[T]]:
        err = ParseError(
            state.pos,
            (Message(MessageKind.SYS_UNEXPECT, seen), Message(MessageKind.EXPECT, shown)),
        )
        if matched == 0:
            return Empty(Fail(err))
        return Consumed(Fail(err))

    def parse_tokens(state: State) -> Outcome[Sequence[T]]:
        if count == 0:
            return Empty(Ok(expected, state, ParseError.unknown(state.pos)))
        source = state.source
        offset = state.offset
        if not (
            isinstance(source, str)
            and isinstance(expected, str)
            and source.startswith(expected, offset)
        ):
            size = len(source)
            for i, tok in enumerate(expected):
                j = offset + i
                if j >= size:
                    return mismatch(state, i, "")
                if source[j] != tok:
                    return mismatch(state, i, show_tokens(source[offset : j + 1]))
        new_pos = next_pos(state.pos, expected)
        new_state = State(source, offset + count, new_pos, state.user)
        return Consumed(Ok(expected, new_state, ParseError.unknown(new_pos)))

    return Parser(parse_tokens, shown)


# ============================================================================
# REPETITION
# ============================================================================


def raise_usage_error(error_type: type[GrammarUsageError], diagnostic: Diagnostic) -> NoReturn:
    """Log a grammar usage error, then raise it."""
    logger.error("Grammar usage error: %s", diagnostic.message)
    raise error_type(diagnostic)


def raise_empty_repetition(combinator: str, p: Parser[Any]) -> NoReturn:
    raise_usage_error(EmptyRepetitionError, ErrorTemplate.empty_repetition(combinator, p.name))


def many[A](p: Parser[A]) -> Parser[list[A]]:
    """Apply p zero or more times, collecting values in order.

    Stops at the first empty failure of p. A consumed failure of p fails the
    whole repetition.

    Raises:
        EmptyRepetitionError: If p succeeds without consuming input (the loop
            would never terminate). Raised while parsing, not returned.
    """
    run = p._fn

    def parse_many(state: State) -> Outcome[list[A]]:
        values: list[A] = []
        current = state
        while True:
            match run(current):
                case Consumed(Ok(value, st, _)):
                    values.append(value)
                    current = st
                case Empty(Fail(err)):
                    reply: Reply[list[A]] = Ok(values, current, err)
                    return Consumed(reply) if values else Empty(reply)
                case Empty(Ok()):
                    raise_empty_repetition("many", p)
                case failed:
                    return failed  # type: ignore[return-value]

    return Parser(parse_many, f"many({p.name})")


def skip_many(p: Parser[Any]) -> Parser[None]:
    """Apply p zero or more times, discarding values.

    Raises:
        EmptyRepetitionError: If p succeeds without consuming input.
    """
    run = p._fn

    def parse_skip_many(state: State) -> Outcome[None]:
        current = state
        consumed = False
        while True:
            match run(current):
                case Consumed(Ok(_, st, _)):
                    current = st
                    consumed = True
                case Empty(Fail(err)):
                    reply: Reply[None] = Ok(None, current, err)
                    return Consumed(reply) if consumed else Empty(reply)
                case Empty(Ok()):
                    raise_empty_repetition("skip_many", p)
                case failed:
                    return failed  # type: ignore[return-value]

    return Parser(parse_skip_many, f"skip_many({p.name})")


# ============================================================================
# STATE ACCESSORS
# ============================================================================


def _empty_ok[A](value: A, state: State) -> Outcome[A]:
    return Empty(Ok(value, state, ParseError.unknown(state.pos)))


def get_state() -> Parser[State]:
    return Parser(lambda state: _empty_ok(state, state), "get_state")


def set_state(new_state: State) -> Parser[None]:
    return Parser(lambda _state: _empty_ok(None, new_state), "set_state")


def update_state(f: Callable[[State], State]) -> Parser[None]:
    return Parser(lambda state: _empty_ok(None, f(state)), "update_state")


def get_input() -> Parser[Sequence[Any]]:
    """Remaining input."""
    return Parser(lambda state: _empty_ok(state.input, state), "get_input")


def set_input(source: Sequence[Any]) -> Parser[None]:
    """Replace the remaining input; position and user state are kept."""

    def parse_set_input(state: State) -> Outcome[None]:
        return _empty_ok(None, State(source, 0, state.pos, state.user))

    return Parser(parse_set_input, "set_input")


def get_position() -> Parser[SourcePos]:
    return Parser(lambda state: _empty_ok(state.pos, state), "get_position")


def set_position(pos: SourcePos) -> Parser[None]:
    def parse_set_position(state: State) -> Outcome[None]:
        return _empty_ok(None, State(state.source, state.offset, pos, state.user))

    return Parser(parse_set_position, "set_position")


def get_user_state() -> Parser[Any]:
    return Parser(lambda state: _empty_ok(state.user, state), "get_user_state")


def set_user_state(user: Any) -> Parser[None]:
    def parse_set_user(state: State) -> Outcome[None]:
        return _empty_ok(None, State(state.source, state.offset, state.pos, user))

    return Parser(parse_set_user, "set_user_state")


def update_user_state(f: Callable[[Any], Any]) -> Parser[None]:
    def parse_update_user(state: State) -> Outcome[None]:
        return _empty_ok(None, State(state.source, state.offset, state.pos, f(state.user)))

    return Parser(parse_update_user, "update_user_state")


# ============================================================================
# RECURSION
# ============================================================================


class ForwardParser[A](Parser[A]):
    """Placeholder for a parser that is defined later (recursive grammars).

    Example:
        >>> from parseclex.syntax.parser.primitives import char
        >>> nested = forward("nested")
        >>> nested.define((char("(") >> nested << char(")")) | succeed(0))
        >>> parse(nested, "", "(())")
        0
    """

    __slots__ = ("_target",)

    def __init__(self, name: str = "forward") -> None:
        self._target: Parser[A] | None = None
        super().__init__(self._run_target, name)

    def _run_target(self, state: State) -> Outcome[A]:
        target = self._target
        if target is None:
            raise_usage_error(UndefinedParserError, ErrorTemplate.undefined_parser(self.name))
        return target(state)

    @property
    def is_defined(self) -> bool:
        return self._target is not None

    def define(self, p: Parser[A]) -> None:
        """Bind the placeholder to p.

        Raises:
            GrammarUsageError: If the placeholder is already defined
        """
        if self._target is not None:
            raise_usage_error(GrammarUsageError, ErrorTemplate.parser_redefined(self.name))
        self._target = p


def forward(name: str = "forward") -> ForwardParser[Any]:
    """Create a parser placeholder; call define() once the grammar is built."""
    return ForwardParser(name)


# ============================================================================
# RUNNING
# ============================================================================


def _run[A](p: Parser[A], user_state: Any, source_name: str, source: Iterable[Any]) -> Reply[A]:
    if not isinstance(source, Sequence):
        source = tuple(source)
    state = State(source, 0, initial_pos(source_name), user_state)
    match p(state):
        case Consumed(reply) | Empty(reply):
            return reply


def run_parser[A](
    p: Parser[A],
    user_state: Any,
    source_name: str,
    source: Iterable[Any],
) -> A | ParseError:
    """Run p over source and return its value or the final ParseError.

    Args:
        p: Parser to run
        user_state: Initial user state
        source_name: Name embedded in reported positions (may be empty)
        source: Token sequence; non-sequence iterables are materialized

    Returns:
        Parsed value, or ParseError on failure
    """
    match _run(p, user_state, source_name, source):
        case Ok(value, _, _):
            return value
        case Fail(err):
            return err


def parse[A](p: Parser[A], source_name: str, source: Iterable[Any]) -> A | ParseError:
    """run_parser() with user state None."""
    return run_parser(p, None, source_name, source)


def parse_or_raise[A](
    p: Parser[A],
    source_name: str,
    source: Iterable[Any],
    user_state: Any = None,
) -> A:
    """Run p over source and return its value.

    Raises:
        ParseFailedError: If p fails; the ParseError is on .error
    """
    match _run(p, user_state, source_name, source):
        case Ok(value, _, _):
            return value
        case Fail(err):
            logger.debug("Parse of %r failed: %s", source_name, err)
            raise ParseFailedError(err)
