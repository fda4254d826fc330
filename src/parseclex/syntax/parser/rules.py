"""Derived combinators.

Everything here is defined on top of :mod:`parseclex.syntax.parser.core`.
Repetitions are explicit loops so the stack depth does not grow with the
number of repeated items; the loops reproduce the consumed/empty and error
merging behaviour of the equivalent chain of binds.

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Callable, Iterable
from functools import reduce
from typing import Any

from parseclex.syntax.error import ParseError, merge_error, show_token
from parseclex.syntax.state import Consumed, Empty, Fail, Ok, Outcome, Reply, State

from .core import (
    Parser,
    attempt,
    label,
    many,
    raise_empty_repetition,
    skip_many,
    succeed,
    token_prim,
    unexpected,
)

__all__ = [
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
]

type BinaryOp[A] = Callable[[A, A], A]


def _tagged[A](reply: Reply[A], consumed: bool) -> Outcome[A]:
    return Consumed(reply) if consumed else Empty(reply)


def _empty_list() -> Parser[list[Any]]:
    # Fresh list per run; succeed([]) would share one list between runs
    return Parser(lambda st: Empty(Ok([], st, ParseError.unknown(st.pos))), "empty_list")


# ============================================================================
# ALTERNATION AND SEQUENCING
# ============================================================================


def choice[A](parsers: Iterable[Parser[A]]) -> Parser[A]:
    """Try parsers in order; equivalent to p1 | p2 | ... | zero().

    Example:
        >>> from parseclex.syntax.parser.core import parse
        >>> from parseclex.syntax.parser.primitives import char
        >>> print(parse(choice([char("a"), char("b")]), "", "c"))
        (line 1, column 1): unexpected "c", expecting "a" or "b"
    """
    alternatives = tuple(parsers)

    def parse_choice(state: State) -> Outcome[A]:
        err = ParseError.unknown(state.pos)
        for p in alternatives:
            match outcome := p(state):
                case Empty(Fail(e)):
                    err = merge_error(err, e)
                case Empty(Ok(value, st, e)):
                    return Empty(Ok(value, st, merge_error(err, e)))
                case _:
                    return outcome
        return Empty(Fail(err))

    return Parser(parse_choice, "choice")


def sequence[A](parsers: Iterable[Parser[A]]) -> Parser[list[A]]:
    """Run parsers one after another and collect their values."""
    steps = tuple(parsers)

    def parse_sequence(state: State) -> Outcome[list[A]]:
        values: list[A] = []
        current = state
        consumed = False
        err = ParseError.unknown(state.pos)
        for p in steps:
            match outcome := p(current):
                case Consumed(Ok(value, st, e)):
                    values.append(value)
                    current, err, consumed = st, e, True
                case Empty(Ok(value, st, e)):
                    values.append(value)
                    current, err = st, merge_error(err, e)
                case Empty(Fail(e)):
                    return _tagged(Fail(merge_error(err, e)), consumed)
                case _:
                    return outcome  # type: ignore[return-value]
        return _tagged(Ok(values, current, err), consumed)

    return Parser(parse_sequence, "sequence")


def count[A](n: int, p: Parser[A]) -> Parser[list[A]]:
    """Exactly n occurrences of p (n <= 0 gives an empty list)."""
    if n <= 0:
        return _empty_list()
    return sequence([p] * n)


def between[A](open_p: Parser[Any], close_p: Parser[Any], p: Parser[A]) -> Parser[A]:
    """open_p, then p, then close_p; returns p's value."""
    return open_p >> p << close_p


def option[A, B](default: B, p: Parser[A]) -> Parser[A | B]:
    """p, or default when p fails without consuming input."""
    return p | succeed(default)


def option_maybe[A](p: Parser[A]) -> Parser[A | None]:
    return option(None, p)


def optional(p: Parser[Any]) -> Parser[None]:
    """Skip p if present."""
    return (p >> succeed(None)) | succeed(None)


# ============================================================================
# REPETITION
# ============================================================================


def many1[A](p: Parser[A]) -> Parser[list[A]]:
    """One or more occurrences of p."""
    rest = many(p)
    return p.bind(lambda first: rest.map(lambda values: [first, *values]))


def skip_many1(p: Parser[Any]) -> Parser[None]:
    return p >> skip_many(p)


def sep_by1[A](p: Parser[A], sep: Parser[Any]) -> Parser[list[A]]:
    """One or more p separated by sep; a trailing sep is not consumed as such."""
    rest = many(sep >> p)
    return p.bind(lambda first: rest.map(lambda values: [first, *values]))


def sep_by[A](p: Parser[A], sep: Parser[Any]) -> Parser[list[A]]:
    """Zero or more p separated by sep."""
    return sep_by1(p, sep) | _empty_list()


def end_by1[A](p: Parser[A], sep: Parser[Any]) -> Parser[list[A]]:
    """One or more p, each followed by sep."""
    return many1(p << sep)


def end_by[A](p: Parser[A], sep: Parser[Any]) -> Parser[list[A]]:
    """Zero or more p, each followed by sep."""
    return many(p << sep)


def sep_end_by1[A](p: Parser[A], sep: Parser[Any]) -> Parser[list[A]]:
    """One or more p separated, and optionally ended, by sep.

    Example:
        >>> from parseclex.syntax.parser.core import parse
        >>> from parseclex.syntax.parser.primitives import char, digit
        >>> parse(sep_end_by1(digit, char(";")), "", "1;2;")
        ['1', '2']
    """
    run_p = p._fn
    run_sep = sep._fn

    def parse_sep_end_by1(state: State) -> Outcome[list[A]]:
        match outcome := run_p(state):
            case Consumed(Ok(value, current, err)):
                consumed = True
            case Empty(Ok(value, current, err)):
                consumed = False
            case _:
                return outcome  # type: ignore[return-value]
        values = [value]
        while True:
            match outcome := run_sep(current):
                case Consumed(Ok(_, after_sep, e)):
                    err, consumed, sep_consumed = e, True, True
                case Empty(Ok(_, after_sep, e)):
                    err, sep_consumed = merge_error(err, e), False
                case Empty(Fail(e)):
                    return _tagged(Ok(values, current, merge_error(err, e)), consumed)
                case _:
                    return outcome  # type: ignore[return-value]
            match outcome := run_p(after_sep):
                case Consumed(Ok(value, current, e)):
                    values.append(value)
                    err, consumed = e, True
                case Empty(Ok(value, current, e)):
                    if not sep_consumed:
                        raise_empty_repetition("sep_end_by", p)
                    values.append(value)
                    err = merge_error(err, e)
                case Empty(Fail(e)):
                    return _tagged(Ok(values, after_sep, merge_error(err, e)), consumed)
                case _:
                    return outcome  # type: ignore[return-value]

    return Parser(parse_sep_end_by1, f"sep_end_by1({p.name})")


def sep_end_by[A](p: Parser[A], sep: Parser[Any]) -> Parser[list[A]]:
    """Zero or more p separated, and optionally ended, by sep."""
    return sep_end_by1(p, sep) | _empty_list()


def many_till[A](p: Parser[A], end: Parser[Any]) -> Parser[list[A]]:
    """Zero or more p until end succeeds; end is tried before each p.

    Example:
        >>> from parseclex.syntax.parser.core import attempt, parse
        >>> from parseclex.syntax.parser.primitives import any_char, string
        >>> comment = string("<!--") >> many_till(any_char, attempt(string("-->")))
        >>> "".join(parse(comment, "", "<!-- hi -->"))
        ' hi '

    Raises:
        EmptyRepetitionError: If p succeeds without consuming input.
    """
    run_p = p._fn
    run_end = end._fn

    def parse_many_till(state: State) -> Outcome[list[A]]:
        values: list[A] = []
        current = state
        consumed = False
        pending = ParseError.unknown(state.pos)
        while True:
            match outcome := run_end(current):
                case Consumed(Ok(_, st, e)):
                    return Consumed(Ok(values, st, e))
                case Empty(Ok(_, st, e)):
                    return _tagged(Ok(values, st, merge_error(pending, e)), consumed)
                case Empty(Fail(end_err)):
                    pass
                case _:
                    return outcome  # type: ignore[return-value]
            match outcome := run_p(current):
                case Consumed(Ok(value, st, e)):
                    values.append(value)
                    current, pending, consumed = st, e, True
                case Empty(Fail(e)):
                    err = merge_error(pending, merge_error(end_err, e))
                    return _tagged(Fail(err), consumed)
                case Empty(Ok()):
                    raise_empty_repetition("many_till", p)
                case _:
                    return outcome  # type: ignore[return-value]

    return Parser(parse_many_till, f"many_till({p.name})")


# ============================================================================
# OPERATOR CHAINS
# ============================================================================


def _op_operand_pairs[A](
    p: Parser[A], op: Parser[BinaryOp[A]]
) -> Parser[list[tuple[BinaryOp[A], A]]]:
    return many(op.bind(lambda f: p.map(lambda y: (f, y))))


def chainl1[A](p: Parser[A], op: Parser[BinaryOp[A]]) -> Parser[A]:
    """One or more p separated by op, folded left-associatively.

    Example:
        >>> from parseclex.syntax.parser.core import parse
        >>> from parseclex.syntax.parser.primitives import char, digit
        >>> minus = char("-") >> succeed(lambda a, b: a - b)
        >>> parse(chainl1(digit.map(int), minus), "", "9-3-2")
        4
    """
    pairs = _op_operand_pairs(p, op)

    def fold(first: A) -> Parser[A]:
        return pairs.map(lambda rest: reduce(lambda acc, fy: fy[0](acc, fy[1]), rest, first))

    return p.bind(fold)


def chainr1[A](p: Parser[A], op: Parser[BinaryOp[A]]) -> Parser[A]:
    """One or more p separated by op, folded right-associatively."""
    pairs = _op_operand_pairs(p, op)

    def fold(first: A, rest: list[tuple[BinaryOp[A], A]]) -> A:
        if not rest:
            return first
        operands = [first, *(y for _, y in rest)]
        acc = operands[-1]
        for i in range(len(rest) - 1, -1, -1):
            acc = rest[i][0](operands[i], acc)
        return acc

    return p.bind(lambda first: pairs.map(lambda rest: fold(first, rest)))


def chainl[A](p: Parser[A], op: Parser[BinaryOp[A]], default: A) -> Parser[A]:
    return chainl1(p, op) | succeed(default)


def chainr[A](p: Parser[A], op: Parser[BinaryOp[A]], default: A) -> Parser[A]:
    return chainr1(p, op) | succeed(default)


# ============================================================================
# LOOK-AHEAD
# ============================================================================


any_token: Parser[Any] = token_prim(show_token, lambda pos, _tok, _rest: pos, lambda tok: tok)
"""Any single token. Position does not advance (tokens carry no layout)."""


def not_followed_by(p: Parser[Any]) -> Parser[None]:
    """Succeed, consuming nothing, only when p does not match here.

    Example:
        >>> from parseclex.syntax.parser.core import parse
        >>> from parseclex.syntax.parser.primitives import alpha_num, string
        >>> keyword = string("let") << not_followed_by(alpha_num)
        >>> print(parse(keyword, "", "letter"))
        (line 1, column 4): unexpected "t"
    """
    return attempt(attempt(p).bind(lambda c: unexpected(show_token(c))) | succeed(None))


eof: Parser[None] = label(not_followed_by(any_token), "end of input")


def look_ahead[A](p: Parser[A]) -> Parser[A]:
    """Run p and return its value without consuming input.

    Failures are passed through unchanged.
    """
    run = p._fn

    def parse_look_ahead(state: State) -> Outcome[A]:
        match outcome := run(state):
            case Consumed(Ok(value, _, _)) | Empty(Ok(value, _, _)):
                return Empty(Ok(value, state, ParseError.unknown(state.pos)))
            case _:
                return outcome

    return Parser(parse_look_ahead, f"look_ahead({p.name})")
