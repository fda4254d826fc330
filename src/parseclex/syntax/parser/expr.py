"""Operator-precedence expression parsers.

build_expression_parser() turns a table of operators into a parser for
expressions over a term parser. Rows are ordered from highest to lowest
precedence; each row may mix prefix, postfix and infix operators.

Example:
    >>> from parseclex.syntax.parser.core import parse
    >>> from parseclex.syntax.parser.primitives import char, digit
    >>> from parseclex.syntax.parser.rules import many1
    >>> def binary(c, f, assoc):
    ...     return Infix(char(c) >> succeed(f), assoc)
    >>> table = [
    ...     [Prefix(char("-") >> succeed(lambda x: -x))],
    ...     [binary("*", lambda a, b: a * b, Assoc.LEFT)],
    ...     [binary("+", lambda a, b: a + b, Assoc.LEFT)],
    ... ]
    >>> number = many1(digit).map(lambda ds: int("".join(ds)))
    >>> parse(build_expression_parser(table, number), "", "2+3*-4")
    -10

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from functools import reduce
from typing import Any, assert_never

from parseclex.enums import Assoc

from .core import Parser, attempt, fail, label, many, succeed
from .rules import choice

__all__ = [
    "Assoc",
    "Infix",
    "Operator",
    "OperatorTable",
    "Postfix",
    "Prefix",
    "build_expression_parser",
]


@dataclass(frozen=True, slots=True)
class Infix:
    """Binary operator; parser yields the function combining both operands."""

    parser: Parser[Callable[[Any, Any], Any]]
    assoc: Assoc


@dataclass(frozen=True, slots=True)
class Prefix:
    """Unary operator before the operand."""

    parser: Parser[Callable[[Any], Any]]


@dataclass(frozen=True, slots=True)
class Postfix:
    """Unary operator after the operand."""

    parser: Parser[Callable[[Any], Any]]


type Operator = Infix | Prefix | Postfix
type OperatorTable = Sequence[Sequence[Operator]]


def _identity(x: Any) -> Any:
    return x


def _ambiguous(assoc: Assoc, op: Parser[Any]) -> Parser[Any]:
    return attempt(op >> fail(f"ambiguous use of a {assoc} associative operator"))


def _make_level(term: Parser[Any], ops: Iterable[Operator]) -> Parser[Any]:
    """Parser for one precedence level on top of the next-higher level."""
    rassoc: list[Parser[Any]] = []
    lassoc: list[Parser[Any]] = []
    nassoc: list[Parser[Any]] = []
    prefix: list[Parser[Any]] = []
    postfix: list[Parser[Any]] = []

    for op in ops:
        match op:
            case Infix(parser, Assoc.RIGHT):
                rassoc.append(parser)
            case Infix(parser, Assoc.LEFT):
                lassoc.append(parser)
            case Infix(parser, Assoc.NONE):
                nassoc.append(parser)
            case Prefix(parser):
                prefix.append(parser)
            case Postfix(parser):
                postfix.append(parser)
            case _:
                assert_never(op)  # type: ignore[arg-type]

    rassoc_op = choice(rassoc)
    lassoc_op = choice(lassoc)
    nassoc_op = choice(nassoc)
    prefix_op = label(choice(prefix), "")
    postfix_op = label(choice(postfix), "")

    ambiguous_right = _ambiguous(Assoc.RIGHT, rassoc_op)
    ambiguous_left = _ambiguous(Assoc.LEFT, lassoc_op)
    ambiguous_non = _ambiguous(Assoc.NONE, nassoc_op)

    prefix_p = prefix_op | succeed(_identity)
    postfix_p = postfix_op | succeed(_identity)

    term_p = prefix_p.bind(
        lambda pre: term.bind(lambda x: postfix_p.map(lambda post: post(pre(x))))
    )

    def pair(op_p: Parser[Any]) -> Parser[tuple[Any, Any]]:
        return op_p.bind(lambda f: term_p.map(lambda y: (f, y)))

    rassoc_pairs = many(pair(rassoc_op))
    lassoc_pairs = many(pair(lassoc_op))
    rassoc_tail = ambiguous_left | ambiguous_non | succeed(None)
    lassoc_tail = ambiguous_right | ambiguous_non | succeed(None)

    def fold_right(x: Any, first: tuple[Any, Any], rest: list[tuple[Any, Any]]) -> Any:
        pairs = [first, *rest]
        operands = [x, *(y for _, y in pairs)]
        acc = operands[-1]
        for i in range(len(pairs) - 1, -1, -1):
            acc = pairs[i][0](operands[i], acc)
        return acc

    def fold_left(x: Any, first: tuple[Any, Any], rest: list[tuple[Any, Any]]) -> Any:
        return reduce(lambda acc, fy: fy[0](acc, fy[1]), [first, *rest], x)

    def rassoc_p(x: Any) -> Parser[Any]:
        chain = pair(rassoc_op).bind(
            lambda first: rassoc_pairs.map(lambda rest: fold_right(x, first, rest))
        )
        return (chain << rassoc_tail) | ambiguous_left | ambiguous_non

    def lassoc_p(x: Any) -> Parser[Any]:
        chain = pair(lassoc_op).bind(
            lambda first: lassoc_pairs.map(lambda rest: fold_left(x, first, rest))
        )
        return (chain << lassoc_tail) | ambiguous_right | ambiguous_non

    def nassoc_p(x: Any) -> Parser[Any]:
        def finish(fy: tuple[Any, Any]) -> Parser[Any]:
            f, y = fy
            return ambiguous_right | ambiguous_left | ambiguous_non | succeed(f(x, y))

        return pair(nassoc_op).bind(finish)

    def rest_of(x: Any) -> Parser[Any]:
        return label(rassoc_p(x) | lassoc_p(x) | nassoc_p(x) | succeed(x), "operator")

    return term_p.bind(rest_of)


def build_expression_parser(table: OperatorTable, term: Parser[Any]) -> Parser[Any]:
    """Build an expression parser from an operator table.

    Args:
        table: Rows of operators, highest precedence first
        term: Parser for the simplest expressions (literals, parenthesised
            sub-expressions, ...)

    Returns:
        Expression parser. Mixing associativities of one level, e.g. a
        left and a right associative operator of equal precedence, reports
        "ambiguous use of a <assoc> associative operator".
    """
    return reduce(_make_level, table, term)
