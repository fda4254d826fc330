"""Whitespace and comment skipping.

The skipper is specialised once per language definition: a language
without comments never pays for comment-opener attempts.

    white_space ::= (simple_space | line_comment | block_comment)*
    simple_space ::= space+
    line_comment ::= comment_line (any char except "\\n")*
    block_comment ::= comment_start (step)* comment_end

Block comment scanning:
    - The closer is tried before every step
    - Nested: an inner opener raises the nesting depth and a closer lowers
      it; the comment ends when the depth returns to zero
    - Not nested: an inner opener is rejected with unexpected "<opener>",
      positioned at the inner opener
    - Runs of characters outside the delimiters are skipped in one step;
      delimiter characters that do not complete a delimiter are consumed
      one at a time
    - An unterminated comment reports "expecting end of comment"
"""

from typing import Any, assert_never

from parseclex.enums import CommentStyle
from parseclex.syntax.error import merge_error, show_token
from parseclex.syntax.parser import (
    Parser,
    attempt,
    choice,
    get_position,
    label,
    many_till,
    none_of,
    one_of,
    satisfy,
    set_position,
    skip_many,
    skip_many1,
    string,
    unexpected,
)
from parseclex.syntax.state import Consumed, Empty, Fail, Ok, Outcome, State

from .language import LanguageDef

__all__ = [
    "block_comment",
    "line_comment",
    "make_white_space",
    "simple_space",
]

simple_space: Parser[None] = skip_many1(satisfy(str.isspace))


def line_comment(language: LanguageDef) -> Parser[None]:
    """Line comment up to (not including) the newline."""
    return attempt(string(language.comment_line)) >> skip_many(satisfy(lambda c: c != "\n"))


def _reject_opener(opener: str) -> Parser[Any]:
    """Fail, consumed, at an opener found inside a non-nesting comment."""
    shown = show_token(opener)
    return get_position().bind(
        lambda pos: attempt(string(opener)) >> set_position(pos) >> unexpected(shown)
    )


def _nested_comment(opener: Parser[str], close: Parser[str], start_end: str) -> Parser[None]:
    """Nested block comment scanned in one loop with a depth counter.

    Each step yields the change in depth: 1 for an inner opener, 0 for
    anything else. Arbitrarily deep nesting uses constant stack.
    """
    step = label(
        choice(
            [
                opener.map(lambda _: 1),
                skip_many1(none_of(start_end)).map(lambda _: 0),
                one_of(start_end).map(lambda _: 0),
            ]
        ),
        "",
    )

    def parse_nested_comment(state: State) -> Outcome[None]:
        match opener(state):
            case Consumed(Ok(_, st, err)):
                current, pending = st, err
            case failed:
                return failed  # type: ignore[return-value]

        depth = 1
        while True:
            match close(current):
                case Consumed(Ok(_, st, err)):
                    current, pending = st, err
                    depth -= 1
                    if depth == 0:
                        return Consumed(Ok(None, current, pending))
                    continue
                case Empty(Fail(close_err)):
                    pass
                case failed:
                    return failed  # type: ignore[return-value]

            match step(current):
                case Consumed(Ok(delta, st, err)):
                    current, pending = st, err
                    depth += delta
                case Empty(Fail(step_err)):
                    error = merge_error(merge_error(pending, close_err), step_err)
                    return Consumed(Fail(error))
                case failed:
                    return failed  # type: ignore[return-value]

    return Parser(parse_nested_comment, "block_comment")


def block_comment(language: LanguageDef) -> Parser[None]:
    """Block comment, nested or not according to language.nested_comments."""
    start, end = language.comment_start, language.comment_end
    start_end = "".join(dict.fromkeys(start + end))

    opener = attempt(string(start))
    close = label(attempt(string(end)), "end of comment")
    if language.nested_comments:
        return _nested_comment(opener, close, start_end)

    step = label(
        choice([_reject_opener(start), skip_many1(none_of(start_end)), one_of(start_end)]), ""
    )
    return (opener >> many_till(step, close)).map(lambda _: None)


def make_white_space(language: LanguageDef) -> Parser[None]:
    """Skipper for whitespace and the comment kinds language supports.

    Comment-free languages only ever try simple_space.

    Example:
        >>> from parseclex.lexer.language import JAVA_STYLE
        >>> from parseclex.syntax.parser import parse, letter
        >>> ws = make_white_space(JAVA_STYLE)
        >>> parse(ws >> letter, "", "  // note\\n /* block */ x")
        'x'
    """
    match language.comment_style:
        case CommentStyle.NONE:
            alternatives = [simple_space]
        case CommentStyle.LINE:
            alternatives = [simple_space, line_comment(language)]
        case CommentStyle.BLOCK:
            alternatives = [simple_space, block_comment(language)]
        case CommentStyle.BOTH:
            alternatives = [simple_space, line_comment(language), block_comment(language)]
        case _:
            assert_never(language.comment_style)

    return skip_many(label(choice(alternatives), ""))
