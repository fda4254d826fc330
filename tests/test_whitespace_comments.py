"""Tests for lexer/whitespace.py: white space and comment skipping.

Python 3.13+.
"""

from __future__ import annotations

from hypothesis import assume, given
from hypothesis import strategies as st

from parseclex.lexer import EMPTY_DEF, HASKELL_STYLE, LanguageDef, make_token_parser
from parseclex.lexer.whitespace import block_comment, line_comment, make_white_space
from parseclex.syntax.error import ParseError
from parseclex.syntax.parser import char, letter, parse
from parseclex.syntax.position import SourcePos
from tests.helpers.outcomes import assert_consumed_ok, assert_empty_fail, assert_empty_ok, run_on

C_NESTED = LanguageDef(comment_start="/*", comment_end="*/", comment_line="//")
C_FLAT = C_NESTED.replace(nested_comments=False)

# ============================================================================
# PLAIN WHITE SPACE
# ============================================================================


class TestSimpleSpace:
    """Languages without comments."""

    def test_skips_spaces(self) -> None:
        """White space of any kind is skipped."""
        ws = make_white_space(EMPTY_DEF)
        assert parse(ws >> letter, "", " \t\r\n x") == "x"

    def test_no_space_is_empty_success(self) -> None:
        """Nothing to skip is an empty success."""
        value, _ = assert_empty_ok(run_on(make_white_space(EMPTY_DEF), "x"))
        assert value is None

    def test_comment_text_is_not_skipped(self) -> None:
        """Without comment syntax, // is ordinary input."""
        ws = make_white_space(EMPTY_DEF)
        assert isinstance(parse(ws >> letter, "", "// x"), ParseError)

    def test_error_hides_white_space_expectation(self) -> None:
        """The skipper adds no expectation of its own."""
        result = parse(make_white_space(EMPTY_DEF) >> char("x"), "", "y")
        assert isinstance(result, ParseError)
        assert result.expected == ('"x"',)


# ============================================================================
# LINE COMMENTS
# ============================================================================


class TestLineComments:
    """Line comments end at the newline."""

    def test_line_comment(self) -> None:
        """A line comment is skipped to the end of the line."""
        ws = make_white_space(C_NESTED)
        assert parse(ws >> letter, "", "// note\n  x") == "x"

    def test_line_comment_at_end_of_input(self) -> None:
        """A line comment may end the input."""
        _, state = assert_consumed_ok(run_on(make_white_space(C_NESTED), "// note"))
        assert state.is_eof

    def test_line_comment_leaves_newline(self) -> None:
        """line_comment stops before the newline."""
        _, state = assert_consumed_ok(run_on(line_comment(C_NESTED), "// a\nb"))
        assert state.current == "\n"

    def test_line_comment_needs_opener(self) -> None:
        """A lone slash is not a comment and is not consumed."""
        assert_empty_fail(run_on(line_comment(C_NESTED), "/x"))

    def test_haskell_line_comment(self) -> None:
        """HASKELL_STYLE uses --."""
        ws = make_white_space(HASKELL_STYLE)
        assert parse(ws >> letter, "", "-- note\nx") == "x"

    def test_line_only_language(self) -> None:
        """A language with line comments only."""
        shell = LanguageDef(comment_line="#")
        assert parse(make_white_space(shell) >> letter, "", "# a\n# b\nx") == "x"


# ============================================================================
# BLOCK COMMENTS
# ============================================================================


class TestBlockComments:
    """Nested and flat block comments."""

    def test_nested_comment(self) -> None:
        """Nested comments close at the matching delimiter."""
        lexer = make_token_parser(C_NESTED)
        assert parse(lexer.white_space >> lexer.identifier, "", "/* a /* b */ c */ d") == "d"

    def test_flat_comment_rejects_inner_opener(self) -> None:
        """Without nesting an inner opener is reported where it occurs."""
        lexer = make_token_parser(C_FLAT)
        result = parse(lexer.white_space >> lexer.identifier, "", "/* a /* b */ c */ d")
        assert isinstance(result, ParseError)
        assert result.pos == SourcePos("", 1, 6)
        assert result.unexpected == '"/*"'
        assert str(result) == '(line 1, column 6): unexpected "/*"'

    def test_flat_comment(self) -> None:
        """A flat comment without inner openers is skipped."""
        ws = make_white_space(C_FLAT)
        assert parse(ws >> letter, "", "/* a * b / c */ x") == "x"

    def test_unterminated_comment(self) -> None:
        """Running out of input expects the closer."""
        ws = make_white_space(C_NESTED)
        result = parse(ws >> letter, "", "/* abc")
        assert isinstance(result, ParseError)
        assert result.unexpected == "end of input"
        assert "expecting end of comment" in str(result)

    def test_unterminated_nested_comment(self) -> None:
        """An unclosed inner comment is also reported."""
        ws = make_white_space(C_NESTED)
        result = parse(ws >> letter, "", "/* a /* b */")
        assert isinstance(result, ParseError)
        assert "end of comment" in result.expected

    def test_delimiter_characters_inside_comment(self) -> None:
        """Lone delimiter characters do not close the comment."""
        _, state = assert_consumed_ok(run_on(block_comment(C_NESTED), "/* * / ** // */x"))
        assert state.current == "x"

    def test_multiline_comment_positions(self) -> None:
        """Positions follow newlines inside comments."""
        ws = make_white_space(C_NESTED)
        _, state = assert_consumed_ok(run_on(ws, "/* a\n b */\n  x"))
        assert state.pos == SourcePos("", 3, 3)

    def test_haskell_nested(self) -> None:
        """HASKELL_STYLE nests {- -} comments."""
        ws = make_white_space(HASKELL_STYLE)
        assert parse(ws >> letter, "", "{- a {- b -} c -} x") == "x"

    def test_block_only_language(self) -> None:
        """A language with block comments only."""
        pascal = LanguageDef(comment_start="(*", comment_end="*)")
        assert parse(make_white_space(pascal) >> letter, "", "(* a *) x") == "x"

    def test_block_comment_needs_opener(self) -> None:
        """A partial opener is not consumed."""
        assert_empty_fail(run_on(block_comment(C_NESTED), "/x"))

    def test_deeply_nested_comment(self) -> None:
        """Thousands of nesting levels close without exhausting the stack."""
        depth = 5_000
        lexer = make_token_parser(C_NESTED)
        source = "/*" * depth + " x " + "*/" * depth + " d"
        assert parse(lexer.white_space >> lexer.identifier, "", source) == "d"

    def test_deeply_nested_comment_one_closer_short(self) -> None:
        """A deep nest missing its last closer still expects end of comment."""
        depth = 1_000
        ws = make_white_space(C_NESTED)
        result = parse(ws >> letter, "", "/*" * depth + "*/" * (depth - 1))
        assert isinstance(result, ParseError)
        assert result.unexpected == "end of input"
        assert result.pos == SourcePos("", 1, 4 * depth - 1)
        assert "end of comment" in result.expected

    def test_nested_closer_counts_depth(self) -> None:
        """Text after an inner closer stays inside the outer comment."""
        _, state = assert_consumed_ok(
            run_on(block_comment(C_NESTED), "/* /* */ still comment */x")
        )
        assert state.current == "x"


class TestWhiteSpaceProperties:
    """Generated comment bodies."""

    @given(body=st.text(alphabet="ab \n*/", max_size=20))
    def test_flat_comment_body_without_delimiters(self, body: str) -> None:
        """PROPERTY: any body free of delimiters is skipped."""
        assume("/*" not in body and "*/" not in body and not body.endswith("/"))
        ws = make_white_space(C_FLAT)
        assert parse(ws >> char("x"), "", f"/*{body}*/x") == "x"
