"""Tests for syntax/error.py: ParseError values, merging and rendering.

Python 3.13+.
"""

from __future__ import annotations

from hypothesis import given

from parseclex.diagnostics import DiagnosticCode, ParsecLexError
from parseclex.enums import MessageKind
from parseclex.syntax.error import (
    Message,
    ParseError,
    ParseFailedError,
    merge_error,
    show_token,
)
from parseclex.syntax.position import SourcePos
from tests.strategies import parse_errors, source_positions

P1 = SourcePos("", 1, 1)
P2 = SourcePos("", 1, 5)
P3 = SourcePos("", 2, 1)


def _expect(text: str, pos: SourcePos = P1) -> ParseError:
    return ParseError.from_message(MessageKind.EXPECT, text, pos)


# ============================================================================
# SHOW TOKEN
# ============================================================================


class TestShowToken:
    """Rendering of tokens inside messages."""

    def test_string_is_double_quoted(self) -> None:
        """Strings are quoted."""
        assert show_token("a") == '"a"'

    def test_control_characters_are_escaped(self) -> None:
        """Newline is shown as an escape."""
        assert show_token("\n") == '"\\n"'

    def test_non_ascii_kept(self) -> None:
        """Non-ASCII text is shown as is."""
        assert show_token("é") == '"é"'

    def test_non_string_uses_repr(self) -> None:
        """Other tokens use repr()."""
        assert show_token(42) == "42"
        assert show_token(("kw", "let")) == "('kw', 'let')"


# ============================================================================
# CONSTRUCTION AND MODIFICATION
# ============================================================================


class TestParseErrorConstruction:
    """from_message, unknown, add_message, set_message, set_expected."""

    def test_unknown_has_no_messages(self) -> None:
        """The unknown error carries a position only."""
        err = ParseError.unknown(P2)
        assert err.is_unknown
        assert err.pos == P2
        assert err.messages == ()

    def test_from_message(self) -> None:
        """from_message builds a one-fragment error."""
        err = ParseError.from_message(MessageKind.MESSAGE, "boom", P1)
        assert err.messages == (Message(MessageKind.MESSAGE, "boom"),)
        assert not err.is_unknown

    def test_add_message_deduplicates(self) -> None:
        """Adding a fragment twice keeps one copy."""
        err = _expect("digit").add_message(Message(MessageKind.EXPECT, "digit"))
        assert err.texts(MessageKind.EXPECT) == ("digit",)

    def test_add_message_keeps_order(self) -> None:
        """Fragments keep insertion order."""
        err = _expect("digit").add_message(Message(MessageKind.EXPECT, "letter"))
        assert err.texts(MessageKind.EXPECT) == ("digit", "letter")

    def test_set_message_replaces_same_kind(self) -> None:
        """set_message replaces every fragment of the kind."""
        err = (
            _expect("digit")
            .add_message(Message(MessageKind.EXPECT, "letter"))
            .add_message(Message(MessageKind.MESSAGE, "boom"))
            .set_message(Message(MessageKind.EXPECT, "number"))
        )
        assert err.texts(MessageKind.EXPECT) == ("number",)
        assert err.texts(MessageKind.MESSAGE) == ("boom",)

    def test_set_expected_replaces_expectations(self) -> None:
        """set_expected drops old EXPECT fragments only."""
        err = (
            ParseError.from_message(MessageKind.SYS_UNEXPECT, '"x"', P1)
            .add_message(Message(MessageKind.EXPECT, "digit"))
            .set_expected(["number", "name"])
        )
        assert err.expected == ("number", "name")
        assert err.texts(MessageKind.SYS_UNEXPECT) == ('"x"',)

    def test_set_expected_empty_hides(self) -> None:
        """An empty label list leaves one hidden expectation."""
        err = _expect("digit").set_expected([])
        assert err.texts(MessageKind.EXPECT) == ("",)
        assert err.expected == ()

    def test_with_position(self) -> None:
        """with_position keeps the fragments."""
        err = _expect("digit").with_position(P3)
        assert err.pos == P3
        assert err.expected == ("digit",)

    def test_sorted_messages_groups_by_kind(self) -> None:
        """sorted_messages orders by kind declaration order."""
        err = (
            ParseError.from_message(MessageKind.MESSAGE, "m", P1)
            .add_message(Message(MessageKind.EXPECT, "e"))
            .add_message(Message(MessageKind.SYS_UNEXPECT, "s"))
        )
        kinds = [m.kind for m in err.sorted_messages()]
        assert kinds == [MessageKind.SYS_UNEXPECT, MessageKind.EXPECT, MessageKind.MESSAGE]


# ============================================================================
# MERGING
# ============================================================================


class TestMergeError:
    """merge_error rules."""

    def test_same_position_unions_expectations(self) -> None:
        """Equal positions union fragments, first error first."""
        merged = merge_error(_expect("digit"), _expect("letter"))
        assert merged.expected == ("digit", "letter")
        assert merged.pos == P1

    def test_later_position_wins(self) -> None:
        """The error further along wins outright."""
        early = _expect("digit", P1)
        late = _expect("letter", P2)
        assert merge_error(early, late) == late
        assert merge_error(late, early) == late

    def test_later_line_beats_larger_column(self) -> None:
        """Positions compare by line before column."""
        err_line1 = _expect("a", SourcePos("", 1, 90))
        err_line2 = _expect("b", P3)
        assert merge_error(err_line1, err_line2) == err_line2

    def test_unknown_first_yields_second(self) -> None:
        """An unknown first error is dropped, even at a later position."""
        unknown = ParseError.unknown(P3)
        known = _expect("digit", P1)
        assert merge_error(unknown, known) == known

    def test_unknown_second_yields_first(self) -> None:
        """An unknown second error is dropped, even at a later position."""
        known = _expect("digit", P1)
        assert merge_error(known, ParseError.unknown(P3)) == known

    def test_both_unknown_yields_second(self) -> None:
        """Two unknown errors merge to the second."""
        e1, e2 = ParseError.unknown(P1), ParseError.unknown(P2)
        assert merge_error(e1, e2) is e2

    def test_duplicates_dropped(self) -> None:
        """Shared fragments appear once."""
        merged = merge_error(_expect("digit"), _expect("digit"))
        assert merged.texts(MessageKind.EXPECT) == ("digit",)

    def test_merge_method(self) -> None:
        """ParseError.merge delegates to merge_error."""
        assert _expect("a").merge(_expect("b")).expected == ("a", "b")


class TestMergeProperties:
    """Algebraic properties of merge_error."""

    @given(e1=parse_errors(), e2=parse_errors())
    def test_result_is_one_of_or_union(self, e1: ParseError, e2: ParseError) -> None:
        """PROPERTY: merge keeps the position of one input."""
        merged = merge_error(e1, e2)
        assert merged.pos in (e1.pos, e2.pos)

    @given(e1=parse_errors(), e2=parse_errors())
    def test_position_is_maximal_when_both_known(self, e1: ParseError, e2: ParseError) -> None:
        """PROPERTY: with two known errors the later position survives."""
        if e1.is_unknown or e2.is_unknown:
            return
        assert merge_error(e1, e2).pos == max(e1.pos, e2.pos)

    @given(pos=source_positions(name=""), data=parse_errors(pos=SourcePos("", 3, 3)))
    def test_unknown_is_identity(self, pos: SourcePos, data: ParseError) -> None:
        """PROPERTY: the unknown error is a left and right identity."""
        unknown = ParseError.unknown(pos)
        if data.is_unknown:
            return
        assert merge_error(unknown, data) == data
        assert merge_error(data, unknown) == data

    @given(
        e1=parse_errors(pos=SourcePos("", 2, 2)),
        e2=parse_errors(pos=SourcePos("", 2, 2)),
        e3=parse_errors(pos=SourcePos("", 2, 2)),
    )
    def test_associative_at_one_position(
        self, e1: ParseError, e2: ParseError, e3: ParseError
    ) -> None:
        """PROPERTY: merging at one position is associative."""
        left = merge_error(merge_error(e1, e2), e3)
        right = merge_error(e1, merge_error(e2, e3))
        assert left.messages == right.messages


# ============================================================================
# QUERIES
# ============================================================================


class TestQueries:
    """expected and unexpected accessors."""

    def test_expected_drops_hidden_labels(self) -> None:
        """Empty EXPECT texts are not reported."""
        err = _expect("").add_message(Message(MessageKind.EXPECT, "digit"))
        assert err.expected == ("digit",)

    def test_unexpected_end_of_input(self) -> None:
        """An empty system-unexpected text means end of input."""
        err = ParseError.from_message(MessageKind.SYS_UNEXPECT, "", P1)
        assert err.unexpected == "end of input"

    def test_user_unexpected_hides_system(self) -> None:
        """A user-unexpected fragment wins over the system one."""
        err = ParseError.from_message(MessageKind.SYS_UNEXPECT, '"x"', P1).add_message(
            Message(MessageKind.UNEXPECT, "reserved word")
        )
        assert err.unexpected == "reserved word"

    def test_no_unexpected(self) -> None:
        """Errors without unexpected fragments report None."""
        assert _expect("digit").unexpected is None


# ============================================================================
# RENDERING
# ============================================================================


class TestRendering:
    """message_text, __str__ and format_with_context."""

    def test_unknown_error(self) -> None:
        """No fragments renders as unknown parse error."""
        assert ParseError.unknown(P1).message_text() == "unknown parse error"

    def test_only_hidden_expectation(self) -> None:
        """A hidden label alone renders as unknown parse error."""
        assert _expect("").message_text() == "unknown parse error"

    def test_unexpected_and_expecting(self) -> None:
        """Unexpected and expected sections are comma separated."""
        err = (
            ParseError.from_message(MessageKind.SYS_UNEXPECT, '"x"', SourcePos("calc.txt", 1, 3))
            .add_message(Message(MessageKind.EXPECT, "digit"))
            .add_message(Message(MessageKind.EXPECT, '")"'))
        )
        assert str(err) == '"calc.txt" (line 1, column 3): unexpected "x", expecting digit or ")"'

    def test_three_alternatives(self) -> None:
        """Lists render as a, b or c."""
        err = _expect("a").add_message(Message(MessageKind.EXPECT, "b"))
        err = err.add_message(Message(MessageKind.EXPECT, "c"))
        assert err.message_text() == "expecting a, b or c"

    def test_end_of_input(self) -> None:
        """An empty system-unexpected renders as end of input."""
        err = ParseError.from_message(MessageKind.SYS_UNEXPECT, "", P1).add_message(
            Message(MessageKind.EXPECT, '"b"')
        )
        assert err.message_text() == 'unexpected end of input, expecting "b"'

    def test_system_unexpected_hidden_by_user(self) -> None:
        """Only the user-unexpected text is rendered."""
        err = ParseError.from_message(MessageKind.SYS_UNEXPECT, '"L"', P1).add_message(
            Message(MessageKind.UNEXPECT, 'reserved word "Let"')
        )
        assert err.message_text() == 'unexpected reserved word "Let"'

    def test_free_messages_last(self) -> None:
        """MESSAGE fragments come after expectations."""
        err = ParseError.from_message(MessageKind.MESSAGE, "bad escape", P1).add_message(
            Message(MessageKind.EXPECT, "digit")
        )
        assert err.message_text() == "expecting digit, bad escape"

    def test_format_with_context(self) -> None:
        """Context shows numbered lines and a caret under the column."""
        err = ParseError.from_message(MessageKind.MESSAGE, "bad", SourcePos("", 2, 3))
        assert err.format_with_context("ab\ncd\nef").splitlines() == [
            "(line 2, column 3): bad",
            "",
            "   1 | ab",
            "   2 | cd",
            "     |   ^",
            "   3 | ef",
        ]

    def test_format_with_context_limits_lines(self) -> None:
        """Only context_lines lines around the error are shown."""
        source = "\n".join(f"l{i}" for i in range(1, 11))
        err = ParseError.from_message(MessageKind.MESSAGE, "bad", SourcePos("", 5, 1))
        rendered = err.format_with_context(source, context_lines=1)
        assert "   4 | l4" in rendered
        assert "   6 | l6" in rendered
        assert "l3" not in rendered
        assert "l7" not in rendered

    def test_format_with_context_non_text(self) -> None:
        """Token sequences render without context."""
        err = _expect("digit")
        assert err.format_with_context(("a", "b")) == str(err)


# ============================================================================
# DIAGNOSTICS AND EXCEPTIONS
# ============================================================================


class TestDiagnosticConversion:
    """to_diagnostic and ParseFailedError."""

    def test_parse_failed_diagnostic(self) -> None:
        """A rejected token maps to PARSE_FAILED with location."""
        err = ParseError.from_message(MessageKind.SYS_UNEXPECT, '"x"', SourcePos("f", 2, 4))
        err = err.add_message(Message(MessageKind.EXPECT, "digit"))
        diagnostic = err.to_diagnostic()
        assert diagnostic.code is DiagnosticCode.PARSE_FAILED
        assert diagnostic.span is not None
        assert (diagnostic.span.source_name, diagnostic.span.line, diagnostic.span.column) == (
            "f",
            2,
            4,
        )
        assert diagnostic.expected == ("digit",)
        assert diagnostic.unexpected == '"x"'
        assert diagnostic.message == 'unexpected "x", expecting digit'

    def test_end_of_input_diagnostic(self) -> None:
        """Running out of input maps to UNEXPECTED_END_OF_INPUT."""
        err = ParseError.from_message(MessageKind.SYS_UNEXPECT, "", P1)
        diagnostic = err.to_diagnostic()
        assert diagnostic.code is DiagnosticCode.UNEXPECTED_END_OF_INPUT
        assert diagnostic.hint is not None

    def test_parse_failed_error(self) -> None:
        """ParseFailedError carries the error and its diagnostic."""
        err = _expect("digit")
        exc = ParseFailedError(err)
        assert isinstance(exc, ParsecLexError)
        assert exc.error is err
        assert exc.diagnostic is not None
        assert exc.diagnostic.code is DiagnosticCode.PARSE_FAILED
        assert "error[PARSE_FAILED]: expecting digit" in str(exc)
