"""Tests for lexer/language.py: LanguageDef validation and presets.

Python 3.13+.
"""

from __future__ import annotations

from typing import get_type_hints

import pytest

from parseclex.diagnostics import DiagnosticCode, LanguageDefinitionError
from parseclex.enums import CommentStyle
from parseclex.lexer import EMPTY_DEF, HASKELL_STYLE, JAVA_STYLE, LanguageDef
from parseclex.syntax.parser import Parser, parse

# ============================================================================
# PRESETS
# ============================================================================


class TestPresets:
    """Bundled language definitions."""

    def test_empty_def(self) -> None:
        """EMPTY_DEF has no comments and is case-sensitive."""
        assert EMPTY_DEF.comment_style is CommentStyle.NONE
        assert EMPTY_DEF.case_sensitive
        assert EMPTY_DEF.reserved_names == ()

    def test_haskell_style(self) -> None:
        """HASKELL_STYLE uses {- -} and --, nested."""
        assert (HASKELL_STYLE.comment_start, HASKELL_STYLE.comment_end) == ("{-", "-}")
        assert HASKELL_STYLE.comment_line == "--"
        assert HASKELL_STYLE.nested_comments
        assert HASKELL_STYLE.comment_style is CommentStyle.BOTH

    def test_java_style(self) -> None:
        """JAVA_STYLE uses /* */ and //, case-insensitive."""
        assert (JAVA_STYLE.comment_start, JAVA_STYLE.comment_end) == ("/*", "*/")
        assert JAVA_STYLE.comment_line == "//"
        assert not JAVA_STYLE.case_sensitive

    def test_default_identifier_classes(self) -> None:
        """Default identifiers start with a letter or underscore."""
        assert parse(EMPTY_DEF.ident_start, "", "_") == "_"
        assert parse(EMPTY_DEF.ident_letter, "", "'") == "'"
        assert parse(EMPTY_DEF.op_start, "", "+") == "+"

    def test_preset_identifier_start_is_letter(self) -> None:
        """The comment-bearing presets start identifiers with letters only."""
        assert parse(JAVA_STYLE.ident_start, "", "a") == "a"
        assert not isinstance(parse(JAVA_STYLE.ident_start, "", "_"), str)


# ============================================================================
# VALIDATION
# ============================================================================


class TestValidation:
    """__post_init__ checks."""

    def test_reserved_names_normalised_to_tuple(self) -> None:
        """Lists are stored as tuples."""
        lang = LanguageDef(reserved_names=["let", "in"])  # type: ignore[arg-type]
        assert lang.reserved_names == ("let", "in")

    def test_comment_start_without_end(self) -> None:
        """Block delimiters must come in pairs."""
        with pytest.raises(LanguageDefinitionError) as exc_info:
            LanguageDef(comment_start="/*")
        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code is DiagnosticCode.INVALID_LANGUAGE_DEF
        assert "comment_start" in str(exc_info.value)

    def test_comment_end_without_start(self) -> None:
        """The closer alone is rejected as well."""
        with pytest.raises(LanguageDefinitionError, match="comment_end"):
            LanguageDef(comment_end="*/")

    def test_is_value_error(self) -> None:
        """Configuration errors are ValueErrors."""
        with pytest.raises(ValueError, match="set together"):
            LanguageDef(comment_end="*/")

    def test_reserved_names_as_string_rejected(self) -> None:
        """A bare string is not a collection of names."""
        with pytest.raises(LanguageDefinitionError, match="reserved_names"):
            LanguageDef(reserved_names="let")  # type: ignore[arg-type]

    def test_empty_reserved_name_rejected(self) -> None:
        """Reserved names must be non-empty."""
        with pytest.raises(LanguageDefinitionError, match="non-empty"):
            LanguageDef(reserved_op_names=("=", ""))

    def test_non_string_comment_rejected(self) -> None:
        """Comment delimiters must be strings."""
        with pytest.raises(LanguageDefinitionError, match="comment_line"):
            LanguageDef(comment_line=None)  # type: ignore[arg-type]

    @pytest.mark.parametrize(
        ("line", "start", "end", "style"),
        [
            ("", "", "", CommentStyle.NONE),
            ("#", "", "", CommentStyle.LINE),
            ("", "(*", "*)", CommentStyle.BLOCK),
            ("--", "{-", "-}", CommentStyle.BOTH),
        ],
    )
    def test_comment_style(self, line: str, start: str, end: str, style: CommentStyle) -> None:
        """comment_style reflects which delimiters are set."""
        lang = LanguageDef(comment_line=line, comment_start=start, comment_end=end)
        assert lang.comment_style is style


# ============================================================================
# REPLACE
# ============================================================================


class TestReplace:
    """LanguageDef.replace."""

    def test_replace_returns_copy(self) -> None:
        """The preset is unchanged."""
        calc = JAVA_STYLE.replace(reserved_names=("let", "in"))
        assert calc.reserved_names == ("let", "in")
        assert JAVA_STYLE.reserved_names == ()
        assert calc.comment_start == "/*"

    def test_replace_validates(self) -> None:
        """The copy is validated."""
        with pytest.raises(LanguageDefinitionError):
            EMPTY_DEF.replace(comment_start="/*")

    def test_replace_unknown_field(self) -> None:
        """Unknown fields are a TypeError."""
        with pytest.raises(TypeError, match="commentStart"):
            EMPTY_DEF.replace(commentStart="/*")

    def test_replace_logs_fields(self, parseclex_logs: pytest.LogCaptureFixture) -> None:
        """Overrides are logged at debug level."""
        EMPTY_DEF.replace(case_sensitive=False, comment_line="#")
        assert "case_sensitive, comment_line" in parseclex_logs.text

    def test_frozen(self) -> None:
        """LanguageDef cannot be mutated."""
        with pytest.raises(AttributeError):
            EMPTY_DEF.comment_line = "#"  # type: ignore[misc]

    def test_annotations_resolve(self) -> None:
        """Field and method annotations evaluate to real types."""
        hints = get_type_hints(LanguageDef)
        assert hints["ident_start"] == Parser[str]
        assert hints["reserved_names"] == tuple[str, ...]
        assert get_type_hints(LanguageDef.replace)["return"] is LanguageDef
