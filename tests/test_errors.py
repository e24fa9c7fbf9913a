"""Error construction, formatting and hierarchy."""

import pytest

from dmlex import (
    DmlexError,
    LexicalState,
    NoMatchError,
    PatternError,
    PushbackTooLargeError,
    ScanError,
    SourceProtocolError,
    UnterminatedConstructError,
)

# =========================================================================
# ScanError construction and formatting
# =========================================================================


class TestScanErrorFormatting:
    """Verify ScanError produces well-formatted messages."""

    def test_message_only(self) -> None:
        err = ScanError("bad input")
        assert str(err) == "bad input"
        assert err.lineno is None
        assert err.col_offset is None
        assert err.offset is None

    def test_with_line_and_column(self) -> None:
        err = ScanError("bad input", lineno=10, col_offset=5)
        assert str(err) == "10:5: bad input"

    def test_with_offset(self) -> None:
        err = ScanError("bad input", lineno=2, col_offset=3, offset=17)
        assert str(err) == "2:3: bad input (offset 17)"

    def test_with_source_file(self) -> None:
        err = ScanError("bad input", lineno=1, col_offset=1, source_file="schema.sql")
        assert str(err) == "schema.sql:1:1: bad input"

    def test_is_dmlex_error(self) -> None:
        assert isinstance(ScanError("x"), DmlexError)


class TestScanErrorSubclasses:
    """Specific scan failures carry their own context."""

    def test_unterminated_names_construct(self) -> None:
        err = UnterminatedConstructError(
            LexicalState.QUOTED_STRING, lineno=3, col_offset=9, offset=40
        )
        assert err.kind is LexicalState.QUOTED_STRING
        assert str(err) == "3:9: unterminated quoted string (offset 40)"
        assert isinstance(err, ScanError)

    def test_unterminated_block_comment_message(self) -> None:
        err = UnterminatedConstructError(LexicalState.BLOCK_COMMENT)
        assert err.message == "unterminated /* comment"

    def test_no_match(self) -> None:
        err = NoMatchError(lineno=1, col_offset=4, offset=3)
        assert str(err) == "1:4: could not match input (offset 3)"
        assert isinstance(err, ScanError)

    def test_pushback_too_large(self) -> None:
        err = PushbackTooLargeError(5, 2)
        assert err.requested == 5
        assert err.available == 2
        assert "5" in str(err) and "2" in str(err)
        assert isinstance(err, ScanError)

    def test_source_protocol_is_scan_error(self) -> None:
        assert issubclass(SourceProtocolError, ScanError)


class TestPatternError:
    """PatternError points into the offending pattern."""

    def test_format(self) -> None:
        err = PatternError("[a-", 3, "missing ']'")
        assert err.pattern == "[a-"
        assert err.position == 3
        assert str(err) == "missing ']' at position 3 in '[a-'"

    def test_not_a_scan_error(self) -> None:
        err = PatternError("(", 1, "missing ')'")
        assert isinstance(err, DmlexError)
        assert not isinstance(err, ScanError)


@pytest.mark.parametrize(
    "state",
    [s for s in LexicalState if s is not LexicalState.INITIAL],
)
def test_every_sub_state_has_description(state: LexicalState) -> None:
    err = UnterminatedConstructError(state)
    assert err.message.startswith("unterminated ")
    assert state.description in err.message
