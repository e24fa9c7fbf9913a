"""Pushback of over-consumed characters."""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from dmlex.errors import PushbackTooLargeError
from dmlex.lexer import Lexer
from dmlex.tokens import TokenKind


class TestPushback:
    def test_pushback_rescans_suffix(self) -> None:
        lexer = Lexer("select")
        assert lexer.next_token().text == "select"
        lexer.pushback(3)
        rescanned = lexer.next_token()
        assert rescanned.text == "ect"
        assert (rescanned.col, rescanned.start) == (4, 3)

    def test_pushback_zero_is_noop(self) -> None:
        lexer = Lexer("a b")
        lexer.next_token()
        lexer.pushback(0)
        assert [t.text for t in lexer] == [" ", "b"]

    def test_pushback_whole_match(self) -> None:
        lexer = Lexer("42")
        first = lexer.next_token()
        lexer.pushback(2)
        assert lexer.next_token() == first

    def test_pushback_too_large(self) -> None:
        lexer = Lexer("ab")
        lexer.next_token()
        with pytest.raises(PushbackTooLargeError) as exc_info:
            lexer.pushback(3)
        assert (exc_info.value.requested, exc_info.value.available) == (3, 2)

    def test_negative_pushback_rejected(self) -> None:
        lexer = Lexer("ab")
        lexer.next_token()
        with pytest.raises(PushbackTooLargeError):
            lexer.pushback(-1)

    def test_pushback_before_any_match(self) -> None:
        with pytest.raises(PushbackTooLargeError):
            Lexer("ab").pushback(1)

    def test_pushback_limited_to_closing_match(self) -> None:
        # An accumulated literal's last match is its closing quote
        lexer = Lexer("'abc'")
        assert lexer.next_token().kind is TokenKind.STRING_LIT
        with pytest.raises(PushbackTooLargeError):
            lexer.pushback(2)


class TestKeywordBoundaries:
    """IS [NOT] NULL is cut back to IS before an identifier character."""

    @pytest.mark.parametrize(
        "source",
        ["is null", "IS NULL", "is  not\tnull", "Is\nNot\nNull"],
    )
    def test_single_token(self, source: str) -> None:
        tokens = list(Lexer(source))
        assert [(t.kind, t.text) for t in tokens] == [(TokenKind.NORMAL, source)]

    def test_followed_by_space(self) -> None:
        assert [t.text for t in Lexer("x is not null and")] == [
            "x", " ", "is not null", " ", "and",
        ]

    @pytest.mark.parametrize(
        ("source", "texts"),
        [
            ("is nullable", ["is", " ", "nullable"]),
            ("is not nullx", ["is", " ", "not", " ", "nullx"]),
            ("is null1", ["is", " ", "null1"]),
        ],
    )
    def test_cut_back_before_identifier(self, source: str, texts: list[str]) -> None:
        assert [t.text for t in Lexer(source)] == texts

    def test_is_null_operator_follows(self) -> None:
        assert [t.text for t in Lexer("is null)")] == ["is null", ")"]

    def test_select_star(self) -> None:
        assert [t.text for t in Lexer("SELECT  * from t")][0] == "SELECT  *"

    def test_select_without_star(self) -> None:
        assert [t.text for t in Lexer("select a")][0] == "select"


@given(
    st.sampled_from(["select", "1..2", "x := 1", "0x1F", "-- c\n  y", "is nullable"]),
    st.data(),
)
@settings(max_examples=100)
def test_pushback_then_rescan_reconstructs(source: str, data: st.DataObject) -> None:
    """Pushing back k characters and rescanning yields the same text."""
    lexer = Lexer(source)
    first = lexer.next_token()
    assert first is not None
    k = data.draw(st.integers(min_value=0, max_value=len(lexer.matched_text)))
    lexer.pushback(k)
    kept = first.text[: len(first.text) - k]
    rest = "".join(t.text for t in lexer)
    assert kept + rest == source
