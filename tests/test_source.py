"""Tests for character source adapters."""

import io

import pytest

from dmlex import CharSource, IterableSource, Lexer, StringSource, as_source


class TestStringSource:
    def test_reads_in_slices(self) -> None:
        src = StringSource("select")
        assert src.read(4) == "sele"
        assert src.read(4) == "ct"
        assert src.read(4) == ""

    def test_satisfies_protocol(self) -> None:
        assert isinstance(StringSource(""), CharSource)


class TestIterableSource:
    def test_read_stops_at_chunk_boundary(self) -> None:
        src = IterableSource(["ab", "cde"])
        assert src.read(10) == "ab"
        assert src.read(2) == "cd"
        assert src.read(10) == "e"
        assert src.read(10) == ""

    def test_skips_empty_chunks(self) -> None:
        src = IterableSource(["", "a", "", "", "b"])
        assert src.read(5) == "a"
        assert src.read(5) == "b"
        assert src.read(5) == ""

    def test_single_characters(self) -> None:
        src = IterableSource(iter("xyz"))
        assert [src.read(8) for _ in range(4)] == ["x", "y", "z", ""]

    def test_close_closes_generator(self) -> None:
        closed = []

        def chunks():
            try:
                yield "a"
                yield "b"
            finally:
                closed.append(True)

        src = IterableSource(chunks())
        assert src.read(1) == "a"
        src.close()
        assert closed == [True]
        assert src.read(1) == ""


class TestAsSource:
    def test_string(self) -> None:
        assert isinstance(as_source("x"), StringSource)

    def test_file_like_passes_through(self) -> None:
        stream = io.StringIO("select 1")
        assert as_source(stream) is stream

    def test_iterable(self) -> None:
        assert isinstance(as_source(["a", "b"]), IterableSource)

    def test_rejects_other_types(self) -> None:
        with pytest.raises(TypeError, match="int"):
            as_source(42)  # type: ignore[arg-type]


class TestLexerOverSources:
    """The same text scans identically from every kind of source."""

    SQL = "select a, 'x''y' from t -- done\n"

    def expected(self) -> list[tuple[str, str]]:
        return [(t.kind.name, t.text) for t in Lexer(self.SQL)]

    def test_text_file(self) -> None:
        tokens = [(t.kind.name, t.text) for t in Lexer(io.StringIO(self.SQL))]
        assert tokens == self.expected()

    def test_one_char_chunks(self) -> None:
        tokens = [(t.kind.name, t.text) for t in Lexer(iter(self.SQL))]
        assert tokens == self.expected()

    def test_generator_chunks(self) -> None:
        def chunks():
            yield self.SQL[:9]
            yield self.SQL[9:]

        tokens = [(t.kind.name, t.text) for t in Lexer(chunks())]
        assert tokens == self.expected()

    def test_close_closes_source(self) -> None:
        stream = io.StringIO("select 1")
        lexer = Lexer(stream)
        assert lexer.next_token() is not None
        lexer.close()
        assert stream.closed
        assert lexer.next_token() is None
