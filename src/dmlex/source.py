"""Character source adapters.

The lexer only needs an object with ``read(size)``. These adapters turn the
common inputs (a string, an iterator of chunks or single characters) into
one.

Example:
    >>> from dmlex.source import as_source
    >>> src = as_source(iter(["sel", "ect", " 1"]))
    >>> src.read(4)
    'sel'
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from dmlex.protocols import CharSource


class StringSource:
    """Serve characters from an in-memory string."""

    __slots__ = ("_text", "_pos")

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def read(self, size: int, /) -> str:
        start = self._pos
        self._pos = min(start + size, len(self._text))
        return self._text[start : self._pos]

    def __repr__(self) -> str:
        return f"StringSource(pos={self._pos}, length={len(self._text)})"


class IterableSource:
    """Pull string chunks from an iterable.

    Chunks may be any length, including one character at a time. A read
    returns at most the remainder of the current chunk, so the lexer never
    blocks waiting for more data than one chunk. Empty chunks are skipped.

    """

    __slots__ = ("_chunks", "_pending", "_exhausted")

    def __init__(self, chunks: Iterable[str]) -> None:
        self._chunks: Iterator[str] = iter(chunks)
        self._pending = ""
        self._exhausted = False

    def read(self, size: int, /) -> str:
        while not self._pending:
            if self._exhausted:
                return ""
            try:
                self._pending = next(self._chunks)
            except StopIteration:
                self._exhausted = True
                return ""
        chunk, self._pending = self._pending[:size], self._pending[size:]
        return chunk

    def close(self) -> None:
        """Close the underlying iterator if it is a generator."""
        close = getattr(self._chunks, "close", None)
        if close is not None:
            close()
        self._pending = ""
        self._exhausted = True


def as_source(source: str | CharSource | Iterable[str]) -> CharSource:
    """Adapt ``source`` to the CharSource protocol.

    Args:
        source: A string, an object with ``read(size)``, or an iterable of
            string chunks

    Returns:
        An object implementing CharSource

    Raises:
        TypeError: If ``source`` is none of the accepted shapes
    """
    if isinstance(source, str):
        return StringSource(source)
    if isinstance(source, CharSource):
        return source
    if isinstance(source, Iterable):
        return IterableSource(source)
    raise TypeError(f"cannot read characters from {type(source).__name__}")


__all__ = ["IterableSource", "StringSource", "as_source"]
