"""Input buffer and refill engine.

Holds a window of characters pulled from a CharSource. Three cursors index
into the window:

- ``start``: first character of the current match
- ``marked``: end of the longest accepted match so far
- ``pos``: next character the DFA will read (may run ahead of ``marked``)

Invariant: ``start <= marked <= pos <= len(window)``.

When the DFA needs a character past the end of the window, the buffer
refills: characters before ``start`` are discarded, and if the current
match alone fills the window its capacity doubles.

Thread Safety:
InputBuffer instances are owned by a single lexer.

"""

from __future__ import annotations

from dmlex.errors import PushbackTooLargeError, SourceProtocolError
from dmlex.protocols import CharSource
from dmlex.utils.logger import get_logger

logger = get_logger(__name__)


def _is_high_surrogate(char: str) -> bool:
    return "\ud800" <= char <= "\udbff"


class InputBuffer:
    """Growable character window over a pull-based source.

    Usage:
            >>> from dmlex.source import StringSource
            >>> buf = InputBuffer(StringSource("ab"), capacity=4)
            >>> buf.advance(), buf.advance(), buf.advance()
            ('a', 'b', '')

    """

    __slots__ = (
        "_source",
        "_initial_capacity",
        "_capacity",
        "_window",
        "_base",  # Absolute offset of _window[0]
        "_start",
        "_marked",
        "_pos",
        "_held",  # High surrogate held back from the last full read
        "at_eof",
    )

    def __init__(self, source: CharSource, capacity: int) -> None:
        """Initialize an empty buffer.

        Args:
            source: Character source to pull from
            capacity: Initial window size, in characters (at least 1)
        """
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self._initial_capacity = capacity
        self.reset(source)

    def reset(self, source: CharSource) -> None:
        """Rebind to a new source, discard all buffered characters and
        shrink back to the initial capacity."""
        self._source = source
        self._capacity = self._initial_capacity
        self._window = ""
        self._base = 0
        self._start = 0
        self._marked = 0
        self._pos = 0
        self._held = ""
        self.at_eof = False

    @property
    def source(self) -> CharSource:
        return self._source

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def start_offset(self) -> int:
        """Absolute offset of the current match start."""
        return self._base + self._start

    @property
    def offset(self) -> int:
        """Absolute offset just past the current match."""
        return self._base + self._marked

    @property
    def match_length(self) -> int:
        return self._marked - self._start

    # =========================================================================
    # Matching
    # =========================================================================

    def begin_match(self) -> None:
        """Start a new match where the previous one ended.

        Characters read ahead of the previous match are read again.
        """
        self._start = self._marked
        self._pos = self._marked

    def advance(self) -> str:
        """Consume and return the next character, or "" at end of input."""
        if self._pos >= len(self._window) and not self._refill():
            return ""
        char = self._window[self._pos]
        self._pos += 1
        return char

    def mark_accept(self) -> None:
        """Record everything read so far as the current match."""
        self._marked = self._pos

    def pushback(self, count: int) -> None:
        """Return the last ``count`` characters of the match to the input.

        Raises:
            PushbackTooLargeError: If ``count`` is negative or exceeds the
                current match length
        """
        available = self._marked - self._start
        if count < 0 or count > available:
            raise PushbackTooLargeError(count, available)
        self._marked -= count
        self._pos = self._marked

    def text(self) -> str:
        """Text of the current match."""
        return self._window[self._start : self._marked]

    def text_since(self, offset: int) -> str:
        """Text from absolute ``offset`` up to the end of the current match.

        Raises:
            ValueError: If characters at ``offset`` were already discarded
        """
        index = offset - self._base
        if index < 0 or index > self._start:
            raise ValueError(f"offset {offset} is outside the buffered window")
        return self._window[index : self._marked]

    def current_char(self) -> str:
        """Character just after the current match, without consuming it.

        Refills if needed. Returns "" at end of input.
        """
        while self._marked >= len(self._window):
            if not self._refill():
                return ""
        return self._window[self._marked]

    def close(self) -> None:
        """Drop unread characters and behave as if the source ended."""
        self._window = self._window[: self._marked]
        self._pos = min(self._pos, self._marked)
        self._held = ""
        self.at_eof = True

    # =========================================================================
    # Refill
    # =========================================================================

    def _grow(self) -> None:
        self._capacity *= 2
        logger.debug(
            "Grew scan buffer to %d characters at offset %d",
            self._capacity,
            self.start_offset,
        )

    def _refill(self) -> bool:
        """Append characters from the source to the window.

        Returns:
            False if the source is exhausted and nothing was added

        Raises:
            SourceProtocolError: If the source returns None
        """
        if self.at_eof:
            return False

        if self._start:
            self._window = self._window[self._start :]
            self._base += self._start
            self._marked -= self._start
            self._pos -= self._start
            self._start = 0

        pending = self._held
        self._held = ""
        while True:
            wanted = self._capacity - len(self._window) - len(pending)
            if wanted < 1:
                self._grow()
                continue
            chunk = self._source.read(wanted)
            if chunk is None:
                raise SourceProtocolError(
                    "character source returned no data without end of stream",
                    offset=self._base + len(self._window) + len(pending),
                )
            if not chunk:
                self.at_eof = True
                break
            pending += chunk
            if len(chunk) == wanted and _is_high_surrogate(pending[-1]):
                # The low half may arrive with the next read
                if len(pending) == 1:
                    continue
                self._held = pending[-1]
                pending = pending[:-1]
            break

        self._window += pending
        return bool(pending)
