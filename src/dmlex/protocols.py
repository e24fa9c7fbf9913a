"""Protocols for dmlex.

Defines the contract between the lexer and the character stream it pulls
from.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class CharSource(Protocol):
    """Pull interface the lexer reads characters from.

    Any text-mode file object or ``io.StringIO`` satisfies it.

    Contract:
        ``read(size)`` blocks until at least one character is available and
        returns between one and ``size`` characters. It returns ``""`` at
        end of stream. Returning ``None`` (no characters and no end of
        stream) is a protocol violation the lexer reports as fatal.
        Exceptions raised by ``read`` propagate to the caller of the lexer.

    Thread Safety:
        The lexer calls ``read`` from the thread that drives it. Sources
        need not be thread-safe.

    """

    def read(self, size: int, /) -> str | None:
        """Read up to ``size`` characters."""
        ...
