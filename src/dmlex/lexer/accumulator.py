"""Accumulator for literals spanning several rule matches.

Comments and quoted literals are matched piecewise while the lexer sits in a
sub-state. The accumulator collects the pieces until the closing match, and
remembers where the construct started so the final token is located there.
"""

from __future__ import annotations

from dmlex.stringbuilder import StringBuilder


class Accumulator:
    """Decoded value and raw source text of an open construct.

    The two differ where the decoded value skips or collapses source text:
    doubled quotes and string continuation whitespace.

    """

    __slots__ = ("value", "raw", "active", "offset", "lineno", "col")

    def __init__(self) -> None:
        self.value = StringBuilder()
        self.raw = StringBuilder()
        self.active = False
        self.offset = 0
        self.lineno = 1
        self.col = 1

    def begin(self, offset: int, lineno: int, col: int) -> None:
        """Discard any previous content and open a construct at a location."""
        self.value.clear()
        self.raw.clear()
        self.active = True
        self.offset = offset
        self.lineno = lineno
        self.col = col

    def append(self, raw: str, value: str | None = None) -> None:
        """Append a match; ``value`` defaults to the raw text."""
        self.raw.append(raw)
        self.value.append(raw if value is None else value)

    def append_raw(self, raw: str) -> None:
        """Append source text that contributes nothing to the value."""
        self.raw.append(raw)

    def clear(self) -> None:
        self.value.clear()
        self.raw.clear()
        self.active = False
