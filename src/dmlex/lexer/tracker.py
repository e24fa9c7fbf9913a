"""Line, column and offset tracking.

Counts are updated lazily, one consumed segment (the previous match) at a
time, rather than per character read by the DFA.
"""

from __future__ import annotations

# CR, LF, VT, FF, NEL, LS, PS. CR LF together is one break.
LINE_BREAKS = frozenset("\r\n\x0b\x0c\x85\u2028\u2029")


class LocationTracker:
    """Running position of the next unconsumed character.

    Lines and columns are 1-indexed; offsets are 0-indexed.

    """

    __slots__ = ("lineno", "col", "offset")

    def __init__(self) -> None:
        self.lineno = 1
        self.col = 1
        self.offset = 0

    def reset(self) -> None:
        self.lineno = 1
        self.col = 1
        self.offset = 0

    def consume(self, text: str, next_char: str = "") -> None:
        """Advance past ``text``.

        Args:
            text: The consumed segment
            next_char: Character following the segment ("" at end of
                input), needed when the segment ends with CR
        """
        if not text:
            return
        self.offset += len(text)

        last_break = -1
        for index, char in enumerate(text):
            if char in LINE_BREAKS:
                # CR before LF is an ordinary character; the LF breaks
                if char == "\r" and (text[index + 1 : index + 2] or next_char) == "\n":
                    continue
                self.lineno += 1
                last_break = index

        if last_break < 0:
            self.col += len(text)
        else:
            self.col = len(text) - last_break  # chars after last break + 1

    def __repr__(self) -> str:
        return f"LocationTracker({self.lineno}:{self.col} @{self.offset})"
