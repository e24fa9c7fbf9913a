"""Token and TokenKind definitions for the dmlex scanner.

The lexer produces a stream of Token objects that a driver or parser consumes.
Each Token has a kind, the exact source text it covers, a decoded value, and
a source location.

Thread Safety:
Token is frozen (immutable) and safe to share across threads.
TokenKind is an enum (inherently immutable).

Performance Note:
Token stores raw coordinates and lazily creates SourceLocation on demand.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dmlex.location import SourceLocation


class TokenKind(Enum):
    """Token classifications produced by the lexer.

    The set is deliberately coarse: keywords, identifiers and operators are
    all NORMAL, and the driver decides what they mean.

    """

    NORMAL = auto()  # identifiers, operators, quoted identifiers, b'..' / x'..'
    INT = auto()  # 42
    DECIMAL = auto()  # 4.2
    DOUBLE = auto()  # 4.2e1, 4.2f
    HEX_INT = auto()  # 0x2A
    STRING_LIT = auto()  # 'text', q'[text]'
    WHITESPACE_OR_COMMENT = auto()
    NULL = auto()  # null


@dataclass(frozen=True, slots=True)
class Token:
    """A token produced by the lexer.

    Attributes:
        kind: The token classification
        text: Exact source text covered by the token, delimiters included.
            Concatenating the text of every token reproduces the input.
        value: Decoded value. For STRING_LIT this is the literal contents
            with doubled quotes collapsed; for NULL it is ``"null"``; for
            other kinds it is the accumulated text.
        _lineno: Start line number (1-indexed)
        _col: Start column (1-indexed)
        _start_offset: Absolute start position in the character stream
        _end_offset: Absolute end position in the character stream
        _source_file: Optional source file path

    Thread Safety:
        Frozen dataclass ensures immutability for safe sharing.
        The lazy cache uses idempotent write (safe for concurrent access).

    """

    kind: TokenKind
    text: str
    value: str
    _lineno: int
    _col: int
    _start_offset: int
    _end_offset: int
    _source_file: str | None = None
    _location_cache: SourceLocation | None = field(
        default=None, repr=False, compare=False, hash=False
    )

    @property
    def location(self) -> SourceLocation:
        """Get source location (lazily created and cached).

        Returns:
            SourceLocation object for this token.
        """
        if self._location_cache is not None:
            return self._location_cache

        # Import here to avoid circular import at module load
        from dmlex.location import SourceLocation

        loc = SourceLocation(
            lineno=self._lineno,
            col_offset=self._col,
            offset=self._start_offset,
            end_offset=self._end_offset,
            source_file=self._source_file,
        )
        object.__setattr__(self, "_location_cache", loc)
        return loc

    def __repr__(self) -> str:
        """Compact repr for debugging."""
        text = self.text
        if len(text) > 20:
            text = text[:17] + "..."
        return f"Token({self.kind.name}, {text!r}, {self._lineno}:{self._col})"

    @property
    def lineno(self) -> int:
        """Line number (convenience accessor)."""
        return self._lineno

    @property
    def col(self) -> int:
        """Column offset (convenience accessor)."""
        return self._col

    @property
    def start(self) -> int:
        """Absolute start offset."""
        return self._start_offset

    @property
    def end(self) -> int:
        """Absolute end offset (exclusive)."""
        return self._end_offset

    @property
    def is_trivia(self) -> bool:
        """True for whitespace and comments."""
        return self.kind is TokenKind.WHITESPACE_OR_COMMENT
