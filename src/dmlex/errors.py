"""Exception classes for dmlex.

Provides standardized exceptions for error handling throughout dmlex.
Every scan failure is terminal for the call that raised it: the lexer
performs no internal retry or resynchronization.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dmlex.lexer.states import LexicalState


class DmlexError(Exception):
    """Base exception for all dmlex errors.

    Subclass this for specific error categories.
    """

    pass


class ScanError(DmlexError):
    """Error while scanning SQL text.

    Raised when the lexer cannot produce the next token.
    """

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        col_offset: int | None = None,
        offset: int | None = None,
        source_file: str | None = None,
    ) -> None:
        """Initialize scan error with optional location.

        Args:
            message: Error description
            lineno: Line number where error occurred (1-indexed)
            col_offset: Column offset where error occurred (1-indexed)
            offset: Absolute character offset in the source (0-indexed)
            source_file: Path to source file (optional)
        """
        self.message = message
        self.lineno = lineno
        self.col_offset = col_offset
        self.offset = offset
        self.source_file = source_file

        location = ""
        if source_file:
            location = f"{source_file}:"
        if lineno is not None:
            location += f"{lineno}:"
            if col_offset is not None:
                location += f"{col_offset}:"
        if location:
            location = location.rstrip(":") + ": "

        suffix = f" (offset {offset})" if offset is not None else ""
        super().__init__(f"{location}{message}{suffix}")


class UnterminatedConstructError(ScanError):
    """End of input reached inside a comment, quoted string or identifier.

    The ``kind`` attribute names the lexical sub-state that was still open.
    """

    def __init__(
        self,
        kind: LexicalState,
        lineno: int | None = None,
        col_offset: int | None = None,
        offset: int | None = None,
        source_file: str | None = None,
    ) -> None:
        self.kind = kind
        super().__init__(
            f"unterminated {kind.description}",
            lineno=lineno,
            col_offset=col_offset,
            offset=offset,
            source_file=source_file,
        )


class NoMatchError(ScanError):
    """No rule of the active lexical state matches the input."""

    def __init__(
        self,
        lineno: int | None = None,
        col_offset: int | None = None,
        offset: int | None = None,
        source_file: str | None = None,
    ) -> None:
        super().__init__(
            "could not match input",
            lineno=lineno,
            col_offset=col_offset,
            offset=offset,
            source_file=source_file,
        )


class PushbackTooLargeError(ScanError):
    """Caller tried to push back more characters than the last match holds.

    This indicates a logic defect in the caller, not bad input.
    """

    def __init__(self, requested: int, available: int) -> None:
        self.requested = requested
        self.available = available
        super().__init__(
            f"pushback of {requested} characters exceeds match length {available}"
        )


class SourceProtocolError(ScanError):
    """The character source violated its read contract.

    Raised when a read yields no characters without signalling end of stream.
    """

    pass


class PatternError(DmlexError):
    """Malformed pattern in the scanner rule set.

    Raised while compiling scanner tables, never while scanning.
    """

    def __init__(self, pattern: str, position: int, message: str) -> None:
        """Initialize pattern error.

        Args:
            pattern: The offending pattern text
            position: Index into the pattern where the problem was found
            message: Description of the problem
        """
        self.pattern = pattern
        self.position = position
        super().__init__(f"{message} at position {position} in {pattern!r}")
