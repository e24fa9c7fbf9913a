"""Table-driven DFA lexer for DM SQL.

Pulls characters from a CharSource through a growable buffer and runs the
precompiled scanner DFA over them. Matching is maximal munch: the DFA runs
until it has no transition, then the longest accepted prefix wins, ties
going to the earliest-declared rule.

The active lexical state selects the DFA entry state. Comments and quoted
literals are scanned as several matches in a sub-state and emitted as one
token when they close.

Thread Safety:
Lexer instances are single-threaded. Create one per source.
The compiled tables are immutable and shared by all instances.

"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from dmlex.config import ScanConfig, get_scan_config
from dmlex.errors import NoMatchError, UnterminatedConstructError
from dmlex.lexer.accumulator import Accumulator
from dmlex.lexer.actions import ActionsMixin
from dmlex.lexer.automaton import NO_STATE
from dmlex.lexer.buffer import InputBuffer
from dmlex.lexer.states import DEFAULT_CUSTOM_CLOSER, LexicalState
from dmlex.lexer.tables import (
    ATTR_ACCEPTING,
    ATTR_NO_LOOKAHEAD,
    ScannerTables,
    default_tables,
)
from dmlex.lexer.tracker import LocationTracker
from dmlex.location import SourceLocation
from dmlex.protocols import CharSource
from dmlex.source import as_source
from dmlex.tokens import Token, TokenKind
from dmlex.utils.logger import get_logger

logger = get_logger(__name__)


class Lexer(ActionsMixin):
    """Streaming DM SQL lexer.

    Usage:
            >>> lexer = Lexer("select 'it''s' from t")
            >>> for token in lexer.tokenize():
            ...     print(token)
        Token(NORMAL, 'select', 1:1)
        Token(WHITESPACE_OR_COMMENT, ' ', 1:7)
        Token(STRING_LIT, "'it''s'", 1:8)
        Token(WHITESPACE_OR_COMMENT, ' ', 1:15)
        Token(NORMAL, 'from', 1:16)
        Token(WHITESPACE_OR_COMMENT, ' ', 1:20)
        Token(NORMAL, 't', 1:21)

    Thread Safety:
        Not safe for concurrent callers. All state is instance-local.

    """

    __slots__ = (
        "_tables",
        "_handlers",  # Bound action per rule index
        "_buffer",
        "_tracker",
        "_acc",
        "_state",
        "_custom_closer",
        "_source_file",
        "_debug",
    )

    def __init__(
        self,
        source: str | CharSource | Iterable[str] = "",
        source_file: str | None = None,
        *,
        config: ScanConfig | None = None,
        tables: ScannerTables | None = None,
    ) -> None:
        """Initialize lexer over a character source.

        Args:
            source: SQL text, an object with ``read(size)``, or an iterable
                of string chunks
            source_file: Optional source file path for error messages
            config: Scan settings; defaults to the active context config
            tables: Compiled scanner tables; defaults to the DM SQL rule set
        """
        config = config if config is not None else get_scan_config()
        self._tables = tables if tables is not None else default_tables()
        self._handlers = tuple(getattr(self, rule.action) for rule in self._tables.rules)
        self._buffer = InputBuffer(as_source(source), config.buffer_size)
        self._tracker = LocationTracker()
        self._acc = Accumulator()
        self._state = LexicalState.INITIAL
        self._custom_closer = DEFAULT_CUSTOM_CLOSER
        self._source_file = source_file
        self._debug = config.debug

    def reset(self, source: str | CharSource | Iterable[str]) -> None:
        """Rebind to a new source and discard all scanning state."""
        self._buffer.reset(as_source(source))
        self._tracker.reset()
        self._acc.clear()
        self._state = LexicalState.INITIAL
        self._custom_closer = DEFAULT_CUSTOM_CLOSER
        logger.debug("Lexer rebound to %s", type(source).__name__)

    def close(self) -> None:
        """Close the source (if it can be closed) and stop reading from it.

        Later calls to :meth:`next_token` behave as at end of input.
        """
        close = getattr(self._buffer.source, "close", None)
        if close is not None:
            close()
        self._buffer.close()

    # =========================================================================
    # Token stream
    # =========================================================================

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        token = self.next_token()
        if token is None:
            raise StopIteration
        return token

    def tokenize(self) -> Iterator[Token]:
        """Yield tokens until end of input.

        Yields:
            Token objects one at a time, in source order

        Raises:
            ScanError: On unterminated constructs or unmatchable input
        """
        while (token := self.next_token()) is not None:
            yield token

    def next_token(self) -> Token | None:
        """Scan and return the next token.

        Returns:
            The next Token, or None at end of input

        Raises:
            UnterminatedConstructError: Input ended inside a sub-state
            NoMatchError: No rule matches at the current position
            SourceProtocolError: The source broke its read contract
            OSError: Propagated from the source, with a position note
        """
        try:
            return self._scan()
        except OSError as exc:
            exc.add_note(f"while scanning {self._describe_position()}")
            raise

    def _scan(self) -> Token | None:
        tables = self._tables
        buffer = self._buffer
        trans = tables.trans
        row_map = tables.row_map
        attributes = tables.attributes
        actions = tables.actions
        classify = tables.class_map.classify

        while True:
            self._sync_location()
            buffer.begin_match()

            state = tables.entries[self._state]
            best = NO_STATE
            consumed = False
            while True:
                char = buffer.advance()
                if not char:
                    break
                consumed = True
                state = trans[row_map[state] + classify(char)]
                if state == NO_STATE:
                    break
                attr = attributes[state]
                if attr & ATTR_ACCEPTING:
                    best = actions[state]
                    buffer.mark_accept()
                    if attr & ATTR_NO_LOOKAHEAD:
                        break

            if best == NO_STATE:
                if not consumed:
                    return self._end_of_input()
                raise NoMatchError(
                    lineno=self._tracker.lineno,
                    col_offset=self._tracker.col,
                    offset=self._tracker.offset,
                    source_file=self._source_file,
                )

            text = buffer.text()
            if self._debug:
                logger.debug(
                    "%s matched %r at %d:%d",
                    tables.rules[best].name,
                    text,
                    self._tracker.lineno,
                    self._tracker.col,
                )
            token = self._handlers[best](text)
            if token is not None:
                return token

    def _end_of_input(self) -> None:
        if self._state is LexicalState.INITIAL:
            return None
        kind = self._state
        self._state = LexicalState.INITIAL
        self._acc.clear()
        raise UnterminatedConstructError(
            kind,
            lineno=self._tracker.lineno,
            col_offset=self._tracker.col,
            offset=self._tracker.offset,
            source_file=self._source_file,
        )

    def _sync_location(self) -> None:
        """Count lines and columns in the previous match."""
        text = self._buffer.text_since(self._tracker.offset)
        if text:
            next_char = self._buffer.current_char() if text[-1] == "\r" else ""
            self._tracker.consume(text, next_char)

    def _make_token(self, kind: TokenKind, text: str, value: str | None = None) -> Token:
        """Create a Token for the current match."""
        return Token(
            kind=kind,
            text=text,
            value=text if value is None else value,
            _lineno=self._tracker.lineno,
            _col=self._tracker.col,
            _start_offset=self._buffer.start_offset,
            _end_offset=self._buffer.offset,
            _source_file=self._source_file,
        )

    # =========================================================================
    # Pushback and state
    # =========================================================================

    def pushback(self, count: int) -> None:
        """Return the last ``count`` characters of the most recent match.

        They are scanned again by the next call to :meth:`next_token`.

        Raises:
            PushbackTooLargeError: If ``count`` exceeds the match length
        """
        self._buffer.pushback(count)

    @property
    def lexical_state(self) -> LexicalState:
        return self._state

    @lexical_state.setter
    def lexical_state(self, state: LexicalState) -> None:
        """Switch lexical state.

        Switching to INITIAL drops any open construct. Switching straight into
        CUSTOM_QUOTE_BODY assumes the literal was opened with ``[``.
        """
        if state is LexicalState.INITIAL:
            self._acc.clear()
        elif state is LexicalState.CUSTOM_QUOTE_BODY:
            self._custom_closer = DEFAULT_CUSTOM_CLOSER
        self._state = state

    # =========================================================================
    # Location
    # =========================================================================

    @property
    def lineno(self) -> int:
        """Line of the most recent match (1-indexed)."""
        return self._tracker.lineno

    @property
    def col(self) -> int:
        """Column of the most recent match (1-indexed)."""
        return self._tracker.col

    @property
    def offset(self) -> int:
        """Absolute offset of the most recent match (0-indexed)."""
        return self._tracker.offset

    @property
    def location(self) -> SourceLocation:
        """Location spanning the most recent match."""
        return SourceLocation(
            lineno=self._tracker.lineno,
            col_offset=self._tracker.col,
            offset=self._tracker.offset,
            end_offset=self._buffer.offset,
            source_file=self._source_file,
        )

    @property
    def matched_text(self) -> str:
        """Text of the most recent match."""
        return self._buffer.text()

    def _describe_position(self) -> str:
        where = f"{self._source_file}:" if self._source_file else ""
        return (
            f"{where}{self._tracker.lineno}:{self._tracker.col} "
            f"(offset {self._tracker.offset}, state {self._state.name})"
        )
