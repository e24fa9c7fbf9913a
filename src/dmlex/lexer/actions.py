"""Rule action mixin.

Every rule in :mod:`dmlex.lexer.rules` names one of these methods. An action
receives the matched text and either returns a Token or returns None to keep
scanning (after entering a sub-state or accumulating into the open
construct).

Actions fall into three groups:

- emit: return a token for the match (or the accumulated construct) and
  return to INITIAL
- enter: switch lexical state and open the accumulator
- accumulate: append the match to the accumulator and stay put

"""

from __future__ import annotations

from dmlex.lexer.accumulator import Accumulator
from dmlex.lexer.buffer import InputBuffer
from dmlex.lexer.rules import is_identifier_char
from dmlex.lexer.states import LexicalState, closing_delimiter
from dmlex.lexer.tracker import LocationTracker
from dmlex.tokens import Token, TokenKind


class ActionsMixin:
    """Mixin providing the token-producing rule actions.

    Relies on the Lexer for buffer access and token construction.

    """

    # These will be set by the Lexer class
    _buffer: InputBuffer
    _tracker: LocationTracker
    _acc: Accumulator
    _state: LexicalState
    _custom_closer: str
    _source_file: str | None

    def _make_token(self, kind: TokenKind, text: str, value: str | None = None) -> Token:
        """Create a token for the current match. Implemented by Lexer."""
        raise NotImplementedError

    # =========================================================================
    # Emit
    # =========================================================================

    def _emit_normal(self, text: str) -> Token:
        return self._make_token(TokenKind.NORMAL, text)

    def _emit_whitespace(self, text: str) -> Token:
        return self._make_token(TokenKind.WHITESPACE_OR_COMMENT, text)

    def _emit_int(self, text: str) -> Token:
        return self._make_token(TokenKind.INT, text)

    def _emit_decimal(self, text: str) -> Token:
        return self._make_token(TokenKind.DECIMAL, text)

    def _emit_double(self, text: str) -> Token:
        return self._make_token(TokenKind.DOUBLE, text)

    def _emit_hex_int(self, text: str) -> Token:
        return self._make_token(TokenKind.HEX_INT, text)

    def _emit_null(self, text: str) -> Token:
        return self._make_token(TokenKind.NULL, text, "null")

    def _emit_is_null(self, text: str) -> Token:
        """``IS [NOT] NULL`` as one token, unless NULL is only a prefix.

        ``is nullable`` must scan as ``is``, whitespace, ``nullable``, so the
        match is cut back to ``is`` when an identifier character follows.
        """
        if is_identifier_char(self._buffer.current_char() or " "):
            self._buffer.pushback(len(text) - 2)
            return self._make_token(TokenKind.NORMAL, text[:2])
        return self._make_token(TokenKind.NORMAL, text)

    # =========================================================================
    # Enter sub-state
    # =========================================================================

    def _enter(self, state: LexicalState, text: str, value: str | None = None) -> None:
        tracker = self._tracker
        self._acc.begin(tracker.offset, tracker.lineno, tracker.col)
        self._acc.append(text, value)
        self._state = state

    def _begin_comment(self, text: str) -> None:
        self._enter(LexicalState.BLOCK_COMMENT, text)

    def _begin_hint(self, text: str) -> None:
        self._enter(LexicalState.HINT_COMMENT, text)

    def _begin_string(self, text: str) -> None:
        self._enter(LexicalState.QUOTED_STRING, text, "")

    def _begin_quoted_identifier(self, text: str) -> None:
        self._enter(LexicalState.QUOTED_IDENTIFIER, text)

    def _begin_binary_string(self, text: str) -> None:
        self._enter(LexicalState.BINARY_STRING, text)

    def _begin_hex_string(self, text: str) -> None:
        self._enter(LexicalState.HEX_STRING, text)

    def _begin_custom_quote(self, text: str) -> None:
        """``q'`` plus delimiter: rescan the delimiter in CUSTOM_QUOTE_OPEN."""
        self._buffer.pushback(1)
        self._enter(LexicalState.CUSTOM_QUOTE_OPEN, text[:-1], "")

    def _open_custom_quote(self, text: str) -> None:
        self._ensure_open()
        self._custom_closer = closing_delimiter(text)
        self._acc.append(text, "")
        self._state = LexicalState.CUSTOM_QUOTE_BODY

    # =========================================================================
    # Accumulate
    # =========================================================================

    def _ensure_open(self) -> None:
        # The state may have been set from outside, with no construct open
        if not self._acc.active:
            tracker = self._tracker
            self._acc.begin(tracker.offset, tracker.lineno, tracker.col)

    def _accumulate(self, text: str) -> None:
        self._ensure_open()
        self._acc.append(text)

    def _accumulate_quote(self, text: str) -> None:
        """Doubled quote inside a string: one literal quote."""
        self._ensure_open()
        self._acc.append(text, "'")

    def _accumulate_raw(self, text: str) -> None:
        """String continuation: source text only, no value."""
        self._ensure_open()
        self._acc.append_raw(text)

    # =========================================================================
    # Close
    # =========================================================================

    def _emit_accumulated(self, kind: TokenKind) -> Token:
        """Token for the whole construct, from its opening to this match."""
        acc = self._acc
        token = Token(
            kind=kind,
            text=acc.raw.build(),
            value=acc.value.build(),
            _lineno=acc.lineno,
            _col=acc.col,
            _start_offset=acc.offset,
            _end_offset=self._buffer.offset,
            _source_file=self._source_file,
        )
        acc.clear()
        self._state = LexicalState.INITIAL
        return token

    def _close_comment(self, text: str) -> Token:
        self._accumulate(text)
        return self._emit_accumulated(TokenKind.WHITESPACE_OR_COMMENT)

    def _close_string(self, text: str) -> Token:
        self._ensure_open()
        self._acc.append(text, "")
        return self._emit_accumulated(TokenKind.STRING_LIT)

    def _close_verbatim(self, text: str) -> Token:
        """Quoted identifiers and bit strings keep their delimiters."""
        self._accumulate(text)
        return self._emit_accumulated(TokenKind.NORMAL)

    def _close_custom_quote(self, text: str) -> Token | None:
        """A quote ends the literal only right after the closing delimiter.

        Otherwise it is ordinary content: ``q'[it's]'`` decodes to ``it's``.
        """
        self._ensure_open()
        acc = self._acc
        if not acc.value.endswith(self._custom_closer):
            acc.append(text)
            return None
        acc.value.truncate(len(self._custom_closer))
        acc.append(text, "")
        return self._emit_accumulated(TokenKind.STRING_LIT)
