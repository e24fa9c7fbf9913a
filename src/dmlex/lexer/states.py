"""Lexical states and delimiter constants.

This module defines the lexical sub-states of the scanner. Exactly one state
is active at a time; there is no state stack.
"""

from __future__ import annotations

from enum import Enum


class LexicalState(Enum):
    """Scanner sub-modes controlling which rules are active.

    - INITIAL: Between tokens
    - BLOCK_COMMENT: Inside ``/* ... */``
    - QUOTED_STRING: Inside ``'...'``
    - QUOTED_IDENTIFIER: Inside ``"..."``
    - BINARY_STRING: Inside ``b'...'``
    - HEX_STRING: Inside ``x'...'``
    - HINT_COMMENT: Inside an optimizer hint ``/*+ ... */``
    - CUSTOM_QUOTE_OPEN: After ``q'``, expecting the opening delimiter
    - CUSTOM_QUOTE_BODY: Inside ``q'[...]'`` after the opening delimiter

    Member values are the human-readable construct names used in
    diagnostics.

    """

    INITIAL = "initial state"
    BLOCK_COMMENT = "/* comment"
    QUOTED_STRING = "quoted string"
    QUOTED_IDENTIFIER = "quoted identifier"
    BINARY_STRING = "binary string literal"
    HEX_STRING = "hexadecimal string literal"
    HINT_COMMENT = "/*+ optimizer hint"
    CUSTOM_QUOTE_OPEN = "q-quoted string delimiter"
    CUSTOM_QUOTE_BODY = "q-quoted string"

    @property
    def description(self) -> str:
        """Construct name for error messages."""
        return self.value


# Opening delimiter -> closing delimiter for q'<open>...<close>' literals.
# Any other punctuation character closes with itself.
CUSTOM_QUOTE_CLOSERS: dict[str, str] = {
    "[": "]",
    "{": "}",
    "(": ")",
    "<": ">",
}


def closing_delimiter(opener: str) -> str:
    """Return the closer that ends a q-quoted literal opened with ``opener``."""
    return CUSTOM_QUOTE_CLOSERS.get(opener, opener)


# Closer assumed when CUSTOM_QUOTE_BODY is entered without scanning an opener
DEFAULT_CUSTOM_CLOSER = "]"
