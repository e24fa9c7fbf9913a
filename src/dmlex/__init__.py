"""
dmlex: Streaming SQL Lexer for the DM Dialect

A table-driven DFA scanner that turns a pull-based character stream into
classified tokens for a downstream parser. Handles block and hint comments,
quoted strings and identifiers, q'[...]' custom-delimiter quoting, binary
and hex strings, and several numeric literal forms, with exact
line/column/offset tracking and pushback.

Quick Start:
    >>> from dmlex import tokenize
    >>> [(t.kind.name, t.value) for t in tokenize("select 'a''b'", skip_trivia=True)]
    [('NORMAL', 'select'), ('STRING_LIT', "a'b")]

    >>> # Streaming input, one chunk at a time
    >>> from dmlex import Lexer
    >>> lexer = Lexer(iter(["sel", "ect 1"]))
    >>> lexer.next_token()
    Token(NORMAL, 'select', 1:1)

Installation:
    pip install dmlex              # Zero runtime dependencies
"""

from collections.abc import Iterable, Iterator

from dmlex.config import (
    ScanConfig,
    get_scan_config,
    reset_scan_config,
    scan_config_context,
    set_scan_config,
)
from dmlex.errors import (
    DmlexError,
    NoMatchError,
    PatternError,
    PushbackTooLargeError,
    ScanError,
    SourceProtocolError,
    UnterminatedConstructError,
)
from dmlex.lexer import Lexer, LexicalState
from dmlex.location import SourceLocation
from dmlex.protocols import CharSource
from dmlex.source import IterableSource, StringSource, as_source
from dmlex.tokens import Token, TokenKind

__version__ = "0.1.0"


def tokenize(
    source: str | CharSource | Iterable[str],
    *,
    source_file: str | None = None,
    config: ScanConfig | None = None,
    skip_trivia: bool = False,
) -> Iterator[Token]:
    """Tokenize SQL into a stream of tokens.

    Args:
        source: SQL text, an object with ``read(size)``, or an iterable of
            string chunks
        source_file: Optional source file path for error messages
        config: Scan settings (uses the active context config if None)
        skip_trivia: Drop whitespace and comment tokens

    Yields:
        Token objects in source order

    Raises:
        ScanError: On unterminated constructs or unmatchable input

    Example:
        >>> [t.text for t in tokenize("a..b")]
        ['a', '..', 'b']
    """
    lexer = Lexer(source, source_file, config=config)
    for token in lexer.tokenize():
        if skip_trivia and token.is_trivia:
            continue
        yield token


__all__ = [  # noqa: RUF022 (grouped by category)
    # Version
    "__version__",
    # Core API
    "Lexer",
    "tokenize",
    # Tokens
    "Token",
    "TokenKind",
    "LexicalState",
    "SourceLocation",
    # Sources
    "CharSource",
    "IterableSource",
    "StringSource",
    "as_source",
    # Configuration
    "ScanConfig",
    "get_scan_config",
    "reset_scan_config",
    "scan_config_context",
    "set_scan_config",
    # Errors
    "DmlexError",
    "NoMatchError",
    "PatternError",
    "PushbackTooLargeError",
    "ScanError",
    "SourceProtocolError",
    "UnterminatedConstructError",
]
