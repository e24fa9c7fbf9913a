"""Table-driven streaming lexer for the DM SQL dialect.

The rule set is compiled to a DFA the first time a Lexer is created, then
shared by every instance.

Architecture:
lexer/
├── __init__.py          # Re-exports Lexer, LexicalState, tables
├── core.py              # Lexer class (scan loop, location, pushback)
├── actions.py           # Rule actions (emit / enter / accumulate)
├── rules.py             # Declarative rule set and macros
├── states.py            # LexicalState enum, custom quote closers
├── pattern.py           # Rule pattern parser
├── charclass.py         # Character sets and equivalence classes
├── automaton.py         # Thompson NFA and subset construction
├── tables.py            # Compiled, row-shared scanner tables
├── buffer.py            # Input buffer and refill engine
├── tracker.py           # Line/column/offset tracking
└── accumulator.py       # Multi-match literal accumulation

Usage:
    >>> from dmlex.lexer import Lexer
    >>> [t.kind.name for t in Lexer("x := 0x1F")]
    ['NORMAL', 'WHITESPACE_OR_COMMENT', 'NORMAL', 'WHITESPACE_OR_COMMENT', 'HEX_INT']

"""

from dmlex.lexer.core import Lexer
from dmlex.lexer.rules import MACROS, RULES, Rule
from dmlex.lexer.states import LexicalState
from dmlex.lexer.tables import ScannerTables, build_tables, default_tables

__all__ = [
    "MACROS",
    "RULES",
    "Lexer",
    "LexicalState",
    "Rule",
    "ScannerTables",
    "build_tables",
    "default_tables",
]
