"""Scanner tables.

The rule set is compiled into compact, immutable tables once per process:

- ``class_map``: code point -> character class
- ``row_map``: DFA state -> offset of its row in ``trans``
- ``trans``: flat transition table, ``trans[row_map[state] + class]``
- ``attributes``: per-state flag bits (see ``ATTR_*``)
- ``actions``: per-state index of the accepted rule
- ``entries``: start state per lexical state

DFA states with identical rows share one row in ``trans``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType

from dmlex.errors import PatternError
from dmlex.lexer.automaton import NO_STATE, Nfa, determinize
from dmlex.lexer.charclass import CharClassMap, CharSet
from dmlex.lexer.pattern import iter_charsets, matches_empty, parse_pattern
from dmlex.lexer.rules import MACROS, RULES, Rule
from dmlex.lexer.states import LexicalState
from dmlex.utils.logger import get_logger

logger = get_logger(__name__)

ATTR_ACCEPTING = 0x01
# Accepting with no outgoing transitions: the match cannot grow
ATTR_NO_LOOKAHEAD = 0x08


@dataclass(frozen=True, slots=True)
class ScannerTables:
    """Compiled, shareable scanner tables.

    Thread Safety:
        Immutable. One instance is shared by every Lexer.

    """

    class_map: CharClassMap
    row_map: tuple[int, ...]
    trans: tuple[int, ...]
    attributes: bytes
    actions: tuple[int, ...]
    entries: Mapping[LexicalState, int]
    rules: tuple[Rule, ...]

    @property
    def num_states(self) -> int:
        return len(self.row_map)

    def next_state(self, state: int, char: str) -> int:
        """Follow one transition, returning ``NO_STATE`` if there is none."""
        return self.trans[self.row_map[state] + self.class_map.classify(char)]

    def is_accepting(self, state: int) -> bool:
        return bool(self.attributes[state] & ATTR_ACCEPTING)

    def accepted_rule(self, state: int) -> Rule | None:
        """Rule accepted in ``state``, or None for non-accepting states."""
        index = self.actions[state]
        return None if index == NO_STATE else self.rules[index]


def build_tables(
    rules: Sequence[Rule] = RULES,
    macros: Mapping[str, str] = MACROS,
) -> ScannerTables:
    """Compile a rule set into scanner tables.

    Args:
        rules: Rules in priority order
        macros: Named sub-patterns the rules may reference

    Returns:
        ScannerTables

    Raises:
        PatternError: If a pattern is malformed or matches the empty string
    """
    nodes = []
    for rule in rules:
        node = parse_pattern(rule.pattern, macros, ignore_case=rule.ignore_case)
        if matches_empty(node):
            raise PatternError(rule.pattern, 0, "rule matches the empty string")
        nodes.append(node)

    charsets: list[CharSet] = list(
        dict.fromkeys(charset for node in nodes for charset in iter_charsets(node))
    )
    class_map, members = CharClassMap.partition(charsets)

    nfa = Nfa(dict(zip(charsets, members, strict=True)))
    starts: dict[LexicalState, list[int]] = {state: [] for state in LexicalState}
    for index, (rule, node) in enumerate(zip(rules, nodes, strict=True)):
        start = nfa.add_rule(node, index)
        for state in rule.states:
            starts[state].append(start)

    dfa = determinize(nfa, starts, class_map.cardinality)

    row_offsets: dict[tuple[int, ...], int] = {}
    trans: list[int] = []
    row_map: list[int] = []
    attributes = bytearray(len(dfa))
    for state, row in enumerate(dfa.rows):
        offset = row_offsets.get(row)
        if offset is None:
            offset = row_offsets[row] = len(trans)
            trans.extend(row)
        row_map.append(offset)
        if dfa.accepts[state] != NO_STATE:
            attributes[state] |= ATTR_ACCEPTING
            if all(target == NO_STATE for target in row):
                attributes[state] |= ATTR_NO_LOOKAHEAD

    logger.debug(
        "Built scanner tables: %d rules, %d classes, %d states, %d shared rows",
        len(rules),
        class_map.cardinality,
        len(dfa),
        len(row_offsets),
    )

    return ScannerTables(
        class_map=class_map,
        row_map=tuple(row_map),
        trans=tuple(trans),
        attributes=bytes(attributes),
        actions=dfa.accepts,
        entries=MappingProxyType({state: dfa.entries[state] for state in LexicalState}),
        rules=tuple(rules),
    )


@lru_cache(maxsize=1)
def default_tables() -> ScannerTables:
    """Tables for the built-in DM SQL rule set, built on first use."""
    return build_tables()
