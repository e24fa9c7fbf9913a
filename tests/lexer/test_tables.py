"""Compiled scanner tables."""

import pytest

from dmlex.errors import NoMatchError, PatternError
from dmlex.lexer import Lexer, LexicalState, Rule, build_tables, default_tables
from dmlex.lexer.automaton import NO_STATE
from dmlex.lexer.tables import ATTR_ACCEPTING, ATTR_NO_LOOKAHEAD
from dmlex.tokens import TokenKind

SMALL_RULES = (
    Rule("if", "if", "_emit_normal"),
    Rule("word", "[a-z]+", "_emit_normal"),
    Rule("space", " +", "_emit_whitespace"),
    Rule("number", "[0-9]+", "_emit_int"),
)


def walk(tables, text: str, state: LexicalState = LexicalState.INITIAL) -> int:
    current = tables.entries[state]
    for char in text:
        current = tables.next_state(current, char)
        if current == NO_STATE:
            break
    return current


class TestDefaultTables:
    def test_built_once(self) -> None:
        assert default_tables() is default_tables()

    def test_entry_for_every_lexical_state(self) -> None:
        tables = default_tables()
        assert set(tables.entries) == set(LexicalState)
        for entry in tables.entries.values():
            assert 0 <= entry < tables.num_states

    def test_flags_agree_with_actions(self) -> None:
        tables = default_tables()
        for state in range(tables.num_states):
            accepting = tables.actions[state] != NO_STATE
            assert bool(tables.attributes[state] & ATTR_ACCEPTING) is accepting
            assert tables.is_accepting(state) is accepting
            if tables.attributes[state] & ATTR_NO_LOOKAHEAD:
                assert accepting

    def test_rows_are_shared(self) -> None:
        tables = default_tables()
        cardinality = tables.class_map.cardinality
        assert len(tables.trans) % cardinality == 0
        assert len(tables.trans) < tables.num_states * cardinality

    def test_keyword_beats_identifier(self) -> None:
        tables = default_tables()
        assert tables.accepted_rule(walk(tables, "NULL")).name == "{null}"
        assert tables.accepted_rule(walk(tables, "nulls")).name == "{identifier}"

    def test_assignment_has_no_lookahead(self) -> None:
        tables = default_tables()
        state = walk(tables, ":=")
        assert tables.attributes[state] & ATTR_NO_LOOKAHEAD

    def test_non_accepting_state(self) -> None:
        tables = default_tables()
        # "is " is only a prefix of IS NULL
        assert tables.accepted_rule(walk(tables, "is ")) is None


class TestCustomRuleSet:
    def test_earlier_rule_wins_tie(self) -> None:
        tables = build_tables(SMALL_RULES, {})
        assert tables.accepted_rule(walk(tables, "if")).name == "if"
        assert tables.accepted_rule(walk(tables, "iff")).name == "word"

    def test_lexer_prefers_longest_match(self) -> None:
        tables = build_tables(SMALL_RULES, {})
        tokens = list(Lexer("if iffy 42", tables=tables))
        assert [(t.kind, t.text) for t in tokens] == [
            (TokenKind.NORMAL, "if"),
            (TokenKind.WHITESPACE_OR_COMMENT, " "),
            (TokenKind.NORMAL, "iffy"),
            (TokenKind.WHITESPACE_OR_COMMENT, " "),
            (TokenKind.INT, "42"),
        ]

    def test_unmatched_character(self) -> None:
        tables = build_tables(SMALL_RULES, {})
        lexer = Lexer("ab;", tables=tables)
        assert lexer.next_token().text == "ab"
        with pytest.raises(NoMatchError) as exc_info:
            lexer.next_token()
        assert (exc_info.value.lineno, exc_info.value.col_offset) == (1, 3)

    def test_rule_in_other_state_is_inactive(self) -> None:
        rules = (
            Rule("word", "[a-z]+", "_emit_normal"),
            Rule("digits", "[0-9]+", "_emit_int", (LexicalState.QUOTED_STRING,)),
        )
        tables = build_tables(rules, {})
        assert walk(tables, "1") == NO_STATE
        assert tables.accepted_rule(walk(tables, "1", LexicalState.QUOTED_STRING)).name == "digits"

    def test_empty_match_rejected(self) -> None:
        with pytest.raises(PatternError, match="empty string"):
            build_tables((Rule("maybe", "a*", "_emit_normal"),), {})

    def test_unknown_action(self) -> None:
        tables = build_tables((Rule("a", "a", "_no_such_action"),), {})
        with pytest.raises(AttributeError):
            Lexer("a", tables=tables)
