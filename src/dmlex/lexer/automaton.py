"""Rule pattern to finite automaton compiler.

Compiles pattern ASTs into a Thompson NFA whose edges are labelled with sets
of character classes, then converts it to a DFA by subset construction.

Each rule's accepting NFA state remembers the rule's index. A DFA state
accepts with the lowest index among its accepting NFA states, so among
equal-length matches the earlier-declared rule wins. Longest match is the
scan loop's job.
"""

from __future__ import annotations

from collections.abc import Hashable, Mapping, Sequence
from dataclasses import dataclass, field

from dmlex.lexer.charclass import CharSet
from dmlex.lexer.pattern import Alt, Chars, Concat, Node, Repeat

NO_STATE = -1


@dataclass(slots=True)
class NfaState:
    """A state in a Thompson NFA.

    Attributes:
        edges: (class numbers, target state) pairs
        epsilon: States reachable without consuming input
    """

    edges: list[tuple[frozenset[int], int]] = field(default_factory=list)
    epsilon: list[int] = field(default_factory=list)


class Nfa:
    """Thompson NFA over character classes, shared by all rules.

    Usage:
        >>> nfa = Nfa(class_sets)
        >>> start = nfa.add_rule(parse_pattern("[0-9]+"), rule_index=0)

    """

    def __init__(self, class_sets: Mapping[CharSet, frozenset[int]]) -> None:
        """Initialize empty NFA.

        Args:
            class_sets: Class numbers covered by every CharSet the rules use
        """
        self.class_sets = class_sets
        self.states: list[NfaState] = []
        self.accepts: dict[int, int] = {}

    def new_state(self) -> int:
        self.states.append(NfaState())
        return len(self.states) - 1

    def add_rule(self, node: Node, rule_index: int) -> int:
        """Add a rule's pattern and return its start state."""
        start, end = self._build(node)
        self.accepts[end] = rule_index
        return start

    def _build(self, node: Node) -> tuple[int, int]:
        start = self.new_state()
        end = self.new_state()
        if isinstance(node, Chars):
            classes = self.class_sets[node.charset]
            if classes:
                self.states[start].edges.append((classes, end))
        elif isinstance(node, Concat):
            current = start
            for part in node.parts:
                part_start, part_end = self._build(part)
                self.states[current].epsilon.append(part_start)
                current = part_end
            self.states[current].epsilon.append(end)
        elif isinstance(node, Alt):
            for option in node.options:
                option_start, option_end = self._build(option)
                self.states[start].epsilon.append(option_start)
                self.states[option_end].epsilon.append(end)
        else:
            inner_start, inner_end = self._build(node.node)
            self.states[start].epsilon.append(inner_start)
            self.states[inner_end].epsilon.append(end)
            if node.min_count == 0:
                self.states[start].epsilon.append(end)
            if node.unbounded:
                self.states[inner_end].epsilon.append(inner_start)
        return start, end

    def closure(self, states: Sequence[int] | frozenset[int]) -> frozenset[int]:
        """Epsilon closure of a set of states."""
        seen = set(states)
        stack = list(states)
        while stack:
            for target in self.states[stack.pop()].epsilon:
                if target not in seen:
                    seen.add(target)
                    stack.append(target)
        return frozenset(seen)


@dataclass(frozen=True, slots=True)
class Dfa:
    """Deterministic automaton produced by subset construction.

    Attributes:
        rows: Next state per character class for every state
            (``NO_STATE`` where there is no transition)
        accepts: Accepted rule index per state, or ``NO_STATE``
        entries: Start state for every key passed to :func:`determinize`
    """

    rows: tuple[tuple[int, ...], ...]
    accepts: tuple[int, ...]
    entries: Mapping[Hashable, int]

    def __len__(self) -> int:
        return len(self.rows)


def determinize(
    nfa: Nfa,
    starts: Mapping[Hashable, Sequence[int]],
    cardinality: int,
) -> Dfa:
    """Convert the NFA to a DFA.

    Args:
        nfa: The rule NFA
        starts: NFA start states per entry key (one key per lexical state)
        cardinality: Number of character classes

    Returns:
        Dfa whose states are numbered in discovery order
    """
    index: dict[frozenset[int], int] = {}
    subsets: list[frozenset[int]] = []
    closures: dict[frozenset[int], frozenset[int]] = {}

    def intern(subset: frozenset[int]) -> int:
        state = index.get(subset)
        if state is None:
            state = index[subset] = len(subsets)
            subsets.append(subset)
        return state

    entries = {key: intern(nfa.closure(states)) for key, states in starts.items()}

    rows: list[tuple[int, ...]] = []
    accepts: list[int] = []
    position = 0
    while position < len(subsets):
        subset = subsets[position]
        position += 1

        moves: dict[int, set[int]] = {}
        for nfa_state in subset:
            for classes, target in nfa.states[nfa_state].edges:
                for class_id in classes:
                    moves.setdefault(class_id, set()).add(target)

        row = [NO_STATE] * cardinality
        for class_id, targets in moves.items():
            key = frozenset(targets)
            closed = closures.get(key)
            if closed is None:
                closed = closures[key] = nfa.closure(key)
            row[class_id] = intern(closed)
        rows.append(tuple(row))

        accepted = [nfa.accepts[s] for s in subset if s in nfa.accepts]
        accepts.append(min(accepted) if accepted else NO_STATE)

    return Dfa(rows=tuple(rows), accepts=tuple(accepts), entries=entries)
