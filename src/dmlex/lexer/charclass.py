"""Character sets and the character class map.

A DFA-driven scanner does not treat every code point as a distinct input.
All code points are mapped to a much smaller alphabet of equivalence
classes: two characters share a class when every character set used by the
rule patterns either contains both or neither. The transition table is then
indexed by class instead of by code point.

Lookup uses a direct table for Latin-1 and a binary search over range
boundaries for everything above it.
"""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

MAX_CODEPOINT = 0x10FFFF

_LATIN1_LIMIT = 256


@dataclass(frozen=True, slots=True)
class CharSet:
    """An immutable set of code points stored as inclusive ranges.

    Ranges are sorted, disjoint and non-adjacent.

    Examples:
            >>> CharSet.of("a", "b", "c").ranges
            ((97, 99),)
            >>> 98 in CharSet.of("abc")
            True

    """

    ranges: tuple[tuple[int, int], ...]

    @classmethod
    def of(cls, *chars: str) -> CharSet:
        """Build a set from literal characters (strings are split)."""
        return cls.from_ranges((ord(c), ord(c)) for chunk in chars for c in chunk)

    @classmethod
    def span(cls, first: str, last: str) -> CharSet:
        """Build the inclusive range ``first``..``last``."""
        return cls.from_ranges([(ord(first), ord(last))])

    @classmethod
    def from_ranges(cls, ranges: Iterable[tuple[int, int]]) -> CharSet:
        """Normalize arbitrary inclusive ranges into a CharSet."""
        merged: list[tuple[int, int]] = []
        for lo, hi in sorted(ranges):
            if lo > hi:
                continue
            if merged and lo <= merged[-1][1] + 1:
                prev_lo, prev_hi = merged[-1]
                merged[-1] = (prev_lo, max(prev_hi, hi))
            else:
                merged.append((lo, hi))
        return cls(tuple(merged))

    def union(self, other: CharSet) -> CharSet:
        return CharSet.from_ranges(self.ranges + other.ranges)

    def negate(self) -> CharSet:
        """Complement with respect to all Unicode code points."""
        result: list[tuple[int, int]] = []
        next_lo = 0
        for lo, hi in self.ranges:
            if lo > next_lo:
                result.append((next_lo, lo - 1))
            next_lo = hi + 1
        if next_lo <= MAX_CODEPOINT:
            result.append((next_lo, MAX_CODEPOINT))
        return CharSet(tuple(result))

    def fold_case(self) -> CharSet:
        """Add the other-case variant of every ASCII letter in the set."""
        extra: list[tuple[int, int]] = []
        for lo, hi in self.ranges:
            for base, other in ((0x41, 0x61), (0x61, 0x41)):
                a, b = max(lo, base), min(hi, base + 25)
                if a <= b:
                    extra.append((a - base + other, b - base + other))
        return CharSet.from_ranges(self.ranges + tuple(extra))

    def __contains__(self, codepoint: object) -> bool:
        if not isinstance(codepoint, int):
            return False
        idx = bisect_right(self.ranges, (codepoint, MAX_CODEPOINT)) - 1
        return idx >= 0 and self.ranges[idx][0] <= codepoint <= self.ranges[idx][1]

    def __bool__(self) -> bool:
        return bool(self.ranges)


ANY_CHAR = CharSet(((0, MAX_CODEPOINT),))


class CharClassMap:
    """Maps code points to equivalence class numbers.

    Built by :meth:`partition` from the character sets of a rule set.
    Classes are numbered ``0 .. cardinality - 1``.

    Thread Safety:
        Immutable after construction. Safe to share.

    """

    __slots__ = ("_bounds", "_classes", "_latin1", "cardinality")

    def __init__(self, bounds: Sequence[int], classes: Sequence[int]) -> None:
        """Initialize from range boundaries.

        Args:
            bounds: Sorted start code points of consecutive ranges; the
                first must be 0
            classes: Class number of each range
        """
        if not bounds or bounds[0] != 0 or len(bounds) != len(classes):
            raise ValueError("bounds must start at 0 and pair up with classes")
        self._bounds = tuple(bounds)
        self._classes = tuple(classes)
        self.cardinality = max(classes) + 1
        self._latin1 = tuple(self._lookup(cp) for cp in range(_LATIN1_LIMIT))

    def _lookup(self, codepoint: int) -> int:
        return self._classes[bisect_right(self._bounds, codepoint) - 1]

    def classify(self, char: str) -> int:
        """Return the class number of a single character."""
        cp = ord(char)
        if cp < _LATIN1_LIMIT:
            return self._latin1[cp]
        return self._classes[bisect_right(self._bounds, cp) - 1]

    def __len__(self) -> int:
        """Number of stored ranges (not classes)."""
        return len(self._bounds)

    @classmethod
    def partition(
        cls, charsets: Sequence[CharSet]
    ) -> tuple[CharClassMap, list[frozenset[int]]]:
        """Compute the coarsest class map that distinguishes every set.

        Args:
            charsets: Every character set used by the rule patterns

        Returns:
            (class map, class numbers covered by each input set, in order)
        """
        cuts = {0}
        for charset in charsets:
            for lo, hi in charset.ranges:
                cuts.add(lo)
                if hi < MAX_CODEPOINT:
                    cuts.add(hi + 1)
        starts = sorted(cuts)

        signature_ids: dict[tuple[int, ...], int] = {}
        members: list[set[int]] = [set() for _ in charsets]
        bounds: list[int] = []
        classes: list[int] = []
        for start in starts:
            signature = tuple(i for i, cs in enumerate(charsets) if start in cs)
            class_id = signature_ids.setdefault(signature, len(signature_ids))
            for i in signature:
                members[i].add(class_id)
            if classes and classes[-1] == class_id:
                continue
            bounds.append(start)
            classes.append(class_id)

        return cls(bounds, classes), [frozenset(m) for m in members]
