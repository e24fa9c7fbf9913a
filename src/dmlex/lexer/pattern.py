"""Rule pattern syntax and parser.

Scanner rules are written in a small flex-like regular expression language
and parsed into an AST whose leaves are character sets. No backtracking
engine ever runs these patterns: the AST is compiled into a DFA by
:mod:`dmlex.lexer.automaton`.

Syntax:
    ``abc``          literal characters
    ``\\n \\r \\t \\f \\v``  control-character escapes
    ``\\uXXXX``      code point escape (also ``\\xHH``, ``\\UXXXXXXXX``)
    ``\\c``          any other escaped character stands for itself
    ``[a-z_]``       character class, ``[^...]`` for its complement
    ``.``            any character
    ``{name}``       reference to a named macro
    ``(a|b)``        grouping and alternation
    ``* + ?``        repetition

Grammar:
    expr   -> term ('|' term)*
    term   -> factor*
    factor -> atom ('*' | '+' | '?')*
    atom   -> '(' expr ')' | class | '.' | macro | escape | literal

"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from dmlex.errors import PatternError
from dmlex.lexer.charclass import ANY_CHAR, CharSet

_SIMPLE_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "f": "\f", "v": "\v"}
_HEX_ESCAPES = {"x": 2, "u": 4, "U": 8}


@dataclass(frozen=True, slots=True)
class Chars:
    """Matches exactly one character from ``charset``."""

    charset: CharSet


@dataclass(frozen=True, slots=True)
class Concat:
    """Matches each part in sequence. No parts matches the empty string."""

    parts: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class Alt:
    """Matches any one of the options."""

    options: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class Repeat:
    """``*`` is (0, unbounded), ``+`` is (1, unbounded), ``?`` is (0, bounded)."""

    node: Node
    min_count: int
    unbounded: bool


Node = Chars | Concat | Alt | Repeat


class _PatternParser:
    """Recursive descent parser for one rule pattern."""

    def __init__(
        self,
        pattern: str,
        macros: Mapping[str, str],
        ignore_case: bool,
        expanding: tuple[str, ...] = (),
    ) -> None:
        self.pattern = pattern
        self.macros = macros
        self.ignore_case = ignore_case
        self.expanding = expanding
        self.pos = 0

    def error(self, message: str) -> PatternError:
        return PatternError(self.pattern, self.pos, message)

    def peek(self) -> str | None:
        if self.pos >= len(self.pattern):
            return None
        return self.pattern[self.pos]

    def advance(self) -> str:
        if self.pos >= len(self.pattern):
            raise self.error("unexpected end of pattern")
        ch = self.pattern[self.pos]
        self.pos += 1
        return ch

    def parse(self) -> Node:
        node = self._parse_expr()
        if self.pos < len(self.pattern):
            raise self.error(f"unexpected {self.pattern[self.pos]!r}")
        return node

    def _parse_expr(self) -> Node:
        options = [self._parse_term()]
        while self.peek() == "|":
            self.advance()
            options.append(self._parse_term())
        return options[0] if len(options) == 1 else Alt(tuple(options))

    def _parse_term(self) -> Node:
        parts: list[Node] = []
        while self.peek() is not None and self.peek() not in "|)":
            parts.append(self._parse_factor())
        return parts[0] if len(parts) == 1 else Concat(tuple(parts))

    def _parse_factor(self) -> Node:
        node = self._parse_atom()
        while (quantifier := self.peek()) is not None and quantifier in "*+?":
            self.advance()
            if quantifier == "*":
                node = Repeat(node, 0, True)
            elif quantifier == "+":
                node = Repeat(node, 1, True)
            else:
                node = Repeat(node, 0, False)
        return node

    def _parse_atom(self) -> Node:
        ch = self.advance()
        if ch == "(":
            node = self._parse_expr()
            if self.peek() != ")":
                raise self.error("missing ')'")
            self.advance()
            return node
        if ch == "[":
            return Chars(self._parse_class())
        if ch == ".":
            return Chars(ANY_CHAR)
        if ch == "{":
            return self._parse_macro()
        if ch in "*+?":
            self.pos -= 1
            raise self.error(f"nothing to repeat before {ch!r}")
        if ch == "\\":
            ch = self._parse_escape()
        return self._chars(CharSet.of(ch))

    def _chars(self, charset: CharSet) -> Chars:
        if self.ignore_case:
            charset = charset.fold_case()
        return Chars(charset)

    def _parse_escape(self) -> str:
        ch = self.advance()
        if ch in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[ch]
        if ch in _HEX_ESCAPES:
            width = _HEX_ESCAPES[ch]
            digits = self.pattern[self.pos : self.pos + width]
            try:
                if len(digits) != width:
                    raise ValueError(digits)
                value = chr(int(digits, 16))
            except ValueError:
                raise self.error(f"bad \\{ch} escape") from None
            self.pos += width
            return value
        return ch

    def _parse_class_char(self) -> str:
        ch = self.advance()
        if ch == "\\":
            return self._parse_escape()
        return ch

    def _parse_class(self) -> CharSet:
        negated = False
        if self.peek() == "^":
            self.advance()
            negated = True
        ranges: list[tuple[int, int]] = []
        while self.peek() != "]":
            if self.peek() is None:
                raise self.error("missing ']'")
            first = self._parse_class_char()
            last = first
            if self.peek() == "-" and self.pattern[self.pos + 1 : self.pos + 2] not in ("]", ""):
                self.advance()
                last = self._parse_class_char()
                if ord(last) < ord(first):
                    raise self.error(f"reversed range {first!r}-{last!r}")
            ranges.append((ord(first), ord(last)))
        self.advance()
        charset = CharSet.from_ranges(ranges)
        if self.ignore_case:
            charset = charset.fold_case()
        return charset.negate() if negated else charset

    def _parse_macro(self) -> Node:
        end = self.pattern.find("}", self.pos)
        if end == -1:
            raise self.error("missing '}'")
        name = self.pattern[self.pos : end]
        if name not in self.macros:
            raise self.error(f"unknown macro {name!r}")
        if name in self.expanding:
            raise self.error(f"macro {name!r} refers to itself")
        self.pos = end + 1
        return _PatternParser(
            self.macros[name],
            self.macros,
            self.ignore_case,
            self.expanding + (name,),
        ).parse()


def parse_pattern(
    pattern: str,
    macros: Mapping[str, str] | None = None,
    *,
    ignore_case: bool = False,
) -> Node:
    """Parse a rule pattern into an AST.

    Args:
        pattern: Pattern text (see module docstring for syntax)
        macros: Named sub-patterns available as ``{name}``
        ignore_case: Match ASCII letters in either case

    Returns:
        Root AST node

    Raises:
        PatternError: If the pattern is malformed
    """
    return _PatternParser(pattern, macros or {}, ignore_case).parse()


def iter_charsets(node: Node) -> Iterator[CharSet]:
    """Yield every character set referenced by an AST, depth first."""
    if isinstance(node, Chars):
        yield node.charset
    elif isinstance(node, Repeat):
        yield from iter_charsets(node.node)
    elif isinstance(node, Concat):
        for part in node.parts:
            yield from iter_charsets(part)
    else:
        for option in node.options:
            yield from iter_charsets(option)


def matches_empty(node: Node) -> bool:
    """Return True if the pattern accepts the empty string."""
    if isinstance(node, Chars):
        return False
    if isinstance(node, Repeat):
        return node.min_count == 0 or matches_empty(node.node)
    if isinstance(node, Concat):
        return all(matches_empty(part) for part in node.parts)
    return any(matches_empty(option) for option in node.options)
