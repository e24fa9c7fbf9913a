"""Declarative rule set for the DM SQL dialect.

Rules are listed in priority order: when two rules match the same number of
characters, the one declared first wins. Each rule names the lexical states
it is active in and the action method (on the Lexer) that handles a match.

Rule names follow the flex-style labels used in debug logging, e.g.
``{identifier}`` or ``<xq>{xq_double}``.
"""

from __future__ import annotations

from dataclasses import dataclass

from dmlex.lexer.charclass import CharSet
from dmlex.lexer.pattern import Chars, parse_pattern
from dmlex.lexer.states import LexicalState

INITIAL = LexicalState.INITIAL
COMMENTS = (LexicalState.BLOCK_COMMENT, LexicalState.HINT_COMMENT)
BIT_STRINGS = (LexicalState.BINARY_STRING, LexicalState.HEX_STRING)


@dataclass(frozen=True, slots=True)
class Rule:
    """One scanner rule.

    Attributes:
        name: Label used in debug logging
        pattern: Pattern text (see :mod:`dmlex.lexer.pattern`)
        action: Name of the Lexer method that handles a match
        states: Lexical states the rule is active in
        ignore_case: Match ASCII letters in either case
    """

    name: str
    pattern: str
    action: str
    states: tuple[LexicalState, ...] = (INITIAL,)
    ignore_case: bool = False


MACROS: dict[str, str] = {
    "newline": r"[\n\r\u0085\u2028\u2029]",
    "non_newline": r"[^\n\r\u0085\u2028\u2029]",
    "horiz_space": r"[ \t\f\v]",
    "space": r"({horiz_space}|{newline})",
    "line_comment": r"--{non_newline}*",
    "c_line_comment": r"//{non_newline}*",
    "whitespace": r"({space}|{line_comment}|{c_line_comment})+",
    # 'abc'<newline>'def' continues the same literal
    "quote_continue": r"'{horiz_space}*{newline}{space}*'",
    "digit": r"[0-9]",
    "hex_digit": r"[0-9A-Fa-f]",
    "ident_start": r"[A-Za-z_#$\u0080-\u0084\u0086-\u00ff]",
    "ident_cont": r"[0-9A-Za-z_#$\u0080-\u0084\u0086-\u00ff]",
    "identifier": r"{ident_start}{ident_cont}*",
    "integer": r"{digit}+",
    "decimal": r"({digit}*\.{digit}+|{digit}+\.{digit}*)",
    "real": r"({integer}|{decimal})[Ee][-+]?{digit}+",
    "binary_float": r"({integer}|{decimal})[FfDd]",
    "hex_integer": r"0[Xx]{hex_digit}+",
    "self": r"[,()\[\].;:+\-*/%^<>=]",
    "op_chars": r"[~!@#^&|`?+\-*/%<>=]",
    # ASCII punctuation except the quote itself
    "q_delimiter": r"[!-&(-/:-@\[-`{-~]",
}


RULES: tuple[Rule, ...] = (
    # --- INITIAL ---
    Rule("{whitespace} | {comment} | {c_line_comment}", "{whitespace}", "_emit_whitespace"),
    Rule("{xhint_start}", r"/\*\+", "_begin_hint"),
    Rule("{xc_start}", r"/\*", "_begin_comment"),
    Rule("{xq_start}", "'", "_begin_string"),
    Rule("{xdq_start}", '"', "_begin_quoted_identifier"),
    Rule("{xbin_start}", "[Bb]'", "_begin_binary_string"),
    Rule("{xhex_start}", "[Xx]'", "_begin_hex_string"),
    Rule("{xq2_start}", "[Qq]'{q_delimiter}", "_begin_custom_quote"),
    Rule("{hex_integer}", "{hex_integer}", "_emit_hex_int"),
    Rule("{integer_with_boundary}", r"{integer}\.\.", "_emit_normal"),
    Rule("{binary_float}", "{binary_float}", "_emit_double"),
    Rule("{real}", "{real}", "_emit_double"),
    Rule("{decimal}", "{decimal}", "_emit_decimal"),
    Rule("{integer}", "{integer}", "_emit_int"),
    Rule("{boundary}", r"\.\.", "_emit_normal"),
    Rule("{assign}", ":=", "_emit_normal"),
    Rule("{selstar}", r"select{space}*\*", "_emit_normal", ignore_case=True),
    Rule("{not_null}", "is{space}+not{space}+null", "_emit_is_null", ignore_case=True),
    Rule("{is_null}", "is{space}+null", "_emit_is_null", ignore_case=True),
    Rule("{null}", "null", "_emit_null", ignore_case=True),
    Rule("{identifier}", "{identifier}", "_emit_normal"),
    Rule("{self} | {op_chars}", "{self}|{op_chars}", "_emit_normal"),
    Rule("{other}", ".", "_emit_normal"),
    # --- /* comments */ and /*+ hints */ (flat, no nesting) ---
    Rule("<xc>{xc_start}", r"/\*", "_accumulate", COMMENTS),
    Rule("<xc>{xc_stop}", r"\*+/", "_close_comment", COMMENTS),
    Rule("<xc>{xc_inside}", "[^*/]+", "_accumulate", COMMENTS),
    Rule("<xc>[\\/] | <xc>[\\*]", "[*/]", "_accumulate", COMMENTS),
    # --- 'strings' ---
    Rule("<xq>{xq_double}", "''", "_accumulate_quote", (LexicalState.QUOTED_STRING,)),
    Rule("<xq>{xq_cat}", "{quote_continue}", "_accumulate_raw", (LexicalState.QUOTED_STRING,)),
    Rule("<xq>{xq_stop}", "'", "_close_string", (LexicalState.QUOTED_STRING,)),
    Rule("<xq>{xq_inside}", "[^']+", "_accumulate", (LexicalState.QUOTED_STRING,)),
    # --- "quoted identifiers" ---
    Rule("<xdq>{xdq_double}", '""', "_accumulate", (LexicalState.QUOTED_IDENTIFIER,)),
    Rule("<xdq>{xdq_stop}", '"', "_close_verbatim", (LexicalState.QUOTED_IDENTIFIER,)),
    Rule("<xdq>{xdq_inside}", '[^"]+', "_accumulate", (LexicalState.QUOTED_IDENTIFIER,)),
    # --- b'0101' and x'1F' ---
    Rule("<xbin,xhex>{xbit_cat}", "{quote_continue}", "_accumulate_raw", BIT_STRINGS),
    Rule("<xbin,xhex>{xbit_stop}", "'", "_close_verbatim", BIT_STRINGS),
    Rule("<xbin,xhex>{xbit_inside}", "[^']+", "_accumulate", BIT_STRINGS),
    # --- q'[custom delimited]' ---
    Rule("<xq2>{q_delimiter}", "{q_delimiter}", "_open_custom_quote", (LexicalState.CUSTOM_QUOTE_OPEN,)),
    Rule("<xq2_2>{xq2_stop}", "'", "_close_custom_quote", (LexicalState.CUSTOM_QUOTE_BODY,)),
    Rule("<xq2_2>{xq2_inside}", "[^']+", "_accumulate", (LexicalState.CUSTOM_QUOTE_BODY,)),
)


def _macro_charset(name: str) -> CharSet:
    node = parse_pattern(f"{{{name}}}", MACROS)
    assert isinstance(node, Chars)
    return node.charset


IDENTIFIER_CHARS = _macro_charset("ident_cont")


def is_identifier_char(char: str) -> bool:
    """True if ``char`` can continue an identifier."""
    return ord(char) in IDENTIFIER_CHARS
