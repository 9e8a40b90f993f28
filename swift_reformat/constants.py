"""Constants used across the swift-reformat package."""

from __future__ import annotations

from types import MappingProxyType

SWIFT_EXTENSIONS = (".swift",)

# Operator spellings keyed by their leading character
_OPERATORS = {
    "+": ["+=<", "+=", "+++=", "+++", "+"],
    "-": ["->", "-=", "-<<"],
    "*": ["*=", "*"],
    "/": ["/=", "/"],
    "~": ["~=", "~~>", "~>"],
    "%": ["%=", "%"],
    "^": ["^="],
    "&": ["&&=", "&&&", "&&", "&=", "&+", "&-", "&*", "&/", "&%"],
    "<": [
        "<<<", "<<=", "<<", "<=", "<~~", "<~", "<--", "<-<", "<-",
        "<^>", "<|>", "<*>", "<||?", "<||", "<|?", "<|", "<",
    ],
    ">": [">>>", ">>=", ">>-", ">>", ">=", ">->", ">"],
    "|": ["|||", "||=", "||", "|=", "|"],
    "!": ["!==", "!="],
    "=": ["===", "==", "="],
}

# Longest spelling first; sorted() is stable for equal lengths.
OPERATOR_TABLE = MappingProxyType(
    {lead: tuple(sorted(spellings, key=len, reverse=True)) for lead, spellings in _OPERATORS.items()}
)

# Previous character or word after which `-` is a sign, not an operator
NEGATIVE_CHECK_SIGNS = frozenset("+-*/&|^<>:([{=,.?")
NEGATIVE_CHECK_KEYS = frozenset({"case", "return", "if", "for", "while", "in"})

# Characters that bind to the following token
UPPER_BLOCKS = frozenset("([{")
OPENING_BRACKETS = "([{"
CLOSING_BRACKETS = ")]}"

# Line heuristics
CASE_KEYWORDS = frozenset({"case", "default"})
CONTROL_FLOW_PAIRS = (("if", "let"), ("guard", "let"))
SWITCH_KEYWORD = "switch"
ELSE_KEYWORD = "else"

# Preprocessor directives, longest prefix first
DIRECTIVE_IF = "#if"
DIRECTIVE_ELSE = "#else"
DIRECTIVE_ENDIF = "#endif"
DIRECTIVES = (DIRECTIVE_ENDIF, DIRECTIVE_ELSE, DIRECTIVE_IF)
