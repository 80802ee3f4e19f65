"""Lexer and vocabulary for the zman formula language.

Grammar of the guided subset (everything the generator can emit):
    formula     = reference | solar_call | offset_expr | shaos_call
    reference   = IDENT | "@" IDENT
    solar_call  = "solar" "(" NUMBER "," direction ")"
    shaos_call  = "shaos" "(" NUMBER "," shaos_base ")"
    shaos_base  = "gra" | "mga" | "custom" "(" "@" IDENT "," "@" IDENT ")"
    offset_expr = reference ("-" | "+") NUMBER "min"
    direction   = "before_sunrise" | "after_sunset" | "before_noon" | "after_noon"

The lexer also tokenizes the wider advanced language (conditionals,
arithmetic, comparisons, strings) so that text outside the guided subset
can still be classified instead of rejected outright.
"""

import re
from dataclasses import dataclass
from decimal import Decimal


class ZmanlangError(Exception):
    """Base class for errors raised by the formula language."""


@dataclass
class Token:
    type: str
    value: str
    line: int
    col: int


class GrammarError(ZmanlangError):
    def __init__(self, msg: str, line: int, col: int):
        super().__init__(f"line {line}, col {col}: {msg}")
        self.msg = msg
        self.line = line
        self.col = col


SOLAR_DIRECTIONS = ("before_sunrise", "after_sunset", "before_noon", "after_noon")
SHAOS_SYSTEMS = ("gra", "mga")

# Functions the guided editor can represent
GUIDED_FUNCTIONS = {"solar", "shaos", "custom"}

KEYWORDS = {"if", "else"}

# Words that never denote a reference on their own
RESERVED = (
    GUIDED_FUNCTIONS
    | KEYWORDS
    | set(SOLAR_DIRECTIONS)
    | set(SHAOS_SYSTEMS)
    | {"min"}
)

IDENTIFIER_RE = re.compile(r"[A-Za-z][A-Za-z0-9_]*")


class Lexer:
    """Lexer for formula source text.

    Whitespace is dropped. Comments are kept as COMMENT tokens: the guided
    forms have no place for them, so a commented formula never parses as
    structured and its comment is never lost by regeneration.
    """

    # Alternatives are tried in order, so longer operators come first
    TOKEN_PATTERNS = [
        ("COMMENT", r"//[^\n]*"),
        ("WS", r"\s+"),
        ("NUMBER", r"[0-9]+(?:\.[0-9]+)?"),
        ("STRING", r'"[^"]*"'),
        ("IDENT", r"[A-Za-z_][A-Za-z0-9_]*"),
        ("AT", r"@"),
        ("LE", r"<="),
        ("GE", r">="),
        ("EQ", r"=="),
        ("NE", r"!="),
        ("PLUS", r"\+"),
        ("MINUS", r"-"),
        ("STAR", r"\*"),
        ("SLASH", r"/"),
        ("LT", r"<"),
        ("GT", r">"),
        ("LPAREN", r"\("),
        ("RPAREN", r"\)"),
        ("LBRACE", r"\{"),
        ("RBRACE", r"\}"),
        ("COMMA", r","),
    ]
    TOKEN_RE = re.compile("|".join(f"(?P<{name}>{pattern})" for name, pattern in TOKEN_PATTERNS))

    def __init__(self, source: str):
        self.source = source
        self.tokens: list[Token] = []
        self._tokenise()

    def _tokenise(self) -> None:
        source = self.source
        line, line_start, pos = 1, 0, 0
        while pos < len(source):
            m = self.TOKEN_RE.match(source, pos)
            if m is None:
                raise GrammarError(f"unexpected char: {source[pos]!r}", line, pos - line_start + 1)
            kind, value = m.lastgroup, m.group()
            if kind == "WS":
                if "\n" in value:
                    line += value.count("\n")
                    line_start = pos + value.rindex("\n") + 1
            else:
                if kind == "IDENT" and value in KEYWORDS:
                    kind = value.upper()
                self.tokens.append(Token(kind, value, line, pos - line_start + 1))
            pos = m.end()

        self.tokens.append(Token("EOF", "", line, pos - line_start + 1))


def tokenize(source: str) -> list[Token]:
    """Tokenize formula source, raising GrammarError on unknown characters."""
    return Lexer(source).tokens


def is_identifier(text: str) -> bool:
    return IDENTIFIER_RE.fullmatch(text) is not None


def format_number(value: float) -> str:
    """Render a number in canonical form.

    Integral values drop the decimal point (``72``), fractional values use
    the shortest spelling that reads back to the same float (``16.1``), and
    exponent notation is never produced.
    """
    if float(value).is_integer():
        return str(int(value))
    text = format(Decimal(repr(float(value))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
