"""Formula parser: source text -> structured model, or a reason it cannot be.

parse() is total. Anything outside the guided subset, malformed or not,
comes back as an Unrepresentable outcome instead of an exception, so that
callers can fall back to editing the raw text.
"""

import logging
from dataclasses import dataclass

from .grammar import (
    GUIDED_FUNCTIONS,
    RESERVED,
    SHAOS_SYSTEMS,
    SOLAR_DIRECTIONS,
    GrammarError,
    Token,
    is_identifier,
    tokenize,
)
from .model import MAX_MINUTES, CalculationMethod, InvalidField, build

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Parsed:
    """The text maps onto one structured calculation method."""

    method: CalculationMethod

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Unrepresentable:
    """The text cannot be shown in the guided editor.

    ``complexity`` is one of: empty, conditional, midpoint,
    chained_operations, unknown_function, unknown_syntax.
    """

    reason: str
    complexity: str = "unknown_syntax"
    details: str = ""

    @property
    def ok(self) -> bool:
        return False


ParseOutcome = Parsed | Unrepresentable


class FormulaParser:
    """Recursive descent over the guided subset of the language."""

    def __init__(self, tokens: list[Token]):
        self.tokens = tokens
        self.pos = 0

    def peek(self, offset: int = 0) -> Token:
        idx = self.pos + offset
        if idx >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[idx]

    def at(self, *types: str) -> bool:
        return self.peek().type in types

    def consume(self, ttype: str) -> Token:
        tok = self.peek()
        if tok.type != ttype:
            raise GrammarError(f"expected {ttype}, got {tok.type}", tok.line, tok.col)
        self.pos += 1
        return tok

    def match(self, *types: str) -> Token | None:
        if self.at(*types):
            tok = self.peek()
            self.pos += 1
            return tok
        return None

    def consume_word(self, *words: str) -> str:
        tok = self.peek()
        if tok.type != "IDENT" or tok.value not in words:
            expected = " or ".join(words)
            raise GrammarError(f"expected {expected}, got {tok.value!r}", tok.line, tok.col)
        self.pos += 1
        return tok.value

    def finish(self) -> None:
        tok = self.peek()
        if tok.type != "EOF":
            raise GrammarError(f"unexpected trailing {tok.value!r}", tok.line, tok.col)

    # -- guided forms, tried in priority order ------------------------------

    def parse_solar(self) -> CalculationMethod:
        """solar(NUMBER, direction)"""
        self.consume_word("solar")
        self.consume("LPAREN")
        degrees = self.parse_number()
        self.consume("COMMA")
        direction = self.consume_word(*SOLAR_DIRECTIONS)
        self.consume("RPAREN")
        self.finish()
        return build("solar_angle", degrees=degrees, direction=direction)

    def parse_shaos(self) -> CalculationMethod:
        """shaos(NUMBER, gra | mga | custom(@a, @b))"""
        self.consume_word("shaos")
        self.consume("LPAREN")
        hours = self.parse_number()
        self.consume("COMMA")
        word = self.consume_word(*SHAOS_SYSTEMS, "custom")
        if word == "custom":
            self.consume("LPAREN")
            start = self.parse_zman_reference()
            self.consume("COMMA")
            end = self.parse_zman_reference()
            self.consume("RPAREN")
            base = {"start": start, "end": end}
        else:
            base = word
        self.consume("RPAREN")
        self.finish()
        return build("proportional_hours", hours=hours, base=base)

    def parse_offset(self) -> CalculationMethod:
        """reference (+|-) NUMBER min"""
        base = self.parse_reference()
        tok = self.match("PLUS", "MINUS")
        if tok is None:
            found = self.peek()
            raise GrammarError("expected + or -", found.line, found.col)
        minutes = self.parse_minutes()
        self.consume_word("min")
        self.finish()
        direction = "before" if tok.type == "MINUS" else "after"
        return build("fixed_offset", minutes=minutes, direction=direction, base=base)

    def parse_bare_reference(self) -> CalculationMethod:
        name = self.parse_reference()
        self.finish()
        return build("fixed_reference", name=name)

    # -- terminals ----------------------------------------------------------

    def parse_reference(self) -> str:
        """Return the surface spelling of a reference, keeping any "@"."""
        prefix = "@" if self.match("AT") else ""
        tok = self.consume("IDENT")
        if not is_identifier(tok.value) or tok.value in RESERVED:
            raise GrammarError(f"{tok.value!r} is not a reference", tok.line, tok.col)
        return prefix + tok.value

    def parse_zman_reference(self) -> str:
        if not self.at("AT"):
            tok = self.peek()
            raise GrammarError("custom bounds must be @ references", tok.line, tok.col)
        return self.parse_reference()

    def parse_number(self) -> float:
        return float(self.consume("NUMBER").value)

    def parse_minutes(self) -> int:
        tok = self.consume("NUMBER")
        whole, _, fraction = tok.value.partition(".")
        if fraction.strip("0"):
            raise GrammarError(f"{tok.value} is not a whole number of minutes", tok.line, tok.col)
        digits = whole.lstrip("0") or "0"
        if len(digits) > len(str(MAX_MINUTES)):
            raise GrammarError(f"{tok.value} minutes is out of range", tok.line, tok.col)
        return int(digits)


_STRATEGIES = (
    FormulaParser.parse_solar,
    FormulaParser.parse_shaos,
    FormulaParser.parse_offset,
    FormulaParser.parse_bare_reference,
)


def parse(text: str) -> ParseOutcome:
    """Parse formula text into a structured method.

    Returns Parsed for text in the guided subset and Unrepresentable for
    everything else. Never raises.
    """
    if not text or not text.strip():
        return _unrepresentable(text, "empty")

    try:
        tokens = tokenize(text)
    except GrammarError as exc:
        return _unrepresentable(text, "unknown_syntax", error=str(exc))

    errors = []
    for strategy in _STRATEGIES:
        try:
            return Parsed(strategy(FormulaParser(tokens)))
        except (GrammarError, InvalidField) as exc:
            errors.append(str(exc))

    complexity, function = classify(tokens)
    return _unrepresentable(text, complexity, function=function, error="; ".join(errors))


def classify(tokens: list[Token]) -> tuple[str, str | None]:
    """Name the construct that keeps tokens out of the guided editor.

    Returns the complexity kind and, for unknown functions, the function name.
    """
    types = [t.type for t in tokens]
    if "IF" in types or "ELSE" in types:
        return "conditional", None

    calls = [
        tok.value
        for tok, nxt in zip(tokens, tokens[1:])
        if tok.type == "IDENT" and nxt.type == "LPAREN"
    ]
    if "midpoint" in calls:
        return "midpoint", None

    offsets = 0
    for i in range(len(tokens) - 2):
        sign, number, unit = tokens[i : i + 3]
        if (
            sign.type in ("PLUS", "MINUS")
            and number.type == "NUMBER"
            and unit.type == "IDENT"
            and unit.value == "min"
        ):
            offsets += 1
    if offsets > 1:
        return "chained_operations", None

    for name in calls:
        if name not in GUIDED_FUNCTIONS:
            return "unknown_function", name

    return "unknown_syntax", None


_MESSAGES = {
    "empty": (
        "Empty formula.",
        "There is no formula to edit yet.",
    ),
    "conditional": (
        "Conditional logic (if/else) requires advanced mode.",
        "This formula uses conditional logic to choose between different "
        "calculations based on date, location, or other factors.",
    ),
    "midpoint": (
        "Midpoint calculations require advanced mode.",
        "This formula calculates the midpoint between two times, which the "
        "guided editor cannot represent.",
    ),
    "chained_operations": (
        "Chained operations require advanced mode.",
        "This formula applies multiple offsets in sequence. Use the advanced "
        "editor for multi-step calculations.",
    ),
    "unknown_function": (
        'Unknown function "{function}" requires advanced mode.',
        'The function "{function}" is not available in the guided editor.',
    ),
    "unknown_syntax": (
        "This formula uses syntax the guided editor does not support.",
        "Use advanced mode to edit this formula.",
    ),
}


def _unrepresentable(
    text: str,
    complexity: str,
    function: str | None = None,
    error: str = "",
) -> Unrepresentable:
    reason, details = _MESSAGES[complexity]
    if function is not None:
        reason = reason.format(function=function)
        details = details.format(function=function)
    logger.debug("formula %r not representable (%s): %s", text, complexity, error or reason)
    return Unrepresentable(reason=reason, complexity=complexity, details=details)
