"""zmanlang: the zman formula language.

Generate canonical formula text from a structured calculation method, parse
text back into one, and coordinate the round trip for a guided editor.

Example:
    from zmanlang import generate, parse, SolarAngle

    text = generate(SolarAngle(degrees=16.1, direction="before_sunrise"))
    outcome = parse(text)   # Parsed(method=SolarAngle(...))
"""

__version__ = "0.1.0"

from .config import ConfigError, EditorDefaults, load_defaults
from .coordinator import Coordinator, Opaque, OpaqueFormulaError, Structured
from .generator import generate
from .grammar import GrammarError, Lexer, Token, ZmanlangError, format_number, tokenize
from .model import (
    CalculationMethod,
    CustomBase,
    FixedOffset,
    FixedReference,
    InvalidField,
    OffsetDirection,
    ProportionalBase,
    ProportionalHours,
    Reference,
    ShaosSystem,
    SolarAngle,
    SolarDirection,
    build,
    with_field,
)
from .parser import ParseOutcome, Parsed, Unrepresentable, classify, parse
from .tags import InferredTags, infer_tags, tags_for_formula
from .validation import ValidationIssue, ValidationReport, Validator

__all__ = [
    # Grammar
    "Lexer",
    "Token",
    "tokenize",
    "format_number",
    # Model
    "CalculationMethod",
    "FixedReference",
    "SolarAngle",
    "FixedOffset",
    "ProportionalHours",
    "ProportionalBase",
    "CustomBase",
    "Reference",
    "SolarDirection",
    "OffsetDirection",
    "ShaosSystem",
    "build",
    "with_field",
    # Generate / parse
    "generate",
    "parse",
    "classify",
    "ParseOutcome",
    "Parsed",
    "Unrepresentable",
    # Editing
    "Coordinator",
    "Structured",
    "Opaque",
    "EditorDefaults",
    "load_defaults",
    # Validation boundary
    "Validator",
    "ValidationReport",
    "ValidationIssue",
    # Tags
    "InferredTags",
    "infer_tags",
    "tags_for_formula",
    # Errors
    "ZmanlangError",
    "GrammarError",
    "InvalidField",
    "OpaqueFormulaError",
    "ConfigError",
]
