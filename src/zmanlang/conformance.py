"""Runner for formula cases kept in YAML files.

Format:
    - name: "Alos at 16.1 degrees"
      formula: "solar(16.1, before_sunrise)"
      expect:
        type: solar_angle
        degrees: 16.1
        direction: before_sunrise
    - name: "Seasonal formula stays advanced"
      formula: "if (month > 6) { sunrise } else { sunset }"
      expect:
        advanced: conditional

A structured case passes when the formula parses to the expected method and
the regenerated text parses back to the same method. An advanced case
passes when the formula is unrepresentable with the expected complexity.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import TypeAdapter, ValidationError

from .config import ConfigError
from .generator import generate
from .model import CalculationMethod
from .parser import Parsed, parse

_METHOD = TypeAdapter(CalculationMethod)


@dataclass
class FormulaCase:
    name: str
    formula: str
    expect: dict[str, Any]


@dataclass
class CaseResult:
    """Result of a single case."""

    name: str
    formula: str
    passed: bool
    expected: Any
    actual: Any
    error: str | None = None


@dataclass
class CaseReport:
    """Summary of a case run."""

    results: list[CaseResult]

    @property
    def passed(self) -> int:
        return sum(1 for r in self.results if r.passed)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.passed)

    @property
    def total(self) -> int:
        return len(self.results)


def load_cases(path: str | Path) -> list[FormulaCase]:
    """Load formula cases from a YAML file.

    The file holds either a list of cases or a mapping with a ``cases`` list.
    """
    path = Path(path)
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"cannot read cases from {path}: {exc}") from exc

    if isinstance(data, dict):
        data = data.get("cases")
    if not isinstance(data, list):
        raise ConfigError(f"{path}: expected a list of cases")

    cases = []
    for i, entry in enumerate(data):
        if not isinstance(entry, dict) or "formula" not in entry or "expect" not in entry:
            raise ConfigError(f"{path}: case {i} needs 'formula' and 'expect'")
        if not isinstance(entry["expect"], dict):
            raise ConfigError(f"{path}: case {i} 'expect' must be a mapping")
        cases.append(
            FormulaCase(
                name=str(entry.get("name", f"case {i}")),
                formula=str(entry["formula"]),
                expect=entry["expect"],
            )
        )
    return cases


def run_case(case: FormulaCase) -> CaseResult:
    """Run a single case."""
    outcome = parse(case.formula)

    if "advanced" in case.expect:
        expected = case.expect["advanced"]
        actual = outcome.method if isinstance(outcome, Parsed) else outcome.complexity
        return CaseResult(
            name=case.name,
            formula=case.formula,
            passed=not isinstance(outcome, Parsed) and actual == expected,
            expected=expected,
            actual=actual,
        )

    try:
        expected = _METHOD.validate_python(case.expect)
    except ValidationError as exc:
        return CaseResult(
            name=case.name,
            formula=case.formula,
            passed=False,
            expected=case.expect,
            actual=None,
            error=f"invalid expectation: {exc.errors()[0]['msg']}",
        )

    if not isinstance(outcome, Parsed):
        return CaseResult(
            name=case.name,
            formula=case.formula,
            passed=False,
            expected=expected,
            actual=outcome.complexity,
            error=outcome.reason,
        )

    error = None
    reparsed = parse(generate(outcome.method))
    if reparsed != outcome:
        error = f"regenerated text {generate(outcome.method)!r} does not parse back"

    return CaseResult(
        name=case.name,
        formula=case.formula,
        passed=outcome.method == expected and error is None,
        expected=expected,
        actual=outcome.method,
        error=error,
    )


def run_cases(cases: list[FormulaCase]) -> CaseReport:
    """Run all cases."""
    return CaseReport(results=[run_case(case) for case in cases])


def run_case_file(path: str | Path) -> CaseReport:
    """Load and run the cases in a YAML file."""
    return run_cases(load_cases(path))
