"""Interface to the external formula validation service.

The service checks syntax and semantics and may dry-run the formula. This
package only defines the shape of the call; reports are passed through to
the user as-is.
"""

from typing import Protocol

from pydantic import BaseModel


class ValidationIssue(BaseModel):
    message: str
    line: int | None = None
    column: int | None = None


class ValidationReport(BaseModel):
    valid: bool
    errors: list[ValidationIssue] = []


class Validator(Protocol):
    def validate(self, formula: str) -> ValidationReport: ...
