"""Round-trip coordinator for one formula being edited.

Keeps either a structured method (editable through guided controls) or
opaque text that the guided editor cannot represent. Structured edits
regenerate canonical text and notify listeners once per effective change.

Example:
    editor = Coordinator()
    editor.subscribe(print)
    editor.load("solar(16.1, before_sunrise)")
    editor.edit_field("degrees", 18)   # prints "solar(18, before_sunrise)"
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .config import EditorDefaults
from .generator import generate
from .grammar import ZmanlangError
from .model import CalculationMethod, CustomBase, InvalidField, ProportionalHours, with_field
from .parser import Parsed, parse
from .validation import ValidationReport, Validator

logger = logging.getLogger(__name__)

Listener = Callable[[str], None]


class OpaqueFormulaError(ZmanlangError):
    """A structured edit was attempted on text the guided editor cannot show."""


@dataclass(frozen=True)
class Structured:
    method: CalculationMethod
    text: str


@dataclass(frozen=True)
class Opaque:
    text: str
    reason: str
    complexity: str = "unknown_syntax"


class Coordinator:
    """Owns the live calculation method (or opaque text) of one editor session."""

    def __init__(self, text: str | None = None, defaults: EditorDefaults | None = None):
        self.defaults = defaults or EditorDefaults()
        self.last_report: ValidationReport | None = None
        self._listeners: list[Listener] = []
        if text is None:
            method = self.defaults.method_for("fixed_reference")
            self._state: Structured | Opaque = Structured(method, generate(method))
            self.loaded_text = self._state.text
        else:
            self.load(text)

    @property
    def state(self) -> Structured | Opaque:
        return self._state

    @property
    def text(self) -> str:
        return self._state.text

    @property
    def method(self) -> CalculationMethod | None:
        if isinstance(self._state, Structured):
            return self._state.method
        return None

    @property
    def is_structured(self) -> bool:
        return isinstance(self._state, Structured)

    @property
    def changed(self) -> bool:
        """True once the text differs from what was last loaded."""
        return self._state.text != self.loaded_text

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener for new canonical text. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def load(self, text: str) -> Structured | Opaque:
        """Replace the session state with freshly loaded text.

        Loaded text is not re-emitted to listeners; it is already persisted.
        """
        outcome = parse(text)
        if isinstance(outcome, Parsed):
            self._state = Structured(outcome.method, text)
        else:
            self._state = Opaque(text, outcome.reason, outcome.complexity)
        self.loaded_text = text
        self.last_report = None
        logger.debug("loaded %r as %s", text, type(self._state).__name__)
        return self._state

    def edit_field(self, field: str, value: Any) -> str:
        """Change one parameter of the active method and return the current text.

        Raises:
            OpaqueFormulaError: the formula is not in structured form.
            InvalidField: the value is not representable; nothing changes.
        """
        method = self._require_structured("edit a field").method

        if isinstance(method, ProportionalHours) and field in ("start", "end"):
            if not isinstance(method.base, CustomBase):
                raise InvalidField(field, "only a custom base has start and end bounds")
            bounds = {"start": method.base.start, "end": method.base.end, field: value}
            try:
                updated = with_field(method, "base", bounds)
            except InvalidField as exc:
                raise InvalidField(field, exc.reason) from exc
        elif isinstance(method, ProportionalHours) and field == "base" and value == "custom":
            if isinstance(method.base, CustomBase):
                updated = method
            else:
                shaos = self.defaults.shaos
                bounds = {"start": shaos.custom_start, "end": shaos.custom_end}
                updated = with_field(method, "base", bounds)
        else:
            updated = with_field(method, field, value)

        self._replace(updated)
        return self.text

    def switch_method(self, kind: str) -> str:
        """Switch to another calculation method, starting from its defaults.

        Parameters of the previous method are discarded. Switching to the
        active method changes nothing.
        """
        method = self._require_structured("switch method").method
        if method.type == kind:
            return self.text
        self._replace(self.defaults.method_for(kind))
        return self.text

    def validate(self, validator: Validator) -> ValidationReport:
        """Send the current text, unmodified, to an external validator."""
        report = validator.validate(self.text)
        self.last_report = report
        return report

    def _require_structured(self, action: str) -> Structured:
        if not isinstance(self._state, Structured):
            raise OpaqueFormulaError(
                f"cannot {action}: formula is in advanced mode ({self._state.reason})"
            )
        return self._state

    def _replace(self, method: CalculationMethod) -> None:
        if method == self._state.method:
            logger.debug("edit left %r unchanged", self._state.text)
            return
        text = generate(method)
        self._state = Structured(method, text)
        self.last_report = None
        logger.debug("regenerated formula %r", text)
        for listener in list(self._listeners):
            listener(text)
