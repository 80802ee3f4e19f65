"""Structured formula model: one calculation method and its parameters."""

from enum import Enum
from typing import Annotated, Any
from typing import Literal as TypingLiteral

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .grammar import RESERVED, ZmanlangError, is_identifier

# Largest minute offset a formula may carry (signed 64-bit)
MAX_MINUTES = 2**63 - 1


class InvalidField(ZmanlangError):
    """A structured field value that cannot be represented."""

    def __init__(self, field: str, reason: str):
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason


class SolarDirection(str, Enum):
    BEFORE_SUNRISE = "before_sunrise"
    AFTER_SUNSET = "after_sunset"
    BEFORE_NOON = "before_noon"
    AFTER_NOON = "after_noon"


class OffsetDirection(str, Enum):
    BEFORE = "before"
    AFTER = "after"


class ShaosSystem(str, Enum):
    GRA = "gra"  # sunrise to sunset
    MGA = "mga"  # dawn to nightfall


class Reference(BaseModel):
    """A named astronomical event (``sunrise``) or another zman (``@alos_hashachar``)."""

    model_config = ConfigDict(frozen=True)

    name: str
    zman: bool = False  # written with "@"

    @field_validator("name")
    @classmethod
    def check_name(cls, value: str) -> str:
        if not is_identifier(value):
            raise ValueError(f"{value!r} is not a valid identifier")
        if value in RESERVED:
            raise ValueError(f"{value!r} is a reserved word")
        return value

    @classmethod
    def of(cls, text: str) -> "Reference":
        """Build a reference from its surface spelling."""
        return cls(**_reference_fields(text))

    def __str__(self) -> str:
        return f"@{self.name}" if self.zman else self.name


def _reference_fields(text: str) -> dict[str, Any]:
    text = text.strip()
    if text.startswith("@"):
        return {"name": text[1:], "zman": True}
    return {"name": text, "zman": False}


def _coerce_reference(value: Any) -> Any:
    if isinstance(value, str):
        return _reference_fields(value)
    return value


def _reject_bool(value: Any) -> Any:
    # bool is an int subclass; lax mode would read True as 1
    if isinstance(value, bool):
        raise ValueError("a boolean is not a number")
    return value


class FixedReference(BaseModel):
    """A bare event or zman, no parameters."""

    model_config = ConfigDict(frozen=True)

    type: TypingLiteral["fixed_reference"] = "fixed_reference"
    name: Reference

    @field_validator("name", mode="before")
    @classmethod
    def coerce_name(cls, value: Any) -> Any:
        return _coerce_reference(value)


class SolarAngle(BaseModel):
    """Sun at a given depression angle relative to sunrise, sunset or noon."""

    model_config = ConfigDict(frozen=True)

    type: TypingLiteral["solar_angle"] = "solar_angle"
    degrees: float = Field(gt=0, allow_inf_nan=False)
    direction: SolarDirection

    @field_validator("degrees", mode="before")
    @classmethod
    def check_degrees(cls, value: Any) -> Any:
        return _reject_bool(value)


class FixedOffset(BaseModel):
    """A whole number of clock minutes before or after a base time."""

    model_config = ConfigDict(frozen=True)

    type: TypingLiteral["fixed_offset"] = "fixed_offset"
    minutes: int = Field(ge=0, le=MAX_MINUTES)
    direction: OffsetDirection
    base: Reference

    @field_validator("minutes", mode="before")
    @classmethod
    def check_minutes(cls, value: Any) -> Any:
        return _reject_bool(value)

    @field_validator("base", mode="before")
    @classmethod
    def coerce_base(cls, value: Any) -> Any:
        return _coerce_reference(value)


class CustomBase(BaseModel):
    """Proportional day bounded by two other zmanim."""

    model_config = ConfigDict(frozen=True)

    type: TypingLiteral["custom"] = "custom"
    start: Reference
    end: Reference

    @field_validator("start", "end", mode="before")
    @classmethod
    def coerce_bound(cls, value: Any) -> Any:
        # Custom bounds always name zmanim, so a bare key gets its "@".
        if isinstance(value, str):
            value = value.strip()
            return _reference_fields(value if value.startswith("@") else f"@{value}")
        return value


ProportionalBase = ShaosSystem | CustomBase


class ProportionalHours(BaseModel):
    """A count of shaos zmaniyos (1/12 of the day) from the start of the day."""

    model_config = ConfigDict(frozen=True)

    type: TypingLiteral["proportional_hours"] = "proportional_hours"
    hours: float = Field(gt=0, allow_inf_nan=False)
    base: ProportionalBase

    @field_validator("hours", mode="before")
    @classmethod
    def check_hours(cls, value: Any) -> Any:
        return _reject_bool(value)

    @field_validator("base")
    @classmethod
    def check_custom_bounds(cls, value: ProportionalBase) -> ProportionalBase:
        if isinstance(value, CustomBase) and not (value.start.zman and value.end.zman):
            raise ValueError("custom bounds must both be @ references")
        return value


CalculationMethod = Annotated[
    FixedReference | SolarAngle | FixedOffset | ProportionalHours,
    Field(discriminator="type"),
]

METHOD_TYPES: dict[str, type[BaseModel]] = {
    "fixed_reference": FixedReference,
    "solar_angle": SolarAngle,
    "fixed_offset": FixedOffset,
    "proportional_hours": ProportionalHours,
}


def build(kind: str, **fields: Any) -> CalculationMethod:
    """Construct a calculation method from raw editor input.

    Raises:
        InvalidField: naming the first field that is missing, unknown, or
            out of range. Values are rejected, never clamped.
    """
    cls = METHOD_TYPES.get(kind)
    if cls is None:
        raise InvalidField("type", f"unknown calculation method {kind!r}")

    allowed = set(cls.model_fields) - {"type"}
    for name in fields:
        if name not in allowed:
            raise InvalidField(name, f"not a field of {kind}")

    try:
        return cls.model_validate(fields)
    except ValidationError as exc:
        err = exc.errors()[0]
        field = str(err["loc"][0]) if err["loc"] else kind
        raise InvalidField(field, err["msg"]) from exc


def with_field(method: CalculationMethod, field: str, value: Any) -> CalculationMethod:
    """Return a copy of ``method`` with one field replaced and revalidated."""
    fields = method.model_dump(exclude={"type"})
    fields[field] = value
    return build(method.type, **fields)
