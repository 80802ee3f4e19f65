"""Display tags inferred from a formula's structured form."""

from pydantic import BaseModel

from .grammar import format_number
from .model import (
    CalculationMethod,
    CustomBase,
    FixedOffset,
    FixedReference,
    OffsetDirection,
    ProportionalHours,
    ShaosSystem,
    SolarAngle,
)
from .parser import Parsed, parse


class InferredTags(BaseModel):
    shita: str | None = None  # e.g. "GRA", "MGA", "16.1°"
    method: str | None = None  # e.g. "Proportional Hours"
    relative: str | None = None  # e.g. "before sunset"
    base_time: str | None = None  # the underlying event or zman


METHOD_LABELS = {
    "fixed_reference": "Fixed Zman",
    "solar_angle": "Solar Angle",
    "fixed_offset": "Fixed Minutes",
    "proportional_hours": "Proportional Hours",
}

# Event each solar direction measures from
SOLAR_BASES = {
    "before_sunrise": ("before", "sunrise"),
    "after_sunset": ("after", "sunset"),
    "before_noon": ("before", "solar_noon"),
    "after_noon": ("after", "solar_noon"),
}


def infer_tags(method: CalculationMethod) -> InferredTags:
    """Classify a calculation method for display badges."""
    tags = InferredTags(method=METHOD_LABELS[method.type])

    if isinstance(method, FixedReference):
        tags.base_time = method.name.name
    elif isinstance(method, SolarAngle):
        relation, event = SOLAR_BASES[method.direction.value]
        tags.shita = f"{format_number(method.degrees)}°"
        tags.base_time = event
        tags.relative = f"{relation} {event}"
    elif isinstance(method, FixedOffset):
        relation = "before" if method.direction == OffsetDirection.BEFORE else "after"
        tags.base_time = method.base.name
        tags.relative = f"{relation} {method.base.name}"
    elif isinstance(method, ProportionalHours):
        if isinstance(method.base, CustomBase):
            tags.shita = "Custom"
            tags.base_time = method.base.start.name
        else:
            tags.shita = "GRA" if method.base == ShaosSystem.GRA else "MGA"
            tags.base_time = "sunrise" if method.base == ShaosSystem.GRA else "alos_hashachar"
    return tags


def tags_for_formula(text: str) -> InferredTags:
    """Parse and classify formula text; advanced formulas get no tags."""
    outcome = parse(text)
    if isinstance(outcome, Parsed):
        return infer_tags(outcome.method)
    return InferredTags()
