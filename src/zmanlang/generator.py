"""Formula generator: structured model -> canonical source text."""

from .grammar import format_number
from .model import (
    CalculationMethod,
    CustomBase,
    FixedOffset,
    FixedReference,
    OffsetDirection,
    ProportionalHours,
    SolarAngle,
)


def generate(method: CalculationMethod) -> str:
    """Render a calculation method as canonical formula text.

    Examples:
        sunrise
        solar(16.1, before_sunrise)
        @alos_hashachar - 72min
        shaos(3, custom(@alos_hashachar, @tzeis_hakochavim))
    """
    if isinstance(method, FixedReference):
        return str(method.name)

    if isinstance(method, SolarAngle):
        return f"solar({format_number(method.degrees)}, {method.direction.value})"

    if isinstance(method, FixedOffset):
        op = "-" if method.direction == OffsetDirection.BEFORE else "+"
        return f"{method.base} {op} {method.minutes}min"

    if isinstance(method, ProportionalHours):
        return f"shaos({format_number(method.hours)}, {_shaos_base(method)})"

    raise TypeError(f"not a calculation method: {type(method).__name__}")


def _shaos_base(method: ProportionalHours) -> str:
    base = method.base
    if isinstance(base, CustomBase):
        return f"custom({base.start}, {base.end})"
    return base.value
