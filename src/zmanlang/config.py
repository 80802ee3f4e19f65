"""Editor defaults.

Defaults are the parameters a calculation method starts with when the user
switches to it. They can be overridden from a YAML file:

    solar:
      degrees: 18
      direction: before_sunrise
    offset:
      minutes: 72
      direction: before
      base: sunrise
    shaos:
      hours: 3
      base: gra
      custom_start: alos_hashachar
      custom_end: tzeis_hakochavim
    fixed_reference: sunrise
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .grammar import ZmanlangError
from .model import (
    CalculationMethod,
    CustomBase,
    InvalidField,
    OffsetDirection,
    ShaosSystem,
    SolarDirection,
    build,
)

logger = logging.getLogger(__name__)


class ConfigError(ZmanlangError):
    pass


class SolarDefaults(BaseModel):
    model_config = ConfigDict(extra="forbid")

    degrees: float = Field(default=16.1, gt=0, allow_inf_nan=False)
    direction: SolarDirection = SolarDirection.BEFORE_SUNRISE


class OffsetDefaults(BaseModel):
    model_config = ConfigDict(extra="forbid")

    minutes: int = Field(default=72, ge=0)
    direction: OffsetDirection = OffsetDirection.BEFORE
    base: str = "sunrise"


class ShaosDefaults(BaseModel):
    model_config = ConfigDict(extra="forbid")

    hours: float = Field(default=3, gt=0, allow_inf_nan=False)
    base: ShaosSystem = ShaosSystem.GRA
    custom_start: str = "alos_hashachar"
    custom_end: str = "tzeis_hakochavim"


class EditorDefaults(BaseModel):
    """Starting parameters for each calculation method."""

    model_config = ConfigDict(extra="forbid")

    solar: SolarDefaults = SolarDefaults()
    offset: OffsetDefaults = OffsetDefaults()
    shaos: ShaosDefaults = ShaosDefaults()
    fixed_reference: str = "sunrise"

    def custom_base(self) -> CustomBase:
        return CustomBase(start=self.shaos.custom_start, end=self.shaos.custom_end)

    def method_for(self, kind: str) -> CalculationMethod:
        """Build the default method of the given kind.

        Raises:
            InvalidField: for an unknown kind, or defaults that do not
                form a valid method.
        """
        if kind == "fixed_reference":
            return build(kind, name=self.fixed_reference)
        if kind == "solar_angle":
            return build(kind, degrees=self.solar.degrees, direction=self.solar.direction)
        if kind == "fixed_offset":
            return build(
                kind,
                minutes=self.offset.minutes,
                direction=self.offset.direction,
                base=self.offset.base,
            )
        if kind == "proportional_hours":
            return build(kind, hours=self.shaos.hours, base=self.shaos.base)
        raise InvalidField("type", f"unknown calculation method {kind!r}")


def load_defaults(path: str | Path) -> EditorDefaults:
    """Load editor defaults from a YAML file.

    Missing sections and keys keep their built-in values.
    """
    path = Path(path)
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"cannot read defaults from {path}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at top level")

    try:
        defaults = EditorDefaults.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"{path}: {_first_error(exc)}") from exc

    # Every default must itself be a representable method.
    for kind in ("fixed_reference", "solar_angle", "fixed_offset", "proportional_hours"):
        try:
            defaults.method_for(kind)
        except InvalidField as exc:
            raise ConfigError(f"{path}: invalid {kind} default: {exc}") from exc
    try:
        defaults.custom_base()
    except ValidationError as exc:
        raise ConfigError(f"{path}: invalid custom shaos bounds: {_first_error(exc)}") from exc

    logger.info("loaded editor defaults from %s", path)
    return defaults


def _first_error(exc: ValidationError) -> str:
    err: dict[str, Any] = exc.errors()[0]
    loc = ".".join(str(part) for part in err["loc"])
    return f"{loc}: {err['msg']}" if loc else err["msg"]
