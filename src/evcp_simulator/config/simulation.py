"""Simulation settings — charger fleet, load assumptions, randomness.

Invalid scalar values are clamped, not rejected: a non-positive charger count
becomes 1, non-positive rates become ``MIN_RATE``.  Missing, ``None``, NaN or
infinite values fall back to the field default.  Clamping runs after type
conversion, so ``"0"`` is clamped like ``0``.  Only wrong *types* raise
``pydantic.ValidationError``.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationInfo, field_validator

logger = logging.getLogger(__name__)

DEFAULT_NUM_CHARGERS = 20
DEFAULT_ARRIVAL_MULTIPLIER = 1.0
DEFAULT_CONSUMPTION_KWH_PER_100KM = 18.0
DEFAULT_CHARGING_POWER_KW = 11.0

MIN_NUM_CHARGERS = 1
MIN_ARRIVAL_MULTIPLIER = 0.0
MIN_RATE = 0.1
"""Floor for consumption (kWh/100km) and charger power (kW)."""

_DEFAULTS: dict[str, float] = {
    "num_chargers": DEFAULT_NUM_CHARGERS,
    "arrival_multiplier": DEFAULT_ARRIVAL_MULTIPLIER,
    "consumption_kwh_per_100km": DEFAULT_CONSUMPTION_KWH_PER_100KM,
    "charging_power_kw": DEFAULT_CHARGING_POWER_KW,
}


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, float) and not math.isfinite(value))


def _default_if_missing(name: str, value: Any, default: Any) -> Any:
    if _is_missing(value):
        if value is not None:
            logger.warning(f"{name}={value} is not a finite number, using default {default}")
        return default
    return value


def _clamp(name: str, value: float, default: float, minimum: float) -> float:
    """Applied after type conversion, so string inputs are clamped too."""
    value = _default_if_missing(name, value, default)
    if value < minimum:
        logger.warning(f"{name}={value} is below the minimum, clamped to {minimum}")
        return minimum
    return value


class SimulationConfig(BaseModel):
    """One simulation run: fleet size, rates, DST and RNG settings."""

    num_chargers: int = Field(
        default=DEFAULT_NUM_CHARGERS,
        description="Number of charge points in the fleet (clamped to ≥ 1).",
    )
    use_dst: bool = Field(
        default=False,
        description="Shift ticks forward by one hour inside the approximate DST window.",
    )
    random_seed: int | None = Field(
        default=None,
        description="Seed for the deterministic generator. None = non-deterministic. "
                    "0 is a valid seed.",
    )
    arrival_multiplier: float = Field(
        default=DEFAULT_ARRIVAL_MULTIPLIER,
        description="Scales every hourly arrival probability. 1.0 = 100%, 0 = no arrivals.",
    )
    consumption_kwh_per_100km: float = Field(
        default=DEFAULT_CONSUMPTION_KWH_PER_100KM,
        description="Vehicle energy consumption (kWh/100km, clamped to ≥ 0.1).",
    )
    charging_power_kw: float = Field(
        default=DEFAULT_CHARGING_POWER_KW,
        description="Rated power of every charge point (kW, clamped to ≥ 0.1).",
    )
    event_count_policy: Literal["reuse", "redraw"] = Field(
        default="reuse",
        description="How a tick is classified as having charging events. "
                    "'reuse' counts the arrivals actually processed. "
                    "'redraw' draws the fractional-arrival trial a second, "
                    "independent time for counting.",
    )
    monte_carlo_runs: int = Field(
        default=1,
        ge=1,
        le=10_000,
        description="Number of seeded runs to aggregate. 1 = single run.",
    )

    @field_validator(*_DEFAULTS, mode="before")
    @classmethod
    def _missing_to_default(cls, v: Any, info: ValidationInfo) -> Any:
        return _default_if_missing(info.field_name, v, _DEFAULTS[info.field_name])

    @field_validator("num_chargers")
    @classmethod
    def _clamp_num_chargers(cls, v: int) -> int:
        return _clamp("num_chargers", v, DEFAULT_NUM_CHARGERS, MIN_NUM_CHARGERS)

    @field_validator("use_dst", mode="before")
    @classmethod
    def _default_use_dst(cls, v: Any) -> Any:
        return False if v is None else v

    @field_validator("arrival_multiplier")
    @classmethod
    def _clamp_arrival_multiplier(cls, v: float) -> float:
        return _clamp("arrival_multiplier", v, DEFAULT_ARRIVAL_MULTIPLIER, MIN_ARRIVAL_MULTIPLIER)

    @field_validator("consumption_kwh_per_100km")
    @classmethod
    def _clamp_consumption(cls, v: float) -> float:
        return _clamp("consumption_kwh_per_100km", v, DEFAULT_CONSUMPTION_KWH_PER_100KM, MIN_RATE)

    @field_validator("charging_power_kw")
    @classmethod
    def _clamp_charging_power(cls, v: float) -> float:
        return _clamp("charging_power_kw", v, DEFAULT_CHARGING_POWER_KW, MIN_RATE)

    @property
    def theoretical_max_power_kw(self) -> float:
        """Installed capacity: every charge point drawing rated power at once."""
        return self.num_chargers * self.charging_power_kw
