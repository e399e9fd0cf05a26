"""Demand tables — arrival probability by hour (T1) and charging demand by distance (T2).

Both tables are read-only input data for the whole run.  They are injected into
the engine rather than read from module globals so that engines with different
tables can coexist.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, model_validator

from evcp_simulator.config.calendar import HOURS_PER_DAY

PROBABILITY_SUM_TOLERANCE = 1e-3
"""Published table T2 sums to 0.9997; the remainder falls back to the first entry."""


class ArrivalProbability(BaseModel):
    """Probability that a vehicle arrives during an average 15-minute interval of ``start_hour``."""

    model_config = ConfigDict(frozen=True)

    start_hour: int = Field(ge=0, le=HOURS_PER_DAY - 1, description="Hour of day (0–23)")
    probability: float = Field(ge=0.0, le=1.0, description="Arrival probability per charge point per tick")


class ChargingDemand(BaseModel):
    """One point of the charging-demand distribution, expressed as driving range."""

    model_config = ConfigDict(frozen=True)

    kilometers: float = Field(ge=0.0, description="Range to recharge (km). 0 = no charging needed")
    probability: float = Field(ge=0.0, le=1.0, description="Probability of this demand")


DEFAULT_ARRIVAL_PROBABILITIES: tuple[ArrivalProbability, ...] = tuple(
    ArrivalProbability(start_hour=h, probability=p)
    for h, p in enumerate([
        0.0094, 0.0094, 0.0094, 0.0094, 0.0094, 0.0094, 0.0094, 0.0094,
        0.0283, 0.0283,
        0.0566, 0.0566, 0.0566,
        0.0755, 0.0755, 0.0755,
        0.1038, 0.1038, 0.1038,
        0.0472, 0.0472, 0.0472,
        0.0094, 0.0094,
    ])
)

DEFAULT_CHARGING_DEMANDS: tuple[ChargingDemand, ...] = tuple(
    ChargingDemand(kilometers=km, probability=p)
    for km, p in [
        (0, 0.3431),
        (5, 0.049),
        (10, 0.098),
        (20, 0.1176),
        (30, 0.0882),
        (50, 0.1176),
        (100, 0.1078),
        (200, 0.049),
        (300, 0.0294),
    ]
)


class DemandTables(BaseModel):
    """Both demand distributions consumed by the simulation engine.

    ``arrival_probabilities`` must hold one entry per hour, ordered 0..23.
    ``charging_demands`` is walked in order for inverse-CDF sampling, so its
    order is significant; its probabilities must sum to 1.
    """

    model_config = ConfigDict(frozen=True)

    arrival_probabilities: tuple[ArrivalProbability, ...] = Field(
        default=DEFAULT_ARRIVAL_PROBABILITIES,
        description="24 hourly arrival probabilities (table T1).",
    )
    charging_demands: tuple[ChargingDemand, ...] = Field(
        default=DEFAULT_CHARGING_DEMANDS,
        description="Charging demand distribution by range (table T2).",
    )

    @model_validator(mode="after")
    def _check_tables(self) -> DemandTables:
        hours = [a.start_hour for a in self.arrival_probabilities]
        if hours != list(range(HOURS_PER_DAY)):
            raise ValueError(
                f"arrival_probabilities must cover hours 0..{HOURS_PER_DAY - 1} in order, got {hours}"
            )
        if not self.charging_demands:
            raise ValueError("charging_demands must not be empty")
        total = math.fsum(d.probability for d in self.charging_demands)
        if abs(total - 1.0) > PROBABILITY_SUM_TOLERANCE:
            raise ValueError(f"charging_demands probabilities sum to {total}, expected 1.0")
        return self

    def arrival_probability(self, hour: int) -> float:
        return self.arrival_probabilities[hour].probability
