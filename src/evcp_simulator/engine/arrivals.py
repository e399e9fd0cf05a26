"""Arrival sampling — charging demand draw and session duration.

Demand is drawn by inverse CDF over the table in its given order:
draw ``r``, accumulate probabilities, return the first entry whose
cumulative sum exceeds ``r``.  When rounding leaves the cumulative sum
below ``r`` (table T2 sums to 0.9997) the first entry is returned.

Duration:
  energy_needed  = km / 100 × consumption_kwh_per_100km
  duration_ticks = ceil(energy_needed / charging_power_kw × ticks_per_hour), ≥ 1
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from evcp_simulator.config.calendar import TICKS_PER_HOUR
from evcp_simulator.config.tables import ChargingDemand
from evcp_simulator.engine.random_source import RandomSource

logger = logging.getLogger(__name__)


def sample_charging_demand(
    demands: Sequence[ChargingDemand],
    random_source: RandomSource,
) -> ChargingDemand:
    """Draw one charging demand from the distribution (one random draw)."""
    r = random_source.next()
    cumulative = 0.0
    for demand in demands:
        cumulative += demand.probability
        if r < cumulative:
            return demand
    logger.debug(f"Demand walk exhausted (r={r:.6f}, cumulative={cumulative:.6f}), using first entry")
    return demands[0]


def energy_needed_kwh(kilometers: float, consumption_kwh_per_100km: float) -> float:
    return kilometers / 100 * consumption_kwh_per_100km


def session_duration_ticks(
    kilometers: float,
    consumption_kwh_per_100km: float,
    charging_power_kw: float,
    ticks_per_hour: int = TICKS_PER_HOUR,
) -> int:
    """Ticks needed to recharge ``kilometers`` of range at ``charging_power_kw``.

    Example: 300 km at 18 kWh/100km on 11 kW → 54 kWh → ceil(19.64) = 20 ticks.
    """
    energy = energy_needed_kwh(kilometers, consumption_kwh_per_100km)
    return max(1, math.ceil(energy / charging_power_kw * ticks_per_hour))
