"""Result types — the contract between engine, API and batch analysis.

``SimulationResults`` is the immutable snapshot returned by
``Simulator.get_results()``.  Derived views (summary table, sweeps,
Monte-Carlo percentiles) are separate models so the snapshot itself stays
a faithful record of one run.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


# ═══════════════════════════════════════════════════════════════════════════
# Monte-Carlo aggregate
# ═══════════════════════════════════════════════════════════════════════════

class MonteCarloSummary(BaseModel):
    """Percentiles of headline metrics across N seeded runs."""

    model_config = ConfigDict(frozen=True)

    num_runs: int
    base_seed: int
    """Run ``i`` used seed ``base_seed + i``."""

    max_power_p10: float
    max_power_p50: float
    max_power_p90: float

    concurrency_p10: float
    concurrency_p50: float
    concurrency_p90: float

    energy_p10: float
    energy_p50: float
    energy_p90: float

    representative_seed: int
    """Seed of the run whose energy is closest to the median (the returned result)."""


# ═══════════════════════════════════════════════════════════════════════════
# Simulation snapshot
# ═══════════════════════════════════════════════════════════════════════════

class SimulationResults(BaseModel):
    """Snapshot of one completed (or not yet started) run.

    All series are zero-based and aligned to calendar position.
    """

    model_config = ConfigDict(frozen=True)

    num_chargers: int

    total_energy_consumed_kwh: float
    """Σ power × 0.25 h over all ticks (left Riemann sum)."""

    theoretical_max_power_kw: float
    """num_chargers × charging_power_kw."""

    actual_max_power_kw: float
    """Highest instantaneous fleet draw observed."""

    concurrency_factor: float
    """actual / theoretical, unclamped."""

    hourly_power_demand_kw: list[float]
    """24 values — average fleet power per hour of day (sum over the year / 365)."""

    hourly_charging_events: list[int]
    """24 values — ticks with at least one arrival, by hour of day."""

    daily_charging_events: list[int]
    """365 values, by day of year."""

    monthly_charging_events: list[int]
    """12 values, by 30-day month (days 360–364 land in the last bucket)."""

    total_arrivals: int = 0
    """Arrivals processed, including 0 km arrivals that need no charging."""

    total_sessions: int = 0
    """Arrivals that occupied a charge point."""

    ticks_simulated: int = 0

    monte_carlo: MonteCarloSummary | None = None
    """Set when the result is the representative run of a Monte-Carlo batch."""


class ResultSummary(BaseModel):
    """Headline figures derived from a ``SimulationResults``."""

    num_chargers: int
    actual_max_power_kw: float
    theoretical_max_power_kw: float
    max_power_ratio: float
    """actual / theoretical (raw)."""
    concurrency_pct: float
    """Concurrency factor as a percentage, clamped to [0, 100] for reporting."""
    energy_per_charger_kwh: float
    total_energy_mwh: float


# ═══════════════════════════════════════════════════════════════════════════
# Charger-count sweep
# ═══════════════════════════════════════════════════════════════════════════

class SweepPoint(BaseModel):
    """Headline metrics for one fleet size."""

    num_chargers: int
    actual_max_power_kw: float
    theoretical_max_power_kw: float
    concurrency_factor: float
    total_energy_consumed_kwh: float
    energy_per_charger_kwh: float


class SweepResult(BaseModel):
    """Concurrency factor as a function of fleet size."""

    points: list[SweepPoint]
    """Ordered as the requested charger counts."""
