"""Charger-count sweep — concurrency factor as a function of fleet size.

Varies ``num_chargers`` and keeps every other setting of the base scenario.
Each count gets its own engine, so points are independent; with a fixed seed
the whole sweep is reproducible.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from evcp_simulator.config.scenario import Scenario
from evcp_simulator.config.simulation import SimulationConfig
from evcp_simulator.engine.orchestrator import run_single
from evcp_simulator.models.results import SweepPoint, SweepResult

logger = logging.getLogger(__name__)

DEFAULT_CHARGER_COUNTS: tuple[int, ...] = tuple(range(1, 31))


def run_charger_sweep(
    scenario: Scenario,
    charger_counts: Iterable[int] | None = None,
) -> SweepResult:
    """Run one full-year simulation per charger count.

    Parameters
    ----------
    scenario : Scenario
        Base scenario.  ``monte_carlo_runs`` is ignored; each point is a single run.
    charger_counts : Iterable[int] | None
        Fleet sizes to simulate.  None = 1..30.

    Returns
    -------
    SweepResult
        Points in the order of ``charger_counts``.
    """
    counts = list(charger_counts) if charger_counts is not None else list(DEFAULT_CHARGER_COUNTS)
    logger.info(f"Sweeping {len(counts)} fleet sizes")

    points: list[SweepPoint] = []
    for n in counts:
        # Validated, so counts below 1 are clamped like any other input.
        config = SimulationConfig(
            **{**scenario.simulation.model_dump(), "num_chargers": n, "monte_carlo_runs": 1}
        )
        results = run_single(Scenario(simulation=config, tables=scenario.tables))
        points.append(SweepPoint(
            num_chargers=results.num_chargers,
            actual_max_power_kw=results.actual_max_power_kw,
            theoretical_max_power_kw=results.theoretical_max_power_kw,
            concurrency_factor=results.concurrency_factor,
            total_energy_consumed_kwh=results.total_energy_consumed_kwh,
            energy_per_charger_kwh=results.total_energy_consumed_kwh / results.num_chargers,
        ))

    return SweepResult(points=points)
