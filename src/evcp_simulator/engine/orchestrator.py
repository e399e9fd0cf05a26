"""Orchestrator — single runs and Monte-Carlo batches over a ``Scenario``.

Entry point: ``run_engine(scenario)``
  - ``monte_carlo_runs == 1`` → one run with the configured seed
    (non-deterministic when no seed is set)
  - ``monte_carlo_runs > 1``  → N seeded runs, P10/P50/P90 of peak power,
    concurrency factor and energy; the run closest to the median energy is
    returned with the ``MonteCarloSummary`` attached

Runs are independent: each owns its charge points, accumulators and random
source.  They execute sequentially in this process.
"""

from __future__ import annotations

import logging

import numpy as np

from evcp_simulator.config.scenario import Scenario
from evcp_simulator.engine.simulator import Simulator
from evcp_simulator.models.results import MonteCarloSummary, ResultSummary, SimulationResults

logger = logging.getLogger(__name__)

DEFAULT_BASE_SEED = 42


# ═══════════════════════════════════════════════════════════════════════════
# Public entry points
# ═══════════════════════════════════════════════════════════════════════════

def run_engine(scenario: Scenario) -> SimulationResults:
    """Run the scenario once, or as a Monte-Carlo batch when ``monte_carlo_runs > 1``."""
    if scenario.simulation.monte_carlo_runs > 1:
        return _run_monte_carlo(scenario)
    return run_single(scenario)


def run_single(scenario: Scenario, seed: int | None = None) -> SimulationResults:
    """One full-year run.  ``seed`` overrides ``scenario.simulation.random_seed``."""
    config = scenario.simulation
    if seed is not None:
        config = config.model_copy(update={"random_seed": seed})
    sim = Simulator(config, scenario.tables)
    sim.run()
    return sim.get_results()


def summarize(results: SimulationResults) -> ResultSummary:
    """Headline figures for reports: ratios, per-charger energy, MWh."""
    theoretical = results.theoretical_max_power_kw
    ratio = results.actual_max_power_kw / theoretical if theoretical > 0 else 0.0
    concurrency_pct = min(100.0, max(0.0, results.concurrency_factor * 100))
    return ResultSummary(
        num_chargers=results.num_chargers,
        actual_max_power_kw=results.actual_max_power_kw,
        theoretical_max_power_kw=theoretical,
        max_power_ratio=ratio,
        concurrency_pct=concurrency_pct,
        energy_per_charger_kwh=results.total_energy_consumed_kwh / results.num_chargers,
        total_energy_mwh=results.total_energy_consumed_kwh / 1000,
    )


# ═══════════════════════════════════════════════════════════════════════════
# Monte-Carlo aggregation
# ═══════════════════════════════════════════════════════════════════════════

def _run_monte_carlo(scenario: Scenario) -> SimulationResults:
    """Run N seeded simulations and aggregate into P10/P50/P90.

    Strategy:
      1. Run N simulations with sequential seeds (base_seed + i)
      2. Compute percentiles of peak power, concurrency, energy
      3. Pick the run whose energy is closest to the median
      4. Attach the summary to that run's results
    """
    base_seed = (
        scenario.simulation.random_seed
        if scenario.simulation.random_seed is not None
        else DEFAULT_BASE_SEED
    )
    num_runs = scenario.simulation.monte_carlo_runs
    logger.info(f"Monte-Carlo: {num_runs} runs from seed {base_seed}")

    runs: list[SimulationResults] = []
    for i in range(num_runs):
        runs.append(run_single(scenario, seed=base_seed + i))

    peaks = np.array([r.actual_max_power_kw for r in runs])
    concurrency = np.array([r.concurrency_factor for r in runs])
    energy = np.array([r.total_energy_consumed_kwh for r in runs])

    energy_p50 = float(np.percentile(energy, 50))
    median_idx = int(np.argmin(np.abs(energy - energy_p50)))

    mc = MonteCarloSummary(
        num_runs=num_runs,
        base_seed=base_seed,
        max_power_p10=float(np.percentile(peaks, 10)),
        max_power_p50=float(np.percentile(peaks, 50)),
        max_power_p90=float(np.percentile(peaks, 90)),
        concurrency_p10=float(np.percentile(concurrency, 10)),
        concurrency_p50=float(np.percentile(concurrency, 50)),
        concurrency_p90=float(np.percentile(concurrency, 90)),
        energy_p10=float(np.percentile(energy, 10)),
        energy_p50=energy_p50,
        energy_p90=float(np.percentile(energy, 90)),
        representative_seed=base_seed + median_idx,
    )
    return runs[median_idx].model_copy(update={"monte_carlo": mc})
