"""Result models — simulation output contracts."""

from evcp_simulator.models.results import (
    MonteCarloSummary,
    ResultSummary,
    SimulationResults,
    SweepPoint,
    SweepResult,
)

__all__ = [
    "MonteCarloSummary",
    "ResultSummary",
    "SimulationResults",
    "SweepPoint",
    "SweepResult",
]
