"""Top-level scenario — bundles simulation settings and demand tables."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from evcp_simulator.config.simulation import SimulationConfig
from evcp_simulator.config.tables import DemandTables

logger = logging.getLogger(__name__)


class Scenario(BaseModel):
    """Complete input bundle for one simulation run."""

    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    tables: DemandTables = Field(default_factory=DemandTables)


def load_scenario(path: str | Path) -> Scenario:
    """Load a YAML scenario file.  Missing sections use defaults."""
    path = Path(path)
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    scenario = Scenario(**data)
    logger.info(
        f"Loaded scenario {path.name}: {scenario.simulation.num_chargers} chargers, "
        f"seed={scenario.simulation.random_seed}"
    )
    return scenario
