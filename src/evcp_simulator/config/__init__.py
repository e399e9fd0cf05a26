"""Configuration models — simulation settings, demand tables, calendar."""

from evcp_simulator.config.tables import ArrivalProbability, ChargingDemand, DemandTables
from evcp_simulator.config.simulation import SimulationConfig
from evcp_simulator.config.scenario import Scenario, load_scenario

__all__ = [
    "ArrivalProbability",
    "ChargingDemand",
    "DemandTables",
    "SimulationConfig",
    "Scenario",
    "load_scenario",
]
