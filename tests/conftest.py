"""Shared test fixtures — configs and scenarios matching base_case.yaml."""

from __future__ import annotations

import pytest

from evcp_simulator.config import DemandTables, Scenario, SimulationConfig


@pytest.fixture
def tables() -> DemandTables:
    return DemandTables()


@pytest.fixture
def single_charger_config() -> SimulationConfig:
    """1 charger, seed 42, default rates, DST off — the golden-value setup."""
    return SimulationConfig(
        num_chargers=1,
        use_dst=False,
        random_seed=42,
        consumption_kwh_per_100km=18.0,
        charging_power_kw=11.0,
    )


@pytest.fixture
def small_fleet_config() -> SimulationConfig:
    return SimulationConfig(num_chargers=3, random_seed=7)


@pytest.fixture
def scenario(small_fleet_config: SimulationConfig, tables: DemandTables) -> Scenario:
    return Scenario(simulation=small_fleet_config, tables=tables)
