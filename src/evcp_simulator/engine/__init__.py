"""Engine — random sources, charge points, the tick loop and batch runs."""

from evcp_simulator.engine.random_source import (
    PlatformRandom,
    RandomSource,
    SeededRandom,
    SeededState,
    make_random_source,
)
from evcp_simulator.engine.charge_point import ChargePoint, ChargingSession
from evcp_simulator.engine.dst import adjust_for_dst
from evcp_simulator.engine.arrivals import sample_charging_demand, session_duration_ticks
from evcp_simulator.engine.simulator import Simulator
from evcp_simulator.engine.orchestrator import run_engine, run_single, summarize
from evcp_simulator.engine.sweep import run_charger_sweep

__all__ = [
    "PlatformRandom",
    "RandomSource",
    "SeededRandom",
    "SeededState",
    "make_random_source",
    "ChargePoint",
    "ChargingSession",
    "adjust_for_dst",
    "sample_charging_demand",
    "session_duration_ticks",
    "Simulator",
    "run_engine",
    "run_single",
    "summarize",
    # Batch analysis
    "run_charger_sweep",
]
