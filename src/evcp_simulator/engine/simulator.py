"""Time-stepped simulation of a charge-point fleet over one year.

Each 15-minute tick follows this sequence:
  effective tick (DST) → hour / day / month → arrival rate
  → arrivals on available points → fleet power → energy + event counters

Arrivals per tick:
  expected = arrival_probability(hour) × arrival_multiplier × available_points
  whole arrivals = floor(expected), plus one Bernoulli(frac(expected)) arrival.

Each arrival takes the first available point in fleet order.  A 0 km demand
is counted as an arrival but starts no session.

Event counting (``SimulationConfig.event_count_policy``):
  - ``"reuse"``: a tick has events when at least one arrival was processed.
  - ``"redraw"``: when ``whole > 0``, otherwise on a second, independent
    Bernoulli(frac) draw, so the counted trial can differ from the one that
    decided the extra arrival.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable

import numpy as np

from evcp_simulator.config.calendar import (
    DAYS_PER_MONTH,
    DAYS_PER_YEAR,
    HOURS_PER_DAY,
    MONTHS_PER_YEAR,
    TICKS_PER_DAY,
    TICKS_PER_HOUR,
    TOTAL_TICKS,
)
from evcp_simulator.config.simulation import SimulationConfig
from evcp_simulator.config.tables import DemandTables
from evcp_simulator.engine.arrivals import sample_charging_demand, session_duration_ticks
from evcp_simulator.engine.charge_point import ChargePoint, ChargingSession
from evcp_simulator.engine.dst import adjust_for_dst
from evcp_simulator.engine.random_source import RandomSource, make_random_source
from evcp_simulator.models.results import SimulationResults

logger = logging.getLogger(__name__)

_TICK_HOURS = 1.0 / TICKS_PER_HOUR


class Simulator:
    """Owns one fleet of charge points and the accumulators of one run.

    Usage::

        sim = Simulator(SimulationConfig(num_chargers=20, random_seed=42))
        sim.run()
        results = sim.get_results()

    Construct a fresh instance per run: calling ``run()`` twice simulates a
    second year on top of the first.

    Parameters
    ----------
    config : SimulationConfig
        Fleet size, rates, DST and seed (already clamped by the model).
    tables : DemandTables | None
        Arrival and charging-demand distributions.  None = built-in T1/T2.
    random_source : RandomSource | None
        Overrides the generator derived from ``config.random_seed``.
    """

    def __init__(
        self,
        config: SimulationConfig,
        tables: DemandTables | None = None,
        random_source: RandomSource | None = None,
    ) -> None:
        self._config = config
        self._tables = tables if tables is not None else DemandTables()
        self._random = random_source if random_source is not None else make_random_source(config.random_seed)
        self._charge_points = [ChargePoint() for _ in range(config.num_chargers)]

        self._total_energy_kwh = 0.0
        self._max_power_kw = 0.0
        self._hourly_power_sum = np.zeros(HOURS_PER_DAY, dtype=np.float64)
        self._hourly_events = np.zeros(HOURS_PER_DAY, dtype=np.int64)
        self._daily_events = np.zeros(DAYS_PER_YEAR, dtype=np.int64)
        self._monthly_events = np.zeros(MONTHS_PER_YEAR, dtype=np.int64)
        self._total_arrivals = 0
        self._total_sessions = 0
        self._ticks_simulated = 0

    # ── Public API ──────────────────────────────────────────────────────

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def charge_points(self) -> tuple[ChargePoint, ...]:
        return tuple(self._charge_points)

    def run(self, should_stop: Callable[[], bool] | None = None) -> int:
        """Simulate every tick of the year in order.

        ``should_stop`` is polled before each tick; returning True ends the
        run early with the accumulators left as they are.

        Returns the number of ticks stepped.
        """
        if self._ticks_simulated > 0:
            logger.warning(
                f"run() called again after {self._ticks_simulated} ticks; "
                "results will accumulate a second year"
            )
        logger.info(
            f"Simulating {TOTAL_TICKS} ticks: {self._config.num_chargers} chargers × "
            f"{self._config.charging_power_kw} kW, dst={self._config.use_dst}, "
            f"seed={self._config.random_seed}"
        )
        stepped = 0
        for tick in range(TOTAL_TICKS):
            if should_stop is not None and should_stop():
                logger.info(f"Run stopped at tick {tick}")
                break
            self.step(tick)
            stepped += 1
        logger.info(
            f"Run finished: {self._total_energy_kwh:.1f} kWh, peak {self._max_power_kw:.1f} kW, "
            f"{self._total_sessions} sessions"
        )
        return stepped

    def step(self, tick: int) -> None:
        """Advance the model by one tick (0 ≤ tick < TOTAL_TICKS)."""
        cfg = self._config
        effective = adjust_for_dst(tick) if cfg.use_dst else tick

        hour = (effective % TICKS_PER_DAY) // TICKS_PER_HOUR
        day = effective // TICKS_PER_DAY
        month = min(day // DAYS_PER_MONTH, MONTHS_PER_YEAR - 1)

        # ── 1. Arrivals ─────────────────────────────────────────────────
        has_events = False
        available = self.available_count(effective)
        if available > 0:
            base_rate = self._tables.arrival_probability(hour) * cfg.arrival_multiplier
            expected = base_rate * available
            whole = math.floor(expected)
            frac = expected - whole

            arrivals = 0
            for _ in range(whole):
                if not self._handle_arrival(effective):
                    break
                arrivals += 1

            if self._random.next() < frac and self._handle_arrival(effective):
                arrivals += 1

            if cfg.event_count_policy == "redraw":
                has_events = whole > 0 or self._random.next() < frac
            else:
                has_events = arrivals > 0

        # ── 2. Power and energy ─────────────────────────────────────────
        power = self.total_power_demand(effective)
        self._hourly_power_sum[hour] += power
        self._max_power_kw = max(self._max_power_kw, power)
        self._total_energy_kwh += power * _TICK_HOURS

        # ── 3. Event counters ───────────────────────────────────────────
        if has_events:
            self._hourly_events[hour] += 1
            self._daily_events[day] += 1
            self._monthly_events[month] += 1

        self._ticks_simulated += 1

    def available_count(self, tick: int) -> int:
        return sum(1 for cp in self._charge_points if cp.is_available(tick))

    def total_power_demand(self, tick: int) -> float:
        """Fleet draw in kW at ``tick``."""
        return sum(cp.power_demand(tick) for cp in self._charge_points)

    def get_results(self) -> SimulationResults:
        """Snapshot of the accumulators.

        Before ``run()`` this is an all-zero result; the concurrency factor is
        0 because the theoretical maximum comes from configuration.
        """
        if self._ticks_simulated == 0:
            logger.debug("get_results() called before run(); returning zero results")

        theoretical = self._config.theoretical_max_power_kw
        return SimulationResults(
            num_chargers=self._config.num_chargers,
            total_energy_consumed_kwh=self._total_energy_kwh,
            theoretical_max_power_kw=theoretical,
            actual_max_power_kw=self._max_power_kw,
            concurrency_factor=self._max_power_kw / theoretical,
            hourly_power_demand_kw=[float(s) / DAYS_PER_YEAR for s in self._hourly_power_sum],
            hourly_charging_events=self._hourly_events.tolist(),
            daily_charging_events=self._daily_events.tolist(),
            monthly_charging_events=self._monthly_events.tolist(),
            total_arrivals=self._total_arrivals,
            total_sessions=self._total_sessions,
            ticks_simulated=self._ticks_simulated,
        )

    # ── Internals ───────────────────────────────────────────────────────

    def _first_available(self, tick: int) -> ChargePoint | None:
        for cp in self._charge_points:
            if cp.is_available(tick):
                return cp
        return None

    def _handle_arrival(self, tick: int) -> bool:
        """Process one arrival.  False if no charge point was free."""
        charge_point = self._first_available(tick)
        if charge_point is None:
            return False

        demand = sample_charging_demand(self._tables.charging_demands, self._random)
        self._total_arrivals += 1
        if demand.kilometers == 0:
            return True

        cfg = self._config
        duration = session_duration_ticks(
            demand.kilometers, cfg.consumption_kwh_per_100km, cfg.charging_power_kw,
        )
        charge_point.start_session(ChargingSession(
            start_tick=tick,
            duration_ticks=duration,
            power_kw=cfg.charging_power_kw,
        ))
        self._total_sessions += 1
        return True
