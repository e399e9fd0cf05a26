"""Tests for engine/simulator.py — the year-long tick loop.

Covers:
  - Golden values: 1 charger, seed 42, default rates, DST off
  - Golden values for DST and the 'redraw' event policy, and a 20-charger fleet
  - Determinism (same seed) and non-determinism (no seed)
  - Theoretical max, peak bounds, energy = Σ power × 0.25 h
  - Hourly / daily / monthly event totals agree
  - Arrival multiplier 0 → no energy, no events
  - Saturated fleet: no arrival draws while every point is busy
  - 0 km arrivals count as events but draw no power
  - Month folding of days 360–364, DST remapping of day buckets
  - Results before run(), cancellation, repeated run()
"""

from __future__ import annotations

import logging

import pytest

from evcp_simulator.config.calendar import TOTAL_TICKS
from evcp_simulator.config.simulation import SimulationConfig
from evcp_simulator.engine.simulator import Simulator


class FixedRandom:
    """Returns the same value on every draw and counts draws."""

    def __init__(self, value: float) -> None:
        self.value = value
        self.calls = 0

    def next(self) -> float:
        self.calls += 1
        return self.value


def _run(config: SimulationConfig, **kwargs) -> Simulator:
    sim = Simulator(config, **kwargs)
    sim.run()
    return sim


# ═══════════════════════════════════════════════════════════════════════════
# Golden values
# ═══════════════════════════════════════════════════════════════════════════

class TestGoldenValues:
    """Recorded once; any change to the arrival process shows up here."""

    def test_single_charger_seed_42(self, single_charger_config: SimulationConfig):
        r = _run(single_charger_config).get_results()
        assert r.num_chargers == 1
        assert r.total_energy_consumed_kwh == 10169.5
        assert r.actual_max_power_kw == 11.0
        assert r.theoretical_max_power_kw == 11.0
        assert r.concurrency_factor == 1.0
        assert r.total_arrivals == 1262
        assert r.total_sessions == 825
        assert r.ticks_simulated == TOTAL_TICKS
        assert r.hourly_charging_events == [
            12, 16, 18, 19, 13, 15, 16, 12, 33, 40, 80, 75,
            79, 93, 92, 88, 110, 126, 127, 48, 70, 62, 11, 7,
        ]
        assert r.monthly_charging_events == [97, 101, 83, 115, 113, 91, 107, 109, 98, 111, 113, 124]
        assert sum(r.daily_charging_events) == 1262
        assert r.hourly_power_demand_kw[0] == pytest.approx(1.5671232876712329)
        assert r.hourly_power_demand_kw[18] == pytest.approx(10.095890410958905)

    def test_single_charger_seed_42_dst(self, single_charger_config: SimulationConfig):
        config = single_charger_config.model_copy(update={"use_dst": True})
        r = _run(config).get_results()
        assert r.total_energy_consumed_kwh == 10252.0
        assert r.total_arrivals == 1274
        assert r.total_sessions == 843
        assert r.monthly_charging_events == [97, 101, 86, 116, 116, 88, 113, 109, 98, 111, 115, 124]

    def test_single_charger_seed_42_redraw(self, single_charger_config: SimulationConfig):
        config = single_charger_config.model_copy(update={"event_count_policy": "redraw"})
        r = _run(config).get_results()
        assert r.total_energy_consumed_kwh == 10447.25
        assert r.total_arrivals == 1248
        assert r.total_sessions == 843
        assert sum(r.hourly_charging_events) == 1333
        assert r.monthly_charging_events == [111, 124, 94, 122, 103, 101, 105, 106, 78, 125, 112, 152]

    def test_twenty_chargers_seed_42(self):
        r = _run(SimulationConfig(num_chargers=20, random_seed=42)).get_results()
        assert r.total_energy_consumed_kwh == 216532.25
        assert r.actual_max_power_kw == 110.0
        assert r.theoretical_max_power_kw == 220.0
        assert r.concurrency_factor == 0.5
        assert r.total_arrivals == 25483
        assert r.total_sessions == 16832
        assert sum(r.hourly_charging_events) == 20899


# ═══════════════════════════════════════════════════════════════════════════
# Reproducibility
# ═══════════════════════════════════════════════════════════════════════════

class TestReproducibility:
    def test_same_seed_identical_results(self, small_fleet_config: SimulationConfig):
        a = _run(small_fleet_config).get_results()
        b = _run(small_fleet_config).get_results()
        assert a.model_dump_json() == b.model_dump_json()

    def test_unseeded_runs_differ(self):
        config = SimulationConfig(num_chargers=2)
        a = _run(config).get_results()
        b = _run(config).get_results()
        assert a.daily_charging_events != b.daily_charging_events

    def test_seed_zero_is_reproducible(self):
        config = SimulationConfig(num_chargers=1, random_seed=0)
        a = _run(config).get_results()
        b = _run(config).get_results()
        assert a == b
        assert a.total_energy_consumed_kwh == 10249.25


# ═══════════════════════════════════════════════════════════════════════════
# Aggregate invariants
# ═══════════════════════════════════════════════════════════════════════════

class TestInvariants:
    @pytest.mark.parametrize("num_chargers,power", [(1, 11.0), (4, 22.0), (7, 3.7)])
    def test_theoretical_max(self, num_chargers: int, power: float):
        config = SimulationConfig(num_chargers=num_chargers, charging_power_kw=power, random_seed=1)
        r = _run(config).get_results()
        assert r.theoretical_max_power_kw == num_chargers * power

    def test_peak_within_capacity(self, small_fleet_config: SimulationConfig):
        r = _run(small_fleet_config).get_results()
        assert 0.0 <= r.actual_max_power_kw <= r.theoretical_max_power_kw
        assert 0.0 <= r.concurrency_factor <= 1.0

    def test_energy_is_left_riemann_sum(self, small_fleet_config: SimulationConfig):
        sim = Simulator(small_fleet_config)
        expected = 0.0
        for tick in range(TOTAL_TICKS):
            sim.step(tick)
            expected += sim.total_power_demand(tick) * 0.25
        r = sim.get_results()
        assert r.total_energy_consumed_kwh >= 0.0
        assert r.total_energy_consumed_kwh == pytest.approx(expected)

    def test_event_axes_agree(self, small_fleet_config: SimulationConfig):
        r = _run(small_fleet_config).get_results()
        total = sum(r.hourly_charging_events)
        assert sum(r.daily_charging_events) == total
        assert sum(r.monthly_charging_events) == total

    def test_series_lengths(self, small_fleet_config: SimulationConfig):
        r = _run(small_fleet_config).get_results()
        assert len(r.hourly_power_demand_kw) == 24
        assert len(r.hourly_charging_events) == 24
        assert len(r.daily_charging_events) == 365
        assert len(r.monthly_charging_events) == 12

    def test_hourly_power_is_daily_average(self, small_fleet_config: SimulationConfig):
        """Σ hourly averages × 365 days × 0.25 h = total energy."""
        r = _run(small_fleet_config).get_results()
        assert sum(r.hourly_power_demand_kw) * 365 * 0.25 == pytest.approx(r.total_energy_consumed_kwh)

    def test_sessions_never_overlap(self, single_charger_config: SimulationConfig):
        sim = Simulator(single_charger_config)
        cp = sim.charge_points[0]
        previous = None
        for tick in range(TOTAL_TICKS):
            sim.step(tick)
            current = cp.session
            if current is not previous and current is not None:
                assert current.start_tick == tick
                if previous is not None:
                    assert previous.end_tick <= tick
                previous = current
            if current is not None and current.covers(tick):
                assert not cp.is_available(tick)


# ═══════════════════════════════════════════════════════════════════════════
# Scenarios with controlled randomness
# ═══════════════════════════════════════════════════════════════════════════

class TestControlledArrivals:
    def test_zero_multiplier_no_energy_no_events(self):
        config = SimulationConfig(num_chargers=1, arrival_multiplier=0.0, random_seed=42)
        r = _run(config).get_results()
        assert r.total_energy_consumed_kwh == 0.0
        assert r.actual_max_power_kw == 0.0
        assert r.concurrency_factor == 0.0
        assert r.total_arrivals == 0
        assert all(v == 0 for v in r.hourly_charging_events)
        assert all(v == 0 for v in r.daily_charging_events)
        assert all(v == 0 for v in r.monthly_charging_events)

    def test_saturated_fleet_skips_arrival_draws(self):
        """Multiplier 200 → at least one arrival whenever the point is free.

        r = 0.99 → 300 km → 20-tick sessions back to back; while busy no
        random draws happen, but power is still accumulated.
        """
        rng = FixedRandom(0.99)
        config = SimulationConfig(num_chargers=1, arrival_multiplier=200.0)
        r = _run(config, random_source=rng).get_results()
        sessions = TOTAL_TICKS // 20
        assert r.total_sessions == sessions
        assert r.total_arrivals == sessions
        assert r.total_energy_consumed_kwh == TOTAL_TICKS * 11.0 * 0.25
        assert r.actual_max_power_kw == 11.0
        assert r.concurrency_factor == 1.0
        # demand draw + fractional draw, once per session start
        assert rng.calls == 2 * sessions
        assert sum(r.hourly_charging_events) == sessions

    def test_zero_km_arrivals_are_events_without_power(self):
        """r = 0.0 → every sample is 0 km, so no point is ever occupied.

        Every tick processes all floor(expected) arrivals plus the extra one.
        """
        config = SimulationConfig(num_chargers=1, arrival_multiplier=200.0)
        r = _run(config, random_source=FixedRandom(0.0)).get_results()
        assert r.total_energy_consumed_kwh == 0.0
        assert r.total_sessions == 0
        assert r.total_arrivals == 305_140
        assert r.hourly_charging_events == [365 * 4] * 24
        assert r.daily_charging_events == [96] * 365

    def test_last_days_fold_into_twelfth_month(self):
        config = SimulationConfig(num_chargers=1, arrival_multiplier=200.0)
        r = _run(config, random_source=FixedRandom(0.0)).get_results()
        assert r.monthly_charging_events[:11] == [30 * 96] * 11
        assert r.monthly_charging_events[11] == 35 * 96

    def test_dst_moves_ticks_between_days(self):
        config = SimulationConfig(num_chargers=1, arrival_multiplier=200.0, use_dst=True)
        r = _run(config, random_source=FixedRandom(0.0)).get_results()
        assert r.daily_charging_events[83] == 96
        assert r.daily_charging_events[84] == 92
        assert r.daily_charging_events[301] == 100
        assert sum(r.daily_charging_events) == TOTAL_TICKS
        assert r.hourly_charging_events == [365 * 4] * 24

    def test_redraw_policy_draws_twice_without_whole_arrivals(self):
        """r = 0.99 never beats frac < 0.11: no arrivals, one extra draw per tick."""
        reuse_rng = FixedRandom(0.99)
        redraw_rng = FixedRandom(0.99)
        _run(SimulationConfig(num_chargers=1), random_source=reuse_rng)
        r = _run(
            SimulationConfig(num_chargers=1, event_count_policy="redraw"),
            random_source=redraw_rng,
        ).get_results()
        assert reuse_rng.calls == TOTAL_TICKS
        assert redraw_rng.calls == 2 * TOTAL_TICKS
        assert sum(r.hourly_charging_events) == 0

    def test_first_available_point_is_used(self):
        config = SimulationConfig(num_chargers=3, arrival_multiplier=200.0)
        sim = Simulator(config, random_source=FixedRandom(0.99))
        sim.step(0)
        # base 1.88 × 3 free = 5.64 → 5 whole arrivals, only 3 points
        busy = [cp.session is not None for cp in sim.charge_points]
        assert busy == [True, True, True]
        assert sim.get_results().total_sessions == 3


# ═══════════════════════════════════════════════════════════════════════════
# Lifecycle
# ═══════════════════════════════════════════════════════════════════════════

class TestLifecycle:
    def test_results_before_run_are_zero(self):
        sim = Simulator(SimulationConfig(num_chargers=5, random_seed=1))
        r = sim.get_results()
        assert r.total_energy_consumed_kwh == 0.0
        assert r.actual_max_power_kw == 0.0
        assert r.concurrency_factor == 0.0
        assert r.theoretical_max_power_kw == 55.0
        assert r.ticks_simulated == 0
        assert sum(r.daily_charging_events) == 0

    def test_should_stop_cancels_between_ticks(self, single_charger_config: SimulationConfig):
        sim = Simulator(single_charger_config)
        calls = {"n": 0}

        def stop_after_100() -> bool:
            calls["n"] += 1
            return calls["n"] > 100

        assert sim.run(should_stop=stop_after_100) == 100
        assert sim.get_results().ticks_simulated == 100

    def test_run_returns_tick_count(self, single_charger_config: SimulationConfig):
        assert Simulator(single_charger_config).run() == TOTAL_TICKS

    def test_second_run_accumulates_and_warns(self, single_charger_config: SimulationConfig, caplog):
        sim = _run(single_charger_config)
        first = sim.get_results()
        with caplog.at_level(logging.WARNING, logger="evcp_simulator.engine.simulator"):
            sim.run()
        second = sim.get_results()
        assert second.ticks_simulated == 2 * TOTAL_TICKS
        assert second.total_energy_consumed_kwh > first.total_energy_consumed_kwh
        assert "accumulate" in caplog.text

    def test_results_are_frozen(self, single_charger_config: SimulationConfig):
        from pydantic import ValidationError

        r = Simulator(single_charger_config).get_results()
        with pytest.raises(ValidationError):
            r.total_energy_consumed_kwh = 1.0
