"""Charge point — hosts at most one charging session at a time.

Two states, both derived from the held session and the queried tick:
  - **Idle**: no session, or ``tick ≥ start + duration``.
  - **Charging**: ``start ≤ tick < start + duration``.

A point drops to 0 kW exactly at ``tick == start + duration``.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ChargingSession:
    """One vehicle's occupancy of a charge point."""

    start_tick: int
    duration_ticks: int
    """Number of ticks the point is occupied (≥ 1)."""

    power_kw: float
    """Constant draw for the whole session."""

    def __post_init__(self) -> None:
        if self.duration_ticks < 1:
            raise ValueError(f"duration_ticks must be >= 1, got {self.duration_ticks}")

    @property
    def end_tick(self) -> int:
        """First tick after the session (exclusive bound)."""
        return self.start_tick + self.duration_ticks

    def covers(self, tick: int) -> bool:
        return self.start_tick <= tick < self.end_tick


class ChargePoint:
    """A single charger.  Callers check ``is_available`` before ``start_session``."""

    def __init__(self) -> None:
        self._session: ChargingSession | None = None

    @property
    def session(self) -> ChargingSession | None:
        return self._session

    def is_available(self, tick: int) -> bool:
        if self._session is None:
            return True
        return tick >= self._session.end_tick

    def is_charging(self, tick: int) -> bool:
        return self._session is not None and self._session.covers(tick)

    def start_session(self, session: ChargingSession) -> None:
        """Replace the held session unconditionally."""
        self._session = session

    def power_demand(self, tick: int) -> float:
        """Instantaneous draw in kW at ``tick``."""
        if self.is_charging(tick):
            return self._session.power_kw
        return 0.0
