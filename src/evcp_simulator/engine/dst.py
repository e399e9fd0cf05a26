"""Simplified daylight-saving-time tick shift.

Days 84–300 (roughly late March to late October) are shifted forward by one
hour.  There is no skipped or repeated hour on the transition days; the
shift simply moves the tick itself.
"""

from __future__ import annotations

from evcp_simulator.config.calendar import HOURS_PER_DAY, TICKS_PER_HOUR

DST_FIRST_DAY = 84
DST_END_DAY = 301
"""Exclusive."""


def adjust_for_dst(tick: int, ticks_per_hour: int = TICKS_PER_HOUR) -> int:
    """Return the effective tick: ``tick + ticks_per_hour`` inside the DST window."""
    day_of_year = tick // (HOURS_PER_DAY * ticks_per_hour)
    if DST_FIRST_DAY <= day_of_year < DST_END_DAY:
        return tick + ticks_per_hour
    return tick
