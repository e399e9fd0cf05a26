"""Simulation timeline — fixed one-year calendar at 15-minute resolution.

No leap years.  Tick 0 is hour 0 of day 0.
"""

TICKS_PER_HOUR = 4
"""15-minute ticks."""

HOURS_PER_DAY = 24
DAYS_PER_YEAR = 365
TICKS_PER_DAY = HOURS_PER_DAY * TICKS_PER_HOUR
TOTAL_TICKS = DAYS_PER_YEAR * TICKS_PER_DAY

DAYS_PER_MONTH = 30
"""Fixed 30-day month used for monthly event buckets (not calendar-accurate)."""

MONTHS_PER_YEAR = 12
"""Days 360–364 overrun the 12th 30-day month and are folded into it."""
