"""Pure utility modules for Habit Hero.

Modules here have ZERO Home Assistant dependencies so they can be unit tested
without any Home Assistant fixtures.
"""

from .dt_utils import (
    days_between,
    dt_now_iso,
    dt_now_utc,
    dt_parse,
    iter_days_back,
    same_day,
    to_calendar_day,
)
from .math_utils import percentage, round_half_up

__all__ = [
    "days_between",
    "dt_now_iso",
    "dt_now_utc",
    "dt_parse",
    "iter_days_back",
    "percentage",
    "round_half_up",
    "same_day",
    "to_calendar_day",
]
