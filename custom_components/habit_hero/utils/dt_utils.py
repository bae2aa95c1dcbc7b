# File: utils/dt_utils.py
"""Calendar-day utilities for Habit Hero.

Pure Python date/time functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

Every comparison in Habit Hero happens at calendar-day granularity, and the
calendar day is always the UTC day. Naive inputs are taken as UTC.

Functions:
    - dt_now_utc: Get current datetime in UTC
    - dt_now_iso: Get current datetime as ISO string
    - dt_parse: Normalize str/date/datetime inputs to an aware UTC datetime
    - to_calendar_day: Normalize an input to its UTC calendar date
    - same_day: Compare two inputs at calendar-day granularity
    - days_between: Whole calendar days between two inputs
    - iter_days_back: Yield calendar dates walking back from today
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, date, datetime, timedelta
import logging

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)

DateInput = str | date | datetime | None


# ==============================================================================
# Current Time
# ==============================================================================


def dt_now_utc() -> datetime:
    """Return the current datetime in UTC (timezone-aware)."""
    return datetime.now(UTC)


def dt_now_iso() -> str:
    """Return the current UTC datetime as an ISO 8601 string."""
    return dt_now_utc().isoformat()


# ==============================================================================
# Parsing
# ==============================================================================


def dt_parse(dt_input: DateInput) -> datetime | None:
    """Normalize a string, date or datetime into an aware UTC datetime.

    Args:
        dt_input: ISO 8601 string (a trailing "Z" is accepted), date,
            datetime, or None.

    Returns:
        Timezone-aware datetime in UTC, or None when the input is empty or
        cannot be parsed.

    Example:
        >>> dt_parse("2025-04-15T10:30:00Z")
        datetime.datetime(2025, 4, 15, 10, 30, tzinfo=datetime.timezone.utc)
    """
    if not dt_input:
        return None

    result: datetime | None = None

    if isinstance(dt_input, datetime):
        result = dt_input
    elif isinstance(dt_input, date):
        result = datetime.combine(dt_input, datetime.min.time())
    elif isinstance(dt_input, str):
        text = dt_input.strip()
        if text.endswith(("Z", "z")):
            text = f"{text[:-1]}+00:00"
        try:
            result = datetime.fromisoformat(text)
        except ValueError:
            _LOGGER.debug("Unparseable datetime value: %s", dt_input)
            return None
    else:
        _LOGGER.debug("Unsupported datetime input type: %s", type(dt_input))
        return None

    if result.tzinfo is None:
        result = result.replace(tzinfo=UTC)
    return result.astimezone(UTC)


def to_calendar_day(dt_input: DateInput) -> date | None:
    """Return the UTC calendar date of an input, or None if unparseable."""
    if isinstance(dt_input, date) and not isinstance(dt_input, datetime):
        return dt_input
    parsed = dt_parse(dt_input)
    return parsed.date() if parsed else None


# ==============================================================================
# Calendar-Day Comparison
# ==============================================================================


def same_day(first: DateInput, second: DateInput) -> bool:
    """Return True if both inputs fall on the same UTC calendar day.

    Missing or unparseable inputs never match.
    """
    first_day = to_calendar_day(first)
    second_day = to_calendar_day(second)
    if first_day is None or second_day is None:
        return False
    return first_day == second_day


def days_between(earlier: DateInput, now: DateInput) -> int | None:
    """Return whole calendar days from ``earlier`` to ``now``.

    The difference is taken between the calendar dates, not the instants, so
    23:59 yesterday and 00:01 today are one day apart.

    Returns:
        ``now_day - earlier_day`` (negative when ``earlier`` is in the
        future), or None when either input is missing or unparseable.
    """
    earlier_day = to_calendar_day(earlier)
    now_day = to_calendar_day(now)
    if earlier_day is None or now_day is None:
        return None
    return (now_day - earlier_day).days


def iter_days_back(now: DateInput, count: int) -> Iterator[date]:
    """Yield ``count`` calendar dates: today, yesterday, and so on."""
    today = to_calendar_day(now)
    if today is None:
        return
    for offset in range(max(count, 0)):
        yield today - timedelta(days=offset)
