"""Document and record builders for Habit Hero.

This module is the SINGLE SOURCE OF TRUTH for:
- Record field defaults (habits, moods, user stats, the whole document)
- Business validation of user supplied habit fields
- Shape checking and normalization of loaded / imported documents
- JSON serialization of the interchange format

### Build Functions
Each record type has a `build_<record>()` function that applies defaults and
returns a complete dict ready for storage. `build_habit()` handles both create
(existing=None) and update (existing=HabitData).

### Normalization
`normalize_document()` turns any document-shaped dict into a complete
AppDocument: optional keys are filled, level fields are re-derived from
totalXP, and badges are deduplicated. It is idempotent, so a normalized
document survives a serialize/parse round trip unchanged.

Consumers:
- store.py (load, import, export)
- managers/habit_manager.py (habit and mood creation)
- services.py (error mapping)
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any
import uuid

from . import const
from .engines.experience_engine import ExperienceEngine
from .utils.dt_utils import dt_now_utc, dt_parse, to_calendar_day

if TYPE_CHECKING:
    from datetime import datetime

    from .type_defs import AppDocument, HabitData, MoodData, UserStatsData


# ==============================================================================
# EXCEPTIONS
# ==============================================================================


class HabitValidationError(Exception):
    """Validation error with the offending field.

    Attributes:
        field: The DATA_HABIT_* key that failed validation
        reason: Human readable reason
    """

    def __init__(self, field: str, reason: str) -> None:
        """Initialize HabitValidationError."""
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")


class DocumentParseError(Exception):
    """Raised when text or a dict is not a valid Habit Hero document."""


# ==============================================================================
# HABITS
# ==============================================================================


def validate_habit_data(data: dict[str, Any], *, is_update: bool = False) -> dict[str, str]:
    """Validate habit business rules.

    Args:
        data: Habit fields with DATA_HABIT_* keys
        is_update: True when only the supplied fields need to be valid

    Returns:
        Dict of errors: {field: reason}. Empty dict means validation passed.
    """
    errors: dict[str, str] = {}

    if not is_update or const.DATA_HABIT_NAME in data:
        name = data.get(const.DATA_HABIT_NAME)
        name = name.strip() if isinstance(name, str) else ""
        if not name:
            errors[const.DATA_HABIT_NAME] = "name must not be empty"
        elif len(name) > const.HABIT_NAME_MAX_LENGTH:
            errors[const.DATA_HABIT_NAME] = (
                f"name must be at most {const.HABIT_NAME_MAX_LENGTH} characters"
            )

    if const.DATA_HABIT_TARGET in data:
        target = data[const.DATA_HABIT_TARGET]
        if isinstance(target, bool) or not isinstance(target, int) or target < 1:
            errors[const.DATA_HABIT_TARGET] = "target must be an integer >= 1"

    if const.DATA_HABIT_CATEGORY in data:
        category = data[const.DATA_HABIT_CATEGORY]
        if not isinstance(category, str) or not category.strip():
            errors[const.DATA_HABIT_CATEGORY] = "category must not be empty"

    return errors


def generate_habit_id(now: datetime | None = None) -> str:
    """Return a unique habit id that sorts by creation time."""
    created = now or dt_now_utc()
    return f"{int(created.timestamp() * 1000)}-{uuid.uuid4().hex}"


def build_habit(
    user_input: dict[str, Any],
    existing: HabitData | None = None,
    *,
    now: datetime | None = None,
) -> HabitData:
    """Build habit data for create or update operations.

    Args:
        user_input: Fields with DATA_HABIT_* keys (may be partial on update)
        existing: None for create, the current record for update
        now: Creation instant used for the id (create only)

    Returns:
        Complete HabitData. On create the counters start at zero; on update
        the counters and id of ``existing`` are preserved.

    Raises:
        HabitValidationError: A supplied field violates a business rule.
    """
    is_create = existing is None

    errors = validate_habit_data(user_input, is_update=not is_create)
    if errors:
        field, reason = next(iter(errors.items()))
        raise HabitValidationError(field, reason)

    def get_field(data_key: str, default: Any) -> Any:
        """Get field value: user_input > existing > default."""
        if data_key in user_input and user_input[data_key] is not None:
            return user_input[data_key]
        if existing is not None:
            return existing.get(data_key, default)
        return default

    if existing is None:
        return {
            const.DATA_HABIT_ID: generate_habit_id(now),
            const.DATA_HABIT_NAME: str(get_field(const.DATA_HABIT_NAME, "")).strip(),
            const.DATA_HABIT_EMOJI: str(
                get_field(const.DATA_HABIT_EMOJI, const.DEFAULT_HABIT_EMOJI)
            ),
            const.DATA_HABIT_CATEGORY: str(
                get_field(const.DATA_HABIT_CATEGORY, const.DEFAULT_HABIT_CATEGORY)
            ),
            const.DATA_HABIT_TARGET: int(
                get_field(const.DATA_HABIT_TARGET, const.DEFAULT_HABIT_TARGET)
            ),
            const.DATA_HABIT_STREAK: const.DEFAULT_ZERO,
            const.DATA_HABIT_TOTAL_COMPLETED: const.DEFAULT_ZERO,
            const.DATA_HABIT_LAST_COMPLETED: None,
            const.DATA_HABIT_PREVIOUS_COMPLETED: None,
        }  # type: ignore[return-value]

    updated = dict(existing)
    for field in const.HABIT_MUTABLE_FIELDS:
        updated[field] = get_field(field, existing.get(field))
    updated[const.DATA_HABIT_NAME] = str(updated[const.DATA_HABIT_NAME]).strip()
    return updated  # type: ignore[return-value]


# ==============================================================================
# MOODS
# ==============================================================================


def build_mood_entry(
    mood: str, note: str | None = None, *, now: datetime | None = None
) -> MoodData:
    """Build a mood entry stamped with ``now``.

    Raises:
        ValueError: ``mood`` is not one of happy, neutral, sad.
    """
    if mood not in const.MOOD_VALUES:
        raise ValueError(f"Unknown mood '{mood}'")
    entry: dict[str, Any] = {
        const.DATA_MOOD_DATE: (now or dt_now_utc()).isoformat(),
        const.DATA_MOOD_MOOD: mood,
    }
    if note:
        entry[const.DATA_MOOD_NOTE] = note
    return entry  # type: ignore[return-value]


# ==============================================================================
# USER STATS & DOCUMENT
# ==============================================================================


def build_user_stats(
    now: datetime | None = None,
    total_xp: int = 0,
    badges: list[str] | None = None,
) -> UserStatsData:
    """Build user stats with level fields derived from ``total_xp``."""
    stats: dict[str, Any] = {
        **ExperienceEngine.build_level_fields(total_xp),
        const.DATA_STATS_TOTAL_XP: max(total_xp, 0),
        const.DATA_STATS_BADGES: list(dict.fromkeys(badges or [])),
        const.DATA_STATS_JOIN_DATE: (now or dt_now_utc()).isoformat(),
    }
    return stats  # type: ignore[return-value]


def build_default_document(
    now: datetime | None = None, *, seed_habits: bool = True
) -> AppDocument:
    """Build the document written on first load and after a full reset.

    Args:
        now: Instant used for joinDate and lastUpdated
        seed_habits: Include the four starter habits
    """
    now = now or dt_now_utc()
    habits: list[dict[str, Any]] = []
    if seed_habits:
        habits = [
            {
                **seed,
                const.DATA_HABIT_STREAK: const.DEFAULT_ZERO,
                const.DATA_HABIT_TOTAL_COMPLETED: const.DEFAULT_ZERO,
                const.DATA_HABIT_LAST_COMPLETED: None,
                const.DATA_HABIT_PREVIOUS_COMPLETED: None,
            }
            for seed in const.DEFAULT_HABITS
        ]
    return {
        const.DATA_HABITS: habits,
        const.DATA_MOODS: [],
        const.DATA_USER_STATS: build_user_stats(now),
        const.DATA_LAST_UPDATED: now.isoformat(),
        const.DATA_UNLOCKED_ACHIEVEMENTS: [],
    }  # type: ignore[return-value]


# ==============================================================================
# NORMALIZATION
# ==============================================================================


def _as_non_negative_int(value: Any, field: str, default: int = 0) -> int:
    """Coerce a counter to a non-negative int or raise DocumentParseError."""
    if value is None:
        return default
    if isinstance(value, bool):
        raise DocumentParseError(f"'{field}' must be a number")
    try:
        return max(int(value), 0)
    except (TypeError, ValueError, OverflowError) as err:
        raise DocumentParseError(f"'{field}' must be a number") from err


def _as_timestamp(value: Any, field: str) -> str | None:
    """Return ``value`` if it is a parseable timestamp string, else None."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise DocumentParseError(f"'{field}' must be an ISO timestamp or null")
    return value if dt_parse(value) is not None else None


def _normalize_habit(raw: Any) -> HabitData:
    if not isinstance(raw, dict):
        raise DocumentParseError("Each habit must be an object")
    habit_id = raw.get(const.DATA_HABIT_ID)
    name = raw.get(const.DATA_HABIT_NAME)
    if isinstance(habit_id, int) and not isinstance(habit_id, bool):
        habit_id = str(habit_id)
    if not isinstance(habit_id, str) or not habit_id:
        raise DocumentParseError("Habit is missing its 'id'")
    if not isinstance(name, str):
        raise DocumentParseError(f"Habit '{habit_id}' is missing its 'name'")

    last_completed = _as_timestamp(
        raw.get(const.DATA_HABIT_LAST_COMPLETED), const.DATA_HABIT_LAST_COMPLETED
    )
    streak = _as_non_negative_int(
        raw.get(const.DATA_HABIT_STREAK), const.DATA_HABIT_STREAK
    )
    return {
        const.DATA_HABIT_ID: habit_id,
        const.DATA_HABIT_NAME: name,
        const.DATA_HABIT_EMOJI: str(raw.get(const.DATA_HABIT_EMOJI) or const.DEFAULT_HABIT_EMOJI),
        const.DATA_HABIT_CATEGORY: str(
            raw.get(const.DATA_HABIT_CATEGORY) or const.DEFAULT_HABIT_CATEGORY
        ),
        const.DATA_HABIT_TARGET: max(
            _as_non_negative_int(
                raw.get(const.DATA_HABIT_TARGET),
                const.DATA_HABIT_TARGET,
                const.DEFAULT_HABIT_TARGET,
            ),
            1,
        ),
        const.DATA_HABIT_STREAK: streak if last_completed else 0,
        const.DATA_HABIT_TOTAL_COMPLETED: _as_non_negative_int(
            raw.get(const.DATA_HABIT_TOTAL_COMPLETED), const.DATA_HABIT_TOTAL_COMPLETED
        ),
        const.DATA_HABIT_LAST_COMPLETED: last_completed,
        const.DATA_HABIT_PREVIOUS_COMPLETED: _as_timestamp(
            raw.get(const.DATA_HABIT_PREVIOUS_COMPLETED),
            const.DATA_HABIT_PREVIOUS_COMPLETED,
        ),
    }  # type: ignore[return-value]


def _normalize_moods(raw_moods: Any) -> list[MoodData]:
    if not isinstance(raw_moods, list):
        raise DocumentParseError("'moods' must be a list")

    # One entry per calendar day; a later entry for the same day wins
    by_day: dict[Any, MoodData] = {}
    for raw in raw_moods:
        if not isinstance(raw, dict):
            raise DocumentParseError("Each mood must be an object")
        mood = raw.get(const.DATA_MOOD_MOOD)
        day = to_calendar_day(raw.get(const.DATA_MOOD_DATE))
        if mood not in const.MOOD_VALUES or day is None:
            raise DocumentParseError(f"Invalid mood entry: {raw}")
        entry: dict[str, Any] = {
            const.DATA_MOOD_DATE: raw[const.DATA_MOOD_DATE],
            const.DATA_MOOD_MOOD: mood,
        }
        if raw.get(const.DATA_MOOD_NOTE):
            entry[const.DATA_MOOD_NOTE] = str(raw[const.DATA_MOOD_NOTE])
        by_day.pop(day, None)
        by_day[day] = entry  # type: ignore[assignment]
    return list(by_day.values())


def _normalize_user_stats(raw: Any, fallback_join_date: str) -> UserStatsData:
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise DocumentParseError("'userStats' must be an object")
    badges = raw.get(const.DATA_STATS_BADGES) or []
    if not isinstance(badges, list):
        raise DocumentParseError("'badges' must be a list")

    total_xp = _as_non_negative_int(
        raw.get(const.DATA_STATS_TOTAL_XP), const.DATA_STATS_TOTAL_XP
    )
    join_date = raw.get(const.DATA_STATS_JOIN_DATE)
    if not isinstance(join_date, str) or not join_date:
        join_date = fallback_join_date
    return {
        **ExperienceEngine.build_level_fields(total_xp),
        const.DATA_STATS_TOTAL_XP: total_xp,
        const.DATA_STATS_BADGES: list(dict.fromkeys(str(b) for b in badges)),
        const.DATA_STATS_JOIN_DATE: join_date,
    }  # type: ignore[return-value]


def normalize_document(raw: Any) -> AppDocument:
    """Return a complete, invariant-respecting copy of a document dict.

    Raises:
        DocumentParseError: ``raw`` does not have the basic document shape.
    """
    if not isinstance(raw, dict):
        raise DocumentParseError("Document must be a JSON object")

    raw_habits = raw.get(const.DATA_HABITS, [])
    if not isinstance(raw_habits, list):
        raise DocumentParseError("'habits' must be a list")
    habits = [_normalize_habit(item) for item in raw_habits]
    if len({h[const.DATA_HABIT_ID] for h in habits}) != len(habits):
        raise DocumentParseError("Habit ids must be unique")

    last_updated = raw.get(const.DATA_LAST_UPDATED)
    if not isinstance(last_updated, str) or not last_updated:
        last_updated = dt_now_utc().isoformat()

    unlocked = raw.get(const.DATA_UNLOCKED_ACHIEVEMENTS) or []
    if not isinstance(unlocked, list):
        raise DocumentParseError("'unlockedAchievements' must be a list")

    return {
        const.DATA_HABITS: habits,
        const.DATA_MOODS: _normalize_moods(raw.get(const.DATA_MOODS, [])),
        const.DATA_USER_STATS: _normalize_user_stats(
            raw.get(const.DATA_USER_STATS), last_updated
        ),
        const.DATA_LAST_UPDATED: last_updated,
        const.DATA_UNLOCKED_ACHIEVEMENTS: list(dict.fromkeys(str(a) for a in unlocked)),
    }  # type: ignore[return-value]


# ==============================================================================
# INTERCHANGE (JSON TEXT)
# ==============================================================================


def serialize_document(document: AppDocument) -> str:
    """Return the document as human-readable JSON text."""
    return json.dumps(document, indent=2, ensure_ascii=False)


def parse_document(text: str) -> AppDocument:
    """Parse exported JSON text into a normalized document.

    Raises:
        DocumentParseError: The text is not JSON or not document-shaped.
            Nothing is applied anywhere on failure.
    """
    if not isinstance(text, str) or not text.strip():
        raise DocumentParseError("Import data is empty")
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as err:
        raise DocumentParseError(f"Invalid JSON: {err.msg}") from err
    return normalize_document(raw)
