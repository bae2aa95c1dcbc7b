"""Habit Engine - Pure logic for the habit ledger.

This engine provides stateless, pure Python functions for:
- Completion toggling (complete / same-day uncomplete)
- Streak decay when a calendar day is missed
- Habit add / update / remove on the in-memory ledger
- Mood entry upsert keyed by calendar day

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
All functions are static methods that operate on passed-in data. Records are
mutated in place; persistence belongs in HabitManager.

The clock is never read here. Every operation that depends on "today" takes
``now`` from the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.dt_utils import days_between, same_day, to_calendar_day

if TYPE_CHECKING:
    from datetime import date, datetime

    from ..type_defs import HabitData, MoodData


class HabitNotFoundError(Exception):
    """Raised when an operation references a habit id that does not exist.

    Attributes:
        habit_id: The id that was not found
    """

    def __init__(self, habit_id: str) -> None:
        """Initialize HabitNotFoundError."""
        self.habit_id = habit_id
        super().__init__(const.ERROR_HABIT_NOT_FOUND_FMT.format(habit_id))


@dataclass
class ToggleResult:
    """Outcome of HabitEngine.toggle_completion().

    Attributes:
        habit: The mutated habit record
        completed: True when the toggle completed the habit, False when it
                   undid today's completion
        streak: Streak after the toggle
        total_completed: Lifetime completion count after the toggle
    """

    habit: HabitData
    completed: bool
    streak: int
    total_completed: int

    @property
    def habit_id(self) -> str:
        """Return the id of the toggled habit."""
        return self.habit[const.DATA_HABIT_ID]


class HabitEngine:
    """Pure logic engine for habit ledger operations.

    All methods are static - no instance state.
    """

    # =========================================================================
    # Lookup
    # =========================================================================

    @staticmethod
    def find_habit(habits: list[HabitData], habit_id: str) -> HabitData:
        """Return the habit with ``habit_id``.

        Raises:
            HabitNotFoundError: No habit has that id.
        """
        for habit in habits:
            if habit.get(const.DATA_HABIT_ID) == habit_id:
                return habit
        raise HabitNotFoundError(habit_id)

    @staticmethod
    def is_completed_on(habit: HabitData, now: datetime | date) -> bool:
        """Return True if the habit's last completion falls on ``now``'s day."""
        return same_day(habit.get(const.DATA_HABIT_LAST_COMPLETED), now)

    @staticmethod
    def count_completed_on(habits: list[HabitData], day: datetime | date) -> int:
        """Return how many habits have their last completion on ``day``."""
        return sum(1 for habit in habits if HabitEngine.is_completed_on(habit, day))

    # =========================================================================
    # Completion
    # =========================================================================

    @staticmethod
    def toggle_completion(
        habits: list[HabitData], habit_id: str, now: datetime
    ) -> ToggleResult:
        """Flip today's completion of a habit.

        Already completed today: restore the completion it replaced, and
        decrement streak and totalCompleted (floored at 0).

        Otherwise: remember the current completion as ``previousCompleted``,
        stamp ``lastCompleted`` with ``now`` and increment streak and
        totalCompleted by one. The streak is not checked against a gap here;
        callers zero stale streaks with recompute_streaks() first.

        Raises:
            HabitNotFoundError: No habit has that id. Nothing is mutated.
        """
        habit = HabitEngine.find_habit(habits, habit_id)
        streak = habit.get(const.DATA_HABIT_STREAK, const.DEFAULT_ZERO)
        total = habit.get(const.DATA_HABIT_TOTAL_COMPLETED, const.DEFAULT_ZERO)

        if HabitEngine.is_completed_on(habit, now):
            habit[const.DATA_HABIT_LAST_COMPLETED] = habit.get(
                const.DATA_HABIT_PREVIOUS_COMPLETED
            )
            habit[const.DATA_HABIT_PREVIOUS_COMPLETED] = None
            habit[const.DATA_HABIT_STREAK] = max(0, streak - 1)
            habit[const.DATA_HABIT_TOTAL_COMPLETED] = max(0, total - 1)
            completed = False
        else:
            habit[const.DATA_HABIT_PREVIOUS_COMPLETED] = habit.get(
                const.DATA_HABIT_LAST_COMPLETED
            )
            habit[const.DATA_HABIT_LAST_COMPLETED] = now.isoformat()
            habit[const.DATA_HABIT_STREAK] = streak + 1
            habit[const.DATA_HABIT_TOTAL_COMPLETED] = total + 1
            completed = True

        return ToggleResult(
            habit=habit,
            completed=completed,
            streak=habit[const.DATA_HABIT_STREAK],
            total_completed=habit[const.DATA_HABIT_TOTAL_COMPLETED],
        )

    @staticmethod
    def recompute_streaks(habits: list[HabitData], now: datetime) -> list[str]:
        """Zero the streak of every habit whose chain is broken.

        A streak survives only if the last completion was today or yesterday.
        A habit that was never completed (or whose timestamp cannot be parsed)
        always has streak 0.

        Returns:
            Ids of the habits whose streak changed.
        """
        changed: list[str] = []
        for habit in habits:
            gap = days_between(habit.get(const.DATA_HABIT_LAST_COMPLETED), now)
            if gap is not None and gap <= 1:
                continue
            if habit.get(const.DATA_HABIT_STREAK, const.DEFAULT_ZERO) != 0:
                habit[const.DATA_HABIT_STREAK] = 0
                changed.append(habit[const.DATA_HABIT_ID])
        return changed

    # =========================================================================
    # Ledger CRUD
    # =========================================================================

    @staticmethod
    def add_habit(habits: list[HabitData], habit: HabitData) -> HabitData:
        """Append a fully built habit record.

        Raises:
            ValueError: A habit with the same id already exists.
        """
        habit_id = habit[const.DATA_HABIT_ID]
        if any(h.get(const.DATA_HABIT_ID) == habit_id for h in habits):
            raise ValueError(f"Duplicate habit id '{habit_id}'")
        habits.append(habit)
        return habit

    @staticmethod
    def update_habit(
        habits: list[HabitData], habit_id: str, patch: dict[str, Any]
    ) -> HabitData:
        """Apply the user-editable fields of ``patch`` to a habit.

        Only name, emoji, category and target are applied; completion
        counters and the id are never changed by an update.

        Raises:
            HabitNotFoundError: No habit has that id.
        """
        habit = HabitEngine.find_habit(habits, habit_id)
        for field in const.HABIT_MUTABLE_FIELDS:
            if field in patch:
                habit[field] = patch[field]  # type: ignore[literal-required]
        return habit

    @staticmethod
    def remove_habit(habits: list[HabitData], habit_id: str) -> HabitData:
        """Remove and return a habit.

        Raises:
            HabitNotFoundError: No habit has that id.
        """
        habit = HabitEngine.find_habit(habits, habit_id)
        habits.remove(habit)
        return habit

    # =========================================================================
    # Moods
    # =========================================================================

    @staticmethod
    def mood_for_day(moods: list[MoodData], now: datetime | date) -> MoodData | None:
        """Return the mood entry logged on ``now``'s calendar day, if any."""
        for entry in moods:
            if same_day(entry.get(const.DATA_MOOD_DATE), now):
                return entry
        return None

    @staticmethod
    def upsert_mood(moods: list[MoodData], entry: MoodData) -> bool:
        """Store a mood entry, replacing the one of the same calendar day.

        Returns:
            True if an existing entry was replaced, False if appended.
        """
        day = to_calendar_day(entry[const.DATA_MOOD_DATE])
        for index, existing in enumerate(moods):
            if to_calendar_day(existing.get(const.DATA_MOOD_DATE)) == day:
                moods[index] = entry
                return True
        moods.append(entry)
        return False
