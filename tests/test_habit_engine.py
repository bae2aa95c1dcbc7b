"""Unit tests for HabitEngine - pure Python logic tests.

Test Categories:
- Completion toggle (complete / same-day uncomplete)
- Streak recompute on load and day rollover
- Ledger add / update / remove
- Mood upsert keyed by calendar day
"""

from __future__ import annotations

from datetime import timedelta

import pytest

from custom_components.habit_hero import const
from custom_components.habit_hero.engines.habit_engine import (
    HabitEngine,
    HabitNotFoundError,
)

from .conftest import FIXED_NOW, create_habit

YESTERDAY = FIXED_NOW - timedelta(days=1)
TWO_DAYS_AGO = FIXED_NOW - timedelta(days=2)


# =============================================================================
# Test: toggle_completion
# =============================================================================


class TestToggleCompletion:
    """Tests for HabitEngine.toggle_completion()."""

    def test_complete_increments_counters(self) -> None:
        """Completing stamps now and bumps streak and total."""
        habits = [create_habit(streak=2, total_completed=10, last_completed=YESTERDAY)]

        result = HabitEngine.toggle_completion(habits, "h1", FIXED_NOW)

        assert result.completed is True
        assert result.streak == 3
        assert result.total_completed == 11
        assert habits[0][const.DATA_HABIT_LAST_COMPLETED] == FIXED_NOW.isoformat()
        assert habits[0][const.DATA_HABIT_PREVIOUS_COMPLETED] == YESTERDAY.isoformat()

    def test_same_day_uncomplete_restores_state(self) -> None:
        """Complete then uncomplete on the same day restores the record."""
        habits = [create_habit(streak=4, total_completed=20, last_completed=YESTERDAY)]
        before = dict(habits[0])

        HabitEngine.toggle_completion(habits, "h1", FIXED_NOW)
        result = HabitEngine.toggle_completion(
            habits, "h1", FIXED_NOW + timedelta(hours=3)
        )

        assert result.completed is False
        assert habits[0][const.DATA_HABIT_STREAK] == before[const.DATA_HABIT_STREAK]
        assert (
            habits[0][const.DATA_HABIT_TOTAL_COMPLETED]
            == before[const.DATA_HABIT_TOTAL_COMPLETED]
        )
        assert (
            habits[0][const.DATA_HABIT_LAST_COMPLETED]
            == before[const.DATA_HABIT_LAST_COMPLETED]
        )

    def test_first_completion_undo_leaves_zero_streak_and_null(self) -> None:
        """Undoing the very first completion returns to a never-completed habit."""
        habits = [create_habit()]

        HabitEngine.toggle_completion(habits, "h1", FIXED_NOW)
        HabitEngine.toggle_completion(habits, "h1", FIXED_NOW)

        assert habits[0][const.DATA_HABIT_LAST_COMPLETED] is None
        assert habits[0][const.DATA_HABIT_STREAK] == 0
        assert habits[0][const.DATA_HABIT_TOTAL_COMPLETED] == 0

    def test_uncomplete_floors_at_zero(self) -> None:
        """Counters never go negative."""
        habits = [create_habit(streak=0, total_completed=0, last_completed=FIXED_NOW)]

        result = HabitEngine.toggle_completion(habits, "h1", FIXED_NOW)

        assert result.streak == 0
        assert result.total_completed == 0

    def test_unknown_id_raises_and_does_not_mutate(self) -> None:
        """An unknown id raises HabitNotFoundError and changes nothing."""
        habits = [create_habit()]
        snapshot = [dict(h) for h in habits]

        with pytest.raises(HabitNotFoundError) as exc_info:
            HabitEngine.toggle_completion(habits, "missing", FIXED_NOW)

        assert exc_info.value.habit_id == "missing"
        assert habits == snapshot


# =============================================================================
# Test: recompute_streaks
# =============================================================================


class TestRecomputeStreaks:
    """Tests for HabitEngine.recompute_streaks()."""

    def test_today_and_yesterday_survive(self) -> None:
        """Streaks completed today or yesterday are unchanged."""
        habits = [
            create_habit("a", streak=5, last_completed=FIXED_NOW),
            create_habit("b", streak=3, last_completed=YESTERDAY),
        ]

        assert HabitEngine.recompute_streaks(habits, FIXED_NOW) == []
        assert [h[const.DATA_HABIT_STREAK] for h in habits] == [5, 3]

    def test_two_days_old_resets(self) -> None:
        """A completion two or more days old breaks the streak."""
        habits = [create_habit("a", streak=9, last_completed=TWO_DAYS_AGO)]

        assert HabitEngine.recompute_streaks(habits, FIXED_NOW) == ["a"]
        assert habits[0][const.DATA_HABIT_STREAK] == 0
        # Lifetime count is untouched
        assert habits[0][const.DATA_HABIT_LAST_COMPLETED] == TWO_DAYS_AGO.isoformat()

    def test_never_completed_is_forced_to_zero(self) -> None:
        """A null lastCompleted always means streak 0."""
        habits = [create_habit("a", streak=2, last_completed=None)]

        assert HabitEngine.recompute_streaks(habits, FIXED_NOW) == ["a"]
        assert habits[0][const.DATA_HABIT_STREAK] == 0

    def test_already_zero_is_not_reported(self) -> None:
        """Only habits whose streak actually changed are returned."""
        habits = [create_habit("a", streak=0, last_completed=TWO_DAYS_AGO)]
        assert HabitEngine.recompute_streaks(habits, FIXED_NOW) == []


# =============================================================================
# Test: ledger CRUD
# =============================================================================


class TestLedgerCrud:
    """Tests for add_habit(), update_habit() and remove_habit()."""

    def test_add_appends(self) -> None:
        """A new habit is appended to the ledger."""
        habits = [create_habit("a")]
        HabitEngine.add_habit(habits, create_habit("b"))
        assert [h[const.DATA_HABIT_ID] for h in habits] == ["a", "b"]

    def test_add_duplicate_id_rejected(self) -> None:
        """Ids stay unique."""
        habits = [create_habit("a")]
        with pytest.raises(ValueError):
            HabitEngine.add_habit(habits, create_habit("a"))

    def test_update_only_touches_mutable_fields(self) -> None:
        """Counters and id cannot be changed by an update."""
        habits = [create_habit("a", streak=3, total_completed=7)]

        HabitEngine.update_habit(
            habits,
            "a",
            {
                const.DATA_HABIT_NAME: "Renamed",
                const.DATA_HABIT_TARGET: 4,
                const.DATA_HABIT_STREAK: 99,
                const.DATA_HABIT_ID: "other",
            },
        )

        assert habits[0][const.DATA_HABIT_NAME] == "Renamed"
        assert habits[0][const.DATA_HABIT_TARGET] == 4
        assert habits[0][const.DATA_HABIT_STREAK] == 3
        assert habits[0][const.DATA_HABIT_ID] == "a"

    def test_remove(self) -> None:
        """Removing returns the record and drops it from the ledger."""
        habits = [create_habit("a"), create_habit("b")]
        removed = HabitEngine.remove_habit(habits, "a")
        assert removed[const.DATA_HABIT_ID] == "a"
        assert [h[const.DATA_HABIT_ID] for h in habits] == ["b"]

    def test_update_and_remove_unknown_raise(self) -> None:
        """Unknown ids raise HabitNotFoundError."""
        with pytest.raises(HabitNotFoundError):
            HabitEngine.update_habit([], "x", {})
        with pytest.raises(HabitNotFoundError):
            HabitEngine.remove_habit([], "x")


# =============================================================================
# Test: moods
# =============================================================================


class TestMoods:
    """Tests for upsert_mood() and mood_for_day()."""

    def test_upsert_replaces_same_day(self) -> None:
        """A second entry on the same day replaces the first."""
        moods: list = []
        first = {const.DATA_MOOD_DATE: FIXED_NOW.isoformat(), const.DATA_MOOD_MOOD: "sad"}
        second = {
            const.DATA_MOOD_DATE: (FIXED_NOW + timedelta(hours=2)).isoformat(),
            const.DATA_MOOD_MOOD: "happy",
        }

        assert HabitEngine.upsert_mood(moods, first) is False
        assert HabitEngine.upsert_mood(moods, second) is True

        assert len(moods) == 1
        assert moods[0][const.DATA_MOOD_MOOD] == "happy"

    def test_upsert_appends_new_day(self) -> None:
        """Entries on different days are kept side by side."""
        moods = [
            {const.DATA_MOOD_DATE: YESTERDAY.isoformat(), const.DATA_MOOD_MOOD: "neutral"}
        ]
        HabitEngine.upsert_mood(
            moods, {const.DATA_MOOD_DATE: FIXED_NOW.isoformat(), const.DATA_MOOD_MOOD: "happy"}
        )
        assert len(moods) == 2

    def test_mood_for_day(self) -> None:
        """Today's mood is found; a day without an entry gives None."""
        moods = [
            {const.DATA_MOOD_DATE: YESTERDAY.isoformat(), const.DATA_MOOD_MOOD: "neutral"}
        ]
        assert HabitEngine.mood_for_day(moods, YESTERDAY)[const.DATA_MOOD_MOOD] == "neutral"
        assert HabitEngine.mood_for_day(moods, FIXED_NOW) is None
