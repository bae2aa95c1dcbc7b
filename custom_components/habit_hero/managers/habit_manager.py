"""Habit Manager - habit ledger workflow and XP awarding.

Handles:
- Completion toggles (XP, streak badges, bus events)
- Habit add / update / remove
- Mood logging

ARCHITECTURE: The manager reads the coordinator's in-memory document, applies
the pure engines, persists the whole document and emits habits_changed so the
GamificationManager can re-evaluate achievements.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import const
from ..data_builders import build_habit, build_mood_entry
from ..engines.experience_engine import ExperienceEngine
from ..engines.habit_engine import HabitEngine, HabitNotFoundError
from ..utils.dt_utils import dt_now_utc
from .base_manager import BaseManager

if TYPE_CHECKING:
    from datetime import datetime

    from ..engines.experience_engine import XpAwardResult
    from ..engines.habit_engine import ToggleResult
    from ..type_defs import HabitData, MoodData


class HabitManager(BaseManager):
    """Manager for habit ledger mutations.

    Unknown habit ids are logged and ignored; callers that must report them
    (services) check existence first via coordinator.has_habit().
    """

    async def async_setup(self) -> None:
        """Set up the habit manager."""
        const.LOGGER.debug("HabitManager initialized for entry %s", self.entry_id)

    # =========================================================================
    # Completion
    # =========================================================================

    def toggle_habit(
        self, habit_id: str, now: datetime | None = None
    ) -> ToggleResult | None:
        """Complete a habit for today, or undo today's completion.

        XP is awarded on complete only, never taken back on uncomplete.

        Returns:
            The toggle result, or None if the habit does not exist.
        """
        now = now or dt_now_utc()
        # The day rollover may not have run yet for this calendar day
        reset = HabitEngine.recompute_streaks(self.coordinator.habits_data, now)
        if reset:
            const.LOGGER.debug("DEBUG: Reset stale streaks before toggling: %s", reset)
        try:
            result = HabitEngine.toggle_completion(
                self.coordinator.habits_data, habit_id, now
            )
        except HabitNotFoundError:
            const.LOGGER.warning("WARNING: Toggle ignored, habit '%s' not found", habit_id)
            if reset:
                self.coordinator._persist_and_update()
            return None

        if result.completed:
            award = ExperienceEngine.award_xp(
                self.coordinator.user_stats, const.XP_PER_COMPLETION
            )
            streak_badges = ExperienceEngine.add_badges(
                self.coordinator.user_stats,
                ExperienceEngine.streak_milestone_badges(
                    result.streak,
                    self.coordinator.user_stats[const.DATA_STATS_BADGES],
                ),
            )
            self._fire_completion_events(result, award, streak_badges)
            const.LOGGER.debug(
                "DEBUG: Habit '%s' completed (streak %s, +%s XP)",
                habit_id,
                result.streak,
                const.XP_PER_COMPLETION,
            )
        else:
            const.LOGGER.debug(
                "DEBUG: Habit '%s' completion undone (streak %s)", habit_id, result.streak
            )

        self.coordinator._persist_and_update()
        self.emit(
            const.SIGNAL_SUFFIX_HABITS_CHANGED, habit_id=habit_id, now=now.isoformat()
        )
        return result

    def _fire_completion_events(
        self, result: ToggleResult, award: XpAwardResult, streak_badges: list[str]
    ) -> None:
        habit = result.habit
        self.hass.bus.async_fire(
            const.EVENT_HABIT_COMPLETED,
            {
                const.ATTR_HABIT_ID: result.habit_id,
                const.ATTR_HABIT_NAME: habit.get(const.DATA_HABIT_NAME),
                const.ATTR_STREAK: result.streak,
                const.ATTR_NEW_BADGES: streak_badges,
            },
        )
        if award.leveled_up:
            const.LOGGER.info(
                "INFO: Level up %s -> %s", award.old_level, award.new_level
            )
            self.hass.bus.async_fire(
                const.EVENT_LEVEL_UP,
                {
                    const.ATTR_OLD_LEVEL: award.old_level,
                    const.ATTR_NEW_LEVEL: award.new_level,
                    const.ATTR_NEW_BADGES: award.new_badges,
                },
            )

    # =========================================================================
    # Ledger CRUD
    # =========================================================================

    def add_habit(
        self, user_input: dict[str, Any], now: datetime | None = None
    ) -> HabitData:
        """Create a habit from user input.

        Raises:
            HabitValidationError: The input violates a habit rule.
        """
        now = now or dt_now_utc()
        habit = build_habit(user_input, now=now)
        HabitEngine.add_habit(self.coordinator.habits_data, habit)
        const.LOGGER.info(
            "INFO: Added habit '%s' (%s)",
            habit[const.DATA_HABIT_NAME],
            habit[const.DATA_HABIT_ID],
        )
        self.coordinator._persist_and_update()
        self.emit(
            const.SIGNAL_SUFFIX_HABITS_CHANGED,
            habit_id=habit[const.DATA_HABIT_ID],
            now=now.isoformat(),
        )
        return habit

    def update_habit(
        self, habit_id: str, user_input: dict[str, Any]
    ) -> HabitData | None:
        """Edit the name, emoji, category or target of a habit.

        Raises:
            HabitValidationError: A supplied field violates a habit rule.

        Returns:
            The updated habit, or None if the habit does not exist.
        """
        try:
            existing = HabitEngine.find_habit(self.coordinator.habits_data, habit_id)
        except HabitNotFoundError:
            const.LOGGER.warning("WARNING: Update ignored, habit '%s' not found", habit_id)
            return None

        patch = build_habit(user_input, existing)
        habit = HabitEngine.update_habit(self.coordinator.habits_data, habit_id, patch)
        const.LOGGER.debug("DEBUG: Updated habit '%s'", habit_id)
        self.coordinator._persist_and_update()
        self.emit(
            const.SIGNAL_SUFFIX_HABITS_CHANGED,
            habit_id=habit_id,
            now=dt_now_utc().isoformat(),
        )
        return habit

    def remove_habit(self, habit_id: str) -> HabitData | None:
        """Delete a habit.

        Achievements already unlocked stay unlocked.

        Returns:
            The removed habit, or None if the habit does not exist.
        """
        try:
            habit = HabitEngine.remove_habit(self.coordinator.habits_data, habit_id)
        except HabitNotFoundError:
            const.LOGGER.warning("WARNING: Remove ignored, habit '%s' not found", habit_id)
            return None

        const.LOGGER.info("INFO: Removed habit '%s'", habit.get(const.DATA_HABIT_NAME))
        self.coordinator._persist_and_update()
        self.emit(
            const.SIGNAL_SUFFIX_HABITS_CHANGED,
            habit_id=habit_id,
            now=dt_now_utc().isoformat(),
        )
        return habit

    # =========================================================================
    # Moods
    # =========================================================================

    def log_mood(
        self, mood: str, note: str | None = None, now: datetime | None = None
    ) -> MoodData:
        """Record today's mood, replacing an earlier entry for today.

        Raises:
            ValueError: Unknown mood value.
        """
        entry = build_mood_entry(mood, note, now=now or dt_now_utc())
        replaced = HabitEngine.upsert_mood(self.coordinator.moods_data, entry)
        const.LOGGER.debug(
            "DEBUG: Mood '%s' %s", mood, "replaced today's entry" if replaced else "logged"
        )
        self.coordinator._persist_and_update()
        return entry
