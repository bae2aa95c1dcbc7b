"""Gamification Manager - achievement unlocks and notifications.

Listens to habits_changed, re-runs the full achievement evaluation and diffs
the result against the persisted unlock snapshot (unlockedAchievements). Each
newly unlocked achievement appends its badge glyph and fires
habit_hero_achievement_unlocked exactly once, across reloads too.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.core import callback

from .. import const
from ..engines.experience_engine import ExperienceEngine
from ..engines.gamification_engine import GamificationEngine
from ..utils.dt_utils import dt_now_utc, dt_parse
from .base_manager import BaseManager

if TYPE_CHECKING:
    from datetime import datetime

    from ..type_defs import AchievementState


class GamificationManager(BaseManager):
    """Manager for achievement evaluation side effects."""

    async def async_setup(self) -> None:
        """Subscribe to ledger changes."""
        self.listen(const.SIGNAL_SUFFIX_HABITS_CHANGED, self._on_habits_changed)

    @callback
    def _on_habits_changed(self, payload: dict[str, Any]) -> None:
        """Re-evaluate achievements after any ledger change."""
        now = dt_parse(payload.get(const.ATTR_NOW)) or dt_now_utc()
        self.evaluate_achievements(now)

    def evaluate_achievements(self, now: datetime | None = None) -> list[AchievementState]:
        """Unlock every achievement whose requirement is now met.

        Returns:
            Achievements unlocked by this pass (empty if none).
        """
        now = now or dt_now_utc()
        unlocked_ids = self.coordinator.unlocked_achievements
        states = GamificationEngine.evaluate(
            self.coordinator.habits_data,
            self.coordinator.user_stats,
            now,
            previously_unlocked=unlocked_ids,
        )
        new_unlocks = GamificationEngine.find_new_unlocks(states, unlocked_ids)
        if not new_unlocks:
            return []

        for state in new_unlocks:
            unlocked_ids.append(state["id"])
            ExperienceEngine.add_badges(self.coordinator.user_stats, [state["badge"]])
            const.LOGGER.info(
                "INFO: Achievement unlocked: %s %s", state["badge"], state["title"]
            )
            self.hass.bus.async_fire(
                const.EVENT_ACHIEVEMENT_UNLOCKED,
                {
                    const.ATTR_ACHIEVEMENT_ID: state["id"],
                    const.ATTR_TITLE: state["title"],
                    const.ATTR_BADGE: state["badge"],
                    const.ATTR_RARITY: state["rarity"],
                },
            )

        self.coordinator._persist_and_update()
        return new_unlocks

    def get_achievements(self, now: datetime | None = None) -> dict[str, Any]:
        """Return every achievement with progress plus summary counters."""
        now = now or dt_now_utc()
        unlocked_ids = self.coordinator.unlocked_achievements
        states = GamificationEngine.evaluate(
            self.coordinator.habits_data,
            self.coordinator.user_stats,
            now,
            previously_unlocked=unlocked_ids,
        )
        return {
            "achievements": states,
            "summary": GamificationEngine.summarize(states, unlocked_ids),
        }
