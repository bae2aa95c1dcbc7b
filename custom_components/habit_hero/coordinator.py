# File: coordinator.py
"""Coordinator for the Habit Hero integration.

Owns the single in-memory document and is the only path to persistence.
There is no polling: entities refresh when a manager calls
_persist_and_update(). Streaks are recomputed on first refresh and at every
UTC midnight, since Home Assistant sessions are long-lived.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.core import callback
from homeassistant.helpers.event import async_track_utc_time_change
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator

from . import const
from .engines.habit_engine import HabitEngine
from .engines.statistics_engine import StatisticsEngine
from .managers import GamificationManager, HabitManager
from .utils.dt_utils import dt_now_utc

if TYPE_CHECKING:
    from datetime import datetime

    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant

    from .store import HabitHeroStore
    from .type_defs import (
        AnalyticsReport,
        AppDocument,
        HabitData,
        MoodData,
        UserStatsData,
    )


class HabitHeroCoordinator(DataUpdateCoordinator["AppDocument"]):
    """Coordinator for the Habit Hero integration."""

    config_entry: ConfigEntry

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        store: HabitHeroStore,
    ) -> None:
        """Initialize the HabitHeroCoordinator."""
        super().__init__(
            hass,
            const.LOGGER,
            config_entry=config_entry,
            name=f"{const.DOMAIN}{const.COORDINATOR_SUFFIX}",
            update_interval=None,
        )
        self.store = store
        self.habit_manager = HabitManager(hass, self)
        self.gamification_manager = GamificationManager(hass, self)

    # -------------------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------------------

    async def async_config_entry_first_refresh(self) -> None:
        """Recompute stale streaks, start managers and load entities."""
        now = dt_now_utc()
        changed = HabitEngine.recompute_streaks(self.habits_data, now)
        if changed:
            const.LOGGER.info("INFO: Reset %s stale streak(s) on load", len(changed))
            self._persist()

        await self.habit_manager.async_setup()
        await self.gamification_manager.async_setup()

        # Catch up on unlocks earned by a document loaded from storage
        self.gamification_manager.evaluate_achievements(now)

        self.config_entry.async_on_unload(
            async_track_utc_time_change(
                self.hass, self._handle_day_rollover, hour=0, minute=0, second=5
            )
        )
        await super().async_config_entry_first_refresh()

    async def _async_update_data(self) -> AppDocument:
        """Return the in-memory document (storage is the source of truth)."""
        return self._data

    @callback
    def _handle_day_rollover(self, now: datetime) -> None:
        """Zero streaks that did not survive into the new UTC day."""
        changed = HabitEngine.recompute_streaks(self.habits_data, now)
        const.LOGGER.debug("DEBUG: Day rollover, %s streak(s) reset", len(changed))
        if changed:
            self._persist_and_update()

    # -------------------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------------------

    def _persist(self) -> None:
        """Save to persistent storage."""
        self.store.set_data(self._data)
        self.hass.async_create_task(self.store.async_save())

    def _persist_and_update(self) -> None:
        """Save to storage and push the document to entities."""
        self._persist()
        self.async_set_updated_data(self._data)

    async def async_reset_all_data(self) -> None:
        """Remove the stored document and start over from the default."""
        await self.store.async_clear_data()
        self.async_set_updated_data(self._data)

    async def async_import_data(self, text: str) -> AppDocument:
        """Replace the whole document with imported JSON text.

        The imported document is treated as a fresh load: stale streaks are
        reset and achievements are re-evaluated.

        Raises:
            DocumentParseError: Invalid text; the current document is kept.
        """
        document = await self.store.async_import_json(text)
        now = dt_now_utc()
        HabitEngine.recompute_streaks(self.habits_data, now)
        self.gamification_manager.evaluate_achievements(now)
        self._persist_and_update()
        return document

    def export_data(self) -> str:
        """Return the document as interchange JSON text."""
        return self.store.export_json()

    # -------------------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------------------

    @property
    def _data(self) -> AppDocument:
        return self.store.data

    @property
    def habits_data(self) -> list[HabitData]:
        """Return the habit ledger."""
        return self._data[const.DATA_HABITS]

    @property
    def moods_data(self) -> list[MoodData]:
        """Return the mood log."""
        return self._data[const.DATA_MOODS]

    @property
    def user_stats(self) -> UserStatsData:
        """Return XP, level and badges."""
        return self._data[const.DATA_USER_STATS]

    @property
    def unlocked_achievements(self) -> list[str]:
        """Return the ids of achievements already unlocked."""
        return self._data.setdefault(const.DATA_UNLOCKED_ACHIEVEMENTS, [])

    @property
    def storage_available(self) -> bool:
        """Return False while the document only lives in memory."""
        return self.store.storage_available

    def has_habit(self, habit_id: str) -> bool:
        """Return True if a habit with ``habit_id`` exists."""
        return any(h.get(const.DATA_HABIT_ID) == habit_id for h in self.habits_data)

    # -------------------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------------------

    def get_achievements(self, now: datetime | None = None) -> dict[str, Any]:
        """Return all achievements with progress and summary counters."""
        return self.gamification_manager.get_achievements(now)

    def get_analytics(
        self,
        window_days: int = const.DEFAULT_ANALYTICS_WINDOW,
        now: datetime | None = None,
    ) -> AnalyticsReport:
        """Return the analytics report for the last ``window_days`` days."""
        return StatisticsEngine.build_analytics(
            self.habits_data, self.moods_data, now or dt_now_utc(), window_days
        )
