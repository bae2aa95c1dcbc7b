# File: sensor.py
"""Sensors for the Habit Hero integration.

All sensors read the coordinator's in-memory document and refresh whenever a
manager pushes an update. Derived figures are computed on read through the
pure engines; nothing is cached.

Sensors:
- Level (XP attributes and badges)
- Today's progress (%)
- Completion rate over the last 7 days (%)
- Achievements unlocked (count)
- Longest current streak (days)
- Today's mood
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.components.sensor import SensorEntity, SensorStateClass
from homeassistant.const import PERCENTAGE, UnitOfTime

from . import const
from .engines.gamification_engine import GamificationEngine
from .engines.habit_engine import HabitEngine
from .engines.statistics_engine import StatisticsEngine
from .entity import HabitHeroCoordinatorEntity
from .utils.dt_utils import dt_now_utc

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

    from .coordinator import HabitHeroCoordinator


async def async_setup_entry(
    hass: HomeAssistant, entry: ConfigEntry, async_add_entities: AddEntitiesCallback
) -> None:
    """Set up sensors for Habit Hero integration."""
    coordinator: HabitHeroCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]
    async_add_entities(
        [
            HabitHeroLevelSensor(coordinator, entry),
            HabitHeroTodayProgressSensor(coordinator, entry),
            HabitHeroCompletionRateSensor(coordinator, entry),
            HabitHeroAchievementsSensor(coordinator, entry),
            HabitHeroLongestStreakSensor(coordinator, entry),
            HabitHeroTodayMoodSensor(coordinator, entry),
        ]
    )


# ------------------------------------------------------------------------------------------
class HabitHeroLevelSensor(HabitHeroCoordinatorEntity, SensorEntity):
    """Sensor for the current level, with XP and badges as attributes."""

    _attr_icon = "mdi:shield-star"
    _attr_state_class = SensorStateClass.MEASUREMENT

    def __init__(self, coordinator: HabitHeroCoordinator, entry: ConfigEntry) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, entry, const.SENSOR_KEY_LEVEL)

    @property
    def native_value(self) -> int:
        """Return the current level."""
        return self.coordinator.user_stats.get(const.DATA_STATS_LEVEL, 1)

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose XP progress, badges and storage health."""
        stats = self.coordinator.user_stats
        return {
            const.ATTR_XP: stats.get(const.DATA_STATS_XP, const.DEFAULT_ZERO),
            const.ATTR_XP_TO_NEXT: stats.get(
                const.DATA_STATS_XP_TO_NEXT, const.XP_PER_LEVEL
            ),
            const.ATTR_TOTAL_XP: stats.get(const.DATA_STATS_TOTAL_XP, const.DEFAULT_ZERO),
            const.ATTR_BADGES: list(stats.get(const.DATA_STATS_BADGES, [])),
            const.ATTR_JOIN_DATE: stats.get(const.DATA_STATS_JOIN_DATE),
            const.ATTR_STORAGE_AVAILABLE: self.coordinator.storage_available,
        }


# ------------------------------------------------------------------------------------------
class HabitHeroTodayProgressSensor(HabitHeroCoordinatorEntity, SensorEntity):
    """Sensor for the share of habits completed today."""

    _attr_icon = "mdi:check-circle-outline"
    _attr_native_unit_of_measurement = PERCENTAGE
    _attr_state_class = SensorStateClass.MEASUREMENT

    def __init__(self, coordinator: HabitHeroCoordinator, entry: ConfigEntry) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, entry, const.SENSOR_KEY_TODAY_PROGRESS)

    @property
    def native_value(self) -> int:
        """Return today's completion percentage."""
        return StatisticsEngine.today_progress(
            self.coordinator.habits_data, dt_now_utc()
        )["percentage"]

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose completed/total counts and per-habit state."""
        now = dt_now_utc()
        habits = self.coordinator.habits_data
        progress = StatisticsEngine.today_progress(habits, now)
        return {
            const.ATTR_COMPLETED: progress["completed"],
            const.ATTR_TOTAL: progress["total"],
            const.ATTR_HABITS: [
                {
                    const.ATTR_HABIT_ID: habit[const.DATA_HABIT_ID],
                    const.ATTR_HABIT_NAME: habit[const.DATA_HABIT_NAME],
                    const.ATTR_STREAK: habit.get(const.DATA_HABIT_STREAK, 0),
                    const.ATTR_COMPLETED: HabitEngine.is_completed_on(habit, now),
                }
                for habit in habits
            ],
        }


# ------------------------------------------------------------------------------------------
class HabitHeroCompletionRateSensor(HabitHeroCoordinatorEntity, SensorEntity):
    """Sensor for the completion rate over the last week."""

    _attr_icon = "mdi:chart-line"
    _attr_native_unit_of_measurement = PERCENTAGE
    _attr_state_class = SensorStateClass.MEASUREMENT

    def __init__(self, coordinator: HabitHeroCoordinator, entry: ConfigEntry) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, entry, const.SENSOR_KEY_COMPLETION_RATE)

    @property
    def native_value(self) -> int:
        """Return the 7-day completion rate."""
        habits = self.coordinator.habits_data
        series = StatisticsEngine.build_daily_series(
            habits,
            self.coordinator.moods_data,
            dt_now_utc(),
            const.ANALYTICS_WINDOW_WEEK,
        )
        return StatisticsEngine.completion_rate(series, len(habits))

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose the window and streak rollups."""
        return {
            const.ATTR_WINDOW_DAYS: const.ANALYTICS_WINDOW_WEEK,
            const.ATTR_STREAK_STATS: StatisticsEngine.streak_stats(
                self.coordinator.habits_data
            ),
        }


# ------------------------------------------------------------------------------------------
class HabitHeroAchievementsSensor(HabitHeroCoordinatorEntity, SensorEntity):
    """Sensor for the number of unlocked achievements."""

    _attr_icon = "mdi:trophy"
    _attr_state_class = SensorStateClass.MEASUREMENT

    def __init__(self, coordinator: HabitHeroCoordinator, entry: ConfigEntry) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, entry, const.SENSOR_KEY_ACHIEVEMENTS)

    @property
    def native_value(self) -> int:
        """Return how many achievements are unlocked."""
        return len(self.coordinator.unlocked_achievements)

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose unlocked ids and per-category counters."""
        summary = GamificationEngine.summarize(
            GamificationEngine.evaluate(
                self.coordinator.habits_data,
                self.coordinator.user_stats,
                dt_now_utc(),
                previously_unlocked=self.coordinator.unlocked_achievements,
            ),
            self.coordinator.unlocked_achievements,
        )
        return {
            const.ATTR_UNLOCKED: list(self.coordinator.unlocked_achievements),
            const.ATTR_TOTAL: summary["total"],
            const.ATTR_CATEGORIES: summary["categories"],
        }


# ------------------------------------------------------------------------------------------
class HabitHeroLongestStreakSensor(HabitHeroCoordinatorEntity, SensorEntity):
    """Sensor for the longest current streak across habits."""

    _attr_icon = "mdi:fire"
    _attr_native_unit_of_measurement = UnitOfTime.DAYS
    _attr_state_class = SensorStateClass.MEASUREMENT

    def __init__(self, coordinator: HabitHeroCoordinator, entry: ConfigEntry) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, entry, const.SENSOR_KEY_LONGEST_STREAK)

    @property
    def native_value(self) -> int:
        """Return the longest current streak."""
        return GamificationEngine.max_streak(self.coordinator.habits_data)


# ------------------------------------------------------------------------------------------
class HabitHeroTodayMoodSensor(HabitHeroCoordinatorEntity, SensorEntity):
    """Sensor for the mood logged today (unknown until logged)."""

    _attr_icon = "mdi:emoticon-outline"

    def __init__(self, coordinator: HabitHeroCoordinator, entry: ConfigEntry) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, entry, const.SENSOR_KEY_TODAY_MOOD)

    @property
    def native_value(self) -> str | None:
        """Return today's mood value, if logged."""
        entry = HabitEngine.mood_for_day(self.coordinator.moods_data, dt_now_utc())
        return entry.get(const.DATA_MOOD_MOOD) if entry else None

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Expose today's note and the mood glyph."""
        entry = HabitEngine.mood_for_day(self.coordinator.moods_data, dt_now_utc())
        if not entry:
            return {}
        return {
            const.ATTR_BADGE: const.MOOD_EMOJIS.get(entry[const.DATA_MOOD_MOOD]),
            const.ATTR_NOTE: entry.get(const.DATA_MOOD_NOTE),
        }
