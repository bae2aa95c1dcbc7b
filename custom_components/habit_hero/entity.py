"""Base entity classes for Habit Hero integration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.helpers.device_registry import DeviceEntryType, DeviceInfo
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from . import const
from .coordinator import HabitHeroCoordinator

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry


class HabitHeroCoordinatorEntity(CoordinatorEntity[HabitHeroCoordinator]):
    """Base entity class for Habit Hero sensors with typed coordinator access.

    Every entity belongs to the single Habit Hero service device and derives
    its unique id from the config entry and a per-sensor key.
    """

    _attr_has_entity_name = True

    def __init__(
        self, coordinator: HabitHeroCoordinator, entry: ConfigEntry, key: str
    ) -> None:
        """Initialize the entity.

        Args:
            coordinator: HabitHeroCoordinator instance for data access.
            entry: ConfigEntry for this integration instance.
            key: Sensor key, also used as translation key.
        """
        super().__init__(coordinator)
        self._attr_unique_id = f"{entry.entry_id}_{key}"
        self._attr_translation_key = key
        self._attr_device_info = DeviceInfo(
            identifiers={(const.DOMAIN, entry.entry_id)},
            name=const.HABIT_HERO_TITLE,
            entry_type=DeviceEntryType.SERVICE,
        )
