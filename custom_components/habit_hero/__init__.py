# File: __init__.py
"""Initialization file for the Habit Hero integration.

Handles setting up the integration: loading the config entry, initializing
the stored document, and preparing the coordinator, managers, services and
sensor platform.
"""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from . import const
from .coordinator import HabitHeroCoordinator
from .services import async_setup_services, async_unload_services
from .store import HabitHeroStore


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up the integration from a config entry."""
    const.LOGGER.info("INFO: Starting setup for Habit Hero entry: %s", entry.entry_id)

    store = HabitHeroStore(
        hass,
        const.STORAGE_KEY,
        seed_default_habits=entry.data.get(
            const.CONF_SEED_DEFAULT_HABITS, const.DEFAULT_SEED_DEFAULT_HABITS
        ),
    )
    await store.async_initialize()

    coordinator = HabitHeroCoordinator(hass, entry, store)
    await coordinator.async_config_entry_first_refresh()

    hass.data.setdefault(const.DOMAIN, {})[entry.entry_id] = {
        const.COORDINATOR: coordinator,
        const.STORE: store,
    }

    async_setup_services(hass)

    await hass.config_entries.async_forward_entry_setups(entry, const.PLATFORMS)

    const.LOGGER.info("INFO: Habit Hero setup complete for entry: %s", entry.entry_id)
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    const.LOGGER.info("INFO: Unloading Habit Hero entry: %s", entry.entry_id)

    unload_ok = await hass.config_entries.async_unload_platforms(entry, const.PLATFORMS)

    if unload_ok:
        hass.data[const.DOMAIN].pop(entry.entry_id)
        await async_unload_services(hass)

    return unload_ok


async def async_remove_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Delete the stored document when the config entry is removed."""
    const.LOGGER.info("INFO: Removing Habit Hero entry: %s", entry.entry_id)
    store = HabitHeroStore(hass, const.STORAGE_KEY)
    await store.async_clear_data()
