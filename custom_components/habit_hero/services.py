# File: services.py
"""Defines custom services for the Habit Hero integration.

These services allow direct actions through scripts, automations and
dashboards: toggling habits, editing the ledger, logging moods, reading
analytics and achievements, and importing / exporting / resetting the
document.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import voluptuous as vol
from homeassistant.core import HomeAssistant, ServiceCall, ServiceResponse, SupportsResponse
from homeassistant.exceptions import ServiceValidationError
from homeassistant.helpers import config_validation as cv

from . import const
from .data_builders import DocumentParseError, HabitValidationError

if TYPE_CHECKING:
    from .coordinator import HabitHeroCoordinator

# --- Service Schemas ---
TOGGLE_HABIT_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_HABIT_ID): cv.string,
    }
)

ADD_HABIT_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_NAME): cv.string,
        vol.Optional(const.FIELD_EMOJI, default=const.DEFAULT_HABIT_EMOJI): cv.string,
        vol.Optional(
            const.FIELD_CATEGORY, default=const.DEFAULT_HABIT_CATEGORY
        ): cv.string,
        vol.Optional(const.FIELD_TARGET, default=const.DEFAULT_HABIT_TARGET): vol.All(
            vol.Coerce(int), vol.Range(min=1)
        ),
    }
)

UPDATE_HABIT_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_HABIT_ID): cv.string,
        vol.Optional(const.FIELD_NAME): cv.string,
        vol.Optional(const.FIELD_EMOJI): cv.string,
        vol.Optional(const.FIELD_CATEGORY): cv.string,
        vol.Optional(const.FIELD_TARGET): vol.All(vol.Coerce(int), vol.Range(min=1)),
    }
)

REMOVE_HABIT_SCHEMA = TOGGLE_HABIT_SCHEMA

LOG_MOOD_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_MOOD): vol.In(const.MOOD_VALUES),
        vol.Optional(const.FIELD_NOTE): cv.string,
    }
)

GET_ANALYTICS_SCHEMA = vol.Schema(
    {
        vol.Optional(
            const.FIELD_WINDOW_DAYS, default=const.DEFAULT_ANALYTICS_WINDOW
        ): vol.All(
            vol.Coerce(int),
            vol.In([const.ANALYTICS_WINDOW_WEEK, const.ANALYTICS_WINDOW_MONTH]),
        ),
    }
)

IMPORT_DATA_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_DATA): cv.string,
    }
)

EMPTY_SCHEMA = vol.Schema({})

# Service field -> document field for habit create/update
_HABIT_FIELD_MAP = {
    const.FIELD_NAME: const.DATA_HABIT_NAME,
    const.FIELD_EMOJI: const.DATA_HABIT_EMOJI,
    const.FIELD_CATEGORY: const.DATA_HABIT_CATEGORY,
    const.FIELD_TARGET: const.DATA_HABIT_TARGET,
}

SERVICES = [
    const.SERVICE_TOGGLE_HABIT,
    const.SERVICE_ADD_HABIT,
    const.SERVICE_UPDATE_HABIT,
    const.SERVICE_REMOVE_HABIT,
    const.SERVICE_LOG_MOOD,
    const.SERVICE_GET_ANALYTICS,
    const.SERVICE_GET_ACHIEVEMENTS,
    const.SERVICE_EXPORT_DATA,
    const.SERVICE_IMPORT_DATA,
    const.SERVICE_RESET_ALL_DATA,
]


def _get_coordinator(hass: HomeAssistant) -> HabitHeroCoordinator:
    """Return the coordinator of the (single) Habit Hero entry."""
    entries = hass.data.get(const.DOMAIN, {})
    for entry_data in entries.values():
        return entry_data[const.COORDINATOR]
    raise ServiceValidationError(const.MSG_NO_ENTRY_FOUND)


def _require_habit(coordinator: HabitHeroCoordinator, habit_id: str) -> None:
    """Raise ServiceValidationError if the habit does not exist."""
    if not coordinator.has_habit(habit_id):
        const.LOGGER.warning(
            "WARNING: %s", const.ERROR_HABIT_NOT_FOUND_FMT.format(habit_id)
        )
        raise ServiceValidationError(const.ERROR_HABIT_NOT_FOUND_FMT.format(habit_id))


def _habit_input(data: dict) -> dict:
    return {
        data_key: data[field]
        for field, data_key in _HABIT_FIELD_MAP.items()
        if field in data
    }


def async_setup_services(hass: HomeAssistant) -> None:
    """Register Habit Hero services."""

    async def handle_toggle_habit(call: ServiceCall) -> None:
        """Handle toggling today's completion of a habit."""
        coordinator = _get_coordinator(hass)
        habit_id = call.data[const.FIELD_HABIT_ID]
        _require_habit(coordinator, habit_id)
        coordinator.habit_manager.toggle_habit(habit_id)

    async def handle_add_habit(call: ServiceCall) -> ServiceResponse:
        """Handle creating a habit."""
        coordinator = _get_coordinator(hass)
        try:
            habit = coordinator.habit_manager.add_habit(_habit_input(call.data))
        except HabitValidationError as err:
            raise ServiceValidationError(
                const.ERROR_INVALID_HABIT_FMT.format(err.reason)
            ) from err
        return {"habit": dict(habit)}

    async def handle_update_habit(call: ServiceCall) -> None:
        """Handle editing a habit."""
        coordinator = _get_coordinator(hass)
        habit_id = call.data[const.FIELD_HABIT_ID]
        _require_habit(coordinator, habit_id)
        try:
            coordinator.habit_manager.update_habit(habit_id, _habit_input(call.data))
        except HabitValidationError as err:
            raise ServiceValidationError(
                const.ERROR_INVALID_HABIT_FMT.format(err.reason)
            ) from err

    async def handle_remove_habit(call: ServiceCall) -> None:
        """Handle deleting a habit."""
        coordinator = _get_coordinator(hass)
        habit_id = call.data[const.FIELD_HABIT_ID]
        _require_habit(coordinator, habit_id)
        coordinator.habit_manager.remove_habit(habit_id)

    async def handle_log_mood(call: ServiceCall) -> None:
        """Handle logging today's mood."""
        coordinator = _get_coordinator(hass)
        coordinator.habit_manager.log_mood(
            call.data[const.FIELD_MOOD], call.data.get(const.FIELD_NOTE)
        )

    async def handle_get_analytics(call: ServiceCall) -> ServiceResponse:
        """Return the analytics report."""
        coordinator = _get_coordinator(hass)
        return dict(coordinator.get_analytics(call.data[const.FIELD_WINDOW_DAYS]))

    async def handle_get_achievements(call: ServiceCall) -> ServiceResponse:
        """Return every achievement with progress."""
        return _get_coordinator(hass).get_achievements()

    async def handle_export_data(call: ServiceCall) -> ServiceResponse:
        """Return the whole document as JSON text."""
        return {const.FIELD_DATA: _get_coordinator(hass).export_data()}

    async def handle_import_data(call: ServiceCall) -> None:
        """Replace the whole document with imported JSON text."""
        coordinator = _get_coordinator(hass)
        try:
            await coordinator.async_import_data(call.data[const.FIELD_DATA])
        except DocumentParseError as err:
            const.LOGGER.warning("WARNING: Import rejected: %s", err)
            raise ServiceValidationError(
                const.ERROR_INVALID_IMPORT_FMT.format(err)
            ) from err

    async def handle_reset_all_data(call: ServiceCall) -> None:
        """Remove all data and restore the default document."""
        await _get_coordinator(hass).async_reset_all_data()

    # --- Register Services ---
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_TOGGLE_HABIT,
        handle_toggle_habit,
        schema=TOGGLE_HABIT_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_ADD_HABIT,
        handle_add_habit,
        schema=ADD_HABIT_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_UPDATE_HABIT,
        handle_update_habit,
        schema=UPDATE_HABIT_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_REMOVE_HABIT,
        handle_remove_habit,
        schema=REMOVE_HABIT_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_LOG_MOOD,
        handle_log_mood,
        schema=LOG_MOOD_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_GET_ANALYTICS,
        handle_get_analytics,
        schema=GET_ANALYTICS_SCHEMA,
        supports_response=SupportsResponse.ONLY,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_GET_ACHIEVEMENTS,
        handle_get_achievements,
        schema=EMPTY_SCHEMA,
        supports_response=SupportsResponse.ONLY,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_EXPORT_DATA,
        handle_export_data,
        schema=EMPTY_SCHEMA,
        supports_response=SupportsResponse.ONLY,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_IMPORT_DATA,
        handle_import_data,
        schema=IMPORT_DATA_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_RESET_ALL_DATA,
        handle_reset_all_data,
        schema=EMPTY_SCHEMA,
    )

    const.LOGGER.info("INFO: Habit Hero services have been registered successfully")


async def async_unload_services(hass: HomeAssistant) -> None:
    """Unregister Habit Hero services when unloading the integration."""
    for service in SERVICES:
        if hass.services.has_service(const.DOMAIN, service):
            hass.services.async_remove(const.DOMAIN, service)

    const.LOGGER.info("INFO: Habit Hero services have been unregistered")
