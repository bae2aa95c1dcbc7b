"""Tests for Habit Hero sensors.

Sensors are looked up by unique id, then checked before and after a
completion and a mood entry.
"""

# pylint: disable=unused-argument

from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.habit_hero import const

from .conftest import get_sensor_entity_id


def _state(hass: HomeAssistant, entry: MockConfigEntry, key: str):
    state = hass.states.get(get_sensor_entity_id(hass, entry, key))
    assert state is not None
    return state


async def test_initial_states(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """A fresh document shows level 1 and nothing done today."""
    level = _state(hass, init_integration, const.SENSOR_KEY_LEVEL)
    assert level.state == "1"
    assert level.attributes[const.ATTR_XP_TO_NEXT] == 1000
    assert level.attributes[const.ATTR_STORAGE_AVAILABLE] is True

    assert _state(hass, init_integration, const.SENSOR_KEY_TODAY_PROGRESS).state == "0"
    assert _state(hass, init_integration, const.SENSOR_KEY_ACHIEVEMENTS).state == "0"
    assert _state(hass, init_integration, const.SENSOR_KEY_LONGEST_STREAK).state == "0"
    assert _state(hass, init_integration, const.SENSOR_KEY_TODAY_MOOD).state == "unknown"


async def test_states_follow_services(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Sensors refresh after a completion and a mood entry."""
    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_TOGGLE_HABIT,
        {const.FIELD_HABIT_ID: "water"},
        blocking=True,
    )
    await hass.services.async_call(
        const.DOMAIN,
        const.SERVICE_LOG_MOOD,
        {const.FIELD_MOOD: const.MOOD_HAPPY, const.FIELD_NOTE: "Good run"},
        blocking=True,
    )
    await hass.async_block_till_done()

    level = _state(hass, init_integration, const.SENSOR_KEY_LEVEL)
    assert level.attributes[const.ATTR_TOTAL_XP] == const.XP_PER_COMPLETION

    progress = _state(hass, init_integration, const.SENSOR_KEY_TODAY_PROGRESS)
    assert progress.state == "50"
    assert progress.attributes[const.ATTR_COMPLETED] == 1
    assert progress.attributes[const.ATTR_TOTAL] == 2

    assert _state(hass, init_integration, const.SENSOR_KEY_ACHIEVEMENTS).state == "1"
    assert _state(hass, init_integration, const.SENSOR_KEY_LONGEST_STREAK).state == "1"

    mood = _state(hass, init_integration, const.SENSOR_KEY_TODAY_MOOD)
    assert mood.state == const.MOOD_HAPPY
    assert mood.attributes[const.ATTR_NOTE] == "Good run"
