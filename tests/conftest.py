"""Shared fixtures for Habit Hero tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any
from unittest.mock import patch

import pytest
from homeassistant.core import HomeAssistant
from homeassistant.helpers import entity_registry as er
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.habit_hero.const import (
    CONF_SEED_DEFAULT_HABITS,
    COORDINATOR,
    DATA_HABIT_CATEGORY,
    DATA_HABIT_EMOJI,
    DATA_HABIT_ID,
    DATA_HABIT_LAST_COMPLETED,
    DATA_HABIT_NAME,
    DATA_HABIT_PREVIOUS_COMPLETED,
    DATA_HABIT_STREAK,
    DATA_HABIT_TARGET,
    DATA_HABIT_TOTAL_COMPLETED,
    DATA_HABITS,
    DATA_LAST_UPDATED,
    DATA_MOODS,
    DATA_UNLOCKED_ACHIEVEMENTS,
    DATA_USER_STATS,
    DOMAIN,
    HABIT_HERO_TITLE,
)
from custom_components.habit_hero.data_builders import build_user_stats

# pylint: disable=invalid-name
pytest_plugins = "pytest_homeassistant_custom_component"
# pylint: enable=invalid-name

# Fixed instant for pure engine tests: Wednesday 2025-01-15, noon UTC
FIXED_NOW = datetime(2025, 1, 15, 12, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations: Any) -> Any:
    """Enable custom integrations in tests."""
    # pylint: disable=unused-argument
    yield


def create_habit(
    habit_id: str = "h1",
    name: str = "Test Habit",
    category: str = "Health",
    streak: int = 0,
    total_completed: int = 0,
    last_completed: datetime | str | None = None,
    previous_completed: datetime | str | None = None,
) -> dict[str, Any]:
    """Create a habit record for testing."""

    def _iso(value: datetime | str | None) -> str | None:
        return value.isoformat() if isinstance(value, datetime) else value

    return {
        DATA_HABIT_ID: habit_id,
        DATA_HABIT_NAME: name,
        DATA_HABIT_EMOJI: "🎯",
        DATA_HABIT_CATEGORY: category,
        DATA_HABIT_TARGET: 1,
        DATA_HABIT_STREAK: streak,
        DATA_HABIT_TOTAL_COMPLETED: total_completed,
        DATA_HABIT_LAST_COMPLETED: _iso(last_completed),
        DATA_HABIT_PREVIOUS_COMPLETED: _iso(previous_completed),
    }


def create_document(
    habits: list[dict[str, Any]] | None = None,
    moods: list[dict[str, Any]] | None = None,
    total_xp: int = 0,
    badges: list[str] | None = None,
    unlocked: list[str] | None = None,
) -> dict[str, Any]:
    """Create a complete document for testing."""
    joined = FIXED_NOW - timedelta(days=30)
    return {
        DATA_HABITS: habits if habits is not None else [],
        DATA_MOODS: moods if moods is not None else [],
        DATA_USER_STATS: build_user_stats(joined, total_xp=total_xp, badges=badges),
        DATA_LAST_UPDATED: joined.isoformat(),
        DATA_UNLOCKED_ACHIEVEMENTS: unlocked if unlocked is not None else [],
    }


@pytest.fixture
def mock_config_entry() -> MockConfigEntry:
    """Return a mock config entry."""
    return MockConfigEntry(
        domain=DOMAIN,
        title=HABIT_HERO_TITLE,
        data={CONF_SEED_DEFAULT_HABITS: True},
        entry_id="test_entry_id",
        unique_id="test_unique_id",
    )


@pytest.fixture
def mock_storage_data() -> dict[str, Any]:
    """Return a stored document with two never-completed habits."""
    return create_document(
        habits=[
            create_habit("water", "Drink Water", "Health"),
            create_habit("read", "Read Books", "Learning"),
        ]
    )


@pytest.fixture
async def init_integration(
    hass: HomeAssistant,
    mock_config_entry: MockConfigEntry,  # pylint: disable=redefined-outer-name
    mock_storage_data: dict[str, Any],  # pylint: disable=redefined-outer-name
) -> MockConfigEntry:
    """Set up the Habit Hero integration for testing with mocked storage."""
    mock_config_entry.add_to_hass(hass)

    # Mock the Store's async_load to return our test data
    with patch(
        "homeassistant.helpers.storage.Store.async_load",
        return_value=mock_storage_data,
    ):
        assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
        await hass.async_block_till_done()

    return mock_config_entry


def get_coordinator(hass: HomeAssistant, entry: MockConfigEntry) -> Any:
    """Return the coordinator of a loaded entry."""
    return hass.data[DOMAIN][entry.entry_id][COORDINATOR]


def get_sensor_entity_id(hass: HomeAssistant, entry: MockConfigEntry, key: str) -> str:
    """Look up a sensor's entity id by its unique id."""
    entity_id = er.async_get(hass).async_get_entity_id(
        "sensor", DOMAIN, f"{entry.entry_id}_{key}"
    )
    assert entity_id is not None, f"Sensor '{key}' not registered"
    return entity_id
