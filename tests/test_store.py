"""Tests for HabitHeroStore.

Test Categories:
- First load seeds and saves the default document
- Existing documents are normalized on load
- Unreadable or malformed storage keeps the session in memory
- Saves never overwrite storage that failed to load
- Save failures flip storage_available
- Saved documents load back unchanged
- Import / clear
"""

# pylint: disable=redefined-outer-name

from __future__ import annotations

from typing import Any
from unittest.mock import patch

import pytest
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError

from custom_components.habit_hero import const
from custom_components.habit_hero.data_builders import (
    DocumentParseError,
    normalize_document,
)
from custom_components.habit_hero.store import HabitHeroStore

from .conftest import FIXED_NOW, create_document, create_habit


def _stored(data: dict[str, Any]) -> dict[str, Any]:
    """Wrap a document the way Home Assistant's Store writes it."""
    return {
        "version": const.STORAGE_VERSION,
        "minor_version": 1,
        "key": const.STORAGE_KEY,
        "data": data,
    }


class TestInitialize:
    """Tests for async_initialize()."""

    async def test_first_load_seeds_and_saves(
        self, hass: HomeAssistant, hass_storage: dict[str, Any]
    ) -> None:
        """With nothing stored, the default document is built and written."""
        store = HabitHeroStore(hass)

        await store.async_initialize()

        assert [h[const.DATA_HABIT_NAME] for h in store.data[const.DATA_HABITS]] == [
            "Drink Water",
            "Read Books",
            "Exercise",
            "Meditate",
        ]
        assert store.storage_available is True
        assert len(hass_storage[const.STORAGE_KEY]["data"][const.DATA_HABITS]) == 4

    async def test_first_load_without_seed(
        self, hass: HomeAssistant, hass_storage: dict[str, Any]
    ) -> None:
        """The seed option can start from an empty ledger."""
        store = HabitHeroStore(hass, seed_default_habits=False)

        await store.async_initialize()

        assert store.data[const.DATA_HABITS] == []

    async def test_existing_document_is_normalized(
        self, hass: HomeAssistant, hass_storage: dict[str, Any]
    ) -> None:
        """Stored level fields are re-derived from totalXP on load."""
        document = create_document(
            habits=[create_habit("a", streak=2, last_completed=FIXED_NOW)],
            total_xp=1050,
        )
        document[const.DATA_USER_STATS][const.DATA_STATS_LEVEL] = 7
        hass_storage[const.STORAGE_KEY] = _stored(document)
        store = HabitHeroStore(hass)

        await store.async_initialize()

        stats = store.data[const.DATA_USER_STATS]
        assert stats[const.DATA_STATS_LEVEL] == 2
        assert stats[const.DATA_STATS_XP] == 50
        assert store.data[const.DATA_HABITS][0][const.DATA_HABIT_ID] == "a"

    async def test_malformed_document_keeps_storage_untouched(
        self, hass: HomeAssistant, hass_storage: dict[str, Any]
    ) -> None:
        """Malformed stored data falls back to defaults without overwriting it."""
        hass_storage[const.STORAGE_KEY] = _stored({const.DATA_HABITS: "broken"})
        store = HabitHeroStore(hass)

        await store.async_initialize()

        assert store.storage_available is False
        assert len(store.data[const.DATA_HABITS]) == 4
        assert hass_storage[const.STORAGE_KEY]["data"] == {const.DATA_HABITS: "broken"}

    async def test_read_error_runs_in_memory(self, hass: HomeAssistant) -> None:
        """A storage read error is logged and the session continues in memory."""
        store = HabitHeroStore(hass)

        with patch(
            "homeassistant.helpers.storage.Store.async_load",
            side_effect=HomeAssistantError("disk gone"),
        ):
            await store.async_initialize()

        assert store.storage_available is False
        assert len(store.data[const.DATA_HABITS]) == 4


class TestFailedLoadProtection:
    """Saves after a failed load must never replace the stored history."""

    @staticmethod
    def _history() -> dict[str, Any]:
        return create_document(
            habits=[create_habit("precious", "Years of data", streak=400)],
            total_xp=50000,
        )

    def _assert_history_kept(self, hass_storage: dict[str, Any]) -> None:
        data = hass_storage[const.STORAGE_KEY]["data"]
        assert [h[const.DATA_HABIT_ID] for h in data[const.DATA_HABITS]] == ["precious"]
        assert data[const.DATA_USER_STATS][const.DATA_STATS_TOTAL_XP] == 50000

    async def test_read_error_then_save_keeps_stored_history(
        self, hass: HomeAssistant, hass_storage: dict[str, Any]
    ) -> None:
        """A transient read error followed by a change leaves storage as it was."""
        hass_storage[const.STORAGE_KEY] = _stored(self._history())
        store = HabitHeroStore(hass)

        with patch(
            "homeassistant.helpers.storage.Store.async_load",
            side_effect=OSError("I/O error"),
        ):
            await store.async_initialize()
        store.data[const.DATA_HABITS][0][const.DATA_HABIT_STREAK] = 1
        await store.async_save()

        self._assert_history_kept(hass_storage)
        assert store.storage_available is False

    async def test_malformed_then_save_keeps_stored_data(
        self, hass: HomeAssistant, hass_storage: dict[str, Any]
    ) -> None:
        """Saving after a malformed load does not overwrite the stored payload."""
        hass_storage[const.STORAGE_KEY] = _stored({const.DATA_HABITS: "broken"})
        store = HabitHeroStore(hass)

        await store.async_initialize()
        await store.async_save()

        assert hass_storage[const.STORAGE_KEY]["data"] == {const.DATA_HABITS: "broken"}
        assert store.storage_available is False

    async def test_import_resumes_writes(
        self, hass: HomeAssistant, hass_storage: dict[str, Any]
    ) -> None:
        """An explicit import replaces the stored document and re-enables saving."""
        hass_storage[const.STORAGE_KEY] = _stored({const.DATA_HABITS: "broken"})
        store = HabitHeroStore(hass)
        await store.async_initialize()
        source = HabitHeroStore(hass)
        source.set_data(self._history())

        await store.async_import_json(source.export_json())

        self._assert_history_kept(hass_storage)
        assert store.storage_available is True

    async def test_clear_resumes_writes(
        self, hass: HomeAssistant, hass_storage: dict[str, Any]
    ) -> None:
        """A reset removes the stored document and later saves write again."""
        hass_storage[const.STORAGE_KEY] = _stored({const.DATA_HABITS: "broken"})
        store = HabitHeroStore(hass)
        await store.async_initialize()

        await store.async_clear_data()
        await store.async_save()

        assert len(hass_storage[const.STORAGE_KEY]["data"][const.DATA_HABITS]) == 4
        assert store.storage_available is True


class TestSave:
    """Tests for async_save()."""

    async def test_save_stamps_last_updated(
        self, hass: HomeAssistant, hass_storage: dict[str, Any]
    ) -> None:
        """Every save refreshes lastUpdated."""
        store = HabitHeroStore(hass)
        store.data[const.DATA_LAST_UPDATED] = "2000-01-01T00:00:00+00:00"

        await store.async_save()

        saved = hass_storage[const.STORAGE_KEY]["data"]
        assert saved[const.DATA_LAST_UPDATED] != "2000-01-01T00:00:00+00:00"

    async def test_write_failure_flips_availability(
        self, hass: HomeAssistant, hass_storage: dict[str, Any]
    ) -> None:
        """A failed write marks storage unavailable; a later success restores it."""
        store = HabitHeroStore(hass)

        with patch(
            "homeassistant.helpers.storage.Store.async_save",
            side_effect=OSError("No space left on device"),
        ):
            await store.async_save()
        assert store.storage_available is False

        await store.async_save()
        assert store.storage_available is True

    async def test_saved_document_loads_back_unchanged(
        self, hass: HomeAssistant, hass_storage: dict[str, Any]
    ) -> None:
        """A fresh store loading the saved document sees exactly what was saved."""
        first = HabitHeroStore(hass)
        document = create_document(
            habits=[
                create_habit("a", streak=3, total_completed=12, last_completed=FIXED_NOW)
            ],
            moods=[{"date": FIXED_NOW.isoformat(), "mood": "happy", "note": "ok"}],
            total_xp=1225,
            badges=["🔥"],
            unlocked=["first-streak"],
        )
        first.set_data(normalize_document(document))
        await first.async_save()

        second = HabitHeroStore(hass)
        await second.async_initialize()

        assert second.data == first.data
        assert second.storage_available is True


class TestImportAndClear:
    """Tests for async_import_json(), export_json() and async_clear_data()."""

    async def test_import_replaces_and_saves(
        self, hass: HomeAssistant, hass_storage: dict[str, Any]
    ) -> None:
        """A valid import replaces the whole document."""
        store = HabitHeroStore(hass)
        source = HabitHeroStore(hass)
        source.set_data(create_document(habits=[create_habit("x", "Imported")]))

        await store.async_import_json(source.export_json())

        assert [h[const.DATA_HABIT_NAME] for h in store.data[const.DATA_HABITS]] == [
            "Imported"
        ]
        assert hass_storage[const.STORAGE_KEY]["data"][const.DATA_HABITS][0][
            const.DATA_HABIT_ID
        ] == "x"

    async def test_invalid_import_keeps_document(self, hass: HomeAssistant) -> None:
        """Rejected imports leave the current document as it was."""
        store = HabitHeroStore(hass)
        before = store.export_json()

        with pytest.raises(DocumentParseError):
            await store.async_import_json('{"habits": [{"id": "a"}]}')

        assert store.export_json() == before

    async def test_clear_resets_to_default(
        self, hass: HomeAssistant, hass_storage: dict[str, Any]
    ) -> None:
        """Clearing restores the default document and removes the stored file."""
        store = HabitHeroStore(hass)
        store.set_data(create_document(habits=[create_habit("x")], total_xp=5000))
        await store.async_save()

        await store.async_clear_data()

        assert store.data[const.DATA_USER_STATS][const.DATA_STATS_TOTAL_XP] == 0
        assert len(store.data[const.DATA_HABITS]) == 4
        assert const.STORAGE_KEY not in hass_storage
