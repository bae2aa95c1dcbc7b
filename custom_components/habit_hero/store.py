# File: store.py
"""Handles persistent data storage for the Habit Hero integration.

Uses Home Assistant's Storage helper to save and load the single Habit Hero
document (habits, moods, user stats and unlocked achievements), so progress is
preserved across restarts.

If storage cannot be read or written the integration keeps running on the
in-memory document and exposes ``storage_available = False``. After a failed
load nothing is written back until the user imports a document or resets,
so the unreadable file is never replaced by defaults.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.storage import Store

from . import const
from .data_builders import (
    DocumentParseError,
    build_default_document,
    normalize_document,
    parse_document,
    serialize_document,
)
from .utils.dt_utils import dt_now_iso

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from .type_defs import AppDocument


class HabitHeroStore:
    """Handles persistent storage operations for the Habit Hero document.

    Thin wrapper around Home Assistant's Store API. The whole document is
    written on every save; there are no partial writes.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        storage_key: str = const.STORAGE_KEY,
        *,
        seed_default_habits: bool = const.DEFAULT_SEED_DEFAULT_HABITS,
    ) -> None:
        """Initialize the store.

        Args:
            hass: Home Assistant core object.
            storage_key: Key to identify storage location.
            seed_default_habits: Include the starter habits in a fresh document.
        """
        self.hass = hass
        self._storage_key = storage_key
        self._seed_default_habits = seed_default_habits
        self._store: Store = Store(hass, const.STORAGE_VERSION, storage_key)
        self._data: AppDocument = build_default_document(
            seed_habits=seed_default_habits
        )
        self.storage_available = True
        # Set when the stored document could not be loaded; blocks writes so
        # the in-memory default never replaces it
        self._load_failed = False

    def build_default(self) -> AppDocument:
        """Return a fresh default document honoring the seed option."""
        return build_default_document(seed_habits=self._seed_default_habits)

    async def async_initialize(self) -> None:
        """Load the document from storage during startup.

        If nothing is stored yet, the default document is built and saved.
        """
        const.LOGGER.debug("DEBUG: HabitHeroStore: Loading data from storage")
        try:
            existing_data = await self._store.async_load()
        except (HomeAssistantError, OSError, ValueError) as err:
            const.LOGGER.error(
                "ERROR: Failed to read storage %s: %s. Continuing with in-memory data",
                self._storage_key,
                err,
            )
            self._data = self.build_default()
            self.storage_available = False
            self._load_failed = True
            return

        if existing_data is None:
            const.LOGGER.info("INFO: No existing storage found. Initializing new data")
            self._data = self.build_default()
            await self.async_save()
            return

        try:
            self._data = normalize_document(existing_data)
        except DocumentParseError as err:
            const.LOGGER.error(
                "ERROR: Stored data is malformed (%s). Continuing with in-memory "
                "defaults; storage will not be overwritten until an import or reset",
                err,
            )
            self._data = self.build_default()
            self.storage_available = False
            self._load_failed = True
            return

        const.LOGGER.debug(
            "DEBUG: Loaded existing data from storage: %s habits, %s moods",
            len(self._data[const.DATA_HABITS]),
            len(self._data[const.DATA_MOODS]),
        )

    @property
    def data(self) -> AppDocument:
        """Retrieve the in-memory document."""
        return self._data

    def set_data(self, new_data: AppDocument) -> None:
        """Replace the entire in-memory document."""
        self._data = new_data

    async def async_save(self) -> None:
        """Stamp lastUpdated and save the whole document.

        Errors are logged and flip ``storage_available``; they never
        propagate, so the session continues in memory. Nothing is written
        while the stored document failed to load, until an import or a reset
        replaces it.
        """
        if self._load_failed:
            const.LOGGER.warning(
                "WARNING: Stored data could not be loaded; changes are kept in memory "
                "only. Import or reset to write storage again"
            )
            self.storage_available = False
            return

        self._data[const.DATA_LAST_UPDATED] = dt_now_iso()
        try:
            await self._store.async_save(self._data)
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to file system error: %s. "
                "Check disk space and file permissions for %s",
                err,
                self._store.path,
            )
        except (TypeError, ValueError) as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to non-serializable data: %s",
                err,
            )
        except HomeAssistantError as err:
            const.LOGGER.error("ERROR: Failed to save storage: %s", err)
        else:
            if not self.storage_available:
                const.LOGGER.info("INFO: Storage is writable again")
            self.storage_available = True
            const.LOGGER.debug("DEBUG: Data saved successfully to storage")
            return
        self.storage_available = False

    async def async_clear_data(self) -> None:
        """Remove the stored document and reset to the default document."""
        const.LOGGER.warning("WARNING: Clearing all Habit Hero data and resetting storage")
        self._data = self.build_default()
        try:
            await self._store.async_remove()
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to remove storage file %s: %s. Check file permissions",
                self._store.path,
                err,
            )
            self.storage_available = False
            return
        self._load_failed = False
        const.LOGGER.info("INFO: Storage file removed: %s", self._store.path)

    def export_json(self) -> str:
        """Return the current document as interchange JSON text."""
        return serialize_document(self._data)

    async def async_import_json(self, text: str) -> AppDocument:
        """Replace the whole document with imported JSON text and save it.

        Raises:
            DocumentParseError: The text is not a valid document. The current
                document is left untouched.
        """
        document = parse_document(text)
        self._data = document
        self._load_failed = False
        await self.async_save()
        const.LOGGER.info(
            "INFO: Imported document with %s habits", len(document[const.DATA_HABITS])
        )
        return document
