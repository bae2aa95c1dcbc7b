"""Base manager class for Habit Hero managers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from homeassistant.helpers.dispatcher import (
    async_dispatcher_connect,
    async_dispatcher_send,
)

from .. import const

if TYPE_CHECKING:
    from collections.abc import Callable

    from homeassistant.core import HomeAssistant

    from ..coordinator import HabitHeroCoordinator


def get_event_signal(entry_id: str, suffix: str) -> str:
    """Build an instance-scoped dispatcher signal name.

    Format: 'habit_hero_{entry_id}_{suffix}'
    """
    return f"{const.DOMAIN}_{entry_id}_{suffix}"


class BaseManager(ABC):
    """Base class for Habit Hero managers with scoped event support.

    Provides:
    - Instance-scoped event emitting (emit)
    - Instance-scoped event listening (listen)
    - Automatic cleanup via coordinator's config_entry.async_on_unload

    Data Persistence:
    - Use coordinator._persist_and_update() for user-visible state changes
    - Use coordinator._persist() alone for internal bookkeeping

    Subclasses must implement:
    - async_setup(): Subscribe to events, initialize state
    """

    def __init__(self, hass: HomeAssistant, coordinator: HabitHeroCoordinator) -> None:
        """Initialize manager.

        Args:
            hass: Home Assistant instance
            coordinator: Parent coordinator managing this integration instance
        """
        self.hass = hass
        self.coordinator = coordinator
        self.entry_id = coordinator.config_entry.entry_id

    def emit(self, suffix: str, **payload: Any) -> None:
        """Emit an instance-scoped event to other managers.

        Example:
            self.emit(
                const.SIGNAL_SUFFIX_HABITS_CHANGED,
                habit_id=habit_id,
                now=now.isoformat(),
            )
        """
        signal = get_event_signal(self.entry_id, suffix)
        const.LOGGER.debug(
            "Emitting event '%s' for instance %s with payload keys: %s",
            suffix,
            self.entry_id,
            list(payload.keys()),
        )
        # Dispatcher only supports *args, so the payload travels as one dict
        async_dispatcher_send(self.hass, signal, payload)

    def listen(self, suffix: str, callback: Callable[..., Any]) -> None:
        """Subscribe to an instance-scoped event with automatic cleanup.

        The callback receives the payload dict. Callbacks decorated with
        ``@callback`` run synchronously inside emit().
        """
        signal = get_event_signal(self.entry_id, suffix)
        unsub = async_dispatcher_connect(self.hass, signal, callback)
        self.coordinator.config_entry.async_on_unload(unsub)
        const.LOGGER.debug(
            "Manager %s listening to event '%s' for instance %s",
            self.__class__.__name__,
            suffix,
            self.entry_id,
        )

    @abstractmethod
    async def async_setup(self) -> None:
        """Set up the manager (subscribe to events, initialize state)."""
