# File: config_flow.py
"""Config flow for the Habit Hero integration.

Single instance: one config entry owns the one stored document. The user step
only asks whether the first document should include the starter habits.
"""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant import config_entries

from . import const

USER_SCHEMA = vol.Schema(
    {
        vol.Required(
            const.CONF_SEED_DEFAULT_HABITS, default=const.DEFAULT_SEED_DEFAULT_HABITS
        ): bool,
    }
)


class HabitHeroConfigFlow(config_entries.ConfigFlow, domain=const.DOMAIN):
    """Config flow for Habit Hero."""

    VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> config_entries.ConfigFlowResult:
        """Create the single Habit Hero entry."""
        if any(self._async_current_entries()):
            return self.async_abort(reason=const.TRANS_KEY_ERROR_SINGLE_INSTANCE)

        if user_input is not None:
            return self.async_create_entry(
                title=const.HABIT_HERO_TITLE,
                data={
                    const.CONF_SEED_DEFAULT_HABITS: user_input[
                        const.CONF_SEED_DEFAULT_HABITS
                    ]
                },
            )

        return self.async_show_form(step_id="user", data_schema=USER_SCHEMA)
