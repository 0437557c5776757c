# File: custom_components/tab_autoreload/config_flow.py

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.core import callback

from .const import (
    DOMAIN,
    CONF_DEFAULT_RANDOMIZE,
    DEFAULT_RANDOMIZE,
    CONF_DEFAULT_ONLY_ON_ERROR,
    DEFAULT_ONLY_ON_ERROR,
    CONF_DEFAULT_SMART,
    DEFAULT_SMART,
    CONF_DEFAULT_STICKY_RELOAD,
    DEFAULT_STICKY_RELOAD,
    CONF_DEFAULT_NO_CACHE,
    DEFAULT_NO_CACHE,
    CONF_PIN_SETS_REMEMBER,
    DEFAULT_PIN_SETS_REMEMBER,
    CONF_NEVER_CONFIRM_POST,
    DEFAULT_NEVER_CONFIRM_POST,
)


class TabAutoreloadConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Initial configuration flow for Tab Autoreload."""

    VERSION = 1

    async def async_step_user(self, user_input=None):
        await self.async_set_unique_id(DOMAIN)
        self._abort_if_unique_id_configured()

        if user_input is not None:
            return self.async_create_entry(title="Tab Autoreload", data={})

        return self.async_show_form(step_id="user", data_schema=vol.Schema({}))

    @staticmethod
    @callback
    def async_get_options_flow(config_entry):
        """Options flow for the reload defaults."""
        return OptionsFlowHandler(config_entry)


class OptionsFlowHandler(config_entries.OptionsFlow):
    """Edit the defaults given to new tabs and the global switches."""

    def __init__(self, config_entry):
        self._entry = config_entry

    async def async_step_init(self, user_input=None):
        if user_input is not None:
            return self.async_create_entry(title="", data=user_input)

        opts = self._entry.options
        schema = vol.Schema({
            vol.Optional(
                CONF_DEFAULT_RANDOMIZE,
                default=opts.get(CONF_DEFAULT_RANDOMIZE, DEFAULT_RANDOMIZE),
            ): bool,
            vol.Optional(
                CONF_DEFAULT_ONLY_ON_ERROR,
                default=opts.get(CONF_DEFAULT_ONLY_ON_ERROR, DEFAULT_ONLY_ON_ERROR),
            ): bool,
            vol.Optional(
                CONF_DEFAULT_SMART,
                default=opts.get(CONF_DEFAULT_SMART, DEFAULT_SMART),
            ): bool,
            vol.Optional(
                CONF_DEFAULT_STICKY_RELOAD,
                default=opts.get(CONF_DEFAULT_STICKY_RELOAD, DEFAULT_STICKY_RELOAD),
            ): bool,
            vol.Optional(
                CONF_DEFAULT_NO_CACHE,
                default=opts.get(CONF_DEFAULT_NO_CACHE, DEFAULT_NO_CACHE),
            ): bool,
            vol.Optional(
                CONF_PIN_SETS_REMEMBER,
                default=opts.get(CONF_PIN_SETS_REMEMBER, DEFAULT_PIN_SETS_REMEMBER),
            ): bool,
            vol.Optional(
                CONF_NEVER_CONFIRM_POST,
                default=opts.get(CONF_NEVER_CONFIRM_POST, DEFAULT_NEVER_CONFIRM_POST),
            ): bool,
        })

        return self.async_show_form(step_id="init", data_schema=schema)
