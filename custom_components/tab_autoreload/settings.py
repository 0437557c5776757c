"""Persistent process-wide settings."""
import logging
from typing import Any, Mapping

from homeassistant.core import HomeAssistant
from homeassistant.helpers.storage import Store

from .const import (
    CONFIG_VERSION,
    STORAGE_KEY_SETTINGS,
    STORAGE_VERSION,
    DEFAULT_OPTION_KEYS,
    CONF_PIN_SETS_REMEMBER,
    DEFAULT_PIN_SETS_REMEMBER,
    CONF_NEVER_CONFIRM_POST,
    DEFAULT_NEVER_CONFIRM_POST,
)
from .models import Settings

_LOGGER = logging.getLogger(__name__)


def settings_from_options(options: Mapping[str, Any]) -> Settings:
    """Build a settings record from config entry options."""
    settings = Settings()
    for conf_key, option in DEFAULT_OPTION_KEYS.items():
        if conf_key in options:
            settings.defaults[option] = bool(options[conf_key])
    settings.pin_sets_remember = bool(
        options.get(CONF_PIN_SETS_REMEMBER, DEFAULT_PIN_SETS_REMEMBER)
    )
    settings.never_confirm_post = bool(
        options.get(CONF_NEVER_CONFIRM_POST, DEFAULT_NEVER_CONFIRM_POST)
    )
    return settings


class SettingsStore:
    """Loads and saves the settings record."""

    def __init__(self, hass: HomeAssistant) -> None:
        self.hass = hass
        self._store = Store(hass, STORAGE_VERSION, STORAGE_KEY_SETTINGS)
        self.current = Settings()

    async def async_load(self) -> Settings:
        data = await self._store.async_load()
        if data is None:
            _LOGGER.debug("No stored settings, using defaults")
            self.current = Settings()
            return self.current

        try:
            self.current = Settings.from_dict(data)
        except (KeyError, TypeError, ValueError) as err:
            _LOGGER.warning("Stored settings are unreadable, using defaults: %s", err)
            self.current = Settings()
        return self.current

    async def async_replace(self, settings: Settings) -> None:
        """Replace the settings wholesale and persist them."""
        settings.version = CONFIG_VERSION
        self.current = settings
        await self._store.async_save(settings.as_dict())
