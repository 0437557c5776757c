"""Per-URL memory of tab settings (the "Remember" feature)."""
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlsplit

from homeassistant.core import HomeAssistant
from homeassistant.helpers.storage import Store

from .const import STORAGE_KEY_URL_MEMORY, STORAGE_VERSION
from .models import TabState

_LOGGER = logging.getLogger(__name__)


def normalize_url(url: str) -> str:
    """Reduce a URL to authority and path, dropping scheme, query and fragment."""
    parts = urlsplit((url or "").strip())
    return parts.netloc + parts.path


class UrlMemory:
    """Maps normalized URLs to the user settings saved for them."""

    def __init__(self, hass: HomeAssistant) -> None:
        self.hass = hass
        self._store = Store(hass, STORAGE_VERSION, STORAGE_KEY_URL_MEMORY)
        self._memory: Dict[str, Dict[str, Any]] = {}

    def __len__(self) -> int:
        return len(self._memory)

    def __contains__(self, url: str) -> bool:
        return normalize_url(url) in self._memory

    async def async_load(self) -> None:
        data = await self._store.async_load()
        if not data:
            return
        try:
            self._memory = {str(url): dict(snapshot) for url, snapshot in data}
        except (TypeError, ValueError) as err:
            _LOGGER.warning("Stored URL memory is unreadable, starting empty: %s", err)
            self._memory = {}

    async def async_save(self) -> None:
        # Stored as ordered pairs
        await self._store.async_save([[url, snapshot] for url, snapshot in self._memory.items()])

    def recall(self, url: str, incognito: bool = False) -> Optional[Dict[str, Any]]:
        """Return a copy of the saved settings for a URL, if any."""
        if incognito:
            return None
        snapshot = self._memory.get(normalize_url(url))
        return dict(snapshot) if snapshot is not None else None

    async def async_update(self, state: TabState, url: str, incognito: bool = False) -> None:
        """Store the tab's settings under its URL, or forget the URL."""
        if incognito:
            return
        key = normalize_url(url)
        if state.remember:
            self._memory[key] = state.snapshot()
            _LOGGER.debug("Remembering settings for %s", key)
        elif self._memory.pop(key, None) is None:
            return
        await self.async_save()
