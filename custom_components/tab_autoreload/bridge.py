"""Event bus bridge to the browser running the tabs."""
import logging
from typing import Any, Dict, List, Optional

from homeassistant.components.persistent_notification import async_create as async_create_notification
from homeassistant.core import HomeAssistant, callback

from .const import (
    EVENT_COMMAND,
    COMMAND_MESSAGE,
    COMMAND_RELOAD,
    COMMAND_STORE_SESSION,
    COMMAND_PROMPT,
    COMMAND_DELETE_HISTORY,
    PROMPT_CONFIRM_RESEND,
)
from .models import HistoryItem, TabInfo

_LOGGER = logging.getLogger(__name__)

PROMPT_MESSAGES = {
    PROMPT_CONFIRM_RESEND: (
        "Tab {tab_id} was loaded with submitted form data. Reloading it "
        "automatically will send that data again. Confirm to enable the timer."
    ),
}


class BrowserBridge:
    """Sends commands to the browser and mirrors what it reports.

    The browser side listens for ``tab_autoreload_command`` events. Tab
    descriptors and the visit log are kept here from the inbound events so
    lookups do not need a round trip.
    """

    def __init__(self, hass: HomeAssistant) -> None:
        self.hass = hass
        self._tabs: Dict[int, TabInfo] = {}
        self._visits: List[HistoryItem] = []

    # -- tab registry ------------------------------------------------------

    @callback
    def update_tab(self, tab: TabInfo) -> None:
        self._tabs[tab.tab_id] = tab

    @callback
    def remove_tab(self, tab_id: int) -> None:
        self._tabs.pop(tab_id, None)

    @callback
    def has_tab(self, tab_id: int) -> bool:
        return tab_id in self._tabs

    @callback
    def tab_ids(self, window_id: Optional[int] = None) -> List[int]:
        return [
            tab.tab_id
            for tab in self._tabs.values()
            if window_id is None or tab.window_id == window_id
        ]

    async def async_get_tab(self, tab_id: int) -> Optional[TabInfo]:
        """Return the current descriptor of a tab, or None if it is gone."""
        return self._tabs.get(tab_id)

    # -- history -----------------------------------------------------------

    @callback
    def navigated(self, tab_id: int, url: str, when: float) -> None:
        """Track a committed top-level navigation."""
        tab = self._tabs.get(tab_id)
        if tab is not None:
            tab.url = url
        self._visits.append(HistoryItem(url=url, last_visit_time=when))

    async def async_search_history(self, text: str, limit: int) -> List[HistoryItem]:
        """Most recent visits whose URL contains ``text``."""
        found: Dict[str, HistoryItem] = {}
        for item in self._visits:
            if text in item.url:
                found[item.url] = item
        items = sorted(found.values(), key=lambda i: i.last_visit_time, reverse=True)
        return items[:limit]

    async def async_delete_history_range(self, start: float, end: float) -> None:
        self._visits = [
            item for item in self._visits if not start <= item.last_visit_time <= end
        ]
        self._fire(None, COMMAND_DELETE_HISTORY, {"start": start, "end": end})

    # -- outbound commands -------------------------------------------------

    @callback
    def send_message(self, tab_id: int, event: str, **data: Any) -> None:
        """Deliver a message to the page agent running in a tab."""
        self._fire(tab_id, COMMAND_MESSAGE, {"event": event, **data})

    @callback
    def reload(self, tab_id: int, bypass_cache: bool = False) -> None:
        self._fire(tab_id, COMMAND_RELOAD, {"bypass_cache": bypass_cache})

    @callback
    def store_session(self, tab_id: int, state: Dict[str, Any]) -> None:
        self._fire(tab_id, COMMAND_STORE_SESSION, {"state": state})

    @callback
    def request_prompt(self, tab_id: int, prompt: str, period: Optional[float] = None) -> None:
        """Ask the user for input the system cannot decide on its own."""
        self._fire(tab_id, COMMAND_PROMPT, {"prompt": prompt, "period": period})
        message = PROMPT_MESSAGES.get(prompt)
        if message:
            async_create_notification(
                self.hass,
                message.format(tab_id=tab_id),
                title="Tab Autoreload",
                notification_id=f"tab_autoreload_{prompt}_{tab_id}",
            )

    @callback
    def _fire(self, tab_id: Optional[int], command: str, data: Dict[str, Any]) -> None:
        _LOGGER.debug("Command %s for tab %s: %s", command, tab_id, data)
        self.hass.bus.async_fire(EVENT_COMMAND, {"tab_id": tab_id, "command": command, **data})
