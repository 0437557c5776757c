"""Performs the reload of a tab."""
import logging
from typing import Callable

from .bridge import BrowserBridge
from .const import HISTORY_DELETE_WINDOW, MSG_RELOAD
from .models import Settings, TabState
from .state_store import TabStateStore

_LOGGER = logging.getLogger(__name__)


class ReloadExecutor:
    """Reloads tabs, resending form data only when the user allowed it."""

    def __init__(
        self,
        store: TabStateStore,
        bridge: BrowserBridge,
        settings: Callable[[], Settings],
    ) -> None:
        self._store = store
        self._bridge = bridge
        self._settings = settings

    def may_resend(self, state: TabState) -> bool:
        return state.resend_confirmed or self._settings().never_confirm_post

    async def async_reload(self, state: TabState, force_no_cache: bool = False) -> None:
        state.reload_by_system = True

        if state.non_idempotent and self.may_resend(state):
            await self._async_resend(state)
            return

        bypass_cache = force_no_cache or state.no_cache
        _LOGGER.debug("Reloading tab %s (bypass cache: %s)", state.tab_id, bypass_cache)
        self._bridge.reload(state.tab_id, bypass_cache=bypass_cache)

    async def _async_resend(self, state: TabState) -> None:
        # The resend creates a fresh history entry; drop the one it replaces.
        items = await self._bridge.async_search_history(state.url, 1)
        if items:
            visit_time = items[0].last_visit_time
            await self._bridge.async_delete_history_range(
                visit_time - HISTORY_DELETE_WINDOW, visit_time + HISTORY_DELETE_WINDOW
            )

        if not self._store.is_live(state):
            _LOGGER.debug("Tab %s closed before resend", state.tab_id)
            return

        state.keep_refreshing = True
        _LOGGER.debug("Resending %s to tab %s", state.request_method, state.tab_id)
        self._bridge.send_message(state.tab_id, MSG_RELOAD, post_data=state.form_data)
