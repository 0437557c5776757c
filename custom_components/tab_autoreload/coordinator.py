import logging
from typing import Any, Dict, Iterable, Optional, Set

from homeassistant.core import HomeAssistant, callback

from .bridge import BrowserBridge
from .const import (
    ACTIVITY_FREEZE,
    TAB_ACTIVATED_FREEZE,
    WINDOW_FOCUS_FREEZE,
    IDEMPOTENT_METHOD,
    PERIOD_CUSTOM,
    PERIOD_DISABLED,
    RELOAD_TRANSITIONS,
    STATUS_COMPLETE,
    TOGGLE_OPTIONS,
    OPT_ONLY_ON_ERROR,
    MSG_SCROLL,
    MSG_SET_TAB_ID,
    PROMPT_CONFIRM_RESEND,
    PROMPT_CUSTOM_INTERVAL,
)
from .migration import MigrationManager
from .models import USER_SETTING_FIELDS, Settings, TabInfo, TabState, timer_key
from .reload import ReloadExecutor
from .scheduler import Scheduler
from .settings import SettingsStore
from .state_store import TabStateStore
from .url_memory import UrlMemory

_LOGGER = logging.getLogger(__name__)


class AutoReloadCoordinator:
    """Reconciles tab timers with navigation, user intent and settings.

    Every handler runs on the event loop. Anything that awaits re-checks
    that the tab's record is still registered before writing, so a tab
    closed in the meantime is never resurrected.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        settings_store: SettingsStore,
        url_memory: UrlMemory,
        store: TabStateStore,
        bridge: BrowserBridge,
        scheduler: Scheduler,
        executor: ReloadExecutor,
        migration: MigrationManager,
    ) -> None:
        self.hass = hass
        self.settings_store = settings_store
        self.url_memory = url_memory
        self.store = store
        self.bridge = bridge
        self.scheduler = scheduler
        self.executor = executor
        self.migration = migration
        self.current_window_id: Optional[int] = None
        # timer keys of tabs restored from an upgrade snapshot, not yet re-applied
        self._restored: Set[str] = set()

    @property
    def settings(self) -> Settings:
        return self.settings_store.current

    async def async_start(self) -> None:
        restored = await self.migration.async_restore()
        self._restored = {state.timer_key for state in restored}
        await self.url_memory.async_load()

    async def async_update_settings(self, settings: Settings) -> None:
        await self.settings_store.async_replace(settings)

    @callback
    def async_shutdown(self) -> None:
        self.scheduler.cancel_all()

    # -- helpers -----------------------------------------------------------

    @callback
    def apply(self, state: TabState) -> None:
        """Restart the tab's timer and persist its state."""
        self.scheduler.arm(state)
        self._persist(state)

    @callback
    def _persist(self, state: TabState) -> None:
        if not self.store.is_live(state):
            return
        self.bridge.store_session(state.tab_id, state.as_dict())

    @callback
    def _live_state(self, tab_id: int) -> Optional[TabState]:
        """Return the record of an open tab, or None once the tab is closed.

        Only the browser's tab announcements create records; commands and
        page events for other tabs are dropped.
        """
        state = self.store.get(tab_id)
        if state is None or not self.bridge.has_tab(tab_id):
            _LOGGER.debug("Ignoring update for closed tab %s", tab_id)
            return None
        return state

    async def _async_live_tab(self, state: TabState) -> Optional[TabInfo]:
        tab = await self.bridge.async_get_tab(state.tab_id)
        if tab is None or not self.store.is_live(state):
            _LOGGER.debug("Tab %s is gone, dropping update", state.tab_id)
            return None
        return tab

    async def _async_remember(self, state: TabState) -> None:
        """Write the tab's settings through to UrlMemory, or forget its URL."""
        tab = await self._async_live_tab(state)
        if tab is None:
            return
        await self.url_memory.async_update(state, tab.url, tab.incognito)

    async def _async_recall(self, state: TabState) -> None:
        """Apply settings remembered for the tab's current URL, if any."""
        tab = await self._async_live_tab(state)
        if tab is None:
            return
        snapshot = self.url_memory.recall(tab.url, tab.incognito)
        if snapshot is None:
            return
        _LOGGER.debug("Recalled settings for tab %s at %s", state.tab_id, tab.url)
        state.copy_from(snapshot, USER_SETTING_FIELDS)
        self.apply(state)

    # -- period ------------------------------------------------------------

    async def async_set_period(self, state: TabState, period: float) -> None:
        """Change the reload period of a tab, asking the user first if needed."""
        if await self._async_live_tab(state) is None:
            return

        if period == PERIOD_CUSTOM:
            self.bridge.request_prompt(state.tab_id, PROMPT_CUSTOM_INTERVAL)
            return

        if (
            state.non_idempotent
            and period != PERIOD_DISABLED
            and not self.executor.may_resend(state)
        ):
            self.bridge.request_prompt(state.tab_id, PROMPT_CONFIRM_RESEND, period)
            return

        state.period = period
        self.apply(state)
        if state.remember:
            await self._async_remember(state)

    async def async_set_tab_period(self, tab_id: int, period: float) -> None:
        state = self._live_state(tab_id)
        if state is None:
            return
        await self.async_set_period(state, period)

    async def async_confirm_resend(self, tab_id: int, period: float) -> None:
        state = self._live_state(tab_id)
        if state is None:
            return
        state.resend_confirmed = True
        await self.async_set_period(state, period)

    # -- tab lifecycle -----------------------------------------------------

    async def async_sync_tabs(self, tabs: Iterable[TabInfo]) -> None:
        """Take over the tabs that were already open."""
        restored, self._restored = self._restored, set()
        resuming = bool(restored)
        seen: Set[str] = set()
        for tab in tabs:
            self.bridge.update_tab(tab)
            state = self.store.get_or_create(tab.tab_id)
            seen.add(state.timer_key)
            self.bridge.send_message(tab.tab_id, MSG_SET_TAB_ID)
            if state.timer_key in restored:
                await self.async_set_period(state, state.period)
            elif not resuming:
                # A loaded page cannot be replayed as POST, so fall back to a
                # plain reload without asking.
                state.request_method = IDEMPOTENT_METHOD
                state.resend_confirmed = True
            await self._async_recall(state)

        # Restored tabs that did not survive the restart
        for key in restored - seen:
            state = self.store.get_by_key(key)
            if state is not None:
                self.store.remove(state.tab_id)

    async def async_tab_created(
        self, tab: TabInfo, session: Optional[Dict[str, Any]] = None
    ) -> None:
        self.bridge.update_tab(tab)
        self.store.get_or_create(tab.tab_id)
        self.bridge.send_message(tab.tab_id, MSG_SET_TAB_ID)
        if not session:
            return

        # Reopened tab: the saved state may carry an old tab id.
        state = self.store.new_state(tab.tab_id)
        state.copy_from(session)
        state.keep_refreshing = True
        self.store.replace(state)
        self.apply(state)

    @callback
    def async_tab_removed(self, tab_id: int) -> None:
        self.scheduler.cancel(timer_key(tab_id))
        self.store.remove(tab_id)
        self.bridge.remove_tab(tab_id)

    async def async_tab_updated(
        self, tab_id: int, status: Optional[str] = None, pinned: Optional[bool] = None
    ) -> None:
        state = self._live_state(tab_id)
        if state is None:
            return
        self.bridge.send_message(tab_id, MSG_SET_TAB_ID)

        if status is not None:
            if status == STATUS_COMPLETE:
                self._load_completed(state)
            else:
                # never reload mid-load
                self.scheduler.disarm(state)

        if pinned is not None:
            tab = await self.bridge.async_get_tab(tab_id)
            if tab is not None:
                tab.pinned = pinned
            if self.settings.pin_sets_remember and self.store.is_live(state):
                state.remember = pinned
                await self._async_remember(state)

    @callback
    def _load_completed(self, state: TabState) -> None:
        if state.reload_by_system and state.scroll_x is not None:
            self.bridge.send_message(
                state.tab_id, MSG_SCROLL, x=state.scroll_x, y=state.scroll_y
            )
        state.reload_by_system = False
        self.scheduler.arm(state)

    @callback
    def async_tab_activated(self, tab_id: int) -> None:
        state = self._live_state(tab_id)
        if state is not None:
            self.scheduler.freeze(state, TAB_ACTIVATED_FREEZE)

    @callback
    def async_window_focused(self, window_id: int, tab_id: Optional[int] = None) -> None:
        self.current_window_id = window_id
        if tab_id is None:
            return
        state = self._live_state(tab_id)
        if state is not None:
            self.scheduler.freeze(state, WINDOW_FOCUS_FREEZE)

    # -- requests and responses --------------------------------------------

    @callback
    def async_request_started(
        self, tab_id: int, method: str, form_data: Optional[Dict[str, Any]] = None
    ) -> None:
        state = self._live_state(tab_id)
        if state is None:
            return
        state.request_method = method.upper()
        state.form_data = dict(form_data) if state.non_idempotent and form_data else None

        if state.non_idempotent and not self.executor.may_resend(state):
            # Unconfirmed form submission: stop reloading this tab.
            state.period = PERIOD_DISABLED
            self.apply(state)

    @callback
    def async_response_completed(self, tab_id: int, status_code: int) -> None:
        state = self._live_state(tab_id)
        if state is not None:
            state.load_error = status_code >= 400

    @callback
    def async_response_error(self, tab_id: int) -> None:
        state = self._live_state(tab_id)
        if state is not None:
            state.load_error = True

    # -- navigation --------------------------------------------------------

    async def async_navigation_committed(self, tab_id: int, transition: str, url: str) -> None:
        """Top-level navigation committed in a tab."""
        state = self._live_state(tab_id)
        if state is None:
            return
        self.bridge.navigated(tab_id, url, self.scheduler.now())

        reloading = transition in RELOAD_TRANSITIONS
        cancel_timer = not reloading and not state.keep_refreshing and not state.sticky_reload

        if not reloading:
            # Remember is keyed by URL and the user may be leaving this one.
            state.remember = False

        if state.url != url:
            state.scroll_x = None
            state.scroll_y = None
            state.url = url

        if cancel_timer:
            state.period = PERIOD_DISABLED
            self.apply(state)

        # Only after the cancel, so a recalled period is kept.
        await self._async_recall(state)

    @callback
    def async_navigation_completed(self, tab_id: int) -> None:
        state = self._live_state(tab_id)
        if state is not None:
            state.keep_refreshing = False

    # -- page agent --------------------------------------------------------

    @callback
    def async_activity(self, tab_id: int) -> None:
        state = self._live_state(tab_id)
        if state is not None:
            self.scheduler.freeze(state, ACTIVITY_FREEZE)

    @callback
    def async_scroll(self, tab_id: int, x: float, y: float) -> None:
        state = self._live_state(tab_id)
        if state is None:
            return
        state.scroll_x = x
        state.scroll_y = y

    # -- user commands -----------------------------------------------------

    async def async_toggle(self, tab_id: int, option: str, enabled: bool) -> None:
        if option not in TOGGLE_OPTIONS:
            raise ValueError(f"Unknown option: {option}")
        state = self._live_state(tab_id)
        if state is None:
            return
        setattr(state, option, enabled)
        await self._async_remember(state)
        if not self.store.is_live(state):
            return
        if option == OPT_ONLY_ON_ERROR:
            self.scheduler.arm(state)
        self._persist(state)

    async def async_reload(self, tab_id: int) -> None:
        state = self._live_state(tab_id)
        if state is not None:
            await self.executor.async_reload(state, force_no_cache=True)

    async def async_reload_all(self) -> None:
        for tab_id in self.bridge.tab_ids(self.current_window_id):
            state = self._live_state(tab_id)
            if state is not None:
                await self.executor.async_reload(state)

    async def async_enable_all(self, source_tab_id: int) -> None:
        """Give every tab the settings of one tab."""
        source = self._live_state(source_tab_id)
        if source is None:
            return
        snapshot = source.snapshot()
        period = snapshot.pop("period")
        for tab_id in self.bridge.tab_ids():
            other = self._live_state(tab_id)
            if other is None:
                continue
            other.copy_from(snapshot, USER_SETTING_FIELDS)
            await self.async_set_period(other, period)

    async def async_disable_all(self) -> None:
        for tab_id in self.bridge.tab_ids():
            state = self._live_state(tab_id)
            if state is not None:
                await self.async_set_period(state, PERIOD_DISABLED)
