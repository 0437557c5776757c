"""Per-tab reload timers."""
import logging
import random
import time
from typing import Callable, Dict, Optional

from homeassistant.core import CALLBACK_TYPE, HomeAssistant, callback
from homeassistant.helpers.event import async_call_later

from .bridge import BrowserBridge
from .const import (
    SECONDS_PER_MINUTE,
    RANDOMIZE_MIN_FACTOR,
    RANDOMIZE_MAX_FACTOR,
    MSG_TIMER_ENABLED,
    MSG_TIMER_DISABLED,
)
from .models import TabState
from .reload import ReloadExecutor
from .state_store import TabStateStore

_LOGGER = logging.getLogger(__name__)


def compute_delay(state: TabState, rng=random) -> float:
    """Return the delay in minutes until the next reload of a tab."""
    period = state.period
    if state.randomize:
        return rng.uniform(period * RANDOMIZE_MIN_FACTOR, period * RANDOMIZE_MAX_FACTOR)
    return period


class Scheduler:
    """Arms, cancels and fires one timer per tab."""

    def __init__(
        self,
        hass: HomeAssistant,
        store: TabStateStore,
        bridge: BrowserBridge,
        executor: ReloadExecutor,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.hass = hass
        self._store = store
        self._bridge = bridge
        self._executor = executor
        self._clock = clock
        self._timers: Dict[str, CALLBACK_TYPE] = {}

    def now(self) -> float:
        return self._clock()

    def is_armed(self, state: TabState) -> bool:
        return state.timer_key in self._timers

    @callback
    def freeze(self, state: TabState, seconds: float) -> None:
        """Hold off reloads of a smart-timed tab for a while; never shortens a freeze."""
        state.freeze_until = max(state.freeze_until, self.now() + seconds)

    @callback
    def arm(self, state: TabState) -> None:
        """(Re)start the timer of a tab from its period."""
        self.disarm(state)
        if state.period < 0:
            state.resend_confirmed = False
            self._bridge.send_message(state.tab_id, MSG_TIMER_DISABLED)
            return

        delay = compute_delay(state)
        self._schedule(state.timer_key, delay * SECONDS_PER_MINUTE)
        self._bridge.send_message(state.tab_id, MSG_TIMER_ENABLED)
        _LOGGER.debug("Armed %s for %.2f minutes", state.timer_key, delay)

    @callback
    def disarm(self, state: TabState) -> None:
        self.cancel(state.timer_key)

    @callback
    def cancel(self, key: str) -> None:
        cancel = self._timers.pop(key, None)
        if cancel is not None:
            cancel()

    @callback
    def cancel_all(self) -> None:
        for key in list(self._timers):
            self.cancel(key)

    @callback
    def _schedule(self, key: str, delay_seconds: float) -> None:
        @callback
        def _fire(_now) -> None:
            self._timers.pop(key, None)
            self._handle_fire(key)

        self._timers[key] = async_call_later(self.hass, max(0.0, delay_seconds), _fire)

    @callback
    def _handle_fire(self, key: str) -> None:
        state: Optional[TabState] = self._store.get_by_key(key)
        if state is None:
            return

        if state.only_on_error and not state.load_error:
            _LOGGER.debug("Skipping reload of %s, last load succeeded", key)
            return

        now = self.now()
        if state.smart and now < state.freeze_until:
            remaining = state.freeze_until - now
            _LOGGER.debug("Deferring reload of %s by %.1f seconds", key, remaining)
            self._schedule(key, remaining)
            return

        _LOGGER.debug("Timer %s elapsed, reloading", key)
        self.hass.async_create_task(self._executor.async_reload(state))
