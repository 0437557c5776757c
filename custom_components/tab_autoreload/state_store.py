"""Owner of the per-tab state records."""
from typing import Callable, Dict, Iterator, Optional

from .models import Settings, TabState, timer_key


class TabStateStore:
    """Holds exactly one TabState per live tab, keyed by timer key."""

    def __init__(self, settings: Callable[[], Settings]) -> None:
        self._settings = settings
        self._states: Dict[str, TabState] = {}

    def __len__(self) -> int:
        return len(self._states)

    def __iter__(self) -> Iterator[TabState]:
        return iter(list(self._states.values()))

    def new_state(self, tab_id: int) -> TabState:
        """Return a fresh default record without registering it."""
        return TabState.new(tab_id, self._settings().defaults)

    def get(self, tab_id: int) -> Optional[TabState]:
        return self._states.get(timer_key(tab_id))

    def get_by_key(self, key: str) -> Optional[TabState]:
        return self._states.get(key)

    def get_or_create(self, tab_id: int) -> TabState:
        key = timer_key(tab_id)
        state = self._states.get(key)
        if state is None:
            state = self.new_state(tab_id)
            self._states[key] = state
        return state

    def replace(self, state: TabState) -> None:
        self._states[state.timer_key] = state

    def remove(self, tab_id: int) -> Optional[TabState]:
        return self._states.pop(timer_key(tab_id), None)

    def is_live(self, state: TabState) -> bool:
        """True while ``state`` is still the registered record for its tab."""
        return self._states.get(state.timer_key) is state
