"""Shared fixtures for tab_autoreload tests."""
import asyncio
from unittest.mock import MagicMock, AsyncMock, patch
import pytest

from custom_components.tab_autoreload.bridge import BrowserBridge
from custom_components.tab_autoreload.const import EVENT_COMMAND
from custom_components.tab_autoreload.coordinator import AutoReloadCoordinator
from custom_components.tab_autoreload.migration import MigrationManager
from custom_components.tab_autoreload.models import TabInfo
from custom_components.tab_autoreload.reload import ReloadExecutor
from custom_components.tab_autoreload.scheduler import Scheduler
from custom_components.tab_autoreload.settings import SettingsStore
from custom_components.tab_autoreload.state_store import TabStateStore
from custom_components.tab_autoreload.url_memory import UrlMemory


START_TIME = 1_000_000.0


@pytest.fixture
def mock_hass():
    """Create a mock Home Assistant instance."""
    hass = MagicMock()
    hass.data = {}
    hass.tasks = []

    def _create_task(coro, *args, **kwargs):
        task = asyncio.ensure_future(coro)
        hass.tasks.append(task)
        return task

    hass.async_create_task = MagicMock(side_effect=_create_task)
    return hass


@pytest.fixture
def mock_config_entry():
    """Create a mock config entry."""
    entry = MagicMock()
    entry.entry_id = "test_entry_id"
    entry.data = {}
    entry.options = {}
    return entry


@pytest.fixture(autouse=True)
def patch_notifications():
    """Keep persistent notifications away from the mock hass."""
    with patch("custom_components.tab_autoreload.bridge.async_create_notification") as notify:
        yield notify


@pytest.fixture
def mock_stores():
    """Replace every Store with a mock; returns them keyed by storage key."""
    stores = {}

    def _factory(hass, version, key, *args, **kwargs):
        store = MagicMock()
        store.key = key
        store.async_load = AsyncMock(return_value=None)
        store.async_save = AsyncMock()
        store.async_remove = AsyncMock()
        stores[key] = store
        return store

    with patch("custom_components.tab_autoreload.settings.Store", side_effect=_factory), \
            patch("custom_components.tab_autoreload.url_memory.Store", side_effect=_factory), \
            patch("custom_components.tab_autoreload.migration.Store", side_effect=_factory):
        yield stores


@pytest.fixture
def mock_call_later():
    """Capture timers instead of scheduling them."""
    with patch("custom_components.tab_autoreload.scheduler.async_call_later") as call_later:
        call_later.side_effect = lambda hass, delay, action: MagicMock()
        yield call_later


@pytest.fixture
def clock():
    """A controllable clock, in seconds."""
    return MagicMock(return_value=START_TIME)


@pytest.fixture
def coordinator(mock_hass, mock_stores, mock_call_later, clock):
    """A fully wired coordinator on top of mocked storage and timers."""
    settings_store = SettingsStore(mock_hass)

    def settings():
        return settings_store.current

    store = TabStateStore(settings)
    bridge = BrowserBridge(mock_hass)
    executor = ReloadExecutor(store, bridge, settings)
    scheduler = Scheduler(mock_hass, store, bridge, executor, clock=clock)
    return AutoReloadCoordinator(
        mock_hass,
        settings_store,
        UrlMemory(mock_hass),
        store,
        bridge,
        scheduler,
        executor,
        MigrationManager(mock_hass, store),
    )


@pytest.fixture
def open_tab(coordinator):
    """Register an open tab with the bridge and return its state."""

    def _open(tab_id=1, url="https://example.com/page?x=1", **kwargs):
        coordinator.bridge.update_tab(TabInfo(tab_id=tab_id, url=url, **kwargs))
        return coordinator.store.get_or_create(tab_id)

    return _open


@pytest.fixture
def fired(mock_hass):
    """Return the outbound commands fired on the bus, optionally filtered."""

    def _fired(command=None):
        events = [
            call.args[1]
            for call in mock_hass.bus.async_fire.call_args_list
            if call.args[0] == EVENT_COMMAND
        ]
        return [e for e in events if command is None or e["command"] == command]

    return _fired


@pytest.fixture
def fire_timer(mock_call_later, mock_hass):
    """Fire the most recently armed timer and wait for the work it started."""

    async def _fire():
        action = mock_call_later.call_args[0][2]
        action(None)
        while mock_hass.tasks:
            await mock_hass.tasks.pop(0)

    return _fire
