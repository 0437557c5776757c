"""Bootstrap for the Tab Autoreload integration."""
from functools import partial

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import EVENT_HOMEASSISTANT_STOP
from homeassistant.core import Event, HomeAssistant
from homeassistant.helpers.typing import ConfigType

from .bridge import BrowserBridge
from .const import DOMAIN, EVENT_BROWSER
from .coordinator import AutoReloadCoordinator
from .events import async_handle_browser_event
from .migration import MigrationManager
from .reload import ReloadExecutor
from .scheduler import Scheduler
from .services import async_register_services, async_remove_services
from .settings import SettingsStore, settings_from_options
from .state_store import TabStateStore
from .url_memory import UrlMemory


async def async_setup(hass: HomeAssistant, _: ConfigType) -> bool:
    """YAML setup (unused)."""
    return True


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Wire the stores, scheduler and coordinator and start listening."""
    settings_store = SettingsStore(hass)
    await settings_store.async_load()
    if entry.options:
        await settings_store.async_replace(settings_from_options(entry.options))

    def settings():
        return settings_store.current

    store = TabStateStore(settings)
    bridge = BrowserBridge(hass)
    executor = ReloadExecutor(store, bridge, settings)
    scheduler = Scheduler(hass, store, bridge, executor)
    coordinator = AutoReloadCoordinator(
        hass,
        settings_store,
        UrlMemory(hass),
        store,
        bridge,
        scheduler,
        executor,
        MigrationManager(hass, store),
    )
    await coordinator.async_start()

    async def _on_stop(_event: Event) -> None:
        await coordinator.migration.async_write_snapshot()

    unsubs = [
        hass.bus.async_listen(EVENT_BROWSER, partial(async_handle_browser_event, coordinator)),
        hass.bus.async_listen(EVENT_HOMEASSISTANT_STOP, _on_stop),
        entry.add_update_listener(_async_options_updated),
    ]

    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = {
        "coordinator": coordinator,
        "unsubs": unsubs,
    }
    async_register_services(hass, coordinator)
    return True


async def _async_options_updated(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Options saved: replace the settings wholesale."""
    coordinator = hass.data[DOMAIN][entry.entry_id]["coordinator"]
    await coordinator.async_update_settings(settings_from_options(entry.options))


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    data = hass.data[DOMAIN].pop(entry.entry_id)
    for unsub in data["unsubs"]:
        unsub()
    data["coordinator"].async_shutdown()
    async_remove_services(hass)
    return True
