"""Carries tab state across a restart or upgrade."""
import logging
from typing import Any, Callable, Dict, List

from homeassistant.core import HomeAssistant
from homeassistant.helpers.storage import Store

from .const import (
    CONFIG_VERSION,
    SECONDS_PER_MINUTE,
    STORAGE_KEY_UPGRADE,
    STORAGE_VERSION,
)
from .models import TabState
from .state_store import TabStateStore

_LOGGER = logging.getLogger(__name__)

# Version 1 records were written by the browser add-on with its own names.
V1_FIELD_NAMES = {
    "tabId": "tab_id",
    "alarmName": "timer_key",
    "onlyOnError": "only_on_error",
    "stickyReload": "sticky_reload",
    "nocache": "no_cache",
    "keepRefreshing": "keep_refreshing",
    "freezeUntil": "freeze_until",
    "reqMethod": "request_method",
    "formData": "form_data",
    "postConfirmed": "resend_confirmed",
    "scrollX": "scroll_x",
    "scrollY": "scroll_y",
    "reloadByAddon": "reload_by_system",
    "loadError": "load_error",
}


def _migrate_v1(record: Dict[str, Any]) -> Dict[str, Any]:
    """Rename add-on fields; periods were seconds and times milliseconds."""
    migrated = {V1_FIELD_NAMES.get(key, key): value for key, value in record.items()}
    period = migrated.get("period")
    if isinstance(period, (int, float)) and period >= 0:
        migrated["period"] = period / SECONDS_PER_MINUTE
    freeze_until = migrated.get("freeze_until")
    if isinstance(freeze_until, (int, float)):
        migrated["freeze_until"] = freeze_until / 1000.0
    return migrated


# version -> function upgrading a record from that version to the next
MIGRATIONS: Dict[int, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
    1: _migrate_v1,
}


def migrate_record(record: Dict[str, Any], version: int) -> Dict[str, Any]:
    """Upgrade a serialized record step by step to CONFIG_VERSION."""
    migrated = dict(record)
    for step in range(version, CONFIG_VERSION):
        migrated = MIGRATIONS[step](migrated)
    return migrated


class MigrationManager:
    """Writes the upgrade snapshot at shutdown and consumes it at startup."""

    def __init__(self, hass: HomeAssistant, store: TabStateStore) -> None:
        self.hass = hass
        self._state_store = store
        self._store = Store(hass, STORAGE_VERSION, STORAGE_KEY_UPGRADE)

    async def async_write_snapshot(self) -> None:
        snapshot = {
            "version": CONFIG_VERSION,
            "state": [[state.timer_key, state.as_dict()] for state in self._state_store],
        }
        await self._store.async_save(snapshot)
        _LOGGER.debug("Saved state of %d tabs for restart", len(snapshot["state"]))

    async def async_restore(self) -> List[TabState]:
        """Rebuild tab records from the snapshot and register them.

        The snapshot is removed afterwards whatever its content; a snapshot
        from a newer version is ignored.
        """
        data = await self._store.async_load()
        await self._store.async_remove()
        if not data:
            return []

        try:
            version = int(data["version"])
            records = list(data["state"])
        except (KeyError, TypeError, ValueError) as err:
            _LOGGER.warning("Ignoring unreadable upgrade snapshot: %s", err)
            return []

        if version > CONFIG_VERSION:
            _LOGGER.warning(
                "Ignoring upgrade snapshot from newer version %d (current %d)",
                version,
                CONFIG_VERSION,
            )
            return []

        if version < min(MIGRATIONS):
            _LOGGER.warning("Ignoring upgrade snapshot from unsupported version %d", version)
            return []

        restored: List[TabState] = []
        for entry in records:
            try:
                _key, saved = entry
                record = migrate_record(saved, version)
                state = self._state_store.new_state(int(record["tab_id"]))
            except (KeyError, TypeError, ValueError) as err:
                _LOGGER.warning("Skipping unreadable tab record: %s", err)
                continue
            state.copy_from(record)
            self._state_store.replace(state)
            restored.append(state)

        _LOGGER.info("Restored %d tabs from version %d snapshot", len(restored), version)
        return restored
