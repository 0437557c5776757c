"""Inbound events from the browser."""
import logging
from typing import Any, Dict

import voluptuous as vol
from homeassistant.core import Event
from homeassistant.helpers import config_validation as cv

from .coordinator import AutoReloadCoordinator
from .models import TabInfo

_LOGGER = logging.getLogger(__name__)

TAB_ID = vol.All(vol.Coerce(int), vol.Range(min=0))

TAB_SCHEMA = vol.Schema(
    {
        vol.Required("tab_id"): TAB_ID,
        vol.Optional("url", default=""): cv.string,
        vol.Optional("incognito", default=False): cv.boolean,
        vol.Optional("pinned", default=False): cv.boolean,
        vol.Optional("window_id"): vol.Any(None, vol.Coerce(int)),
    },
    extra=vol.REMOVE_EXTRA,
)

EVENT_SCHEMAS = {
    "tabs_sync": vol.Schema({vol.Required("tabs"): [TAB_SCHEMA]}),
    "tab_created": vol.Schema({
        vol.Required("tab"): TAB_SCHEMA,
        vol.Optional("state"): vol.Any(None, dict),
    }),
    "tab_removed": vol.Schema({vol.Required("tab_id"): TAB_ID}),
    "tab_updated": vol.Schema({
        vol.Required("tab_id"): TAB_ID,
        vol.Optional("status"): cv.string,
        vol.Optional("pinned"): cv.boolean,
    }),
    "tab_activated": vol.Schema({vol.Required("tab_id"): TAB_ID}),
    "window_focused": vol.Schema({
        vol.Required("window_id"): vol.Coerce(int),
        vol.Optional("tab_id"): TAB_ID,
    }),
    "request_started": vol.Schema({
        vol.Required("tab_id"): TAB_ID,
        vol.Required("method"): cv.string,
        vol.Optional("form_data"): vol.Any(None, dict),
    }),
    "response_completed": vol.Schema({
        vol.Required("tab_id"): TAB_ID,
        vol.Required("status_code"): vol.Coerce(int),
    }),
    "response_error": vol.Schema({vol.Required("tab_id"): TAB_ID}),
    "navigation_committed": vol.Schema({
        vol.Required("tab_id"): TAB_ID,
        vol.Required("transition"): cv.string,
        vol.Required("url"): cv.string,
    }),
    "navigation_completed": vol.Schema({vol.Required("tab_id"): TAB_ID}),
    "activity": vol.Schema({vol.Required("tab_id"): TAB_ID}),
    "set_interval": vol.Schema({
        vol.Required("tab_id"): TAB_ID,
        vol.Required("period"): vol.Coerce(float),
    }),
    "scroll": vol.Schema({
        vol.Required("tab_id"): TAB_ID,
        vol.Required("x"): vol.Coerce(float),
        vol.Required("y"): vol.Coerce(float),
    }),
}


def _tab(data: Dict[str, Any]) -> TabInfo:
    return TabInfo(
        tab_id=data["tab_id"],
        url=data["url"],
        incognito=data["incognito"],
        pinned=data["pinned"],
        window_id=data.get("window_id"),
    )


async def async_handle_browser_event(coordinator: AutoReloadCoordinator, event: Event) -> None:
    """Validate an inbound browser event and hand it to the coordinator."""
    payload = dict(event.data)
    kind = payload.pop("type", None)
    schema = EVENT_SCHEMAS.get(kind)
    if schema is None:
        _LOGGER.warning("Ignoring browser event of unknown type %s", kind)
        return
    try:
        data = schema(payload)
    except vol.Invalid as err:
        _LOGGER.warning("Ignoring malformed %s event: %s", kind, err)
        return

    if kind == "tabs_sync":
        await coordinator.async_sync_tabs([_tab(tab) for tab in data["tabs"]])
    elif kind == "tab_created":
        await coordinator.async_tab_created(_tab(data["tab"]), data.get("state"))
    elif kind == "tab_removed":
        coordinator.async_tab_removed(data["tab_id"])
    elif kind == "tab_updated":
        await coordinator.async_tab_updated(
            data["tab_id"], status=data.get("status"), pinned=data.get("pinned")
        )
    elif kind == "tab_activated":
        coordinator.async_tab_activated(data["tab_id"])
    elif kind == "window_focused":
        coordinator.async_window_focused(data["window_id"], data.get("tab_id"))
    elif kind == "request_started":
        coordinator.async_request_started(data["tab_id"], data["method"], data.get("form_data"))
    elif kind == "response_completed":
        coordinator.async_response_completed(data["tab_id"], data["status_code"])
    elif kind == "response_error":
        coordinator.async_response_error(data["tab_id"])
    elif kind == "navigation_committed":
        await coordinator.async_navigation_committed(
            data["tab_id"], data["transition"], data["url"]
        )
    elif kind == "navigation_completed":
        coordinator.async_navigation_completed(data["tab_id"])
    elif kind == "activity":
        coordinator.async_activity(data["tab_id"])
    elif kind == "set_interval":
        await coordinator.async_set_tab_period(data["tab_id"], data["period"])
    elif kind == "scroll":
        coordinator.async_scroll(data["tab_id"], data["x"], data["y"])
