"""Service handlers for the Tab Autoreload integration."""
import voluptuous as vol
from homeassistant.core import HomeAssistant, ServiceCall
from homeassistant.helpers import config_validation as cv

from .commands import Command, CommandType, async_dispatch
from .const import (
    DOMAIN,
    PERIOD_CUSTOM,
    PERIOD_DISABLED,
    TOGGLE_OPTIONS,
    ATTR_TAB_ID,
    ATTR_PERIOD,
    ATTR_OPTION,
    ATTR_ENABLED,
    SERVICE_SET_PERIOD,
    SERVICE_TOGGLE,
    SERVICE_RELOAD,
    SERVICE_RELOAD_ALL,
    SERVICE_ENABLE_ALL,
    SERVICE_DISABLE_ALL,
    SERVICE_CONFIRM_RESEND,
)
from .coordinator import AutoReloadCoordinator


def valid_period(value) -> float:
    """Minutes between reloads, or one of the disable/custom sentinels."""
    period = vol.Coerce(float)(value)
    if period >= 0 or period in (PERIOD_DISABLED, PERIOD_CUSTOM):
        return period
    raise vol.Invalid(f"Invalid period: {value}")


TAB_SCHEMA = vol.Schema({vol.Required(ATTR_TAB_ID): cv.positive_int})

SET_PERIOD_SCHEMA = vol.Schema({
    vol.Required(ATTR_TAB_ID): cv.positive_int,
    vol.Required(ATTR_PERIOD): valid_period,
})

TOGGLE_SCHEMA = vol.Schema({
    vol.Required(ATTR_TAB_ID): cv.positive_int,
    vol.Required(ATTR_OPTION): vol.In(TOGGLE_OPTIONS),
    vol.Required(ATTR_ENABLED): cv.boolean,
})

EMPTY_SCHEMA = vol.Schema({})

SERVICES = {
    SERVICE_SET_PERIOD: (CommandType.SET_PERIOD, SET_PERIOD_SCHEMA),
    SERVICE_TOGGLE: (CommandType.TOGGLE, TOGGLE_SCHEMA),
    SERVICE_RELOAD: (CommandType.RELOAD, TAB_SCHEMA),
    SERVICE_RELOAD_ALL: (CommandType.RELOAD_ALL, EMPTY_SCHEMA),
    SERVICE_ENABLE_ALL: (CommandType.ENABLE_ALL, TAB_SCHEMA),
    SERVICE_DISABLE_ALL: (CommandType.DISABLE_ALL, EMPTY_SCHEMA),
    SERVICE_CONFIRM_RESEND: (CommandType.CONFIRM_RESEND, SET_PERIOD_SCHEMA),
}


def command_from_call(kind: CommandType, call: ServiceCall) -> Command:
    return Command(
        type=kind,
        tab_id=call.data.get(ATTR_TAB_ID),
        period=call.data.get(ATTR_PERIOD),
        option=call.data.get(ATTR_OPTION),
        enabled=call.data.get(ATTR_ENABLED),
    )


def async_register_services(hass: HomeAssistant, coordinator: AutoReloadCoordinator) -> None:
    for service, (kind, schema) in SERVICES.items():

        async def _handle(call: ServiceCall, kind=kind) -> None:
            await async_dispatch(coordinator, command_from_call(kind, call))

        hass.services.async_register(DOMAIN, service, _handle, schema=schema)


def async_remove_services(hass: HomeAssistant) -> None:
    for service in SERVICES:
        hass.services.async_remove(DOMAIN, service)
