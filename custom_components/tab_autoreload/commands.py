"""User commands and their single dispatch point."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from homeassistant.exceptions import HomeAssistantError

from .coordinator import AutoReloadCoordinator


class CommandType(str, Enum):
    SET_PERIOD = "set_period"
    TOGGLE = "toggle"
    RELOAD = "reload"
    RELOAD_ALL = "reload_all"
    ENABLE_ALL = "enable_all"
    DISABLE_ALL = "disable_all"
    CONFIRM_RESEND = "confirm_resend"


@dataclass(frozen=True)
class Command:
    type: CommandType
    tab_id: Optional[int] = None
    period: Optional[float] = None
    option: Optional[str] = None
    enabled: Optional[bool] = None


async def async_dispatch(coordinator: AutoReloadCoordinator, command: Command) -> None:
    """Run a user command against the coordinator."""
    kind = command.type
    if kind is CommandType.SET_PERIOD:
        await coordinator.async_set_tab_period(command.tab_id, command.period)
    elif kind is CommandType.TOGGLE:
        await coordinator.async_toggle(command.tab_id, command.option, bool(command.enabled))
    elif kind is CommandType.RELOAD:
        await coordinator.async_reload(command.tab_id)
    elif kind is CommandType.RELOAD_ALL:
        await coordinator.async_reload_all()
    elif kind is CommandType.ENABLE_ALL:
        await coordinator.async_enable_all(command.tab_id)
    elif kind is CommandType.DISABLE_ALL:
        await coordinator.async_disable_all()
    elif kind is CommandType.CONFIRM_RESEND:
        await coordinator.async_confirm_resend(command.tab_id, command.period)
    else:
        raise HomeAssistantError(f"Unsupported command: {kind}")
