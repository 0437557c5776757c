"""Tests for commands.py."""
from unittest.mock import MagicMock
import pytest

from homeassistant.exceptions import HomeAssistantError

from custom_components.tab_autoreload.commands import Command, CommandType, async_dispatch
from custom_components.tab_autoreload.coordinator import AutoReloadCoordinator


@pytest.fixture
def coordinator():
    """A coordinator mock recording the awaited operations."""
    return MagicMock(spec=AutoReloadCoordinator)


class TestDispatch:
    """Each command reaches exactly one coordinator operation."""

    @pytest.mark.asyncio
    async def test_set_period(self, coordinator):
        """Test set_period goes through the tab id lookup."""
        await async_dispatch(coordinator, Command(CommandType.SET_PERIOD, tab_id=1, period=5))

        coordinator.async_set_tab_period.assert_awaited_once_with(1, 5)
        coordinator.async_set_period.assert_not_called()

    @pytest.mark.asyncio
    async def test_toggle(self, coordinator):
        """Test toggle passes the option and its new value."""
        await async_dispatch(
            coordinator, Command(CommandType.TOGGLE, tab_id=2, option="smart", enabled=False)
        )

        coordinator.async_toggle.assert_awaited_once_with(2, "smart", False)

    @pytest.mark.asyncio
    async def test_reload(self, coordinator):
        """Test reload targets one tab."""
        await async_dispatch(coordinator, Command(CommandType.RELOAD, tab_id=3))

        coordinator.async_reload.assert_awaited_once_with(3)

    @pytest.mark.asyncio
    async def test_reload_all(self, coordinator):
        """Test reload_all takes no tab."""
        await async_dispatch(coordinator, Command(CommandType.RELOAD_ALL))

        coordinator.async_reload_all.assert_awaited_once_with()

    @pytest.mark.asyncio
    async def test_enable_all(self, coordinator):
        """Test enable_all uses the tab as the settings source."""
        await async_dispatch(coordinator, Command(CommandType.ENABLE_ALL, tab_id=4))

        coordinator.async_enable_all.assert_awaited_once_with(4)

    @pytest.mark.asyncio
    async def test_disable_all(self, coordinator):
        """Test disable_all takes no tab."""
        await async_dispatch(coordinator, Command(CommandType.DISABLE_ALL))

        coordinator.async_disable_all.assert_awaited_once_with()

    @pytest.mark.asyncio
    async def test_confirm_resend(self, coordinator):
        """Test confirm_resend carries the requested period."""
        await async_dispatch(coordinator, Command(CommandType.CONFIRM_RESEND, tab_id=5, period=2))

        coordinator.async_confirm_resend.assert_awaited_once_with(5, 2)

    @pytest.mark.asyncio
    async def test_unknown_command(self, coordinator):
        """Test an unknown command type raises."""
        with pytest.raises(HomeAssistantError):
            await async_dispatch(coordinator, Command("explode", tab_id=1))

    def test_command_types_match_service_names(self):
        """Test command types use the service names as values."""
        assert CommandType("set_period") is CommandType.SET_PERIOD
        assert CommandType.RELOAD_ALL == "reload_all"
