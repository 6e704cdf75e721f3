"""Fixtures for House automation integration tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import timedelta
from typing import Any

import pytest
from homeassistant.config_entries import ConfigEntryState
from homeassistant.const import CONF_NAME
from homeassistant.core import HomeAssistant
from homeassistant.util import dt as dt_util
from pytest_homeassistant_custom_component.common import (
    MockConfigEntry,
    async_fire_time_changed,
)

from custom_components.house_automation.const import (
    CONF_TICK_INTERVAL,
    CONF_TIMER_FORCES_LIGHT_ON,
    DEFAULT_TICK_INTERVAL,
    DEFAULT_TIMER_FORCES_LIGHT_ON,
    DOMAIN,
)
from custom_components.house_automation.controller import AutomationController


@pytest.fixture
def controller() -> AutomationController:
    """Return a controller in its initial configuration."""
    return AutomationController()


@pytest.fixture
def mock_config_data() -> dict[str, Any]:
    """Return mock configuration data."""
    return {
        CONF_NAME: "Test House",
        CONF_TICK_INTERVAL: DEFAULT_TICK_INTERVAL,
        CONF_TIMER_FORCES_LIGHT_ON: DEFAULT_TIMER_FORCES_LIGHT_ON,
    }


@pytest.fixture
def mock_config_entry(mock_config_data: dict[str, Any]) -> MockConfigEntry:
    """Return a mocked config entry."""
    return MockConfigEntry(
        domain=DOMAIN,
        title=mock_config_data[CONF_NAME],
        data=mock_config_data,
        unique_id=mock_config_data[CONF_NAME],
        entry_id="test_entry_id",
    )


@pytest.fixture
async def init_integration(
    hass: HomeAssistant, mock_config_entry: MockConfigEntry
) -> AsyncGenerator[MockConfigEntry]:
    """Set up the integration and unload it after the test."""
    mock_config_entry.add_to_hass(hass)
    assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
    await hass.async_block_till_done()

    yield mock_config_entry

    if mock_config_entry.state is ConfigEntryState.LOADED:
        assert await hass.config_entries.async_unload(mock_config_entry.entry_id)
        await hass.async_block_till_done()


@pytest.fixture
def advance_ticks(hass: HomeAssistant) -> Callable[..., Awaitable[None]]:
    """Return a helper that moves time forward one interval at a time."""

    async def _advance(count: int, interval: int = DEFAULT_TICK_INTERVAL) -> None:
        now = dt_util.utcnow()
        for _ in range(count):
            now += timedelta(seconds=interval)
            async_fire_time_changed(hass, now)
            await hass.async_block_till_done()

    return _advance
