"""House automation coordinator."""

from __future__ import annotations

import logging
from typing import Any, Callable

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator
from homeassistant.util import dt as dt_util

from .const import (
    CONF_TICK_INTERVAL,
    CONF_TIMER_FORCES_LIGHT_ON,
    DEFAULT_TICK_INTERVAL,
    DEFAULT_TIMER_FORCES_LIGHT_ON,
    DOMAIN,
)
from .controller import AutomationController, ControllerSnapshot
from .ticker import Ticker

_LOGGER = logging.getLogger(__name__)


class HouseAutomationCoordinator(DataUpdateCoordinator[dict[str, Any]]):
    """Owns one automation controller and the ticker that drives it.

    All commands and ticks run on the Home Assistant event loop. Entities
    subscribe through async_add_listener and only read the snapshot.
    """

    def __init__(self, hass: HomeAssistant, config_entry: ConfigEntry) -> None:
        """Initialize the coordinator."""
        super().__init__(
            hass,
            _LOGGER,
            name=f"{DOMAIN}_{config_entry.entry_id}",
            update_interval=None,
            config_entry=config_entry,
        )

        self._load_config()

        self.controller = AutomationController(
            timer_forces_light_on=self.timer_forces_light_on,
            get_current_time=dt_util.now,
        )
        self.ticker = Ticker(
            hass,
            self.controller.tick,
            self.tick_interval,
            name=config_entry.title or DOMAIN,
        )

        self._remove_controller_listener: Callable[[], None] | None = None
        self.data = self.controller.snapshot().as_dict()

    def _load_config(self) -> None:
        """Load configuration."""
        data = self.config_entry.data
        self.tick_interval: int = data.get(CONF_TICK_INTERVAL, DEFAULT_TICK_INTERVAL)
        self.timer_forces_light_on: bool = data.get(
            CONF_TIMER_FORCES_LIGHT_ON, DEFAULT_TIMER_FORCES_LIGHT_ON
        )

    async def async_start(self) -> None:
        """Subscribe to the controller and start ticking."""
        self._remove_controller_listener = self.controller.add_listener(
            self._handle_controller_change
        )
        self.ticker.start()

    @callback
    def _handle_controller_change(self) -> None:
        """Push the new snapshot to entities."""
        self.data = self.controller.snapshot().as_dict()
        self.async_update_listeners()

    async def _async_update_data(self) -> dict[str, Any]:
        """Return the current snapshot; state is pushed, never fetched."""
        return self.controller.snapshot().as_dict()

    def get_diagnostic_data(self) -> dict[str, Any]:
        """Get diagnostic data for entities."""
        return {
            **self.controller.get_info(),
            "tick_interval": self.tick_interval,
            "ticker": self.ticker.get_info(),
        }

    def async_cleanup_listeners(self) -> None:
        """Stop ticking and detach from the controller."""
        self.ticker.cancel()
        if self._remove_controller_listener is not None:
            self._remove_controller_listener()
            self._remove_controller_listener = None

    @property
    def snapshot(self) -> ControllerSnapshot:
        return self.controller.snapshot()
