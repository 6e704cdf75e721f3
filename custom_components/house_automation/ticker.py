"""Tick scheduling for house automation.

This module provides the Home Assistant-specific ticker that extends
BaseTicker with event loop scheduling.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Callable

from homeassistant.core import CALLBACK_TYPE, HomeAssistant, callback
from homeassistant.helpers.event import async_track_time_interval
from homeassistant.util import dt as dt_util

from .base_ticker import BaseTicker
from .const import DEFAULT_TICK_INTERVAL, DOMAIN

_LOGGER = logging.getLogger(__name__)


class Ticker(BaseTicker):
    """Home Assistant-specific ticker implementation.

    Ticks run on the Home Assistant event loop, so they are serialized with
    service calls that mutate the controller.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        callback: Callable[[], Any],
        interval: float = DEFAULT_TICK_INTERVAL,
        name: str | None = None,
    ):
        """Initialize a ticker.

        Args:
            hass: HomeAssistant instance
            callback: Called once per tick with no arguments
            interval: Seconds between ticks
            name: Optional name for debugging
        """
        super().__init__(callback, interval, name)
        self.hass = hass
        self._unsub: CALLBACK_TYPE | None = None

    def _get_current_time(self) -> datetime:
        """Get current time using Home Assistant utilities."""
        return dt_util.now()

    def start(self) -> None:
        """Start or restart the ticker on the HA event loop."""
        self._do_start()

        self._unsub = async_track_time_interval(
            self.hass,
            self._async_handle_interval,
            timedelta(seconds=self.interval),
            name=f"{DOMAIN} {self.name}",
            cancel_on_shutdown=True,
        )

    def cancel(self) -> None:
        """Cancel the ticker."""
        if self._unsub:
            self._unsub()
            self._unsub = None
        self._do_cancel()

    @callback
    def _async_handle_interval(self, now: datetime) -> None:
        """Handle one interval elapsing."""
        self._fire()
