"""Base tick scheduling for house automation.

This module provides the periodic clock that drives the controller. It can
be used by both the Home Assistant integration and standalone simulation.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable

from .const import DEFAULT_TICK_INTERVAL

_LOGGER = logging.getLogger(__name__)


class BaseTicker(ABC):
    """Abstract base class for fixed-interval tick sources."""

    def __init__(
        self,
        callback: Callable[[], Any],
        interval: float = DEFAULT_TICK_INTERVAL,
        name: str | None = None,
    ):
        """Initialize a ticker.

        Args:
            callback: Called once per tick with no arguments
            interval: Seconds between ticks
            name: Optional name for debugging
        """
        self.callback = callback
        self.interval = interval
        self.name = name or "ticker"

        self._is_active = False
        self._tick_count = 0
        self._started_at: datetime | None = None
        self._last_tick_at: datetime | None = None

    @abstractmethod
    def start(self) -> None:
        """Start or restart the ticker."""

    @abstractmethod
    def cancel(self) -> None:
        """Stop the ticker."""

    @abstractmethod
    def _get_current_time(self) -> datetime:
        """Get the current time."""

    def _do_start(self) -> None:
        """Common start logic."""
        if self._is_active:
            self.cancel()

        self._started_at = self._get_current_time()
        self._is_active = True

        _LOGGER.info("Starting ticker '%s' every %ss", self.name, self.interval)

    def _do_cancel(self) -> None:
        """Common cancel logic."""
        if not self._is_active:
            return

        _LOGGER.info(
            "Stopping ticker '%s' after %d tick(s)", self.name, self._tick_count
        )
        self._is_active = False
        self._started_at = None

    def _fire(self) -> None:
        """Deliver one tick to the callback."""
        if not self._is_active:
            _LOGGER.debug("Ticker '%s' fired but was already cancelled", self.name)
            return

        self._tick_count += 1
        self._last_tick_at = self._get_current_time()

        try:
            self.callback()
        except Exception as err:
            _LOGGER.error("Error in tick callback for '%s': %s", self.name, err)

    @property
    def is_active(self) -> bool:
        """Check if ticker is currently running."""
        return self._is_active

    @property
    def tick_count(self) -> int:
        """Number of ticks delivered since creation."""
        return self._tick_count

    @property
    def last_tick_at(self) -> datetime | None:
        return self._last_tick_at

    def get_info(self) -> dict[str, Any]:
        """Get ticker diagnostic info."""
        return {
            "name": self.name,
            "interval": self.interval,
            "is_active": self._is_active,
            "tick_count": self._tick_count,
            "started_at": self._started_at.isoformat() if self._started_at else None,
            "last_tick_at": (
                self._last_tick_at.isoformat() if self._last_tick_at else None
            ),
        }


class ManualTicker(BaseTicker):
    """Ticker that only advances when told to.

    Used by tests and scripted simulations that must not wait on a wall clock.
    """

    def _get_current_time(self) -> datetime:
        return datetime.now()

    def start(self) -> None:
        self._do_start()

    def cancel(self) -> None:
        self._do_cancel()

    def advance(self, ticks: int = 1) -> int:
        """Fire the given number of ticks.

        Returns:
            Number of ticks delivered (0 if the ticker is not running)
        """
        delivered = 0
        for _ in range(ticks):
            if not self._is_active:
                break
            self._fire()
            delivered += 1
        return delivered
