"""Household automation controller.

This module holds the deterministic state machine that drives the light,
the thermostat adjustment mode and the countdown timer. It has no Home
Assistant dependencies so it can be used by both the integration and the
standalone simulation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable

from .const import (
    COOL_TEMPERATURE_MAX,
    INITIAL_TEMPERATURE,
    MIN_TEMPERATURE,
    TEMP_ADJUST_TICKS,
    WARM_TEMPERATURE_MIN,
)

_LOGGER = logging.getLogger(__name__)


class Mode(Enum):
    """Modes of the automation controller."""

    IDLE = "idle"
    LIGHT_ON = "light_on"
    LIGHT_OFF = "light_off"
    TEMP_ADJUST = "temp_adjust"
    TIMER_SET = "timer_set"
    TIMER_RUNNING = "timer_running"
    TIMER_EXPIRED = "timer_expired"


# Modes in which timer_seconds_remaining carries a meaningful value
TIMER_MODES = (Mode.TIMER_SET, Mode.TIMER_RUNNING)


class ControllerEvent(Enum):
    """Inputs that can mutate the controller."""

    TOGGLE_LIGHT = "toggle_light"
    INCREASE_TEMPERATURE = "increase_temperature"
    DECREASE_TEMPERATURE = "decrease_temperature"
    SET_TIMER = "set_timer"
    CONFIRM_TIMER = "confirm_timer"
    TICK = "tick"


class TemperatureBand(Enum):
    """Coarse temperature classification used by views."""

    COOL = "cool"
    NORMAL = "normal"
    WARM = "warm"


def classify_temperature(temperature: int) -> TemperatureBand:
    """Return the band a temperature falls into."""
    if temperature <= COOL_TEMPERATURE_MAX:
        return TemperatureBand.COOL
    if temperature >= WARM_TEMPERATURE_MIN:
        return TemperatureBand.WARM
    return TemperatureBand.NORMAL


class InvalidTimerDuration(ValueError):
    """Error to indicate a timer duration that cannot be set."""


@dataclass(frozen=True)
class ControllerSnapshot:
    """Read-only view of the controller state."""

    mode: Mode
    light_on: bool
    temperature: int
    timer_seconds_remaining: int

    @property
    def temperature_band(self) -> TemperatureBand:
        return classify_temperature(self.temperature)

    def as_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode.value,
            "light_on": self.light_on,
            "temperature": self.temperature,
            "temperature_band": self.temperature_band.value,
            "timer_seconds_remaining": self.timer_seconds_remaining,
        }


class AutomationController:
    """State machine for the household automation controller.

    Every command is total: commands that make no sense in the current mode
    are ignored rather than raising. Listeners are notified synchronously
    after any command or tick that changed at least one field. Listeners
    must not call back into the mutating commands.
    """

    def __init__(
        self,
        timer_forces_light_on: bool = False,
        get_current_time: Callable[[], datetime] | None = None,
    ):
        """Initialize the controller.

        Args:
            timer_forces_light_on: Switch the light on when a timer is confirmed
            get_current_time: Optional function to get current time (for testing/simulation)
        """
        self._mode = Mode.IDLE
        self._previous_mode: Mode | None = None
        self._light_on = False
        self._temperature = INITIAL_TEMPERATURE
        self._temp_adjust_ticks_remaining = 0
        self._timer_seconds_remaining = 0
        self._timer_forces_light_on = timer_forces_light_on

        self._get_current_time = get_current_time or self._default_get_time
        self._mode_entered_at: datetime = self._get_current_time()

        self._listeners: list[Callable[[], None]] = []
        self._transition_callbacks: list[
            Callable[[Mode, Mode, ControllerEvent], None]
        ] = []

    def _default_get_time(self) -> datetime:
        """Default time provider using datetime.now()."""
        return datetime.now()

    # ========================================================================
    # Commands
    # ========================================================================

    def toggle_light(self) -> None:
        """Flip the light and enter the matching light mode."""
        before = self._capture()
        self._light_on = not self._light_on
        self._mode = Mode.LIGHT_ON if self._light_on else Mode.LIGHT_OFF
        self._commit(ControllerEvent.TOGGLE_LIGHT, before)

    def increase_temperature(self) -> None:
        """Raise the temperature by one degree."""
        before = self._capture()
        self._temperature += 1
        self._enter_temp_adjust()
        self._commit(ControllerEvent.INCREASE_TEMPERATURE, before)

    def decrease_temperature(self) -> None:
        """Lower the temperature by one degree, never below the floor."""
        before = self._capture()
        self._temperature = max(MIN_TEMPERATURE, self._temperature - 1)
        self._enter_temp_adjust()
        self._commit(ControllerEvent.DECREASE_TEMPERATURE, before)

    def _enter_temp_adjust(self) -> None:
        # A running timer keeps its mode; only the temperature is recorded.
        if self._mode is Mode.TIMER_RUNNING:
            return
        self._mode = Mode.TEMP_ADJUST
        self._temp_adjust_ticks_remaining = TEMP_ADJUST_TICKS

    def set_timer(self, seconds: int) -> None:
        """Arm the countdown timer, overriding any previous timer or mode.

        Raises:
            InvalidTimerDuration: If seconds is not a non-negative integer.
                The controller state is left unchanged.
        """
        if isinstance(seconds, bool) or not isinstance(seconds, int):
            _LOGGER.warning("Rejected timer duration %r: not an integer", seconds)
            raise InvalidTimerDuration(f"Timer duration must be an integer, got {seconds!r}")
        if seconds < 0:
            _LOGGER.warning("Rejected timer duration %d: negative", seconds)
            raise InvalidTimerDuration(f"Timer duration must be >= 0, got {seconds}")

        before = self._capture()
        self._timer_seconds_remaining = seconds
        self._mode = Mode.TIMER_SET
        self._commit(ControllerEvent.SET_TIMER, before)

    def confirm_timer(self) -> None:
        """Start an armed timer. Ignored unless a timer is set."""
        if self._mode is not Mode.TIMER_SET:
            _LOGGER.debug("Ignoring confirm_timer in mode=%s", self._mode.value)
            return

        before = self._capture()
        self._mode = Mode.TIMER_RUNNING
        if self._timer_forces_light_on:
            self._light_on = True
        self._commit(ControllerEvent.CONFIRM_TIMER, before)

    def tick(self) -> None:
        """Advance time-dependent modes by one tick."""
        before = self._capture()

        if self._mode is Mode.TEMP_ADJUST:
            self._temp_adjust_ticks_remaining -= 1
            if self._temp_adjust_ticks_remaining <= 0:
                self._mode = Mode.IDLE
        elif self._mode is Mode.TIMER_RUNNING:
            if self._timer_seconds_remaining > 0:
                self._timer_seconds_remaining -= 1
            else:
                self._light_on = False
                self._mode = Mode.TIMER_EXPIRED
        elif self._mode is Mode.TIMER_EXPIRED:
            # Expired lasts exactly one tick so views can render it.
            self._mode = Mode.IDLE

        self._commit(ControllerEvent.TICK, before)

    # ========================================================================
    # Change tracking
    # ========================================================================

    def _capture(self) -> tuple[Mode, bool, int, int, int]:
        return (
            self._mode,
            self._light_on,
            self._temperature,
            self._temp_adjust_ticks_remaining,
            self._timer_seconds_remaining,
        )

    def _commit(
        self, event: ControllerEvent, before: tuple[Mode, bool, int, int, int]
    ) -> None:
        """Record a mode change and notify listeners if anything changed."""
        if self._capture() == before:
            _LOGGER.debug(
                "No change for mode=%s, event=%s", self._mode.value, event.value
            )
            return

        old_mode = before[0]
        if old_mode is not self._mode:
            _LOGGER.info(
                "Mode transition: %s -> %s (event: %s)",
                old_mode.value,
                self._mode.value,
                event.value,
            )
            self._previous_mode = old_mode
            self._mode_entered_at = self._get_current_time()

            for transition_callback in list(self._transition_callbacks):
                try:
                    transition_callback(old_mode, self._mode, event)
                except Exception as err:
                    _LOGGER.error("Error in transition callback: %s", err)

        for listener in list(self._listeners):
            try:
                listener()
            except Exception as err:
                _LOGGER.error("Error in state change listener: %s", err)

    # ========================================================================
    # Listener Pattern
    # ========================================================================

    def add_listener(self, listener: Callable[[], None]) -> Callable[[], None]:
        """Register for state change notifications.

        Returns:
            Callable to remove the listener
        """
        self._listeners.append(listener)
        return lambda: self.remove_listener(listener)

    def remove_listener(self, listener: Callable[[], None]) -> None:
        """Unregister a state change listener. Unknown listeners are ignored."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def on_transition(
        self, callback: Callable[[Mode, Mode, ControllerEvent], None]
    ) -> None:
        """Register a callback to be called on any mode transition."""
        self._transition_callbacks.append(callback)

    # ========================================================================
    # Read access
    # ========================================================================

    def snapshot(self) -> ControllerSnapshot:
        """Return an immutable snapshot of the public state."""
        return ControllerSnapshot(
            mode=self._mode,
            light_on=self._light_on,
            temperature=self._temperature,
            timer_seconds_remaining=self._timer_seconds_remaining,
        )

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def previous_mode(self) -> Mode | None:
        return self._previous_mode

    @property
    def light_on(self) -> bool:
        return self._light_on

    @property
    def temperature(self) -> int:
        return self._temperature

    @property
    def timer_seconds_remaining(self) -> int:
        return self._timer_seconds_remaining

    @property
    def temp_adjust_ticks_remaining(self) -> int:
        """Ticks left before leaving temp adjust (only meaningful in that mode)."""
        return self._temp_adjust_ticks_remaining

    @property
    def timer_forces_light_on(self) -> bool:
        return self._timer_forces_light_on

    @property
    def time_in_current_mode(self) -> float:
        """Get seconds spent in current mode."""
        return (self._get_current_time() - self._mode_entered_at).total_seconds()

    def is_in_mode(self, *modes: Mode) -> bool:
        """Check if current mode is one of the given modes."""
        return self._mode in modes

    def get_info(self) -> dict[str, Any]:
        """Get controller diagnostic info."""
        return {
            "current_mode": self._mode.value,
            "previous_mode": self._previous_mode.value if self._previous_mode else None,
            "mode_entered_at": self._mode_entered_at.isoformat(),
            "time_in_mode": self.time_in_current_mode,
            "light_on": self._light_on,
            "temperature": self._temperature,
            "temperature_band": classify_temperature(self._temperature).value,
            "timer_seconds_remaining": self._timer_seconds_remaining,
            "temp_adjust_ticks_remaining": self._temp_adjust_ticks_remaining,
            "timer_forces_light_on": self._timer_forces_light_on,
            "listeners": len(self._listeners),
        }
