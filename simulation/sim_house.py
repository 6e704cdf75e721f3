"""Console simulation for house automation.

This module drives the real automation controller from an asyncio ticker
without Home Assistant running. A scripted scenario issues commands at
given ticks and every state change is logged and recorded.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable

from custom_components.house_automation.base_ticker import BaseTicker
from custom_components.house_automation.controller import (
    AutomationController,
    ControllerEvent,
    InvalidTimerDuration,
    Mode,
)

_LOGGER = logging.getLogger(__name__)


class SimTicker(BaseTicker):
    """Simulation ticker using asyncio.

    Extends BaseTicker with an asyncio task that sleeps between ticks.
    """

    def __init__(
        self,
        callback: Callable[[], Any],
        interval: float = 1.0,
        name: str | None = None,
    ):
        """Initialize ticker."""
        super().__init__(callback, interval, name)
        self._task: asyncio.Task | None = None

    def _get_current_time(self) -> datetime:
        """Get current time as datetime."""
        return datetime.fromtimestamp(time.time())

    def start(self) -> None:
        """Start the ticker."""
        self._do_start()

        async def ticker_task():
            while True:
                await asyncio.sleep(self.interval)
                self._fire()

        self._task = asyncio.create_task(ticker_task())

    def cancel(self) -> None:
        """Cancel the ticker."""
        self._do_cancel()
        if self._task and not self._task.done():
            self._task.cancel()

    async def async_stop(self) -> None:
        """Cancel the ticker and wait for its task to finish."""
        task = self._task
        self.cancel()
        self._task = None
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task


@dataclass
class ScenarioStep:
    """A command issued at a given tick (0 runs on start)."""

    at_tick: int
    command: str
    args: tuple[Any, ...] = ()


@dataclass
class Snapshot:
    """State snapshot for history/replay."""

    tick: int
    event_type: str
    description: str
    state: dict[str, Any]


DEFAULT_SCENARIO: list[ScenarioStep] = [
    ScenarioStep(0, ControllerEvent.TOGGLE_LIGHT.value),
    ScenarioStep(1, ControllerEvent.INCREASE_TEMPERATURE.value),
    ScenarioStep(2, ControllerEvent.INCREASE_TEMPERATURE.value),
    ScenarioStep(6, ControllerEvent.SET_TIMER.value, (3,)),
    ScenarioStep(7, ControllerEvent.CONFIRM_TIMER.value),
]


@dataclass
class SimConfig:
    """Simulation configuration."""

    tick_interval: float = 1.0
    timer_forces_light_on: bool = False
    scenario: list[ScenarioStep] = field(
        default_factory=lambda: list(DEFAULT_SCENARIO)
    )


class SimHouse:
    """Simulated house driven by a ticker and a scripted scenario.

    Acts as the observer of the controller: it records every change and
    forwards it to its own listeners.
    """

    def __init__(
        self,
        config: SimConfig | None = None,
        ticker_factory: Callable[[Callable[[], Any], float], BaseTicker] | None = None,
    ):
        """Initialize the simulated house."""
        self.config = config or SimConfig()
        self.controller = AutomationController(
            timer_forces_light_on=self.config.timer_forces_light_on
        )
        self._commands: dict[str, Callable[..., None]] = {
            ControllerEvent.TOGGLE_LIGHT.value: self.controller.toggle_light,
            ControllerEvent.INCREASE_TEMPERATURE.value: self.controller.increase_temperature,
            ControllerEvent.DECREASE_TEMPERATURE.value: self.controller.decrease_temperature,
            ControllerEvent.SET_TIMER.value: self.controller.set_timer,
            ControllerEvent.CONFIRM_TIMER.value: self.controller.confirm_timer,
        }

        for step in self.config.scenario:
            if step.command not in self._commands:
                raise ValueError(f"Unknown scenario command: {step.command}")
        self._scenario = sorted(self.config.scenario, key=lambda step: step.at_tick)

        factory = ticker_factory or SimTicker
        self.ticker = factory(self._on_tick, self.config.tick_interval)

        self._listeners: list[Callable[[], Any]] = []
        self._last_event: str = "start"

        # History
        self._snapshots: list[Snapshot] = []
        self._max_snapshots = 1000

        # Event log (list of dicts with tick, message, type)
        self._event_log: list[dict[str, Any]] = []
        self._max_log_entries = 50

        self._target_ticks: int | None = None
        self._finished: asyncio.Event | None = None

        self.controller.add_listener(self._on_controller_change)
        self.controller.on_transition(self._on_transition)

    # ========================================================================
    # Listener Pattern
    # ========================================================================

    def async_add_listener(self, callback: Callable[[], Any]) -> Callable[[], None]:
        """Register for state change notifications.

        Returns:
            Callable to remove the listener
        """
        self._listeners.append(callback)

        def remove_listener() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return remove_listener

    def _notify_listeners(self) -> None:
        """Trigger all registered listeners."""
        for callback in list(self._listeners):
            try:
                callback()
            except Exception as err:
                _LOGGER.error("Error in listener callback: %s", err)

    # ========================================================================
    # Controller observation
    # ========================================================================

    def _on_transition(self, old_mode: Mode, new_mode: Mode, event: ControllerEvent) -> None:
        self._log_event(
            f"Mode: {old_mode.value} → {new_mode.value} ({event.value})", "transition"
        )

    def _on_controller_change(self) -> None:
        snapshot = self.controller.snapshot()
        _LOGGER.info(
            "Tick %d: mode=%s light=%s temp=%d°C (%s) timer=%ds",
            self.ticker.tick_count,
            snapshot.mode.value,
            "on" if snapshot.light_on else "off",
            snapshot.temperature,
            snapshot.temperature_band.value,
            snapshot.timer_seconds_remaining,
        )
        self._record_snapshot(self._last_event, f"State after {self._last_event}")
        self._notify_listeners()

    def _record_snapshot(self, event_type: str, description: str) -> None:
        self._snapshots.append(
            Snapshot(
                tick=self.ticker.tick_count,
                event_type=event_type,
                description=description,
                state=self.controller.snapshot().as_dict(),
            )
        )
        if len(self._snapshots) > self._max_snapshots:
            self._snapshots = self._snapshots[-self._max_snapshots :]

    def _log_event(self, message: str, event_type: str) -> None:
        self._event_log.append(
            {"tick": self.ticker.tick_count, "message": message, "type": event_type}
        )
        if len(self._event_log) > self._max_log_entries:
            self._event_log = self._event_log[-self._max_log_entries :]

    # ========================================================================
    # Scenario
    # ========================================================================

    def execute_command(self, command: str, *args: Any) -> bool:
        """Run a controller command by name.

        Returns:
            False if the controller rejected the input, True otherwise
        """
        handler = self._commands.get(command)
        if handler is None:
            raise ValueError(f"Unknown command: {command}")

        self._last_event = command
        try:
            handler(*args)
        except InvalidTimerDuration as err:
            _LOGGER.warning("Command %s rejected: %s", command, err)
            self._log_event(f"Rejected {command}: {err}", "error")
            return False
        return True

    def _run_scenario_steps(self, tick: int) -> None:
        for step in self._scenario:
            if step.at_tick == tick:
                self.execute_command(step.command, *step.args)

    def _on_tick(self) -> None:
        self._last_event = ControllerEvent.TICK.value
        self.controller.tick()
        self._run_scenario_steps(self.ticker.tick_count)

        if (
            self._finished is not None
            and self._target_ticks is not None
            and self.ticker.tick_count >= self._target_ticks
        ):
            # Stop here so no tick lands between now and the waiter resuming
            self.ticker.cancel()
            self._finished.set()

    def start(self) -> None:
        """Run the tick-0 steps and start ticking."""
        self._log_event("Simulation started", "lifecycle")
        self._run_scenario_steps(0)
        self.ticker.start()

    def stop(self) -> None:
        """Stop ticking."""
        self.ticker.cancel()
        self._log_event("Simulation stopped", "lifecycle")

    async def async_run(self, ticks: int) -> None:
        """Run the scenario for the given number of ticks."""
        self._target_ticks = ticks
        self._finished = asyncio.Event()
        self.start()
        try:
            if ticks > 0:
                await self._finished.wait()
        finally:
            if isinstance(self.ticker, SimTicker):
                await self.ticker.async_stop()
            self.stop()

    # ========================================================================
    # State export
    # ========================================================================

    @property
    def snapshots(self) -> list[Snapshot]:
        return list(self._snapshots)

    @property
    def event_log(self) -> list[dict[str, Any]]:
        return list(self._event_log)

    def get_simulation_state(self) -> dict[str, Any]:
        """Get the full simulation state as a JSON-able dict."""
        return {
            "controller": self.controller.snapshot().as_dict(),
            "info": self.controller.get_info(),
            "ticker": self.ticker.get_info(),
            "event_log": self.event_log,
            "history_size": len(self._snapshots),
        }


def run_simulation(ticks: int = 14, config: SimConfig | None = None) -> dict[str, Any]:
    """Run the console simulation and return the final state."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    house = SimHouse(config)
    print("\n🏠 House Automation Simulation")
    print(f"   Running {ticks} tick(s) every {house.config.tick_interval}s\n")

    asyncio.run(house.async_run(ticks))
    return house.get_simulation_state()
