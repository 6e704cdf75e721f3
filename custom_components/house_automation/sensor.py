"""Sensor platform for House automation integration.

Exposes the controller snapshot as three sensors:
- Mode: the current controller mode, with diagnostic attributes
- Temperature: the thermostat set temperature and its band (cool/normal/warm)
- Timer remaining: countdown seconds, only while a timer is set or running
"""

from __future__ import annotations

from typing import Any

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorEntityDescription,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import UnitOfTemperature, UnitOfTime
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .controller import TIMER_MODES, Mode
from .entity import HouseAutomationEntity

MODE_DESCRIPTION = SensorEntityDescription(
    key="mode",
    name="Mode",
    icon="mdi:state-machine",
    device_class=SensorDeviceClass.ENUM,
    options=[mode.value for mode in Mode],
)

TEMPERATURE_DESCRIPTION = SensorEntityDescription(
    key="temperature",
    name="Temperature",
    device_class=SensorDeviceClass.TEMPERATURE,
    native_unit_of_measurement=UnitOfTemperature.CELSIUS,
)

TIMER_DESCRIPTION = SensorEntityDescription(
    key="timer_remaining",
    name="Timer remaining",
    icon="mdi:timer-outline",
    device_class=SensorDeviceClass.DURATION,
    native_unit_of_measurement=UnitOfTime.SECONDS,
)


async def async_setup_entry(
    hass: HomeAssistant,
    config_entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up sensor entities."""
    coordinator = config_entry.runtime_data

    async_add_entities(
        [
            HouseModeSensor(coordinator, config_entry, MODE_DESCRIPTION),
            HouseTemperatureSensor(coordinator, config_entry, TEMPERATURE_DESCRIPTION),
            HouseTimerSensor(coordinator, config_entry, TIMER_DESCRIPTION),
        ]
    )


class HouseModeSensor(HouseAutomationEntity, SensorEntity):
    """Current controller mode."""

    @property
    def native_value(self) -> str:
        return self._coordinator.snapshot.mode.value

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Return diagnostic data about the controller."""
        diagnostic_data = self._coordinator.get_diagnostic_data()
        ticker = diagnostic_data.get("ticker", {})

        return {
            "previous_mode": diagnostic_data.get("previous_mode"),
            "mode_entered_at": diagnostic_data.get("mode_entered_at"),
            "light_on": diagnostic_data.get("light_on"),
            "temperature_band": diagnostic_data.get("temperature_band"),
            "timer_forces_light_on": diagnostic_data.get("timer_forces_light_on"),
            "tick_interval": diagnostic_data.get("tick_interval"),
            "tick_count": ticker.get("tick_count"),
        }


class HouseTemperatureSensor(HouseAutomationEntity, SensorEntity):
    """Thermostat temperature."""

    @property
    def native_value(self) -> int:
        return self._coordinator.snapshot.temperature

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        return {"temperature_band": self._coordinator.snapshot.temperature_band.value}


class HouseTimerSensor(HouseAutomationEntity, SensorEntity):
    """Countdown seconds; unknown when no timer is set or running."""

    @property
    def native_value(self) -> int | None:
        snapshot = self._coordinator.snapshot
        if snapshot.mode not in TIMER_MODES:
            return None
        return snapshot.timer_seconds_remaining
