"""Binary sensor platform for House automation integration."""

from __future__ import annotations

from homeassistant.components.binary_sensor import (
    BinarySensorDeviceClass,
    BinarySensorEntity,
    BinarySensorEntityDescription,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .entity import HouseAutomationEntity

LIGHT_DESCRIPTION = BinarySensorEntityDescription(
    key="light",
    name="Light",
    device_class=BinarySensorDeviceClass.LIGHT,
)


async def async_setup_entry(
    hass: HomeAssistant,
    config_entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the light binary sensor from a config entry."""
    coordinator = config_entry.runtime_data

    async_add_entities([HouseLightSensor(coordinator, config_entry, LIGHT_DESCRIPTION)])


class HouseLightSensor(HouseAutomationEntity, BinarySensorEntity):
    """Whether the controlled light is energized."""

    @property
    def is_on(self) -> bool:
        return self._coordinator.snapshot.light_on
