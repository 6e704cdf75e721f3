"""Base entity for House automation."""

from __future__ import annotations

from typing import Callable

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_NAME
from homeassistant.core import callback
from homeassistant.helpers.device_registry import DeviceEntryType, DeviceInfo
from homeassistant.helpers.entity import Entity, EntityDescription

from .const import DEFAULT_NAME, DOMAIN
from .coordinator import HouseAutomationCoordinator


class HouseAutomationEntity(Entity):
    """Read-only view onto a house automation controller.

    Entities never mutate the controller; they re-read the snapshot whenever
    the coordinator reports a change.
    """

    _attr_has_entity_name = True
    _attr_should_poll = False

    def __init__(
        self,
        coordinator: HouseAutomationCoordinator,
        config_entry: ConfigEntry,
        entity_description: EntityDescription,
    ) -> None:
        """Initialize the entity."""
        self.entity_description = entity_description
        self._coordinator = coordinator
        self._config_entry = config_entry
        self._attr_unique_id = f"{config_entry.entry_id}_{entity_description.key}"

        name = config_entry.title
        if not name and CONF_NAME in config_entry.data:
            name = config_entry.data[CONF_NAME]
        if not name:
            name = DEFAULT_NAME

        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, config_entry.entry_id)},
            name=name,
            manufacturer="House Automation",
            model="Automation Controller",
            entry_type=DeviceEntryType.SERVICE,
        )

        self._remove_listener: Callable[[], None] | None = None

    async def async_added_to_hass(self) -> None:
        """Register listener when entity is added to Home Assistant."""
        await super().async_added_to_hass()
        self._remove_listener = self._coordinator.async_add_listener(
            self._handle_coordinator_update
        )

    async def async_will_remove_from_hass(self) -> None:
        """Unregister listener when entity is removed."""
        if self._remove_listener:
            self._remove_listener()
            self._remove_listener = None
        await super().async_will_remove_from_hass()

    @callback
    def _handle_coordinator_update(self) -> None:
        """Write state when coordinator updates."""
        self.async_write_ha_state()
