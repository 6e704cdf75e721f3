"""The House automation integration."""

from __future__ import annotations

import logging

import voluptuous as vol
from homeassistant.config_entries import SOURCE_IMPORT, ConfigEntry, ConfigEntryState
from homeassistant.const import CONF_NAME, Platform
from homeassistant.core import HomeAssistant, ServiceCall
from homeassistant.exceptions import ServiceValidationError
from homeassistant.helpers import config_validation as cv

from .const import (
    ATTR_CONFIG_ENTRY_ID,
    ATTR_SECONDS,
    CONF_TICK_INTERVAL,
    CONF_TIMER_FORCES_LIGHT_ON,
    DEFAULT_TICK_INTERVAL,
    DEFAULT_TIMER_FORCES_LIGHT_ON,
    DEFAULT_TIMER_SECONDS,
    DOMAIN,
    MAX_TICK_INTERVAL,
    MIN_TICK_INTERVAL,
)
from .controller import InvalidTimerDuration
from .coordinator import HouseAutomationCoordinator

_LOGGER = logging.getLogger(__name__)

_PLATFORMS: list[Platform] = [Platform.BINARY_SENSOR, Platform.SENSOR]

# YAML configuration schema
HOUSE_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_NAME): cv.string,
        vol.Optional(CONF_TICK_INTERVAL, default=DEFAULT_TICK_INTERVAL): vol.All(
            cv.positive_int, vol.Range(min=MIN_TICK_INTERVAL, max=MAX_TICK_INTERVAL)
        ),
        vol.Optional(
            CONF_TIMER_FORCES_LIGHT_ON, default=DEFAULT_TIMER_FORCES_LIGHT_ON
        ): cv.boolean,
    }
)

CONFIG_SCHEMA = vol.Schema(
    {DOMAIN: vol.All(cv.ensure_list, [HOUSE_SCHEMA])},
    extra=vol.ALLOW_EXTRA,
)

SERVICE_TOGGLE_LIGHT = "toggle_light"
SERVICE_INCREASE_TEMPERATURE = "increase_temperature"
SERVICE_DECREASE_TEMPERATURE = "decrease_temperature"
SERVICE_SET_TIMER = "set_timer"
SERVICE_CONFIRM_TIMER = "confirm_timer"

SERVICE_ENTRY_SCHEMA = vol.Schema(
    {
        vol.Required(ATTR_CONFIG_ENTRY_ID): cv.string,
    }
)


def _whole_seconds(value: float) -> int:
    """Accept only integral second counts; fractions are not rounded."""
    if not value.is_integer():
        raise vol.Invalid(f"Timer duration must be a whole number of seconds, got {value}")
    return int(value)


SERVICE_SET_TIMER_SCHEMA = SERVICE_ENTRY_SCHEMA.extend(
    {
        # Range check runs on the raw value, before the int conversion
        vol.Optional(ATTR_SECONDS, default=DEFAULT_TIMER_SECONDS): vol.All(
            vol.Coerce(float), vol.Range(min=0), _whole_seconds
        ),
    }
)


def _get_coordinator(hass: HomeAssistant, call: ServiceCall) -> HouseAutomationCoordinator:
    """Resolve the coordinator a service call is addressed to."""
    entry_id = call.data[ATTR_CONFIG_ENTRY_ID]
    entry = hass.config_entries.async_get_entry(entry_id)
    if entry is None or entry.domain != DOMAIN:
        raise ServiceValidationError(f"No house automation entry with id {entry_id}")
    if entry.state is not ConfigEntryState.LOADED:
        raise ServiceValidationError(f"House automation entry {entry_id} is not loaded")
    return entry.runtime_data


async def async_setup(hass: HomeAssistant, config: dict) -> bool:
    """Set up the House automation component."""

    async def handle_toggle_light(call: ServiceCall) -> None:
        _get_coordinator(hass, call).controller.toggle_light()

    async def handle_increase_temperature(call: ServiceCall) -> None:
        _get_coordinator(hass, call).controller.increase_temperature()

    async def handle_decrease_temperature(call: ServiceCall) -> None:
        _get_coordinator(hass, call).controller.decrease_temperature()

    async def handle_set_timer(call: ServiceCall) -> None:
        coordinator = _get_coordinator(hass, call)
        try:
            coordinator.controller.set_timer(call.data[ATTR_SECONDS])
        except InvalidTimerDuration as err:
            raise ServiceValidationError(str(err)) from err

    async def handle_confirm_timer(call: ServiceCall) -> None:
        _get_coordinator(hass, call).controller.confirm_timer()

    for service, handler, schema in (
        (SERVICE_TOGGLE_LIGHT, handle_toggle_light, SERVICE_ENTRY_SCHEMA),
        (
            SERVICE_INCREASE_TEMPERATURE,
            handle_increase_temperature,
            SERVICE_ENTRY_SCHEMA,
        ),
        (
            SERVICE_DECREASE_TEMPERATURE,
            handle_decrease_temperature,
            SERVICE_ENTRY_SCHEMA,
        ),
        (SERVICE_SET_TIMER, handle_set_timer, SERVICE_SET_TIMER_SCHEMA),
        (SERVICE_CONFIRM_TIMER, handle_confirm_timer, SERVICE_ENTRY_SCHEMA),
    ):
        hass.services.async_register(DOMAIN, service, handler, schema=schema)

    if DOMAIN not in config:
        return True

    for house_config in config[DOMAIN]:
        name = house_config[CONF_NAME]

        existing_entries = hass.config_entries.async_entries(DOMAIN)
        if any(entry.title == name for entry in existing_entries):
            _LOGGER.info(
                "House automation '%s' already exists, skipping YAML import", name
            )
            continue

        _LOGGER.info("Importing House automation '%s' from YAML", name)
        hass.async_create_task(
            hass.config_entries.flow.async_init(
                DOMAIN,
                context={"source": SOURCE_IMPORT},
                data=dict(house_config),
            )
        )

    return True


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up House automation from a config entry."""
    coordinator = HouseAutomationCoordinator(hass, entry)

    # Store coordinator in runtime_data
    entry.runtime_data = coordinator

    await coordinator.async_start()

    await hass.config_entries.async_forward_entry_setups(entry, _PLATFORMS)

    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    if hasattr(entry, "runtime_data") and entry.runtime_data:
        coordinator = entry.runtime_data
        coordinator.async_cleanup_listeners()

    return await hass.config_entries.async_unload_platforms(entry, _PLATFORMS)
