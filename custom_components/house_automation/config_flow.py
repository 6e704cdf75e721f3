"""Config flow for the House automation integration."""

from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol

from homeassistant.config_entries import ConfigFlow, ConfigFlowResult
from homeassistant.const import CONF_NAME
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError

from .const import (
    CONF_TICK_INTERVAL,
    CONF_TIMER_FORCES_LIGHT_ON,
    DEFAULT_NAME,
    DEFAULT_TICK_INTERVAL,
    DEFAULT_TIMER_FORCES_LIGHT_ON,
    DOMAIN,
    MAX_TICK_INTERVAL,
    MIN_TICK_INTERVAL,
)

_LOGGER = logging.getLogger(__name__)


def get_user_schema(data: dict[str, Any] | None = None) -> vol.Schema:
    """Get the basic user schema with optional default values."""
    return vol.Schema(
        {
            vol.Required(
                CONF_NAME, default=data.get(CONF_NAME, DEFAULT_NAME) if data else DEFAULT_NAME
            ): str,
        }
    )


def get_advanced_schema(data: dict[str, Any] | None = None) -> vol.Schema:
    """Get the advanced options schema."""
    return vol.Schema(
        {
            vol.Optional(
                CONF_TICK_INTERVAL,
                default=data.get(CONF_TICK_INTERVAL, DEFAULT_TICK_INTERVAL)
                if data
                else DEFAULT_TICK_INTERVAL,
            ): vol.All(
                vol.Coerce(int),
                vol.Range(min=MIN_TICK_INTERVAL, max=MAX_TICK_INTERVAL),
            ),
            vol.Optional(
                CONF_TIMER_FORCES_LIGHT_ON,
                default=data.get(
                    CONF_TIMER_FORCES_LIGHT_ON, DEFAULT_TIMER_FORCES_LIGHT_ON
                )
                if data
                else DEFAULT_TIMER_FORCES_LIGHT_ON,
            ): bool,
        }
    )


STEP_USER_DATA_SCHEMA = get_user_schema()
STEP_ADVANCED_DATA_SCHEMA = get_advanced_schema()


async def validate_input(hass: HomeAssistant, data: dict[str, Any]) -> dict[str, Any]:
    """Validate the user input.

    Data has the keys from STEP_USER_DATA_SCHEMA with values provided by the user.
    """
    name = (data.get(CONF_NAME) or "").strip()
    if not name:
        raise InvalidConfiguration("Name must not be blank")

    return {"title": name}


class HouseAutomationConfigFlow(ConfigFlow, domain=DOMAIN):
    """Handle a config flow for House automation."""

    VERSION = 1

    def __init__(self) -> None:
        """Initialize the config flow."""
        self._basic_config: dict[str, Any] = {}

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Handle the initial step."""
        errors: dict[str, str] = {}
        if user_input is not None:
            try:
                info = await validate_input(self.hass, user_input)
            except InvalidConfiguration:
                errors["base"] = "invalid_config"
            except Exception:
                _LOGGER.exception("Unexpected exception")
                errors["base"] = "unknown"
            else:
                await self.async_set_unique_id(info["title"])
                self._abort_if_unique_id_configured()
                self._basic_config = {CONF_NAME: info["title"]}
                return await self.async_step_advanced()

        return self.async_show_form(
            step_id="user",
            data_schema=STEP_USER_DATA_SCHEMA,
            errors=errors,
        )

    async def async_step_advanced(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Handle the advanced options step."""
        if user_input is not None:
            config_data = {**get_advanced_schema()({}), **self._basic_config, **user_input}
            return self.async_create_entry(
                title=config_data[CONF_NAME], data=config_data
            )

        return self.async_show_form(
            step_id="advanced",
            data_schema=STEP_ADVANCED_DATA_SCHEMA,
        )

    async def async_step_import(
        self, import_data: dict[str, Any]
    ) -> ConfigFlowResult:
        """Create an entry from YAML configuration."""
        try:
            info = await validate_input(self.hass, import_data)
        except InvalidConfiguration:
            return self.async_abort(reason="invalid_config")

        await self.async_set_unique_id(info["title"])
        self._abort_if_unique_id_configured()

        config_data = {
            **get_advanced_schema()({}),
            **import_data,
            CONF_NAME: info["title"],
        }
        return self.async_create_entry(title=info["title"], data=config_data)

    async def async_step_reconfigure(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Handle reconfiguration of the advanced options."""
        config_entry = self.hass.config_entries.async_get_entry(
            self.context["entry_id"]
        )
        assert config_entry is not None

        if user_input is not None:
            return self.async_update_reload_and_abort(
                config_entry,
                data={**config_entry.data, **user_input},
                reason="reconfigure_successful",
            )

        return self.async_show_form(
            step_id="reconfigure",
            data_schema=get_advanced_schema(dict(config_entry.data)),
            description_placeholders={"name": config_entry.title},
        )


class InvalidConfiguration(HomeAssistantError):
    """Error to indicate there is invalid configuration."""
