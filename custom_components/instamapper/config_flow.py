"""Config flow for InstaMapper integration."""

from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol
from homeassistant.config_entries import ConfigFlow, ConfigFlowResult

from . import async_get_api_client
from .api import (
    InstaMapperApiError,
    InstaMapperConfigurationError,
    key_set_id,
)
from .const import (
    CONF_API_KEY,
    CONF_SSL,
    DATA_VALIDATED_POSITIONS,
    DEFAULT_SSL,
    DOMAIN,
)

_LOGGER = logging.getLogger(__name__)

STEP_USER_DATA_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_API_KEY): str,
        vol.Optional(CONF_SSL, default=DEFAULT_SSL): bool,
    }
)


def split_api_keys(value: str) -> list[str]:
    """Split a comma-separated key field into individual keys."""
    return [key.strip() for key in value.split(",") if key.strip()]


class InstaMapperConfigFlow(ConfigFlow, domain=DOMAIN):
    """Handle a config flow for InstaMapper."""

    VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Ask for the API keys and check that positions can be fetched."""
        errors: dict[str, str] = {}

        if user_input is not None:
            api_keys = split_api_keys(user_input[CONF_API_KEY])
            ssl = user_input.get(CONF_SSL, DEFAULT_SSL)

            try:
                api_client = async_get_api_client(self.hass, api_keys, ssl)
                positions = await api_client.async_get_positions()
            except InstaMapperConfigurationError:
                errors["base"] = "missing_api_key"
            except InstaMapperApiError:
                errors["base"] = "cannot_connect"
            except Exception:  # noqa: BLE001
                _LOGGER.exception("Unexpected exception while validating API key")
                errors["base"] = "unknown"
            else:
                unique_id = key_set_id(api_keys)
                await self.async_set_unique_id(unique_id)
                self._abort_if_unique_id_configured()

                self.hass.data.setdefault(DATA_VALIDATED_POSITIONS, {})[
                    unique_id
                ] = positions

                labels = [p.device_label for p in positions if p.device_label]
                if len(api_keys) > 1:
                    title = f"InstaMapper ({len(api_keys)} keys)"
                elif labels:
                    title = labels[0]
                else:
                    title = "InstaMapper"

                return self.async_create_entry(
                    title=title,
                    data={CONF_API_KEY: api_keys, CONF_SSL: ssl},
                )

        return self.async_show_form(
            step_id="user",
            data_schema=STEP_USER_DATA_SCHEMA,
            errors=errors,
        )
