"""The InstaMapper integration."""

from __future__ import annotations

from collections.abc import Sequence
import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import Platform
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from .api import InstaMapperApiClient, key_set_id
from .const import (
    CONF_API_KEY,
    CONF_SSL,
    DATA_CLIENTS,
    DATA_VALIDATED_POSITIONS,
    DEFAULT_SSL,
    DOMAIN,
)
from .coordinator import InstaMapperCoordinator

_LOGGER = logging.getLogger(__name__)

PLATFORMS = [Platform.BINARY_SENSOR, Platform.DEVICE_TRACKER, Platform.SENSOR]


@callback
def async_get_api_client(
    hass: HomeAssistant, api_key: str | Sequence[str], ssl: bool
) -> InstaMapperApiClient:
    """Return the client shared by everything using this key set.

    The API terms apply per key, so the config flow, the entry and any
    reload of it must go through the same client and its request timer.
    """
    client = InstaMapperApiClient(async_get_clientsession(hass), api_key, ssl=ssl)
    clients: dict[tuple[str, bool], InstaMapperApiClient] = hass.data.setdefault(
        DATA_CLIENTS, {}
    )
    return clients.setdefault((key_set_id(client.api_keys), ssl), client)


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up InstaMapper from a config entry."""
    api_client = async_get_api_client(
        hass, entry.data[CONF_API_KEY], entry.data.get(CONF_SSL, DEFAULT_SSL)
    )
    # Positions fetched while validating the entry stand in for the first
    # refresh, which would otherwise have to wait out the request interval.
    initial_positions = hass.data.get(DATA_VALIDATED_POSITIONS, {}).pop(
        entry.unique_id, None
    )

    coordinator = InstaMapperCoordinator(
        hass, entry, api_client, initial_positions=initial_positions
    )
    await coordinator.async_config_entry_first_refresh()

    hass.data.setdefault(DOMAIN, {})
    hass.data[DOMAIN][entry.entry_id] = coordinator

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unload_ok:
        hass.data[DOMAIN].pop(entry.entry_id)
        _LOGGER.debug("Unloaded InstaMapper entry %s", entry.title)
    return unload_ok
