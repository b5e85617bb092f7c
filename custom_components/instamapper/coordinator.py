"""DataUpdateCoordinator for InstaMapper."""

from __future__ import annotations

from datetime import timedelta
import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.update_coordinator import (
    DataUpdateCoordinator,
    UpdateFailed,
)

from .api import InstaMapperApiClient, InstaMapperApiError
from .const import DOMAIN, UPDATE_INTERVAL
from .models import InstaMapperData, PositionRecord

_LOGGER = logging.getLogger(__name__)


class InstaMapperCoordinator(DataUpdateCoordinator[InstaMapperData]):
    """Coordinator polling the latest position of every device on an entry."""

    config_entry: ConfigEntry

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        api_client: InstaMapperApiClient,
        *,
        initial_positions: list[PositionRecord] | None = None,
    ) -> None:
        """Initialize the coordinator."""
        # Never poll faster than the API terms allow.
        update_interval = max(
            UPDATE_INTERVAL, timedelta(seconds=api_client.request_interval)
        )
        super().__init__(
            hass,
            _LOGGER,
            name=DOMAIN,
            config_entry=config_entry,
            update_interval=update_interval,
        )
        self.api_client = api_client
        self._initial_positions = initial_positions

    async def _async_update_data(self) -> InstaMapperData:
        """Fetch the latest positions from the InstaMapper API."""
        if self._initial_positions is not None:
            positions, self._initial_positions = self._initial_positions, None
        else:
            try:
                positions = await self.api_client.async_get_positions()
            except InstaMapperApiError as err:
                raise UpdateFailed(f"Error communicating with InstaMapper: {err}") from err

        data = InstaMapperData.from_positions(positions)
        if not data.positions:
            _LOGGER.debug("No positions reported for %s", self.config_entry.title)
        return data
