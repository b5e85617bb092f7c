"""Device tracker platform for InstaMapper."""

from __future__ import annotations

from typing import Any

from homeassistant.components.device_tracker import SourceType, TrackerEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import (
    ATTR_ALTITUDE,
    ATTR_DEVICE_KEY,
    ATTR_HEADING,
    ATTR_LAST_GPS_UPDATE,
    ATTR_SPEED,
    DOMAIN,
)
from .coordinator import InstaMapperCoordinator
from .entity import InstaMapperEntity, async_track_devices


async def async_setup_entry(
    hass: HomeAssistant,
    config_entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Add a tracker for each device on the entry."""
    coordinator: InstaMapperCoordinator = hass.data[DOMAIN][config_entry.entry_id]
    async_track_devices(
        coordinator,
        async_add_entities,
        lambda device_key: [InstaMapperTracker(coordinator, device_key)],
    )


class InstaMapperTracker(InstaMapperEntity, TrackerEntity):
    """Represent an InstaMapper tracked device."""

    _attr_name = None

    def __init__(self, coordinator: InstaMapperCoordinator, device_key: str) -> None:
        """Initialize the tracker entity."""
        super().__init__(coordinator, device_key)
        self._attr_unique_id = f"instamapper_{device_key}"

    @property
    def source_type(self) -> SourceType:
        """Return the source type."""
        return SourceType.GPS

    @property
    def latitude(self) -> float | None:
        """Return latitude value of the device."""
        if self.position is None:
            return None
        return self.position.latitude

    @property
    def longitude(self) -> float | None:
        """Return longitude value of the device."""
        if self.position is None:
            return None
        return self.position.longitude

    @property
    def location_accuracy(self) -> float:
        """Return the location accuracy of the device."""
        return 0

    @property
    def extra_state_attributes(self) -> dict[str, Any] | None:
        """Return additional state attributes."""
        position = self.position
        if position is None:
            return None

        attrs: dict[str, Any] = {ATTR_DEVICE_KEY: self.device_key}
        if position.speed is not None:
            attrs[ATTR_SPEED] = position.speed
        if position.heading is not None:
            attrs[ATTR_HEADING] = position.heading
        if position.altitude is not None:
            attrs[ATTR_ALTITUDE] = position.altitude
        if position.timestamp is not None:
            attrs[ATTR_LAST_GPS_UPDATE] = position.timestamp.isoformat()

        return attrs
