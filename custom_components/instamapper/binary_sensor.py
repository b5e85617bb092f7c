"""Motion binary sensor for InstaMapper devices."""

from __future__ import annotations

from homeassistant.components.binary_sensor import (
    BinarySensorDeviceClass,
    BinarySensorEntity,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN
from .coordinator import InstaMapperCoordinator
from .entity import InstaMapperEntity, async_track_devices


async def async_setup_entry(
    hass: HomeAssistant,
    config_entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Add a motion sensor for each device on the entry."""
    coordinator: InstaMapperCoordinator = hass.data[DOMAIN][config_entry.entry_id]
    async_track_devices(
        coordinator,
        async_add_entities,
        lambda device_key: [InstaMapperMotionSensor(coordinator, device_key)],
    )


class InstaMapperMotionSensor(InstaMapperEntity, BinarySensorEntity):
    """On while the device's last reported speed is above zero."""

    _attr_device_class = BinarySensorDeviceClass.MOTION
    _attr_translation_key = "moving"

    def __init__(self, coordinator: InstaMapperCoordinator, device_key: str) -> None:
        """Initialize the motion sensor."""
        super().__init__(coordinator, device_key)
        self._attr_unique_id = f"instamapper_{device_key}_moving"

    @property
    def is_on(self) -> bool | None:
        """Return None when the speed is missing or not a number."""
        if self.position is None:
            return None
        return self.position.is_moving
