"""Sensor platform for InstaMapper."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorEntityDescription,
    SensorStateClass,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import DEGREE, UnitOfLength, UnitOfSpeed
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN
from .coordinator import InstaMapperCoordinator
from .entity import InstaMapperEntity, async_track_devices
from .models import PositionRecord


@dataclass(frozen=True, kw_only=True)
class InstaMapperSensorEntityDescription(SensorEntityDescription):
    """Describe an InstaMapper sensor entity."""

    value_fn: Callable[[PositionRecord], Any]


SENSOR_DESCRIPTIONS: tuple[InstaMapperSensorEntityDescription, ...] = (
    InstaMapperSensorEntityDescription(
        key="speed",
        translation_key="speed",
        device_class=SensorDeviceClass.SPEED,
        native_unit_of_measurement=UnitOfSpeed.METERS_PER_SECOND,
        state_class=SensorStateClass.MEASUREMENT,
        value_fn=lambda position: position.speed_value,
    ),
    InstaMapperSensorEntityDescription(
        key="altitude",
        translation_key="altitude",
        device_class=SensorDeviceClass.DISTANCE,
        native_unit_of_measurement=UnitOfLength.METERS,
        state_class=SensorStateClass.MEASUREMENT,
        value_fn=lambda position: position.altitude,
    ),
    InstaMapperSensorEntityDescription(
        key="heading",
        translation_key="heading",
        native_unit_of_measurement=DEGREE,
        state_class=SensorStateClass.MEASUREMENT,
        value_fn=lambda position: position.heading,
    ),
    InstaMapperSensorEntityDescription(
        key="last_gps_update",
        translation_key="last_gps_update",
        device_class=SensorDeviceClass.TIMESTAMP,
        value_fn=lambda position: position.timestamp,
    ),
)


async def async_setup_entry(
    hass: HomeAssistant,
    config_entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Add the sensor set for each device on the entry."""
    coordinator: InstaMapperCoordinator = hass.data[DOMAIN][config_entry.entry_id]
    async_track_devices(
        coordinator,
        async_add_entities,
        lambda device_key: [
            InstaMapperSensor(coordinator, device_key, description)
            for description in SENSOR_DESCRIPTIONS
        ],
    )


class InstaMapperSensor(InstaMapperEntity, SensorEntity):
    """Represent an InstaMapper sensor."""

    entity_description: InstaMapperSensorEntityDescription

    def __init__(
        self,
        coordinator: InstaMapperCoordinator,
        device_key: str,
        description: InstaMapperSensorEntityDescription,
    ) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, device_key)
        self.entity_description = description
        self._attr_unique_id = f"instamapper_{device_key}_{description.key}"

    @property
    def native_value(self) -> float | str | datetime | None:
        """Return the sensor value."""
        if self.position is None:
            return None
        return self.entity_description.value_fn(self.position)
