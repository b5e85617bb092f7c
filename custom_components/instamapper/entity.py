"""Base entity for the InstaMapper integration."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from homeassistant.core import callback
from homeassistant.helpers.device_registry import DeviceEntryType, DeviceInfo
from homeassistant.helpers.entity import Entity
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DOMAIN
from .coordinator import InstaMapperCoordinator
from .models import PositionRecord


@callback
def async_track_devices(
    coordinator: InstaMapperCoordinator,
    async_add_entities: AddEntitiesCallback,
    entity_factory: Callable[[str], Iterable[Entity]],
) -> None:
    """Add entities for every device, including ones that report later."""
    known: set[str] = set()

    @callback
    def _async_add_new_devices() -> None:
        if coordinator.data is None:
            return
        new_keys = [key for key in coordinator.data.positions if key not in known]
        if not new_keys:
            return
        known.update(new_keys)
        async_add_entities(
            entity for device_key in new_keys for entity in entity_factory(device_key)
        )

    _async_add_new_devices()
    coordinator.config_entry.async_on_unload(
        coordinator.async_add_listener(_async_add_new_devices)
    )


class InstaMapperEntity(CoordinatorEntity[InstaMapperCoordinator]):
    """Entity bound to one device reported by an InstaMapper entry."""

    _attr_has_entity_name = True

    def __init__(self, coordinator: InstaMapperCoordinator, device_key: str) -> None:
        """Initialize the entity."""
        super().__init__(coordinator)
        self.device_key = device_key
        label = self.position.device_label if self.position is not None else None
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, device_key)},
            name=label or f"InstaMapper {device_key}",
            manufacturer="InstaMapper",
            entry_type=DeviceEntryType.SERVICE,
        )

    @property
    def position(self) -> PositionRecord | None:
        """Return the latest position of this device, if any."""
        if self.coordinator.data is None:
            return None
        return self.coordinator.data.positions.get(self.device_key)

    @property
    def available(self) -> bool:
        """Return True while the device appears in the latest poll."""
        return super().available and self.position is not None
