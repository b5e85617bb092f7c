"""Data models for the InstaMapper integration."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class PositionRecord:
    """A single GPS fix reported by an InstaMapper device."""

    device_key: str | None = None
    device_label: str | None = None
    timestamp: datetime | None = None  # UTC
    latitude: Any = None
    longitude: Any = None
    altitude: Any = None  # meters
    speed: Any = None  # meters/second
    heading: Any = None  # degrees

    @property
    def speed_value(self) -> float | None:
        """Return the speed as a number, or None if the service sent none."""
        try:
            return float(self.speed)
        except (TypeError, ValueError):
            return None

    @property
    def is_moving(self) -> bool | None:
        """Return whether the device was moving at this fix, if known."""
        speed = self.speed_value
        if speed is None:
            return None
        return speed > 0


@dataclass
class InstaMapperData:
    """Latest position of each device, keyed by device key."""

    positions: dict[str, PositionRecord] = field(default_factory=dict)

    @classmethod
    def from_positions(cls, positions: Iterable[PositionRecord]) -> InstaMapperData:
        """Keep the first, newest, record seen for each device."""
        latest: dict[str, PositionRecord] = {}
        for position in positions:
            if position.device_key is None:
                continue
            latest.setdefault(position.device_key, position)
        return cls(positions=latest)
