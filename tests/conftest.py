"""Fixtures for InstaMapper tests."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

SAMPLE_POSITION = {
    "device_key": "abc",
    "device_label": "Car",
    "timestamp": 1230768000,
    "latitude": 40.0,
    "longitude": -75.0,
    "altitude": 10,
    "speed": 0,
    "heading": 0,
}


def make_response(
    payload: Any = None, status: int = 200, reason: str = "OK"
) -> MagicMock:
    """Build a stand-in for an aiohttp response."""
    resp = MagicMock()
    resp.status = status
    resp.reason = reason
    resp.json = AsyncMock(return_value=payload)
    return resp


@pytest.fixture
def mock_session() -> MagicMock:
    """Return a session whose GET answers with an empty positions list."""
    session = MagicMock()
    session.get = AsyncMock(return_value=make_response({"positions": []}))
    return session


SECOND_POSITION = {
    **SAMPLE_POSITION,
    "device_key": "xyz",
    "device_label": "Bike",
    "speed": 4.5,
}
