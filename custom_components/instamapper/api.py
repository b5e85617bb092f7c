"""InstaMapper API client."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from datetime import datetime
import hashlib
import logging
from typing import Any

import aiohttp
from dateutil import parser as date_parser
from homeassistant.util import dt as dt_util

from .const import (
    ACTION_GET_POSITIONS,
    API_HOST,
    API_PATH,
    API_TIMEOUT,
    HTTP_REQUEST_INTERVAL,
    HTTPS_REQUEST_INTERVAL,
    MAX_POSITIONS,
)
from .models import PositionRecord

_LOGGER = logging.getLogger(__name__)


class InstaMapperError(Exception):
    """Base InstaMapper error."""


class InstaMapperConfigurationError(InstaMapperError):
    """The client was constructed without an API key."""


class InstaMapperApiError(InstaMapperError):
    """General InstaMapper API error."""


class InstaMapperTransportError(InstaMapperApiError):
    """The HTTP request failed or returned a non-2xx status."""

    def __init__(self, url: str, status: int | None, detail: str) -> None:
        """Initialize the error with the attempted URL and status detail."""
        super().__init__(f"Can't retrieve data from {url}: {detail}")
        self.url = url
        self.status = status


class InstaMapperResponseError(InstaMapperApiError):
    """The response body could not be decoded."""


def normalize_api_keys(api_key: str | Sequence[str] | None) -> list[str]:
    """Return the non-empty keys from a single key or a sequence of keys."""
    if not api_key:
        return []
    if isinstance(api_key, str):
        api_key = [api_key]
    return [key.strip() for key in api_key if key and key.strip()]


def format_key_list(api_keys: Sequence[str]) -> str:
    """Serialize keys for the ``key`` query parameter.

    Several keys are each wrapped in angle brackets and comma-joined,
    which is how the service expects multi-device queries.
    """
    if len(api_keys) == 1:
        return api_keys[0]
    return ",".join(f"<{key}>" for key in api_keys)


def clamp_num(num: int) -> int:
    """Restrict a requested position count to the service maximum."""
    if num > MAX_POSITIONS:
        _LOGGER.warning(
            "The InstaMapper API allows a maximum of %s positions to be "
            "retrieved at a time. Restricting to %s",
            MAX_POSITIONS,
            MAX_POSITIONS,
        )
        return MAX_POSITIONS
    return num


def key_set_id(api_keys: Sequence[str]) -> str:
    """Return a stable identifier for a set of keys that does not reveal them."""
    raw = ",".join(sorted(api_keys))
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()[:16]


def parse_timestamp(value: str) -> int | None:
    """Convert a date/time string to epoch seconds.

    ISO 8601 is tried first, then free-form dates such as
    ``Thu, 01 Jan 2009 00:00:00 GMT`` or ``Jan 1 2009``. Strings without
    an offset are taken as UTC. Returns None when the string cannot be
    parsed.
    """
    value = value.strip()
    parsed = dt_util.parse_datetime(value)
    if parsed is None:
        try:
            parsed = date_parser.parse(value)
        except (ValueError, OverflowError):
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt_util.UTC)
    return int(parsed.timestamp())


def resolve_from_ts(
    from_timestamp: str | None = None, from_unixtime: int | None = None
) -> int | None:
    """Pick the lower time bound for a request.

    An explicit epoch value wins; otherwise the timestamp string is parsed.
    """
    if from_unixtime is not None:
        return from_unixtime
    if not from_timestamp:
        return None
    from_ts = parse_timestamp(from_timestamp)
    if from_ts is None:
        _LOGGER.debug("Ignoring unparseable from_timestamp %r", from_timestamp)
    return from_ts


def build_api_url(
    action: str,
    api_keys: Sequence[str],
    *,
    ssl: bool,
    num: int | None = None,
    from_ts: int | None = None,
) -> str:
    """Build the request URL for an API action."""
    scheme = "https" if ssl else "http"
    url = (
        f"{scheme}://{API_HOST}{API_PATH}?action={action}"
        f"&key={format_key_list(api_keys)}&format=json"
    )
    if num:
        url += f"&num={clamp_num(num)}"
    if from_ts is not None:
        url += f"&from_ts={from_ts}"
    return url


def _parse_epoch(raw: Any) -> datetime | None:
    if raw is None:
        return None
    try:
        return dt_util.utc_from_timestamp(int(raw))
    except (ValueError, TypeError, OverflowError, OSError):
        _LOGGER.debug("Failed to parse position timestamp: %s", raw)
        return None


def extract_positions(api_response: Any) -> list[PositionRecord]:
    """Map a decoded API response to position records.

    A response without a ``positions`` array means there is nothing to
    report and yields an empty list. Order is kept as delivered.
    """
    if not isinstance(api_response, dict):
        return []
    positions = api_response.get("positions")
    if not isinstance(positions, list):
        return []

    records: list[PositionRecord] = []
    for entry in positions:
        if not isinstance(entry, dict):
            _LOGGER.debug("Skipping malformed position entry: %s", entry)
            continue
        records.append(
            PositionRecord(
                device_key=entry.get("device_key"),
                device_label=entry.get("device_label"),
                timestamp=_parse_epoch(entry.get("timestamp")),
                latitude=entry.get("latitude"),
                longitude=entry.get("longitude"),
                altitude=entry.get("altitude"),
                speed=entry.get("speed"),
                heading=entry.get("heading"),
            )
        )
    return records


class InstaMapperApiClient:
    """Client for the InstaMapper API.

    The API terms require a pause of 10 seconds between HTTP requests (30
    seconds over HTTPS). The client enforces this itself, waiting before a
    request when the previous successful one was too recent.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        api_key: str | Sequence[str],
        *,
        ssl: bool = False,
    ) -> None:
        """Initialize the API client."""
        api_keys = normalize_api_keys(api_key)
        if not api_keys:
            raise InstaMapperConfigurationError("You must specify your API key")
        self._session = session
        self._api_keys = api_keys
        self._ssl = ssl
        self._last_request: datetime | None = None
        self._lock = asyncio.Lock()

    @property
    def api_keys(self) -> list[str]:
        """Return the configured API keys."""
        return list(self._api_keys)

    @property
    def ssl(self) -> bool:
        """Return whether requests go over HTTPS."""
        return self._ssl

    @property
    def request_interval(self) -> int:
        """Return the minimum seconds between requests for this transport."""
        return HTTPS_REQUEST_INTERVAL if self._ssl else HTTP_REQUEST_INTERVAL

    @property
    def last_request(self) -> datetime | None:
        """Return when the last successful request completed."""
        return self._last_request

    async def async_get_positions(
        self,
        num: int | None = None,
        from_timestamp: str | None = None,
        from_unixtime: int | None = None,
    ) -> list[PositionRecord]:
        """Fetch position history for the configured devices."""
        url = build_api_url(
            ACTION_GET_POSITIONS,
            self._api_keys,
            ssl=self._ssl,
            num=num,
            from_ts=resolve_from_ts(from_timestamp, from_unixtime),
        )
        data = await self._async_api_call(url)
        return extract_positions(data)

    async def async_get_last_position(self) -> PositionRecord | None:
        """Fetch the most recently logged position.

        The service lists newest positions first, so this is the first
        record returned.
        """
        positions = await self.async_get_positions()
        if not positions:
            return None
        return positions[0]

    async def _async_api_call(self, url: str) -> Any:
        """Perform a rate-limited GET and decode the JSON body."""
        async with self._lock:
            await self._async_enforce_terms()

            _LOGGER.debug("Requesting %s", url)
            try:
                async with asyncio.timeout(API_TIMEOUT):
                    resp = await self._session.get(url)
            except (TimeoutError, aiohttp.ClientError) as err:
                raise InstaMapperTransportError(url, None, str(err) or repr(err)) from err

            if not 200 <= resp.status < 300:
                raise InstaMapperTransportError(
                    url, resp.status, f"{resp.status} {resp.reason or ''}".strip()
                )

            self._last_request = dt_util.utcnow()

        try:
            return await resp.json(content_type=None)
        except (ValueError, aiohttp.ContentTypeError) as err:
            raise InstaMapperResponseError(
                f"Invalid JSON from InstaMapper API: {err}"
            ) from err

    async def _async_enforce_terms(self) -> None:
        """Wait until the API terms allow another request."""
        if self._last_request is None:
            return

        elapsed = (dt_util.utcnow() - self._last_request).total_seconds()
        requirement = self.request_interval
        if elapsed > requirement:
            return

        sleep_time = requirement - elapsed
        if sleep_time <= 0:
            return

        _LOGGER.warning(
            "InstaMapper API terms limit %s requests to %s seconds. "
            "Pausing for %.1f seconds",
            "HTTPS" if self._ssl else "HTTP",
            requirement,
            sleep_time,
        )
        await asyncio.sleep(sleep_time)
