# fireforce/sync/zone_source.py
"""
Client for the remote zone source.

The remote source is a request/response endpoint returning::

    {"zones": [...], "timestamp": "<ISO-8601>", "status": "connected"}

Failures are classified into three kinds so they can be logged
distinctly, although the SyncEngine treats them all the same way:

- TransportFailure: network unreachable, timeout, no endpoint configured
- ProtocolFailure: non-success HTTP status
- PayloadFailure: body that is not JSON or not the expected shape
"""

import logging
from dataclasses import dataclass

import httpx

from fireforce.zones.zone_model import Zone

logger = logging.getLogger(__name__)

__all__ = [
    "ZoneSourceError",
    "TransportFailure",
    "ProtocolFailure",
    "PayloadFailure",
    "ZonePayload",
    "RemoteZoneSource",
    "parse_zone_payload",
]

EVENT_CHANNEL_CONNECTED = "connected"


class ZoneSourceError(Exception):
    """Base class for remote zone source failures."""

    kind = "unknown"


class TransportFailure(ZoneSourceError):
    kind = "transport"


class ProtocolFailure(ZoneSourceError):
    kind = "protocol"

    def __init__(self, status_code: int):
        super().__init__(f"Remote zone source returned HTTP {status_code}")
        self.status_code = status_code


class PayloadFailure(ZoneSourceError):
    kind = "payload"


@dataclass(frozen=True)
class ZonePayload:
    """Decoded successful response.

    Attributes:
        zones: Zone collection exactly as reported by the remote source
        timestamp: Server-reported ISO-8601 timestamp
        status: Server-reported event channel status
    """

    zones: tuple[Zone, ...]
    timestamp: str
    status: str

    @property
    def event_channel_connected(self) -> bool:
        return self.status == EVENT_CHANNEL_CONNECTED


def parse_zone_payload(body: object) -> ZonePayload:
    """Validate and decode a response body.

    Args:
        body: Parsed JSON body

    Returns:
        Decoded payload

    Raises:
        PayloadFailure: If the body is not the expected shape
    """
    if not isinstance(body, dict):
        raise PayloadFailure("Response body is not a JSON object")

    zones = body.get("zones")
    timestamp = body.get("timestamp")
    status = body.get("status")

    if not isinstance(zones, list):
        raise PayloadFailure("Response 'zones' must be a list")
    if not isinstance(timestamp, str):
        raise PayloadFailure("Response 'timestamp' must be a string")
    if not isinstance(status, str):
        raise PayloadFailure("Response 'status' must be a string")

    try:
        decoded = tuple(Zone.from_payload(entry) for entry in zones)
    except ValueError as e:
        raise PayloadFailure(f"Malformed zone entry: {e}") from e

    ids = [zone.zone_id for zone in decoded]
    if len(set(ids)) != len(ids):
        raise PayloadFailure("Response contains duplicate zone ids")

    return ZonePayload(zones=decoded, timestamp=timestamp, status=status)


class RemoteZoneSource:
    """
    Bounded-time fetcher for the remote zone source.

    Example:
        >>> async with httpx.AsyncClient() as client:
        ...     source = RemoteZoneSource("https://api.example/zones", client=client)
        ...     payload = await source.fetch()
    """

    def __init__(
        self,
        endpoint: str | None,
        timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialise zone source.

        Args:
            endpoint: Zone endpoint URL (None = always unavailable)
            timeout: Request timeout in seconds
            client: Shared AsyncClient (created per request if None)
        """
        if timeout <= 0:
            raise ValueError("timeout must be positive")

        self.endpoint = endpoint
        self.timeout = timeout
        self._client = client

    async def fetch(self) -> ZonePayload:
        """Fetch and decode the current zone collection.

        Returns:
            Decoded payload

        Raises:
            TransportFailure: Network error, timeout or no endpoint
            ProtocolFailure: Non-success HTTP status
            PayloadFailure: Malformed body
        """
        if not self.endpoint:
            raise TransportFailure("No remote zone endpoint configured")

        try:
            if self._client is not None:
                response = await self._get(self._client)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._get(client)
        except (httpx.RequestError, httpx.InvalidURL) as e:
            raise TransportFailure(f"{type(e).__name__}: {e}") from e

        if not response.is_success:
            raise ProtocolFailure(response.status_code)

        try:
            body = response.json()
        except ValueError as e:
            raise PayloadFailure(f"Response body is not valid JSON: {e}") from e

        payload = parse_zone_payload(body)
        logger.debug(
            f"Fetched {len(payload.zones)} zones (server time {payload.timestamp}, "
            f"status {payload.status})"
        )
        return payload

    async def _get(self, client: httpx.AsyncClient) -> httpx.Response:
        return await client.get(
            self.endpoint,
            headers={"Content-Type": "application/json"},
            timeout=self.timeout,
        )
