# tests/unit/sync/test_zone_source.py
"""Tests for RemoteZoneSource and payload validation.

Test Coverage:
- Successful fetch and decoding
- Request shape (method, headers, timeout)
- Failure taxonomy: transport, protocol, payload
- Payload shape validation
"""

import httpx
import pytest

from fireforce.sync.zone_source import (
    PayloadFailure,
    ProtocolFailure,
    RemoteZoneSource,
    TransportFailure,
    ZoneSourceError,
    parse_zone_payload,
)
from fireforce.zones.zone_model import ZoneStatus

ENDPOINT = "https://zones.test/prod/zones"


# ================================================================
# SUCCESS TESTS
# ================================================================
class TestFetchSuccess:
    @pytest.mark.asyncio
    async def test_fetch_decodes_payload(self, mock_client, json_response, live_payload):
        source = RemoteZoneSource(ENDPOINT, client=mock_client(json_response(live_payload)))

        payload = await source.fetch()

        assert len(payload.zones) == 6
        assert payload.timestamp == "2026-10-17T09:15:02Z"
        assert payload.event_channel_connected is True
        assert [z.zone_id for z in payload.zones if z.status == ZoneStatus.CRITICAL] == ["Z4"]

    @pytest.mark.asyncio
    async def test_request_shape(self, mock_client, live_payload):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=live_payload)

        source = RemoteZoneSource(ENDPOINT, timeout=2.5, client=mock_client(handler))
        await source.fetch()

        assert len(seen) == 1
        assert seen[0].method == "GET"
        assert str(seen[0].url) == ENDPOINT
        assert seen[0].headers["Content-Type"] == "application/json"
        assert seen[0].extensions["timeout"]["read"] == 2.5

    @pytest.mark.asyncio
    async def test_event_channel_status_reported(self, mock_client, json_response, live_payload):
        live_payload["status"] = "degraded"
        source = RemoteZoneSource(ENDPOINT, client=mock_client(json_response(live_payload)))

        payload = await source.fetch()

        assert payload.event_channel_connected is False


# ================================================================
# FAILURE TESTS
# ================================================================
class TestFetchFailures:
    @pytest.mark.asyncio
    async def test_no_endpoint_is_transport_failure(self):
        source = RemoteZoneSource(None)

        with pytest.raises(TransportFailure, match="No remote zone endpoint"):
            await source.fetch()

    @pytest.mark.asyncio
    async def test_connect_error(self, mock_client):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        source = RemoteZoneSource(ENDPOINT, client=mock_client(handler))

        with pytest.raises(TransportFailure) as exc_info:
            await source.fetch()
        assert exc_info.value.kind == "transport"

    @pytest.mark.asyncio
    async def test_timeout(self, mock_client):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        source = RemoteZoneSource(ENDPOINT, client=mock_client(handler))

        with pytest.raises(TransportFailure, match="ReadTimeout"):
            await source.fetch()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [500, 503, 404, 401])
    async def test_non_success_status(self, mock_client, json_response, live_payload, status_code):
        source = RemoteZoneSource(
            ENDPOINT, client=mock_client(json_response(live_payload, status_code))
        )

        with pytest.raises(ProtocolFailure) as exc_info:
            await source.fetch()
        assert exc_info.value.status_code == status_code

    @pytest.mark.asyncio
    async def test_invalid_json(self, mock_client):
        def handler(request):
            return httpx.Response(200, text="<html>gateway</html>")

        source = RemoteZoneSource(ENDPOINT, client=mock_client(handler))

        with pytest.raises(PayloadFailure, match="not valid JSON"):
            await source.fetch()

    @pytest.mark.asyncio
    async def test_all_failures_share_base(self, mock_client, json_response):
        source = RemoteZoneSource(ENDPOINT, client=mock_client(json_response({"zones": 3})))

        with pytest.raises(ZoneSourceError):
            await source.fetch()

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValueError, match="timeout must be positive"):
            RemoteZoneSource(ENDPOINT, timeout=0)


# ================================================================
# PAYLOAD VALIDATION TESTS
# ================================================================
class TestParseZonePayload:
    def test_not_an_object(self):
        with pytest.raises(PayloadFailure, match="not a JSON object"):
            parse_zone_payload([1, 2, 3])

    @pytest.mark.parametrize(
        "key,value,message",
        [
            ("zones", None, "'zones' must be a list"),
            ("timestamp", 1700000000, "'timestamp' must be a string"),
            ("status", None, "'status' must be a string"),
        ],
    )
    def test_wrong_top_level_types(self, live_payload, key, value, message):
        live_payload[key] = value

        with pytest.raises(PayloadFailure, match=message):
            parse_zone_payload(live_payload)

    def test_malformed_zone_entry(self, live_payload):
        live_payload["zones"][2]["status"] = "Smouldering"

        with pytest.raises(PayloadFailure, match="Malformed zone entry"):
            parse_zone_payload(live_payload)

    def test_duplicate_zone_ids(self, live_payload):
        live_payload["zones"][1]["id"] = "Z1"

        with pytest.raises(PayloadFailure, match="duplicate"):
            parse_zone_payload(live_payload)

    def test_empty_zone_list_accepted(self):
        payload = parse_zone_payload({"zones": [], "timestamp": "t", "status": "connected"})

        assert payload.zones == ()

    def test_multiple_critical_zones_accepted(self, live_payload):
        """Test live data may report several zones in alarm.

        WHY: The one-fire-at-a-time rule applies only to synthetic data.
        """
        live_payload["zones"][0] = dict(live_payload["zones"][3], id="Z1")

        payload = parse_zone_payload(live_payload)

        assert sum(z.status == ZoneStatus.CRITICAL for z in payload.zones) == 2
