# tests/conftest.py
"""Shared pytest fixtures for zone monitor tests.

This file provides common fixtures used across all test modules,
following the bottom-up testing strategy where foundation components
are tested with real dependencies wherever possible. Only the network
is faked, using httpx.MockTransport.
"""

import random
from pathlib import Path
from typing import Callable

import httpx
import pytest
import yaml

from fireforce.security.auth_gate import AuthGate, LocalStore
from fireforce.sync.connectivity import ConnectivityTracker
from fireforce.sync.sync_engine import SyncEngine
from fireforce.sync.zone_source import RemoteZoneSource
from fireforce.zones.metric_generator import MetricGenerator

ENDPOINT = "https://zones.test/prod/zones"
ZONE_IDS = ("Z1", "Z2", "Z3", "Z4", "Z5", "Z6")


# ----------------------------------------------------------------
# Randomness
# ----------------------------------------------------------------
@pytest.fixture
def rng() -> random.Random:
    """Seeded random source so generator tests are reproducible."""
    return random.Random(1234)


@pytest.fixture
def generator(rng) -> MetricGenerator:
    return MetricGenerator(zone_ids=ZONE_IDS, rng=rng)


# ----------------------------------------------------------------
# Remote payloads
# ----------------------------------------------------------------
def _safe_zone(zone_id: str) -> dict:
    return {
        "id": zone_id,
        "status": "Safe",
        "temperature": 23.1,
        "humidity": 47.5,
        "smokeLevel": 0.12,
        "peopleCount": 0,
        "heatIntensity": "Low",
        "fireType": None,
        "robotId": None,
        "robotStatus": None,
        "alertGenerated": False,
        "evacuationStarted": False,
        "lastUpdated": "2026-10-17T09:15:00Z",
    }


@pytest.fixture
def live_payload() -> dict:
    """Six zones from the remote source, Z4 Critical with two people."""
    zones = [_safe_zone(zone_id) for zone_id in ZONE_IDS]
    zones[3] = {
        "id": "Z4",
        "status": "Critical",
        "temperature": 81.2,
        "humidity": 24.0,
        "smokeLevel": 9.3,
        "peopleCount": 2,
        "heatIntensity": "High",
        "fireType": "Chemical",
        "robotId": "R004",
        "robotStatus": "Alert",
        "alertGenerated": True,
        "evacuationStarted": True,
        "lastUpdated": "2026-10-17T09:15:00Z",
    }
    return {
        "zones": zones,
        "timestamp": "2026-10-17T09:15:02Z",
        "status": "connected",
    }


# ----------------------------------------------------------------
# HTTP fakes
# ----------------------------------------------------------------
@pytest.fixture
def mock_client() -> Callable[..., httpx.AsyncClient]:
    """Factory for AsyncClients backed by a MockTransport handler.

    Returns:
        Function taking a handler ``(httpx.Request) -> httpx.Response``
    """

    def _create(handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _create


@pytest.fixture
def json_response():
    """Handler factory returning a fixed JSON body and status code."""

    def _create(body, status_code: int = 200):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status_code, json=body)

        return handler

    return _create


@pytest.fixture
def make_engine(generator, mock_client):
    """Factory for SyncEngines talking to a mocked remote source."""

    def _create(handler=None, endpoint: str | None = ENDPOINT, **kwargs) -> SyncEngine:
        client = mock_client(handler) if handler is not None else None
        source = RemoteZoneSource(endpoint, timeout=1.0, client=client)
        kwargs.setdefault("tracker", ConnectivityTracker())
        return SyncEngine(source, generator, **kwargs)

    return _create


# ----------------------------------------------------------------
# Configuration and local storage
# ----------------------------------------------------------------
@pytest.fixture
def temp_config_dir(tmp_path) -> Path:
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def write_config_file(temp_config_dir):
    """Factory fixture for writing YAML configuration files.

    Returns:
        Function that writes config dict to YAML file
    """

    def _write_config(config: dict, filename: str = "dashboard.yml") -> Path:
        config_file = temp_config_dir / filename
        with open(config_file, "w") as f:
            yaml.dump(config, f)
        return config_file

    return _write_config


@pytest.fixture
def auth_gate(tmp_path) -> AuthGate:
    return AuthGate(LocalStore(tmp_path / "local_storage.json"))


# ----------------------------------------------------------------
# Invariant helpers
# ----------------------------------------------------------------
@pytest.fixture
def assert_zone_invariants():
    """Assert the zone-level consistency rules hold for every zone."""

    def _assert(zones):
        for zone in zones:
            assert zone.invariant_violations() == [], zone
            if zone.evacuation_started:
                assert zone.occupant_count > 0
                assert zone.alert_generated

    return _assert
