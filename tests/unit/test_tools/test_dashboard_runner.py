# tests/unit/test_tools/test_dashboard_runner.py
"""Tests for the terminal dashboard runner.

Test Coverage:
- Text rendering of live and synthetic snapshots
- Argument parsing
- main() login, logout and single-refresh flows
"""

import pytest
import yaml

from fireforce.security.auth_gate import AuthGate, LocalStore
from fireforce.security.logging_system import configure_logging
from fireforce.state.sync_state import DashboardSnapshot
from fireforce.sync.zone_source import parse_zone_payload
from tools.dashboard_runner import main, parse_args, render_snapshot


@pytest.fixture
def runner_config(tmp_path, monkeypatch):
    """Config directory whose files all live under tmp_path."""
    monkeypatch.delenv("FIREFORCE_API_ENDPOINT", raising=False)

    config_dir = tmp_path / "config"
    config_dir.mkdir()
    store_path = tmp_path / "data" / "local_storage.json"
    with open(config_dir / "dashboard.yml", "w") as f:
        yaml.dump(
            {
                "dashboard": {
                    "auth": {"store_path": str(store_path)},
                    "logging": {"log_dir": str(tmp_path / "logs")},
                }
            },
            f,
        )

    yield config_dir, AuthGate(LocalStore(store_path))

    configure_logging(None)


# ================================================================
# RENDERING TESTS
# ================================================================
class TestRenderSnapshot:
    def test_live_snapshot(self, live_payload):
        payload = parse_zone_payload(live_payload)
        snapshot = DashboardSnapshot(
            zones=payload.zones,
            data_channel_connected=True,
            event_channel_connected=True,
            using_synthetic_data=False,
            server_timestamp=payload.timestamp,
        )

        text = render_snapshot(snapshot)

        assert text.splitlines()[0] == (
            "API Connected | MQTT Connected | System Status: Online"
        )
        assert "API: 09:15:02" in text
        assert "Demo Mode" not in text
        assert "[Evacuation started - 2 people detected]" in text
        assert "Zone Z4 - FIRE ALERT - Detailed Information" in text
        assert "EVACUATION IN PROGRESS: Fire detected in Zone Z4" in text
        assert "Fire Type:      Chemical" in text

    def test_synthetic_snapshot(self, generator):
        zones = tuple(generator.generate_zones([], "Z3"))
        snapshot = DashboardSnapshot(
            zones=zones,
            data_channel_connected=False,
            event_channel_connected=False,
            using_synthetic_data=True,
        )

        text = render_snapshot(snapshot)

        assert text.splitlines()[0] == (
            "API Disconnected | MQTT Disconnected | System Status: Demo Mode"
        )
        assert "Demo Mode" in text.splitlines()[1]
        assert "Zone Z3 - FIRE ALERT" in text
        assert "R003" in text

    def test_no_fire_zone_section(self, live_payload):
        live_payload["zones"].pop(3)
        payload = parse_zone_payload(live_payload)
        snapshot = DashboardSnapshot(
            zones=payload.zones,
            data_channel_connected=True,
            event_channel_connected=True,
            using_synthetic_data=False,
        )

        assert "FIRE ALERT" not in render_snapshot(snapshot)


# ================================================================
# CLI TESTS
# ================================================================
class TestParseArgs:
    def test_defaults(self):
        args = parse_args([])

        assert args.config_dir == "config"
        assert args.endpoint is None
        assert args.login is False
        assert args.logout is False
        assert args.once is False

    def test_flags(self):
        args = parse_args(
            ["--config-dir", "/etc/ff", "--endpoint", "https://x.test/zones", "--once"]
        )

        assert args.config_dir == "/etc/ff"
        assert args.endpoint == "https://x.test/zones"
        assert args.once is True


class TestMain:
    @pytest.mark.asyncio
    async def test_once_without_login_fails(self, runner_config):
        config_dir, _ = runner_config

        assert await main(["--config-dir", str(config_dir), "--once"]) == 1

    @pytest.mark.asyncio
    async def test_login_and_once_renders_demo_mode(self, runner_config, capsys):
        """Test a single refresh with no endpoint falls back to synthetic data.

        WHY: The dashboard must render even with no remote source configured.
        """
        config_dir, gate = runner_config

        code = await main(["--config-dir", str(config_dir), "--login", "--once"])

        assert code == 0
        assert gate.is_authenticated() is True
        output = capsys.readouterr().out
        assert "System Status: Demo Mode" in output
        assert "FIRE ALERT" in output

    @pytest.mark.asyncio
    async def test_logout_clears_flag(self, runner_config):
        config_dir, gate = runner_config
        gate.mark_authenticated()

        assert await main(["--config-dir", str(config_dir), "--logout"]) == 0
        assert gate.is_authenticated() is False
