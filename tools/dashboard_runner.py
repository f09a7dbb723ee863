#!/usr/bin/env python3
# tools/dashboard_runner.py
"""
FireForce Dashboard Runner - Main Orchestrator

Runs the zone monitor from a terminal:
- Loads configuration (ConfigLoader)
- Checks the authentication flag (AuthGate)
- Activates a DashboardSession, which owns the SyncEngine and its
  refresh/drift triggers
- Renders a text view of each tick until interrupted

Usage:
    python -m tools.dashboard_runner --login
    python -m tools.dashboard_runner --once
    python -m tools.dashboard_runner --endpoint https://api.example/prod/zones
    python -m tools.dashboard_runner --logout
"""

import argparse
import asyncio
import logging
import signal
import sys
from datetime import datetime
from pathlib import Path

import httpx

from config.config_loader import ConfigLoader
from fireforce.security.auth_gate import AuthGate, LocalStore
from fireforce.security.logging_system import configure_logging
from fireforce.state.sync_state import DashboardSnapshot
from fireforce.sync.session import DashboardSession, NotAuthenticatedError, build_engine
from fireforce.zones.alert_text import (
    describe_alert,
    describe_alert_headline,
    describe_detailed_alert,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ----------------------------------------------------------------
# Rendering
# ----------------------------------------------------------------


def _time_of_day(timestamp: str | None) -> str:
    if not timestamp:
        return "-"
    try:
        return datetime.fromisoformat(timestamp.replace("Z", "+00:00")).strftime(
            "%H:%M:%S"
        )
    except ValueError:
        return timestamp


def render_snapshot(snapshot: DashboardSnapshot) -> str:
    """Render one tick as plain text.

    Args:
        snapshot: Current dashboard state

    Returns:
        Multi-line text block
    """
    api = "Connected" if snapshot.data_channel_connected else "Disconnected"
    mqtt = "Connected" if snapshot.event_channel_connected else "Disconnected"

    lines = [f"API {api} | MQTT {mqtt} | System Status: {snapshot.system_status}"]
    if snapshot.server_timestamp:
        lines.append(f"API: {_time_of_day(snapshot.server_timestamp)}")
    if snapshot.using_synthetic_data:
        lines.append("Demo Mode")

    lines.append("")
    for zone in snapshot.zones:
        line = (
            f"{zone.zone_id:<4} {zone.status.value:<9} {zone.temperature:6.1f}°C"
        )
        if zone.assigned_robot_id:
            line += f"  {zone.assigned_robot_id}"
        if zone.alert_generated:
            line += f"  [{describe_alert(zone)}]"
        lines.append(line)

    fire_zone = snapshot.fire_zone
    if fire_zone is not None:
        fire_type = fire_zone.fire_type.value if fire_zone.fire_type else "None"
        robot_status = fire_zone.robot_status.value if fire_zone.robot_status else "-"
        lines.extend(
            [
                "",
                f"Zone {fire_zone.zone_id} - FIRE ALERT - Detailed Information",
                f"  Temperature:    {fire_zone.temperature:.1f}°C",
                f"  Humidity:       {round(fire_zone.humidity)}%",
                f"  Smoke Level:    {fire_zone.smoke_level:.1f} ppm",
                f"  People:         {fire_zone.occupant_count}",
                f"  Heat Intensity: {fire_zone.heat_intensity.value}",
                f"  Fire Type:      {fire_type}",
                f"  Robot:          {fire_zone.assigned_robot_id}",
                f"  Robot Status:   {robot_status}",
                "",
                describe_alert_headline(fire_zone),
                describe_detailed_alert(fire_zone),
            ]
        )

    return "\n".join(lines)


# ----------------------------------------------------------------
# Runner
# ----------------------------------------------------------------


class DashboardRunner:
    """
    Main orchestrator for the terminal dashboard.

    Example:
        >>> runner = DashboardRunner(config_dir="config")
        >>> await runner.run()
    """

    def __init__(
        self,
        config_dir: str = "config",
        endpoint: str | None = None,
        render_interval: float | None = None,
    ):
        """Initialise dashboard runner.

        Args:
            config_dir: Directory containing configuration files
            endpoint: Remote zone endpoint overriding configuration
            render_interval: Seconds between renders (drift interval if None)
        """
        self.config_loader = ConfigLoader(config_dir=config_dir)
        self.config = self.config_loader.load_all()
        if endpoint:
            self.config["remote_source"]["endpoint"] = endpoint

        dashboard = self.config["dashboard"]
        configure_logging(log_dir=dashboard["logging"].get("log_dir"))

        self.gate = AuthGate(LocalStore(Path(dashboard["auth"]["store_path"])))
        self.render_interval = render_interval or dashboard["drift_interval"]

        self._shutdown_event = asyncio.Event()
        self._client: httpx.AsyncClient | None = None

        logger.info("DashboardRunner created")

    def _make_engine(self):
        return build_engine(self.config, client=self._client)

    # ----------------------------------------------------------------
    # Signal handling
    # ----------------------------------------------------------------

    def setup_signal_handlers(self) -> None:
        """Set up signal handlers for graceful shutdown."""

        def signal_handler(signum, frame):
            logger.info(f"Received signal {signum}")
            self._shutdown_event.set()

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

    def request_shutdown(self) -> None:
        self._shutdown_event.set()

    # ----------------------------------------------------------------
    # Main run methods
    # ----------------------------------------------------------------

    async def run_once(self) -> str:
        """Activate, perform a single refresh, render and tear down."""
        async with httpx.AsyncClient() as client:
            self._client = client
            session = DashboardSession(self._make_engine, self.gate)
            async with session:
                await session.engine.refresh()
                return render_snapshot(session.snapshot())

    async def run(self) -> None:
        """Run until interrupted, rendering every render_interval seconds."""
        self.setup_signal_handlers()

        async with httpx.AsyncClient() as client:
            self._client = client
            async with DashboardSession(self._make_engine, self.gate) as session:
                logger.info("Dashboard running. Press Ctrl+C to stop.")
                while not self._shutdown_event.is_set():
                    print(render_snapshot(session.snapshot()), flush=True)
                    print("-" * 60, flush=True)
                    try:
                        await asyncio.wait_for(
                            self._shutdown_event.wait(), timeout=self.render_interval
                        )
                    except asyncio.TimeoutError:
                        pass

        logger.info("Dashboard stopped")


# ----------------------------------------------------------------
# Command-line interface
# ----------------------------------------------------------------


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="FireForce zone monitor")
    parser.add_argument("--config-dir", default="config", help="Configuration directory")
    parser.add_argument("--endpoint", help="Remote zone endpoint URL")
    parser.add_argument("--login", action="store_true", help="Set the authentication flag")
    parser.add_argument("--logout", action="store_true", help="Clear the authentication flag")
    parser.add_argument("--once", action="store_true", help="Render a single refresh and exit")
    return parser.parse_args(argv)


async def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    runner = DashboardRunner(config_dir=args.config_dir, endpoint=args.endpoint)

    if args.logout:
        runner.gate.clear()
        return 0
    if args.login:
        runner.gate.mark_authenticated()

    try:
        if args.once:
            print(await runner.run_once())
        else:
            await runner.run()
    except NotAuthenticatedError:
        logger.error("Not authenticated. Run with --login first.")
        return 1

    return 0


def cli() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
