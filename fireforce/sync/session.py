# fireforce/sync/session.py
"""
Scoped dashboard activation.

A DashboardSession ties the SyncEngine's lifetime to dashboard
activation: the engine (and its SyncState) is created when an
authenticated operator activates the dashboard, and both periodic
triggers are guaranteed to stop when the dashboard is torn down,
whether by logout, navigation away or an exception.

Example:
    >>> async with DashboardSession(lambda: build_engine(config), gate) as session:
    ...     snapshot = session.snapshot()
"""

from typing import Any, Callable

import httpx

from fireforce.security.auth_gate import AuthGate
from fireforce.security.logging_system import DashboardLogger, get_logger
from fireforce.state.sync_state import DashboardSnapshot
from fireforce.sync.connectivity import ConnectivityTracker
from fireforce.sync.sync_engine import SyncEngine
from fireforce.sync.zone_source import RemoteZoneSource
from fireforce.zones.metric_generator import MetricGenerator, MetricParameters


class NotAuthenticatedError(Exception):
    """Raised when the dashboard is activated without the auth flag."""


def build_engine(
    config: dict[str, Any],
    client: httpx.AsyncClient | None = None,
) -> SyncEngine:
    """Build a SyncEngine from a loaded configuration.

    Args:
        config: Output of ConfigLoader.load_all()
        client: Optional shared HTTP client

    Returns:
        Configured, not yet started SyncEngine
    """
    dashboard = config.get("dashboard", {})
    remote = config.get("remote_source", {})

    generator = MetricGenerator(
        zone_ids=dashboard.get("zones", ["Z1", "Z2", "Z3", "Z4", "Z5", "Z6"]),
        params=MetricParameters.from_config(dashboard.get("metrics")),
    )
    source = RemoteZoneSource(
        endpoint=remote.get("endpoint"),
        timeout=remote.get("timeout", 5.0),
        client=client,
    )
    return SyncEngine(
        source,
        generator,
        refresh_interval=dashboard.get("refresh_interval", 8.0),
        drift_interval=dashboard.get("drift_interval", 2.0),
        incident_policy=dashboard.get("incident_policy", "reroll"),
        initial_incident_zone=dashboard.get("initial_incident_zone", "Z3"),
        tracker=ConnectivityTracker(stale_after=remote.get("stale_after")),
    )


class DashboardSession:
    """
    Activation scope for the dashboard.

    Use as an async context manager, or call activate()/deactivate()
    explicitly; deactivate() is idempotent.
    """

    def __init__(
        self,
        engine_factory: Callable[[], SyncEngine],
        gate: AuthGate,
        user: str = "operator",
    ):
        self._engine_factory = engine_factory
        self.gate = gate
        self.user = user
        self.engine: SyncEngine | None = None
        self.logger: DashboardLogger = get_logger(self.__class__.__name__)

    @property
    def active(self) -> bool:
        return self.engine is not None

    async def activate(self) -> SyncEngine:
        """Create the session state and start the periodic triggers.

        Returns:
            The running SyncEngine

        Raises:
            NotAuthenticatedError: If the authentication flag is not set
        """
        if self.engine is not None:
            self.logger.warning("Dashboard session already active")
            return self.engine

        if not self.gate.is_authenticated():
            await self.logger.log_audit(
                "Dashboard activation refused: not authenticated",
                user=self.user,
                action="activate",
                result="DENIED",
            )
            raise NotAuthenticatedError("Dashboard requires an authenticated session")

        self.engine = self._engine_factory()
        try:
            await self.engine.start()
        except BaseException:
            await self.engine.stop()
            self.engine = None
            raise

        await self.logger.log_audit(
            "Dashboard activated", user=self.user, action="activate"
        )
        return self.engine

    async def deactivate(self) -> None:
        """Stop both triggers and discard the session state."""
        if self.engine is None:
            return

        engine, self.engine = self.engine, None
        await engine.stop()
        await self.logger.log_audit(
            "Dashboard deactivated", user=self.user, action="deactivate"
        )

    async def logout(self) -> None:
        """Clear the authentication flag and tear the dashboard down."""
        self.gate.clear()
        await self.deactivate()
        await self.logger.log_audit("Logged out", user=self.user, action="logout")

    def snapshot(self) -> DashboardSnapshot:
        """Current render state.

        Raises:
            RuntimeError: If the session is not active
        """
        if self.engine is None:
            raise RuntimeError("Dashboard session is not active")
        return self.engine.snapshot()

    async def __aenter__(self) -> "DashboardSession":
        await self.activate()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.deactivate()
