# fireforce/sync/sync_engine.py
"""
Zone-state synchronisation engine.

Owns the session's SyncState and is the only writer to it. Each refresh
tries the remote zone source; if that fails for any reason the engine
falls back to a synthetic collection from the MetricGenerator, so the
dashboard always has something renderable.

Two periodic triggers run while the engine is started:
- refresh: full fetch-or-synthesise cycle (default every 8s)
- drift: sensor noise on the synthetic collection (default every 2s),
  running only while in synthetic mode
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone

from fireforce.security.logging_system import AlarmState, DashboardLogger, get_logger
from fireforce.state.sync_state import DashboardSnapshot, DataSource, SyncState
from fireforce.sync.connectivity import Channel, ConnectivityTracker
from fireforce.sync.zone_source import RemoteZoneSource, ZonePayload, ZoneSourceError
from fireforce.zones.alert_text import describe_alert
from fireforce.zones.metric_generator import MetricGenerator
from fireforce.zones.zone_model import Zone, ZoneStatus

__all__ = [
    "IncidentPolicy",
    "LiveRefresh",
    "SyntheticRefresh",
    "RefreshResult",
    "SyncEngine",
]


class IncidentPolicy:
    """How the synthetic incident zone is chosen on each fallback refresh."""

    REROLL = "reroll"  # New random incident zone every fallback refresh
    STICKY = "sticky"  # Keep the previous synthetic incident zone

    ALL = (REROLL, STICKY)


@dataclass(frozen=True)
class LiveRefresh:
    """Refresh served by the remote zone source."""

    zones: tuple[Zone, ...]
    server_timestamp: str
    event_channel_connected: bool
    source: DataSource = field(default=DataSource.LIVE, init=False)


@dataclass(frozen=True)
class SyntheticRefresh:
    """Refresh served by the local generator."""

    zones: tuple[Zone, ...]
    source: DataSource = field(default=DataSource.SYNTHETIC, init=False)


RefreshResult = LiveRefresh | SyntheticRefresh


class SyncEngine:
    """
    Arbitrates between live and synthetic zone data.

    Refreshes are serialised with a lock, so a refresh that started later
    can never be overwritten by an earlier one resolving late.

    Example:
        >>> engine = SyncEngine(RemoteZoneSource(endpoint), MetricGenerator())
        >>> result = await engine.refresh()
        >>> await engine.start()
        >>> snapshot = engine.snapshot()
        >>> await engine.stop()
    """

    def __init__(
        self,
        source: RemoteZoneSource,
        generator: MetricGenerator,
        refresh_interval: float = 8.0,
        drift_interval: float = 2.0,
        incident_policy: str = IncidentPolicy.REROLL,
        initial_incident_zone: str | None = "Z3",
        tracker: ConnectivityTracker | None = None,
    ):
        """Initialise sync engine and seed a synthetic collection.

        Args:
            source: Remote zone source client
            generator: Synthetic data generator
            refresh_interval: Seconds between refreshes
            drift_interval: Seconds between drift steps in synthetic mode
            incident_policy: IncidentPolicy.REROLL or IncidentPolicy.STICKY
            initial_incident_zone: Incident zone of the seed collection
                (None = random)
            tracker: Connectivity tracker (new one if None)

        Raises:
            ValueError: If an interval is not positive or the policy is unknown
        """
        if refresh_interval <= 0:
            raise ValueError("refresh_interval must be positive")
        if drift_interval <= 0:
            raise ValueError("drift_interval must be positive")
        if incident_policy not in IncidentPolicy.ALL:
            raise ValueError(f"Unknown incident policy: {incident_policy}")

        self.source = source
        self.generator = generator
        self.refresh_interval = refresh_interval
        self.drift_interval = drift_interval
        self.incident_policy = incident_policy
        self.tracker = tracker or ConnectivityTracker()

        seed = generator.generate_zones([], initial_incident_zone)
        self.state = SyncState(
            zones=tuple(seed),
            source=DataSource.SYNTHETIC,
            incident_zone_id=_critical_zone_id(seed),
        )

        self._refresh_lock = asyncio.Lock()
        self._running = False
        self._refresh_task: asyncio.Task | None = None
        self._drift_task: asyncio.Task | None = None

        self.logger: DashboardLogger = get_logger(self.__class__.__name__)

    # ----------------------------------------------------------------
    # Refresh
    # ----------------------------------------------------------------

    async def refresh(self) -> RefreshResult:
        """Run one fetch-or-synthesise cycle.

        Never raises for remote source failures; they are coalesced into
        the synthetic fallback.

        Returns:
            LiveRefresh or SyntheticRefresh describing the new collection
        """
        async with self._refresh_lock:
            previous_fire = _critical_zone_id(self.state.zones)

            try:
                payload = await self.source.fetch()
            except ZoneSourceError as e:
                self.logger.warning(
                    f"Remote zone source unavailable ({e.kind}: {e}), "
                    f"using synthetic data"
                )
                result = self._apply_synthetic()
            else:
                result = self._apply_live(payload)

            self.state.refresh_count += 1

        await self._update_drift_task()
        await self._log_incident_change(previous_fire)
        return result

    def _apply_live(self, payload: ZonePayload) -> LiveRefresh:
        now = datetime.now(timezone.utc)

        self.state.zones = payload.zones
        self.state.server_timestamp = payload.timestamp
        self.state.source = DataSource.LIVE
        self.state.incident_zone_id = None
        self.state.last_live_success_at = now
        self.tracker.record_success(Channel.DATA)

        if payload.event_channel_connected:
            self.state.last_event_signal_at = now
            self.tracker.record_success(Channel.EVENT)
        else:
            self.tracker.record_failure(Channel.EVENT)

        self.logger.debug(
            f"Live refresh: {len(payload.zones)} zones, server time {payload.timestamp}"
        )
        return LiveRefresh(
            zones=payload.zones,
            server_timestamp=payload.timestamp,
            event_channel_connected=payload.event_channel_connected,
        )

    def _apply_synthetic(self) -> SyntheticRefresh:
        self.tracker.record_failure(Channel.DATA)
        self.tracker.record_failure(Channel.EVENT)

        if self.incident_policy == IncidentPolicy.STICKY:
            incident = self.state.incident_zone_id
        else:
            incident = None

        zones = tuple(self.generator.generate_zones(self.state.zones, incident))
        self.state.zones = zones
        self.state.source = DataSource.SYNTHETIC
        self.state.incident_zone_id = _critical_zone_id(zones)

        return SyntheticRefresh(zones=zones)

    # ----------------------------------------------------------------
    # Drift
    # ----------------------------------------------------------------

    def apply_drift(self) -> bool:
        """Apply one drift step to the synthetic collection.

        Returns:
            True if drift was applied, False when showing live data
        """
        if self.state.source != DataSource.SYNTHETIC:
            return False

        self.state.zones = tuple(self.generator.drift(self.state.zones))
        self.state.drift_count += 1
        return True

    # ----------------------------------------------------------------
    # Read access
    # ----------------------------------------------------------------

    def snapshot(self) -> DashboardSnapshot:
        return DashboardSnapshot.from_state(self.state, self.tracker.status())

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def drift_active(self) -> bool:
        return self._drift_task is not None and not self._drift_task.done()

    # ----------------------------------------------------------------
    # Lifecycle
    # ----------------------------------------------------------------

    async def start(self) -> None:
        """Start the refresh trigger (first refresh runs immediately).

        The drift trigger starts alongside it while in synthetic mode.
        """
        if self._running:
            self.logger.warning("SyncEngine already running")
            return

        self._running = True
        self._refresh_task = asyncio.create_task(self._refresh_loop())
        await self._update_drift_task()

        self.logger.info(
            f"SyncEngine started (refresh every {self.refresh_interval}s, "
            f"drift every {self.drift_interval}s, policy={self.incident_policy})"
        )

    async def stop(self) -> None:
        """Stop both triggers and wait for them to finish."""
        if not self._running:
            return

        self._running = False
        await _cancel(self._refresh_task)
        self._refresh_task = None
        await _cancel(self._drift_task)
        self._drift_task = None

        self.logger.info(
            f"SyncEngine stopped after {self.state.refresh_count} refreshes, "
            f"{self.state.drift_count} drift steps"
        )

    async def _refresh_loop(self) -> None:
        try:
            while self._running:
                try:
                    await self.refresh()
                except Exception as e:
                    self.logger.error(f"Error in refresh loop: {e}", exc_info=True)
                if not self._running:
                    break
                await asyncio.sleep(self.refresh_interval)
        except asyncio.CancelledError:
            self.logger.debug("Refresh loop cancelled")
            raise

    async def _drift_loop(self) -> None:
        try:
            while self._running:
                await asyncio.sleep(self.drift_interval)
                try:
                    self.apply_drift()
                except Exception as e:
                    self.logger.error(f"Error in drift loop: {e}", exc_info=True)
        except asyncio.CancelledError:
            self.logger.debug("Drift loop cancelled")
            raise

    async def _update_drift_task(self) -> None:
        """Run the drift trigger only while started and in synthetic mode."""
        wanted = self._running and self.state.using_synthetic_data

        if wanted and not self.drift_active:
            self._drift_task = asyncio.create_task(self._drift_loop())
            self.logger.debug("Drift trigger started")
        elif not wanted and self._drift_task is not None:
            task, self._drift_task = self._drift_task, None
            await _cancel(task)
            self.logger.debug("Drift trigger stopped")

    # ----------------------------------------------------------------
    # Incident logging
    # ----------------------------------------------------------------

    async def _log_incident_change(self, previous_fire: str | None) -> None:
        current = next(
            (z for z in self.state.zones if z.status == ZoneStatus.CRITICAL), None
        )
        current_id = current.zone_id if current else None
        if current_id == previous_fire:
            return

        if previous_fire is not None:
            await self.logger.log_alarm(
                f"Incident cleared in zone {previous_fire}",
                zone=previous_fire,
                state=AlarmState.CLEARED,
            )
        if current is not None:
            await self.logger.log_alarm(
                f"Fire detected in zone {current.zone_id}: {describe_alert(current)}",
                zone=current.zone_id,
                data={"source": self.state.source.value},
            )


def _critical_zone_id(zones) -> str | None:
    for zone in zones:
        if zone.status == ZoneStatus.CRITICAL:
            return zone.zone_id
    return None


async def _cancel(task: asyncio.Task | None) -> None:
    """Cancel a task and wait for it to finish.

    asyncio.wait() never raises the awaited task's CancelledError, so a
    CancelledError reaching here is always aimed at the caller and
    propagates.
    """
    if task is None:
        return
    task.cancel()
    await asyncio.wait({task})
