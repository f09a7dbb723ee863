# fireforce/state/sync_state.py
"""
Session-wide zone state.

One SyncState exists per dashboard activation. It is the single source of
truth for the zone collection and where it came from. Only the SyncEngine
writes to it, always by swapping the whole collection; the presentation
layer reads immutable DashboardSnapshot values.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from fireforce.sync.connectivity import ConnectivityStatus
from fireforce.zones.zone_model import Zone, ZoneStatus


class DataSource(Enum):
    """Where the current zone collection came from."""

    LIVE = "live"
    SYNTHETIC = "synthetic"


@dataclass
class SyncState:
    """Mutable state owned by the SyncEngine.

    Attributes:
        zones: Current zone collection (replaced wholesale, never merged)
        source: Source of the current collection
        server_timestamp: Last timestamp reported by the remote source
        last_live_success_at: Wall time of the last successful live fetch
        last_event_signal_at: Wall time the event channel was last reported healthy
        incident_zone_id: Active synthetic incident zone (synthetic mode only)
        activated_at: When this session's state was created
        refresh_count: Completed refreshes
        drift_count: Completed drift steps
    """

    zones: tuple[Zone, ...] = ()
    source: DataSource = DataSource.SYNTHETIC
    server_timestamp: str | None = None
    last_live_success_at: datetime | None = None
    last_event_signal_at: datetime | None = None
    incident_zone_id: str | None = None
    activated_at: datetime = field(default_factory=datetime.now)
    refresh_count: int = 0
    drift_count: int = 0

    @property
    def using_synthetic_data(self) -> bool:
        return self.source == DataSource.SYNTHETIC


@dataclass(frozen=True)
class DashboardSnapshot:
    """Everything a view needs to render one tick.

    Attributes:
        zones: Zone collection
        data_channel_connected: Remote zone source reachable
        event_channel_connected: Event feed reported healthy by the remote source
        using_synthetic_data: Zones come from the local generator
        server_timestamp: Last server-reported timestamp, if any
    """

    zones: tuple[Zone, ...]
    data_channel_connected: bool
    event_channel_connected: bool
    using_synthetic_data: bool
    server_timestamp: str | None = None

    @classmethod
    def from_state(
        cls, state: SyncState, connectivity: ConnectivityStatus
    ) -> "DashboardSnapshot":
        return cls(
            zones=state.zones,
            data_channel_connected=connectivity.data_channel_connected,
            event_channel_connected=connectivity.event_channel_connected,
            using_synthetic_data=state.using_synthetic_data,
            server_timestamp=state.server_timestamp,
        )

    @property
    def system_status(self) -> str:
        return "Online" if self.data_channel_connected else "Demo Mode"

    @property
    def fire_zone(self) -> Zone | None:
        """First zone in Critical status, if any."""
        for zone in self.zones:
            if zone.status == ZoneStatus.CRITICAL:
                return zone
        return None

    @property
    def alert_zones(self) -> list[Zone]:
        return [zone for zone in self.zones if zone.alert_generated]

    def zone(self, zone_id: str) -> Zone | None:
        for zone in self.zones:
            if zone.zone_id == zone_id:
                return zone
        return None
