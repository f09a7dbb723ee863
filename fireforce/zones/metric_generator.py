# fireforce/zones/metric_generator.py
"""
Synthetic sensor data for the lab floor plan.

Produces plausible zone readings under two regimes:
- Normal drift: room-temperature readings with light sensor noise
- Incident: one zone at a time exhibits fire-like readings, with an
  inspection robot assigned and evacuation flagged if people are present

Used by the SyncEngine whenever the remote zone source is unavailable, so the
dashboard always has a self-consistent collection to render.
"""

import logging
import random
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Sequence

from fireforce.zones.zone_model import (
    HUMIDITY_MAX,
    HUMIDITY_MIN,
    FireType,
    HeatIntensity,
    RobotStatus,
    Zone,
    ZoneStatus,
)

logger = logging.getLogger(__name__)

DEFAULT_ZONE_IDS = ("Z1", "Z2", "Z3", "Z4", "Z5", "Z6")


@dataclass
class MetricParameters:
    """Value ranges used when synthesising zone readings.

    Ranges are half-open ``(low, high)`` intervals sampled uniformly.

    Attributes:
        incident_temperature_c: Temperature range for the incident zone
        incident_humidity_percent: Humidity range for the incident zone
        incident_smoke_ppm: Smoke range for the incident zone
        incident_max_occupants: Upper bound (inclusive) for people in the incident zone
        normal_temperature_c: Temperature range for safe zones
        normal_humidity_percent: Humidity range for safe zones
        normal_smoke_ppm: Smoke range for safe zones
        drift_temperature_c: Maximum temperature change per drift step
        drift_humidity_percent: Maximum humidity change per drift step
        drift_smoke_ppm: Maximum smoke change per drift step
    """

    incident_temperature_c: tuple[float, float] = (75.0, 85.0)
    incident_humidity_percent: tuple[float, float] = (20.0, 30.0)
    incident_smoke_ppm: tuple[float, float] = (8.0, 10.0)
    incident_max_occupants: int = 3
    normal_temperature_c: tuple[float, float] = (22.0, 25.0)
    normal_humidity_percent: tuple[float, float] = (45.0, 55.0)
    normal_smoke_ppm: tuple[float, float] = (0.05, 0.25)
    drift_temperature_c: float = 0.5
    drift_humidity_percent: float = 1.0
    drift_smoke_ppm: float = 0.15

    @classmethod
    def from_config(cls, overrides: dict | None) -> "MetricParameters":
        """Build parameters from a ``metrics`` config section.

        Range values may be given as two-element YAML lists.

        Raises:
            ValueError: If an unknown key is supplied
        """
        params = cls()
        for key, value in (overrides or {}).items():
            if not hasattr(params, key):
                raise ValueError(f"Unknown metric parameter: {key}")
            if isinstance(value, list):
                value = tuple(value)
            setattr(params, key, value)
        return params


def robot_id_for_zone(zone_id: str) -> str:
    """Derive the inspection robot identifier for a zone.

    "Z3" maps to "R003"; identifiers without digits map to "R-<zone_id>".
    """
    digits = "".join(ch for ch in zone_id if ch.isdigit())
    if not digits:
        return f"R-{zone_id}"
    return f"R{int(digits):03d}"


class MetricGenerator:
    """
    Generates synthetic zone collections.

    Holds no zone state of its own: every call returns a new collection
    and the caller decides what to keep.

    Example:
        >>> generator = MetricGenerator(rng=random.Random(7))
        >>> zones = generator.generate_zones([], "Z3")
        >>> zones = generator.drift(zones)
    """

    def __init__(
        self,
        zone_ids: Sequence[str] = DEFAULT_ZONE_IDS,
        params: MetricParameters | None = None,
        rng: random.Random | None = None,
    ):
        """Initialise metric generator.

        Args:
            zone_ids: Fixed identifier set for the deployment
            params: Value ranges (uses defaults if None)
            rng: Random source (module-level randomness if None)

        Raises:
            ValueError: If zone_ids is empty or contains duplicates
        """
        if not zone_ids:
            raise ValueError("zone_ids cannot be empty")
        if len(set(zone_ids)) != len(zone_ids):
            raise ValueError("zone_ids must be unique")

        self.zone_ids = tuple(zone_ids)
        self.params = params or MetricParameters()
        self._rng = rng or random.Random()

    # ----------------------------------------------------------------
    # Incident re-roll
    # ----------------------------------------------------------------

    def choose_incident_zone(self, zone_ids: Sequence[str] | None = None) -> str:
        """Pick an incident zone uniformly at random."""
        return self._rng.choice(list(zone_ids or self.zone_ids))

    def generate_zones(
        self,
        previous_zones: Sequence[Zone],
        incident_zone_id: str | None,
    ) -> list[Zone]:
        """Produce a full replacement collection.

        Exactly one zone is in incident mode; every other zone is Safe.

        Args:
            previous_zones: Current collection, supplies identifiers and order
                (the configured identifier set is used when empty)
            incident_zone_id: Zone to put in incident mode, or None to pick one

        Returns:
            New list of zones
        """
        zone_ids = [zone.zone_id for zone in previous_zones] or list(self.zone_ids)

        if incident_zone_id is None or incident_zone_id not in zone_ids:
            incident_zone_id = self.choose_incident_zone(zone_ids)
            logger.debug(f"Incident re-rolled to zone {incident_zone_id}")

        now = datetime.now(timezone.utc).isoformat()
        return [
            self._incident_zone(zone_id, now)
            if zone_id == incident_zone_id
            else self._normal_zone(zone_id, now)
            for zone_id in zone_ids
        ]

    def _incident_zone(self, zone_id: str, timestamp: str) -> Zone:
        p = self.params
        occupants = self._rng.randint(0, p.incident_max_occupants)
        return Zone(
            zone_id=zone_id,
            status=ZoneStatus.CRITICAL,
            temperature=self._uniform(p.incident_temperature_c),
            humidity=self._uniform(p.incident_humidity_percent),
            smoke_level=self._uniform(p.incident_smoke_ppm),
            occupant_count=occupants,
            heat_intensity=HeatIntensity.HIGH,
            fire_type=self._rng.choice(
                [FireType.ELECTRICAL, FireType.PAPER, FireType.CHEMICAL]
            ),
            assigned_robot_id=robot_id_for_zone(zone_id),
            robot_status=RobotStatus.ALERT,
            alert_generated=True,
            evacuation_started=occupants > 0,
            last_updated=timestamp,
        )

    def _normal_zone(self, zone_id: str, timestamp: str) -> Zone:
        p = self.params
        return Zone(
            zone_id=zone_id,
            status=ZoneStatus.SAFE,
            temperature=self._uniform(p.normal_temperature_c),
            humidity=self._uniform(p.normal_humidity_percent),
            smoke_level=self._uniform(p.normal_smoke_ppm),
            occupant_count=0,
            heat_intensity=HeatIntensity.LOW,
            last_updated=timestamp,
        )

    # ----------------------------------------------------------------
    # Sensor noise
    # ----------------------------------------------------------------

    def drift(self, zones: Sequence[Zone]) -> list[Zone]:
        """Apply one step of sensor noise to every zone.

        Status, occupants and incident assignment are left untouched.
        Humidity is clamped to [10, 80] and smoke is floored at 0.
        """
        p = self.params
        return [
            zone.with_metrics(
                temperature=zone.temperature + self._jitter(p.drift_temperature_c),
                humidity=max(
                    HUMIDITY_MIN,
                    min(HUMIDITY_MAX, zone.humidity + self._jitter(p.drift_humidity_percent)),
                ),
                smoke_level=max(0.0, zone.smoke_level + self._jitter(p.drift_smoke_ppm)),
            )
            for zone in zones
        ]

    def _uniform(self, bounds: tuple[float, float]) -> float:
        low, high = bounds
        return low + self._rng.random() * (high - low)

    def _jitter(self, amplitude: float) -> float:
        return (self._rng.random() - 0.5) * 2 * amplitude
