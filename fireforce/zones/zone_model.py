# fireforce/zones/zone_model.py
"""
Zone data model for the lab floor plan.

A Zone is one monitored physical area with sensor-derived metrics
(temperature, humidity, smoke, occupants) and a derived safety status.
The remote zone source speaks camelCase JSON; this module owns the
translation between that wire shape and the Python dataclass.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

__all__ = [
    "ZoneStatus",
    "HeatIntensity",
    "FireType",
    "RobotStatus",
    "Zone",
    "HUMIDITY_MIN",
    "HUMIDITY_MAX",
]

HUMIDITY_MIN = 10.0
HUMIDITY_MAX = 80.0


class ZoneStatus(Enum):
    """Discrete safety status of a zone."""

    SAFE = "Safe"
    WARNING = "Warning"
    CRITICAL = "Critical"
    EVACUATE = "Evacuate"


class HeatIntensity(Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class FireType(Enum):
    PAPER = "Paper"
    ELECTRICAL = "Electrical"
    CHEMICAL = "Chemical"


class RobotStatus(Enum):
    IDLE = "Idle"
    SCANNING = "Scanning"
    ALERT = "Alert"


# Python attribute -> wire key
_WIRE_KEYS = {
    "zone_id": "id",
    "status": "status",
    "temperature": "temperature",
    "humidity": "humidity",
    "smoke_level": "smokeLevel",
    "occupant_count": "peopleCount",
    "heat_intensity": "heatIntensity",
    "fire_type": "fireType",
    "assigned_robot_id": "robotId",
    "robot_status": "robotStatus",
    "alert_generated": "alertGenerated",
    "evacuation_started": "evacuationStarted",
    "last_updated": "lastUpdated",
}

_REQUIRED_WIRE_KEYS = (
    "id",
    "status",
    "temperature",
    "humidity",
    "smokeLevel",
    "peopleCount",
    "heatIntensity",
)

_OPTIONAL_WIRE_KEYS = ("alertGenerated", "evacuationStarted", "lastUpdated")


@dataclass(frozen=True)
class Zone:
    """Snapshot of a single monitored zone.

    Attributes:
        zone_id: Stable identifier, unique within the collection (e.g. "Z3")
        status: Derived safety status
        temperature: Air temperature in °C
        humidity: Relative humidity in percent
        smoke_level: Smoke concentration in ppm
        occupant_count: Number of people detected in the zone
        heat_intensity: Coarse heat classification
        fire_type: Fire classification, only while an incident is active
        assigned_robot_id: Inspection robot assigned to the incident
        robot_status: State of the assigned robot
        alert_generated: Whether an alert has been sent for this zone
        evacuation_started: Whether evacuation is under way
        last_updated: ISO-8601 timestamp of the last reading
    """

    zone_id: str
    status: ZoneStatus = ZoneStatus.SAFE
    temperature: float = 0.0
    humidity: float = 0.0
    smoke_level: float = 0.0
    occupant_count: int = 0
    heat_intensity: HeatIntensity = HeatIntensity.LOW
    fire_type: FireType | None = None
    assigned_robot_id: str | None = None
    robot_status: RobotStatus | None = None
    alert_generated: bool = False
    evacuation_started: bool = False
    last_updated: str | None = None

    # Optional wire keys absent on decode, so to_payload() round-trips exactly
    _absent_keys: frozenset = field(default=frozenset(), repr=False, compare=False)

    # ----------------------------------------------------------------
    # Derived properties
    # ----------------------------------------------------------------

    @property
    def incident_active(self) -> bool:
        return self.status == ZoneStatus.CRITICAL

    def with_metrics(self, **changes: Any) -> "Zone":
        """Return a copy with the given attributes replaced."""
        return replace(self, **changes)

    def invariant_violations(self) -> list[str]:
        """List the zone-level consistency rules this zone breaks.

        Returns:
            Human-readable descriptions, empty when the zone is consistent
        """
        problems = []

        if self.occupant_count < 0:
            problems.append(f"{self.zone_id}: negative occupant count")
        if self.smoke_level < 0:
            problems.append(f"{self.zone_id}: negative smoke level")

        if self.evacuation_started and not (
            self.alert_generated and self.occupant_count > 0
        ):
            problems.append(
                f"{self.zone_id}: evacuation started without alert or occupants"
            )

        incident_fields = (
            self.fire_type is not None,
            self.assigned_robot_id is not None,
            self.robot_status is not None,
            self.alert_generated,
        )
        if self.incident_active and not all(incident_fields):
            problems.append(f"{self.zone_id}: critical zone missing incident fields")
        if not self.incident_active and any(incident_fields[:3]):
            problems.append(f"{self.zone_id}: incident fields set on non-critical zone")

        return problems

    # ----------------------------------------------------------------
    # Wire codec
    # ----------------------------------------------------------------

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "Zone":
        """Decode a zone from the remote source's JSON shape.

        Args:
            data: Single zone object from the ``zones`` array

        Returns:
            Decoded Zone

        Raises:
            ValueError: If keys are missing, types are wrong or enum values
                are unknown
        """
        if not isinstance(data, dict):
            raise ValueError(f"zone entry must be an object, got {type(data).__name__}")

        missing = [key for key in _REQUIRED_WIRE_KEYS if key not in data]
        if missing:
            raise ValueError(f"zone entry missing keys: {', '.join(missing)}")

        zone_id = data["id"]
        if not isinstance(zone_id, str) or not zone_id:
            raise ValueError("zone id must be a non-empty string")

        people = data["peopleCount"]
        if isinstance(people, bool) or not isinstance(people, int) or people < 0:
            raise ValueError(f"{zone_id}: peopleCount must be a non-negative integer")

        robot_id = data.get("robotId")
        if robot_id is not None and not isinstance(robot_id, str):
            raise ValueError(f"{zone_id}: robotId must be a string or null")

        last_updated = data.get("lastUpdated")
        if last_updated is not None and not isinstance(last_updated, str):
            raise ValueError(f"{zone_id}: lastUpdated must be a string")

        return cls(
            zone_id=zone_id,
            status=_decode_enum(ZoneStatus, data["status"], zone_id, "status"),
            temperature=_decode_number(data["temperature"], zone_id, "temperature"),
            humidity=_decode_number(data["humidity"], zone_id, "humidity"),
            smoke_level=_decode_number(data["smokeLevel"], zone_id, "smokeLevel"),
            occupant_count=people,
            heat_intensity=_decode_enum(
                HeatIntensity, data["heatIntensity"], zone_id, "heatIntensity"
            ),
            fire_type=_decode_optional_enum(FireType, data.get("fireType"), zone_id),
            assigned_robot_id=robot_id,
            robot_status=_decode_optional_enum(
                RobotStatus, data.get("robotStatus"), zone_id
            ),
            alert_generated=_decode_bool(data.get("alertGenerated", False), zone_id),
            evacuation_started=_decode_bool(
                data.get("evacuationStarted", False), zone_id
            ),
            last_updated=last_updated,
            _absent_keys=frozenset(k for k in _OPTIONAL_WIRE_KEYS if k not in data),
        )

    def to_payload(self) -> dict[str, Any]:
        """Encode the zone into the remote source's JSON shape."""
        payload: dict[str, Any] = {}
        for name, key in _WIRE_KEYS.items():
            if key in self._absent_keys:
                continue
            value = getattr(self, name)
            payload[key] = value.value if isinstance(value, Enum) else value
        return payload


def _decode_enum(enum_cls, value: Any, zone_id: str, key: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise ValueError(f"{zone_id}: unknown {key} {value!r}") from None


def _decode_optional_enum(enum_cls, value: Any, zone_id: str):
    if value is None:
        return None
    return _decode_enum(enum_cls, value, zone_id, enum_cls.__name__)


def _decode_number(value: Any, zone_id: str, key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{zone_id}: {key} must be a number")
    return value


def _decode_bool(value: Any, zone_id: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{zone_id}: alert flags must be booleans")
    return value
