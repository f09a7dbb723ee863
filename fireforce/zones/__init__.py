# fireforce/zones/__init__.py
"""
Zone model, synthetic metrics and alert copy for the lab floor plan.

- Zone dataclass and enums, with the remote source's wire codec
- MetricGenerator for incident/normal synthetic readings and sensor drift
- Alert text functions shared by every view
"""

from fireforce.zones.alert_text import (
    describe_alert,
    describe_alert_headline,
    describe_detailed_alert,
)
from fireforce.zones.metric_generator import (
    DEFAULT_ZONE_IDS,
    MetricGenerator,
    MetricParameters,
    robot_id_for_zone,
)
from fireforce.zones.zone_model import (
    FireType,
    HeatIntensity,
    RobotStatus,
    Zone,
    ZoneStatus,
)

__all__ = [
    # Model
    "Zone",
    "ZoneStatus",
    "HeatIntensity",
    "FireType",
    "RobotStatus",
    # Synthetic data
    "MetricGenerator",
    "MetricParameters",
    "DEFAULT_ZONE_IDS",
    "robot_id_for_zone",
    # Alert copy
    "describe_alert",
    "describe_detailed_alert",
    "describe_alert_headline",
]
