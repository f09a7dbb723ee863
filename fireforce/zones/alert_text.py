# fireforce/zones/alert_text.py
"""
Alert copy for zones in alarm.

The only place alert wording is produced, so the zone grid summary and the
fire-zone detail view never disagree. All functions are pure functions of
the zone's occupant count, evacuation flag and assigned robot.
"""

from fireforce.zones.zone_model import Zone

__all__ = [
    "describe_alert",
    "describe_detailed_alert",
    "describe_alert_headline",
    "people_noun",
]


def people_noun(count: int) -> str:
    """Singular only for exactly one occupant."""
    return "person" if count == 1 else "people"


def describe_alert(zone: Zone) -> str:
    """Short alert line shown on the zone tile."""
    count = zone.occupant_count
    if count == 0:
        return "Alert sent to Fire Safety Dept."
    if zone.evacuation_started:
        return f"Evacuation started - {count} {people_noun(count)} detected"
    return f"{count} {people_noun(count)} detected - Alert sent"


def describe_detailed_alert(zone: Zone) -> str:
    """Full alert paragraph for the fire-zone detail view."""
    count = zone.occupant_count
    robot = zone.assigned_robot_id

    if count == 0:
        return (
            "Emergency protocols activated. Fire safety department has been "
            f"notified. Robot {robot} is actively monitoring the situation. "
            "No personnel detected in the zone."
        )

    detected = (
        f"Robot {robot} is actively monitoring the situation and has detected "
        f"{count} {people_noun(count)} in the zone."
    )
    if zone.evacuation_started:
        return (
            "EVACUATION IN PROGRESS: Emergency protocols activated. Fire safety "
            "department and rescue teams have been notified. "
            f"{detected} Evacuation procedures are underway."
        )
    return (
        "Emergency protocols activated. Fire safety department has been "
        f"notified. {detected} Evacuation procedures are being initiated."
    )


def describe_alert_headline(zone: Zone) -> str:
    """Banner line for the fire-zone detail view."""
    if zone.evacuation_started:
        return f"EVACUATION IN PROGRESS: Fire detected in Zone {zone.zone_id}"
    return f"CRITICAL ALERT: Fire detected in Zone {zone.zone_id}"
