# tests/unit/zones/test_alert_text.py
"""Tests for alert copy.

Test Coverage:
- Policy order (no personnel, evacuation, personnel detected)
- Pluralisation boundary
- Purity
- Detailed text and headline
"""

import pytest

from fireforce.zones.alert_text import (
    describe_alert,
    describe_alert_headline,
    describe_detailed_alert,
)
from fireforce.zones.zone_model import (
    FireType,
    HeatIntensity,
    RobotStatus,
    Zone,
    ZoneStatus,
)


def incident_zone(occupants: int, evacuating: bool, zone_id: str = "Z3") -> Zone:
    return Zone(
        zone_id=zone_id,
        status=ZoneStatus.CRITICAL,
        temperature=80.0,
        humidity=25.0,
        smoke_level=9.0,
        occupant_count=occupants,
        heat_intensity=HeatIntensity.HIGH,
        fire_type=FireType.ELECTRICAL,
        assigned_robot_id="R003",
        robot_status=RobotStatus.ALERT,
        alert_generated=True,
        evacuation_started=evacuating,
    )


# ================================================================
# SHORT ALERT TESTS
# ================================================================
class TestDescribeAlert:
    """Test the zone tile alert line."""

    def test_no_personnel(self):
        """Test zone with nobody inside gets the generic alert.

        WHY: Zone Z3 with zero occupants must not talk about evacuation.
        """
        assert describe_alert(incident_zone(0, False)) == "Alert sent to Fire Safety Dept."

    def test_no_personnel_ignores_evacuation_flag(self):
        text = describe_alert(incident_zone(0, True))

        assert text == "Alert sent to Fire Safety Dept."
        assert "Evacuation" not in text

    def test_evacuation_names_count(self):
        text = describe_alert(incident_zone(2, True))

        assert text == "Evacuation started - 2 people detected"
        assert "2 people" in text

    def test_personnel_detected_without_evacuation(self):
        assert describe_alert(incident_zone(3, False)) == "3 people detected - Alert sent"

    @pytest.mark.parametrize("evacuating", [True, False])
    def test_single_occupant_uses_singular(self, evacuating):
        text = describe_alert(incident_zone(1, evacuating))

        assert "1 person detected" in text
        assert "people" not in text

    @pytest.mark.parametrize("count", [2, 3])
    def test_multiple_occupants_use_plural(self, count):
        assert f"{count} people" in describe_alert(incident_zone(count, True))

    def test_same_zone_same_text(self):
        zone = incident_zone(2, True)
        assert describe_alert(zone) == describe_alert(zone)
        assert describe_detailed_alert(zone) == describe_detailed_alert(zone)


# ================================================================
# DETAILED ALERT TESTS
# ================================================================
class TestDescribeDetailedAlert:
    """Test the fire-zone detail paragraph."""

    def test_no_personnel_mentions_robot(self):
        text = describe_detailed_alert(incident_zone(0, False))

        assert "Robot R003 is actively monitoring the situation." in text
        assert text.endswith("No personnel detected in the zone.")

    def test_evacuation_in_progress(self):
        text = describe_detailed_alert(incident_zone(1, True))

        assert text.startswith("EVACUATION IN PROGRESS:")
        assert "has detected 1 person in the zone" in text
        assert text.endswith("Evacuation procedures are underway.")

    def test_procedures_being_initiated(self):
        text = describe_detailed_alert(incident_zone(2, False))

        assert not text.startswith("EVACUATION")
        assert "has detected 2 people in the zone" in text
        assert text.endswith("Evacuation procedures are being initiated.")


class TestDescribeAlertHeadline:
    def test_evacuation_headline(self):
        assert (
            describe_alert_headline(incident_zone(2, True, zone_id="Z5"))
            == "EVACUATION IN PROGRESS: Fire detected in Zone Z5"
        )

    def test_critical_headline(self):
        assert (
            describe_alert_headline(incident_zone(0, False))
            == "CRITICAL ALERT: Fire detected in Zone Z3"
        )
