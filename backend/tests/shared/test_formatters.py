"""
Tests for display formatters.
"""

import pytest

from trailguard.shared.constants import DistanceUnit, SpeedUnit
from trailguard.shared.formatters import format_distance, format_duration, format_speed


class TestFormatDistance:

    def test_short_distance_in_meters(self):
        assert format_distance(850) == "850 m"

    def test_kilometers(self):
        assert format_distance(12500) == "12.50 km"

    def test_miles(self):
        assert format_distance(1609.344, DistanceUnit.MILES) == "1.00 mi"

    def test_forced_meters(self):
        assert format_distance(12500, DistanceUnit.METERS) == "12500 m"


class TestFormatDuration:

    @pytest.mark.parametrize("seconds,expected", [
        (0, "0:00"),
        (247, "4:07"),
        (3909, "1:05:09"),
    ])
    def test_values(self, seconds, expected):
        assert format_duration(seconds) == expected

    def test_negative(self):
        assert format_duration(-1) == "—"


class TestFormatSpeed:

    def test_kmh(self):
        assert format_speed(1.2) == "4.3 km/h"

    def test_mps(self):
        assert format_speed(1.25, SpeedUnit.MPS) == "1.2 m/s"

    def test_mph(self):
        assert format_speed(1.0, SpeedUnit.MPH) == "2.2 mph"
