"""
Tests for great-circle distance and ETA arithmetic.
"""

import math
import pytest

from freight_tracker.core.geo import (
    ETA_UNREACHABLE,
    Position,
    eta_minutes,
    haversine_distance,
    is_unreachable,
    midpoint,
    round_half_up,
    round_half_up_places,
)

JFK = Position(40.6413, -73.7781)
LHR = Position(51.4700, -0.4543)
SYD = Position(-33.9399, 151.1753)


class TestHaversineDistance:
    """Distance between positions."""

    def test_same_point_is_zero(self):
        """A position is zero km from itself."""
        assert haversine_distance(JFK, JFK) == 0
        assert haversine_distance(Position(0, 0), Position(0, 0)) == 0

    @pytest.mark.parametrize("a,b", [(JFK, LHR), (LHR, SYD), (SYD, JFK)])
    def test_symmetric(self, a, b):
        """distance(a, b) == distance(b, a)."""
        assert haversine_distance(a, b) == pytest.approx(haversine_distance(b, a))

    def test_known_route(self):
        """JFK to LHR is roughly 5540 km."""
        assert haversine_distance(JFK, LHR) == pytest.approx(5540, abs=15)

    def test_one_degree_of_latitude(self):
        """One degree along a meridian is 2*pi*R/360."""
        expected = 2 * math.pi * 6371 / 360
        assert haversine_distance(Position(0, 0), Position(1, 0)) == pytest.approx(expected)

    def test_antipodes(self):
        """Antipodal points are half the circumference apart."""
        assert haversine_distance(Position(0, 0), Position(0, 180)) == pytest.approx(math.pi * 6371)


class TestEtaMinutes:
    """Time to arrival from distance and speed."""

    def test_converts_mps_to_kmh(self):
        """250 m/s is 900 km/h, so 900 km takes 60 minutes."""
        assert eta_minutes(900, 250) == 60

    def test_rounds_to_nearest_minute(self):
        """100 km at 100 m/s (360 km/h) is 16.67 minutes."""
        assert eta_minutes(100, 100) == 17

    def test_zero_speed_is_unreachable(self):
        """Zero speed yields the infinity sentinel, not an error."""
        assert eta_minutes(500, 0) == ETA_UNREACHABLE
        assert is_unreachable(eta_minutes(500, 0))

    def test_negative_speed_is_unreachable(self):
        assert math.isinf(eta_minutes(500, -3))

    def test_zero_distance(self):
        assert eta_minutes(0, 200) == 0


class TestHelpers:

    def test_round_half_up(self):
        """Halves round up like the display layer expects."""
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4
        assert round_half_up(2.49) == 2

    def test_round_half_up_places(self):
        """Decimal halves go up, including ones binary floats store just below .5."""
        assert round_half_up_places(0.25, 1) == 0.3
        assert round_half_up_places(2.675, 2) == 2.68
        assert round_half_up_places(3.0, 1) == 3.0

    def test_midpoint(self):
        assert midpoint(Position(10, 20), Position(20, 40)) == Position(15, 30)
