"""Unit tests for the Haversine distance primitive."""

import math

import pytest

from truckfare.domain.distance import EARTH_RADIUS_KM, fallback_estimate, haversine_km
from truckfare.domain.entities import Location
from truckfare.domain.enums import DistanceSource
from truckfare.domain.errors import InvalidCoordinate, InvalidInput
from tests.conftest import GULSHAN_1, MIRPUR_10


class TestHaversine:
    def test_same_point_is_zero(self):
        assert haversine_km(GULSHAN_1, GULSHAN_1) == 0.0

    def test_symmetric(self):
        a, b = Location(19.0, 72.0), Location(20.0, 73.0)
        assert abs(haversine_km(a, b) - haversine_km(b, a)) < 1e-9

    def test_known_distance(self):
        # Gulshan-1 -> Mirpur-10, Dhaka: ~6.3 km as the crow flies
        d = haversine_km(GULSHAN_1, MIRPUR_10)
        assert 6.0 < d < 6.6

    def test_one_degree_of_latitude(self):
        d = haversine_km(Location(0.0, 0.0), Location(1.0, 0.0))
        assert d == pytest.approx(EARTH_RADIUS_KM * math.pi / 180, rel=1e-9)

    def test_antipodal_points(self):
        d = haversine_km(Location(0.0, 0.0), Location(0.0, 180.0))
        assert d == pytest.approx(math.pi * EARTH_RADIUS_KM, rel=1e-9)

    def test_pole_to_pole(self):
        d = haversine_km(Location(90.0, 0.0), Location(-90.0, 0.0))
        assert d == pytest.approx(20_015.09, abs=0.1)

    def test_crosses_antimeridian(self):
        d = haversine_km(Location(0.0, 179.5), Location(0.0, -179.5))
        assert d == pytest.approx(111.19, abs=0.01)


class TestLocationValidation:
    @pytest.mark.parametrize(
        "lat,lng",
        [(90.01, 0.0), (-91.0, 0.0), (0.0, 180.5), (0.0, -181.0),
         (float("nan"), 0.0), (0.0, float("inf"))],
    )
    def test_out_of_range_rejected(self, lat, lng):
        with pytest.raises(InvalidCoordinate):
            Location(lat, lng)

    def test_invalid_coordinate_is_invalid_input(self):
        with pytest.raises(InvalidInput):
            Location(100.0, 0.0)

    def test_bounds_are_inclusive(self):
        Location(90.0, 180.0)
        Location(-90.0, -180.0)

    def test_address_ignored_for_equality(self):
        assert Location(1.0, 2.0, "a") == Location(1.0, 2.0, "b")


class TestFallbackEstimate:
    def test_duration_is_two_minutes_per_km(self):
        est = fallback_estimate(GULSHAN_1, MIRPUR_10)
        assert est.source == DistanceSource.HAVERSINE
        assert est.distance_km == haversine_km(GULSHAN_1, MIRPUR_10)
        assert est.duration_min == pytest.approx(2 * est.distance_km)

    def test_custom_speed(self):
        est = fallback_estimate(GULSHAN_1, MIRPUR_10, minutes_per_km=1.0)
        assert est.duration_min == pytest.approx(est.distance_km)
