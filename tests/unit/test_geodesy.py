"""
Unit tests for spherical geodesy helpers.
"""

import math

import pytest

from src.routes.geodesy import (
    bearing,
    destination_point,
    distance,
    normalize_angle,
    signed_angle,
)
from src.routes.models import GeoPoint

ROTTERDAM = GeoPoint(lat=51.9, lng=4.1)
HOOK = GeoPoint(lat=51.98, lng=4.12)


class TestDistance:

    def test_symmetric(self):
        assert distance(ROTTERDAM, HOOK) == distance(HOOK, ROTTERDAM)

    def test_same_point_is_zero(self):
        assert distance(ROTTERDAM, ROTTERDAM) == 0

    def test_one_hundredth_degree_at_equator(self):
        """0.01° of longitude at the equator is ~1112 m."""
        d = distance(GeoPoint(0, 0), GeoPoint(0, 0.01))
        assert d == pytest.approx(1111.95, abs=0.1)


class TestBearing:

    def test_bearing_east(self):
        assert bearing(GeoPoint(0, 0), GeoPoint(0, 1)) == pytest.approx(90.0)

    def test_bearing_north(self):
        assert bearing(GeoPoint(0, 0), GeoPoint(1, 0)) == pytest.approx(0.0)

    def test_bearing_south(self):
        assert bearing(GeoPoint(1, 0), GeoPoint(0, 0)) == pytest.approx(180.0)

    def test_bearing_west(self):
        assert bearing(GeoPoint(0, 1), GeoPoint(0, 0)) == pytest.approx(270.0)

    def test_coincident_points_return_zero(self):
        assert bearing(ROTTERDAM, ROTTERDAM) == 0

    def test_range(self):
        brg = bearing(HOOK, ROTTERDAM)
        assert 0 <= brg < 360


class TestDestinationPoint:

    def test_inverse_consistent_with_distance_and_bearing(self):
        """Harbor-scale round trip is sub-meter accurate."""
        d = distance(ROTTERDAM, HOOK)
        brg = bearing(ROTTERDAM, HOOK)
        dest = destination_point(ROTTERDAM, d, brg)
        assert distance(dest, HOOK) < 1.0

    def test_zero_distance_returns_origin(self):
        dest = destination_point(ROTTERDAM, 0.0, 123.0)
        assert dest.lat == pytest.approx(ROTTERDAM.lat)
        assert dest.lng == pytest.approx(ROTTERDAM.lng)

    def test_due_north(self):
        dest = destination_point(GeoPoint(0, 0), 1111.95, 0.0)
        assert dest.lat == pytest.approx(0.01, abs=1e-6)
        assert dest.lng == pytest.approx(0.0, abs=1e-9)


class TestAngleWrapping:

    @pytest.mark.parametrize("angle,expected", [
        (0, 0), (360, 0), (-90, 270), (725, 5), (-1e-15, 0),
    ])
    def test_normalize(self, angle, expected):
        assert normalize_angle(angle) == pytest.approx(expected)
        assert 0 <= normalize_angle(angle) < 360

    @pytest.mark.parametrize("angle,expected", [
        (180, 180), (-180, 180), (190, -170), (350, -10), (10, 10),
    ])
    def test_signed(self, angle, expected):
        assert signed_angle(angle) == pytest.approx(expected)

    def test_signed_never_nan(self):
        assert not math.isnan(signed_angle(1e6))
