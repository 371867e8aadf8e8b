"""Unit tests for bounding boxes and great-circle distances."""

import math

import pytest
from libs.common.geo import (
    bounding_box,
    haversine_km,
    round_to_tenth,
)

SYDNEY = (-33.8688, 151.2093)


@pytest.mark.unit
class TestBoundingBox:
    def test_latitude_span_uses_111_km_per_degree(self):
        box = bounding_box(0.0, 0.0, 111.0)
        assert box.min_lat == pytest.approx(-1.0)
        assert box.max_lat == pytest.approx(1.0)

    def test_longitude_span_widens_with_latitude(self):
        equator = bounding_box(0.0, 10.0, 50)
        north = bounding_box(60.0, 10.0, 50)
        equator_span = equator.max_lng - equator.min_lng
        north_span = north.max_lng - north.min_lng
        # cos(60deg) = 0.5, so the span doubles.
        assert north_span == pytest.approx(equator_span * 2, rel=1e-6)

    def test_clamps_to_valid_coordinates(self):
        box = bounding_box(89.5, 179.9, 200)
        assert box.max_lat == 90.0
        assert box.max_lng <= 180.0
        assert box.min_lat >= -90.0

    def test_pole_covers_every_longitude(self):
        box = bounding_box(90.0, 0.0, 10)
        assert (box.min_lng, box.max_lng) == (-180.0, 180.0)

    def test_huge_radius_covers_every_longitude(self):
        box = bounding_box(45.0, 0.0, 20000)
        assert (box.min_lng, box.max_lng) == (-180.0, 180.0)

    def test_box_contains_every_point_within_radius(self):
        lat, lng = SYDNEY
        box = bounding_box(lat, lng, 25)
        for bearing in range(0, 360, 15):
            # ~24 km in each direction
            d_lat = 24 / 111 * math.cos(math.radians(bearing))
            d_lng = 24 / (111 * math.cos(math.radians(lat))) * math.sin(
                math.radians(bearing)
            )
            assert box.contains(lat + d_lat, lng + d_lng)


@pytest.mark.unit
class TestHaversine:
    def test_zero_distance(self):
        assert haversine_km(*SYDNEY, *SYDNEY) == 0

    def test_one_degree_of_latitude(self):
        assert haversine_km(0, 0, 1, 0) == pytest.approx(111.19, abs=0.01)

    def test_known_city_pair(self):
        # Sydney -> Melbourne is about 714 km.
        km = haversine_km(*SYDNEY, -37.8136, 144.9631)
        assert km == pytest.approx(714, abs=5)

    def test_symmetric(self):
        a = haversine_km(10, 20, -5, 100)
        b = haversine_km(-5, 100, 10, 20)
        assert a == pytest.approx(b)


@pytest.mark.unit
@pytest.mark.parametrize(
    "value,expected",
    [(4.25, 4.3), (4.24, 4.2), (3.0, 3.0), (4.333, 4.3)],
)
def test_round_to_tenth_rounds_half_up(value, expected):
    assert round_to_tenth(value) == expected
