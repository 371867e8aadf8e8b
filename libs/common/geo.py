"""Geolocation helpers: bounding boxes and great-circle distances.

Usage:
    from libs.common.geo import bounding_box, haversine_km

    box = bounding_box(40.0, -74.0, radius_km=10)
    km = haversine_km(40.0, -74.0, 40.05, -74.02)
"""

import math
from dataclasses import dataclass

EARTH_RADIUS_KM = 6371.0
KM_PER_DEGREE_LAT = 111.0


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    def contains(self, lat: float, lng: float) -> bool:
        return (
            self.min_lat <= lat <= self.max_lat
            and self.min_lng <= lng <= self.max_lng
        )


def bounding_box(lat: float, lng: float, radius_km: float) -> BoundingBox:
    """Axis-aligned box around a point, used as a cheap pre-filter.

    One degree of latitude is ~111 km everywhere; a degree of longitude
    shrinks by cos(latitude) as meridians converge. The box is a superset
    of the circle, so callers still need an exact distance check.
    """
    lat_delta = radius_km / KM_PER_DEGREE_LAT
    cos_lat = math.cos(math.radians(lat))

    if cos_lat < 1e-9:
        min_lng, max_lng = -180.0, 180.0
    else:
        lng_delta = radius_km / (KM_PER_DEGREE_LAT * cos_lat)
        if lng_delta >= 180:
            min_lng, max_lng = -180.0, 180.0
        else:
            min_lng = max(lng - lng_delta, -180.0)
            max_lng = min(lng + lng_delta, 180.0)

    return BoundingBox(
        min_lat=max(lat - lat_delta, -90.0),
        max_lat=min(lat + lat_delta, 90.0),
        min_lng=min_lng,
        max_lng=max_lng,
    )


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in kilometres between two points."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def round_to_tenth(value: float) -> float:
    """Round half-up to one decimal place (4.25 -> 4.3, not banker's 4.2)."""
    return math.floor(value * 10 + 0.5) / 10
