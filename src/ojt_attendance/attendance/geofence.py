from __future__ import annotations

import math
from dataclasses import dataclass

from ..core.constants import EARTH_RADIUS_METERS, SITE_LAT, SITE_LNG, SITE_RADIUS_METERS


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lng: float


@dataclass(frozen=True)
class Site:
    """Fixed on-site location with its allowed radius."""

    center: Coordinate
    radius_meters: float


DEFAULT_SITE = Site(center=Coordinate(SITE_LAT, SITE_LNG), radius_meters=SITE_RADIUS_METERS)


def distance_meters(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance using the haversine formula on a spherical Earth."""
    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    d_lat = math.radians(b.lat - a.lat)
    d_lng = math.radians(b.lng - a.lng)

    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2
    # Rounding can push h slightly outside [0, 1] for antipodal points.
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_METERS * math.asin(math.sqrt(h))


def is_within_site(point: Coordinate, site: Coordinate, radius_meters: float) -> bool:
    return distance_meters(point, site) <= radius_meters
