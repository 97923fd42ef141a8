"""Great-circle distance and geofence containment.

Geofence results are advisory: callers record them next to the punch and
never refuse a clock-in because of them.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

from ..core.constants import (
    DEFAULT_LOCATION_LATITUDE,
    DEFAULT_LOCATION_LONGITUDE,
    DEFAULT_LOCATION_NAME,
    DEFAULT_LOCATION_RADIUS_METERS,
    EARTH_RADIUS_METERS,
)
from .model import CompanyLocation, GeoPoint, RangeCheck

# Used when no location has been configured, so the kiosk never fails closed.
DEFAULT_COMPANY_LOCATION = CompanyLocation(
    location_id=None,
    name=DEFAULT_LOCATION_NAME,
    latitude=DEFAULT_LOCATION_LATITUDE,
    longitude=DEFAULT_LOCATION_LONGITUDE,
    radius_meters=DEFAULT_LOCATION_RADIUS_METERS,
)


def distance_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> int:
    """Haversine distance between two coordinates, rounded to whole meters."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    # Half-meter values round up.
    return int(math.floor(EARTH_RADIUS_METERS * c + 0.5))


def nearest_location(
    point: GeoPoint, locations: Sequence[CompanyLocation]
) -> Optional[Tuple[CompanyLocation, int]]:
    """Closest location and its distance; ties keep the first one seen."""
    best: Optional[Tuple[CompanyLocation, int]] = None
    for loc in locations:
        d = distance_meters(point.latitude, point.longitude, loc.latitude, loc.longitude)
        if best is None or d < best[1]:
            best = (loc, d)
    return best


def is_within_range(point: GeoPoint, location: CompanyLocation = DEFAULT_COMPANY_LOCATION) -> RangeCheck:
    d = distance_meters(point.latitude, point.longitude, location.latitude, location.longitude)
    return RangeCheck(within_range=d <= location.radius_meters, distance_meters=d, location=location)


def is_within_any_location(point: GeoPoint, locations: Sequence[CompanyLocation]) -> RangeCheck:
    """Check the point against the nearest of several active locations."""
    if not locations:
        return is_within_range(point, DEFAULT_COMPANY_LOCATION)

    location, d = nearest_location(point, locations)
    return RangeCheck(within_range=d <= location.radius_meters, distance_meters=d, location=location)


def format_distance(meters: int) -> str:
    if meters < 1000:
        return f"{meters} m"
    return f"{meters / 1000:.1f} km"
