from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class GeoPoint:
    """A position reported by the kiosk device."""

    latitude: float
    longitude: float
    accuracy: Optional[float] = None


@dataclass(frozen=True)
class CompanyLocation:
    """Domain entity: an office with its geofence radius."""

    location_id: Optional[int]
    name: str
    latitude: float
    longitude: float
    radius_meters: int
    is_active: bool = True
    description: Optional[str] = None


@dataclass(frozen=True)
class RangeCheck:
    within_range: bool
    distance_meters: int
    location: Optional[CompanyLocation]
