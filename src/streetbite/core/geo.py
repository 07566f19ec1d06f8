"""
Geospatial helpers.

We keep a tiny geometry layer here so the proximity and ranking modules can do
distance calculations without pulling in heavier GIS dependencies.

Range checks are not done here: providers validate coordinates before they reach
the engine, and these helpers only compute (out-of-range input yields a number,
never an exception). Non-finite input (NaN, inf) yields NaN.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import atan2, cos, isfinite, nan, radians, sin, sqrt
from typing import Protocol

EARTH_RADIUS_KM = 6371.0


class SupportsLatLon(Protocol):
    latitude: float
    longitude: float


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float


def haversine_km(a: SupportsLatLon, b: SupportsLatLon) -> float:
    """Compute great-circle distance in kilometers between two points (NaN if any input is not finite)."""
    if not all(isfinite(v) for v in (a.latitude, a.longitude, b.latitude, b.longitude)):
        return nan
    lat1 = radians(a.latitude)
    lon1 = radians(a.longitude)
    lat2 = radians(b.latitude)
    lon2 = radians(b.longitude)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    # Rounding can push h slightly outside 0..1 for antipodal points.
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_KM * atan2(sqrt(h), sqrt(1 - h))


def haversine_m(a: SupportsLatLon, b: SupportsLatLon) -> float:
    """Compute great-circle distance in meters between two points."""
    return haversine_km(a, b) * 1000.0
