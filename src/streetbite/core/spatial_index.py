"""
Lightweight spatial indexing (lat/lon grid buckets) for vendor points.

Used behind proximity search to avoid O(N) distance computations when a catalog
grows to thousands of vendors. Cells are laid out in degrees, and queries scan a
bounding box that provably contains the search circle before the exact haversine
check, so results match a linear scan exactly.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from streetbite.core.geo import EARTH_RADIUS_KM, GeoPoint, haversine_km

T = TypeVar("T")

_KM_PER_DEG = EARTH_RADIUS_KM * math.pi / 180.0
_EPS_DEG = 1e-9


@dataclass(frozen=True)
class _Entry(Generic[T]):
    seq: int
    item: T
    latitude: float
    longitude: float


class SpatialGridIndex(Generic[T]):
    def __init__(
        self,
        items: list[T],
        *,
        get_latlon: Callable[[T], tuple[float, float]],
        cell_size_km: float = 1.0,
    ):
        if float(cell_size_km) <= 0:
            raise ValueError("cell_size_km must be > 0")
        self._cell_deg = float(cell_size_km) / _KM_PER_DEG
        self._cells: dict[tuple[int, int], list[_Entry[T]]] = {}
        self._entries: list[_Entry[T]] = []
        # Entries outside the valid lat/lon ranges (NaN included) have no cell; every query scans them.
        self._unplaced: list[_Entry[T]] = []

        for seq, it in enumerate(items):
            lat, lon = get_latlon(it)
            e = _Entry(seq=seq, item=it, latitude=float(lat), longitude=float(lon))
            self._entries.append(e)
            if -90 <= e.latitude <= 90 and -180 <= e.longitude <= 180:
                self._cells.setdefault(self._cell_key(e.latitude, e.longitude), []).append(e)
            else:
                self._unplaced.append(e)

    def __len__(self) -> int:
        return len(self._entries)

    def _cell_key(self, lat: float, lon: float) -> tuple[int, int]:
        return (int(math.floor(lat / self._cell_deg)), int(math.floor(lon / self._cell_deg)))

    def _bounding_box(self, lat: float, lon: float, radius_km: float) -> tuple[float, float, float, float] | None:
        """Return (lat_min, lat_max, lon_min, lon_max) containing the circle, or None if it wraps."""
        angle = radius_km / EARTH_RADIUS_KM
        if angle >= math.pi / 2:
            return None
        dlat = math.degrees(angle) + _EPS_DEG
        lat_min = lat - dlat
        lat_max = lat + dlat
        if lat_min <= -90 or lat_max >= 90:
            return None
        # sin(dlon/2) <= sin(angle/2) / cos(widest latitude in the band).
        widest = math.radians(max(abs(lat_min), abs(lat_max)))
        s = math.sin(angle / 2) / math.cos(widest)
        if s >= 1:
            return None
        dlon = math.degrees(2 * math.asin(s)) + _EPS_DEG
        lon_min = lon - dlon
        lon_max = lon + dlon
        if lon_min < -180 or lon_max > 180:
            return None
        return lat_min, lat_max, lon_min, lon_max

    def _candidates(self, lat: float, lon: float, radius_km: float) -> list[_Entry[T]]:
        if not all(math.isfinite(v) for v in (lat, lon, radius_km)):
            return self._entries
        box = self._bounding_box(lat, lon, radius_km)
        if box is None:
            # Polar or antimeridian queries: check every entry.
            return self._entries
        lat_min, lat_max, lon_min, lon_max = box
        r0, c0 = self._cell_key(lat_min, lon_min)
        r1, c1 = self._cell_key(lat_max, lon_max)
        if (r1 - r0 + 1) * (c1 - c0 + 1) >= len(self._cells):
            return self._entries
        out: list[_Entry[T]] = list(self._unplaced)
        for row in range(r0, r1 + 1):
            for col in range(c0, c1 + 1):
                out.extend(self._cells.get((row, col), ()))
        return out

    def query_within(self, *, latitude: float, longitude: float, radius_km: float) -> list[T]:
        """Return items whose great-circle distance to the point is <= radius_km (insertion order)."""
        r = float(radius_km)
        if r < 0 or not self._entries:
            return []
        origin = GeoPoint(latitude=float(latitude), longitude=float(longitude))
        hits = [e for e in self._candidates(origin.latitude, origin.longitude, r) if haversine_km(origin, e) <= r]
        hits.sort(key=lambda e: e.seq)
        return [e.item for e in hits]
