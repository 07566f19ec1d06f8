"""
Proximity search over a (merged) vendor catalog.

`search` is a pure function of its inputs:
1. filter by an optional predicate (search term, food type, availability, ...),
2. when an origin is given, annotate each vendor with its distance, drop anything
   beyond `radius_km`, and sort ascending by distance (ties by vendor id),
3. without an origin, keep catalog order and report no distances.

Catalogs in this domain are small and refreshed every few seconds, so the default
is a linear filter + sort per call. Large filtered catalogs with a radius are
pre-filtered through `SpatialGridIndex`, which returns the same vendors the scan
would.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Iterable, Sequence

from streetbite.config.settings import ProximitySettings
from streetbite.core.geo import SupportsLatLon, haversine_km
from streetbite.core.spatial_index import SpatialGridIndex
from streetbite.domain.models import ProximityResult, Vendor

logger = logging.getLogger(__name__)

VendorPredicate = Callable[[Vendor], bool]


def matches_search_term(term: str | None) -> VendorPredicate:
    """Case-insensitive substring match on vendor name or food type ("" matches all)."""
    needle = (term or "").strip().lower()

    def _pred(vendor: Vendor) -> bool:
        if not needle:
            return True
        return needle in vendor.name.lower() or needle in vendor.food_type.lower()

    return _pred


def matches_food_type(food_type: str | None) -> VendorPredicate:
    """Exact food-type match; None or "all" matches every vendor."""

    def _pred(vendor: Vendor) -> bool:
        if food_type is None or food_type == "all":
            return True
        return vendor.food_type == food_type

    return _pred


def is_available() -> VendorPredicate:
    return lambda vendor: vendor.availability


def all_of(*predicates: VendorPredicate | None) -> VendorPredicate:
    active = [p for p in predicates if p is not None]
    return lambda vendor: all(p(vendor) for p in active)


def food_type_options(catalog: Iterable[Vendor]) -> list[str]:
    """Distinct food types in first-seen order (used for filter dropdowns)."""
    return list(dict.fromkeys(v.food_type for v in catalog))


def _within_radius(
    candidates: list[Vendor], origin: SupportsLatLon, radius_km: float, settings: ProximitySettings
) -> list[Vendor]:
    if len(candidates) < settings.grid_index_min_catalog_size:
        return candidates
    logger.debug("Using grid index for %d candidates (radius=%.2fkm)", len(candidates), radius_km)
    index = SpatialGridIndex(
        candidates,
        get_latlon=lambda v: (v.coordinates.latitude, v.coordinates.longitude),
        cell_size_km=settings.grid_cell_size_km,
    )
    return index.query_within(latitude=origin.latitude, longitude=origin.longitude, radius_km=radius_km)


def _distance_order(result: ProximityResult) -> tuple[bool, float, str]:
    # Unknown distances sort after every known one.
    d = result.distance_km
    return (d is None, d if d is not None else 0.0, result.vendor.id)


def search(
    catalog: Sequence[Vendor],
    origin: SupportsLatLon | None = None,
    *,
    predicate: VendorPredicate | None = None,
    radius_km: float | None = None,
    settings: ProximitySettings | None = None,
) -> list[ProximityResult]:
    """Return predicate-filtered vendors, distance-annotated and sorted when an origin is given.

    `radius_km` only applies when `origin` is present (a distance is needed to compare against).
    """
    settings = settings or ProximitySettings()
    candidates = [v for v in catalog if predicate is None or predicate(v)]

    if origin is None:
        return [ProximityResult(vendor=v, distance_km=None) for v in candidates]

    if radius_km is not None:
        candidates = _within_radius(candidates, origin, float(radius_km), settings)

    results: list[ProximityResult] = []
    for vendor in candidates:
        d = haversine_km(origin, vendor.coordinates)
        if radius_km is not None and not d <= radius_km:
            continue
        # Non-finite coordinates give no usable distance: report it as unknown.
        results.append(ProximityResult(vendor=vendor, distance_km=d if math.isfinite(d) else None))

    results.sort(key=_distance_order)
    return results
