"""
API routes.

Endpoints:
- GET  `/api/vendors`: proximity search (live locations applied).
- GET  `/api/vendors/{vendor_id}`: one vendor record.
- GET  `/api/recommendations`: ranked recommendations with reasons.
- GET  `/api/trending`: distinct food types.
- GET  `/api/stats`: operator dashboard statistics.
- GET  `/api/quality`: catalog data quality report.
- POST `/api/vendors`: register a vendor.
- POST `/api/vendors/{vendor_id}/verify|availability|location|menu`: vendor updates.
"""

from __future__ import annotations

import json
import logging
import random
from functools import lru_cache
from typing import Any

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from streetbite.catalog.loader import load_snapshot
from streetbite.catalog.merge import merge_live_locations
from streetbite.catalog.store import InMemoryVendorStore, VendorNotFoundError
from streetbite.config.overrides import apply_settings_overrides
from streetbite.config.settings import Settings, get_settings
from streetbite.core.geo import GeoPoint
from streetbite.domain.models import (
    CatalogStats,
    Coordinate,
    LiveLocationReport,
    MenuEntry,
    ProximityResult,
    ScoredCandidate,
    Vendor,
    VendorRegistration,
)
from streetbite.proximity.search import all_of, is_available, matches_food_type, matches_search_term, search
from streetbite.quality.report import build_quality_report
from streetbite.recommender.rank import random_trending, rank, trending_food_types
from streetbite.stats.aggregate import aggregate

logger = logging.getLogger(__name__)

router = APIRouter()


class AvailabilityUpdate(BaseModel):
    available: bool


class RecommendationOut(BaseModel):
    candidate: ScoredCandidate
    reason: str


@lru_cache
def _store() -> InMemoryVendorStore:
    """Process-wide store seeded from the configured catalog snapshot."""
    settings = get_settings()
    try:
        vendors, reports = load_snapshot(settings)
    except FileNotFoundError:
        logger.warning("Catalog file %s not found; starting with an empty store.", settings.catalog.path)
        vendors, reports = [], []
    store = InMemoryVendorStore(vendors)
    known = {v.id for v in vendors}
    for r in reports:
        if r.vendor_id in known:
            store.update_location(r.vendor_id, r.coordinates)
    return store


def _origin(lat: float | None, lon: float | None) -> GeoPoint | None:
    if lat is None and lon is None:
        return None
    if lat is None or lon is None:
        raise HTTPException(
            status_code=400,
            detail={"code": "VALIDATION_ERROR", "message": "lat and lon must be given together"},
        )
    return GeoPoint(latitude=lat, longitude=lon)


def _request_settings(settings_overrides: str | None) -> Settings:
    """Settings for one request, with an optional JSON `settings_overrides` object applied."""
    try:
        overrides: dict[str, Any] | None = json.loads(settings_overrides) if settings_overrides else None
        if overrides is not None and not isinstance(overrides, dict):
            raise ValueError("settings_overrides must be a JSON object")
        return apply_settings_overrides(get_settings(), overrides)
    except ValueError as e:
        raise _bad_request(e) from e


def _merged_catalog(store: InMemoryVendorStore) -> list[Vendor]:
    return merge_live_locations(store.snapshot(), store.live_locations())


def _not_found(e: VendorNotFoundError) -> HTTPException:
    return HTTPException(status_code=404, detail={"code": "VENDOR_NOT_FOUND", "message": str(e)})


def _bad_request(e: ValueError) -> HTTPException:
    return HTTPException(status_code=400, detail={"code": "VALIDATION_ERROR", "message": str(e)})


@router.get("/api/vendors", response_model=list[ProximityResult])
def get_vendors(
    q: str = "",
    food_type: str | None = None,
    available_only: bool = False,
    lat: float | None = Query(default=None, ge=-90, le=90),
    lon: float | None = Query(default=None, ge=-180, le=180),
    radius_km: float | None = Query(default=None, gt=0),
    settings_overrides: str | None = Query(default=None, description="JSON object of proximity overrides"),
) -> list[ProximityResult]:
    """Search vendors; nearest first when an origin is given."""
    settings = _request_settings(settings_overrides)
    predicate = all_of(
        matches_search_term(q),
        matches_food_type(food_type),
        is_available() if available_only else None,
    )
    radius = radius_km if radius_km is not None else settings.proximity.default_radius_km
    return search(
        _merged_catalog(_store()),
        _origin(lat, lon),
        predicate=predicate,
        radius_km=radius,
        settings=settings.proximity,
    )


@router.get("/api/recommendations", response_model=list[RecommendationOut])
def get_recommendations(
    lat: float | None = Query(default=None, ge=-90, le=90),
    lon: float | None = Query(default=None, ge=-180, le=180),
    top_n: int | None = Query(default=None, ge=1, le=50),
    trending: list[str] | None = Query(default=None),
    seed: int | None = None,
    settings_overrides: str | None = Query(default=None, description="JSON object of ranking overrides"),
) -> list[RecommendationOut]:
    """Rank open vendors; `seed` adds a reproducible random trending boost."""
    settings = _request_settings(settings_overrides)

    catalog = _merged_catalog(_store())
    boost = set(trending or [])
    if seed is not None:
        boost |= random_trending(catalog, random.Random(seed), settings=settings.ranking)
    results = rank(catalog, _origin(lat, lon), top_n, trending=boost, settings=settings.ranking)
    return [RecommendationOut(candidate=c, reason=c.reason) for c in results]


@router.get("/api/trending")
def get_trending(limit: int | None = Query(default=None, ge=1, le=50)) -> dict:
    return {"food_types": trending_food_types(_store().snapshot(), limit)}


@router.get("/api/stats")
def get_stats() -> dict:
    """Operator dashboard payload (raw catalog, live locations not applied)."""
    stats: CatalogStats = aggregate(_store().snapshot())
    return stats.as_dict()


@router.get("/api/quality")
def get_quality() -> dict:
    return build_quality_report(get_settings())


@router.get("/api/vendors/{vendor_id}", response_model=Vendor)
def get_vendor(vendor_id: str) -> Vendor:
    """One stored vendor record (live location not applied)."""
    vendor = _store().get(vendor_id)
    if vendor is None:
        raise _not_found(VendorNotFoundError(vendor_id))
    return vendor


@router.post("/api/vendors", response_model=Vendor, status_code=201)
def post_vendor(registration: VendorRegistration) -> Vendor:
    try:
        return _store().register(registration)
    except ValueError as e:
        raise _bad_request(e) from e


@router.post("/api/vendors/{vendor_id}/verify", response_model=Vendor)
def post_verify(vendor_id: str) -> Vendor:
    try:
        return _store().verify(vendor_id)
    except VendorNotFoundError as e:
        raise _not_found(e) from e


@router.post("/api/vendors/{vendor_id}/availability", response_model=Vendor)
def post_availability(vendor_id: str, update: AvailabilityUpdate) -> Vendor:
    try:
        return _store().set_availability(vendor_id, update.available)
    except VendorNotFoundError as e:
        raise _not_found(e) from e


@router.post("/api/vendors/{vendor_id}/location", response_model=LiveLocationReport)
def post_location(vendor_id: str, coordinates: Coordinate) -> LiveLocationReport:
    try:
        return _store().update_location(vendor_id, coordinates)
    except VendorNotFoundError as e:
        raise _not_found(e) from e


@router.post("/api/vendors/{vendor_id}/menu", response_model=Vendor)
def post_menu_item(vendor_id: str, item: MenuEntry) -> Vendor:
    try:
        return _store().add_menu_item(vendor_id, item)
    except VendorNotFoundError as e:
        raise _not_found(e) from e
    except ValueError as e:
        raise _bad_request(e) from e
