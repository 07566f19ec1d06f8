# src/streetbite/recommender/factors.py
"""
Recommendation factors (vendor-level).

Each factor looks at one signal and returns the points it contributes plus a short
human-readable reason. A factor either awards its (non-negative) points or awards
nothing, so meeting a condition can only raise a vendor's total.

Point values and reason texts come from `RankingSettings` (config-driven).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Collection

from streetbite.config.settings import RankingSettings
from streetbite.domain.models import Vendor


@dataclass(frozen=True)
class FactorResult:
    """Points awarded by one factor, plus the reason shown to the user (None when nothing applies)."""

    name: str
    points: float
    reason: str | None

    @property
    def applied(self) -> bool:
        return self.reason is not None


_NOT_APPLIED_POINTS = 0.0


def score_proximity(distance_km: float | None, *, settings: RankingSettings) -> FactorResult:
    """Base score: the first distance tier the vendor falls into, or a flat score without an origin."""
    if distance_km is None:
        return FactorResult("proximity", float(settings.no_origin_points), settings.no_origin_reason)
    for tier in settings.proximity_tiers:
        if distance_km < tier.max_km:
            return FactorResult("proximity", float(tier.points), tier.reason)
    return FactorResult("proximity", float(settings.beyond_tiers_points), settings.beyond_tiers_reason)


def score_verification(vendor: Vendor, *, settings: RankingSettings) -> FactorResult:
    if vendor.is_verified:
        return FactorResult("verified", float(settings.verified_points), settings.verified_reason)
    return FactorResult("verified", _NOT_APPLIED_POINTS, None)


def score_menu_size(vendor: Vendor, *, settings: RankingSettings) -> FactorResult:
    if len(vendor.menu) >= settings.wide_menu_min_items:
        return FactorResult("wide_menu", float(settings.wide_menu_points), settings.wide_menu_reason)
    return FactorResult("wide_menu", _NOT_APPLIED_POINTS, None)


def score_trending(vendor: Vendor, *, trending: Collection[str], settings: RankingSettings) -> FactorResult:
    """Trending boost for vendors whose id or food type is in the supplied trending set."""
    if vendor.id in trending or vendor.food_type in trending:
        return FactorResult("trending", float(settings.trending_points), settings.trending_reason)
    return FactorResult("trending", _NOT_APPLIED_POINTS, None)
