from __future__ import annotations

# This module is the "orchestrator" for vendor recommendations.
# It wires together:
# - proximity search (availability filter + distances from the origin)
# - factor scoring (proximity tier, verification, menu size, trending)
# - final ranking with a deterministic tie-break + Top-N truncation
#
# The trending signal is an explicit input (a set of vendor ids and/or food types),
# so identical inputs always produce identical rankings. `random_trending` rebuilds the
# "random variety" behaviour from a caller-owned, seedable random source.

import logging
import math
import random
from typing import Collection, Iterable, Sequence

from streetbite.config.settings import RankingSettings, get_settings
from streetbite.core.geo import SupportsLatLon
from streetbite.domain.models import ScoredCandidate, Vendor
from streetbite.proximity.search import food_type_options, is_available, search
from streetbite.recommender.factors import (
    FactorResult,
    score_menu_size,
    score_proximity,
    score_trending,
    score_verification,
)

logger = logging.getLogger(__name__)


def _settings_or_default(settings: RankingSettings | None) -> RankingSettings:
    return settings if settings is not None else get_settings().ranking


def random_trending(
    catalog: Sequence[Vendor],
    rng: random.Random,
    *,
    probability: float | None = None,
    settings: RankingSettings | None = None,
) -> set[str]:
    """Pick a random subset of available vendor ids to boost.

    One draw per available vendor, in catalog order; the same seed reproduces the same set.
    """
    p = _settings_or_default(settings).trending_probability if probability is None else float(probability)
    return {v.id for v in catalog if v.availability and rng.random() < p}


def trending_food_types(catalog: Iterable[Vendor], limit: int | None = None) -> list[str]:
    """Distinct food types in first-seen catalog order, truncated to `limit`."""
    if limit is None:
        limit = get_settings().ranking.trending_limit_default
    if limit <= 0:
        return []
    return food_type_options(catalog)[:limit]


def score_vendor(
    vendor: Vendor,
    distance_km: float | None,
    *,
    trending: Collection[str],
    settings: RankingSettings,
    unlocated: bool = False,
) -> ScoredCandidate:
    """Apply every factor to one vendor and collect points + reasons in a fixed order.

    `unlocated` marks a vendor whose distance from a given origin could not be computed;
    it gets the lowest tier rather than the no-origin score.
    """
    proximity_input = math.nan if unlocated else distance_km
    factors: list[FactorResult] = [
        score_proximity(proximity_input, settings=settings),
        score_verification(vendor, settings=settings),
        score_menu_size(vendor, settings=settings),
        score_trending(vendor, trending=trending, settings=settings),
    ]
    applied = [f for f in factors if f.applied]
    return ScoredCandidate(
        vendor=vendor,
        distance_km=distance_km,
        score=sum(f.points for f in applied),
        reason_trail=[f.reason for f in applied if f.reason],
        components={f.name: f.points for f in applied},
    )


def rank(
    catalog: Sequence[Vendor],
    origin: SupportsLatLon | None = None,
    top_n: int | None = None,
    *,
    trending: Collection[str] | None = None,
    settings: RankingSettings | None = None,
) -> list[ScoredCandidate]:
    """Score available vendors and return the Top-N (score desc, vendor id asc)."""
    settings = _settings_or_default(settings)
    limit = int(top_n if top_n is not None else settings.top_n_default)
    if limit <= 0:
        return []
    trending = trending or frozenset()

    hits = search(catalog, origin, predicate=is_available())
    scored = [
        score_vendor(
            h.vendor,
            h.distance_km,
            trending=trending,
            settings=settings,
            unlocated=origin is not None and h.distance_km is None,
        )
        for h in hits
    ]
    scored.sort(key=lambda c: (-c.score, c.vendor.id))

    logger.debug("Ranked %d available vendors (of %d); returning top %d", len(scored), len(catalog), limit)
    return scored[:limit]
