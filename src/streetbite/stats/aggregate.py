"""
Administrative catalog statistics.

Runs over the raw catalog (live locations play no part) in a single pass.
"""

from __future__ import annotations

from typing import Iterable

from streetbite.domain.models import CatalogStats, Vendor


def aggregate(catalog: Iterable[Vendor]) -> CatalogStats:
    """Count vendors, verified/available vendors, and vendors per food type (first-seen key order)."""
    total = 0
    verified = 0
    available = 0
    histogram: dict[str, int] = {}

    for v in catalog:
        total += 1
        if v.is_verified:
            verified += 1
        if v.availability:
            available += 1
        histogram[v.food_type] = histogram.get(v.food_type, 0) + 1

    return CatalogStats(
        total_count=total,
        verified_count=verified,
        available_count=available,
        category_histogram=histogram,
    )
