"""
Live-location overlay.

Vendors move during the day; the location feed reports their current position
independently of the stored catalog. `merge_live_locations` overlays those
reports onto a catalog snapshot for presentation. Nothing is written back:
the stored records keep their registered coordinates.
"""

from __future__ import annotations

import logging
from typing import Sequence

from streetbite.domain.models import Coordinate, LiveLocationReport, Vendor

logger = logging.getLogger(__name__)


def latest_locations(reports: Sequence[LiveLocationReport]) -> dict[str, Coordinate]:
    """Collapse reports to one coordinate per vendor id (last report wins)."""
    latest: dict[str, Coordinate] = {}
    for report in reports:
        latest[report.vendor_id] = report.coordinates
    return latest


def merge_live_locations(catalog: Sequence[Vendor], reports: Sequence[LiveLocationReport]) -> list[Vendor]:
    """Return a new catalog list with live coordinates applied (same order and length)."""
    latest = latest_locations(reports)
    if not latest:
        return list(catalog)

    merged: list[Vendor] = []
    matched: set[str] = set()
    for vendor in catalog:
        coords = latest.get(vendor.id)
        if coords is None:
            merged.append(vendor)
            continue
        matched.add(vendor.id)
        merged.append(vendor.model_copy(update={"coordinates": coords}))

    unmatched = len(latest) - len(matched)
    if unmatched:
        logger.debug("Dropped live reports for %d unknown vendor id(s).", unmatched)
    return merged
