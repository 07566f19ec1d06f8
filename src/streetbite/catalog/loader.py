"""
Vendor catalog + live-location snapshot loader.

The catalog provider hands the engine a JSON snapshot (default:
`data/catalogs/vendors.json`) and, on its own cadence, a snapshot of live
location reports. Both are validated into typed Pydantic models here so the
engine can assume a consistent shape.

Live reports are accepted in two JSON shapes:
- objects: `[{"vendorId": "v1", "coordinates": {"latitude": .., "longitude": ..}}]`
- pairs, as the store's live-location query returns them: `[["v1", {"latitude": .., "longitude": ..}]]`
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter

from streetbite.config.settings import Settings
from streetbite.core.env import resolve_project_path
from streetbite.domain.models import Coordinate, LiveLocationReport, Vendor

_VENDORS_ADAPTER = TypeAdapter(list[Vendor])
_REPORTS_ADAPTER = TypeAdapter(list[LiveLocationReport])


def parse_vendors(payload: Any) -> list[Vendor]:
    """Validate a decoded JSON payload into vendors."""
    return _VENDORS_ADAPTER.validate_python(payload)


def parse_live_reports(payload: Any) -> list[LiveLocationReport]:
    """Validate a decoded JSON payload into live location reports (objects or id/coordinate pairs)."""
    normalized: list[Any] = []
    for entry in payload or []:
        if isinstance(entry, (list, tuple)) and len(entry) == 2:
            vendor_id, coords = entry
            normalized.append({"vendorId": vendor_id, "coordinates": Coordinate.model_validate(coords)})
        else:
            normalized.append(entry)
    return _REPORTS_ADAPTER.validate_python(normalized)


def load_vendors(path: str | Path) -> list[Vendor]:
    """Load and validate a vendor catalog JSON file."""
    resolved = resolve_project_path(path)
    return parse_vendors(json.loads(resolved.read_text(encoding="utf-8")))


def load_live_reports(path: str | Path | None) -> list[LiveLocationReport]:
    """Load live reports; a missing path or file means "no live updates yet"."""
    if not path:
        return []
    resolved = resolve_project_path(path)
    if not resolved.is_file():
        return []
    return parse_live_reports(json.loads(resolved.read_text(encoding="utf-8")))


def load_snapshot(settings: Settings) -> tuple[list[Vendor], list[LiveLocationReport]]:
    """Load the configured catalog and live-location snapshots."""
    vendors = load_vendors(settings.catalog.path)
    reports = load_live_reports(settings.catalog.live_locations_path)
    return vendors, reports
