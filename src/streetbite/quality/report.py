"""
Offline data quality report utilities.

Goal: provide a deterministic, network-free view of "is our catalog snapshot sane?"
The engine tolerates every issue listed here (unknown live-report ids are dropped,
duplicates are passed through); the report exists so operators can fix the data.
Used by:
- CLI debugging
- API status endpoint
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Any, Sequence

from pydantic import ValidationError

from streetbite.catalog.loader import load_snapshot
from streetbite.config.settings import Settings
from streetbite.core.env import resolve_project_path
from streetbite.domain.models import LiveLocationReport, Vendor

logger = logging.getLogger(__name__)

_SEVERITY_RANK = {"error": 3, "warning": 2, "info": 1}


@dataclass(frozen=True)
class Issue:
    severity: str  # "info" | "warning" | "error"
    code: str
    message: str
    count: int = 1
    sample: list[str] | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "severity": self.severity,
            "code": self.code,
            "message": self.message,
            "count": int(self.count),
            "sample": list(self.sample or []),
        }


def _issue_if(ids: list[str], *, severity: str, code: str, message: str) -> list[Issue]:
    if not ids:
        return []
    return [Issue(severity=severity, code=code, message=message, count=len(ids), sample=ids[:8])]


def catalog_issues(vendors: Sequence[Vendor]) -> list[Issue]:
    issues: list[Issue] = []
    counts = Counter(v.id for v in vendors)
    dup = sorted(i for i, n in counts.items() if n > 1)
    issues += _issue_if(dup, severity="error", code="CATALOG_DUPLICATE_ID", message="Duplicate vendor ids in catalog.")
    issues += _issue_if(
        [v.id for v in vendors if not v.food_type.strip()],
        severity="warning",
        code="CATALOG_MISSING_FOOD_TYPE",
        message="Some vendors have a blank food type.",
    )
    issues += _issue_if(
        [v.id for v in vendors if not v.address.strip()],
        severity="warning",
        code="CATALOG_MISSING_ADDRESS",
        message="Some vendors have a blank address.",
    )
    issues += _issue_if(
        [v.id for v in vendors if not v.menu],
        severity="info",
        code="CATALOG_EMPTY_MENU",
        message="Some vendors have no menu items.",
    )
    return issues


def live_report_issues(vendors: Sequence[Vendor], reports: Sequence[LiveLocationReport]) -> list[Issue]:
    known = {v.id for v in vendors}
    unmatched = sorted({r.vendor_id for r in reports if r.vendor_id not in known})
    counts = Counter(r.vendor_id for r in reports)
    repeated = sorted(i for i, n in counts.items() if n > 1)
    return [
        *_issue_if(
            unmatched,
            severity="warning",
            code="LIVE_UNKNOWN_VENDOR",
            message="Live reports reference vendor ids missing from the catalog (ignored).",
        ),
        *_issue_if(
            repeated,
            severity="info",
            code="LIVE_MULTIPLE_REPORTS",
            message="Several live reports for one vendor (the last one wins).",
        ),
    ]


def worst_severity(issues: Sequence[Issue]) -> str:
    worst = "info"
    for i in issues:
        if _SEVERITY_RANK.get(i.severity, 0) > _SEVERITY_RANK.get(worst, 0):
            worst = i.severity
    return worst


def build_quality_report(settings: Settings) -> dict[str, Any]:
    catalog_path = resolve_project_path(settings.catalog.path)
    live_path = settings.catalog.live_locations_path

    issues: list[Issue]
    try:
        vendors, reports = load_snapshot(settings)
    except (OSError, ValueError, ValidationError) as e:
        logger.warning("Catalog snapshot failed to load: %s", e)
        issues = [Issue(severity="error", code="CATALOG_LOAD_FAILED", message=str(e))]
        vendors, reports = [], []
    else:
        issues = [*catalog_issues(vendors), *live_report_issues(vendors, reports)]

    return {
        "overall": {"severity": worst_severity(issues), "issue_count": len(issues)},
        "paths": {
            "catalog_path": str(catalog_path),
            "live_locations_path": str(resolve_project_path(live_path)) if live_path else None,
        },
        "counts": {"vendors": len(vendors), "live_reports": len(reports)},
        "issues": [i.as_dict() for i in issues],
    }
