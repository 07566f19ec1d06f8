"""
Small explainability formatting helpers.

Used by the CLI to print compact summaries of search and recommendation results.
"""

from __future__ import annotations

from streetbite.domain.models import ScoredCandidate


def format_distance_km(distance_km: float | None) -> str:
    """Render a distance the way vendor cards show it ("1.2 km away")."""
    if distance_km is None:
        return "distance unknown"
    return f"{distance_km:.1f} km away"


def one_line_summary(candidate: ScoredCandidate) -> str:
    """Render a compact single-line summary for a scored candidate."""
    parts = [f"score={candidate.score:g}"]
    for name, points in candidate.components.items():
        parts.append(f"{name}=+{points:g}")
    if candidate.distance_km is not None:
        parts.append(format_distance_km(candidate.distance_km))
    return " | ".join(parts)
