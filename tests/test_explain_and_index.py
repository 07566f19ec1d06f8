import pytest

from streetbite.core.spatial_index import SpatialGridIndex
from streetbite.domain.models import Coordinate, ScoredCandidate, Vendor
from streetbite.scoring.explain import format_distance_km, one_line_summary


def test_format_distance_km():
    assert format_distance_km(None) == "distance unknown"
    assert format_distance_km(0.04) == "0.0 km away"
    assert format_distance_km(1.26) == "1.3 km away"
    assert format_distance_km(12.0) == "12.0 km away"


def test_one_line_summary_lists_components():
    vendor = Vendor(id="v1", name="Cart", food_type="Chaat", coordinates=Coordinate(latitude=0, longitude=0))
    c = ScoredCandidate(
        vendor=vendor,
        distance_km=0.5,
        score=80,
        reason_trail=["Very close to you", "Verified vendor"],
        components={"proximity": 50, "verified": 30},
    )
    assert one_line_summary(c) == "score=80 | proximity=+50 | verified=+30 | 0.5 km away"


def test_grid_index_returns_items_in_insertion_order():
    points = [("far", 12.5, 77.5), ("b", 12.9701, 77.5901), ("a", 12.97, 77.59), ("c", 12.975, 77.595)]
    index = SpatialGridIndex(points, get_latlon=lambda p: (p[1], p[2]), cell_size_km=0.5)

    assert len(index) == 4
    hits = index.query_within(latitude=12.97, longitude=77.59, radius_km=1.0)
    assert [p[0] for p in hits] == ["b", "a", "c"]
    assert index.query_within(latitude=12.97, longitude=77.59, radius_km=-1) == []


def test_grid_index_rejects_non_positive_cell_size():
    with pytest.raises(ValueError, match="cell_size_km"):
        SpatialGridIndex([], get_latlon=lambda p: p, cell_size_km=0)
