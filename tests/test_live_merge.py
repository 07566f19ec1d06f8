from streetbite.catalog.merge import latest_locations, merge_live_locations
from streetbite.domain.models import Coordinate, LiveLocationReport, Vendor


def _vendor(vendor_id: str, lat: float = 12.97, lon: float = 77.59) -> Vendor:
    return Vendor(
        id=vendor_id,
        name=f"Vendor {vendor_id}",
        food_type="Chaat",
        coordinates=Coordinate(latitude=lat, longitude=lon),
    )


def _report(vendor_id: str, lat: float, lon: float) -> LiveLocationReport:
    return LiveLocationReport(vendor_id=vendor_id, coordinates=Coordinate(latitude=lat, longitude=lon))


def test_merge_replaces_coordinates_of_reported_vendors_only():
    catalog = [_vendor("a"), _vendor("b"), _vendor("c")]
    merged = merge_live_locations(catalog, [_report("b", 13.0, 77.7)])

    assert [v.id for v in merged] == ["a", "b", "c"]
    assert merged[0] is catalog[0]
    assert merged[1].coordinates == Coordinate(latitude=13.0, longitude=77.7)
    assert merged[1].name == catalog[1].name
    assert merged[2] is catalog[2]


def test_merge_last_report_wins():
    catalog = [_vendor("a")]
    reports = [_report("a", 1.0, 2.0), _report("a", 3.0, 4.0)]

    merged = merge_live_locations(catalog, reports)

    assert merged[0].coordinates == Coordinate(latitude=3.0, longitude=4.0)


def test_merge_ignores_unknown_vendor_ids_and_keeps_length():
    catalog = [_vendor("a"), _vendor("b")]
    merged = merge_live_locations(catalog, [_report("zzz", 1.0, 1.0)])

    assert len(merged) == len(catalog)
    assert merged == catalog


def test_merge_does_not_mutate_the_catalog():
    catalog = [_vendor("a", 12.0, 77.0)]
    merged = merge_live_locations(catalog, [_report("a", 13.0, 78.0)])

    assert catalog[0].coordinates == Coordinate(latitude=12.0, longitude=77.0)
    assert merged is not catalog
    assert merged[0].coordinates == Coordinate(latitude=13.0, longitude=78.0)


def test_merge_with_empty_inputs():
    assert merge_live_locations([], [_report("a", 1.0, 1.0)]) == []
    catalog = [_vendor("a")]
    assert merge_live_locations(catalog, []) == catalog


def test_latest_locations_collapses_per_vendor():
    latest = latest_locations([_report("a", 1.0, 1.0), _report("b", 2.0, 2.0), _report("a", 5.0, 5.0)])
    assert latest == {
        "a": Coordinate(latitude=5.0, longitude=5.0),
        "b": Coordinate(latitude=2.0, longitude=2.0),
    }
