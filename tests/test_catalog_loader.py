import json

import pytest
from pydantic import ValidationError

from streetbite.catalog.loader import load_live_reports, load_vendors, parse_live_reports, parse_vendors
from streetbite.config.settings import get_settings
from streetbite.domain.models import Coordinate, Vendor
from streetbite.quality.report import build_quality_report, catalog_issues, live_report_issues

VENDORS_PAYLOAD = [
    {
        "id": "v1",
        "name": "Raju Chaat Corner",
        "foodType": "Chaat",
        "coordinates": {"latitude": 12.97, "longitude": 77.59},
        "address": "MG Road",
        "menu": [{"name": "Pani Puri", "price": 40, "currency": "INR"}],
        "availability": True,
        "isVerified": True,
    },
    {
        "id": "v2",
        "name": "Momo Express",
        "foodType": "Momos",
        "coordinates": {"latitude": 12.93, "longitude": 77.62},
        "address": "",
        "menu": [],
        "availability": False,
        "isVerified": False,
    },
]


@pytest.fixture
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_parse_vendors_accepts_store_field_names():
    vendors = parse_vendors(VENDORS_PAYLOAD)

    assert [v.id for v in vendors] == ["v1", "v2"]
    assert vendors[0].food_type == "Chaat"
    assert vendors[0].is_verified is True
    assert vendors[0].menu[0].price == 40


def test_parse_vendors_rejects_out_of_range_coordinates():
    bad = [{**VENDORS_PAYLOAD[0], "coordinates": {"latitude": 123.0, "longitude": 0.0}}]
    with pytest.raises(ValidationError):
        parse_vendors(bad)


def test_parse_live_reports_accepts_pairs_and_objects():
    reports = parse_live_reports(
        [
            ["v1", {"latitude": 1.0, "longitude": 2.0}],
            {"vendorId": "v2", "coordinates": {"latitude": 3.0, "longitude": 4.0}},
        ]
    )

    assert [r.vendor_id for r in reports] == ["v1", "v2"]
    assert reports[0].coordinates == Coordinate(latitude=1.0, longitude=2.0)


def test_load_files_from_disk(tmp_path):
    vendors_path = tmp_path / "vendors.json"
    vendors_path.write_text(json.dumps(VENDORS_PAYLOAD), encoding="utf-8")

    assert len(load_vendors(vendors_path)) == 2
    assert load_live_reports(None) == []
    assert load_live_reports(tmp_path / "missing.json") == []


def test_catalog_and_live_report_issues():
    vendors = parse_vendors(VENDORS_PAYLOAD) + [
        Vendor(id="v1", name="Dup", food_type="Chaat", coordinates=Coordinate(latitude=0, longitude=0), address="x")
    ]
    codes = {i.code: i for i in catalog_issues(vendors)}

    assert codes["CATALOG_DUPLICATE_ID"].sample == ["v1"]
    assert codes["CATALOG_MISSING_ADDRESS"].sample == ["v2"]
    assert codes["CATALOG_EMPTY_MENU"].count == 2

    reports = parse_live_reports([["ghost", {"latitude": 0, "longitude": 0}], ["v1", {"latitude": 0, "longitude": 0}]])
    live_codes = [i.code for i in live_report_issues(vendors, reports)]
    assert live_codes == ["LIVE_UNKNOWN_VENDOR"]


def test_build_quality_report_from_configured_files(monkeypatch, tmp_path, _fresh_settings):
    vendors_path = tmp_path / "vendors.json"
    vendors_path.write_text(json.dumps(VENDORS_PAYLOAD), encoding="utf-8")
    live_path = tmp_path / "live.json"
    live_path.write_text(json.dumps([["v1", {"latitude": 1, "longitude": 1}]] * 2), encoding="utf-8")
    monkeypatch.setenv("STREETBITE_CATALOG_PATH", str(vendors_path))
    monkeypatch.setenv("STREETBITE_LIVE_LOCATIONS_PATH", str(live_path))

    report = build_quality_report(get_settings())

    assert report["counts"] == {"vendors": 2, "live_reports": 2}
    assert report["overall"]["severity"] == "warning"
    assert {i["code"] for i in report["issues"]} == {
        "CATALOG_MISSING_ADDRESS",
        "CATALOG_EMPTY_MENU",
        "LIVE_MULTIPLE_REPORTS",
    }


def test_build_quality_report_flags_unloadable_catalog(monkeypatch, tmp_path, _fresh_settings):
    monkeypatch.setenv("STREETBITE_CATALOG_PATH", str(tmp_path / "missing.json"))

    report = build_quality_report(get_settings())

    assert report["overall"]["severity"] == "error"
    assert report["issues"][0]["code"] == "CATALOG_LOAD_FAILED"
