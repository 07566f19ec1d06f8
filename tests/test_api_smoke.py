import json

import pytest
from starlette.testclient import TestClient

from streetbite.api.app import app
from streetbite.catalog.store import InMemoryVendorStore
from streetbite.domain.models import Coordinate, MenuEntry, Vendor


def _seed_store() -> InMemoryVendorStore:
    menu = tuple(MenuEntry(name=f"Item {i}", price=20 + i) for i in range(4))
    return InMemoryVendorStore(
        [
            Vendor(
                id="v1",
                name="Raju Chaat Corner",
                food_type="Chaat",
                coordinates=Coordinate(latitude=12.97, longitude=77.59),
                address="MG Road",
                menu=menu,
                availability=True,
                is_verified=True,
            ),
            Vendor(
                id="v2",
                name="Momo Express",
                food_type="Momos",
                coordinates=Coordinate(latitude=13.05, longitude=77.60),
                address="Koramangala",
                menu=menu[:1],
                availability=True,
            ),
            Vendor(
                id="v3",
                name="Closed Cart",
                food_type="Chaat",
                coordinates=Coordinate(latitude=12.97, longitude=77.60),
                address="Church Street",
                menu=menu[:1],
                availability=False,
            ),
        ]
    )


@pytest.fixture
def client(monkeypatch):
    # Patch the cached store factory so API tests run against an in-memory catalog.
    import streetbite.api.routes as routes

    store = _seed_store()
    monkeypatch.setattr(routes, "_store", lambda: store)
    with TestClient(app) as c:
        yield c


def test_search_endpoint_sorts_by_distance(client):
    resp = client.get("/api/vendors", params={"lat": 12.97, "lon": 77.60})
    assert resp.status_code == 200
    data = resp.json()

    assert [r["vendor"]["id"] for r in data] == ["v3", "v1", "v2"]
    assert data[1]["distance_km"] == pytest.approx(1.05, abs=0.05)
    assert data[1]["vendor"]["foodType"] == "Chaat"


def test_search_endpoint_filters_and_radius(client):
    resp = client.get(
        "/api/vendors",
        params={"lat": 12.97, "lon": 77.60, "radius_km": 2, "available_only": True, "q": "chaat"},
    )
    assert [r["vendor"]["id"] for r in resp.json()] == ["v1"]


def test_search_endpoint_requires_both_coordinates(client):
    resp = client.get("/api/vendors", params={"lat": 12.97})
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "VALIDATION_ERROR"


def test_recommendations_endpoint(client):
    resp = client.get("/api/recommendations", params={"lat": 12.97, "lon": 77.60, "top_n": 5})
    assert resp.status_code == 200
    data = resp.json()

    assert [r["candidate"]["vendor"]["id"] for r in data] == ["v1", "v2"]
    assert data[0]["candidate"]["score"] == 80
    assert data[0]["reason"] == "Nearby location • Verified vendor • Wide menu selection"


def test_recommendations_endpoint_trending_and_overrides(client):
    overrides = json.dumps({"ranking": {"trending_points": 100}})
    resp = client.get(
        "/api/recommendations",
        params={"lat": 12.97, "lon": 77.60, "trending": "Momos", "settings_overrides": overrides},
    )
    assert resp.status_code == 200
    assert resp.json()[0]["candidate"]["vendor"]["id"] == "v2"

    bad = client.get("/api/recommendations", params={"settings_overrides": json.dumps({"catalog": {"path": "x"}})})
    assert bad.status_code == 400


def test_stats_and_trending_endpoints(client):
    stats = client.get("/api/stats").json()
    assert stats["total_count"] == 3
    assert stats["verified_count"] == 1
    assert stats["available_count"] == 2
    assert stats["category_histogram"] == {"Chaat": 2, "Momos": 1}
    assert stats["availability_breakdown"] == {"Open": 2, "Closed": 1}

    assert client.get("/api/trending").json() == {"food_types": ["Chaat", "Momos"]}


def test_register_verify_and_move_vendor(client):
    payload = {
        "name": "Amma's Dosa Cart",
        "foodType": "South Indian",
        "coordinates": {"latitude": 12.9784, "longitude": 77.6408},
        "address": "Indiranagar",
        "menu": [{"name": "Masala Dosa", "price": 70}],
    }
    created = client.post("/api/vendors", json=payload)
    assert created.status_code == 201
    vendor_id = created.json()["id"]
    assert created.json()["isVerified"] is False

    verified = client.post(f"/api/vendors/{vendor_id}/verify")
    assert verified.json()["isVerified"] is True

    moved = client.post(f"/api/vendors/{vendor_id}/location", json={"latitude": 12.97, "longitude": 77.601})
    assert moved.status_code == 200
    hits = client.get("/api/vendors", params={"lat": 12.97, "lon": 77.601, "radius_km": 0.5}).json()
    assert vendor_id in [h["vendor"]["id"] for h in hits]

    closed = client.post(f"/api/vendors/{vendor_id}/availability", json={"available": False})
    assert closed.json()["availability"] is False

    menu = client.post(f"/api/vendors/{vendor_id}/menu", json={"name": "Idli", "price": 40})
    assert [m["name"] for m in menu.json()["menu"]] == ["Masala Dosa", "Idli"]


def test_register_and_update_errors(client):
    bad = client.post(
        "/api/vendors",
        json={
            "name": "x",
            "foodType": "y",
            "coordinates": {"latitude": 1, "longitude": 1},
            "address": "z",
            "menu": [],
        },
    )
    assert bad.status_code == 400
    assert bad.json()["detail"]["code"] == "VALIDATION_ERROR"

    missing = client.post("/api/vendors/nope/verify")
    assert missing.status_code == 404
    assert missing.json()["detail"]["code"] == "VENDOR_NOT_FOUND"


def test_healthz(client):
    assert client.get("/healthz").json() == {"status": "ok"}


def test_get_single_vendor(client):
    resp = client.get("/api/vendors/v1")
    assert resp.status_code == 200
    assert resp.json()["name"] == "Raju Chaat Corner"
    assert resp.json()["foodType"] == "Chaat"

    missing = client.get("/api/vendors/nope")
    assert missing.status_code == 404
    assert missing.json()["detail"]["code"] == "VENDOR_NOT_FOUND"


def test_search_endpoint_applies_proximity_overrides(client):
    overrides = json.dumps({"proximity": {"default_radius_km": 2.0}})
    resp = client.get("/api/vendors", params={"lat": 12.97, "lon": 77.60, "settings_overrides": overrides})
    assert resp.status_code == 200
    assert [r["vendor"]["id"] for r in resp.json()] == ["v3", "v1"]

    bad = client.get("/api/vendors", params={"settings_overrides": json.dumps({"app": {"name": "x"}})})
    assert bad.status_code == 400
    assert bad.json()["detail"]["code"] == "VALIDATION_ERROR"
