import pytest
from fastapi.testclient import TestClient

from checkout_pricing.api.main import app
from checkout_pricing.api.state import get_catalog
from checkout_pricing.config import settings as settings_module
from checkout_pricing.config.settings import Settings
from checkout_pricing.data.catalog import Catalog


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(settings_module, "_settings", Settings())
    catalog = Catalog.load(Settings())
    app.dependency_overrides[get_catalog] = lambda: catalog
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "online"


def test_list_packages(client):
    response = client.get("/catalog/packages")
    assert response.status_code == 200
    slugs = [p["slug"] for p in response.json()]
    assert "author-launch-1" in slugs
    assert response.json()[0]["basePrice"] == 75_000


def test_list_addons_for_bundling_package(client):
    response = client.get("/catalog/addons", params={"package": "author-launch-3"})
    assert response.status_code == 200
    flags = {a["slug"]: a["isAutoIncluded"] for a in response.json()}
    assert flags["isbn-barcode"] is True
    assert flags["cover-design"] is False


def test_list_addons_unknown_package(client):
    assert client.get("/catalog/addons", params={"package": "nope"}).status_code == 404


def test_quote_selected(client):
    response = client.post("/quote", json={
        "package": "author-launch-1",
        "addons": ["cover-design", "isbn-barcode"],
        "has_cover_design": False,
        "has_formatting": True,
        "book_size": "A5",
        "paper_color": "cream",
        "lamination": "matt",
        "coupon_code": "WELCOME",
        "discount_amount": 10_000,
    })

    assert response.status_code == 200
    body = response.json()
    assert body["strategy"] == "selected"
    assert body["basePrice"] == 75_000
    assert body["addonTotal"] == 60_000
    assert body["totalPrice"] == 125_000
    assert body["configurationComplete"] is True
    assert body["metadata"]["couponCode"] == "WELCOME"
    assert body["metadata"]["totalPrice"] == body["totalPrice"]


def test_quote_bundled_isbn_not_charged(client):
    response = client.post("/quote", json={
        "package": "author-launch-2",
        "addons": ["isbn-barcode"],
    })

    body = response.json()
    assert body["totalPrice"] == 125_000
    assert body["addonBreakdown"] == []


def test_quote_scenario(client):
    response = client.post("/quote", json={
        "package": "author-launch-1",
        "addons": ["content-formatting"],
        "has_cover_design": False,
        "has_formatting": False,
        "word_count": 20_000,
        "strategy": "scenario",
    })

    body = response.json()
    assert body["strategy"] == "scenario"
    assert body["addonBreakdown"] == [
        {"name": "Cover Design", "price": 45_000},
        {"name": "Content Formatting", "price": 10_000},
    ]
    assert [a["source"] for a in body["metadata"]["addons"]] == ["scenario", "scenario"]
    assert body["totalPrice"] == 130_000


def test_quote_unknown_addon(client):
    response = client.post("/quote", json={"package": "author-launch-1", "addons": ["gold-leaf"]})
    assert response.status_code == 404
    assert "gold-leaf" in response.json()["detail"]


def test_quote_metadata_fits(client):
    response = client.post("/quote/metadata", params={"limit": 5_000}, json={"package": "author-launch-1"})
    assert response.status_code == 200
    assert response.json()["packageSlug"] == "author-launch-1"


def test_quote_metadata_too_large(client):
    response = client.post("/quote/metadata", params={"limit": 50}, json={"package": "author-launch-1"})
    assert response.status_code == 422
    assert "metadata too large for provider limits" in response.json()["detail"]
