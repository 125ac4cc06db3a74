import httpx
import pytest
from fastapi.testclient import TestClient

from mca_shop_server import http_server
from mca_shop_server.config import Settings
from mca_shop_server.mca_client import MCAClient

BASE_URL = "http://backend.test"
PRODUCT = {"_id": "p2", "name": "Club Scarf", "price": 300, "category": "Accessories"}


@pytest.fixture
def api(backend, monkeypatch):
    def client_factory(base_url, timeout=30.0):
        return MCAClient(base_url, timeout=timeout, transport=httpx.MockTransport(backend))

    monkeypatch.setattr(http_server, "MCAClient", client_factory)
    monkeypatch.setattr(http_server, "settings", Settings(backend_url=BASE_URL))
    with TestClient(http_server.app) as test_client:
        yield test_client


def test_health(api):
    response = api.get("/health")
    assert response.json() == {"status": "healthy", "backend_status": "connected"}


def test_products_filtered_by_category(api):
    body = api.get("/products", params={"category": "Jerseys"}).json()
    assert body["count"] == 1
    assert body["products"][0]["id"] == "p1"


def test_cart_flow(api):
    response = api.post("/cart/add", json={"product_id": "p1", "quantity": 2, "color": "Red"})
    assert response.status_code == 200
    assert response.json()["cart"]["total"] == "1000"

    assert api.post("/cart/update", json={"product_id": "p1", "quantity": 1}).json()["item_count"] == 1
    assert api.post("/cart/update", json={"product_id": "zz", "quantity": 1}).status_code == 404
    assert api.post("/cart/add", json={"product_id": "zz"}).status_code == 404

    assert api.post("/cart/remove", json={"product_id": "p1"}).json()["success"] is True
    assert api.get("/cart").json()["items"] == []


def test_checkout_failure_keeps_cart(api, backend):
    backend.on("POST", "/api/public/orders", json={"message": "Out of stock"}, status=500)
    api.post("/cart/add", json={"product_id": "p2"})

    body = api.post(
        "/checkout",
        json={
            "client_name": "Amine",
            "wilaya": "Alger",
            "address": "12 Rue Didouche",
            "phone": "0550000000",
            "email": "amine@example.com",
        },
    ).json()

    assert body["success"] is False
    assert body["message"] == "Out of stock"
    assert body["cart"]["item_count"] == 1


def test_admin_endpoints(api):
    assert api.get("/admin/orders").status_code == 403
    assert api.post("/admin/login", json={"username": "mcaghassen", "password": "mca2005"}).status_code == 401

    navigate = api.post("/navigate", json={"fragment": "#mcaadmin2024"}).json()
    assert navigate["show_admin_login"] is True

    response = api.post("/admin/login", json={"username": "mcaghassen", "password": "mca2005"})
    assert response.status_code == 200
    assert api.get("/admin/orders").json() == {"count": 0, "orders": []}
    assert api.get("/admin/stats").json()["pendingOrders"] == 4

    api.post("/admin/logout")
    assert api.get("/admin/stats").status_code == 403


def test_cart_add_rejects_unavailable_variant(api):
    response = api.post("/cart/add", json={"product_id": "p1", "color": "Purple"})
    assert response.status_code == 400
    assert "Purple" in response.json()["detail"]

    assert api.post("/cart/add", json={"product_id": "p1", "quantity": 0}).status_code == 400
    assert api.get("/cart").json()["items"] == []


def test_cart_add_defaults_to_first_variant(api):
    api.post("/cart/add", json={"product_id": "p1"})

    item = api.get("/cart").json()["items"][0]
    assert (item["color"], item["size"]) == ("Red", "M")


def test_server_boots_with_malformed_products(backend, monkeypatch):
    backend.on("GET", "/api/public/products", json=[{"_id": "p1", "price": None}, PRODUCT])

    def client_factory(base_url, timeout=30.0):
        return MCAClient(base_url, timeout=timeout, transport=httpx.MockTransport(backend))

    monkeypatch.setattr(http_server, "MCAClient", client_factory)
    monkeypatch.setattr(http_server, "settings", Settings(backend_url=BASE_URL))
    with TestClient(http_server.app) as test_client:
        assert test_client.get("/products").json()["count"] == 1
