import json

import httpx
import pytest

from mca_shop_server.config import DEFAULT_BACKEND_URL, Settings
from mca_shop_server.mca_client import MCABackendError
from mca_shop_server.models import OrderRequest, OrderStatus


async def test_list_products_parses_backend_ids(client):
    products = await client.list_products()
    assert [p.id for p in products] == ["p1", "p2"]
    assert products[0].colors == ["Red", "Green"]


async def test_comma_joined_variants_are_split(client, backend):
    backend.on(
        "GET",
        "/api/public/products",
        json=[{"_id": "p9", "name": "Cap", "price": 90, "colors": "Red, Blue", "sizes": None}],
    )
    products = await client.list_products()
    assert products[0].colors == ["Red", "Blue"]
    assert products[0].sizes == []


async def test_error_message_comes_from_body(client, backend):
    backend.on("GET", "/api/wilayas", json={"message": "Database unavailable"}, status=503)

    with pytest.raises(MCABackendError) as exc_info:
        await client.list_wilayas()
    assert exc_info.value.message == "Database unavailable"
    assert exc_info.value.status_code == 503


async def test_error_without_message_uses_status(client, backend):
    backend.on("DELETE", "/api/admin/orders/o1", handler=lambda r: httpx.Response(500, text="boom"))

    with pytest.raises(MCABackendError, match="HTTP 500"):
        await client.delete_order("o1")


async def test_unreachable_backend(client, backend):
    backend.offline = True

    with pytest.raises(MCABackendError) as exc_info:
        await client.ping()
    assert exc_info.value.status_code is None


async def test_place_order_posts_camel_case_payload(client, backend):
    backend.on("POST", "/api/public/orders", json={"success": True})
    order = OrderRequest(
        product_id="p1",
        product_name="Home Jersey 2025",
        product_price=500,
        client_name="Amine",
        wilaya="Alger",
        address="12 Rue Didouche",
        phone="0550000000",
        email="amine@example.com",
        quantity=2,
    )

    assert await client.place_order(order) == {"success": True}

    body = json.loads(backend.calls("POST", "/api/public/orders")[0].content)
    assert body["productId"] == "p1"
    assert body["clientName"] == "Amine"
    assert body["quantity"] == 2


async def test_create_product_sends_multipart(client, backend):
    backend.on("POST", "/api/admin/products", json={"_id": "p3"}, status=201)

    await client.create_product(
        {"name": "Sticker", "colors": "Red,Green"},
        [("a.png", b"png-a", "image/png"), ("b.png", b"png-b", "image/png")],
    )

    request = backend.calls("POST", "/api/admin/products")[0]
    assert request.headers["content-type"].startswith("multipart/form-data")
    assert request.content.count(b'name="photos"') == 2
    assert b"Red,Green" in request.content


async def test_save_hero_content_create_and_update(client, backend):
    backend.on("POST", "/api/admin/hero-content", json={"_id": "h1"})
    backend.on("PUT", "/api/admin/hero-content/h1", json={"_id": "h1"})

    await client.save_hero_content({"title": "New"}, media=("v.mp4", b"vid", "video/mp4"))
    await client.save_hero_content({"title": "Edited"}, content_id="h1")

    assert b'name="media"' in backend.calls("POST", "/api/admin/hero-content")[0].content
    assert b"Edited" in backend.calls("PUT", "/api/admin/hero-content/h1")[0].content


async def test_update_order_status(client, backend):
    backend.on("PUT", "/api/admin/orders/o1", json={"_id": "o1", "status": "shipped"})

    await client.update_order_status("o1", OrderStatus.SHIPPED)

    request = backend.calls("PUT", "/api/admin/orders/o1")[0]
    assert json.loads(request.content) == {"status": "shipped"}


async def test_list_orders_skips_malformed_entries(client, backend):
    backend.on(
        "GET",
        "/api/admin/orders",
        json=[
            {"_id": "o1", "clientName": "Amine", "status": "confirmed", "productPrice": 500},
            {"clientName": "missing id"},
        ],
    )
    orders = await client.list_orders()
    assert [o.id for o in orders] == ["o1"]
    assert orders[0].status == OrderStatus.CONFIRMED


async def test_dashboard_stats_defaults_fill_missing_fields(client):
    stats = await client.get_dashboard_stats()
    assert stats.pending_orders == 4
    assert stats.total_products == 2
    assert stats.new_customers == 1234


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("MCA_BACKEND_URL", "http://localhost:5000")
    monkeypatch.setenv("MCA_TIMEOUT", "5")
    monkeypatch.setenv("MCA_LOG_LEVEL", "debug")

    settings = Settings.from_env()
    assert settings.backend_url == "http://localhost:5000"
    assert settings.timeout == 5.0
    assert settings.log_level == "DEBUG"

    assert Settings.from_env("http://other").backend_url == "http://other"


def test_settings_defaults(monkeypatch):
    monkeypatch.delenv("MCA_BACKEND_URL", raising=False)
    assert Settings.from_env().backend_url == DEFAULT_BACKEND_URL


async def test_non_list_payloads_become_empty(client, backend):
    backend.on("GET", "/api/wilayas", json={"error": "maintenance"})
    backend.on("GET", "/api/admin/orders", handler=lambda r: httpx.Response(200, text="<html></html>"))

    assert await client.list_wilayas() == []
    assert await client.list_orders() == []


async def test_invalid_dashboard_stats_raise_backend_error(client, backend):
    backend.on("GET", "/api/admin/dashboard/stats", json={"growthRate": "fast"})

    with pytest.raises(MCABackendError, match="dashboard stats"):
        await client.get_dashboard_stats()
