"""Shared fixtures: a fake MCA backend behind httpx.MockTransport."""

from typing import Any, Callable, Optional, Union

import httpx
import pytest

from mca_shop_server.mca_client import MCAClient
from mca_shop_server.models import Product
from mca_shop_server.storefront import Storefront

BASE_URL = "http://backend.test"

Handler = Callable[[httpx.Request], httpx.Response]


class FakeBackend:
    """Routes (method, path) to canned responses and records every request."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Union[httpx.Response, Handler]] = {}
        self.requests: list[httpx.Request] = []
        self.offline = False

    def on(
        self,
        method: str,
        path: str,
        json: Any = None,
        status: int = 200,
        handler: Optional[Handler] = None,
    ) -> None:
        self.routes[(method, path)] = handler or httpx.Response(status, json=json)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.offline:
            raise httpx.ConnectError("Connection refused", request=request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": "Not found"})
        if callable(route):
            return route(request)
        return route


PRODUCTS = [
    {
        "_id": "p1",
        "name": "Home Jersey 2025",
        "description": "Official home jersey",
        "price": 500,
        "category": "Jerseys",
        "photos": ["https://cdn.test/p1.jpg"],
        "colors": ["Red", "Green"],
        "sizes": ["M", "L"],
    },
    {
        "_id": "p2",
        "name": "Club Scarf",
        "description": "Knitted scarf",
        "price": 300,
        "category": "Accessories",
        "photos": ["https://cdn.test/p2.jpg"],
        "colors": [],
        "sizes": [],
    },
]


@pytest.fixture
def backend() -> FakeBackend:
    fake = FakeBackend()
    fake.on("GET", "/", json={"message": "MCA backend running"})
    fake.on("GET", "/api/public/products", json=PRODUCTS)
    fake.on("GET", "/api/wilayas", json=["Alger", "Oran", "Blida"])
    fake.on("GET", "/api/public/hero-content", json=[])
    fake.on("GET", "/api/admin/dashboard/stats", json={"pendingOrders": 4, "totalProducts": 2})
    fake.on("GET", "/api/admin/orders", json=[])
    return fake


@pytest.fixture
def products() -> list[Product]:
    return [Product.model_validate(p) for p in PRODUCTS]


@pytest.fixture
async def client(backend):
    mca_client = MCAClient(BASE_URL, transport=httpx.MockTransport(backend))
    yield mca_client
    await mca_client.close()


@pytest.fixture
async def storefront(client):
    shop = Storefront(client)
    yield shop
    shop.toasts.clear()
