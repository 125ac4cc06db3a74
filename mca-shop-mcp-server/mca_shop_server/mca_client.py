"""MCA Shop backend API client."""

import logging
from typing import Any, Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from .config import DEFAULT_BACKEND_URL
from .models import DashboardStats, Order, OrderRequest, OrderStatus, Product

logger = logging.getLogger(__name__)

# (filename, content, content_type) as accepted by httpx multipart uploads
UploadFile = tuple[str, bytes, str]

ModelT = TypeVar("ModelT", bound=BaseModel)


def _parse_list(data: Any, model: type[ModelT], label: str) -> list[ModelT]:
    """Validate a list payload record by record, skipping malformed ones."""
    if not isinstance(data, list):
        if data is not None:
            logger.warning(f"Expected a list of {label}s, got {type(data).__name__}")
        return []
    items = []
    for item in data:
        try:
            items.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Skipping malformed {label}: {e}")
    return items


class MCABackendError(Exception):
    """Raised when the backend is unreachable or answers with an error status."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


async def _log_request(request: httpx.Request) -> None:
    logger.info(f"Making {request.method} request to: {request.url.path}")


async def _log_response(response: httpx.Response) -> None:
    logger.info(f"Response received from: {response.request.url.path} status={response.status_code}")


class MCAClient:
    """Client for the MCA Shop REST backend."""

    def __init__(
        self,
        base_url: str = DEFAULT_BACKEND_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the MCA client.

        Args:
            base_url: Backend base URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used to fake the backend in tests)
        """
        self.base_url = base_url
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
            headers={"Accept": "application/json"},
            event_hooks={"request": [_log_request], "response": [_log_response]},
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request and return the decoded JSON body (or None when empty)."""
        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Response error: {e}")
            if isinstance(e, httpx.ConnectError):
                logger.error("Backend server is not running! Please start the backend.")
            raise MCABackendError(str(e) or e.__class__.__name__) from e

        if response.is_error:
            message = f"HTTP {response.status_code}"
            try:
                body = response.json()
                if isinstance(body, dict) and body.get("message"):
                    message = str(body["message"])
            except ValueError:
                pass
            logger.error(f"{method} {path} failed: {message}")
            raise MCABackendError(message, status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    # Public storefront endpoints

    async def ping(self) -> Any:
        """Connectivity probe against the backend root."""
        return await self._request("GET", "/")

    async def list_products(self) -> list[Product]:
        data = await self._request("GET", "/api/public/products")
        return _parse_list(data, Product, "product")

    async def get_public_hero_content(self) -> Any:
        """Return the raw hero payload; its shape varies between backend versions."""
        return await self._request("GET", "/api/public/hero-content")

    async def list_wilayas(self) -> list[str]:
        data = await self._request("GET", "/api/wilayas")
        if not isinstance(data, list):
            logger.warning(f"Unexpected wilayas payload: {type(data).__name__}")
            return []
        return [str(w) for w in data]

    async def place_order(self, order: OrderRequest) -> dict[str, Any]:
        """
        Place a single-line order.

        Args:
            order: Order payload for one cart line

        Returns:
            The backend response body (carries a boolean ``success`` field)
        """
        data = await self._request(
            "POST",
            "/api/public/orders",
            json=order.model_dump(mode="json", by_alias=True),
        )
        return data if isinstance(data, dict) else {}

    # Admin product endpoints

    async def create_product(self, fields: dict[str, str], photos: list[UploadFile]) -> Any:
        """Create a product with a multipart upload of its photos."""
        files = [("photos", photo) for photo in photos]
        return await self._request("POST", "/api/admin/products", data=fields, files=files)

    async def delete_product(self, product_id: str) -> None:
        await self._request("DELETE", f"/api/admin/products/{product_id}")

    # Admin hero-content endpoints

    async def get_admin_hero_content(self) -> Any:
        return await self._request("GET", "/api/admin/hero-content")

    async def save_hero_content(
        self,
        fields: dict[str, str],
        media: Optional[UploadFile] = None,
        content_id: Optional[str] = None,
    ) -> Any:
        """
        Create or update a hero slide.

        Args:
            fields: Multipart form fields
            media: Optional media file; required by the backend on create
            content_id: Existing slide ID; when given the slide is updated
        """
        files = [("media", media)] if media else None
        if content_id:
            return await self._request(
                "PUT", f"/api/admin/hero-content/{content_id}", data=fields, files=files
            )
        return await self._request("POST", "/api/admin/hero-content", data=fields, files=files)

    async def delete_hero_content(self, content_id: str) -> None:
        await self._request("DELETE", f"/api/admin/hero-content/{content_id}")

    # Admin order endpoints

    async def list_orders(self) -> list[Order]:
        data = await self._request("GET", "/api/admin/orders")
        return _parse_list(data, Order, "order")

    async def update_order_status(self, order_id: str, status: OrderStatus) -> Any:
        return await self._request(
            "PUT", f"/api/admin/orders/{order_id}", json={"status": status.value}
        )

    async def delete_order(self, order_id: str) -> None:
        await self._request("DELETE", f"/api/admin/orders/{order_id}")

    async def get_dashboard_stats(self) -> DashboardStats:
        data = await self._request("GET", "/api/admin/dashboard/stats")
        if not isinstance(data, dict):
            raise MCABackendError(f"Unexpected dashboard stats payload: {type(data).__name__}")
        try:
            return DashboardStats.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Failed to parse dashboard stats: {e}")
            raise MCABackendError("Invalid dashboard stats received from backend") from e

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()
