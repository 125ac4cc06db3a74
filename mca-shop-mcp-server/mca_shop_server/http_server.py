"""HTTP server for the MCA Shop storefront session."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from .config import Settings
from .forms import CheckoutForm
from .mca_client import MCAClient
from .storefront import Storefront

logger = logging.getLogger("mca-shop-http-server")

# Global state
storefront: Storefront
settings: Optional[Settings] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    global storefront, settings

    # Startup
    settings = settings or Settings.from_env()
    logger.info(f"Starting MCA Shop HTTP Server against {settings.backend_url}...")
    storefront = Storefront(MCAClient(settings.backend_url, timeout=settings.timeout))
    await storefront.start()

    yield

    # Shutdown
    logger.info("Shutting down MCA Shop HTTP Server...")
    await storefront.close()


app = FastAPI(
    title="MCA Shop Server",
    description="HTTP API for the MCA Shop storefront and admin dashboard",
    version="0.1.0",
    lifespan=lifespan,
)


# Request/Response Models
class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = 1
    color: str = ""
    size: str = ""


class UpdateCartRequest(BaseModel):
    product_id: str
    quantity: int


class RemoveFromCartRequest(BaseModel):
    product_id: str


class NavigateRequest(BaseModel):
    fragment: str


class AdminLoginRequest(BaseModel):
    username: str
    password: str


class OrderStatusRequest(BaseModel):
    status: str


def latest_message() -> Optional[str]:
    toast = storefront.toasts.latest()
    return toast.message if toast else None


def cart_payload() -> dict:
    return {
        "items": [item.model_dump(mode="json") for item in storefront.cart],
        "total": str(storefront.cart.total),
        "item_count": storefront.cart.item_count,
    }


def require_admin() -> None:
    if not storefront.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required!")


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "MCA Shop Server",
        "version": "0.1.0",
        "backend": settings.backend_url if settings else None,
        "backend_status": storefront.backend_status.value,
        "endpoints": {
            "docs": "/docs",
            "health": "/health",
            "products": {"list": "GET /products"},
            "cart": {"get": "GET /cart", "add": "POST /cart/add", "update": "POST /cart/update", "remove": "POST /cart/remove"},
            "checkout": "POST /checkout",
            "wilayas": "GET /wilayas",
            "hero": "GET /hero",
            "admin": {"login": "POST /admin/login", "logout": "POST /admin/logout", "orders": "GET /admin/orders", "stats": "GET /admin/stats"},
        },
    }


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "backend_status": storefront.backend_status.value}


@app.post("/connection/retry")
async def retry_connection():
    """Probe the backend again and reload the store on success."""
    await storefront.start()
    return {"backend_status": storefront.backend_status.value}


# Product endpoints
@app.get("/products")
async def list_products(category: Optional[str] = None):
    products = await storefront.fetch_products()
    if category:
        products = [p for p in products if p.category.lower() == category.lower()]
    return {"count": len(products), "products": [p.model_dump(mode="json") for p in products]}


@app.get("/wilayas")
async def list_wilayas():
    return {"wilayas": await storefront.fetch_wilayas()}


@app.get("/hero")
async def hero_content():
    contents = await storefront.fetch_hero_content()
    return {"contents": [c.model_dump(mode="json") for c in contents]}


# Cart endpoints
@app.get("/cart")
async def get_cart():
    """Get current shopping cart."""
    return cart_payload()


@app.post("/cart/add")
async def add_to_cart(request: AddToCartRequest):
    """Add a product to the cart."""
    try:
        selection = storefront.open_product(request.product_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown product {request.product_id}")
    try:
        if request.color:
            selection.select_color(request.color)
        if request.size:
            selection.select_size(request.size)
        if request.quantity < 1:
            raise ValueError("Quantity must be at least 1")
        selection.quantity = request.quantity
        storefront.add_selection_to_cart()
    except ValueError as e:
        storefront.close_product()
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True, "message": latest_message(), "cart": cart_payload()}


@app.post("/cart/update")
async def update_cart(request: UpdateCartRequest):
    try:
        storefront.update_cart_quantity(request.product_id, request.quantity)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Product {request.product_id} is not in the cart")
    return cart_payload()


@app.post("/cart/remove")
async def remove_from_cart(request: RemoveFromCartRequest):
    """Remove a product from the cart."""
    if not storefront.remove_from_cart(request.product_id):
        return {"success": False, "message": f"Product {request.product_id} is not in the cart"}
    return {"success": True, "cart": cart_payload()}


@app.post("/checkout")
async def checkout(form: CheckoutForm):
    """Place one order per cart line."""
    try:
        success = await storefront.checkout(form)
    except Exception as e:
        logger.error(f"Checkout error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))
    return {"success": success, "message": latest_message(), "cart": cart_payload()}


# Navigation and admin endpoints
@app.post("/navigate")
async def navigate(request: NavigateRequest):
    storefront.handle_hash_change(request.fragment)
    return {"page": storefront.page.value, "show_admin_login": storefront.admin.show_login}


@app.post("/admin/login")
async def admin_login(request: AdminLoginRequest):
    success = await storefront.admin_login(request.username, request.password)
    if not success:
        raise HTTPException(status_code=401, detail=latest_message())
    return {"success": True, "message": latest_message()}


@app.post("/admin/logout")
async def admin_logout():
    storefront.admin_logout()
    return {"success": True, "message": latest_message()}


@app.get("/admin/orders")
async def list_orders():
    require_admin()
    orders = await storefront.fetch_orders()
    return {"count": len(orders), "orders": [o.model_dump(mode="json", by_alias=True) for o in orders]}


@app.put("/admin/orders/{order_id}")
async def update_order_status(order_id: str, request: OrderStatusRequest):
    require_admin()
    success = await storefront.update_order_status(order_id, request.status)
    return {"success": success, "message": latest_message()}


@app.delete("/admin/orders/{order_id}")
async def delete_order(order_id: str):
    require_admin()
    success = await storefront.delete_order(order_id)
    return {"success": success, "message": latest_message()}


@app.delete("/admin/products/{product_id}")
async def delete_product(product_id: str):
    require_admin()
    success = await storefront.delete_product(product_id)
    return {"success": success, "message": latest_message()}


@app.get("/admin/stats")
async def dashboard_stats():
    require_admin()
    stats = await storefront.fetch_dashboard_stats()
    return stats.model_dump(mode="json", by_alias=True)


@app.get("/toasts")
async def list_toasts():
    return {"toasts": [t.model_dump(mode="json") for t in storefront.toasts.toasts]}


def run_http_server(host: str = "0.0.0.0", port: int = 8000, backend_url: Optional[str] = None):
    """Run the HTTP server."""
    global settings
    import uvicorn

    settings = Settings.from_env(backend_url)
    logging.basicConfig(level=settings.log_level)
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run_http_server()
