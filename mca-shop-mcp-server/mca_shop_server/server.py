"""MCP Server for the MCA Shop storefront."""

import asyncio
import json
import logging
from typing import Any, Optional

from mcp.server import Server
from mcp.types import Resource, TextContent, Tool
from pydantic import AnyUrl

from .cart import Cart
from .config import Settings
from .forms import CheckoutForm, HeroForm, ProductForm, load_upload
from .mca_client import MCAClient
from .models import PRODUCT_CATEGORIES, BackendStatus, Order, OrderStatus, Product
from .storefront import Storefront

logger = logging.getLogger("mca-shop-mcp-server")

# Initialize server
app = Server("mca-shop-mcp-server")

# Global state
storefront: Storefront


def _text(text: str) -> list[TextContent]:
    return [TextContent(type="text", text=text)]


def _toast_ids() -> set[str]:
    return {toast.id for toast in storefront.toasts.toasts}


def _with_toasts(text: str, seen: set[str]) -> list[TextContent]:
    """Append the notifications raised since ``seen`` was taken to a tool result."""
    messages = [f"{t.icon} {t.message}" for t in storefront.toasts.toasts if t.id not in seen]
    return _text("\n\n".join(part for part in (text, *messages) if part))


def format_product(index: int, product: Product) -> list[str]:
    lines = [f"\n{index}. {product.name}", f"   ID: {product.id}", f"   Price: DA{product.price}"]
    if product.category:
        lines.append(f"   Category: {product.category}")
    if product.colors:
        lines.append(f"   Colors: {', '.join(product.colors)}")
    if product.sizes:
        lines.append(f"   Sizes: {', '.join(product.sizes)}")
    return lines


def format_cart(cart: Cart) -> str:
    if cart.is_empty():
        return "Your cart is empty"
    lines = [f"Shopping Cart ({len(cart)} items):\n"]
    for item in cart:
        variant = ", ".join(v for v in (item.color, item.size) if v)
        suffix = f" [{variant}]" if variant else ""
        lines.append(f"  - {item.name}{suffix} (ID {item.id}): {item.quantity} x DA{item.price} = DA{item.subtotal}")
    lines.append(f"\nTotal: DA{cart.total}")
    return "\n".join(lines)


def format_order(order: Order) -> str:
    lines = [
        f"Order {order.id}: {order.product_name} x {order.quantity} (DA{order.product_price})",
        f"   Status: {order.status.value}",
        f"   Client: {order.client_name} <{order.email}> {order.phone}",
        f"   Ship to: {order.address}, {order.wilaya}",
    ]
    if order.color:
        lines.append(f"   Color: {order.color}")
    if order.size:
        lines.append(f"   Size: {order.size}")
    if order.order_date:
        lines.append(f"   Date: {order.order_date.isoformat()}")
    return "\n".join(lines)


@app.list_resources()
async def list_resources() -> list[Resource]:
    """List available resources."""
    return [
        Resource(
            uri=AnyUrl("mca://cart"),
            name="Shopping Cart",
            mimeType="application/json",
            description="Current shopping cart contents",
        )
    ]


@app.read_resource()
async def read_resource(uri: AnyUrl) -> str:
    """Read a resource by URI."""
    if str(uri) == "mca://cart":
        items = [item.model_dump(mode="json") for item in storefront.cart]
        return json.dumps({"items": items, "total": str(storefront.cart.total)}, indent=2, ensure_ascii=False)

    raise ValueError(f"Unknown resource: {uri}")


@app.list_tools()
async def list_tools() -> list[Tool]:
    """List available tools."""
    empty = {"type": "object", "properties": {}}
    product_id = {"type": "string", "description": "Product ID from mca_list_products"}
    order_id = {"type": "string", "description": "Order ID from mca_list_orders"}
    return [
        Tool(
            name="mca_list_products",
            description="List the products sold in the MCA Shop",
            inputSchema={
                "type": "object",
                "properties": {
                    "category": {"type": "string", "description": "Only show this category"},
                },
            },
        ),
        Tool(
            name="mca_get_product",
            description="Show product details with available colors and sizes",
            inputSchema={"type": "object", "properties": {"product_id": product_id}, "required": ["product_id"]},
        ),
        Tool(
            name="mca_add_to_cart",
            description="Add a product to the cart with an optional color, size and quantity",
            inputSchema={
                "type": "object",
                "properties": {
                    "product_id": product_id,
                    "quantity": {"type": "integer", "description": "Quantity to add (default: 1)", "default": 1},
                    "color": {"type": "string", "description": "Chosen color (default: first available)"},
                    "size": {"type": "string", "description": "Chosen size (default: first available)"},
                },
                "required": ["product_id"],
            },
        ),
        Tool(name="mca_get_cart", description="Get current shopping cart contents", inputSchema=empty),
        Tool(
            name="mca_update_cart_quantity",
            description="Set the quantity of a cart line; 0 removes it",
            inputSchema={
                "type": "object",
                "properties": {"product_id": product_id, "quantity": {"type": "integer"}},
                "required": ["product_id", "quantity"],
            },
        ),
        Tool(
            name="mca_remove_from_cart",
            description="Remove a product from the cart",
            inputSchema={"type": "object", "properties": {"product_id": product_id}, "required": ["product_id"]},
        ),
        Tool(name="mca_list_wilayas", description="List the wilayas available for shipping", inputSchema=empty),
        Tool(
            name="mca_checkout",
            description="Place an order for every item in the cart",
            inputSchema={
                "type": "object",
                "properties": {
                    "client_name": {"type": "string", "description": "Full name"},
                    "wilaya": {"type": "string", "description": "Wilaya from mca_list_wilayas"},
                    "address": {"type": "string", "description": "Shipping address"},
                    "phone": {"type": "string", "description": "Phone number"},
                    "email": {"type": "string", "description": "Email address"},
                },
                "required": ["client_name", "wilaya", "address", "phone", "email"],
            },
        ),
        Tool(name="mca_hero_content", description="Show the storefront hero banners", inputSchema=empty),
        Tool(
            name="mca_navigate",
            description="Navigate to a URL fragment (e.g. 'store')",
            inputSchema={"type": "object", "properties": {"fragment": {"type": "string"}}, "required": ["fragment"]},
        ),
        Tool(
            name="mca_admin_login",
            description="Log into the admin dashboard",
            inputSchema={
                "type": "object",
                "properties": {"username": {"type": "string"}, "password": {"type": "string"}},
                "required": ["username", "password"],
            },
        ),
        Tool(name="mca_admin_logout", description="Log out of the admin dashboard", inputSchema=empty),
        Tool(name="mca_list_orders", description="List all orders (admin)", inputSchema=empty),
        Tool(
            name="mca_update_order_status",
            description="Change an order's status (admin)",
            inputSchema={
                "type": "object",
                "properties": {
                    "order_id": order_id,
                    "status": {"type": "string", "enum": [s.value for s in OrderStatus]},
                },
                "required": ["order_id", "status"],
            },
        ),
        Tool(
            name="mca_delete_order",
            description="Delete an order (admin)",
            inputSchema={"type": "object", "properties": {"order_id": order_id}, "required": ["order_id"]},
        ),
        Tool(
            name="mca_delete_product",
            description="Delete a product (admin)",
            inputSchema={"type": "object", "properties": {"product_id": product_id}, "required": ["product_id"]},
        ),
        Tool(
            name="mca_create_product",
            description="Create a product from local photo files (admin)",
            inputSchema={
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "description": {"type": "string"},
                    "price": {"type": "string", "description": "Price in DA"},
                    "category": {"type": "string", "enum": PRODUCT_CATEGORIES},
                    "colors": {"type": "array", "items": {"type": "string"}},
                    "sizes": {"type": "array", "items": {"type": "string"}},
                    "photo_paths": {"type": "array", "items": {"type": "string"}, "description": "Local image/video files"},
                },
                "required": ["name", "description", "price", "category", "photo_paths"],
            },
        ),
        Tool(name="mca_list_hero_content", description="List hero slides for management (admin)", inputSchema=empty),
        Tool(
            name="mca_save_hero_content",
            description="Create a hero slide, or edit one when content_id is given (admin)",
            inputSchema={
                "type": "object",
                "properties": {
                    "content_id": {"type": "string", "description": "Slide ID from mca_list_hero_content"},
                    "title": {"type": "string"},
                    "subtitle": {"type": "string"},
                    "button_text": {"type": "string"},
                    "theme": {"type": "string", "enum": ["light", "dark"]},
                    "order": {"type": "integer"},
                    "is_active": {"type": "boolean"},
                    "media_path": {"type": "string", "description": "Local image/video file (required to create)"},
                },
            },
        ),
        Tool(
            name="mca_delete_hero_content",
            description="Delete a hero slide (admin)",
            inputSchema={"type": "object", "properties": {"content_id": {"type": "string"}}, "required": ["content_id"]},
        ),
        Tool(name="mca_dashboard_stats", description="Show dashboard metrics (admin)", inputSchema=empty),
        Tool(name="mca_toasts", description="Show current notifications", inputSchema=empty),
    ]


@app.call_tool()
async def call_tool(name: str, arguments: Any) -> list[TextContent]:
    """Handle tool calls."""
    arguments = arguments or {}
    tool = next((t for t in await list_tools() if t.name == name), None)
    if tool is None:
        return _text(f"Unknown tool: {name}")
    missing = [field for field in tool.inputSchema.get("required", []) if field not in arguments]
    if missing:
        return _text(f"Error: Missing required argument(s): {', '.join(missing)}")

    seen = _toast_ids()
    try:
        if name == "mca_list_products":
            products = await storefront.fetch_products()
            category = arguments.get("category")
            if category:
                products = [p for p in products if p.category.lower() == category.lower()]
            if not products:
                return _with_toasts("No products available.", seen)

            result_lines = [f"Found {len(products)} product(s):"]
            for i, product in enumerate(products, 1):
                result_lines.extend(format_product(i, product))
            return _text("\n".join(result_lines))

        elif name == "mca_get_product":
            selection = storefront.open_product(arguments["product_id"])
            product = selection.product
            lines = [product.name, product.category, product.description, f"DA{product.price}"]
            if product.colors:
                lines.append(f"Colors: {', '.join(product.colors)}")
            if product.sizes:
                lines.append(f"Sizes: {', '.join(product.sizes)}")
            lines.extend(f"Photo: {photo}" for photo in product.photos)
            return _text("\n".join(line for line in lines if line))

        elif name == "mca_add_to_cart":
            selection = storefront.open_product(arguments["product_id"])
            if arguments.get("color"):
                selection.select_color(arguments["color"])
            if arguments.get("size"):
                selection.select_size(arguments["size"])
            selection.quantity = max(1, int(arguments.get("quantity", 1)))
            storefront.add_selection_to_cart()
            return _with_toasts(f"Cart total: DA{storefront.cart.total}", seen)

        elif name == "mca_get_cart":
            return _text(format_cart(storefront.cart))

        elif name == "mca_update_cart_quantity":
            storefront.update_cart_quantity(arguments["product_id"], int(arguments["quantity"]))
            return _text(format_cart(storefront.cart))

        elif name == "mca_remove_from_cart":
            product_id = arguments["product_id"]
            if storefront.remove_from_cart(product_id):
                return _text(f"✅ Removed product {product_id} from cart\n\n{format_cart(storefront.cart)}")
            return _text(f"❌ Product {product_id} is not in the cart")

        elif name == "mca_list_wilayas":
            wilayas = await storefront.fetch_wilayas()
            if not wilayas:
                return _text("No wilayas available (backend unreachable?)")
            return _text("\n".join(wilayas))

        elif name == "mca_checkout":
            form = CheckoutForm(
                client_name=arguments.get("client_name", ""),
                wilaya=arguments.get("wilaya", ""),
                address=arguments.get("address", ""),
                phone=arguments.get("phone", ""),
                email=arguments.get("email", ""),
            )
            storefront.proceed_to_checkout()
            await storefront.checkout(form)
            return _with_toasts("", seen)

        elif name == "mca_hero_content":
            contents = await storefront.fetch_hero_content()
            lines = []
            for content in contents:
                lines.append(f"- {content.title}: {content.subtitle} [{content.button_text}]")
                if content.media_url:
                    lines.append(f"  {content.media_type or 'media'}: {content.media_url}")
            return _text("\n".join(lines))

        elif name == "mca_navigate":
            storefront.handle_hash_change(arguments["fragment"])
            if storefront.admin.show_login:
                return _text("Admin login prompt shown. Use mca_admin_login.")
            return _text(f"Page: {storefront.page.value}")

        elif name == "mca_admin_login":
            await storefront.admin_login(arguments["username"], arguments["password"])
            return _with_toasts("", seen)

        elif name == "mca_admin_logout":
            storefront.admin_logout()
            return _with_toasts("", seen)

        elif name == "mca_list_orders":
            if not storefront.is_admin:
                return _text("Error: Admin access required!")
            orders = await storefront.fetch_orders()
            if not orders:
                return _text("No orders yet")
            return _text("\n\n".join(format_order(order) for order in orders))

        elif name == "mca_update_order_status":
            await storefront.update_order_status(arguments["order_id"], arguments["status"])
            return _with_toasts("", seen)

        elif name == "mca_delete_order":
            await storefront.delete_order(arguments["order_id"])
            return _with_toasts("", seen)

        elif name == "mca_delete_product":
            await storefront.delete_product(arguments["product_id"])
            return _with_toasts("", seen)

        elif name == "mca_create_product":
            form = ProductForm(
                name=arguments["name"],
                description=arguments["description"],
                price=str(arguments["price"]),
                category=arguments["category"],
            )
            for color in arguments.get("colors", []):
                form.add_color(color)
            for size in arguments.get("sizes", []):
                form.add_size(size)
            rejected = form.set_photos([load_upload(path) for path in arguments["photo_paths"]])
            await storefront.create_product(form)
            return _with_toasts(f"Skipped {rejected} non-media file(s)" if rejected else "", seen)

        elif name == "mca_list_hero_content":
            if not storefront.is_admin:
                return _text("Error: Admin access required!")
            contents = await storefront.fetch_admin_hero_content()
            if not contents:
                return _with_toasts("No hero content yet", seen)
            return _text(
                "\n".join(
                    f"- {c.id}: {c.title} / {c.subtitle} (order {c.order}, "
                    f"{'active' if c.is_active else 'inactive'}, {c.theme}, {c.media_type or 'no media'})"
                    for c in contents
                )
            )

        elif name == "mca_save_hero_content":
            if arguments.get("content_id"):
                form = storefront.edit_hero_content(arguments["content_id"])
            else:
                form = HeroForm()
            for field in ("title", "subtitle", "button_text", "theme", "order", "is_active"):
                if field in arguments:
                    setattr(form, field, arguments[field])
            if arguments.get("media_path"):
                form.set_media(load_upload(arguments["media_path"]))
            await storefront.save_hero_content(form)
            return _with_toasts("", seen)

        elif name == "mca_delete_hero_content":
            await storefront.delete_hero_content(arguments["content_id"])
            return _with_toasts("", seen)

        elif name == "mca_dashboard_stats":
            if not storefront.is_admin:
                return _text("Error: Admin access required!")
            stats = await storefront.fetch_dashboard_stats()
            return _text(
                f"Total Revenue: DA{stats.total_revenue} ({stats.revenue_change}%)\n"
                f"New Customers: {stats.new_customers} ({stats.customers_change}%)\n"
                f"Active Accounts: {stats.active_accounts} ({stats.accounts_change}%)\n"
                f"Growth Rate: {stats.growth_rate}% ({stats.growth_change}%)\n"
                f"Pending Orders: {stats.pending_orders}\n"
                f"Total Products: {stats.total_products}"
            )

        elif name == "mca_toasts":
            toasts = storefront.toasts.toasts
            if not toasts:
                return _text("No notifications")
            return _text("\n".join(f"{t.icon} {t.title} {t.message}" for t in toasts))

    except KeyError as e:
        return _text(f"Error: Not found: {e}")
    except Exception as e:
        logger.error(f"Error executing tool {name}: {e}", exc_info=True)
        return _text(f"Error: {str(e)}")


async def main(backend_url: Optional[str] = None) -> None:
    """Main entry point."""
    global storefront

    settings = Settings.from_env(backend_url)
    logging.basicConfig(level=settings.log_level)

    client = MCAClient(settings.backend_url, timeout=settings.timeout)
    storefront = Storefront(client)

    logger.info(f"Starting MCA Shop MCP Server against {settings.backend_url}...")
    await storefront.start()
    if storefront.backend_status == BackendStatus.DISCONNECTED:
        logger.warning("Backend server disconnected. Some features may not work.")

    # Import and run the server
    from mcp.server.stdio import stdio_server

    try:
        async with stdio_server() as (read_stream, write_stream):
            await app.run(
                read_stream,
                write_stream,
                app.create_initialization_options(),
            )
    finally:
        await storefront.close()


if __name__ == "__main__":
    asyncio.run(main())
