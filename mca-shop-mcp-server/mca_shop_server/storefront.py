"""Storefront session: the state behind the MCA Shop store and admin pages."""

import asyncio
import logging
from typing import Optional

from .auth import STORE_FRAGMENT, AdminGate
from .cart import Cart, ProductSelection
from .forms import CheckoutForm, HeroForm, ProductForm
from .hero import HeroCarousel, parse_hero_contents
from .mca_client import MCABackendError, MCAClient
from .models import (
    AdminCredentials,
    BackendStatus,
    DashboardStats,
    HeroContent,
    Order,
    OrderStatus,
    Page,
    Product,
    ToastType,
)
from .toasts import ToastManager

logger = logging.getLogger(__name__)


class Storefront:
    """
    One user's session with the MCA Shop.

    Holds everything the single-page UI keeps in memory (current page, open
    modals, cart, toasts, admin flag, admin data) and exposes each user
    action as a method. Backend failures are caught here, logged and turned
    into toasts; none of them propagate to the caller.
    """

    def __init__(self, client: MCAClient) -> None:
        self.client = client
        self.page = Page.STORE
        self.backend_status = BackendStatus.CHECKING

        self.products: list[Product] = []
        self.products_loading = False
        self.wilayas: list[str] = []
        self.selected_product: Optional[ProductSelection] = None

        self.cart = Cart()
        self.show_cart = False
        self.show_checkout = False
        self.checkout_form = CheckoutForm()

        self.hero = HeroCarousel()
        self.toasts = ToastManager()
        self.admin = AdminGate()

        self.orders: list[Order] = []
        self.dashboard_stats = DashboardStats()
        self.admin_hero_contents: list[HeroContent] = []

    @property
    def is_admin(self) -> bool:
        return self.admin.is_admin

    # Backend connection

    async def test_backend_connection(self) -> bool:
        """Probe the backend and record whether it is reachable."""
        logger.info("Testing backend connection...")
        try:
            await self.client.ping()
        except MCABackendError as e:
            self.backend_status = BackendStatus.DISCONNECTED
            logger.error(f"Backend connection failed: {e}")
            return False
        self.backend_status = BackendStatus.CONNECTED
        logger.info("Backend connection successful")
        return True

    async def start(self) -> None:
        """Probe the backend, then load the store data it serves."""
        if await self.test_backend_connection():
            await asyncio.gather(
                self.fetch_products(),
                self.fetch_wilayas(),
                self.fetch_dashboard_stats(),
                self.fetch_hero_content(),
            )
        else:
            self.hero.load([])

    # Store browsing

    async def fetch_products(self) -> list[Product]:
        self.products_loading = True
        try:
            self.products = await self.client.list_products()
            logger.info(f"Products fetched: {len(self.products)} products")
        except MCABackendError as e:
            logger.error(f"Error fetching products: {e}", exc_info=True)
            self.toasts.add(f"Error loading products: {e.message}", ToastType.ERROR, 5)
        finally:
            self.products_loading = False
        return self.products

    async def fetch_wilayas(self) -> list[str]:
        try:
            self.wilayas = await self.client.list_wilayas()
        except MCABackendError as e:
            logger.error(f"Error fetching wilayas: {e}")
        return self.wilayas

    async def fetch_hero_content(self) -> list[HeroContent]:
        """Load the public hero slides, falling back to the built-in slide."""
        self.hero.loading = True
        try:
            payload = await self.client.get_public_hero_content()
            contents = parse_hero_contents(payload)
        except MCABackendError as e:
            logger.error(f"Error fetching hero content, using fallback: {e}")
            contents = []
        self.hero.load(contents)
        return self.hero.contents

    def find_product(self, product_id: str) -> Optional[Product]:
        return next((p for p in self.products if p.id == product_id), None)

    def open_product(self, product_id: str) -> ProductSelection:
        product = self.find_product(product_id)
        if product is None:
            raise KeyError(product_id)
        self.selected_product = ProductSelection(product)
        return self.selected_product

    def close_product(self) -> None:
        self.selected_product = None

    # Cart

    def add_to_cart(
        self,
        product: Product,
        quantity: int = 1,
        color: str = "",
        size: str = "",
    ) -> None:
        self.cart.add(product, quantity=quantity, color=color, size=size)
        self.toasts.add(f"{product.name} added to cart! 🛒", ToastType.SUCCESS, 3)

    def add_selection_to_cart(self) -> None:
        """Add the product detail selection to the cart and close the detail view."""
        if self.selected_product is None:
            raise ValueError("No product selected")
        self.add_to_cart(self.selected_product.to_cart_item())
        self.close_product()

    def update_cart_quantity(self, product_id: str, quantity: int) -> None:
        self.cart.update_quantity(product_id, quantity)

    def remove_from_cart(self, product_id: str) -> bool:
        return self.cart.remove(product_id)

    def open_cart(self) -> None:
        self.show_cart = True

    def close_cart(self) -> None:
        self.show_cart = False

    def proceed_to_checkout(self) -> None:
        if self.cart.is_empty():
            self.toasts.add("Your cart is empty", ToastType.WARNING, 3)
            return
        self.show_cart = False
        self.show_checkout = True

    def close_checkout(self) -> None:
        self.show_checkout = False

    async def checkout(self, form: Optional[CheckoutForm] = None) -> bool:
        """
        Place one order per cart line.

        All orders are posted concurrently. Only when every one of them is
        accepted is the cart emptied and the checkout and cart views closed;
        otherwise the cart is left untouched and an error toast is shown.

        Returns:
            True if every order was accepted
        """
        if form is not None:
            self.checkout_form = form
        try:
            self.checkout_form.validate_required()
        except ValueError as e:
            self.toasts.add(str(e), ToastType.ERROR, 5)
            return False
        if self.cart.is_empty():
            self.toasts.add("Your cart is empty", ToastType.WARNING, 3)
            return False

        orders = self.checkout_form.build_orders(self.cart)
        results = await asyncio.gather(
            *(self.client.place_order(order) for order in orders),
            return_exceptions=True,
        )

        for result in results:
            if isinstance(result, MCABackendError):
                logger.error(f"Error placing order: {result}")
                self.toasts.add(result.message, ToastType.ERROR, 5)
                return False
            if isinstance(result, BaseException):
                raise result
            if not result.get("success"):
                message = result.get("message") or "There was an error placing your order."
                logger.error(f"Order rejected: {message}")
                self.toasts.add(message, ToastType.ERROR, 5)
                return False

        self.toasts.add(
            "🎉 Order confirmed successfully! We will contact you soon.", ToastType.SUCCESS, 5
        )
        self.cart.clear()
        self.show_checkout = False
        self.show_cart = False
        self.checkout_form = CheckoutForm()
        self.dashboard_stats.pending_orders += 1
        return True

    # Navigation and admin gate

    def handle_hash_change(self, fragment: str) -> None:
        self.admin.handle_fragment(fragment)
        if self.admin.fragment == STORE_FRAGMENT:
            self.page = Page.STORE

    def go_home(self) -> None:
        """Logo click: back to the store with every modal closed."""
        self.page = Page.STORE
        self.show_cart = False
        self.show_checkout = False
        self.selected_product = None
        self.admin.fragment = STORE_FRAGMENT

    def show_page(self, page: Page) -> None:
        self.page = page

    @property
    def admin_page_visible(self) -> bool:
        return self.page == Page.ADMIN and self.admin.is_admin

    async def admin_login(self, username: str, password: str) -> bool:
        if not self.admin.show_login:
            self.toasts.add("Admin login is not available here", ToastType.ERROR, 3)
            return False
        if not self.admin.login(AdminCredentials(username=username, password=password)):
            self.toasts.add("Invalid admin credentials!", ToastType.ERROR, 3)
            return False

        self.page = Page.ADMIN
        await asyncio.gather(self.fetch_orders(), self.fetch_dashboard_stats())
        self.toasts.add("Welcome back, Admin! 👋", ToastType.SUCCESS, 3)
        return True

    def cancel_admin_login(self) -> None:
        self.admin.dismiss_login()

    def admin_logout(self) -> None:
        self.admin.logout()
        self.page = Page.STORE
        self.orders = []
        self.toasts.add("Logged out successfully", ToastType.SUCCESS, 3)

    def _require_admin(self) -> bool:
        if self.admin.is_admin:
            return True
        self.toasts.add("Admin access required!", ToastType.ERROR, 3)
        return False

    # Admin: dashboard and orders

    async def fetch_dashboard_stats(self) -> DashboardStats:
        try:
            self.dashboard_stats = await self.client.get_dashboard_stats()
        except MCABackendError as e:
            logger.error(f"Error fetching dashboard stats: {e}")
        return self.dashboard_stats

    async def fetch_orders(self) -> list[Order]:
        try:
            self.orders = await self.client.list_orders()
        except MCABackendError as e:
            logger.error(f"Error fetching orders: {e}")
        return self.orders

    async def update_order_status(self, order_id: str, status: str) -> bool:
        if not self._require_admin():
            return False
        try:
            order_status = OrderStatus(status)
        except ValueError:
            self.toasts.add(f"Unknown order status: {status}", ToastType.ERROR, 3)
            return False
        try:
            await self.client.update_order_status(order_id, order_status)
        except MCABackendError as e:
            logger.error(f"Error updating order status: {e}", exc_info=True)
            self.toasts.add("Error updating order status", ToastType.ERROR, 3)
            return False
        await self.fetch_orders()
        self.toasts.add(
            f"Order status updated to {order_status.value} successfully!", ToastType.SUCCESS, 3
        )
        return True

    async def delete_order(self, order_id: str) -> bool:
        if not self._require_admin():
            return False
        try:
            await self.client.delete_order(order_id)
        except MCABackendError as e:
            logger.error(f"Error deleting order: {e}", exc_info=True)
            self.toasts.add("Error deleting order", ToastType.ERROR, 3)
            return False
        await self.fetch_orders()
        stats = self.dashboard_stats
        stats.pending_orders = max(0, stats.pending_orders - 1)
        self.toasts.add("Order deleted successfully", ToastType.SUCCESS, 3)
        return True

    # Admin: products

    async def create_product(self, form: ProductForm) -> bool:
        if not self._require_admin():
            return False
        try:
            form.validate_required()
        except ValueError as e:
            self.toasts.add(str(e), ToastType.WARNING, 3)
            return False

        logger.info("Starting product creation...")
        try:
            await self.client.create_product(form.to_fields(), form.photos)
        except MCABackendError as e:
            logger.error(f"Error adding product: {e}", exc_info=True)
            self.toasts.add(f"Error adding product: {e.message}", ToastType.ERROR, 5)
            return False

        self.toasts.add(
            "Product created successfully! Check the \"Current Products\" section below.",
            ToastType.SUCCESS,
            5,
        )
        await self.fetch_products()
        return True

    async def delete_product(self, product_id: str) -> bool:
        if not self._require_admin():
            return False
        try:
            await self.client.delete_product(product_id)
        except MCABackendError as e:
            logger.error(f"Error deleting product: {e}", exc_info=True)
            self.toasts.add("Error deleting product", ToastType.ERROR, 3)
            return False
        await self.fetch_products()
        stats = self.dashboard_stats
        stats.total_products = max(0, stats.total_products - 1)
        self.toasts.add("Product deleted successfully!", ToastType.SUCCESS, 3)
        return True

    # Admin: hero content

    async def fetch_admin_hero_content(self) -> list[HeroContent]:
        if not self._require_admin():
            return self.admin_hero_contents
        try:
            payload = await self.client.get_admin_hero_content()
        except MCABackendError as e:
            logger.error(f"Error fetching hero content: {e}", exc_info=True)
            self.toasts.add(f"Error fetching hero content: {e.message}", ToastType.ERROR, 5)
            return self.admin_hero_contents
        self.admin_hero_contents = parse_hero_contents(payload)
        logger.info(f"Hero content loaded for management: {len(self.admin_hero_contents)} items")
        return self.admin_hero_contents

    def edit_hero_content(self, content_id: str) -> HeroForm:
        content = next((c for c in self.admin_hero_contents if c.id == content_id), None)
        if content is None:
            raise KeyError(content_id)
        return HeroForm.from_content(content)

    async def save_hero_content(self, form: HeroForm) -> bool:
        if not self._require_admin():
            return False
        try:
            form.validate_required()
        except ValueError as e:
            self.toasts.add(str(e), ToastType.WARNING, 3)
            return False

        try:
            await self.client.save_hero_content(
                form.to_fields(), media=form.media, content_id=form.editing_id
            )
        except MCABackendError as e:
            logger.error(f"Error saving hero content: {e}", exc_info=True)
            if e.status_code is None:
                self.toasts.add(
                    "Network error: please check that the backend is running", ToastType.ERROR, 5
                )
            else:
                self.toasts.add(f"Error saving hero content: {e.message}", ToastType.ERROR, 5)
            return False

        action = "updated" if form.editing_id else "created"
        self.toasts.add(f"Hero content {action} successfully!", ToastType.SUCCESS, 3)
        await self.fetch_admin_hero_content()
        return True

    async def delete_hero_content(self, content_id: str) -> bool:
        if not self._require_admin():
            return False
        try:
            await self.client.delete_hero_content(content_id)
        except MCABackendError as e:
            logger.error(f"Error deleting hero content: {e}", exc_info=True)
            self.toasts.add(f"Error deleting hero content: {e.message}", ToastType.ERROR, 5)
            return False
        await self.fetch_admin_hero_content()
        self.toasts.add("Hero content deleted successfully", ToastType.SUCCESS, 3)
        return True

    async def close(self) -> None:
        self.toasts.clear()
        await self.client.close()
