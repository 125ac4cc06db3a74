"""Data models for MCA Shop entities."""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OrderStatus(str, Enum):
    """Lifecycle states an admin can assign to an order."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class BackendStatus(str, Enum):
    """Result of the backend connectivity probe."""

    CHECKING = "checking"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


class Page(str, Enum):
    STORE = "store"
    ADMIN = "admin"


class ToastType(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


PRODUCT_CATEGORIES = ["Jerseys", "Accessories", "Stickers", "Equipment", "Shoes", "Bags"]


class Product(BaseModel):
    """Represents a product from the MCA backend."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(alias="_id", description="Product ID")
    name: str = Field(description="Product name")
    description: str = Field(default="", description="Product description")
    price: Decimal = Field(default=Decimal("0"), description="Product price in DA")
    category: str = Field(default="", description="Product category")
    photos: list[str] = Field(default_factory=list, description="Ordered photo URLs")
    colors: list[str] = Field(default_factory=list, description="Available colors")
    sizes: list[str] = Field(default_factory=list, description="Available sizes")

    @field_validator("photos", "colors", "sizes", mode="before")
    @classmethod
    def _split_list(cls, value):
        # The backend stores colors/sizes as comma-joined strings on some records
        if value is None:
            return []
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value


class CartItem(Product):
    """A product in the cart with the chosen variant and quantity."""

    color: str = Field(default="", description="Chosen color")
    size: str = Field(default="", description="Chosen size")
    quantity: int = Field(default=1, ge=1, description="Quantity of the product")

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


class OrderRequest(BaseModel):
    """Payload posted to /api/public/orders for a single cart line."""

    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(alias="productId")
    product_name: str = Field(alias="productName")
    product_price: Decimal = Field(alias="productPrice")
    product_photos: list[str] = Field(default_factory=list, alias="productPhotos")
    client_name: str = Field(alias="clientName")
    wilaya: str
    address: str
    phone: str
    email: str
    color: str = ""
    size: str = ""
    quantity: int = Field(default=1, ge=1)


class Order(BaseModel):
    """Represents an order as returned by the admin API."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(alias="_id", description="Order ID")
    client_name: str = Field(default="", alias="clientName")
    wilaya: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    product_id: Optional[str] = Field(None, alias="productId")
    product_name: str = Field(default="", alias="productName")
    product_price: Decimal = Field(default=Decimal("0"), alias="productPrice")
    product_photos: list[str] = Field(default_factory=list, alias="productPhotos")
    color: Optional[str] = None
    size: Optional[str] = None
    quantity: int = 1
    status: OrderStatus = OrderStatus.PENDING
    order_date: Optional[datetime] = Field(None, alias="orderDate")
    is_verified: bool = Field(default=False, alias="isVerified")


class HeroContent(BaseModel):
    """A rotating banner slide shown on the storefront landing page."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = Field(None, alias="_id")
    title: str = ""
    subtitle: str = ""
    button_text: str = Field(default="Shop Now", alias="buttonText")
    theme: str = "light"
    order: int = 0
    is_active: bool = Field(default=True, alias="isActive")
    media_url: Optional[str] = Field(None, alias="mediaUrl")
    media_type: Optional[str] = Field(None, alias="mediaType")


class DashboardStats(BaseModel):
    """Aggregate metrics shown on the admin dashboard."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    total_revenue: Decimal = Field(default=Decimal("1250"), alias="totalRevenue")
    revenue_change: float = Field(default=-12.5, alias="revenueChange")
    new_customers: int = Field(default=1234, alias="newCustomers")
    customers_change: float = Field(default=-20, alias="customersChange")
    active_accounts: int = Field(default=45678, alias="activeAccounts")
    accounts_change: float = Field(default=-12.5, alias="accountsChange")
    growth_rate: float = Field(default=4.5, alias="growthRate")
    growth_change: float = Field(default=-4.5, alias="growthChange")
    pending_orders: int = Field(default=2, alias="pendingOrders")
    total_products: int = Field(default=12, alias="totalProducts")


class Toast(BaseModel):
    """An ephemeral notification."""

    id: str
    message: str
    type: ToastType = ToastType.SUCCESS
    duration: float = Field(default=4.0, description="Seconds before auto-dismiss")

    @property
    def title(self) -> str:
        return {
            ToastType.SUCCESS: "Success!",
            ToastType.ERROR: "Error!",
            ToastType.WARNING: "Warning!",
            ToastType.INFO: "Info",
        }[self.type]

    @property
    def icon(self) -> str:
        return {
            ToastType.SUCCESS: "✅",
            ToastType.ERROR: "❌",
            ToastType.WARNING: "⚠️",
            ToastType.INFO: "ℹ️",
        }[self.type]


class AdminCredentials(BaseModel):
    """Admin login form."""

    username: str
    password: str
