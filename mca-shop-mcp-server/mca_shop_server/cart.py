"""Client-side shopping cart."""

import logging
from decimal import Decimal
from typing import Iterator, Optional

from .models import CartItem, Product

logger = logging.getLogger(__name__)


class Cart:
    """
    In-memory shopping cart keyed by product ID.

    There is one line per product; choosing another color or size for a
    product that is already in the cart does not create a second line.
    """

    def __init__(self) -> None:
        self._items: dict[str, CartItem] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[CartItem]:
        return iter(list(self._items.values()))

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._items

    @property
    def items(self) -> list[CartItem]:
        return list(self._items.values())

    @property
    def total(self) -> Decimal:
        """Sum of price x quantity across all lines."""
        return sum((item.subtotal for item in self._items.values()), Decimal("0"))

    @property
    def item_count(self) -> int:
        """Total number of units in the cart."""
        return sum(item.quantity for item in self._items.values())

    def is_empty(self) -> bool:
        return not self._items

    def get(self, product_id: str) -> Optional[CartItem]:
        return self._items.get(product_id)

    def add(self, product: Product, quantity: int = 1, color: str = "", size: str = "") -> CartItem:
        """
        Add a product to the cart.

        Args:
            product: Product (or CartItem carrying its own variant and quantity)
            quantity: Units to add when ``product`` is a plain Product
            color: Chosen color
            size: Chosen size

        Returns:
            The resulting cart line
        """
        if isinstance(product, CartItem):
            quantity = product.quantity
            color = color or product.color
            size = size or product.size
        if quantity < 1:
            raise ValueError("Quantity must be at least 1")

        existing = self._items.get(product.id)
        if existing:
            existing.quantity += quantity
            logger.info(f"Increased {product.id} to quantity {existing.quantity}")
            return existing

        fields = product.model_dump(include=set(Product.model_fields))
        item = CartItem(**fields, color=color, size=size, quantity=quantity)
        self._items[product.id] = item
        logger.info(f"Added {product.id} to cart (qty: {quantity})")
        return item

    def update_quantity(self, product_id: str, quantity: int) -> None:
        """Set a line's quantity; anything below 1 removes the line."""
        if quantity < 1:
            self.remove(product_id)
            return
        item = self._items.get(product_id)
        if item is None:
            raise KeyError(product_id)
        item.quantity = quantity

    def increment(self, product_id: str) -> None:
        item = self._items.get(product_id)
        if item is None:
            raise KeyError(product_id)
        self.update_quantity(product_id, item.quantity + 1)

    def decrement(self, product_id: str) -> None:
        item = self._items.get(product_id)
        if item is None:
            raise KeyError(product_id)
        self.update_quantity(product_id, item.quantity - 1)

    def remove(self, product_id: str) -> bool:
        """Remove a line. Returns False if the product was not in the cart."""
        removed = self._items.pop(product_id, None)
        if removed is None:
            logger.warning(f"Product {product_id} not in cart")
            return False
        logger.info(f"Removed {product_id} from cart")
        return True

    def clear(self) -> None:
        self._items.clear()


class ProductSelection:
    """Variant and quantity picker for a single product (the product detail view)."""

    def __init__(self, product: Product) -> None:
        self.product = product
        self.color = product.colors[0] if product.colors else ""
        self.size = product.sizes[0] if product.sizes else ""
        self.quantity = 1

    def select_color(self, color: str) -> None:
        if color not in self.product.colors:
            raise ValueError(f"Color {color!r} is not available for {self.product.name}")
        self.color = color

    def select_size(self, size: str) -> None:
        if size not in self.product.sizes:
            raise ValueError(f"Size {size!r} is not available for {self.product.name}")
        self.size = size

    def increment(self) -> None:
        self.quantity += 1

    def decrement(self) -> None:
        self.quantity = max(1, self.quantity - 1)

    @property
    def line_total(self) -> Decimal:
        return self.product.price * self.quantity

    def to_cart_item(self) -> CartItem:
        fields = self.product.model_dump(include=set(Product.model_fields))
        return CartItem(**fields, color=self.color, size=self.size, quantity=self.quantity)
