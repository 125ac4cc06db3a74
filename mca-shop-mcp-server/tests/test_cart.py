from decimal import Decimal

import pytest

from mca_shop_server.cart import Cart, ProductSelection
from mca_shop_server.models import Product


def make_product(product_id: str, price: int, **kwargs) -> Product:
    return Product(id=product_id, name=f"Product {product_id}", price=Decimal(price), **kwargs)


def test_total_sums_price_times_quantity():
    cart = Cart()
    cart.add(make_product("a", 500), quantity=2)
    cart.add(make_product("b", 300))

    assert cart.total == Decimal("1300")
    assert cart.item_count == 3
    assert len(cart) == 2


def test_total_recomputes_after_changes():
    cart = Cart()
    cart.add(make_product("a", 500), quantity=2)
    cart.add(make_product("b", 300))

    cart.update_quantity("b", 3)
    assert cart.total == Decimal("1900")

    cart.remove("a")
    assert cart.total == Decimal("900")

    cart.clear()
    assert cart.total == Decimal("0")
    assert cart.is_empty()


def test_adding_same_product_increases_quantity_and_keeps_variant():
    cart = Cart()
    product = make_product("a", 100, colors=["Red", "Green"], sizes=["M"])
    cart.add(product, color="Red", size="M")
    cart.add(product, quantity=2, color="Green")

    assert len(cart) == 1
    item = cart.get("a")
    assert item.quantity == 3
    assert item.color == "Red"


def test_decrement_of_single_unit_removes_line():
    cart = Cart()
    cart.add(make_product("a", 100), quantity=2)

    cart.decrement("a")
    assert cart.get("a").quantity == 1

    cart.decrement("a")
    assert "a" not in cart


def test_quantity_below_one_removes_line():
    cart = Cart()
    cart.add(make_product("a", 100))
    cart.update_quantity("a", 0)
    assert cart.is_empty()


def test_increment_and_unknown_product():
    cart = Cart()
    cart.add(make_product("a", 100))
    cart.increment("a")
    assert cart.get("a").quantity == 2

    with pytest.raises(KeyError):
        cart.increment("missing")
    assert cart.remove("missing") is False


def test_add_rejects_non_positive_quantity():
    with pytest.raises(ValueError):
        Cart().add(make_product("a", 100), quantity=0)


def test_selection_defaults_and_bounds():
    product = make_product("a", 250, colors=["Red", "Green"], sizes=["S", "M"])
    selection = ProductSelection(product)

    assert selection.color == "Red"
    assert selection.size == "S"
    assert selection.quantity == 1

    selection.decrement()
    assert selection.quantity == 1

    selection.increment()
    selection.increment()
    assert selection.line_total == Decimal("750")

    selection.select_color("Green")
    item = selection.to_cart_item()
    assert (item.color, item.size, item.quantity) == ("Green", "S", 3)


def test_selection_rejects_unavailable_variant():
    selection = ProductSelection(make_product("a", 100, colors=["Red"]))
    with pytest.raises(ValueError):
        selection.select_color("Blue")
    with pytest.raises(ValueError):
        selection.select_size("XL")


def test_selection_without_variants():
    selection = ProductSelection(make_product("a", 100))
    assert selection.color == ""
    assert selection.size == ""
