"""Shared BDD fixtures and step definitions for the storefront."""

import pytest
from pytest_bdd import given, parsers, then

from storefront.cart.store import CartStore


@pytest.fixture()
def outcome():
    """Container for what the last When step produced."""
    return {"order": None, "exc": None}


@pytest.fixture()
def reload_cart(storage):
    """Build a fresh CartStore over the same storage, as a page reload would."""

    def _reload():
        return CartStore(storage)

    return _reload


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("an empty cart")
def empty_cart(cart_store):
    assert cart_store.is_empty()


@given(parsers.cfparse('a cart with product "{product_id}" quantity {qty:d} at {price:d}'))
def cart_with_product(cart_store, product_id, qty, price):
    cart_store.add_item(product_id, "Trail Runner", price, quantity=qty, seller_id="seller-001")


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the cart item count is {count:d}"))
def cart_item_count(cart_store, count):
    assert cart_store.item_count() == count


@then(parsers.cfparse("the cart subtotal is {amount:d}"))
def cart_subtotal(cart_store, amount):
    assert cart_store.subtotal() == amount
