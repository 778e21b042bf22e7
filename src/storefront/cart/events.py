"""Domain events for the Cart aggregate."""

from protean.fields import Boolean, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Cart")
class CartItemAdded:
    """A product was added to the cart, or an existing line grew."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_key = String(required=True, max_length=255)
    product_id = String(required=True, max_length=255)
    variant_id = String(max_length=255)
    quantity = Integer(required=True)
    merged = Boolean(default=False)  # quantity folded into an existing line


@storefront.event(part_of="Cart")
class CartQuantityUpdated:
    """The quantity of a cart line was set directly."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_key = String(required=True, max_length=255)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@storefront.event(part_of="Cart")
class CartItemRemoved:
    """A line was removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_key = String(required=True, max_length=255)


@storefront.event(part_of="Cart")
class CartCleared:
    """All lines were removed, typically after an order was placed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    items_cleared = Integer(required=True)
