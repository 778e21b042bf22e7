"""Cart aggregate: the shopper's line items and their derived totals.

The cart lives on the client: it is never saved through a repository. The
CartStore owns one instance, snapshots it to client storage after every
mutation, and rebuilds it from that snapshot on startup.

Line items are keyed by product + variant. Adding the same key again grows the
existing line instead of creating a duplicate; the price and name captured by
the first add are kept.
"""

from datetime import UTC, datetime

import structlog
from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String

from storefront.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityUpdated
from storefront.domain import storefront
from storefront.pricing.calculator import line_subtotal

logger = structlog.get_logger(__name__)

DEFAULT_VARIANT = "default"

# Fields written to client storage; aggregates are always recomputed on load.
SNAPSHOT_FIELDS = (
    "product_id",
    "variant_id",
    "product_name",
    "unit_price",
    "quantity",
    "image_url",
    "seller_id",
)


def line_key(product_id, variant_id=None) -> str:
    """Composite identity of a cart line: ``<product_id>:<variant_id|default>``."""
    return f"{product_id}:{variant_id or DEFAULT_VARIANT}"


@storefront.entity(part_of="Cart")
class LineItem:
    """One purchasable unit in the cart: a product, optionally a specific variant."""

    item_key = Identifier(identifier=True)
    product_id = String(required=True, max_length=255)
    variant_id = String(max_length=255)
    product_name = String(max_length=255, default="")
    unit_price = Integer(required=True, min_value=0)  # minor currency units
    quantity = Integer(required=True, min_value=1)
    image_url = String(max_length=1024)
    seller_id = String(max_length=255)

    def line_total(self) -> int:
        return self.unit_price * self.quantity

    def snapshot(self) -> dict:
        return {field: getattr(self, field) for field in SNAPSHOT_FIELDS}


@storefront.aggregate
class Cart:
    items = HasMany(LineItem)
    updated_at = DateTime()

    @invariant.post
    def line_item_keys_must_be_unique(self):
        keys = [item.item_key for item in self.items]
        if len(keys) != len(set(keys)):
            raise ValidationError({"items": ["A cart cannot hold two lines for the same product variant"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def restore(cls, entries):
        """Rebuild a cart from a storage snapshot.

        Entries that fail validation are skipped. Entries sharing a key are
        folded together the same way repeated adds are.
        """
        cart = cls()
        lines: dict[str, LineItem] = {}

        for entry in entries or []:
            if not isinstance(entry, dict):
                logger.warning("Skipping malformed cart snapshot entry", entry=repr(entry))
                continue

            data = {field: entry.get(field) for field in SNAPSHOT_FIELDS}
            data["variant_id"] = data["variant_id"] or None
            key = line_key(data["product_id"], data["variant_id"])

            if key in lines:
                if isinstance(data["quantity"], int) and data["quantity"] > 0:
                    lines[key].quantity += data["quantity"]
                continue

            try:
                lines[key] = LineItem(item_key=key, **data)
            except ValidationError as exc:
                logger.warning("Skipping invalid cart snapshot entry", item_key=key, errors=exc.messages)

        for item in lines.values():
            cart.add_items(item)

        return cart

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def find(self, item_key):
        return next((i for i in self.items if i.item_key == item_key), None)

    def subtotal(self) -> int:
        """Σ(unit_price × quantity) over the current lines."""
        return line_subtotal(self.items)

    def item_count(self) -> int:
        """Σ(quantity) over the current lines."""
        return sum(item.quantity for item in self.items)

    def is_empty(self) -> bool:
        return not self.items

    def snapshot(self) -> list[dict]:
        return [item.snapshot() for item in self.items]

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(
        self,
        product_id,
        product_name,
        unit_price,
        quantity=1,
        variant_id=None,
        seller_id=None,
        image_url=None,
    ):
        """Add a line, or grow the existing line for the same product variant.

        A non-positive quantity is ignored. Returns the affected line, or None
        when nothing changed.
        """
        if quantity is None or quantity <= 0:
            logger.warning(
                "Ignoring add to cart with non-positive quantity",
                product_id=str(product_id),
                variant_id=variant_id,
                quantity=quantity,
            )
            return None

        if isinstance(unit_price, bool) or not isinstance(unit_price, int):
            raise ValidationError({"unit_price": ["Unit price must be an integer amount in minor currency units"]})

        variant_id = variant_id or None
        key = line_key(product_id, variant_id)
        existing = self.find(key)

        if existing:
            existing.quantity += quantity
            item = existing
        else:
            item = LineItem(
                item_key=key,
                product_id=str(product_id),
                variant_id=variant_id,
                product_name=product_name or "",
                unit_price=unit_price,
                quantity=quantity,
                image_url=image_url,
                seller_id=seller_id,
            )
            self.add_items(item)

        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                item_key=key,
                product_id=str(product_id),
                variant_id=variant_id,
                quantity=quantity,
                merged=existing is not None,
            )
        )
        return item

    def update_quantity(self, item_key, quantity):
        """Set a line's quantity. Values below 1 are clamped to 1; removal is a separate operation."""
        item = self.find(item_key)
        if item is None:
            return None

        previous_quantity = item.quantity
        item.quantity = max(1, quantity)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                item_key=item_key,
                previous_quantity=previous_quantity,
                new_quantity=item.quantity,
            )
        )
        return item

    def remove_item(self, item_key):
        item = self.find(item_key)
        if item is None:
            return None

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartItemRemoved(cart_id=str(self.id), item_key=item_key))
        return item

    def clear(self):
        """Empty the cart."""
        items = list(self.items)
        for item in items:
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartCleared(cart_id=str(self.id), items_cleared=len(items)))
