"""CartStore: the single owner of the shopper's cart.

Wraps one Cart aggregate, writes a snapshot to client storage after every
mutation and rebuilds the cart from that snapshot when constructed. Listeners
registered with ``subscribe`` are called after each mutation, in the order the
mutations happened.
"""

import json
from collections.abc import Callable

import structlog
from protean.exceptions import ValidationError

from storefront.cart.cart import Cart, line_key
from storefront.storage.port import ClientStorage

logger = structlog.get_logger(__name__)

STORAGE_KEY = "cart-storage"
SNAPSHOT_VERSION = 1


class CartStore:
    def __init__(self, storage: ClientStorage, storage_key: str = STORAGE_KEY) -> None:
        self.storage = storage
        self.storage_key = storage_key
        self._listeners: list[Callable[[Cart], None]] = []
        self.cart = self._load()

    # -------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------
    def _load(self) -> Cart:
        raw = self.storage.get(self.storage_key)
        if not raw:
            return Cart()

        try:
            document = json.loads(raw)
        except ValueError:
            logger.warning("Discarding unreadable cart snapshot", storage_key=self.storage_key)
            return Cart()

        entries = document.get("items", []) if isinstance(document, dict) else []
        if not isinstance(entries, list):
            logger.warning("Cart snapshot has no item list", storage_key=self.storage_key)
            entries = []

        cart = Cart.restore(entries)
        logger.debug("Cart rehydrated", item_count=cart.item_count(), lines=len(cart.items))
        return cart

    def _persist(self) -> None:
        document = {"version": SNAPSHOT_VERSION, "items": self.cart.snapshot()}
        self.storage.set(self.storage_key, json.dumps(document))

    def _changed(self) -> None:
        self._persist()
        for listener in list(self._listeners):
            listener(self.cart)
        # No unit of work ever drains the client-side cart
        self.cart._events.clear()

    def subscribe(self, listener: Callable[[Cart], None]) -> Callable[[], None]:
        """Register a callback run after every mutation. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -------------------------------------------------------------------
    # Mutations
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
        item = self.cart.add_item(
            product_id=product_id,
            product_name=product_name,
            unit_price=unit_price,
            quantity=quantity,
            variant_id=variant_id,
            seller_id=seller_id,
            image_url=image_url,
        )
        if item is not None:
            self._changed()
        return item

    def merge(self, entries) -> int:
        """Add a batch of line entries (e.g. a guest cart) using the add rules.

        Returns the number of entries that changed the cart.
        """
        merged = 0
        for entry in entries:
            try:
                item = self.cart.add_item(
                    product_id=entry["product_id"],
                    product_name=entry.get("product_name", ""),
                    unit_price=entry.get("unit_price", 0),
                    quantity=entry.get("quantity", 1),
                    variant_id=entry.get("variant_id"),
                    seller_id=entry.get("seller_id"),
                    image_url=entry.get("image_url"),
                )
            except (KeyError, ValidationError) as exc:
                logger.warning("Skipping cart entry during merge", entry=repr(entry), error=str(exc))
                continue
            if item is not None:
                merged += 1

        if merged:
            self._changed()
        return merged

    def update_quantity(self, item_key, quantity):
        item = self.cart.update_quantity(item_key, quantity)
        if item is not None:
            self._changed()
        return item

    def remove_item(self, item_key):
        item = self.cart.remove_item(item_key)
        if item is not None:
            self._changed()
        return item

    def clear(self) -> None:
        self.cart.clear()
        self._changed()

    # -------------------------------------------------------------------
    # Derived reads
    # -------------------------------------------------------------------
    def items(self) -> list:
        return list(self.cart.items)

    def find(self, product_id, variant_id=None):
        return self.cart.find(line_key(product_id, variant_id))

    def subtotal(self) -> int:
        return self.cart.subtotal()

    def item_count(self) -> int:
        return self.cart.item_count()

    def is_empty(self) -> bool:
        return self.cart.is_empty()
