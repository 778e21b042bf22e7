"""Tests for CartStore persistence, rehydration and listeners."""

import json

from storefront.cart.store import STORAGE_KEY, CartStore
from storefront.storage.memory_adapter import MemoryStorage


def _stored(storage):
    return json.loads(storage.get(STORAGE_KEY))


class TestPersistence:
    def test_every_mutation_writes_a_snapshot(self, cart_store, storage):
        cart_store.add_item("P1", "Trail Runner", 1000, quantity=2)
        cart_store.update_quantity("P1:default", 3)
        cart_store.add_item("P2", "Socks", 300)
        cart_store.remove_item("P2:default")
        assert storage.writes == 4
        assert _stored(storage)["items"][0]["quantity"] == 3

    def test_snapshot_excludes_aggregates(self, cart_store, storage):
        cart_store.add_item("P1", "Trail Runner", 1000, quantity=2)
        document = _stored(storage)
        assert "subtotal" not in document
        assert "item_count" not in document
        assert document["items"][0]["unit_price"] == 1000

    def test_noops_do_not_write(self, cart_store, storage):
        cart_store.add_item("P1", "Trail Runner", 1000, quantity=0)
        cart_store.update_quantity("P9:default", 2)
        cart_store.remove_item("P9:default")
        assert storage.writes == 0

    def test_clear_writes_empty_snapshot(self, cart_store, storage):
        cart_store.add_item("P1", "Trail Runner", 1000)
        cart_store.clear()
        assert _stored(storage)["items"] == []
        assert cart_store.item_count() == 0


class TestRehydration:
    def test_cart_survives_a_reload(self, storage):
        first = CartStore(storage)
        first.add_item("P1", "Trail Runner", 1000, quantity=2, variant_id="V1")
        first.add_item("P2", "Socks", 300)

        reloaded = CartStore(storage)
        assert reloaded.item_count() == 3
        assert reloaded.subtotal() == 2300
        assert reloaded.find("P1", "V1").quantity == 2

    def test_corrupt_snapshot_starts_empty(self):
        store = CartStore(MemoryStorage({STORAGE_KEY: "{not json"}))
        assert store.is_empty()

    def test_unexpected_shapes_start_empty(self):
        assert CartStore(MemoryStorage({STORAGE_KEY: "[1, 2]"})).is_empty()
        assert CartStore(MemoryStorage({STORAGE_KEY: '{"items": "nope"}'})).is_empty()

    def test_partial_snapshot_keeps_good_entries(self):
        document = {
            "items": [
                {"product_id": "P1", "product_name": "Trail Runner", "unit_price": 1000, "quantity": 1},
                {"product_name": "No product id", "unit_price": 1, "quantity": 1},
            ]
        }
        store = CartStore(MemoryStorage({STORAGE_KEY: json.dumps(document)}))
        assert [i.product_id for i in store.items()] == ["P1"]

    def test_custom_storage_key(self, storage):
        store = CartStore(storage, storage_key="guest-cart")
        store.add_item("P1", "Trail Runner", 1000)
        assert storage.get("guest-cart") is not None
        assert storage.get(STORAGE_KEY) is None


class TestMerge:
    def test_merge_follows_add_rules(self, cart_store):
        cart_store.add_item("P1", "Trail Runner", 1000, quantity=1, variant_id="V1")
        merged = cart_store.merge(
            [
                {"product_id": "P1", "variant_id": "V1", "unit_price": 1200, "quantity": 3},
                {"product_id": "P2", "product_name": "Socks", "unit_price": 300, "quantity": 2},
            ]
        )
        assert merged == 2
        assert cart_store.find("P1", "V1").quantity == 4
        assert cart_store.find("P1", "V1").unit_price == 1000
        assert cart_store.item_count() == 6

    def test_merge_skips_bad_entries(self, cart_store, storage):
        merged = cart_store.merge(
            [
                {"product_name": "missing id", "unit_price": 100},
                {"product_id": "P3", "unit_price": 9.99},
                {"product_id": "P4", "unit_price": 100, "quantity": 0},
            ]
        )
        assert merged == 0
        assert cart_store.is_empty()
        assert storage.writes == 0


class TestListeners:
    def test_listeners_see_mutations_in_order(self, cart_store):
        seen = []
        cart_store.subscribe(lambda cart: seen.append(cart.item_count()))

        cart_store.add_item("P1", "Trail Runner", 1000)
        cart_store.add_item("P1", "Trail Runner", 1000, quantity=2)
        cart_store.update_quantity("P1:default", 1)
        cart_store.clear()

        assert seen == [1, 3, 1, 0]

    def test_unsubscribe(self, cart_store):
        seen = []
        unsubscribe = cart_store.subscribe(seen.append)
        cart_store.add_item("P1", "Trail Runner", 1000)
        unsubscribe()
        cart_store.add_item("P2", "Socks", 300)
        assert len(seen) == 1


class TestEventBuffer:
    def test_listeners_see_the_mutation_event(self, cart_store):
        seen = []
        cart_store.subscribe(lambda cart: seen.append(type(cart._events[-1]).__name__))

        cart_store.add_item("P1", "Trail Runner", 1000)
        cart_store.remove_item("P1:default")

        assert seen == ["CartItemAdded", "CartItemRemoved"]

    def test_events_do_not_accumulate(self, cart_store):
        cart_store.add_item("P1", "Trail Runner", 1000)
        for quantity in range(2, 502):
            cart_store.update_quantity("P1:default", quantity)

        assert cart_store.item_count() == 501
        assert cart_store.cart._events == []
