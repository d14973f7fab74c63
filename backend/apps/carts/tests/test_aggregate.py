import unittest
from decimal import Decimal

from django.db import DatabaseError

from apps.carts.aggregate import (
    CartAggregate,
    CartLineItem,
    CartState,
    InvalidQuantity,
    ProductRef,
    add_item,
    clear_cart,
    remove_item,
    reprice_items,
    state_from_payload,
    state_to_payload,
    update_items,
    update_quantity,
)


def product(pid, price, name=None):
    return ProductRef(id=pid, name=name or f"Product {pid}", price=Decimal(str(price)))


class MemoryStorage:
    def __init__(self, payloads=None):
        self.payloads = dict(payloads or {})
        self.writes = 0

    def read(self, storage_key):
        return self.payloads.get(storage_key)

    def write(self, storage_key, payload):
        self.writes += 1
        self.payloads[storage_key] = payload

    def read_for_update(self, storage_key):
        self.locked = storage_key
        return self.read(storage_key)


class FailingStorage(MemoryStorage):
    def write(self, storage_key, payload):
        raise DatabaseError("disk full")


class CartReducerTests(unittest.TestCase):
    def test_add_item_appends_new_line(self):
        state = add_item(CartState(), product(1, 10), 2)
        self.assertEqual(len(state.items), 1)
        self.assertEqual(state.items[0].quantity, 2)
        self.assertEqual(state.total, Decimal("20"))

    def test_repeated_add_merges_into_one_line(self):
        state = CartState()
        for qty in (1, 2, 4):
            state = add_item(state, product(7, "2.50"), qty)
        self.assertEqual(len(state.items), 1)
        self.assertEqual(state.items[0].quantity, 7)
        self.assertEqual(state.total, Decimal("17.50"))

    def test_add_refreshes_embedded_product(self):
        state = add_item(CartState(), product(1, 10, "Old"), 1)
        state = add_item(state, product(1, 12, "New"), 1)
        self.assertEqual(state.items[0].product.name, "New")
        self.assertEqual(state.total, Decimal("24"))

    def test_add_rejects_non_positive_or_non_integer_quantity(self):
        for bad in (0, -1, 1.5, "2", True):
            with self.assertRaises(InvalidQuantity):
                add_item(CartState(), product(1, 10), bad)

    def test_remove_absent_item_is_noop(self):
        state = add_item(CartState(), product(1, 10), 1)
        self.assertEqual(remove_item(state, 99), state)

    def test_update_quantity_overwrites_and_ignores_absent(self):
        state = add_item(CartState(), product(1, 10), 1)
        state = update_quantity(state, 1, 5)
        self.assertEqual(state.items[0].quantity, 5)
        self.assertEqual(update_quantity(state, 2, 3), state)

    def test_update_items_merges_duplicates(self):
        items = [
            CartLineItem(product(1, 3), 1),
            CartLineItem(product(2, 1), 2),
            CartLineItem(product(1, 3), 4),
        ]
        state = update_items(CartState(), items)
        self.assertEqual([i.product_id for i in state.items], [1, 2])
        self.assertEqual(state.find(1).quantity, 5)
        self.assertEqual(state.total, Decimal("17"))

    def test_reprice_swaps_known_products_only(self):
        state = add_item(add_item(CartState(), product(1, 10), 2), product(2, 5), 1)
        repriced = reprice_items(state, {1: product(1, "12.50", name="Renamed")})
        self.assertEqual(repriced.total, Decimal("30.00"))
        self.assertEqual(repriced.items[0].product.name, "Renamed")
        self.assertEqual(repriced.items[0].quantity, 2)
        self.assertIs(repriced.items[1], state.items[1])

    def test_clear_cart(self):
        state = add_item(CartState(), product(1, 10), 3)
        cleared = clear_cart(state)
        self.assertTrue(cleared.is_empty)
        self.assertEqual(cleared.total, Decimal("0"))

    def test_shopping_scenario(self):
        state = add_item(CartState(), product(1, 10), 2)
        self.assertEqual(state.total, Decimal("20"))
        state = add_item(state, product(1, 10), 3)
        self.assertEqual(state.find(1).quantity, 5)
        self.assertEqual(state.total, Decimal("50"))
        state = add_item(state, product(2, 5), 1)
        self.assertEqual(state.total, Decimal("55"))
        state = remove_item(state, 1)
        self.assertEqual(state.total, Decimal("5"))
        self.assertEqual(len(state.items), 1)
        state = clear_cart(state)
        self.assertEqual(state.total, Decimal("0"))
        self.assertEqual(state.items, ())

    def test_total_tracks_every_mutation(self):
        state = CartState()
        steps = [
            lambda s: add_item(s, product(1, "1.10"), 3),
            lambda s: add_item(s, product(2, "0.05"), 7),
            lambda s: update_quantity(s, 1, 1),
            lambda s: remove_item(s, 2),
            lambda s: add_item(s, product(3, "9.99"), 2),
        ]
        for step in steps:
            state = step(state)
            expected = sum(
                (i.product.price * i.quantity for i in state.items), Decimal("0")
            )
            self.assertEqual(state.total, expected)


class SnapshotPayloadTests(unittest.TestCase):
    def test_payload_keeps_prices_as_strings(self):
        state = add_item(CartState(), product(1, "19.90"), 2)
        payload = state_to_payload(state)
        self.assertEqual(payload["version"], 1)
        self.assertEqual(payload["items"][0]["product"]["price"], "19.90")
        self.assertEqual(state_from_payload(payload), state)

    def test_malformed_payload_raises_value_error(self):
        with self.assertRaises(ValueError):
            state_from_payload({"items": [{"product": {"name": "x"}, "quantity": 1}]})
        with self.assertRaises(ValueError):
            state_from_payload(["not", "a", "dict"])


class CartAggregateTests(unittest.TestCase):
    def test_mutations_write_snapshots(self):
        storage = MemoryStorage()
        cart = CartAggregate.load("cart-storage:user:1", storage)
        cart.add_item(product(1, 10), 2)
        cart.add_item(product(1, 10), 1)
        self.assertEqual(storage.writes, 2)
        reloaded = CartAggregate.load("cart-storage:user:1", storage)
        self.assertEqual(reloaded.count, 3)
        self.assertEqual(reloaded.total, Decimal("30"))

    def test_unreadable_snapshot_hydrates_empty(self):
        storage = MemoryStorage({"k": {"items": "garbage"}})
        cart = CartAggregate.load("k", storage)
        self.assertEqual(cart.items, ())

    def test_write_failure_keeps_in_memory_state(self):
        cart = CartAggregate("k", FailingStorage())
        cart.add_item(product(1, 4), 2)
        self.assertEqual(cart.total, Decimal("8"))

    def test_strict_clear_raises_on_write_failure(self):
        cart = CartAggregate("k", FailingStorage())
        with self.assertRaises(DatabaseError):
            cart.clear(strict=True)

    def test_load_for_update_uses_locked_read(self):
        storage = MemoryStorage()
        CartAggregate("k", storage).add_item(product(1, 4), 1)
        cart = CartAggregate.load("k", storage, for_update=True)
        self.assertEqual(storage.locked, "k")
        self.assertEqual(cart.count, 1)

    def test_invalid_quantity_does_not_persist(self):
        storage = MemoryStorage()
        cart = CartAggregate("k", storage)
        with self.assertRaises(InvalidQuantity):
            cart.add_item(product(1, 4), 0)
        self.assertEqual(storage.writes, 0)
        self.assertTrue(cart.state.is_empty)
