import types
import unittest
from decimal import Decimal

from apps.carts.mappers import CartMapper
from apps.carts.services import CartService

KEY = "cart-storage:user:1"


class FakeSnapshots:
    def __init__(self):
        self.payloads = {}

    def read(self, storage_key):
        return self.payloads.get(storage_key)

    def read_for_update(self, storage_key):
        return self.read(storage_key)

    def write(self, storage_key, payload):
        self.payloads[storage_key] = payload


class FakeProducts:
    def __init__(self, *products):
        self._products = {p.id: p for p in products}

    def get(self, **filters):
        return self._products.get(filters.get("id"))

    def get_many(self, product_ids):
        return {pid: self._products[pid] for pid in product_ids if pid in self._products}


def stub_product(pid, price, name="Item"):
    return types.SimpleNamespace(
        id=pid, name=name, price=Decimal(price), image="", category="misc"
    )


class CartServiceTests(unittest.TestCase):
    def setUp(self):
        self.snapshots = FakeSnapshots()
        self.products = FakeProducts(stub_product(1, "10.00"), stub_product(2, "5.00"))
        self.service = CartService(
            self.snapshots, self.products, CartMapper(currency="AZN")
        )

    def test_empty_cart(self):
        dto = self.service.get_cart(KEY)
        self.assertEqual(dto.items, [])
        self.assertEqual(dto.total, "0.00")
        self.assertEqual(dto.currency, "AZN")

    def test_add_item_merges_and_persists(self):
        self.service.add_item(KEY, {"product_id": 1, "quantity": 2})
        dto, error = self.service.add_item(KEY, {"product_id": 1, "quantity": 3})
        self.assertIsNone(error)
        self.assertEqual(len(dto.items), 1)
        self.assertEqual(dto.items[0].quantity, 5)
        self.assertEqual(dto.total, "50.00")
        stored = self.snapshots.payloads[KEY]
        self.assertEqual(stored["items"][0]["quantity"], 5)

    def test_add_unknown_product(self):
        dto, error = self.service.add_item(KEY, {"product_id": 99})
        self.assertIsNone(dto)
        self.assertEqual(error[0], "NOT_FOUND")
        self.assertNotIn(KEY, self.snapshots.payloads)

    def test_add_invalid_quantity(self):
        dto, error = self.service.add_item(KEY, {"product_id": 1, "quantity": -2})
        self.assertEqual(error[0], "VALIDATION_ERROR")

    def test_update_quantity(self):
        self.service.add_item(KEY, {"product_id": 2})
        dto, error = self.service.update_quantity(KEY, 2, {"quantity": 4})
        self.assertIsNone(error)
        self.assertEqual(dto.total, "20.00")
        _, error = self.service.update_quantity(KEY, 2, {"quantity": 0})
        self.assertEqual(error[0], "VALIDATION_ERROR")
    def test_update_quantity_is_noop_when_absent(self):
        self.service.add_item(KEY, {"product_id": 2, "quantity": 3})
        before = dict(self.snapshots.payloads[KEY])
        dto, error = self.service.update_quantity(KEY, 1, {"quantity": 5})
        self.assertIsNone(error)
        self.assertEqual([(i.product.id, i.quantity) for i in dto.items], [(2, 3)])
        self.assertEqual(dto.total, "15.00")
        self.assertEqual(self.snapshots.payloads[KEY], before)

    def test_add_item_rejects_merged_quantity_over_limit(self):
        self.service.add_item(KEY, {"product_id": 1, "quantity": 998})
        dto, error = self.service.add_item(KEY, {"product_id": 1, "quantity": 2})
        self.assertIsNone(dto)
        self.assertEqual(error[0], "VALIDATION_ERROR")
        self.assertIn("quantity", error[2])
        self.assertEqual(self.service.get_cart(KEY).items[0].quantity, 998)
        _, error = self.service.add_item(KEY, {"product_id": 1, "quantity": 1})
        self.assertIsNone(error)

    def test_remove_item_is_noop_when_absent(self):
        self.service.add_item(KEY, {"product_id": 1})
        dto = self.service.remove_item(KEY, 2)
        self.assertEqual(dto.count, 1)
        dto = self.service.remove_item(KEY, 1)
        self.assertEqual(dto.items, [])

    def test_replace_items_merges_duplicates(self):
        dto, error = self.service.replace_items(
            KEY,
            {
                "items": [
                    {"product_id": 1, "quantity": 1},
                    {"product_id": 2, "quantity": 2},
                    {"product_id": 1, "quantity": 1},
                ]
            },
        )
        self.assertIsNone(error)
        self.assertEqual([i.quantity for i in dto.items], [2, 2])
        self.assertEqual(dto.total, "30.00")

    def test_replace_rejects_merged_duplicates_over_limit(self):
        _, error = self.service.replace_items(
            KEY,
            {
                "items": [
                    {"product_id": 1, "quantity": 600},
                    {"product_id": 1, "quantity": 600},
                ]
            },
        )
        self.assertEqual(error[0], "VALIDATION_ERROR")
        self.assertIn("1", error[2]["items"])
        self.assertNotIn(KEY, self.snapshots.payloads)

    def test_replace_with_unknown_product_writes_nothing(self):
        self.service.add_item(KEY, {"product_id": 1})
        before = dict(self.snapshots.payloads[KEY])
        _, error = self.service.replace_items(
            KEY, {"items": [{"product_id": 42, "quantity": 1}]}
        )
        self.assertEqual(error[0], "NOT_FOUND")
        self.assertEqual(self.snapshots.payloads[KEY], before)

    def test_clear_cart(self):
        self.service.add_item(KEY, {"product_id": 1, "quantity": 3})
        dto = self.service.clear_cart(KEY)
        self.assertEqual(dto.total, "0.00")
        self.assertEqual(self.service.get_cart(KEY).count, 0)

    def test_carts_are_isolated_by_key(self):
        self.service.add_item(KEY, {"product_id": 1})
        other = self.service.get_cart("cart-storage:session:abc")
        self.assertEqual(other.items, [])
