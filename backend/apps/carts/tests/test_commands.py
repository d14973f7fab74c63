import unittest

from apps.carts.commands import (
    MAX_QUANTITY,
    CartItemCommand,
    CartQuantityCommand,
    CartReplaceCommand,
)


class CartItemCommandTests(unittest.TestCase):
    def test_defaults_quantity_to_one(self):
        cmd = CartItemCommand.from_raw({"product_id": "3"})
        self.assertTrue(cmd.is_valid)
        self.assertEqual((cmd.product_id, cmd.quantity), (3, 1))

    def test_accepts_camel_case_and_nested_product(self):
        self.assertEqual(CartItemCommand.from_raw({"productId": 4, "quantity": 2}).product_id, 4)
        self.assertEqual(CartItemCommand.from_raw({"product": {"id": 5}}).product_id, 5)

    def test_rejects_quantity_over_limit(self):
        cmd = CartItemCommand.from_raw({"product_id": 1, "quantity": 1000})
        self.assertEqual(set(cmd.errors), {"quantity"})
        self.assertFalse(CartItemCommand.from_raw({"product_id": 1, "quantity": True}).is_valid)

    def test_rejects_bad_values(self):
        cmd = CartItemCommand.from_raw({"product_id": "x", "quantity": 0})
        self.assertEqual(set(cmd.errors), {"product_id", "quantity"})
        self.assertFalse(CartItemCommand.from_raw("nope").is_valid)


class CartQuantityCommandTests(unittest.TestCase):
    def test_requires_positive_quantity(self):
        self.assertTrue(CartQuantityCommand.from_raw(1, {"quantity": 2}).is_valid)
        self.assertFalse(CartQuantityCommand.from_raw(1, {"quantity": 0}).is_valid)
        self.assertFalse(CartQuantityCommand.from_raw(1, {}).is_valid)

    def test_caps_quantity(self):
        self.assertTrue(CartQuantityCommand.from_raw(1, {"quantity": MAX_QUANTITY}).is_valid)
        cmd = CartQuantityCommand.from_raw(1, {"quantity": MAX_QUANTITY + 1})
        self.assertIn("quantity", cmd.errors)
        self.assertFalse(CartQuantityCommand.from_raw(1, {"quantity": 10**12}).is_valid)


class CartReplaceCommandTests(unittest.TestCase):
    def test_requires_explicit_quantities(self):
        cmd = CartReplaceCommand.from_raw({"items": [{"product_id": 1}]})
        self.assertFalse(cmd.is_valid)
        self.assertIn("0", cmd.errors["items"])

    def test_empty_items_is_valid(self):
        cmd = CartReplaceCommand.from_raw({"items": []})
        self.assertTrue(cmd.is_valid)
        self.assertEqual(cmd.items, [])

    def test_non_list_items_rejected(self):
        self.assertFalse(CartReplaceCommand.from_raw({"items": "1,2"}).is_valid)
