import unittest
from decimal import Decimal

from apps.catalog.commands import (
    ProductCreateCommand,
    ProductUpdateCommand,
    parse_price,
)


class ParsePriceTests(unittest.TestCase):
    def test_accepts_numeric_strings_and_numbers(self):
        self.assertEqual(parse_price("10").value, Decimal("10.00"))
        self.assertEqual(parse_price("12.5").value, Decimal("12.50"))
        self.assertEqual(parse_price(3).value, Decimal("3.00"))
        self.assertEqual(parse_price(Decimal("0.99")).value, Decimal("0.99"))

    def test_accepts_comma_decimal_separator(self):
        self.assertEqual(parse_price("4,75").value, Decimal("4.75"))

    def test_zero_is_allowed(self):
        result = parse_price("0")
        self.assertTrue(result.ok)
        self.assertEqual(result.value, Decimal("0.00"))

    def test_rejects_empty_input(self):
        for raw in (None, "", "   "):
            result = parse_price(raw)
            self.assertFalse(result.ok)
            self.assertEqual(result.error, "Price is required.")

    def test_rejects_non_numeric(self):
        self.assertEqual(parse_price("abc").error, "Price must be a number.")
        self.assertFalse(parse_price(True).ok)

    def test_rejects_negative(self):
        self.assertEqual(parse_price("-1").error, "Price cannot be negative.")

    def test_rejects_non_finite(self):
        self.assertFalse(parse_price("NaN").ok)
        self.assertFalse(parse_price("Infinity").ok)

    def test_rejects_more_than_two_decimal_places(self):
        self.assertFalse(parse_price("1.999").ok)


class ProductCreateCommandTests(unittest.TestCase):
    def test_from_raw_parses_and_strips(self):
        cmd = ProductCreateCommand.from_raw(
            {
                "id": 99,
                "name": "  Lamp ",
                "price": "15.5",
                "description": "Desk lamp",
                "category": "home",
            }
        )
        self.assertTrue(cmd.is_valid)
        self.assertEqual(cmd.name, "Lamp")
        self.assertEqual(cmd.price, Decimal("15.50"))
        self.assertEqual(cmd.image, "")
        self.assertEqual(cmd.category, "home")

    def test_from_raw_collects_field_errors(self):
        cmd = ProductCreateCommand.from_raw({"name": "", "price": "-3"})
        self.assertFalse(cmd.is_valid)
        self.assertEqual(set(cmd.errors), {"name", "price"})
        self.assertIsNone(cmd.price)


class ProductUpdateCommandTests(unittest.TestCase):
    def test_partial_only_includes_present_fields(self):
        cmd = ProductUpdateCommand.from_raw(5, {"price": "7"}, partial=True)
        self.assertTrue(cmd.is_valid)
        self.assertEqual(cmd.changes(), {"price": Decimal("7.00")})

    def test_partial_rejects_invalid_present_field(self):
        cmd = ProductUpdateCommand.from_raw(5, {"price": "x", "name": "Ok"}, partial=True)
        self.assertEqual(list(cmd.errors), ["price"])
        self.assertEqual(cmd.changes(), {"name": "Ok"})

    def test_full_update_requires_name_and_price(self):
        cmd = ProductUpdateCommand.from_raw(5, {"description": "only"}, partial=False)
        self.assertFalse(cmd.partial)
        self.assertIn("name", cmd.errors)
        self.assertIn("price", cmd.errors)
