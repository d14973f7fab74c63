import unittest

from apps.orders.commands import CheckoutCommand


class CheckoutCommandTests(unittest.TestCase):
    base = {
        "payment_method": "online",
        "email": "a@example.com",
        "phone": "0501234567",
        "address": "Nizami st 5",
        "card_number": "4111-1111-1111-1111",
        "expiry_date": "01/30",
        "cvv": "999",
        "card_holder": "A B",
    }

    def test_valid_online_payload(self):
        cmd = CheckoutCommand.from_raw(self.base)
        self.assertTrue(cmd.is_valid)
        self.assertEqual(cmd.status, "paid")

    def test_camel_case_keys_accepted(self):
        cmd = CheckoutCommand.from_raw(
            {
                "paymentMethod": "cash",
                "email": "a@example.com",
                "phone": "0501234567",
                "address": "x",
            }
        )
        self.assertTrue(cmd.is_valid)
        self.assertEqual(cmd.status, "pending")

    def test_malformed_card_fields(self):
        payload = dict(self.base, card_number="1234", expiry_date="13/30", cvv="12", card_holder=" ")
        cmd = CheckoutCommand.from_raw(payload)
        self.assertEqual(
            set(cmd.errors), {"card_number", "expiry_date", "cvv", "card_holder"}
        )

    def test_unknown_payment_method_and_bad_email(self):
        cmd = CheckoutCommand.from_raw(dict(self.base, payment_method="crypto", email="nope"))
        self.assertIn("payment_method", cmd.errors)
        self.assertIn("email", cmd.errors)
