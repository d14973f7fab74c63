import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from rest_framework import serializers

from apps.users.validators import validate_phone
from .models import Order

_CARD_NUMBER = re.compile(r"^[0-9]{13,19}$")
_EXPIRY = re.compile(r"^(0[1-9]|1[0-2])/([0-9]{2})$")
_CVV = re.compile(r"^[0-9]{3,4}$")


def _text(data: Dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = data.get(key)
        if value not in (None, ""):
            return str(value).strip()
    return ""


@dataclass
class CheckoutCommand:
    """Checkout form input. Card fields are validated and then dropped."""

    payment_method: str
    email: str
    phone: str
    address: str
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def status(self) -> str:
        if self.payment_method == Order.PaymentMethod.ONLINE:
            return Order.Status.PAID
        return Order.Status.PENDING

    @staticmethod
    def _card_errors(data: Dict[str, Any]) -> Dict[str, str]:
        errors: Dict[str, str] = {}
        number = re.sub(r"[\s-]", "", _text(data, "card_number", "cardNumber"))
        if not _CARD_NUMBER.match(number):
            errors["card_number"] = "Enter a valid card number."
        if not _EXPIRY.match(_text(data, "expiry_date", "expiryDate")):
            errors["expiry_date"] = "Expiry date must use the MM/YY format."
        if not _CVV.match(_text(data, "cvv")):
            errors["cvv"] = "CVV must be 3 or 4 digits."
        if not _text(data, "card_holder", "cardHolder"):
            errors["card_holder"] = "Card holder name is required."
        return errors

    @staticmethod
    def from_raw(payload: Any) -> "CheckoutCommand":
        data = payload if isinstance(payload, dict) else {}
        errors: Dict[str, str] = {}
        method = _text(data, "payment_method", "paymentMethod").lower()
        if method not in Order.PaymentMethod.values:
            errors["payment_method"] = "Payment method must be 'online' or 'cash'."
        email = _text(data, "email")
        if not email:
            errors["email"] = "Email is required."
        else:
            try:
                validate_email(email)
            except DjangoValidationError:
                errors["email"] = "Enter a valid email address."
        phone = _text(data, "phone")
        if not phone:
            errors["phone"] = "Phone is required."
        else:
            try:
                phone = validate_phone(phone)
            except serializers.ValidationError:
                errors["phone"] = "Enter a valid phone number."
        address = _text(data, "address", "shipping_address")
        if not address:
            errors["address"] = "Shipping address is required."
        if method == Order.PaymentMethod.ONLINE:
            errors.update(CheckoutCommand._card_errors(data))
        return CheckoutCommand(
            payment_method=method,
            email=email,
            phone=phone,
            address=address,
            errors=errors,
        )
