from django.conf import settings
from decimal import Decimal

from django.db import models

TOTAL_MAX_DIGITS = 12
TOTAL_DECIMAL_PLACES = 2
# Largest value total_amount can hold
ORDER_TOTAL_MAX = Decimal(10) ** (TOTAL_MAX_DIGITS - TOTAL_DECIMAL_PLACES) - Decimal("0.01")


class Order(models.Model):
    class PaymentMethod(models.TextChoices):
        ONLINE = "online", "Online"
        CASH = "cash", "Cash on delivery"

    class Status(models.TextChoices):
        PAID = "paid", "Paid"
        PENDING = "pending", "Pending"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="orders"
    )
    total_amount = models.DecimalField(
        max_digits=TOTAL_MAX_DIGITS, decimal_places=TOTAL_DECIMAL_PLACES
    )
    shipping_address = models.TextField()
    phone = models.CharField(max_length=32)
    email = models.EmailField()
    payment_method = models.CharField(max_length=16, choices=PaymentMethod.choices)
    status = models.CharField(max_length=16, choices=Status.choices)
    # Line items as they were at checkout
    items = models.JSONField(default=list)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "orders"
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"Order {self.id} ({self.status})"
