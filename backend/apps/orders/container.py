from __future__ import annotations

from apps.carts.container import build_cart_service
from apps.catalog.repositories import ProductRepository

from .repositories import OrderRepository
from .services import CheckoutService, OrderService


def build_checkout_service() -> CheckoutService:
    return CheckoutService(
        orders=OrderRepository(),
        carts=build_cart_service(),
        products=ProductRepository(),
    )


def build_order_service() -> OrderService:
    return OrderService(orders=OrderRepository())
