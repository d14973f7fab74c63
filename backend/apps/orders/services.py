from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from django.db import DatabaseError, transaction

from apps.carts.aggregate import ProductRef, reprice_items, state_to_payload
from apps.common import get_logger
from .commands import CheckoutCommand
from .dtos import OrderDTO
from .mappers import OrderMapper
from .models import ORDER_TOTAL_MAX
from .protocols import (
    CartLoaderProtocol,
    OrderRepositoryProtocol,
    ProductLookupProtocol,
)

logger = get_logger(__name__).bind(component="orders", layer="service")

ErrorTuple = Tuple[str, str, Optional[Dict[str, Any]]]


class CheckoutService:
    def __init__(
        self,
        orders: OrderRepositoryProtocol,
        carts: CartLoaderProtocol,
        products: ProductLookupProtocol,
    ):
        self.orders = orders
        self.carts = carts
        self.products = products
        self.logger = logger.bind(service="CheckoutService")

    def checkout(
        self, storage_key: str, user_id: int, payload: Dict[str, Any]
    ) -> Tuple[Optional[OrderDTO], Optional[ErrorTuple]]:
        """
        Turn the caller's cart into an order.

        The snapshot row is locked for the whole transaction. Line items are
        charged at the current catalog price. The order insert and the cart
        clear commit together; any failure leaves the cart untouched.
        """
        try:
            with transaction.atomic():
                return self._place_order(storage_key, user_id, payload)
        except DatabaseError:
            self.logger.exception("Order placement failed", user_id=user_id)
            return None, ("SERVER_ERROR", "Could not place the order", None)

    def _place_order(
        self, storage_key: str, user_id: int, payload: Dict[str, Any]
    ) -> Tuple[Optional[OrderDTO], Optional[ErrorTuple]]:
        cart = self.carts.load_for_update(storage_key)
        if cart.state.is_empty:
            self.logger.info("Checkout rejected: empty cart", user_id=user_id)
            return None, ("VALIDATION_ERROR", "Cart is empty", None)
        cmd = CheckoutCommand.from_raw(payload)
        if not cmd.is_valid:
            self.logger.warning(
                "Checkout rejected: invalid details",
                user_id=user_id,
                fields=sorted(cmd.errors),
            )
            return None, ("VALIDATION_ERROR", "Invalid checkout details", cmd.errors)

        wanted = [item.product_id for item in cart.items]
        found = self.products.get_many(wanted)
        missing = [pid for pid in wanted if pid not in found]
        if missing:
            self.logger.warning(
                "Checkout rejected: products gone", user_id=user_id, missing=missing
            )
            return None, (
                "VALIDATION_ERROR",
                "Some products are no longer available",
                {"product_ids": [str(pid) for pid in missing]},
            )
        state = reprice_items(
            cart.state, {pid: ProductRef.from_product(p) for pid, p in found.items()}
        )
        total = state.total
        if total > ORDER_TOTAL_MAX:
            self.logger.warning(
                "Checkout rejected: total too large", user_id=user_id, total=total
            )
            return None, (
                "VALIDATION_ERROR",
                "Order total is too large",
                {"total": f"{total:.2f}", "max": f"{ORDER_TOTAL_MAX:.2f}"},
            )

        order = self.orders.create(
            user_id=user_id,
            total_amount=total,
            shipping_address=cmd.address,
            phone=cmd.phone,
            email=cmd.email,
            payment_method=cmd.payment_method,
            status=cmd.status,
            items=state_to_payload(state)["items"],
        )
        cart.clear(strict=True)
        self.logger.info(
            "Order placed",
            order_id=order.id,
            user_id=user_id,
            total=total,
            status=cmd.status,
        )
        return OrderMapper.to_dto(order), None


class OrderService:
    def __init__(self, orders: OrderRepositoryProtocol):
        self.orders = orders
        self.logger = logger.bind(service="OrderService")

    def list_orders(self, user_id: int, *, is_privileged: bool) -> List[OrderDTO]:
        """Staff see every order; customers only their own."""
        self.logger.debug(
            "Listing orders", user_id=user_id, privileged=is_privileged
        )
        qs = self.orders.list_all() if is_privileged else self.orders.list_for_user(user_id)
        return OrderMapper.many_to_dto(qs)
