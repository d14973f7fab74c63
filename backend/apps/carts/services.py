from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from apps.common import get_logger
from .aggregate import CartAggregate, CartLineItem, ProductRef
from .commands import (
    MAX_QUANTITY,
    QUANTITY_ERROR,
    CartItemCommand,
    CartQuantityCommand,
    CartReplaceCommand,
)
from .dtos import CartDTO
from .mappers import CartMapper
from .protocols import CartSnapshotRepositoryProtocol, ProductRepositoryProtocol

logger = get_logger(__name__).bind(component="carts", layer="service")

ErrorTuple = Tuple[str, str, Optional[Dict[str, Any]]]


class CartService:
    def __init__(
        self,
        snapshots: CartSnapshotRepositoryProtocol,
        products: ProductRepositoryProtocol,
        cart_mapper: CartMapper,
    ):
        self.snapshots = snapshots
        self.products = products
        self.cart_mapper = cart_mapper
        self.logger = logger.bind(service="CartService")

    def load(self, storage_key: str) -> CartAggregate:
        return CartAggregate.load(storage_key, self.snapshots)

    def load_for_update(self, storage_key: str) -> CartAggregate:
        return CartAggregate.load(storage_key, self.snapshots, for_update=True)

    def get_cart(self, storage_key: str) -> CartDTO:
        cart = self.load(storage_key)
        self.logger.debug("Fetched cart", storage_key=storage_key, items=len(cart.items))
        return self.cart_mapper.to_dto(cart.state)

    def add_item(
        self, storage_key: str, payload: Dict[str, Any]
    ) -> Tuple[Optional[CartDTO], Optional[ErrorTuple]]:
        cmd = CartItemCommand.from_raw(payload)
        if not cmd.is_valid:
            self.logger.warning("Rejecting cart item", errors=cmd.errors)
            return None, ("VALIDATION_ERROR", "Invalid cart item", cmd.errors)
        product = self.products.get(id=cmd.product_id)
        if not product:
            self.logger.warning(
                "Add to cart failed: product not found", product_id=cmd.product_id
            )
            return None, (
                "NOT_FOUND",
                "Product not found",
                {"product_id": str(cmd.product_id)},
            )
        cart = self.load(storage_key)
        existing = cart.state.find(cmd.product_id)
        if existing is not None and existing.quantity + cmd.quantity > MAX_QUANTITY:
            self.logger.warning(
                "Add to cart rejected: quantity limit",
                product_id=cmd.product_id,
                quantity=existing.quantity + cmd.quantity,
            )
            return None, ("VALIDATION_ERROR", "Invalid cart item", {"quantity": QUANTITY_ERROR})
        cart.add_item(ProductRef.from_product(product), cmd.quantity)
        self.logger.info(
            "Added item to cart",
            storage_key=storage_key,
            product_id=cmd.product_id,
            quantity=cmd.quantity,
            total=cart.total,
        )
        return self.cart_mapper.to_dto(cart.state), None

    def update_quantity(
        self, storage_key: str, product_id: int, payload: Dict[str, Any]
    ) -> Tuple[Optional[CartDTO], Optional[ErrorTuple]]:
        cmd = CartQuantityCommand.from_raw(product_id, payload)
        if not cmd.is_valid:
            return None, ("VALIDATION_ERROR", "Invalid quantity", cmd.errors)
        cart = self.load(storage_key)
        if cart.state.find(product_id) is None:
            # Same no-op contract as remove_item
            self.logger.debug(
                "Quantity update for product not in cart",
                storage_key=storage_key,
                product_id=product_id,
            )
            return self.cart_mapper.to_dto(cart.state), None
        cart.update_quantity(product_id, cmd.quantity)
        return self.cart_mapper.to_dto(cart.state), None

    def remove_item(self, storage_key: str, product_id: int) -> CartDTO:
        cart = self.load(storage_key)
        cart.remove_item(product_id)
        self.logger.info(
            "Removed item from cart", storage_key=storage_key, product_id=product_id
        )
        return self.cart_mapper.to_dto(cart.state)

    def replace_items(
        self, storage_key: str, payload: Dict[str, Any]
    ) -> Tuple[Optional[CartDTO], Optional[ErrorTuple]]:
        cmd = CartReplaceCommand.from_raw(payload)
        if not cmd.is_valid:
            return None, ("VALIDATION_ERROR", "Invalid cart items", cmd.errors)
        merged: Dict[int, int] = {}
        for item in cmd.items:
            merged[item.product_id] = merged.get(item.product_id, 0) + item.quantity
        too_many = sorted(pid for pid, qty in merged.items() if qty > MAX_QUANTITY)
        if too_many:
            return None, (
                "VALIDATION_ERROR",
                "Invalid cart items",
                {"items": {str(pid): {"quantity": QUANTITY_ERROR} for pid in too_many}},
            )
        wanted = [item.product_id for item in cmd.items]
        found = self.products.get_many(wanted)
        missing = sorted({pid for pid in wanted if pid not in found})
        if missing:
            self.logger.warning("Cart replace failed: unknown products", missing=missing)
            return None, (
                "NOT_FOUND",
                "Product not found",
                {"product_ids": [str(pid) for pid in missing]},
            )
        items = [
            CartLineItem(ProductRef.from_product(found[item.product_id]), item.quantity)
            for item in cmd.items
        ]
        cart = self.load(storage_key)
        cart.update_items(items)
        self.logger.info(
            "Replaced cart items", storage_key=storage_key, items=len(cart.items)
        )
        return self.cart_mapper.to_dto(cart.state), None

    def clear_cart(self, storage_key: str) -> CartDTO:
        cart = self.load(storage_key)
        cart.clear()
        self.logger.info("Cleared cart", storage_key=storage_key)
        return self.cart_mapper.to_dto(cart.state)
