from __future__ import annotations

from apps.catalog.repositories import ProductRepository

from .mappers import CartItemMapper, CartMapper
from .repositories import CartSnapshotRepository
from .services import CartService


def build_cart_service() -> CartService:
    return CartService(
        snapshots=CartSnapshotRepository(),
        products=ProductRepository(),
        cart_mapper=CartMapper(CartItemMapper()),
    )
