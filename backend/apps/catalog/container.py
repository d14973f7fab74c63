from __future__ import annotations

from django.core.cache import cache

from apps.carts.repositories import CartSnapshotRepository
from .repositories import ProductRepository
from .services import ProductService


def build_product_service(*, disable_cache: bool = False) -> ProductService:
    return ProductService(
        products=ProductRepository(),
        cache_backend=cache,
        cart_snapshots=CartSnapshotRepository(),
        disable_cache=disable_cache,
    )
