from __future__ import annotations

from typing import Any, Dict, Iterable, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from apps.carts.aggregate import CartAggregate
    from .models import Order


class OrderRepositoryProtocol(Protocol):
    def create(self, **data) -> "Order":
        ...

    def list_for_user(self, user_id: int) -> Iterable["Order"]:
        ...

    def list_all(self) -> Iterable["Order"]:
        ...


class CartLoaderProtocol(Protocol):
    def load(self, storage_key: str) -> "CartAggregate":
        ...

    def load_for_update(self, storage_key: str) -> "CartAggregate":
        ...


class ProductLookupProtocol(Protocol):
    def get_many(self, product_ids: Iterable[int]) -> Dict[int, Any]:
        ...
