from __future__ import annotations

from typing import Any, Iterable, Optional, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from apps.carts.aggregate import ProductRef
    from .models import Product


class ProductRepositoryProtocol(Protocol):
    def list(self, **filters) -> Iterable["Product"]: ...

    def search(
        self, *, name: Optional[str] = None, category: Optional[str] = None
    ) -> Iterable["Product"]: ...

    def get(self, **filters) -> Optional["Product"]: ...

    def create(self, **data) -> "Product": ...

    def update_scalar(self, product: "Product", **fields) -> "Product": ...

    def delete(self, product: "Product") -> None: ...


class CacheBackendProtocol(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any, timeout: Optional[int] = None) -> None: ...


class CartSnapshotSyncProtocol(Protocol):
    def remove_product(self, product_id: int) -> int: ...

    def refresh_product(self, product: "ProductRef") -> int: ...
