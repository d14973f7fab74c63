from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from apps.catalog.models import Product


class CartSnapshotRepositoryProtocol(Protocol):
    def read(self, storage_key: str) -> Optional[Dict[str, Any]]:
        ...

    def write(self, storage_key: str, payload: Dict[str, Any]) -> None:
        ...

    def read_for_update(self, storage_key: str) -> Optional[Dict[str, Any]]:
        ...


class ProductRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional["Product"]:
        ...

    def get_many(self, product_ids: Iterable[int]) -> Dict[int, "Product"]:
        ...
