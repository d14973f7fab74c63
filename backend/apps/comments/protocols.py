from __future__ import annotations

from typing import Iterable, Optional, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from apps.catalog.models import Product
    from .models import Comment


class CommentRepositoryProtocol(Protocol):
    def list_top_level(self, product_id: int) -> Iterable["Comment"]:
        ...

    def list_replies(self, parent_ids: Iterable[int]) -> Iterable["Comment"]:
        ...

    def get(self, **filters) -> Optional["Comment"]:
        ...

    def create(self, **data) -> "Comment":
        ...


class ProductLookupProtocol(Protocol):
    def exists(self, **filters) -> bool:
        ...
