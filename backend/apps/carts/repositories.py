from typing import Any, Callable, Dict, List, Optional

from apps.common import get_logger
from apps.common.repository import GenericRepository
from .aggregate import ProductRef, product_to_payload
from .models import CartSnapshot

logger = get_logger(__name__).bind(component="carts", layer="repository")


def _line_product_id(item: Any) -> Optional[str]:
    if not isinstance(item, dict):
        return None
    return str((item.get("product") or {}).get("id"))


class CartSnapshotRepository(GenericRepository[CartSnapshot]):
    """Cart storage backed by the ``cart_snapshots`` table."""

    def __init__(self):
        super().__init__(CartSnapshot)

    def read(self, storage_key: str) -> Optional[Dict[str, Any]]:
        snapshot = self.get(storage_key=storage_key)
        return snapshot.payload if snapshot else None

    def read_for_update(self, storage_key: str) -> Optional[Dict[str, Any]]:
        """Like :meth:`read` but locks the row; call inside ``transaction.atomic``."""
        snapshot = (
            self.model.objects.select_for_update().filter(storage_key=storage_key).first()
        )
        return snapshot.payload if snapshot else None

    def write(self, storage_key: str, payload: Dict[str, Any]) -> None:
        self.model.objects.update_or_create(
            storage_key=storage_key, defaults={"payload": payload}
        )

    def _rewrite_items(
        self, product_id: int, rewrite: Callable[[List[Any]], List[Any]]
    ) -> int:
        changed = 0
        for snapshot in self.model.objects.select_for_update().iterator():
            payload = snapshot.payload if isinstance(snapshot.payload, dict) else {}
            items = payload.get("items") or []
            if not any(_line_product_id(item) == str(product_id) for item in items):
                continue
            payload["items"] = rewrite(items)
            snapshot.payload = payload
            snapshot.save(update_fields=["payload", "updated_at"])
            changed += 1
        return changed

    def remove_product(self, product_id: int) -> int:
        """Drop ``product_id`` from every stored cart; returns how many changed."""
        changed = self._rewrite_items(
            product_id,
            lambda items: [i for i in items if _line_product_id(i) != str(product_id)],
        )
        logger.debug("Pruned product from carts", product_id=product_id, carts=changed)
        return changed

    def refresh_product(self, product: ProductRef) -> int:
        """Replace the embedded product of every stored line item for ``product.id``."""
        fresh = product_to_payload(product)
        changed = self._rewrite_items(
            product.id,
            lambda items: [
                dict(item, product=fresh) if _line_product_id(item) == str(product.id) else item
                for item in items
            ],
        )
        logger.debug("Refreshed product in carts", product_id=product.id, carts=changed)
        return changed
