from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# Upper bound for one line item; keeps order totals inside the order column
MAX_QUANTITY = 999

QUANTITY_ERROR = f"Quantity must be a whole number between 1 and {MAX_QUANTITY}."


def _positive_int(raw: Any, upper: Optional[int] = None) -> Optional[int]:
    if isinstance(raw, bool):
        return None
    try:
        value = int(str(raw).strip())
    except (ValueError, TypeError):
        return None
    if value < 1 or (upper is not None and value > upper):
        return None
    return value


@dataclass
class CartItemCommand:
    product_id: Optional[int]
    quantity: Optional[int]
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @staticmethod
    def from_raw(raw: Any, *, default_quantity: Optional[int] = 1) -> "CartItemCommand":
        if not isinstance(raw, dict):
            return CartItemCommand(None, None, {"item": "Item must be an object."})
        errors: Dict[str, str] = {}
        pid = raw.get("product_id", raw.get("productId"))
        if pid is None:
            # nested product object fallback
            product = raw.get("product")
            if isinstance(product, dict):
                pid = product.get("id")
        product_id = _positive_int(pid)
        if product_id is None:
            errors["product_id"] = "A valid product id is required."
        raw_qty = raw.get("quantity")
        if raw_qty is None and default_quantity is not None:
            quantity: Optional[int] = default_quantity
        else:
            quantity = _positive_int(raw_qty, MAX_QUANTITY)
            if quantity is None:
                errors["quantity"] = QUANTITY_ERROR
        return CartItemCommand(product_id, quantity, errors)


@dataclass
class CartQuantityCommand:
    product_id: int
    quantity: Optional[int]
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @staticmethod
    def from_raw(product_id: int, payload: Any) -> "CartQuantityCommand":
        raw = payload.get("quantity") if isinstance(payload, dict) else None
        quantity = _positive_int(raw, MAX_QUANTITY)
        errors = (
            {"quantity": QUANTITY_ERROR}
            if quantity is None
            else {}
        )
        return CartQuantityCommand(product_id, quantity, errors)


@dataclass
class CartReplaceCommand:
    items: List[CartItemCommand] = field(default_factory=list)
    errors: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @staticmethod
    def from_raw(payload: Any) -> "CartReplaceCommand":
        raw_items = payload.get("items") if isinstance(payload, dict) else None
        if raw_items is None:
            raw_items = []
        if not isinstance(raw_items, list):
            return CartReplaceCommand([], {"items": "Items must be a list."})
        items = [
            CartItemCommand.from_raw(raw, default_quantity=None) for raw in raw_items
        ]
        errors = {str(i): item.errors for i, item in enumerate(items) if item.errors}
        return CartReplaceCommand(items, {"items": errors} if errors else {})
