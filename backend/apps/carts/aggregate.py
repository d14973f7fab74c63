"""Shopping cart aggregate.

The cart is a value (:class:`CartState`) transformed by pure reducer
functions. :class:`CartAggregate` binds a state to a storage key and writes a
snapshot through its storage collaborator after every mutation. Line items
are matched by product id; at most one line item exists per product.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, Dict, Iterable, Mapping, Optional, Protocol, Tuple

from django.db import DatabaseError

from apps.common import get_logger

logger = get_logger(__name__).bind(component="carts", layer="aggregate")

SNAPSHOT_VERSION = 1


class InvalidQuantity(ValueError):
    """Raised when a cart operation receives a non-positive quantity."""


@dataclass(frozen=True)
class ProductRef:
    id: int
    name: str
    price: Decimal
    image: str = ""
    category: str = ""

    @classmethod
    def from_product(cls, product: Any) -> "ProductRef":
        """Normalize a catalog product (model or DTO) into a cart reference."""
        return cls(
            id=int(product.id),
            name=str(getattr(product, "name", "") or ""),
            price=Decimal(str(product.price)),
            image=str(getattr(product, "image", "") or ""),
            category=str(getattr(product, "category", "") or ""),
        )


@dataclass(frozen=True)
class CartLineItem:
    product: ProductRef
    quantity: int

    @property
    def product_id(self) -> int:
        return self.product.id

    @property
    def subtotal(self) -> Decimal:
        return self.product.price * self.quantity


@dataclass(frozen=True)
class CartState:
    items: Tuple[CartLineItem, ...] = field(default_factory=tuple)

    @property
    def total(self) -> Decimal:
        # Derived on every read, never stored
        return sum((item.subtotal for item in self.items), Decimal("0"))

    @property
    def count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find(self, product_id: int) -> Optional[CartLineItem]:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None


def _check_quantity(quantity: Any) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidQuantity(f"Quantity must be an integer, got {quantity!r}")
    if quantity < 1:
        raise InvalidQuantity(f"Quantity must be positive, got {quantity}")
    return quantity


def add_item(state: CartState, product: ProductRef, quantity: int = 1) -> CartState:
    """Merge-on-add: increment an existing line or append a new one."""
    quantity = _check_quantity(quantity)
    if state.find(product.id) is None:
        return CartState(state.items + (CartLineItem(product, quantity),))
    return CartState(
        tuple(
            CartLineItem(product, item.quantity + quantity)
            if item.product_id == product.id
            else item
            for item in state.items
        )
    )


def remove_item(state: CartState, product_id: int) -> CartState:
    return CartState(tuple(i for i in state.items if i.product_id != product_id))


def update_quantity(state: CartState, product_id: int, quantity: int) -> CartState:
    """Overwrite the quantity of a line item.

    No validation happens here; callers are responsible for rejecting
    quantities below one.
    """
    return CartState(
        tuple(
            replace(item, quantity=quantity) if item.product_id == product_id else item
            for item in state.items
        )
    )


def update_items(state: CartState, items: Iterable[CartLineItem]) -> CartState:
    """Replace the whole collection, merging duplicate product ids."""
    merged: Dict[int, CartLineItem] = {}
    for item in items:
        existing = merged.get(item.product_id)
        if existing is None:
            merged[item.product_id] = item
        else:
            merged[item.product_id] = CartLineItem(
                item.product, existing.quantity + item.quantity
            )
    return CartState(tuple(merged.values()))


def clear_cart(state: CartState) -> CartState:
    return CartState()


def reprice_items(state: CartState, products: Mapping[int, ProductRef]) -> CartState:
    """Swap every embedded reference for the current one in ``products``.

    Items whose product is absent from ``products`` are kept as they are.
    """
    return CartState(
        tuple(
            CartLineItem(products[item.product_id], item.quantity)
            if item.product_id in products
            else item
            for item in state.items
        )
    )


def product_to_payload(product: ProductRef) -> Dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "price": str(product.price),
        "image": product.image,
        "category": product.category,
    }


def state_to_payload(state: CartState) -> Dict[str, Any]:
    return {
        "items": [
            {"product": product_to_payload(item.product), "quantity": item.quantity}
            for item in state.items
        ],
        "version": SNAPSHOT_VERSION,
    }


def state_from_payload(payload: Any) -> CartState:
    """Hydrate a state from a stored snapshot; raises ValueError when malformed."""
    if not isinstance(payload, dict):
        raise ValueError("Cart snapshot must be an object")
    raw_items = payload.get("items") or []
    if not isinstance(raw_items, list):
        raise ValueError("Cart snapshot items must be a list")
    items = []
    for raw in raw_items:
        try:
            product = raw["product"]
            ref = ProductRef(
                id=int(product["id"]),
                name=str(product.get("name", "")),
                price=Decimal(str(product["price"])),
                image=str(product.get("image", "") or ""),
                category=str(product.get("category", "") or ""),
            )
            quantity = int(raw["quantity"])
        except (KeyError, TypeError, ArithmeticError) as exc:
            raise ValueError(f"Malformed cart line item: {raw!r}") from exc
        if quantity < 1:
            raise ValueError(f"Stored quantity must be positive: {raw!r}")
        items.append(CartLineItem(ref, quantity))
    return update_items(CartState(), items)


class CartStorage(Protocol):
    def read(self, storage_key: str) -> Optional[Dict[str, Any]]: ...

    def write(self, storage_key: str, payload: Dict[str, Any]) -> None: ...

    def read_for_update(self, storage_key: str) -> Optional[Dict[str, Any]]: ...


class CartAggregate:
    def __init__(self, storage_key: str, storage: CartStorage, state: Optional[CartState] = None):
        self.storage_key = storage_key
        self.storage = storage
        self.state = state or CartState()
        self.logger = logger.bind(storage_key=storage_key)

    @classmethod
    def load(
        cls, storage_key: str, storage: CartStorage, *, for_update: bool = False
    ) -> "CartAggregate":
        """Hydrate from storage; ``for_update`` locks the snapshot row until commit."""
        payload = (
            storage.read_for_update(storage_key) if for_update else storage.read(storage_key)
        )
        if payload is None:
            return cls(storage_key, storage)
        try:
            state = state_from_payload(payload)
        except ValueError as exc:
            logger.warning(
                "Discarding unreadable cart snapshot",
                storage_key=storage_key,
                error=str(exc),
            )
            state = CartState()
        return cls(storage_key, storage, state)

    @property
    def items(self) -> Tuple[CartLineItem, ...]:
        return self.state.items

    @property
    def total(self) -> Decimal:
        return self.state.total

    @property
    def count(self) -> int:
        return self.state.count

    def _apply(self, state: CartState, operation: str, strict: bool = False) -> CartState:
        self.state = state
        self.logger.debug(
            "Cart mutated", operation=operation, items=len(state.items), total=state.total
        )
        self.persist(strict=strict)
        return state

    def persist(self, strict: bool = False) -> None:
        """Write the snapshot. Failures are logged unless ``strict``, which re-raises."""
        try:
            self.storage.write(self.storage_key, state_to_payload(self.state))
        except DatabaseError:
            if strict:
                raise
            # In-memory state stays authoritative for this request
            self.logger.exception("Failed to persist cart snapshot")

    def add_item(self, product: ProductRef, quantity: int = 1) -> CartState:
        return self._apply(add_item(self.state, product, quantity), "add_item")

    def remove_item(self, product_id: int) -> CartState:
        return self._apply(remove_item(self.state, product_id), "remove_item")

    def update_quantity(self, product_id: int, quantity: int) -> CartState:
        return self._apply(
            update_quantity(self.state, product_id, quantity), "update_quantity"
        )

    def update_items(self, items: Iterable[CartLineItem]) -> CartState:
        return self._apply(update_items(self.state, items), "update_items")

    def clear(self, *, strict: bool = False) -> CartState:
        return self._apply(clear_cart(self.state), "clear_cart", strict=strict)
