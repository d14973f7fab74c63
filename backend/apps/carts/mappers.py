from decimal import Decimal
from typing import Optional

from django.conf import settings

from .aggregate import CartLineItem, CartState
from .dtos import CartDTO, CartItemDTO

TWO_PLACES = Decimal("0.01")


def _money(value: Decimal) -> str:
    return str(value.quantize(TWO_PLACES))


class CartItemMapper:
    def to_dto(self, item: CartLineItem) -> CartItemDTO:
        return CartItemDTO(
            product_id=item.product_id,
            name=item.product.name,
            price=_money(item.product.price),
            image=item.product.image,
            category=item.product.category,
            quantity=item.quantity,
            subtotal=_money(item.subtotal),
        )


class CartMapper:
    def __init__(
        self, item_mapper: Optional[CartItemMapper] = None, currency: Optional[str] = None
    ) -> None:
        self.item_mapper = item_mapper or CartItemMapper()
        self.currency = currency

    def to_dto(self, state: CartState) -> CartDTO:
        return CartDTO(
            items=[self.item_mapper.to_dto(i) for i in state.items],
            total=_money(state.total),
            count=state.count,
            currency=self.currency or settings.STORE_CURRENCY,
        )
