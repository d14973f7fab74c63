from typing import Iterable, List

from .dtos import OrderDTO
from .models import Order


class OrderMapper:
    @staticmethod
    def to_dto(order: Order) -> OrderDTO:
        return OrderDTO(
            id=order.id,
            user_id=order.user_id,
            total_amount=str(order.total_amount),
            shipping_address=order.shipping_address,
            phone=order.phone,
            email=order.email,
            payment_method=order.payment_method,
            status=order.status,
            created_at=order.created_at.isoformat() if order.created_at else "",
            items=list(order.items or []),
        )

    @staticmethod
    def many_to_dto(orders: Iterable[Order]) -> List[OrderDTO]:
        return [OrderMapper.to_dto(o) for o in orders]
