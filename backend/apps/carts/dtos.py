from dataclasses import dataclass
from typing import List


@dataclass
class CartItemDTO:
    product_id: int
    name: str
    price: str
    image: str
    category: str
    quantity: int
    subtotal: str


@dataclass
class CartDTO:
    items: List[CartItemDTO]
    total: str
    count: int
    currency: str
