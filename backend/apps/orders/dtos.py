from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class OrderDTO:
    id: int
    user_id: int
    total_amount: str
    shipping_address: str
    phone: str
    email: str
    payment_method: str
    status: str
    created_at: str
    items: List[Dict[str, Any]] = field(default_factory=list)
