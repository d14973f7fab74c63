from dataclasses import dataclass


@dataclass
class ProductDTO:
    id: int
    name: str
    price: str
    description: str
    image: str
    category: str
