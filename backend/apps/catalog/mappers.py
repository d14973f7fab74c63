from typing import Iterable, List

from .dtos import ProductDTO
from .models import Product


class ProductMapper:
    @staticmethod
    def to_dto(product: Product) -> ProductDTO:
        return ProductDTO(
            id=product.id,
            name=product.name,
            price=str(product.price),
            description=product.description or "",
            image=product.image or "",
            category=product.category or "",
        )

    @staticmethod
    def many_to_dto(products: Iterable[Product]) -> List[ProductDTO]:
        return [ProductMapper.to_dto(p) for p in products]
