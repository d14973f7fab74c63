from typing import Optional

from apps.common.repository import GenericRepository
from .models import Product


class ProductRepository(GenericRepository[Product]):
    def __init__(self):
        super().__init__(Product)

    def list(self, **filters):  # type: ignore[override]
        return self.model.objects.filter(**filters).order_by("id")

    def search(self, *, name: Optional[str] = None, category: Optional[str] = None):
        qs = self.model.objects.all()
        if name:
            qs = qs.filter(name__icontains=name)
        if category:
            qs = qs.filter(category__iexact=category)
        return qs.order_by("id")

    def get_many(self, product_ids):
        return {p.id: p for p in self.model.objects.filter(id__in=list(product_ids))}

    def update_scalar(self, product: Product, **fields):
        changed = {k: v for k, v in fields.items() if v is not None}
        if changed:
            # full save so updated_at is refreshed
            for key, value in changed.items():
                setattr(product, key, value)
            product.save()
        return product
