from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Type, Union

from django.db import transaction
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

from apps.carts.aggregate import ProductRef
from apps.common import get_logger
from .commands import ProductCreateCommand, ProductUpdateCommand
from .dtos import ProductDTO
from .mappers import ProductMapper
from .models import Product
from .protocols import (
    CacheBackendProtocol,
    CartSnapshotSyncProtocol,
    ProductRepositoryProtocol,
)

logger = get_logger(__name__).bind(component="catalog", layer="service")

ErrorTuple = Tuple[str, str, Optional[Dict[str, Any]]]


class ProductService:
    def __init__(
        self,
        products: ProductRepositoryProtocol,
        cache_backend: CacheBackendProtocol,
        cart_snapshots: Optional[CartSnapshotSyncProtocol] = None,
        disable_cache: bool = False,
    ):
        self.products = products
        self.cache = cache_backend
        self.cart_snapshots = cart_snapshots
        self.disable_cache = disable_cache
        self.logger = logger.bind(service="ProductService")
        # Caching keys
        self._cache_prefix = "products:list"
        self._cache_version_key = f"{self._cache_prefix}:version"
        self._default_version = 1

    def _get_cache_version(self) -> int:
        v = self.cache.get(self._cache_version_key)
        return v or self._default_version

    def _bump_cache_version(self) -> None:
        v = self._get_cache_version()
        # Version key should not expire
        self.cache.set(self._cache_version_key, v + 1, timeout=None)
        self.logger.debug("Bumped product cache version", new_version=v + 1)

    def _cache_key(self, page: str, limit: str) -> str:
        return f"{self._cache_prefix}:v{self._get_cache_version()}:page={page}:limit={limit}"

    def products_queryset(
        self, search: Optional[str] = None, category: Optional[str] = None
    ):
        if search or category:
            return self.products.search(name=search, category=category)
        return self.products.list()

    def list_products_paginated(
        self,
        request,
        *,
        search: Optional[str] = None,
        category: Optional[str] = None,
        paginator_class: Optional[Type[PageNumberPagination]] = None,
        serializer_class=None,
        view=None,
    ):
        """Paginated listing; unfiltered pages are read through the cache."""
        use_cache = not (search or category or self.disable_cache)
        self.logger.debug(
            "Listing products", search=search, category=category, cache_enabled=use_cache
        )
        key = None
        if use_cache:
            key = self._cache_key(
                request.query_params.get("page", "1"),
                request.query_params.get("limit", ""),
            )
            cached = self.cache.get(key)
            if cached is not None:
                self.logger.debug("Product list cache hit", cache_key=key)
                return Response(cached)
            self.logger.debug("Product list cache miss", cache_key=key)
        paginator = (paginator_class or PageNumberPagination)()
        queryset = self.products_queryset(search, category)
        page = paginator.paginate_queryset(queryset, request, view=view)
        dtos = ProductMapper.many_to_dto(page if page is not None else queryset)
        if serializer_class is None:
            from .serializers import ProductReadSerializer  # Avoid circular import

            serializer_class = ProductReadSerializer
        serializer = serializer_class(dtos, many=True)
        if page is None:
            response = Response(serializer.data)
        else:
            response = paginator.get_paginated_response(serializer.data)
        if key is not None:
            self.cache.set(key, response.data)
        return response

    def get_product(self, product_id: int) -> Optional[ProductDTO]:
        self.logger.debug("Fetching product", product_id=product_id)
        p = self.products.get(id=product_id)
        if not p:
            self.logger.info("Product not found", product_id=product_id)
        return ProductMapper.to_dto(p) if p else None

    def create_product(
        self, data: Union[Dict[str, Any], ProductCreateCommand]
    ) -> Tuple[Optional[ProductDTO], Optional[ErrorTuple]]:
        cmd = (
            data
            if isinstance(data, ProductCreateCommand)
            else ProductCreateCommand.from_raw(data)
        )
        if not cmd.is_valid:
            self.logger.warning("Rejecting invalid product", errors=cmd.errors)
            return None, ("VALIDATION_ERROR", "Invalid product data", cmd.errors)
        self.logger.info("Creating product", name=cmd.name)
        product: Product = self.products.create(
            name=cmd.name,
            price=cmd.price,
            description=cmd.description,
            image=cmd.image,
            category=cmd.category,
        )
        self._bump_cache_version()
        self.logger.info("Product created", product_id=product.id)
        return ProductMapper.to_dto(product), None

    def update_product(
        self,
        product_id: int,
        data: Union[Dict[str, Any], ProductUpdateCommand],
        partial: bool = False,
    ) -> Tuple[Optional[ProductDTO], Optional[ErrorTuple]]:
        cmd = (
            data
            if isinstance(data, ProductUpdateCommand)
            else ProductUpdateCommand.from_raw(product_id, data, partial)
        )
        self.logger.info("Updating product", product_id=product_id, partial=cmd.partial)
        if not cmd.is_valid:
            self.logger.warning(
                "Rejecting invalid product update",
                product_id=product_id,
                errors=cmd.errors,
            )
            return None, ("VALIDATION_ERROR", "Invalid product data", cmd.errors)
        product: Optional[Product] = self.products.get(id=product_id)
        if not product:
            self.logger.warning(
                "Product update failed: not found", product_id=product_id
            )
            return None, ("NOT_FOUND", "Product not found", {"id": str(product_id)})
        with transaction.atomic():
            self.products.update_scalar(product, **cmd.changes())
            refreshed = (
                self.cart_snapshots.refresh_product(ProductRef.from_product(product))
                if self.cart_snapshots is not None
                else 0
            )
        self._bump_cache_version()
        self.logger.info(
            "Product updated", product_id=product_id, refreshed_carts=refreshed
        )
        return ProductMapper.to_dto(product), None

    def delete_product(
        self, product_id: int
    ) -> Tuple[bool, Optional[ErrorTuple]]:
        self.logger.info("Deleting product", product_id=product_id)
        product = self.products.get(id=product_id)
        if not product:
            self.logger.warning(
                "Product deletion failed: not found", product_id=product_id
            )
            return False, ("NOT_FOUND", "Product not found", {"id": str(product_id)})
        with transaction.atomic():
            pruned = (
                self.cart_snapshots.remove_product(product_id)
                if self.cart_snapshots is not None
                else 0
            )
            self.products.delete(product)
        self._bump_cache_version()
        self.logger.info(
            "Product deleted", product_id=product_id, pruned_carts=pruned
        )
        return True, None
