from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import ErrorResponseSerializer, paginated_response
from apps.api.utils import error_response, service_error_response
from apps.common import get_logger
from .container import build_product_service
from .pagination import ProductListPagination
from .serializers import ProductReadSerializer, ProductWriteSerializer

logger = get_logger(__name__).bind(component="catalog", layer="view")


@extend_schema(tags=["Catalog"])
class ProductListView(APIView):
    # Staff-only writes are enforced by RequestValidationMiddleware
    permission_classes = [AllowAny]
    service = build_product_service()
    log = logger.bind(view="ProductListView")

    @extend_schema(
        operation_id="products_list",
        summary="List products",
        description="Supports pagination via ?page and ?limit. Unfiltered results may be served from cache.",
        parameters=[
            OpenApiParameter(
                name="search",
                description="Case-insensitive product name filter",
                required=False,
                type=str,
            ),
            OpenApiParameter(
                name="category",
                description="Filter by category name",
                required=False,
                type=str,
            ),
        ],
        responses={200: paginated_response(ProductReadSerializer)},
    )
    def get(self, request):
        search = (request.query_params.get("search") or "").strip() or None
        category = (request.query_params.get("category") or "").strip() or None
        self.log.debug(
            "Handling product list request", search=search, category=category
        )
        return self.service.list_products_paginated(
            request,
            search=search,
            category=category,
            paginator_class=ProductListPagination,
            serializer_class=ProductReadSerializer,
            view=self,
        )

    @extend_schema(
        summary="Create product",
        request=ProductWriteSerializer,
        responses={
            201: ProductReadSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            403: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        serializer = ProductWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.log.info(
            "Creating product via API", name=serializer.validated_data.get("name")
        )
        dto, error = self.service.create_product(serializer.validated_data)
        if error:
            return service_error_response(error)
        self.log.info("Product created via API", product_id=dto.id)
        return Response(ProductReadSerializer(dto).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Catalog"])
class ProductDetailView(APIView):
    permission_classes = [AllowAny]
    service = build_product_service()
    log = logger.bind(view="ProductDetailView")

    @extend_schema(
        operation_id="products_retrieve",
        summary="Get product",
        parameters=[OpenApiParameter("product_id", int, OpenApiParameter.PATH)],
        responses={
            200: ProductReadSerializer,
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request, product_id: int):
        self.log.debug("Fetching product detail", product_id=product_id)
        dto = self.service.get_product(product_id)
        if not dto:
            return error_response(
                "NOT_FOUND", "Product not found", {"id": str(product_id)}
            )
        return Response(ProductReadSerializer(dto).data)

    def _update(self, request, product_id: int, partial: bool):
        serializer = ProductWriteSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        dto, error = self.service.update_product(
            product_id, serializer.validated_data, partial=partial
        )
        if error:
            code, message, details = error
            self.log.warning(
                "Product update failed", product_id=product_id, code=code
            )
            return error_response(code, message, details)
        return Response(ProductReadSerializer(dto).data)

    @extend_schema(
        summary="Replace product",
        request=ProductWriteSerializer,
        responses={
            200: ProductReadSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def put(self, request, product_id: int):
        self.log.info("Replacing product", product_id=product_id)
        return self._update(request, product_id, partial=False)

    @extend_schema(
        summary="Update product",
        request=ProductWriteSerializer,
        responses={
            200: ProductReadSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def patch(self, request, product_id: int):
        self.log.info("Patching product", product_id=product_id)
        return self._update(request, product_id, partial=True)

    @extend_schema(
        summary="Delete product",
        description="Also removes the product from every stored cart.",
        responses={204: None, 404: OpenApiResponse(response=ErrorResponseSerializer)},
    )
    def delete(self, request, product_id: int):
        self.log.info("Deleting product", product_id=product_id)
        deleted, error = self.service.delete_product(product_id)
        if error:
            return service_error_response(error)
        return Response(status=status.HTTP_204_NO_CONTENT)
