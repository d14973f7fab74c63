from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import ErrorResponseSerializer
from apps.api.utils import service_error_response
from apps.common import get_logger
from .container import build_cart_service
from .serializers import (
    CartItemWriteSerializer,
    CartQuantitySerializer,
    CartReadSerializer,
    CartReplaceSerializer,
)
from .utils import resolve_cart_key

logger = get_logger(__name__).bind(component="carts", layer="view")

PRODUCT_ID_PARAM = OpenApiParameter("product_id", int, OpenApiParameter.PATH)


def _respond(dto, error, log, success_status=status.HTTP_200_OK):
    if error:
        log.warning("Cart operation failed", code=error[0], detail=error[1])
        return service_error_response(error)
    return Response(CartReadSerializer(dto).data, status=success_status)


@extend_schema(tags=["Cart"])
class CartView(APIView):
    """The caller's cart: per user when authenticated, per session otherwise."""

    permission_classes = [AllowAny]
    service = build_cart_service()
    log = logger.bind(view="CartView")

    @extend_schema(summary="Get cart", responses={200: CartReadSerializer})
    def get(self, request):
        key = resolve_cart_key(request)
        return Response(CartReadSerializer(self.service.get_cart(key)).data)

    @extend_schema(
        summary="Replace cart items",
        request=CartReplaceSerializer,
        responses={
            200: CartReadSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def put(self, request):
        key = resolve_cart_key(request)
        self.log.info("Replacing cart items", storage_key=key)
        dto, error = self.service.replace_items(key, request.data)
        return _respond(dto, error, self.log)

    @extend_schema(summary="Clear cart", responses={200: CartReadSerializer})
    def delete(self, request):
        key = resolve_cart_key(request)
        self.log.info("Clearing cart", storage_key=key)
        return Response(CartReadSerializer(self.service.clear_cart(key)).data)


@extend_schema(tags=["Cart"])
class CartItemListView(APIView):
    permission_classes = [AllowAny]
    service = build_cart_service()
    log = logger.bind(view="CartItemListView")

    @extend_schema(
        summary="Add product to cart",
        description="Adding a product already in the cart increases its quantity.",
        request=CartItemWriteSerializer,
        responses={
            200: CartReadSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        key = resolve_cart_key(request)
        self.log.debug("Adding item to cart", storage_key=key)
        dto, error = self.service.add_item(key, request.data)
        return _respond(dto, error, self.log)


@extend_schema(tags=["Cart"])
class CartItemDetailView(APIView):
    permission_classes = [AllowAny]
    service = build_cart_service()
    log = logger.bind(view="CartItemDetailView")

    @extend_schema(
        summary="Set item quantity",
        description="No-op returning the current cart when the product is not in it.",
        parameters=[PRODUCT_ID_PARAM],
        request=CartQuantitySerializer,
        responses={
            200: CartReadSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def patch(self, request, product_id: int):
        key = resolve_cart_key(request)
        dto, error = self.service.update_quantity(key, product_id, request.data)
        return _respond(dto, error, self.log)

    @extend_schema(
        summary="Remove item",
        parameters=[PRODUCT_ID_PARAM],
        responses={200: CartReadSerializer},
    )
    def delete(self, request, product_id: int):
        key = resolve_cart_key(request)
        return Response(CartReadSerializer(self.service.remove_item(key, product_id)).data)
