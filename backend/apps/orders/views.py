from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import ErrorResponseSerializer
from apps.api.utils import service_error_response
from apps.carts.utils import resolve_cart_key
from apps.common import get_logger
from .container import build_checkout_service, build_order_service
from .serializers import CheckoutRequestSerializer, OrderSerializer

logger = get_logger(__name__).bind(component="orders", layer="view")


@extend_schema(tags=["Orders"])
class CheckoutView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_checkout_service()
    log = logger.bind(view="CheckoutView")

    @extend_schema(
        summary="Place an order from the current cart",
        description="Online payments are recorded as paid, cash orders as pending. Card details are validated but never stored.",
        request=CheckoutRequestSerializer,
        responses={
            201: OrderSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            401: OpenApiResponse(response=ErrorResponseSerializer),
            500: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        user_id = getattr(request, "validated_user_id", None) or request.user.id
        key = resolve_cart_key(request)
        self.log.info("Checkout requested", user_id=user_id)
        dto, error = self.service.checkout(key, user_id, request.data)
        if error:
            return service_error_response(error)
        return Response(OrderSerializer(dto).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Orders"])
class OrderListView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_order_service()
    log = logger.bind(view="OrderListView")

    @extend_schema(
        summary="List orders",
        description="Customers get their own orders; staff get all orders.",
        responses={200: OrderSerializer(many=True)},
    )
    def get(self, request):
        user_id = getattr(request, "validated_user_id", None) or request.user.id
        is_privileged = bool(getattr(request, "is_privileged_user", False))
        data = self.service.list_orders(user_id, is_privileged=is_privileged)
        return Response(OrderSerializer(data, many=True).data)
