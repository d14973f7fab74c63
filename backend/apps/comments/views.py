from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import ErrorResponseSerializer
from apps.api.utils import service_error_response
from apps.common import get_logger
from .container import build_comment_service
from .serializers import CommentCreateSerializer, CommentSerializer

logger = get_logger(__name__).bind(component="comments", layer="view")


@extend_schema(tags=["Comments"])
class ProductCommentListView(APIView):
    # Posting requires authentication; enforced by RequestValidationMiddleware
    permission_classes = [AllowAny]
    service = build_comment_service()
    log = logger.bind(view="ProductCommentListView")

    @extend_schema(
        summary="List product comments",
        parameters=[OpenApiParameter("product_id", int, OpenApiParameter.PATH)],
        responses={
            200: CommentSerializer(many=True),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request, product_id: int):
        data, error = self.service.list_comments(product_id)
        if error:
            return service_error_response(error)
        return Response(CommentSerializer(data, many=True).data)

    @extend_schema(
        summary="Post a comment or reply",
        parameters=[OpenApiParameter("product_id", int, OpenApiParameter.PATH)],
        request=CommentCreateSerializer,
        responses={
            201: CommentSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            401: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request, product_id: int):
        author_id = getattr(request, "validated_user_id", None) or request.user.id
        self.log.info("Posting comment", product_id=product_id, author_id=author_id)
        dto, error = self.service.create_comment(product_id, author_id, request.data)
        if error:
            return service_error_response(error)
        return Response(CommentSerializer(dto).data, status=status.HTTP_201_CREATED)
