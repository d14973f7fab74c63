from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse

from apps.api.schemas import ErrorResponseSerializer
from apps.api.utils import error_response, service_error_response
from apps.common import get_logger
from .container import build_user_service
from .serializers import UserSerializer, ProfileUpdateSerializer

logger = get_logger(__name__).bind(component="users", layer="view")


@extend_schema(tags=["Users"])
class UserListView(APIView):
    """Admin panel user management listing (staff only)."""

    permission_classes = [IsAuthenticated]
    service = build_user_service()
    log = logger.bind(view="UserListView")

    @extend_schema(
        summary="List users",
        responses={
            200: UserSerializer(many=True),
            403: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request):
        self.log.debug("Listing users via API", actor_id=getattr(request, "validated_user_id", None))
        data = self.service.list_users()
        return Response(UserSerializer(data, many=True).data)


@extend_schema(tags=["Users"])
class UserDetailView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_user_service()
    log = logger.bind(view="UserDetailView")

    @extend_schema(
        summary="Get user",
        parameters=[OpenApiParameter("user_id", int, OpenApiParameter.PATH)],
        responses={
            200: UserSerializer,
            403: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request, user_id: int):
        actor_id = getattr(request, "validated_user_id", None)
        is_privileged = bool(getattr(request, "is_privileged_user", False))
        dto, error = self.service.get_user_with_access(
            user_id, actor_id=actor_id, is_privileged=is_privileged
        )
        if error:
            return service_error_response(error)
        return Response(UserSerializer(dto).data)


@extend_schema(tags=["Users"])
class ProfileView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_user_service()
    log = logger.bind(view="ProfileView")

    @extend_schema(summary="Get own profile", responses={200: UserSerializer})
    def get(self, request):
        dto = self.service.get_user(request.user.id)
        if not dto:
            return error_response("NOT_FOUND", "User not found", {"id": str(request.user.id)})
        return Response(UserSerializer(dto).data)

    @extend_schema(
        summary="Update own profile",
        request=ProfileUpdateSerializer,
        responses={
            200: UserSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def patch(self, request):
        serializer = ProfileUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        self.log.info("Updating own profile", user_id=request.user.id)
        dto = self.service.update_profile(request.user.id, serializer.validated_data)
        if not dto:
            return error_response("NOT_FOUND", "User not found", {"id": str(request.user.id)})
        return Response(UserSerializer(dto).data)
