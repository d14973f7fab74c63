from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from apps.api.schemas import ErrorResponseSerializer
from apps.api.utils import error_response, service_error_response
from apps.common import get_logger
from apps.users.dtos import user_to_dto
from apps.users.serializers import UserSerializer
from .container import build_registration_service, build_session_service
from .serializers import (
    CurrentUserResponseSerializer,
    CustomerTokenObtainPairSerializer,
    DetailResponseSerializer,
    LogoutRequestSerializer,
    RegisterRequestSerializer,
    RegisterResponseSerializer,
    StaffTokenObtainPairSerializer,
)

logger = get_logger(__name__).bind(component="auth", layer="view")


@extend_schema(tags=["Auth"])
class RegisterView(APIView):
    permission_classes = [AllowAny]
    service = build_registration_service()
    log = logger.bind(view="RegisterView")

    @extend_schema(
        summary="Register user",
        request=RegisterRequestSerializer,
        responses={
            201: RegisterResponseSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        serializer = RegisterRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.log.info(
            "Processing registration request",
            username=serializer.validated_data.get("username"),
        )
        result = self.service.register(serializer.validated_data)
        if isinstance(result, tuple):
            code, message, details = result
            self.log.warning("Registration failed", code=code, detail=message)
            return error_response(code, message, details)
        self.log.info("Registration completed", user_id=result["id"])
        return Response(
            RegisterResponseSerializer(result).data, status=status.HTTP_201_CREATED
        )


@extend_schema(tags=["Auth"], summary="Login (JWT obtain pair)")
class LoginView(TokenObtainPairView):
    permission_classes = [AllowAny]
    serializer_class = CustomerTokenObtainPairSerializer


@extend_schema(tags=["Auth"], summary="Refresh JWT")
class RefreshView(TokenRefreshView):
    permission_classes = [AllowAny]


@extend_schema(tags=["Auth"], summary="Staff/Admin Login (JWT obtain pair)")
class StaffLoginView(TokenObtainPairView):
    permission_classes = [AllowAny]
    serializer_class = StaffTokenObtainPairSerializer


@extend_schema(
    tags=["Auth"],
    summary="Get current user",
    description="Anonymous callers get `authenticated: false` and a null user.",
    responses={200: CurrentUserResponseSerializer},
)
class MeView(APIView):
    permission_classes = [AllowAny]
    log = logger.bind(view="MeView")

    def get(self, request):
        user = request.user
        if not getattr(user, "is_authenticated", False):
            return Response({"authenticated": False, "user": None})
        self.log.debug("Returning current user", user_id=user.id)
        return Response(
            {"authenticated": True, "user": UserSerializer(user_to_dto(user)).data}
        )


@extend_schema(tags=["Auth"])
class LogoutView(APIView):
    permission_classes = [IsAuthenticated]
    service = build_session_service()
    log = logger.bind(view="LogoutView")

    @extend_schema(
        summary="Logout (blacklist refresh)",
        request=LogoutRequestSerializer,
        responses={
            200: DetailResponseSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        error = self.service.logout(
            request.data.get("refresh"), getattr(request.user, "id", None)
        )
        if error:
            return service_error_response(error)
        return Response({"detail": "Logged out"}, status=status.HTTP_200_OK)
