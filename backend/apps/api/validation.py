import json
from typing import Any, Dict, Optional

from django.http import HttpRequest
from rest_framework.exceptions import AuthenticationFailed as DRFAuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken

from apps.api.utils import error_response
from apps.common import get_logger
from apps.users.models import User

logger = get_logger(__name__).bind(component="api", layer="validation")

_jwt_authenticator = JWTAuthentication()

WRITE_METHODS = ("POST", "PUT", "PATCH", "DELETE")


def _is_authenticated_user(request: HttpRequest) -> bool:
    user = getattr(request, "user", None)
    if user and getattr(user, "is_authenticated", False) and getattr(user, "id", None):
        return True

    # DRF attaches the authenticated user later in the request lifecycle. Since this
    # middleware runs earlier, attempt JWT authentication manually to support bearer tokens.
    meta = getattr(request, "META", {}) or {}
    auth_header = meta.get("HTTP_AUTHORIZATION") if hasattr(meta, "get") else None
    if not auth_header:
        return False

    try:
        authenticated = _jwt_authenticator.authenticate(request)
    except (InvalidToken, DRFAuthenticationFailed) as exc:
        logger.warning("JWT authentication failed", detail=str(exc))
        return False

    if not authenticated:
        return False

    user, token = authenticated
    if not getattr(user, "is_authenticated", False) or not getattr(user, "id", None):
        return False

    request.user = user
    request.auth = token
    request.is_privileged_user = _is_privileged_user(user)
    logger.debug("Authenticated user from bearer token", user_id=user.id)
    return True


def _set_validated_user(request: HttpRequest, user_id: Optional[int]) -> None:
    request.validated_user_id = user_id
    if hasattr(request, "user"):
        request.is_privileged_user = _is_privileged_user(getattr(request, "user", None))


def _is_privileged_user(user: Any) -> bool:
    return bool(getattr(user, "is_staff", False) or getattr(user, "is_superuser", False))


def _extract_request_data(request: HttpRequest) -> Dict[str, Any]:
    data = getattr(request, "data", None)
    if data not in (None, {}):
        return data
    if request.content_type == "application/json":
        try:
            body = request.body.decode("utf-8") if hasattr(request, "body") else None
            return json.loads(body) if body else {}
        except (ValueError, AttributeError, UnicodeDecodeError):
            return {}
    if hasattr(request, "POST"):
        post = request.POST
        if hasattr(post, "dict"):
            return post.dict()
        return dict(post)
    return {}


def _require_user(request: HttpRequest, view_name: str) -> Any:
    """Resolve the caller or return an UNAUTHORIZED response."""
    if not _is_authenticated_user(request):
        logger.warning(
            "Authentication required", view=view_name, method=request.method
        )
        return error_response("UNAUTHORIZED", "Authentication required")
    _set_validated_user(request, int(request.user.id))
    return None


def _require_staff(request: HttpRequest, view_name: str, message: str) -> Any:
    failure = _require_user(request, view_name)
    if failure is not None:
        return failure
    if not _is_privileged_user(request.user):
        logger.warning(
            "Staff privileges required",
            view=view_name,
            method=request.method,
            user_id=request.user.id,
        )
        return error_response("FORBIDDEN", message)
    return None


def _validate_registration_uniqueness(request: HttpRequest) -> Any:
    data = _extract_request_data(request) or {}
    username = data.get("username")
    email = data.get("email")
    if username and User.objects.filter(username__iexact=username).exists():
        logger.info("Username uniqueness validation failed", username=username)
        return error_response(
            "VALIDATION_ERROR",
            "Username already exists",
            {"field": "username", "value": username},
        )
    if email and User.objects.filter(email__iexact=email).exists():
        logger.info("Email uniqueness validation failed", email=email)
        return error_response(
            "VALIDATION_ERROR",
            "Email already exists",
            {"field": "email", "value": email},
        )
    return None


def validate_request_context(request: HttpRequest, view_class, view_kwargs) -> Any:
    """
    Performs request level validation for specific API views.
    Returns a DRF Response when validation fails; otherwise None and
    attaches validated data to the request instance.
    """
    view_name = getattr(view_class, "__name__", "")
    method = getattr(request, "method", None)

    logger.debug("Running request context validation", view=view_name, method=method)

    if view_name == "ProductListView":
        if method == "POST":
            return _require_staff(
                request, view_name, "You do not have permission to manage products"
            )
    elif view_name == "ProductDetailView":
        if method in WRITE_METHODS:
            return _require_staff(
                request, view_name, "You do not have permission to manage products"
            )
    elif view_name == "ProductCommentListView":
        if method == "POST":
            return _require_user(request, view_name)
    elif view_name in ("CheckoutView", "OrderListView", "ProfileView", "LogoutView"):
        return _require_user(request, view_name)
    elif view_name == "UserListView":
        return _require_staff(
            request, view_name, "You do not have permission to list users"
        )
    elif view_name == "UserDetailView":
        target_raw = view_kwargs.get("user_id")
        try:
            target_user_id = int(target_raw)
        except (TypeError, ValueError):
            logger.warning("Invalid user_id for user detail request", value=target_raw)
            return error_response(
                "VALIDATION_ERROR",
                "Invalid user identifier",
                {"userId": str(target_raw)},
            )
        failure = _require_user(request, view_name)
        if failure is not None:
            return failure
        actor_id = int(request.user.id)
        if not _is_privileged_user(request.user) and actor_id != target_user_id:
            logger.warning(
                "User detail access forbidden",
                actor_id=actor_id,
                target_user_id=target_user_id,
            )
            return error_response(
                "FORBIDDEN", "You do not have permission to view this user"
            )
    elif view_name == "RegisterView":
        if method == "POST":
            return _validate_registration_uniqueness(request)
    elif view_name in ("CartView", "CartItemListView", "CartItemDetailView"):
        # Carts are open to anonymous visitors; bind the user when a token is sent
        if _is_authenticated_user(request):
            _set_validated_user(request, int(request.user.id))
        else:
            request.validated_user_id = None

    return None
