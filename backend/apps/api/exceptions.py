from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union

from django.core.exceptions import (
    ObjectDoesNotExist,
    PermissionDenied as DjangoPermissionDenied,
    ValidationError as DjangoValidationError,
)
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import (
    AuthenticationFailed,
    MethodNotAllowed,
    NotAuthenticated,
    NotFound,
    ParseError,
    PermissionDenied,
    Throttled,
    UnsupportedMediaType,
    ValidationError,
)
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from apps.api.utils import error_response
from apps.carts.aggregate import InvalidQuantity
from apps.common import get_logger

logger = get_logger(__name__).bind(component="api", layer="exception")

# Ordered: the first matching class wins
DRF_ERROR_CODES: Tuple[Tuple[type, str, str], ...] = (
    (ValidationError, "VALIDATION_ERROR", "Validation failed"),
    (ParseError, "VALIDATION_ERROR", "Malformed request"),
    (NotAuthenticated, "UNAUTHORIZED", "Authentication required"),
    (AuthenticationFailed, "UNAUTHORIZED", "Authentication failed"),
    (PermissionDenied, "FORBIDDEN", "You do not have permission to perform this action"),
    (NotFound, "NOT_FOUND", "Resource not found"),
    (MethodNotAllowed, "METHOD_NOT_ALLOWED", "Method not allowed"),
    (UnsupportedMediaType, "UNSUPPORTED_MEDIA_TYPE", "Unsupported media type"),
    (Throttled, "TOO_MANY_REQUESTS", "Request was throttled"),
)

# Details are only echoed back for these codes
DETAIL_CODES = ("VALIDATION_ERROR", "TOO_MANY_REQUESTS")


class ApplicationError(Exception):
    """
    Domain error raised from services or views and rendered by
    :func:`global_exception_handler`.
    """

    def __init__(
        self,
        code: str,
        message: str,
        *,
        status_code: Optional[int] = None,
        details: Optional[Any] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details

    def to_response(self) -> Response:
        return error_response(
            self.code, self.message, self.details, http_status=self.status_code
        )


def global_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """DRF ``EXCEPTION_HANDLER``: every error leaves the API in the same envelope."""
    bound_logger = _bind_logger(context)

    if isinstance(exc, ApplicationError):
        bound_logger.info("Handled application error", code=exc.code)
        return exc.to_response()

    if isinstance(exc, InvalidQuantity):
        bound_logger.info("Rejected cart quantity", detail=str(exc))
        return error_response("VALIDATION_ERROR", str(exc), {"quantity": str(exc)})

    if isinstance(exc, DjangoValidationError):
        exc = ValidationError(_normalize_django_validation_error(exc))
    elif isinstance(exc, ObjectDoesNotExist):
        exc = NotFound()
    elif isinstance(exc, DjangoPermissionDenied):
        exc = PermissionDenied()

    response = drf_exception_handler(exc, context)
    if response is not None:
        return _from_drf_exception(exc, response, bound_logger)

    bound_logger.exception("Unhandled exception bubbled to global handler")
    return error_response(
        "SERVER_ERROR",
        "Something went wrong",
        http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def _bind_logger(context: Dict[str, Any]):
    log = logger
    view = context.get("view")
    request = context.get("request")
    if view is not None:
        log = log.bind(view=type(view).__name__)
    if request is not None:
        log = log.bind(
            method=getattr(request, "method", None),
            path=getattr(request, "path", None),
        )
    return log


def _from_drf_exception(exc: Exception, response: Response, bound_logger) -> Response:
    status_code = response.status_code
    code, message, details = _classify(exc, response.data, status_code)
    headers = {
        name: value
        for name, value in response.headers.items()
        if name in ("WWW-Authenticate", "Retry-After", "Allow")
    }
    if status_code >= 500:
        bound_logger.error("Converted server error", code=code, status=status_code)
    else:
        bound_logger.info("Converted API exception", code=code, status=status_code)
    return error_response(
        code, message, details, http_status=status_code, headers=headers or None
    )


def _classify(exc: Exception, payload: Any, status_code: int) -> Tuple[str, str, Any]:
    if status_code >= 500:
        return "SERVER_ERROR", "Something went wrong", None
    code, fallback = "UNKNOWN_ERROR", "Request failed"
    for exc_class, mapped_code, mapped_message in DRF_ERROR_CODES:
        if isinstance(exc, exc_class):
            code, fallback = mapped_code, mapped_message
            break
    else:
        if isinstance(exc, Http404):
            code, fallback = "NOT_FOUND", "Resource not found"
    details = _details_for(exc, payload) if code in DETAIL_CODES else None
    return code, _extract_message(payload, fallback), details


def _details_for(exc: Exception, payload: Any) -> Any:
    if isinstance(exc, Throttled):
        return {"retryAfter": exc.wait} if exc.wait is not None else None
    if isinstance(payload, (dict, list)) and payload:
        return payload
    return None


def _normalize_django_validation_error(
    exc: DjangoValidationError,
) -> Union[Dict[str, Any], list]:
    if hasattr(exc, "message_dict"):
        return exc.message_dict
    return list(exc.messages)


def _extract_message(payload: Any, fallback: str) -> str:
    if isinstance(payload, str):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get("detail"), str):
        return payload["detail"]
    if isinstance(payload, list) and payload and isinstance(payload[0], str):
        return payload[0]
    return fallback


__all__ = ["ApplicationError", "global_exception_handler"]
