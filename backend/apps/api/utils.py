from collections.abc import Mapping
from typing import Any, Dict, Optional, Tuple

from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.serializers import as_serializer_error

ServiceError = Tuple[str, str, Optional[Any]]

ERROR_STATUS_MAP = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "METHOD_NOT_ALLOWED": status.HTTP_405_METHOD_NOT_ALLOWED,
    "CONFLICT": status.HTTP_409_CONFLICT,
    "UNSUPPORTED_MEDIA_TYPE": status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
    "TOO_MANY_REQUESTS": status.HTTP_429_TOO_MANY_REQUESTS,
    "SERVER_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "SERVICE_UNAVAILABLE": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_for_code(code: str) -> int:
    return ERROR_STATUS_MAP.get(code.upper(), status.HTTP_400_BAD_REQUEST)


def _normalize_details(details: Any) -> Any:
    if isinstance(details, ValidationError):
        return as_serializer_error(details)
    if isinstance(details, Mapping):
        return dict(details)
    if isinstance(details, Exception):
        return {"type": details.__class__.__name__}
    return details


def error_response(
    code: str,
    message: str,
    details: Optional[Any] = None,
    http_status: Optional[int] = None,
    *,
    headers: Optional[Mapping[str, str]] = None,
) -> Response:
    """
    Build the storefront error envelope:
    ``{"error": {"code", "message", "status", "details"?}}``.

    The status comes from ``ERROR_STATUS_MAP`` unless ``http_status`` is given.
    """
    if not isinstance(code, str) or not code.strip():
        raise ValueError("error_response requires a non-empty string code")
    if not isinstance(message, str) or not message.strip():
        raise ValueError("error_response requires a non-empty string message")

    normalized_code = code.strip().upper()
    status_code = int(http_status) if http_status is not None else status_for_code(normalized_code)
    if not 100 <= status_code <= 599:
        raise ValueError("error_response status must be a valid HTTP status code")

    payload: Dict[str, Any] = {
        "error": {
            "code": normalized_code,
            "message": message.strip(),
            "status": status_code,
        }
    }
    if details is not None:
        payload["error"]["details"] = _normalize_details(details)

    headers_dict = (
        {str(key): str(value) for key, value in headers.items()} if headers else None
    )
    return Response(payload, status=status_code, headers=headers_dict)


def service_error_response(error: ServiceError) -> Response:
    """Unpack a ``(code, message, details)`` tuple returned by a service."""
    code, message, details = error
    return error_response(code, message, details)
