"""The ``{"error": {...}}`` envelope shared by views, middleware and the exception handler."""
from collections.abc import Mapping
from typing import Any, Dict, Optional, Sequence, Tuple

from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.serializers import as_serializer_error

# (code, message, details) as returned by the service layer.
ServiceError = Tuple[str, str, Optional[Any]]

ERROR_STATUS_MAP = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "BAD_REQUEST": status.HTTP_400_BAD_REQUEST,
    "UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "METHOD_NOT_ALLOWED": status.HTTP_405_METHOD_NOT_ALLOWED,
    "CONFLICT": status.HTTP_409_CONFLICT,
    "UNSUPPORTED_MEDIA_TYPE": status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
    "INTERNAL_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "SERVICE_UNAVAILABLE": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_for(code: str) -> int:
    return ERROR_STATUS_MAP.get(code, status.HTTP_400_BAD_REQUEST)


def _plain_details(details: Any) -> Any:
    if isinstance(details, ValidationError):
        return as_serializer_error(details)
    if isinstance(details, Exception):
        return {"type": type(details).__name__}
    if isinstance(details, Mapping):
        return dict(details)
    return details


def error_payload(
    code: str,
    message: Any,
    status_code: int,
    details: Optional[Any] = None,
    *,
    hint: Optional[Any] = None,
    extra: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {"code": code, "message": str(message), "status": status_code}
    if details is not None:
        body["details"] = _plain_details(details)
    if hint is not None:
        body["hint"] = str(hint)
    if extra:
        body["extra"] = dict(extra)
    return {"error": body}


def error_response(
    code: str,
    message: Any,
    details: Optional[Any] = None,
    http_status: Optional[int] = None,
    *,
    hint: Optional[Any] = None,
    extra: Optional[Mapping[str, Any]] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> Response:
    """
    Render an error envelope.

    Args:
        code: Machine-readable error code; selects the HTTP status unless
            ``http_status`` is given. Unknown codes map to 400.
        message: Human-readable (possibly lazily translated) message.
        details: Validation errors or the offending identifiers.
        hint: What the client can do about it, e.g. confirm a cart switch.
        extra: Additional machine-readable fields, e.g. the pending cart item.
        headers: Response headers carried over from DRF exceptions.
    """
    code = (code or "").strip().upper()
    if not code:
        raise ValueError("error_response requires a code")
    if not str(message).strip():
        raise ValueError("error_response requires a message")
    status_code = int(http_status) if http_status is not None else status_for(code)
    return Response(
        error_payload(code, str(message).strip(), status_code, details, hint=hint, extra=extra),
        status=status_code,
        headers={str(k): str(v) for k, v in headers.items()} if headers else None,
    )


def service_error_response(error: Sequence[Any], **kwargs: Any) -> Response:
    """Render a service-layer ``(code, message, details)`` tuple."""
    code, message, details = (tuple(error) + (None, None))[:3]
    return error_response(code, message, details, **kwargs)
