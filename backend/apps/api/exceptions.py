from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

from django.core.exceptions import (
    PermissionDenied as DjangoPermissionDenied,
    ValidationError as DjangoValidationError,
)
from django.http import Http404
from django.utils.translation import gettext_lazy as _
from rest_framework import status
from rest_framework.exceptions import (
    AuthenticationFailed,
    MethodNotAllowed,
    NotAuthenticated,
    NotFound,
    ParseError,
    PermissionDenied,
    ValidationError,
)
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from apps.api.utils import error_response
from apps.common import get_logger

logger = get_logger(__name__).bind(component="api", layer="exception")

STATUS_CODE_DEFAULTS: Dict[int, Tuple[str, str]] = {
    status.HTTP_400_BAD_REQUEST: ("VALIDATION_ERROR", _("Validation failed")),
    status.HTTP_401_UNAUTHORIZED: ("UNAUTHORIZED", _("Authentication required")),
    status.HTTP_403_FORBIDDEN: (
        "FORBIDDEN",
        _("You do not have permission to perform this action"),
    ),
    status.HTTP_404_NOT_FOUND: ("NOT_FOUND", _("Resource not found")),
    status.HTTP_405_METHOD_NOT_ALLOWED: ("METHOD_NOT_ALLOWED", _("Method not allowed")),
    status.HTTP_409_CONFLICT: ("CONFLICT", _("Resource conflict")),
    status.HTTP_415_UNSUPPORTED_MEDIA_TYPE: (
        "UNSUPPORTED_MEDIA_TYPE",
        _("Unsupported media type"),
    ),
    status.HTTP_500_INTERNAL_SERVER_ERROR: (
        "INTERNAL_ERROR",
        _("Something went wrong"),
    ),
    status.HTTP_503_SERVICE_UNAVAILABLE: (
        "SERVICE_UNAVAILABLE",
        _("Service temporarily unavailable"),
    ),
}


class ApplicationError(Exception):
    """
    Domain error raised from services, list fetchers or views.

    Args:
        code: Machine readable error code.
        message: Human readable explanation of the error.
        status_code: Optional explicit HTTP status. If omitted, code mapping is used.
        details: Optional structured details for clients.
        hint: Optional hint for remediation.
        extra: Optional additional machine readable fields.
    """

    def __init__(
        self,
        code: str,
        message: str,
        *,
        status_code: Optional[int] = None,
        details: Optional[Any] = None,
        hint: Optional[str] = None,
        extra: Optional[Mapping[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = str(message)
        self.status_code = status_code
        self.details = details
        self.hint = hint
        self.extra = extra

    @classmethod
    def from_service_error(cls, error: Sequence[Any]) -> "ApplicationError":
        code, message, details = (tuple(error) + (None, None))[:3]
        return cls(code, message, details=details)

    def to_response(self) -> Response:
        return error_response(
            self.code,
            self.message,
            self.details,
            http_status=self.status_code,
            hint=self.hint,
            extra=self.extra,
        )


def unwrap(result: Tuple[Any, Optional[Sequence[Any]]]) -> Any:
    """Return the value of a ``(value, error)`` service result or raise its error."""
    value, error = result
    if error:
        raise ApplicationError.from_service_error(error)
    return value


def global_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """DRF exception handler rendering every failure in the error envelope."""

    bound_logger = _bind_logger(context)

    if isinstance(exc, ApplicationError):
        bound_logger.info(
            "Handled application error",
            code=exc.code,
            status=exc.status_code,
        )
        return exc.to_response()

    if isinstance(exc, DjangoValidationError):
        exc = ValidationError(_normalize_django_validation_error(exc))

    response = drf_exception_handler(exc, context)
    if response is not None:
        return _from_drf_exception(exc, response, bound_logger)

    bound_logger.exception("Unhandled exception bubbled to global handler")
    return error_response(
        "INTERNAL_ERROR",
        str(_("Something went wrong")),
        http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def _bind_logger(context: Dict[str, Any]):
    log = logger
    view = context.get("view")
    request = context.get("request")
    if view:
        log = log.bind(view=type(view).__name__)
    if request is not None:
        log = log.bind(
            method=getattr(request, "method", None),
            path=getattr(request, "path", None),
        )
    return log


def _from_drf_exception(exc: Exception, response: Response, bound_logger) -> Response:
    status_code = response.status_code
    code, message, details = _normalize_payload(exc, response.data, status_code)
    if status_code >= 500:
        bound_logger.error("Converted server error", code=code, status=status_code)
    else:
        bound_logger.info("Converted API exception", code=code, status=status_code)
    headers = dict(response.headers) if getattr(response, "headers", None) else None
    return error_response(
        code, message, details, http_status=status_code, headers=headers
    )


def _normalize_django_validation_error(
    exc: DjangoValidationError,
) -> Union[Dict[str, Any], list]:
    if hasattr(exc, "message_dict"):
        return exc.message_dict
    return list(exc.messages)


# Exception family -> status whose code and fallback message it borrows.
# Validation errors are handled first because their payload is the details.
_EXCEPTION_STATUS: Tuple[Tuple[Tuple[type, ...], int], ...] = (
    ((ParseError,), status.HTTP_400_BAD_REQUEST),
    ((NotAuthenticated, AuthenticationFailed), status.HTTP_401_UNAUTHORIZED),
    ((PermissionDenied, DjangoPermissionDenied), status.HTTP_403_FORBIDDEN),
    ((NotFound, Http404), status.HTTP_404_NOT_FOUND),
    ((MethodNotAllowed,), status.HTTP_405_METHOD_NOT_ALLOWED),
)


def _normalize_payload(
    exc: Exception, payload: Any, status_code: int
) -> Tuple[str, str, Optional[Any]]:
    if isinstance(exc, ValidationError):
        return "VALIDATION_ERROR", str(_("Validation failed")), payload

    for families, mapped_status in _EXCEPTION_STATUS:
        if isinstance(exc, families):
            code, fallback = STATUS_CODE_DEFAULTS[mapped_status]
            if mapped_status == status.HTTP_400_BAD_REQUEST:
                fallback = _("Malformed request")
            return code, _extract_message(payload, str(fallback), status_code), None

    is_server_error = status_code >= 500
    code, fallback = STATUS_CODE_DEFAULTS.get(
        status_code,
        ("INTERNAL_ERROR", _("Something went wrong"))
        if is_server_error
        else ("UNKNOWN_ERROR", _("Request failed")),
    )
    details = None
    if not is_server_error and isinstance(payload, (dict, list)) and payload:
        details = payload
    return code, _extract_message(payload, str(fallback), status_code), details


def _extract_message(payload: Any, fallback: str, status_code: int) -> str:
    if status_code >= 500:
        return str(STATUS_CODE_DEFAULTS[status.HTTP_500_INTERNAL_SERVER_ERROR][1])
    if isinstance(payload, str):
        return payload
    if isinstance(payload, dict):
        detail = payload.get("detail")
        if isinstance(detail, str):
            return detail
    if isinstance(payload, list) and payload and isinstance(payload[0], str):
        return payload[0]
    return fallback


__all__ = ["ApplicationError", "global_exception_handler", "unwrap"]
