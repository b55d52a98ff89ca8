from typing import Any, Optional

from django.http import HttpRequest
from django.utils.translation import gettext as _
from rest_framework.exceptions import AuthenticationFailed as DRFAuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken

from apps.api.permissions import is_privileged, required_roles, role_of
from apps.api.utils import error_response
from apps.common import get_logger

logger = get_logger(__name__).bind(component="api", layer="validation")

_jwt_authenticator = JWTAuthentication()


def _is_authenticated_user(request: HttpRequest) -> bool:
    user = getattr(request, "user", None)
    if user and getattr(user, "is_authenticated", False) and getattr(user, "id", None):
        return True

    # DRF authenticates inside the view; the middleware runs first, so bearer
    # tokens are resolved here.
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
    logger.debug("Authenticated user from bearer token", user_id=user.id)
    return True


def _set_validated_user(request: HttpRequest, user: Any) -> None:
    request.validated_user_id = int(user.id)
    request.validated_role = role_of(user)
    request.is_privileged_user = is_privileged(user)


def validate_request_context(request: HttpRequest, view_class, view_kwargs) -> Optional[Any]:
    """
    Enforce the role table before the view runs.

    Returns an error response when the caller is unauthenticated (401) or
    holds the wrong role (403); otherwise returns None and records
    ``validated_user_id``/``validated_role`` on the request.
    """
    view_name = getattr(view_class, "__name__", "")
    method = (getattr(request, "method", "") or "").upper()
    roles = required_roles(view_name, method)
    if roles is None:
        return None

    if not _is_authenticated_user(request):
        logger.warning("Authentication required", view=view_name, method=method)
        return error_response("UNAUTHORIZED", _("Authentication required"))

    user = request.user
    role = role_of(user)
    if role not in roles:
        logger.warning(
            "Role not allowed for route",
            view=view_name,
            method=method,
            user_id=getattr(user, "id", None),
            role=role,
            allowed=",".join(roles),
        )
        return error_response(
            "FORBIDDEN",
            _("You do not have permission to perform this action"),
            {"requiredRoles": list(roles)},
        )

    _set_validated_user(request, user)
    logger.debug(
        "Validated request context",
        view=view_name,
        method=method,
        user_id=request.validated_user_id,
        role=role,
    )
    return None
