from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import RefreshToken

from apps.common import get_logger

logger = get_logger(__name__).bind(component="auth", layer="service")


class SessionService:
    def __init__(self):
        self.logger = logger.bind(service="SessionService")

    def logout(
        self, refresh_token: str, actor_id: Optional[int]
    ) -> Optional[Tuple[str, str, Optional[Dict[str, Any]]]]:
        if not refresh_token:
            self.logger.warning("Logout rejected: missing refresh token", actor_id=actor_id)
            return ("VALIDATION_ERROR", "Invalid token", {"refresh": None})
        try:
            token = RefreshToken(refresh_token)
            token.blacklist()
        except TokenError as exc:
            self.logger.warning(
                "Logout failed: token error",
                actor_id=actor_id,
                error=str(exc),
            )
            return ("VALIDATION_ERROR", "Invalid token", {"error": str(exc)})
        self.logger.info("User logged out", actor_id=actor_id)
        return None

    def logout_all(self, user) -> Dict[str, Any]:
        user_id = getattr(user, "id", None)
        invalidated = 0
        for token in OutstandingToken.objects.filter(user=user):
            _, created = BlacklistedToken.objects.get_or_create(token=token)
            invalidated += int(created)
        self.logger.info(
            "User logged out from all devices",
            actor_id=user_id,
            tokens_invalidated=invalidated,
        )
        return {"detail": "Logged out from all devices", "tokens_invalidated": invalidated}
