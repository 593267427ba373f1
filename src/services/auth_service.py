"""Caller identity resolution against the Cognito user pool."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from src.core.config import Constants
from src.core.errors import IdentityLookupError
from src.core.logging import span


logger = logging.getLogger(__name__)

ISSUER_POOL_SEPARATOR = "amazonaws.com/"


@dataclass(frozen=True)
class Caller:
    """Authenticated caller of the task API."""

    email: str
    is_admin: bool

    def can_access(self, owner_email: str) -> bool:
        """Whether the caller may read or mutate tasks owned by ``owner_email``."""
        return self.is_admin or owner_email == self.email


def _claims(auth_context: dict[str, Any] | None) -> dict[str, Any]:
    claims = (auth_context or {}).get("claims")
    if not isinstance(claims, dict):
        msg = "Authorizer context has no claims"
        raise IdentityLookupError(msg)
    return claims


class AuthService:
    """Resolves the caller's email and admin status from the gateway authorizer context."""

    def __init__(self, cognito_client: Any) -> None:
        self._cognito = cognito_client

    async def get_user_email(self, auth_context: dict[str, Any] | None) -> str:
        """Look up the caller's verified email.

        The user pool id is the part of the ``iss`` claim after ``amazonaws.com/``.

        Args:
            auth_context: API Gateway authorizer context holding the token claims

        Returns:
            The user's ``email`` attribute

        Raises:
            IdentityLookupError: If claims are missing or the user has no email attribute
        """
        with span("auth_service.get_user_email"):
            claims = _claims(auth_context)
            issuer = claims.get("iss", "")
            username = claims.get("username")
            if ISSUER_POOL_SEPARATOR not in issuer or not username:
                msg = "Authorizer claims do not identify a user pool user"
                raise IdentityLookupError(msg)

            user_pool_id = issuer.split(ISSUER_POOL_SEPARATOR)[1]
            user = await asyncio.to_thread(
                self._cognito.admin_get_user,
                UserPoolId=user_pool_id,
                Username=username,
            )

            email = next(
                (attr.get("Value") for attr in user.get("UserAttributes", []) if attr.get("Name") == "email"),
                None,
            )
            if not email:
                logger.error("No email attribute for user %s in pool %s", username, user_pool_id)
                msg = "Email not found"
                raise IdentityLookupError(msg)
            return email

    def is_admin(self, auth_context: dict[str, Any] | None) -> bool:
        """Whether the token scope starts with ``admin``."""
        claims = (auth_context or {}).get("claims")
        scope = claims.get("scope") if isinstance(claims, dict) else None
        return isinstance(scope, str) and scope.startswith(Constants.ADMIN_SCOPE_PREFIX)

    async def resolve_caller(self, auth_context: dict[str, Any] | None) -> Caller:
        """Resolve both identity and admin status."""
        email = await self.get_user_email(auth_context)
        return Caller(email=email, is_admin=self.is_admin(auth_context))
