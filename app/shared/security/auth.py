"""
API key authentication and permission checks.

The key is read from the X-API-Key header, falling back to the
Authorization header (a "Bearer " prefix is accepted). Admin keys get
every permission; other keys may read and write but not delete.
API keys are never logged.
"""

import logging
from dataclasses import dataclass

from fastapi import Depends, Header, Request

from app.core.config import settings
from app.domain.catalog.errors import AuthenticationError, AuthorizationError

ADMIN_ROLE = "admin"
USER_ROLE = "user"
ADMIN_PERMISSIONS = frozenset({"read", "write", "delete"})
USER_PERMISSIONS = frozenset({"read", "write"})
BEARER_PREFIX = "Bearer "

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    """The authenticated caller."""

    role: str
    permissions: frozenset[str]

    def has_permission(self, permission: str) -> bool:
        return permission in self.permissions


def resolve_principal(api_key: str | None) -> Principal:
    """Map an API key to its principal.

    Raises:
        AuthenticationError: If the key is missing or unknown.
    """
    if not api_key:
        raise AuthenticationError.missing_api_key()
    if api_key in settings.admin_api_keys:
        return Principal(role=ADMIN_ROLE, permissions=ADMIN_PERMISSIONS)
    if api_key in settings.api_keys:
        return Principal(role=USER_ROLE, permissions=USER_PERMISSIONS)
    raise AuthenticationError.invalid_api_key()


def authenticate(
    request: Request,
    x_api_key: str | None = Header(default=None),
    authorization: str | None = Header(default=None),
) -> Principal:
    """FastAPI dependency authenticating the request."""
    api_key = x_api_key or authorization
    if api_key and api_key.startswith(BEARER_PREFIX):
        api_key = api_key[len(BEARER_PREFIX):]
    principal = resolve_principal(api_key)
    request.state.principal = principal
    logger.debug("Authenticated request as role=%s", principal.role)
    return principal


def require_permission(permission: str):
    """Build a dependency that rejects callers lacking ``permission``."""

    def dependency(principal: Principal = Depends(authenticate)) -> Principal:
        if not principal.has_permission(permission):
            raise AuthorizationError.insufficient_permissions(permission)
        return principal

    return dependency


def require_role(role: str):
    """Build a dependency that rejects callers without ``role`` (admins always pass)."""

    def dependency(principal: Principal = Depends(authenticate)) -> Principal:
        if principal.role not in (role, ADMIN_ROLE):
            raise AuthorizationError.insufficient_role(role)
        return principal

    return dependency
