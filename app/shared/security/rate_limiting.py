"""
Rate limiting configuration and setup.

Uses slowapi to enforce per-endpoint rate limits.
Protects against denial-of-service and resource abuse.
Exceeded limits are reported through the catalog error taxonomy.
"""

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from app.core.config import settings
from app.domain.catalog.errors import CatalogError

RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
HTTP_429 = 429

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit_default],
    enabled=settings.rate_limit_enabled,
)


def rate_limit_error(exc: RateLimitExceeded) -> CatalogError:
    """Convert a slowapi rejection into a catalog error.

    Args:
        exc: The rate limit exceeded exception.

    Returns:
        An operational 429 error naming the exceeded limit.
    """
    error = CatalogError(
        f"Rate limit exceeded: {exc.detail}",
        HTTP_429,
        RATE_LIMIT_EXCEEDED,
    )
    error.__cause__ = exc
    return error
