"""
Error presentation policy.

Decides how much of an error is shown to clients for a runtime
environment. Only development responses carry stack traces; elsewhere
5xx messages are replaced by fixed generic text keyed by status code.
4xx messages always keep their detail, since the client can act on them.
"""

from dataclasses import dataclass, field
from typing import Any

from app.domain.catalog.errors import CatalogError, render_error

GENERIC_MESSAGES: dict[int, str] = {
    500: "Internal server error occurred",
    400: "Bad request",
    401: "Authentication required",
    403: "Access forbidden",
    404: "Resource not found",
}


@dataclass(frozen=True)
class ErrorPresentationPolicy:
    """How errors are rendered for one environment.

    Attributes:
        include_debug: Add the exception name and stack trace.
        mask_server_errors: Replace 5xx messages with generic text.
        generic_messages: Generic text by status code.
    """

    include_debug: bool
    mask_server_errors: bool
    generic_messages: dict[int, str] = field(default_factory=lambda: dict(GENERIC_MESSAGES))

    @classmethod
    def for_environment(cls, environment: str) -> "ErrorPresentationPolicy":
        development = environment == "development"
        return cls(include_debug=development, mask_server_errors=not development)

    def render(self, error: CatalogError) -> dict[str, Any]:
        """Render an error for the client according to this policy."""
        body = render_error(error, include_debug=self.include_debug)
        if self.mask_server_errors and error.status_code >= 500:
            body["message"] = self.generic_messages.get(
                error.status_code, self.generic_messages[500]
            )
        return body
