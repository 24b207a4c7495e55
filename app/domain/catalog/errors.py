"""
Domain-specific errors for the catalog bounded context.

All errors raised from the domain and application layers are defined here.
Each error carries its HTTP status, a stable machine-readable code and an
operational flag (operational = expected, client-caused).
They are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""

import json
import traceback
from datetime import datetime, timezone
from enum import Enum
from typing import Any

INTERNAL_ERROR = "INTERNAL_ERROR"
VALIDATION_ERROR = "VALIDATION_ERROR"
AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
AUTHORIZATION_ERROR = "AUTHORIZATION_ERROR"
RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"


class Severity(str, Enum):
    """Error severity used to decide how loudly an error is logged."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class CatalogError(Exception):
    """Base error for all catalog errors.

    Also serves as the generic/internal kind for failures that match no
    more specific class.
    """

    error_type: str | None = None

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = INTERNAL_ERROR,
        is_operational: bool = True,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.is_operational = is_operational
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(self.message)


class ValidationError(CatalogError):
    """Raised when client input fails validation."""

    error_type = "validation"

    def __init__(
        self,
        message: str,
        details: list[str] | str | None = None,
        field: str | None = None,
    ) -> None:
        super().__init__(message, 400, VALIDATION_ERROR)
        if details is None:
            details = []
        self.details = list(details) if isinstance(details, list) else [details]
        self.field = field

    def add_detail(self, detail: str) -> "ValidationError":
        self.details.append(detail)
        return self


class AuthFailureReason(str, Enum):
    """Why authentication failed."""

    MISSING_API_KEY = "MISSING_API_KEY"
    INVALID_API_KEY = "INVALID_API_KEY"
    EXPIRED_API_KEY = "EXPIRED_API_KEY"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"


_AUTH_HINTS: dict[AuthFailureReason, list[str]] = {
    AuthFailureReason.MISSING_API_KEY: [
        "Add header: X-API-Key: <your-api-key>",
        "Include the API key in your request headers",
    ],
    AuthFailureReason.INVALID_API_KEY: [
        "Check if your API key is spelled correctly",
        "Request a valid API key from the administrator",
    ],
    AuthFailureReason.EXPIRED_API_KEY: [
        "Contact administrator for a new API key",
        "Check if your subscription is still active",
    ],
}


class AuthenticationError(CatalogError):
    """Raised when a request cannot be authenticated."""

    error_type = "authentication"

    def __init__(
        self,
        message: str = "Authentication failed",
        reason: AuthFailureReason = AuthFailureReason.INVALID_CREDENTIALS,
    ) -> None:
        super().__init__(message, 401, AUTHENTICATION_ERROR)
        self.reason = reason

    @classmethod
    def missing_api_key(cls) -> "AuthenticationError":
        return cls(
            "API key is required. Please provide X-API-Key header.",
            AuthFailureReason.MISSING_API_KEY,
        )

    @classmethod
    def invalid_api_key(cls) -> "AuthenticationError":
        return cls("Invalid API key provided.", AuthFailureReason.INVALID_API_KEY)

    @classmethod
    def expired_api_key(cls) -> "AuthenticationError":
        return cls("API key has expired.", AuthFailureReason.EXPIRED_API_KEY)

    @property
    def hints(self) -> list[str]:
        return list(_AUTH_HINTS.get(self.reason, []))


class AuthorizationError(CatalogError):
    """Raised when an authenticated caller lacks a permission or role."""

    error_type = "authorization"

    def __init__(
        self,
        message: str = "Access denied",
        required_permission: str | None = None,
        required_role: str | None = None,
    ) -> None:
        super().__init__(message, 403, AUTHORIZATION_ERROR)
        self.required_permission = required_permission
        self.required_role = required_role

    @classmethod
    def insufficient_permissions(cls, permission: str) -> "AuthorizationError":
        return cls(
            f"Access denied. Required permission: {permission}",
            required_permission=permission,
        )

    @classmethod
    def insufficient_role(cls, role: str) -> "AuthorizationError":
        return cls(f"Access denied. Required role: {role}", required_role=role)

    @property
    def solutions(self) -> list[str]:
        solutions = []
        if self.required_permission:
            solutions.append(
                f"Ensure your API key has '{self.required_permission}' permission"
            )
            solutions.append("Contact administrator to upgrade your access level")
        if self.required_role:
            solutions.append(f"This operation requires '{self.required_role}' role")
            solutions.append("Use an API key with appropriate role privileges")
        solutions.append("Check the API documentation for required permissions")
        return solutions


_NOT_FOUND_SUGGESTIONS: dict[str, list[str]] = {
    "Product": [
        "Check if the product ID is correct",
        "Use GET /api/v1/products to list all available products",
        "Ensure the product exists and hasn't been deleted",
    ],
    "Route": [
        "Check the API documentation for valid endpoints",
        "Ensure you're using the correct HTTP method",
        "Verify the URL path is correct",
    ],
}


class NotFoundError(CatalogError):
    """Raised when a requested resource does not exist."""

    error_type = "not_found"

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: str | None = None,
        message: str | None = None,
    ) -> None:
        if message is None:
            if resource_id:
                message = f"{resource} with ID '{resource_id}' not found"
            else:
                message = f"{resource} not found"
        super().__init__(message, 404, RESOURCE_NOT_FOUND)
        self.resource = resource
        self.resource_id = resource_id

    @property
    def suggestions(self) -> list[str]:
        return list(_NOT_FOUND_SUGGESTIONS.get(self.resource, []))


def render_error(error: CatalogError, include_debug: bool = False) -> dict[str, Any]:
    """Render any taxonomy error to its structured JSON form.

    Args:
        error: The error to render.
        include_debug: Add the exception class name and stack trace.

    Returns:
        A JSON-serializable dict with the shared base payload plus the
        kind-specific fields.
    """
    body: dict[str, Any] = {
        "success": False,
        "message": error.message,
        "error": error.error_code,
        "statusCode": error.status_code,
        "timestamp": error.timestamp,
    }

    if isinstance(error, ValidationError):
        body["details"] = error.details
        if error.field:
            body["field"] = error.field
    elif isinstance(error, AuthenticationError):
        body["reason"] = error.reason.value
        body["hints"] = error.hints
    elif isinstance(error, AuthorizationError):
        if error.required_permission:
            body["requiredPermission"] = error.required_permission
        if error.required_role:
            body["requiredRole"] = error.required_role
        body["solutions"] = error.solutions
    elif isinstance(error, NotFoundError):
        body["resource"] = error.resource
        if error.resource_id:
            body["resourceId"] = error.resource_id
        body["suggestions"] = error.suggestions

    if error.error_type:
        body["errorType"] = error.error_type

    if include_debug:
        body["name"] = type(error).__name__
        origin = error.__cause__ or error
        body["stack"] = traceback.format_exception(origin)

    return body


def classify_exception(exc: BaseException) -> CatalogError:
    """Convert any exception into the closest taxonomy error.

    Taxonomy errors pass through unchanged. The original exception is kept
    as ``__cause__`` of the returned error.
    """
    if isinstance(exc, CatalogError):
        return exc

    error: CatalogError
    if isinstance(exc, json.JSONDecodeError):
        error = ValidationError("Invalid JSON format", ["Request body must be valid JSON"])
    elif isinstance(exc, ValueError):
        error = ValidationError("Invalid data format", [str(exc)])
    elif isinstance(getattr(exc, "status_code", None), int):
        error = CatalogError(
            str(exc) or "Internal server error",
            exc.status_code,  # type: ignore[attr-defined]
            str(getattr(exc, "code", None) or INTERNAL_ERROR),
        )
    else:
        error = CatalogError(
            str(exc) or "Internal server error",
            500,
            INTERNAL_ERROR,
            is_operational=False,
        )
    error.__cause__ = exc
    return error


def is_operational(error: BaseException) -> bool:
    """Return True for expected, client-caused taxonomy errors."""
    return isinstance(error, CatalogError) and error.is_operational


def severity(error: BaseException) -> Severity:
    """Classify how serious an error is."""
    if not isinstance(error, CatalogError):
        return Severity.HIGH
    if error.status_code >= 500:
        return Severity.HIGH
    if error.status_code >= 400:
        return Severity.MEDIUM
    return Severity.LOW


def should_log(error: BaseException) -> bool:
    """High severity and non-operational errors are logged at error level."""
    return severity(error) is Severity.HIGH or not is_operational(error)
