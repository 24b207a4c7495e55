"""
Centralized error handlers for FastAPI.

Every failure is first classified into the catalog error taxonomy, then
recorded in the error metrics, logged, and rendered through the
environment's presentation policy. Nothing reaches the client unwrapped.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.domain.catalog.errors import (
    CatalogError,
    NotFoundError,
    ValidationError,
    classify_exception,
    should_log,
)
from app.shared.errors.policy import ErrorPresentationPolicy
from app.shared.request_context import REQUEST_ID_HEADER, get_request_id
from app.shared.security.rate_limiting import rate_limit_error

logger = logging.getLogger(__name__)

HTTP_404 = 404
HTTP_405 = 405


def _field_path(loc: tuple) -> str:
    return ".".join(str(part) for part in loc if part != "body")


def request_validation_error(exc: RequestValidationError) -> ValidationError:
    """Convert FastAPI request validation failures into a ValidationError."""
    errors = exc.errors()
    if any(e.get("type") == "json_invalid" for e in errors):
        error = ValidationError(
            "Invalid JSON format", ["Request body must be valid JSON"], "body"
        )
    else:
        details = [f"{_field_path(e['loc']) or 'body'}: {e['msg']}" for e in errors]
        field = _field_path(errors[0]["loc"]) if errors else None
        error = ValidationError("Request validation failed", details, field or None)
    error.__cause__ = exc
    return error


def http_exception_error(request: Request, exc: StarletteHTTPException) -> CatalogError:
    """Convert routing-level HTTP exceptions into catalog errors."""
    endpoint = f"{request.method} {request.url.path}"
    if exc.status_code == HTTP_404:
        error: CatalogError = NotFoundError(
            "Route", endpoint, message=f"Route not found: {endpoint}"
        )
    elif exc.status_code == HTTP_405:
        error = CatalogError(
            f"Method not allowed: {endpoint}", HTTP_405, "METHOD_NOT_ALLOWED"
        )
    else:
        error = CatalogError(str(exc.detail), exc.status_code, "HTTP_ERROR")
    error.__cause__ = exc
    return error


def _log(error: CatalogError, endpoint: str) -> None:
    if should_log(error):
        logger.error(
            "%s on %s: %s",
            type(error).__name__,
            endpoint,
            error.message,
            exc_info=error.__cause__ or error,
        )
    else:
        logger.warning("%s on %s: %s", error.error_code, endpoint, error.message)


def error_response(request: Request, error: CatalogError) -> JSONResponse:
    """Record, log and render a catalog error as the client response."""
    request_id = get_request_id(request)
    endpoint = f"{request.method} {request.url.path}"

    metrics = getattr(request.app.state, "error_metrics", None)
    if metrics is not None:
        try:
            metrics.record(error, endpoint=endpoint, request_id=request_id)
        except Exception:
            logger.warning("Failed to record error metrics", exc_info=True)

    _log(error, endpoint)

    policy = getattr(request.app.state, "error_policy", None)
    if policy is None:
        policy = ErrorPresentationPolicy.for_environment("production")
    body = policy.render(error)
    body["requestId"] = request_id
    body["path"] = request.url.path
    body["method"] = request.method
    return JSONResponse(
        status_code=error.status_code,
        content=body,
        headers={REQUEST_ID_HEADER: request_id},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register all error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(CatalogError)
    async def handle_catalog_error(request: Request, exc: CatalogError) -> JSONResponse:
        """Handle every taxonomy error."""
        return error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle malformed bodies, path and query parameters."""
        return error_response(request, request_validation_error(exc))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Handle unknown routes, wrong methods and other HTTP exceptions."""
        return error_response(request, http_exception_error(request, exc))

    # SlowAPIMiddleware calls this handler without awaiting it.
    @app.exception_handler(RateLimitExceeded)
    def handle_rate_limited(request: Request, exc: RateLimitExceeded) -> JSONResponse:
        """Handle requests rejected by the rate limiter."""
        return error_response(request, rate_limit_error(exc))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals outside development."""
        return error_response(request, classify_exception(exc))
