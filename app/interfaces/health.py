"""
Health check router.

Provides a health endpoint for liveness/readiness probes and an
admin-only snapshot of the error metrics. No business logic.
"""

import time

from fastapi import APIRouter, Depends, Request

from app.core.config import settings
from app.interfaces.catalog.dependencies import get_error_metrics
from app.interfaces.catalog.schemas import (
    ErrorResponse,
    ErrorStatsResponse,
    HealthResponse,
)
from app.shared.observability.error_metrics import ErrorMetrics, TimeWindow
from app.shared.security.auth import require_role

router = APIRouter(prefix="/health", tags=["health"])


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns application health status, version and current error rate.",
)
def health_check(
    request: Request,
    metrics: ErrorMetrics = Depends(get_error_metrics),
) -> HealthResponse:
    """Return current application health status."""
    degraded = metrics.is_error_rate_high(settings.error_rate_threshold)
    return HealthResponse(
        status="degraded" if degraded else "ok",
        version=settings.version,
        environment=settings.environment,
        uptime_seconds=round(time.monotonic() - request.app.state.started_at, 3),
        error_rate=round(metrics.error_rate(), 4),
        error_rate_threshold=settings.error_rate_threshold,
    )


@router.get(
    "/errors",
    response_model=ErrorStatsResponse,
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
    dependencies=[Depends(require_role("admin"))],
    summary="Error metrics",
    description="Error counts by type, status and endpoint, recent errors and error rates.",
)
def error_stats(metrics: ErrorMetrics = Depends(get_error_metrics)) -> ErrorStatsResponse:
    """Return the error metrics snapshot. Requires the admin role."""
    snapshot = metrics.get_stats(recent_limit=settings.recent_errors_limit)
    return ErrorStatsResponse(
        summary=snapshot["summary"],
        breakdown=snapshot["breakdown"],
        recent=snapshot["recent"],
        error_rates={window.value: round(metrics.error_rate(window), 6) for window in TimeWindow},
        is_error_rate_high=metrics.is_error_rate_high(settings.error_rate_threshold),
    )
