"""
Request context middleware.

Assigns every request a correlation id (the incoming X-Request-ID header
or a new UUID), exposes it on ``request.state`` and in log records,
echoes it back in the response, and logs one line per request with its
status and duration.

No business logic. Pure cross-cutting concern.
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.shared.logging import request_id_var

REQUEST_ID_HEADER = "X-Request-ID"
RESPONSE_TIME_HEADER = "X-Response-Time"
MAX_REQUEST_ID_LENGTH = 128

logger = logging.getLogger(__name__)


def get_request_id(request: Request) -> str:
    """Return the id assigned to the request, creating one if missing."""
    request_id = getattr(request.state, "request_id", None)
    if request_id is None:
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
    return request_id


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware that tags each request with an id and logs its outcome."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Assign the request id, time the request and log the result."""
        incoming = request.headers.get(REQUEST_ID_HEADER, "")[:MAX_REQUEST_ID_LENGTH]
        request.state.request_id = incoming or str(uuid.uuid4())
        token = request_id_var.set(request.state.request_id)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            elapsed_ms = (time.perf_counter() - started) * 1000
            response.headers[REQUEST_ID_HEADER] = request.state.request_id
            response.headers[RESPONSE_TIME_HEADER] = f"{elapsed_ms:.2f}ms"
            logger.info(
                "%s %s -> %d (%.2fms)",
                request.method,
                request.url.path,
                response.status_code,
                elapsed_ms,
            )
            return response
        finally:
            request_id_var.reset(token)
