"""
Application entry point.

Creates the FastAPI application and wires together:
- Routers (catalog, health)
- Per-application state (product repository, error metrics, error policy)
- Error handlers (centralized error-to-HTTP mapping)
- Middleware (request context, rate limiting)
- Logging configuration

No business logic belongs here.
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi.middleware import SlowAPIMiddleware

from app.core.config import settings
from app.infrastructure.catalog.in_memory_product_repository import (
    InMemoryProductRepository,
    demo_products,
)
from app.interfaces.catalog.router import router as catalog_router
from app.interfaces.health import router as health_router
from app.shared.errors.handlers import register_error_handlers
from app.shared.errors.policy import ErrorPresentationPolicy
from app.shared.logging import configure_logging
from app.shared.observability.error_metrics import ErrorMetrics
from app.shared.request_context import RequestContextMiddleware
from app.shared.security.rate_limiting import limiter

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: log startup and shutdown."""
    logger.info(
        "%s %s starting (environment=%s, products=%d)",
        settings.project_name,
        settings.version,
        settings.environment,
        len(app.state.product_repository.snapshot()),
    )
    yield
    logger.info("%s shutting down", settings.project_name)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, error handlers, and middleware, and creates the
    state each application owns: its product repository, its error
    metrics recorder and its error presentation policy.
    This is the composition root of the application.

    Returns:
        A fully configured FastAPI application instance.
    """
    configure_logging(level=settings.log_level)

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # --- Application State ---
    seed = demo_products() if settings.seed_demo_products else []
    app.state.product_repository = InMemoryProductRepository(seed)
    app.state.error_metrics = ErrorMetrics()
    app.state.error_policy = ErrorPresentationPolicy.for_environment(settings.environment)
    app.state.started_at = time.monotonic()

    # --- Rate Limiting ---
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)

    # --- Request Context (outermost) ---
    app.add_middleware(RequestContextMiddleware)

    # --- Error Handlers ---
    register_error_handlers(app)

    # --- Routers ---
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(catalog_router, prefix="/api/v1")

    return app


def run() -> None:
    """Serve the application with uvicorn."""
    import uvicorn

    uvicorn.run("app.main:app", host=settings.host, port=settings.port, reload=False)


app = create_app()
