"""
FastAPI application entry point.

Run with: uvicorn tracker.main:create_app --factory --port 3000
"""

import logging
import time
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from tracker import telemetry
from tracker._version import VERSION
from tracker.auth import require_api_key
from tracker.config import Settings
from tracker.errors import register_exception_handlers
from tracker.ratelimit import FixedWindowRateLimiter, rate_limit_middleware
from tracker.routers import (
    allocation_router,
    growth_router,
    holdings_router,
    snapshots_router,
    summary_router,
)
from tracker.schemas import ErrorResponse
from tracker.sheets import RowStore, SheetsClient
from tracker.workbook import Workbook

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "X-DNS-Prefetch-Control": "off",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler.

    Startup: initialize telemetry and report configuration.
    Shutdown: close the Sheets HTTP client.
    """
    settings: Settings = app.state.settings

    if telemetry.setup_telemetry(
        settings.otlp_enabled, settings.otlp_endpoint, settings.otlp_export_interval
    ):
        # Attach OTLP handler to root logger for log export
        handler = telemetry.get_log_handler()
        if handler:
            logging.getLogger().addHandler(handler)
        logger.info("Telemetry initialized (OTLP metrics + logs enabled)")
    else:
        logger.info("Telemetry disabled")

    logger.info(f"Portfolio tracker {VERSION} starting on port {settings.port}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"API authentication: {'Enabled' if settings.api_token else 'Disabled'}")
    logger.info(
        f"Google Sheets ID: {'Configured' if settings.spreadsheet_id else 'Missing'}"
    )

    yield

    logger.info("Application shutting down")
    store = app.state.workbook.store
    if isinstance(store, SheetsClient):
        await store.aclose()


def create_app(settings: Settings | None = None, store: RowStore | None = None) -> FastAPI:
    """Build the API for one deployment.

    Args:
        settings: Deployment settings (defaults to ``Settings.from_env()``)
        store: Row store to use instead of the Sheets API (used by tests)

    Returns:
        The configured application
    """
    settings = settings or Settings.from_env()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Portfolio Tracker API",
        description="Investment portfolio records kept in a Google Sheets workbook",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.workbook = Workbook.from_settings(
        settings, store or SheetsClient.from_settings(settings)
    )
    app.state.rate_limiter = FixedWindowRateLimiter(
        settings.rate_limit_max_requests, settings.rate_limit_window_ms / 1000
    )

    # Middleware: the last one added runs first
    register_exception_handlers(app, development=settings.is_development)
    app.middleware("http")(rate_limit_middleware(app.state.rate_limiter))

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"{request.method} {request.url.path} - {response.status_code} - {duration_ms:.0f}ms"
        )
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization", "x-api-key"],
    )

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

    # Everything under /v1 needs the API key
    protected = {
        "prefix": "/v1",
        "dependencies": [Depends(require_api_key)],
        "responses": {401: {"model": ErrorResponse}},
    }
    app.include_router(holdings_router, tags=["holdings"], **protected)
    app.include_router(allocation_router, tags=["allocation"], **protected)
    app.include_router(growth_router, tags=["growth"], **protected)
    app.include_router(snapshots_router, tags=["snapshots"], **protected)
    app.include_router(summary_router, tags=["summary"], **protected)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "ok", "timestamp": datetime.now(UTC).isoformat()}

    @app.get("/version")
    async def get_version():
        """Get API version information."""
        return {"version": VERSION, "api_version": "v1"}

    return app
