"""
FastAPI Application Entry Point

This module creates and configures the FastAPI application.

Key Concepts:
=============

1. Application Factory Pattern
   - create_app() function returns configured app
   - Easier to test (can create multiple instances)

2. Lifespan Events
   - startup: build the search cache, rate limiter and HTTP client, start
     the cache sweep task
   - shutdown: cancel the sweep task, close the HTTP client
   - Everything lives on app.state, so each app (and each TestClient
     context) gets its own instances

3. Middleware Stack
   - CORS: Allow cross-origin requests from the web frontend

4. Exception Handlers
   - Convert service errors to HTTP responses
   - Standardize error format: {"error": ...} or {"errors": [...]}
   - Log errors for debugging
"""

import asyncio
import contextlib
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from release_tracker import __version__
from release_tracker.config import get_settings
from release_tracker.errors import ReleaseTrackerError
from release_tracker.routers import (
    auth_router,
    books_router,
    calendar_router,
    status_router,
    tracking_router,
)
from release_tracker.services.cache import TTLCache, run_periodic_sweep
from release_tracker.services.rate_limiter import SearchRateLimiter

# =============================================================================
# Logging Configuration
# =============================================================================
# Configure logging before creating the app
settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan Events
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Code before yield: Runs on startup
    Code after yield: Runs on shutdown
    """
    # ----- STARTUP -----
    logger.info(f"Starting {settings.app_name}...")
    logger.info(f"Debug mode: {settings.debug}")

    app.state.search_cache = TTLCache(ttl_seconds=settings.cache_ttl_seconds)
    app.state.rate_limiter = SearchRateLimiter(
        max_requests=settings.search_rate_limit,
        window_seconds=settings.search_rate_limit_window_seconds,
    )
    app.state.http_client = httpx.AsyncClient(timeout=settings.google_books_timeout_seconds)
    sweep_task = asyncio.create_task(
        run_periodic_sweep(app.state.search_cache, settings.cache_sweep_interval_seconds)
    )

    logger.info(
        f"Rate limit: {settings.search_rate_limit} searches per IP per "
        f"{settings.search_rate_limit_window_seconds}s"
    )
    logger.info(f"Caching enabled ({settings.cache_ttl_seconds}s TTL)")

    yield  # Application runs here

    # ----- SHUTDOWN -----
    logger.info(f"Shutting down {settings.app_name}...")

    sweep_task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await sweep_task

    await app.state.http_client.aclose()


# =============================================================================
# Application Factory
# =============================================================================
def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.app_name,
        description="""
## Book Release Tracker API

Search Google Books and track upcoming releases.

### Features
- **Books**: Search Google Books and fetch single volumes
- **Tracking**: Follow books, authors and series
- **Calendar**: Tracked releases by year

### Authentication
Register or log in to receive a bearer token, then send it as
`Authorization: Bearer <token>`. Tokens are valid for 30 days.

### Rate Limiting
Book search is limited to 50 requests per client per day.
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # -------------------------------------------------------------------------
    # CORS Middleware
    # -------------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        # Let browser clients read the remaining search quota
        expose_headers=[
            "X-Searches-Remaining",
            "X-RateLimit-Limit",
            "X-RateLimit-Remaining",
            "X-RateLimit-Reset",
            "Retry-After",
        ],
    )

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------
    @app.exception_handler(ReleaseTrackerError)
    async def release_tracker_exception_handler(
        request: Request,
        exc: ReleaseTrackerError,
    ) -> JSONResponse:
        """Render service errors with their own status, body and headers."""
        if exc.status_code >= 500:
            logger.error(f"{exc.__class__.__name__} on {request.url.path}: {exc.to_dict()}")
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict(),
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """
        Report field-level validation failures as 400.

        FastAPI's default is 422; clients of this API expect 400 with an
        "errors" list.
        """
        return JSONResponse(
            status_code=400,
            content={"errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_exception_handler(
        request: Request,
        exc: SQLAlchemyError,
    ) -> JSONResponse:
        """
        Handle SQLAlchemy database errors.

        Logs the actual error for debugging while hiding details from users.
        """
        logger.error(f"Database error: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": "A database error occurred. Please try again later."},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """
        Catch-all exception handler.

        In production, hide internal errors from users.
        In debug mode, show more details.
        """
        logger.error(f"Unhandled error: {exc}", exc_info=True)

        if settings.debug:
            return JSONResponse(
                status_code=500,
                content={"error": str(exc)},
            )

        return JSONResponse(
            status_code=500,
            content={"error": "An internal error occurred."},
        )

    # -------------------------------------------------------------------------
    # Register Routers
    # -------------------------------------------------------------------------
    app.include_router(auth_router, prefix=settings.api_prefix)
    app.include_router(books_router, prefix=settings.api_prefix)
    app.include_router(tracking_router, prefix=settings.api_prefix)
    app.include_router(calendar_router, prefix=settings.api_prefix)
    app.include_router(status_router, prefix=settings.api_prefix)

    return app


# =============================================================================
# Application Instance
# =============================================================================
# This is what uvicorn imports: uvicorn release_tracker.main:app

app = create_app()


# =============================================================================
# Development Server
# =============================================================================
# This allows running the app directly with: python -m release_tracker.main

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "release_tracker.main:app",
        host=settings.host,
        port=settings.port,
        proxy_headers=True,
        forwarded_allow_ips=settings.forwarded_allow_ips,
        reload=settings.debug,
    )
