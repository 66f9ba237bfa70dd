"""FastAPI application for the PageSnap REST API.

This module configures the FastAPI application with middleware, error
handling, the capture routes and optional static front-end serving.
"""

import logging
import os
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from pagesnap import __version__
from pagesnap.api.schemas import ErrorResponse, HealthResponse
from pagesnap.api.routes import snapshots_router
from pagesnap.capture.browser_pool import get_browser_pool, shutdown_browser_pool


# Configure logging
logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

# Application metadata
APP_VERSION = __version__
APP_TITLE = "PageSnap API"
APP_DESCRIPTION = """
PageSnap renders web pages to PNG on demand.

## Features

* **Screenshots**: Desktop (1920x1080 @3x) or mobile (430px @3x, touch emulation) captures
* **Brand Snapshots**: Screenshot plus title, description, favicon, colors and fonts
* **Fast Loading**: Fonts, media and common trackers are blocked during capture
"""

DEFAULT_PUBLIC_DIR = Path(__file__).parent.parent.parent / "public"

# Global application state
app_start_time = datetime.utcnow()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Close the shared browser when the process exits."""
    yield
    await shutdown_browser_pool()


def create_app(public_dir: Path = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        public_dir: Static front-end directory served at ``/`` when it exists

    Returns:
        Configured FastAPI application instance
    """
    if public_dir is None:
        public_dir = Path(os.environ.get("PAGESNAP_PUBLIC_DIR", DEFAULT_PUBLIC_DIR))

    app = FastAPI(
        title=APP_TITLE,
        description=APP_DESCRIPTION,
        version=APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Configure CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Content-Disposition"],
    )

    # Tag each request and log its outcome with timing
    @app.middleware("http")
    async def track_request(request: Request, call_next):
        """Attach a request id and log the capture request's status and duration."""
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        start_time = time.monotonic()

        response = await call_next(request)

        duration_ms = (time.monotonic() - start_time) * 1000
        response.headers["X-Request-ID"] = request_id
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} in {duration_ms:.0f}ms",
            extra={"request_id": request_id, "duration_ms": round(duration_ms, 2)},
        )
        return response

    # Global exception handlers
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions with the common error format."""
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(error=str(exc.detail)).model_dump(),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors as client errors."""
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(error="Invalid request body.").model_dump(),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        request_id = getattr(request.state, "request_id", None)
        logger.error(
            f"Unhandled exception in request {request_id}: {str(exc)}",
            exc_info=True
        )
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error=str(exc) or "An unexpected error occurred").model_dump(),
        )

    # Health check endpoint
    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
        description="Returns the current health status of the API and the browser engine"
    )
    async def health_check():
        """Health check endpoint for monitoring and operational purposes."""
        uptime = (datetime.utcnow() - app_start_time).total_seconds()

        # The browser launches lazily, so "idle" before the first capture is healthy
        pool = get_browser_pool()
        if pool.is_running:
            browser_status = "healthy"
        elif pool.launch_count == 0:
            browser_status = "idle"
        else:
            browser_status = "unhealthy"

        services = {"api": "healthy", "browser_engine": browser_status}
        overall_status = "degraded" if browser_status == "unhealthy" else "healthy"

        return HealthResponse(
            status=overall_status,
            version=APP_VERSION,
            timestamp=datetime.utcnow(),
            services=services,
            uptime_seconds=uptime
        )

    # Include API routers
    app.include_router(snapshots_router, prefix="/api")

    if public_dir.is_dir():
        app.mount("/", StaticFiles(directory=str(public_dir), html=True), name="public")
    else:
        @app.get("/", include_in_schema=False)
        async def root():
            """Root endpoint pointing at the API documentation."""
            return JSONResponse(
                content={
                    "message": APP_TITLE,
                    "version": APP_VERSION,
                    "documentation": "/docs",
                    "openapi": "/openapi.json"
                }
            )

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "pagesnap.api.main:app",
        host="0.0.0.0",
        port=int(os.environ.get("PORT", 3000)),
        log_level="info",
        access_log=True,
    )
