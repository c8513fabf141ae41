"""
FastAPI Application
==================

Main FastAPI application serving portal glyph images, the health endpoint and
the static front-end.
"""

import asyncio
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from portal_glyphs.api.routes.health import router as health_router
from portal_glyphs.api.routes.portal import router as portal_router
from portal_glyphs.config.logging import get_logger
from portal_glyphs.config.settings import Settings, get_settings
from portal_glyphs.core.errors import CacheIOError, FontLoadError, PortalImageError
from portal_glyphs.core.service import PortalImageService
from portal_glyphs.models.schemas import ErrorResponse

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    service: PortalImageService = app.state.portal_service

    logger.info(
        "Starting portal glyph server",
        cache_dir=str(settings.cache_dir),
        font_path=str(settings.font_path),
    )

    if settings.eager_font_load:
        try:
            await asyncio.to_thread(service.font_provider.load)
            logger.info("Font loaded at startup")
        except FontLoadError as e:
            logger.error("Font loading failed", path=str(e.path), error=str(e))
            raise RuntimeError(f"Font loading failed: {e}")

    try:
        yield
    finally:
        logger.info(
            "Shutting down portal glyph server",
            in_flight=service.in_flight,
            **service.stats,
        )


# Request ID middleware
async def add_request_id(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Add request ID to all requests."""
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


def _error_response(status_code: int, error: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error.model_dump(mode="json"))


# Exception handlers
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """HTTP exception handler with structured error response."""
    error_response = ErrorResponse(
        error=str(exc.detail),
        error_code=str(exc.status_code),
        details=None,
        request_id=getattr(request.state, "request_id", None),
    )

    logger.info(
        "HTTP exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
        request_id=error_response.request_id,
    )
    return _error_response(exc.status_code, error_response)


async def portal_image_exception_handler(request: Request, exc: PortalImageError) -> JSONResponse:
    """Map each pipeline error kind to its status code."""
    settings: Settings = request.app.state.settings
    details = exc.to_details()
    if settings.debug:
        details["message"] = str(exc)

    error_response = ErrorResponse(
        error=str(exc) if exc.status_code < 500 else "Portal image could not be produced",
        error_code=exc.error_code,
        details=details or None,
        request_id=getattr(request.state, "request_id", None),
    )

    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "Portal image request failed",
        error_code=exc.error_code,
        status_code=exc.status_code,
        address=exc.address,
        path=str(exc.path) if isinstance(exc, (CacheIOError, FontLoadError)) and exc.path else None,
        error=str(exc),
        request_id=error_response.request_id,
    )
    return _error_response(exc.status_code, error_response)


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """General exception handler for unexpected errors."""
    settings: Settings = request.app.state.settings
    error_response = ErrorResponse(
        error="Internal server error",
        error_code="INTERNAL_ERROR",
        details={"exception": str(exc)} if settings.debug else None,
        request_id=getattr(request.state, "request_id", None),
    )

    logger.error(
        "Unhandled exception",
        exception=str(exc),
        request_id=error_response.request_id,
        exc_info=True,
    )
    return _error_response(500, error_response)


def create_app(
    settings: Optional[Settings] = None, service: Optional[PortalImageService] = None
) -> FastAPI:
    """
    Application factory.

    Args:
        settings: Settings to use; defaults to the global settings
        service: Pre-built image service; defaults to one built from settings

    Returns:
        FastAPI application instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Render portal addresses as glyph images",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    app.state.settings = settings
    app.state.portal_service = service or PortalImageService(settings)

    app.middleware("http")(add_request_id)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(PortalImageError, portal_image_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(health_router)
    app.include_router(portal_router)

    # Static front-end last so the API routes take precedence.
    frontend_dir = settings.frontend_dir
    if frontend_dir.is_dir():
        app.mount("/", StaticFiles(directory=frontend_dir, html=True), name="frontend")
        logger.info(
            "Serving front-end",
            directory=str(frontend_dir),
            embedded=not settings.skip_embed,
        )
    else:
        logger.warning("Front-end directory not found", directory=str(frontend_dir))

    return app


app = create_app()


def run_server() -> None:
    """Run the server with uvicorn."""
    settings = get_settings()
    logger.info("Listening", host=settings.host, port=settings.port)
    uvicorn.run(
        "portal_glyphs.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


if __name__ == "__main__":
    run_server()
