"""
FastAPI application exposing the catalog and session state over HTTP.

Wires together:
- Repositories: in-memory product catalog
- Session: session store mirroring the identity provider
- Services: product creation workflow
- Routers: HTTP endpoints
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from . import __version__
from . import dependencies
from .config import settings
from .domain.exceptions import ProviderNotConfiguredError
from .logging_config import get_logger, setup_logging
from .routers import auth_router, health_router, products_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging(settings.LOG_LEVEL, use_json=settings.LOG_JSON)
    logger.info("Starting ShopStore", version=__version__)

    if settings.supabase_configured or dependencies.has_session_store():
        dependencies.get_session_store().initialize()
        logger.info("Session store initialized")
    else:
        logger.warning("Supabase not configured, session endpoints unavailable")

    yield

    logger.info("Shutting down ShopStore...")
    dependencies.reset_dependencies()
    logger.info("ShopStore shut down complete")


app = FastAPI(
    title=settings.APP_NAME,
    description="Product catalog and session state",
    version=__version__,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Add a request ID to the logging context."""
    request_id = request.headers.get("X-Request-ID", f"req-{id(request)}")
    structlog.contextvars.bind_contextvars(request_id=request_id)

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id

    structlog.contextvars.unbind_contextvars("request_id")
    return response


app.include_router(products_router.router)
app.include_router(auth_router.router)
app.include_router(health_router.router)


@app.exception_handler(ProviderNotConfiguredError)
async def provider_not_configured_handler(
    request: Request, exc: ProviderNotConfiguredError
):
    """Report missing provider configuration as service unavailable."""
    logger.error(
        "Service unavailable",
        path=request.url.path,
        provider=exc.provider,
        error=exc.message,
    )
    return JSONResponse(
        status_code=503,
        content={
            "error": "service_unavailable",
            "message": exc.message,
            "details": exc.details,
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions."""
    logger.error(
        "Unhandled exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred",
            "details": {},
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("shopstore.app:app", host="0.0.0.0", port=8000, log_level="info")
