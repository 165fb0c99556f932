"""FastAPI application entry point.

Backend Aggregation Service: public catalog, checkout orders and the admin
API, backed by the Remote Table Store.
"""

import time
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront import __version__
from storefront.api.deps import get_table_store
from storefront.api.routes import admin_router, catalog_router, health_router, orders_router
from storefront.config import settings
from storefront.infra.database import close_db_engine, verify_db_connection
from storefront.infra.logging import (
    bind_request_context,
    clear_request_context,
    get_logger,
    setup_logging,
)
from storefront.infra.table_store import TableStoreError
from storefront.services.auth import resolve_token_secret
from storefront.services.catalog_service import CatalogService
from storefront.services.errors import ServiceError

# Setup logging first
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler.

    Startup:
    - Check the token secret (fatal outside dev when missing)
    - Verify database connection
    - Seed default categories into an empty table

    Shutdown:
    - Close database connections
    """
    logger.info("Storefront backend starting", environment=settings.environment)

    resolve_token_secret()

    db_ok = await verify_db_connection()
    if not db_ok:
        logger.warning("Database connection failed - will retry on first request")

    try:
        seeded = await CatalogService(get_table_store()).ensure_default_categories()
        logger.info("Categories initialized", seeded=seeded)
    except TableStoreError as e:
        logger.warning("Could not initialize categories, serving without seed", error=str(e))

    yield

    logger.info("Storefront backend shutting down")
    await close_db_engine()
    logger.info("Cleanup complete")


app = FastAPI(
    title="Storefront Backend",
    description="Catalog, checkout and admin API for the storefront",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.environment == "dev" else None,
    redoc_url=None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log each request with its outcome, tagging every line with a request id."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
    bind_request_context(request_id=request_id, method=request.method, path=request.url.path)
    start = time.perf_counter()
    try:
        response = await call_next(request)
        logger.info(
            "Request handled",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start) * 1000, 1),
        )
    finally:
        clear_request_context()
    response.headers["X-Request-ID"] = request_id
    return response


# =============================================================================
# Exception Handlers
# =============================================================================


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Reject malformed bodies with 400 and the list of problems."""
    logger.info("Request validation failed", path=request.url.path, errors=len(exc.errors()))
    return JSONResponse(
        status_code=400,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(ServiceError)
async def service_exception_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Business rule violations (conflicts, forbidden transitions)."""
    logger.info(
        "Request rejected by business rule",
        path=request.url.path,
        error=str(exc),
        error_type=type(exc).__name__,
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions with a structured 500."""
    logger.error(
        "Unhandled exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "error_type": type(exc).__name__,
        },
    )


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(health_router, prefix="/api", tags=["Health"])
app.include_router(catalog_router, prefix="/api", tags=["Catalog"])
app.include_router(orders_router, prefix="/api", tags=["Orders"])
app.include_router(admin_router, prefix="/api/admin", tags=["Admin"])


@app.get("/")
async def root() -> dict:
    """Root endpoint - basic service info."""
    return {
        "service": "Storefront Backend",
        "version": __version__,
        "environment": settings.environment,
    }
