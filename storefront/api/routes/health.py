"""Health check endpoints.

`/api/health` is the plain liveness answer the storefront polls;
`/api/health/ready` also checks the database.
"""

from fastapi import APIRouter

from storefront import __version__
from storefront.config import settings
from storefront.infra.database import verify_db_connection
from storefront.infra.logging import get_logger
from storefront.schemas.common import HealthResponse

router = APIRouter()
logger = get_logger(__name__)


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Basic health check. Returns 200 if the service is running."""
    return HealthResponse(
        status="ok",
        version=__version__,
        environment=settings.environment,
        checks={},
    )


@router.get("/health/ready", response_model=HealthResponse)
async def health_ready() -> HealthResponse:
    """Readiness check.

    Verifies the Remote Table Store is reachable.
    """
    checks = {"database": await verify_db_connection()}
    all_healthy = all(checks.values())
    if not all_healthy:
        logger.warning("Readiness check degraded", checks=checks)

    return HealthResponse(
        status="ok" if all_healthy else "degraded",
        version=__version__,
        environment=settings.environment,
        checks=checks,
    )
