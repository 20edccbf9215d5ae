"""Health check endpoints.

Provides health status for container health checks and monitoring.
"""

from fastapi import APIRouter, Response, status

from category_admin import __version__
from category_admin.api.deps import Service
from category_admin.config import settings
from category_admin.infra.logging import get_logger
from category_admin.schemas.common import HealthResponse

router = APIRouter()
logger = get_logger(__name__)


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Basic health check.

    Returns 200 if the process is serving requests.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        environment=settings.environment,
        checks={},
    )


@router.get("/health/ready", response_model=HealthResponse)
async def health_ready(service: Service, response: Response) -> HealthResponse:
    """Readiness check.

    Verifies the category store answers. Returns 503 when it does not so
    the instance is taken out of rotation.
    """
    checks: dict[str, bool] = {}

    try:
        checks["category_store"] = await service.repository.ping()
    except Exception as e:
        logger.warning("Category store health check failed", error=str(e))
        checks["category_store"] = False

    all_healthy = all(checks.values())
    if not all_healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status="healthy" if all_healthy else "degraded",
        version=__version__,
        environment=settings.environment,
        checks=checks,
    )


@router.get("/health/live", response_model=HealthResponse)
async def health_live() -> HealthResponse:
    """Liveness check."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        environment=settings.environment,
        checks={"alive": True},
    )
