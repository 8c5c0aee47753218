"""Health check router."""

from datetime import datetime, timezone

from fastapi import APIRouter

from ictirc.config import get_settings
from ictirc.database import ping
from ictirc.dependencies import DbSession
from ictirc.schemas.health import HealthResponse, ServiceStatus
from ictirc.utils.logger import get_logger

router = APIRouter()
log = get_logger(__name__)


@router.get("/health", response_model=HealthResponse)
async def health_check(db: DbSession) -> HealthResponse:
    """
    Liveness plus dependency checks.

    Checks:
    - Database connectivity
    - Email and storage configuration

    Returns:
        HealthResponse with status and service details
    """
    services = {}
    overall_status = "ok"
    settings = get_settings()

    try:
        await ping(db)
        services["database"] = ServiceStatus(status="healthy", message="Connected")
    except Exception as e:
        log.error("health check failed", service="database", error=str(e))
        services["database"] = ServiceStatus(status="unhealthy", message="Service unavailable")
        overall_status = "degraded"

    if settings.resend_api_key:
        services["email"] = ServiceStatus(status="healthy", message="API key configured")
    else:
        services["email"] = ServiceStatus(status="unhealthy", message="No API key")
        overall_status = "degraded"

    if settings.supabase_url and settings.supabase_service_key:
        services["storage"] = ServiceStatus(status="healthy", message="Storage configured")
    else:
        services["storage"] = ServiceStatus(status="unhealthy", message="Storage not configured")
        overall_status = "degraded"

    return HealthResponse(
        status=overall_status,
        version="0.1.0",
        services=services,
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    )
