import time

from fastapi import APIRouter

from ..core.config import settings
from ..core.structured_logging import LoggerFactory

logger = LoggerFactory.get_logger(__name__)
router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/healthz")
async def health():
    """Liveness plus OpenRouter reachability outside dev/test."""
    # Skip external OpenRouter health in dev/test to keep healthz fast
    if settings.service_env in {"dev", "test"}:
        openrouter_healthy = True
    else:
        from ..services.openrouter import health_check as openrouter_health
        openrouter_healthy = await openrouter_health()
        if not openrouter_healthy:
            logger.warning("OpenRouter health check failed")

    body = {
        "ok": openrouter_healthy,
        "status": "healthy" if openrouter_healthy else "degraded",
        "service": settings.service_name,
        "environment": settings.service_env,
        "uptime_seconds": int(time.time() - _start_time),
        "services": {"openrouter": openrouter_healthy},
    }
    return body
