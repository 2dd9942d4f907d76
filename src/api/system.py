"""Health and metrics endpoints"""

from fastapi import APIRouter, Request
from fastapi.responses import Response

from src.core.config import settings
from src.core.metrics import metrics_endpoint
from src.shared.errors import NotFound

router = APIRouter(prefix="/observability", tags=["System"])


@router.get("/ready")
async def readiness_check() -> dict[str, bool]:
    """Readiness check endpoint."""
    return {"ready": True}


@router.get("/live")
async def liveness_check() -> dict[str, bool]:
    """Liveness check endpoint."""
    return {"alive": True}


@router.get("/metrics", include_in_schema=settings.metrics.enabled)
async def get_metrics(request: Request) -> Response:
    """Prometheus metrics endpoint."""
    if not settings.metrics.enabled:
        raise NotFound("Metrics are disabled")
    return await metrics_endpoint(request.app.state.error_dispatcher.metrics)
