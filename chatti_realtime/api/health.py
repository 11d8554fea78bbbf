from fastapi import APIRouter, Depends, Request

from chatti_realtime.api.dependencies import get_hub, get_settings
from chatti_realtime.core.config import Settings
from chatti_realtime.core.errors import ServiceUnavailableException
from chatti_realtime.realtime.hub import RealtimeHub
from chatti_realtime.utils.time_utils import to_iso, utc_now

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(
    hub: RealtimeHub = Depends(get_hub),
    config: Settings = Depends(get_settings),
):
    """Application health check endpoint"""
    return {
        "status": "healthy",
        "service": config.app_name,
        "timestamp": to_iso(utc_now()),
        "connections": hub.transport.get_connection_count(),
        "online_users": len(hub.registry),
    }


@router.get("/health/ready")
async def readiness_check(request: Request):
    """
    Kubernetes readiness probe endpoint

    lifespan 이 허브를 만들기 전이거나 종료 중(close_all 이후)이면 503
    """
    hub = request.app.state.hub
    if hub is None:
        raise ServiceUnavailableException("Service not ready - realtime hub not initialized")
    if hub.transport.closing:
        raise ServiceUnavailableException("Service not ready - shutting down")

    return {"status": "ready"}


@router.get("/health/live")
async def liveness_check():
    """Kubernetes liveness probe endpoint"""
    return {"status": "alive", "timestamp": to_iso(utc_now())}
