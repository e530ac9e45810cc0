from datetime import datetime, timezone

from fastapi import APIRouter

from mediavault.config.settings import config
from mediavault.core.state import state
from mediavault.models.response import HealthStatus, ServiceStatus

router = APIRouter()


@router.get("/", response_model=ServiceStatus)
async def root():
    """Capability document"""
    return ServiceStatus(
        status="MediaVault Pro API is running!",
        version=config.api.version,
        engine="yt-dlp",
        endpoints={
            "health": "GET /health",
            "info": "POST /api/info",
            "download": "GET /api/download",
            "audio": "GET /api/audio",
        },
    )


@router.get("/health", response_model=HealthStatus)
async def health_check():
    """Liveness probe"""
    return HealthStatus(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        uptime=max(state.uptime, 0.0),
    )
