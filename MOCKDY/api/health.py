from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from packages.mockdy_core.config import MockdyConfig
from MOCKDY.api.dependencies import get_config

router = APIRouter()

@router.get("/health")
async def health_check(config: MockdyConfig = Depends(get_config)):
    """
    Server Liveness Probe.
    Returns status, version, and current timestamp.
    """
    return {
        "status": "ok",
        "version": config.VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }
