"""
Health check endpoints. No authentication.
"""

import time

from fastapi import APIRouter, Depends

from src.api.dependencies import get_app_settings, get_kv_store
from src.application.dto.responses import DatabaseHealthResponse, HealthResponse
from src.config import Settings
from src.core.interfaces import IKeyValueStore

router = APIRouter(prefix="/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    """Liveness: the process is up and serving."""
    return HealthResponse(
        status="ok",
        version=settings.app_version,
        uptime_seconds=time.time() - _start_time,
    )


@router.get("/db", response_model=DatabaseHealthResponse)
async def db_health(store: IKeyValueStore = Depends(get_kv_store)) -> DatabaseHealthResponse:
    """Readiness of the key-value store."""
    start = time.time()
    available = await store.ping()
    latency = (time.time() - start) * 1000

    return DatabaseHealthResponse(
        status="ok" if available else "unhealthy",
        database="ok" if available else "unavailable",
        latency_ms=latency if available else None,
    )
