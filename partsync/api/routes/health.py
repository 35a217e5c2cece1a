"""
Health check endpoints.
"""

import time

from fastapi import APIRouter

from partsync.application.dto.responses import ComponentHealthResponse, HealthResponse
from partsync.config import get_logger, get_settings

logger = get_logger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])

# Track startup time
_start_time = time.time()


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Service and database health.

    Runs ``SELECT 1`` against the pool and reports its latency.
    """
    from partsync.infrastructure.storage.sqlite import get_connection_pool

    settings = get_settings()
    try:
        pool = await get_connection_pool()
        start = time.perf_counter()
        async with pool.acquire() as conn:
            await conn.execute("SELECT 1")
        db_status = ComponentHealthResponse(
            name="sqlite",
            available=True,
            latency_ms=round((time.perf_counter() - start) * 1000, 2),
            details={"path": str(settings.storage.db_path)},
        )
    except Exception as e:
        logger.warning("health_db_unavailable", error=str(e))
        db_status = ComponentHealthResponse(name="sqlite", available=False, error=str(e))

    return HealthResponse(
        status="healthy" if db_status.available else "unhealthy",
        version=settings.app_version,
        uptime_seconds=time.time() - _start_time,
        database=db_status,
    )
