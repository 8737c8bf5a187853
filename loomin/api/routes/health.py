"""Health API endpoint.

Endpoints:
- GET /v1/health - Health check with result cache status
"""

from __future__ import annotations

import time
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from loomin import __version__
from loomin.core.exceptions import CacheStoreError
from loomin.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/v1", tags=["health"])

# Module-level startup time (set when module loads)
_module_start_time: float = time.time()


# =============================================================================
# RESPONSE MODELS (Rule #7: Validation)
# =============================================================================


class CacheHealth(BaseModel):
    """Result cache health status."""

    healthy: bool = Field(..., description="Whether the cache store answered")
    backend: str = Field(..., description="Cache store backend type")
    entries: int = Field(default=0, description="Number of cached results")
    error: Optional[str] = Field(default=None, description="Error message if unhealthy")


class HealthResponse(BaseModel):
    """Health check response with cache status."""

    status: str = Field(..., description="Overall health status: healthy, degraded")
    version: str = Field(..., description="Application version")
    timestamp: str = Field(..., description="ISO 8601 timestamp")
    uptime_seconds: float = Field(default=0.0, description="Server uptime in seconds")
    cache: Optional[CacheHealth] = Field(
        default=None, description="Result cache health details"
    )


# =============================================================================
# HELPER FUNCTIONS (Rule #4: <60 lines each)
# =============================================================================


async def _get_cache_health(request: Request) -> CacheHealth:
    """Count cache entries through the running pipeline.

    Rule #1: Early returns for error cases.
    """
    config = getattr(request.app.state, "config", None)
    backend = config.storage.backend if config is not None else "unknown"
    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        return CacheHealth(healthy=False, backend=backend, error="Pipeline not started")

    try:
        entries = await pipeline.cache.size()
    except CacheStoreError as e:
        return CacheHealth(healthy=False, backend=backend, error=str(e))

    return CacheHealth(healthy=True, backend=backend, entries=entries)


# =============================================================================
# ENDPOINT HANDLERS
# =============================================================================


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Health check endpoint with cache status.

    Returns 200 with status:
    - "healthy": All systems operational
    - "degraded": Cache unavailable but API responding (pipeline still runs)
    """
    cache_health = await _get_cache_health(request)

    if cache_health.healthy:
        status = "healthy"
    else:
        status = "degraded"
        logger.warning("Cache health degraded", error=cache_health.error)

    return HealthResponse(
        status=status,
        version=__version__,
        timestamp=datetime.now().isoformat(),
        uptime_seconds=round(time.time() - _module_start_time, 2),
        cache=cache_health,
    )
