"""Health check endpoint."""

import time

from fastapi import APIRouter

from link_validator import __version__
from link_validator.models.responses import CacheStats, HealthResponse
from link_validator.services.validator_cache import validator_cache

router = APIRouter()

_start_time = time.time()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Service health check with cache statistics."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        uptime_seconds=round(time.time() - _start_time, 2),
        cache=CacheStats(
            size=len(validator_cache),
            max_size=validator_cache.max_size,
            hits=validator_cache.hits,
            misses=validator_cache.misses,
        ),
    )
