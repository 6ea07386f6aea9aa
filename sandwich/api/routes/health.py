"""Health & Readiness Probes: liveness and readiness endpoints.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if the storage backend errors (readiness)

Design Decisions:
    - Readiness probes the backend through the StorageBackend protocol itself
      (a JSON lookup), so any backend implementation is checked the same way
"""

import logging
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from sandwich.config import get_settings
from sandwich.core.errors import BackendIOError
from sandwich.services.storage_service import StorageService, get_storage

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "sandwich-api",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check(storage: StorageService = Depends(get_storage)):
    """Readiness probe: includes storage connectivity and cache occupancy."""
    try:
        await storage.fetch_cached_json(get_settings().products_cache_key)
    except BackendIOError as e:
        logger.error(f"Storage readiness check failed: {e.message}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": "storage_unavailable"},
        )
    stats = storage.cache_stats()
    return {
        "status": "ready",
        "checks": {"storage": "healthy"},
        "cache": {"entries": stats.entries, "capacity": stats.capacity},
    }
