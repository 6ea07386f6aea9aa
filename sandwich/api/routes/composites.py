"""Composite Routes: render a layered garment image, inspect the cache.

Invariants:
    - POST /create returns image/jpeg bytes or a structured JSON error, never both
    - X-Cache reports HIT only when bytes came from the composite cache
    - Routes never contain business logic (delegate to services/compose_pipeline)
"""

import logging

from fastapi import APIRouter, Depends, Query, Response, status

from sandwich.config import get_settings
from sandwich.core.domain_types import View
from sandwich.schemas.compose import (
    CacheKeyResponse, CacheStatsResponse, CreateRequest,
)
from sandwich.services.compose_pipeline import render_composite, resolve_layers
from sandwich.services.storage_service import StorageService, get_storage

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["composites"])

JPEG_MEDIA_TYPE = "image/jpeg"


@router.post("/create")
async def create_composite(
    body: CreateRequest, storage: StorageService = Depends(get_storage),
):
    """Render the composite for body.p under body.view."""
    result = await render_composite(
        storage, body.p, body.view,
        bypass_cache=body.bypass_cache,
        quality=get_settings().jpeg_quality,
    )
    headers = {
        "X-Cache": "HIT" if result.cache_hit else "MISS",
        "X-Layers": f"{result.found}/{result.requested}",
    }
    if result.cache_key:
        headers["X-Cache-Key"] = result.cache_key
    return Response(content=result.data, media_type=JPEG_MEDIA_TYPE, headers=headers)


@router.get("/cache/key", response_model=CacheKeyResponse)
async def get_cache_key(
    p: str = Query("", max_length=4_000),
    view: str = Query(View.FRONT.value),
):
    """Derive the cache key for a parameter set without rendering."""
    parsed_view = View.parse(view)
    if not p.strip():
        # /create serves the bare plate uncached for empty params
        return CacheKeyResponse(cache_key=None, view=parsed_view, layers=[])
    layers, cache_key = resolve_layers(p, parsed_view)
    return CacheKeyResponse(
        cache_key=cache_key, view=parsed_view, layers=[layer.token for layer in layers],
    )


@router.get("/cache/stats", response_model=CacheStatsResponse)
async def get_cache_stats(storage: StorageService = Depends(get_storage)):
    stats = storage.cache_stats()
    return CacheStatsResponse(entries=stats.entries, capacity=stats.capacity)


@router.delete("/cache", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cache(storage: StorageService = Depends(get_storage)):
    """Clear the in-memory tier. Persisted composites are kept."""
    storage.clear_cache()
