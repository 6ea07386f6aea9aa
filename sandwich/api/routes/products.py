"""Products Route: serves the cached product listing JSON as-is."""

import logging

from fastapi import APIRouter, Depends, Response

from sandwich.config import get_settings
from sandwich.core.errors import ProductsNotFoundError
from sandwich.services.storage_service import StorageService, get_storage

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/products", tags=["products"])


@router.get("")
async def get_products(storage: StorageService = Depends(get_storage)):
    key = get_settings().products_cache_key
    payload = await storage.fetch_cached_json(key)
    if payload is None:
        raise ProductsNotFoundError(key)
    return Response(content=payload, media_type="application/json")
