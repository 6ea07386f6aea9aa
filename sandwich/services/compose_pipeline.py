"""Compose Pipeline: raw parameter string + view -> encoded composite.

Flow:
    parse -> normalize SKUs -> rule engine (filter, remap, order) -> cache key
    -> cache lookup (hit returns) -> concurrent plate + layer fetch
    -> composite (worker thread) -> cache store (complete sets only)

Invariants:
    - A composite built from fewer layers than requested is NEVER cached
    - A failed cache write is logged and swallowed; the image is still returned
    - Decode/encode/backend errors propagate; no partial image is returned
    - An empty parameter string returns the base plate unchanged and uncached
"""

import asyncio
import logging
from dataclasses import dataclass

from sandwich.core.cache_key import derive_cache_key
from sandwich.core.compositor import DEFAULT_QUALITY, compose_layers
from sandwich.core.domain_types import CacheKey, View
from sandwich.core.errors import CacheWriteError
from sandwich.core.layer_params import LayerParam, parse_params
from sandwich.core.layer_rules import normalize_layers
from sandwich.services.storage_service import StorageService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompositeResult:
    """Encoded image plus how it was obtained."""
    data: bytes
    cache_key: CacheKey | None
    cache_hit: bool
    requested: int
    found: int

    @property
    def complete(self) -> bool:
        return self.requested == self.found


def resolve_layers(params: str, view: View) -> tuple[list[LayerParam], CacheKey]:
    """Parse and normalize a parameter string; return ordered layers and their key."""
    layers = normalize_layers(view, parse_params(params))
    return layers, derive_cache_key(layers, view, view.plate_identifier)


async def render_composite(
    storage: StorageService,
    params: str,
    view: View,
    bypass_cache: bool = False,
    quality: int = DEFAULT_QUALITY,
) -> CompositeResult:
    """Render (or fetch from cache) the composite for params under view."""
    if not params.strip():
        plate = await storage.fetch_base_plate(view)
        return CompositeResult(plate, None, False, 0, 0)

    layers, cache_key = resolve_layers(params, view)
    log_extra = {"cache_key": cache_key, "view": view.value}

    if not bypass_cache:
        cached = await storage.get_cached_composite(cache_key)
        if cached is not None:
            logger.info(f"Serving cached image: {cache_key}", extra=log_extra)
            return CompositeResult(cached, cache_key, True, len(layers), len(layers))

    plate, fetched = await storage.fetch_plate_and_layers(layers, view)
    data = await asyncio.to_thread(compose_layers, plate, fetched.layers, quality)

    if fetched.complete:
        await _store_quietly(storage, cache_key, data)
    else:
        logger.warning(
            f"Not caching incomplete composite {cache_key}",
            extra={**log_extra, "requested": fetched.requested, "found": fetched.found},
        )

    return CompositeResult(data, cache_key, False, fetched.requested, fetched.found)


async def _store_quietly(storage: StorageService, cache_key: str, data: bytes) -> None:
    try:
        await storage.save_composite(cache_key, data)
    except CacheWriteError as e:
        logger.error(
            f"Failed to save to cache: {e.message}",
            extra={"cache_key": cache_key, "error_code": e.code},
        )
