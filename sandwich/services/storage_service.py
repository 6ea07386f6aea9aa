"""Storage Service: plate/layer fetching, composite cache access, products JSON.

Invariants:
    - fetch_layers returns one slot per param, in input order; None = layer absent
    - All fetches of one request run concurrently in one TaskGroup; the first
      failure cancels and awaits the siblings, then surfaces unwrapped
    - Absence (None) and failure (BackendIOError) are never conflated
    - A missing base plate is fatal for the request (PlateNotFoundError)

Design Decisions:
    - Module-level singleton initialized by the FastAPI lifespan, exposed through
      the get_storage() dependency (ADR: no import-time side effects)
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Iterable, TypeVar

from sandwich.core.domain_types import View
from sandwich.core.errors import PlateNotFoundError, ErrorContext
from sandwich.core.layer_params import LayerParam
from sandwich.core.storage_protocols import StorageBackend
from sandwich.infrastructure.composite_cache import CacheStats, CompositeCache

logger = logging.getLogger(__name__)

PLATE_CATEGORY = "plate"

T = TypeVar("T")


@dataclass
class LayerFetchResult:
    """Outcome of fetching a request's layers, with the misses identified."""
    layers: list[bytes]
    requested: int
    missing: list[LayerParam] = field(default_factory=list)

    @property
    def found(self) -> int:
        return len(self.layers)

    @property
    def complete(self) -> bool:
        return self.found == self.requested


class StorageService:
    """Facade over a StorageBackend plus the two-tier composite cache."""

    def __init__(
        self,
        backend: StorageBackend,
        cache_capacity: int = 1000,
        layer_extension: str = "png",
        plate_extension: str = "jpg",
    ):
        self.backend = backend
        self.cache = CompositeCache(backend, cache_capacity)
        self.layer_extension = layer_extension
        self.plate_extension = plate_extension

    async def fetch_base_plate(self, view: View) -> bytes:
        plate = view.plate_identifier
        data = await self.backend.fetch_layer(
            PLATE_CATEGORY, plate, view, self.plate_extension,
        )
        if data is None:
            raise PlateNotFoundError(plate, ErrorContext(view=view.value))
        return data

    async def fetch_layers(
        self, params: list[LayerParam], view: View,
    ) -> list[bytes | None]:
        """Fetch every layer concurrently; slot i corresponds to params[i]."""
        return await join_fail_fast(
            self.backend.fetch_layer(
                p.category, p.sku.value, view, self.layer_extension,
            )
            for p in params
        )

    async def fetch_plate_and_layers(
        self, params: list[LayerParam], view: View,
    ) -> tuple[bytes, LayerFetchResult]:
        """Fetch the base plate and all layers in one concurrent batch."""
        plate, slots = await join_fail_fast([
            self.fetch_base_plate(view), self.fetch_layers(params, view),
        ])
        return plate, collect_layers(params, slots, view)

    async def get_cached_composite(self, key: str) -> bytes | None:
        return await self.cache.get(key)

    async def save_composite(self, key: str, data: bytes) -> None:
        await self.cache.put(key, data)

    async def fetch_cached_json(self, key: str) -> str | None:
        return await self.backend.fetch_cached_json(key)

    def cache_stats(self) -> CacheStats:
        return self.cache.stats()

    def clear_cache(self) -> None:
        self.cache.clear()


async def join_fail_fast(coros: Iterable[Awaitable[T]]) -> list[T]:
    """Run coroutines concurrently and return their results in input order.

    The first exception cancels the rest; nothing is left running. The
    original exception is re-raised rather than an ExceptionGroup so the
    error handlers see the domain type.
    """
    try:
        async with asyncio.TaskGroup() as group:
            tasks = [group.create_task(coro) for coro in coros]
    except BaseExceptionGroup as eg:
        raise _first_leaf(eg) from None
    return [task.result() for task in tasks]


def _first_leaf(group: BaseExceptionGroup) -> BaseException:
    exc: BaseException = group
    while isinstance(exc, BaseExceptionGroup):
        exc = exc.exceptions[0]
    return exc


def collect_layers(
    params: list[LayerParam], slots: list[bytes | None], view: View,
) -> LayerFetchResult:
    """Drop absent slots (keeping order) and record which params were missing."""
    layers = [data for data in slots if data is not None]
    missing = [p for p, data in zip(params, slots) if data is None]
    result = LayerFetchResult(layers=layers, requested=len(params), missing=missing)
    if missing:
        logger.warning(
            f"Found {result.found}/{result.requested} requested layers for view {view.value}",
            extra={"view": view.value, "requested": result.requested, "found": result.found},
        )
        for param in missing:
            logger.debug(f"Missing layer: {param.token}")
    return result


# Singleton (initialized on startup)
storage_service: StorageService | None = None


def init_storage(backend: StorageBackend, **kwargs) -> StorageService:
    global storage_service
    storage_service = StorageService(backend, **kwargs)
    return storage_service


def get_storage() -> StorageService:
    """FastAPI dependency for the storage service."""
    if not storage_service:
        raise RuntimeError("Storage not initialized")
    return storage_service
