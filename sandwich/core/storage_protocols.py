"""Storage Protocol: the contract between core/services and concrete backends.

Invariants:
    - Absence is a value (None), never an exception
    - Any other failure raises BackendIOError (core/errors.py)
    - Same key -> same bytes, so save_to_cache is idempotent

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no base class
    - Async methods: implementations do IO; the pure core never awaits them
"""

from typing import Protocol

from sandwich.core.domain_types import View


class StorageBackend(Protocol):
    """Contract for layer, composite and JSON storage, implemented by infrastructure."""
    async def fetch_layer(
        self, category: str, sku: str, view: View, extension: str,
    ) -> bytes | None: ...
    async def fetch_cached(self, key: str) -> bytes | None: ...
    async def save_to_cache(self, key: str, data: bytes) -> None: ...
    async def fetch_cached_json(self, key: str) -> str | None: ...
