"""Local Filesystem Backend: StorageBackend over a directory tree.

Layout:
    {base}/{view}/{category}/{sku}.{ext}          layers and plates
    {base}/{view}/{category}/<subdir>/{sku}.{ext} fallback, one level deep
    {base}/cache/{key}.jpg                        composites
    {base}/cache/{key}.json                       JSON documents (products)

Invariants:
    - Missing file -> None; any other OSError -> BackendIOError
    - save_to_cache writes a temp file and renames it, so readers never see
      a partially written composite and concurrent identical writes are safe
    - Blocking file IO runs in a worker thread (asyncio.to_thread)
"""

import asyncio
import logging
import os
import tempfile
from pathlib import Path

from sandwich.core.domain_types import View
from sandwich.core.errors import BackendIOError

logger = logging.getLogger(__name__)

CACHE_DIR = "cache"
_ABSENT = (FileNotFoundError, NotADirectoryError, IsADirectoryError)


class LocalStorage:
    """Filesystem-backed storage for development, tests and single-host deploys."""

    def __init__(self, base_path: str | Path):
        self.base_path = Path(base_path)

    async def fetch_layer(
        self, category: str, sku: str, view: View, extension: str,
    ) -> bytes | None:
        return await asyncio.to_thread(
            self._read_layer, category, sku, view, extension,
        )

    async def fetch_cached(self, key: str) -> bytes | None:
        path = self._cache_path(key, "jpg")
        data = await asyncio.to_thread(self._read_optional, path)
        if data is None:
            logger.debug(f"Cache miss: {key}")
        return data

    async def save_to_cache(self, key: str, data: bytes) -> None:
        await asyncio.to_thread(self._write_atomic, self._cache_path(key, "jpg"), data)
        logger.debug(f"Saved to cache: {key} ({len(data)} bytes)")

    async def fetch_cached_json(self, key: str) -> str | None:
        data = await asyncio.to_thread(
            self._read_optional, self._cache_path(key, "json"),
        )
        if data is None:
            return None
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise BackendIOError(f"{key}.json is not UTF-8: {e}", "read")

    # ─── Blocking helpers (run in worker threads) ────────────────

    def _cache_path(self, key: str, extension: str) -> Path:
        return self.base_path / CACHE_DIR / f"{key}.{extension}"

    def _read_layer(
        self, category: str, sku: str, view: View, extension: str,
    ) -> bytes | None:
        filename = f"{sku}.{extension}"
        category_dir = self.base_path / view.value / category

        data = self._read_optional(category_dir / filename)
        if data is not None:
            logger.debug(f"Fetched layer: {category_dir / filename} ({len(data)} bytes)")
            return data

        for subdir in self._subdirectories(category_dir):
            data = self._read_optional(subdir / filename)
            if data is not None:
                logger.debug(f"Fetched layer from subdir: {subdir / filename}")
                return data

        logger.debug(f"Layer not found: {view.value}/{category}/{filename}")
        return None

    def _subdirectories(self, path: Path) -> list[Path]:
        try:
            return sorted(p for p in path.iterdir() if p.is_dir())
        except _ABSENT:
            return []
        except OSError as e:
            raise BackendIOError(f"{path}: {e}", "list")

    def _read_optional(self, path: Path) -> bytes | None:
        try:
            return path.read_bytes()
        except _ABSENT:
            return None
        except OSError as e:
            raise BackendIOError(f"{path}: {e}", "read")

    def _write_atomic(self, path: Path, data: bytes) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as tmp:
                    tmp.write(data)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise BackendIOError(f"{path}: {e}", "write")
