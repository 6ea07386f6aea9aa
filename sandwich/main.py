"""Sandwich API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map SandwichError -> structured JSON responses
    - Storage service (backend + composite cache) initialized on startup via lifespan
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sandwich.api.error_handlers import register_error_handlers
from sandwich.api.routes import composites, health, products
from sandwich.config import Settings, get_settings
from sandwich.core.storage_protocols import StorageBackend
from sandwich.infrastructure.local_storage import LocalStorage
from sandwich.infrastructure.observability import setup_logging
from sandwich.services.storage_service import init_storage

logger = logging.getLogger(__name__)


def build_backend(settings: Settings) -> StorageBackend:
    """Concrete backend selected by settings.storage_backend."""
    if settings.storage_backend == "local":
        return LocalStorage(settings.storage_path)
    raise ValueError(f"Unsupported storage backend: {settings.storage_backend}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_storage(
        build_backend(settings),
        cache_capacity=settings.cache_capacity,
        layer_extension=settings.layer_extension,
        plate_extension=settings.plate_extension,
    )
    logger.info(
        f"Sandwich API started ({settings.storage_backend} storage at {settings.storage_path})",
    )
    yield
    logger.info("Sandwich API shutting down")


app = FastAPI(title="Sandwich API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Cache", "X-Cache-Key", "X-Layers"],
)

app.include_router(health.router)
app.include_router(composites.router)
app.include_router(products.router)

register_error_handlers(app)
