"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache): single instance per process
    - cache_capacity is positive; jpeg_quality within Pillow's useful 1..95

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults work out-of-the-box against ./assets
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Storage
    storage_backend: Literal["local"] = "local"
    storage_path: str = "./assets"
    layer_extension: str = "png"
    plate_extension: str = "jpg"
    products_cache_key: str = "products-dynamic-cache"

    @field_validator("layer_extension", "plate_extension", mode="before")
    @classmethod
    def strip_extension_dot(cls, v: str) -> str:
        """Accept ".png" as well as "png"."""
        if isinstance(v, str):
            return v.strip().lstrip(".").lower()
        return v

    # Composite cache (memory tier)
    cache_capacity: int = Field(1000, ge=1)

    # Encoding
    jpeg_quality: int = Field(90, ge=1, le=95)

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
