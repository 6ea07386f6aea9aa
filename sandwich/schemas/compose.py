"""Compose Schemas: request/response models for the composite endpoints.

Invariants:
    - view defaults to front; unknown views fail validation (400)
    - p is a raw comma-separated "category/sku" list; malformed tokens are
      dropped later by the parser, not rejected here
"""

from pydantic import BaseModel, Field, field_validator

from sandwich.core.domain_types import View


class CreateRequest(BaseModel):
    """POST /create body."""
    p: str = Field("", max_length=4_000)
    view: View = View.FRONT
    bypass_cache: bool = False

    @field_validator("view", mode="before")
    @classmethod
    def lower_view(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


class CacheKeyResponse(BaseModel):
    """Deduplication handle for a parameter set, without rendering.

    cache_key is None for empty params, which are never cached.
    """
    cache_key: str | None
    view: View
    layers: list[str]


class CacheStatsResponse(BaseModel):
    entries: int
    capacity: int
