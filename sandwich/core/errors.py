"""Error Hierarchy: typed, categorized exceptions for every surfaced failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - to_response() produces the REST envelope; no partial image bytes ever accompany it
    - Malformed tokens and missing layers are NOT errors here: they are recovered
      locally (dropped token, None slot) and never raised

Design Decisions:
    - Single hierarchy with SandwichError base: one FastAPI handler catches all
      (ADR: uniform error shape)
    - DecodeError carries the layer index so a corrupt layer is identifiable;
      layer_index=None means the base plate
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    IMAGE = "image"
    STORAGE = "storage"
    CACHE = "cache"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    cache_key: str | None = None
    view: str | None = None
    layer_index: int | None = None
    debug_info: dict[str, Any] | None = None


class SandwichError(Exception):
    """Base exception for all Sandwich errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "cache_key": self.context.cache_key,
                    "view": self.context.view,
                    "layer_index": self.context.layer_index,
                },
            }
        }


# ─── Request Errors (400-level) ─────────────────────────────────

class InvalidViewError(SandwichError):
    """View token is not one of the known camera views."""
    def __init__(self, token: str, context: ErrorContext | None = None):
        super().__init__(
            f"Unknown view '{token}'",
            "INVALID_VIEW", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.token = token


class PlateNotFoundError(SandwichError):
    """Backend has no base plate image for the requested view."""
    def __init__(self, plate: str, context: ErrorContext | None = None):
        super().__init__(
            f"Base plate '{plate}' not found",
            "PLATE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.plate = plate


class ProductsNotFoundError(SandwichError):
    """Cached products listing is absent from the backend."""
    def __init__(self, key: str, context: ErrorContext | None = None):
        super().__init__(
            f"Products cache '{key}' not found",
            "PRODUCTS_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


# ─── Image Errors ───────────────────────────────────────────────

class DecodeError(SandwichError):
    """Base plate or a layer could not be decoded."""
    def __init__(
        self, message: str, layer_index: int | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.layer_index = layer_index
        target = "base plate" if layer_index is None else f"layer {layer_index}"
        super().__init__(
            f"Failed to decode {target}: {message}",
            "DECODE_ERROR", ErrorCategory.IMAGE,
            ErrorSeverity.ERROR, ctx, 422,
        )
        self.layer_index = layer_index


class EncodeError(SandwichError):
    """Final canvas could not be encoded."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Failed to encode composite: {message}",
            "ENCODE_ERROR", ErrorCategory.IMAGE,
            ErrorSeverity.CRITICAL, context, 500,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class BackendIOError(SandwichError):
    """Storage backend failed for a reason other than absence."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Storage {operation} failed: {message}",
            "BACKEND_IO_ERROR", ErrorCategory.STORAGE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class CacheWriteError(SandwichError):
    """Composite could not be persisted to the durable tier."""
    def __init__(self, cache_key: str, message: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.cache_key = cache_key
        super().__init__(
            f"Failed to cache composite {cache_key}: {message}",
            "CACHE_WRITE_ERROR", ErrorCategory.CACHE,
            ErrorSeverity.WARNING, ctx, 500,
        )
