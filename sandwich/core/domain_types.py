"""Domain Types: views, stacking order, and identity types for composites.

Invariants:
    - View is a closed set of five camera angles; each maps to exactly one plate
    - LayerOrder is a total order over canonical categories (lowest drawn first)
    - Categories outside LayerOrder have no order and never reach composition

Design Decisions:
    - str Enum for View: serializes to JSON and FastAPI bodies without custom encoders
    - IntEnum for LayerOrder: the integer value IS the z-index, so sorting is free
"""

from enum import Enum, IntEnum
from typing import NewType

from sandwich.core.errors import InvalidViewError


# ─── Identity Types ──────────────────────────────────────────────

CacheKey = NewType("CacheKey", str)
PlateId = NewType("PlateId", str)


# ─── Views ───────────────────────────────────────────────────────

_SIDE_CATEGORIES = ("hoodies", "jackets", "patches-left", "patches-right")


class View(str, Enum):
    """Camera angle under which the composite is rendered."""
    FRONT = "front"
    BACK = "back"
    SIDE = "side"
    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def parse(cls, token: str) -> "View":
        """Parse a view token (case-insensitive). Raises InvalidViewError."""
        try:
            return cls(token.strip().lower())
        except ValueError:
            raise InvalidViewError(token)

    @property
    def plate_identifier(self) -> PlateId:
        """Base plate image used for this view."""
        if self in (View.LEFT, View.RIGHT):
            return PlateId("patch-plate")
        if self is View.SIDE:
            return PlateId("side-special-plate")
        return PlateId("swatthermals-black")

    @property
    def allowed_categories(self) -> tuple[str, ...] | None:
        """Raw categories allowed for this view, or None when all are allowed."""
        if self in (View.LEFT, View.RIGHT):
            return _SIDE_CATEGORIES
        return None

    @property
    def allows_patches(self) -> bool:
        return self is not View.BACK

    def __str__(self) -> str:
        return self.value


# ─── Stacking Order ──────────────────────────────────────────────

class LayerOrder(IntEnum):
    """Z-index of canonical categories, lowest to highest."""
    PANTS = 0
    TOPS = 1
    HOODIES = 2
    GLOVES_BOTTOM = 3
    JACKETS = 4
    GLOVES_TOP = 5
    OUTER_JACKETS = 6
    HATS = 7
    PATCHES = 8
    PATCHES_LEFT = 9
    PATCHES_RIGHT = 10
    SOFTSHELL_PATCHES = 11
    SOFTSHELL_PATCHES_LEFT = 12
    SOFTSHELL_PATCHES_RIGHT = 13

    @property
    def category(self) -> str:
        """Canonical category name, e.g. OUTER_JACKETS -> 'outer-jackets'."""
        return self.name.lower().replace("_", "-")

    @classmethod
    def from_category(cls, category: str) -> "LayerOrder | None":
        return _ORDER_BY_CATEGORY.get(category)


_ORDER_BY_CATEGORY: dict[str, LayerOrder] = {o.category: o for o in LayerOrder}
