"""Category/View Rule Engine: filters, remaps, and orders layers for one view.

Invariants:
    - Context (softshell jacket present?) is detected from the FULL input set
      before any element is gated or remapped
    - normalize() is stateless given the precomputed context
    - normalize_all() output is sorted by LayerOrder; entries with no order are dropped
    - Only the category is rewritten; the normalized SKU is carried unchanged

Rules, in order:
    1. left/right views keep only hoodies, jackets, patches-left, patches-right
    2. patches-left/right: dropped on back; on left/right kept only on the
       matching side; base name is softshell-patches when a softshell jacket
       is present, else patches; front appends the side, other views do not
    3. gloves -> gloves-top when the SKU starts with "ski", else gloves-bottom
    4. jackets -> outer-jackets when the SKU contains "greenland"
    5. anything else passes through

Design Decisions:
    - build(view, params) classmethod + frozen dataclass: two-pass batch
      computation expressed as construction, not as a stateful loop
"""

import logging
from dataclasses import dataclass

from sandwich.core.domain_types import View
from sandwich.core.layer_params import LayerParam

logger = logging.getLogger(__name__)

PATCH_SIDES = {"patches-left": "left", "patches-right": "right"}


def detect_softshell_jacket(params: list[LayerParam]) -> bool:
    """True when any jackets entry is a softshell jacket."""
    return any(
        p.category == "jackets" and "softshell" in p.sku.value for p in params
    )


@dataclass(frozen=True)
class LayerNormalizer:
    """Per-request rule engine. Build with LayerNormalizer.build()."""
    view: View
    has_softshell_jacket: bool = False

    @classmethod
    def build(cls, view: View, params: list[LayerParam]) -> "LayerNormalizer":
        return cls(view=view, has_softshell_jacket=detect_softshell_jacket(params))

    def normalize(self, param: LayerParam) -> LayerParam | None:
        """Apply the view gate and contextual remaps to one param."""
        allowed = self.view.allowed_categories
        if allowed is not None and param.category not in allowed:
            return None

        if param.category in PATCH_SIDES:
            return self._normalize_patch(param)
        if param.category == "gloves":
            return self._normalize_gloves(param)
        if param.category == "jackets":
            return self._normalize_jacket(param)
        return param

    def normalize_all(self, params: list[LayerParam]) -> list[LayerParam]:
        """Normalize every param and sort survivors into stacking order."""
        survivors = []
        for param in params:
            normalized = self.normalize(param)
            if normalized is None:
                continue
            if normalized.layer_order is None:
                logger.debug(f"Dropping unordered category: {normalized.token}")
                continue
            survivors.append(normalized)
        # sorted() is stable, so equal orders keep input order
        return sorted(survivors, key=lambda p: p.layer_order)

    def _normalize_patch(self, param: LayerParam) -> LayerParam | None:
        position = PATCH_SIDES[param.category]
        if not self.view.allows_patches:
            return None
        if self.view in (View.LEFT, View.RIGHT) and position != self.view.value:
            return None

        base = "softshell-patches" if self.has_softshell_jacket else "patches"
        if self.view is View.FRONT:
            return param.with_category(f"{base}-{position}")
        return param.with_category(base)

    def _normalize_gloves(self, param: LayerParam) -> LayerParam:
        # prefix match only: "regular..." is not a ski glove
        if param.sku.value.startswith("ski"):
            return param.with_category("gloves-top")
        return param.with_category("gloves-bottom")

    def _normalize_jacket(self, param: LayerParam) -> LayerParam:
        if "greenland" in param.sku.value:
            return param.with_category("outer-jackets")
        return param.with_category("jackets")


def normalize_layers(view: View, params: list[LayerParam]) -> list[LayerParam]:
    """Build a normalizer for the full set and return the ordered layers."""
    return LayerNormalizer.build(view, params).normalize_all(params)
