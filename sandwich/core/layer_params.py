"""Layer Parameters: parsing "category/sku" tokens into LayerParam values.

Invariants:
    - Tokens are split on "," and each must contain exactly one "/"
    - Malformed tokens are dropped silently (never raised)
    - Empty halves are not malformed: "hoodies/" is a request for an empty SKU
      (fetched, never found, so the composite is not cached) and "/x" has an
      empty category, which has no stacking order
    - The SKU is normalized once, at parse time
"""

from dataclasses import dataclass

from sandwich.core.domain_types import LayerOrder
from sandwich.core.sku import NormalizedSku, normalize_sku


@dataclass(frozen=True)
class LayerParam:
    """One garment layer request: category plus normalized SKU."""
    category: str
    sku: NormalizedSku

    @classmethod
    def of(cls, category: str, sku: "str | NormalizedSku") -> "LayerParam":
        return cls(category, normalize_sku(sku))

    @property
    def layer_order(self) -> LayerOrder | None:
        return LayerOrder.from_category(self.category)

    @property
    def token(self) -> str:
        """The "category/sku" form used in cache keys and logs."""
        return f"{self.category}/{self.sku.value}"

    def with_category(self, category: str) -> "LayerParam":
        return LayerParam(category, self.sku)

    def __str__(self) -> str:
        return self.token


def parse_param(token: str) -> LayerParam | None:
    """Parse one "category/sku" token, or None when malformed."""
    parts = [part.strip() for part in token.split("/")]
    if len(parts) != 2:
        return None
    return LayerParam.of(parts[0], parts[1])


def parse_params(params: str) -> list[LayerParam]:
    """Parse a comma-separated parameter string, preserving input order."""
    parsed = (parse_param(token) for token in params.split(","))
    return [p for p in parsed if p is not None]
