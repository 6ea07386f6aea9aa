"""SKU Normalizer: strips size suffixes so size variants share one identity.

Invariants:
    - normalize_sku is total, pure, and case-insensitive
    - NormalizedSku equality/hash use the normalized string only
    - Exactly two steps, never looped: one letter-size suffix (first match in
      SIZE_SUFFIXES order), then one trailing all-digit segment

Examples:
    mensdenimjeans-blue-36 -> mensdenimjeans-blue
    baerskinzip-grey-s     -> baerskinzip-grey
    baerskin4-black-lxl    -> baerskin4-black
"""

import re
from dataclasses import dataclass

SIZE_SUFFIXES = (
    "-xs", "-s", "-m", "-l", "-xl", "-xxl", "-2xl", "-3xl", "-4xl", "-5xl", "-lxl",
)

# An empty trailing segment ("abc-") counts as numeric and is stripped too.
_NUMERIC_SEGMENT = re.compile(r"[0-9]*")


@dataclass(frozen=True)
class NormalizedSku:
    """Lowercase SKU with its size suffix removed. Build via normalize_sku()."""
    value: str

    def __str__(self) -> str:
        return self.value


def strip_size(raw: str) -> str:
    """Apply the two-step size filter to a raw SKU string."""
    result = raw.strip().lower()

    for suffix in SIZE_SUFFIXES:
        if result.endswith(suffix):
            result = result[: -len(suffix)]
            break

    head, sep, tail = result.rpartition("-")
    if sep and _NUMERIC_SEGMENT.fullmatch(tail):
        result = head

    return result


def normalize_sku(raw: "str | NormalizedSku") -> NormalizedSku:
    """Normalize a raw SKU. Already-normalized values pass through unchanged."""
    if isinstance(raw, NormalizedSku):
        return raw
    return NormalizedSku(strip_size(raw))
