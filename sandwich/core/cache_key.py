"""Cache Key Derivation: order-independent identifier for a composite.

Invariants:
    - Key depends on the SET of "category/sku" tokens, never on their order
    - View and plate identifier are part of the key
    - Same inputs -> same key across processes (xxHash64, seed 0)

Format:
    combined = "_".join(sorted(tokens)) + "_" + view + "_" + plate
    key      = lowercase hex of xxh64(combined.utf8, seed=0), no padding
"""

import xxhash

from sandwich.core.domain_types import CacheKey, View
from sandwich.core.layer_params import LayerParam

KEY_DELIMITER = "_"
HASH_SEED = 0


def combined_key_string(params: list[LayerParam], view: View, plate: str) -> str:
    tokens = sorted(p.token for p in params)
    return KEY_DELIMITER.join([KEY_DELIMITER.join(tokens), view.value, plate])


def derive_cache_key(params: list[LayerParam], view: View, plate: str) -> CacheKey:
    combined = combined_key_string(params, view, plate)
    digest = xxhash.xxh64_intdigest(combined.encode("utf-8"), seed=HASH_SEED)
    return CacheKey(format(digest, "x"))
