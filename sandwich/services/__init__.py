"""Service Layer: orchestrates core logic around storage IO.

Invariants:
    - Services own the async fan-out (TaskGroup) and the cache-aside policy
    - Pure decisions (normalization, keys, composition) are delegated to core/
"""
