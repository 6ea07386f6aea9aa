"""Infrastructure Layer: storage backends, the composite cache, logging setup.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Storage failures are mapped to core/errors.py types at this boundary
"""
