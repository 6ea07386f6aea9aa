"""Sandwich Application Package: layered garment composite renderer.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
