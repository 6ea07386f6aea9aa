"""Pydantic request/response models for the HTTP boundary."""
