"""Pydantic request and response models for the HTTP layer."""
