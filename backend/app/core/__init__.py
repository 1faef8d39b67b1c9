"""Configuration, errors, locking and shared helpers."""
