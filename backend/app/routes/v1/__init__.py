# backend/app/routes/v1/__init__.py
"""
API v1 Routes

Versioned API endpoints under /api/v1.
"""

from . import bookings, health, prometheus, users, wallet

__all__ = [
    "bookings",
    "health",
    "prometheus",
    "users",
    "wallet",
]
