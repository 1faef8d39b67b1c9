"""
Central export point for all dependencies.

This module re-exports all dependencies from submodules
for convenient access throughout the application.
"""

from .auth import get_current_user
from .database import get_db
from .services import (
    get_booking_service,
    get_review_service,
    get_teacher_service,
    get_wallet_service,
)

__all__ = [
    # Auth
    "get_current_user",
    # Database
    "get_db",
    # Services
    "get_booking_service",
    "get_review_service",
    "get_teacher_service",
    "get_wallet_service",
]
