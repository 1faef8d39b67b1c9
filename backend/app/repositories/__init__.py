# backend/app/repositories/__init__.py
"""
Repository Pattern Implementation for the PeerLearn platform.

This package provides the repository layer for data access,
separating business logic from database queries.

Key Components:
- BaseRepository: Foundation for all repositories with generic CRUD operations
- IRepository: Interface defining required methods for all repositories
- RepositoryFactory: Factory for creating repository instances
- BookingRepository: Booking listing plus conditional status and review writes
- ConflictCheckerRepository: Overlap queries over blocking bookings
- UserRepository: Account lookups, row locks and the teacher directory

Usage:
    from app.repositories import RepositoryFactory

    # In a service:
    repository = RepositoryFactory.create_booking_repository(db)
    bookings = repository.list_for_user(user_id)
"""

from .base_repository import BaseRepository, IRepository
from .booking_repository import BookingRepository
from .conflict_checker_repository import ConflictCheckerRepository
from .factory import RepositoryFactory
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "IRepository",
    "BookingRepository",
    "ConflictCheckerRepository",
    "RepositoryFactory",
    "UserRepository",
]
