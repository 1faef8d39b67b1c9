"""
Database models for the PeerLearn platform.

Importing this package registers every table on ``Base.metadata``.
"""

from .booking import BLOCKING_STATUSES, Booking, BookingStatus
from .skill import TeachingSkill
from .user import User

__all__ = [
    "BLOCKING_STATUSES",
    "Booking",
    "BookingStatus",
    "TeachingSkill",
    "User",
]
