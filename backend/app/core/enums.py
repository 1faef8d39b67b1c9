# backend/app/core/enums.py
"""
Core enums for the PeerLearn platform.

Booking statuses live with the Booking model; the values here describe users
and the skills they teach.
"""

from enum import Enum


class UserRole(str, Enum):
    """What a member signed up to do. Anyone can book; only teacher and both can be booked."""

    LEARNER = "learner"
    TEACHER = "teacher"
    BOTH = "both"


class SkillLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class BookingPerspective(str, Enum):
    """Which side of a booking a listing is filtered by."""

    PAYER = "payer"
    PAYEE = "payee"
