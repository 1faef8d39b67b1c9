# backend/app/models/booking.py
"""
Booking model for the PeerLearn platform.

A booking is a priced, scheduled session between a student (the payer) and a
teacher (the payee) for one named skill. The price is snapshotted from the
teacher's hourly rate when the booking is created and never recomputed.

The interval is stored as ``start_at`` plus ``duration_minutes`` with the
derived ``end_at`` persisted alongside it so overlap checks stay a plain
indexed range query.
"""

from datetime import datetime, timedelta
from enum import Enum
import logging
from typing import Any, Callable, cast

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..database import Base
from .types import UTCDateTime

logger = logging.getLogger(__name__)


class BookingStatus(str, Enum):
    """Booking lifecycle statuses."""

    PENDING = "pending"  # Reserved; bookings are auto-confirmed today
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


# Statuses that hold a teacher's time slot
BLOCKING_STATUSES = (BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value)


class Booking(Base):
    """
    Self-contained booking record between a student and a teacher.

    Attributes:
        student_id: Payer, debited at creation
        teacher_id: Payee, credited on completion
        skill: Name of the teacher's skill being booked
        start_at / end_at: Half-open UTC interval [start_at, end_at)
        price: Coins charged, fixed at creation
        review_submitted: One-time review guard
    """

    __tablename__ = "bookings"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))

    student_id = Column(String(26), ForeignKey("users.id"), nullable=False, index=True)
    teacher_id = Column(String(26), ForeignKey("users.id"), nullable=False)

    skill = Column(String(50), nullable=False)
    start_at = Column(UTCDateTime(), nullable=False)
    end_at = Column(UTCDateTime(), nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)

    status = Column(String(20), nullable=False, default=BookingStatus.CONFIRMED.value, index=True)
    notes = Column(Text, nullable=True)

    # Cancellation tracking
    cancelled_by_id = Column(String(26), ForeignKey("users.id"), nullable=True)
    cancellation_reason = Column(Text, nullable=True)
    cancelled_at = Column(UTCDateTime(), nullable=True)
    completed_at = Column(UTCDateTime(), nullable=True)

    # Review (one per booking, written by the student)
    rating = Column(Integer, nullable=True)
    review_comment = Column(Text, nullable=True)
    review_submitted = Column(Boolean, nullable=False, default=False)
    reviewed_at = Column(UTCDateTime(), nullable=True)

    created_at = Column(UTCDateTime(), server_default=func.now())
    updated_at = Column(UTCDateTime(), onupdate=func.now())

    student = relationship("User", foreign_keys=[student_id])
    teacher = relationship("User", foreign_keys=[teacher_id])
    cancelled_by = relationship("User", foreign_keys=[cancelled_by_id])

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'completed', 'cancelled', 'no_show')",
            name="ck_bookings_status",
        ),
        CheckConstraint("duration_minutes > 0", name="check_duration_positive"),
        CheckConstraint("price >= 0", name="check_price_non_negative"),
        CheckConstraint("end_at > start_at", name="check_interval_order"),
        CheckConstraint("rating IS NULL OR (rating >= 1 AND rating <= 5)", name="ck_bookings_rating_range"),
        CheckConstraint("student_id <> teacher_id", name="ck_bookings_distinct_parties"),
        Index("ix_bookings_teacher_start", "teacher_id", "start_at"),
    )

    def __init__(self, **kwargs: Any) -> None:
        """Initialize with instant confirmation and a derived end time."""
        super().__init__(**kwargs)
        if not self.status:
            self.status = BookingStatus.CONFIRMED.value
        if self.review_submitted is None:
            self.review_submitted = False
        if self.end_at is None and self.start_at is not None and self.duration_minutes:
            self.end_at = cast(datetime, self.start_at) + timedelta(minutes=int(self.duration_minutes))

    def __repr__(self) -> str:
        return (
            f"<Booking {self.id}: student={self.student_id}, "
            f"teacher={self.teacher_id}, skill={self.skill}, "
            f"start={self.start_at}, minutes={self.duration_minutes}, status={self.status}>"
        )

    @property
    def can_be_modified_by(self) -> Callable[[str], bool]:
        """Return a helper that checks whether the given user is a party to this booking."""

        def _checker(user_id: str) -> bool:
            return user_id in (self.student_id, self.teacher_id)

        return _checker

