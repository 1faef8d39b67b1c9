# backend/app/schemas/booking.py
"""
Booking schemas for the PeerLearn platform.

Status and rating arrive as plain values and are validated by the service
layer, so an unknown status or an out-of-range rating is reported the same
way as every other invalid request.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from ..core.config import settings
from ..core.constants import (
    MAX_DESCRIPTION_LENGTH,
    MAX_REVIEW_COMMENT_LENGTH,
    MAX_SKILL_LENGTH,
)
from ..core.timezone_utils import ensure_utc
from .base import Money, StandardizedModel
from ._strict_base import StrictRequestModel


class BookingCreate(StrictRequestModel):
    """Book a session with a teacher for one of their skills."""

    teacher_id: str = Field(..., min_length=1, description="Teacher to book")
    skill: str = Field(..., min_length=1, max_length=MAX_SKILL_LENGTH, description="Skill name")
    start_at: datetime = Field(..., description="Session start; naive values are read as UTC")
    duration_minutes: int = Field(
        default_factory=lambda: settings.default_session_minutes,
        description="Session length in minutes",
    )
    notes: Optional[str] = Field(default=None, max_length=MAX_DESCRIPTION_LENGTH)

    @field_validator("start_at")
    @classmethod
    def _normalize_start(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class BookingStatusUpdate(StrictRequestModel):
    status: str = Field(..., description="pending, confirmed, completed, cancelled or no_show")
    cancellation_reason: Optional[str] = Field(default=None, max_length=MAX_DESCRIPTION_LENGTH)


class ReviewCreate(StrictRequestModel):
    rating: int = Field(..., description="Whole stars from 1 to 5")
    comment: Optional[str] = Field(default=None, max_length=MAX_REVIEW_COMMENT_LENGTH)


class BookingResponse(StandardizedModel):
    id: str
    student_id: str
    teacher_id: str
    skill: str
    start_at: datetime
    end_at: datetime
    duration_minutes: int
    price: Money
    status: str
    notes: Optional[str] = None
    cancelled_by_id: Optional[str] = None
    cancellation_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    rating: Optional[int] = None
    review_comment: Optional[str] = None
    review_submitted: bool = False
    reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class BookedSlot(StandardizedModel):
    booking_id: str
    start_at: datetime
    end_at: datetime
    duration_minutes: int
    status: str


class TeacherAvailabilityResponse(StandardizedModel):
    teacher_id: str
    day: date
    weekday: str
    day_availability: Optional[Dict[str, Any]] = None
    weekly_availability: Dict[str, Any] = Field(default_factory=dict)
    booked_slots: List[BookedSlot] = Field(default_factory=list)
