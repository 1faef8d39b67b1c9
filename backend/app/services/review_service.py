# backend/app/services/review_service.py
"""
ReviewService: business logic for session reviews.

Implements:
- Eligibility (student of a completed booking, one review per booking)
- Running average update on the teacher and the reviewed skill
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from ..core.constants import MAX_REVIEW_COMMENT_LENGTH
from ..core.exceptions import ForbiddenException, NotFoundException, ValidationException
from ..core.timezone_utils import utc_now
from ..models.booking import Booking, BookingStatus
from ..repositories.booking_repository import BookingRepository
from ..repositories.factory import RepositoryFactory
from ..repositories.user_repository import UserRepository
from .base import BaseService
from .ratings_math import incorporate_rating, is_valid_rating

ALREADY_REVIEWED_MESSAGE = "A review has already been submitted for this booking"


class ReviewService(BaseService):
    def __init__(
        self,
        db: Session,
        booking_repository: Optional[BookingRepository] = None,
        user_repository: Optional[UserRepository] = None,
    ):
        super().__init__(db)
        self.booking_repository = booking_repository or RepositoryFactory.create_booking_repository(db)
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)

    @BaseService.measure_operation("submit_review")
    def submit_review(
        self,
        *,
        student_id: str,
        booking_id: str,
        rating: int,
        comment: Optional[str] = None,
    ) -> Booking:
        """Submit the one review a completed booking can carry."""
        if not is_valid_rating(rating):
            raise ValidationException(
                "Rating must be an integer between 1 and 5", code="INVALID_RATING"
            )
        if comment is not None:
            comment = comment.strip() or None
            if comment and len(comment) > MAX_REVIEW_COMMENT_LENGTH:
                raise ValidationException(
                    f"Review comment cannot exceed {MAX_REVIEW_COMMENT_LENGTH} characters"
                )

        with self.transaction():
            booking = self.booking_repository.get_by_id(booking_id)
            if not booking:
                raise NotFoundException("Booking not found", code="BOOKING_NOT_FOUND")

            if booking.student_id != student_id:
                raise ForbiddenException("Only the student of a booking can review it")

            if booking.status != BookingStatus.COMPLETED.value:
                raise ValidationException(
                    "Only completed bookings can be reviewed",
                    code="BOOKING_NOT_COMPLETED",
                    details={"status": booking.status},
                )

            if booking.review_submitted:
                raise ValidationException(ALREADY_REVIEWED_MESSAGE, code="REVIEW_ALREADY_SUBMITTED")

            # Conditional write closes the race between the check above and this update
            if not self.booking_repository.mark_reviewed(booking.id, rating, comment, utc_now()):
                raise ValidationException(ALREADY_REVIEWED_MESSAGE, code="REVIEW_ALREADY_SUBMITTED")

            teacher = self.user_repository.get_by_id_for_update(booking.teacher_id)
            if teacher is None:
                raise NotFoundException("Teacher not found", code="TEACHER_NOT_FOUND")

            new_average, new_count = incorporate_rating(
                teacher.average_rating, teacher.total_reviews, rating
            )
            teacher.average_rating = new_average
            teacher.total_reviews = new_count

            skill = teacher.find_skill(booking.skill)
            if skill is not None:
                skill.rating = new_average

            self.user_repository.flush()
            self.booking_repository.refresh(booking)

        self.log_operation(
            "submit_review",
            booking_id=booking_id,
            teacher_id=booking.teacher_id,
            rating=rating,
            new_average=str(new_average),
        )
        return booking
