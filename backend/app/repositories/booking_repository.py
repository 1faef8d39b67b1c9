# backend/app/repositories/booking_repository.py
"""
Booking Repository for the PeerLearn platform.

Implements all data access operations for booking management.

This repository handles:
- Booking CRUD operations
- User-specific booking queries (student/teacher)
- Conditional status and review writes (compare-and-swap)
- Booking relationships eager loading
"""

from datetime import datetime
import logging
from typing import Any, List, Optional, cast

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload

from ..core.enums import BookingPerspective
from ..core.exceptions import RepositoryException
from ..models.booking import Booking
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class BookingRepository(BaseRepository[Booking]):
    """Repository for booking data access."""

    def __init__(self, db: Session):
        super().__init__(db, Booking)
        self.logger = logging.getLogger(__name__)

    # User-specific queries

    def list_for_user(
        self,
        user_id: str,
        perspective: Optional[BookingPerspective] = None,
        status: Optional[str] = None,
    ) -> List[Booking]:
        """
        Bookings where the user is a party, newest start first.

        Args:
            user_id: The user whose bookings to list
            perspective: PAYER limits to bookings the user pays for, PAYEE to
                bookings the user teaches, None returns both
            status: Optional exact status filter
        """
        try:
            query = self.db.query(Booking).options(
                joinedload(Booking.student),
                joinedload(Booking.teacher),
            )
            if perspective == BookingPerspective.PAYER:
                query = query.filter(Booking.student_id == user_id)
            elif perspective == BookingPerspective.PAYEE:
                query = query.filter(Booking.teacher_id == user_id)
            else:
                query = query.filter(or_(Booking.student_id == user_id, Booking.teacher_id == user_id))

            if status:
                query = query.filter(Booking.status == status)

            return cast(List[Booking], query.order_by(Booking.start_at.desc(), Booking.id.desc()).all())
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing bookings for user {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to list bookings: {str(e)}")

    # Conditional writes

    def transition_status(
        self,
        booking_id: str,
        expected_status: str,
        new_status: str,
        **fields: Any,
    ) -> bool:
        """
        Move a booking to ``new_status`` only if it is still in ``expected_status``.

        Issues a single ``UPDATE ... WHERE id = :id AND status = :expected`` so two
        concurrent requests cannot both apply the same transition.

        Returns:
            True if this call applied the transition, False if the row had
            already moved on.
        """
        values = {"status": new_status, **fields}
        try:
            updated = (
                self.db.query(Booking)
                .filter(Booking.id == booking_id, Booking.status == expected_status)
                .update(values, synchronize_session=False)
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error transitioning booking {booking_id}: {str(e)}")
            raise RepositoryException(f"Failed to update booking status: {str(e)}") from e

        if updated:
            self.logger.info(
                f"Booking {booking_id} moved from {expected_status} to {new_status}"
            )
        return bool(updated)

    def mark_reviewed(
        self,
        booking_id: str,
        rating: int,
        comment: Optional[str],
        reviewed_at: datetime,
    ) -> bool:
        """Attach a review if none has been attached yet. Returns False if one already was."""
        try:
            updated = (
                self.db.query(Booking)
                .filter(Booking.id == booking_id, Booking.review_submitted.is_(False))
                .update(
                    {
                        "rating": rating,
                        "review_comment": comment,
                        "review_submitted": True,
                        "reviewed_at": reviewed_at,
                    },
                    synchronize_session=False,
                )
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error reviewing booking {booking_id}: {str(e)}")
            raise RepositoryException(f"Failed to save review: {str(e)}") from e
        return bool(updated)

    # Helper method overrides

    def _apply_eager_loading(self, query: Query) -> Query:
        """Include both parties by default for single entity queries."""
        return query.options(
            joinedload(Booking.student),
            joinedload(Booking.teacher),
        )
