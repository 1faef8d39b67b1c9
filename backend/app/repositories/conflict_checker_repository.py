# backend/app/repositories/conflict_checker_repository.py
"""
ConflictChecker Repository for the PeerLearn platform.

All overlap queries run against the booking's own UTC interval
(``start_at``, ``end_at``) and only consider statuses that hold a teacher's
time: pending and confirmed. Completed, cancelled and no-show bookings never
block a new booking.
"""

from datetime import datetime
import logging
from typing import List, Optional, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.booking import BLOCKING_STATUSES, Booking
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ConflictCheckerRepository(BaseRepository[Booking]):
    """Repository for conflict checking data access."""

    def __init__(self, db: Session):
        """Initialize with Booking model as primary."""
        super().__init__(db, Booking)
        self.logger = logging.getLogger(__name__)

    def get_overlapping_bookings(
        self,
        teacher_id: str,
        start_at: datetime,
        end_at: datetime,
        exclude_booking_id: Optional[str] = None,
    ) -> List[Booking]:
        """
        Get blocking bookings whose interval overlaps [start_at, end_at).

        Half-open overlap: ``existing.start_at < end_at AND existing.end_at > start_at``,
        so a booking ending exactly at ``start_at`` is not returned.
        """
        try:
            query = self.db.query(Booking).filter(
                Booking.teacher_id == teacher_id,
                Booking.status.in_(BLOCKING_STATUSES),
                Booking.start_at < end_at,
                Booking.end_at > start_at,
            )
            if exclude_booking_id:
                query = query.filter(Booking.id != exclude_booking_id)

            return cast(List[Booking], query.order_by(Booking.start_at).all())
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting bookings for conflict check: {str(e)}")
            raise RepositoryException(f"Failed to get conflict bookings: {str(e)}")

    def get_bookings_in_range(
        self, teacher_id: str, range_start: datetime, range_end: datetime
    ) -> List[Booking]:
        """
        Get blocking bookings that start within [range_start, range_end).

        Returns:
            List of bookings ordered by start time
        """
        try:
            return cast(
                List[Booking],
                self.db.query(Booking)
                .filter(
                    Booking.teacher_id == teacher_id,
                    Booking.status.in_(BLOCKING_STATUSES),
                    Booking.start_at >= range_start,
                    Booking.start_at < range_end,
                )
                .order_by(Booking.start_at)
                .all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting bookings for date: {str(e)}")
            raise RepositoryException(f"Failed to get bookings: {str(e)}")
