# backend/app/services/conflict_checker.py
"""
Conflict Checker Service for the PeerLearn platform.

Answers whether a teacher is free for a proposed interval. Intervals are
half-open: [start, start + duration). A session ending exactly when another
begins is not a conflict.

Only pending and confirmed bookings hold a slot.
"""

from datetime import date, datetime, timedelta
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.timezone_utils import ensure_utc, utc_day_bounds
from ..repositories import RepositoryFactory
from ..repositories.conflict_checker_repository import ConflictCheckerRepository
from .base import BaseService

logger = logging.getLogger(__name__)


class ConflictChecker(BaseService):
    """
    Service for checking booking conflicts.

    Read-only: nothing here writes to the database.
    """

    def __init__(self, db: Session, repository: Optional[ConflictCheckerRepository] = None):
        """
        Initialize conflict checker service.

        Args:
            db: Database session
            repository: Optional ConflictCheckerRepository instance
        """
        super().__init__(db)
        self.logger = logging.getLogger(__name__)
        self.repository = repository or RepositoryFactory.create_conflict_checker_repository(db)

    @BaseService.measure_operation("check_booking_conflicts")
    def check_booking_conflicts(
        self,
        teacher_id: str,
        start_at: datetime,
        duration_minutes: int,
        exclude_booking_id: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        List existing bookings that overlap the proposed interval.

        Args:
            teacher_id: The teacher to check
            start_at: Proposed start instant
            duration_minutes: Proposed length
            exclude_booking_id: Optional booking ID to exclude from check

        Returns:
            List of conflicts with booking details
        """
        proposed_start = ensure_utc(start_at)
        proposed_end = proposed_start + timedelta(minutes=duration_minutes)

        bookings = self.repository.get_overlapping_bookings(
            teacher_id, proposed_start, proposed_end, exclude_booking_id
        )

        conflicts = [
            {
                "booking_id": booking.id,
                "start_at": ensure_utc(booking.start_at).isoformat(),
                "end_at": ensure_utc(booking.end_at).isoformat(),
                "skill": booking.skill,
                "status": booking.status,
            }
            for booking in bookings
        ]

        if conflicts:
            self.logger.warning(
                f"Found {len(conflicts)} booking conflicts for {teacher_id} "
                f"between {proposed_start.isoformat()} and {proposed_end.isoformat()}"
            )

        return conflicts

    def is_available(
        self,
        teacher_id: str,
        start_at: datetime,
        duration_minutes: int,
        exclude_booking_id: Optional[str] = None,
    ) -> bool:
        """True when no pending or confirmed booking overlaps the proposed interval."""
        return not self.check_booking_conflicts(
            teacher_id, start_at, duration_minutes, exclude_booking_id
        )

    @BaseService.measure_operation("get_booked_times_date")
    def get_booked_times_for_date(self, teacher_id: str, target_date: date) -> List[Dict[str, Any]]:
        """
        Get the booked intervals for a teacher that start on a UTC calendar day.

        Returns:
            List of booked time ranges ordered by start
        """
        day_start, day_end = utc_day_bounds(target_date)
        bookings = self.repository.get_bookings_in_range(teacher_id, day_start, day_end)
        return [
            {
                "booking_id": booking.id,
                "start_at": ensure_utc(booking.start_at),
                "end_at": ensure_utc(booking.end_at),
                "duration_minutes": booking.duration_minutes,
                "status": booking.status,
            }
            for booking in bookings
        ]
