# backend/app/services/booking_service.py
"""
Booking Service for the PeerLearn platform.

Handles all booking-related business logic including:
- Creating bookings paid for with coins
- Status changes and the coin movements they trigger
- Listing and reading bookings for a party
- Teacher availability for a day

Every workflow that touches both a wallet and a booking runs inside one
database transaction, so a debit is never left behind without its booking
and a payout is never applied twice.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, cast

from sqlalchemy.orm import Session

from ..core.booking_lock import teacher_booking_lock
from ..core.constants import DAYS_OF_WEEK
from ..core.enums import BookingPerspective
from ..core.exceptions import (
    BookingConflictException,
    ConcurrentModificationException,
    ForbiddenException,
    InsufficientFundsException,
    NotFoundException,
    ValidationException,
)
from ..core.timezone_utils import ensure_utc, utc_now
from ..domain.booking_transitions import check_transition, parse_status
from ..models.booking import Booking, BookingStatus
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from ..schemas.booking import BookingCreate
from .base import BaseService
from .conflict_checker import ConflictChecker
from .pricing_service import compute_session_cost, validate_duration

if TYPE_CHECKING:
    from ..repositories.booking_repository import BookingRepository
    from ..repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

LOCK_BUSY_MESSAGE = "Another booking for this teacher is being processed, please retry"


class BookingService(BaseService):
    """
    Service layer for booking operations.

    Centralizes all booking business logic and coordinates
    with the conflict checker and wallet updates.
    """

    repository: "BookingRepository"
    user_repository: "UserRepository"
    conflict_checker: ConflictChecker

    def __init__(
        self,
        db: Session,
        repository: Optional["BookingRepository"] = None,
        user_repository: Optional["UserRepository"] = None,
        conflict_checker: Optional[ConflictChecker] = None,
    ):
        """
        Initialize booking service.

        Args:
            db: Database session
            repository: Optional BookingRepository instance
            user_repository: Optional UserRepository instance
            conflict_checker: Optional ConflictChecker instance
        """
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_booking_repository(db)
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)
        self.conflict_checker = conflict_checker or ConflictChecker(db)

    # Creation

    @BaseService.measure_operation("create_booking")
    def create_booking(self, student_id: str, booking_data: BookingCreate) -> Booking:
        """
        Book a session with a teacher and pay for it.

        Checks run in this order: teacher exists and teaches, skill is offered,
        balance covers the cost, slot is free. Then the student is debited and
        the booking is written, all in one transaction.

        Args:
            student_id: The paying user
            booking_data: Teacher, skill, start and duration

        Returns:
            The confirmed booking

        Raises:
            ValidationException: Bad duration, self-booking or unknown skill
            NotFoundException: Teacher (or student) not found
            InsufficientFundsException: Balance below the session cost
            BookingConflictException: Slot overlaps another booking
        """
        teacher_id = booking_data.teacher_id
        duration = booking_data.duration_minutes
        start_at = ensure_utc(booking_data.start_at)

        self.log_operation(
            "create_booking",
            student_id=student_id,
            teacher_id=teacher_id,
            skill=booking_data.skill,
            start_at=start_at.isoformat(),
            duration_minutes=duration,
        )

        validate_duration(duration)
        if student_id == teacher_id:
            raise ValidationException("You cannot book a session with yourself", code="SELF_BOOKING")

        with teacher_booking_lock(teacher_id) as acquired:
            if not acquired:
                raise BookingConflictException(LOCK_BUSY_MESSAGE)

            with self.transaction():
                accounts = self.user_repository.lock_users([student_id, teacher_id])
                teacher = accounts.get(teacher_id)
                if teacher is None or not teacher.can_teach:
                    raise NotFoundException("Teacher not found", code="TEACHER_NOT_FOUND")
                student = accounts.get(student_id)
                if student is None:
                    raise NotFoundException("User not found", code="USER_NOT_FOUND")

                skill = teacher.find_skill(booking_data.skill)
                if skill is None:
                    raise ValidationException(
                        "Teacher does not offer this skill",
                        code="SKILL_NOT_OFFERED",
                        details={"skill": booking_data.skill},
                    )

                cost = compute_session_cost(skill.hourly_rate, duration)
                balance = cast(Decimal, student.balance)
                if balance < cost:
                    raise InsufficientFundsException(required=cost, available=balance)

                conflicts = self.conflict_checker.check_booking_conflicts(teacher_id, start_at, duration)
                if conflicts:
                    raise BookingConflictException(
                        details={"conflicting_booking_ids": [c["booking_id"] for c in conflicts]}
                    )

                student.debit_coins(cost)
                teacher.hold_earnings(cost)

                booking = self.repository.create(
                    student_id=student_id,
                    teacher_id=teacher_id,
                    skill=skill.skill,
                    start_at=start_at,
                    duration_minutes=duration,
                    price=cost,
                    status=BookingStatus.CONFIRMED.value,
                    notes=booking_data.notes,
                )

        prometheus_metrics.record_booking_created()
        prometheus_metrics.record_coins("debit", float(cost))
        self.logger.info(
            f"Debited {cost} coins from {student_id} for booking {booking.id} with {teacher_id}",
            extra={"booking_id": booking.id, "student_id": student_id, "amount": str(cost)},
        )
        return booking

    # Status changes

    @BaseService.measure_operation("update_booking_status")
    def update_booking_status(
        self,
        booking_id: str,
        user_id: str,
        new_status: str,
        cancellation_reason: Optional[str] = None,
    ) -> Booking:
        """
        Move a booking through its lifecycle and apply the coin effect.

        - completed: the teacher is paid the booking price
        - cancelled by the student: the student is refunded the price
        - cancelled by the teacher, no_show: no coins move to either wallet

        Requesting the current status again is a no-op.

        Raises:
            ValidationException: Unknown status or illegal transition
            NotFoundException: Booking not found
            ForbiddenException: Caller is not a party to the booking
            ConcurrentModificationException: Another request changed it first
        """
        target = parse_status(new_status)

        with self.transaction():
            booking = self._get_party_booking(booking_id, user_id)
            current = BookingStatus(booking.status)

            if not check_transition(current, target):
                self.logger.info(f"Booking {booking_id} already {current.value}; nothing to do")
                return booking

            now = utc_now()
            fields: Dict[str, Any] = {}
            if target == BookingStatus.COMPLETED:
                fields["completed_at"] = now
            elif target == BookingStatus.CANCELLED:
                fields.update(
                    cancelled_at=now,
                    cancelled_by_id=user_id,
                    cancellation_reason=cancellation_reason,
                )

            applied = self.repository.transition_status(booking.id, current.value, target.value, **fields)
            if not applied:
                raise ConcurrentModificationException("Booking", booking_id)

            self._apply_coin_effect(booking, target, user_id)
            self.repository.refresh(booking)

        prometheus_metrics.record_status_change(current.value, target.value)
        self.log_operation(
            "update_booking_status",
            booking_id=booking_id,
            user_id=user_id,
            from_status=current.value,
            to_status=target.value,
        )
        return booking

    def _apply_coin_effect(self, booking: Booking, target: BookingStatus, user_id: str) -> None:
        accounts = self.user_repository.lock_users([booking.student_id, booking.teacher_id])
        teacher = accounts[booking.teacher_id]
        price = cast(Decimal, booking.price)

        if target == BookingStatus.COMPLETED:
            teacher.credit_earnings(price)
            teacher.total_sessions = (teacher.total_sessions or 0) + 1
            skill = teacher.find_skill(booking.skill)
            if skill is not None:
                skill.sessions = (skill.sessions or 0) + 1
            prometheus_metrics.record_coins("credit", float(price))
            self.logger.info(
                f"Credited {price} coins to {teacher.id} for booking {booking.id}",
                extra={"booking_id": booking.id, "teacher_id": teacher.id, "amount": str(price)},
            )
        elif target in (BookingStatus.CANCELLED, BookingStatus.NO_SHOW):
            teacher.release_earnings(price)
            if target == BookingStatus.CANCELLED and user_id == booking.student_id:
                student = accounts[booking.student_id]
                student.refund_coins(price)
                prometheus_metrics.record_coins("refund", float(price))
                self.logger.info(
                    f"Refunded {price} coins to {student.id} for cancelled booking {booking.id}",
                    extra={"booking_id": booking.id, "student_id": student.id, "amount": str(price)},
                )

        self.user_repository.flush()

    # Queries

    @BaseService.measure_operation("get_bookings_for_user")
    def get_bookings_for_user(
        self,
        user_id: str,
        perspective: Optional[BookingPerspective] = None,
        status: Optional[str] = None,
    ) -> List[Booking]:
        status_value = parse_status(status).value if status else None
        return self.repository.list_for_user(user_id, perspective, status_value)

    @BaseService.measure_operation("get_booking_for_user")
    def get_booking_for_user(self, booking_id: str, user_id: str) -> Booking:
        return self._get_party_booking(booking_id, user_id)

    @BaseService.measure_operation("get_teacher_availability")
    def get_teacher_availability(self, teacher_id: str, target_date: date) -> Dict[str, Any]:
        """
        A teacher's weekly availability plus what is already booked on a day.

        Returns:
            teacher_id, day, weekday, the availability entry for that weekday,
            the full weekly document and the booked intervals
        """
        teacher = self.user_repository.get_by_id(teacher_id, load_relationships=False)
        if teacher is None or not teacher.can_teach:
            raise NotFoundException("Teacher not found", code="TEACHER_NOT_FOUND")

        weekly = cast(Dict[str, Any], teacher.weekly_availability or {})
        weekday = DAYS_OF_WEEK[target_date.weekday()]
        return {
            "teacher_id": teacher.id,
            "day": target_date,
            "weekday": weekday,
            "day_availability": weekly.get(weekday),
            "weekly_availability": weekly,
            "booked_slots": self.conflict_checker.get_booked_times_for_date(teacher_id, target_date),
        }

    def _get_party_booking(self, booking_id: str, user_id: str) -> Booking:
        booking = self.repository.get_by_id(booking_id)
        if booking is None:
            raise NotFoundException("Booking not found", code="BOOKING_NOT_FOUND")
        if not booking.can_be_modified_by(user_id):
            raise ForbiddenException("You are not a participant in this booking")
        return booking
