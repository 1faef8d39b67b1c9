"""
Booking creation: validation order, coin debit, and atomicity.
"""

from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

import pytest

from app.core.exceptions import (
    BookingConflictException,
    InsufficientFundsException,
    NotFoundException,
    RepositoryException,
    ServiceException,
    ValidationException,
)
from app.models.booking import Booking, BookingStatus
from app.schemas.booking import BookingCreate
from app.services.booking_service import LOCK_BUSY_MESSAGE, BookingService


def _request(teacher, start_at, skill="Python", duration=60, **extra) -> BookingCreate:
    return BookingCreate(
        teacher_id=teacher.id, skill=skill, start_at=start_at, duration_minutes=duration, **extra
    )


class TestCreateBookingHappyPath:
    def test_debits_student_and_holds_teacher_earnings(self, db, student, teacher, slot_start):
        service = BookingService(db)

        booking = service.create_booking(student.id, _request(teacher, slot_start, duration=90))

        assert booking.status == BookingStatus.CONFIRMED.value
        assert booking.price == Decimal("45.00")
        assert booking.end_at == slot_start + timedelta(minutes=90)
        assert booking.review_submitted is False
        assert db.query(Booking).filter(Booking.status == "confirmed").count() == 1

        db.refresh(student)
        db.refresh(teacher)
        assert student.balance == Decimal("55.00")
        assert student.coins_spent == Decimal("45.00")
        assert teacher.pending_earnings == Decimal("45.00")
        assert teacher.balance == Decimal("10.00")

    def test_skill_match_is_case_insensitive_and_stores_canonical_name(
        self, db, student, teacher, slot_start
    ):
        booking = BookingService(db).create_booking(student.id, _request(teacher, slot_start, skill="guitar"))
        assert booking.skill == "Guitar"
        assert booking.price == Decimal("20.00")

    def test_default_duration_is_one_hour(self, db, student, teacher, slot_start):
        data = BookingCreate(teacher_id=teacher.id, skill="Python", start_at=slot_start)
        booking = BookingService(db).create_booking(student.id, data)
        assert booking.duration_minutes == 60

    def test_exact_balance_is_enough(self, db, make_user, teacher, slot_start):
        payer = make_user(name="Exact", balance="30.00")
        BookingService(db).create_booking(payer.id, _request(teacher, slot_start))
        db.refresh(payer)
        assert payer.balance == Decimal("0.00")

    def test_back_to_back_bookings_allowed(self, db, student, teacher, slot_start):
        service = BookingService(db)
        service.create_booking(student.id, _request(teacher, slot_start, duration=30))
        second = service.create_booking(
            student.id, _request(teacher, slot_start + timedelta(minutes=30), duration=30)
        )
        assert second.start_at == slot_start + timedelta(minutes=30)

    def test_teacher_with_both_role_can_be_booked(self, db, make_user, student, slot_start):
        mentor = make_user(name="Both", role="both", skills=[("Chess", "12.00")])
        booking = BookingService(db).create_booking(student.id, _request(mentor, slot_start, skill="Chess"))
        assert booking.price == Decimal("12.00")


class TestCreateBookingRejections:
    def test_insufficient_funds_changes_nothing(self, db, make_user, teacher, slot_start):
        payer = make_user(name="Broke", balance="10.00")

        with pytest.raises(InsufficientFundsException) as exc_info:
            BookingService(db).create_booking(payer.id, _request(teacher, slot_start, duration=90))

        assert exc_info.value.status_code == 422
        assert exc_info.value.details == {"required": "45.00", "available": "10.00"}
        db.refresh(payer)
        assert payer.balance == Decimal("10.00")
        assert db.query(Booking).count() == 0

    def test_overlap_rejected_without_debit(self, db, make_user, student, teacher, slot_start):
        service = BookingService(db)
        first = service.create_booking(student.id, _request(teacher, slot_start))
        other = make_user(name="Late", balance="100.00")

        with pytest.raises(BookingConflictException) as exc_info:
            service.create_booking(other.id, _request(teacher, slot_start + timedelta(minutes=59)))

        assert exc_info.value.details["conflicting_booking_ids"] == [first.id]
        db.refresh(other)
        assert other.balance == Decimal("100.00")
        assert db.query(Booking).count() == 1

    def test_unknown_teacher(self, db, student, slot_start):
        data = BookingCreate(teacher_id="01NOTAREALTEACHER000000000", skill="Python", start_at=slot_start)
        with pytest.raises(NotFoundException):
            BookingService(db).create_booking(student.id, data)

    def test_learner_cannot_be_booked(self, db, make_user, student, slot_start):
        learner = make_user(name="Just Learning", skills=[("Python", "5.00")])
        with pytest.raises(NotFoundException):
            BookingService(db).create_booking(student.id, _request(learner, slot_start))

    def test_skill_not_offered(self, db, student, teacher, slot_start):
        with pytest.raises(ValidationException) as exc_info:
            BookingService(db).create_booking(student.id, _request(teacher, slot_start, skill="Piano"))
        assert exc_info.value.code == "SKILL_NOT_OFFERED"

    def test_self_booking(self, db, teacher, slot_start):
        with pytest.raises(ValidationException) as exc_info:
            BookingService(db).create_booking(teacher.id, _request(teacher, slot_start))
        assert exc_info.value.code == "SELF_BOOKING"

    @pytest.mark.parametrize("duration", [15, 181])
    def test_duration_bounds(self, db, student, teacher, slot_start, duration):
        with pytest.raises(ValidationException) as exc_info:
            BookingService(db).create_booking(student.id, _request(teacher, slot_start, duration=duration))
        assert exc_info.value.code == "INVALID_DURATION"

    def test_busy_teacher_lock_reports_conflict(self, db, student, teacher, slot_start):
        with patch("app.services.booking_service.teacher_booking_lock") as lock:
            lock.return_value.__enter__.return_value = False
            with pytest.raises(BookingConflictException) as exc_info:
                BookingService(db).create_booking(student.id, _request(teacher, slot_start))
        assert exc_info.value.message == LOCK_BUSY_MESSAGE
        db.refresh(student)
        assert student.balance == Decimal("100.00")


class TestCreateBookingAtomicity:
    def test_failed_insert_rolls_back_debit(self, db, student, teacher, slot_start):
        service = BookingService(db)

        with patch.object(
            service.repository, "create", side_effect=RepositoryException("insert failed")
        ):
            with pytest.raises(ServiceException):
                service.create_booking(student.id, _request(teacher, slot_start))

        db.expire_all()
        assert student.balance == Decimal("100.00")
        assert teacher.pending_earnings == Decimal("0.00")
        assert db.query(Booking).count() == 0
