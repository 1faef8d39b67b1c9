"""Half-open overlap rules for the teacher availability check."""

from datetime import timedelta

import pytest

from app.models.booking import BookingStatus
from app.services.conflict_checker import ConflictChecker


@pytest.fixture
def existing(make_booking, student, teacher, slot_start):
    # Booked 10:00-11:00
    return make_booking(student, teacher, slot_start, duration_minutes=60)


class TestCheckBookingConflicts:
    def test_adjacent_after_is_free(self, db, teacher, existing, slot_start):
        checker = ConflictChecker(db)
        assert checker.check_booking_conflicts(teacher.id, slot_start + timedelta(hours=1), 60) == []

    def test_adjacent_before_is_free(self, db, teacher, existing, slot_start):
        checker = ConflictChecker(db)
        assert checker.is_available(teacher.id, slot_start - timedelta(hours=1), 60)

    def test_one_minute_overlap_conflicts(self, db, teacher, existing, slot_start):
        checker = ConflictChecker(db)
        conflicts = checker.check_booking_conflicts(teacher.id, slot_start + timedelta(minutes=59), 60)
        assert [c["booking_id"] for c in conflicts] == [existing.id]
        assert conflicts[0]["status"] == BookingStatus.CONFIRMED.value

    def test_containing_interval_conflicts(self, db, teacher, existing, slot_start):
        checker = ConflictChecker(db)
        assert not checker.is_available(teacher.id, slot_start - timedelta(minutes=30), 120)

    def test_other_teachers_bookings_do_not_block(self, db, make_user, existing, slot_start):
        other = make_user(name="Other", role="teacher", skills=[("Python", "10.00")])
        assert ConflictChecker(db).is_available(other.id, slot_start, 60)

    def test_exclude_booking_id(self, db, teacher, existing, slot_start):
        checker = ConflictChecker(db)
        assert checker.is_available(teacher.id, slot_start, 60, exclude_booking_id=existing.id)

    @pytest.mark.parametrize(
        "status",
        [BookingStatus.CANCELLED.value, BookingStatus.COMPLETED.value, BookingStatus.NO_SHOW.value],
    )
    def test_non_blocking_statuses_free_the_slot(
        self, db, make_booking, student, teacher, slot_start, status
    ):
        make_booking(student, teacher, slot_start, status=status)
        assert ConflictChecker(db).is_available(teacher.id, slot_start, 60)

    def test_pending_bookings_block(self, db, make_booking, student, teacher, slot_start):
        make_booking(student, teacher, slot_start, status=BookingStatus.PENDING.value)
        assert not ConflictChecker(db).is_available(teacher.id, slot_start + timedelta(minutes=30), 30)


class TestBookedTimesForDate:
    def test_lists_blocking_bookings_starting_that_day(
        self, db, make_booking, student, teacher, slot_start
    ):
        first = make_booking(student, teacher, slot_start)
        second = make_booking(student, teacher, slot_start + timedelta(hours=3), duration_minutes=30)
        make_booking(student, teacher, slot_start + timedelta(hours=5), status=BookingStatus.CANCELLED.value)
        make_booking(student, teacher, slot_start + timedelta(days=1))

        slots = ConflictChecker(db).get_booked_times_for_date(teacher.id, slot_start.date())

        assert [s["booking_id"] for s in slots] == [first.id, second.id]
        assert slots[0]["start_at"] == slot_start
        assert slots[1]["end_at"] == slot_start + timedelta(hours=3, minutes=30)
