from datetime import datetime, timezone

from app.models.booking import BookingStatus
from app.repositories import RepositoryFactory


class TestTransitionStatus:
    def test_applies_only_from_expected_status(self, db, make_booking, student, teacher, slot_start):
        booking = make_booking(student, teacher, slot_start)
        repo = RepositoryFactory.create_booking_repository(db)

        assert repo.transition_status(booking.id, "confirmed", "completed") is True
        assert repo.transition_status(booking.id, "confirmed", "cancelled") is False
        db.commit()
        repo.refresh(booking)
        assert booking.status == BookingStatus.COMPLETED.value

    def test_extra_fields_written_with_status(self, db, make_booking, student, teacher, slot_start):
        booking = make_booking(student, teacher, slot_start)
        repo = RepositoryFactory.create_booking_repository(db)
        when = datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)

        repo.transition_status(
            booking.id, "confirmed", "cancelled", cancelled_by_id=student.id, cancelled_at=when
        )
        repo.refresh(booking)

        assert booking.cancelled_by_id == student.id
        assert booking.cancelled_at == when


class TestMarkReviewed:
    def test_only_first_review_sticks(self, db, make_booking, student, teacher, slot_start):
        booking = make_booking(student, teacher, slot_start, status="completed")
        repo = RepositoryFactory.create_booking_repository(db)
        now = datetime.now(timezone.utc)

        assert repo.mark_reviewed(booking.id, 5, "great", now) is True
        assert repo.mark_reviewed(booking.id, 1, "changed my mind", now) is False
        repo.refresh(booking)
        assert (booking.rating, booking.review_comment) == (5, "great")


class TestLockUsers:
    def test_returns_existing_accounts_keyed_by_id(self, db, student, teacher):
        repo = RepositoryFactory.create_user_repository(db)
        locked = repo.lock_users([teacher.id, student.id, "01MISSINGUSER0000000000000"])
        assert set(locked) == {student.id, teacher.id}
