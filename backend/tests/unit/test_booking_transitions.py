import pytest

from app.core.exceptions import InvalidStatusTransitionException, ValidationException
from app.domain.booking_transitions import (
    TERMINAL_STATUSES,
    can_transition,
    check_transition,
    parse_status,
)
from app.models.booking import BookingStatus

S = BookingStatus


class TestParseStatus:
    def test_accepts_case_and_whitespace_variants(self):
        assert parse_status(" Completed ") is S.COMPLETED
        assert parse_status("NO_SHOW") is S.NO_SHOW

    def test_rejects_unknown_status(self):
        with pytest.raises(ValidationException) as exc_info:
            parse_status("finished")
        assert exc_info.value.code == "INVALID_STATUS"
        assert "completed" in exc_info.value.details["allowed"]


class TestTransitions:
    @pytest.mark.parametrize(
        "current,target",
        [
            (S.PENDING, S.CONFIRMED),
            (S.PENDING, S.CANCELLED),
            (S.CONFIRMED, S.COMPLETED),
            (S.CONFIRMED, S.CANCELLED),
            (S.CONFIRMED, S.NO_SHOW),
        ],
    )
    def test_allowed_moves(self, current, target):
        assert can_transition(current, target)
        assert check_transition(current, target) is True

    @pytest.mark.parametrize(
        "current,target",
        [
            (S.PENDING, S.COMPLETED),
            (S.PENDING, S.NO_SHOW),
            (S.CONFIRMED, S.PENDING),
            (S.COMPLETED, S.CANCELLED),
            (S.CANCELLED, S.CONFIRMED),
            (S.NO_SHOW, S.COMPLETED),
        ],
    )
    def test_illegal_moves_raise(self, current, target):
        with pytest.raises(InvalidStatusTransitionException) as exc_info:
            check_transition(current, target)
        assert exc_info.value.status_code == 400
        assert exc_info.value.details == {
            "current_status": current.value,
            "requested_status": target.value,
        }

    @pytest.mark.parametrize("status", list(S))
    def test_same_status_is_a_no_op(self, status):
        assert check_transition(status, status) is False

    def test_terminal_statuses(self):
        assert TERMINAL_STATUSES == {S.COMPLETED, S.CANCELLED, S.NO_SHOW}
