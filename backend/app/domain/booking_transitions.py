"""
Booking status state machine.

Allowed moves:

    pending   -> confirmed, cancelled
    confirmed -> completed, cancelled, no_show

completed, cancelled and no_show are terminal. Asking for the status a
booking already has is a no-op rather than an error, so retried requests are
harmless.
"""

from __future__ import annotations

from typing import Dict, FrozenSet

from ..core.exceptions import InvalidStatusTransitionException, ValidationException
from ..models.booking import BookingStatus

ALLOWED_TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset(
        {BookingStatus.COMPLETED, BookingStatus.CANCELLED, BookingStatus.NO_SHOW}
    ),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.NO_SHOW: frozenset(),
}

TERMINAL_STATUSES: FrozenSet[BookingStatus] = frozenset(
    status for status, targets in ALLOWED_TRANSITIONS.items() if not targets
)


def parse_status(value: str) -> BookingStatus:
    """Turn a request string into a BookingStatus, rejecting unknown values."""
    try:
        return BookingStatus(str(value).strip().lower())
    except ValueError:
        raise ValidationException(
            f"Unknown booking status: {value}",
            code="INVALID_STATUS",
            details={"allowed": [s.value for s in BookingStatus]},
        ) from None


def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def check_transition(current: BookingStatus, target: BookingStatus) -> bool:
    """
    Validate a requested status change.

    Returns:
        False when ``target`` equals ``current`` (nothing to do),
        True when the move is allowed.

    Raises:
        InvalidStatusTransitionException: the move is not in the table
    """
    if current == target:
        return False
    if not can_transition(current, target):
        raise InvalidStatusTransitionException(current.value, target.value)
    return True
