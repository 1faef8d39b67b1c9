"""
Timezone utilities for PeerLearn.

All booking instants are stored and compared in UTC. SQLite hands back naive
datetimes, so every value read from or written to a booking passes through
ensure_utc first.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Tuple


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """
    Normalize a datetime to an aware UTC value.

    Naive datetimes are assumed to already be UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_day_bounds(day: date) -> Tuple[datetime, datetime]:
    """Return the half-open [start, end) UTC range covering a calendar day."""
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)
