"""
Coin pricing for sessions.

Coins are Decimal amounts with two places. A session costs the teacher's
hourly rate prorated by minutes; the result is rounded half-up to the cent
only when the proration does not come out exact.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from ..core.config import settings
from ..core.constants import COIN_QUANTUM
from ..core.exceptions import ValidationException

Number = Union[Decimal, int, float, str]

_MINUTES_PER_HOUR = Decimal(60)


def quantize_coins(amount: Number) -> Decimal:
    """Round a coin amount to two places, half-up."""
    return Decimal(str(amount)).quantize(COIN_QUANTUM, rounding=ROUND_HALF_UP)


def validate_duration(duration_minutes: int) -> None:
    if not (settings.min_session_minutes <= duration_minutes <= settings.max_session_minutes):
        raise ValidationException(
            f"Session duration must be between {settings.min_session_minutes} "
            f"and {settings.max_session_minutes} minutes",
            code="INVALID_DURATION",
            details={"duration_minutes": duration_minutes},
        )


def compute_session_cost(hourly_rate: Number, duration_minutes: int) -> Decimal:
    """
    cost = hourly_rate * duration_minutes / 60

    >>> compute_session_cost(30, 90)
    Decimal('45.00')
    """
    if duration_minutes <= 0:
        raise ValidationException(
            "Session duration must be positive",
            code="INVALID_DURATION",
            details={"duration_minutes": duration_minutes},
        )
    rate = Decimal(str(hourly_rate))
    if rate < 0:
        raise ValidationException("Hourly rate cannot be negative", code="INVALID_RATE")
    return quantize_coins(rate * Decimal(duration_minutes) / _MINUTES_PER_HOUR)
