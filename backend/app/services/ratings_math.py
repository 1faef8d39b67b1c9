from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Tuple

from ..core.constants import MAX_RATING, MIN_RATING

_RATING_QUANTUM = Decimal("0.01")


def is_valid_rating(rating: int) -> bool:
    return isinstance(rating, int) and not isinstance(rating, bool) and MIN_RATING <= rating <= MAX_RATING


def incorporate_rating(current_average: Decimal, current_count: int, new_rating: int) -> Tuple[Decimal, int]:
    """
    Fold one more rating into a running average.

    new_average = (average * count + rating) / (count + 1), kept to two places.
    """
    count = max(int(current_count or 0), 0)
    average = Decimal(str(current_average or 0))
    total = average * count + Decimal(new_rating)
    new_count = count + 1
    new_average = (total / new_count).quantize(_RATING_QUANTUM, rounding=ROUND_HALF_UP)
    return new_average, new_count
