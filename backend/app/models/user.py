# backend/app/models/user.py
"""
User model for the PeerLearn platform.

A User is the account aggregate the booking workflow reads and mutates: it
carries the coin wallet (balance, pending earnings, lifetime earned/spent) and
the public teaching stats. Every member can both learn and, when their role
allows it, teach.

Classes:
    User: Account, wallet and stats for a member
"""

from decimal import Decimal
import logging
from typing import TYPE_CHECKING, Any, List, Optional

from sqlalchemy import JSON, CheckConstraint, Column, DateTime, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, relationship
from sqlalchemy.sql import func
import ulid

from ..core.constants import COIN_QUANTUM
from ..core.enums import UserRole
from ..core.exceptions import InsufficientFundsException
from ..database import Base

if TYPE_CHECKING:
    from .skill import TeachingSkill

logger = logging.getLogger(__name__)

_ZERO = Decimal("0.00")


def _to_coins(value: Any) -> Decimal:
    return Decimal(str(value if value is not None else 0)).quantize(COIN_QUANTUM)


class User(Base):
    """
    Member account with wallet and teaching stats.

    Attributes:
        id: ULID primary key
        email: Unique email address
        name: Display name
        role: learner, teacher or both
        weekly_availability: weekday -> {"available": bool, "hours": [..]}
        balance: Spendable coins, never negative
        pending_earnings: Coins held in confirmed bookings where this user teaches
        coins_earned / coins_spent: Lifetime wallet totals
        total_sessions / average_rating / total_reviews: Public teaching stats
    """

    __tablename__ = "users"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(50), nullable=False)
    role = Column(String(10), nullable=False, default=UserRole.LEARNER.value)
    bio = Column(Text, nullable=True)
    location = Column(String(100), nullable=True)
    weekly_availability = Column(JSON, nullable=True)

    # Wallet
    balance = Column(Numeric(12, 2), nullable=False, default=_ZERO)
    pending_earnings = Column(Numeric(12, 2), nullable=False, default=_ZERO)
    coins_earned = Column(Numeric(12, 2), nullable=False, default=_ZERO)
    coins_spent = Column(Numeric(12, 2), nullable=False, default=_ZERO)

    # Stats
    total_sessions = Column(Integer, nullable=False, default=0)
    average_rating = Column(Numeric(3, 2), nullable=False, default=_ZERO)
    total_reviews = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    skills: Mapped[List["TeachingSkill"]] = relationship(
        "TeachingSkill",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="TeachingSkill.skill",
    )

    __table_args__ = (
        CheckConstraint("role IN ('learner', 'teacher', 'both')", name="ck_users_role"),
        CheckConstraint("balance >= 0", name="ck_users_balance_non_negative"),
        CheckConstraint("pending_earnings >= 0", name="ck_users_pending_non_negative"),
        CheckConstraint(
            "average_rating >= 0 AND average_rating <= 5", name="ck_users_average_rating_range"
        ),
    )

    def __init__(self, **kwargs: Any) -> None:
        """Fill wallet and stats defaults so a transient user is usable before flush."""
        super().__init__(**kwargs)
        for field in ("balance", "pending_earnings", "coins_earned", "coins_spent", "average_rating"):
            setattr(self, field, _to_coins(getattr(self, field)))
        if self.total_sessions is None:
            self.total_sessions = 0
        if self.total_reviews is None:
            self.total_reviews = 0
        if not self.role:
            self.role = UserRole.LEARNER.value

    def __repr__(self) -> str:
        return f"<User {self.id}: {self.email} role={self.role} balance={self.balance}>"

    @property
    def can_teach(self) -> bool:
        return self.role in (UserRole.TEACHER.value, UserRole.BOTH.value)

    def find_skill(self, skill_name: str) -> Optional["TeachingSkill"]:
        """Return the offered skill matching ``skill_name`` case-insensitively."""
        wanted = skill_name.strip().lower()
        for skill in self.skills:
            if skill.skill.lower() == wanted:
                return skill
        return None

    # Wallet mutations. Each one re-checks the non-negative invariants afterwards.

    def debit_coins(self, amount: Decimal) -> None:
        """Spend coins on a booking."""
        amount = _to_coins(amount)
        balance = _to_coins(self.balance)
        if balance < amount:
            raise InsufficientFundsException(required=amount, available=balance)
        self.balance = balance - amount
        self.coins_spent = _to_coins(self.coins_spent) + amount
        self._check_wallet_invariants()

    def refund_coins(self, amount: Decimal) -> None:
        """Return coins for a booking the payer cancelled."""
        amount = _to_coins(amount)
        self.balance = _to_coins(self.balance) + amount
        self.coins_spent = max(_to_coins(self.coins_spent) - amount, _ZERO)
        self._check_wallet_invariants()

    def hold_earnings(self, amount: Decimal) -> None:
        self.pending_earnings = _to_coins(self.pending_earnings) + _to_coins(amount)
        self._check_wallet_invariants()

    def release_earnings(self, amount: Decimal) -> None:
        """Drop a hold without paying it out."""
        self.pending_earnings = max(_to_coins(self.pending_earnings) - _to_coins(amount), _ZERO)
        self._check_wallet_invariants()

    def credit_earnings(self, amount: Decimal) -> None:
        """Pay out a completed session."""
        amount = _to_coins(amount)
        self.release_earnings(amount)
        self.balance = _to_coins(self.balance) + amount
        self.coins_earned = _to_coins(self.coins_earned) + amount
        self._check_wallet_invariants()

    def _check_wallet_invariants(self) -> None:
        if _to_coins(self.balance) < _ZERO:
            raise ValueError(f"Balance for user {self.id} would become negative")
        if _to_coins(self.pending_earnings) < _ZERO:
            raise ValueError(f"Pending earnings for user {self.id} would become negative")
