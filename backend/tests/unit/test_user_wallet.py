from decimal import Decimal

import pytest

from app.core.exceptions import InsufficientFundsException
from app.models.user import User


def _user(**kwargs) -> User:
    return User(email="w@example.com", name="Wallet", **kwargs)


class TestWalletDefaults:
    def test_transient_user_has_zeroed_wallet(self):
        user = _user()
        assert user.balance == Decimal("0.00")
        assert user.pending_earnings == Decimal("0.00")
        assert user.total_sessions == 0
        assert user.role == "learner"
        assert not user.can_teach


class TestWalletMutations:
    def test_debit_moves_coins_to_spent(self):
        user = _user(balance=Decimal("50.00"))
        user.debit_coins(Decimal("20.50"))
        assert user.balance == Decimal("29.50")
        assert user.coins_spent == Decimal("20.50")

    def test_debit_never_goes_negative(self):
        user = _user(balance=Decimal("5.00"))
        with pytest.raises(InsufficientFundsException) as exc_info:
            user.debit_coins(Decimal("5.01"))
        assert exc_info.value.details == {"required": "5.01", "available": "5.00"}
        assert user.balance == Decimal("5.00")

    def test_refund_reverses_debit(self):
        user = _user(balance=Decimal("50.00"))
        user.debit_coins(Decimal("30.00"))
        user.refund_coins(Decimal("30.00"))
        assert user.balance == Decimal("50.00")
        assert user.coins_spent == Decimal("0.00")

    def test_held_earnings_pay_out_on_credit(self):
        user = _user(role="teacher")
        user.hold_earnings(Decimal("45.00"))
        assert user.pending_earnings == Decimal("45.00")
        user.credit_earnings(Decimal("45.00"))
        assert user.pending_earnings == Decimal("0.00")
        assert user.balance == Decimal("45.00")
        assert user.coins_earned == Decimal("45.00")

    def test_release_drops_hold_without_payout(self):
        user = _user(role="both")
        user.hold_earnings(Decimal("10.00"))
        user.release_earnings(Decimal("10.00"))
        assert user.pending_earnings == Decimal("0.00")
        assert user.balance == Decimal("0.00")
        assert user.can_teach
