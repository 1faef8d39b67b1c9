# backend/app/services/wallet_service.py
"""
Wallet read model for a member's coins.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, Optional, cast

from sqlalchemy.orm import Session

from ..core.exceptions import NotFoundException
from ..repositories.factory import RepositoryFactory
from ..repositories.user_repository import UserRepository
from .base import BaseService


class WalletService(BaseService):
    def __init__(self, db: Session, user_repository: Optional[UserRepository] = None):
        super().__init__(db)
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)

    @BaseService.measure_operation("get_wallet_summary")
    def get_wallet_summary(self, user_id: str) -> Dict[str, Decimal]:
        """Balance, held earnings and lifetime totals for a user."""
        user = self.user_repository.get_by_id(user_id, load_relationships=False)
        if user is None:
            raise NotFoundException("User not found", code="USER_NOT_FOUND")
        return {
            "balance": cast(Decimal, user.balance),
            "pending_earnings": cast(Decimal, user.pending_earnings),
            "coins_earned": cast(Decimal, user.coins_earned),
            "coins_spent": cast(Decimal, user.coins_spent),
        }
