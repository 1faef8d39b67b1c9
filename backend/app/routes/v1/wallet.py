# backend/app/routes/v1/wallet.py
"""
Wallet routes - API v1

Endpoints:
    GET / - The caller's coin balance and lifetime totals
"""

import asyncio

from fastapi import APIRouter, Depends

from ...api.dependencies import get_current_user, get_wallet_service
from ...core.exceptions import DomainException
from ...models.user import User
from ...schemas.user import WalletResponse
from ...services.wallet_service import WalletService

router = APIRouter(tags=["wallet-v1"])


@router.get("", response_model=WalletResponse)
async def get_wallet(
    current_user: User = Depends(get_current_user),
    wallet_service: WalletService = Depends(get_wallet_service),
) -> WalletResponse:
    try:
        summary = await asyncio.to_thread(wallet_service.get_wallet_summary, current_user.id)
    except DomainException as e:
        raise e.to_http_exception() from e
    return WalletResponse.model_validate(summary)
