# backend/app/schemas/user.py
"""Public profile, teacher directory and wallet schemas."""

from typing import List, Optional

from .base import Money, StandardizedModel


class TeachingSkillResponse(StandardizedModel):
    skill: str
    level: str
    hourly_rate: Money
    sessions: int
    rating: Money


class PublicProfileResponse(StandardizedModel):
    id: str
    name: str
    role: str
    bio: Optional[str] = None
    location: Optional[str] = None
    total_sessions: int
    average_rating: Money
    total_reviews: int
    skills: List[TeachingSkillResponse] = []


class WalletResponse(StandardizedModel):
    balance: Money
    pending_earnings: Money
    coins_earned: Money
    coins_spent: Money
