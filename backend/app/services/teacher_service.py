# backend/app/services/teacher_service.py
"""
Teacher directory: search and public profiles.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.constants import MAX_PAGE_SIZE
from ..core.exceptions import NotFoundException, ValidationException
from ..models.user import User
from ..repositories.factory import RepositoryFactory
from ..repositories.user_repository import UserRepository
from .base import BaseService

logger = logging.getLogger(__name__)


class TeacherService(BaseService):
    """Read-only queries over teaching members."""

    def __init__(self, db: Session, user_repository: Optional[UserRepository] = None):
        super().__init__(db)
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)

    @BaseService.measure_operation("search_teachers")
    def search_teachers(
        self,
        skill: Optional[str] = None,
        min_rating: Optional[float] = None,
        page: int = 1,
        per_page: int = 10,
    ) -> Tuple[List[User], int]:
        """
        Search teachers by skill and minimum rating.

        Returns:
            (teachers on the requested page, total number of matches)
        """
        if page < 1:
            raise ValidationException("page must be at least 1")
        if not (1 <= per_page <= MAX_PAGE_SIZE):
            raise ValidationException(f"per_page must be between 1 and {MAX_PAGE_SIZE}")
        if min_rating is not None and not (0 <= min_rating <= 5):
            raise ValidationException("min_rating must be between 0 and 5")

        return self.user_repository.search_teachers(
            skill=skill,
            min_rating=min_rating,
            offset=(page - 1) * per_page,
            limit=per_page,
        )

    @BaseService.measure_operation("get_public_profile")
    def get_public_profile(self, user_id: str) -> User:
        user = self.user_repository.get_by_id(user_id)
        if user is None:
            raise NotFoundException("User not found", code="USER_NOT_FOUND")
        return user
