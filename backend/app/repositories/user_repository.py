# backend/app/repositories/user_repository.py
"""
User Repository for the PeerLearn platform.

Handles account lookups, row locking for wallet mutations, and the teacher
directory query.
"""

import logging
from typing import List, Optional, Sequence, Tuple, cast

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, selectinload

from ..core.enums import UserRole
from ..core.exceptions import RepositoryException
from ..models.skill import TeachingSkill
from ..models.user import User
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)

TEACHING_ROLES = (UserRole.TEACHER.value, UserRole.BOTH.value)


class UserRepository(BaseRepository[User]):
    """Repository for User data access."""

    def __init__(self, db: Session):
        """Initialize with User model."""
        super().__init__(db, User)
        self.logger = logging.getLogger(__name__)

    def lock_users(self, user_ids: Sequence[str]) -> dict[str, User]:
        """
        Row-lock several accounts for the rest of the transaction.

        Locks are always taken in sorted id order so two workflows touching the
        same pair of accounts cannot deadlock.
        """
        locked: dict[str, User] = {}
        for user_id in sorted(set(user_ids)):
            user = self.get_by_id_for_update(user_id)
            if user is not None:
                locked[user_id] = user
        return locked

    def search_teachers(
        self,
        skill: Optional[str] = None,
        min_rating: Optional[float] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> Tuple[List[User], int]:
        """
        Teachers matching the filters, best rated first.

        Args:
            skill: Case-insensitive substring of an offered skill name
            min_rating: Minimum average rating
            offset: Rows to skip
            limit: Page size

        Returns:
            (page of users, total matching count)
        """
        try:
            query = self._teacher_query(skill, min_rating)
            total = query.count()
            users = (
                query.options(selectinload(User.skills))
                .order_by(User.average_rating.desc(), User.total_sessions.desc(), User.id)
                .offset(offset)
                .limit(limit)
                .all()
            )
            return cast(List[User], users), total
        except SQLAlchemyError as e:
            self.logger.error(f"Error searching teachers: {str(e)}")
            raise RepositoryException(f"Failed to search teachers: {str(e)}")

    def _teacher_query(self, skill: Optional[str], min_rating: Optional[float]) -> Query:
        query = self.db.query(User).filter(User.role.in_(TEACHING_ROLES))
        if skill:
            pattern = f"%{skill.strip().lower()}%"
            query = query.filter(
                User.skills.any(func.lower(TeachingSkill.skill).like(pattern))
            )
        if min_rating is not None:
            query = query.filter(User.average_rating >= min_rating)
        return query

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(selectinload(User.skills))
