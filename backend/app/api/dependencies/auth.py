# backend/app/api/dependencies/auth.py
"""
Authentication dependencies.

The caller identity comes from a Bearer JWT whose ``sub`` is the user id.
The booking core trusts this identity and does not re-check credentials.
"""

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ...auth import get_subject
from ...core.exceptions import UnauthorizedException
from ...models.user import User
from ...repositories.factory import RepositoryFactory
from .database import get_db

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the authenticated user, or raise UnauthorizedException (401)."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise UnauthorizedException("Not authenticated", code="NOT_AUTHENTICATED")

    user_id = get_subject(credentials.credentials)
    user = RepositoryFactory.create_user_repository(db).get_by_id(user_id, load_relationships=False)
    if user is None:
        logger.info(f"Token subject {user_id} has no account")
        raise UnauthorizedException("Could not validate credentials", code="INVALID_TOKEN")
    return user
