# backend/app/routes/v1/users.py
"""
Member directory routes - API v1

Endpoints:
    GET /teachers - Search teachers by skill and rating
    GET /{user_id} - Public profile
"""

import asyncio
import logging
from typing import NoReturn, Optional

from fastapi import APIRouter, Depends, Path, Query

from ...api.dependencies import get_current_user, get_teacher_service
from ...core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ...core.exceptions import DomainException
from ...models.user import User
from ...schemas.base_responses import PaginatedResponse
from ...schemas.user import PublicProfileResponse
from ...services.teacher_service import TeacherService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["users-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    raise exc.to_http_exception()


@router.get("/teachers", response_model=PaginatedResponse[PublicProfileResponse])
async def search_teachers(
    skill: Optional[str] = Query(None, max_length=50),
    rating: Optional[float] = Query(None, ge=0, le=5, description="Minimum average rating"),
    page: int = Query(1, ge=1),
    per_page: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    current_user: User = Depends(get_current_user),
    teacher_service: TeacherService = Depends(get_teacher_service),
) -> PaginatedResponse[PublicProfileResponse]:
    """Teachers offering a matching skill, best rated and most experienced first."""
    try:
        teachers, total = await asyncio.to_thread(
            teacher_service.search_teachers, skill, rating, page, per_page
        )
        return PaginatedResponse[PublicProfileResponse].build(
            [PublicProfileResponse.model_validate(t) for t in teachers],
            total=total,
            page=page,
            per_page=per_page,
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{user_id}", response_model=PublicProfileResponse)
async def get_public_profile(
    user_id: str = Path(..., min_length=1),
    current_user: User = Depends(get_current_user),
    teacher_service: TeacherService = Depends(get_teacher_service),
) -> PublicProfileResponse:
    try:
        user = await asyncio.to_thread(teacher_service.get_public_profile, user_id)
        return PublicProfileResponse.model_validate(user)
    except DomainException as e:
        handle_domain_exception(e)
