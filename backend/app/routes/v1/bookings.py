# backend/app/routes/v1/bookings.py
"""
Booking routes - API v1

Versioned booking endpoints under /api/v1/bookings.
All business logic delegated to BookingService and ReviewService.

Endpoints:
    GET /availability/{teacher_id} - Weekly availability plus booked slots for a day
    GET / - List the caller's bookings (as payer, payee or both)
    POST / - Book and pay for a session
    GET /{booking_id} - Booking details for a participant
    PUT /{booking_id}/status - Move a booking through its lifecycle
    POST /{booking_id}/review - Review a completed booking (student only)
"""

import asyncio
from datetime import date
import logging
from typing import List, NoReturn, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Path, Query, status

from ...api.dependencies import get_booking_service, get_current_user, get_review_service
from ...core.enums import BookingPerspective
from ...core.exceptions import DomainException
from ...models.user import User
from ...schemas.booking import (
    BookingCreate,
    BookingResponse,
    BookingStatusUpdate,
    ReviewCreate,
    TeacherAvailabilityResponse,
)
from ...services.booking_service import BookingService
from ...services.review_service import ReviewService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["bookings-v1"])


def handle_domain_exception(exc: DomainException) -> NoReturn:
    """Convert domain exceptions to HTTP exceptions."""
    if hasattr(exc, "to_http_exception"):
        raise exc.to_http_exception()
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


# ============================================================================
# SECTION 1: Static routes
# ============================================================================


@router.get("/availability/{teacher_id}", response_model=TeacherAvailabilityResponse)
async def get_teacher_availability(
    teacher_id: str = Path(..., min_length=1),
    on: date = Query(..., alias="date", description="UTC calendar day, YYYY-MM-DD"),
    current_user: User = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> TeacherAvailabilityResponse:
    """A teacher's availability document and the slots already taken on a day."""
    try:
        result = await asyncio.to_thread(booking_service.get_teacher_availability, teacher_id, on)
        return TeacherAvailabilityResponse.model_validate(result)
    except DomainException as e:
        handle_domain_exception(e)


# ============================================================================
# SECTION 2: Root routes
# ============================================================================


@router.get("", response_model=List[BookingResponse])
async def list_bookings(
    as_role: Optional[BookingPerspective] = Query(
        None, alias="as", description="payer for sessions you book, payee for sessions you teach"
    ),
    status_filter: Optional[str] = Query(None, alias="status"),
    current_user: User = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> List[BookingResponse]:
    """List bookings the caller takes part in, newest first."""
    try:
        bookings = await asyncio.to_thread(
            booking_service.get_bookings_for_user,
            current_user.id,
            as_role,
            status_filter,
        )
        return [BookingResponse.model_validate(b) for b in bookings]
    except DomainException as e:
        handle_domain_exception(e)


@router.post(
    "",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid duration or unknown skill"},
        404: {"description": "Teacher not found"},
        409: {"description": "Time slot not available"},
        422: {"description": "Insufficient coins"},
    },
)
async def create_booking(
    booking_data: BookingCreate = Body(...),
    current_user: User = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    """Book a session; the price is debited from the caller's wallet immediately."""
    try:
        booking = await asyncio.to_thread(booking_service.create_booking, current_user.id, booking_data)
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


# ============================================================================
# SECTION 3: Routes with a booking id
# ============================================================================


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: str = Path(..., min_length=1),
    current_user: User = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(booking_service.get_booking_for_user, booking_id, current_user.id)
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.put("/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    booking_id: str = Path(..., min_length=1),
    payload: BookingStatusUpdate = Body(...),
    current_user: User = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    """
    Change a booking's status.

    Completing pays the teacher. Cancelling refunds the student only when
    the student cancels.
    """
    try:
        booking = await asyncio.to_thread(
            booking_service.update_booking_status,
            booking_id,
            current_user.id,
            payload.status,
            payload.cancellation_reason,
        )
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{booking_id}/review", response_model=BookingResponse)
async def submit_review(
    booking_id: str = Path(..., min_length=1),
    payload: ReviewCreate = Body(...),
    current_user: User = Depends(get_current_user),
    review_service: ReviewService = Depends(get_review_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(
            lambda: review_service.submit_review(
                student_id=current_user.id,
                booking_id=booking_id,
                rating=payload.rating,
                comment=payload.comment,
            )
        )
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)
