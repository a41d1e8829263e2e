from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from booking_api.config import get_settings
from booking_api.db import get_db
from booking_api.models.booking import BookingStatus
from booking_api.schemas.booking import (
    BookingApproval,
    BookingCreate,
    BookingReschedule,
    BookingResponse,
    BookingUpdate,
)
from booking_api.utils.errors import (
    BookingError,
    NotFoundError,
    OperationNotPermittedError,
    ScheduleConflictError,
    ValidationError,
)
from booking_api.utils.notifier import get_notifier
from booking_api.utils.repository import BookingRepository
from booking_api.utils.scheduler import BookingScheduler

router = APIRouter(
    prefix="/api/bookings",
    tags=["bookings"],
)


def get_scheduler(db: Session = Depends(get_db), notifier=Depends(get_notifier)) -> BookingScheduler:
    return BookingScheduler(
        BookingRepository(db),
        notifier,
        email_domain=get_settings().notification_email_domain,
    )


def to_http_error(exc: BookingError) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=exc.messages)
    if isinstance(exc, OperationNotPermittedError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, ScheduleConflictError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": str(exc), "conflict_count": exc.conflict_count},
        )
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.get(
    "/",
    response_model=List[BookingResponse],
    summary="List bookings",
    description="Retrieve a paginated list of bookings, optionally filtered by room, user or status."
)
def list_bookings(
    room_id: Optional[str] = None,
    user_id: Optional[str] = None,
    booking_status: Optional[BookingStatus] = Query(default=None, alias="status"),
    skip: int = 0,
    limit: int = 100,
    scheduler: BookingScheduler = Depends(get_scheduler),
):
    """
    - **room_id**: Only bookings of this room.
    - **user_id**: Only bookings of this user.
    - **status**: Only bookings in this status.
    """
    return scheduler.list(
        room_id=room_id, user_id=user_id, status=booking_status, skip=skip, limit=limit
    )


@router.get("/{booking_id}", response_model=BookingResponse, summary="Get a booking by ID")
def get_booking(booking_id: str, scheduler: BookingScheduler = Depends(get_scheduler)):
    try:
        return scheduler.get(booking_id)
    except BookingError as exc:
        raise to_http_error(exc) from exc


@router.post(
    "/",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new booking",
    description="Create a pending booking. Overlaps are not checked until the booking is rescheduled."
)
def create_booking(booking: BookingCreate, scheduler: BookingScheduler = Depends(get_scheduler)):
    """
    Create a new booking request.

    - **room_id**: Room to book.
    - **user_id**: UUID of the requester.
    - **start_time**: Start of the booking, must be in the future.
    - **end_time**: End of the booking, must be after start_time.
    - **purpose**: Purpose of the booking (1-200 characters).
    - **attendees**: (Optional) Number of attendees (1-1000).
    """
    return scheduler.create(booking)


@router.put("/{booking_id}", response_model=BookingResponse, summary="Update a booking")
def update_booking(
    booking_id: str,
    booking_update: BookingUpdate,
    scheduler: BookingScheduler = Depends(get_scheduler),
):
    """
    Edit booking fields without touching its status or checking for overlaps.
    """
    try:
        return scheduler.update(booking_id, booking_update)
    except BookingError as exc:
        raise to_http_error(exc) from exc


@router.put(
    "/{booking_id}/approve",
    response_model=BookingResponse,
    summary="Approve, reject or cancel a booking",
    description="Set the booking decision and notify the requester."
)
def approve_booking(
    booking_id: str,
    approval: BookingApproval,
    scheduler: BookingScheduler = Depends(get_scheduler),
):
    """
    - **status**: approved, rejected or cancelled.
    - **reason**: (Optional) Reason shown to the requester.
    """
    try:
        return scheduler.approve(booking_id, approval)
    except BookingError as exc:
        raise to_http_error(exc) from exc


@router.put(
    "/{booking_id}/reschedule",
    response_model=BookingResponse,
    summary="Reschedule a booking",
    description="Move a booking to another room or time slot. Fails with 409 if the slot overlaps an approved booking."
)
def reschedule_booking(
    booking_id: str,
    patch: BookingReschedule,
    scheduler: BookingScheduler = Depends(get_scheduler),
):
    """
    - **room_id**: (Optional) New room.
    - **start_time**: (Optional) New start time, must be in the future.
    - **end_time**: (Optional) New end time.
    - **purpose**: (Optional) New purpose.
    - **attendees**: (Optional) New number of attendees.
    - **reason**: (Optional) Reason for the change.

    The rescheduled booking is always left approved.
    """
    try:
        return scheduler.reschedule(booking_id, patch)
    except BookingError as exc:
        raise to_http_error(exc) from exc


@router.delete("/{booking_id}", response_model=BookingResponse, summary="Cancel a booking")
def cancel_booking(booking_id: str, scheduler: BookingScheduler = Depends(get_scheduler)):
    """
    Cancel a booking. The record is kept with status cancelled.
    """
    try:
        return scheduler.cancel(booking_id)
    except BookingError as exc:
        raise to_http_error(exc) from exc
