import logging
import threading
from typing import Dict, Iterable, List, Optional
from fastapi.encoders import jsonable_encoder
from booking_api.db import utc_now
from booking_api.models.booking import Booking, BookingStatus
from booking_api.schemas.booking import (
    BookingApproval,
    BookingCreate,
    BookingReschedule,
    BookingResponse,
    BookingUpdate,
)
from booking_api.utils.errors import (
    NotFoundError,
    OperationNotPermittedError,
    ScheduleConflictError,
    ValidationError,
)
from booking_api.utils.repository import BookingRepository
from booking_api.utils.validation_helpers import as_utc

logger = logging.getLogger(__name__)

# Serialises every check-then-act sequence of the process.
_write_lock = threading.RLock()

SLOT_FIELDS = frozenset({"room_id", "start_time", "end_time"})
TRACKED_FIELDS = ("room_id", "start_time", "end_time", "purpose", "attendees")


def recipient_email_for(user_id: str, domain: str) -> str:
    return f"employee{user_id.split('-')[0]}@{domain}"


def _same_value(old, new) -> bool:
    if old is not None and new is not None and hasattr(old, "tzinfo"):
        return as_utc(old) == as_utc(new)
    return old == new


def diff_fields(before: Dict, after: Booking, fields: Iterable[str]) -> Dict[str, Dict]:
    """Changes among the tracked fields that the patch supplied."""
    changes = {}
    for field in TRACKED_FIELDS:
        if field not in fields:
            continue
        old, new = before[field], getattr(after, field)
        if not _same_value(old, new):
            changes[field] = {"old": old, "new": new}
    return changes


class BookingScheduler:
    """
    Booking lifecycle and time-slot conflict rules.

    Mutations run under a process-wide lock so that conflict scanning and the
    following write are atomic. Notifications are handed to ``notifier`` only
    after the change is committed and never affect the result.
    """

    def __init__(
        self,
        repository: BookingRepository,
        notifier=None,
        email_domain: str = "example.com",
        lock=None,
    ):
        self.repository = repository
        self.notifier = notifier
        self.email_domain = email_domain
        self.lock = lock or _write_lock

    def get(self, booking_id: str) -> Booking:
        booking = self.repository.get(booking_id)
        if not booking:
            logger.error(f"Booking not found: {booking_id}")
            raise NotFoundError(booking_id)
        return booking

    def list(self, **filters) -> List[Booking]:
        bookings = self.repository.list(**filters)
        logger.debug(f"Retrieved {len(bookings)} bookings")
        return bookings

    def find_conflicts(self, room_id, start_time, end_time, exclude_id=None) -> List[Booking]:
        return self.repository.find_conflicts(room_id, start_time, end_time, exclude_id)

    def create(self, data: BookingCreate) -> Booking:
        booking = Booking(
            room_id=data.room_id,
            user_id=str(data.user_id),
            start_time=data.start_time,
            end_time=data.end_time,
            purpose=data.purpose,
            attendees=data.attendees,
            status=BookingStatus.pending,
        )
        with self.lock:
            booking = self.repository.insert(booking)
        logger.debug(f"Created booking: {booking.id}, room_id: {booking.room_id}")
        return booking

    def update(self, booking_id: str, patch: BookingUpdate) -> Booking:
        values = patch.model_dump(exclude_unset=True, exclude_none=True)
        if "user_id" in values:
            values["user_id"] = str(values["user_id"])
        with self.lock:
            booking = self.get(booking_id)
            self._check_time_range(
                values.get("start_time", booking.start_time),
                values.get("end_time", booking.end_time),
            )
            for key, value in values.items():
                setattr(booking, key, value)
            booking.updated_at = utc_now()
            booking = self.repository.update(booking)
        logger.debug(f"Updated booking: {booking_id}, fields: {sorted(values)}")
        return booking

    def approve(self, booking_id: str, approval: BookingApproval) -> Booking:
        with self.lock:
            booking = self.get(booking_id)
            if booking.status == BookingStatus.cancelled:
                logger.error(f"Refusing to change status of cancelled booking {booking_id}")
                raise OperationNotPermittedError(
                    "Cannot change the status of a cancelled booking"
                )
            booking.status = BookingStatus(approval.status)
            booking.approval_reason = approval.reason
            booking.updated_at = utc_now()
            booking = self.repository.update(booking)
            snapshot = BookingResponse.model_validate(booking)
        logger.debug(f"Booking {booking_id} set to {approval.status}")
        self._dispatch(
            snapshot, approval.status, {"status": approval.status, "reason": approval.reason}
        )
        return booking

    def reschedule(self, booking_id: str, patch: BookingReschedule) -> Booking:
        values = patch.model_dump(exclude_unset=True, exclude_none=True)
        reason = values.pop("reason", None)
        with self.lock:
            booking = self.get(booking_id)
            if booking.status == BookingStatus.cancelled:
                logger.error(f"Refusing to reschedule cancelled booking {booking_id}")
                raise OperationNotPermittedError("Cannot reschedule a cancelled booking")

            room_id = values.get("room_id", booking.room_id)
            start_time = values.get("start_time", booking.start_time)
            end_time = values.get("end_time", booking.end_time)
            self._check_time_range(start_time, end_time)

            if SLOT_FIELDS.intersection(values):
                conflicts = self.find_conflicts(room_id, start_time, end_time, exclude_id=booking.id)
                if conflicts:
                    logger.error(
                        f"Schedule conflict for room_id: {room_id}, time: {start_time} to {end_time}, "
                        f"conflicting bookings: {[c.id for c in conflicts]}"
                    )
                    raise ScheduleConflictError(room_id, len(conflicts))

            before = {field: getattr(booking, field) for field in TRACKED_FIELDS}
            for key, value in values.items():
                setattr(booking, key, value)
            if reason:
                booking.reschedule_reason = reason
            now = utc_now()
            booking.status = BookingStatus.approved
            booking.rescheduled_at = now
            booking.updated_at = now
            booking = self.repository.update(booking)

            changes = diff_fields(before, booking, values)
            snapshot = BookingResponse.model_validate(booking)
        logger.debug(f"Rescheduled booking: {booking_id}, changes: {sorted(changes)}")
        self._dispatch(
            snapshot,
            "rescheduled",
            jsonable_encoder(
                {
                    "changes": changes,
                    "previous": {
                        "room_id": before["room_id"],
                        "start_time": before["start_time"],
                        "end_time": before["end_time"],
                    },
                }
            ),
        )
        return booking

    def cancel(self, booking_id: str) -> Booking:
        with self.lock:
            booking = self.get(booking_id)
            if booking.status == BookingStatus.cancelled:
                return booking
            booking.status = BookingStatus.cancelled
            booking.updated_at = utc_now()
            booking = self.repository.update(booking)
            snapshot = BookingResponse.model_validate(booking)
        logger.debug(f"Cancelled booking: {booking_id}")
        self._dispatch(snapshot, "cancelled", {"status": "cancelled", "reason": None})
        return booking

    @staticmethod
    def _check_time_range(start_time, end_time):
        if as_utc(end_time) <= as_utc(start_time):
            logger.error(f"Invalid time range: {start_time} to {end_time}")
            raise ValidationError(["End time must be after start time"])

    def _dispatch(self, booking: BookingResponse, kind: str, details: Optional[Dict]):
        if self.notifier is None:
            return
        email = recipient_email_for(booking.user_id, self.email_domain)
        try:
            self.notifier.notify(booking, kind, details, email)
        except Exception:
            logger.exception(f"Failed to dispatch {kind} notification for booking {booking.id}")
