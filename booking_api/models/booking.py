import uuid
from enum import Enum as PyEnum
from sqlalchemy import Column, Enum, Integer, String
from booking_api.db import Base, UTCDateTime, utc_now


class BookingStatus(str, PyEnum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"
    cancelled = "cancelled"


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    room_id = Column(String(100), index=True, nullable=False)
    user_id = Column(String(36), index=True, nullable=False)
    start_time = Column(UTCDateTime, nullable=False)
    end_time = Column(UTCDateTime, nullable=False)
    purpose = Column(String(200), nullable=False)
    attendees = Column(Integer, nullable=True)
    status = Column(Enum(BookingStatus), nullable=False, default=BookingStatus.pending)
    approval_reason = Column(String(500), nullable=True)
    reschedule_reason = Column(String(500), nullable=True)
    rescheduled_at = Column(UTCDateTime, nullable=True)
    created_at = Column(UTCDateTime, nullable=False, default=utc_now)
    updated_at = Column(UTCDateTime, nullable=True)
