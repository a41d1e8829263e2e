import uuid
from enum import Enum as PyEnum
from sqlalchemy import Column, Enum, JSON, String
from booking_api.db import Base, UTCDateTime, utc_now


class NotificationType(str, PyEnum):
    booking_rescheduled = "booking_rescheduled"
    booking_approved = "booking_approved"
    booking_rejected = "booking_rejected"
    booking_cancelled = "booking_cancelled"


class NotificationStatus(str, PyEnum):
    pending = "pending"
    sent = "sent"
    failed = "failed"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), index=True, nullable=False)
    booking_id = Column(String(36), index=True, nullable=False)
    type = Column(Enum(NotificationType), nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(String(1000), nullable=False)
    email = Column(String(254), nullable=False)
    status = Column(
        Enum(NotificationStatus), nullable=False, default=NotificationStatus.pending
    )
    sent_at = Column(UTCDateTime, nullable=True)
    details = Column(JSON, nullable=True)
    created_at = Column(UTCDateTime, nullable=False, default=utc_now)
    updated_at = Column(UTCDateTime, nullable=True)
