import uuid
from enum import Enum as PyEnum
from sqlalchemy import Column, Enum, Integer, String
from booking_api.db import Base, UTCDateTime, utc_now


class RoomStatus(str, PyEnum):
    available = "available"
    occupied = "occupied"
    maintenance = "maintenance"


class Room(Base):
    __tablename__ = "rooms"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), index=True, nullable=False)
    center = Column(String(100), nullable=False)
    capacity = Column(Integer, nullable=False)
    status = Column(Enum(RoomStatus), nullable=False, default=RoomStatus.available)
    description = Column(String(500), nullable=True)
    created_at = Column(UTCDateTime, nullable=False, default=utc_now)
    updated_at = Column(UTCDateTime, nullable=True)
