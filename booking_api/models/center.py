import uuid
from sqlalchemy import Column, String
from booking_api.db import Base, UTCDateTime, utc_now


class Center(Base):
    __tablename__ = "centers"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), index=True, nullable=False)
    address = Column(String(200), nullable=False)
    phone = Column(String(20), nullable=True)
    email = Column(String(100), nullable=True)
    description = Column(String(500), nullable=True)
    created_at = Column(UTCDateTime, nullable=False, default=utc_now)
    updated_at = Column(UTCDateTime, nullable=True)
