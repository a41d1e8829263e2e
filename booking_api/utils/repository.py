from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session
from booking_api.models.booking import Booking, BookingStatus


class BookingRepository:
    """Booking storage used by the scheduler. Owns no locking of its own."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, booking_id: str) -> Optional[Booking]:
        return self.db.query(Booking).filter(Booking.id == booking_id).first()

    def list(
        self,
        room_id: Optional[str] = None,
        user_id: Optional[str] = None,
        status: Optional[BookingStatus] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Booking]:
        query = self.db.query(Booking)
        if room_id:
            query = query.filter(Booking.room_id == room_id)
        if user_id:
            query = query.filter(Booking.user_id == user_id)
        if status:
            query = query.filter(Booking.status == status)
        return query.order_by(Booking.start_time).offset(skip).limit(limit).all()

    def insert(self, booking: Booking) -> Booking:
        self.db.add(booking)
        self.db.commit()
        self.db.refresh(booking)
        return booking

    def update(self, booking: Booking) -> Booking:
        self.db.commit()
        self.db.refresh(booking)
        return booking

    def find_conflicts(
        self,
        room_id: str,
        start_time: datetime,
        end_time: datetime,
        exclude_id: Optional[str] = None,
    ) -> List[Booking]:
        """Approved bookings of ``room_id`` overlapping ``[start_time, end_time)``."""
        query = self.db.query(Booking).filter(
            Booking.room_id == room_id,
            Booking.status == BookingStatus.approved,
            Booking.start_time < end_time,
            Booking.end_time > start_time,
        )
        if exclude_id:
            query = query.filter(Booking.id != exclude_id)
        return query.all()
