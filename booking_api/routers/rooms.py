import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from booking_api.db import get_db, utc_now
from booking_api.models.room import Room
from booking_api.schemas.booking import BookingResponse
from booking_api.schemas.room import RoomCreate, RoomUpdate, RoomResponse
from booking_api.utils.repository import BookingRepository

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/rooms",
    tags=["rooms"],
)


def _get_room_or_404(db: Session, room_id: str) -> Room:
    room = db.query(Room).filter(Room.id == room_id).first()
    if not room:
        logger.error(f"Room not found: {room_id}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")
    return room


@router.post("/", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
def create_room(room: RoomCreate, db: Session = Depends(get_db)):
    """
    Create a new meeting room.
    """
    db_room = Room(**room.model_dump())
    db.add(db_room)
    db.commit()
    db.refresh(db_room)
    logger.debug(f"Created room: {db_room.id}")
    return db_room


@router.get("/", response_model=List[RoomResponse])
def get_rooms(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    """
    Retrieve a list of all meeting rooms.
    """
    rooms = db.query(Room).offset(skip).limit(limit).all()
    return rooms


@router.get("/{room_id}", response_model=RoomResponse)
def get_room(room_id: str, db: Session = Depends(get_db)):
    """
    Retrieve a specific meeting room by ID.
    """
    return _get_room_or_404(db, room_id)


@router.get("/{room_id}/bookings", response_model=List[BookingResponse])
def get_room_bookings(room_id: str, skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    """
    Retrieve the bookings of a meeting room ordered by start time.
    """
    _get_room_or_404(db, room_id)
    return BookingRepository(db).list(room_id=room_id, skip=skip, limit=limit)


@router.put("/{room_id}", response_model=RoomResponse)
def update_room(room_id: str, room_update: RoomUpdate, db: Session = Depends(get_db)):
    """
    Update a meeting room's details. An explicit null description clears it.
    """
    db_room = _get_room_or_404(db, room_id)

    update_data = room_update.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        if value is None and key != "description":
            continue
        setattr(db_room, key, value)
    db_room.updated_at = utc_now()

    db.commit()
    db.refresh(db_room)
    return db_room


@router.delete("/{room_id}", response_model=RoomResponse)
def delete_room(room_id: str, db: Session = Depends(get_db)):
    """
    Delete a meeting room and return the removed record.
    """
    db_room = _get_room_or_404(db, room_id)
    removed = RoomResponse.model_validate(db_room)

    db.delete(db_room)
    db.commit()
    logger.debug(f"Deleted room: {room_id}")
    return removed
