from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field
from booking_api.models.room import RoomStatus


class RoomBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    center: str = Field(min_length=1, max_length=100)
    capacity: int = Field(ge=1, le=1000)
    status: RoomStatus = RoomStatus.available
    description: Optional[str] = Field(default=None, max_length=500)


class RoomCreate(RoomBase):
    pass


class RoomUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    center: Optional[str] = Field(default=None, min_length=1, max_length=100)
    capacity: Optional[int] = Field(default=None, ge=1, le=1000)
    status: Optional[RoomStatus] = None
    description: Optional[str] = Field(default=None, max_length=500)


class RoomResponse(RoomBase):
    id: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
