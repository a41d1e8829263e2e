from datetime import datetime
from typing import Literal, Optional
from uuid import UUID
from pydantic import BaseModel, Field, field_validator, model_validator
from booking_api.models.booking import BookingStatus
from booking_api.utils.validation_helpers import (
    normalize_time,
    validate_future_time,
    validate_time_range,
)


class BookingCreate(BaseModel):
    room_id: str = Field(min_length=1, max_length=100)
    user_id: UUID
    start_time: datetime
    end_time: datetime
    purpose: str = Field(min_length=1, max_length=200)
    attendees: Optional[int] = Field(default=None, ge=1, le=1000)
    status: Literal["pending"] = "pending"

    @field_validator("start_time")
    @classmethod
    def check_start_time(cls, value):
        return validate_future_time(value)

    @field_validator("end_time")
    @classmethod
    def check_end_time(cls, value):
        return normalize_time(value)

    @model_validator(mode="after")
    def check_time_range(self):
        validate_time_range(self.start_time, self.end_time)
        return self


class BookingUpdate(BaseModel):
    room_id: Optional[str] = Field(default=None, min_length=1, max_length=100)
    user_id: Optional[UUID] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    purpose: Optional[str] = Field(default=None, min_length=1, max_length=200)
    attendees: Optional[int] = Field(default=None, ge=1, le=1000)

    @field_validator("start_time")
    @classmethod
    def check_start_time(cls, value):
        return validate_future_time(value)

    @field_validator("end_time")
    @classmethod
    def check_end_time(cls, value):
        return normalize_time(value)

    @model_validator(mode="after")
    def check_time_range(self):
        validate_time_range(self.start_time, self.end_time)
        return self


class BookingApproval(BaseModel):
    status: Literal["approved", "rejected", "cancelled"]
    reason: Optional[str] = Field(default=None, max_length=500)


class BookingReschedule(BaseModel):
    room_id: Optional[str] = Field(default=None, min_length=1, max_length=100)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    purpose: Optional[str] = Field(default=None, min_length=1, max_length=200)
    attendees: Optional[int] = Field(default=None, ge=1, le=1000)
    reason: Optional[str] = Field(default=None, max_length=500)

    @field_validator("start_time")
    @classmethod
    def check_start_time(cls, value):
        return validate_future_time(value)

    @field_validator("end_time")
    @classmethod
    def check_end_time(cls, value):
        return normalize_time(value)

    @model_validator(mode="after")
    def check_not_empty(self):
        if not self.model_dump(exclude_none=True):
            raise ValueError("At least one field must be provided to reschedule a booking")
        validate_time_range(self.start_time, self.end_time)
        return self


class BookingResponse(BaseModel):
    id: str
    room_id: str
    user_id: str
    start_time: datetime
    end_time: datetime
    purpose: str
    attendees: Optional[int] = None
    status: BookingStatus
    approval_reason: Optional[str] = None
    reschedule_reason: Optional[str] = None
    rescheduled_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
