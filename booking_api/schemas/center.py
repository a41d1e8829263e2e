from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

PHONE_PATTERN = r"^[\d\s\-\+\(\)]+$"


def _blank_to_none(value):
    if isinstance(value, str) and value == "":
        return None
    return value


class CenterBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    address: str = Field(min_length=1, max_length=200)
    phone: Optional[str] = Field(default=None, max_length=20, pattern=PHONE_PATTERN)
    email: Optional[EmailStr] = None
    description: Optional[str] = Field(default=None, max_length=500)

    @field_validator("phone", "email", mode="before")
    @classmethod
    def allow_blank(cls, value):
        return _blank_to_none(value)


class CenterCreate(CenterBase):
    pass


class CenterUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    address: Optional[str] = Field(default=None, min_length=1, max_length=200)
    phone: Optional[str] = Field(default=None, max_length=20, pattern=PHONE_PATTERN)
    email: Optional[EmailStr] = None
    description: Optional[str] = Field(default=None, max_length=500)

    @field_validator("phone", "email", mode="before")
    @classmethod
    def allow_blank(cls, value):
        return _blank_to_none(value)


class CenterResponse(BaseModel):
    id: str
    name: str
    address: str
    phone: Optional[str] = None
    email: Optional[str] = None
    description: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
