from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID
from pydantic import BaseModel, EmailStr, Field
from booking_api.models.notification import NotificationStatus, NotificationType


class NotificationCreate(BaseModel):
    user_id: UUID
    booking_id: str = Field(min_length=1, max_length=36)
    type: NotificationType
    title: str = Field(min_length=1, max_length=200)
    message: str = Field(min_length=1, max_length=1000)
    email: EmailStr
    details: Optional[Dict[str, Any]] = None


class NotificationUpdate(BaseModel):
    status: Optional[NotificationStatus] = None
    sent_at: Optional[datetime] = None
    details: Optional[Dict[str, Any]] = None


class NotificationResponse(BaseModel):
    id: str
    user_id: str
    booking_id: str
    type: NotificationType
    title: str
    message: str
    email: str
    status: NotificationStatus
    sent_at: Optional[datetime] = None
    details: Optional[Dict[str, Any]] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
