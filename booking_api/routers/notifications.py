import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from booking_api.db import get_db, utc_now
from booking_api.models.notification import Notification
from booking_api.schemas.notification import (
    NotificationCreate,
    NotificationResponse,
    NotificationUpdate,
)
from booking_api.utils.notifier import Mailer, get_mailer, send_notification

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/notifications",
    tags=["notifications"],
)


def _get_notification_or_404(db: Session, notification_id: str) -> Notification:
    notification = db.query(Notification).filter(Notification.id == notification_id).first()
    if not notification:
        logger.error(f"Notification not found: {notification_id}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    return notification


@router.get("/", response_model=List[NotificationResponse])
def get_notifications(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return (
        db.query(Notification)
        .order_by(Notification.created_at.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


@router.get("/{notification_id}", response_model=NotificationResponse)
def get_notification(notification_id: str, db: Session = Depends(get_db)):
    return _get_notification_or_404(db, notification_id)


@router.post("/", response_model=NotificationResponse, status_code=status.HTTP_201_CREATED)
def create_notification(
    notification: NotificationCreate,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    """
    Store a notification and try to deliver it right away.
    The response carries the delivery outcome in **status**.
    """
    data = notification.model_dump()
    data["user_id"] = str(data["user_id"])
    db_notification = Notification(**data)
    db.add(db_notification)
    db.commit()
    db.refresh(db_notification)
    return send_notification(db, db_notification, mailer)


@router.put("/{notification_id}", response_model=NotificationResponse)
def update_notification(
    notification_id: str,
    notification_update: NotificationUpdate,
    db: Session = Depends(get_db),
):
    db_notification = _get_notification_or_404(db, notification_id)

    update_data = notification_update.model_dump(exclude_unset=True, exclude_none=True)
    for key, value in update_data.items():
        setattr(db_notification, key, value)
    db_notification.updated_at = utc_now()

    db.commit()
    db.refresh(db_notification)
    return db_notification


@router.post("/{notification_id}/resend", response_model=NotificationResponse)
def resend_notification(
    notification_id: str,
    db: Session = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
):
    db_notification = _get_notification_or_404(db, notification_id)
    logger.debug(f"Resending notification: {notification_id}")
    return send_notification(db, db_notification, mailer)


@router.delete("/{notification_id}", response_model=NotificationResponse)
def delete_notification(notification_id: str, db: Session = Depends(get_db)):
    db_notification = _get_notification_or_404(db, notification_id)
    removed = NotificationResponse.model_validate(db_notification)

    db.delete(db_notification)
    db.commit()
    logger.debug(f"Deleted notification: {notification_id}")
    return removed
