import logging
import smtplib
import ssl
import uuid
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from email.message import EmailMessage
from functools import lru_cache
from html import escape
from typing import Dict, Optional
from zoneinfo import ZoneInfo
from sqlalchemy.orm import Session
from booking_api.config import Settings, get_settings
from booking_api.db import SessionLocal, utc_now
from booking_api.models.notification import (
    Notification,
    NotificationStatus,
    NotificationType,
)
from booking_api.schemas.booking import BookingResponse

logger = logging.getLogger(__name__)

STATUS_LABELS = {
    "approved": "approved",
    "rejected": "rejected",
    "cancelled": "cancelled",
}

CHANGE_LABELS = {
    "start_time": "New start time",
    "end_time": "New end time",
    "room_id": "New room",
    "purpose": "New purpose",
    "attendees": "Attendees",
}

SIGNATURE = "Kind regards,\nThe room management team"


def format_datetime(value, tz_name: Optional[str] = None) -> str:
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    tz = ZoneInfo(tz_name or get_settings().timezone)
    return value.astimezone(tz).strftime("%d/%m/%Y %H:%M")


def _booking_lines(booking: BookingResponse):
    lines = [
        f"Booking ID: {booking.id}",
        f"Room: {booking.room_id}",
        f"Start: {format_datetime(booking.start_time)}",
        f"End: {format_datetime(booking.end_time)}",
        f"Purpose: {booking.purpose}",
    ]
    if booking.attendees:
        lines.append(f"Attendees: {booking.attendees}")
    return lines


def _html(title: str, intro: str, lines, extra_title=None, extra_lines=()) -> str:
    body = "".join(f"<p>{escape(str(line))}</p>" for line in lines)
    extra = ""
    if extra_lines:
        extra = f"<h3>{extra_title}</h3>" + "".join(
            f"<p>{escape(str(line))}</p>" for line in extra_lines
        )
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        f"<h2>{title}</h2><p>{intro}</p>"
        f'<div style="background-color: #f5f5f5; padding: 15px;">{body}</div>'
        f"{extra}<p>{SIGNATURE.replace(chr(10), '<br>')}</p></div>"
    )


def build_reschedule_email(booking: BookingResponse, changes: Dict) -> Dict[str, str]:
    change_lines = []
    for field, change in changes.items():
        new = change["new"]
        if field in ("start_time", "end_time"):
            new = format_datetime(new)
        change_lines.append(f"{CHANGE_LABELS.get(field, field)}: {new}")
    intro = "Your booking has been modified by the room manager."
    lines = _booking_lines(booking)
    text = "\n".join(["Your booking has been rescheduled", "", intro, ""] + lines)
    if change_lines:
        text += "\n\nChanges:\n" + "\n".join(change_lines)
    text += "\n\n" + SIGNATURE
    return {
        "title": "Booking rescheduled",
        "message": (
            f"Your booking has been rescheduled. Room: {booking.room_id}, "
            f"Date: {format_datetime(booking.start_time)}"
        ),
        "subject": "Booking rescheduled",
        "text": text,
        "html": _html("Your booking has been rescheduled", intro, lines, "Changes", change_lines),
    }


def build_status_email(booking: BookingResponse, status: str, reason: Optional[str]) -> Dict[str, str]:
    label = STATUS_LABELS.get(status, status)
    intro = f"Your booking has been {label}."
    lines = _booking_lines(booking)
    reason_lines = [reason] if reason else []
    text = "\n".join(["Booking status updated", "", intro, ""] + lines)
    if reason:
        text += f"\n\nReason: {reason}"
    text += "\n\n" + SIGNATURE
    return {
        "title": f"Booking {label}",
        "message": intro,
        "subject": f"Booking {label}",
        "text": text,
        "html": _html("Booking status updated", intro, lines, "Reason", reason_lines),
    }


class Mailer:
    """SMTP delivery. Without ``SMTP_HOST`` messages are only logged."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def send(self, to: str, subject: str, text: str, html: Optional[str] = None) -> str:
        msg = EmailMessage()
        msg["From"] = self.settings.email_from
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content(text)
        if html:
            msg.add_alternative(html, subtype="html")

        if not self.settings.smtp_host:
            logger.info(f"SMTP host is not configured; email to {to} logged only: {subject}")
            logger.debug(text)
            return f"logged-{uuid.uuid4()}"

        context = ssl.create_default_context()
        with smtplib.SMTP(
            self.settings.smtp_host,
            self.settings.smtp_port,
            timeout=self.settings.smtp_timeout,
        ) as server:
            if self.settings.smtp_use_tls:
                server.starttls(context=context)
            if self.settings.smtp_user:
                server.login(self.settings.smtp_user, self.settings.smtp_password)
            server.send_message(msg)
        return msg.get("Message-ID") or f"smtp-{uuid.uuid4()}"


def send_notification(db: Session, notification: Notification, mailer: Mailer) -> Notification:
    """Attempts delivery and records the outcome on the notification row."""
    content = (notification.details or {}).get("email")
    if not isinstance(content, dict):
        content = {}
    try:
        mailer.send(
            notification.email,
            content.get("subject") or notification.title,
            content.get("text") or notification.message,
            content.get("html"),
        )
    except Exception:
        logger.exception(f"Error sending notification {notification.id} to {notification.email}")
        notification.status = NotificationStatus.failed
    else:
        notification.status = NotificationStatus.sent
        notification.sent_at = utc_now()
        logger.info(f"Notification {notification.id} sent to {notification.email}")
    notification.updated_at = utc_now()
    db.commit()
    db.refresh(notification)
    return notification


class EmailNotificationSink:
    """
    Fire-and-forget booking notifications.

    ``notify`` only queues the job; composing, storing and delivering the email
    happen on the executor with a session of their own.
    """

    def __init__(self, session_factory=SessionLocal, mailer: Optional[Mailer] = None, executor=None):
        settings = get_settings()
        self.session_factory = session_factory
        self.mailer = mailer or Mailer(settings)
        self.executor = executor or ThreadPoolExecutor(
            max_workers=settings.notification_workers, thread_name_prefix="notify"
        )

    def notify(self, booking: BookingResponse, kind: str, details: Optional[Dict], email: str):
        return self.executor.submit(self._deliver, booking, kind, details or {}, email)

    def _deliver(self, booking: BookingResponse, kind: str, details: Dict, email: str):
        try:
            if kind == "rescheduled":
                content = build_reschedule_email(booking, details.get("changes", {}))
            else:
                content = build_status_email(booking, kind, details.get("reason"))
            db = self.session_factory()
            try:
                notification = Notification(
                    user_id=booking.user_id,
                    booking_id=booking.id,
                    type=NotificationType(f"booking_{kind}"),
                    title=content["title"],
                    message=content["message"],
                    email=email,
                    details={**details, "email": {k: content[k] for k in ("subject", "text", "html")}},
                )
                db.add(notification)
                db.commit()
                db.refresh(notification)
                return send_notification(db, notification, self.mailer).status
            finally:
                db.close()
        except Exception:
            logger.exception(f"Notification job failed for booking {booking.id} ({kind})")
            return NotificationStatus.failed

    def shutdown(self, wait: bool = False):
        self.executor.shutdown(wait=wait)


@lru_cache(maxsize=1)
def get_notifier() -> EmailNotificationSink:
    return EmailNotificationSink()


@lru_cache(maxsize=1)
def get_mailer() -> Mailer:
    return Mailer(get_settings())
