from functools import lru_cache
import os
from pydantic import BaseModel, Field


class Settings(BaseModel):
    env: str = Field(default="dev", alias="ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    timezone: str = Field(default="Europe/Madrid", alias="TIMEZONE")

    database_url: str = Field(
        default="sqlite:///./data/rooms_booking.db", alias="DATABASE_URL"
    )

    frontend_url: str = Field(default="http://localhost:3000", alias="FRONTEND_URL")

    email_from: str = Field(default="noreply@example.com", alias="EMAIL_FROM")
    notification_email_domain: str = Field(
        default="example.com", alias="NOTIFICATION_EMAIL_DOMAIN"
    )
    notification_workers: int = Field(default=2, alias="NOTIFICATION_WORKERS")

    smtp_host: str = Field(default="", alias="SMTP_HOST")
    smtp_port: int = Field(default=587, alias="SMTP_PORT")
    smtp_user: str = Field(default="", alias="SMTP_USER")
    smtp_password: str = Field(default="", alias="SMTP_PASSWORD")
    smtp_use_tls: bool = Field(default=True, alias="SMTP_USE_TLS")
    smtp_timeout: float = Field(default=10.0, alias="SMTP_TIMEOUT")

    seed_sample_data: bool = Field(default=False, alias="SEED_SAMPLE_DATA")

    class Config:
        populate_by_name = True


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(**os.environ)
