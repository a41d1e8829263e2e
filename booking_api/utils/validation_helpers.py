from datetime import datetime, timezone


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and normalise aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def validate_future_time(value):
    if value is None:
        return value
    value = as_utc(value)
    if value <= datetime.now(timezone.utc):
        raise ValueError("Start time must be in the future")
    return value


def validate_time_range(start_time, end_time):
    if start_time is not None and end_time is not None and end_time <= start_time:
        raise ValueError("End time must be after start time")


def normalize_time(value):
    if value is None:
        return value
    return as_utc(value)
