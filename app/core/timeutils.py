from datetime import date, datetime, timedelta, timezone
from typing import Optional

from app.core.config import settings


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def local_start_of_day(now: datetime, utc_offset_minutes: Optional[int] = None) -> datetime:
    """
    Midnight of the city's local calendar day containing ``now``, returned as
    naive UTC so it can be compared with stored event times.
    """
    if utc_offset_minutes is None:
        utc_offset_minutes = settings.city_utc_offset_minutes
    offset = timedelta(minutes=utc_offset_minutes)
    local_now = to_naive_utc(now) + offset
    return local_now.replace(hour=0, minute=0, second=0, microsecond=0) - offset


def calculate_age(dob: Optional[date], today: Optional[date] = None) -> Optional[int]:
    """Whole years between ``dob`` and ``today``; None when no birth date is known."""
    if dob is None:
        return None
    today = today or utcnow().date()
    age = today.year - dob.year
    # Birthday not reached yet this year
    if (today.month, today.day) < (dob.month, dob.day):
        age -= 1
    return age
