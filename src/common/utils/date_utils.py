# File: common/utils/date_utils.py

from datetime import datetime, timedelta, timezone
from typing import Optional


def utc_now() -> datetime:
    """Returns current UTC time as aware datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treats naive datetimes (as stored by some drivers) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_past(moment: datetime, now: Optional[datetime] = None) -> bool:
    """Returns True once `now` is strictly later than `moment`."""
    return (now or utc_now()) > as_utc(moment)


def add_minutes(base: Optional[datetime], minutes: int) -> datetime:
    """Adds minutes to given datetime (or now)."""
    base_time = base or utc_now()
    return base_time + timedelta(minutes=minutes)


def add_days(base: Optional[datetime], days: int) -> datetime:
    base_time = base or utc_now()
    return base_time + timedelta(days=days)
