from datetime import datetime, time, timedelta, timezone
from typing import Optional

# All timestamps are stored as naive UTC.


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def start_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time.min)


def end_of_day(value: datetime) -> datetime:
    """Last representable instant of the calendar day of `value`."""
    return start_of_day(value) + timedelta(days=1) - timedelta(microseconds=1)
