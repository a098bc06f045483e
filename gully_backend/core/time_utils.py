# gully_backend/core/time_utils.py
# Datetimes are handled as timezone-aware UTC. Everything coming in is normalized here.

from datetime import datetime, date, time, timedelta
from typing import Tuple

import pytz
from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator

utc = pytz.utc


def to_utc(value: datetime) -> datetime:
    """
    Normalize a datetime to aware UTC.
    Naive input is assumed to already be UTC.
    """
    if value.tzinfo is None:
        return utc.localize(value)
    return value.astimezone(utc)


def day_window(day: date) -> Tuple[datetime, datetime]:
    """[00:00, next day 00:00) of a calendar day in UTC."""
    start = utc.localize(datetime.combine(day, time.min))
    return start, start + timedelta(days=1)


def utcnow() -> datetime:
    return datetime.now(utc)


class UTCDateTime(TypeDecorator):
    """
    DateTime column that always binds aware UTC and always loads aware UTC.
    SQLite keeps no offset, so loaded naive values are read back as UTC.
    """
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return to_utc(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return to_utc(value)
