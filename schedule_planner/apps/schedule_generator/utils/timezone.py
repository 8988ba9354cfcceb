'''
Name: apps/schedule_generator/utils/timezone.py
Description: Timezone helpers. Instants are kept tz-aware in UTC; wall-clock
             values (time of day, calendar dates) are interpreted in the
             schedule's local timezone.
Authors: Schedule planner maintainers
Created: October 7, 2026
Last Modified: October 19, 2026
'''

import logging
from datetime import datetime, date, time, timedelta
from typing import Optional

import pytz
from pytz import UTC

from .constants import LOGGER_NAME, get_setting

logger = logging.getLogger(LOGGER_NAME)


def get_local_tz(name=None):
    """
    Return a pytz timezone. Accepts a tz name, a tzinfo object or None
    (falls back to the configured scheduling timezone).
    """
    if name is None:
        name = get_setting("TIME_ZONE")
    if not isinstance(name, str):
        return name
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        logger.warning("get_local_tz: unknown timezone %r, falling back to UTC", name)
        return UTC


def to_datetime(d: date, t: Optional[time], tzinfo_local=None) -> datetime:
    """
    Combine date + time into a timezone-aware datetime in UTC.
    The date+time is a wall-clock value in tzinfo_local. If time is None use midnight.
    """
    base = datetime.combine(d, t if t else time.min)
    local_tz = get_local_tz(tzinfo_local)
    # pytz zones need localize; plain tzinfo objects can be attached directly
    if hasattr(local_tz, "localize"):
        local_dt = local_tz.localize(base)
    else:
        local_dt = base.replace(tzinfo=local_tz)
    return local_dt.astimezone(UTC)


def to_utc(x, tzinfo_local=None) -> Optional[datetime]:
    """
    Accepts a datetime or ISO string and returns a timezone-aware UTC datetime.
    Returns None if x is empty. Naive values are treated as local time.
    """
    if not x:
        return None
    if not isinstance(x, datetime):
        x = datetime.fromisoformat(str(x))
    if x.tzinfo:
        return x.astimezone(UTC)
    local_tz = get_local_tz(tzinfo_local)
    if hasattr(local_tz, "localize"):
        return local_tz.localize(x).astimezone(UTC)
    return x.replace(tzinfo=local_tz).astimezone(UTC)


def local_date(dt: datetime, tzinfo_local=None) -> date:
    return dt.astimezone(get_local_tz(tzinfo_local)).date()


def local_time(dt: datetime, tzinfo_local=None) -> time:
    return dt.astimezone(get_local_tz(tzinfo_local)).time().replace(tzinfo=None)


def iter_local_dates(window_start: datetime, window_end: datetime, tzinfo_local=None):
    """Yield every local calendar date touched by [window_start, window_end)."""
    d = local_date(window_start, tzinfo_local)
    last = local_date(window_end - timedelta(microseconds=1), tzinfo_local)
    one_day = timedelta(days=1)
    while d <= last:
        yield d
        d = d + one_day


def parse_time_of_day(val) -> Optional[time]:
    """Accept a time object or an "HH:MM"/"HH:MM:SS" string."""
    if not val:
        return None
    if isinstance(val, time):
        return val
    return time.fromisoformat(str(val))
