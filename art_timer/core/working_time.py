"""Working-day counts and minute durations between instants."""
from collections import namedtuple
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from art_timer.core.config import FIXED_TIMEZONE
from art_timer.core.utils import parse_iso, to_local_date

RemainingTime = namedtuple('RemainingTime', ['hours', 'minutes'])


def duration_minutes(start, end):
    """Signed minutes from start to end; negative when end is earlier."""
    start_dt = _comparable(parse_iso(start))
    end_dt = _comparable(parse_iso(end))
    return (end_dt - start_dt).total_seconds() / 60


def working_days(start, end):
    """Count Monday-Friday dates in the inclusive range [start, end].

    Time of day is ignored. An inverted range returns 0.
    """
    current = to_local_date(start)
    last = to_local_date(end)
    total = 0
    while current <= last:
        if current.weekday() < 5:
            total += 1
        current += timedelta(days=1)
    return total


def is_working_day(value):
    return to_local_date(value).weekday() < 5


def fixed_zone_now(now=None):
    """Return `now` as an aware datetime in the fixed timezone."""
    tz = ZoneInfo(FIXED_TIMEZONE)
    if now is None:
        return datetime.now(tz)
    return _comparable(parse_iso(now)).astimezone(tz)


def fixed_zone_datetime(value):
    """Return a period boundary as an aware datetime in the fixed timezone.

    Naive values are wall-clock times in the fixed timezone, so a date-only
    boundary like "2025-01-06" means the same day on every host.
    """
    tz = ZoneInfo(FIXED_TIMEZONE)
    dt = parse_iso(value)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


def remaining_time_in_fixed_day(now=None):
    """Hours and minutes left until 23:59:59.999 in the fixed timezone."""
    local_now = fixed_zone_now(now)
    end_of_day = local_now.replace(hour=23, minute=59, second=59, microsecond=999000)
    remaining = max((end_of_day - local_now).total_seconds(), 0)

    hours = int(remaining // 3600)
    minutes = int((remaining % 3600) // 60)
    return RemainingTime(hours, minutes)


def _comparable(dt):
    # Naive values are host-local wall-clock times.
    if dt.tzinfo is None:
        return dt.astimezone(timezone.utc)
    return dt
