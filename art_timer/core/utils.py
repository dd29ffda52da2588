from datetime import date, datetime, timezone
import uuid


def utc_now():
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_iso(value):
    """Parse an ISO date or datetime string, accepting a trailing 'Z'.

    Date-only strings become midnight datetimes. Naive results are host-local
    wall-clock times.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    if not isinstance(value, str):
        raise ValueError(f"Expected an ISO date string, got {value!r}")
    return datetime.fromisoformat(value.strip().replace('Z', '+00:00'))


def format_iso_utc(dt):
    """Format an instant as an ISO UTC string with a 'Z' suffix."""
    return to_utc(dt).isoformat().replace('+00:00', 'Z')


def to_utc(dt):
    """Convert a datetime (naive means local time) to an aware UTC datetime."""
    return parse_iso(dt).astimezone(timezone.utc)


def to_local_date(value):
    """Return the host-local calendar date of a date, datetime or ISO string."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    dt = parse_iso(value)
    if dt.tzinfo is not None:
        dt = dt.astimezone()
    return dt.date()


def format_time_remaining(milliseconds):
    """Format a millisecond span as '2d 3h 4m', dropping days when zero."""
    total_seconds = int(milliseconds // 1000)
    days = total_seconds // (24 * 3600)
    hours = (total_seconds % (24 * 3600)) // 3600
    minutes = (total_seconds % 3600) // 60

    if days > 0:
        return f"{days}d {hours}h {minutes}m"
    return f"{hours}h {minutes}m"


def format_duration_text(minutes):
    """Format a minute count as '1h 30m', or '45m' under an hour."""
    hours = int(minutes // 60)
    mins = int(minutes % 60)
    return f"{hours}h {mins}m" if hours > 0 else f"{mins}m"


def format_clock(seconds):
    """Format a second count as HH:MM:SS, wrapping at 24 hours."""
    seconds = int(seconds) % (24 * 3600)
    return f"{seconds // 3600:02d}:{(seconds % 3600) // 60:02d}:{seconds % 60:02d}"


def generate_id():
    """Generate a unique ID for alerts."""
    return str(uuid.uuid4())
