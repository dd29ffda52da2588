import logging

from art_timer.core.errors import SessionNotFound
from art_timer.core.utils import parse_iso, to_local_date, to_utc, utc_now

logger = logging.getLogger(__name__)


def iter_sessions(calendar):
    """Yield (activity, session) pairs across the planning and innovation weeks."""
    for activity in calendar.activities:
        for session in activity.sessions:
            yield activity, session


def find_session_by_name(calendar, session_name, day_label):
    """Find a session by name within the activity for a given day.

    The day label is compared as a trimmed string; the session name is
    compared case-insensitively after trimming. Names may repeat on other
    days, so the lookup never crosses activities.

    Returns:
        An (activity, session) tuple for the first match.

    Raises:
        SessionNotFound: no activity has that day label, or none of its
            sessions has that name.
    """
    wanted_day = str(day_label).strip() if day_label is not None else ''
    wanted_name = str(session_name or '').strip().lower()

    for activity in calendar.activities:
        if activity.day is None or not wanted_day or activity.day_label != wanted_day:
            continue
        for session in activity.sessions:
            if isinstance(session.name, str) and session.name.strip().lower() == wanted_name:
                return activity, session

    logger.warning("Could not find session %r on day %r", session_name, day_label)
    raise SessionNotFound(session_name, day_label)


def is_within_date_range(current, start, end):
    """Check whether a date falls within [start, end], compared as local dates."""
    return to_local_date(start) <= to_local_date(current) <= to_local_date(end)


def identify_current_activity(planning_and_innovation, iterations, now=None):
    """Return the period containing `now`: planning week, innovation week, then iterations."""
    now = now or utc_now()

    planning_week = planning_and_innovation[0]
    if is_within_date_range(now, planning_week.start_date, planning_week.end_date):
        return planning_week

    innovation_week = planning_and_innovation[1]
    if is_within_date_range(now, innovation_week.start_date, innovation_week.end_date):
        return innovation_week

    for iteration in iterations:
        if is_within_date_range(now, iteration.start_date, iteration.end_date):
            return iteration

    return None


def current_session(calendar, now=None):
    """Return the (activity, session) running at `now`, or None."""
    now = to_utc(now or utc_now())
    for activity, session in iter_sessions(calendar):
        if to_utc(session.start) <= now <= to_utc(session.end):
            return activity, session
    return None


def enabled_alert_count(session, pending_only=False):
    """Count the session's alerts whose timer is enabled.

    With `pending_only`, alerts that have already fired are left out.
    """
    alerts = getattr(session, 'alerts', None)
    if alerts is None and isinstance(session, dict):
        alerts = session.get('alerts')
    if not isinstance(alerts, list):
        return 0
    return sum(1 for alert in alerts if _timer_enabled(alert) and not (pending_only and _has_fired(alert)))


def is_alert_set(session):
    """True iff at least one of the session's alerts is enabled."""
    return enabled_alert_count(session) > 0


def _timer_enabled(alert):
    if isinstance(alert, dict):
        return alert.get('timerEnabled') == "true"
    return alert.enabled


def _has_fired(alert):
    if isinstance(alert, dict):
        return bool(alert.get('firedAt'))
    return alert.fired_at is not None


def art_window(calendar):
    """Return (start, end) of the whole ART as datetimes."""
    return parse_iso(calendar.start_date), parse_iso(calendar.end_date)
