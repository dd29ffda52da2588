"""Progress of the ART and its activities, and per-session countdowns.

A progress value is the share of working time still left in a period,
expressed as a percentage:

    remaining_days * (100 / total_days) + hours / 24 + minutes / 1440

where ``hours`` and ``minutes`` are what is left of the current day in the
fixed timezone. The value never goes below zero. Nothing here is persisted:
callers recompute a snapshot on each tick.
"""
import math
from collections import namedtuple
from enum import Enum

from art_timer.core.calendar import art_window
from art_timer.core.errors import InvalidCalendarRange
from art_timer.core.utils import format_clock, format_duration_text, format_time_remaining, to_utc, utc_now
from art_timer.core.working_time import (
    RemainingTime, duration_minutes, fixed_zone_datetime, fixed_zone_now, is_working_day,
    remaining_time_in_fixed_day, working_days
)


class ProgressState(Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


ProgressSnapshot = namedtuple('ProgressSnapshot', [
    'state', 'total_days', 'elapsed_days', 'remaining_days', 'remaining_time',
    'percentage', 'text', 'circumference', 'dash_offset'
])

SessionCountdown = namedtuple('SessionCountdown', ['state', 'text', 'percentage', 'seconds_left'])


def progress_state(start, end, now):
    now = to_utc(now)
    if now <= to_utc(start):
        return ProgressState.NOT_STARTED
    if now > to_utc(end):
        return ProgressState.COMPLETED
    return ProgressState.IN_PROGRESS


def compute_progress(start, end, now=None, circle_radius=0):
    """Compute the remaining-progress snapshot for the period [start, end].

    Day counts and the fraction of today both follow the fixed timezone;
    naive boundaries are read as wall-clock times there. A completed period
    uses the same arithmetic as one in progress, so its last day keeps
    counting down until the value reaches zero.

    Raises:
        InvalidCalendarRange: the period contains no working days.
    """
    now = now or utc_now()
    start_at = fixed_zone_datetime(start)
    end_at = fixed_zone_datetime(end)
    total_days = working_days(start_at.date(), end_at.date())
    if total_days <= 0:
        raise InvalidCalendarRange(f"No working days between {start} and {end}")

    decrement_per_day = 100 / total_days
    state = progress_state(start_at, end_at, now)

    elapsed_days = 0
    remaining_days = total_days
    remaining_time = RemainingTime(0, 0)
    if state is not ProgressState.NOT_STARTED:
        today = fixed_zone_now(now).date()
        elapsed_days = max(working_days(start_at.date(), today) - 1, 0)
        remaining_days = total_days - elapsed_days - 1
        if is_working_day(today):
            remaining_time = remaining_time_in_fixed_day(now)

    total_remaining = (remaining_days * decrement_per_day
                       + remaining_time.hours / 24
                       + remaining_time.minutes / (24 * 60))
    percentage = max(total_remaining, 0)
    if percentage == 0:
        remaining_days = 0
        remaining_time = RemainingTime(0, 0)

    circumference = 2 * math.pi * circle_radius
    return ProgressSnapshot(
        state=state,
        total_days=total_days,
        elapsed_days=elapsed_days,
        remaining_days=remaining_days,
        remaining_time=remaining_time,
        percentage=percentage,
        text=f"{remaining_days} Days {remaining_time.hours} Hours {remaining_time.minutes} Minutes left",
        circumference=circumference,
        dash_offset=circumference * (1 - percentage / 100),
    )


def period_progress(period, now=None, circle_radius=0):
    return compute_progress(period.start_date, period.end_date, now=now, circle_radius=circle_radius)


def art_progress(calendar, now=None, circle_radius=0):
    """Progress across the whole ART window."""
    start, end = art_window(calendar)
    return compute_progress(start, end, now=now, circle_radius=circle_radius)


def session_countdown(session, now=None):
    """Status of a session's countdown bar: pending, running or completed."""
    now = now or utc_now()
    start, end = session.start, session.end
    total_minutes = duration_minutes(start, end)
    total_text = format_duration_text(total_minutes)
    state = progress_state(start, end, now)

    if state is ProgressState.NOT_STARTED:
        until_start = duration_minutes(now, start) * 60 * 1000
        return SessionCountdown(
            state, f"Starts in {format_time_remaining(until_start)} ({total_text})", 100.0, total_minutes * 60
        )
    if state is ProgressState.COMPLETED:
        return SessionCountdown(state, "Completed", 100.0, 0)

    seconds_left = duration_minutes(now, end) * 60
    percentage = (seconds_left / (total_minutes * 60)) * 100 if total_minutes > 0 else 0.0
    return SessionCountdown(state, f"{format_clock(seconds_left)} remaining", percentage, seconds_left)
