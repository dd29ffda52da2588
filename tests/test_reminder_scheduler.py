"""Tests for arming, firing and persisting session reminders."""

from __future__ import annotations

import json
from datetime import timedelta

import pytest
from PyQt6.QtCore import Qt

from art_timer.core.config import MAX_TIMER_INTERVAL_MS
from art_timer.core.errors import SessionNotFound
from art_timer.core.models import Alert, AlertState, TimerState
from art_timer.core.utils import format_iso_utc, to_utc, utc_now


@pytest.fixture
def business_context(store):
    return store.calendar.activities[0].sessions[0]


@pytest.fixture
def triggered(scheduler):
    events = []
    scheduler.reminderTriggered.connect(lambda day, name: events.append((day, name)))
    return events


def _add_alert(session, when, enabled=TimerState.ENABLED, message="Heads up"):
    alert = Alert(message, when, timer_enabled=enabled)
    session.alerts.append(alert)
    return alert


class TestScheduleAll:
    def test_recent_miss_fires_immediately(self, scheduler, business_context, notifier, triggered):
        now = utc_now()
        alert = _add_alert(business_context, now - timedelta(minutes=2))

        report = scheduler.schedule_all(now=now)

        assert report.fired == [alert]
        assert alert.state is AlertState.FIRED
        assert alert.fired_at == now
        notifier.notify.assert_called_once_with("Reminder: Business Context", "Heads up", "icon.ico")
        assert triggered == [("1", "Business Context")]

    def test_old_miss_is_skipped(self, scheduler, business_context, notifier, triggered):
        now = utc_now()
        alert = _add_alert(business_context, now - timedelta(minutes=10))

        report = scheduler.schedule_all(now=now)

        assert report.skipped == [alert]
        assert alert.state is AlertState.SKIPPED
        assert not scheduler.is_armed(alert.alert_id)
        notifier.notify.assert_not_called()
        assert triggered == []

    def test_future_alert_is_armed(self, scheduler, business_context, notifier):
        now = utc_now()
        alert = _add_alert(business_context, now + timedelta(hours=1))

        report = scheduler.schedule_all(now=now)

        assert report.armed == [alert]
        assert scheduler.is_armed(alert.alert_id)
        timer = scheduler.timer_for(alert.alert_id)
        assert timer.timerType() == Qt.TimerType.PreciseTimer
        assert 3_500_000 <= timer.remainingTime() <= 3_600_000
        notifier.notify.assert_not_called()

    def test_disabled_alert_is_ignored(self, scheduler, business_context, notifier):
        now = utc_now()
        alert = _add_alert(business_context, now - timedelta(minutes=1), enabled=TimerState.DISABLED)

        report = scheduler.schedule_all(now=now)

        assert report == ([], [], [])
        assert alert.state is AlertState.PENDING
        notifier.notify.assert_not_called()

    def test_rescheduling_does_not_double_arm(self, scheduler, business_context):
        now = utc_now()
        alert = _add_alert(business_context, now + timedelta(hours=1))

        scheduler.schedule_all(now=now)
        timer = scheduler.timer_for(alert.alert_id)
        report = scheduler.schedule_all(now=now)

        assert report.armed == []
        assert scheduler.timer_for(alert.alert_id) is timer
        assert len(scheduler.timers) == 1

    def test_fired_alert_is_not_fired_again(self, scheduler, business_context, notifier):
        now = utc_now()
        _add_alert(business_context, now - timedelta(minutes=1))

        scheduler.schedule_all(now=now)
        scheduler.schedule_all(now=now + timedelta(seconds=30))

        assert notifier.notify.call_count == 1

    def test_notifier_failure_still_signals(self, scheduler, business_context, notifier, triggered):
        notifier.notify.side_effect = RuntimeError("tray unavailable")
        now = utc_now()
        alert = _add_alert(business_context, now - timedelta(seconds=5))

        scheduler.schedule_all(now=now)

        assert alert.state is AlertState.FIRED
        assert triggered == [("1", "Business Context")]


class TestTimeout:
    def test_timeout_fires_and_releases_timer(self, scheduler, business_context, notifier, triggered):
        now = utc_now()
        alert = _add_alert(business_context, now + timedelta(minutes=5))
        scheduler.schedule_all(now=now)

        scheduler.clock = lambda: alert.alert_time
        scheduler._on_timeout(alert.alert_id)

        assert alert.state is AlertState.FIRED
        assert alert.alert_id not in scheduler.timers
        notifier.notify.assert_called_once()
        assert triggered == [("1", "Business Context")]

    def test_long_delay_is_chunked_and_rearmed(self, scheduler, business_context, notifier):
        now = utc_now()
        alert = _add_alert(business_context, now + timedelta(days=30))
        scheduler.schedule_all(now=now)

        timer = scheduler.timer_for(alert.alert_id)
        assert timer.interval() == MAX_TIMER_INTERVAL_MS

        scheduler.clock = lambda: alert.alert_time - timedelta(hours=1)
        scheduler._on_timeout(alert.alert_id)

        assert scheduler.is_armed(alert.alert_id)
        assert timer.interval() == 3_600_000
        notifier.notify.assert_not_called()

    def test_cancel(self, scheduler, business_context):
        now = utc_now()
        alert = _add_alert(business_context, now + timedelta(hours=2))
        scheduler.schedule_all(now=now)

        assert scheduler.cancel(alert.alert_id) is True
        assert not scheduler.is_armed(alert.alert_id)
        assert alert.state is AlertState.PENDING
        assert scheduler.cancel(alert.alert_id) is False


class TestSubmitReminder:
    def test_unknown_session_leaves_file_untouched(self, scheduler, calendar_file):
        before = calendar_file.read_bytes()

        with pytest.raises(SessionNotFound):
            scheduler.submit_reminder("Retrospective", "1", "never", minutes=5)

        assert calendar_file.read_bytes() == before

    def test_persists_alert_before_session_start(self, scheduler, business_context, calendar_file):
        added = []
        scheduler.reminderAdded.connect(lambda day, name: added.append((day, name)))
        expected_time = to_utc(business_context.start) - timedelta(hours=1, minutes=15)

        alert = scheduler.submit_reminder(" business context ", "1", "Prep slides", hours=1, minutes=15,
                                          now=expected_time - timedelta(hours=3))

        assert alert.alert_time == expected_time
        assert scheduler.is_armed(alert.alert_id)
        assert added == [("1", "Business Context")]

        written = json.loads(calendar_file.read_text(encoding="utf-8"))
        alerts = written["PI_1"]["PI_PlanningAndInnovation"][0]["activities"][0]["sessions"][0]["alerts"]
        assert alerts == [{
            "timerEnabled": "true",
            "message": "Prep slides",
            "alertTime": format_iso_utc(expected_time),
        }]

    def test_creates_alert_list_when_missing(self, scheduler, store, calendar_file):
        session = store.calendar.activities[0].sessions[1]
        assert session.alerts is None

        scheduler.submit_reminder("Team Breakouts", 1, "Find a room", days=1, now=to_utc(session.start))

        assert len(session.alerts) == 1
        written = json.loads(calendar_file.read_text(encoding="utf-8"))
        assert "alerts" in written["PI_1"]["PI_PlanningAndInnovation"][0]["activities"][0]["sessions"][1]

    def test_just_missed_offset_fires_at_once(self, scheduler, business_context, notifier, triggered):
        start = to_utc(business_context.start)

        alert = scheduler.submit_reminder("Business Context", "1", "Now!", minutes=10,
                                          now=start - timedelta(minutes=8))

        assert alert.state is AlertState.FIRED
        notifier.notify.assert_called_once_with("Reminder: Business Context", "Now!", "icon.ico")
        assert triggered == [("1", "Business Context")]

    def test_write_failure_rolls_back(self, scheduler, store, business_context, tmp_path):
        store.path = str(tmp_path)

        with pytest.raises(OSError):
            scheduler.submit_reminder("Business Context", "1", "lost", minutes=5)

        assert business_context.alerts == []
        assert scheduler.timers == {}
