import logging
from collections import namedtuple
from datetime import timedelta
from functools import partial

from PyQt6.QtCore import QObject, Qt, QTimer, pyqtSignal

from art_timer.core.calendar import find_session_by_name, iter_sessions
from art_timer.core.config import GRACE_WINDOW, MAX_TIMER_INTERVAL_MS, NOTIFICATION_ICON
from art_timer.core.models import Alert, AlertState
from art_timer.core.utils import to_utc, utc_now

logger = logging.getLogger(__name__)

ScheduleReport = namedtuple('ScheduleReport', ['armed', 'fired', 'skipped'])

# Early timeouts within this margin fire instead of re-arming.
_REARM_TOLERANCE = timedelta(seconds=1)


class ReminderScheduler(QObject):
    """Arms, fires and tracks one-shot session reminders.

    Every enabled alert is evaluated against the clock: future alerts get a
    single-shot QTimer, alerts missed by less than the grace window fire at
    once, older ones are skipped. Armed timers are kept in a registry keyed by
    alert id so they can be cancelled.
    """
    reminderAdded = pyqtSignal(str, str)
    reminderTriggered = pyqtSignal(str, str)

    def __init__(self, store, notifier=None, icon_path=NOTIFICATION_ICON, clock=utc_now, parent=None):
        super().__init__(parent)
        self.store = store
        self.notifier = notifier
        self.icon_path = icon_path
        self.clock = clock
        self.timers = {}
        self._targets = {}

    def schedule_all(self, calendar=None, now=None):
        """Arrange every enabled, unfired alert in the calendar.

        Alerts that already have a live timer are left untouched, so calling
        this again does not double-arm.
        """
        calendar = calendar or self.store.get_calendar()
        now = to_utc(now or self.clock())
        report = ScheduleReport([], [], [])

        for activity, session in iter_sessions(calendar):
            for alert in session.alerts or []:
                if not alert.enabled or alert.fired_at or alert.alert_id in self.timers:
                    continue
                outcome = self._arrange(activity, session, alert, now)
                if outcome is AlertState.ARMED:
                    report.armed.append(alert)
                elif outcome is AlertState.FIRED:
                    report.fired.append(alert)
                else:
                    report.skipped.append(alert)

        logger.info("Scheduled reminders: %d armed, %d fired, %d skipped",
                    len(report.armed), len(report.fired), len(report.skipped))
        return report

    def submit_reminder(self, session_name, day_label, message, days=0, hours=0, minutes=0, now=None):
        """Add a reminder that fires an offset before a session starts.

        Raises:
            SessionNotFound: no session matches; nothing is written.
            OSError: the calendar could not be written; the alert is dropped.
        """
        calendar = self.store.get_calendar()
        activity, session = find_session_by_name(calendar, session_name, day_label)

        offset = timedelta(days=int(days or 0), hours=int(hours or 0), minutes=int(minutes or 0))
        alert = Alert(message, to_utc(session.start) - offset)

        self.store.append_alert(calendar, session, alert)
        try:
            self.store.persist(calendar)
        except OSError:
            session.alerts.remove(alert)
            logger.error("Could not save reminder for %r", session.name)
            raise

        logger.info("Reminder for %r set at %s", session.name, alert.alert_time.isoformat())
        self._arrange(activity, session, alert, to_utc(now or self.clock()))
        self.reminderAdded.emit(activity.day_label, session.name)
        return alert

    def cancel(self, alert_id):
        """Stop an armed timer. Returns False when nothing was armed for that id."""
        timer = self.timers.pop(alert_id, None)
        target = self._targets.pop(alert_id, None)
        if timer is None:
            return False
        timer.stop()
        timer.deleteLater()
        if target is not None:
            target[2].state = AlertState.PENDING
        return True

    def cancel_all(self):
        for alert_id in list(self.timers):
            self.cancel(alert_id)

    def is_armed(self, alert_id):
        timer = self.timers.get(alert_id)
        return timer is not None and timer.isActive()

    def timer_for(self, alert_id):
        return self.timers.get(alert_id)

    def _arrange(self, activity, session, alert, now):
        delay = alert.alert_time - now
        if delay > timedelta(0):
            logger.debug("Scheduling alert for %r at %s", session.name, alert.alert_time.isoformat())
            self._arm(activity, session, alert, delay)
            return AlertState.ARMED

        if delay > -GRACE_WINDOW:
            logger.info("Missed alert for %r, triggering immediately", session.name)
            self._fire(activity, session, alert, now)
            return AlertState.FIRED

        alert.state = AlertState.SKIPPED
        logger.info("Alert for %r at %s is in the past, skipping", session.name, alert.alert_time.isoformat())
        return AlertState.SKIPPED

    def _arm(self, activity, session, alert, delay):
        timer = self.timers.get(alert.alert_id)
        if timer is None:
            timer = QTimer(self)
            timer.setSingleShot(True)
            timer.setTimerType(Qt.TimerType.PreciseTimer)
            timer.timeout.connect(partial(self._on_timeout, alert.alert_id))
            self.timers[alert.alert_id] = timer
            self._targets[alert.alert_id] = (activity, session, alert)

        # QTimer intervals are 32-bit milliseconds; longer waits are re-armed on timeout.
        msec = min(max(int(delay.total_seconds() * 1000), 0), MAX_TIMER_INTERVAL_MS)
        alert.state = AlertState.ARMED
        timer.start(msec)

    def _on_timeout(self, alert_id):
        target = self._targets.get(alert_id)
        if target is None:
            return
        activity, session, alert = target

        now = to_utc(self.clock())
        remaining = alert.alert_time - now
        if remaining > _REARM_TOLERANCE:
            self._arm(activity, session, alert, remaining)
            return

        timer = self.timers.pop(alert_id, None)
        self._targets.pop(alert_id, None)
        if timer is not None:
            timer.deleteLater()
        self._fire(activity, session, alert, now)

    def _fire(self, activity, session, alert, now):
        logger.info("Triggering notification for %r: %s", session.name, alert.message)
        alert.fired_at = now
        alert.state = AlertState.FIRED

        if self.notifier is not None:
            try:
                self.notifier.notify(f"Reminder: {session.name}", alert.message, self.icon_path)
            except Exception:
                logger.exception("Could not show notification for %r", session.name)

        self.reminderTriggered.emit(activity.day_label, session.name)
