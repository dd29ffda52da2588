import json
import logging

from art_timer.core.calendar import iter_sessions
from art_timer.core.config import CALENDAR_FILE
from art_timer.core.errors import CorruptConfig
from art_timer.core.models import Calendar

logger = logging.getLogger(__name__)


class ReminderStore:
    """Single JSON document holding the calendar and every session's alerts.

    The document is rewritten in full after each mutation. There is no
    temp-file swap, so a crash mid-write can truncate it.
    """
    def __init__(self, path=CALENDAR_FILE):
        self.path = path
        self.calendar = None

    def load(self):
        """Read and parse the calendar document.

        Raises:
            FileNotFoundError: the document does not exist.
            CorruptConfig: the document is not valid JSON or lacks required fields.
        """
        with open(self.path, 'rb') as fh:
            raw = fh.read()

        try:
            document = json.loads(raw.decode('utf-8-sig'))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CorruptConfig(f"Calendar file {self.path} is not valid JSON: {e}") from e

        self.calendar = Calendar.from_dict(document)
        logger.info("Loaded calendar from %s", self.path)
        return self.calendar

    def get_calendar(self):
        """Return the loaded calendar, loading it on first use."""
        if self.calendar is None:
            self.load()
        return self.calendar

    def append_alert(self, calendar, session, alert):
        """Append an alert to a session's alert list, creating the list if needed."""
        if not isinstance(session.alerts, list):
            session.alerts = []
        session.alerts.append(alert)
        return calendar

    def persist(self, calendar=None):
        """Overwrite the document with the full serialized calendar.

        Write errors propagate to the caller.
        """
        calendar = calendar or self.calendar
        payload = json.dumps(calendar.to_dict(), indent=2, ensure_ascii=False)
        with open(self.path, 'w', encoding='utf-8') as fh:
            fh.write(payload)
        self.calendar = calendar
        logger.debug("Persisted calendar to %s", self.path)

    def list_reminders(self, calendar=None):
        """Flatten every session's alerts into rows sorted by alert time."""
        calendar = calendar or self.get_calendar()
        rows = []
        for activity, session in iter_sessions(calendar):
            for alert in session.alerts or []:
                rows.append({
                    'sessionName': session.name,
                    'day': activity.day_label,
                    'message': alert.message,
                    'alertTime': alert.alert_time,
                    'timerEnabled': alert.enabled,
                })
        rows.sort(key=lambda row: row['alertTime'])
        return rows


def load_calendar(path=CALENDAR_FILE):
    """Load the calendar document at `path`."""
    return ReminderStore(path).load()
