from enum import Enum

from art_timer.core.config import CALENDAR_KEY
from art_timer.core.errors import CorruptConfig
from art_timer.core.utils import format_iso_utc, generate_id, parse_iso, to_utc


class TimerState(Enum):
    """Whether an alert is switched on. Stored on disk as "true"/"false"."""
    ENABLED = "true"
    DISABLED = "false"

    @classmethod
    def parse(cls, value):
        if isinstance(value, cls):
            return value
        return cls.ENABLED if str(value).strip().lower() == "true" else cls.DISABLED


class AlertState(Enum):
    """In-memory lifecycle of an alert within one scheduler run."""
    PENDING = "pending"
    ARMED = "armed"
    FIRED = "fired"
    SKIPPED = "skipped"


class Alert:
    """A one-shot reminder attached to a session."""
    def __init__(self, message, alert_time, timer_enabled=TimerState.ENABLED, fired_at=None, extra=None):
        self.alert_id = generate_id()
        self.message = message
        self.alert_time = to_utc(alert_time)
        self.timer_enabled = TimerState.parse(timer_enabled)
        self.fired_at = to_utc(fired_at) if fired_at else None
        self.state = AlertState.PENDING
        self.extra = dict(extra or {})
        self._alert_time_text = None

    @property
    def enabled(self):
        return self.timer_enabled is TimerState.ENABLED

    @classmethod
    def from_dict(cls, data):
        extra = {k: v for k, v in data.items() if k not in ('timerEnabled', 'message', 'alertTime', 'firedAt')}
        alert = cls(
            data.get('message', ''),
            data['alertTime'],
            timer_enabled=data.get('timerEnabled', TimerState.DISABLED.value),
            fired_at=data.get('firedAt'),
            extra=extra
        )
        alert._alert_time_text = data['alertTime']
        if alert.fired_at:
            alert.state = AlertState.FIRED
        return alert

    def to_dict(self):
        data = dict(self.extra)
        data['timerEnabled'] = self.timer_enabled.value
        data['message'] = self.message
        data['alertTime'] = self._alert_time_text or format_iso_utc(self.alert_time)
        if self.fired_at:
            data['firedAt'] = format_iso_utc(self.fired_at)
        return data


class Session:
    """A named, time-boxed slot within an activity."""
    def __init__(self, name, start_date, end_date, alerts=None, extra=None):
        self.name = name
        self.start_date = start_date
        self.end_date = end_date
        self.start = parse_iso(start_date)
        self.end = parse_iso(end_date)
        self.alerts = alerts
        self.extra = dict(extra or {})

    @classmethod
    def from_dict(cls, data):
        extra = {k: v for k, v in data.items() if k not in ('name', 'startDate', 'endDate', 'alerts')}
        alerts = data.get('alerts')
        if alerts is not None:
            alerts = [Alert.from_dict(a) for a in alerts]
        return cls(data['name'], data['startDate'], data['endDate'], alerts=alerts, extra=extra)

    def to_dict(self):
        data = {'name': self.name, 'startDate': self.start_date, 'endDate': self.end_date}
        data.update(self.extra)
        if self.alerts is not None:
            data['alerts'] = [a.to_dict() for a in self.alerts]
        return data


class Activity:
    """A labeled day of the planning week holding its sessions."""
    def __init__(self, day, name, sessions, extra=None):
        self.day = day
        self.name = name
        self.sessions = sessions
        self.extra = dict(extra or {})

    @property
    def day_label(self):
        return str(self.day).strip()

    @classmethod
    def from_dict(cls, data):
        extra = {k: v for k, v in data.items() if k not in ('day', 'name', 'sessions')}
        sessions = [Session.from_dict(s) for s in data.get('sessions', [])]
        return cls(data.get('day'), data.get('name', ''), sessions, extra=extra)

    def to_dict(self):
        data = {'day': self.day, 'name': self.name}
        data.update(self.extra)
        data['sessions'] = [s.to_dict() for s in self.sessions]
        return data


class Period:
    """A dated span of the ART: planning week, innovation week or iteration."""
    def __init__(self, name, start_date, end_date, activities=None, extra=None):
        self.name = name
        self.start_date = start_date
        self.end_date = end_date
        self.start = parse_iso(start_date)
        self.end = parse_iso(end_date)
        self.activities = activities
        self.extra = dict(extra or {})

    @classmethod
    def from_dict(cls, data):
        extra = {k: v for k, v in data.items() if k not in ('name', 'startDate', 'endDate', 'activities')}
        activities = data.get('activities')
        if activities is not None:
            activities = [Activity.from_dict(a) for a in activities]
        return cls(data.get('name', ''), data['startDate'], data['endDate'], activities=activities, extra=extra)

    def to_dict(self):
        data = {'startDate': self.start_date, 'endDate': self.end_date, 'name': self.name}
        data.update(self.extra)
        if self.activities is not None:
            data['activities'] = [a.to_dict() for a in self.activities]
        return data


class Calendar:
    """The ART document: overall window, planning/innovation weeks and iterations."""
    def __init__(self, start_date, end_date, planning_and_innovation, iterations, key=CALENDAR_KEY,
                 extra=None, root_extra=None):
        self.key = key
        self.start_date = start_date
        self.end_date = end_date
        self.start = parse_iso(start_date)
        self.end = parse_iso(end_date)
        self.planning_and_innovation = planning_and_innovation
        self.iterations = iterations
        self.extra = dict(extra or {})
        self.root_extra = dict(root_extra or {})

    @property
    def planning_week(self):
        return self.planning_and_innovation[0]

    @property
    def innovation_week(self):
        return self.planning_and_innovation[1]

    @property
    def activities(self):
        """All activities, planning week first."""
        return [a for period in self.planning_and_innovation for a in (period.activities or [])]

    @classmethod
    def from_dict(cls, document, key=CALENDAR_KEY):
        """Build a calendar from the parsed JSON document.

        Raises CorruptConfig when required keys are missing, the planning and
        innovation list does not hold exactly two periods, or a date is invalid.
        """
        try:
            root = document[key]
            weeks = [Period.from_dict(p) for p in root['PI_PlanningAndInnovation']]
            iterations = [Period.from_dict(p) for p in root.get('PI_Iterations', [])]
            if len(weeks) != 2:
                raise CorruptConfig(
                    f"PI_PlanningAndInnovation must hold a planning and an innovation week, found {len(weeks)}"
                )
            extra = {k: v for k, v in root.items()
                     if k not in ('startDate', 'endDate', 'PI_PlanningAndInnovation', 'PI_Iterations')}
            root_extra = {k: v for k, v in document.items() if k != key}
            return cls(root['startDate'], root['endDate'], weeks, iterations, key=key,
                       extra=extra, root_extra=root_extra)
        except CorruptConfig:
            raise
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise CorruptConfig(f"Invalid calendar document: {e!r}") from e

    def to_dict(self):
        root = {'startDate': self.start_date, 'endDate': self.end_date}
        root.update(self.extra)
        root['PI_PlanningAndInnovation'] = [p.to_dict() for p in self.planning_and_innovation]
        root['PI_Iterations'] = [p.to_dict() for p in self.iterations]
        document = {self.key: root}
        document.update(self.root_extra)
        return document
