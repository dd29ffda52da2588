class ArtTimerError(Exception):
    """Base class for ART Timer errors."""


class CorruptConfig(ArtTimerError, ValueError):
    """The persisted calendar document could not be parsed."""


class SessionNotFound(ArtTimerError, LookupError):
    """No session matches the requested name and day label."""

    def __init__(self, session_name, day_label):
        super().__init__(f"No session named {session_name!r} on day {day_label!r}")
        self.session_name = session_name
        self.day_label = day_label


class InvalidCalendarRange(ArtTimerError, ValueError):
    """A period has no working days to measure progress against."""
