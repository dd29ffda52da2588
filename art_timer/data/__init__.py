# Data modules initialization
from art_timer.data.store import ReminderStore, load_calendar

__all__ = ['ReminderStore', 'load_calendar']
