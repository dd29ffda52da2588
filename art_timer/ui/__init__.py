# UI modules initialization
from art_timer.ui.reminder_scheduler import ReminderScheduler
from art_timer.ui.reminder_dialog import ReminderDialog
from art_timer.ui.progress_ring import ProgressRing, ProgressCard
from art_timer.ui.mini_window import MiniWindow
from art_timer.ui.art_timer_app import ArtTimerApp
from art_timer.ui.single_instance import InstanceChannel
from art_timer.ui.tray import TrayNotifier

__all__ = [
    'ReminderScheduler', 'ReminderDialog', 'ProgressRing', 'ProgressCard', 'MiniWindow',
    'ArtTimerApp', 'InstanceChannel', 'TrayNotifier'
]
