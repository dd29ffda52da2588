import logging

from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QLabel,
    QPushButton, QFrame, QScrollArea, QProgressBar, QMessageBox
)
from PyQt6.QtCore import QTimer
from PyQt6.QtGui import QFont

from art_timer.core.calendar import enabled_alert_count, iter_sessions
from art_timer.core.config import (
    APP_NAME, DEFAULT_WINDOW_SIZE, DEFAULT_THEME, LIGHT_THEME, DARK_THEME, CARD_COLOR, PENDING_COLOR,
    COMPLETED_COLOR, FONT_HEADER, FONT_HEADER_SIZE, FONT_LABEL_SIZE, PADDING, BELL_ICON,
    ART_CIRCLE_RADIUS, ACTIVITY_CIRCLE_RADIUS, COUNTDOWN_REFRESH_MS, PROGRESS_REFRESH_MS, build_style
)
from art_timer.core.errors import SessionNotFound
from art_timer.core.progress import ProgressState, session_countdown
from art_timer.core.utils import utc_now
from art_timer.ui.mini_window import MiniWindow
from art_timer.ui.progress_ring import ProgressCard, refresh_progress_cards
from art_timer.ui.reminder_dialog import ReminderDialog

logger = logging.getLogger(__name__)

BAR_COLORS = {
    ProgressState.NOT_STARTED: PENDING_COLOR,
    ProgressState.IN_PROGRESS: CARD_COLOR,
    ProgressState.COMPLETED: COMPLETED_COLOR,
}


class ArtTimerApp(QMainWindow):
    """Main window: ART and activity progress plus the planning week sessions."""
    def __init__(self, store, scheduler, theme=DEFAULT_THEME):
        super().__init__()
        self.store = store
        self.scheduler = scheduler
        self.quitting = False
        self.theme = theme
        self.mini_window = None

        self.setWindowTitle(APP_NAME)
        self.resize(*DEFAULT_WINDOW_SIZE)

        self.session_headers = {}
        self.session_bars = {}

        self.init_ui()
        self.apply_theme(theme)

        self.scheduler.reminderAdded.connect(self.on_reminder_changed)
        self.scheduler.reminderTriggered.connect(self.on_reminder_changed)

        self.countdown_timer = QTimer(self)
        self.countdown_timer.timeout.connect(self.update_countdowns)
        self.countdown_timer.start(COUNTDOWN_REFRESH_MS)

        self.progress_timer = QTimer(self)
        self.progress_timer.timeout.connect(self.update_progress)
        self.progress_timer.start(PROGRESS_REFRESH_MS)

        self.update_progress()
        self.update_countdowns()

    def init_ui(self):
        """Initialize the main UI components."""
        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        main_layout = QVBoxLayout(central_widget)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)

        self.init_navbar(main_layout)
        self.init_progress_panel(main_layout)
        self.init_sessions(main_layout)

    def init_navbar(self, parent_layout):
        """Initialize the navigation bar."""
        navbar = QFrame()
        navbar.setObjectName("navbar")
        navbar.setMinimumHeight(60)

        nav_layout = QHBoxLayout(navbar)
        nav_layout.setContentsMargins(PADDING, PADDING, PADDING, PADDING)

        title_label = QLabel(APP_NAME)
        title_label.setFont(QFont(FONT_HEADER, FONT_HEADER_SIZE, QFont.Weight.Bold))
        nav_layout.addWidget(title_label, 1)

        self.theme_btn = QPushButton("Theme")
        self.theme_btn.setToolTip("Switch between light and dark")
        self.theme_btn.clicked.connect(self.toggle_theme)
        nav_layout.addWidget(self.theme_btn)

        self.mini_btn = QPushButton("Mini view")
        self.mini_btn.setToolTip("Keep a small window on top")
        self.mini_btn.clicked.connect(self.show_mini_window)
        nav_layout.addWidget(self.mini_btn)

        reminders_btn = QPushButton("Reminders")
        reminders_btn.clicked.connect(self.show_reminders)
        nav_layout.addWidget(reminders_btn)

        parent_layout.addWidget(navbar)

    def init_progress_panel(self, parent_layout):
        """Initialize the ART and current activity progress cards."""
        panel = QFrame()
        panel_layout = QHBoxLayout(panel)
        panel_layout.setContentsMargins(PADDING, PADDING, PADDING, PADDING)
        panel_layout.setSpacing(PADDING * 2)

        self.art_card = ProgressCard("ART", ART_CIRCLE_RADIUS)
        self.activity_card = ProgressCard("Current activity", ACTIVITY_CIRCLE_RADIUS)
        panel_layout.addWidget(self.art_card, 1)
        panel_layout.addWidget(self.activity_card, 1)

        parent_layout.addWidget(panel, 1)

    def init_sessions(self, parent_layout):
        """Initialize the scrollable list of activities and their sessions."""
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        content = QWidget()
        self.sessions_layout = QVBoxLayout(content)
        self.sessions_layout.setSpacing(PADDING // 2)
        self.sessions_layout.setContentsMargins(PADDING, PADDING, PADDING, PADDING)
        scroll.setWidget(content)
        parent_layout.addWidget(scroll, 1)

        self.build_sessions()

    def build_sessions(self):
        """Build one row per session, grouped under its activity."""
        calendar = self.store.get_calendar()
        current_activity = None

        for activity, session in iter_sessions(calendar):
            if activity is not current_activity:
                header = QLabel(f"Day {activity.day} : {activity.name}")
                header.setFont(QFont(FONT_HEADER, FONT_LABEL_SIZE, QFont.Weight.Bold))
                self.sessions_layout.addWidget(header)
                current_activity = activity

            key = (activity.day_label, session.name)
            row = QFrame()
            row_layout = QHBoxLayout(row)
            row_layout.setContentsMargins(0, 0, 0, 0)

            header_btn = QPushButton()
            header_btn.setToolTip("Click for Alert")
            header_btn.clicked.connect(
                lambda checked=False, n=session.name, d=activity.day_label: self.open_reminder_dialog(n, d)
            )
            row_layout.addWidget(header_btn, 1)

            bar = QProgressBar()
            bar.setRange(0, 100)
            bar.setFixedWidth(300)
            bar.setFormat("")
            row_layout.addWidget(bar)

            self.sessions_layout.addWidget(row)
            self.session_headers[key] = (header_btn, session)
            self.session_bars[key] = (bar, session)
            self.refresh_bell(key)

        self.sessions_layout.addStretch(1)

    def refresh_bell(self, key):
        """Show the bell next to a session that has enabled, unfired alerts."""
        header_btn, session = self.session_headers[key]
        count = enabled_alert_count(session, pending_only=True)
        if count:
            bell = f" {BELL_ICON}" if count == 1 else f" {BELL_ICON}×{count}"
        else:
            bell = ""
        header_btn.setText(f"{session.name}{bell}")

    def on_reminder_changed(self, day_label, session_name):
        key = (day_label, session_name)
        if key in self.session_headers:
            self.refresh_bell(key)

    def update_countdowns(self):
        """Redraw every session bar; runs once a second."""
        now = utc_now()
        for bar, session in self.session_bars.values():
            countdown = session_countdown(session, now)
            bar.setValue(int(round(countdown.percentage)))
            bar.setFormat(countdown.text)
            bar.setStyleSheet(f"QProgressBar::chunk {{ background-color: {BAR_COLORS[countdown.state]}; }}")

    def update_progress(self, now=None):
        """Recompute the ART and current activity rings; runs daily."""
        refresh_progress_cards(self.store.get_calendar(), self.art_card, self.activity_card, now)

    def apply_theme(self, theme):
        self.theme = theme
        self.setStyleSheet(build_style(theme))
        self.art_card.set_theme(theme)
        self.activity_card.set_theme(theme)
        if self.mini_window is not None:
            self.mini_window.apply_theme(theme)

    def toggle_theme(self):
        self.apply_theme(DARK_THEME if self.theme == LIGHT_THEME else LIGHT_THEME)

    def show_mini_window(self):
        """Swap this window for the small always-on-top one."""
        if self.mini_window is None:
            self.mini_window = MiniWindow(self.store, self.theme)
            self.mini_window.expandRequested.connect(self.bring_to_front)
        self.mini_window.update_progress()
        self.mini_window.show()
        self.hide()

    def bring_to_front(self):
        """Show the full window, closing the mini view if it is open."""
        if self.mini_window is not None:
            self.mini_window.hide()
        self.showNormal()
        self.raise_()
        self.activateWindow()

    def open_reminder_dialog(self, session_name, day_label):
        dialog = ReminderDialog(session_name, day_label, parent=self, on_confirm=self.submit_reminder)
        dialog.exec()

    def submit_reminder(self, session_name, day_label, message, days, hours, minutes):
        """Forward a dialog submission to the scheduler, reporting failures."""
        try:
            self.scheduler.submit_reminder(session_name, day_label, message, days, hours, minutes)
        except SessionNotFound as e:
            QMessageBox.warning(self, "Reminder not set", str(e))
            return False
        except OSError as e:
            logger.error("Could not save reminder: %s", e)
            QMessageBox.critical(self, "Reminder not saved", f"Could not save the calendar: {e}")
            return False
        return True

    def show_reminders(self):
        """List every stored reminder."""
        rows = self.store.list_reminders()
        if not rows:
            QMessageBox.information(self, "Reminders", "No reminders set")
            return
        lines = [
            f"{row['alertTime'].astimezone():%Y-%m-%d %H:%M}  {row['sessionName']}: {row['message']}"
            for row in rows
        ]
        QMessageBox.information(self, "Reminders", "\n".join(lines))

    def closeEvent(self, event):
        """Hide to the tray instead of quitting."""
        if self.quitting:
            event.accept()
            return
        event.ignore()
        self.hide()
