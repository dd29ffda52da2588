from PyQt6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QPushButton
from PyQt6.QtCore import Qt, QTimer, pyqtSignal

from art_timer.core.config import (
    APP_NAME, DEFAULT_THEME, MINI_CIRCLE_RADIUS, MINI_WINDOW_SIZE, PADDING, PROGRESS_REFRESH_MS,
    build_style
)
from art_timer.ui.progress_ring import ProgressCard, refresh_progress_cards


class MiniWindow(QWidget):
    """Small always-on-top view with the ART and current activity rings."""
    expandRequested = pyqtSignal()

    def __init__(self, store, theme=DEFAULT_THEME):
        super().__init__(None, Qt.WindowType.Window | Qt.WindowType.WindowStaysOnTopHint)
        self.store = store
        self.setObjectName("miniWindow")
        self.setWindowTitle(APP_NAME)
        self.setFixedSize(*MINI_WINDOW_SIZE)

        self.init_ui()
        self.apply_theme(theme)

        self.progress_timer = QTimer(self)
        self.progress_timer.timeout.connect(self.update_progress)
        self.progress_timer.start(PROGRESS_REFRESH_MS)

        self.update_progress()

    def init_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(PADDING // 2, PADDING // 2, PADDING // 2, PADDING // 2)
        layout.setSpacing(PADDING // 2)

        cards = QHBoxLayout()
        self.art_card = ProgressCard("ART", MINI_CIRCLE_RADIUS)
        self.activity_card = ProgressCard("Activity", MINI_CIRCLE_RADIUS)
        cards.addWidget(self.art_card, 1)
        cards.addWidget(self.activity_card, 1)
        layout.addLayout(cards, 1)

        expand_btn = QPushButton("Expand")
        expand_btn.clicked.connect(lambda: self.expandRequested.emit())
        layout.addWidget(expand_btn)

    def apply_theme(self, theme):
        self.setStyleSheet(build_style(theme))
        self.art_card.set_theme(theme)
        self.activity_card.set_theme(theme)

    def update_progress(self, now=None):
        refresh_progress_cards(self.store.get_calendar(), self.art_card, self.activity_card, now)
