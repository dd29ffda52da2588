import logging

from PyQt6.QtWidgets import QWidget, QFrame, QVBoxLayout, QLabel, QSizePolicy
from PyQt6.QtCore import Qt, QRectF, QSize
from PyQt6.QtGui import QColor, QFont, QPainter, QPen

from art_timer.core.calendar import current_session, identify_current_activity
from art_timer.core.config import (
    CARD_COLOR, DEFAULT_THEME, THEMES, RING_STROKE_WIDTH, PADDING,
    FONT_LABEL, FONT_LABEL_SIZE, FONT_SMALL, FONT_SMALL_SIZE
)
from art_timer.core.errors import InvalidCalendarRange
from art_timer.core.progress import art_progress, period_progress
from art_timer.core.utils import utc_now

logger = logging.getLogger(__name__)

# QPainter arcs are measured in sixteenths of a degree
FULL_CIRCLE = 360 * 16


class ProgressRing(QWidget):
    """Circular gauge whose arc is the part of the circumference not dashed away."""
    def __init__(self, radius, parent=None):
        super().__init__(parent)
        self.radius = radius
        self.fraction = 1.0
        self.color = QColor(CARD_COLOR)
        self.track_color = QColor(THEMES[DEFAULT_THEME]['track'])
        self.setMinimumSize(100, 100)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)

    def sizeHint(self):
        side = 2 * self.radius + RING_STROKE_WIDTH
        return QSize(side, side)

    def set_snapshot(self, snapshot):
        if snapshot.circumference > 0:
            fraction = (snapshot.circumference - snapshot.dash_offset) / snapshot.circumference
        else:
            fraction = snapshot.percentage / 100
        self.fraction = min(max(fraction, 0.0), 1.0)
        self.update()

    def set_track_color(self, color):
        self.track_color = QColor(color)
        self.update()

    def span_angle(self):
        """Arc length in QPainter units, drawn clockwise from twelve o'clock."""
        return -int(round(self.fraction * FULL_CIRCLE))

    def paintEvent(self, event):
        side = min(self.width(), self.height()) - RING_STROKE_WIDTH
        rect = QRectF((self.width() - side) / 2, (self.height() - side) / 2, side, side)

        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)

        pen = QPen(self.track_color, RING_STROKE_WIDTH)
        pen.setCapStyle(Qt.PenCapStyle.RoundCap)
        painter.setPen(pen)
        painter.drawEllipse(rect)

        if self.fraction > 0:
            pen.setColor(self.color)
            painter.setPen(pen)
            painter.drawArc(rect, 90 * 16, self.span_angle())
        painter.end()


class ProgressCard(QFrame):
    """Titled card holding a progress ring and its remaining-time text."""
    def __init__(self, title, radius, parent=None):
        super().__init__(parent)
        self.setObjectName("card")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(PADDING, PADDING, PADDING, PADDING)

        title_label = QLabel(title)
        title_label.setFont(QFont(FONT_LABEL, FONT_LABEL_SIZE, QFont.Weight.Bold))
        layout.addWidget(title_label)

        self.description_label = QLabel("")
        self.description_label.setFont(QFont(FONT_SMALL, FONT_SMALL_SIZE))
        layout.addWidget(self.description_label)

        self.ring = ProgressRing(radius)
        layout.addWidget(self.ring, 1)

        self.text_label = QLabel("")
        self.text_label.setFont(QFont(FONT_SMALL, FONT_SMALL_SIZE))
        self.text_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.text_label.setWordWrap(True)
        layout.addWidget(self.text_label)

    def set_description(self, text):
        self.description_label.setText(text)

    def show_snapshot(self, snapshot):
        self.ring.set_snapshot(snapshot)
        self.text_label.setText(snapshot.text)

    def show_message(self, text):
        self.text_label.setText(text)

    def set_theme(self, theme):
        self.ring.set_track_color(THEMES[theme]['track'])


def refresh_progress_cards(calendar, art_card, activity_card, now=None):
    """Recompute the ART card and the current activity card.

    Returns the current activity, or None when `now` falls outside every period.
    """
    now = now or utc_now()
    _show_progress(art_card, lambda: art_progress(calendar, now, art_card.ring.radius))

    activity = identify_current_activity(calendar.planning_and_innovation, calendar.iterations, now)
    if activity is None:
        logger.error("Failed to identify the current ART activity")
        activity_card.set_description("No current activity")
        activity_card.show_message("")
        return None

    running = current_session(calendar, now)
    activity_card.set_description(running[1].name if running else activity.name)
    _show_progress(activity_card, lambda: period_progress(activity, now, activity_card.ring.radius))
    return activity


def _show_progress(card, compute):
    try:
        snapshot = compute()
    except InvalidCalendarRange as e:
        logger.error("Invalid ART dates: %s", e)
        card.show_message("Invalid dates")
        return
    card.show_snapshot(snapshot)
