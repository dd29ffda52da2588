from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit,
    QPushButton, QFrame, QSpinBox, QGridLayout, QMessageBox
)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont

from art_timer.core.config import (
    FONT_HEADER, FONT_HEADER_SIZE, FONT_LABEL, FONT_LABEL_SIZE,
    DEFAULT_DIALOG_WIDTH, DEFAULT_DIALOG_HEIGHT, MAIN_STYLE
)


class ReminderDialog(QDialog):
    """Dialog for setting a reminder some time before a session starts."""
    def __init__(self, session_name, day_label, parent=None, on_confirm=None):
        super().__init__(parent)
        self.session_name = session_name.strip()
        self.day_label = str(day_label)
        self.on_confirm = on_confirm

        self.setWindowTitle(self.session_name)
        self.setFixedSize(DEFAULT_DIALOG_WIDTH, DEFAULT_DIALOG_HEIGHT)
        self.setStyleSheet(parent.styleSheet() if parent else MAIN_STYLE)

        if parent:
            parent_rect = parent.geometry()
            x = parent_rect.x() + (parent_rect.width() - DEFAULT_DIALOG_WIDTH) // 2
            y = parent_rect.y() + (parent_rect.height() - DEFAULT_DIALOG_HEIGHT) // 2
            self.setGeometry(x, y, DEFAULT_DIALOG_WIDTH, DEFAULT_DIALOG_HEIGHT)

        self.init_ui()

    def init_ui(self):
        """Create and arrange all dialog widgets."""
        main_layout = QVBoxLayout(self)
        main_layout.setSpacing(10)

        header_label = QLabel(f"Remind me: {self.session_name}")
        header_font = QFont(FONT_HEADER, FONT_HEADER_SIZE)
        header_font.setBold(True)
        header_label.setFont(header_font)
        header_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        header_label.setWordWrap(True)
        main_layout.addWidget(header_label)

        message_label = QLabel("Message:")
        message_label.setFont(QFont(FONT_LABEL, FONT_LABEL_SIZE))
        main_layout.addWidget(message_label)

        self.message_edit = QLineEdit()
        self.message_edit.setFont(QFont(FONT_LABEL, FONT_LABEL_SIZE))
        main_layout.addWidget(self.message_edit)

        offset_label = QLabel("Before the session starts:")
        offset_label.setFont(QFont(FONT_LABEL, FONT_LABEL_SIZE))
        main_layout.addWidget(offset_label)

        offset_frame = QFrame()
        offset_layout = QGridLayout(offset_frame)
        offset_layout.setSpacing(5)

        self.days_spin = self._add_offset_field(offset_layout, 0, "Days", 365)
        self.hours_spin = self._add_offset_field(offset_layout, 1, "Hours", 23)
        self.minutes_spin = self._add_offset_field(offset_layout, 2, "Minutes", 59)

        main_layout.addWidget(offset_frame)
        main_layout.addStretch(1)

        button_layout = QHBoxLayout()

        cancel_btn = QPushButton("Cancel")
        cancel_btn.clicked.connect(self.reject)
        button_layout.addWidget(cancel_btn)

        confirm_btn = QPushButton("Set Reminder")
        confirm_btn.clicked.connect(self.confirm)
        button_layout.addWidget(confirm_btn)

        main_layout.addLayout(button_layout)

    def _add_offset_field(self, layout, row, label_text, maximum):
        label = QLabel(f"{label_text}:")
        label.setFont(QFont(FONT_LABEL, FONT_LABEL_SIZE))
        layout.addWidget(label, row, 0)

        spin = QSpinBox()
        spin.setRange(0, maximum)
        spin.setFixedWidth(80)
        layout.addWidget(spin, row, 1)
        return spin

    def values(self):
        """Return (message, days, hours, minutes) as entered."""
        return (
            self.message_edit.text().strip(),
            self.days_spin.value(),
            self.hours_spin.value(),
            self.minutes_spin.value()
        )

    def confirm(self):
        """Validate input and hand the reminder to the callback."""
        message, days, hours, minutes = self.values()
        if not message and not days and not hours and not minutes:
            QMessageBox.warning(
                self, "Warning",
                "Please fill any one of the fields (Message, Days, Hours, or Minutes) before submitting."
            )
            return

        if self.on_confirm:
            accepted = self.on_confirm(self.session_name, self.day_label, message, days, hours, minutes)
            if accepted is False:
                return

        self.accept()
