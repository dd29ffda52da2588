import os
from datetime import timedelta

# Application
APP_NAME = "ART Timer"
APP_ID = "ART.Timer"
CALENDAR_KEY = "PI_1"

# Paths
CALENDAR_FILE = os.environ.get("ART_TIMER_CALENDAR", os.path.join('config', 'inputParameters.json'))
NOTIFICATION_ICON = os.path.join('resources', 'icon.ico')
TRAY_ICON = os.path.join('resources', 'tray_icon.png')
LOCK_FILE = os.path.join('config', 'art_timer.lock')
INSTANCE_SERVER_NAME = "art-timer-instance"

# Logging
LOG_LEVEL = os.environ.get("ART_TIMER_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Scheduling
FIXED_TIMEZONE = "Asia/Kolkata"
GRACE_WINDOW = timedelta(minutes=5)
MAX_TIMER_INTERVAL_MS = 2**31 - 1
COUNTDOWN_REFRESH_MS = 1000
PROGRESS_REFRESH_MS = 24 * 60 * 60 * 1000

# Progress rings
ART_CIRCLE_RADIUS = 160
ACTIVITY_CIRCLE_RADIUS = 160
MINI_CIRCLE_RADIUS = 80
RING_STROKE_WIDTH = 12

# Color Theme
CARD_COLOR = "#0C8DE8"
PENDING_COLOR = "#CCCCCC"
COMPLETED_COLOR = "#28A745"

LIGHT_THEME = "light"
DARK_THEME = "dark"
THEMES = {
    LIGHT_THEME: {
        "background": "#E3E5F2",
        "nav_bg": "#313131",
        "card_bg": "#FFFFFF",
        "text": "#1E1E2F",
        "input_bg": "#FFFFFF",
        "border": "#3D3D5C",
        "track": "#D9DBE8",
    },
    DARK_THEME: {
        "background": "#1E1E2F",
        "nav_bg": "#0F0F17",
        "card_bg": "#2B2B3C",
        "text": "#E3E5F2",
        "input_bg": "#2B2B3C",
        "border": "#5C5C7A",
        "track": "#3D3D5C",
    },
}
DEFAULT_THEME = LIGHT_THEME

# Fonts
FONT_HEADER = "Segoe UI Semibold"
FONT_HEADER_SIZE = 18
FONT_LABEL = "Segoe UI"
FONT_LABEL_SIZE = 14
FONT_SMALL = "Segoe UI"
FONT_SMALL_SIZE = 12
PADDING = 10

# UI Constants
DEFAULT_DIALOG_WIDTH = 350
DEFAULT_DIALOG_HEIGHT = 400
DEFAULT_WINDOW_SIZE = (1066, 600)
MINI_WINDOW_SIZE = (300, 300)
BELL_ICON = "\U0001F514"


# StyleSheets
def build_style(theme=DEFAULT_THEME):
    """Return the application style sheet for a theme name."""
    colors = THEMES[theme]
    return f"""
QMainWindow, QDialog, QWidget#miniWindow {{
    background-color: {colors['background']};
}}
QFrame#navbar {{
    background-color: {colors['nav_bg']};
}}
QFrame#navbar QLabel {{
    color: white;
}}
QFrame#card {{
    background-color: {colors['card_bg']};
    border-radius: 6px;
}}
QScrollArea, QScrollArea > QWidget > QWidget {{
    background-color: {colors['background']};
    border: none;
}}
QLabel {{
    color: {colors['text']};
}}
QPushButton {{
    background-color: {CARD_COLOR};
    color: white;
    border: none;
    border-radius: 4px;
    padding: 8px 16px;
    font-weight: bold;
}}
QPushButton:hover {{
    background-color: #2980b9;
}}
QLineEdit, QSpinBox {{
    background-color: {colors['input_bg']};
    color: {colors['text']};
    border: 1px solid {colors['border']};
    border-radius: 4px;
    padding: 6px;
}}
QProgressBar {{
    background-color: {colors['card_bg']};
    color: {colors['text']};
    border: none;
    text-align: center;
}}
QProgressBar::chunk {{
    background-color: {CARD_COLOR};
}}
"""


MAIN_STYLE = build_style(DEFAULT_THEME)
