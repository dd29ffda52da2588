import logging
import os

from PyQt6.QtGui import QAction, QIcon
from PyQt6.QtWidgets import QMenu, QStyle, QSystemTrayIcon

from art_timer.core.config import APP_NAME, TRAY_ICON

logger = logging.getLogger(__name__)

NOTIFICATION_DURATION_MS = 10000


class TrayNotifier:
    """System tray icon that doubles as the reminder notification sink."""
    def __init__(self, app, on_open=None, on_quit=None, icon_path=TRAY_ICON):
        self.app = app
        if os.path.exists(icon_path):
            icon = QIcon(icon_path)
        else:
            icon = app.style().standardIcon(QStyle.StandardPixmap.SP_ComputerIcon)

        self.tray_icon = QSystemTrayIcon(icon)
        self.tray_icon.setToolTip(APP_NAME)

        menu = QMenu()
        open_action = QAction(f"Open {APP_NAME}", menu)
        if on_open:
            open_action.triggered.connect(on_open)
        menu.addAction(open_action)
        menu.addSeparator()
        quit_action = QAction("Quit", menu)
        quit_action.triggered.connect(on_quit or app.quit)
        menu.addAction(quit_action)
        self.menu = menu
        self.tray_icon.setContextMenu(menu)

        if on_open:
            self.tray_icon.activated.connect(
                lambda reason: on_open() if reason == QSystemTrayIcon.ActivationReason.Trigger else None
            )

    def show(self):
        self.tray_icon.show()

    def notify(self, title, body, icon_path=None):
        """Show a desktop notification through the tray icon."""
        if not QSystemTrayIcon.supportsMessages():
            logger.warning("Notifications unsupported, reminder: %s - %s", title, body)
            return
        if icon_path and os.path.exists(icon_path):
            self.tray_icon.showMessage(title, body, QIcon(icon_path), NOTIFICATION_DURATION_MS)
        else:
            self.tray_icon.showMessage(title, body, QSystemTrayIcon.MessageIcon.Information,
                                       NOTIFICATION_DURATION_MS)
