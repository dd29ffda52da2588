import logging
import sys
from PyQt6.QtCore import QLockFile
from PyQt6.QtWidgets import QApplication
from art_timer.core.config import (
    APP_ID, APP_NAME, CALENDAR_FILE, INSTANCE_SERVER_NAME, LOCK_FILE, LOG_FORMAT, LOG_LEVEL
)
from art_timer.core.errors import CorruptConfig
from art_timer.data.store import ReminderStore
from art_timer.ui.art_timer_app import ArtTimerApp
from art_timer.ui.reminder_scheduler import ReminderScheduler
from art_timer.ui.single_instance import InstanceChannel
from art_timer.ui.tray import TrayNotifier

logger = logging.getLogger("art_timer")


def acquire_instance_lock(lock, server_name=INSTANCE_SERVER_NAME):
    """Take the single-instance lock.

    Returns None when this process now owns the lock, otherwise the exit code:
    0 when another instance holds it (that instance is asked to show itself),
    1 when the lock file itself cannot be used.
    """
    if lock.tryLock(100):
        return None
    if lock.error() == QLockFile.LockError.LockFailedError:
        logger.info("%s is already running, bringing it forward", APP_NAME)
        InstanceChannel(server_name).notify_running()
        return 0
    logger.critical("Cannot take the instance lock %s: %s", lock.fileName(), lock.error().name)
    return 1


def main():
    """Main entry point for the application."""
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)

    app = QApplication.instance() or QApplication(sys.argv)

    # Only one instance may own the calendar file
    lock = QLockFile(LOCK_FILE)
    exit_code = acquire_instance_lock(lock)
    if exit_code is not None:
        return exit_code

    store = ReminderStore(CALENDAR_FILE)
    try:
        store.load()
    except (CorruptConfig, FileNotFoundError) as e:
        logger.critical("Cannot start, calendar unusable: %s", e)
        lock.unlock()
        return 1

    app.setApplicationName(APP_NAME)
    app.setDesktopFileName(APP_ID)
    app.setQuitOnLastWindowClosed(False)
    app.setStyle("Fusion")

    main_window = None

    def quit_app():
        main_window.quitting = True
        app.quit()

    tray = TrayNotifier(app, on_open=lambda: main_window.bring_to_front(), on_quit=quit_app)
    tray.show()

    scheduler = ReminderScheduler(store, notifier=tray)
    main_window = ArtTimerApp(store, scheduler)
    main_window.show()

    channel = InstanceChannel(INSTANCE_SERVER_NAME)
    channel.activationRequested.connect(main_window.bring_to_front)
    channel.listen()

    scheduler.schedule_all()

    exit_code = app.exec()
    channel.close()
    lock.unlock()
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
