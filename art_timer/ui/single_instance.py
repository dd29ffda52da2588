import logging

from PyQt6.QtCore import QObject, pyqtSignal
from PyQt6.QtNetwork import QLocalServer, QLocalSocket

from art_timer.core.config import INSTANCE_SERVER_NAME

logger = logging.getLogger(__name__)


class InstanceChannel(QObject):
    """Local socket a second launch uses to bring the running window forward."""
    activationRequested = pyqtSignal()

    def __init__(self, server_name=INSTANCE_SERVER_NAME, parent=None):
        super().__init__(parent)
        self.server_name = server_name
        self.server = None

    def listen(self):
        """Start accepting activation requests. Returns False if the name cannot be bound."""
        # A crashed instance can leave a stale socket file behind
        QLocalServer.removeServer(self.server_name)
        self.server = QLocalServer(self)
        if not self.server.listen(self.server_name):
            logger.error("Cannot listen on %s: %s", self.server_name, self.server.errorString())
            return False
        self.server.newConnection.connect(self._on_new_connection)
        return True

    def _on_new_connection(self):
        while self.server.hasPendingConnections():
            socket = self.server.nextPendingConnection()
            socket.disconnectFromServer()
            socket.deleteLater()
            logger.info("Another launch asked to show the window")
            self.activationRequested.emit()

    def notify_running(self, timeout_ms=1000):
        """Ask the instance listening on this name to show itself."""
        socket = QLocalSocket()
        socket.connectToServer(self.server_name)
        if not socket.waitForConnected(timeout_ms):
            logger.warning("No running instance answered on %s: %s", self.server_name, socket.errorString())
            return False
        socket.disconnectFromServer()
        return True

    def close(self):
        if self.server is not None:
            self.server.close()
            self.server = None
