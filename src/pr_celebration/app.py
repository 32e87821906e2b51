"""Application entry point — QML engine setup and service wiring."""

import logging
import sys
import signal
from pathlib import Path

from PySide6.QtGui import QGuiApplication
from PySide6.QtQml import QQmlApplicationEngine
from PySide6.QtCore import QUrl
from PySide6.QtNetwork import QLocalSocket, QLocalServer

from pr_celebration.services.config_manager import ConfigManager
from pr_celebration.services.github_client import GitHubClient
from pr_celebration.services.poller_state import PollerState
from pr_celebration.services.notification_poller import NotificationPoller
from pr_celebration.services.celebration_manager import CelebrationManager

QML_DIR = Path(__file__).parent / "qml"
SOCKET_NAME = "pr-celebration-instance"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def _check_single_instance() -> QLocalServer | None:
    """Enforce single instance via QLocalSocket. Returns server if we're the first instance."""
    socket = QLocalSocket()
    socket.connectToServer(SOCKET_NAME)
    if socket.waitForConnected(500):
        # Another instance is running
        socket.close()
        return None

    server = QLocalServer()
    server.removeServer(SOCKET_NAME)
    server.listen(SOCKET_NAME)
    return server


def configure_logging(debug: bool):
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
    )
    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def run() -> int:
    """Launch the application."""
    app = QGuiApplication(sys.argv)
    app.setApplicationName("PR Celebration")
    app.setOrganizationName("pr-celebration")
    app.setOrganizationDomain("pr-celebration.local")
    app.setQuitOnLastWindowClosed(False)

    instance_server = _check_single_instance()
    if instance_server is None:
        print("Another instance is already running.", file=sys.stderr)
        return 0

    # Allow Ctrl+C to kill the app
    signal.signal(signal.SIGINT, signal.SIG_DFL)

    config = ConfigManager()
    configure_logging(config.debug_logging())
    logger.info("PR Celebration is now active")

    poller = NotificationPoller(config, GitHubClient(), PollerState())
    celebrations = CelebrationManager(config)

    # Poller outcomes -> panel + desktop notification
    poller.celebration_requested.connect(celebrations.show)

    engine = QQmlApplicationEngine()
    ctx = engine.rootContext()
    ctx.setContextProperty("ConfigManager", config)
    ctx.setContextProperty("NotificationPoller", poller)
    ctx.setContextProperty("CelebrationManager", celebrations)

    engine.load(QUrl.fromLocalFile(str(QML_DIR / "Main.qml")))
    if not engine.rootObjects():
        poller.dispose()
        return 1

    poller.start()

    ret = app.exec()
    poller.dispose()
    instance_server.close()
    return ret
