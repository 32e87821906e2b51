"""Celebration dispatch: QML panel signal, D-Bus desktop notification, history."""

import asyncio
import json
import logging
import threading
import uuid as uuid_mod
from datetime import datetime, timezone
from pathlib import Path

from PySide6.QtCore import QObject, Signal, Slot, QUrl
from PySide6.QtGui import QDesktopServices

from pr_celebration.services.config_manager import ConfigManager

logger = logging.getLogger(__name__)

MAX_HISTORY = 200
DATA_DIR = Path.home() / ".local" / "share" / "pr-celebration"
HISTORY_FILE = DATA_DIR / "celebrations.json"

OPEN_EXTERNAL_LINK = "openExternalLink"

DBUS_NOTIFY_SERVICE = "org.freedesktop.Notifications"
DBUS_NOTIFY_PATH = "/org/freedesktop/Notifications"
OPEN_ACTION = "default"
NOTIFICATION_TIMEOUT_MS = 5000
ACTION_WAIT_S = 60


class CelebrationManager(QObject):
    """Turns poller outcomes into panels, desktop notifications and history."""

    celebration_fired = Signal(dict)
    settings_requested = Signal()
    history_changed = Signal()
    link_activated = Signal(str)  # url chosen from a desktop notification

    def __init__(self, config: ConfigManager | None = None, parent=None):
        super().__init__(parent)
        self._config = config
        self._history: list[dict] = []
        self._load_history()

        self.link_activated.connect(self._open_url)

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------

    @Slot(bool, dict)
    def show(self, positive: bool, summary: dict):
        """Show the celebration (positive) or consolation panel for a PR."""
        entry = {
            "id": str(uuid_mod.uuid4()),
            "positive": positive,
            "title": summary.get("title", ""),
            "number": summary.get("number", ""),
            "htmlUrl": summary.get("htmlUrl", ""),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

        self._history.append(entry)
        if len(self._history) > MAX_HISTORY:
            self._history = self._history[-MAX_HISTORY:]
        self._save_history()

        self.celebration_fired.emit(entry)
        self.history_changed.emit()

        if self._config is None or self._config.desktop_notifications_enabled():
            title, body = self._notification_text(positive, summary)
            self._send_dbus_notification(title, body, summary.get("htmlUrl", ""))

    @staticmethod
    def _notification_text(positive: bool, summary: dict) -> tuple[str, str]:
        number = summary.get("number")
        title = summary.get("title", "")
        body = f"#{number} {title}" if number else title
        if positive:
            return "PR merged or approved 🎉", body
        return "Still waiting for approval...", body

    @Slot(dict)
    def handle_panel_message(self, message: dict):
        """Handle a message posted back by the celebration panel."""
        command = message.get("command")
        if command == OPEN_EXTERNAL_LINK:
            self._open_url(message.get("url", ""))
            return
        logger.debug("Ignoring unknown panel command %r", command)

    @Slot(str)
    def _open_url(self, url: str):
        if url:
            QDesktopServices.openUrl(QUrl(url))

    @Slot()
    def open_settings(self):
        """Ask the UI to show the token settings (from the missing-token advisory)."""
        self.settings_requested.emit()

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    @Slot(result=list)
    def get_history(self) -> list[dict]:
        """Return celebration history (newest first)."""
        return list(reversed(self._history))

    @Slot()
    def clear_history(self):
        self._history = []
        self._save_history()
        self.history_changed.emit()

    # ------------------------------------------------------------------
    # D-Bus notification
    # ------------------------------------------------------------------

    def _send_dbus_notification(self, summary: str, body: str, url: str = ""):
        """Post a freedesktop notification from a background thread.

        When a URL is given the notification carries an "Open pull request"
        action; invoking it routes the URL back through link_activated.
        """

        def _notify():
            try:
                asyncio.run(self._notify_desktop(summary, body, url))
            except Exception:
                logger.debug("D-Bus notification failed", exc_info=True)

        threading.Thread(target=_notify, daemon=True).start()

    async def _notify_desktop(self, summary: str, body: str, url: str):
        from dbus_next import Variant
        from dbus_next.aio import MessageBus

        bus = await MessageBus().connect()
        try:
            introspection = await bus.introspect(DBUS_NOTIFY_SERVICE, DBUS_NOTIFY_PATH)
            iface = bus.get_proxy_object(
                DBUS_NOTIFY_SERVICE, DBUS_NOTIFY_PATH, introspection,
            ).get_interface(DBUS_NOTIFY_SERVICE)

            actions = [OPEN_ACTION, "Open pull request"] if url else []
            hints = {"category": Variant("s", "presence")}
            notification_id = await iface.call_notify(
                "PR Celebration", 0, "vcs-pull-request",
                summary, body[:200], actions, hints, NOTIFICATION_TIMEOUT_MS,
            )
            if not url:
                return

            closed = asyncio.get_running_loop().create_future()

            def on_action(nid, action_key):
                if nid == notification_id and action_key == OPEN_ACTION:
                    self.link_activated.emit(url)

            def on_closed(nid, reason):
                if nid == notification_id and not closed.done():
                    closed.set_result(reason)

            iface.on_action_invoked(on_action)
            iface.on_notification_closed(on_closed)
            try:
                await asyncio.wait_for(closed, ACTION_WAIT_S)
            except asyncio.TimeoutError:
                pass
        finally:
            bus.disconnect()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _load_history(self):
        if HISTORY_FILE.exists():
            try:
                data = json.loads(HISTORY_FILE.read_text())
                self._history = data if isinstance(data, list) else []
            except (json.JSONDecodeError, OSError):
                logger.warning("Failed to load celebration history", exc_info=True)
                self._history = []
        else:
            self._history = []

    def _save_history(self):
        try:
            DATA_DIR.mkdir(parents=True, exist_ok=True)
            HISTORY_FILE.write_text(json.dumps(self._history))
        except OSError:
            logger.warning("Failed to save celebration history", exc_info=True)
