"""Application configuration manager wrapping QSettings."""

import logging
import os

from PySide6.QtCore import QObject, Signal, Slot, QSettings

logger = logging.getLogger(__name__)

TOKEN_KEY = "github/token"
INTERVAL_KEY = "notifications/checkIntervalSeconds"
DESKTOP_KEY = "notifications/desktop"
DEBUG_LOGGING_KEY = "advanced/debugLogging"
TOKEN_ENV_VAR = "GITHUB_TOKEN"

DEFAULT_CHECK_INTERVAL_S = 60

# Default values; their types decide how stored values are coerced
DEFAULTS = {
    TOKEN_KEY: "",
    INTERVAL_KEY: DEFAULT_CHECK_INTERVAL_S,
    DESKTOP_KEY: True,
    DEBUG_LOGGING_KEY: False,
}

_TRUE_STRINGS = ("true", "1", "yes", "on")


def _to_bool(val) -> bool:
    if isinstance(val, str):
        return val.strip().lower() in _TRUE_STRINGS
    return bool(val)


def _to_int(val, default: int) -> int:
    try:
        return int(val)
    except (ValueError, TypeError):
        return default


class ConfigManager(QObject):
    """PR Celebration settings, readable from QML and the poller.

    INI-backed QSettings hand every value back as a string, so reads are
    coerced to the requested type and fall back to DEFAULTS.
    """

    settings_changed = Signal(str)  # key

    def __init__(self, parent=None):
        super().__init__(parent)
        self._settings = QSettings()

    def _raw(self, key: str, fallback):
        return self._settings.value(key, DEFAULTS.get(key, fallback))

    def _store(self, key: str, value):
        current = self._settings.value(key)
        if current is not None and (current == value or str(current) == str(value)):
            return
        self._settings.setValue(key, value)
        logger.debug("Setting %s changed", key)
        self.settings_changed.emit(key)

    @Slot(str, result=str)
    def get_string(self, key: str) -> str:
        return str(self._raw(key, ""))

    @Slot(str, result=int)
    def get_int(self, key: str) -> int:
        return _to_int(self._raw(key, 0), DEFAULTS.get(key, 0))

    @Slot(str, result=bool)
    def get_bool(self, key: str) -> bool:
        return _to_bool(self._raw(key, False))

    @Slot(str, str)
    def set_string(self, key: str, value: str):
        self._store(key, value)

    @Slot(str, int)
    def set_int(self, key: str, value: int):
        self._store(key, value)

    @Slot(str, bool)
    def set_bool(self, key: str, value: bool):
        self._store(key, value)

    def github_token(self) -> str:
        """Configured token, falling back to $GITHUB_TOKEN."""
        return self.get_string(TOKEN_KEY).strip() or os.environ.get(TOKEN_ENV_VAR, "").strip()

    def check_interval_seconds(self) -> int:
        seconds = self.get_int(INTERVAL_KEY)
        if seconds < 1:
            logger.warning("Invalid check interval %r, using %ds", seconds, DEFAULT_CHECK_INTERVAL_S)
            return DEFAULT_CHECK_INTERVAL_S
        return seconds

    def desktop_notifications_enabled(self) -> bool:
        return self.get_bool(DESKTOP_KEY)

    def debug_logging(self) -> bool:
        return self.get_bool(DEBUG_LOGGING_KEY)
