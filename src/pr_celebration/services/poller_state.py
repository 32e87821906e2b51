"""Process-wide poller state that must survive restarts."""

from PySide6.QtCore import QSettings

TOKEN_MESSAGE_KEY = "state/hasShownTokenMessage"


class PollerState:
    """Remembers whether the missing-token advisory was already shown."""

    def __init__(self, settings: QSettings | None = None):
        self._settings = settings or QSettings()

    def has_shown_token_message(self) -> bool:
        val = self._settings.value(TOKEN_MESSAGE_KEY, False)
        return val in (True, "true", "True", 1)

    def mark_token_message_shown(self):
        self._settings.setValue(TOKEN_MESSAGE_KEY, True)

    def reset(self):
        self._settings.remove(TOKEN_MESSAGE_KEY)
