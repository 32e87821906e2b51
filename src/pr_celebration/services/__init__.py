"""Services for PR Celebration."""

from pr_celebration.services.github_client import GitHubClient
from pr_celebration.services.config_manager import ConfigManager
from pr_celebration.services.poller_state import PollerState
from pr_celebration.services.notification_poller import NotificationPoller
from pr_celebration.services.celebration_manager import CelebrationManager

__all__ = [
    "GitHubClient",
    "ConfigManager",
    "PollerState",
    "NotificationPoller",
    "CelebrationManager",
]
