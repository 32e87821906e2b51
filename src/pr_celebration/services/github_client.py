"""Thin GitHub REST client for the notifications workflow."""

import logging
from typing import Any

import requests

from pr_celebration.errors import (
    AuthError,
    HttpError,
    MalformedResponseError,
    NetworkError,
    RateLimitError,
)
from pr_celebration.types.pull_requests import (
    Comment,
    Notification,
    PullRequestDetail,
    parse_comments,
)

logger = logging.getLogger(__name__)

BASE_GITHUB_API_URL = "https://api.github.com"
ACCEPT_HEADER = "application/vnd.github.v3+json"
REQUEST_TIMEOUT_S = 10


def _is_rate_limited(response: requests.Response) -> bool:
    if response.status_code not in (403, 429):
        return False
    if response.headers.get("X-RateLimit-Remaining") == "0":
        return True
    return "rate limit" in (response.text or "").lower()


def _reset_timestamp(response: requests.Response) -> int | None:
    try:
        return int(response.headers["X-RateLimit-Reset"])
    except (KeyError, ValueError, TypeError):
        return None


def _error_message(response: requests.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return (response.text or "")[:200]
    if isinstance(data, dict):
        return str(data.get("message", ""))
    return ""


class GitHubClient:
    """Issues authenticated calls against the GitHub REST API.

    Only the first page of notifications is read; there are no retries.
    Every failure is raised as a GitHubError subclass.
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        base_url: str = BASE_GITHUB_API_URL,
        timeout: float = REQUEST_TIMEOUT_S,
    ):
        self._session = session or requests.Session()
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def list_notifications(self, token: str) -> list[Notification]:
        """Return the unread notifications (first page, most recent first)."""
        data = self._request("GET", f"{self._base_url}/notifications", token)
        if not isinstance(data, list):
            raise MalformedResponseError(
                f"Expected a list of notifications, got {type(data).__name__}"
            )
        notifications = []
        for item in data:
            try:
                notifications.append(Notification.from_json(item))
            except MalformedResponseError as e:
                logger.warning("Skipping malformed notification: %s", e)
        return notifications

    def fetch_resource(self, token: str, url: str) -> Any:
        """GET an absolute API URL returned by a previous call."""
        return self._request("GET", url, token)

    def fetch_pull_request(self, token: str, url: str) -> PullRequestDetail:
        logger.debug("Fetching PR details from: %s", url)
        return PullRequestDetail.from_json(self.fetch_resource(token, url))

    def fetch_comments(self, token: str, url: str) -> list[Comment]:
        logger.debug("Fetching comments from: %s", url)
        return parse_comments(self.fetch_resource(token, url))

    def acknowledge(self, token: str, notification_id: str):
        """Mark a notification thread as read."""
        url = f"{self._base_url}/notifications/threads/{notification_id}"
        self._request("PATCH", url, token, json={}, expect_body=False)
        logger.debug("Marked notification %s as read", notification_id)

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _headers(self, token: str) -> dict[str, str]:
        return {
            "Authorization": f"token {token}",
            "Accept": ACCEPT_HEADER,
        }

    def _request(self, method: str, url: str, token: str, json=None, expect_body: bool = True) -> Any:
        try:
            response = self._session.request(
                method,
                url,
                headers=self._headers(token),
                json=json,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise NetworkError(f"{method} {url} failed: {e}") from e

        status = response.status_code
        if not 200 <= status < 300:
            message = _error_message(response)
            if _is_rate_limited(response):
                raise RateLimitError(status, message, _reset_timestamp(response))
            if status in (401, 403):
                raise AuthError(status, message)
            raise HttpError(status, message)

        if not expect_body:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(f"{method} {url} returned invalid JSON") from e
