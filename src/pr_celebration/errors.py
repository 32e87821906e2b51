"""Error taxonomy for GitHub API access."""


class GitHubError(Exception):
    """Base class for every failure talking to the GitHub API."""


class NetworkError(GitHubError):
    """Transport-level failure (DNS, connection reset, timeout)."""


class MalformedResponseError(GitHubError):
    """Response body is not JSON or does not have the expected shape."""


class HttpError(GitHubError):
    """Non-2xx response."""

    def __init__(self, status_code: int, message: str = ""):
        super().__init__(f"HTTP {status_code}: {message}" if message else f"HTTP {status_code}")
        self.status_code = status_code
        self.message = message


class AuthError(HttpError):
    """Token missing, invalid, or lacking the notifications scope."""


class RateLimitError(HttpError):
    """Request rejected because the API rate limit is exhausted."""

    def __init__(self, status_code: int, message: str = "", reset_timestamp: int | None = None):
        super().__init__(status_code, message)
        self.reset_timestamp = reset_timestamp
