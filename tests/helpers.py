"""Shared test helpers."""

from unittest.mock import Mock

from PySide6.QtCore import QCoreApplication, QEvent

API = "https://api.github.com"


def wait_for_worker(poller):
    """Wait for the background poll worker to finish and deliver its signals."""
    if poller._worker is not None:
        poller._worker.wait(5000)
    QCoreApplication.processEvents()


def flush_events():
    """Deliver queued signals and pending deleteLater calls before the next test."""
    QCoreApplication.processEvents()
    QCoreApplication.sendPostedEvents(None, QEvent.DeferredDelete)


def notification_json(nid, subject_type="PullRequest", url=None, title="Some PR"):
    if url is None and subject_type == "PullRequest":
        url = f"{API}/repos/acme/widgets/pulls/{nid}"
    return {
        "id": str(nid),
        "unread": True,
        "reason": "review_requested",
        "subject": {"title": title, "url": url, "type": subject_type},
        "repository": {"full_name": "acme/widgets"},
    }


def pr_json(number, merged=False, updated_at=None, title=None):
    data = {
        "title": title or f"PR {number}",
        "number": number,
        "html_url": f"https://github.com/acme/widgets/pull/{number}",
        "comments_url": f"{API}/repos/acme/widgets/issues/{number}/comments",
        "merged": merged,
    }
    if updated_at is not None:
        data["updated_at"] = updated_at
    return data


def make_response(status_code=200, data=None, headers=None, text=""):
    """Mock a requests.Response."""
    response = Mock()
    response.status_code = status_code
    response.headers = headers or {}
    response.text = text
    if isinstance(data, Exception):
        response.json.side_effect = data
    else:
        response.json.return_value = data
    return response


class FakeGitHubApi:
    """Routes mocked requests.Session calls to canned responses by (method, url)."""

    def __init__(self):
        self.routes: dict[tuple[str, str], object] = {}
        self.calls: list[tuple[str, str]] = []
        self.session = Mock()
        self.session.request.side_effect = self._request

    def add(self, method, url, response):
        self.routes[(method, url)] = response

    def _request(self, method, url, **kwargs):
        self.calls.append((method, url))
        response = self.routes.get((method, url))
        if response is None:
            return make_response(404, {"message": "Not Found"})
        if isinstance(response, Exception):
            raise response
        return response

    def calls_for(self, method):
        return [url for m, url in self.calls if m == method]
