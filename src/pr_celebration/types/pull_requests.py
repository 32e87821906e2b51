"""Notification, pull request and comment types parsed from GitHub JSON."""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pr_celebration.errors import MalformedResponseError

DEFAULT_PR_TITLE = "Pull Request"


class SubjectType(str, Enum):
    PULL_REQUEST = "PullRequest"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: Any) -> "SubjectType":
        return cls.PULL_REQUEST if value == cls.PULL_REQUEST.value else cls.OTHER


class Outcome(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"


@dataclass
class Notification:
    id: str
    subject_type: SubjectType
    subject_url: Optional[str] = None
    title: str = ""
    repository: str = ""

    @property
    def is_pull_request(self) -> bool:
        return self.subject_type is SubjectType.PULL_REQUEST and bool(self.subject_url)

    @classmethod
    def from_json(cls, raw: Any) -> "Notification":
        if not isinstance(raw, dict) or raw.get("id") is None:
            raise MalformedResponseError(f"Unexpected notification payload: {raw!r:.200}")

        subject = raw.get("subject") or {}
        repository = raw.get("repository") or {}
        return cls(
            id=str(raw["id"]),
            subject_type=SubjectType.parse(subject.get("type")),
            subject_url=subject.get("url") or None,
            title=subject.get("title") or "",
            repository=repository.get("full_name") or "",
        )


@dataclass
class PullRequestDetail:
    title: str
    number: Optional[int]
    html_url: str
    comments_url: str
    updated_at: datetime
    merged: bool = False

    @classmethod
    def from_json(cls, raw: Any) -> "PullRequestDetail":
        if not isinstance(raw, dict):
            raise MalformedResponseError(f"Unexpected pull request payload: {raw!r:.200}")
        comments_url = raw.get("comments_url")
        if not comments_url:
            raise MalformedResponseError("Pull request payload has no comments_url")

        return cls(
            title=raw.get("title") or "",
            number=raw.get("number"),
            html_url=raw.get("html_url") or "",
            comments_url=comments_url,
            updated_at=parse_timestamp(raw.get("updated_at")),
            merged=bool(raw.get("merged", False)),
        )


@dataclass
class Comment:
    body: str = ""

    @classmethod
    def from_json(cls, raw: Any) -> "Comment":
        if not isinstance(raw, dict):
            raise MalformedResponseError(f"Unexpected comment payload: {raw!r:.200}")
        body = raw.get("body")
        if body is not None and not isinstance(body, str):
            raise MalformedResponseError(f"Comment body is {type(body).__name__}, not a string")
        return cls(body=body or "")


@dataclass
class PrSummary:
    """What the celebration panel needs to know about a pull request."""
    title: str = DEFAULT_PR_TITLE
    number: int | str = ""
    html_url: str = ""

    @classmethod
    def from_detail(cls, detail: PullRequestDetail) -> "PrSummary":
        return cls(
            title=detail.title or DEFAULT_PR_TITLE,
            number=detail.number or "",
            html_url=detail.html_url or "",
        )

    def to_dict(self) -> dict:
        return {"title": self.title, "number": self.number, "htmlUrl": self.html_url}


def parse_comments(raw: Any) -> list[Comment]:
    if not isinstance(raw, list):
        raise MalformedResponseError(f"Expected a list of comments, got {type(raw).__name__}")
    return [Comment.from_json(item) for item in raw]


def parse_timestamp(value: Any) -> datetime:
    """Parse a GitHub ISO-8601 timestamp, falling back to now (UTC).

    Naive values are treated as UTC so they compare against aware datetimes.
    """
    if isinstance(value, str) and value:
        try:
            dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            pass
        else:
            return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)
    return datetime.now(timezone.utc)
