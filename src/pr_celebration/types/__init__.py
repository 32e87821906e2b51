"""Type definitions for PR Celebration."""

from pr_celebration.types.pull_requests import (
    SubjectType,
    Outcome,
    Notification,
    PullRequestDetail,
    Comment,
    PrSummary,
    parse_comments,
    parse_timestamp,
)
from pr_celebration.types.celebrations import CycleReport

__all__ = [
    "SubjectType",
    "Outcome",
    "Notification",
    "PullRequestDetail",
    "Comment",
    "PrSummary",
    "parse_comments",
    "parse_timestamp",
    "CycleReport",
]
