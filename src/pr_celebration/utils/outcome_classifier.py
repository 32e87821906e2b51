"""Decide whether a pull request deserves a celebration, a consolation, or nothing."""

from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from pr_celebration.types.pull_requests import Comment, Outcome, PullRequestDetail

# Comment left by the merge bot reviewer when a PR is approved
APPROVAL_MARKER = "@robodoo r+"
RECENT_ACTIVITY_WINDOW = timedelta(minutes=10)


def has_approval_comment(comments: Iterable[Comment]) -> bool:
    return any(APPROVAL_MARKER in (c.body or "") for c in comments)


def classify(
    detail: PullRequestDetail,
    comments: Iterable[Comment],
    now: datetime | None = None,
) -> Optional[Outcome]:
    """Classify a pull request into an Outcome.

    Rules, first match wins:
    - merged → POSITIVE
    - any comment contains the approval marker → POSITIVE
    - updated less than 10 minutes ago → NEGATIVE
    - otherwise None (stale and unapproved, nothing to show)
    """
    if detail.merged:
        return Outcome.POSITIVE

    if has_approval_comment(comments):
        return Outcome.POSITIVE

    if now is None:
        now = datetime.now(timezone.utc)

    if now - detail.updated_at < RECENT_ACTIVITY_WINDOW:
        return Outcome.NEGATIVE

    return None
