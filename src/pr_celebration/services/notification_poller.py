"""Timer-driven GitHub notification poller.

Each tick fetches unread notifications, keeps the pull request ones, and for
every pull request fetches its details and comments, classifies it, asks the
presentation layer to celebrate (or console) and finally marks the
notification read. A failure on one notification never aborts the batch; the
failed notification stays unread and is retried on the next tick.
"""

import logging

from PySide6.QtCore import QObject, Signal, Slot, Property, QTimer, QThread

from pr_celebration.errors import GitHubError
from pr_celebration.services.config_manager import ConfigManager, INTERVAL_KEY
from pr_celebration.services.github_client import GitHubClient
from pr_celebration.services.poller_state import PollerState
from pr_celebration.types import CycleReport, Notification, Outcome, PrSummary
from pr_celebration.utils.outcome_classifier import classify, has_approval_comment

logger = logging.getLogger(__name__)

STARTUP_DELAY_MS = 5000

TEST_PR = PrSummary(
    title="Test PR Animation",
    number=123,
    html_url="https://github.com/example/repo/pull/123",
)


class _PollWorker(QThread):
    """Background thread running one poll cycle.

    Owned by the poller through a Python reference only (no Qt parent), so it
    is destroyed when the poller replaces or drops it after it has finished.
    """

    report_ready = Signal(dict)

    def __init__(self, cycle, token: str):
        super().__init__()
        self._cycle = cycle
        self._token = token

    def run(self):
        cycle, self._cycle = self._cycle, None
        try:
            report = cycle(self._token)
        except Exception:
            logger.exception("Poll cycle crashed")
            report = CycleReport(aborted=True)
        self.report_ready.emit(report.to_dict())


class NotificationPoller(QObject):
    """Polls GitHub notifications and requests celebrations for pull requests."""

    celebration_requested = Signal(bool, dict)  # positive, PrSummary dict
    token_missing = Signal()
    busy_changed = Signal()
    cycle_finished = Signal(dict)  # CycleReport dict

    def __init__(
        self,
        config: ConfigManager,
        client: GitHubClient | None = None,
        state: PollerState | None = None,
        parent=None,
    ):
        super().__init__(parent)
        self._config = config
        self._client = client or GitHubClient()
        self._state = state or PollerState()
        self._busy = False
        self._disposed = False
        self._worker: _PollWorker | None = None

        # Last outcome presented per pull request, to avoid repeating animations
        self._last_outcomes: dict[str, Outcome] = {}

        self._poll_timer = QTimer(self)
        self._poll_timer.timeout.connect(self.check_now)

        self._startup_timer = QTimer(self)
        self._startup_timer.setSingleShot(True)
        self._startup_timer.setInterval(STARTUP_DELAY_MS)
        self._startup_timer.timeout.connect(self.check_now)

        self._config.settings_changed.connect(self._on_setting_changed)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    def _get_busy(self) -> bool:
        return self._busy

    def _set_busy(self, value: bool):
        if self._busy != value:
            self._busy = value
            self.busy_changed.emit()

    busy = Property(bool, _get_busy, notify=busy_changed)

    @property
    def disposed(self) -> bool:
        return self._disposed

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self):
        """Start periodic polling, with a first check after a short warm-up."""
        if self._disposed:
            return
        seconds = self._config.check_interval_seconds()
        logger.info("Setting up notification polling every %d seconds", seconds)
        self._poll_timer.start(seconds * 1000)
        self._startup_timer.start()

    @Slot(int)
    def set_interval(self, seconds: int):
        if seconds < 1:
            logger.warning("Ignoring invalid polling interval %r", seconds)
            return
        self._poll_timer.setInterval(seconds * 1000)
        if self._poll_timer.isActive():
            self._poll_timer.start()
        logger.info("Polling interval changed to %d seconds", seconds)

    def dispose(self):
        """Stop polling for good. Safe to call more than once."""
        if self._disposed:
            return
        self._disposed = True
        self._poll_timer.stop()
        self._startup_timer.stop()
        if self._worker is not None and self._worker.isRunning():
            # run_cycle stops between notifications once disposed, so this
            # waits for at most the request in flight
            logger.debug("Waiting for in-flight notification check")
            self._worker.wait()
        logger.debug("Notification poller disposed")

    def _on_setting_changed(self, key: str):
        if key == INTERVAL_KEY and not self._disposed:
            self.set_interval(self._config.check_interval_seconds())

    # ------------------------------------------------------------------
    # Triggers
    # ------------------------------------------------------------------

    @Slot()
    def check_now(self):
        """Run one poll cycle in the background unless one is already running."""
        if self._disposed:
            return
        if self._busy:
            logger.debug("Previous notification check still running, skipping tick")
            return

        token = self._config.github_token()
        if not token:
            self._handle_missing_token()
            return

        logger.info("Checking GitHub notifications")
        self._set_busy(True)
        if self._worker is not None:
            # Previous worker already delivered finished; make sure its thread has exited
            self._worker.wait()
        worker = _PollWorker(self.run_cycle, token)
        worker.report_ready.connect(self._on_report_ready)
        worker.finished.connect(self._on_worker_finished)
        self._worker = worker
        worker.start()

    @Slot()
    def test_animation(self):
        """Show both animation variants without touching the network."""
        summary = TEST_PR.to_dict()
        self.celebration_requested.emit(True, summary)
        self.celebration_requested.emit(False, summary)

    def reset_last_outcomes(self):
        self._last_outcomes.clear()

    def _handle_missing_token(self):
        if self._state.has_shown_token_message():
            return
        logger.info("No GitHub token configured, notification polling is idle")
        self._state.mark_token_message_shown()
        self.token_missing.emit()

    def _on_report_ready(self, report: dict):
        self.cycle_finished.emit(report)

    def _on_worker_finished(self):
        self._set_busy(False)

    # ------------------------------------------------------------------
    # Poll cycle
    # ------------------------------------------------------------------

    def run_cycle(self, token: str) -> CycleReport:
        """Fetch, classify, present and acknowledge. Blocking.

        Per-notification failures are logged and counted, never raised.
        """
        report = CycleReport()
        try:
            notifications = self._client.list_notifications(token)
        except GitHubError as e:
            logger.error("Error checking notifications: %s", e)
            report.aborted = True
            return report

        report.fetched = len(notifications)
        logger.info("Found %d unread notifications", report.fetched)

        pr_notifications = [n for n in notifications if n.is_pull_request]
        report.pull_requests = len(pr_notifications)
        logger.info("Found %d PR-related notifications", report.pull_requests)

        for notification in pr_notifications:
            if self._disposed:
                logger.debug("Poller disposed mid-cycle, stopping")
                break
            try:
                if self._process_notification(token, notification):
                    report.presented += 1
                self._client.acknowledge(token, notification.id)
                report.acknowledged += 1
            except GitHubError as e:
                report.failed += 1
                logger.error("Error processing notification %s: %s", notification.id, e)
            except Exception:
                report.failed += 1
                logger.exception("Unexpected error processing notification %s", notification.id)

        logger.info(
            "Notification check done: %d presented, %d acknowledged, %d failed",
            report.presented, report.acknowledged, report.failed,
        )
        return report

    def _process_notification(self, token: str, notification: Notification) -> bool:
        """Classify one pull request notification. Returns True if something was presented."""
        logger.debug("Processing notification for PR: %s", notification.subject_url)
        detail = self._client.fetch_pull_request(token, notification.subject_url)
        comments = self._client.fetch_comments(token, detail.comments_url)

        logger.debug(
            "PR status - Merged: %s, Approval: %s",
            detail.merged, has_approval_comment(comments),
        )

        outcome = classify(detail, comments)
        if outcome is None:
            logger.debug("PR %s is stale and unapproved, nothing to show", notification.subject_url)
            return False

        summary = PrSummary.from_detail(detail)
        key = summary.html_url or notification.subject_url
        if self._last_outcomes.get(key) == outcome:
            logger.debug("Already showed %s outcome for %s", outcome.value, key)
            return False

        self._last_outcomes[key] = outcome
        logger.info("Showing %s animation for %s", outcome.value, key)
        self.celebration_requested.emit(outcome is Outcome.POSITIVE, summary.to_dict())
        return True
