import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional

from .actions.base import ActionResult
from .actions.labeler import Labeler
from .actions.merger import Merger
from .actions.reviewer import Reviewer
from .adapters.vcs_github import VCS
from .commands import Command, Keyword, extract_commands
from .config import Settings
from .events import (
    EventKind,
    InboundEvent,
    IssueCommentEvent,
    OtherEvent,
    PullRequestEvent,
    PushEvent,
    WatchEvent,
    parse_webhook,
)

logger = logging.getLogger(__name__)

REVIEW_ACTIONS = {"opened", "reopened"}
COMMENT_ACTIONS = {"created", "edited"}
# GitHub reports stars on the watch event as "started"
STAR_ACTIONS = {"starred", "started"}


class OutcomeStatus(str, Enum):
    handled = "handled"
    ignored = "ignored"
    unknown = "unknown"


@dataclass
class HandledOutcome:
    event: str
    status: OutcomeStatus
    results: List[ActionResult] = field(default_factory=list)


class Dispatcher:
    """Route parsed webhook events to actions.

    Built once at startup from Settings; the GitHub client can be passed in
    to share one across dispatchers or to fake it in tests.
    """

    def __init__(self, settings: Settings, vcs: Optional[VCS] = None):
        self.settings = settings
        self.vcs = vcs or VCS(settings.bot_token, base=settings.github_api_url, timeout=settings.request_timeout)
        self._handlers: Dict[EventKind, Callable[..., HandledOutcome]] = {
            EventKind.push: self._on_push,
            EventKind.pull_request: self._on_pull_request,
            EventKind.watch: self._on_watch,
            EventKind.issue_comment: self._on_issue_comment,
            EventKind.other: self._on_other,
        }

    def dispatch(self, raw_body: bytes, event_type: str) -> HandledOutcome:
        """Parse and handle one delivery. Raises MalformedPayload on bad input."""
        event = parse_webhook(raw_body, event_type)
        return self.handle(event)

    def handle(self, event: InboundEvent) -> HandledOutcome:
        return self._handlers[event.kind](event)

    def _on_push(self, event: PushEvent) -> HandledOutcome:
        logger.debug("push to %s %s", event.repository.full_name, event.ref)
        return HandledOutcome("push", OutcomeStatus.ignored)

    def _on_watch(self, event: WatchEvent) -> HandledOutcome:
        if event.action not in STAR_ACTIONS:
            return HandledOutcome("watch", OutcomeStatus.ignored)
        logger.info("%s starred repository %s", event.sender, event.repository.full_name)
        return HandledOutcome("watch", OutcomeStatus.handled)

    def _on_pull_request(self, event: PullRequestEvent) -> HandledOutcome:
        if event.action not in REVIEW_ACTIONS:
            return HandledOutcome("pull_request", OutcomeStatus.ignored)
        result = Reviewer(self.vcs, event.repository).request_review(event.number)
        return HandledOutcome("pull_request", OutcomeStatus.handled, [result])

    def _on_issue_comment(self, event: IssueCommentEvent) -> HandledOutcome:
        logger.info("IssueCommentEvent: %s", event.action)
        if event.action not in COMMENT_ACTIONS:
            return HandledOutcome("issue_comment", OutcomeStatus.ignored)

        results: List[ActionResult] = []
        for cmd in extract_commands(event.comment_body):
            result = self._run_command(cmd, event)
            if result is not None:
                results.append(result)
        status = OutcomeStatus.handled if results else OutcomeStatus.ignored
        return HandledOutcome("issue_comment", status, results)

    def _run_command(self, cmd: Command, event: IssueCommentEvent) -> Optional[ActionResult]:
        # Commands in one comment are independent; a crash in one must not skip the rest
        try:
            return self._execute(cmd, event)
        except Exception as e:
            logger.exception(
                "%s on %s#%s failed", cmd.keyword.value, event.repository.full_name, event.issue_number
            )
            return ActionResult(False, str(e))

    def _execute(self, cmd: Command, event: IssueCommentEvent) -> Optional[ActionResult]:
        repo = event.repository
        number = event.issue_number
        if cmd.keyword is Keyword.lgtm:
            if not event.is_pull_request:
                logger.info("/lgtm on plain issue %s#%s; merge will be refused", repo.full_name, number)
            return Merger(self.vcs, repo).merge_if_approved(number)
        if cmd.argument is None:
            logger.debug("%s without argument on %s#%s; skipped", cmd.keyword.value, repo.full_name, number)
            return None
        if cmd.keyword is Keyword.label:
            return Labeler(self.vcs, repo).add_label(number, cmd.argument)
        return Labeler(self.vcs, repo).remove_label(number, cmd.argument)

    def _on_other(self, event: OtherEvent) -> HandledOutcome:
        logger.info("unknown event type %s", event.event_type)
        return HandledOutcome(event.event_type, OutcomeStatus.unknown)
