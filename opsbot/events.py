"""Inbound GitHub webhook events.

Deliveries are parsed once into a closed set of frozen models, one per
``EventKind``. Anything the bot has no handler for becomes an ``OtherEvent``.
"""

import json
from enum import Enum
from typing import Any, Callable, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import MalformedPayload


class EventKind(str, Enum):
    push = "push"
    pull_request = "pull_request"
    watch = "watch"
    issue_comment = "issue_comment"
    other = "other"


class RepositoryRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


class _RepoEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    action: str = ""
    sender: str = ""
    repository: RepositoryRef


class PushEvent(_RepoEvent):
    kind: Literal[EventKind.push] = EventKind.push
    ref: str = ""


class PullRequestEvent(_RepoEvent):
    kind: Literal[EventKind.pull_request] = EventKind.pull_request
    number: int


class WatchEvent(_RepoEvent):
    kind: Literal[EventKind.watch] = EventKind.watch


class IssueCommentEvent(_RepoEvent):
    kind: Literal[EventKind.issue_comment] = EventKind.issue_comment
    issue_number: int
    comment_body: str = ""
    is_pull_request: bool = False


class OtherEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal[EventKind.other] = EventKind.other
    event_type: str
    action: str = ""
    sender: str = ""
    # Organisation-level deliveries (e.g. ping) carry no repository
    repository: Optional[RepositoryRef] = None


InboundEvent = Union[PushEvent, PullRequestEvent, WatchEvent, IssueCommentEvent, OtherEvent]


def _repository(payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    repo = payload.get("repository")
    if not isinstance(repo, dict):
        return None
    owner = repo.get("owner") or {}
    return {"owner": owner.get("login"), "name": repo.get("name")}


def _common(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "action": payload.get("action") or "",
        "sender": (payload.get("sender") or {}).get("login") or "",
        "repository": _repository(payload),
    }


def _push(payload: Dict[str, Any], event_type: str) -> InboundEvent:
    return PushEvent(ref=payload.get("ref") or "", **_common(payload))


def _pull_request(payload: Dict[str, Any], event_type: str) -> InboundEvent:
    pr = payload.get("pull_request") or {}
    return PullRequestEvent(number=pr.get("number"), **_common(payload))


def _watch(payload: Dict[str, Any], event_type: str) -> InboundEvent:
    return WatchEvent(**_common(payload))


def _issue_comment(payload: Dict[str, Any], event_type: str) -> InboundEvent:
    issue = payload.get("issue") or {}
    comment = payload.get("comment") or {}
    return IssueCommentEvent(
        issue_number=issue.get("number"),
        comment_body=comment.get("body") or "",
        is_pull_request=bool(issue.get("pull_request")),
        **_common(payload),
    )


def _other(payload: Dict[str, Any], event_type: str) -> InboundEvent:
    return OtherEvent(event_type=event_type, **_common(payload))


_BUILDERS: Dict[str, Callable[[Dict[str, Any], str], InboundEvent]] = {
    "push": _push,
    "pull_request": _pull_request,
    "watch": _watch,
    "issue_comment": _issue_comment,
}


def parse_webhook(body: bytes, event_type: str) -> InboundEvent:
    """Parse a raw delivery body using the ``X-GitHub-Event`` header value.

    Raises MalformedPayload when the header is missing, the body is not a JSON
    object, or a known event lacks the fields the bot relies on.
    """
    if not event_type:
        raise MalformedPayload("missing X-GitHub-Event header")
    try:
        payload = json.loads(body)
    except ValueError as exc:
        raise MalformedPayload(f"invalid json payload: {exc}") from exc
    if not isinstance(payload, dict):
        raise MalformedPayload("payload is not a JSON object")

    builder = _BUILDERS.get(event_type, _other)
    try:
        return builder(payload, event_type)
    except ValidationError as exc:
        raise MalformedPayload(f"invalid {event_type} payload: {exc}") from exc
    except (AttributeError, TypeError) as exc:
        # A nested object arrived as a scalar or list, e.g. "sender": "octo"
        raise MalformedPayload(f"invalid {event_type} payload shape: {exc}") from exc
