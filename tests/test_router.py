import logging

import pytest

from opsbot.config import Settings
from opsbot.errors import MalformedPayload
from opsbot.events import EventKind
from opsbot.router import Dispatcher, OutcomeStatus

from payloads import comment_payload, encode, pull_request_payload, repository_payload, watch_payload

MUTATIONS = {"add_labels", "remove_label", "request_reviewers", "merge", "create_comment"}


@pytest.fixture
def dispatcher(vcs):
    return Dispatcher(Settings(), vcs=vcs)


def test_every_event_kind_has_a_handler(dispatcher):
    assert set(dispatcher._handlers) == set(EventKind)


def test_label_comment_adds_label_once(dispatcher, vcs, repo):
    outcome = dispatcher.dispatch(encode(comment_payload("please /label foo", number=3)), "issue_comment")
    assert outcome.status is OutcomeStatus.handled
    assert vcs.calls == [("add_labels", repo, 3, ["foo"])]


def test_trailing_label_keyword_does_nothing(dispatcher, vcs):
    outcome = dispatcher.dispatch(encode(comment_payload("needs a /label")), "issue_comment")
    assert outcome.status is OutcomeStatus.ignored
    assert vcs.calls == []


def test_unlabel_comment(dispatcher, vcs, repo):
    dispatcher.dispatch(encode(comment_payload("/un-label wip", action="edited")), "issue_comment")
    assert vcs.calls == [("remove_label", repo, 42, "wip")]


def test_label_and_lgtm_both_run(dispatcher, vcs, repo):
    outcome = dispatcher.dispatch(encode(comment_payload("/label bug /lgtm", number=42)), "issue_comment")
    assert vcs.calls_to("add_labels") == [("add_labels", repo, 42, ["bug"])]
    assert vcs.calls_to("merge") == [("merge", repo, 42, "merge: PR(#42)")]
    assert vcs.calls[0][0] == "add_labels"
    assert len(outcome.results) == 2


def test_deleted_comment_is_ignored(dispatcher, vcs):
    outcome = dispatcher.dispatch(encode(comment_payload("/lgtm", action="deleted")), "issue_comment")
    assert outcome.status is OutcomeStatus.ignored
    assert vcs.calls == []


@pytest.mark.parametrize("action", ["opened", "reopened"])
def test_opened_pull_request_requests_owner_review(dispatcher, vcs, repo, action):
    outcome = dispatcher.dispatch(encode(pull_request_payload(action, number=5)), "pull_request")
    assert outcome.status is OutcomeStatus.handled
    assert vcs.calls == [("request_reviewers", repo, 5, ["octo"])]


@pytest.mark.parametrize("action", ["closed", "synchronize", "labeled"])
def test_other_pull_request_actions_do_nothing(dispatcher, vcs, action):
    outcome = dispatcher.dispatch(encode(pull_request_payload(action)), "pull_request")
    assert outcome.status is OutcomeStatus.ignored
    assert vcs.calls == []


@pytest.mark.parametrize("action", ["starred", "started"])
def test_star_is_logged_without_api_calls(dispatcher, vcs, caplog, action):
    with caplog.at_level(logging.INFO, logger="opsbot.router"):
        outcome = dispatcher.dispatch(encode(watch_payload(action)), "watch")
    assert outcome.status is OutcomeStatus.handled
    assert not MUTATIONS.intersection(c[0] for c in vcs.calls)
    assert "fan starred repository octo/reef" in caplog.text


def test_push_is_acknowledged_only(dispatcher, vcs):
    body = encode({"ref": "refs/heads/main", "repository": repository_payload()})
    assert dispatcher.dispatch(body, "push").status is OutcomeStatus.ignored
    assert vcs.calls == []


def test_unknown_event_is_logged(dispatcher, vcs, caplog):
    with caplog.at_level(logging.INFO, logger="opsbot.router"):
        outcome = dispatcher.dispatch(encode({"zen": "Design for failure."}), "ping")
    assert outcome.status is OutcomeStatus.unknown
    assert "unknown event type ping" in caplog.text
    assert vcs.calls == []


def test_malformed_payload_raises(dispatcher):
    with pytest.raises(MalformedPayload):
        dispatcher.dispatch(b"not json", "issue_comment")


def test_builds_github_client_from_settings():
    d = Dispatcher(Settings(bot_token="tok", github_api_url="https://ghe.example.test/api/v3/"))
    assert d.vcs.base == "https://ghe.example.test/api/v3"
    assert d.vcs.headers["Authorization"] == "Bearer tok"


def test_trailing_unlabel_keyword_does_nothing(dispatcher, vcs):
    outcome = dispatcher.dispatch(encode(comment_payload("drop it /un-label")), "issue_comment")
    assert outcome.status is OutcomeStatus.ignored
    assert vcs.calls == []


def test_crashing_command_does_not_skip_the_next(dispatcher, vcs, repo):
    vcs.errors["add_labels"] = ValueError("Expecting value: line 1 column 1 (char 0)")
    outcome = dispatcher.dispatch(encode(comment_payload("/label bug /lgtm", number=42)), "issue_comment")
    assert vcs.calls_to("merge") == [("merge", repo, 42, "merge: PR(#42)")]
    assert vcs.comments() == ["PR #42 was merged."]
    assert [r.succeeded for r in outcome.results] == [False, True]


def test_lgtm_on_plain_issue_is_logged_and_attempted(dispatcher, vcs, caplog):
    with caplog.at_level(logging.INFO, logger="opsbot.router"):
        dispatcher.dispatch(encode(comment_payload("/lgtm", number=8, pr=False)), "issue_comment")
    assert "/lgtm on plain issue octo/reef#8" in caplog.text
    assert len(vcs.calls_to("merge")) == 1
