from typing import Any, Dict, List

import pytest

from opsbot.events import RepositoryRef


class FakeVCS:
    """In-memory stand-in for the GitHub client that records every call."""

    def __init__(self):
        self.calls: List[tuple] = []
        self.merged_before = False
        self.merge_result: Dict[str, Any] = {"merged": True, "sha": "abc123", "message": "merged"}
        self.errors: Dict[str, Exception] = {}

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, *args))
        if name in self.errors:
            raise self.errors[name]

    def calls_to(self, name: str) -> List[tuple]:
        return [c for c in self.calls if c[0] == name]

    def add_labels(self, repo, number, labels):
        self._record("add_labels", repo, number, labels)
        return [{"name": x} for x in labels]

    def remove_label(self, repo, number, label):
        self._record("remove_label", repo, number, label)
        return []

    def request_reviewers(self, repo, number, reviewers):
        self._record("request_reviewers", repo, number, reviewers)
        return {"number": number, "requested_reviewers": [{"login": r} for r in reviewers]}

    def is_merged(self, repo, number):
        self._record("is_merged", repo, number)
        return self.merged_before

    def merge(self, repo, number, commit_message):
        self._record("merge", repo, number, commit_message)
        return self.merge_result

    def create_comment(self, repo, number, body):
        self._record("create_comment", repo, number, body)
        return f"https://github.com/{repo.full_name}/issues/{number}#issuecomment-1"

    def comments(self) -> List[str]:
        return [c[3] for c in self.calls_to("create_comment")]


@pytest.fixture
def vcs() -> FakeVCS:
    return FakeVCS()


@pytest.fixture
def repo() -> RepositoryRef:
    return RepositoryRef(owner="octo", name="reef")

