from typing import Optional, Dict, Any, List
from urllib.parse import quote

import httpx

from ..errors import RemoteAPIError
from ..events import RepositoryRef


def _error_message(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.text.strip() or resp.reason_phrase
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return resp.reason_phrase


class VCS:
    """Thin GitHub REST client for the operations the bot performs.

    Every failure, in transport or as a non-2xx status, is raised as
    RemoteAPIError. ``transport`` lets tests swap in httpx.MockTransport.
    """

    def __init__(
        self,
        token: str,
        base: str = "https://api.github.com",
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base = base.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self.headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "opsbot",
        }
        if token:
            self.headers["Authorization"] = f"Bearer {token}"

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> httpx.Response:
        url = f"{self.base}{path}"
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                return client.request(method, url, headers=self.headers, json=payload)
        except httpx.HTTPError as e:
            raise RemoteAPIError(f"{method} {url}: {e}") from e

    @staticmethod
    def _raise_for_status(resp: httpx.Response) -> None:
        if resp.is_success:
            return
        raise RemoteAPIError(
            f"{resp.request.method} {resp.request.url}: {resp.status_code} {_error_message(resp)}",
            status_code=resp.status_code,
        )

    @staticmethod
    def _json(resp: httpx.Response) -> Any:
        try:
            return resp.json()
        except ValueError as e:
            raise RemoteAPIError(
                f"{resp.request.method} {resp.request.url}: {resp.status_code} undecodable body: {e}",
                status_code=resp.status_code,
            ) from e

    def add_labels(self, repo: RepositoryRef, number: int, labels: List[str]) -> List[Dict[str, Any]]:
        """Add labels to an issue or PR; returns the issue's full label list."""
        resp = self._request(
            "POST", f"/repos/{repo.owner}/{repo.name}/issues/{number}/labels", {"labels": labels}
        )
        self._raise_for_status(resp)
        return self._json(resp)

    def remove_label(self, repo: RepositoryRef, number: int, label: str) -> List[Dict[str, Any]]:
        path = f"/repos/{repo.owner}/{repo.name}/issues/{number}/labels/{quote(label, safe='')}"
        resp = self._request("DELETE", path)
        self._raise_for_status(resp)
        return self._json(resp)

    def request_reviewers(self, repo: RepositoryRef, number: int, reviewers: List[str]) -> Dict[str, Any]:
        resp = self._request(
            "POST",
            f"/repos/{repo.owner}/{repo.name}/pulls/{number}/requested_reviewers",
            {"reviewers": reviewers},
        )
        self._raise_for_status(resp)
        return self._json(resp)

    def is_merged(self, repo: RepositoryRef, number: int) -> bool:
        """GitHub answers 204 for a merged PR and 404 otherwise."""
        resp = self._request("GET", f"/repos/{repo.owner}/{repo.name}/pulls/{number}/merge")
        if resp.status_code == 204:
            return True
        if resp.status_code == 404:
            return False
        self._raise_for_status(resp)
        return False

    def merge(self, repo: RepositoryRef, number: int, commit_message: str) -> Dict[str, Any]:
        """Merge a PR. The returned dict carries ``merged``, ``sha`` and ``message``."""
        resp = self._request(
            "PUT",
            f"/repos/{repo.owner}/{repo.name}/pulls/{number}/merge",
            {"commit_message": commit_message},
        )
        self._raise_for_status(resp)
        return self._json(resp)

    def create_comment(self, repo: RepositoryRef, number: int, body: str) -> str:
        """Create an issue comment and return its html_url."""
        resp = self._request(
            "POST", f"/repos/{repo.owner}/{repo.name}/issues/{number}/comments", {"body": body}
        )
        self._raise_for_status(resp)
        data = self._json(resp)
        return data.get("html_url", "") if isinstance(data, dict) else ""
