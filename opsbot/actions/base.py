from dataclasses import dataclass

from ..adapters.vcs_github import VCS
from ..events import RepositoryRef


@dataclass(frozen=True)
class ActionResult:
    succeeded: bool
    message: str


class ActionBase:
    def __init__(self, vcs: VCS, repo: RepositoryRef):
        self.vcs = vcs
        self.repo = repo
