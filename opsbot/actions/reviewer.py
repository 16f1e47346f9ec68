import logging
from typing import List, Optional

from .base import ActionBase, ActionResult
from ..errors import RemoteAPIError

logger = logging.getLogger(__name__)


class Reviewer(ActionBase):
    def request_review(self, pr_number: int, reviewers: Optional[List[str]] = None) -> ActionResult:
        """Ask for review on a PR, defaulting to the repository owner alone."""
        wanted = reviewers or [self.repo.owner]
        try:
            pr = self.vcs.request_reviewers(self.repo, pr_number, wanted)
        except RemoteAPIError as e:
            logger.warning(
                "reviewer: failed to request %s on %s#%s: %s", wanted, self.repo.full_name, pr_number, e
            )
            return ActionResult(False, str(e))
        requested = [u.get("login", "") for u in pr.get("requested_reviewers", []) if isinstance(u, dict)]
        logger.info("reviewer: %s#%s now awaiting %s", self.repo.full_name, pr_number, requested)
        return ActionResult(True, f"requested review from {', '.join(wanted)}")
