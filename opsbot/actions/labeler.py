import logging

from .base import ActionBase, ActionResult
from ..errors import RemoteAPIError

logger = logging.getLogger(__name__)


class Labeler(ActionBase):
    """Adds and removes single labels. Failures are logged, never commented."""

    def add_label(self, issue_number: int, label: str) -> ActionResult:
        try:
            labels = self.vcs.add_labels(self.repo, issue_number, [label])
        except RemoteAPIError as e:
            logger.warning(
                "labeler: failed to add %r to %s#%s: %s", label, self.repo.full_name, issue_number, e
            )
            return ActionResult(False, str(e))
        names = [x.get("name", "") for x in labels if isinstance(x, dict)]
        logger.info("labeler: %s#%s labels now %s", self.repo.full_name, issue_number, names)
        return ActionResult(True, f"added label {label}")

    def remove_label(self, issue_number: int, label: str) -> ActionResult:
        try:
            self.vcs.remove_label(self.repo, issue_number, label)
        except RemoteAPIError as e:
            logger.warning(
                "labeler: failed to remove %r from %s#%s: %s", label, self.repo.full_name, issue_number, e
            )
            return ActionResult(False, str(e))
        logger.info("labeler: removed %r from %s#%s", label, self.repo.full_name, issue_number)
        return ActionResult(True, f"removed label {label}")
