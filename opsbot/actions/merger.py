import logging

from .base import ActionBase, ActionResult
from ..errors import RemoteAPIError

logger = logging.getLogger(__name__)


class Merger(ActionBase):
    """Merges a PR on /lgtm and always leaves a comment with the outcome.

    Outcomes are terminal: already merged, merged now, blocked (GitHub answered
    but did not merge) or an API error whose text is posted verbatim.
    """

    def _send_comment(self, number: int, comment: str) -> None:
        logger.info("send comment to %s #%d : %s", self.repo.full_name, number, comment)
        try:
            self.vcs.create_comment(self.repo, number, comment)
        except RemoteAPIError as e:
            logger.warning("merger: failed to comment on %s#%d: %s", self.repo.full_name, number, e)

    def _merged_before(self, number: int) -> bool:
        try:
            return self.vcs.is_merged(self.repo, number)
        except RemoteAPIError as e:
            # Unknown state: fall through to a merge attempt, which reports its own error
            logger.warning("merger: merge status unavailable for %s#%d: %s", self.repo.full_name, number, e)
            return False

    def merge_if_approved(self, number: int) -> ActionResult:
        merge_comment = f"PR #{number} was merged."
        commit_msg = f"merge: PR(#{number})"
        fail_msg = f"Fail to merge this PR #{number}"

        if self._merged_before(number):
            logger.info("merger: %s#%d already merged", self.repo.full_name, number)
            self._send_comment(number, merge_comment)
            return ActionResult(True, merge_comment)

        logger.info("merger: start to %s on %s", commit_msg, self.repo.full_name)
        try:
            result = self.vcs.merge(self.repo, number, commit_msg)
        except RemoteAPIError as e:
            logger.warning("merger: merge of %s#%d failed: %s", self.repo.full_name, number, e)
            self._send_comment(number, str(e))
            return ActionResult(False, str(e))

        if result.get("merged") is True:
            logger.info("merger: %s#%d merged as %s", self.repo.full_name, number, result.get("sha"))
            self._send_comment(number, merge_comment)
            return ActionResult(True, merge_comment)

        logger.warning("merger: %s#%d not merged: %s", self.repo.full_name, number, result.get("message"))
        self._send_comment(number, fail_msg)
        return ActionResult(False, fail_msg)
