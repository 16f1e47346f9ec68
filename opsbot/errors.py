from typing import Optional


class OpsBotError(Exception):
    """Base class for errors raised by the bot."""


class MalformedPayload(OpsBotError):
    """The webhook delivery could not be parsed into a known event."""


class InvalidSignature(OpsBotError):
    """The delivery signature did not match the configured secret."""


class RemoteAPIError(OpsBotError):
    """A GitHub API call failed, either in transport or with a non-2xx status.

    ``str(err)`` is the text posted back to users when a merge fails, so it
    carries the request line and GitHub's own message.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
