import hashlib
import hmac
from typing import Optional

from .errors import InvalidSignature

SIGNATURE_PREFIX = "sha256="


def expected_signature(secret: str, body: bytes) -> str:
    """Value GitHub sends in X-Hub-Signature-256 for ``body``."""
    return SIGNATURE_PREFIX + hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()


def verify_signature(secret: str, body: bytes, sig_header: Optional[str]) -> None:
    """Raise InvalidSignature unless ``sig_header`` signs ``body``.

    An empty secret disables the check, matching a hook configured without one.
    """
    if not secret:
        return
    if not (sig_header or "").startswith(SIGNATURE_PREFIX):
        raise InvalidSignature(f"X-Hub-Signature-256 missing or not {SIGNATURE_PREFIX}...")
    if not hmac.compare_digest(expected_signature(secret, body), sig_header):
        raise InvalidSignature("signature mismatch")
