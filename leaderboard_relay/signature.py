"""HMAC-SHA256 signatures for GitHub webhook deliveries.

GitHub signs each delivery body with the App's webhook secret and sends the
hex digest as ``x-hub-signature-256: sha256=<hex>``.
"""

from __future__ import annotations

import hashlib
import hmac

__all__ = [
    "SIGNATURE_PREFIX",
    "compute_signature",
    "strip_signature_prefix",
    "timing_safe_equal",
    "verify_signature",
]

SIGNATURE_PREFIX = "sha256="


def compute_signature(body: bytes, secret: str) -> str:
    """Return the lowercase hex HMAC-SHA256 digest of ``body``."""
    return hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()


def strip_signature_prefix(header: str) -> str:
    """Remove the first ``sha256=`` from a signature header.

    No other validation happens here. A header without the prefix is
    returned unchanged and simply fails comparison later.
    """
    return header.replace(SIGNATURE_PREFIX, "", 1)


def timing_safe_equal(expected: str, actual: str) -> bool:
    """Compare two strings in time independent of where they differ.

    Inputs of different length fail before any character is inspected.
    Otherwise every character pair is XOR-accumulated over the full length,
    so a mismatch in the first position costs as much as one in the last.
    """
    if len(expected) != len(actual):
        return False

    result = 0
    for left, right in zip(expected, actual, strict=True):
        result |= ord(left) ^ ord(right)
    return result == 0


def verify_signature(body: bytes, header: str, secret: str) -> bool:
    """Return whether ``header`` is GitHub's signature of ``body``.

    An empty ``secret`` never verifies. Callers are expected to report the
    misconfiguration; this function only refuses the match.
    """
    if not secret:
        return False
    return timing_safe_equal(
        compute_signature(body, secret), strip_signature_prefix(header)
    )
