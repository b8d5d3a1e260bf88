"""Hashing utilities for migration checksums."""

import hashlib


def compute_content_checksum(content: str | bytes) -> str:
    """
    Compute SHA-256 checksum of content.

    Used only for drift detection between a migration file and the
    ledger, so stability matters more than cryptographic strength.

    Args:
        content: String or bytes content.

    Returns:
        Hex-encoded SHA-256 hash.
    """
    if isinstance(content, str):
        content = content.encode("utf-8")

    return hashlib.sha256(content).hexdigest()
