"""schemaledger utility modules."""

from schemaledger.utils.hashing import compute_content_checksum
from schemaledger.utils.logging import configure_logging

__all__ = [
    "compute_content_checksum",
    "configure_logging",
]
