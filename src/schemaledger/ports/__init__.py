"""Port interfaces for schemaledger.

Ports define the contracts that adapters must implement. The
migration runner depends only on these abstractions, not on a
particular database driver.
"""

from schemaledger.ports.db_session import DbSessionPort
from schemaledger.ports.migrator import MigratorPort

__all__ = ["DbSessionPort", "MigratorPort"]
