"""Storage backend factory.

Instantiates the database session and migrator matching
config.database.backend.
"""

from typing import Any

from schemaledger.config.models import Config
from schemaledger.storage.dialects import get_dialect
from schemaledger.storage.migrator import Migrator
from schemaledger.storage.sqlite_session import SqliteSession


class StorageBackendFactory:
    """Factory for creating storage backend instances.

    Reads config.database.backend and returns the matching session
    and a Migrator bound to it.
    """

    def __init__(self, config: Config) -> None:
        self._config = config

    @property
    def backend(self) -> str:
        """Return the configured backend name."""
        return self._config.database.backend

    def create_session(self) -> Any:
        """Create an unconnected session implementing DbSessionPort."""
        database = self._config.database
        if self.backend == "postgres":
            from schemaledger.storage.postgres_session import PostgresSession

            return PostgresSession(database.dsn, database.connect_timeout_seconds)
        return SqliteSession(database.sqlite_path)

    def create_migrator(self, session: Any) -> Migrator:
        """Create a Migrator for the configured dialect and ledger table."""
        return Migrator(
            session,
            get_dialect(self.backend),
            table_name=self._config.migrations.table_name,
        )
