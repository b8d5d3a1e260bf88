"""Port interface for the migration ledger adapter."""

from typing import Protocol

from schemaledger.models.migration import Migration, MigrationFile


class MigratorPort(Protocol):
    """Protocol for applying migrations and reading the ledger."""

    async def initialize(self) -> None:
        """Create the ledger table if absent."""
        ...

    async def get_applied_migrations(self) -> list[Migration]:
        """Ledger entries, oldest first."""
        ...

    async def apply_migration(self, migration: MigrationFile) -> int:
        """Apply one migration atomically; return execution time in ms."""
        ...

    async def rollback_migration(self, migration: MigrationFile) -> None:
        """Roll back one migration atomically."""
        ...

    async def migration_exists(self, version: str) -> bool:
        """Check whether a version is recorded in the ledger."""
        ...
