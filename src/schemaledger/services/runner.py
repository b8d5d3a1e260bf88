"""Migration orchestration.

Diffs the loaded migration files against the ledger and drives the
migrator one migration at a time. Each migration is atomic on its
own; a batch is not, so a failure leaves earlier migrations applied
and later ones pending.
"""

import bisect
from pathlib import Path

from loguru import logger

from schemaledger.errors import (
    ChecksumConflictError,
    DuplicateMigrationError,
    MigrationBatchError,
)
from schemaledger.models.migration import Migration, MigrationFile, MigrationStatus
from schemaledger.ports.migrator import MigratorPort
from schemaledger.services.loader import load_migrations


class MigrationRunner:
    """
    Applies and rolls back migrations in version order.

    Attributes:
        migrator: Ledger adapter for one database
        migrations: Loaded migration files, sorted by version
    """

    def __init__(self, migrator: MigratorPort) -> None:
        self.migrator = migrator
        self.migrations: list[MigrationFile] = []

    def load(self, directory: Path | str) -> list[MigrationFile]:
        """Replace the in-memory file list with a fresh scan of ``directory``."""
        self.migrations = load_migrations(directory)
        return self.migrations

    def add_migration(self, migration: MigrationFile) -> None:
        """Add a single migration file, keeping the list sorted by version."""
        if self.find(migration.version) is not None:
            raise DuplicateMigrationError(migration.version)
        versions = [m.version for m in self.migrations]
        self.migrations.insert(bisect.bisect(versions, migration.version), migration)

    def find(self, version: str) -> MigrationFile | None:
        """Return the loaded file for a version, if any."""
        for migration in self.migrations:
            if migration.version == version:
                return migration
        return None

    async def initialize(self) -> None:
        """Create the ledger if needed."""
        await self.migrator.initialize()

    async def migrate(self, target: str | None = None) -> list[str]:
        """
        Apply pending migrations in ascending version order.

        Args:
            target: Optional highest version to apply; later ones stay pending.

        Returns:
            Versions applied by this call; empty when nothing was pending.

        Raises:
            MigrationBatchError: On the first checksum conflict or execution
                failure. ``completed`` holds the versions applied before it.
        """
        applied = await self.migrator.get_applied_migrations()
        applied_versions = {m.version for m in applied}

        pending = [m for m in self.migrations if m.version not in applied_versions]
        if target is not None:
            pending = [m for m in pending if m.version <= target]

        completed: list[str] = []
        for migration in pending:
            try:
                self._validate_checksums(applied)

                if await self.migrator.migration_exists(migration.version):
                    logger.debug("Skipping already applied migration {}", migration.version)
                    continue

                await self.migrator.apply_migration(migration)
            except Exception as e:
                logger.error("Failed to apply migration {}: {}", migration.version, e)
                raise MigrationBatchError(
                    f"Migration {migration.version} failed after applying "
                    f"{len(completed)} migration(s): {e}",
                    version=migration.version,
                    completed=completed,
                ) from e

            completed.append(migration.version)

        if completed:
            logger.info("Applied {} migration(s)", len(completed))
        else:
            logger.info("No migrations to apply - database is up to date")

        return completed

    async def rollback(self, target_version: str | None = None) -> list[str]:
        """
        Roll back applied migrations.

        Args:
            target_version: Roll back every applied version greater than this,
                newest version first. When omitted, only the most recently
                applied migration is rolled back.

        Returns:
            Versions rolled back by this call.

        Raises:
            MigrationBatchError: On the first rollback failure, carrying the
                versions rolled back before it.
        """
        applied = await self.migrator.get_applied_migrations()

        if target_version is not None:
            to_rollback = sorted(
                (m for m in applied if m.version > target_version),
                key=lambda m: m.version,
                reverse=True,
            )
        else:
            to_rollback = applied[-1:]

        rolled_back: list[str] = []
        for entry in to_rollback:
            migration = self.find(entry.version)
            if migration is None:
                logger.warning("Migration file not found for applied migration {}", entry.version)
                continue

            try:
                await self.migrator.rollback_migration(migration)
            except Exception as e:
                logger.error("Failed to rollback migration {}: {}", migration.version, e)
                raise MigrationBatchError(
                    f"Rollback of {migration.version} failed after rolling back "
                    f"{len(rolled_back)} migration(s): {e}",
                    version=migration.version,
                    completed=rolled_back,
                ) from e

            rolled_back.append(migration.version)

        return rolled_back

    async def get_migration_status(self) -> MigrationStatus:
        """Compare the ledger with the loaded files."""
        applied = await self.migrator.get_applied_migrations()
        applied_versions = {m.version for m in applied}

        return MigrationStatus(
            applied=applied,
            pending=[m for m in self.migrations if m.version not in applied_versions],
            conflicts=self._find_conflicts(applied),
        )

    async def is_up_to_date(self) -> bool:
        """True when nothing is pending and no applied file has drifted."""
        status = await self.get_migration_status()
        return status.is_up_to_date()

    def _find_conflicts(self, applied: list[Migration]) -> list[str]:
        """Versions whose file checksum differs from the one recorded at apply time."""
        conflicts = []
        for entry in applied:
            migration = self.find(entry.version)
            if migration is not None and migration.checksum != entry.checksum:
                conflicts.append(entry.version)
        return conflicts

    def _validate_checksums(self, applied: list[Migration]) -> None:
        conflicts = self._find_conflicts(applied)
        if conflicts:
            raise ChecksumConflictError(conflicts)
