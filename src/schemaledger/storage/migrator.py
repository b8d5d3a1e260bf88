"""Migration ledger adapter.

Owns the ledger table and applies or rolls back a single migration
inside one transaction, so a migration either lands completely
(schema change plus ledger row) or not at all.
"""

import time
from typing import Any

from loguru import logger

from schemaledger.errors import MigrationExecutionError, MissingRollbackError
from schemaledger.models.migration import Migration, MigrationFile
from schemaledger.ports.db_session import DbSessionPort
from schemaledger.services.tokenizer import executable_statements
from schemaledger.storage.dialects import Dialect

DEFAULT_TABLE_NAME = "schema_migrations"


class Migrator:
    """
    Applies migrations against one database through a DbSessionPort.

    The session is injected, so several migrators (for instance one
    per test) can coexist without any process-wide connection state.
    """

    def __init__(
        self,
        session: DbSessionPort,
        dialect: Dialect,
        table_name: str = DEFAULT_TABLE_NAME,
    ) -> None:
        self.session = session
        self.dialect = dialect
        self.table_name = table_name

    async def initialize(self) -> None:
        """Create the ledger table and its index if absent. Safe to repeat."""
        async with self.session.transaction():
            for statement in self.dialect.ledger_statements(self.table_name):
                await self.session.execute(statement)
        logger.info("Initialized {} migration ledger {}", self.dialect.name, self.table_name)

    async def get_applied_migrations(self) -> list[Migration]:
        """Return ledger entries ordered by execution time, oldest first."""
        rows = await self.session.fetchall(
            f"""
            SELECT version, name, checksum, executed_at, execution_time_ms
            FROM {self.table_name}
            ORDER BY executed_at ASC, version ASC
            """
        )
        return [self._row_to_migration(row) for row in rows]

    async def apply_migration(self, migration: MigrationFile) -> int:
        """
        Apply a migration's up script and record it in the ledger.

        Args:
            migration: Migration file to apply.

        Returns:
            Execution time of the up statements in milliseconds.

        Raises:
            MigrationExecutionError: A statement or the ledger insert failed;
                nothing from this migration was committed.
        """
        insert_sql = (
            f"INSERT INTO {self.table_name} "
            "(version, name, checksum, execution_time_ms) "
            f"VALUES ({self.dialect.placeholders(4)})"
        )

        async with self.session.transaction():
            start = time.perf_counter()
            await self._execute_all(migration, executable_statements(migration.up_sql))
            execution_time = int((time.perf_counter() - start) * 1000)

            await self._execute_one(
                migration,
                insert_sql,
                [migration.version, migration.name, migration.checksum, execution_time],
            )

        logger.info(
            "Applied migration {} ({}) in {}ms",
            migration.version,
            migration.name,
            execution_time,
        )
        return execution_time

    async def rollback_migration(self, migration: MigrationFile) -> None:
        """
        Run a migration's down script and remove it from the ledger.

        Raises:
            MissingRollbackError: The file has no down script; the database
                is left untouched.
            MigrationExecutionError: A statement failed; nothing was committed.
        """
        if not migration.has_rollback:
            logger.warning(
                "No rollback SQL provided for migration {} ({})",
                migration.version,
                migration.name,
            )
            raise MissingRollbackError(migration.version)

        delete_sql = f"DELETE FROM {self.table_name} WHERE version = {self.dialect.placeholder()}"

        async with self.session.transaction():
            await self._execute_all(migration, executable_statements(migration.down_sql))
            await self._execute_one(migration, delete_sql, [migration.version])

        logger.info("Rolled back migration {} ({})", migration.version, migration.name)

    async def migration_exists(self, version: str) -> bool:
        """Check whether a version is recorded in the ledger."""
        row = await self.session.fetchone(
            f"SELECT 1 AS present FROM {self.table_name} WHERE version = {self.dialect.placeholder()}",
            [version],
        )
        return row is not None

    async def _execute_all(self, migration: MigrationFile, statements: list[str]) -> None:
        for statement in statements:
            await self._execute_one(migration, statement)

    async def _execute_one(
        self,
        migration: MigrationFile,
        statement: str,
        params: list[Any] | None = None,
    ) -> None:
        try:
            await self.session.execute(statement, params)
        except Exception as e:
            raise MigrationExecutionError(
                f"Migration {migration.version} failed at statement: {statement}: {e}",
                version=migration.version,
                statement=statement,
            ) from e

    def _row_to_migration(self, row: Any) -> Migration:
        """Convert a ledger row to a Migration model."""
        return Migration(
            version=row["version"],
            name=row["name"],
            checksum=row["checksum"],
            executed_at=row["executed_at"],
            execution_time_ms=row["execution_time_ms"],
        )
