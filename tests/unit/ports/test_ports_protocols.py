"""Tests that concrete implementations satisfy port protocols."""

import inspect
from unittest.mock import MagicMock

import pytest

from schemaledger.ports import DbSessionPort, MigratorPort
from schemaledger.services.runner import MigrationRunner
from schemaledger.storage.dialects import SQLITE
from schemaledger.storage.migrator import Migrator
from schemaledger.storage.sqlite_session import SqliteSession


def protocol_methods(protocol: type) -> set[str]:
    return {
        name
        for name, member in vars(protocol).items()
        if not name.startswith("_") and callable(member)
    }


def test_sqlite_session_satisfies_db_session_port() -> None:
    """Verify SqliteSession provides every DbSessionPort method."""
    for name in protocol_methods(DbSessionPort):
        assert callable(getattr(SqliteSession, name, None)), name


def test_postgres_session_satisfies_db_session_port() -> None:
    pytest.importorskip("psycopg")
    from schemaledger.storage.postgres_session import PostgresSession

    for name in protocol_methods(DbSessionPort):
        assert callable(getattr(PostgresSession, name, None)), name


def test_migrator_satisfies_migrator_port() -> None:
    """Verify Migrator provides every MigratorPort coroutine."""
    for name in protocol_methods(MigratorPort):
        method = getattr(Migrator, name, None)
        assert method is not None, name
        assert inspect.iscoroutinefunction(method), name


@pytest.mark.asyncio
async def test_minimal_session_drives_migrator() -> None:
    """Any object with the DbSessionPort shape can back a Migrator."""

    class RecordingSession:
        """Minimal DbSessionPort implementation."""

        def __init__(self) -> None:
            self.statements: list[str] = []

        async def execute(self, sql: str, params: list | None = None):  # noqa: ARG002
            self.statements.append(sql)
            return MagicMock()

        async def fetchone(self, sql: str, params: list | None = None):  # noqa: ARG002
            return None

        async def fetchall(self, sql: str, params: list | None = None):  # noqa: ARG002
            return []

        def transaction(self):
            class TransactionContext:
                async def __aenter__(self):
                    return None

                async def __aexit__(self, *args):
                    return None

            return TransactionContext()

    session: DbSessionPort = RecordingSession()
    runner = MigrationRunner(Migrator(session, SQLITE))

    await runner.initialize()

    assert session.statements[0].startswith("CREATE TABLE IF NOT EXISTS schema_migrations")
    assert await runner.migrate() == []
