"""Shared pytest fixtures for schemaledger tests."""

from collections.abc import AsyncIterator, Callable
from pathlib import Path

import pytest

from schemaledger.services.runner import MigrationRunner
from schemaledger.storage.dialects import SQLITE
from schemaledger.storage.migrator import Migrator
from schemaledger.storage.sqlite_session import SqliteSession


@pytest.fixture
def migrations_dir(tmp_path: Path) -> Path:
    """Provide an empty migration directory."""
    directory = tmp_path / "migrations"
    directory.mkdir()
    return directory


@pytest.fixture
def write_migration(migrations_dir: Path) -> Callable[..., Path]:
    """Write a migration file, optionally with a ``-- DOWN`` section."""

    def _write(filename: str, up: str, down: str | None = None) -> Path:
        content = up if down is None else f"{up}\n\n-- DOWN\n{down}\n"
        path = migrations_dir / filename
        path.write_text(content)
        return path

    return _write


@pytest.fixture
async def session(tmp_path: Path) -> AsyncIterator[SqliteSession]:
    """Provide a connected SQLite session on a temporary database."""
    db = SqliteSession(tmp_path / "test.db")
    await db.connect()
    yield db
    await db.close()


@pytest.fixture
async def migrator(session: SqliteSession) -> Migrator:
    """Provide an initialized SQLite migrator."""
    m = Migrator(session, SQLITE)
    await m.initialize()
    return m


@pytest.fixture
def runner(migrator: Migrator) -> MigrationRunner:
    """Provide a runner bound to the SQLite migrator."""
    return MigrationRunner(migrator)
