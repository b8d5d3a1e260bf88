"""SQLite database session on aiosqlite."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from types import TracebackType
from typing import Any

import aiosqlite
from loguru import logger

from schemaledger.errors import StorageError


class SqliteSession:
    """
    Transactional SQLite handle implementing DbSessionPort.

    The connection runs in autocommit mode and ``transaction()`` issues
    an explicit ``BEGIN``, so DDL statements take part in the transaction
    and are rolled back together with the ledger write.
    """

    def __init__(self, db_path: Path | str) -> None:
        """
        Initialize SqliteSession.

        Args:
            db_path: Path to SQLite database file.
        """
        self.db_path = Path(db_path)
        self._conn: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        """
        Open the database connection.

        Creates the database file and its parent directory if needed.
        """
        if self._conn is not None:
            return

        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            self._conn = await aiosqlite.connect(self.db_path, isolation_level=None)
        except Exception as e:
            raise StorageError(f"Cannot open SQLite database {self.db_path}: {e}") from e
        self._conn.row_factory = aiosqlite.Row

        await self._conn.execute("PRAGMA foreign_keys = ON")
        logger.debug("Opened SQLite database {}", self.db_path)

    async def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    async def __aenter__(self) -> "SqliteSession":
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    def _get_conn(self) -> aiosqlite.Connection:
        """Get database connection, raising if not connected."""
        if not self._conn:
            raise StorageError("Database not connected")
        return self._conn

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """
        Context manager for database transactions.

        Commits on success, rollbacks on exception.
        """
        conn = self._get_conn()
        await conn.execute("BEGIN")

        try:
            yield
            await conn.execute("COMMIT")
        except Exception:
            # SQLite may already have ended the transaction (OR ROLLBACK, I/O errors)
            if conn.in_transaction:
                await conn.execute("ROLLBACK")
            raise

    async def execute(self, sql: str, params: list[Any] | None = None) -> aiosqlite.Cursor:
        """Execute a SQL statement."""
        conn = self._get_conn()
        return await conn.execute(sql, params or [])

    async def fetchone(self, sql: str, params: list[Any] | None = None) -> aiosqlite.Row | None:
        """Execute query and fetch one row."""
        cursor = await self.execute(sql, params)
        return await cursor.fetchone()

    async def fetchall(self, sql: str, params: list[Any] | None = None) -> list[aiosqlite.Row]:
        """Execute query and fetch all rows."""
        cursor = await self.execute(sql, params)
        result = await cursor.fetchall()
        return list(result) if result else []
