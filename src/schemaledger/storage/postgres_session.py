"""PostgreSQL database session on psycopg 3."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from types import TracebackType
from typing import TYPE_CHECKING, Any

from loguru import logger

from schemaledger.errors import ConfigurationError, StorageError

if TYPE_CHECKING:
    import psycopg


class PostgresSession:
    """
    Transactional PostgreSQL handle implementing DbSessionPort.

    The connection stays in autocommit mode outside ``transaction()``
    so ledger reads never leave an idle transaction open; inside it,
    psycopg issues ``BEGIN`` and commits or rolls back on exit.
    """

    def __init__(self, dsn: str, connect_timeout_seconds: float = 10.0) -> None:
        self.dsn = dsn
        self.connect_timeout_seconds = connect_timeout_seconds
        self._conn: "psycopg.AsyncConnection[Any] | None" = None

    async def connect(self) -> None:
        """Open the database connection."""
        if self._conn is not None:
            return

        try:
            import psycopg
            from psycopg.rows import dict_row
        except ImportError as e:
            raise ConfigurationError(
                "PostgreSQL backend requires psycopg: pip install 'schemaledger[postgres]'"
            ) from e

        try:
            self._conn = await psycopg.AsyncConnection.connect(
                self.dsn,
                autocommit=True,
                row_factory=dict_row,
                connect_timeout=int(self.connect_timeout_seconds),
            )
        except psycopg.Error as e:
            raise StorageError(f"Cannot connect to PostgreSQL: {e}") from e
        logger.debug("Connected to PostgreSQL")

    async def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    async def __aenter__(self) -> "PostgresSession":
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    def _get_conn(self) -> "psycopg.AsyncConnection[Any]":
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
        async with conn.transaction():
            yield

    async def execute(self, sql: str, params: list[Any] | None = None) -> Any:
        """Execute a SQL statement.

        Without params the statement is sent as-is, so literal ``%``
        signs in migration bodies need no escaping.
        """
        conn = self._get_conn()
        return await conn.execute(sql, params or None)

    async def fetchone(self, sql: str, params: list[Any] | None = None) -> dict[str, Any] | None:
        """Execute query and fetch one row."""
        cursor = await self.execute(sql, params)
        return await cursor.fetchone()

    async def fetchall(self, sql: str, params: list[Any] | None = None) -> list[dict[str, Any]]:
        """Execute query and fetch all rows."""
        cursor = await self.execute(sql, params)
        return list(await cursor.fetchall())
