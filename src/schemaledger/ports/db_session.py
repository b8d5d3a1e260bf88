"""Port interface for database session operations."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Protocol


class DbSessionPort(Protocol):
    """Protocol for database session operations.

    The transactional SQL-execution handle handed to the migrator.
    Rows returned by fetch methods support mapping access by column
    name (``row["version"]``).
    """

    async def execute(self, sql: str, params: list[Any] | None = None) -> Any:
        """Execute a SQL statement.

        Args:
            sql: SQL statement to execute
            params: Optional parameter list

        Returns:
            Cursor or result object
        """
        ...

    async def fetchone(self, sql: str, params: list[Any] | None = None) -> Any | None:
        """Execute query and fetch one row."""
        ...

    async def fetchall(self, sql: str, params: list[Any] | None = None) -> list[Any]:
        """Execute query and fetch all rows."""
        ...

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Start a transaction context.

        Commits on success, rolls back on exception.

        Yields:
            None (context manager)
        """
        yield
