"""Database connectivity check."""

import time

from loguru import logger

from schemaledger.errors import StorageError
from schemaledger.ports.db_session import DbSessionPort


async def check_connection(session: DbSessionPort, slow_threshold_ms: int = 1000) -> float:
    """
    Run a trivial query to verify the database answers.

    Args:
        session: Connected database session.
        slow_threshold_ms: Round trips slower than this are logged as warnings.

    Returns:
        Round-trip time in milliseconds.

    Raises:
        StorageError: If the query fails or returns an unexpected value.
    """
    start = time.perf_counter()
    try:
        row = await session.fetchone("SELECT 1 AS value")
    except StorageError:
        raise
    except Exception as e:
        raise StorageError(f"Database health check failed: {e}") from e
    elapsed_ms = (time.perf_counter() - start) * 1000

    if row is None or row["value"] != 1:
        raise StorageError("Database health check returned unexpected value")

    logger.debug("Database health check passed in {:.1f}ms", elapsed_ms)
    if elapsed_ms > slow_threshold_ms:
        logger.warning("Database health check took longer than expected: {:.1f}ms", elapsed_ms)

    return elapsed_ms
