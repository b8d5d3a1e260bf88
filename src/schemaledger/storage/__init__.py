"""
Storage layer for schemaledger.

- SqliteSession: aiosqlite-backed transactional session
- PostgresSession: psycopg-backed transactional session (optional extra)
- Migrator: ledger owner applying one migration per transaction
- Dialect: ledger DDL and placeholder style per backend

PostgresSession is not imported here so that psycopg stays optional.
"""

from schemaledger.storage.dialects import POSTGRES, SQLITE, Dialect, get_dialect
from schemaledger.storage.factory import StorageBackendFactory
from schemaledger.storage.health import check_connection
from schemaledger.storage.migrator import Migrator
from schemaledger.storage.sqlite_session import SqliteSession

__all__ = [
    "POSTGRES",
    "SQLITE",
    "Dialect",
    "Migrator",
    "SqliteSession",
    "StorageBackendFactory",
    "check_connection",
    "get_dialect",
]
