"""Per-backend differences for the migration ledger.

A dialect only knows how to create the ledger table and how to
spell a bind parameter. Statement splitting and transaction flow
are shared by every backend.
"""

from dataclasses import dataclass
from typing import Literal

_SQLITE_LEDGER = """
CREATE TABLE IF NOT EXISTS {table} (
    version TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    checksum TEXT NOT NULL,
    executed_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now')),
    execution_time_ms INTEGER NOT NULL
)
"""

_POSTGRES_LEDGER = """
CREATE TABLE IF NOT EXISTS {table} (
    version VARCHAR(255) PRIMARY KEY,
    name VARCHAR(255) NOT NULL,
    checksum VARCHAR(255) NOT NULL,
    executed_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    execution_time_ms BIGINT NOT NULL
)
"""

_INDEX = "CREATE INDEX IF NOT EXISTS idx_{table}_executed_at ON {table}(executed_at)"


@dataclass(frozen=True)
class Dialect:
    """SQL dialect used by the migrator."""

    name: str
    ledger_ddl: str
    placeholder_style: Literal["qmark", "format"]

    def placeholder(self) -> str:
        """Bind parameter marker for this backend."""
        return "?" if self.placeholder_style == "qmark" else "%s"

    def placeholders(self, count: int) -> str:
        """Comma separated bind parameter markers."""
        return ", ".join(self.placeholder() for _ in range(count))

    def ledger_statements(self, table: str) -> list[str]:
        """DDL creating the ledger table and its executed_at index."""
        return [
            self.ledger_ddl.format(table=table).strip(),
            _INDEX.format(table=table),
        ]


SQLITE = Dialect(name="sqlite", ledger_ddl=_SQLITE_LEDGER, placeholder_style="qmark")
POSTGRES = Dialect(name="postgres", ledger_ddl=_POSTGRES_LEDGER, placeholder_style="format")

DIALECTS: dict[str, Dialect] = {d.name: d for d in (SQLITE, POSTGRES)}


def get_dialect(name: str) -> Dialect:
    """Look up a dialect by backend name."""
    try:
        return DIALECTS[name]
    except KeyError:
        raise ValueError(f"Unsupported database backend: {name}") from None
