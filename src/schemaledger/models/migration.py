"""Migration models: ledger entries, files on disk, and derived status."""

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field

from schemaledger.services.tokenizer import executable_statements


class Migration(BaseModel):
    """
    A row of the migration ledger.

    Exactly one entry exists per applied version. Entries are inserted
    when a migration is applied and deleted when it is rolled back,
    never updated.
    """

    version: str
    name: str
    checksum: str
    executed_at: datetime
    execution_time_ms: int = Field(ge=0)


class MigrationFile(BaseModel):
    """
    A migration discovered on disk.

    Built fresh on every directory scan and never persisted itself;
    the checksum covers the whole original file, up and down sections.
    """

    version: str = Field(min_length=1)
    name: str
    up_sql: str
    down_sql: str | None = None
    checksum: str
    path: Path | None = None

    model_config = {"frozen": True}

    @property
    def has_rollback(self) -> bool:
        """True when the down section holds at least one executable statement."""
        return bool(executable_statements(self.down_sql))


class MigrationStatus(BaseModel):
    """Ledger contents compared against the loaded migration files."""

    applied: list[Migration] = Field(default_factory=list)
    pending: list[MigrationFile] = Field(default_factory=list)
    conflicts: list[str] = Field(default_factory=list)

    def is_up_to_date(self) -> bool:
        return not self.pending and not self.conflicts

    def has_conflicts(self) -> bool:
        return bool(self.conflicts)

    def pending_count(self) -> int:
        return len(self.pending)

    def applied_count(self) -> int:
        return len(self.applied)

    def applied_versions(self) -> list[str]:
        return [m.version for m in self.applied]

    def pending_versions(self) -> list[str]:
        return [m.version for m in self.pending]
