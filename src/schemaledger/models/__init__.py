"""Domain models for schemaledger."""

from schemaledger.models.migration import Migration, MigrationFile, MigrationStatus

__all__ = ["Migration", "MigrationFile", "MigrationStatus"]
