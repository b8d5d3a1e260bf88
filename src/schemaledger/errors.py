"""schemaledger error types.

All custom exceptions inherit from SchemaLedgerError to allow
catching any schemaledger-specific error.
"""


class SchemaLedgerError(Exception):
    """Base exception for all schemaledger errors."""

    pass


class ConfigurationError(SchemaLedgerError):
    """Invalid configuration."""

    pass


class StorageError(SchemaLedgerError):
    """Database session or connection failed."""

    pass


class MigrationError(SchemaLedgerError):
    """Base exception for migration engine failures."""

    pass


class MigrationDirectoryError(MigrationError):
    """Migration directory or file could not be read."""

    def __init__(self, message: str, path: str) -> None:
        super().__init__(message)
        self.path = path


class DuplicateMigrationError(MigrationError):
    """Two migration files share the same version."""

    def __init__(self, version: str) -> None:
        super().__init__(f"Duplicate migration version {version}")
        self.version = version


class ChecksumConflictError(MigrationError):
    """Applied migration files changed since they were recorded."""

    def __init__(self, conflicts: list[str]) -> None:
        super().__init__(f"Checksum mismatch for applied migration(s): {', '.join(conflicts)}")
        self.conflicts = conflicts


class MigrationExecutionError(MigrationError):
    """A statement failed inside a migration transaction."""

    def __init__(self, message: str, version: str, statement: str) -> None:
        super().__init__(message)
        self.version = version
        self.statement = statement


class MissingRollbackError(MigrationError):
    """Migration has no down script to roll back with."""

    def __init__(self, version: str) -> None:
        super().__init__(f"No rollback SQL provided for migration {version}")
        self.version = version


class MigrationBatchError(MigrationError):
    """A migrate or rollback batch stopped at its first failure.

    ``completed`` lists the versions processed successfully before the
    failing ``version``; the underlying error is chained as ``__cause__``.
    """

    def __init__(self, message: str, version: str, completed: list[str]) -> None:
        super().__init__(message)
        self.version = version
        self.completed = completed
