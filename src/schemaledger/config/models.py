"""Pydantic configuration models for schemaledger."""

import re
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class DatabaseConfig(BaseModel):
    """Database connection configuration."""

    backend: Literal["sqlite", "postgres"] = "sqlite"
    sqlite_path: Path = Path("schemaledger.db")
    dsn: str = "postgresql://localhost:5432/postgres"
    connect_timeout_seconds: float = Field(default=10.0, ge=1.0, le=300.0)
    slow_check_threshold_ms: int = Field(default=1000, ge=1, le=60000)

    @field_validator("sqlite_path", mode="before")
    @classmethod
    def expand_path(cls, v: Path | str) -> Path:
        """Expand user home in the database path."""
        if isinstance(v, str):
            v = Path(v)
        return v.expanduser()

    @field_validator("dsn")
    @classmethod
    def validate_dsn(cls, v: str) -> str:
        """Validate PostgreSQL DSN scheme."""
        if not v.startswith(("postgresql://", "postgres://")):
            raise ValueError("dsn must start with postgresql:// or postgres://")
        return v


class MigrationsConfig(BaseModel):
    """Migration discovery and ledger configuration."""

    directory: Path = Path("migrations")
    table_name: str = Field(default="schema_migrations", min_length=1, max_length=63)

    @field_validator("directory", mode="before")
    @classmethod
    def expand_directory(cls, v: Path | str) -> Path:
        """Expand user home in the migrations directory."""
        if isinstance(v, str):
            v = Path(v)
        return v.expanduser()

    @field_validator("table_name")
    @classmethod
    def validate_table_name(cls, v: str) -> str:
        """Ledger table name is interpolated into DDL, so keep it a plain identifier."""
        if not _IDENTIFIER.match(v):
            raise ValueError(f"table_name must be a plain SQL identifier, got {v!r}")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration for loguru."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["console", "json"] = "console"
    file: Path | None = None
    rotation: str = "10 MB"
    retention: str = "7 days"


class Config(BaseSettings):
    """Root configuration for schemaledger."""

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    migrations: MigrationsConfig = Field(default_factory=MigrationsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "SCHEMALEDGER_",
        "env_nested_delimiter": "__",
    }
