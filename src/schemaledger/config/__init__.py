"""Configuration management for schemaledger."""

from schemaledger.config.loader import load_config
from schemaledger.config.models import Config, DatabaseConfig, LoggingConfig, MigrationsConfig

__all__ = ["Config", "DatabaseConfig", "LoggingConfig", "MigrationsConfig", "load_config"]
