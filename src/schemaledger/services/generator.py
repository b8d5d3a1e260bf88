"""Scaffolding for new migration files."""

import re
from pathlib import Path

from loguru import logger

from schemaledger.errors import MigrationDirectoryError, MigrationError
from schemaledger.services.loader import DOWN_MARKER

VERSION_WIDTH = 3

_UNSAFE = re.compile(r"[^a-z0-9]+")

TEMPLATE = """-- Migration: {name}
-- Version: {version}
-- Description: {name}

-- Add your migration SQL here


{down_marker}
-- Add rollback SQL here (optional)

"""


def next_migration_version(directory: Path | str) -> int:
    """
    Return one more than the highest numeric version in ``directory``.

    Files whose version prefix is not an integer are ignored; a missing
    or empty directory starts at 1.
    """
    directory = Path(directory)
    if not directory.is_dir():
        return 1

    highest = 0
    for entry in directory.glob("*.sql"):
        prefix = entry.name.split("_", 1)[0]
        if prefix.isdigit():
            highest = max(highest, int(prefix))
    return highest + 1


def migration_filename(version: int, name: str) -> str:
    """Build ``<NNN>_<slug>.sql``, the slug holding only ``[a-z0-9_]``."""
    slug = _UNSAFE.sub("_", name.lower()).strip("_")
    if not slug:
        raise MigrationError("Migration name must not be empty")
    return f"{version:0{VERSION_WIDTH}d}_{slug}.sql"


def generate_migration(name: str, directory: Path | str) -> Path:
    """
    Create a new, empty migration file with the next free version.

    Args:
        name: Human readable migration name, e.g. "add customer status".
        directory: Migration directory; created if it does not exist.

    Returns:
        Path of the created file.

    Raises:
        MigrationError: If the name is empty or the file already exists.
        MigrationDirectoryError: If the directory cannot be created or written.
    """
    directory = Path(directory)
    version = next_migration_version(directory)
    file_path = directory / migration_filename(version, name)

    if file_path.exists():
        raise MigrationError(f"Migration file already exists: {file_path}")

    content = TEMPLATE.format(
        name=" ".join(name.split()),
        version=f"{version:0{VERSION_WIDTH}d}",
        down_marker=DOWN_MARKER,
    )

    try:
        directory.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise MigrationDirectoryError(
            f"Cannot write migration file {file_path}: {e}", str(directory)
        ) from e

    logger.info("Migration file generated: {}", file_path)
    return file_path
