"""Migration file discovery.

Scans a directory (non-recursively) for ``<version>_<name>.sql``
files and turns each into a MigrationFile with separate up and
down sections and a checksum of the whole file.
"""

from pathlib import Path

from loguru import logger

from schemaledger.errors import DuplicateMigrationError, MigrationDirectoryError
from schemaledger.models.migration import MigrationFile
from schemaledger.utils.hashing import compute_content_checksum

DOWN_MARKER = "-- DOWN"


def split_sections(content: str) -> tuple[str, str | None]:
    """
    Split file content at the first line reading exactly ``-- DOWN``.

    Returns:
        ``(up_sql, down_sql)``, both trimmed; ``down_sql`` is None when
        the marker line is absent.
    """
    lines = content.splitlines(keepends=True)
    for index, line in enumerate(lines):
        if line.strip() == DOWN_MARKER:
            up = "".join(lines[:index]).strip()
            down = "".join(lines[index + 1 :]).strip()
            return up, down
    return content.strip(), None


def parse_filename(file_name: str) -> tuple[str, str] | None:
    """
    Parse ``<version>_<rest>.sql`` into ``(version, name)``.

    The name is the remainder with underscores turned into spaces.
    Returns None for anything that does not match.
    """
    path = Path(file_name)
    if path.suffix != ".sql":
        return None

    version, sep, rest = path.stem.partition("_")
    if not sep or not version or not rest:
        return None

    return version, rest.replace("_", " ")


def parse_migration_file(file_path: Path) -> MigrationFile | None:
    """
    Read one migration file.

    Args:
        file_path: Path to a candidate ``.sql`` file.

    Returns:
        MigrationFile, or None if the filename is not a migration name.

    Raises:
        MigrationDirectoryError: If the file cannot be read or decoded.
    """
    parsed = parse_filename(file_path.name)
    if parsed is None:
        logger.debug("Skipping non-migration file: {}", file_path.name)
        return None
    version, name = parsed

    try:
        raw = file_path.read_bytes()
        content = raw.decode("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise MigrationDirectoryError(
            f"Cannot read migration file {file_path}: {e}", str(file_path)
        ) from e

    up_sql, down_sql = split_sections(content)

    return MigrationFile(
        version=version,
        name=name,
        up_sql=up_sql,
        down_sql=down_sql,
        checksum=compute_content_checksum(raw),
        path=file_path,
    )


def load_migrations(directory: Path | str) -> list[MigrationFile]:
    """
    Load every migration file in a directory, sorted by version.

    Versions are compared as plain strings, so numeric versions must be
    zero-padded consistently (``001``, ``002``, ``010``).

    Args:
        directory: Directory holding migration files.

    Returns:
        Migration files in ascending version order; empty when the
        directory does not exist.

    Raises:
        MigrationDirectoryError: If the path is not a directory or cannot be read.
        DuplicateMigrationError: If two files share a version.
    """
    directory = Path(directory)

    if not directory.exists():
        logger.info("Migration directory {} does not exist; no migrations loaded", directory)
        return []

    if not directory.is_dir():
        raise MigrationDirectoryError(
            f"Migration path is not a directory: {directory}", str(directory)
        )

    try:
        entries = [entry for entry in directory.iterdir() if entry.is_file()]
    except OSError as e:
        raise MigrationDirectoryError(
            f"Cannot list migration directory {directory}: {e}", str(directory)
        ) from e

    migrations: dict[str, MigrationFile] = {}
    for entry in entries:
        migration = parse_migration_file(entry)
        if migration is None:
            continue
        if migration.version in migrations:
            raise DuplicateMigrationError(migration.version)
        migrations[migration.version] = migration

    result = sorted(migrations.values(), key=lambda m: m.version)
    logger.debug("Loaded {} migration(s) from {}", len(result), directory)
    return result
