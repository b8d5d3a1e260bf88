"""Tests for migration file scaffolding."""

from pathlib import Path

import pytest

from schemaledger.errors import MigrationError
from schemaledger.services.generator import (
    generate_migration,
    migration_filename,
    next_migration_version,
)
from schemaledger.services.loader import parse_migration_file


class TestNextMigrationVersion:
    """Test next_migration_version."""

    def test_missing_directory_starts_at_one(self, tmp_path: Path) -> None:
        assert next_migration_version(tmp_path / "missing") == 1

    def test_empty_directory_starts_at_one(self, tmp_path: Path) -> None:
        assert next_migration_version(tmp_path) == 1

    def test_uses_highest_numeric_prefix(self, tmp_path: Path) -> None:
        (tmp_path / "001_a.sql").write_text("")
        (tmp_path / "012_b.sql").write_text("")
        (tmp_path / "003_c.sql").write_text("")

        assert next_migration_version(tmp_path) == 13

    def test_ignores_non_numeric_prefixes(self, tmp_path: Path) -> None:
        (tmp_path / "002_a.sql").write_text("")
        (tmp_path / "v9_b.sql").write_text("")
        (tmp_path / "900_notes.txt").write_text("")

        assert next_migration_version(tmp_path) == 3


class TestMigrationFilename:
    """Test migration_filename."""

    def test_slugifies_name(self) -> None:
        assert migration_filename(4, "Add Customer  Status") == "004_add_customer_status.sql"

    def test_wide_versions_are_not_truncated(self) -> None:
        assert migration_filename(1234, "x") == "1234_x.sql"

    def test_empty_name_raises(self) -> None:
        with pytest.raises(MigrationError):
            migration_filename(1, "   ")

    def test_path_separators_and_symbols_are_replaced(self) -> None:
        assert migration_filename(2, "a/b") == "002_a_b.sql"
        assert migration_filename(2, "../escape") == "002_escape.sql"
        assert migration_filename(3, "Add  'orders' table!") == "003_add_orders_table.sql"

    def test_symbols_only_name_raises(self) -> None:
        with pytest.raises(MigrationError):
            migration_filename(1, "/..//")


class TestGenerateMigration:
    """Test generate_migration."""

    def test_creates_directory_and_file(self, tmp_path: Path) -> None:
        directory = tmp_path / "migrations"

        path = generate_migration("create users", directory)

        assert path == directory / "001_create_users.sql"
        assert path.exists()

    def test_template_round_trips_through_loader(self, tmp_path: Path) -> None:
        """A fresh template loads as a migration with no executable rollback."""
        path = generate_migration("create users", tmp_path)

        migration = parse_migration_file(path)

        assert migration is not None
        assert migration.version == "001"
        assert migration.name == "create users"
        assert migration.down_sql is not None
        assert not migration.has_rollback
        assert "-- Version: 001" in path.read_text()

    def test_next_file_gets_next_version(self, tmp_path: Path) -> None:
        generate_migration("first", tmp_path)
        second = generate_migration("second", tmp_path)

        assert second.name == "002_second.sql"

    def test_name_with_slash_stays_in_directory(self, tmp_path: Path) -> None:
        """The file is created directly in the migration directory."""
        path = generate_migration("a/b", tmp_path)

        assert path.parent == tmp_path
        assert path.name == "001_a_b.sql"

    def test_multiline_name_cannot_inject_sql(self, tmp_path: Path) -> None:
        """The header comment stays a comment even for multi-line names."""
        path = generate_migration("drop\nDROP TABLE users;", tmp_path)

        migration = parse_migration_file(path)

        assert migration is not None
        assert migration.name == "drop drop table users"
        assert "-- Migration: drop DROP TABLE users;" in path.read_text()
        assert not migration.has_rollback
