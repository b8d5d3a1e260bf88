"""CLI entry point for schemaledger.

Provides commands for initializing the migration ledger, applying
and rolling back migrations, reporting status, and generating new
migration files.
"""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime
from pathlib import Path
from typing import Any, TypeVar

import click

from schemaledger import __version__
from schemaledger.config.models import Config

T = TypeVar("T")

_config_option = click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)

_dir_option = click.option(
    "--dir",
    "directory",
    type=click.Path(file_okay=False, path_type=Path),
    help="Migration directory (defaults to migrations.directory from config)",
)


def _load(config: Path | None) -> Config:
    """Load configuration and configure logging before any command output."""
    from schemaledger.config.loader import load_config
    from schemaledger.utils.logging import configure_logging

    try:
        cfg = load_config(config)
    except (FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    configure_logging(cfg.logging)
    return cfg


def _run(cfg: Config, action: Callable[[Any, Any], Awaitable[T]]) -> T:
    """Open a session, build a migrator, and run ``action(session, migrator)``."""
    from schemaledger.errors import SchemaLedgerError
    from schemaledger.storage.factory import StorageBackendFactory

    factory = StorageBackendFactory(cfg)

    async def main() -> T:
        async with factory.create_session() as session:
            return await action(session, factory.create_migrator(session))

    try:
        return asyncio.run(main())
    except SchemaLedgerError as e:
        raise click.ClickException(str(e)) from e


def _format_datetime(value: datetime) -> str:
    """Render a ledger timestamp in local time."""
    if value.tzinfo is not None:
        value = value.astimezone()
    return value.strftime("%Y-%m-%d %H:%M:%S")


def _report_batch_failure(verb: str, error: Any) -> None:
    click.echo(f"{verb} {len(error.completed)} migration(s) before failure:")
    for version in error.completed:
        click.echo(f"  - {version}")
    click.echo(f"Failed at migration {error.version}")


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """Versioned SQL migrations with a checksummed ledger.

    Applies <version>_<name>.sql files in order, one transaction per
    migration, and tracks them in a ledger table.
    """
    pass


@cli.command()
@_config_option
def init(config: Path | None) -> None:
    """Initialize the migration ledger table."""
    from schemaledger.services.runner import MigrationRunner

    cfg = _load(config)

    async def action(session: Any, migrator: Any) -> None:
        await MigrationRunner(migrator).initialize()

    _run(cfg, action)
    click.echo(f"Migration ledger initialized ({cfg.database.backend})")


@cli.command()
@_config_option
@_dir_option
@click.option("--target", "-t", help="Highest version to apply")
def up(config: Path | None, directory: Path | None, target: str | None) -> None:
    """Apply pending migrations."""
    from schemaledger.errors import MigrationBatchError
    from schemaledger.services.runner import MigrationRunner

    cfg = _load(config)
    migrations_dir = directory or cfg.migrations.directory

    async def action(session: Any, migrator: Any) -> list[str]:
        runner = MigrationRunner(migrator)
        runner.load(migrations_dir)
        await runner.initialize()
        try:
            return await runner.migrate(target)
        except MigrationBatchError as e:
            _report_batch_failure("Applied", e)
            raise

    applied = _run(cfg, action)

    if not applied:
        click.echo("Database is already up to date")
        return

    click.echo(f"Applied {len(applied)} migration(s):")
    for version in applied:
        click.echo(f"  - {version}")


@cli.command()
@_config_option
@_dir_option
@click.option("--target", "-t", help="Roll back every migration newer than this version")
def down(config: Path | None, directory: Path | None, target: str | None) -> None:
    """Roll back the last migration, or everything after --target."""
    from schemaledger.errors import MigrationBatchError
    from schemaledger.services.runner import MigrationRunner

    cfg = _load(config)
    migrations_dir = directory or cfg.migrations.directory

    async def action(session: Any, migrator: Any) -> list[str]:
        runner = MigrationRunner(migrator)
        runner.load(migrations_dir)
        await runner.initialize()
        try:
            return await runner.rollback(target)
        except MigrationBatchError as e:
            _report_batch_failure("Rolled back", e)
            raise

    rolled_back = _run(cfg, action)

    if not rolled_back:
        click.echo("No migrations to rollback")
        return

    click.echo(f"Rolled back {len(rolled_back)} migration(s):")
    for version in rolled_back:
        click.echo(f"  - {version}")


@cli.command()
@_config_option
@_dir_option
def status(config: Path | None, directory: Path | None) -> None:
    """Show applied, pending and drifted migrations."""
    from schemaledger.models.migration import MigrationStatus
    from schemaledger.services.runner import MigrationRunner

    cfg = _load(config)
    migrations_dir = directory or cfg.migrations.directory

    async def action(session: Any, migrator: Any) -> MigrationStatus:
        runner = MigrationRunner(migrator)
        runner.load(migrations_dir)
        await runner.initialize()
        return await runner.get_migration_status()

    result = _run(cfg, action)

    applied_label = click.style(f"{'Applied':<9}", fg="green")
    pending_label = click.style(f"{'Pending':<9}", fg="yellow")
    rows = [
        (m.version, m.name, applied_label, _format_datetime(m.executed_at))
        for m in result.applied
    ]
    rows += [(m.version, m.name, pending_label, "-") for m in result.pending]

    click.echo("Database Migration Status:")
    click.echo("-" * 72)
    click.echo(f"{'Version':<10} {'Name':<32} {'Status':<9} Executed At")
    for version, name, state, executed_at in rows:
        click.echo(f"{version:<10} {name:<32} {state} {executed_at}")

    click.echo("\nSummary:")
    click.echo(f"  Applied migrations: {result.applied_count()}")
    click.echo(f"  Pending migrations: {result.pending_count()}")

    if result.has_conflicts():
        click.echo(f"  Conflicts detected: {len(result.conflicts)}")
        for version in result.conflicts:
            click.echo(f"    - {version}")

    if result.is_up_to_date():
        click.echo("  Database is up to date")
    else:
        click.echo("  Database needs migration")


@cli.command()
@click.argument("name")
@_config_option
@_dir_option
def generate(name: str, config: Path | None, directory: Path | None) -> None:
    """Create a new migration file named NAME."""
    from schemaledger.errors import MigrationError
    from schemaledger.services.generator import generate_migration

    cfg = _load(config)

    try:
        file_path = generate_migration(name, directory or cfg.migrations.directory)
    except MigrationError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Created migration file: {file_path}")
    click.echo("Edit the file to add your migration SQL")


@cli.command()
@_config_option
def test(config: Path | None) -> None:
    """Test the database connection."""
    from schemaledger.storage.health import check_connection

    cfg = _load(config)

    async def action(session: Any, migrator: Any) -> float:
        return await check_connection(session, cfg.database.slow_check_threshold_ms)

    elapsed_ms = _run(cfg, action)
    click.echo(f"Database connection successful ({elapsed_ms:.1f}ms)")


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
