"""Main CLI entry point."""

import click
from cnabledger.database.factories import create_sqlite_database
from cnabledger.logging_config import LOG_FORMATS, LOG_LEVELS, configure_logging
from cnabledger.storage.factories import create_local_storage

# Import and register all commands at module level
from cnabledger.cli.commands import (
    upload,
    process,
    validate,
    files,
    stores,
    transactions,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides CNABLEDGER_DB_PATH environment variable)",
    envvar="CNABLEDGER_DB_PATH",
)
@click.option(
    "--storage-dir",
    type=click.Path(file_okay=False),
    help="Directory for uploaded file contents (overrides CNABLEDGER_STORAGE_DIR)",
    envvar="CNABLEDGER_STORAGE_DIR",
)
@click.option(
    "--log-level",
    type=click.Choice(list(LOG_LEVELS), case_sensitive=False),
    default="INFO",
    show_default=True,
    envvar="CNABLEDGER_LOG_LEVEL",
    help="Logging level",
)
@click.option(
    "--log-format",
    type=click.Choice(LOG_FORMATS),
    default="text",
    show_default=True,
    envvar="CNABLEDGER_LOG_FORMAT",
    help="Log output format",
)
@click.pass_context
def cli(ctx, db_path: str | None, storage_dir: str | None, log_level: str, log_format: str):
    """cnabledger - CNAB file ingestion and store ledger.

    Upload fixed-width CNAB batch files, validate them line by line and
    apply their transactions to store balances, all or nothing per file.
    """
    ctx.ensure_object(dict)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        configure_logging(log_level, log_format)
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.call_on_close(db.disconnect)
        ctx.obj["db"] = db
        ctx.obj["storage"] = create_local_storage(storage_dir)


# Register all commands
upload.register_commands(cli)
process.register_commands(cli)
validate.register_commands(cli)
files.register_commands(cli)
stores.register_commands(cli)
transactions.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
