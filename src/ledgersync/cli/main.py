"""Main CLI entry point."""

from pathlib import Path

import click
from ledgersync.cli.prompts import ClickChooser
from ledgersync.database.factories import open_mapping_store
from ledgersync.ledger.lunch_money import DEFAULT_BASE_URL
from ledgersync.logging_config import setup_logging

# Import and register all commands at module level
from ledgersync.cli.commands import mappings, sync, user


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to the mapping database [default: ~/.ledgersync/ledgersync.db]",
    envvar="LEDGERSYNC_DB_PATH",
)
@click.option(
    "--api-key",
    help="Lunch Money access token (overrides LUNCH_MONEY_API_KEY environment variable)",
    envvar="LUNCH_MONEY_API_KEY",
)
@click.option(
    "--base-url",
    default=DEFAULT_BASE_URL,
    show_default=True,
    help="Lunch Money API root",
    envvar="LUNCH_MONEY_BASE_URL",
)
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False),
    default="data",
    show_default=True,
    help="Directory with one sub-directory of CSV files per integration",
    envvar="LEDGERSYNC_DATA_DIR",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default="info",
    show_default=True,
    envvar="LEDGERSYNC_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, api_key: str | None, base_url: str, data_dir: str, log_level: str):
    """Ledgersync - Import bank and household-ledger transactions into Lunch Money.

    Maps the accounts of each source to ledger accounts (remembering earlier
    choices) and submits transactions with stable external IDs, so running
    an import again never duplicates anything.
    """
    ctx.ensure_object(dict)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        setup_logging(log_level)
        if "db" not in ctx.obj:
            db = open_mapping_store(db_path)
            ctx.obj["db"] = db
            ctx.call_on_close(db.disconnect)
        ctx.obj.setdefault("chooser", ClickChooser())
        ctx.obj.setdefault("data_dir", Path(data_dir))
        ctx.obj["api_key"] = api_key
        ctx.obj["base_url"] = base_url


# Register all commands
sync.register_commands(cli)
mappings.register_commands(cli)
user.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
