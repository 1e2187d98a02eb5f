"""Ledger user command."""

import click
from ledgersync.cli.context import get_ledger
from ledgersync.cli.error_handling import report_ledger_error
from ledgersync.ledger.base import LedgerError
from ledgersync.logging_config import details


@click.command("whoami")
@click.pass_context
def whoami(ctx):
    """Show the ledger user the API key belongs to."""
    try:
        user = get_ledger(ctx).get_me()
    except LedgerError as e:
        report_ledger_error(e, action="fetching user")
        ctx.exit(1)

    click.echo(f"Current user: {details(user.get('name', ''))} | {details(user.get('email', ''))}")


def register_commands(cli):
    """Register user command with main CLI."""
    cli.add_command(whoami)
