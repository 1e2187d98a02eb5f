"""CLI error handling helpers."""

import click

from ledgersync.domain.errors import DomainError
from ledgersync.ledger.base import LedgerError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def report_ledger_error(error: LedgerError, action: str = "inserting transactions") -> None:
    """Print a ledger rejection with its sub-errors, without exiting."""
    click.echo(f"Error {action}: {error.message}", err=True)
    for sub_error in error.errors:
        click.echo(f"  {sub_error}", err=True)
