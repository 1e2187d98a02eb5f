"""Import commands."""

import click
from ledgersync.cli.context import get_ledger
from ledgersync.cli.error_handling import handle_domain_error, report_ledger_error
from ledgersync.domain.errors import DomainError, LedgerSubmissionError
from ledgersync.domain.sync import SyncService
from ledgersync.domain.transaction_import import DEFAULT_BATCH_SIZE
from ledgersync.ledger.base import LedgerError
from ledgersync.logging_config import details
from ledgersync.sources import create_source
from ledgersync.sources.money_forward import DEFAULT_MONTHS, INTEGRATION as MONEY_FORWARD
from ledgersync.sources.revolut import INTEGRATION as REVOLUT

months_option = click.option(
    "--months",
    type=click.IntRange(min=1),
    default=DEFAULT_MONTHS,
    show_default=True,
    help="Number of monthly Money Forward exports to load",
)
batch_size_option = click.option(
    "--batch-size",
    type=click.IntRange(min=1),
    default=DEFAULT_BATCH_SIZE,
    show_default=True,
    help="Maximum transactions per ledger request",
)


def run_integration(ctx, integration: str, batch_size: int, **source_options) -> bool:
    """Run one integration end to end. Returns False if the ledger rejected a request."""
    service = SyncService(
        ctx.obj["db"], get_ledger(ctx), ctx.obj["chooser"], batch_size=batch_size
    )
    source = create_source(integration, ctx.obj["data_dir"], **source_options)

    click.echo(f"\n== {integration} ==")
    try:
        result = service.run(source)
    except LedgerSubmissionError as e:
        report_ledger_error(e)
        click.echo(
            f"Batch {e.batch_number} was rejected; earlier batches inserted "
            f"{e.inserted} and skipped {e.skipped}. Re-run the import once fixed.",
            err=True,
        )
        return False
    except LedgerError as e:
        report_ledger_error(e, action="syncing accounts")
        return False

    click.echo(
        f"Complete! Inserted {details(result.inserted)} transactions, "
        f"skipped {details(result.skipped)} duplicates"
    )
    return True


@click.command("money-forward")
@months_option
@batch_size_option
@click.pass_context
def import_money_forward(ctx, months: int, batch_size: int):
    """Import the Money Forward monthly exports.

    Examples:
        ledgersync money-forward
        ledgersync money-forward --months 3
    """
    try:
        ok = run_integration(ctx, MONEY_FORWARD, batch_size, months=months)
    except DomainError as e:
        handle_domain_error(ctx, e)
    if not ok:
        ctx.exit(1)


@click.command("revolut")
@batch_size_option
@click.pass_context
def import_revolut(ctx, batch_size: int):
    """Import the Revolut statement exports."""
    try:
        ok = run_integration(ctx, REVOLUT, batch_size)
    except DomainError as e:
        handle_domain_error(ctx, e)
    if not ok:
        ctx.exit(1)


@click.command("sync")
@months_option
@batch_size_option
@click.pass_context
def sync_all(ctx, months: int, batch_size: int):
    """Import every integration, one after the other.

    A rejected batch stops only the integration it belongs to; the command
    exits with failure once all integrations have run.
    """
    failed = []
    runs = [
        (MONEY_FORWARD, {"months": months}),
        (REVOLUT, {}),
    ]
    for integration, options in runs:
        try:
            if not run_integration(ctx, integration, batch_size, **options):
                failed.append(integration)
        except DomainError as e:
            click.echo(f"Error: {e}", err=True)
            failed.append(integration)

    if failed:
        click.echo(f"\nFailed: {', '.join(failed)}", err=True)
        ctx.exit(1)
    click.echo("\nDone!")


def register_commands(cli):
    """Register import commands with main CLI."""
    cli.add_command(import_money_forward)
    cli.add_command(import_revolut)
    cli.add_command(sync_all)
