"""Account mapping commands."""

import click
from ledgersync.domain.mapping import AccountMappingService


@click.group()
def mappings_group():
    """Inspect stored account mappings."""
    pass


@mappings_group.command("list")
@click.argument("integration", required=False)
@click.pass_context
def list_mappings(ctx, integration: str | None):
    """List stored mappings, for one integration or all of them.

    Examples:
        ledgersync mappings list
        ledgersync mappings list revolut
    """
    db = ctx.obj["db"]
    service = AccountMappingService(db)

    integrations = [integration] if integration else service.list_integrations()
    rows = [m for name in integrations for m in service.list_mappings(name)]
    if not rows:
        click.echo("No mappings found.")
        return

    click.echo("\nMappings:")
    click.echo("-" * 72)
    for m in rows:
        click.echo(
            f"{m.integration:15s} | {m.external_name:25s} | "
            f"External ID: {m.external_id:12s} | Ledger ID: {m.ledger_account_id}"
        )


@mappings_group.command("clear")
@click.argument("integration")
@click.pass_context
def clear_mappings(ctx, integration: str):
    """Forget every mapping of an integration.

    The next import asks again for each account.
    """
    db = ctx.obj["db"]
    service = AccountMappingService(db)

    existing = service.list_mappings(integration)
    if not existing:
        click.echo(f"No mappings found for '{integration}'.")
        return

    if not click.confirm(f"Remove {len(existing)} mapping(s) for '{integration}'?"):
        click.echo("Clear cancelled.")
        return

    service.clear(integration)
    click.echo(f"Cleared mappings for '{integration}'")


def register_commands(cli):
    """Register mapping commands with main CLI."""
    cli.add_command(mappings_group, name="mappings")
