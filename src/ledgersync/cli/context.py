"""Access to the collaborators stored on the click context."""

import click

from ledgersync.ledger.base import LedgerService
from ledgersync.ledger.lunch_money import LunchMoneyClient


def get_ledger(ctx: click.Context) -> LedgerService:
    """Return the ledger client, creating it on first use.

    Only commands that talk to the ledger need an API key, so a missing key
    is reported here rather than when the group starts.
    """
    obj = ctx.find_object(dict)
    ledger = obj.get("ledger")
    if ledger is None:
        api_key = obj.get("api_key")
        if not api_key:
            raise click.UsageError(
                "LUNCH_MONEY_API_KEY must be set (or pass --api-key)", ctx=ctx
            )
        ledger = LunchMoneyClient(api_key=api_key, base_url=obj["base_url"])
        obj["ledger"] = ledger
    return ledger
