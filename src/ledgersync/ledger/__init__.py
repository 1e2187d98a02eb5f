"""Ledger service interface and clients."""

from ledgersync.ledger.base import (
    ACCOUNT_TYPES,
    LedgerError,
    LedgerService,
    TransactionBatchResult,
)
from ledgersync.ledger.lunch_money import LunchMoneyClient

__all__ = [
    "ACCOUNT_TYPES",
    "LedgerError",
    "LedgerService",
    "LunchMoneyClient",
    "TransactionBatchResult",
]
