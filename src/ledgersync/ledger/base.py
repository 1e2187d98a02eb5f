"""Abstract ledger service interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Optional

from ledgersync.domain.entities import LedgerAccount, LedgerTransactionDraft

# Account types accepted by the ledger when creating a manual account.
ACCOUNT_TYPES = [
    "cash",
    "credit",
    "cryptocurrency",
    "employee compensation",
    "investment",
    "loan",
    "other liability",
    "other asset",
    "real estate",
    "vehicle",
]


class LedgerError(Exception):
    """Structured rejection returned by the ledger service.

    Carries the top-level message plus the field-level sub-errors the service
    reported, so callers can show both.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[list[Any]] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.errors = list(errors or [])
        self.status_code = status_code

    def describe(self) -> list[str]:
        """Return the message followed by one line per sub-error."""
        return [self.message] + [f"  {error}" for error in self.errors]


@dataclass
class TransactionBatchResult:
    """Outcome of one batch-create call."""

    transactions: list[dict[str, Any]] = field(default_factory=list)
    skipped_duplicates: list[dict[str, Any]] = field(default_factory=list)


class LedgerService(ABC):
    """Operations the sync pipeline needs from the ledger."""

    @abstractmethod
    def get_me(self) -> dict[str, Any]:
        """Return the authenticated user."""
        pass

    @abstractmethod
    def get_all_manual_accounts(self) -> list[LedgerAccount]:
        """List every manual account."""
        pass

    @abstractmethod
    def create_manual_account(
        self, name: str, type: str, balance: Decimal = Decimal("0")
    ) -> LedgerAccount:
        """Create a manual account. Raises LedgerError on rejection."""
        pass

    @abstractmethod
    def create_transactions(
        self,
        transactions: list[LedgerTransactionDraft],
        skip_duplicates: bool = False,
        apply_rules: bool = True,
    ) -> TransactionBatchResult:
        """Create a batch of transactions. Raises LedgerError on rejection."""
        pass
