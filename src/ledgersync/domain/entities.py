"""Domain model entities for ledgersync.

These are pure data classes shared by the source adapters, the reconciler and
the importer. They are independent of both the database schema and the
ledger's wire format, so untyped CSV rows and JSON payloads never cross into
reconciliation or submission logic.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Optional

PAYEE_MAX_LENGTH = 140


def format_amount(amount: Decimal) -> str:
    """Render an amount in plain decimal notation, never as "-0" or "1E+3"."""
    if amount.is_zero():
        amount = abs(amount)
    return f"{amount:f}"


@dataclass(frozen=True)
class ExternalAccountRef:
    """An account as known to an external source system."""

    integration: str
    external_id: str
    display_name: str


@dataclass(frozen=True)
class LedgerAccount:
    """Manual account owned by the ledger service."""

    id: int
    name: str
    type: str
    display_name: Optional[str] = None

    @property
    def label(self) -> str:
        return self.display_name or self.name


@dataclass(frozen=True)
class AccountMapping:
    """Confirmed pairing of an external account with a ledger account."""

    integration: str
    ledger_account_id: int
    external_id: str
    external_name: str
    id: Optional[int] = None


@dataclass(frozen=True)
class ImportedTransaction:
    """Transaction normalized from a source system.

    ``source_id`` is stable across re-imports of the same input, which is what
    lets the ledger recognise a resubmitted transaction as a duplicate.
    """

    source_id: str
    date: date
    description: str
    amount: Decimal
    external_account_ref: str
    fee: Decimal = Decimal("0")


@dataclass(frozen=True)
class LedgerTransactionDraft:
    """Transaction ready for submission to the ledger."""

    account_id: int
    date: date
    amount: Decimal
    payee: str
    notes: str
    external_id: str

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body for one transaction."""
        return {
            "manual_account_id": self.account_id,
            "date": self.date.isoformat(),
            "amount": format_amount(self.amount),
            "payee": self.payee,
            "notes": self.notes,
            "external_id": self.external_id,
        }


@dataclass(frozen=True)
class ValidationIssue:
    """A single field of a single source row that failed validation."""

    source: str
    record_index: int
    field: str
    raw_value: str
    message: str

    def __str__(self) -> str:
        return (
            f"{self.source}:{self.record_index} - {self.field}: {self.message} "
            f'(value: "{self.raw_value}")'
        )


@dataclass
class NormalizationResult:
    """Output of a source adapter: valid transactions plus collected issues."""

    transactions: list[ImportedTransaction] = field(default_factory=list)
    issues: list[ValidationIssue] = field(default_factory=list)

    def extend(self, other: "NormalizationResult") -> None:
        self.transactions.extend(other.transactions)
        self.issues.extend(other.issues)


@dataclass(frozen=True)
class ImportResult:
    """Aggregated outcome of submitting transactions to the ledger."""

    inserted: int = 0
    skipped: int = 0


@dataclass(frozen=True)
class MappedPair:
    """Display row of a mapping report."""

    ledger_name: str
    external_name: str


@dataclass(frozen=True)
class MappingReport:
    """Stored mappings diffed against the current accounts on both sides."""

    mapped: list[MappedPair]
    unmapped: list[ExternalAccountRef]
