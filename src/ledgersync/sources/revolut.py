"""Revolut CSV statement adapter."""

import enum
import hashlib
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Iterable

from ledgersync.domain.entities import (
    ExternalAccountRef,
    ImportedTransaction,
    NormalizationResult,
)
from ledgersync.sources.base import IssueCollector, SourceAdapter
from ledgersync.utils.amount_parser import parse_amount
from ledgersync.utils.date_parser import parse_date

INTEGRATION = "revolut"


class RevolutTransactionType(enum.Enum):
    CARD_PAYMENT = "Card Payment"
    CARD_REFUND = "Card Refund"
    CHARGE = "Charge"
    EXCHANGE = "Exchange"
    REFUND = "Refund"
    REWARD = "Reward"
    TOPUP = "Topup"
    TRANSFER = "Transfer"


class RevolutTransactionState(enum.Enum):
    COMPLETED = "COMPLETED"
    PENDING = "PENDING"
    REVERTED = "REVERTED"


@dataclass(frozen=True, kw_only=True)
class RevolutTransaction(ImportedTransaction):
    """Revolut statement row; the account is the currency wallet."""

    type: RevolutTransactionType
    state: RevolutTransactionState
    product: str = ""
    started_date: str = ""
    completed_date: str = ""
    currency: str = ""
    balance: Decimal = Decimal("0")


def generate_external_id(
    product: str, description: str, started_date: str, completed_date: str
) -> str:
    """Derive a stable transaction ID from fields that identify a statement row.

    Revolut exports carry no transaction ID. The same row always hashes to the
    same value, so re-importing a statement is recognised as a duplicate.
    """
    data = f"{product}|{description}|{started_date}|{completed_date}"
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


def _allowed(enum_cls: type[enum.Enum]) -> str:
    return ", ".join(member.value for member in enum_cls)


class RevolutSource(SourceAdapter):
    """Adapter for every ``*.csv`` statement in the Revolut data directory."""

    integration = INTEGRATION

    def discover_files(self) -> list[Path]:
        if not self.data_dir.is_dir():
            return []
        return sorted(self.data_dir.glob("*.csv"))

    def normalize(self, rows: Iterable[dict[str, str]], source: str) -> NormalizationResult:
        result = NormalizationResult()
        for index, row in enumerate(rows, start=1):
            transaction = self._validate_row(row, source, index, result)
            if transaction is not None:
                result.transactions.append(transaction)
        return result

    def _validate_row(self, row, source, index, result) -> RevolutTransaction | None:
        errors = IssueCollector(source, index, result.issues)

        raw_type = row.get("Type") or ""
        try:
            txn_type = RevolutTransactionType(raw_type)
        except ValueError:
            errors.add(
                "Type",
                raw_type,
                f"Invalid transaction type. Expected one of: {_allowed(RevolutTransactionType)}",
            )

        raw_state = row.get("State") or ""
        try:
            state = RevolutTransactionState(raw_state)
        except ValueError:
            errors.add(
                "State",
                raw_state,
                f"Invalid transaction state. Expected one of: {_allowed(RevolutTransactionState)}",
            )

        amounts = {}
        for field in ("Amount", "Fee", "Balance"):
            try:
                amounts[field] = parse_amount(row.get(field), default=Decimal("0"))
            except ValueError:
                errors.add(field, row.get(field), f"{field} must be a valid number")

        started_date = row.get("Started Date") or ""
        try:
            txn_date = parse_date(started_date)
        except ValueError:
            errors.add("Started Date", started_date, "Started Date must be a valid date")

        if errors.failed:
            return None

        product = row.get("Product") or ""
        description = row.get("Description") or ""
        completed_date = row.get("Completed Date") or ""
        currency = row.get("Currency") or ""

        return RevolutTransaction(
            source_id=generate_external_id(product, description, started_date, completed_date),
            date=txn_date,
            description=description,
            amount=amounts["Amount"],
            fee=amounts["Fee"],
            external_account_ref=currency,
            type=txn_type,
            state=state,
            product=product,
            started_date=started_date,
            completed_date=completed_date,
            currency=currency,
            balance=amounts["Balance"],
        )

    def external_accounts(self, result: NormalizationResult) -> list[ExternalAccountRef]:
        """One account per currency seen in any row, pending ones included."""
        currencies = dict.fromkeys(t.external_account_ref for t in result.transactions)
        return [
            ExternalAccountRef(integration=self.integration, external_id=c, display_name=c)
            for c in currencies
        ]

    def importable(self, transactions: list[ImportedTransaction]) -> list[ImportedTransaction]:
        return [
            t
            for t in transactions
            if isinstance(t, RevolutTransaction) and t.state is RevolutTransactionState.COMPLETED
        ]
