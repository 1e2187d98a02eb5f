"""Shared domain error messages and error types."""

from typing import Any, Optional

from ledgersync.ledger.base import LedgerError


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity or path does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class LedgerSubmissionError(LedgerError):
    """The ledger rejected a transaction batch.

    Raised after the batches before it were already accepted; ``inserted`` and
    ``skipped`` hold their totals so the caller can report partial progress.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[list[Any]] = None,
        status_code: Optional[int] = None,
        batch_number: int = 0,
        inserted: int = 0,
        skipped: int = 0,
    ):
        super().__init__(message, errors, status_code)
        self.batch_number = batch_number
        self.inserted = inserted
        self.skipped = skipped


def unknown_integration(integration: str, known: list[str]) -> str:
    """Return message for an integration tag that has no source adapter."""
    return f"Unknown integration '{integration}'. Expected one of: {', '.join(known)}"


def duplicate_external_account(integration: str, external_id: str) -> str:
    """Return message for a mapping set that repeats an external account."""
    return f"External account '{external_id}' is mapped more than once for {integration}"


def duplicate_ledger_account(integration: str, ledger_account_id: int) -> str:
    """Return message for a mapping set that reuses a ledger account."""
    return f"Ledger account {ledger_account_id} is mapped more than once for {integration}"
