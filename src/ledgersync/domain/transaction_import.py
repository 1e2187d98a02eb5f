"""Transaction import domain service."""

import logging

from ledgersync.domain.entities import (
    PAYEE_MAX_LENGTH,
    AccountMapping,
    ImportedTransaction,
    ImportResult,
    LedgerTransactionDraft,
)
from ledgersync.domain.errors import LedgerSubmissionError, ValidationError
from ledgersync.domain.mapping import AccountMappingService
from ledgersync.ledger.base import LedgerError, LedgerService

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 500


def to_draft(transaction: ImportedTransaction, account_id: int) -> LedgerTransactionDraft:
    """Convert a normalized transaction to a ledger draft.

    Sources report outflows as positive amounts and the fee on top of them;
    the ledger expects the opposite sign, so the draft amount is
    ``-(amount + fee)``.
    """
    return LedgerTransactionDraft(
        account_id=account_id,
        date=transaction.date,
        amount=-(transaction.amount + transaction.fee),
        payee=transaction.description[:PAYEE_MAX_LENGTH],
        notes=transaction.description,
        external_id=transaction.source_id,
    )


class TransactionImporter:
    """Service submitting normalized transactions to the ledger."""

    def __init__(self, ledger: LedgerService, batch_size: int = DEFAULT_BATCH_SIZE):
        """Initialize transaction importer.

        Args:
            ledger: Ledger service receiving the transactions
            batch_size: Maximum number of transactions per create call

        Raises:
            ValidationError: If batch_size is not positive
        """
        if batch_size <= 0:
            raise ValidationError(f"Batch size must be positive, got {batch_size}")
        self.ledger = ledger
        self.batch_size = batch_size

    def build_drafts(
        self,
        transactions: list[ImportedTransaction],
        account_lookup: dict[str, int],
    ) -> list[LedgerTransactionDraft]:
        """Map transactions to ledger drafts, dropping unmapped ones.

        A transaction whose account was skipped during reconciliation has no
        entry in ``account_lookup``; it is left out, not reported as an error.
        """
        drafts = []
        unmapped = 0
        for transaction in transactions:
            account_id = account_lookup.get(transaction.external_account_ref)
            if account_id is None:
                unmapped += 1
                continue
            drafts.append(to_draft(transaction, account_id))

        if unmapped:
            logger.warning(
                "Dropped %d transaction(s) whose account is not mapped to the ledger",
                unmapped,
            )
        return drafts

    def submit(self, drafts: list[LedgerTransactionDraft]) -> ImportResult:
        """Submit drafts in sequential batches.

        Duplicate detection is left to the ledger: external IDs are
        deterministic, so a resubmitted transaction comes back in
        ``skipped_duplicates`` instead of being created twice.

        Returns:
            Totals across all batches

        Raises:
            LedgerSubmissionError: If the ledger rejects a batch; later
                batches are not sent
            requests.RequestException: On transport failures, unchanged
        """
        inserted = 0
        skipped = 0

        for start in range(0, len(drafts), self.batch_size):
            batch = drafts[start : start + self.batch_size]
            batch_number = start // self.batch_size + 1

            try:
                result = self.ledger.create_transactions(
                    batch, skip_duplicates=False, apply_rules=True
                )
            except LedgerError as e:
                raise LedgerSubmissionError(
                    e.message,
                    e.errors,
                    status_code=e.status_code,
                    batch_number=batch_number,
                    inserted=inserted,
                    skipped=skipped,
                ) from e

            inserted += len(result.transactions)
            skipped += len(result.skipped_duplicates)
            logger.info(
                "Batch %d: Inserted %d, Skipped %d duplicates",
                batch_number,
                len(result.transactions),
                len(result.skipped_duplicates),
            )

        return ImportResult(inserted=inserted, skipped=skipped)

    def import_transactions(
        self,
        integration: str,
        transactions: list[ImportedTransaction],
        mappings: list[AccountMapping],
    ) -> ImportResult:
        """Map, filter and submit the transactions of one integration.

        Args:
            integration: Integration tag, used for logging
            transactions: Normalized transactions
            mappings: Account mappings from reconciliation

        Returns:
            Inserted and skipped totals
        """
        drafts = self.build_drafts(transactions, AccountMappingService.lookup(mappings))
        logger.info(
            "Submitting %d %s transaction(s) to the ledger", len(drafts), integration
        )
        return self.submit(drafts)
